"""Tests for FastAPI inequality endpoints.

Covers:
- single-line parsing with 422 on unsupported forms
- batch validation with per-line errors
- feasibility verdicts from raw lines and from constraint payloads
- quiz answer checks (point and "no solution")
- request size limit
"""

import pytest
from httpx import AsyncClient

BASE = "/v1/inequalities"


class TestParseEndpoint:

    @pytest.mark.anyio
    async def test_parse_ok(self, client: AsyncClient) -> None:
        response = await client.post(f"{BASE}/parse", json={"text": "2x + 3y - 6 < 0"})
        assert response.status_code == 200
        data = response.json()
        assert (data["a"], data["b"], data["c"]) == (2.0, 3.0, -6.0)
        assert data["operator"] == "<"
        assert data["display"] == "2x + 3y - 6 < 0"
        assert 0 <= data["hue"] < 360
        assert data["color"] == f"hsl({data['hue']}, 70%, 50%)"
        assert len(data["constraint_id"]) == 12

    @pytest.mark.anyio
    async def test_parse_rejects_constant(self, client: AsyncClient) -> None:
        response = await client.post(f"{BASE}/parse", json={"text": "5<0"})
        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail == {"kind": "UNRECOGNIZED_FORM", "text": "5<0"}

    @pytest.mark.anyio
    async def test_parse_missing_text(self, client: AsyncClient) -> None:
        response = await client.post(f"{BASE}/parse", json={})
        assert response.status_code == 422


class TestValidateEndpoint:

    @pytest.mark.anyio
    async def test_mixed_lines(self, client: AsyncClient) -> None:
        response = await client.post(
            f"{BASE}/validate", json={"lines": ["x>0", "", "x^2<0"]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["all_valid"] is False
        assert [r["ok"] for r in data["results"]] == [True, False, False]
        assert data["results"][0]["constraint"]["display"] == "x > 0"
        assert data["results"][1]["error"] == "EMPTY_INPUT"
        assert data["results"][2]["error"] == "UNRECOGNIZED_FORM"

    @pytest.mark.anyio
    async def test_hues_distinct_within_request(self, client: AsyncClient) -> None:
        lines = [f"x-{i}<0" for i in range(20)]
        response = await client.post(f"{BASE}/validate", json={"lines": lines})
        hues = [r["constraint"]["hue"] for r in response.json()["results"]]
        assert len(set(hues)) == 20


class TestFeasibilityEndpoint:

    @pytest.mark.anyio
    async def test_contradiction(self, client: AsyncClient) -> None:
        response = await client.post(
            f"{BASE}/feasibility", json={"lines": ["x-5>0", "x-3<0"]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["feasible"] is False
        assert data["source"] == "CONTRADICTION"
        ids = [c["constraint_id"] for c in data["constraints"]]
        assert data["witness_pair"] == ids
        assert data["vertices"] == []
        assert data["witness_point"] is None

    @pytest.mark.anyio
    async def test_feasible_with_vertices(self, client: AsyncClient) -> None:
        response = await client.post(
            f"{BASE}/feasibility", json={"lines": ["x>=0", "y>=0", "x+y-4<=0"]},
        )
        data = response.json()
        assert data["feasible"] is True
        assert data["source"] == "SIMPLEX"
        assert len(data["vertices"]) == 3
        assert len(data["witness_point"]) == 2
        assert data["solver_version"]

    @pytest.mark.anyio
    async def test_empty_system(self, client: AsyncClient) -> None:
        response = await client.post(f"{BASE}/feasibility", json={"lines": []})
        data = response.json()
        assert data["feasible"] is True
        assert data["source"] == "EMPTY"

    @pytest.mark.anyio
    async def test_from_payloads(self, client: AsyncClient) -> None:
        payloads = [
            {"a": 1, "b": 0, "c": -5, "operator": ">", "display": "x - 5 > 0"},
            {"a": 1, "b": 0, "c": -3, "operator": "<", "display": "x - 3 < 0"},
        ]
        response = await client.post(
            f"{BASE}/feasibility", json={"constraints": payloads},
        )
        assert response.status_code == 200
        assert response.json()["feasible"] is False

    @pytest.mark.anyio
    async def test_payload_display_mismatch(self, client: AsyncClient) -> None:
        payloads = [
            {"a": 1, "b": 0, "c": -5, "operator": ">", "display": "x > 5"},
        ]
        response = await client.post(
            f"{BASE}/feasibility", json={"constraints": payloads},
        )
        assert response.status_code == 422
        assert response.json()["detail"]["index"] == 0

    @pytest.mark.anyio
    async def test_bad_line_reports_index(self, client: AsyncClient) -> None:
        response = await client.post(
            f"{BASE}/feasibility", json={"lines": ["x>0", "hello"]},
        )
        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["index"] == 1
        assert detail["kind"] == "UNRECOGNIZED_FORM"

    @pytest.mark.anyio
    async def test_both_sources_rejected(self, client: AsyncClient) -> None:
        response = await client.post(
            f"{BASE}/feasibility", json={"lines": ["x>0"], "constraints": []},
        )
        assert response.status_code == 422

    @pytest.mark.anyio
    async def test_size_limit(self, client: AsyncClient, monkeypatch) -> None:
        monkeypatch.setenv("MAX_CONSTRAINTS_PER_REQUEST", "2")
        response = await client.post(
            f"{BASE}/feasibility", json={"lines": ["x>0", "y>0", "x+y<5"]},
        )
        assert response.status_code == 422


class TestQuizEndpoints:

    @pytest.mark.anyio
    async def test_check_point_correct(self, client: AsyncClient) -> None:
        response = await client.post(
            f"{BASE}/check-point",
            json={"lines": ["x+y-10<=0", "x-y+2>=0"], "x": 4, "y": 6},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["is_correct"] is True
        assert data["violated_ids"] == []

    @pytest.mark.anyio
    async def test_check_point_wrong(self, client: AsyncClient) -> None:
        response = await client.post(
            f"{BASE}/check-point",
            json={"lines": ["x>0", "y>0"], "x": -1, "y": 2},
        )
        data = response.json()
        assert data["is_correct"] is False
        assert data["violated_ids"] == [data["constraints"][0]["constraint_id"]]

    @pytest.mark.anyio
    async def test_no_solution_claim(self, client: AsyncClient) -> None:
        response = await client.post(
            f"{BASE}/check-no-solution",
            json={"lines": ["x>0", "y>0", "x+y<0"], "claims_no_solution": True},
        )
        data = response.json()
        assert data["is_correct"] is True
        assert data["feasible"] is False
        assert data["witness_pair"] is None

    @pytest.mark.anyio
    async def test_wrong_no_solution_claim(self, client: AsyncClient) -> None:
        response = await client.post(
            f"{BASE}/check-no-solution",
            json={"lines": ["x>=0"], "claims_no_solution": True},
        )
        data = response.json()
        assert data["is_correct"] is False
        assert data["feasible"] is True
