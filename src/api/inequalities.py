"""FastAPI inequality endpoints.

POST /v1/inequalities/parse               — parse one line
POST /v1/inequalities/validate            — parse a batch, errors per line
POST /v1/inequalities/feasibility         — verdict for a system
POST /v1/inequalities/check-point         — quiz: is the point a solution?
POST /v1/inequalities/check-no-solution   — quiz: is "no solution" right?

Stateless: each request carries its whole system and gets a fresh
allocator, so ids in a response are only meaningful within it.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, model_validator

from src.api.dependencies import get_parser, get_solver
from src.config.settings import Settings, get_settings
from src.engine.constraints.geometry import find_valid_intersections
from src.engine.constraints.parser import InequalityParseError, InequalityParser
from src.engine.constraints.quiz import (
    check_no_solution_claim,
    check_point,
    validate_lines,
)
from src.engine.constraints.schema import Constraint, ConstraintPayload, ConstraintSystem
from src.engine.constraints.solver import SOLVER_VERSION, FeasibilitySolver
from src.engine.constraints.system import add_constraint, check_feasibility

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/inequalities", tags=["inequalities"])


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------


class ParseRequest(BaseModel):
    text: str = Field(max_length=200)


class ValidateRequest(BaseModel):
    lines: list[str]


class SystemRequest(BaseModel):
    """A system given either as raw lines or as constraint payloads."""

    lines: list[str] | None = None
    constraints: list[ConstraintPayload] | None = None

    @model_validator(mode="after")
    def _exactly_one_source(self) -> "SystemRequest":
        if (self.lines is None) == (self.constraints is None):
            raise ValueError("Provide exactly one of 'lines' or 'constraints'.")
        return self

    @property
    def size(self) -> int:
        return len(self.lines if self.lines is not None else self.constraints)


class CheckPointRequest(SystemRequest):
    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)


class NoSolutionRequest(SystemRequest):
    claims_no_solution: bool


class ConstraintResponse(BaseModel):
    constraint_id: str
    a: float
    b: float
    c: float
    operator: str
    display: str
    hue: int
    color: str


class LineResultResponse(BaseModel):
    index: int
    text: str
    ok: bool
    constraint: ConstraintResponse | None = None
    error: str | None = None


class ValidateResponse(BaseModel):
    all_valid: bool
    results: list[LineResultResponse]


class FeasibilityResponse(BaseModel):
    feasible: bool
    source: str
    witness_pair: list[str] | None = None
    witness_point: list[float] | None = None
    anomaly: str | None = None
    vertices: list[list[float]]
    constraints: list[ConstraintResponse]
    solver_version: str


class CheckPointResponse(BaseModel):
    is_correct: bool
    point: list[float]
    violated_ids: list[str]
    constraints: list[ConstraintResponse]


class NoSolutionResponse(BaseModel):
    is_correct: bool
    claims_no_solution: bool
    feasible: bool
    witness_pair: list[str] | None = None
    constraints: list[ConstraintResponse]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _constraint_response(constraint: Constraint) -> ConstraintResponse:
    return ConstraintResponse(
        constraint_id=constraint.constraint_id,
        a=constraint.a,
        b=constraint.b,
        c=constraint.c,
        operator=constraint.operator.value,
        display=constraint.display,
        hue=constraint.hue,
        color=constraint.color,
    )


def _build_system(
    body: SystemRequest,
    parser: InequalityParser,
    settings: Settings,
) -> ConstraintSystem:
    """Parse or restore the request's constraints into a fresh system."""
    if body.size > settings.MAX_CONSTRAINTS_PER_REQUEST:
        raise HTTPException(
            status_code=422,
            detail=(
                f"System has {body.size} constraints; at most "
                f"{settings.MAX_CONSTRAINTS_PER_REQUEST} are accepted."
            ),
        )

    system = ConstraintSystem(name="request")
    if body.lines is not None:
        for index, text in enumerate(body.lines):
            try:
                constraint = parser.parse(text)
            except InequalityParseError as exc:
                raise HTTPException(
                    status_code=422,
                    detail={"index": index, "kind": exc.kind.value, "text": text},
                ) from exc
            system = add_constraint(system, constraint)
    else:
        for index, payload in enumerate(body.constraints):
            try:
                constraint = Constraint.from_payload(
                    payload, allocator=parser.allocator,
                )
            except ValueError as exc:
                raise HTTPException(
                    status_code=422,
                    detail={"index": index, "message": str(exc)},
                ) from exc
            system = add_constraint(system, constraint)
    return system


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post("/parse", response_model=ConstraintResponse)
async def parse_inequality(
    body: ParseRequest,
    parser: InequalityParser = Depends(get_parser),
) -> ConstraintResponse:
    """Parse a single inequality line."""
    try:
        constraint = parser.parse(body.text)
    except InequalityParseError as exc:
        raise HTTPException(
            status_code=422,
            detail={"kind": exc.kind.value, "text": body.text},
        ) from exc
    return _constraint_response(constraint)


@router.post("/validate", response_model=ValidateResponse)
async def validate_inequalities(
    body: ValidateRequest,
    parser: InequalityParser = Depends(get_parser),
    settings: Settings = Depends(get_settings),
) -> ValidateResponse:
    """Parse a batch of lines; bad lines are reported, not fatal."""
    if len(body.lines) > settings.MAX_CONSTRAINTS_PER_REQUEST:
        raise HTTPException(
            status_code=422,
            detail=f"At most {settings.MAX_CONSTRAINTS_PER_REQUEST} lines are accepted.",
        )
    results = validate_lines(body.lines, parser)
    return ValidateResponse(
        all_valid=all(r.ok for r in results),
        results=[
            LineResultResponse(
                index=r.index,
                text=r.text,
                ok=r.ok,
                constraint=_constraint_response(r.constraint) if r.constraint else None,
                error=r.error.value if r.error else None,
            )
            for r in results
        ],
    )


@router.post("/feasibility", response_model=FeasibilityResponse)
async def check_system_feasibility(
    body: SystemRequest,
    parser: InequalityParser = Depends(get_parser),
    solver: FeasibilitySolver = Depends(get_solver),
    settings: Settings = Depends(get_settings),
) -> FeasibilityResponse:
    """Decide whether the system has a common solution."""
    system = _build_system(body, parser, settings)
    verdict = check_feasibility(system, solver)
    vertices = (
        find_valid_intersections(system.constraints, solver.tolerance)
        if verdict.feasible else []
    )
    logger.info(
        "Feasibility request: %d constraints, feasible=%s via %s",
        len(system.constraints), verdict.feasible, verdict.source.value,
    )
    return FeasibilityResponse(
        feasible=verdict.feasible,
        source=verdict.source.value,
        witness_pair=list(verdict.witness_pair) if verdict.witness_pair else None,
        witness_point=list(verdict.witness_point) if verdict.witness_point else None,
        anomaly=verdict.anomaly.value if verdict.anomaly else None,
        vertices=[list(p) for p in vertices],
        constraints=[_constraint_response(c) for c in system.constraints],
        solver_version=SOLVER_VERSION,
    )


@router.post("/check-point", response_model=CheckPointResponse)
async def check_solution_point(
    body: CheckPointRequest,
    parser: InequalityParser = Depends(get_parser),
    settings: Settings = Depends(get_settings),
) -> CheckPointResponse:
    """Check whether a submitted point satisfies every constraint."""
    system = _build_system(body, parser, settings)
    result = check_point(system, body.x, body.y, settings.FEASIBILITY_TOLERANCE)
    return CheckPointResponse(
        is_correct=result.is_correct,
        point=list(result.point),
        violated_ids=result.violated_ids,
        constraints=[_constraint_response(c) for c in system.constraints],
    )


@router.post("/check-no-solution", response_model=NoSolutionResponse)
async def check_no_solution(
    body: NoSolutionRequest,
    parser: InequalityParser = Depends(get_parser),
    solver: FeasibilitySolver = Depends(get_solver),
    settings: Settings = Depends(get_settings),
) -> NoSolutionResponse:
    """Check a learner's claim that the system has no solution (or has one)."""
    system = _build_system(body, parser, settings)
    result = check_no_solution_claim(system, body.claims_no_solution, solver)
    pair = result.verdict.witness_pair
    return NoSolutionResponse(
        is_correct=result.is_correct,
        claims_no_solution=result.claims_no_solution,
        feasible=result.verdict.feasible,
        witness_pair=list(pair) if pair else None,
        constraints=[_constraint_response(c) for c in system.constraints],
    )
