"""Tests for the engine call surface: add/remove/clear and feasibility."""

import logging

import pytest

from src.engine.constraints.schema import ConstraintSystem
from src.engine.constraints.solver import FeasibilitySolver, VerdictSource
from src.engine.constraints.system import (
    add_constraint,
    check_feasibility,
    clear_constraints,
    remove_constraint,
)


class TestEditing:

    def test_add_returns_new_system(self, parser) -> None:
        system = ConstraintSystem()
        constraint = parser.parse("x>0")
        updated = add_constraint(system, constraint)
        assert updated.ids == [constraint.constraint_id]
        assert system.constraints == ()
        assert updated.system_id == system.system_id

    def test_add_preserves_insertion_order(self, parser) -> None:
        system = ConstraintSystem()
        first = parser.parse("x>0")
        second = parser.parse("y>0")
        system = add_constraint(add_constraint(system, first), second)
        assert system.ids == [first.constraint_id, second.constraint_id]

    def test_add_duplicate_id_raises(self, parser) -> None:
        constraint = parser.parse("x>0")
        system = add_constraint(ConstraintSystem(), constraint)
        with pytest.raises(ValueError, match="already in the system"):
            add_constraint(system, constraint)

    def test_remove(self, system_of) -> None:
        system = system_of("x>0", "y>0", "x+y-4<0")
        target = system.constraints[1].constraint_id
        updated = remove_constraint(system, target)
        assert target not in updated.ids
        assert len(updated.constraints) == 2
        assert len(system.constraints) == 3

    def test_remove_unknown_raises(self, system_of) -> None:
        with pytest.raises(KeyError):
            remove_constraint(system_of("x>0"), "missing")

    def test_clear(self, system_of) -> None:
        system = system_of("x>0", "y>0")
        cleared = clear_constraints(system)
        assert cleared.constraints == ()
        assert cleared.name == system.name
        assert len(system.constraints) == 2


class TestCheckFeasibility:

    def test_empty_system(self) -> None:
        verdict = check_feasibility(ConstraintSystem())
        assert verdict.feasible
        assert verdict.source is VerdictSource.EMPTY

    def test_contradiction_reports_ids(self, system_of) -> None:
        system = system_of("x-5>0", "x-3<0")
        verdict = check_feasibility(system)
        assert not verdict.feasible
        assert verdict.source is VerdictSource.CONTRADICTION
        assert verdict.witness_pair == tuple(system.ids)

    def test_feasible_pair(self, system_of) -> None:
        verdict = check_feasibility(system_of("x+y-10<=0", "x-y+2>=0"))
        assert verdict.feasible
        assert verdict.source is VerdictSource.SIMPLEX
        assert verdict.witness_pair is None

    def test_simplex_catches_what_detector_misses(self, system_of) -> None:
        verdict = check_feasibility(system_of("x>0", "y>0", "x+y<0"))
        assert not verdict.feasible
        assert verdict.source is VerdictSource.SIMPLEX
        assert verdict.witness_pair is None

    def test_non_adjacent_contradiction(self, system_of) -> None:
        system = system_of("y>0", "x-5>0", "x+y-100<0", "x-3<0")
        verdict = check_feasibility(system)
        assert verdict.witness_pair == (system.ids[1], system.ids[3])

    def test_uses_given_solver(self, system_of) -> None:
        system = system_of("x>0", "x-0.001<0")
        assert check_feasibility(system).feasible
        strict = FeasibilitySolver(strict_margin=0.01)
        assert not check_feasibility(system, strict).feasible

    def test_does_not_modify_system(self, system_of) -> None:
        system = system_of("x-5>0", "x-3<0")
        before = system.model_dump()
        check_feasibility(system)
        assert system.model_dump() == before

    def test_contradiction_logged(self, system_of, caplog) -> None:
        with caplog.at_level(
            logging.INFO, logger="src.engine.constraints.contradictions",
        ):
            check_feasibility(system_of("x-5>0", "x-3<0"))
        assert caplog.records
