"""Answer checks for the systems-of-inequalities exercises.

A learner enters a few inequality lines and then either submits a point
they believe lies in every region, or claims the system has no solution.
"""

from dataclasses import dataclass, field
from enum import StrEnum

from src.engine.constraints.geometry import violated_by
from src.engine.constraints.parser import InequalityParseError, InequalityParser
from src.engine.constraints.schema import Constraint, ConstraintSystem
from src.engine.constraints.solver import FeasibilitySolver, FeasibilityVerdict
from src.engine.constraints.system import check_feasibility


class LineErrorKind(StrEnum):
    EMPTY_INPUT = "EMPTY_INPUT"
    UNRECOGNIZED_FORM = "UNRECOGNIZED_FORM"


@dataclass(frozen=True)
class LineResult:
    """Outcome of parsing one input line."""

    index: int
    text: str
    constraint: Constraint | None = None
    error: LineErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.constraint is not None


@dataclass(frozen=True)
class PointCheck:
    """Whether a submitted point satisfies every constraint."""

    is_correct: bool
    point: tuple[float, float]
    violated_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class NoSolutionCheck:
    """Whether the learner's "no solution" answer matches the verdict."""

    is_correct: bool
    claims_no_solution: bool
    verdict: FeasibilityVerdict


def validate_lines(lines: list[str], parser: InequalityParser) -> list[LineResult]:
    """Parse every line, reporting errors per index instead of stopping."""
    results: list[LineResult] = []
    for index, text in enumerate(lines):
        if not text.strip():
            results.append(
                LineResult(index=index, text=text, error=LineErrorKind.EMPTY_INPUT)
            )
            continue
        try:
            constraint = parser.parse(text)
        except InequalityParseError as exc:
            results.append(
                LineResult(index=index, text=text, error=LineErrorKind(exc.kind.value))
            )
            continue
        results.append(LineResult(index=index, text=text, constraint=constraint))
    return results


def check_point(
    system: ConstraintSystem,
    x: float,
    y: float,
    tolerance: float = 1e-9,
) -> PointCheck:
    """Check a submitted point against every constraint in the system."""
    violated = violated_by(system.constraints, x, y, tolerance)
    return PointCheck(
        is_correct=not violated,
        point=(x, y),
        violated_ids=[c.constraint_id for c in violated],
    )


def check_no_solution_claim(
    system: ConstraintSystem,
    claims_no_solution: bool,
    solver: FeasibilitySolver | None = None,
) -> NoSolutionCheck:
    verdict = check_feasibility(system, solver)
    return NoSolutionCheck(
        is_correct=claims_no_solution != verdict.feasible,
        claims_no_solution=claims_no_solution,
        verdict=verdict,
    )
