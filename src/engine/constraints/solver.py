"""Feasibility Solver — does a constraint system have a common solution?

Deterministic engine code: NumPy only.

Reduction to a phase-one LP:
1. Constant rows (a = b = 0) are decided directly and dropped or fail
   the whole system.
2. Every other row becomes ``a*x + b*y (<=|>=|=) d`` with ``d = -c``,
   scaled so that ``max(|a|, |b|) = 1``.
3. Strict rows are closed with a margin on the open side, in scaled units:
   ``< d`` becomes ``<= d - margin``, ``> d`` becomes ``>= d + margin``.
   The free variables x, y are split into non-negative parts.
4. The system is feasible iff the phase-one optimum is within tolerance
   of zero. Any anomaly is reported as infeasible.
"""

import logging
from dataclasses import dataclass
from enum import StrEnum

import numpy as np

from src.config.settings import Settings
from src.engine.constraints.schema import Constraint, Operator
from src.engine.constraints.simplex import (
    RowSense,
    SolverAnomaly,
    solve_phase_one,
)

logger = logging.getLogger(__name__)

SOLVER_VERSION = "1.0.0"

_SENSES: dict[Operator, RowSense] = {
    Operator.LT: RowSense.LE,
    Operator.LE: RowSense.LE,
    Operator.GT: RowSense.GE,
    Operator.GE: RowSense.GE,
    Operator.EQ: RowSense.EQ,
}


class VerdictSource(StrEnum):
    """Which stage settled a feasibility query."""

    EMPTY = "EMPTY"
    DEGENERATE = "DEGENERATE"
    CONTRADICTION = "CONTRADICTION"
    SIMPLEX = "SIMPLEX"


@dataclass(frozen=True)
class FeasibilityVerdict:
    """Result of a feasibility query.

    witness_pair is only set when a direct contradiction was found;
    witness_point only when the simplex proved feasibility.
    """

    feasible: bool
    source: VerdictSource
    witness_pair: tuple[str, str] | None = None
    witness_point: tuple[float, float] | None = None
    anomaly: SolverAnomaly | None = None


class FeasibilitySolver:
    """Two-phase-simplex feasibility test for 2-D linear constraint systems."""

    def __init__(
        self,
        *,
        tolerance: float = 1e-9,
        strict_margin: float = 1e-6,
        pivot_cap_factor: int = 4,
    ) -> None:
        if tolerance <= 0 or strict_margin <= 0:
            raise ValueError("tolerance and strict_margin must be positive")
        if pivot_cap_factor < 1:
            raise ValueError("pivot_cap_factor must be at least 1")
        self.tolerance = tolerance
        self.strict_margin = strict_margin
        self.pivot_cap_factor = pivot_cap_factor

    @classmethod
    def from_settings(cls, settings: Settings) -> "FeasibilitySolver":
        return cls(
            tolerance=settings.FEASIBILITY_TOLERANCE,
            strict_margin=settings.STRICT_MARGIN,
            pivot_cap_factor=settings.PIVOT_CAP_FACTOR,
        )

    def is_feasible(
        self,
        constraints: list[Constraint] | tuple[Constraint, ...],
    ) -> FeasibilityVerdict:
        """Decide whether all constraints can hold at one point."""
        if not constraints:
            return FeasibilityVerdict(feasible=True, source=VerdictSource.EMPTY)

        rows: list[Constraint] = []
        for constraint in constraints:
            if constraint.is_degenerate:
                if not self._constant_row_holds(constraint):
                    logger.debug(
                        "Constant row %r is false", constraint.display,
                    )
                    return FeasibilityVerdict(
                        feasible=False, source=VerdictSource.DEGENERATE,
                    )
                continue
            rows.append(constraint)

        if not rows:
            return FeasibilityVerdict(
                feasible=True,
                source=VerdictSource.DEGENERATE,
                witness_point=(0.0, 0.0),
            )

        A, senses, rhs = self._build_program(rows)
        result = solve_phase_one(
            A,
            senses,
            rhs,
            tolerance=self.tolerance,
            pivot_cap_factor=self.pivot_cap_factor,
        )

        if result.anomaly is not None:
            return FeasibilityVerdict(
                feasible=False,
                source=VerdictSource.SIMPLEX,
                anomaly=result.anomaly,
            )

        if not result.is_feasible(self.tolerance):
            return FeasibilityVerdict(feasible=False, source=VerdictSource.SIMPLEX)

        s = result.solution
        return FeasibilityVerdict(
            feasible=True,
            source=VerdictSource.SIMPLEX,
            witness_point=(float(s[0] - s[1]), float(s[2] - s[3])),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _constant_row_holds(self, constraint: Constraint) -> bool:
        """Evaluate ``0 <op> d``; strict comparisons are exact, closed ones use the tolerance."""
        d = constraint.rhs
        op = constraint.operator
        if op is Operator.LT:
            return 0.0 < d
        if op is Operator.GT:
            return 0.0 > d
        if op is Operator.LE:
            return 0.0 <= d + self.tolerance
        if op is Operator.GE:
            return 0.0 >= d - self.tolerance
        return abs(d) <= self.tolerance

    def _build_program(
        self,
        rows: list[Constraint],
    ) -> tuple[np.ndarray, list[RowSense], np.ndarray]:
        """Rows over (x+, x-, y+, y-) with closed senses and scaled coefficients."""
        A = np.zeros((len(rows), 4))
        rhs = np.zeros(len(rows))
        senses: list[RowSense] = []
        for i, constraint in enumerate(rows):
            scale = max(abs(constraint.a), abs(constraint.b))
            a = constraint.a / scale
            b = constraint.b / scale
            d = constraint.rhs / scale
            if constraint.operator is Operator.LT:
                d -= self.strict_margin
            elif constraint.operator is Operator.GT:
                d += self.strict_margin
            A[i] = (a, -a, b, -b)
            rhs[i] = d
            senses.append(_SENSES[constraint.operator])
        return A, senses, rhs
