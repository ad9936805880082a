"""Contradiction detector — cheap pairwise pre-filter before the solver.

Two constraints clash when they bound the same linear expression and the
bounds leave no common value, e.g. ``x - 5 > 0`` and ``x - 3 < 0``.

Expressions are compared syntactically through ``expression_key``; ``x+y``
and ``y+x``, or ``x`` and ``2x``, are never matched. A None result is not a
proof of feasibility. A returned pair always is a proof of infeasibility.
"""

import logging
import math
from dataclasses import dataclass
from itertools import combinations

from src.engine.constraints.schema import Constraint, Operator

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 1e-9


@dataclass(frozen=True)
class ValueInterval:
    """Values of ``a*x + b*y`` allowed by one constraint."""

    lower: float
    upper: float
    lower_open: bool
    upper_open: bool

    @classmethod
    def of(cls, constraint: Constraint) -> "ValueInterval":
        r = constraint.rhs
        op = constraint.operator
        if op is Operator.LT:
            return cls(-math.inf, r, True, True)
        if op is Operator.LE:
            return cls(-math.inf, r, True, False)
        if op is Operator.GT:
            return cls(r, math.inf, True, True)
        if op is Operator.GE:
            return cls(r, math.inf, False, True)
        return cls(r, r, False, False)

    def is_disjoint_from(
        self,
        other: "ValueInterval",
        tolerance: float = DEFAULT_TOLERANCE,
    ) -> bool:
        # Tightest lower bound and tightest upper bound of the intersection.
        if self.lower > other.lower or (
            self.lower == other.lower and self.lower_open
        ):
            lower, lower_open = self.lower, self.lower_open
        else:
            lower, lower_open = other.lower, other.lower_open
        if self.upper < other.upper or (
            self.upper == other.upper and self.upper_open
        ):
            upper, upper_open = self.upper, self.upper_open
        else:
            upper, upper_open = other.upper, other.upper_open

        if math.isinf(lower) or math.isinf(upper):
            return False
        gap = lower - upper
        if gap > tolerance:
            return True
        # Closed bounds closer than the tolerance are left to the solver.
        return gap >= 0.0 and (lower_open or upper_open)


def are_contradictory(
    first: Constraint,
    second: Constraint,
    tolerance: float = DEFAULT_TOLERANCE,
) -> bool:
    """Whether two constraints on the same expression leave no overlap."""
    if first.expression_key != second.expression_key:
        return False
    return ValueInterval.of(first).is_disjoint_from(
        ValueInterval.of(second), tolerance,
    )


def find_direct_contradiction(
    constraints: list[Constraint] | tuple[Constraint, ...],
    tolerance: float = DEFAULT_TOLERANCE,
) -> tuple[Constraint, Constraint] | None:
    """Return the first directly contradictory pair, in insertion order."""
    for first, second in combinations(constraints, 2):
        if are_contradictory(first, second, tolerance):
            logger.info(
                "Direct contradiction between %r and %r",
                first.display,
                second.display,
            )
            return first, second
    return None
