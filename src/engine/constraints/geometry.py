"""Plane geometry over constraint boundary lines.

Used by the plotting layer to find the corners of a feasible region, and
by the quiz checks to test submitted points.
"""

from itertools import combinations

from src.engine.constraints.schema import Constraint

PARALLEL_TOLERANCE = 1e-10


def compute_intersection(
    first: Constraint,
    second: Constraint,
) -> tuple[float, float] | None:
    """Intersection of the two boundary lines ``a*x + b*y + c = 0``.

    Returns None when the lines are parallel or coincident.
    """
    determinant = first.a * second.b - second.a * first.b
    if abs(determinant) < PARALLEL_TOLERANCE:
        return None
    x = (first.b * second.c - second.b * first.c) / determinant
    y = (second.a * first.c - first.a * second.c) / determinant
    return x, y


def satisfies_all(
    constraints: list[Constraint] | tuple[Constraint, ...],
    x: float,
    y: float,
    tolerance: float = 0.0,
) -> bool:
    return all(c.is_satisfied_by(x, y, tolerance) for c in constraints)


def violated_by(
    constraints: list[Constraint] | tuple[Constraint, ...],
    x: float,
    y: float,
    tolerance: float = 0.0,
) -> list[Constraint]:
    """Constraints whose region does not contain the point."""
    return [c for c in constraints if not c.is_satisfied_by(x, y, tolerance)]


def find_valid_intersections(
    constraints: list[Constraint] | tuple[Constraint, ...],
    tolerance: float = 1e-9,
) -> list[tuple[float, float]]:
    """Boundary intersections that satisfy every other constraint.

    The two lines through a point lie on it by construction, so only the
    remaining constraints are checked; strict constraints therefore still
    contribute corners of the region's closure.
    """
    points: list[tuple[float, float]] = []
    indexed = list(enumerate(constraints))
    for (i, first), (j, second) in combinations(indexed, 2):
        point = compute_intersection(first, second)
        if point is None:
            continue
        others = [c for k, c in indexed if k not in (i, j)]
        if satisfies_all(others, point[0], point[1], tolerance):
            points.append(point)
    return points
