"""Engine call surface for the presentation layer.

Systems are immutable values: every operation returns a new system and
leaves its argument untouched.
"""

import logging

from src.engine.constraints.contradictions import find_direct_contradiction
from src.engine.constraints.schema import Constraint, ConstraintSystem
from src.engine.constraints.solver import (
    FeasibilitySolver,
    FeasibilityVerdict,
    VerdictSource,
)

logger = logging.getLogger(__name__)


def add_constraint(system: ConstraintSystem, constraint: Constraint) -> ConstraintSystem:
    """Append a constraint, preserving insertion order."""
    if system.get(constraint.constraint_id) is not None:
        raise ValueError(
            f"Constraint {constraint.constraint_id} is already in the system."
        )
    return system.model_copy(
        update={"constraints": (*system.constraints, constraint)},
    )


def remove_constraint(system: ConstraintSystem, constraint_id: str) -> ConstraintSystem:
    """Drop the constraint with the given id.

    Raises:
        KeyError: if no constraint has that id.
    """
    if system.get(constraint_id) is None:
        raise KeyError(f"Constraint {constraint_id} not found in system.")
    return system.model_copy(
        update={
            "constraints": tuple(
                c for c in system.constraints if c.constraint_id != constraint_id
            ),
        },
    )


def clear_constraints(system: ConstraintSystem) -> ConstraintSystem:
    return system.model_copy(update={"constraints": ()})


def check_feasibility(
    system: ConstraintSystem,
    solver: FeasibilitySolver | None = None,
) -> FeasibilityVerdict:
    """Run the contradiction pre-check, then the simplex if it finds nothing."""
    solver = solver or FeasibilitySolver()
    constraints = system.constraints

    pair = find_direct_contradiction(constraints, tolerance=solver.tolerance)
    if pair is not None:
        first, second = pair
        return FeasibilityVerdict(
            feasible=False,
            source=VerdictSource.CONTRADICTION,
            witness_pair=(first.constraint_id, second.constraint_id),
        )

    verdict = solver.is_feasible(constraints)
    logger.debug(
        "System %s with %d constraints: feasible=%s via %s",
        system.system_id, len(constraints), verdict.feasible, verdict.source.value,
    )
    return verdict
