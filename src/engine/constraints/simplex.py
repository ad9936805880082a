"""Phase-one simplex on a dense NumPy tableau.

Decides whether ``A @ s (<=|>=|=) rhs`` has a solution with ``s >= 0`` by
minimizing the sum of artificial variables. Pivoting follows Bland's
smallest-index rule for both the entering column and ratio-test ties, so
the method cannot cycle.

Tableau layout (m constraint rows + 1 objective row)::

    [ structural | slack/surplus | artificial | rhs ]
    [        reduced costs of the phase-one objective | -w ]
"""

import logging
from dataclasses import dataclass
from enum import StrEnum

import numpy as np

logger = logging.getLogger(__name__)


class RowSense(StrEnum):
    LE = "<="
    GE = ">="
    EQ = "="

    def flipped(self) -> "RowSense":
        if self is RowSense.LE:
            return RowSense.GE
        if self is RowSense.GE:
            return RowSense.LE
        return self


class SolverAnomaly(StrEnum):
    """Conditions under which the simplex gives up without an optimum."""

    ITERATION_LIMIT_EXCEEDED = "ITERATION_LIMIT_EXCEEDED"
    NUMERICAL_INSTABILITY = "NUMERICAL_INSTABILITY"


@dataclass(frozen=True)
class PhaseOneResult:
    """Outcome of a phase-one run."""

    status: str  # "optimal", "unbounded", "iteration_limit", "unstable"
    objective: float  # Sum of artificials at termination
    solution: np.ndarray  # Structural variable values (length n)
    iterations: int
    anomaly: SolverAnomaly | None = None

    def is_feasible(self, tolerance: float) -> bool:
        return self.status == "optimal" and self.objective <= tolerance


def solve_phase_one(
    A: np.ndarray,
    senses: list[RowSense],
    rhs: np.ndarray,
    *,
    tolerance: float = 1e-9,
    pivot_cap_factor: int = 4,
) -> PhaseOneResult:
    """Minimize the artificial mass of ``A @ s (sense) rhs, s >= 0``.

    Args:
        A: m x n coefficient matrix over non-negative structural variables.
        senses: one RowSense per row.
        rhs: m-vector of right-hand sides.
        tolerance: pivot elements and reduced costs at or below this
            magnitude are treated as zero.
        pivot_cap_factor: pivots allowed = factor * (rows + columns).

    Returns:
        PhaseOneResult; never raises on numerical trouble.
    """
    A = np.array(A, dtype=float)
    rhs = np.array(rhs, dtype=float)
    m, n = A.shape
    if len(senses) != m or rhs.shape != (m,):
        raise ValueError(
            f"Row count mismatch: A has {m} rows, {len(senses)} senses, "
            f"rhs shape {rhs.shape}"
        )

    # Non-negative right-hand sides keep the starting basis feasible.
    senses = list(senses)
    for i in range(m):
        if rhs[i] < 0:
            A[i] = -A[i]
            rhs[i] = -rhs[i]
            senses[i] = senses[i].flipped()

    n_slack = sum(1 for s in senses if s is not RowSense.EQ)
    n_art = sum(1 for s in senses if s is not RowSense.LE)
    total = n + n_slack + n_art

    T = np.zeros((m + 1, total + 1))
    T[:m, :n] = A
    T[:m, -1] = rhs
    basis = np.zeros(m, dtype=int)

    slack_col = n
    art_col = n + n_slack
    artificial_cols: list[int] = []
    for i, sense in enumerate(senses):
        if sense is RowSense.LE:
            T[i, slack_col] = 1.0
            basis[i] = slack_col
            slack_col += 1
        elif sense is RowSense.GE:
            T[i, slack_col] = -1.0
            slack_col += 1
            T[i, art_col] = 1.0
            basis[i] = art_col
            artificial_cols.append(art_col)
            art_col += 1
        else:
            T[i, art_col] = 1.0
            basis[i] = art_col
            artificial_cols.append(art_col)
            art_col += 1

    # Objective row: costs of 1 on artificials, priced out against the basis.
    T[m, artificial_cols] = 1.0
    for i in range(m):
        if basis[i] in artificial_cols:
            T[m] -= T[i]

    cap = pivot_cap_factor * (m + total)
    iterations = 0
    status = "optimal"
    anomaly: SolverAnomaly | None = None

    while True:
        entering = _entering_column(T[m, :total], tolerance)
        if entering is None:
            break
        if iterations >= cap:
            status = "iteration_limit"
            anomaly = SolverAnomaly.ITERATION_LIMIT_EXCEEDED
            break

        column = T[:m, entering]
        leaving = _leaving_row(column, T[:m, -1], basis, tolerance)
        if leaving is None:
            if np.any((column > 0.0) & (column <= tolerance)):
                status = "unstable"
                anomaly = SolverAnomaly.NUMERICAL_INSTABILITY
            else:
                status = "unbounded"
            break

        _pivot(T, leaving, entering)
        basis[leaving] = entering
        iterations += 1

    solution = np.zeros(n)
    for i, j in enumerate(basis):
        if j < n:
            solution[j] = T[i, -1]

    objective = float(-T[m, -1])
    if anomaly is not None:
        logger.warning(
            "Phase-one simplex stopped with %s after %d pivots "
            "(rows=%d, columns=%d, objective=%.3g)",
            anomaly.value, iterations, m, total, objective,
        )

    return PhaseOneResult(
        status=status,
        objective=objective,
        solution=solution,
        iterations=iterations,
        anomaly=anomaly,
    )


def _entering_column(reduced_costs: np.ndarray, tolerance: float) -> int | None:
    """Smallest-index column whose reduced cost is negative."""
    candidates = np.flatnonzero(reduced_costs < -tolerance)
    if candidates.size == 0:
        return None
    return int(candidates[0])


def _leaving_row(
    column: np.ndarray,
    rhs: np.ndarray,
    basis: np.ndarray,
    tolerance: float,
) -> int | None:
    """Minimum-ratio row; ties go to the smallest basic variable index."""
    best_row: int | None = None
    best_ratio = np.inf
    for i in range(column.shape[0]):
        if column[i] <= tolerance:
            continue
        ratio = rhs[i] / column[i]
        if best_row is None or ratio < best_ratio - tolerance:
            best_row, best_ratio = i, ratio
        elif abs(ratio - best_ratio) <= tolerance and basis[i] < basis[best_row]:
            best_row, best_ratio = i, min(ratio, best_ratio)
    return best_row


def _pivot(T: np.ndarray, row: int, col: int) -> None:
    T[row] /= T[row, col]
    for k in range(T.shape[0]):
        if k != row and T[k, col] != 0.0:
            T[k] -= T[k, col] * T[row]
