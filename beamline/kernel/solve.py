# beamline/kernel/solve.py
"""Constrained linear solve with prescribed values and mechanism detection."""

import logging
from typing import Dict, Tuple

import numpy as np

logger = logging.getLogger(__name__)


class MechanismError(RuntimeError):
    """Raised when the constrained system has no valid equilibrium state."""
    pass


def solve_constrained(
    K: np.ndarray,
    F: np.ndarray,
    known: Dict[int, float],
    cond_limit: float = 1e12
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Solve K·u = F where some entries of u are prescribed.

    The DOFs are partitioned into known (k) and unknown (u) sets:

        K_uu · u_u = F_u - K_uk · u_k

    Args:
        K: Global stiffness matrix (ndof x ndof)
        F: Global load vector (ndof,)
        known: Mapping of DOF index -> prescribed value (0.0 for supports)
        cond_limit: Max condition number of K_uu before raising MechanismError

    Returns:
        u: Full solution vector (ndof,)
        R: Reaction vector K·u - F (ndof,), nonzero only at known DOFs
        unknown: Array of unknown DOF indices

    Raises:
        MechanismError: If every DOF is prescribed or K_uu is singular

    The mechanism test is numerical: any K_uu with cond above cond_limit is
    rejected. A stable beam can trip it when its stiffnesses span more than
    about 12 orders of magnitude (very stiff sections on very soft springs),
    and a near-mechanism below the limit is solved as if it were stable.
    """
    ndof = K.shape[0]

    known_idx = np.array(sorted(known), dtype=int)
    known_val = np.array([known[i] for i in known_idx], dtype=float)
    known_set = set(known_idx.tolist())
    unknown = np.array([i for i in range(ndof) if i not in known_set], dtype=int)

    if unknown.size == 0:
        raise MechanismError(
            "All DOFs are constrained; there is nothing to solve for."
        )

    Kuu = K[np.ix_(unknown, unknown)]
    Kuk = K[np.ix_(unknown, known_idx)]
    rhs = F[unknown] - Kuk @ known_val

    cond = np.linalg.cond(Kuu)
    if not np.isfinite(cond) or cond > cond_limit:
        raise MechanismError(
            f"Unstable system (cond={cond:.2e}). Check supports and hinges."
        )

    try:
        uu = np.linalg.solve(Kuu, rhs)
    except np.linalg.LinAlgError as exc:
        raise MechanismError(f"Singular stiffness matrix: {exc}") from exc

    u = np.zeros(ndof, dtype=float)
    u[unknown] = uu
    u[known_idx] = known_val

    R = K @ u - F
    logger.debug(
        "Solved %d unknowns (%d prescribed), cond=%.2e", unknown.size, known_idx.size, cond
    )

    return u, R, unknown
