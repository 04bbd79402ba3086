# loads.py - Consistent nodal loads for linear distributed loads, nodal loads and springs

import numpy as np
from typing import Tuple

from .elements import hermite_row
from .kernel.assemble import add_nodal_load, add_spring
from .kernel.dof import DOFMap
from .model import Beam, Segment

# 3-point Gauss-Legendre rule on [-1, 1]
GAUSS_POINTS = np.array([-np.sqrt(3.0 / 5.0), 0.0, np.sqrt(3.0 / 5.0)])
GAUSS_WEIGHTS = np.array([5.0 / 9.0, 8.0 / 9.0, 5.0 / 9.0])


def consistent_load_vector(L: float, qL: float, qR: float) -> np.ndarray:
    """
    Equivalent nodal load vector for a linearly varying line load.

    The load q(x) = qL + (qR - qL)·x/L is projected onto the Hermite shape
    functions:

        f_a = ∫_0^L N_a(x) q(x) dx,   a = 1..4

    The integrand is cubic × linear (degree 4), so 3-point Gauss
    quadrature is exact.

    Parameters:
    -----------
    L : float
        Segment length (> 0)
    qL, qR : float
        Intensity at the left / right end (up positive)

    Returns:
    --------
    np.ndarray
        Shape (4,): [F_i, M_i, F_j, M_j] in the element DOF order

    Examples:
    ---------
    >>> consistent_load_vector(4.0, -1000.0, -1000.0)
    array([-2000.        , -1333.33333333, -2000.        ,  1333.33333333])
    """
    J = L / 2.0
    f = np.zeros(4, dtype=float)
    for t, w in zip(GAUSS_POINTS, GAUSS_WEIGHTS):
        x = (t + 1.0) * J
        qx = qL + (qR - qL) * x / L
        f += w * J * qx * hermite_row(x, L)
    return f


def segment_load_vector(seg: Segment) -> np.ndarray:
    """Consistent load vector of a segment, self-weight included."""
    qL, qR = seg.effective_q
    return consistent_load_vector(seg.L, qL, qR)


def effective_q(seg: Segment) -> Tuple[float, float, float]:
    """(qL, qR, Δq) after self-weight superposition."""
    qL, qR = seg.effective_q
    return qL, qR, qR - qL


def apply_nodal_actions(K: np.ndarray, F: np.ndarray, beam: Beam, dof: DOFMap) -> None:
    """
    Add point forces, moments and springs of every node (in-place).

    - F and Kv act on the vertical index
    - Km acts on the single rotation of a continuous node; hinges take none
    - M goes to the rotation slot(s); a hinge splits it 50/50 between faces
    """
    for i, node in enumerate(beam.nodes):
        wi = dof.vertical[i]
        slots = dof.rotations[i]

        if node.F:
            add_nodal_load(F, wi, node.F)
        if node.Kv:
            add_spring(K, wi, node.Kv)

        if node.Km > 0 and slots.spring_index is not None:
            add_spring(K, slots.spring_index, node.Km)

        if node.M:
            for idx, share in slots.moment_shares(node.M):
                add_nodal_load(F, idx, share)
