# element end forces, analytic internal force fields, nodal results

import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional

from .elements import beam_element_stiffness, hermite_row
from .kernel.dof import DOFMap, HingedRotation
from .loads import effective_q, segment_load_vector
from .model import Beam, Segment


@dataclass(frozen=True)
class ElementForces:
    """
    Internal end forces of one segment in equilibrium sign convention.

    V1, M1 act at the left end, V2, M2 at the right end.
    """
    V1: float
    M1: float
    V2: float
    M2: float
    L: float


def element_end_forces_local(seg: Segment, u_element: np.ndarray) -> np.ndarray:
    """
    Element end forces from the solved element displacements.

    1. f = k · u_e                (forces the nodes exert on the element)
    2. f = f - f_eq               (remove the consistent distributed load)

    Parameters:
    -----------
    seg : Segment
        The segment (E, I, L and loads are used)
    u_element : np.ndarray
        [w_i, θ_i, w_j, θ_j] gathered from the global solution

    Returns:
    --------
    np.ndarray
        Shape (4,): [F_i, M_i, F_j, M_j] in FE convention
    """
    k = beam_element_stiffness(seg.E, seg.I, seg.L)
    return k @ np.asarray(u_element, dtype=float) - segment_load_vector(seg)


def element_end_forces(beam: Beam, dof: DOFMap, u: np.ndarray) -> List[ElementForces]:
    """
    End force records for every segment, sign-flipped from FE convention
    to internal (equilibrium) convention.
    """
    records = []
    for e, seg in enumerate(beam.segments):
        f = element_end_forces_local(seg, u[dof.element_dof_map(e)])
        records.append(ElementForces(
            V1=float(-f[0]),
            M1=float(-f[1]),
            V2=float(-f[2]),
            M2=float(-f[3]),
            L=seg.L,
        ))
    return records


def moment_at(seg: Segment, ef: ElementForces, x):
    """
    Bending moment at local position x (scalar or array).

    Integrated analytically from the right end:

        M(x) = M_right + V1·(L - x) - ½·qL·(L² - x²) - (Δq / 6L)·(L³ - x³)

    with M_right = -M2 and qL, Δq after self-weight superposition.
    """
    L = ef.L
    qL, _, dq = effective_q(seg)
    M_right = -ef.M2
    return (
        M_right
        + ef.V1 * (L - x)
        - 0.5 * qL * (L * L - x * x)
        - (dq / (6.0 * L)) * (L * L * L - x * x * x)
    )


def shear_at(seg: Segment, ef: ElementForces, x):
    """Shear at local position x: V(x) = V1 - (qL·x + Δq·x² / 2L)."""
    L = ef.L
    qL, _, dq = effective_q(seg)
    return ef.V1 - (qL * x + dq * x * x / (2.0 * L))


def bending_stress_at(seg: Segment, M, eps: float = 1e-12):
    """
    Top and bottom fibre stress (tension positive) for moment M.

    Returns (sigma_top, sigma_bottom); a face whose section modulus is
    unset gives None.
    """
    top = -M / seg.St if _has_modulus(seg.St, eps) else None
    bottom = M / seg.Sb if _has_modulus(seg.Sb, eps) else None
    return top, bottom


def _has_modulus(S: Optional[float], eps: float) -> bool:
    return S is not None and np.isfinite(S) and abs(S) > eps


def element_displacements(dof: DOFMap, u: np.ndarray, segment_index: int) -> np.ndarray:
    """[w_i, θ_i, w_j, θ_j] of one segment."""
    return u[dof.element_dof_map(segment_index)]


def deflection_at(L: float, u_element: np.ndarray, x: float) -> float:
    """Hermite interpolation of the end displacements/rotations."""
    return float(hermite_row(x, L) @ u_element)


def nodal_results(solution) -> List[Dict[str, Optional[float]]]:
    """
    Per-node summary of a solved beam.

    Returns:
    --------
    List[Dict]
        One dict per node with keys:
        - 'w': vertical displacement (up positive)
        - 'theta': rotation of a continuous node (None at a hinge)
        - 'theta_left', 'theta_right': rotations either side of the node
        - 'R': support reaction force (prescribed w only, else 0)
        - 'Rm': support reaction moment summed over prescribed rotations
        - 'spring_force', 'spring_moment': forces in Kv / Km springs
    """
    beam = solution.beam
    dof = solution.dof
    u = solution.u
    R = solution.reactions

    out = []
    for i, node in enumerate(beam.nodes):
        wi = dof.vertical[i]
        slots = dof.rotations[i]
        hinged = isinstance(slots, HingedRotation)

        theta_left = float(u[slots.left]) if slots.left is not None else None
        theta_right = float(u[slots.right]) if slots.right is not None else None
        w = float(u[wi])

        spring_moment = 0.0
        if slots.spring_index is not None and node.Km > 0:
            spring_moment = -node.Km * float(u[slots.spring_index])

        out.append({
            'w': w,
            'theta': None if hinged else theta_left,
            'theta_left': theta_left,
            'theta_right': theta_right,
            'R': float(R[wi]),
            'Rm': float(sum(R[r] for r in slots.slots)),
            'spring_force': -node.Kv * w,
            'spring_moment': spring_moment,
        })
    return out
