# beamline/kernel/assemble.py
"""
SCATTER-ADD
===========

Segment matrices and vectors are summed into the global system through
their DOF maps:

    K[map[a], map[b]] += k_e[a, b]
    F[map[a]]         += f_e[a]

Two segments meeting at a hinge share the vertical index there but list
different rotation indices, so their bending terms never meet in K.
"""

import numpy as np
from typing import Iterable, Sequence, Tuple

Contribution = Tuple[Sequence[int], np.ndarray]


def _checked_index(dof_map: Sequence[int], block: np.ndarray, ndim: int) -> np.ndarray:
    idx = np.asarray(dof_map, dtype=int)
    expected = (idx.size,) * ndim
    if block.shape != expected:
        raise ValueError(f"Block of shape {block.shape} does not fit a DOF map of length {idx.size}")
    return idx


def assemble_global_K(ndof: int, contributions: Iterable[Contribution]) -> np.ndarray:
    """
    Sum (dof_map, k_e) pairs into an ndof x ndof stiffness matrix.

    np.add.at accumulates repeated indices, so a map may list the same DOF
    twice (e.g. two rotation slots tied together).
    """
    K = np.zeros((ndof, ndof), dtype=float)
    for dof_map, ke in contributions:
        idx = _checked_index(dof_map, ke, 2)
        np.add.at(K, np.ix_(idx, idx), ke)
    return K


def assemble_global_F(ndof: int, contributions: Iterable[Contribution]) -> np.ndarray:
    """Sum (dof_map, f_e) pairs into a load vector of length ndof."""
    F = np.zeros(ndof, dtype=float)
    for dof_map, fe in contributions:
        idx = _checked_index(dof_map, fe, 1)
        np.add.at(F, idx, fe)
    return F


def add_nodal_load(F: np.ndarray, dof: int, value: float) -> None:
    """Point force or moment at one global DOF (in-place)."""
    F[dof] += value


def add_spring(K: np.ndarray, dof: int, stiffness: float) -> None:
    """Grounded spring on the diagonal of K (in-place)."""
    K[dof, dof] += stiffness
