# beamline/kernel/dof.py
"""
DOF MAP: Equation Numbering With Moment Releases
================================================

PURPOSE:
--------
This module maps (node, local quantity) to a global equation index for a
continuous beam. A beam node carries one vertical displacement and either
ONE rotation (continuous node) or up to TWO rotations (hinge):

    continuous node:   w ── θ ── w          one θ shared by both sides
    hinge node:        w ── θL ○ θR ── w     independent θ per side

The vertical index is always shared, so shear and deflection stay
continuous across a hinge while bending moment is released.

NUMBERING:
----------
    1. one vertical index per node, in node order      (0 .. n-1)
    2. rotation slot(s) per node, in node order        (n .. ndof-1)

A hinge at a physical end only gets the slot on the side that has a
neighbouring segment, so it contributes a single rotation.

USAGE:
------
    dof = build_dof_map([False, True, False])
    dof.ndof                      # 3 verticals + 1 + 2 + 1 rotations = 7
    dof.element_dof_map(0)        # [w0, θR0, w1, θL1]
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class ContinuousRotation:
    """A single rotation index shared by both sides of the node."""
    index: int

    @property
    def left(self) -> int:
        return self.index

    @property
    def right(self) -> int:
        return self.index

    @property
    def slots(self) -> Tuple[int, ...]:
        return (self.index,)

    @property
    def spring_index(self) -> Optional[int]:
        return self.index

    def moment_shares(self, M: float) -> List[Tuple[int, float]]:
        return [(self.index, M)]


@dataclass(frozen=True)
class HingedRotation:
    """
    Independent rotation indices for the faces of a moment release.

    `left` belongs to the segment ending at this node, `right` to the
    segment starting at it. Either is None when there is no segment on
    that side.
    """
    left: Optional[int]
    right: Optional[int]

    @property
    def slots(self) -> Tuple[int, ...]:
        return tuple(i for i in (self.left, self.right) if i is not None)

    @property
    def spring_index(self) -> Optional[int]:
        # no single rotation to attach a rotational spring to
        return None

    def moment_shares(self, M: float) -> List[Tuple[int, float]]:
        # applied couple acts equally on both released faces
        return [(i, 0.5 * M) for i in (self.left, self.right) if i is not None]


RotationSlots = Union[ContinuousRotation, HingedRotation]


@dataclass(frozen=True)
class DOFMap:
    """
    Global equation numbering for a beam of n nodes.

    Attributes:
    -----------
    vertical : Tuple[int, ...]
        Vertical displacement index of each node
    rotations : Tuple[RotationSlots, ...]
        Rotation slot(s) of each node
    ndof : int
        Total number of DOFs (size of K)
    """
    vertical: Tuple[int, ...]
    rotations: Tuple[RotationSlots, ...]
    ndof: int

    @property
    def n_nodes(self) -> int:
        return len(self.vertical)

    def element_dof_map(self, segment_index: int) -> List[int]:
        """
        Global indices [w_i, θ_i(right side), w_j, θ_j(left side)] of the
        segment joining node i = segment_index to node j = i + 1.
        """
        i = segment_index
        j = i + 1
        return [
            self.vertical[i],
            self.rotations[i].right,
            self.vertical[j],
            self.rotations[j].left,
        ]

    def node_dofs(self, node_index: int) -> List[int]:
        """Every global index owned by one node (vertical first)."""
        return [self.vertical[node_index], *self.rotations[node_index].slots]


def build_dof_map(hinges: Sequence[bool]) -> DOFMap:
    """
    Build the DOF map from per-node hinge flags.

    Parameters:
    -----------
    hinges : Sequence[bool]
        One flag per node, True where bending moment is released

    Returns:
    --------
    DOFMap
        Monotonic numbering with no gaps

    Examples:
    ---------
    >>> build_dof_map([False, False]).ndof
    4
    >>> build_dof_map([False, True, False]).rotations[1]
    HingedRotation(left=4, right=5)
    """
    n = len(hinges)
    if n == 0:
        raise ValueError("DOF map needs at least one node.")

    vertical = tuple(range(n))
    next_dof = n

    rotations: List[RotationSlots] = []
    for i, hinge in enumerate(hinges):
        if not hinge:
            rotations.append(ContinuousRotation(next_dof))
            next_dof += 1
            continue

        left = right = None
        if i > 0:
            left = next_dof
            next_dof += 1
        if i < n - 1:
            right = next_dof
            next_dof += 1
        rotations.append(HingedRotation(left, right))

    return DOFMap(vertical=vertical, rotations=tuple(rotations), ndof=next_dof)
