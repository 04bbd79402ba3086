# beamline/kernel - Beam-agnostic analysis plumbing
"""
KERNEL: NUMBERING, ASSEMBLY AND SOLVE
=====================================

The pieces that do not know what a beam segment is:
- a DOF map from nodes (with hinge releases) to equation indices
- scatter-add of element matrices/vectors into K and F
- a partitioned solve with prescribed values and mechanism detection
"""

from .dof import DOFMap, ContinuousRotation, HingedRotation, build_dof_map
from .solve import solve_constrained, MechanismError

__all__ = [
    'DOFMap', 'ContinuousRotation', 'HingedRotation', 'build_dof_map',
    'solve_constrained', 'MechanismError',
]
