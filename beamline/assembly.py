# global K and F assembly for a beam

import numpy as np
from typing import Tuple

from .elements import beam_element_stiffness
from .kernel.assemble import assemble_global_F, assemble_global_K
from .kernel.dof import DOFMap, build_dof_map
from .loads import apply_nodal_actions, segment_load_vector
from .model import Beam


def dof_map_for(beam: Beam) -> DOFMap:
    return build_dof_map(beam.hinges)


def assemble_system(beam: Beam, dof: DOFMap = None) -> Tuple[np.ndarray, np.ndarray, DOFMap]:
    """
    Build K and F for the whole beam.

    Segment i is scattered into [w_i, θR_i, w_(i+1), θL_(i+1)], so at a
    hinge the two neighbours write their rotation terms into different
    slots. Nodal forces, moments and springs are added afterwards.

    Returns:
    --------
    K : np.ndarray
        Global stiffness (ndof × ndof), springs included
    F : np.ndarray
        Global load vector (ndof,)
    dof : DOFMap
        Numbering used for K and F
    """
    if dof is None:
        dof = dof_map_for(beam)

    k_contrib = []
    f_contrib = []
    for e, seg in enumerate(beam.segments):
        dof_map = dof.element_dof_map(e)
        k_contrib.append((dof_map, beam_element_stiffness(seg.E, seg.I, seg.L)))
        f_contrib.append((dof_map, segment_load_vector(seg)))

    K = assemble_global_K(dof.ndof, k_contrib)
    F = assemble_global_F(dof.ndof, f_contrib)
    apply_nodal_actions(K, F, beam, dof)

    return K, F, dof
