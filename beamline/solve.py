# apply supports / prescribed values, solve, recover element forces

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from .assembly import assemble_system
from .config import CONFIG
from .kernel.dof import DOFMap
from .kernel.solve import MechanismError, solve_constrained
from .model import FIXED, PINNED, Beam, Node, Segment, make_beam
from .post import ElementForces, element_end_forces

logger = logging.getLogger(__name__)


@dataclass
class BeamSolution:
    """
    Result of one solve.

    `u` is only meaningful together with `dof`; `beam` is the snapshot
    that was solved.
    """
    beam: Beam
    dof: DOFMap
    u: np.ndarray
    reactions: np.ndarray
    element_forces: List[ElementForces]
    K: np.ndarray
    F: np.ndarray


def constrained_dofs(beam: Beam, dof: DOFMap) -> Dict[int, float]:
    """
    Classify prescribed DOFs.

    fixed  -> w = 0 and every rotation slot = 0
    pinned -> w = 0
    w0/th0 -> override with the given value (applied last, so they win)
    """
    known: Dict[int, float] = {}
    for i, node in enumerate(beam.nodes):
        wi = dof.vertical[i]
        slots = dof.rotations[i].slots

        if node.bc == FIXED:
            known[wi] = 0.0
            for r in slots:
                known[r] = 0.0
        elif node.bc == PINNED:
            known[wi] = 0.0

        if node.w0 is not None:
            known[wi] = float(node.w0)
        if node.th0 is not None:
            for r in slots:
                known[r] = float(node.th0)
    return known


def solve_beam(beam: Beam, cond_limit: Optional[float] = None) -> BeamSolution:
    """
    Assemble, constrain and solve a beam.

    Raises:
    -------
    MechanismError
        If the supports leave the beam unstable (recoverable: change
        supports and call again)
    """
    if cond_limit is None:
        cond_limit = CONFIG.cond_limit

    K, F, dof = assemble_system(beam)
    known = constrained_dofs(beam, dof)

    try:
        u, R, _ = solve_constrained(K, F, known, cond_limit)
    except MechanismError:
        logger.warning(
            "No valid equilibrium state for beam v%d (%d segments, %d prescribed DOFs)",
            beam.version, beam.n_segments, len(known)
        )
        raise

    forces = element_end_forces(beam, dof, u)
    return BeamSolution(beam=beam, dof=dof, u=u, reactions=R, element_forces=forces, K=K, F=F)


def solve(nodes: Sequence[Node], segments: Sequence[Segment]):
    """
    Solve from plain node/segment records.

    Returns:
    --------
    (BeamSolution, List[ElementForces])
    """
    solution = solve_beam(make_beam(nodes, segments))
    return solution, solution.element_forces
