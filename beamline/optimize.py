# beamline/optimize.py
"""
DISCRETE SECTION OPTIMIZER
==========================

PURPOSE:
--------
Resize every segment by stepping through a catalog of sections until the
peak bending stress of each segment sits inside a band around the
allowable stress:

    allowable·(1 - under_tolerance)  <=  σ_peak  <=  allowable·(1 + over_tolerance)

ALGORITHM:
----------
    seed      one catalog section for the whole beam (single_start), or
              the nearest catalog entry per segment (log-ratio of St, Sb)
    repeat    solve → measure σ_peak per segment → step one index up if
              overstressed, one down if understressed
    stop      when no segment changes, or after max_iterations passes

Segments interact through the shared stiffness, so this is a heuristic:
it is not guaranteed to find the lightest assignment, nor to settle
before the iteration cap. The result records every pass so callers can
see how it terminated.

A MechanismError during any solve stops the loop. The error is returned
in the result together with the assignment reached so far.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence

from .catalog import CatalogError, Section, assign_sections
from .config import CONFIG
from .diagrams import moment_extrema, stress_extrema
from .kernel.solve import MechanismError
from .model import Beam, Segment
from .solve import BeamSolution, solve_beam

logger = logging.getLogger(__name__)


@dataclass
class OptimizerConfig:
    """
    Parameters:
    -----------
    allowable_stress : float
        Target stress, > 0
    max_iterations : int
        Hard cap on solve/resize passes, >= 1
    over_tolerance, under_tolerance : float
        Relative band above/below the allowable stress, >= 0
    single_start : bool
        Seed every segment with the one section that covers the governing
        required section modulus; otherwise seed per segment by nearest St/Sb
    """
    allowable_stress: float
    max_iterations: int = 40
    over_tolerance: float = 0.01
    under_tolerance: float = 0.10
    single_start: bool = True

    def __post_init__(self):
        if not (math.isfinite(self.allowable_stress) and self.allowable_stress > 0):
            raise ValueError("allowable_stress must be > 0")
        if not (isinstance(self.max_iterations, int) and self.max_iterations >= 1):
            raise ValueError("max_iterations must be an integer >= 1")
        if not (self.over_tolerance >= 0 and self.under_tolerance >= 0):
            raise ValueError("Tolerances must be >= 0")

    @property
    def upper_limit(self) -> float:
        return self.allowable_stress * (1 + self.over_tolerance)

    @property
    def lower_limit(self) -> float:
        return self.allowable_stress * (1 - self.under_tolerance)


@dataclass
class IterationRecord:
    """One solve/resize pass."""
    iteration: int
    sections: List[int]           # assignment that was solved
    peak_stress: List[float]      # σ_peak per segment for that assignment
    changed: List[int]            # segments resized after this pass


@dataclass
class OptimizationResult:
    beam: Beam
    catalog: List[Section]
    sections: List[int]
    iterations: int
    converged: bool
    peak_stress: List[float] = field(default_factory=list)
    history: List[IterationRecord] = field(default_factory=list)
    solution: Optional[BeamSolution] = None
    error: Optional[MechanismError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def required_section_modulus(beam: Beam, solution: BeamSolution, allowable_stress: float) -> float:
    """Governing max |M| over the beam divided by the allowable stress."""
    extrema = moment_extrema(beam, solution.element_forces, CONFIG.optimizer_samples)
    M_gov = max(max(abs(e['M_max']), abs(e['M_min'])) for e in extrema)
    return M_gov / allowable_stress


def covering_index(catalog: Sequence[Section], S_req: float) -> int:
    """First entry with St and Sb >= S_req; the largest entry if none covers it."""
    for k, s in enumerate(catalog):
        if s.St >= S_req and s.Sb >= S_req:
            return k
    return len(catalog) - 1


def nearest_index(seg: Segment, catalog: Sequence[Section]) -> int:
    """Catalog entry closest to the segment's St/Sb in log-ratio distance."""
    def distance(s: Section) -> float:
        return (
            abs(math.log((seg.St or 1.0) / (s.St or 1.0)))
            + abs(math.log((seg.Sb or 1.0) / (s.Sb or 1.0)))
        )
    return min(range(len(catalog)), key=lambda k: distance(catalog[k]))


def _sorted_catalog(beam: Beam, catalog: Sequence[Section]):
    # reorder by capacity and move existing segment indices along with it
    order = sorted(range(len(catalog)), key=lambda k: catalog[k].capacity)
    remap = {old: new for new, old in enumerate(order)}
    sorted_rows = [catalog[k] for k in order]

    segments = []
    for seg in beam.segments:
        idx = seg.section_index
        if idx is not None and idx in remap:
            seg = replace(seg, section_index=remap[idx])
        elif idx is not None:
            seg = replace(seg, section_index=None)
        segments.append(seg)
    return beam.with_segments(segments), sorted_rows


def seed_sections(
    beam: Beam,
    catalog: Sequence[Section],
    config: OptimizerConfig
) -> Beam:
    """
    Initial assignment.

    single_start: solve the beam as given, take S_req = max|M| / σ_allow,
    and give every segment the first section covering S_req.
    otherwise: segments without a catalog index get the nearest entry.

    Raises MechanismError if the seeding solve fails.
    """
    if config.single_start:
        solution = solve_beam(beam)
        S_req = required_section_modulus(beam, solution, config.allowable_stress)
        k0 = covering_index(catalog, S_req)
        logger.info("Seeding all segments with %s (S_req=%.4g)", catalog[k0].name, S_req)
        return assign_sections(beam, catalog, [k0] * beam.n_segments)

    indices = [
        seg.section_index if seg.section_index is not None else nearest_index(seg, catalog)
        for seg in beam.segments
    ]
    return assign_sections(beam, catalog, indices)


def resize_step(
    indices: Sequence[int],
    peaks: Sequence[float],
    n_catalog: int,
    config: OptimizerConfig
) -> List[int]:
    """One index up if overstressed, one down if understressed, clamped to the catalog."""
    new = []
    for k, sigma in zip(indices, peaks):
        if sigma > config.upper_limit and k < n_catalog - 1:
            k += 1
        elif sigma < config.lower_limit and k > 0:
            k -= 1
        new.append(k)
    return new


def optimize_sections(
    beam: Beam,
    catalog: Sequence[Section],
    config: OptimizerConfig
) -> OptimizationResult:
    """
    Run the discrete optimizer.

    Parameters:
    -----------
    beam : Beam
        Starting beam; it is not modified (a new snapshot is returned)
    catalog : Sequence[Section]
        Candidate sections; reordered by capacity if needed
    config : OptimizerConfig
        Allowable stress, tolerances, iteration cap, seeding mode

    Returns:
    --------
    OptimizationResult
        Final beam and per-segment catalog indices, pass count, whether it
        converged, peak stresses of the final assignment, per-pass history
        and, if a solve failed, the MechanismError
    """
    if not catalog:
        raise CatalogError("The section catalog is empty.")

    beam, catalog = _sorted_catalog(beam, catalog)

    try:
        beam = seed_sections(beam, catalog, config)
    except MechanismError as exc:
        logger.warning("Optimization aborted while seeding: %s", exc)
        return OptimizationResult(
            beam=beam, catalog=catalog,
            sections=[s.section_index for s in beam.segments],
            iterations=0, converged=False, error=exc,
        )

    indices = [seg.section_index for seg in beam.segments]
    history: List[IterationRecord] = []
    solution = None
    peaks: List[float] = []
    converged = False

    for iteration in range(1, config.max_iterations + 1):
        try:
            solution = solve_beam(beam)
        except MechanismError as exc:
            logger.warning("Optimization aborted at pass %d: %s", iteration, exc)
            return OptimizationResult(
                beam=beam, catalog=catalog, sections=indices,
                iterations=iteration - 1, converged=False,
                history=history, error=exc,
            )

        peaks = [s['sigma_max_abs'] for s in stress_extrema(beam, solution.element_forces)]
        new_indices = resize_step(indices, peaks, len(catalog), config)
        changed = [i for i, (a, b) in enumerate(zip(indices, new_indices)) if a != b]
        history.append(IterationRecord(iteration, list(indices), peaks, changed))
        logger.debug("Pass %d: sections=%s changed=%s", iteration, indices, changed)

        if not changed:
            converged = True
            break

        indices = new_indices
        beam = assign_sections(beam, catalog, indices)
    else:
        # cap reached: measure the last assignment so peaks match the beam
        try:
            solution = solve_beam(beam)
        except MechanismError as exc:
            logger.warning("Final solve failed: %s", exc)
            return OptimizationResult(
                beam=beam, catalog=catalog, sections=indices,
                iterations=config.max_iterations, converged=False,
                history=history, error=exc,
            )
        peaks = [s['sigma_max_abs'] for s in stress_extrema(beam, solution.element_forces)]

    logger.info(
        "Section optimization %s after %d passes: %s",
        "converged" if converged else "stopped at the iteration cap",
        len(history), [catalog[k].name for k in indices],
    )
    return OptimizationResult(
        beam=beam, catalog=catalog, sections=indices,
        iterations=len(history), converged=converged,
        peak_stress=peaks, history=history, solution=solution,
    )
