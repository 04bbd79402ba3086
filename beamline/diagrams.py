# beamline/diagrams.py
"""
DIAGRAM RECONSTRUCTION
======================

This module turns a discrete solution into continuous diagrams along the
beam: deflection w(x), shear V(x), moment M(x) and fibre stresses.

KEY CONCEPTS:
-------------
- Deflection uses the cubic Hermite interpolation of the end values, i.e.
  exactly the displacement field the element assumes.
- Shear and moment are NOT interpolated. They are recovered analytically
  from the left-end shear V1, the right-end moment and the segment's
  linear load q(x), so a parabolic or cubic moment is captured exactly:

      V(x) = V1 - (qL·x + Δq·x² / 2L)
      M(x) = M_right + V1·(L - x) - ½·qL·(L² - x²) - (Δq / 6L)·(L³ - x³)

SIGN CONVENTIONS:
-----------------
- w positive upward
- q positive upward, dV/dx = -q
- M positive sagging (tension on the bottom face), dM/dx = -V
- Stress tension positive: σ_top = -M / St, σ_bottom = M / Sb

Every function is stateless: it reads (beam, solution or element forces)
and returns fresh samples. Sample counts are a presentation choice.
Beam-wide series skip the first sample of each segment after the first
so a shared node appears once.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .config import CONFIG
from .model import Beam
from .post import (
    ElementForces,
    bending_stress_at,
    deflection_at,
    element_displacements,
    moment_at,
    shear_at,
)

RESULT_COLUMNS = [
    'x',
    'w(up+)',
    'V',
    'M',
    'sigma_top(tension+)',
    'sigma_bottom(tension+)',
]


@dataclass
class DiagramPoint:
    """A single point on a diagram."""
    x: float            # Global position along the beam
    value: float
    segment: int


@dataclass
class StressPoint:
    """Fibre stresses at one position; None where the face is not evaluated."""
    x: float
    top: Optional[float]
    bottom: Optional[float]
    segment: int


def _local_positions(L: float, n_points: int, skip_first: bool) -> np.ndarray:
    start = 1 if skip_first else 0
    return np.arange(start, n_points + 1) / n_points * L


def displacement_diagram(solution, n_points: Optional[int] = None) -> List[DiagramPoint]:
    """
    Deflected shape along the whole beam.

    Parameters:
    -----------
    solution : BeamSolution
        Solve result (u is read through its DOF map)
    n_points : int, optional
        Intervals per segment (default CONFIG.displacement_samples)
    """
    n_points = n_points or CONFIG.displacement_samples
    beam = solution.beam
    points = []
    for e, (seg, x0) in enumerate(zip(beam.segments, beam.segment_offsets)):
        ue = element_displacements(solution.dof, solution.u, e)
        for x in _local_positions(seg.L, n_points, skip_first=e > 0):
            points.append(DiagramPoint(x=x0 + x, value=deflection_at(seg.L, ue, x), segment=e))
    return points


def shear_diagram(
    beam: Beam,
    forces: Sequence[ElementForces],
    n_points: Optional[int] = None
) -> List[DiagramPoint]:
    """Shear force V(x) along the whole beam."""
    n_points = n_points or CONFIG.force_samples
    points = []
    for e, (seg, ef, x0) in enumerate(zip(beam.segments, forces, beam.segment_offsets)):
        xs = _local_positions(ef.L, n_points, skip_first=e > 0)
        for x, V in zip(xs, shear_at(seg, ef, xs)):
            points.append(DiagramPoint(x=x0 + x, value=float(V), segment=e))
    return points


def moment_diagram(
    beam: Beam,
    forces: Sequence[ElementForces],
    n_points: Optional[int] = None
) -> List[DiagramPoint]:
    """Bending moment M(x) along the whole beam."""
    n_points = n_points or CONFIG.force_samples
    points = []
    for e, (seg, ef, x0) in enumerate(zip(beam.segments, forces, beam.segment_offsets)):
        xs = _local_positions(ef.L, n_points, skip_first=e > 0)
        for x, M in zip(xs, moment_at(seg, ef, xs)):
            points.append(DiagramPoint(x=x0 + x, value=float(M), segment=e))
    return points


def stress_diagram(
    beam: Beam,
    forces: Sequence[ElementForces],
    n_points: Optional[int] = None
) -> List[StressPoint]:
    """Top/bottom bending stress along the whole beam."""
    n_points = n_points or CONFIG.force_samples
    points = []
    for e, (seg, ef, x0) in enumerate(zip(beam.segments, forces, beam.segment_offsets)):
        xs = _local_positions(ef.L, n_points, skip_first=e > 0)
        for x, M in zip(xs, moment_at(seg, ef, xs)):
            top, bottom = bending_stress_at(seg, float(M), CONFIG.modulus_epsilon)
            points.append(StressPoint(x=x0 + x, top=top, bottom=bottom, segment=e))
    return points


def moment_extrema(
    beam: Beam,
    forces: Sequence[ElementForces],
    n_points: Optional[int] = None
) -> List[Dict[str, float]]:
    """Per segment: largest positive ('M_max') and most negative ('M_min') moment."""
    n_points = n_points or CONFIG.optimizer_samples
    out = []
    for seg, ef in zip(beam.segments, forces):
        M = moment_at(seg, ef, _local_positions(ef.L, n_points, skip_first=False))
        out.append({'M_max': float(M.max()), 'M_min': float(M.min())})
    return out


def stress_extrema(
    beam: Beam,
    forces: Sequence[ElementForces],
    n_points: Optional[int] = None
) -> List[Dict[str, float]]:
    """
    Per segment peak stresses.

    Returns:
    --------
    List[Dict]
        'sigma_max_abs': largest |σ| over both faces
        'sigma_top', 'sigma_bottom': signed value with the largest magnitude
        on that face (0 where the face is not evaluated)
    """
    n_points = n_points or CONFIG.optimizer_samples
    out = []
    for seg, ef in zip(beam.segments, forces):
        M = moment_at(seg, ef, _local_positions(ef.L, n_points, skip_first=False))
        top, bottom = bending_stress_at(seg, M, CONFIG.modulus_epsilon)
        top = np.zeros_like(M) if top is None else top
        bottom = np.zeros_like(M) if bottom is None else bottom

        peak = np.maximum(np.abs(top), np.abs(bottom))
        out.append({
            'sigma_max_abs': float(peak.max()),
            'sigma_top': float(top[np.argmax(np.abs(top))]),
            'sigma_bottom': float(bottom[np.argmax(np.abs(bottom))]),
        })
    return out


def beam_summary(solution, n_points: Optional[int] = None) -> Dict:
    """
    Peak |w|, |V|, |M| over the beam and the segment where each occurs.
    """
    beam = solution.beam
    forces = solution.element_forces
    series = {
        'deflection': displacement_diagram(solution, n_points),
        'shear': shear_diagram(beam, forces, n_points),
        'moment': moment_diagram(beam, forces, n_points),
    }

    summary = {}
    for name, points in series.items():
        critical = max(points, key=lambda p: abs(p.value))
        summary[f"max_{name}"] = abs(critical.value)
        summary[f"critical_segment_{name}"] = critical.segment
        summary[f"critical_x_{name}"] = critical.x
    return summary


def results_table(solution, n_points: Optional[int] = None) -> pd.DataFrame:
    """
    One row per sampled position: x, w, V, M, σ_top, σ_bottom.

    Stress columns are NaN (blank in CSV) where the section modulus is unset.
    """
    n_points = n_points or CONFIG.displacement_samples
    beam = solution.beam
    rows = []
    for e, (seg, ef, x0) in enumerate(zip(beam.segments, solution.element_forces, beam.segment_offsets)):
        ue = element_displacements(solution.dof, solution.u, e)
        for x in _local_positions(seg.L, n_points, skip_first=e > 0):
            M = float(moment_at(seg, ef, x))
            top, bottom = bending_stress_at(seg, M, CONFIG.modulus_epsilon)
            rows.append([
                round(x0 + x, 6),
                deflection_at(seg.L, ue, x),
                float(shear_at(seg, ef, x)),
                M,
                np.nan if top is None else top,
                np.nan if bottom is None else bottom,
            ])
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def export_results_csv(solution, path=None, n_points: Optional[int] = None) -> str:
    """
    Write the result table as CSV.

    Returns the CSV text; also writes it to `path` when given.
    """
    df = results_table(solution, n_points)
    text = df.to_csv(index=False, na_rep='')
    if path is not None:
        with open(path, 'w', newline='') as f:
            f.write(text)
    return text
