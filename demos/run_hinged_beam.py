# File: demos/run_hinged_beam.py
"""
DEMO: GERBER BEAM WITH AN INTERNAL HINGE
========================================

Three spans over four supports with a moment release in the middle span:

    ▲──────────▲─────○────▲──────────■
    pinned   pinned hinge pinned   fixed

The hinge carries shear but no moment, so the bending moment diagram must
pass through zero there. A linearly varying load on the last span and the
self-weight of a steel section are included.

Writes artifacts/hinged_beam_results.csv and artifacts/hinged_beam.png.
"""

import logging
from dataclasses import replace
from pathlib import Path

from beamline.catalog import DEFAULT_CATALOG, apply_material, apply_section, material_preset
from beamline.diagrams import beam_summary, export_results_csv, moment_extrema
from beamline.model import FIXED, PINNED, Beam, Node, Segment
from beamline.post import moment_at, nodal_results
from beamline.solve import solve_beam

from _plotting import plot_diagrams

ARTIFACTS = Path("artifacts")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 70)
    print("DEMO: CONTINUOUS BEAM WITH AN INTERNAL HINGE")
    print("=" * 70)
    print()

    steel = material_preset("steel")
    base = apply_material(Segment(E=1.0, I=1.0, L=1.0), steel)
    base = apply_section(base, DEFAULT_CATALOG, 5)  # W12x16

    segments = (
        replace(base, L=144.0, qL=-50.0, qR=-50.0),
        replace(base, L=72.0, qL=-50.0, qR=-50.0),
        replace(base, L=72.0, qL=-50.0, qR=-50.0),
        replace(base, L=180.0, qL=-50.0, qR=-120.0),
    )
    nodes = (
        Node(bc=PINNED),
        Node(bc=PINNED),
        Node(hinge=True, F=-2000.0),
        Node(bc=PINNED),
        Node(bc=FIXED),
    )
    beam = Beam(nodes, segments)

    sol = solve_beam(beam)

    print("NODES")
    print("-" * 70)
    print(f"  {'node':>4} {'w':>12} {'θL':>12} {'θR':>12} {'R':>12} {'Rm':>12}")
    for i, r in enumerate(nodal_results(sol)):
        print(
            f"  {i:>4} {r['w']:>12.5f} {r['theta_left'] or 0.0:>12.3e} "
            f"{r['theta_right'] or 0.0:>12.3e} {r['R']:>12.1f} {r['Rm']:>12.1f}"
        )
    print()

    # moment must vanish on both faces of the hinge
    left = moment_at(beam.segments[1], sol.element_forces[1], beam.segments[1].L)
    right = moment_at(beam.segments[2], sol.element_forces[2], 0.0)
    print(f"Moment at hinge:           left {left:.3e}, right {right:.3e}")

    print("\nPER-SEGMENT MOMENT EXTREMA")
    print("-" * 70)
    for e, ext in enumerate(moment_extrema(beam, sol.element_forces)):
        print(f"  segment {e}: M_max = {ext['M_max']:>12.1f}   M_min = {ext['M_min']:>12.1f}")

    summary = beam_summary(sol)
    print()
    print(f"Peak |w|:                  {summary['max_deflection']:.5f} in "
          f"(segment {summary['critical_segment_deflection']})")
    print(f"Peak |M|:                  {summary['max_moment']:.1f} lb·in "
          f"(segment {summary['critical_segment_moment']})")
    print()

    ARTIFACTS.mkdir(exist_ok=True)
    csv_path = ARTIFACTS / "hinged_beam_results.csv"
    export_results_csv(sol, csv_path)
    png_path = plot_diagrams(sol, ARTIFACTS / "hinged_beam.png", "Beam with internal hinge")

    print(f"Results table:             {csv_path}")
    print(f"Diagrams:                  {png_path}")


if __name__ == "__main__":
    main()
