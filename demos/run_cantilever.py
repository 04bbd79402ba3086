# File: demos/run_cantilever.py
"""
DEMO: CANTILEVER WITH A TIP LOAD
================================

A single fixed support at the left end, a downward point load at the free
end. The beam is meshed into several segments and the solution is checked
against the textbook formulas:

    tip deflection     δ = -PL³ / (3EI)
    tip rotation       θ = -PL² / (2EI)
    root moment        M(0) = -PL       (hogging)
    root reaction      R = +P

Writes artifacts/cantilever_results.csv and artifacts/cantilever.png.
"""

import logging
from pathlib import Path

import numpy as np

from beamline.diagrams import beam_summary, export_results_csv
from beamline.model import FIXED, Node, Segment, build_beam
from beamline.post import nodal_results
from beamline.solve import solve_beam

from _plotting import plot_diagrams

ARTIFACTS = Path("artifacts")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 70)
    print("DEMO: CANTILEVER WITH A TIP LOAD")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # STEP 1: problem definition (US units: in, lb, psi)
    # ------------------------------------------------------------------
    L = 120.0        # in
    E = 29e6         # psi (steel)
    I = 30.8         # in⁴ (W8x10)
    S = 7.81         # in³
    P = 1000.0       # lb, downward

    beam = build_beam(4, L, Segment(E=E, I=I, L=1.0, St=S, Sb=S))
    beam = beam.with_node(0, Node(bc=FIXED))
    beam = beam.with_node(4, Node(F=-P))

    print(f"Length L:                  {L:.1f} in")
    print(f"E, I:                      {E:.3g} psi, {I:.3g} in⁴")
    print(f"Tip load P:                {P:.1f} lb (downward)")
    print(f"Segments:                  {beam.n_segments}")
    print()

    # ------------------------------------------------------------------
    # STEP 2: solve
    # ------------------------------------------------------------------
    sol = solve_beam(beam)
    nodes = nodal_results(sol)

    w_tip = nodes[-1]['w']
    th_tip = nodes[-1]['theta']
    w_theory = -P * L**3 / (3 * E * I)
    th_theory = -P * L**2 / (2 * E * I)

    print("RESULTS vs THEORY")
    print("-" * 70)
    print(f"  Tip deflection:          {w_tip:.6f} in   (theory {w_theory:.6f})")
    print(f"  Tip rotation:            {th_tip:.6e} rad (theory {th_theory:.6e})")
    print(f"  Root reaction:           {nodes[0]['R']:.2f} lb   (theory {P:.2f})")
    print(f"  Root moment reaction:    {nodes[0]['Rm']:.2f} lb·in (theory {P * L:.2f})")
    print(f"  Root internal moment:    {sol.element_forces[0].M1:.2f} lb·in (theory {-P * L:.2f})")
    match = np.isclose(w_tip, w_theory, rtol=1e-9) and np.isclose(th_tip, th_theory, rtol=1e-9)
    print(f"  Theory match:            {'✓ PASS' if match else '✗ FAIL'}")
    print()

    summary = beam_summary(sol)
    print(f"  Peak |M|:                {summary['max_moment']:.2f} at x = {summary['critical_x_moment']:.2f}")
    print(f"  Peak stress |M|/S:       {summary['max_moment'] / S:.1f} psi")
    print()

    # ------------------------------------------------------------------
    # STEP 3: export
    # ------------------------------------------------------------------
    ARTIFACTS.mkdir(exist_ok=True)
    csv_path = ARTIFACTS / "cantilever_results.csv"
    export_results_csv(sol, csv_path)
    png_path = plot_diagrams(sol, ARTIFACTS / "cantilever.png", "Cantilever with tip load")

    print(f"Results table:             {csv_path}")
    print(f"Diagrams:                  {png_path}")


if __name__ == "__main__":
    main()
