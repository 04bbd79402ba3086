"""
Plot helpers shared by the demo scripts.

Private helper module: draws deflection, shear and moment diagrams of a
solved beam into one figure and saves it under artifacts/.
"""

from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from beamline.diagrams import displacement_diagram, moment_diagram, shear_diagram


def plot_diagrams(solution, path, title: str = "") -> Path:
    """
    Save a three-panel figure (w, V, M) of a solved beam.

    Parameters
    ----------
    solution : BeamSolution
        Result of solve_beam
    path : str or Path
        Output PNG file; parent folders are created
    title : str
        Figure title

    Returns
    -------
    Path
        The written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    beam = solution.beam
    series = [
        ("w (up+)", displacement_diagram(solution), "tab:blue"),
        ("V", shear_diagram(beam, solution.element_forces), "tab:green"),
        ("M (sagging+)", moment_diagram(beam, solution.element_forces), "tab:red"),
    ]

    fig, axes = plt.subplots(3, 1, figsize=(10, 8), sharex=True)
    for ax, (label, points, color) in zip(axes, series):
        xs = [p.x for p in points]
        ys = [p.value for p in points]
        ax.plot(xs, ys, color=color, linewidth=2)
        ax.fill_between(xs, ys, alpha=0.2, color=color)
        ax.axhline(0.0, color="k", linewidth=0.8, alpha=0.5)
        ax.set_ylabel(label)
        ax.grid(True, alpha=0.3)

    # node positions
    x = 0.0
    for node, seg in zip(beam.nodes, (*beam.segments, None)):
        for ax in axes:
            ax.axvline(x, color="gray", linestyle=":", linewidth=0.8)
        if node.bc != "free":
            axes[0].plot(x, 0.0, "k^", markersize=10)
        if node.hinge:
            axes[0].plot(x, 0.0, "wo", markeredgecolor="k", markersize=8)
        if seg is not None:
            x += seg.L

    axes[-1].set_xlabel("x")
    if title:
        fig.suptitle(title)
    fig.tight_layout()
    fig.savefig(path, dpi=120)
    plt.close(fig)
    return path
