# beamline - Continuous beam analysis and discrete section sizing
"""
BEAMLINE: Continuous Beam Analysis
==================================

This package provides:
- direct stiffness analysis of a chain of Euler-Bernoulli segments, with
  hinges, springs, supports and prescribed displacements
- linearly varying distributed loads plus self-weight
- analytic shear / moment / stress diagrams
- discrete cross-section sizing against a small section catalog

ARCHITECTURE:
-------------
    kernel/         DOF map with moment releases, scatter-add, constrained solve
    model.py        Node, Segment, Beam snapshot
    elements.py     Element stiffness and Hermite shape functions
    loads.py        Consistent loads, nodal loads and springs
    assembly.py     Global K and F for a beam
    solve.py        Supports / prescribed values and solve_beam
    post.py         Element end forces and analytic internal force fields
    diagrams.py     Diagram series, extrema and result table
    catalog.py      Sections, materials, catalog CSV exchange
    shapes.py       Section properties of common shapes
    optimize.py     Discrete section optimizer
"""

from .kernel import MechanismError, build_dof_map
from .model import Beam, GeometryError, Node, Segment, build_beam, make_beam
from .solve import BeamSolution, solve, solve_beam
from .post import ElementForces
from .catalog import CatalogError, Section, load_catalog
from .optimize import OptimizerConfig, optimize_sections

__version__ = "0.1.0"
