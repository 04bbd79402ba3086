"""
Section property calculator for common cross-section shapes.

Each function returns SectionProperties(A, I, St, Sb) for bending about
the horizontal axis. Symmetric shapes give St == Sb; the T-beam (flange
on top) does not.
"""

import math
from dataclasses import dataclass, replace

from .model import Segment


@dataclass(frozen=True)
class SectionProperties:
    A: float
    I: float
    St: float
    Sb: float


def _symmetric(A: float, I: float, depth: float) -> SectionProperties:
    S = I / (depth / 2.0)
    return SectionProperties(A=A, I=I, St=S, Sb=S)


def rectangle(b: float, h: float) -> SectionProperties:
    if not (b > 0 and h > 0):
        raise ValueError("Enter b,h > 0")
    return _symmetric(b * h, b * h**3 / 12.0, h)


def circle(od: float, d_in: float = 0.0) -> SectionProperties:
    """Solid (d_in = 0) or hollow circular section."""
    if not od > 0 or d_in < 0 or d_in >= od:
        raise ValueError("Require OD>0 and 0<=ID<OD")
    A = math.pi * (od**2 - d_in**2) / 4.0
    I = math.pi * (od**4 - d_in**4) / 64.0
    return _symmetric(A, I, od)


def rectangular_tube(bo: float, ho: float, bi: float, hi: float) -> SectionProperties:
    if not (bo > 0 and ho > 0 and bi >= 0 and hi >= 0 and bo > bi and ho > hi):
        raise ValueError("Require bo>bi>=0 and ho>hi>=0")
    A = bo * ho - bi * hi
    I = (bo * ho**3 - bi * hi**3) / 12.0
    return _symmetric(A, I, ho)


def i_beam(h: float, bf: float, tf: float, tw: float) -> SectionProperties:
    """Doubly symmetric I-beam. A channel bends the same way about this axis."""
    if not (h > 0 and bf > 0 and tf > 0 and tw > 0 and h > 2 * tf):
        raise ValueError("Check dimensions: h>2tf and positive")
    hw = h - 2 * tf
    A = 2 * bf * tf + tw * hw
    d = h / 2.0 - tf / 2.0
    I = 2 * (bf * tf**3 / 12.0 + bf * tf * d**2) + tw * hw**3 / 12.0
    return _symmetric(A, I, h)


channel = i_beam


def t_beam(h: float, bf: float, tf: float, tw: float) -> SectionProperties:
    """T-section with the flange at the top; the neutral axis sits above mid-depth."""
    if not (h > 0 and bf > 0 and tf > 0 and tw > 0 and h > tf):
        raise ValueError("Check dimensions: h>tf and positive")
    hw = h - tf
    A_f, y_f, I_f = bf * tf, h - tf / 2.0, bf * tf**3 / 12.0
    A_w, y_w, I_w = tw * hw, hw / 2.0, tw * hw**3 / 12.0

    A = A_f + A_w
    ybar = (A_f * y_f + A_w * y_w) / A
    I = I_f + A_f * (y_f - ybar)**2 + I_w + A_w * (y_w - ybar)**2
    return SectionProperties(A=A, I=I, St=I / (h - ybar), Sb=I / ybar)


def apply_section_properties(seg: Segment, props: SectionProperties) -> Segment:
    """Copy A, I, St, Sb onto a segment; it no longer refers to a catalog entry."""
    return replace(seg, A=props.A, I=props.I, St=props.St, Sb=props.Sb, section_index=None)
