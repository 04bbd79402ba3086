import math

import pytest

from beamline import shapes
from beamline.model import Segment


def test_rectangle():
    p = shapes.rectangle(2.0, 6.0)
    assert (p.A, p.I, p.St, p.Sb) == pytest.approx((12.0, 36.0, 12.0, 12.0))


def test_circle_solid_and_hollow():
    solid = shapes.circle(2.0)
    assert solid.I == pytest.approx(math.pi / 4)
    assert solid.St == pytest.approx(math.pi / 4)

    tube = shapes.circle(2.0, d_in=1.0)
    assert tube.A == pytest.approx(math.pi * 3 / 4)
    assert tube.I < solid.I


def test_full_web_i_beam_is_a_rectangle():
    """An I-beam whose web is as wide as the flanges is a rectangle."""
    ib = shapes.i_beam(h=10.0, bf=4.0, tf=1.0, tw=4.0)
    rect = shapes.rectangle(4.0, 10.0)

    assert ib.A == pytest.approx(rect.A)
    assert ib.I == pytest.approx(rect.I)
    assert ib.St == pytest.approx(rect.St)


def test_tube_without_hole_is_a_rectangle():
    assert shapes.rectangular_tube(3.0, 5.0, 0.0, 0.0) == shapes.rectangle(3.0, 5.0)


def test_t_beam_neutral_axis_above_mid_depth():
    t = shapes.t_beam(h=10.0, bf=8.0, tf=1.0, tw=1.0)
    # flange on top: top fibre is closer to the neutral axis
    assert t.St > t.Sb
    assert t.A == pytest.approx(8.0 + 9.0)


@pytest.mark.parametrize("call", [
    lambda: shapes.rectangle(0.0, 1.0),
    lambda: shapes.circle(1.0, 1.0),
    lambda: shapes.rectangular_tube(2.0, 2.0, 3.0, 1.0),
    lambda: shapes.i_beam(h=2.0, bf=4.0, tf=1.0, tw=1.0),
    lambda: shapes.t_beam(h=1.0, bf=4.0, tf=1.0, tw=1.0),
])
def test_invalid_dimensions(call):
    with pytest.raises(ValueError):
        call()


def test_apply_section_properties_clears_catalog_index():
    seg = Segment(E=1.0, I=1.0, L=1.0, section_index=3)
    out = shapes.apply_section_properties(seg, shapes.rectangle(2.0, 6.0))

    assert out.section_index is None
    assert (out.A, out.I, out.St, out.Sb) == pytest.approx((12.0, 36.0, 12.0, 12.0))
