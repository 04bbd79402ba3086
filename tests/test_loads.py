# File: tests/test_loads.py
"""
Test consistent load vectors for linear distributed loads and self-weight,
and how nodal forces, moments and springs land in K and F.
"""

import numpy as np
import pytest

from beamline.assembly import assemble_system
from beamline.loads import consistent_load_vector, segment_load_vector
from beamline.model import Beam, Node, Segment


def test_uniform_load_vector():
    """Uniform w over L: [wL/2, wL²/12, wL/2, -wL²/12]."""
    L = 4.0
    w = -1000.0

    f = consistent_load_vector(L, w, w)

    expected = np.array([w * L / 2, w * L**2 / 12, w * L / 2, -w * L**2 / 12])
    np.testing.assert_allclose(f, expected, rtol=1e-12, atol=1e-9)


def test_triangular_load_vector():
    """
    Load rising linearly from 0 to q at the right end:
    [3qL/20, qL²/30, 7qL/20, -qL²/20].
    """
    L = 5.0
    q = -8.0

    f = consistent_load_vector(L, 0.0, q)

    expected = np.array([3 * q * L / 20, q * L**2 / 30, 7 * q * L / 20, -q * L**2 / 20])
    np.testing.assert_allclose(f, expected, rtol=1e-12, atol=1e-9)


def test_load_vector_resultant():
    """Force terms add up to the load resultant (qL + qR)·L/2."""
    L, qL, qR = 3.0, -2.0, 7.0
    f = consistent_load_vector(L, qL, qR)
    assert f[0] + f[2] == pytest.approx((qL + qR) * L / 2, rel=1e-12)


def test_self_weight_superposed_downward():
    """wd·A acts as an extra downward uniform load."""
    seg = Segment(E=1e6, I=100.0, L=10.0, A=4.0, wd=0.5, qL=1.0, qR=3.0)

    assert seg.effective_q == (1.0 - 2.0, 3.0 - 2.0)
    np.testing.assert_allclose(
        segment_load_vector(seg),
        consistent_load_vector(10.0, -1.0, 1.0),
    )


def test_self_weight_zero_without_area():
    seg = Segment(E=1e6, I=100.0, L=10.0, A=0.0, wd=0.5)
    np.testing.assert_allclose(segment_load_vector(seg), np.zeros(4), atol=1e-15)


def _two_segment_beam(middle: Node) -> Beam:
    seg = Segment(E=1e6, I=100.0, L=5.0)
    return Beam((Node(bc="fixed"), middle, Node(bc="fixed")), (seg, seg))


def test_point_force_and_springs():
    K0, _, dof = assemble_system(_two_segment_beam(Node()))
    K, F, _ = assemble_system(_two_segment_beam(Node(F=-50.0, Kv=200.0, Km=300.0)))

    w1 = dof.vertical[1]
    r1 = dof.rotations[1].index
    assert F[w1] == -50.0
    assert K[w1, w1] - K0[w1, w1] == pytest.approx(200.0)
    assert K[r1, r1] - K0[r1, r1] == pytest.approx(300.0)


def test_moment_at_continuous_node():
    _, F, dof = assemble_system(_two_segment_beam(Node(M=40.0)))
    assert F[dof.rotations[1].index] == 40.0


def test_moment_at_hinge_split_between_faces():
    _, F, dof = assemble_system(_two_segment_beam(Node(M=40.0, hinge=True)))
    slots = dof.rotations[1]

    assert F[slots.left] == pytest.approx(20.0)
    assert F[slots.right] == pytest.approx(20.0)
