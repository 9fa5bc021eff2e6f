import gc

import numpy as np
import pytest

from transfinite.curves import bezier_curve, line_curve
from transfinite.ribbon import CompatibleRibbon, LinearRibbon, blend_hermite


def _triangle_ribbons(ribbon_class):
    curves = [
        bezier_curve([(0, 0, 0), (0.5, -0.2, 0.3), (1, 0, 0)]),
        bezier_curve([(1, 0, 0), (0.8, 0.6, 0.2), (0.5, 1, 0)]),
        line_curve((0.5, 1, 0), (0, 0, 0)),
    ]
    ribbons = []
    for c in curves:
        r = ribbon_class()
        r.set_curve(c)
        ribbons.append(r)
    for i, r in enumerate(ribbons):
        r.set_neighbors(ribbons[i - 1], ribbons[(i + 1) % 3])
    for r in ribbons:
        r.update()
    return ribbons


def test_blend_hermite():
    assert blend_hermite(0.0) == 1.0
    assert blend_hermite(1.0) == 0.0
    assert blend_hermite(0.5) == 0.5
    assert blend_hermite(0.25) + blend_hermite(0.75) == pytest.approx(1.0)


@pytest.mark.parametrize('ribbon_class', [CompatibleRibbon, LinearRibbon])
def test_ribbon_reproduces_curve(ribbon_class):
    ribbons = _triangle_ribbons(ribbon_class)
    for r in ribbons:
        for s in (0.0, 0.3, 1.0):
            assert np.allclose(r.eval((s, 0.0)), r.curve.eval(s))


@pytest.mark.parametrize('ribbon_class', [CompatibleRibbon, LinearRibbon])
def test_cross_derivative_matches_neighbours(ribbon_class):
    ribbons = _triangle_ribbons(ribbon_class)
    for i, r in enumerate(ribbons):
        prev_curve = ribbons[i - 1].curve
        next_curve = ribbons[(i + 1) % 3].curve
        assert np.allclose(r.cross_derivative(0.0), -prev_curve.derivatives(1.0, 1)[1])
        assert np.allclose(r.cross_derivative(1.0), next_curve.derivatives(0.0, 1)[1])
        assert np.allclose(r.prev_tangent, r.cross_derivative(0.0))
        assert np.allclose(r.next_tangent, r.cross_derivative(1.0))


def test_ribbon_is_linear_in_distance():
    r = _triangle_ribbons(CompatibleRibbon)[1]
    base = r.eval((0.4, 0.0))
    step = r.eval((0.4, 1.0)) - base
    assert np.allclose(r.eval((0.4, 0.25)), base + 0.25 * step)


def test_linear_ribbon_midpoint():
    r = _triangle_ribbons(LinearRibbon)[0]
    assert np.allclose(r.cross_derivative(0.5), 0.5 * (r.prev_tangent + r.next_tangent))


def test_compatible_ribbon_flat_ends():
    r = _triangle_ribbons(CompatibleRibbon)[2]
    h = 1e-6
    slope = (r.cross_derivative(h) - r.cross_derivative(0.0)) / h
    assert np.linalg.norm(slope) < 1e-4


def test_neighbours_are_not_owned():
    a = CompatibleRibbon(line_curve((0, 0, 0), (1, 0, 0)))
    b = CompatibleRibbon(line_curve((1, 0, 0), (0, 1, 0)))
    a.set_neighbors(b, b)
    linked = a.prev is b and a.next is b
    assert linked
    del b
    gc.collect()
    assert a.prev is None
    assert a.next is None
