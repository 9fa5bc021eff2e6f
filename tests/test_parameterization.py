import numpy as np
import pytest

from transfinite.curves import line_curve
from transfinite.domain import RegularDomain
from transfinite.geom import lerp
from transfinite.parameterization import BarycentricKind, BarycentricParameterization


def _param(n, kind='wachspress'):
    dom = RegularDomain()
    dom.set_sides([line_curve((0, 0, 0), (1, 0, 0))] * n)
    dom.update()
    param = BarycentricParameterization(kind)
    param.set_domain(dom)
    param.update()
    return dom, param


def test_kind_from_string():
    assert BarycentricParameterization('mean_value').kind is BarycentricKind.MEAN_VALUE
    assert BarycentricParameterization().kind is BarycentricKind.WACHSPRESS
    with pytest.raises(ValueError):
        BarycentricParameterization('harmonic')


@pytest.mark.parametrize('kind', ['wachspress', 'mean_value'])
def test_center_of_square(kind):
    dom, param = _param(4, kind)
    bc = param.barycentric(dom.center)
    assert np.allclose(bc, 0.25)
    for s, d in param.map_to_ribbons(dom.center):
        assert abs(s - 0.5) < 1e-12
        assert abs(d - 0.5) < 1e-12


@pytest.mark.parametrize('kind', ['wachspress', 'mean_value'])
@pytest.mark.parametrize('n', [3, 5, 6])
def test_linear_precision(kind, n):
    dom, param = _param(n, kind)
    verts = dom.vertices
    for uv in [(0.1, 0.2), (-0.3, 0.05), (0.2, -0.4)]:
        bc = param.barycentric(uv)
        assert abs(bc.sum() - 1.0) < 1e-12
        assert np.all(bc > 0.0)
        assert np.allclose(bc @ verts, uv)


@pytest.mark.parametrize('kind', ['wachspress', 'mean_value'])
def test_point_on_side(kind):
    dom, param = _param(5, kind)
    verts = dom.vertices
    i = 2
    uv = lerp(verts[i - 1], verts[i], 0.3)
    sds = param.map_to_ribbons(uv)
    s, d = sds[i]
    assert abs(d) < 1e-12
    assert abs(s - 0.3) < 1e-12
    # neighbouring sides see the point at their far and near ends
    assert abs(sds[i - 1][0] - 1.0) < 1e-12
    assert abs(sds[i - 1][1] - 0.3) < 1e-12
    assert abs(sds[i + 1][0]) < 1e-12
    assert abs(sds[i + 1][1] - 0.7) < 1e-12
    assert all(sd[1] > 0.0 for j, sd in enumerate(sds) if j != i)


def test_vertex_coordinates():
    dom, param = _param(4)
    verts = dom.vertices
    for i in range(4):
        ip = (i + 1) % 4
        sds = param.map_to_ribbons(verts[i])
        assert abs(sds[i][0] - 1.0) < 1e-12 and abs(sds[i][1]) < 1e-12
        assert abs(sds[ip][0]) < 1e-12 and abs(sds[ip][1]) < 1e-12
        for j in range(4):
            if j not in (i, ip):
                assert np.all(np.isfinite(sds[j]))
                assert abs(sds[j][1] - 1.0) < 1e-12


def test_map_to_ribbon_matches_map_to_ribbons():
    dom, param = _param(6, 'mean_value')
    uv = (0.15, -0.2)
    sds = param.map_to_ribbons(uv)
    for i in range(6):
        assert np.allclose(param.map_to_ribbon(i, uv), sds[i])
