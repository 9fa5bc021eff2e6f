from math import cos, pi

import numpy as np
import pytest

from transfinite.curves import line_curve
from transfinite.domain import RegularDomain


def _domain(n):
    dom = RegularDomain()
    dom.set_sides([line_curve((0, 0, 0), (1, 0, 0)) for _ in range(n)])
    dom.update()
    return dom


def test_update_reports_changes_only_once():
    dom = RegularDomain()
    dom.set_sides([line_curve((0, 0, 0), (1, 0, 0))] * 4)
    assert dom.update() is True
    assert dom.update() is False

    dom.set_side(4, line_curve((0, 0, 0), (1, 0, 0)))
    assert dom.n == 5
    assert dom.update() is True
    assert len(dom.vertices) == 5


def test_same_side_count_keeps_polygon():
    dom = _domain(4)
    dom.set_sides([line_curve((0, 0, 0), (2, 0, 0))] * 4)
    assert dom.update() is False


@pytest.mark.parametrize('n', [3, 4, 5, 6])
def test_regular_polygon(n):
    dom = _domain(n)
    verts = dom.vertices
    assert verts.shape == (n, 2)
    assert np.allclose(np.linalg.norm(verts, axis=1), 1.0)
    assert np.allclose(dom.center, (0.0, 0.0))
    for i in range(n):
        assert abs(dom.edge_length(i) - 2.0 * cos(pi / 2.0 - pi / n)) < 1e-12
    # side 0 (vertex n-1 -> vertex 0) is the horizontal bottom edge
    assert abs(verts[n - 1][1] - verts[0][1]) < 1e-12
    assert verts[0][1] < 0.0
    assert verts[0][0] > verts[n - 1][0]


@pytest.mark.parametrize('n, resolution', [(3, 1), (4, 3), (5, 6)])
def test_parameters_and_topology_agree(n, resolution):
    dom = _domain(n)
    params = dom.parameters(resolution)
    mesh = dom.mesh_topology(resolution)

    size = dom.mesh_size(resolution)
    assert len(params) == size
    assert len(mesh.points()) == size
    tris = mesh.triangles()
    assert len(tris) == n * resolution * resolution
    used = set()
    for tri in tris:
        assert len(set(tri)) == 3
        assert all(0 <= idx < size for idx in tri)
        used.update(tri)
    assert used == set(range(size))


def test_parameters_layout():
    dom = _domain(4)
    resolution = 3
    params = dom.parameters(resolution)
    verts = dom.vertices

    assert np.allclose(params[0], dom.center)
    outer = params[-4 * resolution:]
    # outer ring starts at the first vertex of each side
    for k in range(4):
        assert np.allclose(outer[k * resolution], verts[(k + 3) % 4])


def test_topology_is_consistently_oriented():
    dom = _domain(5)
    params = dom.parameters(4)
    for a, b, c in dom.mesh_topology(4).triangles():
        ab = params[b] - params[a]
        ac = params[c] - params[a]
        assert ab[0] * ac[1] - ab[1] * ac[0] > 0.0
