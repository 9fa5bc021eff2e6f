import pytest

from transfinite.mesh import TriMesh


def _two_triangle_mesh():
    mesh = TriMesh()
    mesh.set_points([
        (0, 0, 0),
        (1, 0, 0),
        (1, 1, 0),
        (0, 1, 0),
    ])
    mesh.add_triangle(0, 1, 2)
    mesh.add_triangle(0, 2, 3)
    return mesh


def test_points_and_triangles():
    mesh = _two_triangle_mesh()
    assert mesh.points().shape == (4, 3)
    assert mesh.triangles() == [(0, 1, 2), (0, 2, 3)]


def test_resize_points_keeps_existing_values():
    mesh = _two_triangle_mesh()
    mesh.resize_points(6)
    pts = mesh.points()
    assert pts.shape == (6, 3)
    assert tuple(pts[2]) == (1.0, 1.0, 0.0)
    assert tuple(pts[5]) == (0.0, 0.0, 0.0)


def test_set_points_rejects_bad_shape():
    mesh = TriMesh()
    with pytest.raises(ValueError):
        mesh.set_points([(0, 0), (1, 1)])


def test_closest_triangle():
    mesh = _two_triangle_mesh()
    assert mesh.closest_triangle((0.9, 0.1, 1.0)) == (0, 1, 2)
    assert mesh.closest_triangle((0.1, 0.9, -2.0)) == (0, 2, 3)
    # outside the mesh, nearest to the edge (0,0)-(1,0)
    assert mesh.closest_triangle((0.5, -3.0, 0.0)) == (0, 1, 2)


def test_closest_triangle_empty_mesh():
    with pytest.raises(ValueError):
        TriMesh().closest_triangle((0, 0, 0))


def test_write_obj(tmp_path):
    mesh = _two_triangle_mesh()
    path = tmp_path / 'quad.obj'
    assert mesh.write_obj(path) is True

    lines = path.read_text().splitlines()
    vertices = [ln for ln in lines if ln.startswith('v ')]
    faces = [ln for ln in lines if ln.startswith('f ')]
    assert len(vertices) == 4
    assert vertices[2] == 'v 1 1 0'
    assert faces == ['f 1 2 3', 'f 1 3 4']


def test_write_obj_unwritable_path(tmp_path, capsys):
    mesh = _two_triangle_mesh()
    path = tmp_path / 'missing' / 'quad.obj'
    assert mesh.write_obj(path) is False

    assert not path.exists()
    assert 'Unable to open file' in capsys.readouterr().err


def test_write_obj_onto_directory(tmp_path, capsys):
    mesh = _two_triangle_mesh()
    path = tmp_path / 'quad.obj'
    path.mkdir()
    assert mesh.write_obj(path) is False
    assert path.is_dir()
    assert 'Unable to open file' in capsys.readouterr().err
