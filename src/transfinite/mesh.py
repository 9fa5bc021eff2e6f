"""Triangle mesh container for tessellated transfinite surfaces.

Copyright (c) 2025 transfinite contributors
MIT License
"""

from __future__ import annotations

import sys
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from transfinite.geom import epsilon

Triangle = Tuple[int, int, int]


class TriMesh:
    """Indexed triangle mesh.

    Points live in an ``(n, 3)`` float array; triangles are triples of
    point indices.  A mesh produced by :meth:`Domain.mesh_topology` has
    its point array sized but zeroed until :meth:`set_points` is called.
    """

    def __init__(self):
        self._points = np.zeros((0, 3))
        self._triangles: List[Triangle] = []

    def __repr__(self):
        return 'TriMesh(points={}, triangles={})'.format(len(self._points), len(self._triangles))

    def resize_points(self, n: int) -> None:
        points = np.zeros((n, 3))
        keep = min(n, len(self._points))
        points[:keep] = self._points[:keep]
        self._points = points

    def set_points(self, points: Iterable[Sequence[float]]) -> None:
        pts = np.array(list(points), dtype=float)
        if pts.size == 0:
            pts = np.zeros((0, 3))
        if pts.ndim != 2 or pts.shape[1] != 3:
            raise ValueError('points must be a sequence of 3D points')
        self._points = pts

    def points(self) -> np.ndarray:
        return self._points.copy()

    def add_triangle(self, a: int, b: int, c: int) -> None:
        self._triangles.append((int(a), int(b), int(c)))

    def triangles(self) -> List[Triangle]:
        return list(self._triangles)

    def closest_triangle(self, p: Sequence[float]) -> Triangle:
        """Return the triangle (as point indices) nearest to ``p``.

        Brute force: every triangle is tested, with no spatial index.
        """

        if not self._triangles:
            raise ValueError('mesh has no triangles')
        query = np.asarray(p, dtype=float)[:3]
        best = None
        best_dist = float('inf')
        for tri in self._triangles:
            a, b, c = self._points[list(tri)]
            d = float(np.linalg.norm(query - _closest_point_on_triangle(query, a, b, c)))
            if d < best_dist:
                best_dist = d
                best = tri
        return best

    def write_obj(self, filename) -> bool:
        """Write the mesh as Wavefront OBJ.

        An unwritable path is reported on stderr and otherwise ignored;
        the return value tells whether the file was written.
        """

        try:
            stream = open(filename, 'w', encoding='ascii')
        except OSError:
            print(f"Unable to open file: {filename}", file=sys.stderr)
            return False
        with stream:
            for x, y, z in self._points:
                print(f"v {x:.12g} {y:.12g} {z:.12g}", file=stream)
            for a, b, c in self._triangles:
                print(f"f {a + 1} {b + 1} {c + 1}", file=stream)
        return True


def _closest_point_on_triangle(p, a, b, c) -> np.ndarray:
    # Voronoi region walk (Ericson, Real-Time Collision Detection 5.1.5)
    ab = b - a
    ac = c - a
    ap = p - a
    d1 = ab @ ap
    d2 = ac @ ap
    if d1 <= 0.0 and d2 <= 0.0:
        return a
    bp = p - b
    d3 = ab @ bp
    d4 = ac @ bp
    if d3 >= 0.0 and d4 <= d3:
        return b
    vc = d1 * d4 - d3 * d2
    if vc <= 0.0 and d1 >= 0.0 and d3 <= 0.0:
        return a + ab * (d1 / (d1 - d3))
    cp = p - c
    d5 = ab @ cp
    d6 = ac @ cp
    if d6 >= 0.0 and d5 <= d6:
        return c
    vb = d5 * d2 - d1 * d6
    if vb <= 0.0 and d2 >= 0.0 and d6 <= 0.0:
        return a + ac * (d2 / (d2 - d6))
    va = d3 * d6 - d5 * d4
    if va <= 0.0 and (d4 - d3) >= 0.0 and (d5 - d6) >= 0.0:
        return b + (c - b) * ((d4 - d3) / ((d4 - d3) + (d5 - d6)))
    denom = va + vb + vc
    if abs(denom) < epsilon:
        # degenerate triangle, fall back to the nearest vertex
        return min((a, b, c), key=lambda q: float(np.linalg.norm(p - q)))
    v = vb / denom
    w = vc / denom
    return a + ab * v + ac * w


__all__ = ['TriMesh', 'Triangle']
