"""Parameter domains for multi-sided transfinite surfaces.

A domain is a convex polygon in the plane with one edge per boundary
curve.  Side ``i`` runs from vertex ``i - 1`` to vertex ``i``, so vertex
``i`` is the corner shared by sides ``i`` and ``i + 1``.

Besides the polygon itself the domain decides how the surface is
sampled: :meth:`Domain.parameters` lays out concentric rings of sample
points around the center and :meth:`Domain.mesh_topology` builds the
matching triangles.  Both agree on point order, so surface evaluation is
a plain map over the parameter list.

Copyright (c) 2025 transfinite contributors
MIT License
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from math import cos, pi, sin
from typing import List, Sequence

import numpy as np

from transfinite.curves import Curve
from transfinite.geom import lerp
from transfinite.mesh import TriMesh


class Domain(ABC):
    """Abstract parameter polygon."""

    def __init__(self):
        self._curves: List[Curve] = []
        self._vertices = np.zeros((0, 2))
        self._center = np.zeros(2)
        self._dirty = True

    @property
    def n(self) -> int:
        return len(self._curves)

    @property
    def vertices(self) -> np.ndarray:
        return self._vertices.copy()

    @property
    def center(self) -> np.ndarray:
        return self._center.copy()

    def set_side(self, i: int, curve: Curve) -> None:
        if i >= len(self._curves):
            self._curves.extend([None] * (i + 1 - len(self._curves)))
        self._curves[i] = curve
        self._dirty = True

    def set_sides(self, curves: Sequence[Curve]) -> None:
        self._curves = list(curves)
        self._dirty = True

    def update(self) -> bool:
        """Recompute the polygon if needed.

        Returns ``True`` when the vertices changed, signalling that any
        parameterization built on this domain must be refreshed.
        """

        if not self._dirty:
            return False
        self._dirty = False
        if not self._compute_vertices():
            return False
        self._center = self._vertices.mean(axis=0) if len(self._vertices) else np.zeros(2)
        return True

    def edge_length(self, i: int) -> float:
        n = len(self._vertices)
        return float(np.linalg.norm(self._vertices[i] - self._vertices[(i + n - 1) % n]))

    def mesh_size(self, resolution: int) -> int:
        """Number of sample points for ``resolution`` concentric layers."""

        return 1 + self.n * resolution * (resolution + 1) // 2

    def parameters(self, resolution: int) -> List[np.ndarray]:
        """Sample points: the center, then ``resolution`` rings, side by side."""

        n = len(self._vertices)
        result = [self._center.copy()]
        for j in range(1, resolution + 1):
            u = j / resolution
            for k in range(n):
                for i in range(j):
                    v = i / j
                    ep = lerp(self._vertices[(k + n - 1) % n], self._vertices[k], v)
                    result.append(lerp(self._center, ep, u))
        return result

    def mesh_topology(self, resolution: int) -> TriMesh:
        """Triangles connecting the points of :meth:`parameters`.

        The returned mesh has its point array sized but not filled in.
        """

        n = len(self._vertices)
        mesh = TriMesh()
        mesh.resize_points(self.mesh_size(resolution))
        inner_start = 0
        outer_vert = 1
        for layer in range(1, resolution + 1):
            inner_vert = inner_start
            outer_start = outer_vert
            for side in range(n):
                vert = 0
                while True:
                    if side == n - 1 and vert == layer - 1:
                        next_vert = outer_start
                    else:
                        next_vert = outer_vert + 1
                    mesh.add_triangle(inner_vert, outer_vert, next_vert)
                    outer_vert += 1
                    vert += 1
                    if vert == layer:
                        break
                    if side == n - 1 and vert == layer - 1:
                        inner_next = inner_start
                    else:
                        inner_next = inner_vert + 1
                    mesh.add_triangle(inner_vert, next_vert, inner_next)
                    inner_vert = inner_next
            inner_start = outer_start
        return mesh

    @abstractmethod
    def _compute_vertices(self) -> bool:
        """Fill ``self._vertices``; return ``False`` if nothing changed."""


class RegularDomain(Domain):
    """Regular n-gon inscribed in the unit circle.

    The polygon depends only on the number of sides, so it is rebuilt
    only when that number changes.  For four sides this is a square.
    """

    def _compute_vertices(self) -> bool:
        n = self.n
        if len(self._vertices) == n:
            return False
        # side 0 lies horizontally at the bottom
        start = -pi / 2.0 + pi / n
        self._vertices = np.array([
            [cos(start + 2.0 * pi * i / n), sin(start + 2.0 * pi * i / n)]
            for i in range(n)
        ]) if n else np.zeros((0, 2))
        return True


__all__ = ['Domain', 'RegularDomain']
