"""Local side parameterizations over a polygonal domain.

For every side ``i`` of the domain a parameterization gives a pair
``(s_i, d_i)``: ``s_i`` runs from 0 to 1 along the side and ``d_i`` is a
distance-like value that vanishes on the side and grows towards the
interior.  Surfaces feed these pairs to their ribbons and blend
functions.

Copyright (c) 2025 transfinite contributors
MIT License
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import List

import numpy as np

from transfinite.geom import cross2, epsilon, point2


class Parameterization(ABC):
    """Maps domain points to per-side ``(s, d)`` coordinates."""

    def __init__(self):
        self._domain = None
        self._vertices = np.zeros((0, 2))

    def set_domain(self, domain) -> None:
        self._domain = domain

    def update(self) -> None:
        """Refresh cached domain data after the domain changed."""

        self._vertices = self._domain.vertices

    @property
    def n(self) -> int:
        return len(self._vertices)

    @abstractmethod
    def map_to_ribbon(self, i: int, uv) -> np.ndarray:
        """Return ``(s_i, d_i)`` for the domain point ``uv``."""

    def map_to_ribbons(self, uv) -> List[np.ndarray]:
        return [self.map_to_ribbon(i, uv) for i in range(self.n)]


class BarycentricKind(Enum):
    WACHSPRESS = "wachspress"
    MEAN_VALUE = "mean_value"


class BarycentricParameterization(Parameterization):
    """Side coordinates derived from generalized barycentric coordinates.

    With barycentric coordinates ``l`` of the point, side ``i`` (from
    vertex ``i - 1`` to vertex ``i``) gets ``d = 1 - l[i-1] - l[i]`` and
    ``s = l[i] / (l[i-1] + l[i])``.  Points on the boundary receive exact
    linear coordinates so that ``d`` vanishes there.
    """

    def __init__(self, kind: BarycentricKind | str = BarycentricKind.WACHSPRESS):
        super().__init__()
        self.kind = BarycentricKind(kind)

    def map_to_ribbon(self, i: int, uv) -> np.ndarray:
        return self._side_coordinates(i, self.barycentric(uv))

    def map_to_ribbons(self, uv) -> List[np.ndarray]:
        bc = self.barycentric(uv)
        return [self._side_coordinates(i, bc) for i in range(self.n)]

    def barycentric(self, uv) -> np.ndarray:
        """Generalized barycentric coordinates of ``uv`` (sum to 1)."""

        p = point2(uv)
        verts = self._vertices
        n = len(verts)
        edge = self._boundary_coordinates(p)
        if edge is not None:
            return edge
        if self.kind is BarycentricKind.WACHSPRESS:
            weights = self._wachspress_weights(p, verts)
        else:
            weights = self._mean_value_weights(p, verts)
        total = weights.sum()
        return weights / total if n else weights

    def _side_coordinates(self, i: int, bc: np.ndarray) -> np.ndarray:
        im = (i + self.n - 1) % self.n
        denom = bc[im] + bc[i]
        d = 1.0 - denom
        s = 0.5 if denom < epsilon else bc[i] / denom
        return np.array([s, d])

    def _boundary_coordinates(self, p: np.ndarray):
        verts = self._vertices
        n = len(verts)
        for j in range(n):
            a = verts[j]
            b = verts[(j + 1) % n]
            ab = b - a
            length = float(np.linalg.norm(ab))
            if abs(cross2(ab, p - a)) / length >= epsilon:
                continue
            t = float((p - a) @ ab) / (length * length)
            if t < -epsilon or t > 1.0 + epsilon:
                continue
            t = min(max(t, 0.0), 1.0)
            bc = np.zeros(n)
            bc[j] = 1.0 - t
            bc[(j + 1) % n] = t
            return bc
        return None

    @staticmethod
    def _wachspress_weights(p, verts) -> np.ndarray:
        n = len(verts)
        # signed doubled areas of the triangles (p, v_j, v_j+1)
        areas = np.array([cross2(verts[j] - p, verts[(j + 1) % n] - p) for j in range(n)])
        weights = np.zeros(n)
        for i in range(n):
            prev_v = verts[(i + n - 1) % n]
            next_v = verts[(i + 1) % n]
            corner = cross2(verts[i] - prev_v, next_v - verts[i])
            weights[i] = corner / (areas[(i + n - 1) % n] * areas[i])
        return weights

    @staticmethod
    def _mean_value_weights(p, verts) -> np.ndarray:
        n = len(verts)
        diffs = verts - p
        radii = np.linalg.norm(diffs, axis=1)
        half_tans = np.zeros(n)
        for j in range(n):
            k = (j + 1) % n
            half_tans[j] = (radii[j] * radii[k] - diffs[j] @ diffs[k]) / cross2(diffs[j], diffs[k])
        weights = np.zeros(n)
        for i in range(n):
            weights[i] = (half_tans[(i + n - 1) % n] + half_tans[i]) / radii[i]
        return weights


__all__ = [
    'Parameterization',
    'BarycentricKind',
    'BarycentricParameterization',
]
