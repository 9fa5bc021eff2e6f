"""Boundary curve representations for transfinite surfaces.

Surfaces only rely on a small capability set, captured by the
:class:`Curve` protocol:

- ``eval(u)``: the point at parameter ``u``
- ``derivatives(u, nderiv)``: the point followed by ``nderiv`` derivatives
- ``normalize()``: reparametrize onto ``[0, 1]``
- ``reverse()``: flip the direction of travel

:class:`BSplineCurve` is the concrete (non-rational) B-spline used
throughout, with :func:`bezier_curve`, :func:`line_curve` and
:func:`polyline_curve` as convenience constructors.  Evaluation follows
the standard span search / basis derivative algorithms from *The NURBS
Book* (Piegl & Tiller, A2.1 and A2.3).

Copyright (c) 2025 transfinite contributors
MIT License
"""

from __future__ import annotations

from typing import List, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np

from transfinite.geom import epsilon


@runtime_checkable
class Curve(Protocol):
    """What a surface needs from a boundary curve."""

    def eval(self, u: float) -> np.ndarray:
        ...

    def derivatives(self, u: float, nderiv: int) -> List[np.ndarray]:
        ...

    def normalize(self) -> None:
        ...

    def reverse(self) -> None:
        ...


class BSplineCurve:
    """Clamped, non-rational B-spline curve in 3D.

    Parameters
    ----------
    degree : int
        Polynomial degree, at least 1.
    knots : sequence of float
        Non-decreasing knot vector with ``len(control_points) + degree + 1``
        entries.
    control_points : sequence of points
        2D or 3D control points; 2D input is lifted into the z=0 plane.
    """

    def __init__(self, degree: int, knots: Sequence[float], control_points: Sequence[Sequence[float]]):
        degree = int(degree)
        if degree < 1:
            raise ValueError('degree must be >= 1')
        cps = np.array(control_points, dtype=float)
        if cps.ndim != 2 or cps.shape[1] not in (2, 3):
            raise ValueError('control points must be a sequence of 2D or 3D points')
        if cps.shape[1] == 2:
            cps = np.hstack([cps, np.zeros((cps.shape[0], 1))])
        if cps.shape[0] < degree + 1:
            raise ValueError(f'degree {degree} curve needs at least {degree + 1} control points')
        kv = np.array(knots, dtype=float)
        if kv.ndim != 1 or kv.size != cps.shape[0] + degree + 1:
            raise ValueError(
                f'expected {cps.shape[0] + degree + 1} knots, got {kv.size}'
            )
        if np.any(np.diff(kv) < 0.0):
            raise ValueError('knot vector must be non-decreasing')
        if kv[-degree - 1] - kv[degree] <= 0.0:
            raise ValueError('knot vector spans an empty parameter range')

        self._degree = degree
        self._knots = kv
        self._cps = cps

    def __repr__(self):
        return 'BSplineCurve(degree={}, knots={}, control_points={})'.format(
            self._degree, self._knots.tolist(), self._cps.tolist())

    @property
    def degree(self) -> int:
        return self._degree

    @property
    def knots(self) -> np.ndarray:
        return self._knots.copy()

    @property
    def control_points(self) -> np.ndarray:
        return self._cps.copy()

    def parameter_range(self) -> Tuple[float, float]:
        """Return the valid parameter interval ``(u_start, u_end)``."""

        return float(self._knots[self._degree]), float(self._knots[-self._degree - 1])

    def eval(self, u: float) -> np.ndarray:
        """Evaluate the curve at ``u`` (clamped to the parameter range)."""

        return self.derivatives(u, 0)[0]

    def derivatives(self, u: float, nderiv: int) -> List[np.ndarray]:
        """Return ``[C(u), C'(u), ..., C^(nderiv)(u)]``."""

        if nderiv < 0:
            raise ValueError('nderiv must be >= 0')
        p = self._degree
        u_start, u_end = self.parameter_range()
        u = min(max(float(u), u_start), u_end)
        du = min(nderiv, p)
        span = self._find_span(u)
        basis = self._basis_derivatives(span, u, du)
        local = self._cps[span - p:span + 1]
        result = [basis[k] @ local for k in range(du + 1)]
        result += [np.zeros(3) for _ in range(nderiv - du)]
        return result

    def normalize(self) -> None:
        """Affinely remap the knot vector so the curve runs over ``[0, 1]``."""

        u_start, u_end = self.parameter_range()
        self._knots = (self._knots - u_start) / (u_end - u_start)

    def reverse(self) -> None:
        """Reverse the direction of the curve, keeping its parameter range."""

        u_start, u_end = self.parameter_range()
        self._knots = (u_start + u_end) - self._knots[::-1]
        self._cps = self._cps[::-1].copy()

    def arc_length(self, u0: float | None = None, u1: float | None = None, *, order: int = 8) -> float:
        """Arc length between two parameters by per-span Gauss-Legendre quadrature."""

        u_start, u_end = self.parameter_range()
        a = u_start if u0 is None else max(u0, u_start)
        b = u_end if u1 is None else min(u1, u_end)
        if b <= a:
            return 0.0
        nodes, weights = np.polynomial.legendre.leggauss(order)
        breaks = [a] + [k for k in np.unique(self._knots) if a < k < b] + [b]
        total = 0.0
        for lo, hi in zip(breaks[:-1], breaks[1:]):
            half = 0.5 * (hi - lo)
            mid = 0.5 * (hi + lo)
            for x, w in zip(nodes, weights):
                total += w * half * float(np.linalg.norm(self.derivatives(mid + half * x, 1)[1]))
        return total

    def _find_span(self, u: float) -> int:
        p = self._degree
        n = self._cps.shape[0] - 1
        U = self._knots
        if u >= U[n + 1]:
            return n
        if u <= U[p]:
            return p
        low, high = p, n + 1
        mid = (low + high) // 2
        while u < U[mid] or u >= U[mid + 1]:
            if u < U[mid]:
                high = mid
            else:
                low = mid
            mid = (low + high) // 2
        return mid

    def _basis_derivatives(self, span: int, u: float, nderiv: int) -> np.ndarray:
        p = self._degree
        U = self._knots
        ndu = np.zeros((p + 1, p + 1))
        ndu[0, 0] = 1.0
        left = np.zeros(p + 1)
        right = np.zeros(p + 1)
        for j in range(1, p + 1):
            left[j] = u - U[span + 1 - j]
            right[j] = U[span + j] - u
            saved = 0.0
            for r in range(j):
                # lower triangle holds knot differences
                ndu[j, r] = right[r + 1] + left[j - r]
                temp = ndu[r, j - 1] / ndu[j, r]
                ndu[r, j] = saved + right[r + 1] * temp
                saved = left[j - r] * temp
            ndu[j, j] = saved

        ders = np.zeros((nderiv + 1, p + 1))
        ders[0, :] = ndu[:, p]
        a = np.zeros((2, p + 1))
        for r in range(p + 1):
            s1, s2 = 0, 1
            a[0, 0] = 1.0
            for k in range(1, nderiv + 1):
                d = 0.0
                rk = r - k
                pk = p - k
                if r >= k:
                    a[s2, 0] = a[s1, 0] / ndu[pk + 1, rk]
                    d = a[s2, 0] * ndu[rk, pk]
                j1 = 1 if rk >= -1 else -rk
                j2 = k - 1 if r - 1 <= pk else p - r
                for j in range(j1, j2 + 1):
                    a[s2, j] = (a[s1, j] - a[s1, j - 1]) / ndu[pk + 1, rk + j]
                    d += a[s2, j] * ndu[rk + j, pk]
                if r <= pk:
                    a[s2, k] = -a[s1, k - 1] / ndu[pk + 1, r]
                    d += a[s2, k] * ndu[r, pk]
                ders[k, r] = d
                s1, s2 = s2, s1

        factor = p
        for k in range(1, nderiv + 1):
            ders[k, :] *= factor
            factor *= p - k
        return ders


def bezier_curve(points: Sequence[Sequence[float]]) -> BSplineCurve:
    """Bezier curve of degree ``len(points) - 1`` over ``[0, 1]``."""

    count = len(points)
    if count < 2:
        raise ValueError('a Bezier curve needs at least 2 control points')
    degree = count - 1
    knots = [0.0] * (degree + 1) + [1.0] * (degree + 1)
    return BSplineCurve(degree, knots, points)


def line_curve(start: Sequence[float], end: Sequence[float]) -> BSplineCurve:
    """Straight segment from ``start`` to ``end``."""

    return bezier_curve([start, end])


def polyline_curve(points: Sequence[Sequence[float]]) -> BSplineCurve:
    """Degree-1 B-spline through ``points`` with chord-length knots."""

    pts = np.array(points, dtype=float)
    if pts.ndim != 2 or pts.shape[0] < 2:
        raise ValueError('a polyline needs at least 2 points')
    lengths = np.linalg.norm(np.diff(pts, axis=0), axis=1)
    if np.any(lengths < epsilon):
        raise ValueError('polyline has coincident consecutive points')
    params = np.concatenate([[0.0], np.cumsum(lengths)])
    params /= params[-1]
    knots = np.concatenate([[0.0], params, [1.0]])
    return BSplineCurve(1, knots, pts)


__all__ = [
    'Curve',
    'BSplineCurve',
    'bezier_curve',
    'line_curve',
    'polyline_curve',
]
