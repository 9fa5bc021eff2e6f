"""Foundational vector helpers for **transfinite**.

Points and vectors are plain ``numpy`` float arrays, shape ``(3,)`` in
model space and ``(2,)`` in the parameter domain.  The helpers below
accept anything array-like and always hand back fresh arrays, so callers
never alias the internal state of a curve or ribbon by accident.

Copyright (c) 2025 transfinite contributors
MIT License
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

# geometric tolerance used for boundary detection and degenerate checks
epsilon = 1.0e-8


def point(x, y=None, z=None) -> np.ndarray:
    """Make a 3D point.

    ``point(1, 2)`` gives ``[1, 2, 0]``, ``point(1, 2, 3)`` gives
    ``[1, 2, 3]`` and ``point([1, 2, 3])`` copies an existing sequence.
    """

    if y is None:
        arr = np.asarray(x, dtype=float).reshape(-1)
        if arr.size == 2:
            return np.array([arr[0], arr[1], 0.0])
        if arr.size < 3:
            raise ValueError('point needs at least two components')
        return np.array(arr[:3], dtype=float)
    return np.array([float(x), float(y), 0.0 if z is None else float(z)])


def point2(u, v=None) -> np.ndarray:
    """Make a 2D domain point."""

    if v is None:
        arr = np.asarray(u, dtype=float).reshape(-1)
        if arr.size < 2:
            raise ValueError('point2 needs two components')
        return np.array(arr[:2], dtype=float)
    return np.array([float(u), float(v)])


def dist(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two points."""

    return float(np.linalg.norm(np.asarray(a, dtype=float) - np.asarray(b, dtype=float)))


def lerp(a, b, t: float) -> np.ndarray:
    """Affine combination ``a * (1 - t) + b * t``."""

    return np.asarray(a, dtype=float) * (1.0 - t) + np.asarray(b, dtype=float) * t


def cross2(a, b) -> float:
    """z component of the cross product of two 2D vectors."""

    return float(a[0] * b[1] - a[1] * b[0])


def zero_vector() -> np.ndarray:
    return np.zeros(3)


__all__ = [
    'epsilon',
    'point',
    'point2',
    'dist',
    'lerp',
    'cross2',
    'zero_vector',
]
