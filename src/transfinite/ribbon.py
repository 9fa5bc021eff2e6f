"""Ribbons: boundary curves with cross-boundary derivative data.

A ribbon ``i`` wraps boundary curve ``i`` and extends it into the
surface interior::

    R_i(s, d) = C_i(s) + d * T_i(s)

where ``T_i`` is the cross derivative.  At the ends of the curve ``T_i``
matches the tangents of the neighbouring curves, which is what lets
adjacent ribbons agree at the shared corners.

Neighbours are held through :mod:`weakref` references; the owning
surface keeps the ribbons alive.

Copyright (c) 2025 transfinite contributors
MIT License
"""

from __future__ import annotations

import weakref
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import numpy as np

from transfinite.curves import Curve


def blend_hermite(x: float) -> float:
    """Cubic Hermite blend, 1 at ``x = 0`` and 0 at ``x = 1`` with flat ends."""

    x2 = x * x
    return 2.0 * x * x2 - 3.0 * x2 + 1.0


class Ribbon(ABC):
    """Base ribbon; subclasses decide how the cross derivative varies."""

    def __init__(self, curve: Optional[Curve] = None):
        self._curve = curve
        self._prev = None
        self._next = None
        self._prev_tangent = np.zeros(3)
        self._next_tangent = np.zeros(3)

    @property
    def curve(self) -> Curve:
        return self._curve

    def set_curve(self, curve: Curve) -> None:
        self._curve = curve

    def set_neighbors(self, prev: 'Ribbon', next: 'Ribbon') -> None:
        self._prev = weakref.ref(prev)
        self._next = weakref.ref(next)

    @property
    def prev(self) -> Optional['Ribbon']:
        return self._prev() if self._prev is not None else None

    @property
    def next(self) -> Optional['Ribbon']:
        return self._next() if self._next is not None else None

    @property
    def prev_tangent(self) -> np.ndarray:
        """Cross derivative at ``s = 0``: along the previous side, away from the corner."""

        return self._prev_tangent.copy()

    @property
    def next_tangent(self) -> np.ndarray:
        """Cross derivative at ``s = 1``: along the next side, away from the corner."""

        return self._next_tangent.copy()

    def update(self) -> None:
        """Cache the corner tangents taken from the neighbouring curves."""

        self._prev_tangent = -self.prev.curve.derivatives(1.0, 1)[1]
        self._next_tangent = self.next.curve.derivatives(0.0, 1)[1]

    @abstractmethod
    def cross_derivative(self, s: float) -> np.ndarray:
        ...

    def eval(self, sd: Sequence[float]) -> np.ndarray:
        s, d = float(sd[0]), float(sd[1])
        return self._curve.eval(s) + self.cross_derivative(s) * d


class CompatibleRibbon(Ribbon):
    """Cross derivative blended with :func:`blend_hermite`.

    The blend has zero slope at both ends, so the ribbon's twist
    vanishes at the corners.
    """

    def cross_derivative(self, s: float) -> np.ndarray:
        h = blend_hermite(s)
        return self._prev_tangent * h + self._next_tangent * (1.0 - h)


class LinearRibbon(Ribbon):
    """Cross derivative linearly interpolated between the corner tangents."""

    def cross_derivative(self, s: float) -> np.ndarray:
        return self._prev_tangent * (1.0 - s) + self._next_tangent * s


__all__ = [
    'blend_hermite',
    'Ribbon',
    'CompatibleRibbon',
    'LinearRibbon',
]
