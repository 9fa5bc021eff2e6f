"""Multi-sided transfinite surfaces.

A :class:`Surface` interpolates a closed loop of N boundary curves.  Each
curve is wrapped in a :class:`~transfinite.ribbon.Ribbon`; a polygonal
:class:`~transfinite.domain.Domain` provides the parameter space and a
:class:`~transfinite.parameterization.Parameterization` turns a domain
point ``uv`` into one ``(s, d)`` pair per side.

Two kinds of interpolant are blended:

- side interpolants, one per side: the ribbon evaluated at ``(s, g(d))``
- corner corrections, one per corner: the bilinear-plus-twist patch
  spanned by the corner point, its two tangents and its twist vectors

where ``g`` is the gamma remap ``d / (2d + 1)``.  The blend weights are
computed from the *raw* distances while the interpolants use the
remapped ones; both scales are intentional.

Typical use::

    surf = CornerBasedSurface()
    surf.set_curves(curves)
    surf.setup_loop()
    surf.update()
    mesh = surf.eval_mesh(15)
    mesh.write_obj('patch.obj')

``setup_loop`` must run once after the curves are set, and ``update``
whenever a curve changes.  Evaluating before that is undefined: corner
data is stale or missing.

Copyright (c) 2025 transfinite contributors
MIT License
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Type

import numpy as np

from transfinite.curves import Curve
from transfinite.domain import Domain, RegularDomain
from transfinite.geom import epsilon, point2, zero_vector
from transfinite.mesh import TriMesh
from transfinite.parameterization import BarycentricParameterization, Parameterization
from transfinite.ribbon import CompatibleRibbon, Ribbon, blend_hermite


@dataclass
class CornerData:
    """Position, tangents and twists at the corner after side ``i``.

    Both tangents point away from the corner, ``tangent1`` back along
    side ``i`` and ``tangent2`` forward along side ``i + 1``.
    """

    point: np.ndarray = field(default_factory=zero_vector)
    tangent1: np.ndarray = field(default_factory=zero_vector)
    tangent2: np.ndarray = field(default_factory=zero_vector)
    twist1: np.ndarray = field(default_factory=zero_vector)
    twist2: np.ndarray = field(default_factory=zero_vector)


class Surface(ABC):
    """Common machinery of transfinite surfaces.

    Parameters
    ----------
    domain : Domain, optional
        Parameter polygon, a :class:`RegularDomain` by default.
    parameterization : Parameterization, optional
        Side coordinate map, Wachspress-based by default.
    ribbon_class : type, optional
        Ribbon type created for each curve.
    legacy_twist : bool
        Reproduce the historical corner twist computation in which the
        second twist estimate overwrote ``twist1`` and ``twist2`` stayed
        zero.  Off by default.
    """

    ribbon_class: Type[Ribbon] = CompatibleRibbon

    # finite difference step for the twist estimates
    twist_step = 1.0e-4

    def __init__(self, domain: Optional[Domain] = None,
                 parameterization: Optional[Parameterization] = None,
                 *, ribbon_class: Optional[Type[Ribbon]] = None,
                 legacy_twist: bool = False):
        self._n = 0
        self._use_gamma = True
        self._legacy_twist = legacy_twist
        self._ribbons: List[Ribbon] = []
        self._corner_data: List[CornerData] = []
        self._domain = domain if domain is not None else RegularDomain()
        self._param = parameterization if parameterization is not None else BarycentricParameterization()
        self._param.set_domain(self._domain)
        if ribbon_class is not None:
            self.ribbon_class = ribbon_class

    @property
    def n(self) -> int:
        return self._n

    @property
    def domain(self) -> Domain:
        return self._domain

    @property
    def parameterization(self) -> Parameterization:
        return self._param

    @property
    def use_gamma(self) -> bool:
        return self._use_gamma

    @property
    def legacy_twist(self) -> bool:
        return self._legacy_twist

    def next(self, i: int) -> int:
        return (i + 1) % self._n

    def prev(self, i: int) -> int:
        return (i + self._n - 1) % self._n

    def set_gamma(self, use_gamma: bool) -> None:
        self._use_gamma = bool(use_gamma)

    def new_ribbon(self) -> Ribbon:
        return self.ribbon_class()

    def set_curve(self, i: int, curve: Curve) -> None:
        """Set (or add) the curve of side ``i``."""

        if self._n <= i:
            self._ribbons.extend([None] * (i + 1 - self._n))
            self._n = i + 1
        self._ribbons[i] = self.new_ribbon()
        self._ribbons[i].set_curve(curve)
        self._domain.set_side(i, curve)

    def set_curves(self, curves: Sequence[Curve]) -> None:
        """Replace the whole boundary loop."""

        self._ribbons = []
        for c in curves:
            ribbon = self.new_ribbon()
            ribbon.set_curve(c)
            self._ribbons.append(ribbon)
        self._domain.set_sides(curves)
        self._n = len(curves)

    def setup_loop(self) -> None:
        """Normalize the curves, wire up neighbours and fix orientations.

        Afterwards each curve ends where the next one starts (as far as
        the input allows).  Curve 0 has nothing to match yet, so it is
        oriented towards whichever end of curve 1 is nearer; every later
        curve is turned so that it starts near the end of its predecessor.
        """

        for r in self._ribbons:
            r.curve.normalize()
        for i in range(self._n):
            ribbon = self._ribbons[i]
            rp = self._ribbons[self.prev(i)]
            rn = self._ribbons[self.next(i)]
            ribbon.set_neighbors(rp, rn)
            r_start = ribbon.curve.eval(0.0)
            r_end = ribbon.curve.eval(1.0)
            if i == 0:
                rn_start = rn.curve.eval(0.0)
                rn_end = rn.curve.eval(1.0)
                end_to_start = np.linalg.norm(r_end - rn_start)
                end_to_end = np.linalg.norm(r_end - rn_end)
                start_to_start = np.linalg.norm(r_start - rn_start)
                start_to_end = np.linalg.norm(r_start - rn_end)
                flip = min(start_to_start, start_to_end) < min(end_to_start, end_to_end)
            else:
                rp_end = rp.curve.eval(1.0)
                flip = np.linalg.norm(r_end - rp_end) < np.linalg.norm(r_start - rp_end)
            if flip:
                ribbon.curve.reverse()
                ribbon.curve.normalize()

    def update(self, i: Optional[int] = None) -> None:
        """Recompute derived data after the curves changed.

        With an index, only the ribbons touching side ``i`` and the two
        corners at its ends are refreshed.
        """

        if self._domain.update():
            self._param.update()
        if i is None:
            for r in self._ribbons:
                r.update()
            self.update_corners()
            return
        for j in {self.prev(i), i, self.next(i)}:
            self._ribbons[j].update()
        if len(self._corner_data) != self._n:
            self.update_corners()
        else:
            self.update_corner(self.prev(i))
            self.update_corner(i)

    def ribbon(self, i: int) -> Ribbon:
        return self._ribbons[i]

    def corner_data(self, i: int) -> CornerData:
        return self._corner_data[i]

    @abstractmethod
    def eval(self, uv) -> np.ndarray:
        """Evaluate the surface at the domain point ``uv``."""

    def eval_points(self, uvs: Iterable) -> List[np.ndarray]:
        return [self.eval(uv) for uv in uvs]

    def eval_mesh(self, resolution: int) -> TriMesh:
        """Tessellate the surface over the domain's sample layout."""

        mesh = self._domain.mesh_topology(resolution)
        uvs = self._domain.parameters(resolution)
        mesh.set_points(self.eval_points(uvs))
        return mesh

    def corner_correction(self, i: int, si: float, si1: float) -> np.ndarray:
        """Corner interpolant; ``si`` and ``si1`` are both 0 at corner ``i``."""

        si = min(max(si, 0.0), 1.0)
        si1 = min(max(si1, 0.0), 1.0)
        cd = self._corner_data[i]
        gi = self.gamma(si)
        gi1 = self.gamma(si1)
        return (cd.point
                + cd.tangent1 * gi
                + cd.tangent2 * gi1
                + self.rational_twist(si, si1, cd.twist1, cd.twist2) * gi * gi1)

    def side_interpolant(self, i: int, si: float, di: float) -> np.ndarray:
        si = min(max(si, 0.0), 1.0)
        di = max(self.gamma(di), 0.0)
        return self._ribbons[i].eval(point2(si, di))

    def blend_corner(self, sds: Sequence[Sequence[float]]) -> List[float]:
        """Weights of the corner interpolants (partition of unity).

        Inside the domain corner ``i`` gets ``(d_i d_{i+1})^-2``,
        normalized.  On a single side the two corners of that side share
        the weight by inverse squared distance to the other two sides; at
        a corner all weight goes to that corner.
        """

        n = self._n
        close_to_boundary = sum(1 for sd in sds if sd[1] < epsilon)

        blf = []
        if close_to_boundary > 0:
            for i in range(n):
                ip = self.next(i)
                if close_to_boundary > 1:
                    blf.append(1.0 if sds[i][1] < epsilon and sds[ip][1] < epsilon else 0.0)
                elif sds[i][1] < epsilon:
                    tmp = sds[ip][1] ** -2
                    blf.append(tmp / (tmp + sds[self.prev(i)][1] ** -2))
                elif sds[ip][1] < epsilon:
                    tmp = sds[i][1] ** -2
                    blf.append(tmp / (tmp + sds[self.next(ip)][1] ** -2))
                else:
                    blf.append(0.0)
        else:
            for i in range(n):
                blf.append((sds[i][1] * sds[self.next(i)][1]) ** -2)
            denominator = sum(blf)
            blf = [x / denominator for x in blf]
        return blf

    def blend_side_singular(self, sds: Sequence[Sequence[float]]) -> List[float]:
        """Weights of the side interpolants (partition of unity).

        Inside the domain side ``i`` gets ``d_i^-2``, normalized; on the
        boundary the weight is split evenly among the sides touched.
        """

        close_to_boundary = sum(1 for sd in sds if sd[1] < epsilon)

        if close_to_boundary > 0:
            blend_val = 1.0 / close_to_boundary
            return [blend_val if sd[1] < epsilon else 0.0 for sd in sds]
        blf = [sd[1] ** -2 for sd in sds]
        denominator = sum(blf)
        return [x / denominator for x in blf]

    blend_hermite = staticmethod(blend_hermite)

    def update_corner(self, i: int) -> None:
        step = self.twist_step
        ip = self.next(i)
        cd = self._corner_data[i]

        der = self._ribbons[i].curve.derivatives(1.0, 1)
        cd.point = der[0]
        cd.tangent1 = -der[1]
        der = self._ribbons[ip].curve.derivatives(0.0, 1)
        cd.tangent2 = der[1]

        d1 = self._ribbons[i].eval((1.0, 1.0))
        d2 = self._ribbons[i].eval((1.0 - step, 1.0))
        cd.twist1 = (d2 - d1) / step
        d1 = self._ribbons[ip].eval((0.0, 1.0))
        d2 = self._ribbons[ip].eval((step, 1.0))
        if self._legacy_twist:
            # historical behaviour: the second estimate clobbers twist1
            cd.twist1 = (d2 - d1) / step
        else:
            cd.twist2 = (d2 - d1) / step

    def update_corners(self) -> None:
        if len(self._corner_data) > self._n:
            del self._corner_data[self._n:]
        while len(self._corner_data) < self._n:
            self._corner_data.append(CornerData())
        for i in range(self._n):
            self.update_corner(i)

    def gamma(self, d: float) -> float:
        if self._use_gamma:
            return d / (2.0 * d + 1.0)
        return d

    @staticmethod
    def rational_twist(u: float, v: float, f, g) -> np.ndarray:
        """``(f u + g v) / (u + v)``, or zero where ``u + v`` vanishes."""

        if abs(u + v) < epsilon:
            return zero_vector()
        return (np.asarray(f, dtype=float) * u + np.asarray(g, dtype=float) * v) / (u + v)


class SideBasedSurface(Surface):
    """Side interpolants blended with :meth:`Surface.blend_side_singular`."""

    def eval(self, uv) -> np.ndarray:
        sds = self._param.map_to_ribbons(uv)
        blends = self.blend_side_singular(sds)
        p = np.zeros(3)
        for i in range(self._n):
            if blends[i] == 0.0:
                continue
            p += self.side_interpolant(i, sds[i][0], sds[i][1]) * blends[i]
        return p


class CornerBasedSurface(Surface):
    """Corner interpolants blended with :meth:`Surface.blend_corner`.

    The interpolant of corner ``i`` is the sum of the two side
    interpolants meeting there minus the corner correction, which
    removes the part they have in common.
    """

    def eval(self, uv) -> np.ndarray:
        sds = self._param.map_to_ribbons(uv)
        blends = self.blend_corner(sds)
        p = np.zeros(3)
        for i in range(self._n):
            if blends[i] == 0.0:
                continue
            ip = self.next(i)
            corner = (self.side_interpolant(i, sds[i][0], sds[i][1])
                      + self.side_interpolant(ip, sds[ip][0], sds[ip][1])
                      - self.corner_correction(i, 1.0 - sds[i][0], sds[ip][0]))
            p += corner * blends[i]
        return p


__all__ = [
    'CornerData',
    'Surface',
    'SideBasedSurface',
    'CornerBasedSurface',
]
