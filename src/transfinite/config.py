"""YAML surface descriptions.

A description names the boundary curves and the surface options::

    surface: corner            # corner | side
    gamma: true
    legacy_twist: false
    ribbon: compatible         # compatible | linear
    parameterization: wachspress   # wachspress | mean_value
    resolution: 15
    curves:
      - [[0, 0, 0], [1, 0, 0]]                 # Bezier control points
      - {points: [[1, 0, 0], [1, 1, 0]]}       # same, mapping form
      - {degree: 2, knots: [0, 0, 0, 1, 1, 1],
         points: [[1, 1, 0], [0.5, 1.2, 0], [0, 1, 0]]}
      - {polyline: [[0, 1, 0], [0, 0.5, 0], [0, 0, 0]]}

:func:`load_config` reads a file, :func:`parse_config` validates an
already loaded mapping and :func:`build_surface` turns the result into a
surface that is ready for evaluation.

Copyright (c) 2025 transfinite contributors
MIT License
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from transfinite.curves import BSplineCurve, bezier_curve, polyline_curve
from transfinite.errors import ConfigError
from transfinite.parameterization import BarycentricParameterization
from transfinite.ribbon import CompatibleRibbon, LinearRibbon
from transfinite.surface import CornerBasedSurface, SideBasedSurface, Surface

SURFACE_TYPES = {
    'corner': CornerBasedSurface,
    'side': SideBasedSurface,
}

RIBBON_TYPES = {
    'compatible': CompatibleRibbon,
    'linear': LinearRibbon,
}

PARAMETERIZATION_TYPES = ('wachspress', 'mean_value')

DEFAULT_RESOLUTION = 15


@dataclass
class SurfaceConfig:
    """Validated surface description."""

    curves: List[BSplineCurve] = field(default_factory=list)
    surface: str = 'corner'
    gamma: bool = True
    legacy_twist: bool = False
    ribbon: str = 'compatible'
    parameterization: str = 'wachspress'
    resolution: int = DEFAULT_RESOLUTION


def load_config(path: Path | str) -> SurfaceConfig:
    """Read and validate a YAML surface description."""

    path = Path(path)
    with path.open('r', encoding='utf-8') as fp:
        try:
            data = yaml.safe_load(fp)
        except yaml.YAMLError as exc:
            raise ConfigError(f'invalid YAML in {path}: {exc}') from exc
    return parse_config(data)


def parse_config(data: Dict[str, Any]) -> SurfaceConfig:
    if not isinstance(data, dict):
        raise ConfigError('surface description must be a mapping')

    cfg = SurfaceConfig()
    cfg.surface = _choice(data, 'surface', cfg.surface, tuple(SURFACE_TYPES))
    cfg.ribbon = _choice(data, 'ribbon', cfg.ribbon, tuple(RIBBON_TYPES))
    cfg.parameterization = _choice(data, 'parameterization', cfg.parameterization,
                                   PARAMETERIZATION_TYPES)
    cfg.gamma = _flag(data, 'gamma', cfg.gamma)
    cfg.legacy_twist = _flag(data, 'legacy_twist', cfg.legacy_twist)

    resolution = data.get('resolution', cfg.resolution)
    if isinstance(resolution, bool) or not isinstance(resolution, int) or resolution < 1:
        raise ConfigError(f'expected a positive integer, got {resolution!r}', 'resolution')
    cfg.resolution = resolution

    curves = data.get('curves')
    if not isinstance(curves, list) or len(curves) < 2:
        raise ConfigError('at least two curves are required', 'curves')
    cfg.curves = [_parse_curve(c, f'curves[{i}]') for i, c in enumerate(curves)]
    return cfg


def build_surface(cfg: SurfaceConfig) -> Surface:
    """Create, set up and update the surface described by ``cfg``."""

    surface_class = SURFACE_TYPES[cfg.surface]
    surf = surface_class(parameterization=BarycentricParameterization(cfg.parameterization),
                         ribbon_class=RIBBON_TYPES[cfg.ribbon],
                         legacy_twist=cfg.legacy_twist)
    surf.set_gamma(cfg.gamma)
    surf.set_curves(cfg.curves)
    surf.setup_loop()
    surf.update()
    return surf


def _choice(data, key, default, allowed):
    value = data.get(key, default)
    if value not in allowed:
        raise ConfigError(f'expected one of {", ".join(allowed)}, got {value!r}', key)
    return value


def _flag(data, key, default):
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f'expected true or false, got {value!r}', key)
    return value


def _parse_curve(entry, key) -> BSplineCurve:
    try:
        if isinstance(entry, list):
            return bezier_curve(entry)
        if not isinstance(entry, dict):
            raise ConfigError('curve must be a list of points or a mapping', key)
        if 'polyline' in entry:
            return polyline_curve(entry['polyline'])
        if 'points' not in entry:
            raise ConfigError('curve mapping needs "points" or "polyline"', key)
        points = entry['points']
        if 'knots' not in entry and 'degree' not in entry:
            return bezier_curve(points)
        degree = entry.get('degree', len(points) - 1)
        knots = entry.get('knots')
        if knots is None:
            knots = _uniform_knots(degree, len(points))
        return BSplineCurve(degree, knots, points)
    except (TypeError, ValueError) as exc:
        raise ConfigError(str(exc), key) from exc


def _uniform_knots(degree, count):
    # clamped ends, evenly spaced interior knots
    inner = count - degree - 1
    return ([0.0] * (degree + 1)
            + [(k + 1) / (inner + 1) for k in range(inner)]
            + [1.0] * (degree + 1))


__all__ = [
    'SurfaceConfig',
    'SURFACE_TYPES',
    'RIBBON_TYPES',
    'PARAMETERIZATION_TYPES',
    'load_config',
    'parse_config',
    'build_surface',
]
