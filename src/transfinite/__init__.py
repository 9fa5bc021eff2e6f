# -*- coding: utf-8 -*-
"""Generalized transfinite interpolation of multi-sided surface patches.

Copyright (c) 2025 transfinite contributors
MIT License
"""

from importlib.metadata import PackageNotFoundError, version

from transfinite.curves import BSplineCurve, bezier_curve, line_curve, polyline_curve
from transfinite.mesh import TriMesh
from transfinite.surface import CornerBasedSurface, CornerData, SideBasedSurface, Surface

try:
    __version__ = version("transfinite")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

__all__ = [
    'BSplineCurve',
    'bezier_curve',
    'line_curve',
    'polyline_curve',
    'TriMesh',
    'Surface',
    'CornerData',
    'SideBasedSurface',
    'CornerBasedSurface',
]
