#!/usr/bin/env python3
"""
Command line driver: build a transfinite surface from a YAML description
and write it out as an OBJ mesh.

Usage:
    python -m transfinite FILE.yaml [--output FILE.obj] [--resolution N]
                                    [--no-gamma] [--surface corner|side]

Examples:
    # Tessellate with the settings stored in the file
    python -m transfinite examples/pentagon.yaml

    # Override the sampling density and the output name
    python -m transfinite examples/pentagon.yaml -r 30 -o pentagon_fine.obj

Copyright (c) 2025 transfinite contributors
MIT License
"""

import argparse
import sys
from pathlib import Path

from transfinite.config import SURFACE_TYPES, build_surface, load_config
from transfinite.errors import TransfiniteError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='python -m transfinite',
        description='Tessellate a multi-sided transfinite surface into an OBJ mesh.',
    )
    parser.add_argument('file', help='YAML surface description')
    parser.add_argument('-o', '--output', help='output OBJ file (default: FILE with .obj suffix)')
    parser.add_argument('-r', '--resolution', type=int, help='number of concentric sampling layers')
    parser.add_argument('--no-gamma', action='store_true', help='disable the gamma distance remap')
    parser.add_argument('--surface', choices=sorted(SURFACE_TYPES), help='surface blending scheme')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    source_path = Path(args.file)
    if not source_path.exists():
        print(f"Error: File not found: {source_path}", file=sys.stderr)
        return 1

    try:
        cfg = load_config(source_path)
        if args.resolution is not None:
            if args.resolution < 1:
                print("Error: resolution must be >= 1", file=sys.stderr)
                return 1
            cfg.resolution = args.resolution
        if args.no_gamma:
            cfg.gamma = False
        if args.surface:
            cfg.surface = args.surface
        surf = build_surface(cfg)
        mesh = surf.eval_mesh(cfg.resolution)
    except (TransfiniteError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output = Path(args.output) if args.output else source_path.with_suffix('.obj')
    if not mesh.write_obj(output):
        return 1

    print(f"OK: {source_path.name} - {surf.n} sides, "
          f"{len(mesh.points())} points, {len(mesh.triangles())} triangles -> {output}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
