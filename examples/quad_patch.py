"""Four-sided patch demo: a saddle-like quad from cubic Bezier edges.

This example demonstrates:
1. Building boundary curves with :func:`transfinite.bezier_curve`
2. Comparing the corner-based and side-based blending schemes
3. Exporting the tessellations as OBJ meshes

Usage:
    python quad_patch.py                         # corner-based, resolution 15
    python quad_patch.py --surface side -r 30    # side-based, finer mesh
    python quad_patch.py --output build/quad     # write build/quad.obj

Copyright (c) 2025 transfinite contributors
MIT License
"""

import argparse
from pathlib import Path

from transfinite import CornerBasedSurface, SideBasedSurface, bezier_curve


def create_curves(height=0.5):
    """Four cubic edges of a unit square, alternately bent up and down."""

    return [
        bezier_curve([(0, 0, 0), (1 / 3, 0, height), (2 / 3, 0, height), (1, 0, 0)]),
        bezier_curve([(1, 0, 0), (1, 1 / 3, -height), (1, 2 / 3, -height), (1, 1, 0)]),
        bezier_curve([(1, 1, 0), (2 / 3, 1, height), (1 / 3, 1, height), (0, 1, 0)]),
        bezier_curve([(0, 1, 0), (0, 2 / 3, -height), (0, 1 / 3, -height), (0, 0, 0)]),
    ]


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('--surface', choices=('corner', 'side'), default='corner')
    parser.add_argument('-r', '--resolution', type=int, default=15)
    parser.add_argument('--height', type=float, default=0.5)
    parser.add_argument('--output', default='quad_patch')
    args = parser.parse_args()

    surf = CornerBasedSurface() if args.surface == 'corner' else SideBasedSurface()
    surf.set_curves(create_curves(args.height))
    surf.setup_loop()
    surf.update()

    mesh = surf.eval_mesh(args.resolution)
    output = Path(args.output).with_suffix('.obj')
    output.parent.mkdir(parents=True, exist_ok=True)
    mesh.write_obj(output)
    print(f"{len(mesh.points())} points, {len(mesh.triangles())} triangles -> {output}")


if __name__ == '__main__':
    main()
