#!/usr/bin/env python3
"""Render the sphere scene at a few frame times and compare their noise.

Usage:
    python examples/render_spheres.py [--width W] [--height H] [--no-show]

Renders two frames of the static scene at different time values, saves
both, and (unless --no-show) opens a Matplotlib comparison of the two noise
patterns.
"""

from __future__ import annotations

import argparse
import sys

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Render and compare two frames.")
    parser.add_argument("--width", type=int, default=400, help="Image width (default: 400)")
    parser.add_argument("--height", type=int, default=225, help="Image height (default: 225)")
    parser.add_argument("--no-show", action="store_true", help="Skip the Matplotlib window")
    return parser.parse_args()


def main() -> int:
    """Main entry point."""
    args = parse_args()
    ti.init(arch=ti.cpu)

    from minipath.core.renderer import FrameRenderer, RenderSettings
    from minipath.preview import compute_rmse, save_png_from_array, show_comparison

    renderer = FrameRenderer(RenderSettings(width=args.width, height=args.height))
    renderer.load_scene()

    first = renderer.render(time=0.0)
    second = renderer.render(time=1.0)
    save_png_from_array(first, "spheres_t0.png")
    save_png_from_array(second, "spheres_t1.png")
    print(f"RMSE between frames: {compute_rmse(first, second):.6f}")

    if not args.no_show:
        show_comparison(first, second, labels=("t = 0", "t = 1"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
