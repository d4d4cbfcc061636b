"""Command-line entry point: render the sphere scene to PNG.

Usage:
    minipath [options]
    python -m minipath.cli [options]

Options:
    --width WIDTH          Image width in pixels (default: 400)
    --height HEIGHT        Image height in pixels (default: 225)
    --samples SAMPLES      Samples per pixel (default: 20)
    --max-depth DEPTH      Maximum bounces per sample (default: 10)
    --time TIME            Time of the first frame in seconds (default: 0.0)
    --frames N             Number of frames to render (default: 1)
    --frame-step STEP      Seconds between frames (default: 1/30)
    --output OUTPUT        Output file path (default: spheres.png)
    --live                 Open the live preview window instead of writing files
    --arch {gpu,cpu}       Taichi backend (default: gpu, falls back to cpu)
    --quiet                Suppress progress output
    --verbose              Enable debug logging

Example:
    minipath --width 800 --height 450 --frames 30 --output frames/spheres.png
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from collections.abc import Sequence
from pathlib import Path

import taichi as ti

logger = logging.getLogger("minipath")

DEFAULT_FRAME_STEP = 1.0 / 30.0


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="minipath",
        description="Render the four-sphere path tracing scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=225,
        help="Image height in pixels (default: 225)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=20,
        help="Samples per pixel (default: 20)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=10,
        help="Maximum bounces per sample (default: 10)",
    )
    parser.add_argument(
        "--time",
        type=float,
        default=0.0,
        help="Time of the first frame in seconds (default: 0.0)",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=1,
        help="Number of frames to render (default: 1)",
    )
    parser.add_argument(
        "--frame-step",
        type=float,
        default=DEFAULT_FRAME_STEP,
        help="Seconds between consecutive frames (default: 1/30)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.png",
        help="Output file path (default: spheres.png)",
    )
    parser.add_argument(
        "--live",
        action="store_true",
        help="Open the live preview window instead of writing files",
    )
    parser.add_argument(
        "--arch",
        choices=("gpu", "cpu"),
        default="gpu",
        help="Taichi backend (default: gpu, falls back to cpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def configure_logging(verbose: bool = False) -> None:
    """Send library log records to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def initialize_taichi(arch: str = "gpu") -> str:
    """Initialize Taichi, falling back to the CPU if no GPU backend works.

    Returns:
        Name of the backend being used.
    """
    if arch == "gpu":
        try:
            ti.init(arch=ti.gpu)
            return "GPU"
        except Exception as e:
            logger.warning("GPU backend unavailable (%s), falling back to CPU", e)
    ti.init(arch=ti.cpu)
    return "CPU"


def frame_times(start: float, count: int, step: float) -> list[float]:
    """Time values for a sequence of frames.

    Raises:
        ValueError: If count is not positive.
    """
    if count <= 0:
        raise ValueError(f"Frame count must be positive, got {count}")
    return [start + index * step for index in range(count)]


def frame_output_path(output: str | Path, index: int, count: int) -> Path:
    """Output path of one frame.

    A single frame is written to the path as given. Sequences get a zero
    padded frame number before the suffix: spheres.png -> spheres_0007.png.
    """
    path = Path(output)
    if count == 1:
        return path
    width = max(4, len(str(count - 1)))
    return path.with_name(f"{path.stem}_{index:0{width}d}{path.suffix or '.png'}")


def render_to_files(
    width: int = 400,
    height: int = 225,
    samples_per_pixel: int = 20,
    max_depth: int = 10,
    start_time: float = 0.0,
    num_frames: int = 1,
    frame_step: float = DEFAULT_FRAME_STEP,
    output_path: str = "spheres.png",
    quiet: bool = False,
) -> list[Path]:
    """Render the default scene and write each frame as a PNG.

    Returns:
        Paths of the files written, in frame order.
    """
    # Lazy imports so Taichi is initialized before fields are declared
    from minipath.core.renderer import FrameRenderer, RenderSettings
    from minipath.preview.export import save_png_from_array
    from minipath.scene.description import create_default_scene

    settings = RenderSettings(
        width=width,
        height=height,
        samples_per_pixel=samples_per_pixel,
        max_depth=max_depth,
    )
    times = frame_times(start_time, num_frames, frame_step)

    if not quiet:
        print(f"Creating sphere scene ({width}x{height})...")
    renderer = FrameRenderer(settings)
    renderer.load_scene(create_default_scene())

    if not quiet:
        print(
            f"Rendering {num_frames} frame(s) at {samples_per_pixel} samples per pixel..."
        )

    start = time.time()
    written = []
    for index, (t, image) in enumerate(renderer.render_frames(times)):
        output_file = frame_output_path(output_path, index, num_frames)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        save_png_from_array(image, output_file)
        written.append(output_file)

        if not quiet:
            elapsed = time.time() - start
            fps = (index + 1) / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {index + 1}/{num_frames} frames "
                f"(t = {t:.3f}s) - {fps:.2f} frames/s",
                end="",
                flush=True,
            )

    if not quiet:
        print()  # Newline after progress
        if len(written) == 1:
            print(f"Saved to: {written[0].absolute()}")
        else:
            print(f"Saved {len(written)} frames to: {written[0].parent.absolute()}")
        print(f"Total time: {time.time() - start:.2f}s")

    return written


def run_live(
    width: int = 400,
    height: int = 225,
    samples_per_pixel: int = 20,
    max_depth: int = 10,
) -> None:
    """Open the live preview window on the default scene.

    Raises:
        RuntimeError: If no display is available.
    """
    from minipath.core.renderer import FrameRenderer, RenderSettings
    from minipath.preview.interactive import LivePreview, is_display_available

    if not is_display_available():
        raise RuntimeError("No display available for the live preview")

    renderer = FrameRenderer(
        RenderSettings(
            width=width,
            height=height,
            samples_per_pixel=samples_per_pixel,
            max_depth=max_depth,
        )
    )
    renderer.load_scene()
    LivePreview(renderer).run()


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(args.verbose)

    backend = initialize_taichi(args.arch)
    if not args.quiet:
        print(f"Using {backend} backend")

    try:
        if args.live:
            run_live(
                width=args.width,
                height=args.height,
                samples_per_pixel=args.samples,
                max_depth=args.max_depth,
            )
        else:
            render_to_files(
                width=args.width,
                height=args.height,
                samples_per_pixel=args.samples,
                max_depth=args.max_depth,
                start_time=args.time,
                num_frames=args.frames,
                frame_step=args.frame_step,
                output_path=args.output,
                quiet=args.quiet,
            )
        return 0
    except Exception as e:
        logger.debug("Render failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
