"""Path tracing integrator and render kernels.

This module implements the per-ray color estimate and the per-pixel sample
loop. A path starts with color (1, 1, 1) and, at each bounce, either:
    - misses the scene: the color is multiplied by the sky gradient and the
      path ends,
    - hits a surface that scatters: the color is multiplied by the surface's
      attenuation and the path continues along the scattered ray,
    - hits a surface that absorbs: the path ends black.

The bounce count is capped at max_depth. A path that reaches the cap returns
the color accumulated so far; the cap is a safety bound, not a weight.

Each pixel seeds its own random state from its center coordinate, takes
samples_per_pixel jittered camera rays, averages them and applies a square
root gamma correction.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from minipath.camera.pinhole import make_camera, setup_camera
    >>> from minipath.core.integrator import render_frame, setup_render_target
    >>> from minipath.scene.description import create_default_scene
    >>> from minipath.scene.intersection import load_scene
    >>>
    >>> load_scene(create_default_scene())
    >>> setup_camera(make_camera((400, 200)))
    >>> setup_render_target(400, 200)
    >>> render_frame(time=0.0)
"""

import logging

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from minipath.camera.pinhole import get_ray
from minipath.core.ray import vec2, vec3
from minipath.core.sampler import next_random, seed_random_state
from minipath.materials.scatter import scatter
from minipath.scene.intersection import intersect_scene

logger = logging.getLogger(__name__)

# =============================================================================
# Rendering Constants
# =============================================================================

# Samples averaged per pixel
SAMPLES_PER_PIXEL = 20

# Maximum ray bounces (path length)
MAX_DEPTH = 10

# t_min and t_max for ray intersection (t_min avoids shadow acne)
T_MIN = 0.001
T_MAX = 10000.0

# Sky gradient endpoints: white at the horizon, blue overhead
HORIZON_COLOR = vec3(1.0, 1.0, 1.0)
SKY_COLOR = vec3(0.5, 0.7, 1.0)

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Gamma-corrected output colors, indexed [i, j] with j = 0 at the bottom row
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Sets the active image dimensions and clears the buffer. The buffer is
    preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum
            supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()
    logger.debug("Render target set up at %dx%d", width, height)


def clear_render_target() -> None:
    """Clear the render target buffer to black."""
    _color_buffer.fill(0.0)


def reset_render_target() -> None:
    """Clear the buffer and mark the render target as not set up."""
    clear_render_target()
    _render_target_initialized[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def _check_render_params(samples_per_pixel: int, max_depth: int) -> None:
    if samples_per_pixel <= 0:
        raise ValueError(f"samples_per_pixel must be positive, got {samples_per_pixel}")
    if max_depth <= 0:
        raise ValueError(f"max_depth must be positive, got {max_depth}")


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Vertical gradient background seen by rays that escape the scene.

    Blends from white to SKY_COLOR as the normalized direction's y goes
    from -1 to 1.
    """
    unit_direction = tm.normalize(direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - t) * HORIZON_COLOR + t * SKY_COLOR


@ti.func
def ray_color(
    ray_origin: vec3,
    ray_direction: vec3,
    max_depth: ti.i32,
    state: vec2,
    time: ti.f32,
):
    """Estimate the color carried back along one ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray (any length).
        max_depth: Maximum number of scene intersections along the path.
        state: The pixel's random state.
        time: The frame time perturbing the random stream.

    Returns:
        A tuple of (color, new_state).
    """
    origin = ray_origin
    direction = ray_direction
    color = vec3(1.0, 1.0, 1.0)

    # Active flag for path continuation (no early return from ti.func loops)
    active = 1

    for _ in range(max_depth):
        if active == 1:
            rec = intersect_scene(origin, direction, T_MIN, T_MAX)

            if rec.hit == 1:
                scattered_direction, attenuation, did_scatter, state = scatter(
                    direction, rec, state, time
                )
                if did_scatter == 1:
                    color *= attenuation
                    origin = rec.point
                    direction = scattered_direction
                else:
                    # Absorbed
                    color = vec3(0.0, 0.0, 0.0)
                    active = 0
            else:
                color *= sky_color(direction)
                active = 0

    return color, state


@ti.func
def shade_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    time: ti.f32,
) -> vec3:
    """Compute the final gamma-corrected color of one pixel.

    The pixel's fragment coordinate is its center (i + 0.5, j + 0.5). Each
    sample adds one random draw per axis (x first) to that coordinate before
    normalizing to screen space.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Number of samples to average.
        max_depth: Maximum bounces per sample.
        time: The frame time perturbing the random stream.

    Returns:
        The averaged color after sqrt gamma correction, each channel in [0, 1].
    """
    resolution = vec2(ti.cast(width, ti.f32), ti.cast(height, ti.f32))
    frag_coord = vec2(ti.cast(pixel_i, ti.f32) + 0.5, ti.cast(pixel_j, ti.f32) + 0.5)
    state = seed_random_state(frag_coord, resolution)

    pixel_color = vec3(0.0, 0.0, 0.0)
    for _ in range(samples_per_pixel):
        jitter_u, state = next_random(state, time)
        jitter_v, state = next_random(state, time)
        u = (frag_coord.x + jitter_u) / resolution.x
        v = (frag_coord.y + jitter_v) / resolution.y

        ray = get_ray(u, v)
        sample_color, state = ray_color(ray.origin, ray.direction, max_depth, state, time)
        pixel_color += sample_color

    pixel_color /= ti.cast(samples_per_pixel, ti.f32)
    return ti.sqrt(pixel_color)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_frame_kernel(
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    time: ti.f32,
):
    for i, j in ti.ndrange(width, height):
        _color_buffer[i, j] = shade_pixel(
            i, j, width, height, samples_per_pixel, max_depth, time
        )


@ti.kernel
def _copy_active_region(out: ti.types.ndarray(), width: ti.i32, height: ti.i32):
    # Buffer rows start at the bottom, image rows start at the top
    for i, j in ti.ndrange(width, height):
        for c in ti.static(range(3)):
            out[height - 1 - j, i, c] = _color_buffer[i, j][c]


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    time: ti.f32,
) -> vec3:
    return shade_pixel(pixel_i, pixel_j, width, height, samples_per_pixel, max_depth, time)


@ti.kernel
def _trace_single_ray(
    origin: vec3,
    direction: vec3,
    seed: vec2,
    max_depth: ti.i32,
    time: ti.f32,
) -> vec3:
    color, _ = ray_color(origin, direction, max_depth, seed, time)
    return color


# =============================================================================
# Public Rendering API
# =============================================================================


def render_frame(
    time: float = 0.0,
    samples_per_pixel: int = SAMPLES_PER_PIXEL,
    max_depth: int = MAX_DEPTH,
) -> None:
    """Render every pixel of the render target for one frame.

    Overwrites the buffer; frames are independent.

    Args:
        time: Frame time in seconds, used only to perturb the random stream.
        samples_per_pixel: Number of samples averaged per pixel.
        max_depth: Maximum bounces per sample.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If samples_per_pixel or max_depth is not positive.
    """
    _check_render_target_initialized()
    _check_render_params(samples_per_pixel, max_depth)

    width, height = get_image_dimensions()
    _render_frame_kernel(width, height, samples_per_pixel, max_depth, time)


def render_pixel(
    pixel_i: int,
    pixel_j: int,
    time: float = 0.0,
    samples_per_pixel: int = SAMPLES_PER_PIXEL,
    max_depth: int = MAX_DEPTH,
) -> tuple[float, float, float]:
    """Render a single pixel of the render target.

    Gives the same value render_frame() writes for that pixel. For production
    rendering, use render_frame() which processes all pixels in parallel.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        time: Frame time in seconds.
        samples_per_pixel: Number of samples averaged.
        max_depth: Maximum bounces per sample.

    Returns:
        Tuple of (R, G, B) color values after gamma correction.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    _check_render_params(samples_per_pixel, max_depth)

    width, height = get_image_dimensions()
    color = _render_single_pixel(
        pixel_i, pixel_j, width, height, samples_per_pixel, max_depth, time
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    seed: tuple[float, float] = (0.5, 0.5),
    time: float = 0.0,
    max_depth: int = MAX_DEPTH,
) -> tuple[float, float, float]:
    """Trace one ray through the loaded scene (no averaging, no gamma).

    Useful for inspecting the integrator on hand-built rays.

    Args:
        origin: Ray origin.
        direction: Ray direction (any non-zero length).
        seed: Initial 2D random state.
        time: Frame time perturbing the random stream.
        max_depth: Maximum bounces.

    Returns:
        Tuple of (R, G, B) linear color values.
    """
    color = _trace_single_ray(
        vec3(*origin), vec3(*direction), vec2(*seed), max_depth, time
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered frame as a NumPy array.

    Returns the gamma-corrected colors clamped to [0, 1] with shape
    (height, width, 3) and row 0 at the top of the image.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    image = np.empty((height, width, 3), dtype=np.float32)
    _copy_active_region(image, width, height)
    return np.clip(image, 0.0, 1.0, out=image)
