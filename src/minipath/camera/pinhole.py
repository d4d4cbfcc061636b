"""Axis-aligned pinhole camera for primary ray generation.

The camera sits at the world origin looking down -z. Its viewport is a
rectangle one focal length in front of the origin, 2 units tall and as wide
as the aspect ratio requires. There is no lens and no orientation control.

The viewport is described by three vectors:
- lower_left_corner: the viewport corner at (u, v) = (0, 0)
- horizontal: the full viewport width along +x
- vertical: the full viewport height along +y

Viewport geometry is computed in Python with NumPy once per frame size and
stored in Taichi fields so kernels can build rays from it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from minipath.camera.pinhole import make_camera, setup_camera, get_ray
    >>>
    >>> camera = make_camera((400, 200))
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5)  # Ray through image center
"""

from dataclasses import dataclass

import numpy as np
import taichi as ti

from minipath.core.ray import Ray, make_ray

# Fixed viewport geometry
VIEWPORT_HEIGHT = 2.0
FOCAL_LENGTH = 1.0

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """Viewport geometry of the pinhole camera.

    Attributes:
        origin: Camera position in world space.
        lower_left_corner: Viewport point at (u, v) = (0, 0).
        horizontal: Vector spanning the full viewport width.
        vertical: Vector spanning the full viewport height.
    """

    origin: tuple[float, float, float]
    lower_left_corner: tuple[float, float, float]
    horizontal: tuple[float, float, float]
    vertical: tuple[float, float, float]

    @property
    def aspect_ratio(self) -> float:
        """Viewport width divided by viewport height."""
        return self.horizontal[0] / self.vertical[1]


def make_camera(resolution: tuple[int, int]) -> Camera:
    """Build the camera for a given output resolution.

    Args:
        resolution: The output size in pixels as (width, height).

    Returns:
        The camera with its viewport centered one focal length in front of
        the origin.

    Raises:
        ValueError: If width or height is not positive.
    """
    width, height = resolution
    if width <= 0 or height <= 0:
        raise ValueError(f"Resolution must be positive, got {width}x{height}")

    aspect_ratio = width / height
    viewport_width = aspect_ratio * VIEWPORT_HEIGHT

    origin = np.zeros(3, dtype=np.float64)
    horizontal = np.array([viewport_width, 0.0, 0.0])
    vertical = np.array([0.0, VIEWPORT_HEIGHT, 0.0])
    lower_left = origin - horizontal / 2.0 - vertical / 2.0 - np.array([0.0, 0.0, FOCAL_LENGTH])

    return Camera(
        origin=tuple(origin.tolist()),
        lower_left_corner=tuple(lower_left.tolist()),
        horizontal=tuple(horizontal.tolist()),
        vertical=tuple(vertical.tolist()),
    )


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_camera(camera: Camera) -> None:
    """Write the camera's viewport geometry to the GPU-side fields.

    Must be called before rendering and again whenever the resolution
    changes.

    Args:
        camera: The camera returned by make_camera().
    """
    _camera_origin[None] = list(camera.origin)
    _viewport_horizontal[None] = list(camera.horizontal)
    _viewport_vertical[None] = list(camera.vertical)
    _lower_left_corner[None] = list(camera.lower_left_corner)


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def get_ray(u: ti.f32, v: ti.f32) -> Ray:
    """Generate a ray through normalized screen coordinates (u, v).

    - u = 0: left edge, u = 1: right edge
    - v = 0: bottom edge, v = 1: top edge

    Args:
        u: Horizontal coordinate in [0, 1] (left to right).
        v: Vertical coordinate in [0, 1] (bottom to top).

    Returns:
        A Ray from the camera origin toward the viewport point. The direction
        is not normalized.
    """
    origin = _camera_origin[None]
    direction = (
        _lower_left_corner[None]
        + u * _viewport_horizontal[None]
        + v * _viewport_vertical[None]
        - origin
    )
    return make_ray(origin, direction)


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get the camera state currently stored in the fields.

    Returns:
        Dictionary with origin, horizontal, vertical and lower_left.
    """
    origin_vec = _camera_origin[None]
    h_vec = _viewport_horizontal[None]
    vert_vec = _viewport_vertical[None]
    ll_vec = _lower_left_corner[None]

    return {
        "origin": (float(origin_vec[0]), float(origin_vec[1]), float(origin_vec[2])),
        "horizontal": (float(h_vec[0]), float(h_vec[1]), float(h_vec[2])),
        "vertical": (float(vert_vec[0]), float(vert_vec[1]), float(vert_vec[2])),
        "lower_left": (float(ll_vec[0]), float(ll_vec[1]), float(ll_vec[2])),
    }
