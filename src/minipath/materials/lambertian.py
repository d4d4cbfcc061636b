"""Lambertian (ideal diffuse) material implementation.

The scattered direction is the surface normal plus a point drawn uniformly
by volume from the unit ball, i.e. the vector from the hit point to a random
target inside the unit sphere tangent to the surface. The attenuation is the
albedo, and a Lambertian surface never absorbs a ray.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from minipath.materials.lambertian import scatter_lambertian
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, state = scatter_lambertian(
    >>> #     albedo, hit_point, normal, state, time
    >>> # )
"""

import taichi as ti

from minipath.core.ray import near_zero, vec2, vec3
from minipath.core.sampler import random_in_unit_sphere


@ti.func
def fallback_to_normal(direction: vec3, normal: vec3) -> vec3:
    """Return the direction, or the normal if the direction is near zero."""
    result = direction
    if near_zero(direction):
        result = normal
    return result


@ti.func
def scatter_lambertian(
    albedo: vec3,
    hit_point: vec3,
    normal: vec3,
    state: vec2,
    time: ti.f32,
):
    """Sample a scattered ray direction for a Lambertian surface.

    If the sampled offset cancels the normal so that the direction is near
    zero in every component, the normal itself is used instead so that a
    zero-length ray never leaves the surface.

    Args:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
        hit_point: The intersection point on the surface.
        normal: The front-face surface normal at the hit point (unit length).
        state: The pixel's random state.
        time: The frame time perturbing the random stream.

    Returns:
        A tuple of (scattered_direction, attenuation, new_state). The
        direction is not normalized.
    """
    offset, state = random_in_unit_sphere(state, time)
    target = hit_point + normal + offset
    scattered_direction = fallback_to_normal(target - hit_point, normal)

    return scattered_direction, albedo, state
