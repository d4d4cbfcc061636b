"""Metal (specular reflective) material implementation.

This module implements fuzzy metal reflection. The normalized incident
direction is mirrored about the surface normal:
    R = I - 2(I . N)N

and then perturbed by fuzz times a random point in the unit ball. A perfect
metal (fuzz=0) is a mirror; larger fuzz spreads the reflection. A ray whose
perturbed direction ends up pointing into the surface is absorbed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from minipath.materials.metal import scatter_metal
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter, state = scatter_metal(
    >>> #     albedo, fuzz, incident_dir, normal, state, time
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from minipath.core.ray import reflect, vec2, vec3
from minipath.core.sampler import random_in_unit_sphere


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzz: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    state: vec2,
    time: ti.f32,
):
    """Compute the scattered ray direction for a metal surface.

    The fuzz sample is drawn even when fuzz is zero, so the random stream
    advances by the same amount for every metal bounce.

    Args:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: The perturbation scale. 0 = perfect mirror.
        incident_direction: The incoming ray direction (any length).
        normal: The front-face surface normal (unit length).
        state: The pixel's random state.
        time: The frame time perturbing the random stream.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter, new_state)
        where did_scatter is 1 if the ray leaves the surface and 0 if it is
        absorbed. The direction is not renormalized after perturbation.
    """
    reflected = reflect(tm.normalize(incident_direction), normal)

    offset, state = random_in_unit_sphere(state, time)
    scattered_direction = reflected + fuzz * offset

    did_scatter = 0
    if tm.dot(scattered_direction, normal) > 0.0:
        did_scatter = 1

    return scattered_direction, albedo, did_scatter, state
