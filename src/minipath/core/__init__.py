"""Core rendering module.

Components:
    ray: Ray data structure and vector utilities
    sampler: Per-pixel hash-based random stream with explicit state
    integrator: Iterative path tracing and the render kernels
    renderer: Frame-level driver around the integrator

The integrator traces each camera ray through the scene for at most a fixed
number of bounces, multiplying the path color by each surface's attenuation
and by the sky gradient once the ray escapes. Every pixel averages a fixed
number of jittered samples before a square-root gamma correction.
"""

from .ray import (
    NEAR_ZERO_EPSILON,
    Ray,
    make_ray,
    near_zero,
    ray_at,
    reflect,
    vec2,
    vec3,
)
from .sampler import (
    next_random,
    random_in_unit_sphere,
    random_unit_vector,
    seed_random_state,
)

# Note: integrator and renderer are NOT imported here because they declare
# Taichi fields. Import them directly from minipath.core.integrator or
# minipath.core.renderer after ti.init().

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec2",
    "vec3",
    "reflect",
    "near_zero",
    "NEAR_ZERO_EPSILON",
    "seed_random_state",
    "next_random",
    "random_in_unit_sphere",
    "random_unit_vector",
]
