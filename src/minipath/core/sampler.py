"""Per-pixel hash-based random stream (sampler).

The stream is a fast, low-quality generator whose only job is to look random
enough for Monte Carlo averaging. Its whole state is a 2D vector: each draw
hashes (state + time) through a sine projection, writes the result back into
the state and returns it, so the generator is also its own seed.

The state is an explicit value. Every function that consumes randomness takes
the current state and returns the advanced one alongside its result, so a
pixel's sample loop threads a single state through camera jitter, material
scattering and every bounce. Nothing here is shared between pixels.

The hash is:
    x' = fract(sin(dot(state + time, (12.9898, 78.233))) * 43758.5453)
    y' = fract(sin(dot((x', state.y) + time, (12.9898, 78.233))) * 43758.5453)

and the draw returns x'. The second component is hashed from the already
updated first one.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> @ti.kernel
    ... def draw() -> ti.f32:
    ...     state = seed_random_state(vec2(0.5, 0.5), vec2(4.0, 4.0))
    ...     value, state = next_random(state, 0.0)
    ...     return value
"""

import taichi as ti
import taichi.math as tm

from minipath.core.ray import vec2, vec3

# Projection weights and multiplier of the sine hash
HASH_WEIGHTS = vec2(12.9898, 78.233)
HASH_SCALE = 43758.5453


@ti.func
def _hash(p: vec2, time: ti.f32) -> ti.f32:
    return tm.fract(ti.sin(tm.dot(p + time, HASH_WEIGHTS)) * HASH_SCALE)


@ti.func
def seed_random_state(frag_coord: vec2, resolution: vec2) -> vec2:
    """Seed a pixel's random state from its normalized fragment coordinate.

    Args:
        frag_coord: The pixel center in pixels, i.e. (i + 0.5, j + 0.5).
        resolution: The viewport size in pixels (width, height).

    Returns:
        The initial 2D state.
    """
    return frag_coord / resolution


@ti.func
def next_random(state: vec2, time: ti.f32):
    """Draw one float in [0, 1) and advance the state.

    Deterministic: the same state and time always give the same value and
    the same successor state.

    Args:
        state: The current 2D random state.
        time: The frame time perturbing the hash.

    Returns:
        A tuple of (value, new_state).
    """
    x = _hash(state, time)
    y = _hash(vec2(x, state.y), time)
    return x, vec2(x, y)


@ti.func
def _sample_direction_and_radius(state: vec2, time: ti.f32):
    """Draw phi, cos(theta) and the radius draw, in that order.

    Returns:
        A tuple of (unit_direction, radius, new_state).
    """
    u1, state = next_random(state, time)
    u2, state = next_random(state, time)
    u3, state = next_random(state, time)

    phi = 2.0 * tm.pi * u1
    cos_theta = 2.0 * u2 - 1.0
    theta = ti.acos(cos_theta)
    r = u3 ** (1.0 / 3.0)

    direction = vec3(
        ti.sin(theta) * ti.cos(phi),
        ti.sin(theta) * ti.sin(phi),
        ti.cos(theta),
    )
    return direction, r, state


@ti.func
def random_in_unit_sphere(state: vec2, time: ti.f32):
    """Generate a point uniformly distributed by volume inside the unit ball.

    Draws phi ~ U(0, 2*pi), cos(theta) = 2u - 1 and a radius r = w^(1/3),
    then converts from spherical to Cartesian coordinates. Three draws are
    consumed in that order.

    Args:
        state: The current 2D random state.
        time: The frame time perturbing the hash.

    Returns:
        A tuple of (point, new_state) with |point| <= 1.
    """
    direction, r, state = _sample_direction_and_radius(state, time)
    return r * direction, state


@ti.func
def random_unit_vector(state: vec2, time: ti.f32):
    """Generate a random unit vector from the unit-ball sample's angles.

    The radius draw is still consumed, so the stream advances by three
    draws, but it has no effect on the direction. A zero radius draw
    still yields a unit vector.

    Args:
        state: The current 2D random state.
        time: The frame time perturbing the hash.

    Returns:
        A tuple of (unit_vector, new_state).
    """
    direction, _r, state = _sample_direction_and_radius(state, time)
    return tm.normalize(direction), state
