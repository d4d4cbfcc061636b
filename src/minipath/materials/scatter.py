"""Material dispatch for the path tracer.

Selects the scattering model from the material tag copied into a hit record.
Metal gets the specular model; every other tag falls back to Lambertian.
"""

import taichi as ti

from minipath.core.ray import vec2, vec3
from minipath.geometry.sphere import HitRecord
from minipath.materials.lambertian import scatter_lambertian
from minipath.materials.material import MaterialType
from minipath.materials.metal import scatter_metal


@ti.func
def scatter(
    incident_direction: vec3,
    rec: HitRecord,
    state: vec2,
    time: ti.f32,
):
    """Scatter an incoming ray at a hit according to the hit's material.

    Args:
        incident_direction: The incoming ray direction.
        rec: The accepted hit record (hit == 1).
        state: The pixel's random state.
        time: The frame time perturbing the random stream.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter, new_state)
        where did_scatter is 0 when the path is absorbed. The scattered ray
        starts at rec.point.
    """
    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if rec.material == int(MaterialType.METAL):
        scattered_direction, attenuation, did_scatter, state = scatter_metal(
            rec.albedo, rec.fuzz, incident_direction, rec.normal, state, time
        )
    else:
        scattered_direction, attenuation, state = scatter_lambertian(
            rec.albedo, rec.point, rec.normal, state, time
        )
        did_scatter = 1

    return scattered_direction, attenuation, did_scatter, state
