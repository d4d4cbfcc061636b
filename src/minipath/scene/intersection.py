"""Scene storage and nearest-hit queries.

The loaded scene lives in Taichi fields (Structure of Arrays layout) so
kernels can scan it. load_scene() writes a whole Scene at once; nothing in
the render path writes to these fields, so every pixel reads the same
immutable list.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from minipath.scene.description import create_default_scene
    >>> from minipath.scene.intersection import load_scene
    >>> load_scene(create_default_scene())
    4
    >>> # Use intersect_scene within a Taichi kernel
"""

import logging

import taichi as ti

from minipath.core.ray import vec3
from minipath.geometry.sphere import HitRecord, Sphere, hit_sphere, make_miss_record
from minipath.scene.description import Scene

logger = logging.getLogger(__name__)

# Maximum number of spheres supported in the scene
MAX_SPHERES = 64

# Sphere storage: Structure of Arrays layout for GPU efficiency
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_materials = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
sphere_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_fuzz = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres from the scene.

    Resets the sphere count to zero. The field data is overwritten by the
    next load_scene() call.
    """
    num_spheres[None] = 0


def load_scene(scene: Scene) -> int:
    """Upload a scene, replacing whatever was loaded before.

    Args:
        scene: The scene description to upload.

    Returns:
        The number of spheres loaded.

    Raises:
        RuntimeError: If the scene has more than MAX_SPHERES spheres.
    """
    count = len(scene.spheres)
    if count > MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded: {count}")

    clear_scene()
    for idx, sphere in enumerate(scene.spheres):
        sphere_centers[idx] = list(sphere.center)
        sphere_radii[idx] = sphere.radius
        sphere_materials[idx] = int(sphere.material)
        sphere_albedos[idx] = list(sphere.albedo)
        sphere_fuzz[idx] = sphere.fuzz
    num_spheres[None] = count

    logger.debug("Loaded scene with %d spheres", count)
    return count


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def get_sphere(idx: ti.i32) -> Sphere:
    """Read one sphere back from scene storage."""
    return Sphere(
        center=sphere_centers[idx],
        radius=sphere_radii[idx],
        material=sphere_materials[idx],
        albedo=sphere_albedos[idx],
        fuzz=sphere_fuzz[idx],
    )


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Find the closest sphere hit along a ray.

    Scans every sphere in order. Each accepted hit shrinks the upper bound
    to its t, and a later sphere replaces it only when strictly nearer, so
    the first sphere in scan order wins an exact tie.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        The HitRecord of the closest intersection, or a miss record
        (hit == 0) if no sphere was hit.
    """
    closest_t = t_max
    result = make_miss_record()

    for i in range(num_spheres[None]):
        rec = hit_sphere(ray_origin, ray_direction, get_sphere(i), t_min, closest_t)
        if rec.hit == 1 and (result.hit == 0 or rec.t < closest_t):
            closest_t = rec.t
            result = rec

    return result
