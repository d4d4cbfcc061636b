"""Sphere primitive with analytic ray-sphere intersection.

This module provides the Sphere and HitRecord dataclasses and the
intersection function. A sphere carries its own material parameters, and an
accepted hit copies them into the HitRecord so material code never needs a
reference back to the sphere.

The intersection solves the half-b form of the quadratic:
    a*t^2 + 2*h*t + c = 0

where:
    a = dot(direction, direction)
    h = dot(direction, oc)
    c = dot(oc, oc) - radius^2
    oc = origin - center

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from minipath.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from minipath.core.ray import vec3


@ti.dataclass
class Sphere:
    """A sphere with its material parameters.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
        material: The material tag (see MaterialType).
        albedo: The reflectance color, each channel in [0, 1].
        fuzz: Reflection perturbation scale, only used by metal.
    """

    center: vec3
    radius: ti.f32
    material: ti.i32
    albedo: vec3
    fuzz: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-sphere intersection.

    Attributes:
        hit: Whether the ray intersected the sphere (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
        point: The 3D point where the ray intersected the sphere.
        normal: The unit surface normal, always oriented against the ray.
        front_face: 1 if the ray hit the outside of the sphere, 0 otherwise.
        material: Material tag copied from the hit sphere.
        albedo: Albedo copied from the hit sphere.
        fuzz: Fuzz copied from the hit sphere.

    All fields other than hit are only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    material: ti.i32
    albedo: vec3
    fuzz: ti.f32


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material=0,
        albedo=vec3(0.0, 0.0, 0.0),
        fuzz=0.0,
    )


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-sphere intersection.

    The smaller root is tried first; if it lies outside [t_min, t_max] the
    larger root is tried. Both bounds are inclusive.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        sphere: The sphere to test intersection against.
        t_min: Minimum t value to consider a valid hit (avoids self-intersection).
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A HitRecord containing intersection information. Check the hit field
        to determine if intersection occurred.
    """
    oc = ray_origin - sphere.center
    a = tm.dot(ray_direction, ray_direction)
    half_b = tm.dot(oc, ray_direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = half_b * half_b - a * c

    # Initialize result (Taichi requires outer-scope declaration)
    rec = make_miss_record()

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        root = (-half_b - sqrt_d) / a
        valid = not (root < t_min or root > t_max)

        if not valid:
            root = (-half_b + sqrt_d) / a
            valid = not (root < t_min or root > t_max)

        if valid:
            point = ray_origin + root * ray_direction
            outward_normal = (point - sphere.center) / sphere.radius

            # Front face: ray direction and outward normal point in opposite directions
            front_face = 1
            normal = outward_normal
            if tm.dot(ray_direction, outward_normal) >= 0.0:
                front_face = 0
                normal = -outward_normal

            rec = HitRecord(
                hit=1,
                t=root,
                point=point,
                normal=normal,
                front_face=front_face,
                material=sphere.material,
                albedo=sphere.albedo,
                fuzz=sphere.fuzz,
            )

    return rec
