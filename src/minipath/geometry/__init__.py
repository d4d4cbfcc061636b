"""Geometry module for the sphere primitive.

Components:
    sphere: Sphere and HitRecord dataclasses with ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) so every pixel can
test its rays in parallel. A hit record carries a copy of the sphere's
material parameters.

Ray-object intersection follows the pattern:
    rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, t_max)
"""

from .sphere import HitRecord, Sphere, hit_sphere, make_miss_record

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_miss_record",
]
