"""Geometry module for the sphere primitive.

Components:
    sphere: Sphere dataclass, hit records and ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) so they run inside
the render kernel. They follow the pattern:
    record = hit_sphere(ray, sphere, t_min, t_max)
"""

from .sphere import HitRecord, Sphere, hit_sphere, make_miss_record

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_miss_record",
]
