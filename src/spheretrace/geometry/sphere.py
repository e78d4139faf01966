"""Sphere primitive and ray-sphere intersection.

The intersection solves the quadratic

    |origin + t * direction - center|^2 = radius^2

with the half-b formulation, reporting the nearest root strictly inside
(t_min, t_max). A negative radius is supported on purpose: it flips the
outward normal, which turns the sphere into the inner wall of a hollow shell
(a glass bubble is a positive sphere with a slightly smaller negative sphere
inside it).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.geometry.sphere import Sphere, hit_sphere
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import Ray
from spheretrace.core.vec3 import dot, length_squared, real, vec3


@ti.dataclass
class Sphere:
    """A sphere with a reference to its material.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius. Negative values describe an inverted shell.
        material_id: The unified material ID used for shading.
    """

    center: vec3
    radius: real
    material_id: ti.i32


@ti.dataclass
class HitRecord:
    """Result of an intersection query.

    A record is either a hit (``hit == 1``) or a miss (``hit == 0``); the
    remaining fields are only meaningful for hits.

    Attributes:
        hit: 1 if the ray intersected a surface, 0 otherwise.
        t: The ray parameter at the intersection.
        point: The intersection point.
        normal: The unit surface normal, always facing against the ray.
        front_face: 1 if the ray hit the outside of the surface, 0 if it hit
            from within.
        material_id: The material of the hit surface (-1 on a miss). This is
            an index into the scene's material registry.
    """

    hit: ti.i32
    t: real
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: real, t_max: real) -> HitRecord:
    """Intersect a ray with a sphere.

    With oc = origin - center the quadratic coefficients are:
        a = |direction|^2
        half_b = direction . oc
        c = |oc|^2 - radius^2

    and the discriminant is half_b^2 - a*c. The smaller root is tried first;
    the larger one only if the smaller is out of range.

    Args:
        ray: The ray to test.
        sphere: The sphere to test against.
        t_min: Lower bound for accepted t (excludes self-intersection).
        t_max: Upper bound for accepted t.

    Returns:
        A hit record for the nearest accepted root, or a miss record.
    """
    oc = ray.origin - sphere.center

    a = length_squared(ray.direction)
    half_b = dot(ray.direction, oc)
    c = length_squared(oc) - sphere.radius * sphere.radius

    discriminant = half_b * half_b - a * c

    result = make_miss_record()

    if discriminant >= 0.0:
        sqrt_d = tm.sqrt(discriminant)

        root = (-half_b - sqrt_d) / a
        valid = root > t_min and root < t_max
        if not valid:
            root = (-half_b + sqrt_d) / a
            valid = root > t_min and root < t_max

        if valid:
            point = ray.at(root)

            # Divide by the signed radius: inverted shells get inward normals
            outward_normal = (point - sphere.center) / sphere.radius

            front_face = 1
            normal = outward_normal
            if dot(ray.direction, outward_normal) >= 0.0:
                front_face = 0
                normal = -outward_normal

            result = HitRecord(
                hit=1,
                t=root,
                point=point,
                normal=normal,
                front_face=front_face,
                material_id=sphere.material_id,
            )

    return result
