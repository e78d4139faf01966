"""World storage and nearest-hit queries.

The world is the hittable list of the renderer: an ordered collection of
spheres, stored structure-of-arrays in Taichi fields so the render kernel can
scan them. Each sphere carries the unified material ID of its surface.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.scene.intersection import add_sphere, clear_world, hit_world
    >>> clear_world()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5, material_id=0)
    >>> # Use hit_world within a Taichi kernel
"""

import logging
from collections.abc import Sequence

import taichi as ti

from spheretrace.core.ray import Ray
from spheretrace.core.vec3 import real, to_tuple
from spheretrace.geometry.sphere import HitRecord, Sphere, hit_sphere, make_miss_record

logger = logging.getLogger(__name__)

# Maximum number of spheres supported in the world
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=real, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=real, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_world() -> None:
    """Remove all spheres from the world.

    Resets the sphere count to zero. The field data is not cleared but will
    be overwritten when new spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(center: Sequence[float], radius: float, material_id: int = 0) -> int:
    """Append a sphere to the world.

    Args:
        center: The center point of the sphere as (x, y, z).
        radius: The radius. Negative values describe an inverted (hollow)
            shell whose normals point inward.
        material_id: The unified material ID to shade the sphere with.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
        ValueError: If the radius is zero.
    """
    if radius == 0.0:
        raise ValueError("Sphere radius must be non-zero")

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

    sphere_centers[idx] = (float(center[0]), float(center[1]), float(center[2]))
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    logger.debug("Added sphere %d at %s, radius %s, material %d", idx, center, radius, material_id)
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the world."""
    return int(num_spheres[None])


def get_sphere(idx: int) -> tuple[tuple[float, float, float], float, int]:
    """Read back a stored sphere as (center, radius, material_id).

    Raises:
        IndexError: If idx does not refer to a stored sphere.
    """
    if idx < 0 or idx >= num_spheres[None]:
        raise IndexError(f"Sphere index {idx} out of range")
    return (
        to_tuple(sphere_centers[idx]),
        float(sphere_radii[idx]),
        int(sphere_material_ids[idx]),
    )


@ti.func
def get_world_sphere(i: ti.i32) -> Sphere:
    """Assemble the Sphere stored at index i."""
    return Sphere(
        center=sphere_centers[i],
        radius=sphere_radii[i],
        material_id=sphere_material_ids[i],
    )


@ti.func
def hit_world(ray: Ray, t_min: real, t_max: real) -> HitRecord:
    """Find the nearest intersection of a ray with the world.

    Scans all spheres in order. Each accepted hit shrinks the search range to
    its t, so later spheres can only replace it with a strictly closer hit.

    Args:
        ray: The ray to test.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        The closest hit record, or a miss record if nothing was hit.
    """
    closest_so_far = t_max
    result = make_miss_record()

    for i in range(num_spheres[None]):
        rec = hit_sphere(ray, get_world_sphere(i), t_min, closest_so_far)
        if rec.hit == 1:
            closest_so_far = rec.t
            result = rec

    return result
