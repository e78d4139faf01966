"""Lambertian (ideal diffuse) material implementation.

Diffuse surfaces scatter the incoming ray into the direction

    normal + random_unit_vector()

which approximates a cosine-weighted distribution around the normal. The
attenuation is the material's albedo, and the ray is never absorbed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.materials.lambertian import scatter_lambertian
    >>> # Use within a Taichi kernel:
    >>> # record = scatter_lambertian(albedo, ray_in, hit_record)
"""

import logging
from collections.abc import Sequence

import taichi as ti

from spheretrace.core.ray import Ray
from spheretrace.core.vec3 import near_zero, random_unit_vector, real, vec3
from spheretrace.geometry.sphere import HitRecord
from spheretrace.materials.material import ScatterRecord, validate_albedo

logger = logging.getLogger(__name__)


@ti.func
def diffuse_direction(normal: vec3, offset: vec3) -> vec3:
    """Offset the normal by a unit vector, falling back to the normal.

    If the offset nearly cancels the normal, the sum is close to zero and
    would produce a degenerate ray; the normal is returned instead.
    """
    direction = normal + offset
    if near_zero(direction):
        direction = normal
    return direction


@ti.func
def scatter_lambertian(albedo: vec3, ray_in: Ray, rec: HitRecord) -> ScatterRecord:
    """Scatter a ray off a diffuse surface.

    Args:
        albedo: The diffuse reflectance color (RGB).
        ray_in: The incoming ray (unused; diffuse scattering ignores it).
        rec: The hit record of a confirmed intersection.

    Returns:
        A ScatterRecord that always scatters, with attenuation = albedo.
    """
    scatter_direction = diffuse_direction(rec.normal, random_unit_vector())

    return ScatterRecord(
        did_scatter=1,
        attenuation=albedo,
        scattered=Ray(origin=rec.point, direction=scatter_direction),
    )


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of Lambertian materials in the scene
MAX_LAMBERTIAN_MATERIALS = 256

# Storage for Lambertian material properties
lambertian_albedos = ti.Vector.field(3, dtype=real, shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def clear_lambertian_materials() -> None:
    """Clear all Lambertian materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_lambertian_materials[None] = 0


def add_lambertian_material(albedo: Sequence[float]) -> int:
    """Add a Lambertian material to the material registry.

    Args:
        albedo: The diffuse reflectance color as (R, G, B).
            Each component must be in [0, 1].

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo component is outside [0, 1].
    """
    albedo = validate_albedo(albedo)

    idx = num_lambertian_materials[None]
    if idx >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Lambertian materials ({MAX_LAMBERTIAN_MATERIALS}) exceeded"
        )

    lambertian_albedos[idx] = albedo
    num_lambertian_materials[None] = idx + 1
    logger.debug("Added Lambertian material %d with albedo %s", idx, albedo)
    return idx


def get_lambertian_material_count() -> int:
    """Get the number of Lambertian materials in the registry."""
    return int(num_lambertian_materials[None])


@ti.func
def get_lambertian_albedo(material_idx: ti.i32) -> vec3:
    """Get the albedo for a Lambertian material by index."""
    return lambertian_albedos[material_idx]


@ti.func
def scatter_lambertian_by_id(material_idx: ti.i32, ray_in: Ray, rec: HitRecord) -> ScatterRecord:
    """Scatter off a registered Lambertian material.

    Looks up the albedo from the registry and calls scatter_lambertian.
    """
    return scatter_lambertian(get_lambertian_albedo(material_idx), ray_in, rec)
