"""Metal (specular reflective) material implementation.

Metals mirror the incoming direction about the surface normal:

    R = I - 2(I . N)N

then perturb the mirrored direction by ``fuzz * random_in_unit_sphere()``.
A fuzz of 0 gives a perfect mirror; larger values blur the reflection. When
the perturbed direction points into the surface, the ray is absorbed, which
darkens rough metals at grazing angles.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.materials.metal import scatter_metal
    >>> # Use within a Taichi kernel:
    >>> # record = scatter_metal(albedo, fuzz, ray_in, hit_record)
"""

import logging
from collections.abc import Sequence

import taichi as ti

from spheretrace.core.ray import Ray
from spheretrace.core.vec3 import (
    dot,
    random_in_unit_sphere,
    real,
    reflect,
    unit_vector,
    vec3,
)
from spheretrace.geometry.sphere import HitRecord
from spheretrace.materials.material import ScatterRecord, validate_albedo

logger = logging.getLogger(__name__)


@ti.func
def scatter_metal(albedo: vec3, fuzz: real, ray_in: Ray, rec: HitRecord) -> ScatterRecord:
    """Scatter a ray off a metal surface.

    Args:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: The surface roughness in [0, 1]. 0 = perfect mirror.
        ray_in: The incoming ray. Its direction need not be normalized.
        rec: The hit record of a confirmed intersection.

    Returns:
        A ScatterRecord with attenuation = albedo. did_scatter is 0 when the
        fuzzed direction does not point away from the surface.
    """
    reflected = reflect(unit_vector(ray_in.direction), rec.normal)
    scattered_direction = reflected + fuzz * random_in_unit_sphere()

    did_scatter = 0
    if dot(scattered_direction, rec.normal) > 0.0:
        did_scatter = 1

    return ScatterRecord(
        did_scatter=did_scatter,
        attenuation=albedo,
        scattered=Ray(origin=rec.point, direction=scattered_direction),
    )


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of metal materials in the scene
MAX_METAL_MATERIALS = 256

# Storage for metal material properties
metal_albedos = ti.Vector.field(3, dtype=real, shape=MAX_METAL_MATERIALS)
metal_fuzzes = ti.field(dtype=real, shape=MAX_METAL_MATERIALS)
num_metal_materials = ti.field(dtype=ti.i32, shape=())


def clamp_fuzz(fuzz: float) -> float:
    """Clamp a fuzz value into [0, 1]."""
    return min(max(float(fuzz), 0.0), 1.0)


def clear_metal_materials() -> None:
    """Clear all metal materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_metal_materials[None] = 0


def add_metal_material(albedo: Sequence[float], fuzz: float = 0.0) -> int:
    """Add a metal material to the material registry.

    Args:
        albedo: The reflective color as (R, G, B).
            Each component must be in [0, 1].
        fuzz: The surface roughness. Default is 0 (perfect mirror).
            Values outside [0, 1] are clamped.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo component is outside [0, 1].
    """
    albedo = validate_albedo(albedo)
    clamped = clamp_fuzz(fuzz)
    if clamped != fuzz:
        logger.debug("Clamped metal fuzz %s to %s", fuzz, clamped)

    idx = num_metal_materials[None]
    if idx >= MAX_METAL_MATERIALS:
        raise RuntimeError(
            f"Maximum number of metal materials ({MAX_METAL_MATERIALS}) exceeded"
        )

    metal_albedos[idx] = albedo
    metal_fuzzes[idx] = clamped
    num_metal_materials[None] = idx + 1
    logger.debug("Added metal material %d with albedo %s, fuzz %s", idx, albedo, clamped)
    return idx


def get_metal_material_count() -> int:
    """Get the number of metal materials in the registry."""
    return int(num_metal_materials[None])


@ti.func
def get_metal_albedo(material_idx: ti.i32) -> vec3:
    """Get the albedo for a metal material by index."""
    return metal_albedos[material_idx]


@ti.func
def get_metal_fuzz(material_idx: ti.i32) -> real:
    """Get the (already clamped) fuzz for a metal material by index."""
    return metal_fuzzes[material_idx]


@ti.func
def scatter_metal_by_id(material_idx: ti.i32, ray_in: Ray, rec: HitRecord) -> ScatterRecord:
    """Scatter off a registered metal material.

    Looks up the albedo and fuzz from the registry and calls scatter_metal.
    """
    return scatter_metal(
        get_metal_albedo(material_idx), get_metal_fuzz(material_idx), ray_in, rec
    )
