"""Dielectric (glass/water) material implementation.

Dielectrics always scatter and never tint the light. At each hit the ray is
either reflected or refracted:

    - Snell's law decides whether refraction is possible at all; when
      ratio * sin(theta) > 1 the ray is totally internally reflected.
    - Otherwise Schlick's approximation gives the reflectance, and the ray
      reflects with that probability.

The refraction ratio depends on the side of the surface: entering the
material it is 1 / refraction_index, leaving it is refraction_index.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # record = scatter_dielectric(refraction_index, ray_in, hit_record)
"""

import logging

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import Ray
from spheretrace.core.vec3 import (
    dot,
    random_double,
    real,
    reflect,
    refract,
    schlick_reflectance,
    unit_vector,
    vec3,
)
from spheretrace.geometry.sphere import HitRecord
from spheretrace.materials.material import ScatterRecord

logger = logging.getLogger(__name__)


@ti.func
def refraction_ratio_for(refraction_index: real, front_face: ti.i32) -> real:
    """Ratio of refractive indices for a ray crossing the surface.

    Args:
        refraction_index: Index of refraction of the material.
        front_face: 1 if the ray enters the material, 0 if it leaves it.
    """
    ratio = refraction_index
    if front_face == 1:
        ratio = 1.0 / refraction_index
    return ratio


@ti.func
def cannot_refract(refraction_ratio: real, cos_theta: real) -> ti.i32:
    """Check for total internal reflection.

    Returns:
        1 if Snell's law has no solution (the ray must reflect), 0 otherwise.
    """
    sin_theta = tm.sqrt(1.0 - cos_theta * cos_theta)
    return refraction_ratio * sin_theta > 1.0


@ti.func
def scatter_dielectric(refraction_index: real, ray_in: Ray, rec: HitRecord) -> ScatterRecord:
    """Scatter a ray off a dielectric surface.

    Args:
        refraction_index: Index of refraction of the material.
        ray_in: The incoming ray. Its direction need not be normalized.
        rec: The hit record of a confirmed intersection; its normal faces
            against the incoming ray and front_face tells which side was hit.

    Returns:
        A ScatterRecord that always scatters, with white attenuation.
    """
    attenuation = vec3(1.0, 1.0, 1.0)
    ratio = refraction_ratio_for(refraction_index, rec.front_face)

    unit_direction = unit_vector(ray_in.direction)
    cos_theta = tm.min(dot(-unit_direction, rec.normal), 1.0)

    # The random draw only happens when refraction is possible
    must_reflect = cannot_refract(ratio, cos_theta)
    if must_reflect == 0:
        must_reflect = schlick_reflectance(cos_theta, ratio) > random_double()

    direction = vec3(0.0, 0.0, 0.0)
    if must_reflect == 1:
        direction = reflect(unit_direction, rec.normal)
    else:
        direction = refract(unit_direction, rec.normal, ratio)

    return ScatterRecord(
        did_scatter=1,
        attenuation=attenuation,
        scattered=Ray(origin=rec.point, direction=direction),
    )


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of dielectric materials in the scene
MAX_DIELECTRIC_MATERIALS = 256

# Storage for dielectric material properties
dielectric_refraction_indices = ti.field(dtype=real, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Clear all dielectric materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_dielectric_materials[None] = 0


def add_dielectric_material(refraction_index: float = 1.5) -> int:
    """Add a dielectric material to the material registry.

    Args:
        refraction_index: Index of refraction. Default is 1.5 (typical glass).
            Must be positive. Values below 1.0 are allowed and describe a
            medium less dense than its surroundings (an air bubble in water
            is 1.0 / 1.33). Common values:
            - Air: 1.0
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If the refraction index is not positive.
    """
    if refraction_index <= 0.0:
        raise ValueError(
            f"Index of refraction = {refraction_index} must be positive."
        )

    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_refraction_indices[idx] = refraction_index
    num_dielectric_materials[None] = idx + 1
    logger.debug("Added dielectric material %d with refraction index %s", idx, refraction_index)
    return idx


def get_dielectric_material_count() -> int:
    """Get the number of dielectric materials in the registry."""
    return int(num_dielectric_materials[None])


@ti.func
def get_dielectric_refraction_index(material_idx: ti.i32) -> real:
    """Get the refraction index for a dielectric material by index."""
    return dielectric_refraction_indices[material_idx]


@ti.func
def scatter_dielectric_by_id(material_idx: ti.i32, ray_in: Ray, rec: HitRecord) -> ScatterRecord:
    """Scatter off a registered dielectric material.

    Looks up the refraction index from the registry and calls
    scatter_dielectric.
    """
    return scatter_dielectric(get_dielectric_refraction_index(material_idx), ray_in, rec)
