"""Materials module for light scattering models.

Components:
    material: ScatterRecord shared by all models, albedo validation
    lambertian: Ideal diffuse reflection
    metal: Specular reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick reflectance

Each model provides:
    - scatter_<type>(params..., ray_in, hit_record): scatter with explicit
      parameters, returning a ScatterRecord
    - scatter_<type>_by_id(index, ray_in, hit_record): scatter with the
      parameters stored in the model's registry
    - add_/clear_/get_<type>_material(s): registry management (Python side)

Scattering is a pure function of the incoming ray and the hit record plus
randomness; materials hold no mutable state during rendering.
"""

from .dielectric import (
    add_dielectric_material,
    cannot_refract,
    clear_dielectric_materials,
    get_dielectric_material_count,
    get_dielectric_refraction_index,
    refraction_ratio_for,
    scatter_dielectric,
    scatter_dielectric_by_id,
)
from .lambertian import (
    add_lambertian_material,
    clear_lambertian_materials,
    diffuse_direction,
    get_lambertian_albedo,
    get_lambertian_material_count,
    scatter_lambertian,
    scatter_lambertian_by_id,
)
from .material import ScatterRecord, make_absorbed_record, validate_albedo
from .metal import (
    add_metal_material,
    clamp_fuzz,
    clear_metal_materials,
    get_metal_albedo,
    get_metal_fuzz,
    get_metal_material_count,
    scatter_metal,
    scatter_metal_by_id,
)

__all__ = [
    # Shared
    "ScatterRecord",
    "make_absorbed_record",
    "validate_albedo",
    # Lambertian
    "diffuse_direction",
    "scatter_lambertian",
    "scatter_lambertian_by_id",
    "add_lambertian_material",
    "clear_lambertian_materials",
    "get_lambertian_material_count",
    "get_lambertian_albedo",
    # Metal
    "scatter_metal",
    "scatter_metal_by_id",
    "add_metal_material",
    "clear_metal_materials",
    "clamp_fuzz",
    "get_metal_material_count",
    "get_metal_albedo",
    "get_metal_fuzz",
    # Dielectric
    "scatter_dielectric",
    "scatter_dielectric_by_id",
    "add_dielectric_material",
    "clear_dielectric_materials",
    "get_dielectric_material_count",
    "get_dielectric_refraction_index",
    "refraction_ratio_for",
    "cannot_refract",
]
