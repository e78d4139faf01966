"""Core rendering module.

Components:
    vec3: Vector algebra, reflection/refraction geometry and random sampling
    ray: Ray data structure
    integrator: Depth-limited color accumulation and the render kernels
    progressive: Batched sample accumulation with progress reporting

Note: integrator and progressive are NOT imported here to avoid circular
imports (they depend on the scene and material modules). Import them
directly from spheretrace.core.integrator or spheretrace.core.progressive.
"""

from .ray import Ray, make_ray
from .vec3 import (
    NEAR_ZERO_EPSILON,
    as_vec3,
    cross,
    dot,
    length,
    length_squared,
    near_zero,
    random_double,
    random_double_range,
    random_in_unit_sphere,
    random_unit_vector,
    random_vec3,
    random_vec3_range,
    real,
    reflect,
    refract,
    schlick_reflectance,
    to_tuple,
    unit_vector,
    vec3,
)

__all__ = [
    "Ray",
    "make_ray",
    "real",
    "vec3",
    "as_vec3",
    "to_tuple",
    "dot",
    "cross",
    "length",
    "length_squared",
    "unit_vector",
    "near_zero",
    "reflect",
    "refract",
    "schlick_reflectance",
    "random_double",
    "random_double_range",
    "random_vec3",
    "random_vec3_range",
    "random_in_unit_sphere",
    "random_unit_vector",
    "NEAR_ZERO_EPSILON",
]
