"""Vector algebra and random sampling utilities.

Points, directions and colors all share one type: a 3-component vector of
double-precision floats. Taichi vectors already provide value-semantics
arithmetic (``+``, ``-``, unary ``-``, scaling, component-wise ``*`` for
color tinting, ``/`` by a scalar) and compound assignment, so this module
adds the geometric operations and the sampling routines the scattering
models need.

All sampling draws from Taichi's per-thread generator, which is seeded by
``ti.init(random_seed=...)``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.core.vec3 import reflect, vec3
    >>> # Use within a Taichi kernel:
    >>> # mirrored = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))
"""

from collections.abc import Sequence

import taichi as ti
import taichi.math as tm

# Scalar precision used for geometry and color
real = ti.f64

# Type alias for 3D vectors
vec3 = ti.types.vector(3, real)

# Per-component threshold below which a vector counts as zero
NEAR_ZERO_EPSILON = 1e-8


# =============================================================================
# Python-side Conversion
# =============================================================================


def as_vec3(values: Sequence[float]):
    """Build a vector from a Python sequence of three numbers.

    Raises:
        ValueError: If the sequence does not have exactly three components.
    """
    if len(values) != 3:
        raise ValueError(f"Expected 3 components, got {len(values)}")
    return vec3(float(values[0]), float(values[1]), float(values[2]))


def to_tuple(v) -> tuple[float, float, float]:
    """Convert a vector (or field entry) read from Taichi into a plain tuple."""
    return (float(v[0]), float(v[1]), float(v[2]))


# =============================================================================
# Vector Operations
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> real:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def length_squared(v: vec3) -> real:
    """Compute the squared Euclidean length.

    Prefer this over length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> real:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def unit_vector(v: vec3) -> vec3:
    """Scale a vector to unit length.

    The caller must not pass a zero-length vector; the result is then
    undefined (components become inf or NaN).
    """
    return tm.normalize(v)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check whether every component is below NEAR_ZERO_EPSILON in magnitude.

    Returns:
        1 if all components are near zero, 0 otherwise.
    """
    s = NEAR_ZERO_EPSILON
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Reflect v about the unit normal n: v - 2 (v . n) n."""
    return v - 2.0 * dot(v, n) * n


@ti.func
def refract(uv: vec3, n: vec3, etai_over_etat: real) -> vec3:
    """Refract a unit direction through a surface using Snell's law.

    The refracted ray is split into the part perpendicular to the normal and
    the part parallel to it. This function does not detect total internal
    reflection; the caller must check ``etai_over_etat * sin_theta > 1``
    first and reflect instead.

    Args:
        uv: The incoming direction (unit length).
        n: The surface normal, facing against uv (unit length).
        etai_over_etat: Ratio of refractive indices (incident / transmitted).

    Returns:
        The refracted direction.
    """
    cos_theta = tm.min(dot(-uv, n), 1.0)
    r_out_perp = etai_over_etat * (uv + cos_theta * n)
    r_out_parallel = -tm.sqrt(ti.abs(1.0 - length_squared(r_out_perp))) * n
    return r_out_perp + r_out_parallel


@ti.func
def schlick_reflectance(cosine: real, ref_idx: real) -> real:
    """Approximate the angle-dependent reflectance of a dielectric boundary.

    Args:
        cosine: Cosine of the angle between the incoming ray and the normal.
        ref_idx: Ratio of refractive indices at the boundary.

    Returns:
        Reflectance in [0, 1], growing towards 1 at grazing angles.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


# =============================================================================
# Random Sampling
# =============================================================================


@ti.func
def random_double() -> real:
    """Draw a uniform scalar in [0, 1)."""
    return ti.random(real)


@ti.func
def random_double_range(min_value: real, max_value: real) -> real:
    """Draw a uniform scalar in [min_value, max_value)."""
    return min_value + (max_value - min_value) * random_double()


@ti.func
def random_vec3() -> vec3:
    """Draw a vector with each component uniform in [0, 1)."""
    return vec3(random_double(), random_double(), random_double())


@ti.func
def random_vec3_range(min_value: real, max_value: real) -> vec3:
    """Draw a vector with each component uniform in [min_value, max_value)."""
    return vec3(
        random_double_range(min_value, max_value),
        random_double_range(min_value, max_value),
        random_double_range(min_value, max_value),
    )


@ti.func
def random_in_unit_sphere() -> vec3:
    """Generate a random point strictly inside the unit sphere.

    Rejection sampling: draw from the cube [-1, 1)^3 until the point lands
    inside the sphere. Each trial is accepted with probability pi/6, so the
    loop terminates almost surely after about two trials.

    Returns:
        A random vector with length_squared < 1.
    """
    p = random_vec3_range(-1.0, 1.0)
    while length_squared(p) >= 1.0:
        p = random_vec3_range(-1.0, 1.0)
    return p


@ti.func
def random_unit_vector() -> vec3:
    """Generate a random unit vector (normalized random_in_unit_sphere())."""
    return unit_vector(random_in_unit_sphere())
