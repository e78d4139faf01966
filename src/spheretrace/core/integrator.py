"""Color integrator and rendering kernels.

The color of a ray is computed by following it through the scene:

    1. If the depth budget is exhausted, the ray contributes black.
    2. The ray is intersected with the world in (T_MIN, T_MAX).
    3. On a miss, the sky gradient is returned.
    4. On a hit, the surface material scatters the ray. An absorbed ray
       contributes black; otherwise the attenuation multiplies the color of
       the scattered ray, traced with one less unit of depth.

Taichi functions cannot recurse, so the recursion is unrolled into a loop
that carries the product of attenuations (the throughput). The result is the
same as the recursive definition.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.core.integrator import render_image, setup_render_target
    >>> from spheretrace.scene.three_spheres import create_three_spheres_scene
    >>> from spheretrace.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_three_spheres_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(400, 225)
    >>> render_image(num_samples=25)
"""

import logging
import math
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from spheretrace.camera.pinhole import get_ray
from spheretrace.core.ray import Ray
from spheretrace.core.vec3 import real, to_tuple, unit_vector, vec3
from spheretrace.geometry.sphere import HitRecord
from spheretrace.materials.dielectric import scatter_dielectric_by_id
from spheretrace.materials.lambertian import scatter_lambertian_by_id
from spheretrace.materials.material import ScatterRecord, make_absorbed_record
from spheretrace.materials.metal import scatter_metal_by_id
from spheretrace.scene.intersection import hit_world
from spheretrace.scene.manager import (
    MaterialType,
    get_material_type,
    get_material_type_index,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Rendering Constants
# =============================================================================

# Default number of scattering events a ray may go through
MAX_DEPTH = 20

# t_min and t_max for ray intersection (t_min avoids shadow acne)
T_MIN = 0.001
T_MAX = math.inf

# Sky gradient: white looking down, light blue looking up
HORIZON_COLOR = vec3(1.0, 1.0, 1.0)
SKY_COLOR = vec3(0.5, 0.7, 1.0)


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def _scatter_material(ray_in: Ray, rec: HitRecord) -> ScatterRecord:
    """Dispatch to the scattering function of the hit surface's material.

    Unknown material IDs absorb the ray.
    """
    mat_type = get_material_type(rec.material_id)
    type_index = get_material_type_index(rec.material_id)

    result = make_absorbed_record()

    if mat_type == int(MaterialType.LAMBERTIAN):
        result = scatter_lambertian_by_id(type_index, ray_in, rec)

    elif mat_type == int(MaterialType.METAL):
        result = scatter_metal_by_id(type_index, ray_in, rec)

    elif mat_type == int(MaterialType.DIELECTRIC):
        result = scatter_dielectric_by_id(type_index, ray_in, rec)

    return result


# =============================================================================
# Color Integration
# =============================================================================


@ti.func
def background_color(direction: vec3) -> vec3:
    """Sky gradient for rays that leave the scene.

    Blends linearly from white (direction pointing straight down) to light
    blue (straight up) on the y component of the unit direction.
    """
    unit_direction = unit_vector(direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - t) * HORIZON_COLOR + t * SKY_COLOR


@ti.func
def ray_color(ray: Ray, depth: ti.i32) -> vec3:
    """Compute the linear color seen along a ray.

    Args:
        ray: The ray to trace.
        depth: Remaining depth budget. A ray traced with depth < 0 is black;
            each scattering event consumes one unit.

    Returns:
        The linear (not gamma-corrected) RGB color.
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)

    origin = ray.origin
    direction = ray.direction
    remaining = depth

    # Active flag instead of break so the loop has a single exit
    active = 1
    while active == 1:
        if remaining < 0:
            # Depth exhausted: the path contributes black
            active = 0
        else:
            current = Ray(origin=origin, direction=direction)
            rec = hit_world(current, T_MIN, T_MAX)

            if rec.hit == 0:
                color = throughput * background_color(direction)
                active = 0
            else:
                scatter = _scatter_material(current, rec)

                if scatter.did_scatter == 0:
                    # Absorbed
                    active = 0
                else:
                    throughput *= scatter.attenuation
                    origin = scatter.scattered.origin
                    direction = scatter.scattered.direction
                    remaining -= 1

    return color


_trace_result = ti.Vector.field(3, dtype=real, shape=())


@ti.kernel
def _trace_ray_kernel(
    ox: real, oy: real, oz: real, dx: real, dy: real, dz: real, depth: ti.i32
):
    # Single-iteration outer loop keeps the world scan serial
    for _ in range(1):
        ray = Ray(origin=vec3(ox, oy, oz), direction=vec3(dx, dy, dz))
        _trace_result[None] = ray_color(ray, depth)


def trace_ray(
    origin: Sequence[float],
    direction: Sequence[float],
    depth: int = MAX_DEPTH,
) -> tuple[float, float, float]:
    """Compute the color of a single ray against the current world.

    This is a Python-callable entry point for testing and tooling. For
    rendering images use render_image().

    Args:
        origin: Ray origin as (x, y, z).
        direction: Ray direction as (x, y, z); must be non-zero.
        depth: Remaining depth budget.

    Returns:
        Tuple of linear (R, G, B).
    """
    _trace_ray_kernel(
        float(origin[0]),
        float(origin[1]),
        float(origin[2]),
        float(direction[0]),
        float(direction[1]),
        float(direction[2]),
        depth,
    )
    return to_tuple(_trace_result[None])


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 1920
MAX_IMAGE_HEIGHT = 1080

# Pixel coordinates are divided by (size - 1)
MIN_IMAGE_SIZE = 2

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Color accumulation buffer (running average of linear color)
_color_buffer = ti.Vector.field(3, dtype=real, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Sample count per pixel
_sample_count = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers.

    Raises:
        ValueError: If a dimension is below MIN_IMAGE_SIZE or above the
            preallocated maximum.
    """
    if width < MIN_IMAGE_SIZE or height < MIN_IMAGE_SIZE:
        raise ValueError(
            f"Image dimensions ({width}x{height}) must be at least "
            f"{MIN_IMAGE_SIZE}x{MIN_IMAGE_SIZE}"
        )
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()
    logger.debug("Render target set up at %dx%d", width, height)


def clear_render_target() -> None:
    """Clear the render target buffers to zero."""
    _color_buffer.fill(0.0)
    _sample_count.fill(0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.func
def _sample_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32, depth: ti.i32) -> vec3:
    """Trace one jittered camera ray through a pixel.

    Pixel (0, 0) is the bottom-left corner of the image.
    """
    u = (ti.cast(pixel_i, real) + ti.random(real)) / ti.cast(width - 1, real)
    v = (ti.cast(pixel_j, real) + ti.random(real)) / ti.cast(height - 1, real)
    return ray_color(get_ray(u, v), depth)


@ti.kernel
def _render_one_spp(width: ti.i32, height: ti.i32, depth: ti.i32):
    """Render one sample per pixel and fold it into the running average."""
    for i, j in ti.ndrange(width, height):
        color = _sample_pixel(i, j, width, height, depth)

        # A NaN/Inf sample would poison the running average
        for c in ti.static(range(3)):
            if tm.isnan(color[c]) or tm.isinf(color[c]):
                color[c] = 0.0

        # Running average: avg_n = avg_{n-1} + (x_n - avg_{n-1}) / n
        _sample_count[i, j] += 1
        n = _sample_count[i, j]
        _color_buffer[i, j] += (color - _color_buffer[i, j]) / ti.cast(n, real)


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32, depth: ti.i32):
    for _ in range(1):
        _trace_result[None] = _sample_pixel(pixel_i, pixel_j, width, height, depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_sample(pixel_i: int, pixel_j: int, max_depth: int = MAX_DEPTH) -> tuple[float, float, float]:
    """Render a single sample for a specific pixel.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        max_depth: Depth budget for the traced ray.

    Returns:
        Tuple of linear (R, G, B).

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    _render_single_pixel(pixel_i, pixel_j, width, height, max_depth)
    return to_tuple(_trace_result[None])


def render_image(num_samples: int = 1, max_depth: int = MAX_DEPTH) -> None:
    """Render the image with the specified number of samples per pixel.

    Accumulates samples into the color buffer. Can be called multiple times
    to add more samples.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    for _ in range(num_samples):
        _render_one_spp(width, height, max_depth)


def get_total_samples() -> int:
    """Get the number of samples accumulated per pixel.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return int(_sample_count[0, 0])


def get_image_numpy() -> npt.NDArray[np.float64]:
    """Get the accumulated linear image as a NumPy array.

    The array has shape (height, width, 3) with row 0 at the top of the
    image. Values are not clamped or gamma corrected.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    full_image = _color_buffer.to_numpy()

    # (width, height, 3) -> (height, width, 3), then put the top row first
    image = np.transpose(full_image[:width, :height, :], (1, 0, 2))
    return np.flipud(image).astype(np.float64)
