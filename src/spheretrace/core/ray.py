"""Ray data structure.

A ray is the parametric line ``origin + t * direction``. The direction is not
required to be unit length; code that needs a unit direction normalizes it
itself.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.core.ray import Ray, vec3
    >>> # Within a Taichi kernel:
    >>> # ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    >>> # point = ray.at(5.0)  # Point 5 units along the ray
"""

import taichi as ti

from spheretrace.core.vec3 import real, vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3).
    """

    origin: vec3
    direction: vec3

    @ti.func
    def at(self, t: real) -> vec3:
        """Compute the point origin + t * direction."""
        return self.origin + t * self.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction within a Taichi kernel."""
    return Ray(origin=origin, direction=direction)
