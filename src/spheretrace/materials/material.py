"""Scatter records shared by all material models.

Every material consumes the incoming ray and a confirmed hit record and
returns a ScatterRecord: either a scattered ray with an attenuation color
(``did_scatter == 1``) or an absorption (``did_scatter == 0``).
"""

from collections.abc import Sequence

import taichi as ti

from spheretrace.core.ray import Ray
from spheretrace.core.vec3 import vec3


@ti.dataclass
class ScatterRecord:
    """Outcome of a scattering event.

    Attributes:
        did_scatter: 1 if the ray scattered, 0 if it was absorbed.
        attenuation: The color multiplier for the scattered light.
            Only valid if did_scatter == 1.
        scattered: The outgoing ray, starting at the hit point.
            Only valid if did_scatter == 1.
    """

    did_scatter: ti.i32
    attenuation: vec3
    scattered: Ray


@ti.func
def make_absorbed_record() -> ScatterRecord:
    """Create a ScatterRecord for a ray that was absorbed."""
    return ScatterRecord(
        did_scatter=0,
        attenuation=vec3(0.0, 0.0, 0.0),
        scattered=Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, 0.0)),
    )


def validate_albedo(albedo: Sequence[float]) -> tuple[float, float, float]:
    """Check an albedo color and return it as a tuple of floats.

    Raises:
        ValueError: If the color does not have three components, or any
            component is outside [0, 1].
    """
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")

    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )

    return (float(albedo[0]), float(albedo[1]), float(albedo[2]))
