"""Scene module for world storage and scene building.

Components:
    intersection: Sphere storage and nearest-hit world queries
    manager: Unified scene manager coordinating spheres and materials
    three_spheres: The demo scene (diffuse, hollow glass and metal spheres)

Scene data is organized for kernel access:
    - Structure-of-Arrays layout for sphere data
    - Unified material IDs mapped to (type, type-local index)
"""

from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_world,
    get_sphere,
    get_sphere_count,
    hit_world,
)
from .manager import (
    MAX_MATERIALS,
    MaterialInfo,
    MaterialType,
    SceneConfig,
    SceneManager,
    SphereInfo,
    clear_all,
    get_material_type,
    get_material_type_index,
)
from .three_spheres import create_three_spheres_scene

__all__ = [
    # Intersection module
    "hit_world",
    "add_sphere",
    "clear_world",
    "get_sphere",
    "get_sphere_count",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "MaterialType",
    "MaterialInfo",
    "SphereInfo",
    "SceneConfig",
    "MAX_MATERIALS",
    "clear_all",
    "get_material_type",
    "get_material_type_index",
    # Demo scene
    "create_three_spheres_scene",
]
