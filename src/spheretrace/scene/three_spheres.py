"""Three-spheres demo scene.

The scene shows every material side by side on a large ground sphere:
- Ground: yellowish diffuse sphere of radius 100
- Center: blue diffuse sphere
- Left: hollow glass sphere (a glass sphere with an inverted, slightly
  smaller sphere inside it)
- Right: polished gold metal sphere

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.scene.three_spheres import create_three_spheres_scene
    >>> from spheretrace.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_three_spheres_scene()
    >>> setup_camera(camera)
"""

from spheretrace.camera.pinhole import DEFAULT_ASPECT_RATIO, PinholeCamera
from spheretrace.scene.manager import SceneManager

GROUND_ALBEDO = (0.8, 0.8, 0.0)
CENTER_ALBEDO = (0.1, 0.2, 0.5)
GLASS_REFRACTION_INDEX = 1.5
GOLD_ALBEDO = (0.8, 0.6, 0.2)
GOLD_FUZZ = 0.0

SPHERE_RADIUS = 0.5
# Negative radius flips the normals: the inner wall of the glass shell
BUBBLE_RADIUS = -0.4


def create_three_spheres_scene(
    aspect_ratio: float = DEFAULT_ASPECT_RATIO,
) -> tuple[SceneManager, PinholeCamera]:
    """Create the demo scene and its camera.

    Args:
        aspect_ratio: Width / height of the image the camera renders.

    Returns:
        Tuple of (scene, camera). The camera still needs setup_camera().
    """
    scene = SceneManager()

    ground = scene.add_lambertian_material(GROUND_ALBEDO)
    center = scene.add_lambertian_material(CENTER_ALBEDO)
    glass = scene.add_dielectric_material(GLASS_REFRACTION_INDEX)
    gold = scene.add_metal_material(GOLD_ALBEDO, GOLD_FUZZ)

    scene.add_sphere((0.0, -100.5, 0.0), 100.0, ground)
    scene.add_sphere((0.0, 0.0, -1.0), SPHERE_RADIUS, center)
    scene.add_sphere((-1.0, 0.0, -1.0), SPHERE_RADIUS, glass)
    scene.add_sphere((-1.0, 0.0, -1.0), BUBBLE_RADIUS, glass)
    scene.add_sphere((1.0, 0.0, -1.0), SPHERE_RADIUS, gold)

    camera = PinholeCamera(aspect_ratio=aspect_ratio)
    return scene, camera
