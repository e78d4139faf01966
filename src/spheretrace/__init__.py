"""Taichi-based sphere ray tracer.

This package renders scenes of spheres by tracing camera rays and following
them as they scatter off diffuse, metallic and dielectric (glass) surfaces:
- Double-precision vector algebra and random sampling helpers
- Ray-sphere intersection with nearest-hit scene queries
- Lambertian, metal and dielectric scattering models
- Depth-limited color accumulation with a sky-gradient background

Subpackages:
    core: Vector algebra, rays, the color integrator and the render loop
    geometry: Sphere primitive and hit records
    materials: Scattering models and their parameter registries
    scene: World storage, scene manager and the demo scene
    camera: Camera model with ray generation
    output: Gamma correction, quantization and image files

Taichi must be initialized (``ti.init(default_fp=ti.f64, ...)``) before any
subpackage is imported, because importing them declares Taichi fields.
"""

__version__ = "0.1.0"
