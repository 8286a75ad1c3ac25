"""CPU path tracer built on Taichi.

This package renders scenes of spheres with diffuse and metal materials by
Monte Carlo path tracing, producing an 8-bit RGBA pixel buffer:
- Iterative light transport with a configurable bounce limit
- Closed material set (Lambertian, metal) dispatched by material ID
- Jittered multi-sample anti-aliasing with gamma-2 correction

Subpackages:
    core: Vector utilities, rays, the integrator, and the batched renderer
    geometry: Sphere primitive and ray-sphere intersection
    materials: Lambertian and metal scattering
    scene: World storage, nearest-hit queries, and scene management
    camera: Viewport camera with ray generation
    preview: PNG export of rendered pixel buffers

Taichi must be initialized (see pathtracer.runtime.init_taichi) before importing
modules that declare Taichi fields.
"""

__version__ = "0.1.0"
