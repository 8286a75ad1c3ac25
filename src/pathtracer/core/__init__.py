"""Core rendering module.

Components:
    vector: Double-precision vec3 type and vector utilities
    ray: Ray data structure and parametric evaluation
    integrator: Background gradient, material dispatch, light transport loop,
        render target, and the per-pixel sampling kernels
    renderer: Batched sample accumulation with progress reporting

The integrator resolves per-pixel radiance by following scatter events until a
ray escapes to the sky gradient, is absorbed, or reaches the bounce limit.
"""

from .ray import Ray, make_ray, point_at_parameter
from .vector import (
    dot,
    length,
    length_squared,
    random_in_unit_sphere,
    reflect,
    unit_vector,
    vec3,
)

# Note: integrator and renderer declare Taichi fields and are NOT imported here.
# Import them directly after Taichi has been initialized:
#   from pathtracer.core.renderer import Renderer

__all__ = [
    "Ray",
    "make_ray",
    "point_at_parameter",
    "vec3",
    "dot",
    "length",
    "length_squared",
    "unit_vector",
    "reflect",
    "random_in_unit_sphere",
]
