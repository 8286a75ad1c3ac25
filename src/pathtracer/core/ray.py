"""Ray data structure.

A ray is an origin and a direction; the direction is not required to be
unit length. Points along the ray are origin + t * direction.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtracer.core.ray import make_ray, point_at_parameter
    >>> from pathtracer.core.vector import vec3
    >>> # Within a Taichi kernel:
    >>> # ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -2.0))
    >>> # p = point_at_parameter(ray, 0.5)  # (0, 0, -1)
"""

import taichi as ti

from pathtracer.core.vector import vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of travel (any nonzero length).
    """

    origin: vec3
    direction: vec3


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


@ti.func
def point_at_parameter(ray: Ray, t: ti.f64) -> vec3:
    """Evaluate the point origin + t * direction.

    t is not validated; negative values lie behind the origin.
    """
    return ray.origin + t * ray.direction
