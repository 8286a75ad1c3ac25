"""Sphere primitive with ray-sphere intersection.

The intersection solves |origin + t * direction - center|^2 = radius^2:

    a = d . d
    b = 2 (o - c) . d
    c = (o - c) . (o - c) - r^2
    discriminant = b^2 - 4ac

A discriminant <= 0 is a miss, so tangent rays do not hit. Otherwise the
nearer root is taken when it lies strictly inside (t_min, t_max), and the
farther root is tried only when it does not.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtracer.core.vector import vec3
    >>> from pathtracer.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=vec3(0.0, 0.0, -1.0), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti

from pathtracer.core.vector import dot, vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
    """

    center: vec3
    radius: ti.f64


@ti.dataclass
class HitRecord:
    """Record of a ray-sphere intersection.

    Attributes:
        hit: 1 if the ray intersected the sphere, 0 otherwise.
        t: Ray parameter of the intersection, strictly inside (t_min, t_max).
            Only valid if hit == 1.
        point: World-space intersection point. Only valid if hit == 1.
        normal: Unit outward normal, (point - center) / radius.
            Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f64,
    t_max: ti.f64,
) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray (need not be normalized).
        sphere: The sphere to test against.
        t_min: Exclusive lower bound on t. Callers keep this above zero to
            avoid self-intersection.
        t_max: Exclusive upper bound on t.

    Returns:
        A HitRecord; check its hit field.
    """
    oc = ray_origin - sphere.center
    a = dot(ray_direction, ray_direction)
    b = 2.0 * dot(oc, ray_direction)
    c = dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * a * c

    # Taichi requires outer-scope declaration
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    if discriminant > 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t_near = (-b - sqrt_d) / (2.0 * a)
        t_far = (-b + sqrt_d) / (2.0 * a)

        if t_near > t_min and t_near < t_max:
            did_hit = 1
            hit_t = t_near
        elif t_far > t_min and t_far < t_max:
            did_hit = 1
            hit_t = t_far

        if did_hit == 1:
            hit_point = ray_origin + hit_t * ray_direction
            hit_normal = (hit_point - sphere.center) / sphere.radius

    return HitRecord(hit=did_hit, t=hit_t, point=hit_point, normal=hit_normal)


@ti.func
def make_sphere(center: vec3, radius: ti.f64) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
