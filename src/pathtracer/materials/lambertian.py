"""Diffuse (Lambertian) scattering.

A diffuse bounce leaves the hit point toward a random point of the unit
sphere that touches the surface there, so

    direction = normal + random_in_unit_sphere()

The direction is left unnormalized. The albedo is the attenuation, and the
ray is never absorbed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtracer.materials.lambertian import add_lambertian_material
    >>> add_lambertian_material((0.8, 0.3, 0.3))
    0
"""

import taichi as ti

from pathtracer.core.vector import random_in_unit_sphere, vec3
from pathtracer.materials.common import check_albedo


@ti.dataclass
class LambertianMaterial:
    """Diffuse reflectance (RGB, components in [0, 1])."""

    albedo: vec3


@ti.func
def scatter_lambertian(albedo: vec3, normal: vec3):
    """Sample a diffuse bounce.

    Returns:
        (direction, attenuation), with attenuation equal to albedo.
    """
    return normal + random_in_unit_sphere(), albedo


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------

MAX_LAMBERTIAN_MATERIALS = 256

lambertian_materials = LambertianMaterial.field(shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def clear_lambertian_materials() -> None:
    num_lambertian_materials[None] = 0


def add_lambertian_material(albedo: tuple[float, float, float]) -> int:
    """Store a diffuse material and return its registry index.

    Raises:
        ValueError: If an albedo component is outside [0, 1].
        RuntimeError: If all MAX_LAMBERTIAN_MATERIALS slots are used.
    """
    values = check_albedo(albedo)
    index = int(num_lambertian_materials[None])
    if index >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(
            f"Lambertian registry is full ({MAX_LAMBERTIAN_MATERIALS} materials)"
        )
    lambertian_materials.albedo[index] = values
    num_lambertian_materials[None] = index + 1
    return index


def get_lambertian_material_count() -> int:
    return int(num_lambertian_materials[None])


@ti.func
def get_lambertian_albedo(index: ti.i32) -> vec3:
    return lambertian_materials[index].albedo
