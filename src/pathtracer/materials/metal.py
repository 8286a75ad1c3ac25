"""Metal scattering: a mirror reflection blurred by fuzz.

The incoming direction is normalized, mirrored about the normal, and then
moved by a random offset inside a sphere of radius fuzz:

    direction = reflect(unit(d_in), n) + fuzz * random_in_unit_sphere()

If the result does not point away from the surface (direction . n <= 0) the
ray is absorbed. Fuzz is not clamped, so large values absorb more often.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtracer.materials.metal import add_metal_material
    >>> add_metal_material((0.8, 0.6, 0.2), fuzz=0.3)
    0
"""

import taichi as ti

from pathtracer.core.vector import dot, random_in_unit_sphere, reflect, unit_vector, vec3
from pathtracer.materials.common import check_albedo, check_fuzz


@ti.dataclass
class MetalMaterial:
    """Reflective color and roughness; fuzz 0 is a perfect mirror."""

    albedo: vec3
    fuzz: ti.f64


@ti.func
def scatter_metal(albedo: vec3, fuzz: ti.f64, incident_direction: vec3, normal: vec3):
    """Reflect an incoming ray off a metal surface.

    Args:
        albedo: Reflective color.
        fuzz: Radius of the random offset added to the mirror direction.
        incident_direction: Incoming direction, any nonzero length.
        normal: Unit outward normal at the hit point.

    Returns:
        (direction, attenuation, did_scatter). The direction is not
        normalized, attenuation is the albedo, and did_scatter is 0 when
        the ray is absorbed.
    """
    direction = reflect(unit_vector(incident_direction), normal)
    direction += fuzz * random_in_unit_sphere()
    did_scatter = 0
    if dot(direction, normal) > 0.0:
        did_scatter = 1
    return direction, albedo, did_scatter


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------

MAX_METAL_MATERIALS = 256

metal_materials = MetalMaterial.field(shape=MAX_METAL_MATERIALS)
num_metal_materials = ti.field(dtype=ti.i32, shape=())


def clear_metal_materials() -> None:
    num_metal_materials[None] = 0


def add_metal_material(albedo: tuple[float, float, float], fuzz: float = 0.0) -> int:
    """Store a metal material and return its registry index.

    Raises:
        ValueError: If an albedo component is outside [0, 1], or fuzz is
            negative or not finite.
        RuntimeError: If all MAX_METAL_MATERIALS slots are used.
    """
    values = check_albedo(albedo)
    fuzz = check_fuzz(fuzz)
    index = int(num_metal_materials[None])
    if index >= MAX_METAL_MATERIALS:
        raise RuntimeError(f"Metal registry is full ({MAX_METAL_MATERIALS} materials)")
    metal_materials.albedo[index] = values
    metal_materials.fuzz[index] = fuzz
    num_metal_materials[None] = index + 1
    return index


def get_metal_material_count() -> int:
    return int(num_metal_materials[None])


@ti.func
def get_metal_albedo(index: ti.i32) -> vec3:
    return metal_materials[index].albedo


@ti.func
def get_metal_fuzz(index: ti.i32) -> ti.f64:
    return metal_materials[index].fuzz
