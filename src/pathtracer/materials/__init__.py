"""Materials module for scattering models.

Components:
    lambertian: Ideal diffuse reflection (never absorbs)
    metal: Mirror reflection with optional fuzz (absorbs rays scattered
        into the surface)

Each material provides a Taichi scatter function returning the scattered
direction and attenuation, plus a registry of per-material parameters in
Taichi fields indexed by a type-local index.
"""

from .common import check_albedo, check_fuzz
from .lambertian import (
    LambertianMaterial,
    add_lambertian_material,
    clear_lambertian_materials,
    get_lambertian_albedo,
    get_lambertian_material_count,
    scatter_lambertian,
)
from .metal import (
    MetalMaterial,
    add_metal_material,
    clear_metal_materials,
    get_metal_albedo,
    get_metal_fuzz,
    get_metal_material_count,
    scatter_metal,
)

__all__ = [
    "check_albedo",
    "check_fuzz",
    # Lambertian
    "LambertianMaterial",
    "scatter_lambertian",
    "add_lambertian_material",
    "clear_lambertian_materials",
    "get_lambertian_material_count",
    "get_lambertian_albedo",
    # Metal
    "MetalMaterial",
    "scatter_metal",
    "add_metal_material",
    "clear_metal_materials",
    "get_metal_material_count",
    "get_metal_albedo",
    "get_metal_fuzz",
]
