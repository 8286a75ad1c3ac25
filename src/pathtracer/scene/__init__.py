"""Scene module for world storage and management.

Components:
    world: Sphere storage, nearest-hit aggregation, and a Python-side query
    manager: SceneManager with a unified material ID space and the closed
        MaterialType enumeration used for dispatch
"""

from .manager import (
    MaterialEntry,
    MaterialSlot,
    MaterialType,
    SceneManager,
    get_material_type,
    get_material_type_index,
)
from .world import (
    MAX_SPHERES,
    T_INFINITY,
    HitResult,
    WorldHitRecord,
    add_sphere,
    clear_world,
    get_sphere_count,
    intersect_world,
    query_nearest_hit,
)

__all__ = [
    # World
    "WorldHitRecord",
    "HitResult",
    "MAX_SPHERES",
    "T_INFINITY",
    "add_sphere",
    "clear_world",
    "get_sphere_count",
    "intersect_world",
    "query_nearest_hit",
    # Manager
    "MaterialType",
    "MaterialSlot",
    "MaterialEntry",
    "SceneManager",
    "get_material_type",
    "get_material_type_index",
]
