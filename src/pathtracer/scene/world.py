"""World storage and nearest-hit aggregation.

The world is an ordered collection of spheres stored in Taichi fields. Each
sphere carries a material ID, an index into the unified material table kept
by pathtracer.scene.manager, so hit records never hold material references.

The nearest-hit query is a linear scan: each sphere is tested with t_max
narrowed to the closest hit found so far, so the smallest t wins.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtracer.scene.world import add_sphere, clear_world, query_nearest_hit
    >>> clear_world()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5, material_id=0)
    >>> hit = query_nearest_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
    >>> hit.t  # 0.5
"""

import math
import sys
from dataclasses import dataclass

import taichi as ti

from pathtracer.core.vector import vec3
from pathtracer.geometry.sphere import Sphere, hit_sphere

# Largest finite double; the far end of every primary query
T_INFINITY = sys.float_info.max


@ti.dataclass
class WorldHitRecord:
    """Record of a ray-world intersection with material information.

    Attributes:
        hit: 1 if any sphere was hit, 0 otherwise.
        t: Ray parameter of the nearest hit. Only valid if hit == 1.
        point: World-space intersection point. Only valid if hit == 1.
        normal: Unit outward normal at the hit point. Only valid if hit == 1.
        material_id: Unified material ID of the sphere hit, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3
    material_id: ti.i32


# Maximum number of spheres supported in the world
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_world() -> None:
    """Remove all spheres from the world.

    Resets the sphere count; stale field data is overwritten by later adds.
    """
    num_spheres[None] = 0


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    material_id: int = 0,
) -> int:
    """Add a sphere to the world.

    Args:
        center: The center point of the sphere as (x, y, z).
        radius: The radius of the sphere. Must be positive.
        material_id: The unified material ID of the sphere's material.

    Returns:
        The index of the added sphere.

    Raises:
        ValueError: If radius is not a positive finite number.
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    if not math.isfinite(radius) or radius <= 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [float(center[0]), float(center[1]), float(center[2])]
    sphere_radii[idx] = float(radius)
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the world."""
    return int(num_spheres[None])


@ti.func
def _make_miss_record() -> WorldHitRecord:
    """Create a WorldHitRecord indicating no intersection."""
    return WorldHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
    )


@ti.func
def intersect_world(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f64,
    t_max: ti.f64,
) -> WorldHitRecord:
    """Find the nearest intersection of a ray with the world.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray.
        t_min: Exclusive lower bound on t.
        t_max: Exclusive upper bound on t.

    Returns:
        The record of the hit with the smallest t, or a miss record.
    """
    closest_t = t_max
    result = _make_miss_record()

    for i in range(num_spheres[None]):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = WorldHitRecord(
                hit=1,
                t=rec.t,
                point=rec.point,
                normal=rec.normal,
                material_id=sphere_material_ids[i],
            )

    return result


# =============================================================================
# Python-side Query
# =============================================================================


@dataclass(frozen=True)
class HitResult:
    """A nearest-hit result copied out of Taichi for Python callers.

    Attributes:
        t: Ray parameter of the hit.
        point: World-space intersection point.
        normal: Unit outward normal.
        material_id: Unified material ID of the sphere hit.
    """

    t: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    material_id: int


_query_record = WorldHitRecord.field(shape=())


@ti.kernel
def _query_kernel(origin: vec3, direction: vec3, t_min: ti.f64, t_max: ti.f64):
    # Single-iteration outer loop keeps the sphere scan serial
    for _ in range(1):
        _query_record[None] = intersect_world(origin, direction, t_min, t_max)


def query_nearest_hit(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    t_min: float = 1e-4,
    t_max: float = T_INFINITY,
) -> HitResult | None:
    """Query the nearest hit along a ray from Python.

    Args:
        origin: The ray origin as (x, y, z).
        direction: The ray direction as (x, y, z).
        t_min: Exclusive lower bound on t.
        t_max: Exclusive upper bound on t.

    Returns:
        A HitResult for the nearest hit, or None if nothing was hit.
    """
    _query_kernel(vec3(*origin), vec3(*direction), t_min, t_max)
    if _query_record.hit[None] == 0:
        return None
    point = _query_record.point[None].to_numpy()
    normal = _query_record.normal[None].to_numpy()
    return HitResult(
        t=float(_query_record.t[None]),
        point=(float(point[0]), float(point[1]), float(point[2])),
        normal=(float(normal[0]), float(normal[1]), float(normal[2])),
        material_id=int(_query_record.material_id[None]),
    )
