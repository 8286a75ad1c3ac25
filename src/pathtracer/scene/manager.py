"""Scene assembly: one material ID space over the per-kind registries.

Each material kind keeps its parameters in its own registry (see
pathtracer.materials). The material table below maps a scene-wide material
ID to a MaterialSlot, the pair (kind, index into that kind's registry), so
spheres and hit records only ever carry a single integer. The integrator
branches on the kind once per scatter, so MaterialType is a closed set.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> red = scene.add_lambertian_material((0.8, 0.3, 0.3))
    >>> scene.add_sphere((0.0, 0.0, -1.0), 0.5, red)
    0
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

import taichi as ti

from pathtracer.config import MaterialConfig, SphereConfig, world_from_list
from pathtracer.materials.lambertian import (
    add_lambertian_material,
    clear_lambertian_materials,
)
from pathtracer.materials.metal import add_metal_material, clear_metal_materials
from pathtracer.scene.world import MAX_SPHERES, add_sphere, clear_world, get_sphere_count

logger = logging.getLogger(__name__)


class MaterialType(IntEnum):
    """Material kinds understood by the integrator."""

    LAMBERTIAN = 0
    METAL = 1


@ti.dataclass
class MaterialSlot:
    """Where a material's parameters live.

    Attributes:
        kind: The MaterialType value.
        index: Position in that kind's registry.
    """

    kind: ti.i32
    index: ti.i32


# Two registries of 256 entries each
MAX_MATERIALS = 512

material_slots = MaterialSlot.field(shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_material_table() -> None:
    num_materials[None] = 0


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """MaterialType of a material ID, or -1 if the ID is not registered."""
    kind = -1
    if material_id >= 0 and material_id < num_materials[None]:
        kind = material_slots[material_id].kind
    return kind


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Registry index of a material ID, or -1 if the ID is not registered."""
    index = -1
    if material_id >= 0 and material_id < num_materials[None]:
        index = material_slots[material_id].index
    return index


@dataclass(frozen=True)
class MaterialEntry:
    """Python-side record of a registered material.

    Attributes:
        material_id: Scene-wide material ID.
        material_type: The material kind.
        type_index: Position in the kind's registry.
        config: Parameters the material was created from.
    """

    material_id: int
    material_type: MaterialType
    type_index: int
    config: MaterialConfig


class SceneManager:
    """Builds the world in the global Taichi fields.

    A new SceneManager empties the world and every material registry, so
    there is only ever one live scene.

    Attributes:
        materials: Registered materials, indexed by material ID.
        spheres: Spheres in world order, each with its material's parameters.

    Example:
        >>> scene = SceneManager()
        >>> gold = scene.add_metal_material((0.8, 0.6, 0.2), fuzz=0.3)
        >>> scene.add_sphere((1.0, 0.0, -1.0), 0.5, gold)
        0
    """

    def __init__(self) -> None:
        self.materials: list[MaterialEntry] = []
        self.spheres: list[SphereConfig] = []
        self.clear()

    def clear(self) -> None:
        """Remove every sphere and material."""
        clear_world()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_material_table()
        self.materials = []
        self.spheres = []

    # -------------------------------------------------------------------------
    # Materials
    # -------------------------------------------------------------------------

    def add_material(self, material: MaterialConfig) -> int:
        """Register a material and return its scene-wide ID.

        Raises:
            ValueError: If the kind is unknown, an albedo component is outside
                [0, 1], or fuzz is negative.
            RuntimeError: If a registry or the material table is full.
        """
        material_id = num_materials[None]
        if material_id >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        if material.kind == "lambertian":
            material_type = MaterialType.LAMBERTIAN
            type_index = add_lambertian_material(material.albedo)
        elif material.kind == "metal":
            material_type = MaterialType.METAL
            type_index = add_metal_material(material.albedo, material.fuzz)
        else:
            raise ValueError(f"Unknown material kind: {material.kind!r}")

        material_slots.kind[material_id] = int(material_type)
        material_slots.index[material_id] = type_index
        num_materials[None] = material_id + 1

        self.materials.append(MaterialEntry(material_id, material_type, type_index, material))
        return material_id

    def add_lambertian_material(self, albedo: tuple[float, float, float]) -> int:
        """Register a diffuse material; see add_material."""
        return self.add_material(MaterialConfig("lambertian", tuple(albedo)))

    def add_metal_material(self, albedo: tuple[float, float, float], fuzz: float = 0.0) -> int:
        """Register a metal material; see add_material."""
        return self.add_material(MaterialConfig("metal", tuple(albedo), fuzz))

    def get_material_count(self) -> int:
        return int(num_materials[None])

    def get_material(self, material_id: int) -> MaterialEntry | None:
        """The entry for a material ID, or None if it is not registered."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def material_type_of(self, material_id: int) -> MaterialType | None:
        """Python-side counterpart of get_material_type()."""
        entry = self.get_material(material_id)
        if entry is None:
            return None
        return entry.material_type

    # -------------------------------------------------------------------------
    # Spheres
    # -------------------------------------------------------------------------

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Place a sphere using an already registered material.

        Returns:
            The sphere's index in the world.

        Raises:
            ValueError: If material_id is not registered or radius is not positive.
            RuntimeError: If the world is full.
        """
        entry = self.get_material(material_id)
        if entry is None:
            raise ValueError(f"Invalid material_id: {material_id}")

        index = add_sphere(center, radius, material_id)
        center = (float(center[0]), float(center[1]), float(center[2]))
        self.spheres.append(SphereConfig(center, float(radius), entry.config))
        return index

    def add_sphere_with_material(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: MaterialConfig,
    ) -> tuple[int, int]:
        """Register a material and place a sphere with it.

        Returns:
            (sphere index, material ID).
        """
        material_id = self.add_material(material)
        return self.add_sphere(center, radius, material_id), material_id

    def add_lambertian_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
    ) -> tuple[int, int]:
        return self.add_sphere_with_material(
            center, radius, MaterialConfig("lambertian", tuple(albedo))
        )

    def add_metal_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
        fuzz: float = 0.0,
    ) -> tuple[int, int]:
        return self.add_sphere_with_material(
            center, radius, MaterialConfig("metal", tuple(albedo), fuzz)
        )

    def get_sphere_count(self) -> int:
        return get_sphere_count()

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def to_config(self) -> list[SphereConfig]:
        """The current world as sphere configurations, in world order."""
        return list(self.spheres)

    def from_config(self, world: list[SphereConfig]) -> None:
        """Replace the scene with the given spheres.

        Every sphere registers its own material, even when two spheres share
        identical parameters.

        Raises:
            ValueError: If a sphere or material is invalid.
            RuntimeError: If the world or a registry is full.
        """
        self.clear()
        for sphere in world:
            self.add_sphere_with_material(sphere.center, sphere.radius, sphere.material)
        logger.debug(
            "Scene loaded: %d spheres, %d materials",
            self.get_sphere_count(),
            self.get_material_count(),
        )

    def to_dict(self) -> dict[str, Any]:
        """The world in its JSON layout, {"world": [...]}."""
        return {"world": [sphere.to_dict() for sphere in self.spheres]}

    def from_dict(self, data: dict[str, Any]) -> None:
        self.from_config(world_from_list(data.get("world", [])))

    @property
    def capacity(self) -> tuple[int, int]:
        """(maximum spheres, maximum materials)."""
        return MAX_SPHERES, MAX_MATERIALS
