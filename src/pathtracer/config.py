"""Render configuration.

A render is described in-process by a RenderConfig: image size, sampling
parameters, the camera viewport, and the list of spheres with their
materials. The dictionary form mirrors the JSON layout:

    {
        "image_width": 400,
        "image_height": 200,
        "samples_per_pixel": 50,
        "max_depth": 50,
        "seed": null,
        "camera": {"origin": [...], "lower_left_corner": [...],
                   "horizontal": [...], "vertical": [...]},
        "world": [
            {"shape": "sphere", "center": [0, 0, -1], "radius": 0.5,
             "material": {"kind": "lambertian", "albedo": [0.8, 0.3, 0.3]}},
            {"shape": "sphere", "center": [1, 0, -1], "radius": 0.5,
             "material": {"kind": "metal", "albedo": [0.8, 0.6, 0.2], "fuzz": 0.0}}
        ]
    }

This module has no Taichi dependency and can be imported before
initialization.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

Vec3Tuple = tuple[float, float, float]

MATERIAL_KINDS = ("lambertian", "metal")


def _vec3(value: Any, key: str) -> Vec3Tuple:
    """Convert a 3-element sequence to a float tuple, naming the key on error."""
    try:
        x, y, z = value
        return (float(x), float(y), float(z))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{key}' must be a sequence of three numbers, got {value!r}") from exc


def _float(value: Any, key: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{key}' must be a number, got {value!r}") from exc


def _int(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{key}' must be an integer, got {value!r}") from exc


def _mapping(value: Any, key: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"'{key}' must be an object, got {type(value).__name__}")
    return value


@dataclass
class MaterialConfig:
    """Material parameters for one sphere.

    Attributes:
        kind: "lambertian" or "metal".
        albedo: Reflectance color (R, G, B), each component in [0, 1].
        fuzz: Metal roughness; ignored for Lambertian materials.
    """

    kind: str
    albedo: Vec3Tuple
    fuzz: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MaterialConfig:
        kind = str(data.get("kind", "")).lower()
        if kind not in MATERIAL_KINDS:
            raise ValueError(f"Unknown material kind: {kind!r}")
        if "albedo" not in data:
            raise ValueError("Material is missing 'albedo'")
        return cls(
            kind=kind,
            albedo=_vec3(data["albedo"], "albedo"),
            fuzz=_float(data.get("fuzz", 0.0), "fuzz"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"kind": self.kind, "albedo": list(self.albedo)}
        if self.kind == "metal":
            result["fuzz"] = self.fuzz
        return result


@dataclass
class SphereConfig:
    """A sphere in the world.

    Attributes:
        center: Center point (x, y, z).
        radius: Radius, positive.
        material: The sphere's material.
    """

    center: Vec3Tuple
    radius: float
    material: MaterialConfig

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SphereConfig:
        shape = str(data.get("shape", "sphere")).lower()
        if shape != "sphere":
            raise ValueError(f"Unknown shape: {shape!r}")
        for key in ("center", "radius", "material"):
            if key not in data:
                raise ValueError(f"Sphere is missing '{key}'")
        return cls(
            center=_vec3(data["center"], "center"),
            radius=_float(data["radius"], "radius"),
            material=MaterialConfig.from_dict(_mapping(data["material"], "material")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "shape": "sphere",
            "center": list(self.center),
            "radius": self.radius,
            "material": self.material.to_dict(),
        }


@dataclass
class CameraConfig:
    """Viewport camera vectors, all in world space.

    The viewport is the rectangle spanned by horizontal and vertical from
    lower_left_corner; rays start at origin.
    """

    origin: Vec3Tuple = (0.0, 0.0, 0.0)
    lower_left_corner: Vec3Tuple = (-2.0, -1.0, -1.0)
    horizontal: Vec3Tuple = (4.0, 0.0, 0.0)
    vertical: Vec3Tuple = (0.0, 2.0, 0.0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CameraConfig:
        defaults = cls()
        return cls(
            origin=_vec3(data.get("origin", defaults.origin), "camera.origin"),
            lower_left_corner=_vec3(
                data.get("lower_left_corner", defaults.lower_left_corner),
                "camera.lower_left_corner",
            ),
            horizontal=_vec3(data.get("horizontal", defaults.horizontal), "camera.horizontal"),
            vertical=_vec3(data.get("vertical", defaults.vertical), "camera.vertical"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "origin": list(self.origin),
            "lower_left_corner": list(self.lower_left_corner),
            "horizontal": list(self.horizontal),
            "vertical": list(self.vertical),
        }


@dataclass
class RenderConfig:
    """Everything needed to render one image.

    Attributes:
        image_width: Output width in pixels.
        image_height: Output height in pixels.
        samples_per_pixel: Jittered samples averaged per pixel.
        max_depth: Maximum number of scatter events along a path.
        seed: Random seed, or None for a different image each run.
        camera: The viewport camera.
        world: The spheres to render, in order.
    """

    image_width: int = 400
    image_height: int = 200
    samples_per_pixel: int = 50
    max_depth: int = 50
    seed: int | None = None
    camera: CameraConfig = field(default_factory=CameraConfig)
    world: list[SphereConfig] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check basic value ranges.

        Raises:
            ValueError: If a size, sample count, or depth is out of range.
        """
        if self.image_width <= 0 or self.image_height <= 0:
            raise ValueError(
                f"image_width and image_height must be positive, "
                f"got {self.image_width}x{self.image_height}"
            )
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RenderConfig:
        """Build a configuration from its dictionary form."""
        defaults = cls()
        seed = data.get("seed")
        return cls(
            image_width=_int(data.get("image_width", defaults.image_width), "image_width"),
            image_height=_int(data.get("image_height", defaults.image_height), "image_height"),
            samples_per_pixel=_int(
                data.get("samples_per_pixel", defaults.samples_per_pixel), "samples_per_pixel"
            ),
            max_depth=_int(data.get("max_depth", defaults.max_depth), "max_depth"),
            seed=None if seed is None else _int(seed, "seed"),
            camera=CameraConfig.from_dict(_mapping(data.get("camera", {}), "camera")),
            world=world_from_list(data.get("world", [])),
        )

    def to_dict(self) -> dict[str, Any]:
        """Export the configuration to a JSON-compatible dictionary."""
        return {
            "image_width": self.image_width,
            "image_height": self.image_height,
            "samples_per_pixel": self.samples_per_pixel,
            "max_depth": self.max_depth,
            "seed": self.seed,
            "camera": self.camera.to_dict(),
            "world": [sphere.to_dict() for sphere in self.world],
        }


def world_from_list(items: Any) -> list[SphereConfig]:
    """Parse the "world" entry: a list of sphere objects.

    Raises:
        ValueError: If items is not a list or an entry is not a valid sphere.
    """
    if not isinstance(items, list):
        raise ValueError(f"'world' must be a list, got {type(items).__name__}")
    return [SphereConfig.from_dict(_mapping(item, f"world[{i}]")) for i, item in enumerate(items)]


def load_config(path: str | Path) -> RenderConfig:
    """Read a RenderConfig from a JSON file.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the content is not valid JSON or not a valid config.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be an object, got {type(data).__name__}")
    return RenderConfig.from_dict(data)


def default_config() -> RenderConfig:
    """The reference scene: a diffuse sphere between two metal spheres on a ground sphere."""
    return RenderConfig(
        world=[
            SphereConfig((0.0, 0.0, -1.0), 0.5, MaterialConfig("lambertian", (0.8, 0.3, 0.3))),
            SphereConfig((0.0, -100.5, -1.0), 100.0, MaterialConfig("lambertian", (0.8, 0.8, 0.0))),
            SphereConfig((1.0, 0.0, -1.0), 0.5, MaterialConfig("metal", (0.8, 0.6, 0.2), 0.0)),
            SphereConfig((-1.0, 0.0, -1.0), 0.5, MaterialConfig("metal", (0.8, 0.8, 0.8), 0.7)),
        ],
    )
