"""Viewport camera for primary ray generation.

The camera is an origin plus an axis-aligned viewport rectangle at unit
focal distance, given by its lower-left corner and its horizontal and
vertical edge vectors. Normalized image coordinates map to rays:

    direction = lower_left_corner + u * horizontal + v * vertical - origin

with u in [0, 1] left to right and v in [0, 1] bottom to top. Coordinates are
not clamped, and directions are not normalized.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtracer.camera.camera import Camera, setup_camera, get_ray
    >>> setup_camera(Camera.default())
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5)  # Ray through image center
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from pathtracer.config import CameraConfig
from pathtracer.core.ray import Ray, make_ray
from pathtracer.core.vector import vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """Viewport camera vectors in world space.

    Attributes:
        origin: Position every ray starts from.
        lower_left_corner: Lower-left corner of the viewport.
        horizontal: Full-width edge vector of the viewport.
        vertical: Full-height edge vector of the viewport.
    """

    origin: tuple[float, float, float]
    lower_left_corner: tuple[float, float, float]
    horizontal: tuple[float, float, float]
    vertical: tuple[float, float, float]

    @classmethod
    def default(cls) -> "Camera":
        """The reference camera: origin at zero, 4x2 viewport at z = -1."""
        return cls(
            origin=(0.0, 0.0, 0.0),
            lower_left_corner=(-2.0, -1.0, -1.0),
            horizontal=(4.0, 0.0, 0.0),
            vertical=(0.0, 2.0, 0.0),
        )

    @classmethod
    def from_config(cls, config: CameraConfig) -> "Camera":
        return cls(
            origin=config.origin,
            lower_left_corner=config.lower_left_corner,
            horizontal=config.horizontal,
            vertical=config.vertical,
        )


def look_at_camera(
    lookfrom: tuple[float, float, float],
    lookat: tuple[float, float, float],
    vup: tuple[float, float, float],
    vfov: float,
    aspect_ratio: float,
) -> Camera:
    """Build viewport vectors from a look-at description.

    The camera basis (u, v, w) has w pointing from lookat toward lookfrom,
    u to the right and v up. The viewport sits at unit distance along -w.

    Args:
        lookfrom: Camera position in world space.
        lookat: Point the camera is looking at.
        vup: Up direction (typically (0, 1, 0)); must not be parallel to
            the view direction.
        vfov: Vertical field of view in degrees.
        aspect_ratio: Image width divided by height.

    Returns:
        The equivalent viewport Camera.
    """
    theta = math.radians(vfov)
    viewport_height = 2.0 * math.tan(theta / 2.0)
    viewport_width = aspect_ratio * viewport_height

    origin = np.array(lookfrom, dtype=np.float64)
    w = origin - np.array(lookat, dtype=np.float64)
    w = w / np.linalg.norm(w)
    u = np.cross(np.array(vup, dtype=np.float64), w)
    u = u / np.linalg.norm(u)
    v = np.cross(w, u)

    horizontal = viewport_width * u
    vertical = viewport_height * v
    lower_left = origin - w - horizontal / 2.0 - vertical / 2.0

    return Camera(
        origin=tuple(origin.tolist()),
        lower_left_corner=tuple(lower_left.tolist()),
        horizontal=tuple(horizontal.tolist()),
        vertical=tuple(vertical.tolist()),
    )


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f64, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f64, shape=())
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f64, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=ti.f64, shape=())
_camera_initialized = ti.field(dtype=ti.i32, shape=())


def setup_camera(camera: Camera) -> None:
    """Store the camera vectors for use by the rendering kernels.

    Must be called before rendering. Call from Python scope, not from a kernel.
    """
    _camera_origin[None] = list(camera.origin)
    _lower_left_corner[None] = list(camera.lower_left_corner)
    _viewport_horizontal[None] = list(camera.horizontal)
    _viewport_vertical[None] = list(camera.vertical)
    _camera_initialized[None] = 1


def is_camera_initialized() -> bool:
    """Check whether setup_camera() has been called."""
    return bool(_camera_initialized[None])


def reset_camera() -> None:
    """Mark the camera as not set up."""
    _camera_initialized[None] = 0


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(u: ti.f64, v: ti.f64) -> Ray:
    """Generate a ray through normalized viewport coordinates (u, v).

    Args:
        u: Horizontal coordinate, 0 at the left edge and 1 at the right.
        v: Vertical coordinate, 0 at the bottom edge and 1 at the top.

    Returns:
        A Ray from the camera origin toward the viewport point.
    """
    origin = _camera_origin[None]
    direction = (
        _lower_left_corner[None]
        + u * _viewport_horizontal[None]
        + v * _viewport_vertical[None]
        - origin
    )
    return make_ray(origin, direction)


@ti.func
def get_ray_jittered(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate a ray through a random point of a pixel for anti-aliasing.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray through ((i + U) / width, (j + U) / height), U in [0, 1).
    """
    u = (ti.cast(pixel_i, ti.f64) + ti.random(ti.f64)) / ti.cast(width, ti.f64)
    v = (ti.cast(pixel_j, ti.f64) + ti.random(ti.f64)) / ti.cast(height, ti.f64)
    return get_ray(u, v)


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera origin in world space."""
    return _camera_origin[None]


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get the stored camera vectors for inspection from Python.

    Returns:
        Dictionary with origin, lower_left_corner, horizontal, vertical.
    """

    def _as_tuple(vec) -> tuple[float, float, float]:
        return (float(vec[0]), float(vec[1]), float(vec[2]))

    return {
        "origin": _as_tuple(_camera_origin[None]),
        "lower_left_corner": _as_tuple(_lower_left_corner[None]),
        "horizontal": _as_tuple(_viewport_horizontal[None]),
        "vertical": _as_tuple(_viewport_vertical[None]),
    }
