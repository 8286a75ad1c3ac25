"""Camera module for primary ray generation.

Components:
    camera: Viewport camera (origin, lower-left corner, horizontal and
        vertical edges), a look-at builder, and Taichi ray generation

Ray generation uses normalized viewport coordinates:
    u in [0, 1]: left to right across image
    v in [0, 1]: bottom to top across image
"""

from .camera import (
    Camera,
    get_camera_info,
    get_camera_origin,
    get_ray,
    get_ray_jittered,
    is_camera_initialized,
    look_at_camera,
    reset_camera,
    setup_camera,
)

__all__ = [
    "Camera",
    "look_at_camera",
    "setup_camera",
    "is_camera_initialized",
    "reset_camera",
    "get_ray",
    "get_ray_jittered",
    "get_camera_origin",
    "get_camera_info",
]
