"""Preview module for rendered output.

Components:
    export: RGBA byte buffer to PNG (Pillow), array views, timestamped
        output names, and image comparison

Example:
    >>> from pathtracer.preview import save_png
    >>> save_png(pixels, width, height, "output.png")
"""

from pathtracer.preview.export import (
    compute_rmse,
    load_png,
    pixels_to_array,
    save_png,
    timestamped_filename,
)

__all__ = [
    "save_png",
    "load_png",
    "pixels_to_array",
    "timestamped_filename",
    "compute_rmse",
]
