"""One-call rendering pipeline.

render() builds the world and camera from a RenderConfig, accumulates the
configured samples, and returns the pixel buffer. Taichi must already be
initialized (see pathtracer.runtime.init_taichi), which is also where the
configured seed takes effect.

Example:
    >>> from pathtracer.config import default_config
    >>> from pathtracer.runtime import init_taichi
    >>> config = default_config()
    >>> init_taichi(seed=config.seed)
    >>> from pathtracer.render import render
    >>> image = render(config)
    >>> image.save("spheres.png")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import numpy.typing as npt

from pathtracer.camera.camera import Camera, setup_camera
from pathtracer.config import RenderConfig
from pathtracer.core.renderer import ProgressCallback, Renderer
from pathtracer.preview.export import pixels_to_array, save_png
from pathtracer.scene.manager import SceneManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedImage:
    """An 8-bit RGBA raster produced by a render.

    Attributes:
        pixels: width * height * 4 bytes, top row first, [R, G, B, 255] per pixel.
        width: Image width in pixels.
        height: Image height in pixels.
    """

    pixels: bytes
    width: int
    height: int

    def to_numpy(self) -> npt.NDArray[np.uint8]:
        """View the pixels as an array of shape (height, width, 4)."""
        return pixels_to_array(self.pixels, self.width, self.height)

    def save(self, filepath: str | Path) -> Path:
        """Write the image as a PNG file."""
        return save_png(self.pixels, self.width, self.height, filepath)


def build_scene(config: RenderConfig) -> SceneManager:
    """Load the configured world and camera into the Taichi fields.

    Raises:
        ValueError: If a material or sphere in the config is invalid.
    """
    scene = SceneManager()
    scene.from_config(config.world)
    setup_camera(Camera.from_config(config.camera))
    return scene


def render(
    config: RenderConfig,
    batch_size: int | None = None,
    callback: ProgressCallback | None = None,
) -> RenderedImage:
    """Render a configured scene.

    Args:
        config: The render configuration.
        batch_size: Samples per pixel between progress callbacks.
        callback: Optional progress callback receiving (done, total).

    Returns:
        The rendered image.

    Raises:
        ValueError: If the configuration is invalid.
    """
    config.validate()
    build_scene(config)

    renderer = Renderer(
        config.image_width,
        config.image_height,
        samples_per_pixel=config.samples_per_pixel,
        max_depth=config.max_depth,
    )
    pixels = renderer.render(batch_size=batch_size, callback=callback)
    return RenderedImage(pixels=pixels, width=config.image_width, height=config.image_height)
