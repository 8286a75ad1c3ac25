"""Batched renderer with progress reporting.

The Renderer wraps the integrator's render target for one image size,
sample budget, and bounce limit. Samples are accumulated in batches so that
a caller can report progress between batches; the final pixel buffer is
identical to accumulating every sample at once, since each pixel's average
is taken over the total sample count.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtracer.camera.camera import Camera, setup_camera
    >>> from pathtracer.core.renderer import Renderer
    >>> setup_camera(Camera.default())
    >>> renderer = Renderer(400, 200, samples_per_pixel=50)
    >>> pixels = renderer.render(batch_size=10)
"""

import logging
import time
from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from pathtracer.core.integrator import (
    DEFAULT_MAX_DEPTH,
    accumulate_samples,
    clear_render_target,
    get_total_samples,
    resolve_pixels,
    setup_render_target,
)

logger = logging.getLogger(__name__)

# Callback receives (samples_done, samples_per_pixel)
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Renders the current world and camera into an RGBA byte buffer.

    The renderer delegates to the global integrator buffers (Taichi fields),
    so only one Renderer should be active at a time.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Number of samples averaged per pixel.
        max_depth: Maximum number of scatter events per path.
    """

    def __init__(
        self,
        width: int,
        height: int,
        samples_per_pixel: int = 50,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        """Initialize the renderer and its render target.

        Raises:
            ValueError: If a dimension is out of range, samples_per_pixel is
                not positive, or max_depth is negative.
        """
        if samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {samples_per_pixel}")
        if max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")

        setup_render_target(width, height)
        self._width = width
        self._height = height
        self._samples_per_pixel = samples_per_pixel
        self._max_depth = max_depth

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def samples_per_pixel(self) -> int:
        return self._samples_per_pixel

    @property
    def max_depth(self) -> int:
        return self._max_depth

    @property
    def sample_count(self) -> int:
        """Get the number of samples accumulated per pixel so far."""
        return get_total_samples()

    @property
    def is_complete(self) -> bool:
        """Whether the full sample budget has been accumulated."""
        return self.sample_count >= self._samples_per_pixel

    def reset(self) -> None:
        """Discard accumulated samples, keeping the image size."""
        clear_render_target()

    def render_progressive(self, batch_size: int = 1) -> Generator[tuple[int, int], None, None]:
        """Accumulate the remaining samples, yielding progress after each batch.

        Args:
            batch_size: Number of samples per pixel per batch.

        Yields:
            Tuple of (samples_done, samples_per_pixel).

        Raises:
            ValueError: If batch_size is not positive.
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        remaining = self._samples_per_pixel - self.sample_count
        while remaining > 0:
            batch = min(batch_size, remaining)
            accumulate_samples(batch, self._max_depth)
            remaining -= batch
            yield (self.sample_count, self._samples_per_pixel)

    def render(
        self,
        batch_size: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> bytes:
        """Render the full sample budget and return the pixel buffer.

        Args:
            batch_size: Samples per pixel between progress callbacks.
                Defaults to the whole budget in one batch.
            callback: Optional function called after each batch with
                (samples_done, samples_per_pixel).

        Returns:
            width * height * 4 bytes, RGBA, top row first.

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} samples")
            >>> pixels = renderer.render(batch_size=10, callback=progress)
        """
        if batch_size is None:
            batch_size = self._samples_per_pixel

        logger.info(
            "Rendering %dx%d at %d spp (max depth %d)",
            self._width,
            self._height,
            self._samples_per_pixel,
            self._max_depth,
        )
        start_time = time.perf_counter()

        for done, total in self.render_progressive(batch_size):
            if callback is not None:
                callback(done, total)

        pixels = self.pixels()
        logger.info("Render finished in %.2fs", time.perf_counter() - start_time)
        return pixels

    def pixels(self) -> bytes:
        """Get the RGBA byte buffer for the samples accumulated so far.

        Raises:
            RuntimeError: If no samples have been accumulated.
        """
        return resolve_pixels()

    def pixels_numpy(self) -> npt.NDArray[np.uint8]:
        """Get the pixel buffer as an array of shape (height, width, 4)."""
        return np.frombuffer(self.pixels(), dtype=np.uint8).reshape(self._height, self._width, 4)

    def __repr__(self) -> str:
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count}/{self.samples_per_pixel}, "
            f"max_depth={self.max_depth})"
        )
