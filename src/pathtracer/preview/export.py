"""Image export utilities for rendered pixel buffers.

A render produces a flat RGBA byte buffer, width * height * 4 bytes with the
top row first. These helpers view it as an array and persist it as an 8-bit
RGBA PNG via Pillow.

Example:
    >>> from pathtracer.preview.export import save_png, timestamped_filename
    >>> save_png(pixels, 400, 200, timestamped_filename())
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def _check_buffer_size(pixels: bytes, width: int, height: int) -> None:
    expected = width * height * 4
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if len(pixels) != expected:
        raise ValueError(
            f"Pixel buffer has {len(pixels)} bytes, expected {expected} for {width}x{height} RGBA"
        )


def pixels_to_array(pixels: bytes, width: int, height: int) -> npt.NDArray[np.uint8]:
    """View an RGBA byte buffer as an array.

    Args:
        pixels: RGBA bytes, top row first.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        Array of shape (height, width, 4) with dtype uint8.

    Raises:
        ValueError: If the buffer size does not match the dimensions.
    """
    _check_buffer_size(pixels, width, height)
    return np.frombuffer(pixels, dtype=np.uint8).reshape(height, width, 4)


def save_png(pixels: bytes, width: int, height: int, filepath: str | Path) -> Path:
    """Save an RGBA byte buffer as an 8-bit RGBA PNG file.

    Args:
        pixels: RGBA bytes, top row first.
        width: Image width in pixels.
        height: Image height in pixels.
        filepath: Output file path (should end in .png).

    Returns:
        The path written.

    Raises:
        ValueError: If the buffer size does not match the dimensions.
        OSError: If the file cannot be written.
    """
    _check_buffer_size(pixels, width, height)
    path = Path(filepath)

    pil_image = PILImage.frombytes("RGBA", (width, height), bytes(pixels))
    pil_image.save(path, format="PNG")

    logger.info("Saved %dx%d image to %s", width, height, path)
    return path


def load_png(filepath: str | Path) -> tuple[bytes, int, int]:
    """Read a PNG back as an RGBA byte buffer.

    Returns:
        Tuple of (pixels, width, height).
    """
    with PILImage.open(filepath) as image:
        rgba = image.convert("RGBA")
        return rgba.tobytes(), rgba.width, rgba.height


def timestamped_filename(prefix: str = "render", suffix: str = ".png") -> str:
    """Build an output name stamped with the current Unix time in seconds.

    Example:
        >>> timestamped_filename("test")  # e.g. 'test_1792300000.png'
    """
    return f"{prefix}_{int(time.time())}{suffix}"


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
