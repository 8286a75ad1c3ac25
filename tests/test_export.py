"""Tests for PNG export and image comparison helpers."""

import re

import numpy as np
import pytest

from pathtracer.preview.export import (
    compute_rmse,
    load_png,
    pixels_to_array,
    save_png,
    timestamped_filename,
)


def _gradient_pixels(width, height):
    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[:, :, 0] = np.arange(width, dtype=np.uint8)[None, :] * 10
    image[:, :, 1] = np.arange(height, dtype=np.uint8)[:, None] * 20
    image[:, :, 2] = 128
    image[:, :, 3] = 255
    return image.tobytes()


class TestPixelsToArray:
    def test_shape_and_order(self):
        pixels = _gradient_pixels(6, 3)
        image = pixels_to_array(pixels, 6, 3)

        assert image.shape == (3, 6, 4)
        assert tuple(image[0, 5]) == (50, 0, 128, 255)
        assert tuple(image[2, 0]) == (0, 40, 128, 255)

    def test_size_mismatch(self):
        with pytest.raises(ValueError, match="expected 72"):
            pixels_to_array(b"\x00" * 10, 6, 3)

    def test_invalid_dimensions(self):
        with pytest.raises(ValueError, match="positive"):
            pixels_to_array(b"", 0, 3)


class TestPng:
    def test_save_and_load(self, tmp_path):
        pixels = _gradient_pixels(6, 3)
        path = save_png(pixels, 6, 3, tmp_path / "out.png")

        assert path.exists()
        loaded, width, height = load_png(path)
        assert (width, height) == (6, 3)
        assert loaded == pixels

    def test_save_wrong_size_raises(self, tmp_path):
        with pytest.raises(ValueError):
            save_png(b"\x00" * 5, 2, 2, tmp_path / "bad.png")
        assert not (tmp_path / "bad.png").exists()

    def test_save_accepts_string_path(self, tmp_path):
        path = save_png(_gradient_pixels(2, 2), 2, 2, str(tmp_path / "str.png"))
        assert path == tmp_path / "str.png"


class TestTimestampedFilename:
    def test_format(self):
        name = timestamped_filename("spheres")
        assert re.fullmatch(r"spheres_\d+\.png", name)

    def test_uses_unix_seconds(self, monkeypatch):
        import pathtracer.preview.export as export

        monkeypatch.setattr(export.time, "time", lambda: 1792300000.75)
        assert export.timestamped_filename() == "render_1792300000.png"
        assert export.timestamped_filename("a", ".bin") == "a_1792300000.bin"


class TestComputeRmse:
    def test_identical(self):
        image = np.full((4, 4, 4), 100, dtype=np.uint8)
        assert compute_rmse(image, image) == 0.0

    def test_constant_offset(self):
        a = np.zeros((2, 2, 4), dtype=np.uint8)
        b = np.full((2, 2, 4), 3, dtype=np.uint8)
        assert compute_rmse(a, b) == pytest.approx(3.0)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError, match="shapes"):
            compute_rmse(np.zeros((2, 2)), np.zeros((2, 3)))
