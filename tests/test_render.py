"""End-to-end tests for the one-call rendering pipeline."""

import logging

import numpy as np
import pytest


@pytest.fixture
def small_config():
    import dataclasses

    from pathtracer.config import default_config

    return dataclasses.replace(
        default_config(), image_width=20, image_height=10, samples_per_pixel=4, max_depth=8
    )


class TestRender:
    def test_reference_scene(self, small_config):
        from pathtracer.render import render

        image = render(small_config)

        assert (image.width, image.height) == (20, 10)
        assert len(image.pixels) == 20 * 10 * 4

        array = image.to_numpy()
        assert array.shape == (10, 20, 4)
        assert (array[:, :, 3] == 255).all()
        # The center pixel sees the red diffuse sphere
        center = array[5, 10].astype(int)
        assert center[0] > center[1]
        # The top-left corner sees open sky: saturated blue
        assert array[0, 0, 2] == 255

    def test_build_scene_loads_world_and_camera(self, small_config):
        from pathtracer.camera.camera import get_camera_info, is_camera_initialized
        from pathtracer.render import build_scene

        scene = build_scene(small_config)

        assert scene.get_sphere_count() == 4
        assert is_camera_initialized()
        assert get_camera_info()["lower_left_corner"] == pytest.approx((-2.0, -1.0, -1.0))

    def test_callback_progress(self, small_config):
        from pathtracer.render import render

        calls = []
        render(small_config, batch_size=1, callback=lambda done, total: calls.append(done))
        assert calls == [1, 2, 3, 4]

    def test_empty_world_is_sky(self, small_config):
        import dataclasses

        from pathtracer.render import render

        image = render(dataclasses.replace(small_config, world=[])).to_numpy()
        # Red decreases toward the top of the sky
        assert image[0, :, 0].mean() < image[-1, :, 0].mean()
        assert (image[:, :, 2] == 255).all()

    def test_save(self, small_config, tmp_path):
        from pathtracer.preview.export import load_png
        from pathtracer.render import render

        image = render(small_config)
        path = image.save(tmp_path / "spheres.png")

        pixels, width, height = load_png(path)
        assert (width, height) == (20, 10)
        assert np.array_equal(
            np.frombuffer(pixels, dtype=np.uint8), np.frombuffer(image.pixels, dtype=np.uint8)
        )

    def test_logs_scene_and_render(self, small_config, caplog):
        from pathtracer.render import render

        with caplog.at_level(logging.DEBUG, logger="pathtracer"):
            render(small_config)

        assert "Scene loaded: 4 spheres, 4 materials" in caplog.text
        assert "Render finished" in caplog.text

    def test_invalid_world_raises(self, small_config):
        import dataclasses

        from pathtracer.config import MaterialConfig, SphereConfig
        from pathtracer.render import render

        bad = SphereConfig((0.0, 0.0, -1.0), 0.5, MaterialConfig("lambertian", (2.0, 0.0, 0.0)))
        with pytest.raises(ValueError):
            render(dataclasses.replace(small_config, world=[bad]))
