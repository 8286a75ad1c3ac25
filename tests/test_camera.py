"""Tests for the viewport camera and primary ray generation."""

import math

import numpy as np
import pytest
import taichi as ti


def _ray_through(u, v):
    from pathtracer.camera.camera import get_ray

    origin = ti.Vector.field(3, dtype=ti.f64, shape=())
    direction = ti.Vector.field(3, dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(u: ti.f64, v: ti.f64):
        ray = get_ray(u, v)
        origin[None] = ray.origin
        direction[None] = ray.direction

    test_kernel(u, v)
    return tuple(origin[None].to_numpy()), tuple(direction[None].to_numpy())


class TestCameraSetup:
    """Tests for storing camera state."""

    def test_setup_and_reset(self):
        from pathtracer.camera.camera import (
            Camera,
            is_camera_initialized,
            reset_camera,
            setup_camera,
        )

        assert not is_camera_initialized()
        setup_camera(Camera.default())
        assert is_camera_initialized()
        reset_camera()
        assert not is_camera_initialized()

    def test_camera_info(self):
        from pathtracer.camera.camera import Camera, get_camera_info, setup_camera

        setup_camera(Camera.default())
        info = get_camera_info()

        assert info["origin"] == pytest.approx((0.0, 0.0, 0.0))
        assert info["lower_left_corner"] == pytest.approx((-2.0, -1.0, -1.0))
        assert info["horizontal"] == pytest.approx((4.0, 0.0, 0.0))
        assert info["vertical"] == pytest.approx((0.0, 2.0, 0.0))

    def test_from_config(self):
        from pathtracer.camera.camera import Camera
        from pathtracer.config import CameraConfig

        assert Camera.from_config(CameraConfig()) == Camera.default()


class TestGetRay:
    """Tests for get_ray and get_ray_jittered."""

    @pytest.mark.parametrize(
        "u, v, expected",
        [
            (0.5, 0.5, (0.0, 0.0, -1.0)),
            (0.0, 0.0, (-2.0, -1.0, -1.0)),
            (1.0, 1.0, (2.0, 1.0, -1.0)),
            (0.25, 0.75, (-1.0, 0.5, -1.0)),
        ],
    )
    def test_default_camera_directions(self, u, v, expected):
        from pathtracer.camera.camera import Camera, setup_camera

        setup_camera(Camera.default())
        origin, direction = _ray_through(u, v)

        assert origin == pytest.approx((0.0, 0.0, 0.0))
        assert direction == pytest.approx(expected)

    def test_direction_is_relative_to_origin(self):
        """Moving the origin changes the direction, not just the start point."""
        from pathtracer.camera.camera import Camera, setup_camera

        setup_camera(
            Camera(
                origin=(1.0, 2.0, 3.0),
                lower_left_corner=(-2.0, -1.0, -1.0),
                horizontal=(4.0, 0.0, 0.0),
                vertical=(0.0, 2.0, 0.0),
            )
        )
        origin, direction = _ray_through(0.5, 0.5)

        assert origin == pytest.approx((1.0, 2.0, 3.0))
        assert direction == pytest.approx((-1.0, -2.0, -4.0))

    def test_coordinates_are_not_clamped(self):
        from pathtracer.camera.camera import Camera, setup_camera

        setup_camera(Camera.default())
        _, direction = _ray_through(1.5, -0.5)
        assert direction == pytest.approx((4.0, -2.0, -1.0))

    def test_jittered_rays_stay_in_pixel(self):
        from pathtracer.camera.camera import Camera, get_ray_jittered, setup_camera

        setup_camera(Camera.default())
        width, height = 20, 10
        pixel_i, pixel_j = 7, 3
        n = 1024
        directions = ti.Vector.field(3, dtype=ti.f64, shape=n)

        @ti.kernel
        def test_kernel():
            for k in range(n):
                directions[k] = get_ray_jittered(pixel_i, pixel_j, width, height).direction

        test_kernel()
        result = directions.to_numpy()
        # x = -2 + 4u, y = -1 + 2v
        u = (result[:, 0] + 2.0) / 4.0
        v = (result[:, 1] + 1.0) / 2.0

        assert u.min() >= pixel_i / width - 1e-12
        assert u.max() < (pixel_i + 1) / width + 1e-12
        assert v.min() >= pixel_j / height - 1e-12
        assert v.max() < (pixel_j + 1) / height + 1e-12
        assert np.allclose(result[:, 2], -1.0)

    def test_camera_origin_accessor(self):
        from pathtracer.camera.camera import Camera, get_camera_origin, setup_camera

        setup_camera(Camera((0.5, 0.0, 0.0), (-2.0, -1.0, -1.0), (4.0, 0.0, 0.0), (0.0, 2.0, 0.0)))
        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = get_camera_origin()

        test_kernel()
        assert tuple(result[None].to_numpy()) == pytest.approx((0.5, 0.0, 0.0))


class TestLookAtCamera:
    """Tests for the look-at convenience constructor."""

    def test_matches_reference_viewport(self):
        """A 90 degree, 2:1 look-at camera down -z reproduces the default viewport."""
        from pathtracer.camera.camera import look_at_camera

        camera = look_at_camera(
            lookfrom=(0.0, 0.0, 0.0),
            lookat=(0.0, 0.0, -1.0),
            vup=(0.0, 1.0, 0.0),
            vfov=90.0,
            aspect_ratio=2.0,
        )

        assert camera.origin == pytest.approx((0.0, 0.0, 0.0))
        assert camera.lower_left_corner == pytest.approx((-2.0, -1.0, -1.0))
        assert camera.horizontal == pytest.approx((4.0, 0.0, 0.0))
        assert camera.vertical == pytest.approx((0.0, 2.0, 0.0))

    def test_center_points_at_target(self):
        from pathtracer.camera.camera import look_at_camera

        lookfrom = np.array([3.0, 2.0, 1.0])
        lookat = np.array([0.0, 0.0, -1.0])
        camera = look_at_camera(tuple(lookfrom), tuple(lookat), (0.0, 1.0, 0.0), 40.0, 1.5)

        center = (
            np.array(camera.lower_left_corner)
            + 0.5 * np.array(camera.horizontal)
            + 0.5 * np.array(camera.vertical)
        )
        view = center - lookfrom
        expected = (lookat - lookfrom) / np.linalg.norm(lookat - lookfrom)
        assert view == pytest.approx(expected)
        assert np.linalg.norm(camera.vertical) == pytest.approx(2.0 * math.tan(math.radians(20.0)))
