"""Tests for the Lambertian (diffuse) material."""

import numpy as np
import pytest
import taichi as ti


class TestScatterLambertian:
    """Tests for scatter_lambertian sampling."""

    def test_direction_within_unit_sphere_of_normal(self):
        """scattered - normal always lies strictly inside the unit sphere."""
        from pathtracer.core.vector import vec3
        from pathtracer.materials.lambertian import scatter_lambertian

        n = 4096
        offsets = ti.field(dtype=ti.f64, shape=n)

        @ti.kernel
        def test_kernel():
            normal = vec3(0.0, 1.0, 0.0)
            for i in range(n):
                direction, _ = scatter_lambertian(vec3(0.5, 0.5, 0.5), normal)
                offsets[i] = (direction - normal).norm()

        test_kernel()
        assert offsets.to_numpy().max() < 1.0

    def test_mean_direction_follows_normal(self):
        from pathtracer.core.vector import vec3
        from pathtracer.materials.lambertian import scatter_lambertian

        n = 8192
        directions = ti.Vector.field(3, dtype=ti.f64, shape=n)

        @ti.kernel
        def test_kernel():
            normal = vec3(0.0, 0.0, 1.0)
            for i in range(n):
                direction, _ = scatter_lambertian(vec3(1.0, 1.0, 1.0), normal)
                directions[i] = direction

        test_kernel()
        mean = directions.to_numpy().mean(axis=0)
        assert mean == pytest.approx(np.array([0.0, 0.0, 1.0]), abs=0.05)

    def test_attenuation_equals_albedo(self):
        from pathtracer.core.vector import vec3
        from pathtracer.materials.lambertian import scatter_lambertian

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            _, attenuation = scatter_lambertian(vec3(0.8, 0.3, 0.3), vec3(1.0, 0.0, 0.0))
            result[None] = attenuation

        test_kernel()
        assert tuple(result[None].to_numpy()) == pytest.approx((0.8, 0.3, 0.3))


class TestLambertianRegistry:
    """Tests for Lambertian material storage."""

    def test_add_material(self):
        from pathtracer.materials.lambertian import (
            add_lambertian_material,
            get_lambertian_material_count,
            lambertian_materials,
        )

        assert add_lambertian_material((0.8, 0.3, 0.3)) == 0
        assert add_lambertian_material((0.8, 0.8, 0.0)) == 1
        assert get_lambertian_material_count() == 2
        assert tuple(lambertian_materials.albedo[1].to_numpy()) == pytest.approx((0.8, 0.8, 0.0))

    def test_albedo_lookup_in_kernel(self):
        from pathtracer.materials.lambertian import add_lambertian_material, get_lambertian_albedo

        add_lambertian_material((0.1, 0.2, 0.3))
        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = get_lambertian_albedo(0)

        test_kernel()
        assert tuple(result[None].to_numpy()) == pytest.approx((0.1, 0.2, 0.3))

    @pytest.mark.parametrize("albedo", [(1.1, 0.5, 0.5), (0.5, -0.1, 0.5)])
    def test_albedo_out_of_range_raises(self, albedo):
        from pathtracer.materials.lambertian import add_lambertian_material

        with pytest.raises(ValueError, match="outside"):
            add_lambertian_material(albedo)

    def test_clear(self):
        from pathtracer.materials.lambertian import (
            add_lambertian_material,
            clear_lambertian_materials,
            get_lambertian_material_count,
        )

        add_lambertian_material((0.5, 0.5, 0.5))
        clear_lambertian_materials()
        assert get_lambertian_material_count() == 0

    def test_capacity_exceeded_raises(self):
        from pathtracer.materials.lambertian import (
            MAX_LAMBERTIAN_MATERIALS,
            add_lambertian_material,
            num_lambertian_materials,
        )

        num_lambertian_materials[None] = MAX_LAMBERTIAN_MATERIALS
        with pytest.raises(RuntimeError):
            add_lambertian_material((0.5, 0.5, 0.5))
