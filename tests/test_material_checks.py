"""Tests for shared material parameter checks."""

import math

import pytest


class TestCheckAlbedo:
    def test_converts_to_floats(self):
        from pathtracer.materials.common import check_albedo

        assert check_albedo((1, 0, 0.5)) == (1.0, 0.0, 0.5)

    @pytest.mark.parametrize("albedo", [(1.01, 0.0, 0.0), (0.0, -0.5, 0.0), (0.0, 0.0, math.nan)])
    def test_out_of_range(self, albedo):
        from pathtracer.materials.common import check_albedo

        with pytest.raises(ValueError, match="outside"):
            check_albedo(albedo)

    def test_wrong_length(self):
        from pathtracer.materials.common import check_albedo

        with pytest.raises(ValueError, match="three components"):
            check_albedo((0.5, 0.5))


class TestCheckFuzz:
    @pytest.mark.parametrize("fuzz", [0.0, 0.7, 1.0, 3.0])
    def test_accepted(self, fuzz):
        from pathtracer.materials.common import check_fuzz

        assert check_fuzz(fuzz) == fuzz

    @pytest.mark.parametrize("fuzz", [-1e-9, math.inf, -math.inf, math.nan])
    def test_rejected(self, fuzz):
        from pathtracer.materials.common import check_fuzz

        with pytest.raises(ValueError, match="Fuzz"):
            check_fuzz(fuzz)
