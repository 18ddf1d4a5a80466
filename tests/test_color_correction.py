# SPDX-FileCopyrightText: 2025 Fuse Technical Group
#
# SPDX-License-Identifier: BSD-3-Clause

"""Tests for stage LUT color correction."""

import numpy as np
import pytest

from smush_lut.color_correction import (
    DEFAULT_PROFILE,
    ColorPipelineProfile,
    correct_lut,
    headroom,
    headroom_inv,
    linear_to_srgb,
    srgb_to_linear,
    unbake,
    unbake_inv,
)
from smush_lut.lut.lut3d import Lut3dLinear


class TestTransferFunctions:
    """Test cases for the pipeline's transfer functions."""

    def test_srgb_round_trip(self) -> None:
        """Test sRGB encoding and decoding are inverse."""
        values = np.linspace(0.0, 1.0, 256, dtype=np.float32)

        assert np.allclose(linear_to_srgb(srgb_to_linear(values)), values, atol=1e-4)
        assert np.allclose(srgb_to_linear(linear_to_srgb(values)), values, atol=1e-4)

    def test_srgb_known_values(self) -> None:
        """Test sRGB values on both sides of the linear segment."""
        assert linear_to_srgb(0.0) == pytest.approx(0.0)
        assert linear_to_srgb(1.0) == pytest.approx(1.0, abs=1e-6)
        assert linear_to_srgb(0.001) == pytest.approx(0.01292, abs=1e-6)
        assert srgb_to_linear(0.5) == pytest.approx(0.21404, abs=1e-5)

    def test_srgb_above_one(self) -> None:
        """Test the curve continues past 1.0."""
        assert linear_to_srgb(2.0) > 1.0
        assert srgb_to_linear(linear_to_srgb(2.0)) == pytest.approx(2.0, abs=1e-4)

    def test_float32_results(self) -> None:
        """Test every function computes in single precision."""
        values = np.array([0.25, 0.5], dtype=np.float64)

        assert headroom(values).dtype == np.float32
        assert headroom_inv(values).dtype == np.float32
        assert unbake(values, values).dtype == np.float32
        assert unbake_inv(values, values).dtype == np.float32
        assert linear_to_srgb(values).dtype == np.float32
        assert srgb_to_linear(values).dtype == np.float32

    def test_headroom(self) -> None:
        """Test the headroom mapping of the unit range."""
        assert headroom(0.0) == pytest.approx(0.03125)
        assert headroom(1.0) == pytest.approx(0.96875)

    def test_headroom_round_trip(self) -> None:
        """Test f_inv undoes f above the bias."""
        values = np.linspace(0.03125, 1.0, 100, dtype=np.float32)

        assert np.allclose(headroom(headroom_inv(values)), values, atol=1e-6)
        assert np.allclose(headroom_inv(headroom(values)), values, atol=1e-6)

    def test_headroom_inv_clamps_at_zero(self) -> None:
        """Test coordinates below the bias map to 0."""
        assert headroom_inv(0.0) == 0.0
        assert headroom_inv(0.01) == 0.0

    def test_unbake_round_trip(self) -> None:
        """Test g_x_inv and g_x undo each other for a fixed input."""
        x = headroom_inv(0.5)
        values = np.linspace(0.0, 1.0, 256, dtype=np.float32)

        assert np.allclose(unbake_inv(unbake(values, x), x), values, atol=1e-4)
        assert np.allclose(unbake(unbake_inv(values, x), x), values, atol=1e-4)

    def test_unbake_of_input_brightens(self) -> None:
        """Test the curve applied to an unchanged value."""
        expected = (0.5 * 1.3703) ** 2.2
        assert unbake(0.5, 0.5) == pytest.approx(expected, rel=1e-5)

    def test_custom_profile(self) -> None:
        """Test profiles change the pipeline constants."""
        profile = ColorPipelineProfile(headroom_scale=1.0, headroom_bias=0.0)

        assert profile.headroom(0.5) == pytest.approx(0.5)
        assert profile.headroom_inv(0.5) == pytest.approx(0.5)
        assert DEFAULT_PROFILE.headroom(0.5) != pytest.approx(0.5)


class TestCorrectLut:
    """Test cases for correct_lut."""

    def test_identity_stage_and_edit(self) -> None:
        """Test identity LUTs correct to the identity LUT."""
        identity = Lut3dLinear.identity(16)
        result = correct_lut(identity, identity)

        assert np.allclose(result.data, identity.data, atol=1e-3)

    def test_result_format(self) -> None:
        """Test the result is a float LUT with opaque alpha."""
        result = correct_lut(Lut3dLinear.identity(8), Lut3dLinear.neutral())

        assert result.size == 8
        assert result.is_float
        assert np.all(result.volume[..., 3] == 1.0)

    def test_accepts_8bit_luts(self) -> None:
        """Test 8-bit edit and stage LUTs."""
        edit = Lut3dLinear.identity(16).as_rgba8()
        result = correct_lut(edit, Lut3dLinear.neutral())

        assert result.size == 16
        assert np.all(np.isfinite(result.data))

    def test_black_edit(self) -> None:
        """Test an all black edit LUT gives a black result."""
        result = correct_lut(Lut3dLinear.empty_rgba(16), Lut3dLinear.identity(16))

        assert np.allclose(result.volume[..., :3], 0.0, atol=1e-3)

    def test_clamped_edit_lookup(self) -> None:
        """Test clamping the edit lookup darkens the brightest corner."""
        identity = Lut3dLinear.identity(16)
        profile = ColorPipelineProfile(extrapolate_edit=False)
        result = correct_lut(identity, identity, profile)

        assert np.all(result.rgba(15, 15, 15)[:3] < 0.9)
        assert np.allclose(result.rgba(0, 0, 0)[:3], 0.0, atol=1e-3)
