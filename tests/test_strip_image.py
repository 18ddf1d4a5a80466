# SPDX-FileCopyrightText: 2025 Fuse Technical Group
#
# SPDX-License-Identifier: BSD-3-Clause

"""Tests for strip image converter."""

import numpy as np
import pytest
from PIL import Image

from smush_lut.errors import InvalidDimensionsError
from smush_lut.lut.strip_image import StripImageConverter


class TestStripImageConverter:
    """Test cases for StripImageConverter class."""

    def test_init_default_size(self) -> None:
        """Test default initialization."""
        converter = StripImageConverter()
        assert converter.lut_size == 16
        assert converter.strip_width == 256
        assert converter.strip_height == 16

    def test_init_invalid_size(self) -> None:
        """Test initialization with invalid size."""
        with pytest.raises(ValueError, match="LUT size must be at least 2"):
            StripImageConverter(1)

    def test_lut_to_strip_shape(self) -> None:
        """Test LUT to strip conversion shape."""
        converter = StripImageConverter(5)
        lut = np.random.rand(5, 5, 5, 4).astype(np.float32)
        strip = converter.lut_to_strip(lut)

        assert strip.shape == (5, 25, 4)
        assert strip.dtype == np.float32

    def test_lut_to_strip_layout(self) -> None:
        """Test pixel (x + z * size, y) holds sample (x, y, z)."""
        converter = StripImageConverter(4)
        lut = np.arange(4 * 4 * 4 * 4, dtype=np.uint8).reshape(4, 4, 4, 4)
        strip = converter.lut_to_strip(lut)

        for x, y, z in [(0, 0, 0), (3, 0, 0), (1, 2, 3), (3, 3, 3)]:
            assert np.array_equal(strip[y, x + z * 4], lut[z, y, x])

    def test_lut_to_strip_invalid_dimensions(self) -> None:
        """Test LUT to strip conversion with invalid dimensions."""
        converter = StripImageConverter(5)
        with pytest.raises(ValueError, match="LUT must be 4D array"):
            converter.lut_to_strip(np.zeros((5, 5, 4)))

    def test_lut_to_strip_invalid_shape(self) -> None:
        """Test LUT to strip conversion with invalid shape."""
        converter = StripImageConverter(5)
        with pytest.raises(ValueError, match="LUT must have spatial shape"):
            converter.lut_to_strip(np.zeros((4, 5, 5, 4)))

    def test_lut_to_strip_invalid_channels(self) -> None:
        """Test LUT to strip conversion with invalid channel count."""
        converter = StripImageConverter(5)
        with pytest.raises(ValueError, match="LUT must have 4 channels \\(RGBA\\), got 3"):
            converter.lut_to_strip(np.zeros((5, 5, 5, 3)))

    def test_round_trip(self) -> None:
        """Test strip conversion preserves every sample."""
        converter = StripImageConverter(8)
        lut = np.random.default_rng(0).integers(0, 256, (8, 8, 8, 4), dtype=np.uint8)

        assert np.array_equal(converter.strip_to_lut(converter.lut_to_strip(lut)), lut)

    def test_strip_to_lut_invalid_shape(self) -> None:
        """Test strips of the wrong shape are rejected."""
        converter = StripImageConverter(4)
        with pytest.raises(InvalidDimensionsError, match="Strip image must have shape"):
            converter.strip_to_lut(np.zeros((4, 15, 4), dtype=np.uint8))

    def test_raster_to_array(self) -> None:
        """Test reading an RGBA image."""
        image = Image.new("RGBA", (16, 4), (10, 20, 30, 40))
        pixels = StripImageConverter.raster_to_array(image)

        assert pixels.shape == (4, 16, 4)
        assert pixels.dtype == np.uint8
        assert pixels[3, 15].tolist() == [10, 20, 30, 40]

    def test_raster_to_array_converts_rgb(self) -> None:
        """Test RGB images get opaque alpha."""
        image = Image.new("RGB", (16, 4), (10, 20, 30))
        pixels = StripImageConverter.raster_to_array(image)

        assert pixels[0, 0].tolist() == [10, 20, 30, 255]

    @pytest.mark.parametrize("width, height", [(128, 32), (256, 15), (17, 4)])
    def test_raster_to_array_invalid_dimensions(self, width: int, height: int) -> None:
        """Test images whose width is not their height squared."""
        image = Image.new("RGBA", (width, height))
        with pytest.raises(InvalidDimensionsError, match="width must be height\\^2"):
            StripImageConverter.raster_to_array(image)

    def test_array_to_image(self) -> None:
        """Test creating a Pillow image from a strip."""
        strip = np.zeros((4, 16, 4), dtype=np.uint8)
        strip[1, 2] = [1, 2, 3, 4]
        image = StripImageConverter.array_to_image(strip)

        assert image.mode == "RGBA"
        assert image.size == (16, 4)
        assert image.getpixel((2, 1)) == (1, 2, 3, 4)

    def test_array_to_image_rejects_float(self) -> None:
        """Test only 8-bit strips can become images."""
        with pytest.raises(ValueError, match="Expected uint8 array"):
            StripImageConverter.array_to_image(np.zeros((4, 16, 4), dtype=np.float32))
