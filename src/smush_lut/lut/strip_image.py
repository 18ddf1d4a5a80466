# SPDX-FileCopyrightText: 2025 Fuse Technical Group
#
# SPDX-License-Identifier: BSD-3-Clause

"""Convert between 3D LUT volumes and 2D strip images."""

from __future__ import annotations

import logging
from typing import Protocol

import numpy as np
from PIL import Image

from ..errors import InvalidDimensionsError

logger = logging.getLogger(__name__)


class RgbaRaster(Protocol):
    """An image with a size and row-major pixel bytes.

    ``PIL.Image.Image`` satisfies this protocol.
    """

    mode: str

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def tobytes(self) -> bytes: ...


class StripImageConverter:
    """Convert 3D LUTs to and from a strip of Z slices laid out left to right."""

    def __init__(self, lut_size: int = 16) -> None:
        """Initialize strip converter.

        Args:
            lut_size: Size of the 3D LUT cube (default: 16)
        """
        if lut_size < 2:
            raise ValueError("LUT size must be at least 2")
        self.lut_size = lut_size
        self.strip_width = lut_size * lut_size
        self.strip_height = lut_size

    def lut_to_strip(self, lut: np.ndarray) -> np.ndarray:
        """Convert 3D LUT to 2D strip image format.

        For a 16x16x16 LUT, creates a 256x16 pixel image where:
        - Width = 16 * 16 = 256 pixels (16 slices of 16 pixels each)
        - Height = 16 pixels
        - Each slice represents a different blue (Z) value

        Args:
            lut: 3D LUT array with shape (size, size, size, 4) indexed [z, y, x]

        Returns:
            2D strip image array with shape (height, width, 4)
        """
        self._validate_lut(lut)

        strip = np.zeros((self.strip_height, self.strip_width, 4), dtype=lut.dtype)

        # Pixel (x + z * size, y) holds LUT sample (x, y, z)
        for z in range(self.lut_size):
            start_x = z * self.lut_size
            end_x = start_x + self.lut_size
            strip[:, start_x:end_x, :] = lut[z]

        return strip

    def strip_to_lut(self, strip: np.ndarray) -> np.ndarray:
        """Convert 2D strip image back to a 3D LUT.

        Args:
            strip: Strip image array with shape (size, size * size, 4)

        Returns:
            3D LUT array with shape (size, size, size, 4) indexed [z, y, x]
        """
        expected = (self.strip_height, self.strip_width, 4)
        if strip.shape != expected:
            raise InvalidDimensionsError(
                f"Strip image must have shape {expected}, got {strip.shape}"
            )

        lut = np.empty((self.lut_size,) * 3 + (4,), dtype=strip.dtype)
        for z in range(self.lut_size):
            start_x = z * self.lut_size
            lut[z] = strip[:, start_x : start_x + self.lut_size, :]

        return lut

    def _validate_lut(self, lut: np.ndarray) -> None:
        if len(lut.shape) != 4:
            raise ValueError(f"LUT must be 4D array, got shape {lut.shape}")

        if lut.shape[:3] != (self.lut_size, self.lut_size, self.lut_size):
            raise ValueError(
                f"LUT must have spatial shape ({self.lut_size}, {self.lut_size}, {self.lut_size}), "
                f"got {lut.shape[:3]}"
            )

        channels = lut.shape[3]
        if channels != 4:
            raise ValueError(f"LUT must have 4 channels (RGBA), got {channels}")

    @staticmethod
    def raster_to_array(raster: RgbaRaster) -> np.ndarray:
        """Read an RGBA raster into a (height, width, 4) uint8 array.

        Args:
            raster: Strip image whose width is the square of its height

        Returns:
            uint8 pixel array

        Raises:
            InvalidDimensionsError: If width != height^2
        """
        width, height = raster.width, raster.height
        if width != height * height:
            raise InvalidDimensionsError(
                f"Invalid LUT image dimensions {width}x{height}: width must be height^2"
            )

        if raster.mode != "RGBA":
            if not isinstance(raster, Image.Image):
                raise ValueError(f"Unsupported raster mode: {raster.mode}")
            logger.debug(f"Converting {raster.mode} image to RGBA")
            raster = raster.convert("RGBA")

        pixels = np.frombuffer(raster.tobytes(), dtype=np.uint8)
        return pixels.reshape(height, width, 4)

    @staticmethod
    def array_to_image(strip: np.ndarray) -> Image.Image:
        """Create a Pillow RGBA image from a (height, width, 4) uint8 array."""
        if strip.dtype != np.uint8 or strip.ndim != 3 or strip.shape[2] != 4:
            raise ValueError(
                f"Expected uint8 array with shape (height, width, 4), got {strip.dtype} {strip.shape}"
            )
        height, width = strip.shape[:2]
        return Image.frombytes("RGBA", (width, height), np.ascontiguousarray(strip).tobytes())
