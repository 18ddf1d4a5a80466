# SPDX-FileCopyrightText: 2025 Fuse Technical Group
#
# SPDX-License-Identifier: BSD-3-Clause

"""3D RGBA LUTs in linear and swizzled memory layouts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Any

import numpy as np
from PIL import Image

from ..cube import CubeLut3d
from .generator import LUTGenerator
from .interp import trilinear
from .strip_image import RgbaRaster, StripImageConverter
from .swizzle import SwizzleLayout, swizzle

logger = logging.getLogger(__name__)

CHANNELS = 4
SUPPORTED_DTYPES = (np.dtype(np.uint8), np.dtype(np.float32))


def _to_rgba8(values: np.ndarray) -> np.ndarray:
    return np.rint(np.clip(values * 255.0, 0.0, 255.0)).astype(np.uint8)


@dataclass(frozen=True, eq=False)
class Lut3dLinear:
    """A 3D LUT with unswizzled data in row major order.

    Samples are stored with X varying fastest, then Y, then Z. ``data`` is a
    flat read-only array of ``size^3 * 4`` values, either uint8 (0-255) or
    float32 (0.0-1.0).
    """

    size: int
    data: np.ndarray

    def __post_init__(self) -> None:
        if self.size < 2:
            raise ValueError("LUT size must be at least 2")

        data = np.array(self.data).reshape(-1)
        if data.dtype not in SUPPORTED_DTYPES:
            raise ValueError(f"Unsupported LUT data type: {data.dtype}")

        expected = self.size**3 * CHANNELS
        if data.size != expected:
            raise ValueError(
                f"LUT data must have {expected} values for size {self.size}, got {data.size}"
            )

        data.flags.writeable = False
        object.__setattr__(self, "data", data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Lut3dLinear):
            return NotImplemented
        return (
            self.size == other.size
            and self.data.dtype == other.data.dtype
            and np.array_equal(self.data, other.data)
        )

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def from_rgba(cls, size: int, data: Any) -> Lut3dLinear:
        """Create a LUT from 8-bit RGBA bytes in linear order."""
        if isinstance(data, (bytes, bytearray, memoryview)):
            data = np.frombuffer(data, dtype=np.uint8)
        return cls(size, np.asarray(data, dtype=np.uint8))

    @classmethod
    def from_float(cls, size: int, data: Any) -> Lut3dLinear:
        """Create a LUT from normalized float RGBA values in linear order."""
        return cls(size, np.asarray(data, dtype=np.float32))

    @classmethod
    def empty_rgba(cls, size: int) -> Lut3dLinear:
        """Create a float LUT with every channel set to 0.0."""
        return cls(size, np.zeros(size**3 * CHANNELS, dtype=np.float32))

    @classmethod
    def identity(cls, size: int = 16) -> Lut3dLinear:
        """Create a float LUT that maps every color to itself."""
        return cls(size, LUTGenerator(size).identity_lut)

    @classmethod
    def neutral(cls) -> Lut3dLinear:
        """Create the game's default 16x16x16 stage LUT."""
        return cls(16, LUTGenerator(16).neutral_lut())

    @property
    def is_float(self) -> bool:
        """Check if samples are stored as normalized floats."""
        return self.data.dtype == np.float32

    @property
    def volume(self) -> np.ndarray:
        """View of the data with shape (size, size, size, 4) indexed [z, y, x]."""
        return self.data.reshape(self.size, self.size, self.size, CHANNELS)

    @cached_property
    def _float_volume(self) -> np.ndarray:
        if self.is_float:
            return self.volume
        return self.volume.astype(np.float32) / np.float32(255.0)

    def as_float(self) -> Lut3dLinear:
        """Get this LUT with float32 samples in the range 0.0-1.0."""
        if self.is_float:
            return self
        return Lut3dLinear(self.size, self._float_volume)

    def as_rgba8(self) -> Lut3dLinear:
        """Get this LUT with 8-bit samples, rounding and clamping floats."""
        if not self.is_float:
            return self
        return Lut3dLinear(self.size, _to_rgba8(self.data))

    def to_bytes(self) -> bytes:
        """Raw RGBA bytes: 8-bit samples, or little endian float32 samples."""
        if self.is_float:
            return self.data.astype("<f4").tobytes()
        return self.data.tobytes()

    def rgba(self, x: int, y: int, z: int) -> np.ndarray:
        """Get the normalized RGBA value stored at a grid point."""
        return self._float_volume[z, y, x].copy()

    def sample_rgba_trilinear(
        self, x: Any, y: Any, z: Any, extrapolate: bool = False
    ) -> np.ndarray:
        """Sample the LUT with trilinear interpolation.

        Coordinates are in the unit interval and may be scalars or arrays of
        the same shape. Each coordinate is scaled by ``size - 1`` and
        interpolated inside the grid cell whose lower corner is
        ``clamp(floor(u), 0, size - 2)``, so points on grid lines return the
        stored value exactly.

        Args:
            x: Red (X) coordinate(s)
            y: Green (Y) coordinate(s)
            z: Blue (Z) coordinate(s)
            extrapolate: Extend the edge cells linearly for coordinates outside
                [0, 1] instead of clamping to the edge

        Returns:
            float32 RGBA values with shape ``coordinate_shape + (4,)``
        """
        coords = [np.asarray(c, dtype=np.float32) for c in (x, y, z)]
        if not extrapolate:
            coords = [np.clip(c, 0.0, 1.0) for c in coords]

        grid = [c * np.float32(self.size - 1) for c in coords]
        # NaN coordinates pick cell 0; the NaN itself propagates through ``grid``.
        lower = [
            np.clip(np.nan_to_num(np.floor(g), nan=0.0), 0, self.size - 2).astype(np.intp)
            for g in grid
        ]
        upper = [i + 1 for i in lower]

        volume = self._float_volume
        corners = []
        for index in range(8):
            xi = upper[0] if index & 0b001 else lower[0]
            yi = upper[1] if index & 0b010 else lower[1]
            zi = upper[2] if index & 0b100 else lower[2]
            corners.append(volume[zi, yi, xi])

        # Broadcast the scalar cell bounds over the 4 channels
        point = tuple(g[..., np.newaxis] for g in grid)
        bounds = []
        for i0, i1 in zip(lower, upper):
            bounds.append(i0[..., np.newaxis].astype(np.float32))
            bounds.append(i1[..., np.newaxis].astype(np.float32))

        result = trilinear(point, *bounds, corners)
        return np.asarray(result, dtype=np.float32)

    @classmethod
    def from_image(cls, image: RgbaRaster) -> Lut3dLinear:
        """Create a LUT from a strip image of Z slices.

        Raises:
            InvalidDimensionsError: If the image width is not its height squared
        """
        strip = StripImageConverter.raster_to_array(image)
        size = strip.shape[0]
        lut = StripImageConverter(size).strip_to_lut(strip)
        logger.debug(f"Read {size}x{size}x{size} LUT from {strip.shape[1]}x{size} image")
        return cls.from_rgba(size, lut)

    def to_image(self) -> Image.Image:
        """Create a strip image with 8-bit samples."""
        strip = StripImageConverter(self.size).lut_to_strip(self.as_rgba8().volume)
        return StripImageConverter.array_to_image(strip)

    @classmethod
    def from_cube(cls, cube: CubeLut3d) -> Lut3dLinear:
        """Create an 8-bit LUT from CUBE data with opaque alpha."""
        rgba = np.full((cube.size**3, CHANNELS), 255, dtype=np.uint8)
        rgba[:, :3] = _to_rgba8(cube.data)
        return cls.from_rgba(cube.size, rgba)

    def to_cube(self, title: str = "") -> CubeLut3d:
        """Create CUBE data from the RGB channels."""
        rgb = self._float_volume.reshape(-1, CHANNELS)[:, :3]
        return CubeLut3d(title, self.size, rgb)

    def to_swizzled(self) -> Lut3dSwizzled:
        """Swizzle the 8-bit samples into the tiled texture layout."""
        return Lut3dSwizzled.from_linear(self)


@dataclass(frozen=True, eq=False)
class Lut3dSwizzled:
    """A 3D LUT with 8-bit RGBA samples in swizzled texture order."""

    size: int
    data: bytes

    def __post_init__(self) -> None:
        expected = SwizzleLayout.for_size(self.size).byte_size
        if len(self.data) != expected:
            raise ValueError(
                f"Swizzled data must be {expected} bytes for size {self.size}, got {len(self.data)}"
            )
        object.__setattr__(self, "data", bytes(self.data))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Lut3dSwizzled):
            return NotImplemented
        return self.size == other.size and self.data == other.data

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def from_linear(cls, lut: Lut3dLinear) -> Lut3dSwizzled:
        """Swizzle a linear LUT, converting float samples to 8-bit first."""
        layout = SwizzleLayout.for_size(lut.size)
        data = bytearray(layout.byte_size)
        swizzle(lut.as_rgba8().data, data, deswizzle=False, layout=layout)
        return cls(lut.size, bytes(data))

    def to_linear(self) -> Lut3dLinear:
        """Deswizzle into a linear LUT of identical size."""
        layout = SwizzleLayout.for_size(self.size)
        data = bytearray(layout.byte_size)
        swizzle(self.data, data, deswizzle=True, layout=layout)
        return Lut3dLinear.from_rgba(self.size, data)
