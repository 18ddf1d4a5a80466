# SPDX-FileCopyrightText: 2025 Fuse Technical Group
#
# SPDX-License-Identifier: BSD-3-Clause

"""Swizzling between linear and tiled 3D texture layouts.

The tiled layout interleaves the bits of the X, Y and Z coordinates inside a
texture address. Each axis owns a bit mask and its offset is advanced with
``(offset - mask) & mask``, which increments only the bits under the mask and
carries across the gaps between them. For a 16x16x16 RGBA8 volume the first
row of the base layer therefore lands on addresses
0, 4, 8, 12, 32, 36, 40, 44, 256, 260, 264, 268, 288, 292, 296, 300.

Every 4096 bytes of a swizzled 16^3 LUT is one quadrant of the RGB volume:
the low/high halves of G select 0-8191/8192-16383 and the low/high halves of
B select the 4096 byte halves inside those.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import numpy as np

logger = logging.getLogger(__name__)

BYTES_PER_PIXEL = 4
LUT_SIZE = 16

# Address bit order of a GOB (64 bytes x 8 rows) in the block linear layout.
# The first two X bits address the byte inside an RGBA8 sample.
_GOB_BIT_ORDER = "xxxxyxyyx"


@dataclass(frozen=True)
class SwizzleLayout:
    """Per-axis address masks for a cubic RGBA8 volume."""

    size: int
    x_mask: int
    y_mask: int
    z_mask: int

    @property
    def byte_size(self) -> int:
        """Number of bytes in a volume with this layout."""
        return self.size**3 * BYTES_PER_PIXEL

    @classmethod
    def for_size(cls, size: int) -> SwizzleLayout:
        """Derive the masks for a ``size``^3 volume.

        Args:
            size: Edge length of the cube, a power of two >= 2

        Returns:
            Layout whose masks cover ``size^3 * 4`` bytes without gaps

        Raises:
            ValueError: If size is not a power of two >= 2
        """
        if size < 2 or size & (size - 1):
            raise ValueError(f"Swizzle size must be a power of two >= 2, got {size}")
        return _layout_for_size(size)

    def tiled_offsets(self) -> np.ndarray:
        """Get the tiled byte offset of every sample in linear order.

        Returns:
            Array of shape (size^3,) indexed by ``(z * size + y) * size + x``
        """
        return _tiled_offsets(self)


@lru_cache(maxsize=None)
def _layout_for_size(size: int) -> SwizzleLayout:
    axis_bits = size.bit_length() - 1
    remaining = {
        "x": axis_bits + BYTES_PER_PIXEL.bit_length() - 1,
        "y": axis_bits,
        "z": axis_bits,
    }
    order = _GOB_BIT_ORDER + "z" * axis_bits + "y" * axis_bits + "x" * axis_bits

    masks = {"x": 0, "y": 0, "z": 0}
    address_bit = 0
    for axis in order:
        if remaining[axis] == 0:
            continue
        masks[axis] |= 1 << address_bit
        remaining[axis] -= 1
        address_bit += 1

    # Byte-in-sample bits are not part of the per-sample X increment.
    x_mask = masks["x"] & ~(BYTES_PER_PIXEL - 1)
    layout = SwizzleLayout(size, x_mask, masks["y"], masks["z"])
    logger.debug(
        f"Swizzle masks for {size}^3: x={x_mask:#06x} y={masks['y']:#06x} z={masks['z']:#06x}"
    )
    return layout


@lru_cache(maxsize=None)
def _tiled_offsets(layout: SwizzleLayout) -> np.ndarray:
    offsets = np.empty(layout.size**3, dtype=np.intp)

    index = 0
    offset_z = 0
    for _ in range(layout.size):
        offset_y = 0
        for _ in range(layout.size):
            offset_x = 0
            for _ in range(layout.size):
                # The masks don't overlap, so the offsets can be summed.
                offsets[index] = offset_x + offset_y + offset_z
                index += 1
                offset_x = (offset_x - layout.x_mask) & layout.x_mask
            offset_y = (offset_y - layout.y_mask) & layout.y_mask
        offset_z = (offset_z - layout.z_mask) & layout.z_mask

    offsets.flags.writeable = False
    return offsets


# Masks of the color grading LUT texture.
DEFAULT_LAYOUT = SwizzleLayout.for_size(LUT_SIZE)


def _as_bytes(buffer: Any) -> np.ndarray:
    if isinstance(buffer, np.ndarray):
        return buffer.reshape(-1).view(np.uint8)
    return np.frombuffer(buffer, dtype=np.uint8)


def swizzle(
    source: Any,
    destination: Any,
    deswizzle: bool = False,
    layout: SwizzleLayout = DEFAULT_LAYOUT,
) -> None:
    """Copy RGBA samples between linear and tiled addressing.

    Args:
        source: Buffer of ``layout.byte_size`` bytes to read from
        destination: Writable buffer of the same size to fill
        deswizzle: Read tiled and write linear if True, the reverse if False
        layout: Address masks to use (default: 16^3 color grading LUT)

    Raises:
        ValueError: If either buffer has the wrong size or destination is read-only
            or not contiguous
    """
    if isinstance(destination, np.ndarray) and not destination.flags.c_contiguous:
        raise ValueError("Destination array must be C-contiguous")

    src = _as_bytes(source)
    dst = _as_bytes(destination)

    for name, buffer in (("Source", src), ("Destination", dst)):
        if buffer.size != layout.byte_size:
            raise ValueError(
                f"{name} buffer must be {layout.byte_size} bytes, got {buffer.size}"
            )
    if not dst.flags.writeable:
        raise ValueError("Destination buffer is read-only")

    src = src.reshape(-1, BYTES_PER_PIXEL)
    dst = dst.reshape(-1, BYTES_PER_PIXEL)

    tiled = layout.tiled_offsets() // BYTES_PER_PIXEL
    if deswizzle:
        dst[:] = src[tiled]
    else:
        dst[tiled] = src


def swizzle_bytes(data: bytes, size: int = LUT_SIZE) -> bytes:
    """Return a tiled copy of linear RGBA8 ``data``."""
    destination = bytearray(len(data))
    swizzle(data, destination, deswizzle=False, layout=SwizzleLayout.for_size(size))
    return bytes(destination)


def deswizzle_bytes(data: bytes, size: int = LUT_SIZE) -> bytes:
    """Return a linear copy of tiled RGBA8 ``data``."""
    destination = bytearray(len(data))
    swizzle(data, destination, deswizzle=True, layout=SwizzleLayout.for_size(size))
    return bytes(destination)
