# SPDX-FileCopyrightText: 2025 Fuse Technical Group
#
# SPDX-License-Identifier: BSD-3-Clause

"""Read and write color grading LUTs in nutexb texture containers.

A color grading LUT nutexb is the swizzled RGBA8 payload followed by a mipmap
size table and a fixed size footer. The dimensions and format never change, so
only the payload is read back; the footer is parsed on demand.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from pathlib import Path

from .errors import NutexbError
from .lut.lut3d import Lut3dLinear, Lut3dSwizzled
from .lut.swizzle import LUT_SIZE, SwizzleLayout

logger = logging.getLogger(__name__)

LUT_FILE_NAME = "color_grading_lut.nutexb"

MIPMAP_TABLE_ENTRIES = 16
NAME_LENGTH = 0x40
FOOTER_MAGIC = b" XNT"
FOOTER_VERSION_MAGIC = b" XET"

# magic, name, width, height, depth, format, unk, padding, unk,
# mipmap count, alignment, layer count, data size, magic, major, minor
_FOOTER_STRUCT = struct.Struct(f"<4s{NAME_LENGTH}s3IBBHI4I4s2H")
_MIPMAP_STRUCT = struct.Struct(f"<{MIPMAP_TABLE_ENTRIES}I")


@dataclass(frozen=True)
class NutexbFooter:
    """Trailing metadata of a nutexb texture."""

    name: str = "color_grading_lut"
    width: int = LUT_SIZE
    height: int = LUT_SIZE
    depth: int = LUT_SIZE
    image_format: int = 0x00  # R8G8B8A8 unorm
    unk2: int = 4
    unk3: int = 0
    mipmap_count: int = 1
    alignment: int = 0x1000
    layer_count: int = 1
    data_size: int = LUT_SIZE**3 * 4
    version: tuple[int, int] = (1, 2)

    SIZE = _MIPMAP_STRUCT.size + _FOOTER_STRUCT.size

    def to_bytes(self) -> bytes:
        """Pack the mipmap size table and footer."""
        mipmaps = [self.data_size] + [0] * (MIPMAP_TABLE_ENTRIES - 1)
        return _MIPMAP_STRUCT.pack(*mipmaps) + _FOOTER_STRUCT.pack(
            FOOTER_MAGIC,
            self.name.encode("ascii"),
            self.width,
            self.height,
            self.depth,
            self.image_format,
            self.unk2,
            0,
            self.unk3,
            self.mipmap_count,
            self.alignment,
            self.layer_count,
            self.data_size,
            FOOTER_VERSION_MAGIC,
            *self.version,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> NutexbFooter:
        """Parse the trailing mipmap table and footer of a nutexb file.

        Raises:
            NutexbError: If the data is too short or a magic does not match
        """
        if len(data) < cls.SIZE:
            raise NutexbError(
                f"nutexb footer must be {cls.SIZE} bytes, got {len(data)}"
            )

        fields = _FOOTER_STRUCT.unpack(data[-_FOOTER_STRUCT.size :])
        (
            magic,
            name,
            width,
            height,
            depth,
            image_format,
            unk2,
            _,
            unk3,
            mipmap_count,
            alignment,
            layer_count,
            data_size,
            version_magic,
            major,
            minor,
        ) = fields
        if magic != FOOTER_MAGIC or version_magic != FOOTER_VERSION_MAGIC:
            raise NutexbError(f"Invalid nutexb footer magic: {magic!r} {version_magic!r}")

        return cls(
            name=name.rstrip(b"\0").decode("ascii", errors="replace"),
            width=width,
            height=height,
            depth=depth,
            image_format=image_format,
            unk2=unk2,
            unk3=unk3,
            mipmap_count=mipmap_count,
            alignment=alignment,
            layer_count=layer_count,
            data_size=data_size,
            version=(major, minor),
        )


def write_nutexb(lut: Lut3dLinear, path: str | Path, footer: NutexbFooter | None = None) -> None:
    """Swizzle a LUT and write it with a nutexb footer.

    Args:
        lut: LUT to write; float samples are converted to 8-bit
        path: Output file path
        footer: Footer to append (default: color grading LUT footer for the LUT size)
    """
    swizzled = lut.to_swizzled()
    if footer is None:
        footer = NutexbFooter(
            width=lut.size,
            height=lut.size,
            depth=lut.size,
            data_size=len(swizzled.data),
        )

    with open(path, "wb") as f:
        f.write(swizzled.data)
        f.write(footer.to_bytes())
    logger.info(f"Wrote {lut.size}x{lut.size}x{lut.size} nutexb LUT to {path}")


def read_nutexb(path: str | Path, size: int = LUT_SIZE) -> Lut3dLinear:
    """Read the color grading LUT data from a nutexb file.

    Args:
        path: nutexb file path
        size: Edge length of the LUT cube (default: 16)

    Returns:
        Deswizzled 8-bit LUT

    Raises:
        NutexbError: If the file is shorter than the LUT payload
    """
    payload_size = SwizzleLayout.for_size(size).byte_size
    data = Path(path).read_bytes()
    if len(data) < payload_size:
        raise NutexbError(
            f"{path} is too small for a {size}x{size}x{size} LUT: "
            f"expected at least {payload_size} bytes, got {len(data)}"
        )

    logger.debug(f"Read {len(data)} byte nutexb from {path}")
    return Lut3dSwizzled(size, data[:payload_size]).to_linear()


def read_nutexb_footer(path: str | Path) -> NutexbFooter:
    """Read the footer of a nutexb file."""
    return NutexbFooter.from_bytes(Path(path).read_bytes())
