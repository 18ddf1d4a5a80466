# SPDX-FileCopyrightText: 2025 Fuse Technical Group
#
# SPDX-License-Identifier: BSD-3-Clause

"""Reading and writing 3D LUTs in the CUBE text format.

Data lines are ``r g b`` triples with red varying fastest, which matches the
X-fastest order of :class:`smush_lut.lut.lut3d.Lut3dLinear`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np

from .errors import CubeParseError

logger = logging.getLogger(__name__)

RGB = tuple[float, float, float]

DEFAULT_DOMAIN_MIN: RGB = (0.0, 0.0, 0.0)
DEFAULT_DOMAIN_MAX: RGB = (1.0, 1.0, 1.0)

KEYWORDS = frozenset({"TITLE", "LUT_3D_SIZE", "DOMAIN_MIN", "DOMAIN_MAX"})


def _format_float(value: Any) -> str:
    # Shortest text that parses back to the same float32
    return np.format_float_positional(np.float32(value), trim="0")


def _format_rgb(values: Any) -> str:
    return " ".join(_format_float(v) for v in values)


@dataclass(frozen=True, eq=False)
class CubeLut3d:
    """A 3D LUT in CUBE form.

    Attributes:
        title: Value of the TITLE keyword, without double quotes or line breaks
        size: Edge length of the LUT cube (>= 2)
        data: float32 array with shape (size^3, 3), red varying fastest
        domain_min: Lower input bound for each channel
        domain_max: Upper input bound for each channel
    """

    title: str
    size: int
    data: np.ndarray
    domain_min: RGB = field(default=DEFAULT_DOMAIN_MIN)
    domain_max: RGB = field(default=DEFAULT_DOMAIN_MAX)

    def __post_init__(self) -> None:
        if self.size < 2:
            raise ValueError("LUT size must be at least 2")
        if any(char in self.title for char in "\"\r\n"):
            raise ValueError(f"CUBE title must not contain quotes or line breaks: {self.title!r}")

        data = np.array(self.data, dtype=np.float32).reshape(-1, 3)
        expected = self.size**3
        if len(data) != expected:
            raise ValueError(
                f"CUBE data must contain {expected} RGB values for size {self.size}, got {len(data)}"
            )
        data.flags.writeable = False
        object.__setattr__(self, "data", data)
        object.__setattr__(self, "domain_min", tuple(float(v) for v in self.domain_min))
        object.__setattr__(self, "domain_max", tuple(float(v) for v in self.domain_max))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CubeLut3d):
            return NotImplemented
        return (
            self.title == other.title
            and self.size == other.size
            and self.domain_min == other.domain_min
            and self.domain_max == other.domain_max
            and np.array_equal(self.data, other.data)
        )

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def from_text(cls, text: str) -> CubeLut3d:
        """Parse CUBE text.

        Args:
            text: Contents of a .cube file

        Returns:
            Parsed CUBE LUT

        Raises:
            CubeParseError: If the text is not a valid 3D CUBE LUT
        """
        title = ""
        size: int | None = None
        domain_min = DEFAULT_DOMAIN_MIN
        domain_max = DEFAULT_DOMAIN_MAX
        data_lines: list[tuple[int, str]] | None = None

        for line_number, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue

            if data_lines is not None:
                data_lines.append((line_number, line))
                continue

            keyword, _, value = line.replace("\t", " ").partition(" ")
            if keyword not in KEYWORDS:
                # The first line that is not a keyword starts the data block.
                data_lines = [(line_number, line)]
            elif keyword == "TITLE":
                title = _parse_title(line, line_number)
            elif keyword == "LUT_3D_SIZE":
                size = _parse_size(value)
            elif keyword == "DOMAIN_MIN":
                domain_min = _parse_rgb(value, line_number, "DOMAIN_MIN")
            else:
                domain_max = _parse_rgb(value, line_number, "DOMAIN_MAX")

        if size is None:
            raise CubeParseError("Missing or invalid LUT_3D_SIZE")
        if not data_lines:
            raise CubeParseError("No LUT data found")

        data = [
            _parse_rgb(line, line_number, "data line") for line_number, line in data_lines
        ]
        expected = size**3
        if len(data) != expected:
            raise CubeParseError(
                f"Expected {expected} data lines for LUT_3D_SIZE {size}, found {len(data)}"
            )

        logger.debug(f"Parsed {size}x{size}x{size} CUBE LUT '{title}'")
        return cls(title, size, np.array(data, dtype=np.float32), domain_min, domain_max)

    @classmethod
    def read(cls, path: str | Path) -> CubeLut3d:
        """Read a .cube file."""
        return cls.from_text(Path(path).read_text(encoding="utf-8"))

    def to_text(self) -> str:
        """Serialize to CUBE text."""
        lines = [
            "# Created by smush-lut",
            f'TITLE "{self.title}"',
            "",
            "# LUT size",
            f"LUT_3D_SIZE {self.size}",
            "",
            "# Data domain",
            f"DOMAIN_MIN {_format_rgb(self.domain_min)}",
            f"DOMAIN_MAX {_format_rgb(self.domain_max)}",
            "",
            "# LUT data points",
        ]
        lines.extend(_format_rgb(rgb) for rgb in self.data)
        return "\n".join(lines) + "\n"

    def write(self, path: str | Path) -> None:
        """Write a .cube file."""
        Path(path).write_text(self.to_text(), encoding="utf-8")
        logger.info(f"Wrote {self.size}x{self.size}x{self.size} CUBE LUT to {path}")


def _parse_title(line: str, line_number: int) -> str:
    start = line.find('"')
    end = line.find('"', start + 1) if start != -1 else -1
    if end == -1:
        raise CubeParseError(
            f"Line {line_number}: TITLE must be enclosed in double quotes: {line!r}"
        )
    return line[start + 1 : end]


def _parse_size(value: str) -> int:
    try:
        size = int(value.strip())
    except ValueError:
        raise CubeParseError(f"Missing or invalid LUT_3D_SIZE: {value.strip()!r}") from None
    if size < 2:
        raise CubeParseError(f"LUT_3D_SIZE must be at least 2, got {size}")
    return size


def _parse_rgb(value: str, line_number: int, name: str) -> RGB:
    parts = value.split()
    try:
        if len(parts) != 3:
            raise ValueError(f"expected 3 values, got {len(parts)}")
        r, g, b = (float(part) for part in parts)
    except ValueError as e:
        raise CubeParseError(f"Line {line_number}: invalid {name} {value!r}: {e}") from e
    return (r, g, b)
