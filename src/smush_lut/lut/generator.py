# SPDX-FileCopyrightText: 2025 Fuse Technical Group
#
# SPDX-License-Identifier: BSD-3-Clause

"""Identity and neutral LUT generation."""

from __future__ import annotations

import numpy as np

# Neutral grid values of the 16^3 color grading LUT shipped with the game.
NEUTRAL_GRADIENT = (
    0, 15, 30, 46, 64, 82, 101, 121, 140, 158, 176, 193, 209, 224, 240, 255,
)  # fmt: skip


class LUTGenerator:
    """Generate RGBA LUT volumes indexed as ``[z, y, x, channel]``."""

    def __init__(self, size: int = 16) -> None:
        """Initialize LUT generator.

        Args:
            size: Size of the LUT cube (default: 16 for 16x16x16)
        """
        if size < 2:
            raise ValueError("LUT size must be at least 2")
        self.size = size
        self._identity_lut: np.ndarray | None = None

    @property
    def identity_lut(self) -> np.ndarray:
        """Get or create identity LUT.

        Returns:
            Identity LUT as float32 array with shape (size, size, size, 4)
        """
        if self._identity_lut is None:
            self._identity_lut = self._generate_identity_lut()
        return self._identity_lut

    def _generate_identity_lut(self) -> np.ndarray:
        """Generate identity LUT where output equals input.

        Returns:
            Identity LUT as float32 array with shape (size, size, size, 4)
        """
        coords = np.linspace(0.0, 1.0, self.size, dtype=np.float32)

        # X varies fastest, so index the grid as [z, y, x]
        b_grid, g_grid, r_grid = np.meshgrid(coords, coords, coords, indexing="ij")
        alpha = np.ones_like(r_grid)

        lut = np.stack([r_grid, g_grid, b_grid, alpha], axis=-1)
        lut.flags.writeable = False
        return lut

    def neutral_lut(self) -> np.ndarray:
        """Generate the game's neutral 16x16x16 LUT.

        Returns:
            uint8 array with shape (16, 16, 16, 4) and opaque alpha

        Raises:
            ValueError: If the generator size is not 16
        """
        if self.size != len(NEUTRAL_GRADIENT):
            raise ValueError(
                f"Neutral LUT is only defined for size {len(NEUTRAL_GRADIENT)}, got {self.size}"
            )

        gradient = np.array(NEUTRAL_GRADIENT, dtype=np.uint8)
        b_grid, g_grid, r_grid = np.meshgrid(gradient, gradient, gradient, indexing="ij")
        alpha = np.full_like(r_grid, 255)

        return np.stack([r_grid, g_grid, b_grid, alpha], axis=-1)
