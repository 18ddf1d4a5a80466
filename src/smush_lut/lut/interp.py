# SPDX-FileCopyrightText: 2025 Fuse Technical Group
#
# SPDX-License-Identifier: BSD-3-Clause

"""Linear, bilinear and trilinear interpolation.

All functions accept Python floats or numpy arrays and broadcast like numpy.
Corner values are addressed with a binary index where bit 0 selects X, bit 1
selects Y and bit 2 selects Z. Degenerate bounds (``x0 == x1``) produce
NaN/Inf instead of raising.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

ArrayLike = Any


def linear(x: ArrayLike, x0: ArrayLike, x1: ArrayLike, f0: ArrayLike, f1: ArrayLike) -> Any:
    """Interpolate between ``f0`` at ``x0`` and ``f1`` at ``x1``.

    Values of ``x`` outside ``[x0, x1]`` are extrapolated.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        factor = np.true_divide(np.subtract(x, x0), np.subtract(x1, x0))
        return (1.0 - factor) * f0 + factor * f1


def bilinear(
    xy: tuple[ArrayLike, ArrayLike],
    x0: ArrayLike,
    x1: ArrayLike,
    y0: ArrayLike,
    y1: ArrayLike,
    fxy: Sequence[ArrayLike],
) -> Any:
    """Interpolate a quad given its 4 corner values ``fxy[0b yx]``."""
    x, y = xy

    r1 = linear(x, x0, x1, fxy[0b00], fxy[0b01])
    r2 = linear(x, x0, x1, fxy[0b10], fxy[0b11])

    return linear(y, y0, y1, r1, r2)


def trilinear(
    xyz: tuple[ArrayLike, ArrayLike, ArrayLike],
    x0: ArrayLike,
    x1: ArrayLike,
    y0: ArrayLike,
    y1: ArrayLike,
    z0: ArrayLike,
    z1: ArrayLike,
    fxyz: Sequence[ArrayLike],
) -> Any:
    """Interpolate a cuboid given its 8 corner values ``fxyz[0b zyx]``."""
    x, y, z = xyz

    # Two XY faces, then Z
    face0 = bilinear((x, y), x0, x1, y0, y1, fxyz[0b000:0b100])
    face1 = bilinear((x, y), x0, x1, y0, y1, fxyz[0b100:0b1000])

    return linear(z, z0, z1, face0, face1)
