# SPDX-FileCopyrightText: 2025 Fuse Technical Group
#
# SPDX-License-Identifier: BSD-3-Clause

"""Combine an edit LUT with the stage LUT baked into the renderer.

The game applies its stage LUT and then a fixed post processing curve. An
edit LUT graded on a screenshot of the stage therefore can't be nested with
the stage LUT directly. :func:`correct_lut` finds the LUT that, run through
the same pipeline, reproduces the edit LUT's result.

Notation used below:

* ``f(x) = x * headroom_scale + headroom_bias`` maps an sRGB input to the
  coordinate the stage LUT is sampled with.
* ``g(v, x)`` is the post processing curve. It depends on both the LUT output
  ``v`` and the original input ``x``, so it is only invertible once ``x`` is
  fixed. The sweep knows ``x`` for every grid point, which makes ``g_x``
  invertible there.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np

from .lut.lut3d import CHANNELS, Lut3dLinear

logger = logging.getLogger(__name__)

ArrayLike = Any


@dataclass(frozen=True)
class ColorPipelineProfile:
    """Constants of a renderer's color grading pipeline.

    The defaults describe the stage renderer of the game the LUTs are made
    for; they were measured, not derived.
    """

    headroom_scale: float = 0.9375
    headroom_bias: float = 0.03125
    unbake_slope: float = 0.99961
    unbake_scale: float = 1.3703
    gamma: float = 2.2
    srgb_linear_cutoff: float = 0.0031308
    srgb_encoded_cutoff: float = 0.04045
    srgb_linear_slope: float = 12.92
    srgb_scale: float = 1.055
    srgb_offset: float = 0.055
    srgb_gamma: float = 2.4
    # Edit LUT lookups can leave [0, 1] for bright inputs.
    extrapolate_edit: bool = True

    def headroom(self, x: ArrayLike) -> np.ndarray:
        """f: map an sRGB value to its stage LUT coordinate."""
        return _f32(x) * np.float32(self.headroom_scale) + np.float32(self.headroom_bias)

    def headroom_inv(self, fx: ArrayLike) -> np.ndarray:
        """f_inv: recover the sRGB value for a stage LUT coordinate, clamped at 0."""
        x = (_f32(fx) - np.float32(self.headroom_bias)) / np.float32(self.headroom_scale)
        return np.maximum(x, np.float32(0.0))

    def unbake(self, v: ArrayLike, x: ArrayLike) -> np.ndarray:
        """g_x: apply the post processing curve for the input ``x``."""
        v, x = _f32(v), _f32(x)
        base = ((v - x) * np.float32(self.unbake_slope) + x) * np.float32(self.unbake_scale)
        return np.power(np.maximum(base, np.float32(0.0)), np.float32(self.gamma))

    def unbake_inv(self, v: ArrayLike, x: ArrayLike) -> np.ndarray:
        """g_x_inv: invert :meth:`unbake` for the same input ``x``."""
        v, x = _f32(v), _f32(x)
        root = np.power(np.maximum(v, np.float32(0.0)), np.float32(1.0 / self.gamma))
        return (root / np.float32(self.unbake_scale) - x) / np.float32(self.unbake_slope) + x

    def linear_to_srgb(self, v: ArrayLike) -> np.ndarray:
        """Encode linear values with the sRGB transfer function."""
        v = _f32(v)
        with np.errstate(invalid="ignore"):
            curve = np.float32(self.srgb_scale) * np.power(
                v, np.float32(1.0 / self.srgb_gamma)
            ) - np.float32(self.srgb_offset)
        return np.where(
            v <= np.float32(self.srgb_linear_cutoff),
            v * np.float32(self.srgb_linear_slope),
            curve,
        ).astype(np.float32)

    def srgb_to_linear(self, v: ArrayLike) -> np.ndarray:
        """Decode sRGB values to linear."""
        v = _f32(v)
        with np.errstate(invalid="ignore"):
            curve = np.power(
                (v + np.float32(self.srgb_offset)) / np.float32(self.srgb_scale),
                np.float32(self.srgb_gamma),
            )
        return np.where(
            v <= np.float32(self.srgb_encoded_cutoff),
            v / np.float32(self.srgb_linear_slope),
            curve,
        ).astype(np.float32)


def _f32(value: ArrayLike) -> np.ndarray:
    return np.asarray(value, dtype=np.float32)


DEFAULT_PROFILE = ColorPipelineProfile()

headroom = DEFAULT_PROFILE.headroom
headroom_inv = DEFAULT_PROFILE.headroom_inv
unbake = DEFAULT_PROFILE.unbake
unbake_inv = DEFAULT_PROFILE.unbake_inv
linear_to_srgb = DEFAULT_PROFILE.linear_to_srgb
srgb_to_linear = DEFAULT_PROFILE.srgb_to_linear


def correct_lut(
    lut_edit: Lut3dLinear,
    lut_stage: Lut3dLinear,
    profile: ColorPipelineProfile = DEFAULT_PROFILE,
) -> Lut3dLinear:
    """Calculate the final stage LUT for a LUT applied to a stage screenshot.

    Every grid point of the result is evaluated independently, so the whole
    grid is processed as one vectorized sweep.

    Args:
        lut_edit: LUT graded on top of a stage screenshot
        lut_stage: LUT the renderer currently applies
        profile: Pipeline constants

    Returns:
        float32 LUT with the size of ``lut_edit`` and alpha 1.0
    """
    size = lut_edit.size
    logger.debug(f"Correcting {size}^3 edit LUT against {lut_stage.size}^3 stage LUT")

    # fx = f(srgb) for every grid point in [z, y, x] order
    coords = np.arange(size, dtype=np.float32) / np.float32(size - 1)
    fz, fy, fx = np.meshgrid(coords, coords, coords, indexing="ij")
    fx_rgb = np.stack([fx, fy, fz], axis=-1).reshape(-1, 3)

    # srgb = f_inv(fx)
    x = profile.headroom_inv(fx_rgb)

    result = lut_stage.sample_rgba_trilinear(fx_rgb[:, 0], fx_rgb[:, 1], fx_rgb[:, 2])
    rgb = profile.linear_to_srgb(profile.unbake(result[:, :3], x))

    result = lut_edit.sample_rgba_trilinear(
        rgb[:, 0], rgb[:, 1], rgb[:, 2], extrapolate=profile.extrapolate_edit
    )
    rgb = profile.unbake_inv(profile.srgb_to_linear(result[:, :3]), x)

    final = np.empty((size**3, CHANNELS), dtype=np.float32)
    final[:, :3] = rgb
    final[:, 3] = 1.0

    return Lut3dLinear.from_float(size, final)
