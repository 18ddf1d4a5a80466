# SPDX-FileCopyrightText: 2025 Fuse Technical Group
#
# SPDX-License-Identifier: BSD-3-Clause

"""smush-lut - Color grading LUT conversion for Smash Ultimate stages.

Converts 3D LUTs between CUBE text, 2D strip images and swizzled nutexb
textures, and corrects edit LUTs for the stage LUT baked into the renderer.

Simple usage:
    import smush_lut
    edit = smush_lut.Lut3dLinear.from_cube(smush_lut.CubeLut3d.read("edit.cube"))
    final = smush_lut.correct_lut(edit, smush_lut.Lut3dLinear.neutral())
    smush_lut.write_nutexb(final, "color_grading_lut.nutexb")
"""

__version__ = "0.1.0"
__author__ = "Fuse Technical Group"

from .color_correction import ColorPipelineProfile, correct_lut
from .cube import CubeLut3d
from .errors import CubeParseError, InvalidDimensionsError, LutError, NutexbError
from .lut import Lut3dLinear, Lut3dSwizzled
from .nutexb import read_nutexb, write_nutexb
from .screenshot import stamp_neutral_lut

__all__ = [
    "ColorPipelineProfile",
    "CubeLut3d",
    "CubeParseError",
    "InvalidDimensionsError",
    "Lut3dLinear",
    "Lut3dSwizzled",
    "LutError",
    "NutexbError",
    "correct_lut",
    "read_nutexb",
    "stamp_neutral_lut",
    "write_nutexb",
]
