# SPDX-FileCopyrightText: 2025 Fuse Technical Group
#
# SPDX-License-Identifier: BSD-3-Clause

"""3D LUT data model, layouts and sampling."""

from .generator import LUTGenerator
from .lut3d import Lut3dLinear, Lut3dSwizzled
from .strip_image import StripImageConverter
from .swizzle import SwizzleLayout, swizzle

__all__ = [
    "LUTGenerator",
    "Lut3dLinear",
    "Lut3dSwizzled",
    "StripImageConverter",
    "SwizzleLayout",
    "swizzle",
]
