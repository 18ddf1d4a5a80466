# SPDX-FileCopyrightText: 2025 Fuse Technical Group
#
# SPDX-License-Identifier: BSD-3-Clause

"""Prepare stage screenshots for grading in an image editor."""

from __future__ import annotations

import numpy as np
from PIL import Image

from .errors import InvalidDimensionsError
from .lut.lut3d import Lut3dLinear

# In-game post processing brightens the image by roughly this factor.
POST_PROCESSING_GAIN = 1.4


def stamp_neutral_lut(image: Image.Image) -> Image.Image:
    """Darken a screenshot and write the neutral LUT into its top left corner.

    Undoing the post processing gain makes the gradient steps refer to the
    colors the stage LUT actually receives. After grading, the strip in the
    corner can be cropped out and packed as the new LUT.

    Args:
        image: Screenshot at least 256x16 pixels in size

    Returns:
        New RGBA image with the neutral LUT strip at (0, 0)

    Raises:
        InvalidDimensionsError: If the screenshot is smaller than the LUT strip
    """
    strip = np.array(Lut3dLinear.neutral().to_image())
    strip_height, strip_width = strip.shape[:2]
    if image.width < strip_width or image.height < strip_height:
        raise InvalidDimensionsError(
            f"Screenshot must be at least {strip_width}x{strip_height}, "
            f"got {image.width}x{image.height}"
        )

    pixels = np.array(image.convert("RGBA"))
    darkened = pixels[..., :3].astype(np.float32) / np.float32(POST_PROCESSING_GAIN)
    pixels[..., :3] = darkened.astype(np.uint8)
    pixels[:strip_height, :strip_width] = strip

    return Image.fromarray(pixels)


def extract_lut(image: Image.Image, size: int = 16) -> Lut3dLinear:
    """Read the LUT strip from the top left corner of a graded screenshot.

    Raises:
        InvalidDimensionsError: If the screenshot is smaller than the LUT strip
    """
    width, height = size * size, size
    if image.width < width or image.height < height:
        raise InvalidDimensionsError(
            f"Screenshot must be at least {width}x{height}, got {image.width}x{image.height}"
        )
    return Lut3dLinear.from_image(image.crop((0, 0, width, height)))
