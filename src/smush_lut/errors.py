# SPDX-FileCopyrightText: 2025 Fuse Technical Group
#
# SPDX-License-Identifier: BSD-3-Clause

"""Exceptions raised by smush-lut."""

from __future__ import annotations


class LutError(Exception):
    """Base exception for LUT conversion errors."""

    pass


class InvalidDimensionsError(LutError, ValueError):
    """Exception raised when an image does not have the LUT strip layout."""

    pass


class CubeParseError(LutError, ValueError):
    """Exception raised when CUBE text cannot be parsed."""

    pass


class NutexbError(LutError):
    """Exception raised when a nutexb container is truncated or malformed."""

    pass
