"""Loaders for LC-3 program formats."""

from __future__ import annotations

from .image import ImageFormatError, load_image, load_image_from_path
from .program import AddressRegion, ProgramImage

__all__ = [
    "AddressRegion",
    "ProgramImage",
    "ImageFormatError",
    "load_image",
    "load_image_from_path",
]
