"""
Image editing data models for PixelForge.

This module defines the pixel buffer conventions used by every render stage.
A pixel buffer is a Pillow image in RGBA mode (straight alpha). Stages that
need per-pixel math move through NumPy arrays of shape (height, width, 4).

Functions:
    ensure_rgba: Convert any Pillow image to an RGBA copy
    to_pixel_array: Pillow image -> float32 array in the 0-255 range
    from_pixel_array: float array -> RGBA Pillow image, rounded and clamped

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
"""

from typing import Any, Tuple

import numpy as np
from PIL import Image

RgbaColor = Tuple[int, int, int, int]


def ensure_rgba(image: Any) -> 'Image.Image':
    """
    Return an RGBA copy of a Pillow image.

    Raises:
        TypeError: If image is not a Pillow image
    """
    if not hasattr(image, "convert"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    if image.mode == "RGBA":
        return image.copy()
    return image.convert("RGBA")


def to_pixel_array(image: Any) -> np.ndarray:
    """
    Convert an image to a float32 array of shape (height, width, 4).

    Values stay in the 0-255 range so stages can work in either
    normalized or byte units.
    """
    return np.asarray(ensure_rgba(image), dtype=np.float32)


def from_pixel_array(pixels: np.ndarray) -> 'Image.Image':
    """
    Convert a (height, width, 4) array back to an RGBA image.

    Values are rounded to the nearest integer and clamped to [0, 255].
    """
    clamped = np.clip(np.rint(pixels), 0, 255).astype(np.uint8)
    # uint8 arrays with four channels map to RGBA
    return Image.fromarray(clamped)
