"""
Geometric Transform Operations.

Rotates and scales an image around its center while keeping the canvas at
the original size. Content that moves outside the canvas is clipped and
uncovered areas become transparent.

Rotation is clockwise-positive in screen coordinates (y pointing down),
matching a canvas rotate() call.

Example:
    >>> from PIL import Image
    >>> img = Image.new("RGBA", (200, 100), "red")
    >>> turned = apply_rotate_scale(img, rotation=45, scale=0.5)
    >>> turned.size
    (200, 100)
"""

import math
from typing import Any, Tuple

from PIL import Image

from PF_Libs.ImageEditingLib.image_models import ensure_rgba


def build_inverse_affine(
    size: Tuple[int, int],
    rotation: float,
    scale: float,
) -> Tuple[float, float, float, float, float, float]:
    """
    Build the output->source affine coefficients for Image.transform.

    For each output pixel (x, y) the source pixel is
    (a*x + b*y + c, d*x + e*y + f).

    Args:
        size: (width, height) of the canvas
        rotation: Clockwise rotation in degrees
        scale: Uniform scale factor (> 0)

    Raises:
        ValueError: If scale <= 0
    """
    if scale <= 0:
        raise ValueError(f"scale must be > 0, got {scale}")

    width, height = size
    cx = width / 2.0
    cy = height / 2.0
    angle = math.radians(rotation)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)

    a = cos_a / scale
    b = sin_a / scale
    d = -sin_a / scale
    e = cos_a / scale
    c = cx - a * cx - b * cy
    f = cy - d * cx - e * cy
    return (a, b, c, d, e, f)


def apply_rotate_scale(
    image: Any,
    rotation: float = 0.0,
    scale: float = 1.0,
) -> Any:
    """
    Rotate and scale an image around its center.

    Args:
        image: PIL Image (converted to RGBA)
        rotation: Clockwise rotation in degrees
        scale: Uniform scale factor (> 0)

    Returns:
        New RGBA PIL Image with the same size as the input

    Raises:
        ValueError: If scale <= 0
        TypeError: If image not PIL Image
    """
    rgba = ensure_rgba(image)

    if rotation % 360.0 == 0 and scale == 1:
        return rgba

    coefficients = build_inverse_affine(rgba.size, rotation, scale)
    return rgba.transform(
        rgba.size,
        Image.Transform.AFFINE,
        coefficients,
        resample=Image.Resampling.BICUBIC,
        fillcolor=(0, 0, 0, 0),
    )
