"""
Blur and Sharpen Filter Operations.

Provides the neighbourhood filters used by the tonal stage:
- Gaussian blur: Natural smooth blur, sub-pixel radius permitted
- Unsharp mask: Edge contrast boost

Both filters treat a zero strength as a no-op and return a copy, so the
render pipeline can call them unconditionally.

Example:
    >>> from PIL import Image
    >>> img = Image.open("photo.jpg").convert("RGBA")
    >>>
    >>> blurred = apply_gaussian_blur(img, radius=2.5)
    >>> sharpened = apply_sharpen(img, amount=1.0)
"""

from typing import Any

import numpy as np
from PIL import ImageFilter

from PF_Libs.constants import SHARPEN_PERCENT_PER_UNIT, SHARPEN_RADIUS
from PF_Libs.ImageEditingLib.image_models import from_pixel_array, to_pixel_array


# ============================================================================
# Gaussian Blur
# ============================================================================

def apply_gaussian_blur(
    image: Any,
    radius: float = 5.0,
) -> Any:
    """
    Apply Gaussian blur to image.

    RGBA images are blurred premultiplied, so fully transparent pixels
    do not darken their visible neighbours.

    Args:
        image: PIL Image
        radius: Blur standard deviation in pixels (0-100)
                0 returns an unchanged copy, fractions are allowed

    Returns:
        Blurred PIL Image (same mode as input)

    Raises:
        ValueError: If radius < 0 or > 100
        TypeError: If image not PIL Image
    """
    if not hasattr(image, "filter"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    if not (0 <= radius <= 100):
        raise ValueError(f"radius must be 0 <= r <= 100, got {radius}")

    if radius == 0:
        return image.copy()

    if image.mode == "P":
        image = image.convert("RGBA")

    gaussian = ImageFilter.GaussianBlur(radius=radius)
    if image.mode == "RGBA":
        # Filter premultiplied so transparent pixels add no color
        return image.convert("RGBa").filter(gaussian).convert("RGBA")

    return image.filter(gaussian)


# ============================================================================
# Sharpen
# ============================================================================

def apply_sharpen(
    image: Any,
    amount: float = 1.0,
) -> Any:
    """
    Sharpen an image with an unsharp mask.

    Only the color channels are sharpened; an RGBA image keeps its
    alpha channel untouched. Its blurred reference is premultiplied, so
    fully transparent neighbours do not brighten or darken the edges.

    Args:
        image: PIL Image
        amount: Sharpen strength (0-5)
                0 returns an unchanged copy

    Returns:
        Sharpened PIL Image (same mode as input)

    Raises:
        ValueError: If amount < 0 or > 5
        TypeError: If image not PIL Image
    """
    if not hasattr(image, "filter"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    if not (0 <= amount <= 5):
        raise ValueError(f"amount must be 0-5, got {amount}")

    if amount == 0:
        return image.copy()

    percent = int(round(amount * SHARPEN_PERCENT_PER_UNIT))

    if image.mode != "RGBA":
        unsharp = ImageFilter.UnsharpMask(radius=SHARPEN_RADIUS, percent=percent, threshold=0)
        return image.convert("RGB").filter(unsharp).convert(image.mode)

    pixels = to_pixel_array(image)
    blurred = to_pixel_array(apply_gaussian_blur(image, SHARPEN_RADIUS))

    result = pixels.copy()
    result[..., :3] += (pixels[..., :3] - blurred[..., :3]) * np.float32(percent / 100.0)
    return from_pixel_array(result)
