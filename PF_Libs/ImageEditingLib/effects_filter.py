"""
Stylistic Effect Operations.

Provides the two effects applied after the color stage:
- Vignette: Radial darkening from the center toward the corners
- Grain: Achromatic film-grain noise

Grain uses NumPy's Generator seeded per call, so a render can be
reproduced exactly by passing the same seed again.

Example:
    >>> from PIL import Image
    >>> img = Image.new("RGBA", (64, 64), "white")
    >>> darker = apply_vignette(img, strength=60)
    >>> noisy = apply_grain(img, intensity=15, seed=1234)
"""

from typing import Any, Optional

import numpy as np

from PF_Libs.ImageEditingLib.image_models import (
    ensure_rgba,
    from_pixel_array,
    to_pixel_array,
)


# ============================================================================
# Vignette
# ============================================================================

def build_vignette_mask(width: int, height: int, strength: float) -> np.ndarray:
    """
    Build the per-pixel multiplier for a vignette.

    The falloff grows linearly from 0 at the center to 1 at the farthest
    corner; the multiplier is 1 - falloff * strength / 100.

    Returns:
        float32 array of shape (height, width) with values in [0, 1]
    """
    cx = width / 2.0
    cy = height / 2.0
    max_radius = float(np.hypot(cx, cy))

    # Distances are measured from pixel centers
    ys = np.arange(height, dtype=np.float32) + 0.5 - cy
    xs = np.arange(width, dtype=np.float32) + 0.5 - cx
    distance = np.hypot(xs[np.newaxis, :], ys[:, np.newaxis])

    falloff = np.clip(distance / max_radius, 0.0, 1.0) if max_radius > 0 else np.zeros_like(distance)
    factor = np.float32(strength / 100.0)
    return (1.0 - falloff * factor).astype(np.float32)


def apply_vignette(
    image: Any,
    strength: float = 50.0,
) -> Any:
    """
    Darken an image radially with a multiply-style vignette.

    Args:
        image: PIL Image (converted to RGBA)
        strength: Darkening at the corners in percent (0-100)
                  0 returns an unchanged copy

    Returns:
        New RGBA PIL Image; alpha is unchanged

    Raises:
        ValueError: If strength < 0 or > 100
        TypeError: If image not PIL Image
    """
    if not (0 <= strength <= 100):
        raise ValueError(f"strength must be 0-100, got {strength}")

    rgba = ensure_rgba(image)
    if strength == 0:
        return rgba

    pixels = to_pixel_array(rgba)
    mask = build_vignette_mask(rgba.width, rgba.height, strength)
    pixels[..., :3] *= mask[..., np.newaxis]
    return from_pixel_array(pixels)


# ============================================================================
# Film Grain
# ============================================================================

def apply_grain(
    image: Any,
    intensity: float = 10.0,
    seed: Optional[int] = None,
) -> Any:
    """
    Add achromatic noise to an image.

    One sample per pixel is drawn uniformly from [-intensity, +intensity]
    and added to R, G and B alike, then each channel is clamped.

    Args:
        image: PIL Image (converted to RGBA)
        intensity: Noise magnitude in channel units (0-255)
                   0 returns an unchanged copy
        seed: Seed for the noise generator (None = nondeterministic)

    Returns:
        New RGBA PIL Image; alpha is unchanged

    Raises:
        ValueError: If intensity < 0 or > 255
        TypeError: If image not PIL Image
    """
    if not (0 <= intensity <= 255):
        raise ValueError(f"intensity must be 0-255, got {intensity}")

    rgba = ensure_rgba(image)
    if intensity == 0:
        return rgba

    rng = np.random.default_rng(seed)
    pixels = to_pixel_array(rgba)
    noise = rng.uniform(-intensity, intensity, size=(rgba.height, rgba.width)).astype(np.float32)
    pixels[..., :3] += noise[..., np.newaxis]
    return from_pixel_array(pixels)
