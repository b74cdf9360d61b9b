"""
Tonal and Color Filter Operations.

Implements the combined per-pixel color transform of the render pipeline.
The formulas follow the CSS filter functions (brightness, contrast,
saturate, blur, hue-rotate, sepia) so results match what a browser canvas
produces for the same percentages, and add the remaining tone controls
(exposure, highlights, shadows, vibrance, tint, sharpen) as explicit terms.

All color math runs on float arrays normalized to [0, 1]; every step
clamps back into that range, as the CSS filter chain does between
filter functions. Alpha is never modified by the color steps.

Functions:
    apply_exposure, apply_brightness, apply_contrast, apply_highlights_shadows,
    apply_saturation, apply_vibrance, apply_hue_rotation, apply_sepia,
    apply_tint: Array-level color steps
    apply_tone_stage: Run every step in pipeline order on a Pillow image
"""

import math
from typing import Any

import numpy as np

from PF_Libs.ImageEditingLib.adjustment_settings import EditorSettings
from PF_Libs.ImageEditingLib.blur_filter import apply_gaussian_blur, apply_sharpen
from PF_Libs.ImageEditingLib.image_models import (
    ensure_rgba,
    from_pixel_array,
    to_pixel_array,
)

# Rec. 709 luma weights used by the CSS color matrices
LUMA_WEIGHTS = np.array([0.213, 0.715, 0.072], dtype=np.float32)

# Only these fields are consumed by the tonal stage
TONE_FIELDS = (
    "exposure",
    "brightness",
    "contrast",
    "highlights",
    "shadows",
    "saturation",
    "vibrance",
    "blur",
    "sharpen",
    "hue",
    "warmth",
    "tint",
)


def _clip(rgb: np.ndarray) -> np.ndarray:
    return np.clip(rgb, 0.0, 1.0)


def _luminance(rgb: np.ndarray) -> np.ndarray:
    return rgb @ LUMA_WEIGHTS


def _smoothstep(edge0: float, edge1: float, x: np.ndarray) -> np.ndarray:
    t = np.clip((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def _apply_matrix(rgb: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    return _clip(rgb @ matrix.T.astype(np.float32))


def apply_exposure(rgb: np.ndarray, exposure: float) -> np.ndarray:
    """Scale linearly by 2 ** (exposure / 100); +/-100 is one stop."""
    if exposure == 0:
        return rgb
    return _clip(rgb * np.float32(2.0 ** (exposure / 100.0)))


def apply_brightness(rgb: np.ndarray, brightness: float) -> np.ndarray:
    """CSS brightness(): multiply by (100 + brightness)%."""
    if brightness == 0:
        return rgb
    return _clip(rgb * np.float32((100.0 + brightness) / 100.0))


def apply_contrast(rgb: np.ndarray, contrast: float) -> np.ndarray:
    """CSS contrast(): stretch around mid grey by (100 + contrast)%."""
    if contrast == 0:
        return rgb
    k = np.float32((100.0 + contrast) / 100.0)
    return _clip((rgb - 0.5) * k + 0.5)


def apply_highlights_shadows(rgb: np.ndarray, highlights: float, shadows: float) -> np.ndarray:
    """
    Lift or drop bright and dark areas separately.

    Highlights act on pixels with luminance above mid grey, shadows on
    pixels below it; the amount of shift grows smoothly with distance
    from mid grey. Positive values brighten, negative values darken.
    """
    if highlights == 0 and shadows == 0:
        return rgb

    luminance = _luminance(rgb)[..., np.newaxis]
    shift = np.zeros_like(luminance)
    if highlights != 0:
        shift += _smoothstep(0.5, 1.0, luminance) * np.float32(highlights / 100.0 * 0.5)
    if shadows != 0:
        shift += (1.0 - _smoothstep(0.0, 0.5, luminance)) * np.float32(shadows / 100.0 * 0.5)
    return _clip(rgb + shift)


def apply_saturation(rgb: np.ndarray, saturation: float) -> np.ndarray:
    """
    CSS saturate() with amount (100 + saturation)%.

    Written as luminance + s * (color - luminance), which expands to the
    saturate() matrix. -100 yields a greyscale image with R == G == B.
    """
    if saturation == 0:
        return rgb
    s = np.float32((100.0 + saturation) / 100.0)
    luminance = _luminance(rgb)[..., np.newaxis]
    return _clip(luminance + s * (rgb - luminance))


def apply_vibrance(rgb: np.ndarray, vibrance: float) -> np.ndarray:
    """
    Saturation change weighted toward muted colors.

    The per-pixel saturation factor is 1 + v * (1 - chroma), so greys and
    pastels move more than already saturated colors.
    """
    if vibrance == 0:
        return rgb
    chroma = (rgb.max(axis=-1) - rgb.min(axis=-1))[..., np.newaxis]
    factor = 1.0 + np.float32(vibrance / 100.0) * (1.0 - chroma)
    luminance = _luminance(rgb)[..., np.newaxis]
    return _clip(luminance + factor * (rgb - luminance))


def hue_rotation_matrix(degrees: float) -> np.ndarray:
    """CSS hue-rotate() matrix for the given angle."""
    angle = math.radians(degrees % 360.0)
    c = math.cos(angle)
    s = math.sin(angle)
    return np.array([
        [0.213 + c * 0.787 - s * 0.213, 0.715 - c * 0.715 - s * 0.715, 0.072 - c * 0.072 + s * 0.928],
        [0.213 - c * 0.213 + s * 0.143, 0.715 + c * 0.285 + s * 0.140, 0.072 - c * 0.072 - s * 0.283],
        [0.213 - c * 0.213 - s * 0.787, 0.715 - c * 0.715 + s * 0.715, 0.072 + c * 0.928 + s * 0.072],
    ])


def apply_hue_rotation(rgb: np.ndarray, degrees: float) -> np.ndarray:
    if degrees % 360.0 == 0:
        return rgb
    return _apply_matrix(rgb, hue_rotation_matrix(degrees))


def sepia_matrix(amount: float) -> np.ndarray:
    """CSS sepia() matrix for an amount in [0, 1]."""
    inverse = 1.0 - max(0.0, min(1.0, amount))
    return np.array([
        [0.393 + 0.607 * inverse, 0.769 - 0.769 * inverse, 0.189 - 0.189 * inverse],
        [0.349 - 0.349 * inverse, 0.686 + 0.314 * inverse, 0.168 - 0.168 * inverse],
        [0.272 - 0.272 * inverse, 0.534 - 0.534 * inverse, 0.131 + 0.869 * inverse],
    ])


def apply_sepia(rgb: np.ndarray, warmth: float) -> np.ndarray:
    """
    Warm the image with a sepia tint of strength abs(warmth) / 100.

    The sign of warmth is ignored: -30 and +30 give the same result.
    """
    if warmth == 0:
        return rgb
    return _apply_matrix(rgb, sepia_matrix(abs(warmth) / 100.0))


def apply_tint(rgb: np.ndarray, tint: float) -> np.ndarray:
    """Shift toward magenta (positive) or green (negative)."""
    if tint == 0:
        return rgb
    t = np.float32(tint / 100.0)
    offset = np.array([0.05, -0.1, 0.05], dtype=np.float32) * t
    return _clip(rgb + offset)


def _split(image: Any):
    pixels = to_pixel_array(image) / 255.0
    return pixels[..., :3], pixels[..., 3:]


def _join(rgb: np.ndarray, alpha: np.ndarray) -> Any:
    return from_pixel_array(np.concatenate([rgb, alpha], axis=-1) * 255.0)


def apply_tone_stage(image: Any, settings: EditorSettings) -> Any:
    """
    Apply every tonal and color adjustment to an RGBA image.

    Order: exposure, brightness, contrast, highlights/shadows, saturation,
    vibrance, blur, sharpen, hue rotation, warmth (sepia), tint.

    Args:
        image: PIL Image (converted to RGBA)
        settings: Adjustment values

    Returns:
        New RGBA PIL Image; the input is not modified
    """
    if all(getattr(settings, name) == 0 for name in TONE_FIELDS):
        return ensure_rgba(image)

    rgb, alpha = _split(image)
    rgb = apply_exposure(rgb, settings.exposure)
    rgb = apply_brightness(rgb, settings.brightness)
    rgb = apply_contrast(rgb, settings.contrast)
    rgb = apply_highlights_shadows(rgb, settings.highlights, settings.shadows)
    rgb = apply_saturation(rgb, settings.saturation)
    rgb = apply_vibrance(rgb, settings.vibrance)

    if settings.blur > 0 or settings.sharpen > 0:
        filtered = _join(rgb, alpha)
        filtered = apply_gaussian_blur(filtered, settings.blur)
        filtered = apply_sharpen(filtered, settings.sharpen)
        rgb, alpha = _split(filtered)

    rgb = apply_hue_rotation(rgb, settings.hue)
    rgb = apply_sepia(rgb, settings.warmth)
    rgb = apply_tint(rgb, settings.tint)
    return _join(rgb, alpha)
