"""
Separable blend modes for layer compositing.

Each mode combines a backdrop (the accumulator beneath a layer) with a
source (the layer) channel by channel. Arrays are float, normalized to
[0, 1], and share the same shape. Formulas follow W3C Compositing and Blending
Level 1.

Example:
    >>> base = np.full((2, 2, 3), 0.5)
    >>> layer = np.full((2, 2, 3), 0.5)
    >>> float(blend_channels(base, layer, "multiply")[0, 0, 0])
    0.25
"""

from typing import Callable, Dict

import numpy as np

BlendFunction = Callable[[np.ndarray, np.ndarray], np.ndarray]


def _normal(backdrop: np.ndarray, source: np.ndarray) -> np.ndarray:
    return source


def _multiply(backdrop: np.ndarray, source: np.ndarray) -> np.ndarray:
    return backdrop * source


def _screen(backdrop: np.ndarray, source: np.ndarray) -> np.ndarray:
    return backdrop + source - backdrop * source


def _hard_light(backdrop: np.ndarray, source: np.ndarray) -> np.ndarray:
    # multiply for dark sources, screen for light ones
    return np.where(
        source <= 0.5,
        _multiply(backdrop, 2.0 * source),
        _screen(backdrop, 2.0 * source - 1.0),
    )


def _overlay(backdrop: np.ndarray, source: np.ndarray) -> np.ndarray:
    return _hard_light(source, backdrop)


def _soft_light(backdrop: np.ndarray, source: np.ndarray) -> np.ndarray:
    d = np.where(
        backdrop <= 0.25,
        ((16.0 * backdrop - 12.0) * backdrop + 4.0) * backdrop,
        np.sqrt(backdrop),
    )
    return np.where(
        source <= 0.5,
        backdrop - (1.0 - 2.0 * source) * backdrop * (1.0 - backdrop),
        backdrop + (2.0 * source - 1.0) * (d - backdrop),
    )


def _color_dodge(backdrop: np.ndarray, source: np.ndarray) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore"):
        dodged = np.minimum(1.0, backdrop / (1.0 - source))
    result = np.where(source >= 1.0, 1.0, dodged)
    return np.where(backdrop <= 0.0, 0.0, result)


def _color_burn(backdrop: np.ndarray, source: np.ndarray) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore"):
        burned = 1.0 - np.minimum(1.0, (1.0 - backdrop) / source)
    result = np.where(source <= 0.0, 0.0, burned)
    return np.where(backdrop >= 1.0, 1.0, result)


def _darken(backdrop: np.ndarray, source: np.ndarray) -> np.ndarray:
    return np.minimum(backdrop, source)


def _lighten(backdrop: np.ndarray, source: np.ndarray) -> np.ndarray:
    return np.maximum(backdrop, source)


BLEND_FUNCTIONS: Dict[str, BlendFunction] = {
    "normal": _normal,
    "multiply": _multiply,
    "screen": _screen,
    "overlay": _overlay,
    "soft-light": _soft_light,
    "hard-light": _hard_light,
    "color-dodge": _color_dodge,
    "color-burn": _color_burn,
    "darken": _darken,
    "lighten": _lighten,
}


def blend_channels(backdrop: np.ndarray, source: np.ndarray, mode: str) -> np.ndarray:
    """
    Blend two normalized color arrays with a named mode.

    Args:
        backdrop: Color values beneath the layer, in [0, 1]
        source: Layer color values, in [0, 1]
        mode: One of the names in BLEND_FUNCTIONS

    Returns:
        Blended values clipped to [0, 1]

    Raises:
        ValueError: If mode is unknown
    """
    try:
        blend = BLEND_FUNCTIONS[mode]
    except KeyError:
        raise ValueError(
            f"Unknown blend mode: {mode}. "
            f"Valid modes: {', '.join(BLEND_FUNCTIONS)}"
        ) from None
    return np.clip(blend(backdrop, source), 0.0, 1.0)
