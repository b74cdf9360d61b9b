"""
Adjustment settings (the parameter vector) for PixelForge.

EditorSettings is an immutable record of the sixteen adjustment values.
Every value is clamped into its declared range on construction, so an
out-of-range slider value is pinned to the boundary instead of rejected.

Example:
    >>> settings = EditorSettings().with_value("brightness", 1000)
    >>> settings.brightness
    100.0
    >>> settings.merged({"saturation": -100, "contrast": 30}).contrast
    30.0
"""

import logging
import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, List, Mapping

from PF_Libs.constants import PARAMETER_RANGES

logger = logging.getLogger(__name__)

PARAMETER_NAMES = tuple(PARAMETER_RANGES.keys())


def get_parameter_range(name: str):
    """
    Get the (min, max, default) triple for a parameter.

    Raises:
        KeyError: If name is not a known parameter
    """
    if name not in PARAMETER_RANGES:
        raise KeyError(
            f"Unknown parameter '{name}'. "
            f"Available parameters: {', '.join(PARAMETER_NAMES)}"
        )
    return PARAMETER_RANGES[name]


def clamp_parameter(name: str, value: Any) -> float:
    """
    Clamp a value into the declared range of a parameter.

    Non-numeric and NaN values fall back to the parameter default.

    Args:
        name: Parameter name (e.g. "brightness")
        value: Candidate value

    Returns:
        The value pinned into [min, max]
    """
    minimum, maximum, default = get_parameter_range(name)
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug(f"Non-numeric value {value!r} for {name}, using default")
        return default

    if math.isnan(number):
        return default
    return max(minimum, min(maximum, number))


@dataclass(frozen=True)
class EditorSettings:
    """The full set of adjustment values applied to the source image.

    Attributes:
        brightness, contrast, saturation: Percent offsets from 100% (-100..100)
        blur: Gaussian blur standard deviation in pixels (0..20)
        rotation: Clockwise rotation in degrees (-180..180)
        scale: Uniform scale factor (0.1..3)
        hue: Hue rotation in degrees (-180..180)
        exposure: Exposure in hundredths of a stop (-200..200)
        highlights, shadows: Tone lift/drop for bright/dark areas (-100..100)
        vibrance: Saturation boost weighted toward muted colors (-100..100)
        warmth: Sepia tint strength; the sign is ignored (-100..100)
        tint: Green (negative) to magenta (positive) shift (-100..100)
        vignette: Corner darkening strength in percent (0..100)
        grain: Noise magnitude in channel units (0..50)
        sharpen: Unsharp mask strength (0..5)
    """
    brightness: float = 0.0
    contrast: float = 0.0
    saturation: float = 0.0
    blur: float = 0.0
    rotation: float = 0.0
    scale: float = 1.0
    hue: float = 0.0
    exposure: float = 0.0
    highlights: float = 0.0
    shadows: float = 0.0
    vibrance: float = 0.0
    warmth: float = 0.0
    tint: float = 0.0
    vignette: float = 0.0
    grain: float = 0.0
    sharpen: float = 0.0

    def __post_init__(self):
        for item in fields(self):
            object.__setattr__(self, item.name, clamp_parameter(item.name, getattr(self, item.name)))

    def with_value(self, name: str, value: Any) -> "EditorSettings":
        """Return a copy with one field replaced (clamped)."""
        get_parameter_range(name)
        return replace(self, **{name: value})

    def merged(self, overrides: Mapping[str, Any]) -> "EditorSettings":
        """
        Return a copy with the given fields replaced.

        Fields not named in overrides keep their current values. Unknown
        names are ignored.
        """
        known = {}
        for name, value in overrides.items():
            if name not in PARAMETER_RANGES:
                logger.warning(f"Ignoring unknown parameter in overlay: {name}")
                continue
            known[name] = value
        return replace(self, **known)

    def is_identity(self) -> bool:
        return self == EditorSettings()

    def changed_fields(self, other: "EditorSettings") -> List[str]:
        """List the fields whose values differ from other, in field order."""
        return [
            name for name in PARAMETER_NAMES
            if getattr(self, name) != getattr(other, name)
        ]

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EditorSettings":
        """Create from dictionary, ignoring unknown keys."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)
