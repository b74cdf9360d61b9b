"""
Constants and configuration values for PixelForge.

This module centralizes the adjustment ranges, preset table, blend modes
and file naming used throughout the editor.
"""

# Adjustment fields in display order: (min, max, default)
PARAMETER_RANGES = {
    "brightness": (-100.0, 100.0, 0.0),
    "contrast": (-100.0, 100.0, 0.0),
    "saturation": (-100.0, 100.0, 0.0),
    "blur": (0.0, 20.0, 0.0),
    "rotation": (-180.0, 180.0, 0.0),
    "scale": (0.1, 3.0, 1.0),
    "hue": (-180.0, 180.0, 0.0),
    "exposure": (-200.0, 200.0, 0.0),
    "highlights": (-100.0, 100.0, 0.0),
    "shadows": (-100.0, 100.0, 0.0),
    "vibrance": (-100.0, 100.0, 0.0),
    "warmth": (-100.0, 100.0, 0.0),
    "tint": (-100.0, 100.0, 0.0),
    "vignette": (0.0, 100.0, 0.0),
    "grain": (0.0, 50.0, 0.0),
    "sharpen": (0.0, 5.0, 0.0),
}

# Slider step sizes used by the desktop shell
PARAMETER_STEPS = {
    "blur": 0.1,
    "scale": 0.1,
    "sharpen": 0.1,
}
DEFAULT_PARAMETER_STEP = 1.0

# Slider grouping used by the desktop shell
PARAMETER_GROUPS = {
    "Basic": ["brightness", "contrast", "saturation", "vibrance"],
    "Advanced": ["exposure", "highlights", "shadows", "warmth", "tint", "hue"],
    "Effects": ["blur", "sharpen", "vignette", "grain"],
    "Transform": ["rotation", "scale"],
}

# Named partial overlays merged onto the current settings
PRESETS = {
    "Vintage": {"brightness": 10, "contrast": 20, "saturation": -30, "blur": 0.5, "warmth": 30, "vignette": 20},
    "B&W": {"brightness": 0, "contrast": 30, "saturation": -100, "blur": 0, "sharpen": 1},
    "Vibrant": {"brightness": 15, "contrast": 25, "saturation": 50, "vibrance": 30, "blur": 0},
    "Soft": {"brightness": 20, "contrast": -10, "saturation": 10, "blur": 1, "highlights": -20},
    "Dramatic": {"brightness": -10, "contrast": 40, "saturation": 20, "shadows": -30, "highlights": -20, "vignette": 30},
    "Film": {"brightness": 5, "contrast": 15, "saturation": -10, "grain": 15, "warmth": 20, "vignette": 15},
}

QUICK_ENHANCE_SETTINGS = {
    "brightness": 10,
    "contrast": 15,
    "saturation": 20,
    "sharpen": 0.5,
    "vibrance": 15,
}

# Layer constants
BLEND_MODES = (
    "normal",
    "multiply",
    "screen",
    "overlay",
    "soft-light",
    "hard-light",
    "color-dodge",
    "color-burn",
    "darken",
    "lighten",
)
DEFAULT_BLEND_MODE = "normal"
DEFAULT_LAYER_OPACITY = 100.0
INITIAL_LAYER_ID = "layer-1"
INITIAL_LAYER_NAME = "Background"
LAYER_ID_PREFIX = "layer-"
DUPLICATE_LAYER_SUFFIX = " Copy"

# Render pipeline stage names, in execution order
STAGE_GEOMETRY = "geometry"
STAGE_TONE = "tone"
STAGE_VIGNETTE = "vignette"
STAGE_GRAIN = "grain"
PIPELINE_ORDER = (STAGE_GEOMETRY, STAGE_TONE, STAGE_VIGNETTE, STAGE_GRAIN)

# Unsharp mask shape for the sharpen adjustment
SHARPEN_RADIUS = 2.0
SHARPEN_PERCENT_PER_UNIT = 100

# File naming
EXPORT_FILE_PREFIX = "edited-image-"
DEFAULT_EXPORT_FORMAT = "PNG"
DEFAULT_EXPORT_EXTENSION = ".png"
PNG_DATA_URL_PREFIX = "data:image/png;base64,"

# Supported file formats
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".webp"}

# Project persistence
PROJECT_STORAGE_KEY = "pixelforge-project"
STORE_FILE_EXTENSION = ".json"

# Project field names
FIELD_IMAGE = "image"
FIELD_SOURCE = "source"
FIELD_SETTINGS = "settings"
FIELD_LAYERS = "layers"
FIELD_TIMESTAMP = "timestamp"

# History timeline labels
HISTORY_LABEL_ORIGINAL = "Original"
HISTORY_LABEL_CURRENT = "Current"
HISTORY_LABEL_MULTIPLE = "Multiple adjustments"

# Safe filename characters
SAFE_FILENAME_CHARS = "-_"
FILENAME_REPLACEMENT_CHAR = "_"
