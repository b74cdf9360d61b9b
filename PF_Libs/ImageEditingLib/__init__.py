"""
ImageEditingLib - Core image editing functionality

This module provides the pixel buffer helpers, the adjustment settings
value and the individual filters used by the PixelForge render pipeline.
"""

from PF_Libs.ImageEditingLib.image_models import (
    RgbaColor,
    ensure_rgba,
    to_pixel_array,
    from_pixel_array,
)
from PF_Libs.ImageEditingLib.adjustment_settings import (
    EditorSettings,
    PARAMETER_NAMES,
    clamp_parameter,
    get_parameter_range,
)
from PF_Libs.ImageEditingLib.image_editing_ops import (
    build_export_filename,
    encode_png_data_url,
    decode_png_data_url,
    export_image,
)
from PF_Libs.ImageEditingLib.image_import import (
    IngestFailure,
    load_source_image,
    get_supported_image_formats,
    is_supported_format,
)

__all__ = [
    "RgbaColor",
    "ensure_rgba",
    "to_pixel_array",
    "from_pixel_array",
    "EditorSettings",
    "PARAMETER_NAMES",
    "clamp_parameter",
    "get_parameter_range",
    "build_export_filename",
    "encode_png_data_url",
    "decode_png_data_url",
    "export_image",
    "IngestFailure",
    "load_source_image",
    "get_supported_image_formats",
    "is_supported_format",
]
