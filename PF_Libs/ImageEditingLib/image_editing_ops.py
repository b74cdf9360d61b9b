"""
Export operations for PixelForge.

This module encodes rendered images for download and project storage.

Functions:
    build_export_filename: Timestamp-derived PNG filename
    encode_png_bytes: Encode an image as PNG bytes
    encode_png_data_url: Encode an image as a base64 PNG data URL
    decode_png_data_url: Decode a PNG data URL back to an RGBA image
    export_image: Save an image to a directory as a lossless PNG
"""

import base64
import binascii
import logging
import time
from io import BytesIO
from pathlib import Path
from typing import Any, Optional

from PIL import Image, UnidentifiedImageError

from PF_Libs.constants import (
    DEFAULT_EXPORT_EXTENSION,
    DEFAULT_EXPORT_FORMAT,
    EXPORT_FILE_PREFIX,
    PNG_DATA_URL_PREFIX,
)

logger = logging.getLogger(__name__)


def current_timestamp_ms() -> int:
    return int(time.time() * 1000)


def build_export_filename(timestamp_ms: Optional[int] = None) -> str:
    """
    Build a download filename such as 'edited-image-1700000000000.png'.

    Args:
        timestamp_ms: Milliseconds since the epoch (default: now)
    """
    if timestamp_ms is None:
        timestamp_ms = current_timestamp_ms()
    return f"{EXPORT_FILE_PREFIX}{int(timestamp_ms)}{DEFAULT_EXPORT_EXTENSION}"


def encode_png_bytes(image: Any) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format=DEFAULT_EXPORT_FORMAT)
    return buffer.getvalue()


def encode_png_data_url(image: Any) -> str:
    """Encode an image as 'data:image/png;base64,...'."""
    encoded = base64.b64encode(encode_png_bytes(image)).decode("ascii")
    return f"{PNG_DATA_URL_PREFIX}{encoded}"


def decode_png_data_url(data_url: str) -> Any:
    """
    Decode a PNG data URL produced by encode_png_data_url.

    Returns:
        RGBA PIL Image

    Raises:
        ValueError: If the string is not a decodable PNG data URL
    """
    if not isinstance(data_url, str) or not data_url.startswith(PNG_DATA_URL_PREFIX):
        raise ValueError("Expected a PNG data URL")

    try:
        raw = base64.b64decode(data_url[len(PNG_DATA_URL_PREFIX):], validate=True)
        with Image.open(BytesIO(raw)) as opened:
            return opened.convert("RGBA")
    except (binascii.Error, UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Invalid PNG data URL: {str(e)}") from e


def export_image(image: Any, output_dir: Path, timestamp_ms: Optional[int] = None) -> Path:
    """
    Save an image to disk in PNG format with a timestamp-derived name.

    Args:
        image: PIL Image to save
        output_dir: Directory path where the image should be saved
        timestamp_ms: Milliseconds since the epoch (default: now)

    Returns:
        Path of the written file

    Raises:
        OSError: If directory cannot be accessed or the file cannot be written
    """
    output_dir = Path(output_dir)
    if not output_dir.exists():
        raise OSError(f"Output directory does not exist: {output_dir}")

    if not output_dir.is_dir():
        raise OSError(f"Output path is not a directory: {output_dir}")

    save_path = output_dir / build_export_filename(timestamp_ms)
    image.save(save_path, format=DEFAULT_EXPORT_FORMAT)
    logger.info(f"Exported image to {save_path}")
    return save_path
