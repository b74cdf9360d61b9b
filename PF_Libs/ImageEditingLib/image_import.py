"""
Source image ingestion for PixelForge.

Decodes an image file (or accepts an already-decoded Pillow image) and
turns it into the RGBA source buffer the render pipeline works from.
Anything the pipeline cannot use is rejected here with IngestFailure, so
the compositor never sees a malformed source.

Functions:
    get_supported_image_formats: Get list of supported image formats
    is_supported_format: Check a path's extension
    load_source_image: Decode and validate a source image
"""

import logging
from pathlib import Path
from typing import Any, List, Union

from PIL import Image, UnidentifiedImageError

from PF_Libs.constants import SUPPORTED_STANDARD_IMAGES

logger = logging.getLogger(__name__)

# File filter pattern for QFileDialog
STANDARD_IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp)"


class IngestFailure(ValueError):
    """Raised when a source image cannot be decoded or is unusable."""


def get_supported_image_formats() -> List[str]:
    """
    Get list of supported standard image formats.

    Returns:
        List of file extensions (e.g., ['.bmp', '.gif', ...])
    """
    return sorted(list(SUPPORTED_STANDARD_IMAGES))


def is_supported_format(file_path: Path) -> bool:
    """
    Check if a file path has a supported format.

    Args:
        file_path: Path to the file

    Returns:
        True if file extension is supported
    """
    return Path(file_path).suffix.lower() in SUPPORTED_STANDARD_IMAGES


def _validate_size(image: Any) -> None:
    width, height = image.size
    if width <= 0 or height <= 0:
        raise IngestFailure(f"Image has no pixels: {width}x{height}")


def load_source_image(source: Union[str, Path, Any]) -> Any:
    """
    Load a source image for editing.

    Args:
        source: Path to an image file, or a PIL Image

    Returns:
        RGBA PIL Image owned by the caller

    Raises:
        IngestFailure: If the file is missing, has an unsupported extension,
                       cannot be decoded or has zero width/height
    """
    if hasattr(source, "convert") and hasattr(source, "size"):
        _validate_size(source)
        return source.convert("RGBA")

    if not isinstance(source, (str, Path)):
        raise IngestFailure(f"Expected image path or PIL Image, got {type(source)}")

    path = Path(source)
    if not is_supported_format(path):
        raise IngestFailure(
            f"Unsupported file type: {path.suffix or '(none)'}. "
            f"Supported: {', '.join(get_supported_image_formats())}"
        )

    if not path.is_file():
        raise IngestFailure(f"Image file not found: {path}")

    try:
        with Image.open(path) as opened:
            opened.load()
            image = opened.convert("RGBA")
    except (UnidentifiedImageError, OSError) as e:
        raise IngestFailure(f"Failed to decode image {path.name}: {str(e)}") from e

    _validate_size(image)
    logger.info(f"Loaded source image {path.name} ({image.width}x{image.height})")
    return image
