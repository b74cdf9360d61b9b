"""
Pytest configuration and shared fixtures for PixelForge tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

from typing import List

import pytest
from PIL import Image

from PF_Libs.ImageEditingLib.image_models import RgbaColor


@pytest.fixture
def temp_project_dir(tmp_path):
    """
    Provide a temporary directory for project files.

    Args:
        tmp_path: Pytest's built-in temporary directory fixture

    Returns:
        Path object pointing to a temporary directory
    """
    return tmp_path


@pytest.fixture
def sample_rgba_colors() -> List[RgbaColor]:
    """
    Provide a list of sample RGBA color tuples for testing.

    Returns:
        List of (R, G, B, A) tuples with common test colors
    """
    return [
        (255, 0, 0, 255),    # Red
        (0, 255, 0, 255),    # Green
        (0, 0, 255, 255),    # Blue
        (255, 255, 255, 255),  # White
        (0, 0, 0, 255),      # Black
        (128, 128, 128, 255),  # Gray
    ]


@pytest.fixture
def swatch_image(sample_rgba_colors):
    """A 6x1 image with one pixel per sample color."""
    image = Image.new("RGBA", (len(sample_rgba_colors), 1))
    image.putdata(sample_rgba_colors)
    return image


@pytest.fixture
def gradient_image():
    """A 32x32 opaque image with a horizontal red and vertical green ramp."""
    image = Image.new("RGBA", (32, 32))
    image.putdata([
        (x * 8, y * 8, 96, 255)
        for y in range(32)
        for x in range(32)
    ])
    return image
