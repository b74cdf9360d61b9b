"""
Tests for source image ingestion.
"""

import pytest
from PIL import Image

from PF_Libs.ImageEditingLib.image_import import (
    IngestFailure,
    get_supported_image_formats,
    is_supported_format,
    load_source_image,
)


class TestSupportedFormats:
    """Tests for format helpers."""

    def test_supported_formats_sorted(self):
        formats = get_supported_image_formats()

        assert formats == sorted(formats)
        assert ".png" in formats
        assert ".jpg" in formats

    @pytest.mark.parametrize("name", ["photo.png", "photo.JPG", "scan.tiff", "anim.gif"])
    def test_is_supported(self, name):
        assert is_supported_format(name)

    @pytest.mark.parametrize("name", ["notes.txt", "movie.mp4", "noextension"])
    def test_is_not_supported(self, name):
        assert not is_supported_format(name)


class TestLoadSourceImage:
    """Tests for load_source_image."""

    def test_loads_png_as_rgba(self, temp_project_dir):
        path = temp_project_dir / "photo.png"
        Image.new("RGB", (5, 3), (10, 20, 30)).save(path)

        image = load_source_image(path)

        assert image.mode == "RGBA"
        assert image.size == (5, 3)
        assert image.getpixel((0, 0)) == (10, 20, 30, 255)

    def test_accepts_string_path(self, temp_project_dir):
        path = temp_project_dir / "photo.png"
        Image.new("RGBA", (2, 2)).save(path)

        assert load_source_image(str(path)).size == (2, 2)

    def test_accepts_pil_image(self):
        source = Image.new("L", (4, 4), 128)
        image = load_source_image(source)

        assert image.mode == "RGBA"
        assert image is not source

    def test_missing_file(self, temp_project_dir):
        with pytest.raises(IngestFailure, match="not found"):
            load_source_image(temp_project_dir / "missing.png")

    def test_unsupported_extension(self, temp_project_dir):
        path = temp_project_dir / "notes.txt"
        path.write_text("hello")

        with pytest.raises(IngestFailure, match="Unsupported"):
            load_source_image(path)

    def test_corrupt_file(self, temp_project_dir):
        path = temp_project_dir / "broken.png"
        path.write_bytes(b"definitely not a png")

        with pytest.raises(IngestFailure, match="decode"):
            load_source_image(path)

    def test_zero_size_image(self):
        with pytest.raises(IngestFailure):
            load_source_image(Image.new("RGBA", (0, 5)))

    def test_wrong_type(self):
        with pytest.raises(IngestFailure):
            load_source_image(12345)

    def test_is_value_error(self):
        assert issubclass(IngestFailure, ValueError)
