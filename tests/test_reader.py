"""Tests for the image reader."""

from pathlib import Path

import pytest
from PIL import Image

from dither_maker.core.reader import (
    ImageInfo,
    SourceImage,
    detect_format,
    is_url,
    open_image,
)


class TestDetectFormat:
    def test_png(self):
        assert detect_format(Path("test.png")) == "png"

    def test_jpg(self):
        assert detect_format(Path("test.jpg")) == "jpeg"

    def test_jpeg_upper_case(self):
        assert detect_format(Path("TEST.JPEG")) == "jpeg"

    def test_unsupported(self):
        with pytest.raises(ValueError, match="Unsupported"):
            detect_format(Path("test.gif"))

    def test_no_suffix(self):
        with pytest.raises(ValueError, match="Unsupported"):
            detect_format(Path("image"))


class TestIsUrl:
    def test_http(self):
        assert is_url("http://example.com/a.png")

    def test_https(self):
        assert is_url("https://example.com/a.jpg")

    def test_local_path(self):
        assert not is_url("/tmp/a.png")
        assert not is_url("a.png")


class TestOpenImage:
    @pytest.fixture
    def sample_png(self, tmp_path):
        path = tmp_path / "sample.png"
        Image.new("RGBA", (12, 8), (10, 20, 30, 255)).save(str(path))
        return path

    def test_open_png(self, sample_png):
        source = open_image(sample_png)
        assert isinstance(source, SourceImage)
        assert isinstance(source.info, ImageInfo)
        assert source.info.format == "png"
        assert (source.info.width, source.info.height) == (12, 8)
        assert source.info.mode == "RGBA"
        assert source.image.size == (12, 8)

    def test_open_jpeg(self, tmp_path):
        path = tmp_path / "photo.jpg"
        Image.new("RGB", (16, 9), (200, 100, 50)).save(str(path), format="JPEG")
        source = open_image(str(path))
        assert source.info.format == "jpeg"
        assert source.image.size == (16, 9)

    def test_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            open_image("/nonexistent/file.png")

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "anim.gif"
        Image.new("RGB", (4, 4)).save(str(path))
        with pytest.raises(ValueError, match="Unsupported"):
            open_image(path)

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image")
        with pytest.raises(OSError):
            open_image(path)
