"""Tests for the image processing pipeline."""

import numpy as np
import pytest
from PIL import Image

from dither_maker.core.kernels import KernelName
from dither_maker.core.processor import (
    DitheredImage,
    Settings,
    process_image,
)


def _make_test_image(width: int = 40, height: int = 30, color=(128, 128, 128)):
    """Create a solid-color test image."""
    return Image.new("RGB", (width, height), color)


def _gradient_image(width: int = 32, height: int = 16):
    row = np.linspace(0, 255, width, dtype=np.uint8)
    arr = np.tile(row, (height, 1))
    rgb = np.stack([arr, arr[:, ::-1], np.full_like(arr, 90)], axis=2)
    return Image.fromarray(rgb)


class TestSettings:
    def test_default_settings(self):
        s = Settings()
        assert s.method == KernelName.ATKINSON
        assert s.color is False
        assert s.brightness == 0
        assert s.contrast == 100
        assert s.invert is False
        assert s.width is None

    def test_kernel_property(self):
        assert Settings(method=KernelName.SHTUKI).kernel.divisor == 42

    def test_mode_name(self):
        assert Settings().mode_name == "mono"
        assert Settings(color=True).mode_name == "color"

    def test_hash_deterministic(self):
        assert Settings().hash() == Settings().hash()

    def test_hash_changes_with_settings(self):
        assert Settings().hash() != Settings(color=True).hash()
        assert Settings().hash() != Settings(method=KernelName.SHTUKI).hash()


class TestProcessImage:
    def test_mono_output(self):
        result = process_image(_make_test_image(), Settings())
        assert isinstance(result, DitheredImage)
        assert result.image.mode == "L"
        assert result.image.size == (40, 30)
        assert (result.width, result.height) == (40, 30)
        assert result.method == "atkinson"
        assert result.mode == "mono"

    def test_color_output(self):
        result = process_image(_make_test_image(), Settings(color=True))
        assert result.image.mode == "RGBA"
        assert result.image.size == (40, 30)
        arr = np.asarray(result.image)
        assert np.all(arr[:, :, 3] == 255)

    @pytest.mark.parametrize("method", list(KernelName))
    @pytest.mark.parametrize("color", [False, True])
    def test_bilevel_samples(self, method, color):
        result = process_image(_gradient_image(), Settings(method=method, color=color))
        arr = np.asarray(result.image)
        if color:
            arr = arr[:, :, :3]
        assert set(np.unique(arr)) <= {0, 255}

    def test_reference_pair(self):
        img = Image.new("RGB", (2, 1), (100, 100, 100))
        result = process_image(img, Settings(method=KernelName.FLOYD_STEINBERG))
        assert np.asarray(result.image).tolist() == [[0, 255]]

    def test_gray_image_in_color_mode_has_equal_channels(self):
        img = Image.fromarray(
            np.tile(np.linspace(0, 255, 24, dtype=np.uint8), (12, 1))
        ).convert("RGB")
        result = process_image(img, Settings(color=True, method=KernelName.SIERRA_LITE))
        arr = np.asarray(result.image)
        assert np.array_equal(arr[:, :, 0], arr[:, :, 1])
        assert np.array_equal(arr[:, :, 1], arr[:, :, 2])

    def test_color_channels_dithered_independently(self):
        img = _make_test_image(color=(255, 0, 128))
        arr = np.asarray(process_image(img, Settings(color=True)).image)
        assert np.all(arr[:, :, 0] == 255)
        assert np.all(arr[:, :, 1] == 0)
        assert 0 < arr[:, :, 2].mean() < 255

    def test_resize_keeps_aspect(self):
        result = process_image(_make_test_image(40, 30), Settings(width=20))
        assert result.image.size == (20, 15)

    def test_invalid_width(self):
        with pytest.raises(ValueError, match="Width"):
            process_image(_make_test_image(), Settings(width=0))

    def test_empty_image(self):
        with pytest.raises(ValueError, match="empty"):
            process_image(Image.new("RGB", (0, 0)), Settings())

    def test_does_not_modify_source(self):
        img = _gradient_image()
        before = np.asarray(img).copy()
        process_image(img, Settings(color=True))
        assert np.array_equal(np.asarray(img), before)


class TestAdjustments:
    def test_invert_black_becomes_white(self):
        img = _make_test_image(color=(0, 0, 0))
        result = process_image(img, Settings(invert=True))
        assert np.all(np.asarray(result.image) == 255)

    def test_brightness_changes_output(self):
        img = _make_test_image(color=(128, 128, 128))
        bright = np.asarray(process_image(img, Settings(brightness=40)).image)
        dark = np.asarray(process_image(img, Settings(brightness=-40)).image)
        assert bright.mean() > dark.mean()

    def test_full_brightness_saturates(self):
        img = _make_test_image(color=(10, 10, 10))
        result = process_image(img, Settings(brightness=100))
        assert np.all(np.asarray(result.image) == 255)

    def test_zero_contrast_flattens_to_midpoint(self):
        # Every sample becomes 128, which dithers to a mix of black and white
        result = process_image(_gradient_image(), Settings(contrast=0))
        arr = np.asarray(result.image)
        assert 0 < arr.mean() < 255

    def test_defaults_match_plain_dither(self):
        from dither_maker.core.channels import to_luma
        from dither_maker.core.dither import diffuse

        img = _gradient_image()
        settings = Settings(method=KernelName.FLOYD_STEINBERG)
        expected = diffuse(to_luma(img), settings.kernel)
        assert np.array_equal(np.asarray(process_image(img, settings).image), expected)
