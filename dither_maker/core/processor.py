"""Image processing pipeline.

Resize → split (luma or R/G/B) → brightness/contrast/invert → diffuse → merge.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

import numpy as np
from PIL import Image

from dither_maker.core.channels import (
    composite_channels,
    extract_channels,
    gray_image,
    to_luma,
)
from dither_maker.core.dither import diffuse
from dither_maker.core.kernels import DEFAULT_KERNEL, KERNELS, Kernel, KernelName


@dataclass(frozen=True)
class Settings:
    """Processing settings that affect output."""

    method: KernelName = DEFAULT_KERNEL
    color: bool = False
    brightness: int = 0  # -100 to 100
    contrast: int = 100  # 0 to 200 (100 = no change)
    invert: bool = False
    width: int | None = None  # None keeps the source width

    @property
    def kernel(self) -> Kernel:
        return KERNELS[self.method]

    @property
    def mode_name(self) -> str:
        return "color" if self.color else "mono"

    def hash(self) -> str:
        """Deterministic hash for cache keying."""
        data = (
            f"{self.method.value}:{self.color}:{self.brightness}:"
            f"{self.contrast}:{self.invert}:{self.width}"
        )
        return hashlib.md5(data.encode()).hexdigest()[:12]


@dataclass
class DitheredImage:
    """Result of dithering a single image."""

    image: Image.Image  # "L" for mono, "RGBA" for color
    method: str
    mode: str
    width: int = 0
    height: int = 0


def _resize_image(img: Image.Image, width: int | None) -> Image.Image:
    """Resize to the target width, preserving aspect ratio."""
    if width is None or width == img.width:
        return img
    if width < 1:
        raise ValueError(f"Width must be positive, got {width}")
    height = max(1, round(img.height * width / img.width))
    return img.resize((width, height), Image.Resampling.LANCZOS)


def _adjust(
    buffer: np.ndarray, brightness: int, contrast: int, invert: bool
) -> np.ndarray:
    """Apply brightness, contrast and inversion to an 8-bit buffer.

    brightness: -100 to 100 (offset in percent of full scale)
    contrast: 0 to 200 (100 = no change, scaled around the midpoint)
    """
    if brightness == 0 and contrast == 100 and not invert:
        return buffer

    result = buffer.astype(np.float64)

    if brightness != 0:
        result = result + brightness * 255 / 100.0

    if contrast != 100:
        factor = contrast / 100.0
        result = (result - 127.5) * factor + 127.5

    result = np.clip(np.rint(result), 0, 255)

    if invert:
        result = 255 - result

    return result.astype(np.uint8)


def dither_buffer(buffer: np.ndarray, settings: Settings) -> np.ndarray:
    """Adjust and diffuse one intensity buffer."""
    adjusted = _adjust(buffer, settings.brightness, settings.contrast, settings.invert)
    return diffuse(adjusted, settings.kernel)


def process_image(img: Image.Image, settings: Settings) -> DitheredImage:
    """Dither an image through the full pipeline.

    Color mode diffuses R, G and B separately with the same kernel and no
    error shared between channels.
    """
    if img.width < 1 or img.height < 1:
        raise ValueError(f"Cannot dither an empty image ({img.width}x{img.height})")

    resized = _resize_image(img, settings.width)

    if settings.color:
        channels = [dither_buffer(c, settings) for c in extract_channels(resized)]
        out = composite_channels(channels)
    else:
        out = gray_image(dither_buffer(to_luma(resized), settings))

    return DitheredImage(
        image=out,
        method=settings.method.value,
        mode=settings.mode_name,
        width=out.width,
        height=out.height,
    )
