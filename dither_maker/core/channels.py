"""Split images into intensity buffers and merge dithered buffers back.

Samples are premultiplied by alpha before use, so fully transparent pixels
read as black in both modes.
"""

from __future__ import annotations

import numpy as np
from PIL import Image


def _premultiplied16(img: Image.Image) -> np.ndarray:
    """Return (H, W, 3) uint32 RGB samples scaled to 16 bits and premultiplied."""
    rgba = np.asarray(img.convert("RGBA"), dtype=np.uint32)
    alpha = rgba[:, :, 3:4]
    return rgba[:, :, :3] * 257 * alpha // 255


def to_luma(img: Image.Image) -> np.ndarray:
    """Convert an image to a single 8-bit luma buffer.

    Uses the 16-bit fixed-point weights 19595/38470/7471 (sum 65536).
    """
    rgb = _premultiplied16(img)
    y = (
        19595 * rgb[:, :, 0]
        + 38470 * rgb[:, :, 1]
        + 7471 * rgb[:, :, 2]
        + (1 << 15)
    ) >> 24
    return y.astype(np.uint8)


def extract_channels(img: Image.Image) -> list[np.ndarray]:
    """Split an image into independent R, G, B 8-bit buffers."""
    rgb = (_premultiplied16(img) >> 8).astype(np.uint8)
    return [np.ascontiguousarray(rgb[:, :, c]) for c in range(3)]


def composite_channels(channels: list[np.ndarray]) -> Image.Image:
    """Merge three single-channel buffers into a fully opaque RGBA image."""
    if len(channels) != 3:
        raise ValueError(f"Expected 3 channels, got {len(channels)}")
    shapes = {c.shape for c in channels}
    if len(shapes) != 1:
        raise ValueError(f"Channel shapes differ: {sorted(shapes)}")

    h, w = channels[0].shape
    rgba = np.empty((h, w, 4), dtype=np.uint8)
    for i, channel in enumerate(channels):
        rgba[:, :, i] = channel
    rgba[:, :, 3] = 255
    return Image.fromarray(rgba)


def gray_image(buffer: np.ndarray) -> Image.Image:
    """Wrap a single 8-bit buffer as a grayscale image."""
    return Image.fromarray(buffer.astype(np.uint8))
