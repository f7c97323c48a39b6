"""Error diffusion dithering to two output levels."""

from __future__ import annotations

import numpy as np

from dither_maker.core.kernels import Kernel

THRESHOLD = 128


def quantize(sample: int) -> int:
    """Map an 8-bit sample to black (0) or white (255)."""
    return 0 if sample < THRESHOLD else 255


def _check_buffer(buffer: np.ndarray) -> None:
    if buffer.ndim != 2:
        raise ValueError(f"Expected a 2D intensity buffer, got shape {buffer.shape}")
    if buffer.size == 0:
        raise ValueError(f"Cannot dither an empty buffer of shape {buffer.shape}")
    lo, hi = int(buffer.min()), int(buffer.max())
    if lo < 0 or hi > 255:
        raise ValueError(f"Samples must be in [0, 255], got [{lo}, {hi}]")


def diffuse(buffer: np.ndarray, kernel: Kernel) -> np.ndarray:
    """Dither a single-channel buffer with the given kernel.

    Pixels are visited top-to-bottom, left-to-right. Each one is quantized
    and its error is spread over the unvisited neighbours named by the
    kernel, saturating at 0 and 255 and truncating to an integer after
    every update.

    Args:
        buffer: 2D integer array with values in [0, 255]. Not modified.
        kernel: diffusion kernel.

    Returns:
        New uint8 array of the same shape containing only 0 and 255.
    """
    _check_buffer(buffer)
    img = buffer.astype(np.uint8, copy=True)
    h, w = img.shape
    offsets = kernel.offsets

    for y in range(h):
        for x in range(w):
            old = int(img[y, x])
            new = quantize(old)
            img[y, x] = new
            err = old - new
            if err == 0:
                continue

            for dx, dy, factor in offsets:
                nx, ny = x + dx, y + dy
                if 0 <= nx < w and ny < h:
                    value = int(img[ny, nx]) + err * factor
                    img[ny, nx] = int(max(0.0, min(255.0, value)))

    return img
