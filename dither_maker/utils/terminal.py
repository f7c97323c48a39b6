"""Terminal size detection utilities."""

from __future__ import annotations

import shutil

# Half-block rendering packs two pixel rows into one character cell
PIXELS_PER_CELL_Y = 2


def get_terminal_size(
    fallback_width: int = 80,
    fallback_height: int = 24,
) -> tuple[int, int]:
    """Get current terminal size in columns and rows.

    Returns (width, height). Falls back to provided defaults
    if terminal size cannot be determined.
    """
    try:
        size = shutil.get_terminal_size(fallback=(fallback_width, fallback_height))
        return size.columns, size.lines
    except (ValueError, OSError):
        return fallback_width, fallback_height


def fit_to_terminal(
    img_width: int,
    img_height: int,
    max_width: int | None = None,
    max_height: int | None = None,
) -> tuple[int, int]:
    """Calculate a pixel size that fits the terminal, preserving aspect ratio.

    Args:
        img_width: original image width in pixels.
        img_height: original image height in pixels.
        max_width: maximum character columns (defaults to terminal width).
        max_height: maximum character rows (defaults to terminal height - 4 for UI).

    Returns:
        (pixel_width, pixel_height) tuple. Never larger than the source.
    """
    if max_width is None or max_height is None:
        tw, th = get_terminal_size()
        if max_width is None:
            max_width = tw
        if max_height is None:
            max_height = max(th - 4, 10)

    max_px_w = max(1, max_width)
    max_px_h = max(1, max_height * PIXELS_PER_CELL_Y)

    scale = min(max_px_w / img_width, max_px_h / img_height, 1.0)
    return max(1, int(img_width * scale)), max(1, int(img_height * scale))
