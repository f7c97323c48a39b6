"""Dithered image preview widget for the TUI."""

from __future__ import annotations

import numpy as np
from PIL import Image
from rich.text import Text
from textual.app import ComposeResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Static

from dither_maker.core.processor import DitheredImage

UPPER_HALF = "▀"
EMPTY_MESSAGE = "No file loaded. Press 'o' to open a file."


def image_to_rich_text(img: Image.Image) -> Text:
    """Render an image as half-block characters.

    Each character cell shows two pixels: the upper one as the foreground
    color and the lower one as the background color.
    """
    rgb = np.asarray(img.convert("RGB"))
    h, w = rgb.shape[:2]
    text = Text()

    for y in range(0, h, 2):
        if y > 0:
            text.append("\n")
        for x in range(w):
            r, g, b = (int(v) for v in rgb[y, x])
            style = f"rgb({r},{g},{b})"
            if y + 1 < h:
                r2, g2, b2 = (int(v) for v in rgb[y + 1, x])
                style += f" on rgb({r2},{g2},{b2})"
            text.append(UPPER_HALF, style=style)

    return text


class DitherPreview(Widget):
    """Widget that displays a dithered image using half-block characters."""

    DEFAULT_CSS = """
    DitherPreview {
        width: 1fr;
        height: 1fr;
        overflow: auto;
        background: $surface;
    }

    DitherPreview #preview-content {
        width: auto;
        height: auto;
    }
    """

    class PreviewUpdated(Message):
        """Posted when a new result is displayed."""
        def __init__(self, settings_hash: str) -> None:
            super().__init__()
            self.settings_hash = settings_hash

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._current: DitheredImage | None = None

    def compose(self) -> ComposeResult:
        yield Static(EMPTY_MESSAGE, id="preview-content")

    def update_result(self, result: DitheredImage, settings_hash: str = "") -> None:
        """Update the preview with a new dithered image."""
        self._current = result
        content = self.query_one("#preview-content", Static)
        content.update(image_to_rich_text(result.image))
        self.post_message(self.PreviewUpdated(settings_hash))

    def clear(self) -> None:
        """Clear the preview."""
        self._current = None
        content = self.query_one("#preview-content", Static)
        content.update(EMPTY_MESSAGE)

    @property
    def current(self) -> DitheredImage | None:
        return self._current
