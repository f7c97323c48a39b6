"""Main Textual application for the dither_maker TUI."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Callable

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import (
    Button,
    Footer,
    Header,
    Input,
    Label,
    Static,
)
from textual.worker import get_current_worker

from dither_maker.core.processor import DitheredImage, Settings, process_image
from dither_maker.core.reader import SourceImage, open_image
from dither_maker.core.writer import default_output_path, save_png
from dither_maker.tui.controls import ControlPanel
from dither_maker.tui.preview import DitherPreview
from dither_maker.utils.cache import ResultCache
from dither_maker.utils.terminal import fit_to_terminal


class SaveScreen(ModalScreen[str | None]):
    """Modal screen for saving output."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", priority=True)]

    def action_cancel(self) -> None:
        self.dismiss(None)

    DEFAULT_CSS = """
    SaveScreen {
        align: center middle;
    }

    SaveScreen #save-dialog {
        width: 60;
        height: 12;
        background: $surface;
        border: thick $accent;
        padding: 1 2;
    }

    SaveScreen #save-title {
        text-style: bold;
        margin-bottom: 1;
    }

    SaveScreen Input {
        margin: 1 0;
    }

    SaveScreen .button-row {
        margin-top: 1;
        align: center middle;
        height: 3;
    }

    SaveScreen Button {
        margin: 0 1;
    }
    """

    def __init__(self, default_path: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self._default_path = default_path

    def compose(self) -> ComposeResult:
        with Vertical(id="save-dialog"):
            yield Static("Save Output", id="save-title")
            yield Label("Output PNG path:")
            yield Input(
                value=self._default_path,
                placeholder="output/output.png",
                id="save-path",
            )
            with Horizontal(classes="button-row"):
                yield Button("Save", variant="primary", id="btn-save")
                yield Button("Cancel", variant="default", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-save":
            path_input = self.query_one("#save-path", Input)
            self.dismiss(path_input.value or None)
        elif event.button.id == "btn-cancel":
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value or None)


class OpenFileScreen(ModalScreen[str | None]):
    """Simple modal for entering a file path."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", priority=True)]

    def action_cancel(self) -> None:
        self.dismiss(None)

    DEFAULT_CSS = """
    OpenFileScreen {
        align: center middle;
    }

    OpenFileScreen #open-dialog {
        width: 60;
        height: 10;
        background: $surface;
        border: thick $accent;
        padding: 1 2;
    }

    OpenFileScreen #open-title {
        text-style: bold;
        margin-bottom: 1;
    }

    OpenFileScreen .button-row {
        margin-top: 1;
        align: center middle;
        height: 3;
    }

    OpenFileScreen Button {
        margin: 0 1;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical(id="open-dialog"):
            yield Static("Open File", id="open-title")
            yield Input(placeholder="Path or URL to a JPEG or PNG image...", id="file-input")
            with Horizontal(classes="button-row"):
                yield Button("Open", variant="primary", id="btn-open")
                yield Button("Cancel", variant="default", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-open":
            inp = self.query_one("#file-input", Input)
            self.dismiss(inp.value if inp.value else None)
        elif event.button.id == "btn-cancel":
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value if event.value else None)


class DitherMakerApp(App):
    """Main TUI application."""

    TITLE = "dither_maker"
    CSS = """
    #main-area {
        height: 1fr;
        width: 1fr;
    }

    #preview-container {
        width: 1fr;
        height: 1fr;
    }

    #status-bar {
        height: 1;
        background: $panel;
        padding: 0 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("s", "save", "Save", priority=True),
        Binding("o", "open_file", "Open", priority=True),
        Binding("tab", "toggle_panel", "Toggle Panel"),
    ]

    def __init__(self, input_path: str | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self._input_path = input_path
        self._source: SourceImage | None = None
        self._cache = ResultCache(max_size=16)
        self._settings = Settings()
        self._preview_width: int | None = None
        self._panel_visible = True

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-area"):
            with Vertical(id="preview-container"):
                yield DitherPreview()
            yield ControlPanel(self._settings, id="control-panel")
        yield Static("Ready", id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        if self._input_path:
            self._load_file(self._input_path)

    def _load_file(self, path: str) -> None:
        """Load an image file."""
        try:
            self._source = open_image(path)
        except (ValueError, OSError) as e:
            self._update_status(f"Error: {e}")
            return

        info = self._source.info
        self.title = f"dither_maker - {info.path.name}"

        # Size the preview to the space available for it
        preview = self.query_one(DitherPreview)
        pw = preview.size.width or 80
        ph = preview.size.height or 24
        self._preview_width, _ = fit_to_terminal(
            info.width, info.height, max_width=pw - 2, max_height=ph - 2
        )

        self._cache.clear()
        self._update_status(f"Loaded {info.path.name} ({info.width}x{info.height})")
        self._render_preview()

    def _update_status(self, text: str) -> None:
        status = self.query_one("#status-bar", Static)
        status.update(text)

    def _preview_settings(self) -> Settings:
        return replace(self._settings, width=self._preview_width)

    @work(thread=True, exclusive=True, group="preview")
    def _render_preview(self) -> None:
        """Dither the preview in a background thread."""
        if self._source is None:
            return

        worker = get_current_worker()
        source_key = str(self._source.info.path)
        settings = self._preview_settings()
        cache_key = settings.hash()

        cached = self._cache.get(source_key, cache_key)
        if cached is not None:
            if not worker.is_cancelled:
                self.call_from_thread(self._display_result, cached, cache_key)
            return

        self.call_from_thread(self._update_status, "Dithering...")
        try:
            result = self._dither_preview(
                self._source, settings, lambda: worker.is_cancelled
            )
        except ValueError as e:
            if not worker.is_cancelled:
                self.call_from_thread(self._update_status, f"Error: {e}")
            return

        if result is not None and not worker.is_cancelled:
            self.call_from_thread(self._display_result, result, cache_key)

    def _dither_preview(
        self,
        source: SourceImage,
        settings: Settings,
        is_cancelled: Callable[[], bool],
    ) -> DitheredImage | None:
        """Dither and cache a preview. Returns None if cancelled meanwhile."""
        result = process_image(source.image, settings)
        if is_cancelled():
            return None
        self._cache.put(str(source.info.path), settings.hash(), result)
        return result

    def _display_result(self, result: DitheredImage, settings_hash: str) -> None:
        """Display a dithered result (called on main thread)."""
        preview = self.query_one(DitherPreview)
        preview.update_result(result, settings_hash)
        self._update_status(
            f"{result.method} / {result.mode} ({result.width}x{result.height} preview)"
        )

    # --- Actions ---

    def action_save(self) -> None:
        if self._source is None:
            self._update_status("No file loaded")
            return
        default_path = default_output_path(self._settings.method.value, self._settings.mode_name)
        self.push_screen(SaveScreen(str(default_path)), self._on_save_result)

    def _on_save_result(self, path: str | None) -> None:
        if path is None:
            return
        self._do_save(path)

    @work(thread=True, exclusive=True, group="save")
    def _do_save(self, output_path: str) -> None:
        """Dither at full resolution and save in a background thread."""
        if self._source is None:
            return

        worker = get_current_worker()
        settings = self._settings
        out = Path(output_path)

        self.call_from_thread(self._update_status, "Saving...")
        try:
            result = process_image(self._source.image, settings)
            save_png(result, out)
        except (ValueError, OSError) as e:
            if not worker.is_cancelled:
                self.call_from_thread(self._update_status, f"Save error: {e}")
            return

        if not worker.is_cancelled:
            self.call_from_thread(self._update_status, f"Saved to {out}")

    def action_open_file(self) -> None:
        self.push_screen(OpenFileScreen(), self._on_file_selected)

    def _on_file_selected(self, path: str | None) -> None:
        if path:
            self._load_file(path)

    def action_toggle_panel(self) -> None:
        panel = self.query_one("#control-panel", ControlPanel)
        self._panel_visible = not self._panel_visible
        panel.display = self._panel_visible

    # --- Message handlers ---

    def on_control_panel_settings_changed(
        self, event: ControlPanel.SettingsChanged
    ) -> None:
        self._settings = event.settings
        if self._source is not None:
            self._render_preview()


def run_app(input_path: str | None = None) -> None:
    """Launch the TUI application."""
    app = DitherMakerApp(input_path=input_path)
    app.run()
