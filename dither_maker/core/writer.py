"""Save dithered images as PNG."""

from __future__ import annotations

from pathlib import Path

from dither_maker.core.processor import DitheredImage

DEFAULT_OUTPUT_DIR = Path("output")


def default_output_path(
    method: str, mode: str, output_dir: Path = DEFAULT_OUTPUT_DIR
) -> Path:
    """Build the default output path, e.g. output/output_atkinson_mono.png."""
    return output_dir / f"output_{method}_{mode}.png"


def save_png(result: DitheredImage, output_path: Path) -> Path:
    """Write a dithered image to a PNG file.

    Parent directories are created as needed.

    Raises:
        ValueError: if output_path does not end in .png.
    """
    suffix = output_path.suffix.lower()
    if suffix != ".png":
        raise ValueError(f"Unsupported output format: {suffix or '(none)'}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    result.image.save(str(output_path), format="PNG")
    return output_path
