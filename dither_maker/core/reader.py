"""Image loading from JPEG and PNG files, including URL downloads."""

from __future__ import annotations

import tempfile
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Callable
from urllib.parse import urlparse

from PIL import Image

SUPPORTED_SUFFIXES = {".jpg": "jpeg", ".jpeg": "jpeg", ".png": "png"}


@dataclass
class ImageInfo:
    """Metadata about the input file."""

    path: Path
    format: str  # "jpeg" or "png"
    width: int
    height: int
    mode: str  # Pillow mode of the decoded image


@dataclass
class SourceImage:
    """A decoded input image and its metadata."""

    image: Image.Image
    info: ImageInfo


def detect_format(path: Path) -> str:
    """Detect image format from file extension."""
    suffix = path.suffix.lower()
    try:
        return SUPPORTED_SUFFIXES[suffix]
    except KeyError:
        raise ValueError(
            f"Unsupported format: {suffix or '(none)'}. Please use a JPEG or PNG image."
        ) from None


def is_url(path: str) -> bool:
    """Check if the input looks like an HTTP(S) URL."""
    try:
        parsed = urlparse(str(path))
        return parsed.scheme in ("http", "https")
    except ValueError:
        return False


def _guess_extension_from_url(url: str) -> str:
    """Extract file extension from a URL path."""
    parsed = urlparse(url)
    suffix = Path(parsed.path).suffix.lower()
    if suffix in SUPPORTED_SUFFIXES:
        return suffix
    # Ambiguous URLs are assumed to serve PNG
    return ".png"


def download_image(
    url: str,
    on_progress: Callable[[int, int], None] | None = None,
) -> Path:
    """Download an image from a URL to a temp file.

    Args:
        url: HTTP(S) URL to download.
        on_progress: optional callback(bytes_downloaded, total_bytes).

    Returns:
        Path to the downloaded temporary file.

    Raises:
        ValueError: if the URL is unreachable or returns nothing.
    """
    ext = _guess_extension_from_url(url)
    tmp = tempfile.NamedTemporaryFile(suffix=ext, delete=False)
    tmp_path = Path(tmp.name)

    try:
        req = urllib.request.Request(url, headers={"User-Agent": "dither-maker/0.1"})
        with urllib.request.urlopen(req, timeout=30) as resp:
            total = int(resp.headers.get("Content-Length", 0))
            downloaded = 0
            while True:
                chunk = resp.read(65536)
                if not chunk:
                    break
                tmp.write(chunk)
                downloaded += len(chunk)
                if on_progress:
                    on_progress(downloaded, total)
        tmp.close()
    except urllib.error.URLError as e:
        tmp.close()
        tmp_path.unlink(missing_ok=True)
        raise ValueError(f"Failed to download {url}: {e}") from e
    except Exception:
        tmp.close()
        tmp_path.unlink(missing_ok=True)
        raise

    if tmp_path.stat().st_size == 0:
        tmp_path.unlink(missing_ok=True)
        raise ValueError(f"Downloaded file is empty: {url}")

    return tmp_path


def load_image(path: Path) -> SourceImage:
    """Decode a local JPEG or PNG file.

    Raises:
        FileNotFoundError: if the path does not exist.
        ValueError: if the extension is unsupported.
        OSError: if Pillow cannot decode the file.
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    fmt = detect_format(path)

    with Image.open(path) as img:
        img.load()
        decoded = img.copy()

    info = ImageInfo(
        path=path,
        format=fmt,
        width=decoded.width,
        height=decoded.height,
        mode=decoded.mode,
    )
    return SourceImage(image=decoded, info=info)


def open_image(path: str | Path) -> SourceImage:
    """Open an image and return it with its metadata.

    Accepts local file paths or HTTP(S) URLs. URLs are downloaded
    to a temporary file first.
    """
    path_str = str(path)
    if is_url(path_str):
        local_path = download_image(path_str)
    else:
        local_path = Path(path_str)
    return load_image(local_path)
