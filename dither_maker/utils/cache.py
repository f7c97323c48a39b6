"""LRU cache of dithered previews keyed by (source, settings_hash)."""

from __future__ import annotations

from collections import OrderedDict

from dither_maker.core.processor import DitheredImage


class ResultCache:
    """Simple LRU cache for dithered images.

    Keys are (source_key, settings_hash) tuples, where source_key
    identifies the loaded file.
    """

    def __init__(self, max_size: int = 16) -> None:
        self._max_size = max_size
        self._cache: OrderedDict[tuple[str, str], DitheredImage] = OrderedDict()

    def get(self, source_key: str, settings_hash: str) -> DitheredImage | None:
        """Get a cached result, or None if not present."""
        key = (source_key, settings_hash)
        if key in self._cache:
            self._cache.move_to_end(key)
            return self._cache[key]
        return None

    def put(self, source_key: str, settings_hash: str, value: DitheredImage) -> None:
        """Cache a dithered result, evicting the least recently used."""
        key = (source_key, settings_hash)
        if key in self._cache:
            self._cache.move_to_end(key)
        elif len(self._cache) >= self._max_size:
            self._cache.popitem(last=False)
        self._cache[key] = value

    def clear(self) -> None:
        """Clear the entire cache."""
        self._cache.clear()

    @property
    def size(self) -> int:
        return len(self._cache)
