"""Owned text cache for TemplateSource."""
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path


class TextCache:
    """Caches file contents by resolved file path.

    Entries are written once, on first access, and never invalidated.  Keys
    are paths rather than logical names, so one cache can be shared by
    several sources.
    """

    def __init__(self) -> None:
        self._entries: dict[Path, str] = {}

    def __contains__(self, path: Path) -> bool:
        return path.resolve() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get_or_load(self, path: Path, load: Callable[[Path], str]) -> str:
        """Return the cached text for ``path``, calling ``load`` on a miss."""
        key = path.resolve()
        text = self._entries.get(key)
        if text is None:
            text = load(key)
            self._entries[key] = text
        return text
