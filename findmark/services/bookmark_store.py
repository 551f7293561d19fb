"""Per-file line bookmarks with circular navigation."""

from __future__ import annotations

import bisect
import logging
import threading
from dataclasses import dataclass
from typing import Any, Iterable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Bookmark:
    file: str
    line: int

    def to_dict(self) -> dict:
        return {"file": self.file, "line": self.line}


def _sort_key(bookmark: Bookmark) -> tuple[int, str]:
    return bookmark.line, bookmark.file


class BookmarkStore:
    """Flat, insertion-ordered bookmark collection.

    Navigation never looks at insertion order: it works on a file-filtered
    view sorted by line, falling back to every file when the current file
    has no bookmarks.
    """

    def __init__(self, bookmarks: Iterable[Bookmark] = ()) -> None:
        self._lock = threading.RLock()
        self._items: list[Bookmark] = []
        for bookmark in bookmarks:
            if bookmark not in self._items:
                self._items.append(bookmark)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, bookmark: object) -> bool:
        with self._lock:
            return bookmark in self._items

    def bookmarks(self) -> list[Bookmark]:
        with self._lock:
            return list(self._items)

    def has(self, file: str, line: int) -> bool:
        return Bookmark(str(file), int(line)) in self

    def toggle(self, file: str, line: int) -> bool:
        """Add the bookmark, or remove it if present. Returns True when added."""
        target = Bookmark(str(file), int(line))
        with self._lock:
            if target in self._items:
                self._items.remove(target)
                return False
            self._items.append(target)
            return True

    def clear(self) -> int:
        with self._lock:
            removed = len(self._items)
            self._items = []
        return removed

    def lines_for_file(self, file: str) -> list[int]:
        key = str(file)
        with self._lock:
            return sorted(b.line for b in self._items if b.file == key)

    def _universe(self, file: str) -> list[Bookmark]:
        key = str(file)
        scoped = [b for b in self._items if b.file == key]
        if not scoped:
            scoped = list(self._items)
        scoped.sort(key=_sort_key)
        return scoped

    def navigate(self, current_file: str, current_line: int, forward: bool = True) -> Bookmark | None:
        with self._lock:
            ordered = self._universe(current_file)
        if not ordered:
            logger.debug("No bookmarks to navigate to")
            return None

        lines = [b.line for b in ordered]
        line = int(current_line)
        if forward:
            idx = bisect.bisect_right(lines, line)
            if idx >= len(ordered):
                idx = 0
        else:
            idx = bisect.bisect_left(lines, line) - 1
            if idx < 0:
                idx = len(ordered) - 1
        return ordered[idx]

    def snapshot(self) -> list[dict]:
        with self._lock:
            return [b.to_dict() for b in self._items]

    def restore(self, items: Any) -> int:
        """Replace the collection from ``snapshot()`` output; returns the count kept."""
        restored: list[Bookmark] = []
        if isinstance(items, list):
            for item in items:
                if not isinstance(item, dict):
                    continue
                file = str(item.get("file") or "").strip()
                try:
                    line = int(item.get("line"))
                except (TypeError, ValueError):
                    continue
                if not file or line < 0:
                    continue
                bookmark = Bookmark(file, line)
                if bookmark not in restored:
                    restored.append(bookmark)
        with self._lock:
            self._items = restored
        return len(restored)
