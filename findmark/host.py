"""Capability interfaces the session calls into its host through."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from findmark.services.match_scanner import LineIndex

if TYPE_CHECKING:
    from findmark.session import SearchOutcome


@runtime_checkable
class TextSource(Protocol):
    def document_text(self) -> str: ...

    def offset_to_line_column(self, offset: int) -> tuple[int, int]: ...

    def current_cursor(self) -> tuple[str, int]: ...


@runtime_checkable
class SettingsStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> bool: ...

    def save(self) -> None: ...


@runtime_checkable
class Presenter(Protocol):
    def present_results(self, outcome: "SearchOutcome", page_html: str) -> None: ...

    def present_error(self, message: str) -> None: ...


class StringTextSource:
    """In-memory ``TextSource`` over a plain string."""

    def __init__(self, text: str = "", *, file: str = "untitled", line: int = 0) -> None:
        self.file = str(file or "untitled")
        self.line = int(line)
        self.set_text(text)

    def set_text(self, text: str) -> None:
        self._text = str(text or "")
        self._index = LineIndex(self._text)

    def move_cursor(self, line: int, file: str | None = None) -> None:
        self.line = int(line)
        if file:
            self.file = str(file)

    def document_text(self) -> str:
        return self._text

    def offset_to_line_column(self, offset: int) -> tuple[int, int]:
        return self._index.position_at(offset)

    def current_cursor(self) -> tuple[str, int]:
        return self.file, self.line
