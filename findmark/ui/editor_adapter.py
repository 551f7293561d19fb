"""Bridges a QPlainTextEdit to the session's ``TextSource`` and draws decorations.

The session works in Python string offsets (code points); Qt document
positions count UTF-16 units. Conversion happens only in this module.
"""

from __future__ import annotations

from typing import Callable, Iterable

from PySide6.QtGui import QColor, QTextCursor, QTextFormat
from PySide6.QtWidgets import QPlainTextEdit, QTextEdit

from findmark.services.match_scanner import LineIndex
from findmark.session import MarkLayer

SEARCH_HIGHLIGHT_COLOR = QColor(74, 92, 126, 110)
BOOKMARK_LINE_COLOR = QColor(0, 100, 255, 60)
MAX_DECORATED_RANGES = 5000


def utf16_length(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


class Utf16PositionMap:
    """Code-point offset -> Qt position for one text; cheapest for ascending offsets."""

    def __init__(self, text: str):
        self._text = str(text or "")
        self._last_offset = 0
        self._last_position = 0

    def position(self, offset: int) -> int:
        target = max(0, min(int(offset), len(self._text)))
        if target < self._last_offset:
            self._last_offset = 0
            self._last_position = 0
        self._last_position += utf16_length(self._text[self._last_offset:target])
        self._last_offset = target
        return self._last_position


class EditorTextSource:
    def __init__(self, editor: QPlainTextEdit, file_path: Callable[[], str]):
        self.editor = editor
        self._file_path = file_path
        self._index: LineIndex | None = None

    def document_text(self) -> str:
        text = self.editor.toPlainText()
        self._index = LineIndex(text)
        return text

    def offset_to_line_column(self, offset: int) -> tuple[int, int]:
        """Code-point ``(line, column)`` within the last ``document_text()`` snapshot."""
        if self._index is None:
            self.document_text()
        return self._index.position_at(offset)

    def current_cursor(self) -> tuple[str, int]:
        return str(self._file_path() or ""), int(self.editor.textCursor().blockNumber())

    def select_range(self, line: int, start_col: int, end_col: int, *, end_line: int | None = None) -> None:
        """Select from ``(line, start_col)`` to ``(end_line, end_col)``.

        Lines are 1-based; columns are code-point columns as reported by the
        scanner.
        """
        doc = self.editor.document()
        start_block = doc.findBlockByNumber(max(0, int(line) - 1))
        if not start_block.isValid():
            return
        last_line = int(end_line) if end_line else int(line)
        end_block = doc.findBlockByNumber(max(0, last_line - 1))
        if not end_block.isValid():
            end_block = start_block
        start_text = start_block.text()
        end_text = end_block.text()
        start = start_block.position() + utf16_length(start_text[:max(0, int(start_col))])
        end = end_block.position() + utf16_length(end_text[:max(0, int(end_col))])

        cur = QTextCursor(doc)
        cur.setPosition(start)
        cur.setPosition(max(start, end), QTextCursor.KeepAnchor)
        self.editor.setTextCursor(cur)
        self.editor.centerCursor()

    def move_to_line(self, line: int) -> None:
        """Place the caret at the start of a 0-based line."""
        block = self.editor.document().findBlockByNumber(max(0, int(line)))
        if not block.isValid():
            return
        cur = QTextCursor(block)
        self.editor.setTextCursor(cur)
        self.editor.ensureCursorVisible()


class DecorationLayer:
    """Owns the editor's extra selections: search hits, kept marks and bookmarks."""

    def __init__(self, editor: QPlainTextEdit):
        self.editor = editor
        self._search: list[QTextEdit.ExtraSelection] = []
        self._marks: list[QTextEdit.ExtraSelection] = []
        self._bookmarks: list[QTextEdit.ExtraSelection] = []

    def _range_selections(self, ranges: Iterable[tuple[int, int]], color: QColor) -> list[QTextEdit.ExtraSelection]:
        out: list[QTextEdit.ExtraSelection] = []
        doc = self.editor.document()
        positions = Utf16PositionMap(self.editor.toPlainText())
        for start, end in list(ranges)[:MAX_DECORATED_RANGES]:
            sel = QTextEdit.ExtraSelection()
            cur = QTextCursor(doc)
            cur.setPosition(positions.position(start))
            cur.setPosition(positions.position(end), QTextCursor.KeepAnchor)
            sel.cursor = cur
            sel.format.setBackground(color)
            out.append(sel)
        return out

    def set_search_ranges(self, ranges: Iterable[tuple[int, int]]) -> None:
        self._search = self._range_selections(ranges, SEARCH_HIGHLIGHT_COLOR)
        self.rebuild()

    def add_mark_layer(self, layer: MarkLayer) -> None:
        color = QColor(layer.color)
        color.setAlpha(150)
        self._marks.extend(self._range_selections(layer.ranges, color))
        self.rebuild()

    def clear_marks(self) -> None:
        self._search = []
        self._marks = []
        self.rebuild()

    def set_bookmark_lines(self, lines: Iterable[int]) -> None:
        doc = self.editor.document()
        out: list[QTextEdit.ExtraSelection] = []
        for line in lines:
            block = doc.findBlockByNumber(int(line))
            if not block.isValid():
                continue
            sel = QTextEdit.ExtraSelection()
            sel.cursor = QTextCursor(block)
            sel.format.setBackground(BOOKMARK_LINE_COLOR)
            sel.format.setProperty(QTextFormat.FullWidthSelection, True)
            out.append(sel)
        self._bookmarks = out
        self.rebuild()

    def selection_count(self) -> int:
        return len(self._search) + len(self._marks) + len(self._bookmarks)

    def rebuild(self) -> None:
        self.editor.setExtraSelections(self._bookmarks + self._search + self._marks)
