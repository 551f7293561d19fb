"""Wires Find All and bookmark commands between the window, session and editor."""

from __future__ import annotations

import logging
import os

from PySide6.QtCore import QObject

from findmark.errors import FindMarkError
from findmark.services.bookmark_store import Bookmark
from findmark.services.pattern_compiler import SearchOptions

logger = logging.getLogger(__name__)


class FindAllController(QObject):
    def __init__(self, window, session, text_source, decorations, parent=None):
        super().__init__(parent or window)
        self.window = window
        self.session = session
        self.text_source = text_source
        self.decorations = decorations

    def _status(self, message: str, timeout_ms: int = 2200) -> None:
        self.window.statusBar().showMessage(message, timeout_ms)

    def open_find_all(self) -> None:
        bar = self.window.find_bar
        bar.set_options(self.session.options)
        cur = self.text_source.editor.textCursor()
        selected = str(cur.selectedText() or "").replace("\u2029", "\n").strip()
        if selected and "\n" not in selected:
            bar.set_term(selected)
        elif not bar.find_edit.text():
            bar.set_term(self.session.last_term)
        bar.focus_find()

    def run_find_all(self, term: str, options: object, color_name: str = "") -> None:
        opts = options if isinstance(options, SearchOptions) else self.session.options
        try:
            outcome = self.session.search(term, opts)
        except FindMarkError as exc:
            self.decorations.set_search_ranges([])
            self._status(f"Find All: {exc}", 3200)
            return

        self.window.show_results_dock(outcome.term)
        if color_name:
            self.session.set_highlight_color(color_name)
            layer = self.session.mark_matches(color_name)
            if layer is not None:
                self.decorations.add_mark_layer(layer)
        self.decorations.set_search_ranges(outcome.ranges())

        summary = f"{outcome.count} match(es) for '{outcome.term}'."
        if outcome.scan.aborted:
            summary += " Search stopped early."
        self._status(summary)

    def navigate_to_result(self, line: int, start_col: int, end_col: int) -> None:
        end_line = line
        outcome = self.session.last_outcome
        if outcome is not None:
            for rec in outcome.records:
                if rec.line_number == line and rec.match_start_col == start_col:
                    end_line = rec.end_line_number
                    break
        self.text_source.select_range(line, start_col, end_col, end_line=end_line)
        self.text_source.editor.setFocus()

    def clear_marks(self) -> None:
        cleared = self.session.clear_marks()
        self.decorations.clear_marks()
        self._status(f"Cleared {len(cleared)} mark layer(s).")

    def refresh_bookmarks(self) -> None:
        self.decorations.set_bookmark_lines(self.session.bookmark_lines())

    def toggle_bookmark(self) -> None:
        added = self.session.toggle_bookmark()
        self.refresh_bookmarks()
        _file, line = self.text_source.current_cursor()
        self._status(f"Bookmark {'added' if added else 'removed'} at line {line + 1}.")

    def next_bookmark(self) -> None:
        self._go_to_bookmark(self.session.navigate_bookmark(True))

    def prev_bookmark(self) -> None:
        self._go_to_bookmark(self.session.navigate_bookmark(False))

    def _go_to_bookmark(self, bookmark: Bookmark | None) -> None:
        if bookmark is None:
            self._status("No bookmarks.")
            return
        current_file, _line = self.text_source.current_cursor()
        if bookmark.file != current_file:
            if not os.path.isfile(bookmark.file):
                logger.info("Skipping bookmark in missing file %s", bookmark.file)
                self._status(f"Bookmarked file not found: {bookmark.file}", 3200)
                return
            if not self.window.open_file(bookmark.file):
                return
        self.text_source.move_to_line(bookmark.line)
        self.refresh_bookmarks()

    def clear_bookmarks(self) -> None:
        removed = self.session.clear_bookmarks()
        self.refresh_bookmarks()
        self._status(f"Cleared {removed} bookmark(s).")
