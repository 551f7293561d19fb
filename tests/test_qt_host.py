"""
Tests for the PySide6 host: results widget, editor adapter and window wiring.
"""

import pytest

pytest.importorskip("PySide6.QtWidgets")

from PySide6.QtCore import QUrl
from PySide6.QtWidgets import QPlainTextEdit

from findmark.errors import InvalidPatternError
from findmark.services.pattern_compiler import SearchOptions
from findmark.session import FindAllSession
from findmark.ui.editor_adapter import DecorationLayer, EditorTextSource
from findmark.ui.main_window import FindMarkWindow
from findmark.ui.widgets.find_all_results import FindAllResultsWidget
from findmark.ui.widgets.find_bar import FindAllBar


TEXT = "first foo\n    second Foo line\nthird\n"


@pytest.fixture
def editor(qapp):
    ed = QPlainTextEdit()
    ed.setPlainText(TEXT)
    yield ed
    ed.deleteLater()


@pytest.fixture
def text_source(editor):
    return EditorTextSource(editor, lambda: "/tmp/sample.txt")


class TestEditorTextSource:
    def test_offset_mapping_matches_document_blocks(self, text_source):
        assert text_source.offset_to_line_column(0) == (0, 0)
        assert text_source.offset_to_line_column(10) == (1, 0)
        assert text_source.offset_to_line_column(21) == (1, 11)

    def test_cursor_and_selection(self, text_source, editor):
        text_source.select_range(2, 11, 14)
        cur = editor.textCursor()
        assert cur.selectedText() == "Foo"
        assert text_source.current_cursor() == ("/tmp/sample.txt", 1)

    def test_move_to_line(self, text_source):
        text_source.move_to_line(2)
        assert text_source.current_cursor()[1] == 2

    def test_decorations(self, editor, text_source, memory_settings):
        layer = DecorationLayer(editor)
        session = FindAllSession(text_source, memory_settings)
        outcome = session.search("foo")
        layer.set_search_ranges(outcome.ranges())
        layer.add_mark_layer(session.mark_matches("coral"))
        layer.set_bookmark_lines([0, 2, 99])
        assert layer.selection_count() == 6
        assert len(editor.extraSelections()) == 6
        layer.clear_marks()
        assert len(editor.extraSelections()) == 2


class TestNonBmpText:
    """Characters outside the BMP take two Qt positions but one Python offset."""

    EMOJI_TEXT = "\U0001F600 foo\nbar foo"

    @pytest.fixture
    def emoji_editor(self, qapp):
        ed = QPlainTextEdit()
        ed.setPlainText(self.EMOJI_TEXT)
        yield ed
        ed.deleteLater()

    @pytest.fixture
    def emoji_source(self, emoji_editor):
        return EditorTextSource(emoji_editor, lambda: "/tmp/emoji.txt")

    def test_record_columns_are_code_points(self, emoji_source, memory_settings):
        outcome = FindAllSession(emoji_source, memory_settings).search("foo")
        assert [(r.line_number, r.match_start_col, r.match_end_col) for r in outcome.records] == [
            (1, 2, 5),
            (2, 4, 7),
        ]
        assert emoji_source.offset_to_line_column(10) == (1, 4)

    def test_highlights_cover_the_match(self, emoji_editor, emoji_source, memory_settings):
        outcome = FindAllSession(emoji_source, memory_settings).search("foo")
        layer = DecorationLayer(emoji_editor)
        layer.set_search_ranges(outcome.ranges())
        assert [sel.cursor.selectedText() for sel in emoji_editor.extraSelections()] == ["foo", "foo"]

    def test_select_range_uses_code_point_columns(self, emoji_editor, emoji_source, memory_settings):
        outcome = FindAllSession(emoji_source, memory_settings).search("foo")
        first = outcome.records[0]
        emoji_source.select_range(first.line_number, first.match_start_col, first.match_end_col)
        assert emoji_editor.textCursor().selectedText() == "foo"
        emoji_source.select_range(2, 4, 7)
        assert emoji_editor.textCursor().selectedText() == "foo"

    def test_select_range_spanning_lines(self, emoji_editor, emoji_source):
        emoji_source.select_range(1, 2, 3, end_line=2)
        assert emoji_editor.textCursor().selectedText() == "foo\u2029bar"


class TestResultsWidget:
    def test_presents_results_and_emits_navigation(self, qapp, text_source, memory_settings):
        widget = FindAllResultsWidget()
        session = FindAllSession(text_source, memory_settings, widget)
        session.search("foo", SearchOptions())
        assert widget.summary_text() == 'Found 2 matches for "foo"'
        assert len(widget.records()) == 2

        emitted = []
        widget.resultActivated.connect(lambda *args: emitted.append(args))
        widget.activate_record(1)
        widget._on_anchor_clicked(QUrl("findmark:1:6:9"))
        widget._on_anchor_clicked(QUrl("https://example.com"))
        assert emitted == [(2, 11, 14), (1, 6, 9)]

    def test_error_clears_results(self, qapp, text_source, memory_settings):
        widget = FindAllResultsWidget()
        session = FindAllSession(text_source, memory_settings, widget)
        session.search("foo")
        with pytest.raises(InvalidPatternError):
            session.search("(", SearchOptions(use_regex=True))
        assert widget.records() == []
        assert widget.summary_text().startswith("Invalid pattern")


class TestFindBar:
    def test_options_round_trip(self, qapp):
        bar = FindAllBar()
        opts = SearchOptions(match_case=True, whole_word=False, use_regex=True)
        bar.set_options(opts)
        assert bar.options() == opts

    def test_request_emits_term_options_and_color(self, qapp):
        bar = FindAllBar()
        bar.set_term("needle")
        bar.color_combo.setCurrentIndex(bar.color_combo.findData("coral"))
        emitted = []
        bar.findRequested.connect(lambda *args: emitted.append(args))
        bar.request_find()
        assert emitted == [("needle", SearchOptions(), "coral")]


class TestWindow:
    @pytest.fixture
    def window(self, qapp, memory_settings, tmp_path):
        path = tmp_path / "doc.txt"
        path.write_text(TEXT, encoding="utf-8")
        win = FindMarkWindow(memory_settings)
        assert win.open_file(str(path))
        yield win
        win.session.close()
        win.deleteLater()

    def test_find_all_and_navigate(self, window):
        window.controller.run_find_all("foo", SearchOptions(), "pale_green")
        assert window.session.last_outcome.count == 2
        assert window.session.marks
        window.controller.navigate_to_result(2, 11, 14)
        assert window.editor.textCursor().selectedText() == "Foo"

    def test_invalid_pattern_reported_in_status_bar(self, window):
        window.controller.run_find_all("(", SearchOptions(use_regex=True), "")
        assert "Invalid pattern" in window.statusBar().currentMessage()

    def test_invalid_pattern_clears_previous_highlights(self, window):
        window.controller.run_find_all("foo", SearchOptions(), "")
        assert window.decorations.selection_count() == 2
        window.controller.run_find_all("(", SearchOptions(use_regex=True), "")
        assert window.decorations.selection_count() == 0
        assert window.editor.extraSelections() == []

    def test_invalid_pattern_keeps_kept_marks(self, window):
        window.controller.run_find_all("foo", SearchOptions(), "coral")
        window.controller.run_find_all("(", SearchOptions(use_regex=True), "")
        assert window.decorations.selection_count() == 2

    def test_bookmark_commands(self, window):
        window.text_source.move_to_line(2)
        window.controller.toggle_bookmark()
        window.text_source.move_to_line(0)
        window.controller.toggle_bookmark()
        window.controller.next_bookmark()
        assert window.text_source.current_cursor()[1] == 2
        window.controller.next_bookmark()
        assert window.text_source.current_cursor()[1] == 0
        window.controller.clear_bookmarks()
        assert window.session.bookmark_lines() == []
        window.controller.next_bookmark()
        assert window.statusBar().currentMessage() == "No bookmarks."
