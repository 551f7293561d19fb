"""Per-window find/bookmark session owned by the host application."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from findmark.errors import FindMarkError
from findmark.host import Presenter, SettingsStore, TextSource
from findmark.services.bookmark_store import Bookmark, BookmarkStore
from findmark.services.match_formatter import DisplayRecord, format_matches, render_results_html
from findmark.services.match_scanner import DEFAULT_MAX_RESULTS, LineIndex, MatchRecord, ScanResult, scan_document
from findmark.services.pattern_compiler import SearchOptions, compile_search_pattern, validate_search_term
from findmark.settings_models import HIGHLIGHT_COLORS, default_settings, highlight_color_value
from findmark.settings_store import JsonSettingsStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SearchOutcome:
    term: str
    options: SearchOptions
    scan: ScanResult
    records: list[DisplayRecord] = field(default_factory=list)

    @property
    def matches(self) -> list[MatchRecord]:
        return self.scan.matches

    @property
    def count(self) -> int:
        return len(self.scan.matches)

    def ranges(self) -> list[tuple[int, int]]:
        return self.scan.ranges()


@dataclass(frozen=True, slots=True)
class MarkLayer:
    color: str
    ranges: tuple[tuple[int, int], ...]


class FindAllSession:
    """Holds search options, results, marks and bookmarks for one host window.

    Every operation goes through the capabilities handed to the constructor;
    ``close()`` writes remembered state back to the settings store.
    """

    def __init__(
        self,
        text_source: TextSource,
        settings: SettingsStore | None = None,
        presenter: Presenter | None = None,
        *,
        bookmarks: BookmarkStore | None = None,
    ) -> None:
        self.text_source = text_source
        self.settings = settings if settings is not None else JsonSettingsStore(
            "settings.json", default_settings(), persistent=False
        )
        self.presenter = presenter
        self.bookmarks = bookmarks if bookmarks is not None else BookmarkStore()
        self.last_outcome: SearchOutcome | None = None
        self.marks: list[MarkLayer] = []
        self.closed = False

        if bookmarks is None and bool(self.settings.get("bookmarks.persist", False)):
            self.bookmarks.restore(self.settings.get("bookmarks.items", []))

    def __enter__(self) -> "FindAllSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --------- options ---------
    @property
    def options(self) -> SearchOptions:
        return SearchOptions.from_dict(self.settings.get("search", {}))

    def set_options(self, options: SearchOptions) -> None:
        for key, value in options.to_dict().items():
            self.settings.set(f"search.{key}", value)

    @property
    def last_term(self) -> str:
        return str(self.settings.get("search.last_term", "") or "")

    @property
    def highlight_color_name(self) -> str:
        name = str(self.settings.get("search.highlight_color", "default") or "default")
        return name if name in HIGHLIGHT_COLORS else "default"

    def set_highlight_color(self, name: str) -> None:
        key = str(name or "").strip().lower().replace(" ", "_")
        self.settings.set("search.highlight_color", key if key in HIGHLIGHT_COLORS else "default")

    # --------- search ---------
    def search(self, term: str, options: SearchOptions | None = None) -> SearchOutcome:
        """Find every occurrence of ``term`` in the current document.

        Raises ``EmptySearchTermError`` or ``InvalidPatternError``; either way
        the previous outcome is left in place.
        """
        opts = options if isinstance(options, SearchOptions) else self.options
        try:
            text = validate_search_term(term)
            pattern = compile_search_pattern(text, opts)
        except FindMarkError as exc:
            if self.presenter is not None:
                self.presenter.present_error(str(exc))
            raise

        self.set_options(opts)
        self.settings.set("search.last_term", text)

        source = self.text_source.document_text()
        index = LineIndex(source)
        try:
            max_results = int(self.settings.get("search.max_results", DEFAULT_MAX_RESULTS))
        except (TypeError, ValueError):
            max_results = DEFAULT_MAX_RESULTS
        scan = scan_document(
            source,
            pattern,
            line_index=index,
            locate=self.text_source.offset_to_line_column,
            max_results=max_results,
        )
        raw_lines = {m.line_number: index.line_text(m.line_number - 1) for m in scan.matches}
        outcome = SearchOutcome(
            term=text,
            options=opts,
            scan=scan,
            records=format_matches(scan.matches, raw_lines),
        )
        self.last_outcome = outcome
        logger.debug("Search %r found %d matches", text, outcome.count)

        if self.presenter is not None:
            self.presenter.present_results(outcome, self.render_outcome(outcome))
        return outcome

    def render_outcome(self, outcome: SearchOutcome) -> str:
        return render_results_html(
            outcome.records,
            outcome.term,
            outcome.options,
            highlight_color=highlight_color_value(self.highlight_color_name),
            aborted=outcome.scan.aborted,
            truncated=outcome.scan.truncated,
        )

    # --------- marks ---------
    def mark_matches(self, color_name: str | None = None) -> MarkLayer | None:
        """Highlight the last result set.

        Without a color the highlight is temporary and not kept in ``marks``.
        """
        if self.last_outcome is None:
            return None
        ranges = tuple(self.last_outcome.ranges())
        if color_name is None:
            return MarkLayer(color=highlight_color_value("default"), ranges=ranges)
        layer = MarkLayer(color=highlight_color_value(color_name), ranges=ranges)
        self.marks.append(layer)
        return layer

    def clear_marks(self) -> list[MarkLayer]:
        cleared = self.marks
        self.marks = []
        return cleared

    # --------- bookmarks ---------
    def _cursor(self, file: str | None, line: int | None) -> tuple[str, int]:
        if file is not None and line is not None:
            return str(file), int(line)
        cur_file, cur_line = self.text_source.current_cursor()
        return (str(file) if file is not None else cur_file), (int(line) if line is not None else cur_line)

    def toggle_bookmark(self, file: str | None = None, line: int | None = None) -> bool:
        target_file, target_line = self._cursor(file, line)
        return self.bookmarks.toggle(target_file, target_line)

    def navigate_bookmark(
        self,
        forward: bool = True,
        file: str | None = None,
        line: int | None = None,
    ) -> Bookmark | None:
        target_file, target_line = self._cursor(file, line)
        return self.bookmarks.navigate(target_file, target_line, forward)

    def clear_bookmarks(self) -> int:
        return self.bookmarks.clear()

    def bookmark_lines(self, file: str | None = None) -> list[int]:
        target = file if file is not None else self.text_source.current_cursor()[0]
        return self.bookmarks.lines_for_file(target)

    # --------- teardown ---------
    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if bool(self.settings.get("bookmarks.persist", False)):
            self.settings.set("bookmarks.items", self.bookmarks.snapshot())
        self.settings.save()
        self.last_outcome = None
        self.marks = []
