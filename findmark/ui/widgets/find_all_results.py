from __future__ import annotations

from PySide6.QtCore import QUrl, Signal
from PySide6.QtWidgets import QHBoxLayout, QLabel, QTextBrowser, QVBoxLayout, QWidget

from findmark.services.match_formatter import DisplayRecord, parse_navigation_href, summary_text


class FindAllResultsWidget(QWidget):
    """Results list for one Find All run; implements the session's ``Presenter``."""

    resultActivated = Signal(int, int, int)  # line, start col, end col

    def __init__(self, parent=None):
        super().__init__(parent)
        self._records: list[DisplayRecord] = []

        self.status_label = QLabel("No search results.", self)

        self.browser = QTextBrowser(self)
        self.browser.setOpenLinks(False)
        self.browser.setOpenExternalLinks(False)
        self.browser.anchorClicked.connect(self._on_anchor_clicked)

        top = QHBoxLayout()
        top.setContentsMargins(0, 0, 0, 0)
        top.addWidget(self.status_label, 1)

        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addLayout(top)
        lay.addWidget(self.browser)

    def clear_results(self) -> None:
        self._records = []
        self.browser.clear()
        self.status_label.setText("No search results.")

    def present_results(self, outcome, page_html: str) -> None:
        self._records = list(outcome.records)
        self.browser.setHtml(str(page_html or ""))
        self.status_label.setText(
            summary_text(
                len(self._records),
                outcome.term,
                aborted=outcome.scan.aborted,
                truncated=outcome.scan.truncated,
            )
        )

    def present_error(self, message: str) -> None:
        self._records = []
        self.browser.clear()
        self.status_label.setText(str(message or "Search failed."))

    def records(self) -> list[DisplayRecord]:
        return list(self._records)

    def summary_text(self) -> str:
        return str(self.status_label.text() or "").strip()

    def activate_record(self, row: int) -> None:
        if row < 0 or row >= len(self._records):
            return
        record = self._records[row]
        self.resultActivated.emit(record.line_number, record.match_start_col, record.match_end_col)

    def _on_anchor_clicked(self, url: QUrl) -> None:
        target = parse_navigation_href(f"{url.scheme()}:{url.path()}")
        if target is None:
            return
        self.resultActivated.emit(*target)
