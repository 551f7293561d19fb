from __future__ import annotations

from PySide6.QtCore import QEvent, Qt, Signal
from PySide6.QtWidgets import QCheckBox, QComboBox, QHBoxLayout, QLineEdit, QPushButton, QWidget

from findmark.services.pattern_compiler import SearchOptions
from findmark.settings_models import HIGHLIGHT_COLOR_LABELS


class FindAllBar(QWidget):
    # term, SearchOptions, mark color name ("" for a temporary highlight)
    findRequested = Signal(str, object, str)

    TEMPORARY_LABEL = "Temporary"

    def __init__(self, parent=None):
        super().__init__(parent)
        self.find_edit = QLineEdit(self)
        self.find_edit.setPlaceholderText("Find all in current file")
        self.find_edit.installEventFilter(self)

        self.case_box = QCheckBox("Case", self)
        self.case_box.setToolTip("Case sensitive search")
        self.word_box = QCheckBox("Word", self)
        self.word_box.setToolTip("Match whole words only")
        self.regex_box = QCheckBox("Regex", self)
        self.regex_box.setToolTip("Use regular expressions")

        self.color_combo = QComboBox(self)
        self.color_combo.addItem(self.TEMPORARY_LABEL, "")
        for key, label in HIGHLIGHT_COLOR_LABELS.items():
            self.color_combo.addItem(label, key)
        self.color_combo.setToolTip("Mark color (temporary highlights are not kept)")

        self.find_btn = QPushButton("Find All", self)
        self.find_btn.clicked.connect(self.request_find)

        lay = QHBoxLayout(self)
        lay.setContentsMargins(6, 4, 6, 4)
        lay.setSpacing(6)
        lay.addWidget(self.find_edit, 2)
        lay.addWidget(self.case_box)
        lay.addWidget(self.word_box)
        lay.addWidget(self.regex_box)
        lay.addWidget(self.color_combo)
        lay.addWidget(self.find_btn)

    def eventFilter(self, obj, event):
        if obj is self.find_edit and event.type() == QEvent.KeyPress:
            if event.key() in (Qt.Key_Return, Qt.Key_Enter):
                self.request_find()
                return True
        return super().eventFilter(obj, event)

    def options(self) -> SearchOptions:
        return SearchOptions(
            match_case=self.case_box.isChecked(),
            whole_word=self.word_box.isChecked(),
            use_regex=self.regex_box.isChecked(),
        )

    def set_options(self, options: SearchOptions) -> None:
        for box, value in (
            (self.case_box, options.match_case),
            (self.word_box, options.whole_word),
            (self.regex_box, options.use_regex),
        ):
            blocker = box.blockSignals(True)
            box.setChecked(bool(value))
            box.blockSignals(blocker)

    def set_term(self, term: str) -> None:
        self.find_edit.setText(str(term or ""))

    def mark_color(self) -> str:
        return str(self.color_combo.currentData() or "")

    def focus_find(self) -> None:
        self.find_edit.setFocus()
        self.find_edit.selectAll()

    def request_find(self) -> None:
        self.findRequested.emit(self.find_edit.text(), self.options(), self.mark_color())
