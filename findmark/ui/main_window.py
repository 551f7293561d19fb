from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QFontDatabase, QKeySequence
from PySide6.QtWidgets import (
    QDockWidget,
    QFileDialog,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QVBoxLayout,
    QWidget,
)

from findmark.errors import SettingsStoreError
from findmark.session import FindAllSession
from findmark.settings_models import DEFAULT_KEYBINDINGS
from findmark.settings_store import JsonSettingsStore
from findmark.ui.controllers.find_all_controller import FindAllController
from findmark.ui.editor_adapter import DecorationLayer, EditorTextSource
from findmark.ui.widgets.find_all_results import FindAllResultsWidget
from findmark.ui.widgets.find_bar import FindAllBar

logger = logging.getLogger(__name__)


class FindMarkWindow(QMainWindow):
    APP_NAME = "FindMark"
    UNTITLED = "untitled"

    def __init__(self, settings: JsonSettingsStore, parent=None):
        super().__init__(parent)
        self.settings = settings
        self.file_path: str = ""

        self.editor = QPlainTextEdit(self)
        self.editor.setFont(QFontDatabase.systemFont(QFontDatabase.FixedFont))
        self.editor.setLineWrapMode(QPlainTextEdit.NoWrap)

        self.find_bar = FindAllBar(self)

        central = QWidget(self)
        lay = QVBoxLayout(central)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.setSpacing(0)
        lay.addWidget(self.find_bar)
        lay.addWidget(self.editor, 1)
        self.setCentralWidget(central)

        self.results_widget = FindAllResultsWidget(self)
        self.results_dock = QDockWidget("Find All Results", self)
        self.results_dock.setAllowedAreas(Qt.BottomDockWidgetArea | Qt.RightDockWidgetArea)
        self.results_dock.setFeatures(
            QDockWidget.DockWidgetMovable
            | QDockWidget.DockWidgetFloatable
            | QDockWidget.DockWidgetClosable
        )
        self.results_dock.setWidget(self.results_widget)
        self.addDockWidget(Qt.RightDockWidgetArea, self.results_dock)
        self.results_dock.hide()

        self.text_source = EditorTextSource(self.editor, lambda: self.file_path or self.UNTITLED)
        self.decorations = DecorationLayer(self.editor)
        self.session = FindAllSession(self.text_source, settings, self.results_widget)
        self.controller = FindAllController(self, self.session, self.text_source, self.decorations)

        self.find_bar.findRequested.connect(self.controller.run_find_all)
        self.results_widget.resultActivated.connect(self.controller.navigate_to_result)

        self._create_actions()
        self.find_bar.set_options(self.session.options)
        self.find_bar.set_term(self.session.last_term)
        self._refresh_title()
        self.resize(1100, 720)

    def _create_actions(self) -> None:
        bindings = self.settings.get("keybindings", {})
        if not isinstance(bindings, dict):
            bindings = {}

        def make(action_id: str, text: str, slot) -> QAction:
            action = QAction(text, self)
            sequence = str(bindings.get(action_id) or DEFAULT_KEYBINDINGS.get(action_id, ""))
            if sequence:
                action.setShortcut(QKeySequence(sequence))
            action.triggered.connect(slot)
            self.addAction(action)
            return action

        file_menu = self.menuBar().addMenu("&File")
        open_action = QAction("&Open...", self)
        open_action.setShortcut(QKeySequence.Open)
        open_action.triggered.connect(self._prompt_open_file)
        file_menu.addAction(open_action)

        search_menu = self.menuBar().addMenu("&Search")
        search_menu.addAction(make("action.find_all", "Find All", self.controller.open_find_all))
        search_menu.addAction(make("action.clear_marks", "Clear Marks", self.controller.clear_marks))
        search_menu.addSeparator()
        search_menu.addAction(make("action.toggle_bookmark", "Toggle Bookmark", self.controller.toggle_bookmark))
        search_menu.addAction(make("action.next_bookmark", "Next Bookmark", self.controller.next_bookmark))
        search_menu.addAction(make("action.prev_bookmark", "Previous Bookmark", self.controller.prev_bookmark))
        search_menu.addAction(make("action.clear_bookmarks", "Clear Bookmarks", self.controller.clear_bookmarks))

    def _refresh_title(self) -> None:
        name = Path(self.file_path).name if self.file_path else self.UNTITLED
        self.setWindowTitle(f"{name} - {self.APP_NAME}")

    def _prompt_open_file(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open File", str(Path(self.file_path).parent if self.file_path else ""))
        if path:
            self.open_file(path)

    def open_file(self, path: str) -> bool:
        try:
            text = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            QMessageBox.warning(self, self.APP_NAME, f"Could not open '{path}':\n{exc}")
            return False
        self.file_path = str(Path(path).resolve())
        self.editor.setPlainText(text)
        self.decorations.clear_marks()
        self.session.clear_marks()
        self.results_widget.clear_results()
        self.controller.refresh_bookmarks()
        self._refresh_title()
        return True

    def show_results_dock(self, term: str) -> None:
        short_term = term if len(term) <= 36 else (term[:33] + "...")
        self.results_dock.setWindowTitle(f"Find All Results: {short_term}")
        self.results_dock.show()
        self.results_dock.raise_()

    def closeEvent(self, event) -> None:
        try:
            self.session.close()
        except SettingsStoreError as exc:
            logger.warning("Settings were not saved: %s", exc)
        super().closeEvent(event)
