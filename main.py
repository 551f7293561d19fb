import logging
import os
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from findmark.settings_models import SettingsPaths, default_settings
from findmark.settings_store import JsonSettingsStore
from findmark.ui.main_window import FindMarkWindow

LOG_LEVEL_ENV = "FINDMARK_LOG_LEVEL"


def _configure_logging() -> None:
    level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").strip().upper() or "WARNING"
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_settings() -> JsonSettingsStore:
    paths = SettingsPaths.default()
    store = JsonSettingsStore(paths.settings_file, default_settings())
    store.load()
    return store


def _startup_file(argv: list[str]) -> str | None:
    for arg in argv:
        candidate = Path(arg).expanduser()
        if candidate.is_file():
            return str(candidate)
    return None


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    _configure_logging()

    app = QApplication([sys.argv[0], *args])
    app.setStyle("Fusion")
    app.setApplicationName(FindMarkWindow.APP_NAME)

    window = FindMarkWindow(_load_settings())
    startup_file = _startup_file(args)
    if startup_file:
        window.open_file(startup_file)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
