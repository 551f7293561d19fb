import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from findmark.settings_models import default_settings
from findmark.settings_store import JsonSettingsStore


@pytest.fixture
def memory_settings():
    """Settings store that never touches the disk."""
    store = JsonSettingsStore("unused.json", default_settings(), persistent=False)
    store.load()
    return store


@pytest.fixture(scope="session")
def qapp():
    widgets = pytest.importorskip("PySide6.QtWidgets")
    app = widgets.QApplication.instance() or widgets.QApplication([])
    yield app
