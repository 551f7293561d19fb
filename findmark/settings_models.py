from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypedDict

APP_DIR_ENV = "FINDMARK_APP_DIR"
APP_DIRNAME = ".findmark"

HIGHLIGHT_COLORS: dict[str, str] = {
    "default": "#4A5C7E",
    "coral": "#FFA07A",
    "pale_green": "#98FB98",
}

HIGHLIGHT_COLOR_LABELS: dict[str, str] = {
    "default": "Default",
    "coral": "Coral",
    "pale_green": "Pale Green",
}


class SearchSettings(TypedDict, total=False):
    match_case: bool
    whole_word: bool
    use_regex: bool
    last_term: str
    highlight_color: str
    max_results: int


class BookmarkSettings(TypedDict, total=False):
    persist: bool
    items: list[dict]


class AppSettings(TypedDict, total=False):
    search: SearchSettings
    bookmarks: BookmarkSettings
    keybindings: dict[str, str]


DEFAULT_KEYBINDINGS: dict[str, str] = {
    "action.find_all": "Ctrl+Shift+F",
    "action.clear_marks": "Ctrl+Shift+M",
    "action.toggle_bookmark": "Ctrl+F2",
    "action.next_bookmark": "F2",
    "action.prev_bookmark": "Shift+F2",
    "action.clear_bookmarks": "Ctrl+Shift+F2",
}


@dataclass(frozen=True)
class SettingsPaths:
    app_dir: Path
    filename: str = "settings.json"
    settings_file: Path = field(init=False)

    def __post_init__(self) -> None:
        app_dir = Path(self.app_dir).expanduser().resolve()
        object.__setattr__(self, "app_dir", app_dir)
        object.__setattr__(self, "settings_file", app_dir / self.filename)

    @classmethod
    def default(cls) -> "SettingsPaths":
        override = os.environ.get(APP_DIR_ENV, "").strip()
        if override:
            return cls(Path(override))
        return cls(Path.home() / APP_DIRNAME)


def default_settings() -> AppSettings:
    return {
        "search": {
            "match_case": False,
            "whole_word": False,
            "use_regex": False,
            "last_term": "",
            "highlight_color": "default",
            "max_results": 20000,
        },
        "bookmarks": {
            "persist": True,
            "items": [],
        },
        "keybindings": dict(DEFAULT_KEYBINDINGS),
    }


def highlight_color_value(name: object) -> str:
    key = str(name or "").strip().lower().replace(" ", "_")
    return HIGHLIGHT_COLORS.get(key, HIGHLIGHT_COLORS["default"])
