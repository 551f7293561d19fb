from __future__ import annotations

import json
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

from findmark.errors import SettingsStoreError

logger = logging.getLogger(__name__)


def merge_defaults(data: Mapping[str, Any], defaults: Mapping[str, Any]) -> dict[str, Any]:
    """Fill missing sections and section keys from ``defaults``; stored values win."""
    merged = deepcopy(dict(defaults))
    for section, value in data.items():
        base = merged.get(section)
        if isinstance(base, dict) and isinstance(value, dict):
            base.update(deepcopy(value))
        else:
            merged[section] = deepcopy(value)
    return merged


class JsonSettingsStore:
    """JSON-backed key-value settings with defaults and dot-key access.

    With ``persistent=False`` nothing touches the disk, which is what the
    tests and throwaway sessions use.
    """

    def __init__(self, path: Path | str, defaults: Mapping[str, Any], *, persistent: bool = True) -> None:
        self.path = Path(path)
        self.defaults: dict[str, Any] = deepcopy(dict(defaults))
        self.data: dict[str, Any] = merge_defaults({}, self.defaults)
        self.dirty: bool = False
        self.last_error: str | None = None
        self.persistent: bool = bool(persistent)

    def load(self) -> dict[str, Any]:
        self.last_error = None
        if not self.persistent or not self.path.exists():
            self.data = merge_defaults({}, self.defaults)
            self.dirty = self.persistent
            return self.data

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            self.last_error = str(exc)
            logger.warning("Could not read settings file '%s': %s", self.path, exc)
            raw = {}
        if not isinstance(raw, dict):
            self.last_error = (
                f"Settings root in '{self.path}' must be a JSON object, found {type(raw).__name__}."
            )
            logger.warning(self.last_error)
            raw = {}

        self.data = merge_defaults(raw, self.defaults)
        self.dirty = False
        return self.data

    def save(self) -> None:
        if not self.persistent:
            self.dirty = False
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self.data, indent=2, sort_keys=True), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write settings file '%s': %s", self.path, exc)
            raise SettingsStoreError(f"Could not write settings file '{self.path}': {exc}") from exc
        self.dirty = False
        self.last_error = None

    def get(self, key: str, default: Any = None) -> Any:
        """Read ``"section"`` or ``"section.name"``."""
        section, _, name = str(key or "").partition(".")
        value = self.data.get(section, default)
        if not name:
            return value
        if not isinstance(value, dict):
            return default
        return value.get(name, default)

    def set(self, key: str, value: Any) -> bool:
        section, _, name = str(key or "").partition(".")
        if not section:
            raise ValueError("Key cannot be empty.")
        if self.get(key) == value:
            return False
        if name:
            if not isinstance(self.data.get(section), dict):
                self.data[section] = {}
            self.data[section][name] = deepcopy(value)
        else:
            self.data[section] = deepcopy(value)
        self.dirty = True
        return True

    def restore_defaults(self) -> None:
        self.data = deepcopy(self.defaults)
        self.dirty = True

    def snapshot(self) -> dict[str, Any]:
        return deepcopy(self.data)
