"""PySide6 host for the Find All session."""
