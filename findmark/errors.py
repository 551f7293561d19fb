"""Error taxonomy shared by the search core and its hosts."""

from __future__ import annotations


class FindMarkError(RuntimeError):
    """Base class for recoverable find/bookmark failures."""


class EmptySearchTermError(FindMarkError):
    """Raised when the search term is blank or whitespace-only."""

    def __init__(self, term: str = "") -> None:
        super().__init__("Enter search text.")
        self.term = str(term or "")


class InvalidPatternError(FindMarkError):
    """Raised when a regular-expression search term does not compile."""

    def __init__(self, term: str, reason: str) -> None:
        super().__init__(f"Invalid pattern ({reason}).")
        self.term = str(term or "")
        self.reason = str(reason or "")


class SettingsStoreError(FindMarkError):
    """Raised when a settings file cannot be saved."""
