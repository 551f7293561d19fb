"""In-document Find All and line bookmarks for a plain-text editor."""

from .errors import EmptySearchTermError, FindMarkError, InvalidPatternError, SettingsStoreError
from .host import Presenter, SettingsStore, StringTextSource, TextSource
from .services import Bookmark, BookmarkStore, SearchOptions
from .session import FindAllSession, MarkLayer, SearchOutcome

__version__ = "0.1.0"

__all__ = [
    "Bookmark",
    "BookmarkStore",
    "EmptySearchTermError",
    "FindAllSession",
    "FindMarkError",
    "InvalidPatternError",
    "MarkLayer",
    "Presenter",
    "SearchOptions",
    "SearchOutcome",
    "SettingsStore",
    "SettingsStoreError",
    "StringTextSource",
    "TextSource",
]
