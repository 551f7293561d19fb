"""Search and bookmark services with no Qt dependency."""

from .bookmark_store import Bookmark, BookmarkStore
from .match_formatter import DisplayRecord, format_match, format_matches, render_results_html
from .match_scanner import LineIndex, MatchRecord, ScanResult, scan_document
from .pattern_compiler import CompiledPattern, SearchOptions, compile_search_pattern, validate_search_term

__all__ = [
    "Bookmark",
    "BookmarkStore",
    "CompiledPattern",
    "DisplayRecord",
    "LineIndex",
    "MatchRecord",
    "ScanResult",
    "SearchOptions",
    "compile_search_pattern",
    "format_match",
    "format_matches",
    "render_results_html",
    "scan_document",
    "validate_search_term",
]
