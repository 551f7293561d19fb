"""Turn a raw search term plus option flags into one compiled pattern."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping

from findmark.errors import EmptySearchTermError, InvalidPatternError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SearchOptions:
    match_case: bool = False
    whole_word: bool = False
    use_regex: bool = False

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "SearchOptions":
        data = payload if isinstance(payload, Mapping) else {}
        return cls(
            match_case=bool(data.get("match_case", False)),
            whole_word=bool(data.get("whole_word", False)),
            use_regex=bool(data.get("use_regex", False)),
        )

    def to_dict(self) -> dict:
        return {
            "match_case": self.match_case,
            "whole_word": self.whole_word,
            "use_regex": self.use_regex,
        }

    def labels(self) -> list[str]:
        labels: list[str] = []
        if self.match_case:
            labels.append("Match Case")
        if self.whole_word:
            labels.append("Whole Word")
        if self.use_regex:
            labels.append("Regex")
        return labels


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    term: str
    options: SearchOptions
    regex: re.Pattern[str]

    @property
    def source(self) -> str:
        return self.regex.pattern


def validate_search_term(term: object) -> str:
    text = str(term or "")
    if not text.strip():
        raise EmptySearchTermError(text)
    return text


def pattern_source(term: str, options: SearchOptions) -> str:
    if options.use_regex:
        # User expressions are used as written; whole_word does not apply.
        return term
    escaped = re.escape(term)
    if options.whole_word:
        return rf"\b{escaped}\b"
    return escaped


def compile_search_pattern(term: str, options: SearchOptions | None = None) -> CompiledPattern:
    """Compile ``term`` under ``options``.

    Raises ``EmptySearchTermError`` for a blank term and
    ``InvalidPatternError`` when a regex term does not compile.
    """
    opts = options if isinstance(options, SearchOptions) else SearchOptions()
    text = validate_search_term(term)
    flags = 0 if opts.match_case else re.IGNORECASE
    try:
        regex = re.compile(pattern_source(text, opts), flags)
    except re.error as exc:
        logger.info("Rejected search pattern %r: %s", text, exc)
        raise InvalidPatternError(text, str(exc)) from exc
    return CompiledPattern(term=text, options=opts, regex=regex)
