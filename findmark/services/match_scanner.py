"""Exhaustive in-document scan producing ordered match records."""

from __future__ import annotations

import bisect
import logging
import re
from dataclasses import dataclass, field
from typing import Callable

from .pattern_compiler import CompiledPattern

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 20000

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")

OffsetLocator = Callable[[int], tuple[int, int]]


class LineIndex:
    """Maps absolute character offsets to 0-based ``(line, column)`` pairs."""

    def __init__(self, text: str) -> None:
        self._text = str(text or "")
        starts = [0]
        ends: list[int] = []
        for brk in _LINE_BREAK_RE.finditer(self._text):
            ends.append(brk.start())
            starts.append(brk.end())
        ends.append(len(self._text))
        self._starts = starts
        self._ends = ends

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def line_for_offset(self, offset: int) -> int:
        pos = max(0, min(int(offset), len(self._text)))
        return max(0, bisect.bisect_right(self._starts, pos) - 1)

    def position_at(self, offset: int) -> tuple[int, int]:
        line = self.line_for_offset(offset)
        pos = max(0, min(int(offset), len(self._text)))
        return line, pos - self._starts[line]

    def line_text(self, line: int) -> str:
        if line < 0 or line >= len(self._starts):
            return ""
        return self._text[self._starts[line]:self._ends[line]]


@dataclass(frozen=True, slots=True)
class MatchRecord:
    start_offset: int
    end_offset: int
    line_number: int
    line_text: str
    match_text: str
    start_column: int = 0
    end_line_number: int = 0
    end_column: int = 0

    @property
    def is_multiline(self) -> bool:
        return self.end_line_number > self.line_number

    def to_dict(self) -> dict:
        return {
            "start_offset": self.start_offset,
            "end_offset": self.end_offset,
            "line_number": self.line_number,
            "line_text": self.line_text,
            "match_text": self.match_text,
            "start_column": self.start_column,
            "end_line_number": self.end_line_number,
            "end_column": self.end_column,
        }


@dataclass(slots=True)
class ScanResult:
    matches: list[MatchRecord] = field(default_factory=list)
    aborted: bool = False
    truncated: bool = False
    error: str = ""

    def __len__(self) -> int:
        return len(self.matches)

    def __iter__(self):
        return iter(self.matches)

    def ranges(self) -> list[tuple[int, int]]:
        return [(m.start_offset, m.end_offset) for m in self.matches]


def scan_document(
    text: str,
    pattern: CompiledPattern,
    *,
    line_index: LineIndex | None = None,
    locate: OffsetLocator | None = None,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> ScanResult:
    """Collect every non-overlapping occurrence of ``pattern`` in ``text``.

    ``locate`` lets a host supply its own offset-to-position mapping; the
    line text is always taken from ``text`` itself. A failure while
    iterating stops the scan and returns the matches found so far with
    ``aborted`` set.
    """
    source = str(text or "")
    index = line_index if isinstance(line_index, LineIndex) else LineIndex(source)
    position_at = locate or index.position_at
    limit = max(1, int(max_results or DEFAULT_MAX_RESULTS))

    result = ScanResult()
    try:
        for match in pattern.regex.finditer(source):
            start = int(match.start())
            end = int(match.end())
            if end <= start:
                continue
            start_line, start_col = position_at(start)
            end_line, end_col = position_at(end)
            result.matches.append(
                MatchRecord(
                    start_offset=start,
                    end_offset=end,
                    line_number=start_line + 1,
                    line_text=index.line_text(start_line).strip(),
                    match_text=str(match.group(0)),
                    start_column=start_col,
                    end_line_number=end_line + 1,
                    end_column=end_col,
                )
            )
            if len(result.matches) >= limit:
                result.truncated = True
                logger.info("Search for %r stopped at %d matches", pattern.term, limit)
                break
    except Exception as exc:
        result.aborted = True
        result.error = str(exc) or type(exc).__name__
        logger.warning(
            "Scan for %r aborted after %d matches: %s",
            pattern.term,
            len(result.matches),
            result.error,
        )
    return result
