"""Display formatting for match records: escaping, highlight and context."""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass
from typing import Iterable

from .match_scanner import MatchRecord
from .pattern_compiler import SearchOptions

logger = logging.getLogger(__name__)

HIGHLIGHT_OPEN = '<span class="match-highlight">'
HIGHLIGHT_CLOSE = "</span>"
NAVIGATION_SCHEME = "findmark"


@dataclass(frozen=True, slots=True)
class DisplayRecord:
    line_number: int
    highlighted_line: str
    match_start_col: int
    match_end_col: int
    end_line_number: int = 0
    context_before: str = ""
    context_after: str = ""

    @property
    def navigation_href(self) -> str:
        return f"{NAVIGATION_SCHEME}:{self.line_number}:{self.match_start_col}:{self.match_end_col}"


def escape_markup(text: str) -> str:
    return html.escape(str(text or ""), quote=True)


def _wrap(before: str, match: str, after: str) -> str:
    return f"{before}{HIGHLIGHT_OPEN}{match}{HIGHLIGHT_CLOSE}{after}"


def _locate_in_trimmed(match: MatchRecord, raw_line: str | None) -> int:
    """Return the match start inside the trimmed line, or -1."""
    if raw_line is None:
        return -1
    lead = len(raw_line) - len(raw_line.lstrip())
    idx = int(match.start_column) - lead
    probe = match.match_text.split("\n", 1)[0].rstrip("\r")
    trimmed = match.line_text
    if idx < 0 or idx > len(trimmed):
        return -1
    if probe and trimmed[idx:idx + len(probe)] != probe and not match.is_multiline:
        return -1
    return idx


def _search_escaped(escaped_line: str, needle: str) -> str | None:
    if not needle:
        return None
    escaped_needle = escape_markup(needle)
    found = re.search(re.escape(escaped_needle), escaped_line, re.IGNORECASE)
    if found is None:
        return None
    return _wrap(
        escaped_line[:found.start()],
        escaped_line[found.start():found.end()],
        escaped_line[found.end():],
    )


def highlight_line(match: MatchRecord, raw_line: str | None = None) -> str:
    """Escaped, trimmed line text with the match wrapped in a highlight span.

    Falls back from an exact positional wrap, to a case-insensitive search of
    the escaped match text, to the first line of a multi-line match, and
    finally to the plain escaped line.
    """
    line = match.line_text
    escaped_line = escape_markup(line)
    try:
        idx = _locate_in_trimmed(match, raw_line)
        if idx >= 0:
            span_end = len(line) if match.is_multiline else min(len(line), idx + len(match.match_text))
            if span_end > idx:
                return _wrap(
                    escape_markup(line[:idx]),
                    escape_markup(line[idx:span_end]),
                    escape_markup(line[span_end:]),
                )

        wrapped = _search_escaped(escaped_line, match.match_text)
        if wrapped is not None:
            return wrapped

        first_line = match.match_text.splitlines()[0].strip() if match.match_text.strip() else ""
        wrapped = _search_escaped(escaped_line, first_line)
        if wrapped is not None:
            return wrapped
    except Exception as exc:
        logger.debug("Highlight fell back to plain text on line %d: %s", match.line_number, exc)
    return escaped_line


def match_context(match: MatchRecord, raw_line: str | None = None) -> tuple[str, str]:
    """Plain-text ``(before, after)`` surrounding the match within its line."""
    line = match.line_text
    try:
        idx = _locate_in_trimmed(match, raw_line)
        if idx < 0:
            idx = line.find(match.match_text)
        if idx < 0:
            idx = line.lower().find(match.match_text.lower())
        if idx < 0:
            return "", ""
        end = len(line) if match.is_multiline else idx + len(match.match_text)
        return line[:idx].strip(), line[end:].strip()
    except Exception as exc:
        logger.debug("Context extraction failed on line %d: %s", match.line_number, exc)
        return "", ""


def format_match(match: MatchRecord, raw_line: str | None = None) -> DisplayRecord:
    """Build the display record for one match.

    ``raw_line`` is the untrimmed source line; when given, the highlight is
    placed at the match's exact column instead of the first look-alike.
    """
    before, after = match_context(match, raw_line)
    return DisplayRecord(
        line_number=match.line_number,
        highlighted_line=highlight_line(match, raw_line),
        match_start_col=match.start_column,
        match_end_col=match.end_column,
        end_line_number=match.end_line_number or match.line_number,
        context_before=before,
        context_after=after,
    )


def format_matches(matches: Iterable[MatchRecord], raw_lines: dict[int, str] | None = None) -> list[DisplayRecord]:
    lines = raw_lines or {}
    return [format_match(m, lines.get(m.line_number)) for m in matches]


def summary_text(count: int, term: str, *, aborted: bool = False, truncated: bool = False) -> str:
    noun = "match" if count == 1 else "matches"
    text = f'Found {count} {noun} for "{term}"'
    if aborted:
        text += " (search stopped early)"
    elif truncated:
        text += " (result limit reached)"
    return text


def parse_navigation_href(href: str) -> tuple[int, int, int] | None:
    parts = str(href or "").split(":")
    if len(parts) != 4 or parts[0] != NAVIGATION_SCHEME:
        return None
    try:
        line, start, end = (int(p) for p in parts[1:])
    except ValueError:
        return None
    return line, start, end


_PAGE_STYLE = """
body {{ margin: 0; }}
.summary {{ font-weight: bold; margin-bottom: 4px; }}
.options {{ color: #8a8f98; font-size: small; }}
.line-number {{ color: #8a8f98; text-align: right; padding-right: 12px; }}
.match a {{ text-decoration: none; color: inherit; }}
.match-highlight {{ font-weight: bold; background-color: {highlight}; }}
.match-context {{ color: #8a8f98; font-size: small; }}
"""


def render_results_html(
    records: Iterable[DisplayRecord],
    term: str,
    options: SearchOptions,
    *,
    highlight_color: str = "#4A5C7E",
    aborted: bool = False,
    truncated: bool = False,
) -> str:
    rows = list(records)
    header = [f'<div class="summary">{escape_markup(summary_text(len(rows), term, aborted=aborted, truncated=truncated))}</div>']
    labels = options.labels()
    if labels:
        header.append(f'<div class="options">{escape_markup(" • ".join(labels))}</div>')

    body: list[str] = []
    for rec in rows:
        context = " ".join(part for part in (rec.context_before, rec.context_after) if part)
        context_html = f'<div class="match-context">{escape_markup(context)}</div>' if context else ""
        body.append(
            '<tr class="match">'
            f'<td class="line-number" valign="top">{rec.line_number}</td>'
            f'<td><a href="{rec.navigation_href}">{rec.highlighted_line}</a>{context_html}</td>'
            "</tr>"
        )

    style = _PAGE_STYLE.format(highlight=escape_markup(highlight_color))
    return (
        "<!DOCTYPE html><html><head>"
        f"<style>{style}</style>"
        "</head><body>"
        f'<div class="header">{"".join(header)}</div>'
        f'<table class="matches" width="100%" cellspacing="0" cellpadding="3">{"".join(body)}</table>'
        "</body></html>"
    )
