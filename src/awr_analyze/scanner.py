"""Native AWR table extraction.

AWR text reports have no machine-readable grammar: a table is delimited
visually by blank runs, dashed rules and the title of the next section.
The scanner finds a section header, skips navigation/menu lines, and
captures every table line verbatim until too many consecutive blanks or
a known unrelated section is encountered.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from awr_analyze.models import TableLines

logger = logging.getLogger(__name__)

# ============================================================
# BOUNDARY PATTERNS
# ============================================================


def stop_pattern(title: str) -> re.Pattern[str]:
    """Compile a literal section title into a line-start boundary pattern."""
    return re.compile(rf"^{re.escape(title)}")


# Titles of sections unrelated to the target tables, matched against the trimmed line
STOP_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    stop_pattern(title)
    for title in (
        "Main Report",
        "Back to Top",
        "Wait Events Statistics",
        "Instance Activity",
        "SQL Statistics",
        "Undo Statistics",
        "Segment Statistics",
        "Library Cache Statistics",
        "Initialization Parameters",
        "ADDM Reports",
        "Top Process Types",
        "Service Statistics",
        "Service Wait Class Stats",
    )
)

# e.g. "- Wait Events" bullets of the report menu
MENU_BULLET_PATTERN: re.Pattern[str] = re.compile(r"^\s*-\s+")
# e.g. "Report Summary:"
MENU_LABEL_PATTERN: re.Pattern[str] = re.compile(r"^[A-Z][A-Za-z\s]+:$")

DASH_CHARACTERS: frozenset[str] = frozenset("-‐‑‒–—―")

DEFAULT_MAX_BLANK_GAP = 2


def title_pattern(title: str) -> re.Pattern[str]:
    """Compile a literal section title into a search pattern."""
    return re.compile(re.escape(title))


def is_navigation_line(line: str) -> bool:
    """Menu bullets and short capitalised 'Label:' lines."""
    return bool(MENU_BULLET_PATTERN.match(line) or MENU_LABEL_PATTERN.match(line.strip()))


def is_dash_rule(trimmed: str) -> bool:
    """True for horizontal separator lines made only of dash-like characters."""
    return bool(trimmed) and all(char in DASH_CHARACTERS for char in trimmed)


def find_header(lines: Sequence[str], header_pattern: re.Pattern[str]) -> int | None:
    """Return the index of the first line matching the section header."""
    for index, line in enumerate(lines):
        if header_pattern.search(line):
            return index
    return None


def extract_table(
    lines: Sequence[str],
    header_pattern: re.Pattern[str],
    max_blank_gap: int = DEFAULT_MAX_BLANK_GAP,
    extra_stops: Iterable[re.Pattern[str]] = (),
) -> TableLines | None:
    """Extract a native AWR table exactly as printed.

    Args:
        lines: The full report, one entry per line.
        header_pattern: Pattern identifying the section header line.
        max_blank_gap: Consecutive blank lines that close the table.
        extra_stops: Additional boundary patterns, matched like STOP_PATTERNS.

    Returns:
        The captured lines in report order, or None when the header is
        missing or no content line follows it.
    """
    if max_blank_gap < 1:
        raise ValueError(f"max_blank_gap must be at least 1, got {max_blank_gap}")

    start = find_header(lines, header_pattern)
    if start is None:
        logger.debug("Section header %r not found", header_pattern.pattern)
        return None

    stops = STOP_PATTERNS + tuple(extra_stops)
    table: list[str] = []
    started = False
    gap = 0

    for line in lines[start + 1 :]:
        trimmed = line.strip()

        if any(pattern.match(trimmed) for pattern in stops):
            break

        if is_navigation_line(line):
            if started:
                break
            continue

        if not trimmed:
            if started:
                gap += 1
                if gap >= max_blank_gap:
                    break
            continue

        if is_dash_rule(trimmed):
            if started:
                table.append(line)
            continue

        started = True
        table.append(line)
        gap = 0

    logger.debug(
        "Section header %r at line %d: captured %d table lines",
        header_pattern.pattern,
        start + 1,
        len(table),
    )
    return tuple(table) if table else None
