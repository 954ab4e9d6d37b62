"""Numeric signal extraction from loosely formatted AWR table rows.

None of these functions raise on malformed input: summary lines, totals
and captured column headers are common, so a missing or unparseable
field is reported as None (or the "unknown" event sentinel).
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable

from awr_analyze.models import IOProfileSignals, RowSignals

UNKNOWN_EVENT = "unknown"

# ============================================================
# PATTERNS
# ============================================================

LATENCY_PATTERN: re.Pattern[str] = re.compile(
    r"(?<![\d.,])(?P<value>\d[\d,]*(?:\.\d+)?)(?P<unit>ms|us|µs|ns|s)\b", re.IGNORECASE
)
NUMBER_PATTERN: re.Pattern[str] = re.compile(r"\d[\d,.]*")
COLUMN_SEPARATOR_PATTERN: re.Pattern[str] = re.compile(r" {2,}")
NON_ALNUM_PATTERN: re.Pattern[str] = re.compile(r"[^0-9a-z]+")
LEADING_NON_DIGITS_PATTERN: re.Pattern[str] = re.compile(r"^\D*")

# Non-breaking, figure and narrow no-break spaces left by HTML-to-text conversion
EXOTIC_SPACES = str.maketrans({"\u00a0": " ", "\u2007": " ", "\u202f": " ", "\t": " "})

# Labelled IO Profile summary lines, matched against the trimmed row
IO_PROFILE_LABELS: dict[str, re.Pattern[str]] = {
    "total_reqs": re.compile(r"^Total Requests\s*:", re.IGNORECASE),
    "read_reqs": re.compile(r"^Read (?:IO )?Req(?:uest)?s\b", re.IGNORECASE),
    "write_reqs": re.compile(r"^Write (?:IO )?Req(?:uest)?s\b", re.IGNORECASE),
    "read_mb": re.compile(r"^Read (?:IO )?\(?MB\)?", re.IGNORECASE),
    "write_mb": re.compile(r"^Write (?:IO )?\(?MB\)?", re.IGNORECASE),
    "total_mb": re.compile(r"^Total \(MB\)", re.IGNORECASE),
    "scattered_reads": re.compile(r"db file scattered read", re.IGNORECASE),
    "sequential_reads": re.compile(r"db file sequential read", re.IGNORECASE),
}

# ============================================================
# NUMBER PARSING
# ============================================================


def parse_number(token: str) -> float | None:
    """Parse a report number such as '232,142' or '9.27'; None if it is not one."""
    try:
        value = float(token.replace(",", ""))
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def first_number(text: str) -> float | None:
    """Return the first embedded number in text that parses."""
    for match in NUMBER_PATTERN.finditer(text):
        value = parse_number(match.group().rstrip("."))
        if value is not None:
            return value
    return None


def _is_label_token(token: str) -> bool:
    return all(char.isalpha() or char == "/" for char in token)


# ============================================================
# ROW SIGNALS
# ============================================================


def percent_of_time(row: str) -> float | None:
    """Extract the %DB time column of a wait row.

    The wait class label follows its percentage, so the tokens are walked
    backwards and the number immediately before an alphabetic token wins:

        "log file sync   232,142   2151.6   9.27ms   7.0 Commit"  ->  7.0
    """
    tokens = row.split()
    for index in range(len(tokens) - 1, 0, -1):
        if _is_label_token(tokens[index]):
            value = parse_number(tokens[index - 1])
            if value is not None:
                return value
    return None


def latency_ms(row: str) -> float | None:
    """Extract the first 'value+unit' latency, normalised to milliseconds."""
    match = LATENCY_PATTERN.search(row)
    if not match:
        return None
    value = parse_number(match.group("value"))
    if value is None:
        return None
    unit = match.group("unit").lower()
    if unit == "ms":
        return value
    if unit in ("us", "µs"):
        return value / 1000
    return None


def _slug(text: str) -> str:
    return NON_ALNUM_PATTERN.sub("_", text.lower()).strip("_")


def event_name(row: str) -> str:
    """Normalise the first column of a row into a snake_case event label."""
    text = row.translate(EXOTIC_SPACES).strip()
    label = _slug(COLUMN_SEPARATOR_PATTERN.split(text, maxsplit=1)[0])
    if not label:
        label = _slug(LEADING_NON_DIGITS_PATTERN.match(text).group())
    return label or UNKNOWN_EVENT


def row_signals(row: str) -> RowSignals:
    return RowSignals(
        row=row,
        event=event_name(row),
        percent=percent_of_time(row),
        latency_ms=latency_ms(row),
    )


# ============================================================
# TABLE SIGNALS
# ============================================================


def io_profile_signals(table: Iterable[str]) -> IOProfileSignals:
    """Collect the labelled IO Profile values; the first matching line per metric wins."""
    values: dict[str, float] = {}
    for row in table:
        trimmed = row.translate(EXOTIC_SPACES).strip()
        for metric, pattern in IO_PROFILE_LABELS.items():
            if metric in values:
                continue
            match = pattern.search(trimmed)
            if not match:
                continue
            value = first_number(trimmed[match.end() :])
            if value is not None:
                values[metric] = value
    return IOProfileSignals(**values)
