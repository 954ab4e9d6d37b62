"""Tests for native AWR table extraction.

The scanner must:
1. Return None when the header is missing or nothing follows it
2. Skip leading blanks, menu lines and dashed rules before content
3. Keep lines verbatim and in report order
4. Stop at unrelated sections, menu lines after content, or a blank gap
"""

import re

import pytest

from awr_analyze.scanner import (
    STOP_PATTERNS,
    extract_table,
    is_dash_rule,
    is_navigation_line,
    stop_pattern,
    title_pattern,
)

HEADER = title_pattern("Top 10 Foreground Events by Total Wait Time")


def build(*body: str) -> list[str]:
    return ["preamble", "Top 10 Foreground Events by Total Wait Time", *body]


class TestHeaderLookup:
    def test_missing_header_returns_none(self):
        lines = ["WORKLOAD REPOSITORY report for", "", "Instance Activity Stats"]

        assert extract_table(lines, HEADER) is None

    def test_header_without_content_returns_none(self):
        lines = build("", "", "SQL Statistics", "SQL ordered by Elapsed Time")

        assert extract_table(lines, HEADER) is None

    def test_header_followed_by_end_of_input_returns_none(self):
        assert extract_table(build(), HEADER) is None

    def test_first_matching_header_wins(self):
        lines = build("row one", "", "", "Top 10 Foreground Events by Total Wait Time", "row two")

        assert extract_table(lines, HEADER) == ("row one",)

    def test_header_matches_anywhere_in_line(self):
        lines = ["   Top 10 Foreground Events by Total Wait Time   (continued)", "row"]

        assert extract_table(lines, HEADER) == ("row",)


class TestContentCapture:
    def test_lines_are_kept_verbatim(self):
        rows = [
            "Event                                Waits Time (sec)",
            "------------------------------ ----------- ----------",
            "log file sync                      232,142    2,151.6   ",
        ]

        table = extract_table(build("", *rows), HEADER)

        assert table == tuple(rows)

    def test_leading_blanks_menu_and_rules_are_skipped(self):
        lines = build("", "- Report Summary", "Report Summary:", "-----", "", "Event  Waits")

        assert extract_table(lines, HEADER) == ("Event  Waits",)

    def test_dash_rules_kept_once_content_started(self):
        lines = build("Event  Waits", "----------", "—————", "log file sync  7.0")

        assert extract_table(lines, HEADER) == (
            "Event  Waits",
            "----------",
            "—————",
            "log file sync  7.0",
        )

    def test_end_of_input_closes_table(self):
        assert extract_table(build("a", "b"), HEADER) == ("a", "b")

    def test_returns_tuple(self):
        assert isinstance(extract_table(build("a"), HEADER), tuple)


class TestTermination:
    @pytest.mark.parametrize("max_gap", [1, 2, 3, 5])
    def test_gap_below_limit_continues(self, max_gap):
        lines = build("first", *([""] * (max_gap - 1)), "second")

        assert extract_table(lines, HEADER, max_blank_gap=max_gap) == ("first", "second")

    @pytest.mark.parametrize("max_gap", [1, 2, 3, 5])
    def test_gap_at_limit_stops(self, max_gap):
        lines = build("first", *([""] * max_gap), "second")

        assert extract_table(lines, HEADER, max_blank_gap=max_gap) == ("first",)

    def test_gap_counter_resets_after_content(self):
        lines = build("a", "", "b", "", "c", "", "", "d")

        assert extract_table(lines, HEADER, max_blank_gap=2) == ("a", "b", "c")

    def test_whitespace_only_lines_count_as_blank(self):
        lines = build("a", "   ", "\t", "b")

        assert extract_table(lines, HEADER, max_blank_gap=2) == ("a",)

    @pytest.mark.parametrize(
        "boundary",
        [
            "Main Report",
            "Back to Top",
            "Wait Events Statistics",
            "Instance Activity Stats",
            "SQL Statistics",
            "Undo Statistics",
            "Segment Statistics",
            "Library Cache Statistics",
            "Initialization Parameters",
            "ADDM Reports for this snapshot range",
            "Top Process Types by Wait Class",
            "Service Statistics",
            "Service Wait Class Stats",
        ],
    )
    def test_unrelated_section_stops_without_blank(self, boundary):
        lines = build("a", boundary, "b")

        assert extract_table(lines, HEADER) == ("a",)

    def test_boundary_matched_after_trimming(self):
        lines = build("a", "     SQL Statistics", "b")

        assert extract_table(lines, HEADER) == ("a",)

    def test_boundary_before_content_returns_none(self):
        lines = build("", "Back to Top", "a")

        assert extract_table(lines, HEADER) is None

    def test_menu_line_after_content_stops(self):
        lines = build("a", "- Wait Events Statistics", "b")

        assert extract_table(lines, HEADER) == ("a",)

    def test_label_line_after_content_stops(self):
        lines = build("a", "Host CPU:", "b")

        assert extract_table(lines, HEADER) == ("a",)

    def test_extra_stops(self):
        lines = build("a", "IO Profile   Read+Write/Second", "b")

        assert extract_table(lines, HEADER, extra_stops=[stop_pattern("IO Profile")]) == ("a",)
        assert extract_table(lines, HEADER) == ("a", "IO Profile   Read+Write/Second", "b")

    def test_invalid_gap_rejected(self):
        with pytest.raises(ValueError, match="max_blank_gap"):
            extract_table(build("a"), HEADER, max_blank_gap=0)


class TestRoundTrip:
    def test_table_is_source_slice_without_excluded_lines(self, report_lines):
        table = extract_table(report_lines, HEADER)
        assert table is not None

        start = report_lines.index(table[0])
        end = report_lines.index(table[-1])
        expected = [line for line in report_lines[start : end + 1] if line.strip()]

        assert list(table) == expected
        assert "\n".join(table) == "\n".join(expected)

    def test_sample_foreground_table(self, report_lines):
        table = extract_table(report_lines, HEADER)

        assert table is not None
        assert len(table) == 10
        assert table[0].strip().startswith("Total Wait")
        assert table[-1].startswith("direct path write temp")


class TestLineClassifiers:
    @pytest.mark.parametrize(
        "line", ["- Wait Events", "   -  SQL Statistics", "Report Summary:", "Host CPU:"]
    )
    def test_navigation_lines(self, line):
        assert is_navigation_line(line)

    @pytest.mark.parametrize(
        "line",
        [
            "------------ -----------",
            "enq: TX - row lock contention   12,345",
            "Total Requests:          12,345.6",
            "log file sync  7.0 Commit",
        ],
    )
    def test_content_lines_are_not_navigation(self, line):
        assert not is_navigation_line(line)

    @pytest.mark.parametrize("trimmed", ["-", "------", "–––", "———", "-–—‒―"])
    def test_dash_rules(self, trimmed):
        assert is_dash_rule(trimmed)

    @pytest.mark.parametrize("trimmed", ["", "--- ---", "~~~~", "-1.0"])
    def test_non_dash_rules(self, trimmed):
        assert not is_dash_rule(trimmed)

    def test_stop_patterns_are_compiled_and_anchored(self):
        assert all(isinstance(pattern, re.Pattern) for pattern in STOP_PATTERNS)
        assert not any(pattern.match("see Main Report") for pattern in STOP_PATTERNS)
