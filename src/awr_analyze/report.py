"""Target sections and the per-report analysis driver."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence

from pydantic import BaseModel, ConfigDict

from awr_analyze.models import Alert, ReportAnalysis, SectionResult, ThresholdSet
from awr_analyze.rules import RuleEngine
from awr_analyze.scanner import DEFAULT_MAX_BLANK_GAP, extract_table, stop_pattern, title_pattern

logger = logging.getLogger(__name__)

SectionEvaluator = Callable[[RuleEngine, Sequence[str]], list[Alert]]


class TargetSection(BaseModel):
    """One AWR table the analyzer extracts and evaluates."""

    model_config = ConfigDict(frozen=True)

    key: str
    title: str
    header: str
    evaluator: SectionEvaluator

    @property
    def header_pattern(self) -> re.Pattern[str]:
        return _HEADER_PATTERNS[self.header]


TARGET_SECTIONS: tuple[TargetSection, ...] = (
    TargetSection(
        key="foreground_events",
        title="Foreground Wait Events",
        header="Top 10 Foreground Events by Total Wait Time",
        evaluator=RuleEngine.foreground_events,
    ),
    TargetSection(
        key="wait_classes",
        title="Wait Classes",
        header="Wait Classes by Total Wait Time",
        evaluator=RuleEngine.wait_classes,
    ),
    TargetSection(
        key="io_profile",
        title="IO Profile",
        header="IO Profile",
        evaluator=RuleEngine.io_profile,
    ),
)

_HEADER_PATTERNS: dict[str, re.Pattern[str]] = {
    section.header: title_pattern(section.header) for section in TARGET_SECTIONS
}
_SECTION_STOPS: dict[str, tuple[re.Pattern[str], ...]] = {
    section.key: tuple(
        stop_pattern(other.header) for other in TARGET_SECTIONS if other.key != section.key
    )
    for section in TARGET_SECTIONS
}

KNOWLEDGE_BASE: tuple[tuple[str, str], ...] = (
    ("log file sync", "redo log bottleneck; check commit frequency and redo device latency."),
    ("db file sequential read", "random single-block I/O latency; check indexes and storage."),
    ("db file scattered read", "multi-block reads from full scans; check access paths."),
    ("buffer busy waits", "hot blocks; check segment design and concurrent DML."),
    ("enq: TX - row lock contention", "application-level row locking; review transaction scope."),
    ("gc cr / gc current", "RAC global cache transfers; check interconnect and data affinity."),
    ("direct path read/write temp", "sorts and hashes spilling to temp; check PGA sizing."),
    ("High User I/O", "DB is storage-bound."),
    ("Always", "correlate waits with SQL and storage behavior."),
)


def analyze_section(
    section: TargetSection,
    lines: Sequence[str],
    engine: RuleEngine,
    max_blank_gap: int = DEFAULT_MAX_BLANK_GAP,
) -> SectionResult:
    """Extract one target table and evaluate its rules."""
    table = extract_table(
        lines,
        section.header_pattern,
        max_blank_gap=max_blank_gap,
        extra_stops=_SECTION_STOPS[section.key],
    )
    if table is None:
        logger.info("No %s section found", section.title.lower())
        return SectionResult(key=section.key, title=section.title, header=section.header)

    alerts = section.evaluator(engine, table)
    logger.debug("%s: %d rows, %d alerts", section.title, len(table), len(alerts))
    return SectionResult(
        key=section.key,
        title=section.title,
        header=section.header,
        table=table,
        alerts=alerts,
    )


def analyze_report(
    lines: Sequence[str],
    thresholds: ThresholdSet | None = None,
    *,
    source: str = "<report>",
    max_blank_gap: int = DEFAULT_MAX_BLANK_GAP,
) -> ReportAnalysis:
    """Analyze every target section of an AWR report, in TARGET_SECTIONS order."""
    engine = RuleEngine(thresholds)
    sections = [
        analyze_section(section, lines, engine, max_blank_gap=max_blank_gap)
        for section in TARGET_SECTIONS
    ]
    return ReportAnalysis(
        source=source,
        total_lines=len(lines),
        thresholds=engine.thresholds,
        sections=sections,
    )
