"""Declarative alert rule catalogues and the engine that evaluates them.

Each rule is a data record: a predicate over the extracted signals and
the active thresholds, a severity, and a message template. Templates are
``str.format`` strings receiving ``s`` (the signals) and ``t`` (the
ThresholdSet). Adding a rule means adding a catalogue entry.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence

from pydantic import BaseModel, ConfigDict

from awr_analyze.models import Alert, IOProfileSignals, RowSignals, Severity, ThresholdSet
from awr_analyze.signals import io_profile_signals, row_signals

# Combined read+write throughput (MB/s) below which a busy system is doing many small I/Os
SMALL_IO_THROUGHPUT_FLOOR_MB = 1.0

GLOBAL_CACHE_PATTERN: re.Pattern[str] = re.compile(
    r"\bgc (?:cr|current|buffer busy)", re.IGNORECASE
)

# ============================================================
# RULE RECORDS
# ============================================================


class RowRule(BaseModel):
    """Rule evaluated independently against every row of a table."""

    model_config = ConfigDict(frozen=True)

    name: str
    severity: Severity
    predicate: Callable[[RowSignals, ThresholdSet], bool]
    template: str

    def evaluate(self, signals: RowSignals, thresholds: ThresholdSet) -> Alert | None:
        if not self.predicate(signals, thresholds):
            return None
        return Alert(
            severity=self.severity,
            rule=self.name,
            message=self.template.format(s=signals, t=thresholds),
        )


class ProfileRule(BaseModel):
    """Rule evaluated once against the aggregate values of an IO Profile table."""

    model_config = ConfigDict(frozen=True)

    name: str
    severity: Severity
    predicate: Callable[[IOProfileSignals, ThresholdSet], bool]
    template: str

    def evaluate(self, profile: IOProfileSignals, thresholds: ThresholdSet) -> Alert | None:
        if not self.predicate(profile, thresholds):
            return None
        return Alert(
            severity=self.severity,
            rule=self.name,
            message=self.template.format(s=profile, t=thresholds),
        )


def _percent_above(signals: RowSignals, limit: float) -> bool:
    return signals.percent is not None and signals.percent > limit


def _ratio_above(numerator: float | None, denominator: float | None, factor: float) -> bool:
    if numerator is None or denominator is None:
        return False
    return numerator > factor * denominator


def _is_small_io(profile: IOProfileSignals, _: ThresholdSet) -> bool:
    combined = profile.combined_mb
    if profile.total_reqs is None or combined is None:
        return False
    return profile.total_reqs > 0 and combined < SMALL_IO_THROUGHPUT_FLOOR_MB


# ============================================================
# RULE CATALOGUES
# ============================================================

FOREGROUND_EVENT_RULES: tuple[RowRule, ...] = (
    RowRule(
        name="high_db_time",
        severity="warning",
        predicate=lambda s, t: _percent_above(s, t.wait_pct),
        template="'{s.event}' takes {s.percent:.1f}% of DB time "
        "(threshold: {t.wait_pct:.1f}%) - top contributor to response time",
    ),
    RowRule(
        name="high_latency",
        severity="warning",
        predicate=lambda s, t: s.latency_ms is not None and s.latency_ms > t.io_latency_ms,
        template="'{s.event}' average wait {s.latency_ms:.2f}ms "
        "(threshold: {t.io_latency_ms:.1f}ms) - slow storage or interconnect response",
    ),
    RowRule(
        name="redo_commit",
        severity="critical",
        predicate=lambda s, t: s.contains("log file sync", "commit")
        and _percent_above(s, t.named_event_pct),
        template="High 'log file sync' {s.percent:.1f}% - redo/commit bottleneck likely",
    ),
    RowRule(
        name="random_read_latency",
        severity="warning",
        predicate=lambda s, t: s.contains("db file sequential read", "user i/o")
        and _percent_above(s, t.named_event_pct),
        template="High 'db file sequential read' {s.percent:.1f}% - slow random I/O",
    ),
    RowRule(
        name="row_lock_contention",
        severity="critical",
        predicate=lambda s, t: s.contains("row lock contention")
        and _percent_above(s, t.row_lock_pct),
        template="Row lock contention {s.percent:.1f}% of DB time "
        "(threshold: {t.row_lock_pct:.1f}%) - application-level locking on hot rows",
    ),
    RowRule(
        name="global_cache_remote",
        severity="warning",
        predicate=lambda s, t: bool(GLOBAL_CACHE_PATTERN.search(s.row))
        and _percent_above(s, t.gc_remote_pct),
        template="Global cache wait '{s.event}' {s.percent:.1f}% "
        "(threshold: {t.gc_remote_pct:.1f}%) - RAC remote cache transfers / interconnect",
    ),
    RowRule(
        name="buffer_busy",
        severity="warning",
        predicate=lambda s, t: s.contains("buffer busy waits"),
        template="'buffer busy waits' - hot blocks / buffer cache contention",
    ),
    RowRule(
        name="temp_io",
        severity="info",
        predicate=lambda s, t: s.contains("direct path write temp")
        or s.contains("direct path read temp"),
        template="Temp I/O ('{s.event}') - check temp tablespace usage and sort/hash memory",
    ),
    RowRule(
        name="enqueue",
        severity="info",
        predicate=lambda s, t: s.contains("enq:"),
        template="Enqueue wait '{s.event}' - review locking and object access patterns",
    ),
)

WAIT_CLASS_RULES: tuple[RowRule, ...] = (
    RowRule(
        name="user_io_bound",
        severity="warning",
        predicate=lambda s, t: s.contains("User I/O") and _percent_above(s, t.wait_pct),
        template="User I/O wait class {s.percent:.1f}% "
        "(threshold: {t.wait_pct:.1f}%) - database is I/O-bound",
    ),
    RowRule(
        name="commit_pressure",
        severity="warning",
        predicate=lambda s, t: s.contains("Commit") and _percent_above(s, t.wait_pct),
        template="Commit wait class {s.percent:.1f}% "
        "(threshold: {t.wait_pct:.1f}%) - commit rate or redo bottleneck",
    ),
    RowRule(
        name="concurrency_locking",
        severity="warning",
        predicate=lambda s, t: s.contains("Concurrency") and _percent_above(s, t.row_lock_pct),
        template="Concurrency wait class {s.percent:.1f}% "
        "(threshold: {t.row_lock_pct:.1f}%) - locking / latch contention",
    ),
)

IO_PROFILE_RULES: tuple[ProfileRule, ...] = (
    ProfileRule(
        name="high_request_rate",
        severity="warning",
        predicate=lambda s, t: s.total_reqs is not None and s.total_reqs > t.io_request_rate,
        template="Very high I/O request rate {s.total_reqs:,.1f}/s "
        "(threshold: {t.io_request_rate:,.0f}/s)",
    ),
    ProfileRule(
        name="write_heavy",
        severity="warning",
        predicate=lambda s, t: _ratio_above(s.write_reqs, s.read_reqs, 2.0),
        template="Write requests {s.write_reqs:,.1f}/s are more than double reads "
        "{s.read_reqs:,.1f}/s - redo or temp write pressure",
    ),
    ProfileRule(
        name="small_io",
        severity="info",
        predicate=_is_small_io,
        template="{s.total_reqs:,.1f} requests/s moving only {s.combined_mb:.2f} MB/s "
        "- many small I/Os, check for single-block access patterns",
    ),
    ProfileRule(
        name="full_scan_dominance",
        severity="info",
        predicate=lambda s, t: _ratio_above(s.scattered_reads, s.sequential_reads, 2.0),
        template="Scattered reads {s.scattered_reads:,.0f} are more than double sequential "
        "reads {s.sequential_reads:,.0f} - full table scans dominate",
    ),
)

# ============================================================
# ENGINE
# ============================================================


class RuleEngine:
    """Evaluates the rule catalogues with one immutable ThresholdSet."""

    def __init__(self, thresholds: ThresholdSet | None = None) -> None:
        self.thresholds = thresholds or ThresholdSet()

    def evaluate_rows(self, table: Iterable[str], rules: Sequence[RowRule]) -> list[Alert]:
        """Apply every rule to every row; rows in table order, rules in declared order."""
        alerts: list[Alert] = []
        for row in table:
            signals = row_signals(row)
            for rule in rules:
                if (alert := rule.evaluate(signals, self.thresholds)) is not None:
                    alerts.append(alert)
        return alerts

    def evaluate_profile(
        self, profile: IOProfileSignals, rules: Sequence[ProfileRule] = IO_PROFILE_RULES
    ) -> list[Alert]:
        alerts: list[Alert] = []
        for rule in rules:
            if (alert := rule.evaluate(profile, self.thresholds)) is not None:
                alerts.append(alert)
        return alerts

    def foreground_events(self, table: Sequence[str]) -> list[Alert]:
        return self.evaluate_rows(table, FOREGROUND_EVENT_RULES)

    def wait_classes(self, table: Sequence[str]) -> list[Alert]:
        return self.evaluate_rows(table, WAIT_CLASS_RULES)

    def io_profile(self, table: Sequence[str]) -> list[Alert]:
        return self.evaluate_profile(io_profile_signals(table))


def evaluate_foreground_events(table: Sequence[str], thresholds: ThresholdSet) -> list[Alert]:
    return RuleEngine(thresholds).foreground_events(table)


def evaluate_wait_classes(table: Sequence[str], thresholds: ThresholdSet) -> list[Alert]:
    return RuleEngine(thresholds).wait_classes(table)


def evaluate_io_profile(table: Sequence[str], thresholds: ThresholdSet) -> list[Alert]:
    return RuleEngine(thresholds).io_profile(table)
