"""Pydantic models shared by the scanner, the rule engine and the renderers."""

from __future__ import annotations

from typing import Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

# ============================================================
# TYPE ALIASES
# ============================================================

Severity: TypeAlias = Literal["critical", "warning", "info"]
TableLines: TypeAlias = tuple[str, ...]
PercentageValue: TypeAlias = float
MillisecondsValue: TypeAlias = float

SEVERITY_MARKERS: dict[Severity, str] = {
    "critical": "🔴 ALERT",
    "warning": "🟠 NOTICE",
    "info": "🟡 INFO",
}

SEVERITY_RANK: dict[Severity, int] = {"info": 0, "warning": 1, "critical": 2}

# ============================================================
# PYDANTIC MODELS
# ============================================================


class ThresholdSet(BaseModel):
    """Configurable thresholds for alert rules."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    wait_pct: PercentageValue = Field(default=10.0, ge=0.0)
    io_latency_ms: MillisecondsValue = Field(default=20.0, ge=0.0)
    row_lock_pct: PercentageValue = Field(default=3.0, ge=0.0)
    gc_remote_pct: PercentageValue = Field(default=2.0, ge=0.0)
    io_request_rate: float = Field(default=10_000.0, ge=0.0)

    # log file sync / db file sequential read share of DB time
    named_event_pct: PercentageValue = Field(default=5.0, ge=0.0)

    def with_overrides(self, **overrides: float | None) -> ThresholdSet:
        """Return a copy with every non-None override applied and validated."""
        updates = {name: value for name, value in overrides.items() if value is not None}
        if not updates:
            return self
        return ThresholdSet.model_validate({**self.model_dump(), **updates})


class Alert(BaseModel):
    """A single finding produced by a rule."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    rule: str
    message: str

    @property
    def marker(self) -> str:
        return SEVERITY_MARKERS[self.severity]

    @property
    def text(self) -> str:
        return f"{self.marker}: {self.message}"

    def __str__(self) -> str:
        return self.text


class RowSignals(BaseModel):
    """Numeric signals recovered from one table row."""

    model_config = ConfigDict(frozen=True)

    row: str
    event: str
    percent: PercentageValue | None = None
    latency_ms: MillisecondsValue | None = None

    def contains(self, *needles: str) -> bool:
        """Case-insensitive check that every needle occurs in the row."""
        lowered = self.row.lower()
        return all(needle.lower() in lowered for needle in needles)


class IOProfileSignals(BaseModel):
    """Aggregate values recovered from an IO Profile table.

    Request values are per second; throughput values are MB per second.
    """

    model_config = ConfigDict(frozen=True)

    total_reqs: float | None = None
    read_reqs: float | None = None
    write_reqs: float | None = None
    read_mb: float | None = None
    write_mb: float | None = None
    total_mb: float | None = None
    scattered_reads: float | None = None
    sequential_reads: float | None = None

    @property
    def combined_mb(self) -> float | None:
        """Read plus write throughput, falling back to the Total (MB) line."""
        if self.read_mb is None and self.write_mb is None:
            return self.total_mb
        return (self.read_mb or 0.0) + (self.write_mb or 0.0)


class SectionResult(BaseModel):
    """Outcome of scanning and evaluating one target section."""

    model_config = ConfigDict(frozen=True)

    key: str
    title: str
    header: str
    table: TableLines | None = None
    alerts: list[Alert] = Field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.table is not None

    @property
    def worst_severity(self) -> Severity | None:
        if not self.alerts:
            return None
        return max((alert.severity for alert in self.alerts), key=SEVERITY_RANK.__getitem__)


class ReportAnalysis(BaseModel):
    """Full analysis of one AWR report."""

    model_config = ConfigDict(frozen=True)

    source: str
    total_lines: int
    thresholds: ThresholdSet
    sections: list[SectionResult] = Field(default_factory=list)

    @property
    def alerts(self) -> list[Alert]:
        return [alert for section in self.sections for alert in section.alerts]

    def count_by_severity(self) -> dict[Severity, int]:
        counts: dict[Severity, int] = {"critical": 0, "warning": 0, "info": 0}
        for alert in self.alerts:
            counts[alert.severity] += 1
        return counts

    def section(self, key: str) -> SectionResult:
        for result in self.sections:
            if result.key == key:
                return result
        raise KeyError(key)
