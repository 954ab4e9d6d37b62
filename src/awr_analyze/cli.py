#!/usr/bin/env python3
"""AWR I/O Analyzer command line.

Reads an Oracle AWR text report (plain or HTML-to-text), prints the three
I/O tables exactly as formatted in the report, and lists threshold alerts
under each:

1. Top 10 Foreground Events by Total Wait Time
2. Wait Classes by Total Wait Time
3. IO Profile
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler
from rich.markup import escape

from awr_analyze import __version__
from awr_analyze.config import load_thresholds
from awr_analyze.models import ReportAnalysis
from awr_analyze.render import console, export_markdown_report, render_rich_output
from awr_analyze.report import analyze_report
from awr_analyze.scanner import DEFAULT_MAX_BLANK_GAP

logger = logging.getLogger("awr_analyze")


def configure_logging(verbose: bool) -> None:
    """Route package log records through Rich on the themed console."""
    handler = RichHandler(console=console, show_path=False, show_time=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def read_report_lines(report_file: Path) -> list[str]:
    """Read the whole report once; undecodable bytes are replaced, never fatal.

    Only line terminators split lines, so form feeds and other separators
    stay inside the line they appear in.
    """
    with report_file.open(encoding="utf-8", errors="replace") as f:
        return [line.rstrip("\r\n") for line in f.readlines()]


def exit_code_for(analysis: ReportAnalysis) -> int:
    """0 = no alerts, 1 = warnings/notices, 2 = critical alerts."""
    counts = analysis.count_by_severity()
    if counts["critical"]:
        return 2
    if counts["warning"] or counts["info"]:
        return 1
    return 0


# ============================================================
# TYPER CLI INTERFACE
# ============================================================

app = typer.Typer(
    name="awr-io-analyze",
    help="Oracle AWR I/O analyzer: extracts wait and I/O tables and flags threshold breaches",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.command()
def analyze(
    report_file: Annotated[
        Path,
        typer.Argument(
            help="Path to an AWR text report (e.g. awrrpt_1_67450_67453.html.txt)",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="TOML file with alert thresholds (missing keys keep their defaults)",
        ),
    ] = None,
    wait_pct: Annotated[
        float | None,
        typer.Option("--wait-pct", help="% of DB time that flags a wait (default: 10.0)", min=0.0),
    ] = None,
    io_latency_ms: Annotated[
        float | None,
        typer.Option(
            "--io-latency-ms", help="Average wait latency in ms to flag (default: 20.0)", min=0.0
        ),
    ] = None,
    row_lock_pct: Annotated[
        float | None,
        typer.Option(
            "--row-lock-pct", help="Row lock / concurrency % of DB time (default: 3.0)", min=0.0
        ),
    ] = None,
    gc_remote_pct: Annotated[
        float | None,
        typer.Option(
            "--gc-remote-pct", help="RAC global cache % of DB time (default: 2.0)", min=0.0
        ),
    ] = None,
    io_request_rate: Annotated[
        float | None,
        typer.Option(
            "--io-request-rate", help="Total I/O requests per second (default: 10000)", min=0.0
        ),
    ] = None,
    named_event_pct: Annotated[
        float | None,
        typer.Option(
            "--named-event-pct",
            help="% of DB time for log file sync / db file sequential read (default: 5.0)",
            min=0.0,
        ),
    ] = None,
    max_gap: Annotated[
        int,
        typer.Option(
            "--max-gap", help="Consecutive blank lines that end a table (default: 2)", min=1
        ),
    ] = DEFAULT_MAX_BLANK_GAP,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Export analysis report to Markdown file (e.g., report.md)",
            file_okay=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with detailed extraction information",
        ),
    ] = False,
) -> None:
    """Analyze the I/O sections of an Oracle AWR text report.

    Exit codes: 0 = no alerts, 1 = warnings, 2 = critical alerts.
    """
    configure_logging(verbose)

    thresholds = load_thresholds(config).with_overrides(
        wait_pct=wait_pct,
        io_latency_ms=io_latency_ms,
        row_lock_pct=row_lock_pct,
        gc_remote_pct=gc_remote_pct,
        io_request_rate=io_request_rate,
        named_event_pct=named_event_pct,
    )

    try:
        lines = read_report_lines(report_file)
    except OSError as e:
        console.print(f"[critical]ERROR: {escape(str(e))}[/critical]")
        sys.exit(1)

    if verbose:
        console.print(f"[info]Read {len(lines)} lines from {escape(str(report_file))}[/info]")

    analysis = analyze_report(lines, thresholds, source=report_file.name, max_blank_gap=max_gap)
    render_rich_output(analysis)

    if output:
        try:
            export_markdown_report(analysis, output)
        except OSError as e:
            console.print(f"[critical]ERROR: {escape(str(e))}[/critical]")
            sys.exit(1)
        console.print(f"\n[success]Analysis exported to {escape(str(output))}[/success]")

    sys.exit(exit_code_for(analysis))


@app.command()
def version() -> None:
    """Display version."""
    console.print(f"awr-io-analyze {__version__}")


if __name__ == "__main__":
    app()
