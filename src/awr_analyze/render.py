"""Rich console rendering and Markdown export of a ReportAnalysis."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from awr_analyze.models import SEVERITY_MARKERS, ReportAnalysis, SectionResult, Severity
from awr_analyze.report import KNOWLEDGE_BASE

NO_ISSUES_TEXT = "No immediate I/O issues flagged."

# ============================================================
# RICH OUTPUT RENDERING
# ============================================================

AWR_ANALYZE_THEME = Theme(
    {
        "critical": "bold red",
        "warning": "bold yellow",
        "success": "bold green",
        "info": "cyan",
        "metric": "white",
        "label": "dim white",
        "header": "bold magenta",
    }
)

console = Console(theme=AWR_ANALYZE_THEME)

SEVERITY_STYLES: dict[Severity, str] = {
    "critical": "critical",
    "warning": "warning",
    "info": "info",
}
BORDER_STYLES: dict[Severity, str] = {
    "critical": "red",
    "warning": "yellow",
    "info": "cyan",
}


def not_found_text(section: SectionResult) -> str:
    return f"No {section.title.lower()} section found."


def section_status(section: SectionResult) -> str:
    """Short status for the summary table."""
    if not section.found:
        return "Not found"
    if not section.alerts:
        return "Clean"
    return f"{len(section.alerts)} alert(s)"


def sanitize_text(text: str) -> str:
    """Strip emoji markers for Markdown output."""
    for marker in SEVERITY_MARKERS.values():
        glyph = marker.split(" ", 1)[0]
        text = text.replace(f"{glyph} ", "").replace(glyph, "")
    return text


def render_alerts_panel(section: SectionResult) -> Panel:
    """Render a section's alerts, coloured by the worst severity."""
    alerts = section.alerts
    worst = section.worst_severity or "info"

    alert_text = Text()
    for index, alert in enumerate(alerts):
        line_ending = "\n" if index < len(alerts) - 1 else ""
        alert_text.append(f"- {alert.text}{line_ending}", style=SEVERITY_STYLES[alert.severity])

    return Panel(
        alert_text,
        title=f"[{SEVERITY_STYLES[worst]}]Analysis / Comments[/{SEVERITY_STYLES[worst]}]",
        border_style=BORDER_STYLES[worst],
        expand=True,
    )


def create_summary_table(analysis: ReportAnalysis) -> Table:
    """Alert counts per section."""
    table = Table(title="Alert Summary", header_style="header")
    table.add_column("Section", style="label")
    table.add_column("Status", style="metric")
    table.add_column("Critical", justify="right", style="critical")
    table.add_column("Warning", justify="right", style="warning")
    table.add_column("Info", justify="right", style="info")
    for section in analysis.sections:
        counts = {severity: 0 for severity in SEVERITY_STYLES}
        for alert in section.alerts:
            counts[alert.severity] += 1
        table.add_row(
            section.title,
            section_status(section),
            str(counts["critical"]),
            str(counts["warning"]),
            str(counts["info"]),
        )
    return table


def create_knowledge_base_panel() -> Panel:
    kb_table = Table(show_header=False, box=None, padding=(0, 1))
    kb_table.add_column("Topic", style="label")
    kb_table.add_column("Meaning", style="metric")
    for topic, meaning in KNOWLEDGE_BASE:
        kb_table.add_row(topic, meaning)
    return Panel(kb_table, title="Knowledge Base / Best Practices", border_style="info")


def render_section(section: SectionResult, out: Console) -> None:
    out.print(Rule(f"[header]{section.title}[/header]"))
    out.print()

    if section.table is None:
        out.print(Text(not_found_text(section), style="warning"))
        out.print()
        return

    # Verbatim table text: no markup, no wrapping
    for line in section.table:
        out.print(Text(line), soft_wrap=True)
    out.print()

    if section.alerts:
        out.print(render_alerts_panel(section))
    else:
        out.print(Text(NO_ISSUES_TEXT, style="success"))
    out.print()


def render_rich_output(analysis: ReportAnalysis, out: Console | None = None) -> None:
    """Render the full analysis using Rich components."""
    out = out or console
    out.print()
    title = f"AWR I/O Analysis for {escape(analysis.source)}"
    out.print(Panel(title, style="header", expand=True))
    out.print()

    for section in analysis.sections:
        render_section(section, out)

    out.print(create_summary_table(analysis))
    out.print()
    out.print(create_knowledge_base_panel())


# ============================================================
# MARKDOWN EXPORT
# ============================================================


def build_markdown_report(analysis: ReportAnalysis) -> str:
    """Build the Markdown rendering of an analysis."""
    md_content: list[str] = []

    md_content.append(f"# AWR I/O Analysis for `{analysis.source}`\n\n")
    md_content.append(f"**Generated:** {datetime.now().isoformat()}\n\n")

    # Thresholds
    md_content.append("## Thresholds\n\n")
    for name, value in analysis.thresholds.model_dump().items():
        md_content.append(f"- **{name}:** {value:g}\n")
    md_content.append("\n")

    for section in analysis.sections:
        md_content.append(f"## {section.title}\n\n")

        if section.table is None:
            md_content.append(f"*{not_found_text(section)}*\n\n")
            continue

        md_content.append("```text\n")
        for line in section.table:
            md_content.append(f"{line}\n")
        md_content.append("```\n\n")

        if section.alerts:
            md_content.append("### Analysis / Comments\n\n")
            for alert in section.alerts:
                md_content.append(f"- {sanitize_text(alert.text)}\n")
            md_content.append("\n")
        else:
            md_content.append(f"{NO_ISSUES_TEXT}\n\n")

    md_content.append("## Knowledge Base / Best Practices\n\n")
    for topic, meaning in KNOWLEDGE_BASE:
        md_content.append(f"- {topic}: {meaning}\n")

    return "".join(md_content)


def export_markdown_report(analysis: ReportAnalysis, output_path: Path) -> None:
    """Export the analysis to a Markdown file."""
    output_path.write_text(build_markdown_report(analysis), encoding="utf-8")
