"""Leaderboard rendering: fixed-width text lines, SVG output and a rich console summary."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from xml.sax.saxutils import escape

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ActivityMetrics, LeaderboardReport, RankedEntry


@dataclass(frozen=True)
class Column:
    text: object
    width: int | None = None
    align: str = "left"


@dataclass(frozen=True)
class SvgOptions:
    width: int = 1100
    font_size: int = 14
    line_height: int = 18
    margin: int = 20


_FONT_STACK = (
    'ui-monospace, SFMono-Regular, Menlo, Monaco, Consolas, "Liberation Mono", '
    '"Courier New", monospace'
)
_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}

ENRICHED_RULE = "-" * 60
PLAIN_RULE = "-" * 38


def _format_number(n: int) -> str:
    return f"{n:,}"


def format_line(columns: Sequence[Column]) -> str:
    parts = []
    for col in columns:
        text = "" if col.text is None else str(col.text)
        if col.width is None:
            parts.append(text)
        elif col.align == "right":
            parts.append(text.rjust(col.width))
        else:
            parts.append(text.ljust(col.width))
    return " ".join(parts)


def _enriched_header() -> str:
    return format_line([
        Column("rk", 2, "right"),
        Column("login", 22),
        Column("commits", 7, "right"),
        Column("pr_m", 5, "right"),
        Column("pr_o", 5, "right"),
        Column("issues", 6, "right"),
    ])


def _plain_header() -> str:
    return format_line([
        Column("rk", 2, "right"),
        Column("login", 22),
        Column("commits", 7, "right"),
    ])


def format_enriched_row(entry: RankedEntry) -> str:
    m = entry.metrics or ActivityMetrics()
    return format_line([
        Column(entry.rank, 2, "right"),
        Column(entry.login, 22),
        Column(entry.commits, 7, "right"),
        Column(m.prs_merged, 5, "right"),
        Column(m.prs_opened, 5, "right"),
        Column(m.issues_opened, 6, "right"),
    ])


def format_plain_row(entry: RankedEntry) -> str:
    return format_line([
        Column(entry.rank, 2, "right"),
        Column(entry.login, 22),
        Column(entry.commits, 7, "right"),
    ])


def build_report_lines(report: LeaderboardReport) -> list[str]:
    """Lay out the report as text lines, in the order the report already holds."""
    window = report.window
    lines = [
        f"{report.org} leaderboard last {report.months} months {window.search_range}",
        "",
        "Overall top contributors",
        _enriched_header(),
        ENRICHED_RULE,
    ]
    lines.extend(format_enriched_row(e) for e in report.overall)

    lines += ["", "Per repository leaderboards", ""]
    for repo in report.repos:
        lines.append(f"{report.org}/{repo.name}  commits {repo.total_commits}")
        if repo.enriched:
            lines += [_enriched_header(), ENRICHED_RULE]
            lines.extend(format_enriched_row(e) for e in repo.entries)
        else:
            lines += [_plain_header(), PLAIN_RULE]
            lines.extend(format_plain_row(e) for e in repo.entries)
        lines.append("")
    return lines


def build_svg(lines: Sequence[str], options: SvgOptions | None = None) -> str:
    """Rasterize text lines into a self-contained SVG document."""
    opts = options or SvgOptions()
    height = opts.margin * 2 + len(lines) * opts.line_height + 10
    y0 = opts.margin + opts.font_size

    text_els = "\n".join(
        f'<text x="{opts.margin}" y="{y0 + i * opts.line_height}">{escape(line, _XML_ENTITIES)}</text>'
        for i, line in enumerate(lines)
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{opts.width}" height="{height}" '
        f'viewBox="0 0 {opts.width} {height}">\n'
        f'  <rect x="0" y="0" width="{opts.width}" height="{height}" fill="white"/>\n'
        "  <style>\n"
        "    text {\n"
        f"      font-family: {_FONT_STACK};\n"
        f"      font-size: {opts.font_size}px;\n"
        "      fill: #111;\n"
        "      white-space: pre;\n"
        "    }\n"
        "  </style>\n"
        f"{text_els}\n"
        "</svg>"
    )


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_svg(lines: Sequence[str], output_file: str, options: SvgOptions | None = None) -> None:
    """Write the SVG next to ``output_file`` and rename it into place."""
    content = build_svg(lines, options)
    directory = os.path.dirname(os.path.abspath(output_file))
    fd, tmp_path = tempfile.mkstemp(prefix=".leaderboard-", suffix=".svg", dir=directory)
    try:
        os.chmod(tmp_path, 0o644 & ~_current_umask())
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_path, output_file)
    except BaseException:
        os.unlink(tmp_path)
        raise


def render_summary(report: LeaderboardReport, top_n: int = 10, console: Console | None = None) -> None:
    """Print an operator summary of the report using rich."""
    console = console or Console()

    console.print(Panel(
        Text(
            f"org-leaderboard: {report.org}\nPeriod: {report.window.search_range}",
            justify="center",
        ),
        style="bold cyan",
    ))
    console.print()

    if report.failed_repos:
        console.print(
            f"[bold yellow]Warning:[/bold yellow] Failed to collect stats for "
            f"{len(report.failed_repos)} repo(s): {', '.join(report.failed_repos)}"
        )
        console.print()

    console.print("[bold]Summary[/bold]")
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    summary.add_row("Repositories", _format_number(report.total_repos))
    summary.add_row("Active Repositories", _format_number(len(report.repos)))
    summary.add_row("Total Commits", _format_number(report.total_commits))
    summary.add_row("Contributors Ranked", _format_number(len(report.overall)))
    console.print(summary)
    console.print()

    if report.overall:
        console.print(f"[bold]Top Contributors (top {top_n})[/bold]")
        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Login")
        table.add_column("Commits \u25bc", justify="right")
        table.add_column("PRs Merged", justify="right")
        table.add_column("PRs Opened", justify="right")
        table.add_column("Issues", justify="right")
        for e in report.overall[:top_n]:
            m = e.metrics or ActivityMetrics()
            table.add_row(
                str(e.rank),
                e.login,
                _format_number(e.commits),
                _format_number(m.prs_merged),
                _format_number(m.prs_opened),
                _format_number(m.issues_opened),
            )
        console.print(table)
        console.print()
