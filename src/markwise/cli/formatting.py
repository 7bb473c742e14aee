"""
CLI Output Formatting

Rich tables and panels for batch statistics, leaderboards and per-student
reports.
"""

import json
from typing import Dict, List, Any, Optional
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import Progress, TextColumn, BarColumn

from markwise.evaluation.aggregator import (
    BatchStatistics,
    LeaderboardEntry,
    StudentReport,
    grade_band,
)
from markwise.evaluation.types import BatchEvaluation

console = Console()

GRADE_STYLES = {
    "good": "green",
    "avg": "yellow",
    "low": "red",
}

STATUS_STYLES = {
    "Correct": "green",
    "Partial": "yellow",
    "Incorrect": "red",
}


def format_table(data: List[Dict[str, Any]], title: str = "Results",
                 headers: Optional[List[str]] = None) -> Table:
    """
    Format data as a Rich table.

    Args:
        data: List of dictionaries with row data
        title: Table title
        headers: Optional list of column headers (uses keys from first row if not provided)

    Returns:
        Rich Table object
    """
    if not data:
        table = Table(title=title)
        table.add_column("Message", style="dim")
        table.add_row("No data available")
        return table

    if headers is None:
        headers = list(data[0].keys())

    table = Table(title=title, show_header=True, header_style="bold blue")
    for header in headers:
        table.add_column(header, style="white", justify="left")

    for row in data:
        table.add_row(*[str(row.get(header, "N/A")) for header in headers])

    return table


def format_progress() -> Progress:
    """Progress bar for a batch of students."""
    return Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        console=console,
    )


def _format_marks(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


def format_statistics(stats: BatchStatistics) -> Panel:
    """Summary panel for batch statistics."""
    lines = [
        f"Students evaluated: [bold]{stats.total_students}[/bold]",
        f"Average: [bold]{stats.average:.1f}%[/bold]  "
        f"Median: {stats.median:.1f}%  Std dev: {stats.std_dev:.1f}",
    ]
    if stats.best is not None:
        lines.append(f"Best: [green]{stats.best.student.name}[/green] ({stats.best.pct:.1f}%)")
    if stats.worst is not None:
        lines.append(f"Worst: [red]{stats.worst.student.name}[/red] ({stats.worst.pct:.1f}%)")

    dist = stats.distribution
    lines.append(
        f"Distribution: [green]good {dist.good}[/green]  "
        f"[yellow]avg {dist.avg}[/yellow]  [red]low {dist.low}[/red]"
    )
    if stats.failed_students:
        lines.append(f"[red]Failed evaluations: {stats.failed_students}[/red]")
    if stats.partial_students:
        lines.append(f"[yellow]Interrupted before the last answer: {stats.partial_students}[/yellow]")

    return Panel("\n".join(lines), title="Batch Statistics", border_style="blue")


def format_leaderboard(entries: List[LeaderboardEntry], good_threshold: float = 70.0,
                       average_threshold: float = 40.0) -> Table:
    """Leaderboard table, one row per student."""
    table = Table(title="Leaderboard", show_header=True, header_style="bold blue")
    table.add_column("Rank", justify="right")
    table.add_column("Name")
    table.add_column("Roll")
    table.add_column("Score", justify="right")
    table.add_column("Percentage", justify="right")

    for entry in entries:
        style = GRADE_STYLES[grade_band(entry.pct, good_threshold, average_threshold)]
        table.add_row(
            str(entry.rank),
            entry.student.name,
            entry.student.roll or "-",
            f"{_format_marks(entry.score)}/{entry.total}",
            f"[{style}]{entry.pct:.1f}%[/{style}]",
        )

    return table


def format_student_report(report: StudentReport) -> Table:
    """Per-question table for one student."""
    student = report.student
    title = (f"{student.name} ({student.roll or 'no roll'}) - "
             f"{_format_marks(report.obtained_marks)}/{report.total_marks} "
             f"({report.percentage:.1f}%)")
    if report.partial:
        title += " - partial"
    table = Table(title=title, show_header=True, header_style="bold blue")
    table.add_column("#", justify="right")
    table.add_column("Question")
    table.add_column("Marks", justify="right")
    table.add_column("Status")
    table.add_column("Explanation", style="dim")

    for detail in report.questions:
        style = STATUS_STYLES.get(detail.status, "white")
        table.add_row(
            str(detail.number),
            detail.question,
            f"{_format_marks(detail.marks_obtained)}/{detail.total_marks}",
            f"[{style}]{detail.status}[/{style}]",
            detail.explanation,
        )

    return table


def format_results_json(batch: BatchEvaluation, stats: BatchStatistics) -> str:
    """Batch plus statistics as a JSON document."""
    return json.dumps({
        "batch": batch.to_dict(),
        "statistics": stats.to_dict(),
    }, indent=2, default=str)
