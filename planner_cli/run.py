# -*- coding: utf-8 -*-
import asyncio
import json
import typing as t
from datetime import date

import click
from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from academic_planner.analytics import (
    averages_by_subject,
    classify_required_score,
    grade_band,
    overall_average,
    required_final_score,
    round2,
)
from academic_planner.models import DAY_LABELS, DAY_SHORT, RequiredScoreOutcome, WeekGrid
from academic_planner.server import show_grade_summary
from academic_planner.timetable import (
    agenda_for_day,
    current_week_start,
    describe_occupant,
    format_week_grid,
    resolve_week,
    shift_week,
    subjects_lookup,
    week_start_for,
)
from academic_planner.validation import ValidationError, parse_date
from mcp_wrappers.planner.mcp_service import PLANNER_DEFAULT_LEVEL, _fetch_snapshot
from registry import list_tool_schemas
from services.shared.log_config import configure_logging


console = Console()

OUTCOME_STYLES = {
    RequiredScoreOutcome.REACHABLE: ("bold yellow", "Reachable"),
    RequiredScoreOutcome.UNREACHABLE: ("bold red", "Out of reach"),
    RequiredScoreOutcome.ALREADY_SECURED: ("bold green", "Already secured"),
}


def truncate_label(label: str, max_length: int = 18) -> str:
    """Truncate label to max_length characters, adding ellipsis if needed."""
    if len(label) <= max_length:
        return label
    return label[:max_length - 3] + "..."


def create_week_table(grid: WeekGrid, subjects_by_id: t.Mapping, compact: bool = False) -> Table:
    """Create a rich table for one resolved week."""
    title = f"🗓️  Week of {grid.week_start.strftime('%d %b %Y')}"
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Time", style="cyan", width=6)
    for i, day in enumerate(grid.dates):
        table.add_column(f"{DAY_SHORT[i]} {day.strftime('%d/%m')}", style="white")

    for slot in grid.slots:
        row = grid.row(slot)
        if compact and all(entry is None for entry in row):
            continue
        cells = []
        for entry in row:
            if entry is None:
                cells.append(Text("·", style="dim"))
                continue
            display = describe_occupant(entry, subjects_by_id)
            label = truncate_label(display.label)
            if entry.is_override:
                label = f"★ {label}"
            # CSS variables have no terminal equivalent
            style = display.color if display.color.startswith("#") else "bold blue"
            cells.append(Text(label, style=style))
        table.add_row(slot, *cells)

    return table


def _resolve_start(week_start: t.Optional[str], offset: int) -> date:
    if week_start:
        start = week_start_for(parse_date(week_start, "week_start"))
    else:
        start = current_week_start()
    return shift_week(start, offset)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--log-level", default=None, help="Logging level (defaults to PLANNER_LOG_LEVEL).")
def main(log_level: t.Optional[str]) -> None:
    """Command line client for the academic planner service."""
    if log_level:
        configure_logging(log_level)
    else:
        configure_logging()


@main.command()
@click.option("--owner", "owner_id", required=True, help="Owner whose records are read.")
@click.option("--level", default=PLANNER_DEFAULT_LEVEL, show_default=True, help="Academic level bucket.")
@click.option("--week-start", default=None, help="Any day of the week to show (YYYY-MM-DD).")
@click.option("--offset", default=0, type=int, help="Weeks to move from the selected week (-1 = previous).")
@click.option("--compact", is_flag=True, help="Hide time rows that are empty all week.")
@click.option("--plain", is_flag=True, help="Print the fixed-width text table instead.")
def week(
        owner_id: str,
        level: str,
        week_start: t.Optional[str],
        offset: int,
        compact: bool,
        plain: bool,
) -> None:
    """Show one week of the timetable."""
    try:
        start = _resolve_start(week_start, offset)
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    snapshot = _fetch_snapshot(owner_id, level)
    grid = resolve_week(start, snapshot.entries)
    subjects_by_id = subjects_lookup(snapshot.subjects)

    if plain:
        click.echo(format_week_grid(grid, subjects_by_id, show_empty_rows=not compact))
        return

    console.print(create_week_table(grid, subjects_by_id, compact=compact))
    console.print(f"[dim]{len(grid.occupied())} occupied slot(s), ★ = one-off event[/dim]")


@main.command()
@click.option("--owner", "owner_id", required=True, help="Owner whose records are read.")
@click.option("--level", default=PLANNER_DEFAULT_LEVEL, show_default=True, help="Academic level bucket.")
@click.option("--day", default=None, help="Day to list (YYYY-MM-DD); today by default.")
def agenda(owner_id: str, level: str, day: t.Optional[str]) -> None:
    """List what is on for one day."""
    try:
        target = parse_date(day, "day") if day else date.today()
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if target.weekday() >= len(DAY_LABELS):
        console.print(f"[dim]{target.isoformat()} is a weekend day, nothing scheduled.[/dim]")
        return

    snapshot = _fetch_snapshot(owner_id, level)
    subjects_by_id = subjects_lookup(snapshot.subjects)
    entries = agenda_for_day(target, snapshot.entries)

    title = f"📋 {DAY_LABELS[target.weekday()]} {target.strftime('%d/%m/%Y')}"
    if not entries:
        console.print(Panel("[dim]Nothing scheduled.[/dim]", title=title, border_style="blue"))
        return

    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Time", style="cyan")
    table.add_column("What", style="white")
    table.add_column("Room", style="yellow")
    for entry in entries:
        display = describe_occupant(entry, subjects_by_id)
        label = f"★ {display.label}" if entry.is_override else display.label
        table.add_row(f"{entry.start_time} → {entry.end_time}", label, display.room or "")
    console.print(table)


@main.command()
@click.option("--owner", "owner_id", required=True, help="Owner whose records are read.")
@click.option("--level", default=PLANNER_DEFAULT_LEVEL, show_default=True, help="Academic level bucket.")
@click.option("--plain", is_flag=True, help="Print the fixed-width text table instead.")
def grades(owner_id: str, level: str, plain: bool) -> None:
    """Show weighted grade averages per subject and overall."""
    snapshot = _fetch_snapshot(owner_id, level)

    if plain:
        click.echo(show_grade_summary(snapshot.grades, snapshot.subjects))
        return

    groups = averages_by_subject(snapshot.grades, snapshot.subjects)
    if not groups:
        console.print("[dim]🎓 No grades yet.[/dim]")
        return

    table = Table(title="🎓 Grades", show_header=True, header_style="bold magenta")
    table.add_column("Subject", style="white")
    table.add_column("Grades", justify="right", style="cyan")
    table.add_column("Average", justify="right")
    for group in groups:
        band = grade_band(group.average)
        table.add_row(
            group.subject.name,
            str(len(group.grades)),
            Text(f"{group.average:.2f}", style=f"bold {band.color}"),
        )
    console.print(table)

    overall = overall_average(snapshot.grades)
    band = grade_band(overall)
    stats_text = Text()
    stats_text.append("Overall average: ", style="white")
    stats_text.append(f"{overall:.2f}", style=f"bold {band.color}")
    stats_text.append(f" ({band.label})", style="dim")
    console.print(Panel(stats_text, title="📊 Summary", border_style="green"))


@main.command(name="required-score")
@click.argument("current", type=float)
@click.argument("final_weight", type=float)
@click.argument("target", type=float)
def required_score(current: float, final_weight: float, target: float) -> None:
    """Score needed on the final exam to reach TARGET.

    CURRENT: average so far (0-10). FINAL_WEIGHT: weight of the final in
    percent. TARGET: desired final average (0-10).
    """
    try:
        required = required_final_score(current, final_weight, target)
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    outcome = classify_required_score(required)
    style, reading = OUTCOME_STYLES[outcome]
    text = Text()
    text.append("Required score: ", style="white")
    text.append(f"{round2(required):.2f}", style=style)
    text.append(f"\n{reading}", style=style)
    console.print(Panel(text, title="🎯 Final exam", border_style="blue"))


@main.command()
def tools() -> None:
    """List all tool schemas exposed by the MCP servers."""
    schemas = asyncio.run(list_tool_schemas())
    console.print(JSON(json.dumps(schemas, indent=2)))


if __name__ == "__main__":
    main()
