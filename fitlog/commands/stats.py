"""Day listing and dashboard commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from fitlog.commands.common import fail, get_owner, get_state, open_store, print_json_payload
from fitlog.core.stats import dashboard, list_day
from fitlog.core.store import StoreError
from fitlog.utils.date_ranges import parse_optional_date, validate_date
from fitlog.utils.formatting import calorie_bars, format_calories, format_minutes, format_weight


def day_command(
    ctx: typer.Context,
    day: Optional[str] = typer.Option(None, "--date", help="Day to list (YYYY-MM-DD), default today", callback=validate_date),
    owner: Optional[str] = typer.Option(None, help="Owner id"),
) -> None:
    """List the workouts recorded on one day."""
    state = get_state(ctx)
    owner_id = get_owner(state, owner)

    try:
        listing = list_day(open_store(state), owner_id, parse_optional_date(day))
    except StoreError as exc:
        fail(state, exc)

    if state.json_output:
        print_json_payload(state, listing.to_dict())
        return

    if state.plain_output:
        typer.echo("time\tcategory\tname\tsets\treps\tweight\tduration\tcalories")
        for entry in listing.entries:
            typer.echo(
                "\t".join(
                    [
                        entry.occurred_at.strftime("%H:%M"),
                        entry.category,
                        entry.name,
                        str(entry.sets),
                        str(entry.reps),
                        format_weight(entry.weight_kg),
                        format_minutes(entry.duration_min),
                        str(entry.calories_burned),
                    ]
                )
            )
        typer.echo(f"total_calories\t{listing.total_calories}")
        return

    table = Table(title=f"Workouts on {listing.day.isoformat()} ({len(listing.entries)} total)")
    table.add_column("Time")
    table.add_column("Category")
    table.add_column("Workout")
    table.add_column("Sets x Reps")
    table.add_column("Weight")
    table.add_column("Duration")
    table.add_column("Calories")
    for entry in listing.entries:
        table.add_row(
            entry.occurred_at.strftime("%H:%M"),
            entry.category,
            entry.name,
            f"{entry.sets} x {entry.reps}",
            format_weight(entry.weight_kg),
            format_minutes(entry.duration_min),
            format_calories(entry.calories_burned),
        )
    state.console.print(table)
    state.console.print(f"Total calories burnt: {format_calories(listing.total_calories)}")


def dashboard_command(
    ctx: typer.Context,
    owner: Optional[str] = typer.Option(None, help="Owner id"),
    output_file: Optional[Path] = typer.Option(None, help="Write the dashboard JSON to file"),
) -> None:
    """Show today's totals, category split and the last 7 days."""
    state = get_state(ctx)
    owner_id = get_owner(state, owner)

    try:
        result = dashboard(open_store(state), owner_id)
    except StoreError as exc:
        fail(state, exc)

    payload = result.to_dict()
    if output_file:
        try:
            output_file.write_text(json.dumps(payload, indent=2) + "\n")
        except OSError as exc:
            fail(state, exc, prefix="Could not write dashboard")

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo(f"total_calories\t{result.total_calories_today}")
        typer.echo(f"total_workouts\t{result.total_workouts_today}")
        typer.echo(f"avg_calories_per_workout\t{result.avg_calories_per_workout:.1f}")
        for bucket in result.category_breakdown:
            typer.echo(f"category\t{bucket.category}\t{bucket.total_calories}")
        for bucket in result.weekly_series:
            typer.echo(f"day\t{bucket.day.isoformat()}\t{bucket.total_calories}")
        return

    state.console.print(f"Calories burnt today: {format_calories(result.total_calories_today)}")
    state.console.print(f"Workouts today: {result.total_workouts_today}")
    state.console.print(f"Average per workout: {format_calories(result.avg_calories_per_workout)}")

    if result.category_breakdown:
        table = Table(title="Calories by category")
        table.add_column("Category")
        table.add_column("Calories")
        for bucket in result.category_breakdown:
            table.add_row(bucket.category, format_calories(bucket.total_calories))
        state.console.print(table)

    state.console.print("Last 7 days:")
    bars = calorie_bars([bucket.total_calories for bucket in result.weekly_series])
    for bucket, bar in zip(result.weekly_series, bars):
        state.console.print(f"{bucket.label:>3}  {bar} {bucket.total_calories}", markup=False)
