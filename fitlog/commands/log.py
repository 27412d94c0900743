"""Owner setup and workout log submission commands."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from fitlog.commands.common import fail, get_owner, get_state, open_store, print_json_payload
from fitlog.core.config import save_config, set_profile_owner
from fitlog.core.parser import WorkoutLogError
from fitlog.core.pipeline import submit_workouts
from fitlog.core.store import OwnerNotFoundError, StoreError
from fitlog.utils.formatting import format_calories, format_minutes, format_weight
from fitlog.utils.parsing import load_log_input


def init_command(
    ctx: typer.Context,
    owner: Optional[str] = typer.Option(None, help="Owner id to register"),
    save: bool = typer.Option(False, "--save", help="Store the owner as the config default"),
) -> None:
    """Register an owner in the entry store."""
    state = get_state(ctx)
    owner_id = get_owner(state, owner)
    store = open_store(state)

    try:
        created = store.add_owner(owner_id)
    except StoreError as exc:
        fail(state, exc, prefix="Init failed")

    config_file = None
    if save:
        state.config = set_profile_owner(state.config, owner_id)
        try:
            config_file = save_config(state.config, state.config_path)
        except OSError as exc:
            fail(state, exc, prefix="Could not save config")

    payload = {
        "status": "success",
        "owner": owner_id,
        "created": created,
        "store": str(store.path),
        "config_file": str(config_file) if config_file else None,
    }

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo("status\tsuccess")
        typer.echo(f"owner\t{owner_id}")
        typer.echo(f"created\t{str(created).lower()}")
        typer.echo(f"store\t{store.path}")
        return

    if created:
        state.console.print(f"Registered owner {owner_id}")
    else:
        state.console.print(f"Owner {owner_id} already registered")
    state.console.print(f"Store: {store.path}")
    if config_file:
        state.console.print(f"Saved default owner to {config_file}")


def add_command(
    ctx: typer.Context,
    log: Optional[str] = typer.Argument(None, help="Workout log text"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Read the log from a file"),
    stdin: bool = typer.Option(False, "--stdin", help="Read the log from stdin"),
    owner: Optional[str] = typer.Option(None, help="Owner id"),
) -> None:
    """Parse a workout log and store every workout in it."""
    state = get_state(ctx)
    owner_id = get_owner(state, owner)

    stdin_text = sys.stdin.read() if stdin else ""
    try:
        raw = load_log_input(text=log, file_path=file, read_stdin=stdin, stdin_text=stdin_text)
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(str(exc))

    store = open_store(state)
    try:
        if not store.owner_exists(owner_id):
            raise OwnerNotFoundError(owner_id)
        result = submit_workouts(store, raw, owner_id)
    except WorkoutLogError as exc:
        fail(state, exc, prefix="Invalid workout log")
    except StoreError as exc:
        fail(state, exc, prefix="Could not store workouts")

    if state.json_output:
        print_json_payload(state, result.to_dict())
        return

    if state.plain_output:
        typer.echo("category\tname\tsets\treps\tweight\tduration\tcalories")
        for entry in result.entries:
            typer.echo(
                "\t".join(
                    [
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
        typer.echo(f"total\t{len(result.entries)}")
        return

    table = Table(title=f"Added {len(result.entries)} workouts")
    table.add_column("Category")
    table.add_column("Workout")
    table.add_column("Sets x Reps")
    table.add_column("Weight")
    table.add_column("Duration")
    table.add_column("Calories")
    for entry in result.entries:
        table.add_row(
            entry.category,
            entry.name,
            f"{entry.sets} x {entry.reps}",
            format_weight(entry.weight_kg),
            format_minutes(entry.duration_min),
            format_calories(entry.calories_burned),
        )
    state.console.print(table)
    state.console.print(result.message)
