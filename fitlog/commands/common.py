"""Shared command helpers."""

from __future__ import annotations

import json
from typing import Any, NoReturn, Optional

import typer

from fitlog.core.config import resolve_owner, resolve_store_path
from fitlog.core.state import CLIState
from fitlog.core.store import JsonEntryStore


def get_state(ctx: typer.Context) -> CLIState:
    """Extract validated CLI state from Typer context."""
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=2)
    return state


def print_json_payload(state: CLIState, payload: Any) -> None:
    """Print JSON payload with plain-mode fallback for piping."""
    if state.plain_output:
        typer.echo(json.dumps(payload, separators=(",", ":")))
        return
    state.console.print_json(data=payload)


def open_store(state: CLIState) -> JsonEntryStore:
    """Build the entry store configured for this run."""
    return JsonEntryStore(resolve_store_path(state.config))


def get_owner(state: CLIState, explicit: Optional[str] = None) -> str:
    """Resolve the owner id or fail with a usage error."""
    owner = resolve_owner(state.config, explicit)
    if not owner:
        raise typer.BadParameter(
            "No owner configured. Pass --owner, set FITLOG_OWNER or [profile] owner in config."
        )
    return owner


def fail(state: CLIState, exc: Exception, prefix: str = "Error") -> NoReturn:
    """Report a failure in the active output mode and exit with code 1."""
    status_kind = getattr(exc, "status_kind", type(exc).__name__)
    if state.json_output:
        print_json_payload(
            state,
            {"status": "error", "statusKind": status_kind, "message": str(exc)},
        )
    elif state.plain_output:
        typer.echo("status\terror")
        typer.echo(f"kind\t{status_kind}")
        typer.echo(f"message\t{exc}")
    else:
        state.console.print(f"{prefix}: {exc}")
    raise typer.Exit(code=1)
