from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer

from cli.client import ApiClient, iter_messages
from cli.config import CLIConfig, load_config
from cli.render import render_status, render_table


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the fill level monitor service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Monitor API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="HTTP timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("replay")
def replay_command(
    ctx: typer.Context,
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="JSON lines file of data messages."
    ),
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        help="Seconds to wait between messages.",
    ),
    fresh: bool = typer.Option(
        True,
        "--fresh/--keep",
        help="Start a new session (clearing state) before replaying.",
    ),
) -> None:
    """Replay recorded inference messages against the service."""
    state = _get_state(ctx)
    delay = interval if interval is not None else state.config.replay_interval
    if fresh:
        state.client.start_session()

    table = None
    sent = 0
    for message in iter_messages(file):
        if sent and delay > 0:
            time.sleep(delay)
        table = state.client.post_message(message)
        sent += 1

    typer.secho(f"Replayed {sent} message(s) from {file}.", fg=typer.colors.GREEN)
    if table is None:
        table = state.client.get_table()
    typer.echo()
    render_table(table)


@app.command("send")
def send_command(
    ctx: typer.Context,
    entity_key: str = typer.Argument(..., help="Entity label, e.g. a bottle colour."),
    readings: List[str] = typer.Argument(..., help="Raw readings, applied in order."),
) -> None:
    """Send raw readings for one entity."""
    state = _get_state(ctx)
    table = state.client.post_readings(entity_key, readings)
    render_table(table)


@app.command("table")
def table_command(ctx: typer.Context) -> None:
    """Show current estimates for every entity."""
    state = _get_state(ctx)
    render_table(state.client.get_table())


@app.command("reset")
def reset_command(ctx: typer.Context) -> None:
    """Stop the session and discard all entity state."""
    state = _get_state(ctx)
    render_status(state.client.stop_session())
