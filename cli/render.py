from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import typer

UNKNOWN = "unknown"


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _percent(value: Optional[float]) -> str:
    return UNKNOWN if value is None else f"{value:.1f}%"


def _liters(value: Optional[float]) -> str:
    return UNKNOWN if value is None else f"{value:.3f} L"


def render_table(payload: Dict[str, Any]) -> None:
    echo_heading("Fill Levels")
    echo_key_values([("message_count", payload.get("message_count"))])

    rows = payload.get("rows") or []
    typer.echo()
    if not rows:
        typer.echo("Waiting for data...")
        return

    for row in rows:
        typer.echo(
            f"  - {row.get('entity_key')}: "
            f"level={_percent(row.get('current_average'))} "
            f"consumed={_percent(row.get('consumed_percent'))} "
            f"volume={_liters(row.get('consumed_quantity'))}"
        )


def render_status(payload: Dict[str, Any]) -> None:
    echo_heading("Session")
    echo_key_values(
        [
            ("active", payload.get("active")),
            ("message_count", payload.get("message_count")),
            ("entity_count", payload.get("entity_count")),
        ]
    )
