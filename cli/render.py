from __future__ import annotations

from typing import Any, Dict, Iterable

import typer


def echo_heading(text: str, err: bool = False) -> None:
    typer.secho(text, bold=True, err=err)


def echo_key_values(pairs: Iterable[tuple[str, Any]], err: bool = False) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}", err=err)


def render_summary(summary: Dict[str, Any], err: bool = False) -> None:
    echo_heading("Run Summary", err=err)
    echo_key_values(
        [
            ("source_name", summary.get("source_name")),
            ("locations", summary.get("locations")),
            ("systems", summary.get("systems")),
            ("sensors", summary.get("sensors")),
            ("flags", summary.get("flags")),
            ("measures", summary.get("measures")),
            ("from", summary.get("from")),
            ("to", summary.get("to")),
            ("bounds", summary.get("bounds")),
        ],
        err=err,
    )

    errors = summary.get("errors") or {}
    typer.echo(err=err)
    echo_heading("Errors", err=err)
    if errors:
        for category, count in errors.items():
            typer.echo(f"  - {category}: {count}", err=err)
    else:
        typer.echo("No errors recorded.", err=err)
