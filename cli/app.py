from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import httpx
import typer
from pydantic import ValidationError

from cli.config import load_config
from cli.render import render_summary
from logging_config import configure_logging
from models.errors import NoDataError, TransformError
from services.normalizer import Normalizer

app = typer.Typer(
    help="Normalize provider sensor payloads into ingest documents.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _fail(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to LOG_LEVEL env or INFO).",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging(log_level.upper() if log_level else None)


@app.command("transform")
def transform_command(
    config_path: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="JSON provider configuration."
    ),
    inputs: List[str] = typer.Option(
        [],
        "--input",
        "-i",
        help="Local input file, or name=PATH for each named sub-source.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        dir_okay=False,
        help="Write the ingest document here instead of stdout.",
    ),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--no-strict",
        help="Abort on the first bad row (defaults to TRANSFORM_STRICT env).",
    ),
) -> None:
    """Fetch, normalize and write one provider's ingest document."""
    try:
        config = load_config(config_path, inputs=inputs, strict=strict)
    except ValidationError as exc:
        _fail(f"Invalid configuration in {config_path}:\n{exc}")

    normalizer = Normalizer(config)
    try:
        document = normalizer.fetch()
    except (NoDataError, TransformError) as exc:
        _fail(f"Transform failed: {exc}")
    except httpx.HTTPError as exc:
        _fail(f"Fetching {config.resource} failed: {exc}")
    except OSError as exc:
        _fail(f"Reading input failed: {exc}")

    rendered = json.dumps(document, indent=2)
    if output is None:
        typer.echo(rendered)
        render_summary(normalizer.summary().as_dict(), err=True)
    else:
        output.write_text(rendered + "\n", encoding="utf-8")
        typer.secho(f"Wrote {output}", fg=typer.colors.GREEN)
        render_summary(normalizer.summary().as_dict())
