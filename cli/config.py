from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import typer

from models.config import ClientConfig
from settings import get_settings

_PARSERS_BY_SUFFIX = {".csv": "csv", ".tsv": "tsv", ".json": "json"}


def _parser_for(path: Path, default: Any) -> Any:
    return _PARSERS_BY_SUFFIX.get(path.suffix.lower(), default)


def _split_input(value: str) -> tuple[Optional[str], Path]:
    name, sep, path = value.partition("=")
    if sep and name and not Path(value).exists():
        return name.strip(), Path(path)
    return None, Path(value)


def read_config_file(path: Path) -> Dict[str, Any]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise typer.BadParameter(f"{path} must contain a JSON object.")
    return payload


def load_config(
    path: Path,
    inputs: Sequence[str] = (),
    strict: Optional[bool] = None,
) -> ClientConfig:
    """Build a client config from a JSON file plus command line overrides.

    A single ``--input PATH`` replaces the configured resource with a local
    file; ``--input name=PATH`` pairs build named sub-sources. The parser is
    picked from each file suffix unless the file configures one.
    """
    payload = read_config_file(path)
    if strict is None:
        strict = payload.get("strict", get_settings().strict)
    payload["strict"] = strict

    if inputs:
        parsed = [_split_input(value) for value in inputs]
        default_parser = payload.get("parser", "json")
        named = [name for name, _ in parsed if name is not None]
        if named and len(named) != len(parsed):
            raise typer.BadParameter("Mix of named and unnamed --input values.")
        if not named:
            if len(parsed) > 1:
                raise typer.BadParameter("Multiple --input values must be given as name=PATH.")
            source = parsed[0][1]
            payload.update(reader="file", resource=str(source))
            if "parser" not in payload:
                payload["parser"] = _parser_for(source, default_parser)
        else:
            payload["reader"] = "file"
            payload["resource"] = {name: str(source) for name, source in parsed}
            if "parser" not in payload or isinstance(default_parser, str):
                payload["parser"] = {
                    name: _parser_for(source, default_parser) for name, source in parsed
                }

    return ClientConfig(**payload)
