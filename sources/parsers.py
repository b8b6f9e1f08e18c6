"""Parsers turn reader output into lists or mappings of raw records."""

from __future__ import annotations

import csv
import io
import json
from typing import Any, Callable, Dict, List

Parser = Callable[[Any], Any]


def json_parser(text: Any) -> Any:
    if isinstance(text, (bytes, bytearray)):
        text = text.decode("utf-8")
    if isinstance(text, str):
        return json.loads(text)
    return text


def _delimited(text: Any, delimiter: str) -> Any:
    if isinstance(text, (bytes, bytearray)):
        text = text.decode("utf-8")
    if not isinstance(text, str):
        return text
    reader = csv.DictReader(io.StringIO(text), delimiter=delimiter, skipinitialspace=True)
    rows: List[Dict[str, Any]] = []
    for row in reader:
        if not any((value or "").strip() for value in row.values() if isinstance(value, str)):
            continue
        rows.append({(key or "").strip(): value for key, value in row.items()})
    return rows


def csv_parser(text: Any) -> Any:
    return _delimited(text, ",")


def tsv_parser(text: Any) -> Any:
    return _delimited(text, "\t")


PARSERS: Dict[str, Parser] = {
    "json": json_parser,
    "csv": csv_parser,
    "tsv": tsv_parser,
}
