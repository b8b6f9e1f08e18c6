"""Deterministic ingest identifiers for locations, systems, sensors and flags."""

from __future__ import annotations

import re
from typing import Any, Optional

from models.errors import MissingAttributeError

_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w]")


def clean_key(value: Any) -> Optional[str]:
    """Normalize a raw identifier fragment: ``" Site #1 "`` -> ``"site_1"``."""
    if value is None:
        return None
    text = _WHITESPACE.sub("_", str(value).strip())
    text = _NON_WORD.sub("", text).lower()
    return text or None


def location_id(provider: Optional[str], site_id: Any) -> str:
    if not provider:
        raise MissingAttributeError("provider", provider)
    cleaned = clean_key(site_id)
    if cleaned is None:
        raise MissingAttributeError("location id", site_id)
    return f"{provider}-{cleaned}"


def system_id(location_key: str, manufacturer: Any = None, model: Any = None) -> str:
    manufacturer = clean_key(manufacturer)
    model = clean_key(model)
    if manufacturer and model:
        suffix = f"-{manufacturer}:{model}"
    elif manufacturer or model:
        suffix = f"-{manufacturer or model}"
    else:
        suffix = ""
    return f"{location_key}{suffix}"


def sensor_id(
    location_key: str,
    parameter: str,
    instance: Any = None,
    version_date: Any = None,
) -> str:
    if not parameter:
        raise MissingAttributeError("parameter", parameter)
    parts = [parameter]
    for discriminator in (clean_key(instance), clean_key(version_date)):
        if discriminator:
            parts.append(discriminator)
    return f"{location_key}-{':'.join(parts)}"


def flag_id(sensor_key: str, flag_name: Any, starts: Any = None) -> str:
    if not flag_name:
        raise MissingAttributeError("flag", flag_name)
    return f"{sensor_key}-{flag_name}::{starts or 'infinity'}"
