from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_FETCH_WORKERS_ENV = "FETCH_WORKER_COUNT"
_HTTP_TIMEOUT_ENV = "HTTP_TIMEOUT_SECONDS"
_STRICT_ENV = "TRANSFORM_STRICT"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    fetch_workers: int
    http_timeout: float
    strict: bool
    log_level: str


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if candidate in {"1", "true", "yes", "on"}:
        return True
    if candidate in {"0", "false", "no", "off"}:
        return False
    return default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        fetch_workers=_read_positive_int(_FETCH_WORKERS_ENV, 4),
        http_timeout=_read_positive_float(_HTTP_TIMEOUT_ENV, 30.0),
        strict=_read_bool(_STRICT_ENV, False),
        log_level=_read_log_level("INFO"),
    )
