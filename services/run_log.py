"""Per-run accumulator of categorized warnings and errors."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from models.errors import ERROR, WARNING, severity_of

logger = logging.getLogger(__name__)

_LEVELS = {WARNING: logging.WARNING, ERROR: logging.ERROR}


@dataclass(frozen=True)
class LogEntry:
    message: str
    cause: Optional[BaseException] = None


class RunLog:
    """Collects entries by category; recording never raises."""

    def __init__(self, provider: Optional[str] = None) -> None:
        self.provider = provider
        self._entries: Dict[str, List[LogEntry]] = {}

    def record(
        self,
        category: str,
        message: str,
        cause: Optional[BaseException] = None,
        **context: Any,
    ) -> LogEntry:
        entry = LogEntry(message=message, cause=cause)
        self._entries.setdefault(category, []).append(entry)
        logger.log(
            _LEVELS.get(category, logging.INFO),
            message,
            extra={"provider": self.provider, "category": category, **context},
        )
        return entry

    def warning(self, message: str, cause: Optional[BaseException] = None, **context: Any) -> LogEntry:
        return self.record(WARNING, message, cause, **context)

    def error(self, message: str, cause: Optional[BaseException] = None, **context: Any) -> LogEntry:
        return self.record(ERROR, message, cause, **context)

    def capture(self, exc: BaseException, prefix: str = "", **context: Any) -> LogEntry:
        """Record an exception under the category implied by its severity."""
        message = f"{prefix}{exc}" if prefix else str(exc)
        return self.record(severity_of(exc), message, exc, reason=type(exc).__name__, **context)

    def entries(self, category: str) -> List[LogEntry]:
        return list(self._entries.get(category, ()))

    def counts(self) -> Dict[str, int]:
        return {category: len(entries) for category, entries in self._entries.items()}

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())
