"""Resolution of provider-specific record fields.

Every provider mapping (location id, label, coordinates, timestamps, ...) is
described by a ``FieldKey``: either the literal name of a column in the raw
record or a function computing the value from the whole record.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

Record = Mapping[str, Any]


class FieldKey:
    """Common base for the two field variants."""

    def resolve(self, record: Optional[Record]) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class LiteralField(FieldKey):
    name: str

    def resolve(self, record: Optional[Record]) -> Any:
        if record is None:
            return None
        return record.get(self.name)

    def present_in(self, record: Record) -> bool:
        return self.name in record

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ComputedField(FieldKey):
    fn: Callable[[Record], Any]

    def resolve(self, record: Optional[Record]) -> Any:
        return self.fn(record)

    def present_in(self, record: Record) -> bool:
        return self.fn(record) is not None

    def __str__(self) -> str:
        return getattr(self.fn, "__name__", "<computed>")


def as_field(key: Union[str, Callable[[Record], Any], FieldKey]) -> FieldKey:
    """Coerce a column name or callable into a ``FieldKey`` variant."""
    if isinstance(key, FieldKey):
        return key
    if isinstance(key, str):
        return LiteralField(key)
    if callable(key):
        return ComputedField(key)
    raise TypeError(f"Field keys must be a column name or a callable, got {type(key).__name__}.")


def resolve(record: Optional[Record], key: Union[str, Callable[[Record], Any], FieldKey]) -> Any:
    return as_field(key).resolve(record)


def resolve_number(record: Optional[Record], key: Union[str, Callable[[Record], Any], FieldKey]) -> Any:
    """Resolve a field and coerce numeric strings (as read from CSV) to numbers.

    Blank strings resolve to ``None`` so that they fall through to defaults
    instead of becoming zero. Values that are not numeric are returned as-is.
    """
    value = resolve(record, key)
    if isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return None
        try:
            return int(candidate)
        except ValueError:
            pass
        try:
            parsed = float(candidate)
        except ValueError:
            return value
        return None if math.isnan(parsed) else parsed
    return value
