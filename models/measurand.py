"""Static lookup from provider parameter keys to canonical measurands."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from models.errors import InvalidValueError, MissingValueError, ProviderValueError, UnsupportedParameterError
from models.serialize import is_blank

PROVIDER_ERROR_CODES = frozenset({-99, -999})


@dataclass(frozen=True)
class Measurand:
    """How one provider parameter maps onto a canonical parameter and unit."""

    key: str
    parameter: str
    unit: str
    transform: Optional[Callable[[Any], Any]] = None

    def process(self, value: Any) -> float:
        """Turn a raw provider value into the stored numeric value.

        Absent values (``None``, blank, NaN, zero) raise ``MissingValueError``;
        provider error codes raise ``ProviderValueError``; anything that is not
        numeric raises ``InvalidValueError``.
        """
        if is_blank(value):
            raise MissingValueError(self.key, value)
        number = self._coerce(value)
        if number == 0:
            raise MissingValueError(self.key, value)
        if number in PROVIDER_ERROR_CODES:
            raise ProviderValueError(self.key, value)
        if self.transform is not None:
            number = self.transform(number)
        return number

    def _coerce(self, value: Any) -> float:
        if isinstance(value, bool):
            raise InvalidValueError(self.key, value)
        if isinstance(value, (int, float)):
            number = value
        else:
            candidate = str(value).strip()
            try:
                number = int(candidate)
            except ValueError:
                try:
                    number = float(candidate)
                except ValueError as exc:
                    raise InvalidValueError(self.key, value) from exc
        if isinstance(number, float) and not math.isfinite(number):
            if math.isnan(number):
                raise MissingValueError(self.key, value)
            raise InvalidValueError(self.key, value)
        return number


class MeasurandTable:
    """Immutable provider-key -> ``Measurand`` mapping supplied by the caller."""

    def __init__(self, parameters: Mapping[str, Any]) -> None:
        table: Dict[str, Measurand] = {}
        for key, mapping in parameters.items():
            table[key] = Measurand(
                key=key,
                parameter=_field(mapping, "parameter"),
                unit=_field(mapping, "unit"),
                transform=_field(mapping, "transform", None),
            )
        self._table = table

    def keys(self) -> List[str]:
        return list(self._table)

    def lookup(self, key: Any) -> Measurand:
        measurand = self._table.get(key) if isinstance(key, str) else None
        if measurand is None:
            raise UnsupportedParameterError(key, self._table)
        return measurand

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __iter__(self) -> Iterator[Measurand]:
        return iter(self._table.values())

    def __len__(self) -> int:
        return len(self._table)


_REQUIRED = object()


def _field(mapping: Any, name: str, default: Any = _REQUIRED) -> Any:
    if isinstance(mapping, Mapping):
        value = mapping.get(name, default)
    else:
        value = getattr(mapping, name, default)
    if value is _REQUIRED:
        raise KeyError(f"Parameter mapping is missing {name!r}.")
    return value
