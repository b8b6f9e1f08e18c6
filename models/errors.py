"""Error taxonomy for the normalization engine."""

from __future__ import annotations

from typing import Any

ERROR = "error"
WARNING = "warning"


class TransformError(ValueError):
    """Base class for row-scoped failures raised while normalizing."""

    severity: str = ERROR

    def __init__(self, message: str, value: Any = None) -> None:
        if value is not None:
            message = f"{message} Provider supplied {value!r}."
        super().__init__(message)
        self.value = value


class ConfigurationError(TransformError):
    """A mapping or setting needed to interpret a record is missing or invalid."""


class UnsupportedParameterError(ConfigurationError):
    def __init__(self, parameter: Any, supported: Any = ()) -> None:
        known = ", ".join(str(key) for key in supported) or "none"
        super().__init__(f"Measurand not found. Configured parameters: {known}.", parameter)


class InvalidTimestampError(TransformError, TypeError):
    """Timestamp input or timestamp configuration could not be interpreted."""


class MissingAttributeError(TransformError):
    def __init__(self, attribute: str, value: Any = None) -> None:
        super().__init__(f"Missing '{attribute}' attribute.", value)
        self.attribute = attribute


class MissingValueError(TransformError):
    severity = WARNING

    def __init__(self, parameter: str, value: Any = None) -> None:
        super().__init__(f"No value found for '{parameter}'.")
        self.parameter = parameter
        self.value = value


class ProviderValueError(TransformError):
    """The provider reported an error code in place of a reading."""

    severity = WARNING

    def __init__(self, parameter: str, value: Any) -> None:
        super().__init__(f"Provider flagged value for '{parameter}'.", value)
        self.parameter = parameter


class InvalidValueError(TransformError):
    def __init__(self, parameter: str, value: Any) -> None:
        super().__init__(f"Value for '{parameter}' is not numeric.", value)
        self.parameter = parameter


class LocationError(TransformError):
    pass


class LatitudeBoundsError(LocationError):
    def __init__(self, value: float) -> None:
        super().__init__("Latitude must be between -90 and 90 degrees.", value)


class LongitudeBoundsError(LocationError):
    def __init__(self, value: float) -> None:
        super().__init__("Longitude must be between -180 and 180 degrees.", value)


class InvalidCoordinatesError(LocationError):
    def __init__(self, value: Any) -> None:
        super().__init__("Coordinates must be numeric.", value)


class NoDataError(RuntimeError):
    """Nothing was returned by the fetch stage; the run cannot continue."""


def severity_of(exc: BaseException) -> str:
    return getattr(exc, "severity", ERROR)
