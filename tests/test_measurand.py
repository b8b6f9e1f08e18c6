from __future__ import annotations

import pytest

from models.config import ParameterMapping
from models.errors import (
    ERROR,
    WARNING,
    InvalidValueError,
    MissingValueError,
    ProviderValueError,
    UnsupportedParameterError,
    severity_of,
)
from models.measurand import Measurand, MeasurandTable


def _pm25() -> Measurand:
    return Measurand(key="particulate_matter_25", parameter="pm25", unit="ug/m3")


def test_process_accepts_numbers_and_numeric_strings() -> None:
    measurand = _pm25()

    assert measurand.process(10) == 10
    assert measurand.process("12.5") == 12.5
    assert measurand.process(-3) == -3


@pytest.mark.parametrize("raw", [None, "", "  ", "undefined", float("nan"), 0, "0"])
def test_process_treats_absent_values_as_missing(raw) -> None:
    with pytest.raises(MissingValueError) as excinfo:
        _pm25().process(raw)

    assert severity_of(excinfo.value) == WARNING


@pytest.mark.parametrize("raw", [-99, -999, "-999"])
def test_process_rejects_provider_error_codes(raw) -> None:
    with pytest.raises(ProviderValueError) as excinfo:
        _pm25().process(raw)

    assert severity_of(excinfo.value) == WARNING


@pytest.mark.parametrize("raw", ["abc", True, float("inf")])
def test_process_rejects_non_numeric(raw) -> None:
    with pytest.raises(InvalidValueError) as excinfo:
        _pm25().process(raw)

    assert severity_of(excinfo.value) == ERROR
    assert "particulate_matter_25" in str(excinfo.value)


def test_process_applies_transform() -> None:
    measurand = Measurand(key="tempf", parameter="temperature", unit="c", transform=lambda f: (f - 32) * 5 / 9)

    assert measurand.process(212) == pytest.approx(100)


def test_table_accepts_mappings_and_models() -> None:
    table = MeasurandTable(
        {
            "particulate_matter_25": {"parameter": "pm25", "unit": "ug/m3"},
            "tempf": ParameterMapping(parameter="temperature", unit="f"),
        }
    )

    assert table.keys() == ["particulate_matter_25", "tempf"]
    assert table.lookup("tempf").parameter == "temperature"
    assert "tempf" in table
    assert len(table) == 2
    assert [m.unit for m in table] == ["ug/m3", "f"]


def test_lookup_of_unknown_key_fails() -> None:
    table = MeasurandTable({"tempf": {"parameter": "temperature", "unit": "f"}})

    with pytest.raises(UnsupportedParameterError) as excinfo:
        table.lookup("humidity")

    assert "tempf" in str(excinfo.value)
    assert excinfo.value.value == "humidity"


def test_mapping_without_unit_is_rejected() -> None:
    with pytest.raises(KeyError):
        MeasurandTable({"tempf": {"parameter": "temperature"}})
