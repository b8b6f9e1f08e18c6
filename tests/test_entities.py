from __future__ import annotations

from models.coordinates import Coordinates
from models.graph import EntityGraph
from models.location import Location
from models.measurand import Measurand
from models.sensor import Sensor

PM25 = Measurand(key="particulate_matter_25", parameter="pm25", unit="ug/m3")


def _location(site_id: str = "ts1", coordinates: Coordinates | None = None) -> Location:
    return Location(
        location_id=f"testing-{site_id}",
        provider="testing",
        site_id=site_id,
        site_name="test site #1",
        coordinates=coordinates,
        averaging_interval_secs=3600,
    )


def test_location_defaults_logging_interval_to_averaging() -> None:
    location = _location()

    assert location.logging_interval_secs == 3600


def test_get_system_is_get_or_create() -> None:
    location = _location()

    default = location.get_system()
    again = location.get_system(None, None)
    named = location.get_system("Met One", "BAM 1020")

    assert default is again
    assert default.system_id == "testing-ts1"
    assert default.manufacturer_name == "default"
    assert named.system_id == "testing-ts1-met_one:bam_1020"
    assert list(location.systems) == ["testing-ts1", "testing-ts1-met_one:bam_1020"]


def test_add_sensor_keeps_first_insert() -> None:
    system = _location().get_system()
    first = Sensor("testing-ts1-pm25", system.system_id, PM25, averaging_interval_secs=60)
    second = Sensor("testing-ts1-pm25", system.system_id, PM25, averaging_interval_secs=3600)

    assert system.add_sensor(first) is first
    assert system.add_sensor(second) is first
    assert system.sensors["testing-ts1-pm25"].averaging_interval_secs == 60


def test_add_flag_derives_key_and_dedupes() -> None:
    sensor = Sensor("testing-ts1-pm25", "testing-ts1", PM25)

    flag = sensor.add_flag("maintenance", datetime_from="2024-01-01T00:00:00+00:00", note="filter change")
    repeat = sensor.add_flag("maintenance", datetime_from="2024-01-01T00:00:00+00:00", note="other")

    assert repeat is flag
    assert flag.flag_id == "testing-ts1-pm25-maintenance::2024-01-01T00:00:00+00:00"
    assert flag.json() == {
        "flag_id": "testing-ts1-pm25-maintenance::2024-01-01T00:00:00+00:00",
        "datetime_from": "2024-01-01T00:00:00+00:00",
        "flag_name": "maintenance",
        "note": "filter change",
    }


def test_sensor_json_omits_empty_fields() -> None:
    sensor = Sensor("testing-ts1-pm25", "testing-ts1", PM25, averaging_interval_secs=3600)

    assert sensor.json() == {
        "sensor_id": "testing-ts1-pm25",
        "parameter": "pm25",
        "units": "ug/m3",
        "averaging_interval_secs": 3600,
        "logging_interval_secs": 3600,
        "flags": [],
    }


def test_graph_is_first_write_wins() -> None:
    graph = EntityGraph()
    first = graph.add_location(_location(coordinates=Coordinates(-123, 45)))
    duplicate = graph.add_location(_location(coordinates=Coordinates(10, 10)))

    assert duplicate is first
    assert len(graph) == 1
    assert graph.bounds == [-123, 45, -123, 45]


def test_graph_bounds_cover_locations_with_coordinates() -> None:
    graph = EntityGraph()
    graph.add_location(_location("a", Coordinates(-123, 45)))
    graph.add_location(_location("b"))
    graph.add_location(_location("c", Coordinates(-120, 40)))

    assert graph.bounds == [-123, 45, -120, 40]
    assert [location.location_id for location in graph] == ["testing-a", "testing-b", "testing-c"]


def test_graph_counts_and_json() -> None:
    graph = EntityGraph()
    location = graph.add_location(_location(coordinates=Coordinates(-123.12121, 45.56665)))
    system = location.get_system()
    sensor = graph.index_sensor(system.add_sensor(Sensor("testing-ts1-pm25", system.system_id, PM25)))
    sensor.add_flag("maintenance")

    assert graph.get_sensor("testing-ts1-pm25") is sensor
    assert graph.get_location("testing-ts1") is location
    assert (graph.systems_count, graph.sensors_count, graph.flags_count) == (1, 1, 1)

    [document] = graph.json()
    assert document["location_id"] == "testing-ts1"
    assert document["site_name"] == "test site #1"
    assert document["coordinates"]["latitude"] == 45.56665
    assert "ismobile" not in document
    assert document["systems"][0]["sensors"][0]["flags"][0]["flag_id"] == (
        "testing-ts1-pm25-maintenance::infinity"
    )


def test_system_json_lists_its_sensors() -> None:
    system = _location().get_system("Met One", "BAM 1020")
    system.add_sensor(Sensor("testing-ts1-pm25", system.system_id, PM25))

    document = system.json()

    assert sorted(document) == ["manufacturer_name", "model_name", "sensors", "system_id"]
    assert document["manufacturer_name"] == "Met One"
    assert [sensor["sensor_id"] for sensor in document["sensors"]] == ["testing-ts1-pm25"]
