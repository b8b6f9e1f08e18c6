from __future__ import annotations

from models.coordinates import Coordinates
from models.measurement import Measurement, Measurements
from models.timestamp import Timestamp


def _measurement(value: float, when: str = "2024-01-01T00:00:00-08:00", sensor: str = "testing-ts1-pm25") -> Measurement:
    return Measurement(sensor_id=sensor, timestamp=Timestamp(when), value=value)


def test_key_combines_sensor_and_timestamp() -> None:
    assert _measurement(10).key == "testing-ts1-pm25-2024-01-01T00:00:00-08:00"


def test_repeated_key_overwrites_value() -> None:
    store = Measurements()
    store.add(_measurement(10))
    store.add(_measurement(12))

    assert len(store) == 1
    assert [m.value for m in store] == [12]


def test_range_tracks_earliest_and_latest() -> None:
    store = Measurements()
    store.add(_measurement(1, "2024-01-01T02:00:00Z"))
    store.add(_measurement(2, "2024-01-01T01:00:00Z", sensor="testing-ts1-temperature"))
    store.add(_measurement(3, "2024-01-01T03:00:00Z", sensor="testing-ts1-temperature"))

    assert store.from_.to_utc() == "2024-01-01T01:00:00Z"
    assert store.to.to_utc() == "2024-01-01T03:00:00Z"
    assert store.bounds is None


def test_mobile_measurements_widen_bounds_and_serialize_coordinates() -> None:
    store = Measurements()
    store.add(Measurement("testing-van-pm25", Timestamp("2024-01-01T00:00:00Z"), 5, Coordinates(-123, 45)))
    store.add(Measurement("testing-van-pm25", Timestamp("2024-01-01T00:01:00Z"), 6, Coordinates(-122, 46)))

    assert store.bounds == [-123, 46, -122, 45]
    documents = list(store.json())
    assert documents[0] == {
        "sensor_id": "testing-van-pm25",
        "timestamp": "2024-01-01T00:00:00+00:00",
        "value": 5,
        "coordinates": {"latitude": 45.0, "longitude": -123.0, "proj": "EPSG:4326"},
    }


def test_json_of_fixed_site_has_no_coordinates() -> None:
    store = Measurements()
    store.add(_measurement(10))

    assert list(store.json()) == [
        {"sensor_id": "testing-ts1-pm25", "timestamp": "2024-01-01T00:00:00-08:00", "value": 10}
    ]
