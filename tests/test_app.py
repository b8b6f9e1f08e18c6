from typing import Any, Dict, Iterator

import pytest
from fastapi.testclient import TestClient

from app.main import create_app


@pytest.fixture
def api_client() -> Iterator[TestClient]:
    app = create_app()
    with TestClient(app) as client:
        yield client


def _request(**overrides: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "provider": "testing",
        "keys": {
            "location_id_key": "station",
            "location_label_key": "site_name",
            "x_geometry_key": "longitude",
            "y_geometry_key": "latitude",
        },
        "parameters": {
            "particulate_matter_25": {"parameter": "pm25", "unit": "ug/m3"},
            "tempf": {"parameter": "temperature", "unit": "f"},
        },
        "data": {
            "locations": [
                {"station": "ts1", "site_name": "test site #1", "latitude": 45.56665, "longitude": -123.12121}
            ],
            "measurements": [
                {"station": "ts1", "datetime": "2024-01-01T00:00:00-08:00", "particulate_matter_25": 10, "tempf": 80},
                {"station": "ts1", "datetime": "2024-01-01T01:00:00-08:00", "particulate_matter_25": "abc", "tempf": 81},
            ],
        },
    }
    body.update(overrides)
    return body


def test_transform_returns_document_and_summary(api_client: TestClient) -> None:
    response = api_client.post("/transform", json=_request())

    assert response.status_code == 200
    payload = response.json()
    assert payload["document"]["meta"]["source"] == "testing"
    assert payload["document"]["locations"][0]["location_id"] == "testing-ts1"
    assert len(payload["document"]["measurements"]) == 3

    summary = payload["summary"]
    assert summary["locations"] == 1
    assert summary["sensors"] == 2
    assert summary["measures"] == 3
    assert summary["errors"] == {"error": 1}
    assert summary["from"] == "2024-01-01T08:00:00Z"
    assert summary["to"] == "2024-01-01T09:00:00Z"
    assert summary["bounds"] == [-123.12121, 45.56665, -123.12121, 45.56665]

    [issue] = payload["issues"]
    assert issue["category"] == "error"
    assert issue["message"].startswith("Skipping measurement row 2:")


def test_transform_strict_rejects_bad_rows(api_client: TestClient) -> None:
    response = api_client.post("/transform", json=_request(strict=True))

    assert response.status_code == 400
    assert "not numeric" in response.json()["detail"]


def test_transform_without_sections_returns_bad_request(api_client: TestClient) -> None:
    response = api_client.post("/transform", json=_request(data={"readings": []}))

    assert response.status_code == 400
    assert "none of the sections" in response.json()["detail"]


def test_transform_empty_data_returns_bad_request(api_client: TestClient) -> None:
    response = api_client.post("/transform", json=_request(data={}))

    assert response.status_code == 400
    assert response.json()["detail"] == "No data was returned to process."


def test_transform_unknown_key_returns_bad_request(api_client: TestClient) -> None:
    response = api_client.post("/transform", json=_request(keys={"station_key": "station"}))

    assert response.status_code == 400
    assert "station_key" in response.json()["detail"]


def test_transform_rejects_settings_smuggled_through_keys(api_client: TestClient) -> None:
    response = api_client.post("/transform", json=_request(keys={"location_id_key": "station", "provider": "other"}))

    assert response.status_code == 400
    assert "provider" in response.json()["detail"]


def test_transform_unknown_timezone_returns_bad_request(api_client: TestClient) -> None:
    response = api_client.post("/transform", json=_request(timezone="Mars/Olympus_Mons"))

    assert response.status_code == 400


def test_transform_requires_provider(api_client: TestClient) -> None:
    body = _request()
    del body["provider"]

    response = api_client.post("/transform", json=body)

    assert response.status_code == 422


def test_health_and_root(api_client: TestClient) -> None:
    assert api_client.get("/health").json() == {"status": "ok"}
    assert api_client.get("/").json()["status"] == "ok"
