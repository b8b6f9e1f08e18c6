from __future__ import annotations

import httpx
import pytest

from sources.parsers import PARSERS, csv_parser, json_parser, tsv_parser
from sources.readers import READERS, api_reader, file_reader, text_reader


def test_api_reader_returns_body_and_passes_options() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("x-api-key")
        return httpx.Response(200, text='{"measurements": []}')

    client = httpx.Client(transport=httpx.MockTransport(handler))

    body = api_reader(
        "https://example.test/data",
        {"headers": {"x-api-key": "secret"}, "params": {"page": 2}},
        client=client,
    )

    assert body == '{"measurements": []}'
    assert seen == {"url": "https://example.test/data?page=2", "auth": "secret"}
    assert client.is_closed is False
    client.close()


def test_api_reader_raises_on_http_error() -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(503)))

    with pytest.raises(httpx.HTTPStatusError):
        api_reader("https://example.test/data", client=client)


def test_file_reader(tmp_path) -> None:
    path = tmp_path / "data.json"
    path.write_text('{"locations": []}', encoding="utf-8")

    assert file_reader(path) == '{"locations": []}'
    assert file_reader(str(path), {"encoding": "utf-8"}) == '{"locations": []}'


def test_file_reader_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        file_reader(tmp_path / "missing.json")


def test_text_reader_passes_data_through() -> None:
    data = [{"station": "ts1"}]

    assert text_reader(data) is data


def test_json_parser() -> None:
    assert json_parser('[{"a": 1}]') == [{"a": 1}]
    assert json_parser(b'{"a": 1}') == {"a": 1}
    assert json_parser({"a": 1}) == {"a": 1}


def test_csv_parser_skips_blank_rows_and_strips_headers() -> None:
    text = "station, tempf\nts1, 80\n\n,\nts2,81\n"

    assert csv_parser(text) == [
        {"station": "ts1", "tempf": "80"},
        {"station": "ts2", "tempf": "81"},
    ]


def test_tsv_parser() -> None:
    assert tsv_parser("station\ttempf\nts1\t80\n") == [{"station": "ts1", "tempf": "80"}]


def test_registries() -> None:
    assert set(READERS) == {"api", "file", "text"}
    assert set(PARSERS) == {"json", "csv", "tsv"}
