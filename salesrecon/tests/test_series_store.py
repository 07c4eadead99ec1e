"""Tests for the JSON and HTTP series stores."""

from __future__ import annotations

import json
from datetime import date
from decimal import Decimal
from pathlib import Path

import httpx
import pytest

from salesrecon.domain.persistence import BACKDATED_IMPORT, SeriesMetrics, UpsertRecord
from salesrecon.series_access import HttpSeriesStore, JsonSeriesStore, SeriesServiceUnavailable

METRICS = SeriesMetrics(tax_a=Decimal("12.34"), tax_b=Decimal("1.00"))


def _record(reference: str, code: str | None = "P-1", value: str = "100.00") -> UpsertRecord:
    return UpsertRecord(
        reference=reference,
        canonical_code=code,
        quantity_a=Decimal("1.000"),
        value_a=Decimal(value),
        quantity_b=Decimal("0.000"),
        value_b=Decimal("0.00"),
        quantity_total=Decimal("1.000"),
        value_total=Decimal(value),
    )


def test_json_store_upsert_is_idempotent(tmp_path: Path) -> None:
    store = JsonSeriesStore(tmp_path / "series.json")
    records = [_record("REFA"), _record("REFB", None)]

    first = store.upsert_series(records, date(2024, 1, 31), METRICS, override=True)
    content_after_first = store.path.read_text()
    second = store.upsert_series(records, date(2024, 1, 31), METRICS, override=True)

    assert first.success and second.success
    assert store.path.read_text() == content_after_first
    rows = store.rows_for(date(2024, 1, 1))
    assert sorted(rows) == ["REFA|P-1", "REFB|"]
    assert rows["REFA|P-1"]["value_total"] == "100.00"


def test_json_store_overwrites_rows(tmp_path: Path) -> None:
    store = JsonSeriesStore(tmp_path / "series.json")
    store.upsert_series([_record("REFA", value="100.00")], date(2024, 1, 15), METRICS)
    store.upsert_series([_record("REFA", value="250.00")], date(2024, 1, 31), METRICS)

    rows = store.rows_for(date(2024, 1, 31))
    assert len(rows) == 1
    assert rows["REFA|P-1"]["value_total"] == "250.00"


def test_json_store_buckets_by_month(tmp_path: Path) -> None:
    store = JsonSeriesStore(tmp_path / "series.json")
    store.upsert_series([_record("REFA")], date(2024, 1, 31), METRICS)
    store.upsert_series([_record("REFB")], date(2024, 2, 29), METRICS)

    data = json.loads(store.path.read_text())
    assert sorted(data["buckets"]) == ["2024-01", "2024-02"]
    assert data["buckets"]["2024-02"]["metrics"]["tax_total"] == "13.34"
    assert store.latest_effective_date() == date(2024, 2, 29)


def test_json_store_rejects_backdated_write(tmp_path: Path) -> None:
    store = JsonSeriesStore(tmp_path / "series.json")
    store.upsert_series([_record("REFA")], date(2024, 2, 29), METRICS)

    outcome = store.upsert_series([_record("REFB")], date(2024, 1, 31), METRICS)

    assert not outcome.success
    assert outcome.error is not None and BACKDATED_IMPORT in outcome.error
    assert outcome.needs_override
    assert store.rows_for(date(2024, 1, 31)) == {}

    forced = store.upsert_series([_record("REFB")], date(2024, 1, 31), METRICS, override=True)
    assert forced.success
    assert "REFB|P-1" in store.rows_for(date(2024, 1, 31))
    assert store.latest_effective_date() == date(2024, 2, 29)


def test_json_store_empty(tmp_path: Path) -> None:
    store = JsonSeriesStore(tmp_path / "missing" / "series.json")
    assert store.latest_effective_date() is None
    assert store.rows_for(date(2024, 1, 1)) == {}


def test_json_store_reports_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "series.json"
    path.write_text("[]")

    outcome = JsonSeriesStore(path).upsert_series([_record("REFA")], date(2024, 1, 31), METRICS)

    assert not outcome.success
    assert not outcome.needs_override


def test_json_store_defaults_to_project_data_dir(isolated_project: Path) -> None:
    store = JsonSeriesStore()
    assert store.path == isolated_project.resolve() / "data" / "sales_series.json"


def _http_store(handler) -> HttpSeriesStore:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpSeriesStore("https://series.test/api/", client=client)


def test_http_store_posts_rpc_payload() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True})

    outcome = _http_store(handler).upsert_series([_record("REFA")], date(2024, 1, 31), METRICS, override=True)

    assert outcome.success
    assert seen["path"] == "/api/rpc/process_sales_import"
    body = seen["body"]
    assert body["file_date"] == "2024-01-31"
    assert body["force_override"] is True
    assert body["metrics"] == {"tax_a": "12.34", "tax_b": "1.00", "tax_total": "13.34"}
    assert body["items"] == [
        {
            "reference": "REFA",
            "canonical_code": "P-1",
            "quantity_a": "1.000",
            "value_a": "100.00",
            "quantity_b": "0.000",
            "value_b": "0.00",
            "quantity_total": "1.000",
            "value_total": "100.00",
        }
    ]


def test_http_store_passes_guard_errors_through() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": False, "error": f"{BACKDATED_IMPORT}: older than 2024-02-29"})

    outcome = _http_store(handler).upsert_series([_record("REFA")], date(2024, 1, 31), METRICS)

    assert not outcome.success
    assert outcome.needs_override


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="boom"),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"success": False}),
    ],
)
def test_http_store_failures(response: httpx.Response) -> None:
    outcome = _http_store(lambda request: response).upsert_series([_record("REFA")], date(2024, 1, 31), METRICS)

    assert not outcome.success
    assert outcome.error
    assert not outcome.needs_override


def test_http_store_connection_error_is_failed_outcome() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    outcome = _http_store(handler).upsert_series([_record("REFA")], date(2024, 1, 31), METRICS)

    assert not outcome.success
    assert outcome.error is not None and "connect" in outcome.error


def test_http_store_latest_effective_date() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/series/latest"
        return httpx.Response(200, json={"effective_date": "2024-02-29"})

    assert _http_store(handler).latest_effective_date() == date(2024, 2, 29)


def test_http_store_latest_effective_date_empty_series() -> None:
    store = _http_store(lambda request: httpx.Response(200, json={"effective_date": None}))
    assert store.latest_effective_date() is None


def test_http_store_latest_effective_date_unavailable() -> None:
    store = _http_store(lambda request: httpx.Response(503))
    with pytest.raises(SeriesServiceUnavailable):
        store.latest_effective_date()
