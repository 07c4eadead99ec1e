"""Privileged write access to the local sales series file."""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import date
from pathlib import Path
from typing import Any, Protocol

from salesrecon.domain.persistence import SeriesMetrics, UpsertOutcome, UpsertRecord
from salesrecon.reconcile.persistence import check_guards
from salesrecon.runtime import get_logger, get_paths

logger = get_logger(__name__)


class SeriesStore(Protocol):
    """Destination of confirmed reconciliations."""

    def latest_effective_date(self) -> date | None: ...

    def upsert_series(
        self,
        records: Sequence[UpsertRecord],
        effective_date: date,
        metrics: SeriesMetrics,
        *,
        override: bool = False,
    ) -> UpsertOutcome: ...


def bucket_key(effective_date: date) -> str:
    return effective_date.strftime("%Y-%m")


def row_key(record: UpsertRecord) -> str:
    return f"{record.reference}|{record.canonical_code or ''}"


def record_to_row(record: UpsertRecord) -> dict[str, Any]:
    return {
        "reference": record.reference,
        "canonical_code": record.canonical_code,
        "quantity_a": str(record.quantity_a),
        "value_a": str(record.value_a),
        "quantity_b": str(record.quantity_b),
        "value_b": str(record.value_b),
        "quantity_total": str(record.quantity_total),
        "value_total": str(record.value_total),
    }


def metrics_to_dict(metrics: SeriesMetrics) -> dict[str, str]:
    return {
        "tax_a": str(metrics.tax_a),
        "tax_b": str(metrics.tax_b),
        "tax_total": str(metrics.tax_total),
    }


class JsonSeriesStore:
    """Series store backed by one JSON file.

    Layout::

        {"buckets": {"2024-01": {"effective_date": "2024-01-31",
                                 "metrics": {...},
                                 "rows": {"REFA|CODE": {...}}}}}

    Writing the same rows twice leaves the file unchanged.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or get_paths().series_store

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {"buckets": {}}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict) or not isinstance(data.get("buckets"), dict):
            raise ValueError(f"Unexpected series store layout in {self.path}")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        tmp_path.replace(self.path)

    def latest_effective_date(self) -> date | None:
        return self._latest_from(self._read())

    def rows_for(self, effective_date: date) -> dict[str, dict[str, Any]]:
        """Persisted rows of the month containing ``effective_date``."""
        bucket = self._read()["buckets"].get(bucket_key(effective_date), {})
        return dict(bucket.get("rows", {}))

    def upsert_series(
        self,
        records: Sequence[UpsertRecord],
        effective_date: date,
        metrics: SeriesMetrics,
        *,
        override: bool = False,
    ) -> UpsertOutcome:
        try:
            data = self._read()
        except (OSError, ValueError) as e:
            logger.error("Could not read series store %s: %s", self.path, e)
            return UpsertOutcome(success=False, error=f"Could not read series store: {e}")

        latest = self._latest_from(data)
        problems = check_guards(records, effective_date, latest)
        if problems and not override:
            return UpsertOutcome(success=False, error="; ".join(problems))

        bucket = data["buckets"].setdefault(bucket_key(effective_date), {"rows": {}})
        # Latest import within a month wins the bucket date.
        if not bucket.get("effective_date") or bucket["effective_date"] <= effective_date.isoformat():
            bucket["effective_date"] = effective_date.isoformat()
        bucket["metrics"] = metrics_to_dict(metrics)
        rows = bucket.setdefault("rows", {})
        for record in records:
            rows[row_key(record)] = record_to_row(record)

        try:
            self._write(data)
        except OSError as e:
            logger.error("Could not write series store %s: %s", self.path, e)
            return UpsertOutcome(success=False, error=f"Could not write series store: {e}")

        logger.info("Upserted %d row(s) into %s bucket %s", len(records), self.path, bucket_key(effective_date))
        return UpsertOutcome(success=True)

    @staticmethod
    def _latest_from(data: dict[str, Any]) -> date | None:
        dates = [
            date.fromisoformat(bucket["effective_date"])
            for bucket in data["buckets"].values()
            if bucket.get("effective_date")
        ]
        return max(dates) if dates else None


_store: JsonSeriesStore | None = None


def get_series_store() -> JsonSeriesStore:
    """Return a singleton local series store."""
    global _store
    if _store is None:
        _store = JsonSeriesStore()
    return _store
