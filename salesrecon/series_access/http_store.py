"""Series store reached over HTTP (``process_sales_import`` RPC)."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Any

import httpx

from salesrecon.domain.persistence import SeriesMetrics, UpsertOutcome, UpsertRecord
from salesrecon.runtime import get_logger

from .store import metrics_to_dict, record_to_row

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


class SeriesServiceUnavailable(RuntimeError):
    """Raised when the series service cannot be reached or returns an error."""


class HttpSeriesStore:
    """
    Remote series store.

    Endpoints, relative to ``base_url``:
        POST rpc/process_sales_import  {items, file_date, force_override, metrics}
                                       -> {"success": bool, "error": str | null}
        GET  series/latest             -> {"effective_date": "YYYY-MM-DD" | null}
    """

    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        api_key: str | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else None
        self._client = client or httpx.Client(timeout=timeout, headers=headers)

    def close(self) -> None:
        self._client.close()

    def latest_effective_date(self) -> date | None:
        """
        Most recent effective date known to the service.

        Raises:
            SeriesServiceUnavailable: service unreachable or answered with an error
        """
        try:
            response = self._client.get(f"{self.base_url}/series/latest")
        except httpx.RequestError as e:
            logger.error("Failed to connect to series service: %s", e)
            raise SeriesServiceUnavailable(f"Failed to connect to series service: {e}") from e

        if response.status_code != 200:
            logger.error("Series service error: %s", response.status_code)
            raise SeriesServiceUnavailable(f"Series service error: {response.status_code}")

        value = response.json().get("effective_date")
        return date.fromisoformat(value) if value else None

    def upsert_series(
        self,
        records: Sequence[UpsertRecord],
        effective_date: date,
        metrics: SeriesMetrics,
        *,
        override: bool = False,
    ) -> UpsertOutcome:
        payload: dict[str, Any] = {
            "items": [record_to_row(record) for record in records],
            "file_date": effective_date.isoformat(),
            "force_override": override,
            "metrics": metrics_to_dict(metrics),
        }
        logger.info("Sending %d row(s) to series service at %s...", len(records), self.base_url)

        try:
            response = self._client.post(f"{self.base_url}/rpc/process_sales_import", json=payload)
        except httpx.RequestError as e:
            logger.error("Failed to connect to series service: %s", e)
            return UpsertOutcome(success=False, error=f"Failed to connect to series service: {e}")

        if response.status_code != 200:
            logger.error("Series service error: %s", response.status_code)
            return UpsertOutcome(success=False, error=f"Series service error: {response.status_code}")

        try:
            body = response.json()
        except ValueError:
            return UpsertOutcome(success=False, error="Series service returned a non-JSON response")

        success = bool(body.get("success"))
        error = body.get("error")
        if not success and not error:
            error = "Series service rejected the import"
        return UpsertOutcome(success=success, error=None if success else str(error))
