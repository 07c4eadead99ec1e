"""Turn product summaries into a guarded, idempotent upsert payload."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from salesrecon.domain.persistence import (
    BACKDATED_IMPORT,
    NEGATIVE_VALUE,
    SeriesMetrics,
    UpsertPayload,
    UpsertRecord,
)
from salesrecon.domain.product import ProductSummary
from salesrecon.domain.report import PERIOD_DATE_FORMAT, PERIOD_SEPARATOR
from salesrecon.runtime.logging import get_logger

logger = get_logger(__name__)

QUANTITY_QUANTUM = Decimal("0.001")
VALUE_QUANTUM = Decimal("0.01")


def effective_date_from_period(period_raw: str | None, today: date | None = None) -> date:
    """Business date of an import: the last day of the declared period.

    Falls back to ``today`` when the period is missing or unparseable.
    """
    fallback = today or date.today()
    if not period_raw:
        return fallback

    parts = period_raw.split(PERIOD_SEPARATOR)
    date_text = parts[1].strip() if len(parts) > 1 else parts[0].strip()
    try:
        return datetime.strptime(date_text, PERIOD_DATE_FORMAT).date()
    except ValueError:
        logger.warning("Could not read an end date from period %r; using %s", period_raw, fallback.isoformat())
        return fallback


def _normalize(summary: ProductSummary) -> UpsertRecord:
    return UpsertRecord(
        reference=summary.reference.strip(),
        canonical_code=summary.canonical_code.strip() if summary.canonical_code else None,
        quantity_a=summary.quantity_a.quantize(QUANTITY_QUANTUM, rounding=ROUND_HALF_UP),
        value_a=summary.value_a.quantize(VALUE_QUANTUM, rounding=ROUND_HALF_UP),
        quantity_b=summary.quantity_b.quantize(QUANTITY_QUANTUM, rounding=ROUND_HALF_UP),
        value_b=summary.value_b.quantize(VALUE_QUANTUM, rounding=ROUND_HALF_UP),
        quantity_total=summary.quantity_total.quantize(QUANTITY_QUANTUM, rounding=ROUND_HALF_UP),
        value_total=summary.value_total.quantize(VALUE_QUANTUM, rounding=ROUND_HALF_UP),
    )


def check_guards(
    records: Sequence[UpsertRecord],
    effective_date: date,
    latest_persisted_date: date | None,
) -> list[str]:
    """Return guard violations, each prefixed with its override marker."""
    problems: list[str] = []
    if latest_persisted_date is not None and effective_date < latest_persisted_date:
        problems.append(
            f"{BACKDATED_IMPORT}: import date {effective_date.isoformat()} is earlier than "
            f"the last persisted date {latest_persisted_date.isoformat()}"
        )

    negative = [record.reference for record in records if record.value_total < 0]
    if negative:
        preview = ", ".join(negative[:5])
        if len(negative) > 5:
            preview += f" (+{len(negative) - 5} more)"
        problems.append(f"{NEGATIVE_VALUE}: negative value total for {preview}")
    return problems


def prepare_upsert(
    summaries: Sequence[ProductSummary],
    period_raw: str | None,
    *,
    override: bool = False,
    latest_persisted_date: date | None = None,
    metrics: SeriesMetrics | None = None,
    today: date | None = None,
) -> tuple[UpsertPayload, str | None]:
    """
    Build the upsert payload for one reconciliation.

    Args:
        summaries: Product summaries from the aggregator
        period_raw: Detected reporting window ("DD/MM/YYYY a DD/MM/YYYY")
        override: Operator confirmed the write despite guard violations
        latest_persisted_date: Most recent effective date already in the series
        metrics: Report-level metrics (tax totals per origin)
        today: Fallback date when the period cannot be read

    Returns:
        Tuple of (payload, error). ``error`` lists unmet guards and is None when
        all guards pass or ``override`` is set. Identical input always yields
        an identical payload.
    """
    effective_date = effective_date_from_period(period_raw, today=today)

    # One row per upsert key; a repeated key replaces, it never accumulates.
    by_key: dict[tuple[str, str | None], UpsertRecord] = {}
    for summary in summaries:
        record = _normalize(summary)
        by_key[record.key] = record
    records = tuple(sorted(by_key.values(), key=lambda r: (r.reference, r.canonical_code or "")))

    payload = UpsertPayload(
        effective_date=effective_date,
        records=records,
        metrics=metrics or SeriesMetrics(),
        override=override,
    )

    problems = check_guards(records, effective_date, latest_persisted_date)
    if not problems:
        return payload, None
    if override:
        logger.warning("Guards overridden by operator: %s", "; ".join(problems))
        return payload, None

    error = "; ".join(problems)
    logger.warning("Import blocked pending confirmation: %s", error)
    return payload, error
