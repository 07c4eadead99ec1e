"""Merge two origin record lists into one consolidated ledger."""

from __future__ import annotations

from collections.abc import Iterable

from salesrecon.domain.ledger import ConsolidatedItem, ConsolidatedLedger
from salesrecon.domain.report import RawRecord
from salesrecon.runtime.logging import get_logger

logger = get_logger(__name__)


def _sort_key(item: ConsolidatedItem) -> tuple[str, str]:
    return (item.reference, item.key)


def merge_records(records_a: Iterable[RawRecord], records_b: Iterable[RawRecord]) -> ConsolidatedLedger:
    """
    Join origin A and origin B records by line key.

    Origin A is inserted first; a key repeated within one origin keeps its
    last record. Origin B then either completes an existing entry (presence
    becomes BOTH) or adds a B_ONLY entry. Reference and category keep the
    first non-empty value seen and are only backfilled, never overwritten.

    Returns:
        Ledger sorted by (reference, key), independent of input order.
    """
    by_key: dict[str, ConsolidatedItem] = {}
    skipped = 0

    for record in records_a:
        if not record.line_key:
            skipped += 1
            continue
        by_key[record.line_key] = ConsolidatedItem(
            key=record.line_key,
            reference=record.reference,
            category=record.category,
            origin_presence="A_ONLY",
            quantity_a=record.quantity,
            value_a=record.total,
        )

    for record in records_b:
        if not record.line_key:
            skipped += 1
            continue
        existing = by_key.get(record.line_key)
        if existing is None:
            by_key[record.line_key] = ConsolidatedItem(
                key=record.line_key,
                reference=record.reference,
                category=record.category,
                origin_presence="B_ONLY",
                quantity_b=record.quantity,
                value_b=record.total,
            )
            continue

        if existing.origin_presence == "A_ONLY":
            existing.origin_presence = "BOTH"
        existing.quantity_b = record.quantity
        existing.value_b = record.total
        if not existing.reference and record.reference:
            existing.reference = record.reference
        if not existing.category and record.category:
            existing.category = record.category

    if skipped:
        logger.debug("Skipped %d record(s) without a line key", skipped)

    items = sorted(by_key.values(), key=_sort_key)
    logger.debug(
        "Merged %d key(s): %d both, %d A only, %d B only",
        len(items),
        sum(1 for item in items if item.origin_presence == "BOTH"),
        sum(1 for item in items if item.origin_presence == "A_ONLY"),
        sum(1 for item in items if item.origin_presence == "B_ONLY"),
    )
    return ConsolidatedLedger(items=items)
