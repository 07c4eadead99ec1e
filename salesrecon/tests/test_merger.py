"""Tests for merging origin A and origin B records."""

from __future__ import annotations

from decimal import Decimal

from salesrecon.domain.report import RawRecord
from salesrecon.reconcile.merger import merge_records


def _record(key: str, reference: str, category: str, quantity: str, total: str) -> RawRecord:
    return RawRecord(
        line_key=key,
        reference=reference,
        description=f"ITEM {category}",
        category=category,
        quantity=Decimal(quantity),
        total=Decimal(total),
    )


def test_merge_same_key_from_both_origins() -> None:
    ledger = merge_records(
        [_record("101", "REFA", "PREMIUM", "10", "100")],
        [_record("101", "REFA", "PREMIUM", "8", "80")],
    )

    item = ledger.get("101")
    assert item is not None
    assert item.origin_presence == "BOTH"
    assert item.quantity_a == Decimal("10")
    assert item.quantity_b == Decimal("8")
    assert item.value_total == Decimal("180")
    assert item.quantity_total == Decimal("18")


def test_merge_presence_per_origin() -> None:
    ledger = merge_records(
        [_record("1", "R1", "LEVE", "1", "10"), _record("2", "R2", "LEVE", "1", "10")],
        [_record("2", "R2", "LEVE", "1", "10"), _record("3", "R3", "LEVE", "1", "10")],
    )

    presence = {item.key: item.origin_presence for item in ledger}
    assert presence == {"1": "A_ONLY", "2": "BOTH", "3": "B_ONLY"}


def test_merge_totals_do_not_depend_on_origin_order() -> None:
    records_a = [
        _record("1", "R1", "LEVE", "2", "20"),
        _record("2", "R2", "ULTRA", "5", "55.5"),
    ]
    records_b = [
        _record("2", "R2", "ULTRA", "4", "40"),
        _record("3", "R3", "NOBRE", "1", "99.99"),
    ]

    forward = merge_records(records_a, records_b)
    backward = merge_records(records_b, records_a)

    def totals(ledger) -> dict[str, tuple[Decimal, Decimal]]:
        return {item.key: (item.quantity_total, item.value_total) for item in ledger}

    assert totals(forward) == totals(backward)


def test_merge_backfills_missing_reference_and_category() -> None:
    ledger = merge_records(
        [_record("7", "", "", "1", "10")],
        [_record("7", "REF7", "LEVE", "1", "10")],
    )

    item = ledger.get("7")
    assert item is not None
    assert item.reference == "REF7"
    assert item.category == "LEVE"


def test_merge_does_not_overwrite_origin_a_fields() -> None:
    ledger = merge_records(
        [_record("7", "REF7", "LEVE", "1", "10")],
        [_record("7", "OTHER", "ULTRA", "1", "10")],
    )

    item = ledger.get("7")
    assert item is not None
    assert (item.reference, item.category) == ("REF7", "LEVE")


def test_merge_repeated_key_within_origin_keeps_last() -> None:
    ledger = merge_records(
        [_record("5", "R5", "LEVE", "1", "10"), _record("5", "R5", "LEVE", "3", "30")],
        [_record("5", "R5", "LEVE", "2", "20"), _record("5", "R5", "LEVE", "4", "40")],
    )

    item = ledger.get("5")
    assert item is not None
    assert len(ledger) == 1
    assert (item.quantity_a, item.quantity_b) == (Decimal("3"), Decimal("4"))


def test_merge_skips_records_without_key() -> None:
    ledger = merge_records([_record("", "R", "LEVE", "1", "1")], [])
    assert len(ledger) == 0


def test_merge_orders_by_reference_then_key() -> None:
    ledger = merge_records(
        [_record("9", "B", "LEVE", "1", "1"), _record("2", "B", "LEVE", "1", "1")],
        [_record("1", "C", "LEVE", "1", "1"), _record("8", "A", "LEVE", "1", "1")],
    )

    assert [(item.reference, item.key) for item in ledger] == [("A", "8"), ("B", "2"), ("B", "9"), ("C", "1")]
