"""Split-ratio computation and anomaly flags for a consolidated ledger."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from salesrecon.domain.category_rules import CategoryRuleSet
from salesrecon.domain.ledger import ConsolidatedItem, ConsolidatedLedger
from salesrecon.runtime.logging import get_logger

logger = get_logger(__name__)

_HUNDRED = Decimal("100")
_ZERO = Decimal("0")


def split_pct_a(item: ConsolidatedItem) -> int:
    """Origin A's share of the item value, in whole percent (half rounds up).

    With no value on either side, quantity presence decides the split.
    """
    value_total = item.value_total
    if value_total > _ZERO:
        pct = (item.value_a / value_total * _HUNDRED).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return int(pct)

    has_a = item.quantity_a > _ZERO
    has_b = item.quantity_b > _ZERO
    if has_a and has_b:
        return 50
    if has_a:
        return 100
    return 0


def evaluate_item(item: ConsolidatedItem, rules: CategoryRuleSet) -> None:
    """Annotate one item with its split and anomaly flags."""
    pct_a = split_pct_a(item)
    bypass = rules.is_bypass(item.category)

    item.pct_a = pct_a
    item.split_display = rules.bypass_display if bypass else f"{pct_a}/{100 - pct_a}"
    item.row_anomaly = not bypass and item.quantity_a != item.quantity_b
    item.cell_anomaly = False

    if item.row_anomaly or bypass:
        return
    expected = rules.expected_pct_a(item.category)
    if expected is not None and pct_a != expected:
        item.cell_anomaly = True


def evaluate_ledger(ledger: ConsolidatedLedger, rules: CategoryRuleSet) -> None:
    """
    Compute splits and anomaly flags for every item, in place.

    Items are never dropped or reordered. Running this twice gives the same
    annotations.
    """
    row_count = 0
    cell_count = 0
    for item in ledger:
        evaluate_item(item, rules)
        row_count += item.row_anomaly
        cell_count += item.cell_anomaly

    logger.info(
        "Evaluated %d item(s): %d quantity mismatch(es), %d unexpected split(s)",
        len(ledger),
        row_count,
        cell_count,
    )
