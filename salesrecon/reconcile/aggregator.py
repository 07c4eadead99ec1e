"""Per-product rollup of an evaluated ledger."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from salesrecon.domain.category_rules import CategoryRuleSet
from salesrecon.domain.ledger import ConsolidatedItem, ConsolidatedLedger, ConsolidationTotals
from salesrecon.domain.product import ProductCatalog, ProductSummary
from salesrecon.domain.report import ReportSummary
from salesrecon.runtime.logging import get_logger

logger = get_logger(__name__)


@dataclass
class _ProductAccumulator:
    reference: str
    canonical_code: str | None
    is_canonical: bool
    fallback_preferred: bool = False
    quantity_a: Decimal = Decimal("0")
    value_a: Decimal = Decimal("0")
    quantity_b: Decimal = Decimal("0")
    value_b: Decimal = Decimal("0")
    quantity_total: Decimal = Decimal("0")

    def freeze(self) -> ProductSummary:
        return ProductSummary(
            reference=self.reference,
            canonical_code=self.canonical_code,
            is_canonical=self.is_canonical,
            quantity_a=self.quantity_a,
            value_a=self.value_a,
            quantity_b=self.quantity_b,
            value_b=self.value_b,
            quantity_total=self.quantity_total,
            value_total=self.value_a + self.value_b,
        )


def rolled_up_quantity(item: ConsolidatedItem, rules: CategoryRuleSet) -> Decimal:
    """Quantity one item contributes to its product total.

    "sum" treats the two origins as distinct movements; "max" treats them as
    two views of the same movement.
    """
    if rules.quantity_rollup(item.category) == "sum":
        return item.quantity_a + item.quantity_b
    return max(item.quantity_a, item.quantity_b)


def _is_preferred_fallback(item: ConsolidatedItem, rules: CategoryRuleSet) -> bool:
    return item.origin_presence == "A_ONLY" and rules.is_bypass(item.category)


def aggregate_products(
    ledger: ConsolidatedLedger,
    catalog: ProductCatalog,
    rules: CategoryRuleSet,
) -> list[ProductSummary]:
    """
    Group ledger items by reference and resolve canonical product codes.

    References found in the catalog take its code. Others fall back to a line
    key: the first origin-A-only bypass item for the reference when there is
    one, else the first item seen.

    Returns:
        One ProductSummary per reference, sorted by reference.
    """
    products: dict[str, _ProductAccumulator] = {}

    for item in ledger:
        if not item.reference:
            continue

        product = products.get(item.reference)
        if product is None:
            code = catalog.lookup_by_name(item.reference)
            product = _ProductAccumulator(
                reference=item.reference,
                canonical_code=code,
                is_canonical=code is not None,
            )
            products[item.reference] = product

        product.quantity_a += item.quantity_a
        product.value_a += item.value_a
        product.quantity_b += item.quantity_b
        product.value_b += item.value_b
        product.quantity_total += rolled_up_quantity(item, rules)

        if product.is_canonical:
            continue
        if product.canonical_code is None:
            product.canonical_code = item.key
            product.fallback_preferred = _is_preferred_fallback(item, rules)
        elif not product.fallback_preferred and _is_preferred_fallback(item, rules):
            product.canonical_code = item.key
            product.fallback_preferred = True

    summaries = [products[reference].freeze() for reference in sorted(products)]
    canonical = sum(1 for summary in summaries if summary.is_canonical)
    logger.info(
        "Aggregated %d product(s); %d resolved from catalog, %d using report keys",
        len(summaries),
        canonical,
        len(summaries) - canonical,
    )
    return summaries


def summarize_consolidation(
    ledger: ConsolidatedLedger,
    summary_a: ReportSummary,
    summary_b: ReportSummary,
    rules: CategoryRuleSet,
) -> ConsolidationTotals:
    """Headline totals for the reconciliation view.

    Quantity counts every origin-B movement plus origin-A movements of bypass
    categories, which origin B never reports.
    """
    total_quantity = Decimal("0")
    total_value = Decimal("0")
    for item in ledger:
        total_quantity += item.quantity_b
        if rules.is_bypass(item.category):
            total_quantity += item.quantity_a
        total_value += item.value_total

    return ConsolidationTotals(
        total_quantity=total_quantity,
        total_value=total_value,
        total_tax=summary_a.total_tax + summary_b.total_tax,
        item_count=len(ledger),
    )
