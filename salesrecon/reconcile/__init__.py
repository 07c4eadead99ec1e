"""Reconciliation engine: merge, evaluate, aggregate, prepare.

Each stage is a function over explicit inputs:

    ledger = merge_records(records_a, records_b)
    evaluate_ledger(ledger, rules)
    products = aggregate_products(ledger, catalog, rules)
    payload, error = prepare_upsert(products, summary_a.period_raw)
"""

from salesrecon.reconcile.aggregator import aggregate_products, rolled_up_quantity, summarize_consolidation
from salesrecon.reconcile.evaluator import evaluate_item, evaluate_ledger, split_pct_a
from salesrecon.reconcile.merger import merge_records
from salesrecon.reconcile.persistence import check_guards, effective_date_from_period, prepare_upsert

__all__ = [
    "aggregate_products",
    "check_guards",
    "effective_date_from_period",
    "evaluate_item",
    "evaluate_ledger",
    "merge_records",
    "prepare_upsert",
    "rolled_up_quantity",
    "split_pct_a",
    "summarize_consolidation",
]
