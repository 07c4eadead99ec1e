"""CSV export of the reconciliation views."""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path

import pandas as pd

from salesrecon.application.reconciliation import ReconciliationResult
from salesrecon.application.report_cache import ParsedReport
from salesrecon.domain.ledger import ConsolidatedLedger
from salesrecon.domain.product import ProductSummary
from salesrecon.runtime import get_logger

logger = get_logger(__name__)

RECORD_COLUMNS = ["line_key", "reference", "description", "category", "quantity", "total", "line_number"]
LEDGER_COLUMNS = [
    "key",
    "reference",
    "category",
    "origin_presence",
    "quantity_a",
    "quantity_b",
    "value_a",
    "value_b",
    "split",
    "row_anomaly",
    "cell_anomaly",
]
PRODUCT_COLUMNS = [
    "reference",
    "canonical_code",
    "is_canonical",
    "quantity_a",
    "value_a",
    "quantity_b",
    "value_b",
    "quantity_total",
    "value_total",
]


def records_frame(report: ParsedReport) -> pd.DataFrame:
    rows = [{column: asdict(record)[column] for column in RECORD_COLUMNS} for record in report.records]
    return pd.DataFrame(rows, columns=RECORD_COLUMNS)


def ledger_frame(ledger: ConsolidatedLedger) -> pd.DataFrame:
    rows = [
        {
            "key": item.key,
            "reference": item.reference,
            "category": item.category,
            "origin_presence": item.origin_presence,
            "quantity_a": item.quantity_a,
            "quantity_b": item.quantity_b,
            "value_a": item.value_a,
            "value_b": item.value_b,
            "split": item.split_display,
            "row_anomaly": item.row_anomaly,
            "cell_anomaly": item.cell_anomaly,
        }
        for item in ledger
    ]
    return pd.DataFrame(rows, columns=LEDGER_COLUMNS)


def products_frame(products: tuple[ProductSummary, ...]) -> pd.DataFrame:
    return pd.DataFrame([asdict(product) for product in products], columns=PRODUCT_COLUMNS)


def export_views(result: ReconciliationResult, out_dir: Path) -> list[Path]:
    """
    Write the reconciliation views as CSV files.

    Files: ``origin_a.csv``, ``origin_b.csv``, ``ledger.csv``, ``products.csv``.
    Views missing from the result are skipped.

    Returns:
        Paths written, in that order.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    frames: list[tuple[str, pd.DataFrame]] = []
    if result.report_a is not None:
        frames.append(("origin_a.csv", records_frame(result.report_a)))
    if result.report_b is not None:
        frames.append(("origin_b.csv", records_frame(result.report_b)))
    if result.ledger is not None:
        frames.append(("ledger.csv", ledger_frame(result.ledger)))
    if result.products:
        frames.append(("products.csv", products_frame(result.products)))

    written: list[Path] = []
    for name, frame in frames:
        path = out_dir / name
        frame.to_csv(path, index=False)
        written.append(path)

    logger.info("Exported %d view(s) to %s", len(written), out_dir)
    return written
