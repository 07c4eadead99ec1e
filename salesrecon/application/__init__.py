"""Application workflows: load configuration, run the engine, write once."""

from salesrecon.application.export import export_views
from salesrecon.application.reconciliation import (
    ReconciliationRequest,
    ReconciliationResult,
    advisory_warnings,
    load_parsed_report,
    run_reconciliation,
)
from salesrecon.application.report_cache import ParsedReport, ParsedReportCache

__all__ = [
    "ParsedReport",
    "ParsedReportCache",
    "ReconciliationRequest",
    "ReconciliationResult",
    "advisory_warnings",
    "export_views",
    "load_parsed_report",
    "run_reconciliation",
]
