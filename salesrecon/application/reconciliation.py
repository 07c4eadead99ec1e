"""Two-origin sales report reconciliation workflow."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Literal

from salesrecon.application.report_cache import ParsedReport, ParsedReportCache
from salesrecon.domain.category_rules import CategoryRuleError, CategoryRuleSet
from salesrecon.domain.ledger import ConsolidatedLedger, ConsolidationTotals
from salesrecon.domain.persistence import SeriesMetrics, UpsertPayload, requires_override
from salesrecon.domain.product import ProductCatalog, ProductSummary
from salesrecon.domain.report import Origin, ReportSummary
from salesrecon.reconcile import (
    aggregate_products,
    evaluate_ledger,
    merge_records,
    prepare_upsert,
    summarize_consolidation,
)
from salesrecon.runtime import (
    ReportSettings,
    get_logger,
    load_category_rules,
    load_product_catalog,
    load_report_settings,
)
from salesrecon.series_access import SeriesServiceUnavailable, SeriesStore, get_series_store

logger = get_logger(__name__)

ReconciliationStatus = Literal["ok", "dry_run", "needs_override", "aborted", "error"]

# Receives the advisory warnings; returns True to go ahead with the write.
ConfirmCallback = Callable[[Sequence[str]], bool]


@dataclass(frozen=True)
class ReconciliationRequest:
    """Inputs for one reconciliation run."""

    report_a: Path
    report_b: Path
    rules_path: str | None = None
    catalog_path: str | None = None
    encoding: str | None = None
    override: bool = False
    dry_run: bool = False


@dataclass(frozen=True)
class ReconciliationResult:
    """Outcome of a reconciliation run, including every intermediate view."""

    status: ReconciliationStatus
    report_a: ParsedReport | None = None
    report_b: ParsedReport | None = None
    ledger: ConsolidatedLedger | None = None
    products: tuple[ProductSummary, ...] = ()
    totals: ConsolidationTotals | None = None
    payload: UpsertPayload | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)
    error: str | None = None


def read_report_text(path: Path, encoding: str) -> tuple[str, int]:
    """Read and decode one report file; undecodable bytes are replaced."""
    raw = path.read_bytes()
    return raw.decode(encoding, errors="replace"), len(raw)


def load_parsed_report(
    path: Path,
    origin: Origin,
    settings: ReportSettings,
    cache: ParsedReportCache | None = None,
) -> ParsedReport:
    """
    Read and parse one origin report file.

    Raises:
        FileNotFoundError: report file does not exist
    """
    text, size = read_report_text(path, settings.encoding)
    parser_cache = cache or ParsedReportCache()
    parsed = parser_cache.parse(text, origin, source_label=path.name, source_size=size, grammar=settings.grammar)
    summary = parsed.summary
    logger.info(
        "Parsed %s as origin %s: %d item line(s), %d other line(s), period %s",
        path.name,
        origin,
        summary.matched_line_count,
        summary.rejected_line_count,
        summary.period_display,
    )
    return parsed


def _identity_warning(summary: ReportSummary) -> str | None:
    if summary.identity_matches:
        return None
    label = summary.source_label or "Report"
    if summary.detected_identity is None:
        return (
            f"{label} was loaded as origin {summary.expected_origin} "
            f"but the origin {summary.expected_origin} marker was not found"
        )
    return (
        f"{label} was loaded as origin {summary.expected_origin} "
        f"but looks like an origin {summary.detected_identity} report"
    )


def advisory_warnings(summary_a: ReportSummary, summary_b: ReportSummary) -> list[str]:
    """Mismatches the operator must see before anything is written."""
    warnings: list[str] = []
    for summary in (summary_a, summary_b):
        message = _identity_warning(summary)
        if message:
            warnings.append(message)

    if summary_a.period_raw != summary_b.period_raw:
        warnings.append(
            f"Report periods differ: origin A {summary_a.period_display}, origin B {summary_b.period_display}"
        )
    for message in warnings:
        logger.warning(message)
    return warnings


def run_reconciliation(
    request: ReconciliationRequest,
    *,
    store: SeriesStore | None = None,
    catalog: ProductCatalog | None = None,
    rules: CategoryRuleSet | None = None,
    settings: ReportSettings | None = None,
    confirm: ConfirmCallback | None = None,
    cache: ParsedReportCache | None = None,
    today: date | None = None,
) -> ReconciliationResult:
    """
    Run parse -> merge -> evaluate -> aggregate -> prepare, then write once.

    Dependencies not passed in are loaded from project configuration. Advisory
    warnings go through ``confirm`` before guards are applied, so a
    ``needs_override`` result means they were already accepted. Without a
    callback they are reported on the result and the write proceeds.
    """
    try:
        if settings is None:
            settings = load_report_settings(request.rules_path)
        if rules is None:
            rules = load_category_rules(request.rules_path)
        if catalog is None:
            catalog = load_product_catalog(request.catalog_path)
    except (CategoryRuleError, FileNotFoundError, ValueError) as exc:
        return ReconciliationResult(status="error", error=f"Invalid configuration: {exc}")

    if request.encoding:
        settings = ReportSettings(encoding=request.encoding, grammar=settings.grammar)

    try:
        report_a = load_parsed_report(request.report_a, "A", settings, cache)
        report_b = load_parsed_report(request.report_b, "B", settings, cache)
    except FileNotFoundError as exc:
        return ReconciliationResult(status="error", error=f"File not found: {exc.filename}")
    except LookupError:
        return ReconciliationResult(status="error", error=f"Unknown encoding: {settings.encoding}")

    summary_a = report_a.summary
    summary_b = report_b.summary
    warnings = tuple(advisory_warnings(summary_a, summary_b))

    ledger = merge_records(report_a.records, report_b.records)
    evaluate_ledger(ledger, rules)
    products = tuple(aggregate_products(ledger, catalog, rules))
    totals = summarize_consolidation(ledger, summary_a, summary_b, rules)
    metrics = SeriesMetrics(tax_a=summary_a.total_tax, tax_b=summary_b.total_tax)
    period_raw = summary_a.period_raw or summary_b.period_raw

    views = {
        "report_a": report_a,
        "report_b": report_b,
        "ledger": ledger,
        "products": products,
        "totals": totals,
        "warnings": warnings,
    }

    if store is None:
        store = get_series_store()
    try:
        latest = store.latest_effective_date()
    except (SeriesServiceUnavailable, OSError, ValueError) as exc:
        return ReconciliationResult(status="error", error=f"Could not read series store: {exc}", **views)

    payload, guard_error = prepare_upsert(
        products,
        period_raw,
        override=request.override,
        latest_persisted_date=latest,
        metrics=metrics,
        today=today,
    )

    if request.dry_run:
        logger.info("Dry run: %d product row(s) prepared for %s", len(payload.records), payload.effective_date)
        return ReconciliationResult(status="dry_run", payload=payload, error=guard_error, **views)

    if warnings and confirm is not None and not confirm(warnings):
        logger.info("Aborted by user")
        return ReconciliationResult(status="aborted", payload=payload, **views)

    if guard_error:
        return ReconciliationResult(status="needs_override", payload=payload, error=guard_error, **views)

    outcome = store.upsert_series(
        payload.records,
        payload.effective_date,
        payload.metrics,
        override=payload.override,
    )
    if outcome.success:
        return ReconciliationResult(status="ok", payload=payload, **views)
    if requires_override(outcome.error):
        return ReconciliationResult(status="needs_override", payload=payload, error=outcome.error, **views)
    return ReconciliationResult(status="error", payload=payload, error=outcome.error, **views)
