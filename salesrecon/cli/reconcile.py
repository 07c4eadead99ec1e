"""CLI commands for parsing and reconciling origin reports."""

import argparse
import os
from pathlib import Path

from salesrecon.application import (
    ParsedReport,
    ParsedReportCache,
    ReconciliationRequest,
    ReconciliationResult,
    export_views,
    load_parsed_report,
    run_reconciliation,
)
from salesrecon.cli.common import ask_yes_no, confirm_warnings, format_table, print_error
from salesrecon.domain.ledger import ConsolidatedLedger
from salesrecon.report.numeral import format_decimal
from salesrecon.runtime import ReportSettings, get_logger, load_report_settings
from salesrecon.series_access import HttpSeriesStore, JsonSeriesStore, SeriesStore

logger = get_logger(__name__)

STORE_URL_ENV = "SALESRECON_STORE_URL"
STORE_API_KEY_ENV = "SALESRECON_STORE_API_KEY"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NEEDS_OVERRIDE = 2


def _build_store(args: argparse.Namespace) -> SeriesStore:
    store_url = args.store_url or os.environ.get(STORE_URL_ENV)
    if store_url:
        return HttpSeriesStore(store_url, api_key=os.environ.get(STORE_API_KEY_ENV))
    return JsonSeriesStore(Path(args.store) if args.store else None)


def _print_summary(parsed: ParsedReport) -> None:
    summary = parsed.summary
    identity = summary.detected_identity or "unknown"
    print(f"Origin {summary.expected_origin}: {summary.source_label} ({summary.source_size} bytes)")
    print(f"  Identity marker: {identity}")
    print(f"  Period: {summary.period_display}")
    print(f"  Item lines: {summary.matched_line_count}  Other lines: {summary.rejected_line_count}")
    print(
        f"  Quantity: {format_decimal(summary.total_quantity, 3)}  "
        f"Value: {format_decimal(summary.total_value)}  Tax: {format_decimal(summary.total_tax)}"
    )


def _print_ledger(ledger: ConsolidatedLedger) -> None:
    rows = []
    for item in ledger:
        flag = "QTY" if item.row_anomaly else ("SPLIT" if item.cell_anomaly else "")
        rows.append(
            [
                item.key,
                item.reference,
                item.category,
                item.origin_presence,
                format_decimal(item.quantity_a, 3),
                format_decimal(item.quantity_b, 3),
                format_decimal(item.value_total),
                item.split_display,
                flag,
            ]
        )
    headers = ["Key", "Reference", "Category", "Origin", "Qty A", "Qty B", "Value", "Split", "Flag"]
    print(format_table(headers, rows))


def _print_result(result: ReconciliationResult) -> None:
    if result.report_a is not None:
        _print_summary(result.report_a)
    if result.report_b is not None:
        _print_summary(result.report_b)
    if result.ledger is not None:
        print()
        _print_ledger(result.ledger)
        print(f"\n{len(result.ledger.anomalies())} item(s) flagged")
    if result.totals is not None:
        totals = result.totals
        print(
            f"Consolidated: {totals.item_count} item(s), quantity {format_decimal(totals.total_quantity, 3)}, "
            f"value {format_decimal(totals.total_value)}, tax {format_decimal(totals.total_tax)}"
        )
    if result.products:
        canonical = sum(1 for product in result.products if product.is_canonical)
        print(f"Products: {len(result.products)} ({canonical} from catalog)")
    if result.payload is not None:
        print(f"Effective date: {result.payload.effective_date.isoformat()}")
    if result.warnings:
        print("Warnings:")
        for message in result.warnings:
            print(f"  ! {message}")


def cmd_reconcile(args: argparse.Namespace) -> int:
    """Reconcile two origin reports and persist the product series."""
    store = _build_store(args)
    confirm = None if args.yes else confirm_warnings
    cache = ParsedReportCache()
    request = ReconciliationRequest(
        report_a=Path(args.report_a),
        report_b=Path(args.report_b),
        rules_path=args.rules,
        catalog_path=args.catalog,
        encoding=args.encoding,
        override=args.override,
        dry_run=args.dry_run,
    )

    result = run_reconciliation(request, store=store, confirm=confirm, cache=cache)
    # Guards may be overridden after the operator has seen them.
    if result.status == "needs_override" and not args.yes:
        _print_result(result)
        assert result.error is not None
        print_error(result.error)
        if ask_yes_no("Force the import anyway?"):
            overridden = ReconciliationRequest(
                report_a=request.report_a,
                report_b=request.report_b,
                rules_path=request.rules_path,
                catalog_path=request.catalog_path,
                encoding=request.encoding,
                override=True,
                dry_run=request.dry_run,
            )
            # Warnings were confirmed before the guard check on the first pass.
            result = run_reconciliation(overridden, store=store, cache=cache)
        else:
            return EXIT_NEEDS_OVERRIDE

    _print_result(result)
    if args.export_dir and result.ledger is not None:
        for path in export_views(result, Path(args.export_dir)):
            print(f"Wrote {path}")

    if result.status == "error":
        assert result.error is not None
        print_error(result.error)
        return EXIT_ERROR
    if result.status == "needs_override":
        assert result.error is not None
        print_error(result.error)
        print("Re-run with --override to force the import.")
        return EXIT_NEEDS_OVERRIDE
    if result.status == "dry_run":
        if result.error:
            print_error(result.error)
        print("Dry run: nothing was written.")
    elif result.status == "aborted":
        print("Aborted: nothing was written.")
    else:
        print("Import saved.")
    return EXIT_OK


def cmd_parse(args: argparse.Namespace) -> int:
    """Parse one report and print its summary and item lines."""
    try:
        settings = load_report_settings(args.rules)
    except (FileNotFoundError, ValueError) as exc:
        print_error(f"Invalid configuration: {exc}")
        return EXIT_ERROR
    if args.encoding:
        settings = ReportSettings(encoding=args.encoding, grammar=settings.grammar)

    try:
        parsed = load_parsed_report(Path(args.report), args.origin, settings)
    except FileNotFoundError:
        print_error(f"File not found: {args.report}")
        return EXIT_ERROR
    except LookupError:
        print_error(f"Unknown encoding: {settings.encoding}")
        return EXIT_ERROR

    _print_summary(parsed)
    if parsed.summary.detected_identity is None:
        print(f"  ! Origin {args.origin} marker not found")
    elif not parsed.summary.identity_matches:
        print(f"  ! Looks like an origin {parsed.summary.detected_identity} report")
    rows = [
        [
            record.line_key,
            record.reference,
            record.category,
            format_decimal(record.quantity, 3),
            format_decimal(record.total),
        ]
        for record in parsed.records
    ]
    if rows:
        print()
        print(format_table(["Key", "Reference", "Category", "Quantity", "Total"], rows))
    return EXIT_OK
