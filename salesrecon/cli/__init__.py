"""Command-line interface for salesrecon.

Usage:
    salesrecon reconcile <report_a> <report_b>
    salesrecon reconcile <report_a> <report_b> --dry-run --export-dir exports/
    salesrecon reconcile <report_a> <report_b> --store-url https://series.example --yes
    salesrecon parse <report> --origin A
"""
