#!/usr/bin/env python3

import argparse
import logging
from collections.abc import Sequence

from salesrecon.runtime import set_log_level


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Sales report reconciliation CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  reconcile <report_a> <report_b>
                             Reconcile two origin reports and save the series
  parse <report> --origin A|B
                             Parse one report and show its item lines

Exit codes:
  0 = saved, dry run, or aborted by the operator
  1 = error
  2 = blocked by a guard; re-run with --override
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # reconcile command
    reconcile_parser = subparsers.add_parser("reconcile", help="Reconcile two origin reports")
    reconcile_parser.add_argument("report_a", help="Origin A report file")
    reconcile_parser.add_argument("report_b", help="Origin B report file")
    reconcile_parser.add_argument("--encoding", default=None, help="Report encoding (default from rules)")
    reconcile_parser.add_argument("--rules", default=None, help="Reconciliation rules TOML file")
    reconcile_parser.add_argument("--catalog", default=None, help="Product catalog CSV file")
    store_group = reconcile_parser.add_mutually_exclusive_group()
    store_group.add_argument("--store", default=None, help="Local series JSON file (default: data/sales_series.json)")
    store_group.add_argument("--store-url", default=None, help="Series service base URL")
    reconcile_parser.add_argument("--override", action="store_true", help="Write even if guards fail")
    reconcile_parser.add_argument("--dry-run", action="store_true", help="Show the result without writing")
    reconcile_parser.add_argument("--export-dir", default=None, help="Write the views as CSV into this directory")
    reconcile_parser.add_argument("--yes", action="store_true", help="Do not prompt for confirmation")

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Parse one origin report")
    parse_parser.add_argument("report", help="Report file")
    parse_parser.add_argument("--origin", choices=["A", "B"], required=True, help="Slot the report belongs to")
    parse_parser.add_argument("--encoding", default=None, help="Report encoding (default from rules)")
    parse_parser.add_argument("--rules", default=None, help="Reconciliation rules TOML file")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.verbose:
        set_log_level(logging.DEBUG)

    if args.command == "reconcile":
        from salesrecon.cli.reconcile import cmd_reconcile

        return cmd_reconcile(args)
    if args.command == "parse":
        from salesrecon.cli.reconcile import cmd_parse

        return cmd_parse(args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
