"""Parsing of origin sales report text."""

from salesrecon.report.line_parser import (
    DEFAULT_GRAMMAR,
    ITEM_LINE_RE,
    ReportGrammar,
    detect_identity,
    parse_item_line,
    parse_report,
)
from salesrecon.report.numeral import (
    BR_NUMBER_FORMAT,
    NumberFormat,
    extract_period,
    extract_tax,
    format_decimal,
    parse_decimal,
)

__all__ = [
    "BR_NUMBER_FORMAT",
    "DEFAULT_GRAMMAR",
    "ITEM_LINE_RE",
    "NumberFormat",
    "ReportGrammar",
    "detect_identity",
    "extract_period",
    "extract_tax",
    "format_decimal",
    "parse_decimal",
    "parse_item_line",
    "parse_report",
]
