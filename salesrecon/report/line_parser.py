"""Line-oriented parsing of origin sales reports.

Each item line is printed as::

    <id> <description...> <reference> <unused> CX <quantity> <total>

Everything else (headers, page breaks, footers, blank lines) is noise and is
skipped without error. The category is the last word of the description,
which is how the report generators encode the product line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal

from salesrecon.domain.report import Origin, RawRecord, ReportSummary

from .numeral import (
    BR_NUMBER_FORMAT,
    DEFAULT_PERIOD_HEADER_LINES,
    NumberFormat,
    extract_period,
    extract_tax,
    parse_decimal,
)

ITEM_LINE_RE = re.compile(r"^(\d+)\s+(.+?)\s+(\S+)\s+(\S+)\s+CX\s+([0-9.]+,\d+)\s+([0-9.]+,\d{2})")

DEFAULT_ORIGIN_A_MARKER = r"MOVEIS\s+PERARO"
DEFAULT_ORIGIN_B_MARKER = r"-\*-\s*SISTEMA\s*-\*-"

_LINE_SPLIT_RE = re.compile(r"\r?\n")


@dataclass(frozen=True)
class ReportGrammar:
    """Report-shape settings that vary between deployments."""

    origin_a_marker: str = DEFAULT_ORIGIN_A_MARKER
    origin_b_marker: str = DEFAULT_ORIGIN_B_MARKER
    period_header_lines: int = DEFAULT_PERIOD_HEADER_LINES
    number_format: NumberFormat = BR_NUMBER_FORMAT

    def __post_init__(self) -> None:
        # Fail on broken marker patterns here rather than on first parse.
        re.compile(self.origin_a_marker)
        re.compile(self.origin_b_marker)
        if self.period_header_lines < 1:
            raise ValueError(f"period_header_lines must be positive, got {self.period_header_lines}")


DEFAULT_GRAMMAR = ReportGrammar()


def detect_identity(text: str, grammar: ReportGrammar = DEFAULT_GRAMMAR) -> Origin | None:
    """Return which origin's marker phrase appears in the text (A checked first)."""
    if re.search(grammar.origin_a_marker, text, re.IGNORECASE):
        return "A"
    if re.search(grammar.origin_b_marker, text, re.IGNORECASE):
        return "B"
    return None


def parse_item_line(line: str, line_number: int = 0, number_format: NumberFormat = BR_NUMBER_FORMAT) -> RawRecord | None:
    """Parse one report line; return None for anything that is not an item line."""
    match = ITEM_LINE_RE.match(line)
    if match is None:
        return None

    line_key, raw_description, reference, _unused, quantity_text, total_text = match.groups()
    description = raw_description.strip()
    description_parts = description.split()
    category = description_parts[-1] if description_parts else ""

    return RawRecord(
        line_key=line_key,
        reference=reference,
        description=description,
        category=category,
        quantity=parse_decimal(quantity_text, number_format),
        total=parse_decimal(total_text, number_format),
        line_number=line_number,
        quantity_text=quantity_text,
        total_text=total_text,
    )


def parse_report(
    raw_text: str | None,
    expected_origin: Origin,
    *,
    source_label: str = "",
    source_size: int | None = None,
    grammar: ReportGrammar = DEFAULT_GRAMMAR,
) -> tuple[list[RawRecord], ReportSummary]:
    """
    Parse one origin report into records and a summary.

    The detected identity is recorded independently of ``expected_origin``;
    callers decide whether to warn about a report loaded into the wrong slot.

    Args:
        raw_text: Decoded report text
        expected_origin: Slot the report was loaded into ("A" or "B")
        source_label: Provenance label, typically the file name
        source_size: Size of the source in bytes; defaults to the text length

    Returns:
        Tuple of (records, summary). Empty or malformed input yields no records
        and a zero-valued summary.
    """
    if not raw_text or not isinstance(raw_text, str):
        return [], ReportSummary(
            expected_origin=expected_origin,
            source_label=source_label,
            source_size=source_size or 0,
        )

    text = raw_text.lstrip("\ufeff")
    records: list[RawRecord] = []
    total_quantity = Decimal("0")
    total_value = Decimal("0")
    rejected = 0

    for index, line in enumerate(_LINE_SPLIT_RE.split(text)):
        record = parse_item_line(line, index, grammar.number_format)
        if record is None:
            if line.strip():
                rejected += 1
            continue
        records.append(record)
        total_quantity += record.quantity
        total_value += record.total

    summary = ReportSummary(
        expected_origin=expected_origin,
        total_quantity=total_quantity,
        total_value=total_value,
        total_tax=extract_tax(text, grammar.number_format),
        source_label=source_label,
        source_size=source_size if source_size is not None else len(raw_text),
        detected_identity=detect_identity(text, grammar),
        period=extract_period(text, grammar.period_header_lines),
        matched_line_count=len(records),
        rejected_line_count=rejected,
    )
    return records, summary
