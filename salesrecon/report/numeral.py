"""Helpers for comma-decimal report numbers and header fields.

Reports print numbers as ``1.234,56`` (``.`` groups thousands, ``,`` marks
decimals). Blank or garbled cells are routine, so parsing never raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from salesrecon.domain.report import ReportPeriod

__all__ = [
    "BR_NUMBER_FORMAT",
    "NumberFormat",
    "extract_period",
    "extract_tax",
    "format_decimal",
    "parse_decimal",
]

DEFAULT_PERIOD_HEADER_LINES = 20

# "Período", "Periodo" or a mis-decoded "Per?odo" followed by two DD/MM/YYYY dates.
_PERIOD_RE = re.compile(
    r"Per.*?odo\s+.*?(\d{2}/\d{2}/\d{4})\s+a\s+(\d{2}/\d{2}/\d{4})",
    re.IGNORECASE,
)
_TAX_RE = re.compile(
    r"(?:TOTAL|VALOR|VLR)\.?\s*(?:DO\s+)?IPI.*?\s([0-9.]+,\d{2})",
    re.IGNORECASE,
)
_LINE_SPLIT_RE = re.compile(r"\r?\n")


@dataclass(frozen=True)
class NumberFormat:
    """Separator convention for one numeric locale."""

    thousands: str = "."
    decimal: str = ","


BR_NUMBER_FORMAT = NumberFormat()


def parse_decimal(raw: str | None, number_format: NumberFormat = BR_NUMBER_FORMAT) -> Decimal:
    """Parse a formatted number such as ``1.234,56``; return zero when unparseable."""
    if raw is None or not isinstance(raw, str):
        return Decimal("0")
    value = raw.strip()
    if not value:
        return Decimal("0")

    normalized = value.replace(number_format.thousands, "")
    normalized = normalized.replace(number_format.decimal, ".")
    try:
        parsed = Decimal(normalized)
    except InvalidOperation:
        return Decimal("0")
    if not parsed.is_finite():
        return Decimal("0")
    return parsed


def format_decimal(value: Decimal, places: int = 2, number_format: NumberFormat = BR_NUMBER_FORMAT) -> str:
    """Format a Decimal back into the report convention, e.g. ``1.234,56``."""
    quantum = Decimal(1).scaleb(-places)
    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    integer_part, _, fraction_part = f"{abs(rounded):.{places}f}".partition(".")

    groups: list[str] = []
    while len(integer_part) > 3:
        groups.insert(0, integer_part[-3:])
        integer_part = integer_part[:-3]
    groups.insert(0, integer_part)

    text = sign + number_format.thousands.join(groups)
    if places > 0:
        text += number_format.decimal + fraction_part
    return text


def extract_period(header_text: str, max_lines: int = DEFAULT_PERIOD_HEADER_LINES) -> ReportPeriod | None:
    """Find the declared reporting window within the first ``max_lines`` lines."""
    if not header_text:
        return None
    header = "\n".join(_LINE_SPLIT_RE.split(header_text)[:max_lines])
    match = _PERIOD_RE.search(header)
    if match is None:
        return None
    return ReportPeriod(start=match.group(1), end=match.group(2))


def extract_tax(full_text: str, number_format: NumberFormat = BR_NUMBER_FORMAT) -> Decimal:
    """Return the labeled tax (IPI) total printed anywhere in the report, or zero."""
    if not full_text:
        return Decimal("0")
    match = _TAX_RE.search(full_text)
    if match is None:
        return Decimal("0")
    return parse_decimal(match.group(1), number_format)
