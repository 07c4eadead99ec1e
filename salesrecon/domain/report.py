"""Data models for parsed origin sales reports."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Literal

Origin = Literal["A", "B"]

PERIOD_SEPARATOR = " a "
PERIOD_DATE_FORMAT = "%d/%m/%Y"


@dataclass(frozen=True)
class RawRecord:
    """A single matched line of one origin report."""

    line_key: str
    reference: str
    description: str
    category: str  # Last token of the description, e.g. "LEVE"
    quantity: Decimal
    total: Decimal
    line_number: int = 0
    quantity_text: str = ""
    total_text: str = ""


@dataclass(frozen=True)
class ReportPeriod:
    """Declared reporting window, as printed in the report header."""

    start: str  # DD/MM/YYYY
    end: str  # DD/MM/YYYY

    @property
    def display(self) -> str:
        return f"{self.start}{PERIOD_SEPARATOR}{self.end}"

    @property
    def raw(self) -> str:
        # Canonical form used to compare the two origin reports.
        return f"{self.start}{PERIOD_SEPARATOR}{self.end}"

    def end_date(self) -> date | None:
        try:
            return datetime.strptime(self.end, PERIOD_DATE_FORMAT).date()
        except ValueError:
            return None


@dataclass(frozen=True)
class ReportSummary:
    """Totals and provenance for one parsed origin report."""

    expected_origin: Origin
    total_quantity: Decimal = Decimal("0")
    total_value: Decimal = Decimal("0")
    total_tax: Decimal = Decimal("0")
    source_label: str = ""
    source_size: int = 0
    detected_identity: Origin | None = None
    period: ReportPeriod | None = None
    matched_line_count: int = 0
    rejected_line_count: int = 0

    @property
    def period_display(self) -> str:
        return self.period.display if self.period is not None else "not identified"

    @property
    def period_raw(self) -> str:
        return self.period.raw if self.period is not None else ""

    @property
    def identity_matches(self) -> bool:
        """True when the header marker agrees with the slot the report was loaded into."""
        return self.detected_identity == self.expected_origin
