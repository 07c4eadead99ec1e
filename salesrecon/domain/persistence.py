"""Upsert payload models and guard markers for the sales series store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

# Markers the store and the preparer use so callers can tell "needs override"
# apart from hard failures.
BACKDATED_IMPORT = "BACKDATED_IMPORT"
NEGATIVE_VALUE = "NEGATIVE_VALUE"
OVERRIDE_MARKERS = (BACKDATED_IMPORT, NEGATIVE_VALUE)


def requires_override(error: str | None) -> bool:
    """Return True when an error only reflects guards an operator may override."""
    if not error:
        return False
    return any(marker in error for marker in OVERRIDE_MARKERS)


@dataclass(frozen=True)
class SeriesMetrics:
    """Report-level metrics stored alongside the product rows."""

    tax_a: Decimal = Decimal("0")
    tax_b: Decimal = Decimal("0")

    @property
    def tax_total(self) -> Decimal:
        return self.tax_a + self.tax_b


@dataclass(frozen=True)
class UpsertRecord:
    """One normalized product row, keyed by (reference, canonical_code)."""

    reference: str
    canonical_code: str | None
    quantity_a: Decimal
    value_a: Decimal
    quantity_b: Decimal
    value_b: Decimal
    quantity_total: Decimal
    value_total: Decimal

    @property
    def key(self) -> tuple[str, str | None]:
        return (self.reference, self.canonical_code)


@dataclass(frozen=True)
class UpsertPayload:
    """Everything one confirmed write sends to the series store."""

    effective_date: date
    records: tuple[UpsertRecord, ...] = ()
    metrics: SeriesMetrics = field(default_factory=SeriesMetrics)
    override: bool = False


@dataclass(frozen=True)
class UpsertOutcome:
    """Result reported by a series store write."""

    success: bool
    error: str | None = None

    @property
    def needs_override(self) -> bool:
        return not self.success and requires_override(self.error)
