"""Data models for the consolidated two-origin ledger."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal

OriginPresence = Literal["A_ONLY", "B_ONLY", "BOTH"]


@dataclass
class ConsolidatedItem:
    """One line key seen in either origin report.

    Created by the merger, annotated in place by the evaluator, read-only afterward.
    """

    key: str
    reference: str
    category: str
    origin_presence: OriginPresence
    quantity_a: Decimal = Decimal("0")
    quantity_b: Decimal = Decimal("0")
    value_a: Decimal = Decimal("0")
    value_b: Decimal = Decimal("0")
    pct_a: int = 0
    split_display: str = ""
    row_anomaly: bool = False
    cell_anomaly: bool = False

    @property
    def quantity_total(self) -> Decimal:
        return self.quantity_a + self.quantity_b

    @property
    def value_total(self) -> Decimal:
        return self.value_a + self.value_b

    @property
    def pct_b(self) -> int:
        return 100 - self.pct_a

    @property
    def has_anomaly(self) -> bool:
        return self.row_anomaly or self.cell_anomaly


@dataclass
class ConsolidatedLedger:
    """Consolidated items, ordered by (reference, key)."""

    items: list[ConsolidatedItem] = field(default_factory=list)

    def __iter__(self) -> Iterator[ConsolidatedItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def get(self, key: str) -> ConsolidatedItem | None:
        for item in self.items:
            if item.key == key:
                return item
        return None

    def anomalies(self) -> list[ConsolidatedItem]:
        return [item for item in self.items if item.has_anomaly]


@dataclass(frozen=True)
class ConsolidationTotals:
    """Headline totals for a consolidated ledger."""

    total_quantity: Decimal
    total_value: Decimal
    total_tax: Decimal
    item_count: int
