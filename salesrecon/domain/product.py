"""Product-level rollup models and the catalog lookup contract."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Protocol


class ProductCatalog(Protocol):
    """Read-only reference name -> canonical product code lookup."""

    def lookup_by_name(self, name: str) -> str | None: ...


@dataclass(frozen=True)
class MappingCatalog:
    """In-memory catalog backed by an exact-name mapping."""

    entries: Mapping[str, str] = field(default_factory=dict)

    def lookup_by_name(self, name: str) -> str | None:
        return self.entries.get(name)

    def __len__(self) -> int:
        return len(self.entries)


EMPTY_CATALOG = MappingCatalog()


@dataclass(frozen=True)
class ProductSummary:
    """Per-reference totals across both origins."""

    reference: str
    canonical_code: str | None
    is_canonical: bool
    quantity_a: Decimal
    value_a: Decimal
    quantity_b: Decimal
    value_b: Decimal
    quantity_total: Decimal
    value_total: Decimal
