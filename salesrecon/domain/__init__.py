"""Core domain models for salesrecon.

This module provides the data models shared by the parser, the
reconciliation engine and the stores:
- RawRecord, ReportSummary: one parsed origin report
- ConsolidatedItem, ConsolidatedLedger: merged view of both origins
- ProductSummary, ProductCatalog: per-product rollup
- UpsertRecord, UpsertPayload: what a confirmed import writes

Usage:
    from salesrecon.domain import RawRecord, ConsolidatedLedger
"""

from salesrecon.domain.category_rules import (
    CategoryRule,
    CategoryRuleError,
    CategoryRuleSet,
    build_category_rule_set,
)
from salesrecon.domain.ledger import ConsolidatedItem, ConsolidatedLedger, ConsolidationTotals
from salesrecon.domain.persistence import (
    BACKDATED_IMPORT,
    NEGATIVE_VALUE,
    SeriesMetrics,
    UpsertOutcome,
    UpsertPayload,
    UpsertRecord,
    requires_override,
)
from salesrecon.domain.product import EMPTY_CATALOG, MappingCatalog, ProductCatalog, ProductSummary
from salesrecon.domain.report import Origin, RawRecord, ReportPeriod, ReportSummary

__all__ = [
    "BACKDATED_IMPORT",
    "EMPTY_CATALOG",
    "NEGATIVE_VALUE",
    "CategoryRule",
    "CategoryRuleError",
    "CategoryRuleSet",
    "ConsolidatedItem",
    "ConsolidatedLedger",
    "ConsolidationTotals",
    "MappingCatalog",
    "Origin",
    "ProductCatalog",
    "ProductSummary",
    "RawRecord",
    "ReportPeriod",
    "ReportSummary",
    "SeriesMetrics",
    "UpsertOutcome",
    "UpsertPayload",
    "UpsertRecord",
    "build_category_rule_set",
    "requires_override",
]
