"""Runtime infrastructure for salesrecon.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Rule and catalog loading from project configuration

Usage:
    from salesrecon.runtime import get_logger, get_paths

    logger = get_logger(__name__)
    paths = get_paths()
    print(paths.root, paths.series_store)
"""

from salesrecon.runtime.catalog import load_product_catalog
from salesrecon.runtime.logging import configure_logging, get_logger, set_log_level
from salesrecon.runtime.paths import (
    ProjectPaths,
    get_paths,
    reset_paths,
)
from salesrecon.runtime.reconciliation_rules import (
    DEFAULT_ENCODING,
    ReportSettings,
    load_category_rules,
    load_report_settings,
    reset_rule_cache,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    # Rules and catalog
    "DEFAULT_ENCODING",
    "ReportSettings",
    "load_category_rules",
    "load_report_settings",
    "load_product_catalog",
    "reset_rule_cache",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
]
