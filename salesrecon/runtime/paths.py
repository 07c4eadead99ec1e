"""Centralized path management for salesrecon.

This module provides a single source of truth for all project paths,
eliminating scattered path definitions across modules.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _get_project_root() -> Path:
    """Determine the project root directory."""
    env_root = os.environ.get("SALESRECON_HOME")
    if env_root:
        return Path(env_root).expanduser()
    return Path.cwd()


@dataclass
class ProjectPaths:
    """Container for all project-related paths.

    All paths are computed relative to the project root, ensuring consistency
    across all modules regardless of where they are imported from.
    """

    root: Path = field(default_factory=_get_project_root)

    def __post_init__(self) -> None:
        # Ensure root is resolved to absolute path
        self.root = self.root.resolve()

    # --- Source code paths ---
    @property
    def src(self) -> Path:
        """salesrecon package directory."""
        return Path(__file__).resolve().parents[1]

    # --- Configuration paths ---
    @property
    def config(self) -> Path:
        """Configuration directory (config/)."""
        return self.root / "config"

    @property
    def reconciliation_rules(self) -> Path:
        """Project-level category rules and report settings TOML file."""
        return self.config / "reconciliation.toml"

    @property
    def default_reconciliation_rules(self) -> Path:
        """Packaged default category rules and report settings TOML file."""
        return self.src / "rules" / "default_reconciliation.toml"

    @property
    def product_catalog(self) -> Path:
        """Canonical product catalog CSV (name -> code)."""
        return self.config / "product_catalog.csv"

    # --- Data paths ---
    @property
    def data(self) -> Path:
        """Data directory holding persisted series."""
        return self.root / "data"

    @property
    def series_store(self) -> Path:
        """JSON file backing the local sales series store."""
        return self.data / "sales_series.json"

    @property
    def exports(self) -> Path:
        """Default directory for exported reconciliation views."""
        return self.root / "exports"

    def ensure_data_directories(self) -> None:
        """Create data/export directories if they don't exist."""
        self.data.mkdir(parents=True, exist_ok=True)
        self.exports.mkdir(parents=True, exist_ok=True)


# Module-level singleton
_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance.

    Returns:
        The global ProjectPaths instance.
    """
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def reset_paths(root: Path | None = None) -> ProjectPaths:
    """Replace the singleton, optionally pinned to an explicit root.

    Useful for tests and for CLI invocations with a custom project home.
    """
    global _paths
    _paths = ProjectPaths(root=root) if root is not None else ProjectPaths()
    return _paths
