"""Runtime loader for category rules and report settings."""

from __future__ import annotations

import codecs
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from salesrecon.domain.category_rules import CategoryRuleSet, build_category_rule_set
from salesrecon.report.line_parser import DEFAULT_GRAMMAR, ReportGrammar
from salesrecon.runtime.logging import get_logger
from salesrecon.runtime.paths import get_paths

logger = get_logger(__name__)

DEFAULT_ENCODING = "iso-8859-1"


@dataclass(frozen=True)
class ReportSettings:
    """How to decode and recognize origin report files."""

    encoding: str = DEFAULT_ENCODING
    grammar: ReportGrammar = DEFAULT_GRAMMAR


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    if not path.exists():
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    return data if isinstance(data, dict) else {}


def _rule_files(config_path: str | None) -> list[Path]:
    p = get_paths()
    files = [p.default_reconciliation_rules]
    if config_path is None:
        if p.reconciliation_rules.exists():
            files.append(p.reconciliation_rules)
        return files

    explicit = Path(config_path)
    if not explicit.exists():
        raise FileNotFoundError(f"Reconciliation rules file not found: {explicit}")
    files.append(explicit)
    return files


@lru_cache(maxsize=8)
def load_rule_layers(config_path: str | None = None) -> tuple[dict[str, Any], ...]:
    """Parsed TOML layers, packaged defaults first.

    An explicit ``config_path`` replaces the project file and must exist.
    """
    layers = tuple(_load_toml(path) for path in _rule_files(config_path))
    logger.debug("Loaded %d reconciliation rule layer(s)", len(layers))
    return layers


def load_category_rules(config_path: str | None = None) -> CategoryRuleSet:
    """Build the category rule set from the configured TOML layers."""
    return build_category_rule_set(load_rule_layers(config_path))


def _report_settings_from(section: Mapping[str, Any], base: ReportSettings) -> ReportSettings:
    encoding = section.get("encoding", base.encoding)
    if not isinstance(encoding, str):
        raise ValueError(f"[report] encoding must be a string, got {encoding!r}")
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise ValueError(f"[report] unknown encoding: {encoding!r}") from e

    header_lines = section.get("period_header_lines", base.grammar.period_header_lines)
    if isinstance(header_lines, bool) or not isinstance(header_lines, int):
        raise ValueError(f"[report] period_header_lines must be an integer, got {header_lines!r}")

    grammar = ReportGrammar(
        origin_a_marker=str(section.get("origin_a_marker", base.grammar.origin_a_marker)),
        origin_b_marker=str(section.get("origin_b_marker", base.grammar.origin_b_marker)),
        period_header_lines=header_lines,
        number_format=base.grammar.number_format,
    )
    return ReportSettings(encoding=encoding, grammar=grammar)


def load_report_settings(config_path: str | None = None) -> ReportSettings:
    """Merge the ``[report]`` tables of every rule layer over built-in defaults."""
    settings = ReportSettings()
    for layer in load_rule_layers(config_path):
        section = layer.get("report")
        if section is None:
            continue
        if not isinstance(section, Mapping):
            raise ValueError("[report] must be a table")
        settings = _report_settings_from(section, settings)
    return settings


def reset_rule_cache() -> None:
    """Forget cached rule layers (tests and long-lived sessions)."""
    load_rule_layers.cache_clear()
