"""Category expectation rules for split/anomaly evaluation.

Rules are plain data: a category name maps to whether it is a bypass
category, which origin-A percentage it is expected to carry, and how its
quantities roll up per product. Configs are merged in order, later
layers replacing earlier entries for the same category.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

QuantityRollup = Literal["sum", "max"]

DEFAULT_BYPASS_DISPLAY = "100"
_ROLLUPS: tuple[QuantityRollup, ...] = ("sum", "max")


class CategoryRuleError(ValueError):
    """Raised when the category rule configuration is invalid."""


def normalize_category(name: str | None) -> str:
    return (name or "").strip().upper()


@dataclass(frozen=True)
class CategoryRule:
    """Expectations for one category tag."""

    name: str
    bypass: bool = False
    expected_pct_a: int | None = None
    quantity_rollup: QuantityRollup = "max"

    def __post_init__(self) -> None:
        if not self.name or self.name != normalize_category(self.name):
            raise CategoryRuleError(f"Category name must be non-empty and upper-case: {self.name!r}")
        if self.expected_pct_a is not None:
            if isinstance(self.expected_pct_a, bool) or not isinstance(self.expected_pct_a, int):
                raise CategoryRuleError(f"{self.name}: expected_pct_a must be an integer, got {self.expected_pct_a!r}")
            if not 0 <= self.expected_pct_a <= 100:
                raise CategoryRuleError(f"{self.name}: expected_pct_a must be within 0..100, got {self.expected_pct_a}")
        if self.bypass and self.expected_pct_a is not None:
            raise CategoryRuleError(f"{self.name}: bypass categories cannot declare expected_pct_a")
        if self.quantity_rollup not in _ROLLUPS:
            raise CategoryRuleError(f"{self.name}: quantity_rollup must be one of {_ROLLUPS}, got {self.quantity_rollup!r}")


@dataclass(frozen=True)
class CategoryRuleSet:
    """All category rules plus the fixed split text shown for bypass categories."""

    rules: Mapping[str, CategoryRule] = field(default_factory=dict)
    bypass_display: str = DEFAULT_BYPASS_DISPLAY

    def get(self, category: str | None) -> CategoryRule | None:
        return self.rules.get(normalize_category(category))

    def is_bypass(self, category: str | None) -> bool:
        rule = self.get(category)
        return rule is not None and rule.bypass

    def expected_pct_a(self, category: str | None) -> int | None:
        rule = self.get(category)
        return rule.expected_pct_a if rule is not None else None

    def quantity_rollup(self, category: str | None) -> QuantityRollup:
        rule = self.get(category)
        return rule.quantity_rollup if rule is not None else "max"

    @property
    def bypass_categories(self) -> frozenset[str]:
        return frozenset(name for name, rule in self.rules.items() if rule.bypass)


def _rule_from_config(raw: Mapping[str, Any]) -> CategoryRule:
    name = normalize_category(str(raw.get("name", "")))
    if not name:
        raise CategoryRuleError(f"Category entry is missing a name: {dict(raw)!r}")

    bypass = raw.get("bypass", False)
    if not isinstance(bypass, bool):
        raise CategoryRuleError(f"{name}: bypass must be true or false, got {bypass!r}")

    # Bypass categories count both origins as distinct movements unless told otherwise.
    rollup = raw.get("quantity_rollup", "sum" if bypass else "max")
    return CategoryRule(
        name=name,
        bypass=bypass,
        expected_pct_a=raw.get("expected_pct_a"),
        quantity_rollup=rollup,
    )


def build_category_rule_set(configs: Sequence[Mapping[str, Any]] | None = None) -> CategoryRuleSet:
    """Build a rule set from in-memory configs (parsed TOML tables)."""
    rules: dict[str, CategoryRule] = {}
    bypass_display = DEFAULT_BYPASS_DISPLAY

    for config in configs or ():
        display = config.get("bypass_display")
        if display is not None:
            if not isinstance(display, str) or not display.strip():
                raise CategoryRuleError(f"bypass_display must be a non-empty string, got {display!r}")
            bypass_display = display.strip()

        categories = config.get("categories", [])
        if not isinstance(categories, list):
            raise CategoryRuleError("'categories' must be an array of tables")

        seen_in_layer: set[str] = set()
        for raw in categories:
            if not isinstance(raw, Mapping):
                raise CategoryRuleError(f"Category entry must be a table, got {raw!r}")
            rule = _rule_from_config(raw)
            if rule.name in seen_in_layer:
                raise CategoryRuleError(f"Duplicate category in one config: {rule.name}")
            seen_in_layer.add(rule.name)
            rules[rule.name] = rule

    return CategoryRuleSet(rules=rules, bypass_display=bypass_display)
