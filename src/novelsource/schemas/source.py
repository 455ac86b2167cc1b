"""
Data model for user-configured book sources and their extraction rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class SelectorDialect(StrEnum):
    """Syntax used by every rule of a book source."""

    CSS = "css"
    XPATH = "xpath"
    JSONPATH = "jsonpath"
    REGEX = "regex"


class RuleGroupKey(StrEnum):
    """Pipeline stage a bundle of rules belongs to."""

    BASIC = "basic"
    SEARCH = "search"
    DISCOVER = "discover"
    DETAIL = "detail"
    CATALOG = "catalog"
    CONTENT = "content"


@dataclass
class Rule:
    """A single named selector rule.

    Attributes:
        id: Identifier of the rule, unique within its source.
        key: Field name the rule extracts (e.g. ``"titleSelector"``).
        label: Human-friendly label shown in editors.
        value: Dialect-specific selector expression. Empty means unset.
        placeholder: Example expression shown when ``value`` is empty.
        description: Optional longer help text.
    """

    id: str
    key: str
    label: str
    value: str = ""
    placeholder: str = ""
    description: str = ""


@dataclass
class BookSource:
    """A configured, rule-driven definition of one novel website.

    Attributes:
        id: Stable identifier once persisted.
        name: Display name of the source.
        base_url: Root address used to resolve relative links.
        enabled: Disabled sources are skipped by every pipeline run.
        rule_type: Selector dialect for all rule groups. Kept as a raw string
            when a stored record names an unknown dialect.
        rule_groups: Rules bundled per pipeline stage.
        headers: Optional JSON object of extra request headers.
        description: Optional free-form notes.
    """

    id: str
    name: str
    base_url: str
    enabled: bool = False
    rule_type: SelectorDialect | str = SelectorDialect.CSS
    rule_groups: dict[RuleGroupKey, list[Rule]] = field(default_factory=dict)
    headers: str | None = None
    description: str = ""

    def rule(self, group: RuleGroupKey, key: str) -> Rule | None:
        """Return the first rule named ``key`` in ``group``, if any."""
        for rule in self.rule_groups.get(group, []):
            if rule.key == key:
                return rule
        return None

    def rule_value(self, group: RuleGroupKey, key: str) -> str:
        """Return the trimmed expression of a rule, or ``""`` when unset."""
        rule = self.rule(group, key)
        return rule.value.strip() if rule and rule.value else ""
