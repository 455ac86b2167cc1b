"""
Construction, hydration and explicit updates of book source rule sets.

All functions here are pure data transformations; persistence is left to the
caller, which stores :meth:`RuleModel.dump_rule_groups` output and feeds it
back through :meth:`RuleModel.hydrate` or :meth:`RuleModel.hydrate_source`.
"""

from __future__ import annotations

__all__ = ["RuleModel"]

import itertools
import json
import logging
import uuid
from collections.abc import Mapping
from dataclasses import asdict
from typing import Any

from novelsource.schemas import BookSource, Rule, RuleGroupKey, SelectorDialect

from .templates import RULE_TEMPLATES, RuleTemplate

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_NAME = "新建书源"
DEFAULT_BASE_URL = "https://example.com"

_META_FIELDS = frozenset(
    {"name", "base_url", "enabled", "rule_type", "headers", "description"}
)
_RULE_FIELDS = frozenset({"key", "label", "value", "placeholder", "description"})


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class RuleModel:
    """Factory and editor for :class:`BookSource` rule sets.

    Each instance owns its own id generator, so rule and source ids never
    depend on process-wide state. Ids are unique per instance; the random
    namespace keeps ids from different instances apart.
    """

    def __init__(self, namespace: str | None = None) -> None:
        """Initialize the model.

        Args:
            namespace: Optional fixed prefix for generated ids. A random one
                is used when omitted.
        """
        self._namespace = namespace or uuid.uuid4().hex[:8]
        self._rule_seq = itertools.count(1)
        self._source_seq = itertools.count(1)
        self._custom_seq = itertools.count(1)

    def new_rule_id(self) -> str:
        return f"rule-{self._namespace}-{next(self._rule_seq)}"

    def new_source_id(self) -> str:
        return f"source-{self._namespace}-{next(self._source_seq)}"

    def default_rules(
        self,
        group: RuleGroupKey,
        initial_values: Mapping[str, str] | None = None,
    ) -> list[Rule]:
        """Build the canonical rule list of a group.

        Args:
            group: Rule group to scaffold.
            initial_values: Optional values keyed by rule key.

        Returns:
            One rule per template entry, empty unless given in
            ``initial_values``.
        """
        initial_values = initial_values or {}
        return [
            self._from_template(tpl, initial_values.get(tpl["key"], ""))
            for tpl in RULE_TEMPLATES[group]
        ]

    def default_rule_groups(
        self, rule_type: SelectorDialect | str = SelectorDialect.CSS
    ) -> dict[RuleGroupKey, list[Rule]]:
        """Build a full set of empty rule groups for the given dialect."""
        return {
            group: self.default_rules(
                group,
                {"ruleType": str(rule_type)} if group is RuleGroupKey.BASIC else None,
            )
            for group in RuleGroupKey
        }

    def create_default(self) -> BookSource:
        """Return a fully populated, disabled source with every rule empty."""
        return BookSource(
            id=self.new_source_id(),
            name=DEFAULT_SOURCE_NAME,
            base_url=DEFAULT_BASE_URL,
            enabled=False,
            rule_type=SelectorDialect.CSS,
            rule_groups=self.default_rule_groups(SelectorDialect.CSS),
        )

    def hydrate(
        self, stored: str | Mapping[str, Any] | None
    ) -> dict[RuleGroupKey, list[Rule]]:
        """Parse a persisted rule-group blob.

        Decoding failures never fail the whole source: an undecodable blob
        yields the default rule set, and an undecodable or malformed group
        yields that group's defaults. Unknown group keys and unknown rule
        fields are ignored; template rules missing from a stored group are
        appended empty.

        Args:
            stored: JSON text, an already decoded mapping, or ``None``.

        Returns:
            A rule list for every :class:`RuleGroupKey`.
        """
        data: Any
        if stored is None or (isinstance(stored, str) and not stored.strip()):
            data = {}
        elif isinstance(stored, str):
            try:
                data = json.loads(stored)
            except json.JSONDecodeError as e:
                logger.warning("Invalid rule group JSON, using defaults: %s", e)
                data = {}
        else:
            data = stored

        if not isinstance(data, Mapping):
            logger.warning(
                "Rule groups must be a JSON object, got %s; using defaults",
                type(data).__name__,
            )
            data = {}

        return {
            group: self._hydrate_group(group, data.get(group.value))
            for group in RuleGroupKey
        }

    def hydrate_source(self, record: Mapping[str, Any]) -> BookSource:
        """Build a :class:`BookSource` from a persisted record.

        Both snake_case and camelCase field names are accepted. An unknown
        ``rule_type`` is kept verbatim so that pipeline construction can
        report it as a configuration error.

        Args:
            record: Stored source fields.

        Returns:
            The hydrated source.
        """
        raw_type = record.get("rule_type", record.get("ruleType")) or "css"
        rule_type: SelectorDialect | str
        try:
            rule_type = SelectorDialect(str(raw_type).strip().lower())
        except ValueError:
            logger.warning("Unknown rule type %r for source %r", raw_type, record)
            rule_type = str(raw_type)

        source_id = record.get("id")
        headers = record.get("headers")
        if isinstance(headers, Mapping):
            headers = json.dumps(dict(headers), ensure_ascii=False)

        return BookSource(
            id=str(source_id) if source_id is not None else self.new_source_id(),
            name=_as_str(record.get("name")) or DEFAULT_SOURCE_NAME,
            base_url=_as_str(record.get("base_url", record.get("baseUrl")))
            or DEFAULT_BASE_URL,
            enabled=bool(record.get("enabled", False)),
            rule_type=rule_type,
            rule_groups=self.hydrate(
                record.get("rule_groups", record.get("ruleGroups"))
            ),
            headers=_as_str(headers) or None,
            description=_as_str(record.get("description")),
        )

    @staticmethod
    def dump_rule_groups(source: BookSource) -> str:
        """Serialize the rule groups of a source to JSON."""
        return json.dumps(
            {
                group.value: [asdict(rule) for rule in rules]
                for group, rules in source.rule_groups.items()
            },
            ensure_ascii=False,
        )

    def update_meta(self, source: BookSource, **meta: Any) -> BookSource:
        """Update top-level fields of a source in place.

        Changing ``rule_type`` also updates the ``basic.ruleType`` rule.

        Raises:
            ValueError: If an unknown or immutable field is given.
        """
        unknown = set(meta) - _META_FIELDS
        if unknown:
            raise ValueError(f"Unknown source fields: {sorted(unknown)!r}")

        for name, value in meta.items():
            setattr(source, name, value)

        if "rule_type" in meta:
            rule = source.rule(RuleGroupKey.BASIC, "ruleType")
            if rule is not None:
                rule.value = str(meta["rule_type"])
        return source

    def add_rule(
        self,
        source: BookSource,
        group: RuleGroupKey,
        *,
        key: str | None = None,
        label: str | None = None,
        placeholder: str = "",
        description: str = "",
    ) -> Rule:
        """Append a new, empty custom rule to a group."""
        rule = Rule(
            id=self.new_rule_id(),
            key=key or f"custom-{next(self._custom_seq)}",
            label=label or "自定义规则",
            value="",
            placeholder=placeholder,
            description=description,
        )
        source.rule_groups.setdefault(group, []).append(rule)
        return rule

    def update_rule(
        self,
        source: BookSource,
        group: RuleGroupKey,
        rule_id: str,
        **patch: Any,
    ) -> Rule | None:
        """Patch a rule identified by id. The id itself never changes.

        Returns:
            The updated rule, or ``None`` if no rule has that id.

        Raises:
            ValueError: If ``patch`` names an unknown rule field.
        """
        unknown = set(patch) - _RULE_FIELDS
        if unknown:
            raise ValueError(f"Unknown rule fields: {sorted(unknown)!r}")

        for rule in source.rule_groups.get(group, []):
            if rule.id == rule_id:
                for name, value in patch.items():
                    setattr(rule, name, _as_str(value))
                return rule
        return None

    def reset_rules(self, source: BookSource, group: RuleGroupKey) -> list[Rule]:
        """Replace a group with its empty template rules."""
        initial = (
            {"ruleType": str(source.rule_type)}
            if group is RuleGroupKey.BASIC
            else None
        )
        source.rule_groups[group] = self.default_rules(group, initial)
        return source.rule_groups[group]

    def _from_template(self, template: RuleTemplate, value: str = "") -> Rule:
        return Rule(
            id=self.new_rule_id(),
            key=template["key"],
            label=template["label"],
            value=value,
            placeholder=template.get("placeholder", ""),
            description=template.get("description", ""),
        )

    def _hydrate_group(self, group: RuleGroupKey, raw: Any) -> list[Rule]:
        if raw is None:
            return self.default_rules(group)

        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError as e:
                logger.warning("Invalid JSON in rule group %r: %s", group.value, e)
                return self.default_rules(group)

        if not isinstance(raw, list):
            logger.warning(
                "Rule group %r must be a list, got %s",
                group.value,
                type(raw).__name__,
            )
            return self.default_rules(group)

        templates = {tpl["key"]: tpl for tpl in RULE_TEMPLATES[group]}
        rules: list[Rule] = []
        seen: set[str] = set()

        for entry in raw:
            if not isinstance(entry, Mapping):
                continue
            key = entry.get("key")
            if not isinstance(key, str) or not key:
                continue
            tpl = templates.get(key)
            rules.append(
                Rule(
                    id=_as_str(entry.get("id")) or self.new_rule_id(),
                    key=key,
                    label=_as_str(entry.get("label"))
                    or (tpl["label"] if tpl else key),
                    value=_as_str(entry.get("value")),
                    placeholder=_as_str(entry.get("placeholder"))
                    or (tpl.get("placeholder", "") if tpl else ""),
                    description=_as_str(entry.get("description"))
                    or (tpl.get("description", "") if tpl else ""),
                )
            )
            seen.add(key)

        for key, tpl in templates.items():
            if key not in seen:
                rules.append(self._from_template(tpl))

        return rules
