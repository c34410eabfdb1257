"""Rule registry: enabled rules grouped by the fact kind they apply to."""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

from conventionist.catalogue import builtin_rules
from conventionist.rules import Rule, Severity

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from conventionist.config import ConventionConfig
    from conventionist.facts import FactKind

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class RegistryError(Exception):
    """Base class for registry configuration errors (fatal at startup)."""


class DuplicateRuleId(RegistryError):
    """Raised when registering a rule whose id is already taken."""


class UnknownRule(RegistryError):
    """Raised when referring to a rule id that was never registered."""


class RegistryFrozen(RegistryError):
    """Raised when mutating a registry after :meth:`RuleRegistry.freeze`."""


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class RuleRegistry:
    """Ordered rules per fact kind, with enable/disable and severity overlays.

    Insertion order is priority order.  The registry is mutable only while it
    is being built; :meth:`freeze` makes it read-only so it can be shared by
    evaluation workers without locking.
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: dict[str, Rule] = {}
        self._by_kind: dict[FactKind, list[str]] = {}
        self._disabled: set[str] = set()
        self._severity_overrides: dict[str, Severity] = {}
        self._frozen = False
        self._cache: dict[FactKind, tuple[Rule, ...]] = {}
        for rule in rules:
            self.register(rule)

    # -- building -----------------------------------------------------------

    def _check_mutable(self) -> None:
        if self._frozen:
            msg = "rule registry is frozen"
            raise RegistryFrozen(msg)

    def _check_known(self, rule_id: str) -> None:
        if rule_id not in self._rules:
            msg = f"unknown rule id '{rule_id}'"
            raise UnknownRule(msg)

    def register(self, rule: Rule) -> None:
        self._check_mutable()
        if rule.id in self._rules:
            msg = f"duplicate rule id '{rule.id}'"
            raise DuplicateRuleId(msg)
        self._rules[rule.id] = rule
        self._by_kind.setdefault(rule.applies_to, []).append(rule.id)

    def disable(self, rule_id: str) -> None:
        self._check_mutable()
        self._check_known(rule_id)
        self._disabled.add(rule_id)

    def enable(self, rule_id: str) -> None:
        self._check_mutable()
        self._check_known(rule_id)
        self._disabled.discard(rule_id)

    def override_severity(self, rule_id: str, severity: Severity | str) -> None:
        self._check_mutable()
        self._check_known(rule_id)
        self._severity_overrides[rule_id] = Severity.parse(severity)

    def freeze(self) -> RuleRegistry:
        """Make the registry read-only and precompute per-kind rule lists."""
        if not self._frozen:
            self._cache = {kind: self._compute(kind) for kind in self._by_kind}
            self._frozen = True
            logger.debug(
                "Rule registry frozen: %d rules, %d enabled",
                len(self._rules),
                len(self._rules) - len(self._disabled),
            )
        return self

    # -- queries ------------------------------------------------------------

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _effective(self, rule_id: str) -> Rule:
        rule = self._rules[rule_id]
        override = self._severity_overrides.get(rule_id)
        if override is not None and override != rule.severity:
            return dataclasses.replace(rule, severity=override)
        return rule

    def _compute(self, kind: FactKind) -> tuple[Rule, ...]:
        return tuple(
            self._effective(rule_id)
            for rule_id in self._by_kind.get(kind, ())
            if rule_id not in self._disabled
        )

    def rules_for(self, kind: FactKind) -> tuple[Rule, ...]:
        """Return enabled rules for *kind* in priority order (empty if none)."""
        if self._frozen:
            return self._cache.get(kind, ())
        return self._compute(kind)

    def get(self, rule_id: str) -> Rule:
        """Return the rule with *rule_id*, severity overrides applied."""
        self._check_known(rule_id)
        return self._effective(rule_id)

    def is_enabled(self, rule_id: str) -> bool:
        self._check_known(rule_id)
        return rule_id not in self._disabled

    def rule_ids(self) -> list[str]:
        return list(self._rules)

    def enabled_count(self) -> int:
        return len(self._rules) - len(self._disabled)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return (self._effective(rule_id) for rule_id in self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules


def build_registry(
    config: ConventionConfig | None = None,
    *,
    rules: Iterable[Rule] | None = None,
) -> RuleRegistry:
    """Register *rules* (the built-in catalogue by default), apply *config*, freeze.

    Raises :class:`RegistryError` subclasses on duplicate ids or when the
    configuration refers to unknown rules.
    """
    registry = RuleRegistry(builtin_rules() if rules is None else rules)
    if config is not None:
        config.apply(registry)
    return registry.freeze()
