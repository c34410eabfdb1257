"""Configuration overlay: parse conventions.yml into rule enable/severity decisions.

Example::

    version: 1
    disable: [variable.camel-case]
    rules:
      route.name-camel-case: { severity: warning }
      view.camel-case: { enabled: false }
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import yaml

from conventionist.rules import Severity

if TYPE_CHECKING:
    from pathlib import Path

    from conventionist.registry import RuleRegistry

logger = logging.getLogger(__name__)

SUPPORTED_CONFIG_VERSIONS: frozenset[int] = frozenset({1})
DEFAULT_CONFIG_NAME = "conventions.yml"


class ConfigError(ValueError):
    """Raised when conventions.yml is malformed."""


@dataclass(frozen=True)
class RuleOverride:
    """Per-rule overlay: ``None`` fields leave the rule's default untouched."""

    rule_id: str
    enabled: bool | None = None
    severity: Severity | None = None


@dataclass(frozen=True)
class ConventionConfig:
    """Parsed configuration overlay."""

    overrides: tuple[RuleOverride, ...] = field(default_factory=tuple)

    def apply(self, registry: RuleRegistry) -> None:
        """Apply the overlay to a registry that is still being built.

        Raises :class:`~conventionist.registry.UnknownRule` for ids the
        registry does not know.
        """
        for override in self.overrides:
            if override.enabled is True:
                registry.enable(override.rule_id)
            elif override.enabled is False:
                registry.disable(override.rule_id)
            if override.severity is not None:
                registry.override_severity(override.rule_id, override.severity)
        logger.debug("Applied %d rule overrides", len(self.overrides))


# ---------------------------------------------------------------------------
# YAML parsing
# ---------------------------------------------------------------------------


def _parse_rule_entry(rule_id: str, data: object) -> RuleOverride:
    if data is None:
        return RuleOverride(rule_id=rule_id)
    if isinstance(data, bool):
        return RuleOverride(rule_id=rule_id, enabled=data)
    if isinstance(data, str):
        try:
            return RuleOverride(rule_id=rule_id, severity=Severity.parse(data))
        except ValueError as exc:
            msg = f"conventions.yml: rule '{rule_id}': {exc}"
            raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"conventions.yml: rule '{rule_id}' must be a mapping, a boolean or a severity"
        raise ConfigError(msg)

    unknown = set(data) - {"enabled", "severity"}
    if unknown:
        msg = f"conventions.yml: rule '{rule_id}' has unknown keys {sorted(unknown)}"
        raise ConfigError(msg)

    enabled_raw = data.get("enabled")
    if enabled_raw is not None and not isinstance(enabled_raw, bool):
        msg = f"conventions.yml: rule '{rule_id}': 'enabled' must be true or false"
        raise ConfigError(msg)

    severity: Severity | None = None
    severity_raw = data.get("severity")
    if severity_raw is not None:
        try:
            severity = Severity.parse(str(severity_raw))
        except ValueError as exc:
            msg = f"conventions.yml: rule '{rule_id}': {exc}"
            raise ConfigError(msg) from exc

    return RuleOverride(rule_id=rule_id, enabled=enabled_raw, severity=severity)


def parse_config(data: object) -> ConventionConfig:
    """Validate an already-decoded configuration document."""
    if data is None:
        return ConventionConfig()
    if not isinstance(data, dict):
        msg = "conventions.yml must be a YAML mapping"
        raise ConfigError(msg)

    version = data.get("version")
    if version is None:
        msg = "conventions.yml: missing required 'version' field"
        raise ConfigError(msg)
    if version not in SUPPORTED_CONFIG_VERSIONS:
        expected = sorted(SUPPORTED_CONFIG_VERSIONS)
        msg = f"conventions.yml: unsupported version {version}, expected one of {expected}"
        raise ConfigError(msg)

    overrides: list[RuleOverride] = []

    # Shorthand lists come first so explicit per-rule entries win.
    for key, enabled in (("disable", False), ("enable", True)):
        ids_raw = data.get(key, [])
        if not isinstance(ids_raw, list):
            msg = f"conventions.yml: '{key}' must be a list of rule ids"
            raise ConfigError(msg)
        overrides.extend(RuleOverride(rule_id=str(rule_id), enabled=enabled) for rule_id in ids_raw)

    rules_raw = data.get("rules", {})
    if rules_raw is None:
        rules_raw = {}
    if not isinstance(rules_raw, dict):
        msg = "conventions.yml: 'rules' must be a mapping of rule id to settings"
        raise ConfigError(msg)
    for rule_id, entry in rules_raw.items():
        overrides.append(_parse_rule_entry(str(rule_id), entry))

    return ConventionConfig(overrides=tuple(overrides))


def load_config(config_path: Path) -> ConventionConfig:
    """Parse conventions.yml.

    Raises :class:`ConfigError` on unreadable files and schema errors.
    """
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as exc:
        msg = f"conventions.yml: cannot read {config_path}: {exc}"
        raise ConfigError(msg) from exc
    except yaml.YAMLError as exc:
        msg = f"conventions.yml: invalid YAML: {exc}"
        raise ConfigError(msg) from exc
    return parse_config(data)
