"""Rule and diagnostic types."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from conventionist.facts import FactKind, SourceLocation

# Rule id used for diagnostics about facts that could not be constructed.
INVALID_FACT_RULE_ID = "invalid-fact"


class Severity(enum.Enum):
    """Ordinal diagnostic severity: ``info < warning < error < internal``."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    INTERNAL = "internal"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANKS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: str | Severity) -> Severity:
        """Parse a severity name; ``warn`` is accepted for ``warning``."""
        if isinstance(value, Severity):
            return value
        name = str(value).strip().lower()
        if name == "warn":
            name = "warning"
        try:
            return cls(name)
        except ValueError:
            valid = [s.value for s in cls]
            msg = f"invalid severity '{value}', must be one of {valid}"
            raise ValueError(msg) from None


_SEVERITY_RANKS: dict[Severity, int] = {
    Severity.INFO: 0,
    Severity.WARNING: 1,
    Severity.ERROR: 2,
    Severity.INTERNAL: 3,
}


class RuleEvaluationError(Exception):
    """A rule raised while evaluating a fact.

    Never propagates out of the evaluator: it is converted into an
    ``internal`` diagnostic for the offending fact.
    """

    def __init__(self, rule_id: str, cause: BaseException) -> None:
        self.rule_id = rule_id
        self.cause = cause
        super().__init__(f"rule '{rule_id}' failed: {type(cause).__name__}: {cause}")


@dataclass(frozen=True)
class Rule:
    """A single convention check over one fact kind.

    ``predicate`` returns True when the fact complies.  ``message`` and the
    optional ``fix`` are only called for violating facts.  All three must be
    pure functions of the fact.
    """

    id: str
    applies_to: FactKind
    severity: Severity
    description: str
    predicate: Callable[[Any], bool]
    message: Callable[[Any], str]
    fix: Callable[[Any], str | None] | None = None


@dataclass(frozen=True)
class Diagnostic:
    """A single reported violation."""

    rule_id: str
    severity: Severity
    location: SourceLocation
    message: str
    suggested_fix: str | None = None
    subject: str = ""

    @property
    def sort_key(self) -> tuple[str, int, str, str, str, str]:
        return (
            self.location.file_path,
            self.location.line,
            self.rule_id,
            self.message,
            self.suggested_fix or "",
            self.subject,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "rule_id": self.rule_id,
            "severity": self.severity.value,
            "file_path": self.location.file_path,
            "line": self.location.line,
            "subject": self.subject,
            "message": self.message,
            "suggested_fix": self.suggested_fix,
        }
