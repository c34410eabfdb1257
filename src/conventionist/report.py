"""Diagnostic report: the ordered outcome of one analysis run."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from conventionist.rules import Diagnostic, Severity

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class Report:
    """Collection of diagnostics for a single run.

    Insertion is lock-guarded so evaluation workers may add concurrently.
    Reading always goes through :meth:`sorted`, which de-duplicates and orders
    diagnostics by ``(file_path, line, rule_id)`` with the message and fix as
    further tie-breaks, so output is independent of insertion order.
    """

    def __init__(self, diagnostics: Iterable[Diagnostic] = ()) -> None:
        self._lock = threading.Lock()
        self._diagnostics: list[Diagnostic] = list(diagnostics)

    def add(self, diagnostic: Diagnostic) -> None:
        with self._lock:
            self._diagnostics.append(diagnostic)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        items = list(diagnostics)
        with self._lock:
            self._diagnostics.extend(items)

    def sorted(self) -> tuple[Diagnostic, ...]:
        with self._lock:
            unique = set(self._diagnostics)
        return tuple(sorted(unique, key=lambda d: d.sort_key))

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.sorted())

    def __len__(self) -> int:
        return len(self.sorted())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Report):
            return NotImplemented
        return self.sorted() == other.sorted()

    __hash__ = None  # type: ignore[assignment]

    # -- severity -----------------------------------------------------------

    def max_severity(self) -> Severity | None:
        diagnostics = self.sorted()
        if not diagnostics:
            return None
        return max(d.severity for d in diagnostics)

    def has_errors(self) -> bool:
        """True when any diagnostic is ``error`` or worse."""
        worst = self.max_severity()
        return worst is not None and worst >= Severity.ERROR

    def has_at_least(self, severity: Severity) -> bool:
        worst = self.max_severity()
        return worst is not None and worst >= severity

    def counts(self) -> dict[Severity, int]:
        totals = {severity: 0 for severity in Severity}
        for diagnostic in self.sorted():
            totals[diagnostic.severity] += 1
        return totals

    def for_rule(self, rule_id: str) -> list[Diagnostic]:
        return [d for d in self.sorted() if d.rule_id == rule_id]

    # -- fixes --------------------------------------------------------------

    def resolved_fixes(self) -> dict[tuple[str, int, str], Diagnostic]:
        """Pick one suggested fix per ``(file_path, line, subject)``.

        Several rules can propose different rewrites of the same identifier
        (casing versus pluralization, say).  The winner is the diagnostic
        with the highest severity; ties go to the lexically smallest rule
        id.  Diagnostics without a suggested fix never win.  The winning
        rewrite is not combined with the others: ``/open_source`` resolves to
        ``/open-source``, which still breaks ``route.leading-slash``.
        """
        chosen: dict[tuple[str, int, str], Diagnostic] = {}
        for diagnostic in self.sorted():
            if diagnostic.suggested_fix is None:
                continue
            key = (diagnostic.location.file_path, diagnostic.location.line, diagnostic.subject)
            current = chosen.get(key)
            if current is None or diagnostic.severity > current.severity:
                chosen[key] = diagnostic
        return chosen
