"""Evaluator: stream facts through the rule registry and collect diagnostics."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from conventionist.joins import build_composites
from conventionist.report import Report
from conventionist.rules import Diagnostic, RuleEvaluationError, Severity

if TYPE_CHECKING:
    import threading
    from collections.abc import Iterable, Sequence

    from conventionist.facts import Fact
    from conventionist.registry import RuleRegistry
    from conventionist.rules import Rule

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 256


class EvaluationCancelled(Exception):
    """Raised when a run is cancelled; no partial report is returned."""


def _internal_diagnostic(rule: Rule, fact: Fact, error: RuleEvaluationError) -> Diagnostic:
    return Diagnostic(
        rule_id=rule.id,
        severity=Severity.INTERNAL,
        location=fact.location,
        message=f"RuleEvaluationError: {error}",
        subject=fact.subject,
    )


def apply_rule(rule: Rule, fact: Fact) -> Diagnostic | None:
    """Apply one rule to one fact.

    Returns ``None`` for compliant facts.  Exceptions raised by the rule are
    converted into an ``internal`` diagnostic.
    """
    try:
        if rule.predicate(fact):
            return None
        message = rule.message(fact)
        fix = rule.fix(fact) if rule.fix is not None else None
    except Exception as exc:  # noqa: BLE001
        error = RuleEvaluationError(rule.id, exc)
        logger.warning("Rule %s failed on %s: %s", rule.id, fact.location, exc)
        return _internal_diagnostic(rule, fact, error)
    return Diagnostic(
        rule_id=rule.id,
        severity=rule.severity,
        location=fact.location,
        message=message,
        suggested_fix=fix,
        subject=fact.subject,
    )


def evaluate_fact(fact: Fact, registry: RuleRegistry) -> list[Diagnostic]:
    """Evaluate every enabled rule for *fact*'s kind."""
    diagnostics: list[Diagnostic] = []
    for rule in registry.rules_for(fact.kind):
        diagnostic = apply_rule(rule, fact)
        if diagnostic is not None:
            diagnostics.append(diagnostic)
    return diagnostics


def _evaluate_batch(batch: Sequence[Fact], registry: RuleRegistry) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for fact in batch:
        diagnostics.extend(evaluate_fact(fact, registry))
    return diagnostics


def _batches(facts: Sequence[Fact], size: int) -> list[Sequence[Fact]]:
    return [facts[start : start + size] for start in range(0, len(facts), size)]


def _check_cancel(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        msg = "evaluation cancelled"
        raise EvaluationCancelled(msg)


def evaluate(
    facts: Iterable[Fact],
    registry: RuleRegistry,
    *,
    jobs: int = 1,
    batch_size: int = DEFAULT_BATCH_SIZE,
    cancel: threading.Event | None = None,
    report: Report | None = None,
) -> Report:
    """Evaluate *facts* against *registry* and return the report.

    Composite facts are joined once the whole fact set is available (a
    failed join becomes an ``internal`` diagnostic), then every fact is
    evaluated independently.  With ``jobs > 1`` batches run on
    a thread pool and their diagnostics are merged as they complete.  The
    *cancel* event is checked between batches; once set, the run raises
    :class:`EvaluationCancelled` and the partial report is dropped.

    *report* seeds the run with diagnostics gathered earlier (e.g. facts the
    loader rejected); it is only returned when the run completes.
    """
    if jobs < 1:
        msg = f"jobs must be at least 1, got {jobs}"
        raise ValueError(msg)
    if batch_size < 1:
        msg = f"batch_size must be at least 1, got {batch_size}"
        raise ValueError(msg)
    if not registry.frozen:
        registry.freeze()

    materialized: list[Fact] = list(facts)
    _check_cancel(cancel)
    join_errors: list[Diagnostic] = []
    materialized.extend(build_composites(materialized, join_errors))

    batches = _batches(materialized, batch_size)
    logger.debug(
        "Evaluating %d facts in %d batches (jobs=%d)", len(materialized), len(batches), jobs
    )
    result = Report(report.sorted() if report is not None else ())
    result.extend(join_errors)

    if jobs == 1 or len(batches) <= 1:
        for batch in batches:
            _check_cancel(cancel)
            result.extend(_evaluate_batch(batch, registry))
    else:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            futures = [pool.submit(_evaluate_batch, batch, registry) for batch in batches]
            try:
                for future in futures:
                    _check_cancel(cancel)
                    result.extend(future.result())
            except EvaluationCancelled:
                for future in futures:
                    future.cancel()
                raise

    return result
