"""Linter orchestrator: load config and facts, evaluate, format results."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from conventionist.config import DEFAULT_CONFIG_NAME, ConfigError, load_config
from conventionist.evaluator import evaluate
from conventionist.loader import FactsFileError, load_facts
from conventionist.registry import RegistryError, build_registry
from conventionist.report import Report
from conventionist.rules import Severity

if TYPE_CHECKING:
    import threading
    from pathlib import Path

    from conventionist.rules import Diagnostic

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class LintError(Exception):
    """Raised when lint encounters a configuration or input error."""


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class LintResult:
    """Result of a lint run."""

    report: Report = field(default_factory=Report)
    rules_evaluated: int = 0
    facts_loaded: int = 0
    facts_rejected: int = 0
    elapsed_ms: float = 0.0

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return self.report.sorted()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def resolve_config_path(facts_path: Path, config_path: Path | None) -> Path | None:
    """Explicit *config_path*, else ``conventions.yml`` beside the facts file."""
    if config_path is not None:
        return config_path
    candidate = facts_path.parent / DEFAULT_CONFIG_NAME
    return candidate if candidate.is_file() else None


def lint(
    facts_path: Path,
    *,
    config_path: Path | None = None,
    jobs: int = 1,
    cancel: threading.Event | None = None,
) -> LintResult:
    """Run the lint process: load config and facts, evaluate, return results.

    Parameters
    ----------
    facts_path:
        YAML or JSON file with the facts produced by a source front-end.
    config_path:
        Optional ``conventions.yml`` overlay.  When *None*, a
        ``conventions.yml`` next to the facts file is used if present.
    jobs:
        Number of evaluation worker threads.
    cancel:
        Optional event that aborts the run between batches.

    Returns
    -------
    LintResult
        Report, counts and timing.

    Raises
    ------
    LintError
        When the configuration or the facts file is invalid.
    """
    start = time.monotonic()

    resolved_config = resolve_config_path(facts_path, config_path)
    try:
        config = load_config(resolved_config) if resolved_config is not None else None
        registry = build_registry(config)
    except (ConfigError, RegistryError) as exc:
        msg = f"Invalid conventions configuration: {exc}"
        raise LintError(msg) from exc

    try:
        loaded = load_facts(facts_path)
    except FactsFileError as exc:
        raise LintError(str(exc)) from exc

    report = evaluate(
        loaded.facts,
        registry,
        jobs=jobs,
        cancel=cancel,
        report=Report(loaded.errors),
    )
    elapsed = (time.monotonic() - start) * 1000
    logger.info(
        "Linted %d facts with %d rules: %d diagnostics in %.1fms",
        len(loaded.facts),
        registry.enabled_count(),
        len(report),
        elapsed,
    )

    return LintResult(
        report=report,
        rules_evaluated=registry.enabled_count(),
        facts_loaded=len(loaded.facts),
        facts_rejected=len(loaded.errors),
        elapsed_ms=elapsed,
    )


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------

_SEVERITY_MARKERS: dict[Severity, str] = {
    Severity.INFO: "i",
    Severity.WARNING: "⚠",
    Severity.ERROR: "✗",
    Severity.INTERNAL: "!",
}


def _summary_counts(result: LintResult) -> str:
    counts = result.report.counts()
    parts = [f"{counts[s]} {s.value}" for s in sorted(Severity, reverse=True) if counts[s]]
    return ", ".join(parts)


def format_rich(result: LintResult) -> str:
    """Format a LintResult as human-readable text.

    Example output with violations::

        Rules: 38 enabled
        Facts: 12 loaded, 0 rejected

        ✗ [error] controller.singular-suffix
          app/Http/Controllers/ArticlesController.php:7
          Controller 'ArticlesController' must be named with a singular noun ...
          fix: ArticleController

        1 diagnostics (1 error) (38 rules evaluated, 0.0s)
    """
    lines: list[str] = []

    lines.append(f"Rules: {result.rules_evaluated} enabled")
    lines.append(f"Facts: {result.facts_loaded} loaded, {result.facts_rejected} rejected")
    lines.append("")

    elapsed_str = f"{result.elapsed_ms / 1000:.1f}s"
    diagnostics = result.diagnostics

    if diagnostics:
        for d in diagnostics:
            marker = _SEVERITY_MARKERS[d.severity]
            lines.append(f"{marker} [{d.severity.value}] {d.rule_id}")
            location = str(d.location)
            if location:
                lines.append(f"  {location}")
            lines.append(f"  {d.message}")
            if d.suggested_fix is not None:
                lines.append(f"  fix: {d.suggested_fix}")
            lines.append("")

        lines.append(
            f"{len(diagnostics)} diagnostics ({_summary_counts(result)}) "
            f"({result.rules_evaluated} rules evaluated, {elapsed_str})"
        )
    else:
        lines.append(
            f"✓ No violations found ({result.rules_evaluated} rules evaluated, {elapsed_str})"
        )

    return "\n".join(lines)


def format_json(result: LintResult) -> str:
    """Format a LintResult as structured JSON.

    ``fixes`` holds one resolved rewrite per identifier, see
    :meth:`Report.resolved_fixes`.
    """
    counts = result.report.counts()
    output: dict[str, object] = {
        "diagnostics": [d.to_dict() for d in result.diagnostics],
        "fixes": [
            {
                "file_path": d.location.file_path,
                "line": d.location.line,
                "subject": d.subject,
                "rule_id": d.rule_id,
                "suggested_fix": d.suggested_fix,
            }
            for d in result.report.resolved_fixes().values()
        ],
        "summary": {
            "rules_evaluated": result.rules_evaluated,
            "facts_loaded": result.facts_loaded,
            "facts_rejected": result.facts_rejected,
            "diagnostics_count": len(result.diagnostics),
            "by_severity": {s.value: counts[s] for s in Severity},
            "has_errors": result.report.has_errors(),
            "elapsed_ms": result.elapsed_ms,
        },
    }
    return json.dumps(output, indent=2)


def format_porcelain(result: LintResult) -> str:
    """Format a LintResult as one line per diagnostic.

    Format: ``severity:rule_id:file_path:line:subject``.  A missing line is an
    empty field; the subject comes last and may itself contain colons.  Returns
    an empty string when there are no diagnostics.
    """
    lines: list[str] = []
    for d in result.diagnostics:
        line = str(d.location.line) if d.location.line else ""
        lines.append(f"{d.severity.value}:{d.rule_id}:{d.location.file_path}:{line}:{d.subject}")
    return "\n".join(lines)
