"""Tests for conventionist.linter: the lint orchestrator and its formatters."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from conventionist.catalogue import BUILTIN_RULES
from conventionist.facts import SourceLocation
from conventionist.linter import (
    LintError,
    LintResult,
    format_json,
    format_porcelain,
    format_rich,
    lint,
    resolve_config_path,
)
from conventionist.report import Report
from conventionist.rules import Diagnostic, Severity

if TYPE_CHECKING:
    from pathlib import Path


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def lint_project(tmp_path: Path) -> Path:
    """Create a facts file with one violation of each severity plus a bad entry.

    - ArticlesController (error, controller.singular-suffix)
    - /articles route (warning, route.leading-slash)
    - $activeUser holding a collection (info, variable.collection-plural)
    - a route without a verb (rejected as invalid-fact)
    """
    facts = tmp_path / "facts.yml"
    facts.write_text(
        "facts:\n"
        "  - kind: class\n"
        "    name: ArticlesController\n"
        "    type: controller\n"
        "    file: app/Http/Controllers/ArticlesController.php\n"
        "    line: 7\n"
        "  - kind: route\n"
        "    path: /articles\n"
        "    verb: GET\n"
        "    file: routes/web.php\n"
        "    line: 3\n"
        "  - kind: variable\n"
        "    name: $activeUser\n"
        "    holds_collection: true\n"
        "    file: app/Http/Controllers/ArticleController.php\n"
        "    line: 21\n"
        "  - kind: route\n"
        "    path: broken\n"
    )
    return tmp_path


def _result(*diagnostics: Diagnostic) -> LintResult:
    return LintResult(report=Report(diagnostics), rules_evaluated=38, facts_loaded=len(diagnostics))


# ---------------------------------------------------------------------------
# lint()
# ---------------------------------------------------------------------------


class TestLint:
    def test_clean_project(self, tmp_project: Path) -> None:
        result = lint(tmp_project / "facts.yml")
        assert result.diagnostics == ()
        assert result.facts_loaded == 3
        assert result.facts_rejected == 0
        assert result.rules_evaluated == len(BUILTIN_RULES)
        assert result.elapsed_ms >= 0

    def test_violations(self, lint_project: Path) -> None:
        result = lint(lint_project / "facts.yml")
        # The rejected entry has no file of its own and is reported against
        # the (absolute) facts file path.
        assert [d.rule_id for d in result.diagnostics] == [
            "invalid-fact",
            "variable.collection-plural",
            "controller.singular-suffix",
            "route.leading-slash",
        ]
        assert result.diagnostics[0].location == SourceLocation(
            str(lint_project / "facts.yml"), 4
        )
        assert result.facts_loaded == 3
        assert result.facts_rejected == 1
        assert result.report.has_errors()

    def test_config_next_to_facts_applied(self, lint_project: Path) -> None:
        (lint_project / "conventions.yml").write_text(
            "version: 1\n"
            "disable: [controller.singular-suffix]\n"
            "rules:\n"
            "  route.leading-slash: error\n"
        )
        result = lint(lint_project / "facts.yml")
        ids = [d.rule_id for d in result.diagnostics]
        assert "controller.singular-suffix" not in ids
        assert result.report.for_rule("route.leading-slash")[0].severity is Severity.ERROR
        assert result.rules_evaluated == len(BUILTIN_RULES) - 1

    def test_explicit_config(self, lint_project: Path, tmp_path: Path) -> None:
        config = tmp_path / "strict.yml"
        config.write_text("version: 1\ndisable: [route.leading-slash]\n")
        result = lint(lint_project / "facts.yml", config_path=config)
        assert not result.report.for_rule("route.leading-slash")

    def test_invalid_config(self, lint_project: Path) -> None:
        (lint_project / "conventions.yml").write_text("rules: {}\n")
        with pytest.raises(LintError, match="Invalid conventions configuration"):
            lint(lint_project / "facts.yml")

    def test_unknown_rule_in_config(self, lint_project: Path) -> None:
        (lint_project / "conventions.yml").write_text("version: 1\ndisable: [no.such-rule]\n")
        with pytest.raises(LintError, match="unknown rule id 'no.such-rule'"):
            lint(lint_project / "facts.yml")

    def test_invalid_facts_file(self, tmp_path: Path) -> None:
        facts = tmp_path / "facts.json"
        facts.write_text("{broken")
        with pytest.raises(LintError, match="not valid YAML/JSON"):
            lint(facts)

    def test_parallel_jobs(self, lint_project: Path) -> None:
        sequential = lint(lint_project / "facts.yml")
        parallel = lint(lint_project / "facts.yml", jobs=4)
        assert parallel.diagnostics == sequential.diagnostics


class TestResolveConfigPath:
    def test_explicit_wins(self, tmp_path: Path) -> None:
        explicit = tmp_path / "other.yml"
        assert resolve_config_path(tmp_path / "facts.yml", explicit) == explicit

    def test_sibling_used(self, tmp_path: Path) -> None:
        (tmp_path / "conventions.yml").write_text("version: 1\n")
        assert resolve_config_path(tmp_path / "facts.yml", None) == tmp_path / "conventions.yml"

    def test_none_when_absent(self, tmp_path: Path) -> None:
        assert resolve_config_path(tmp_path / "facts.yml", None) is None


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------

_ERROR = Diagnostic(
    rule_id="controller.singular-suffix",
    severity=Severity.ERROR,
    location=SourceLocation("app/Http/Controllers/ArticlesController.php", 7),
    message="Controller 'ArticlesController' must be named with a singular noun",
    suggested_fix="ArticleController",
    subject="ArticlesController",
)
_WARNING = Diagnostic(
    rule_id="route.leading-slash",
    severity=Severity.WARNING,
    location=SourceLocation("routes/web.php", 3),
    message="Route '/articles' must not start with '/' unless it is the root",
    suggested_fix="articles",
    subject="/articles",
)
_NO_LINE = Diagnostic(
    rule_id="method.resource-verb",
    severity=Severity.ERROR,
    location=SourceLocation("app/Http/Controllers/ArticleController.php"),
    message="Resource action 'store' must be routed with POST, got GET",
    subject="store",
)


class TestFormatRich:
    def test_no_violations(self) -> None:
        output = format_rich(_result())
        assert "Rules: 38 enabled" in output
        assert "No violations found" in output

    def test_violations(self) -> None:
        output = format_rich(_result(_ERROR, _WARNING))
        assert "[error] controller.singular-suffix" in output
        assert "app/Http/Controllers/ArticlesController.php:7" in output
        assert "fix: ArticleController" in output
        assert "[warning] route.leading-slash" in output
        assert "2 diagnostics (1 error, 1 warning)" in output

    def test_error_listed_before_later_file(self) -> None:
        output = format_rich(_result(_WARNING, _ERROR))
        assert output.index("controller.singular-suffix") < output.index("route.leading-slash")


class TestFormatJson:
    def test_structure(self) -> None:
        data = json.loads(format_json(_result(_ERROR, _WARNING)))
        assert data["diagnostics"][0] == {
            "rule_id": "controller.singular-suffix",
            "severity": "error",
            "file_path": "app/Http/Controllers/ArticlesController.php",
            "line": 7,
            "subject": "ArticlesController",
            "message": "Controller 'ArticlesController' must be named with a singular noun",
            "suggested_fix": "ArticleController",
        }
        summary = data["summary"]
        assert summary["diagnostics_count"] == 2
        assert summary["by_severity"] == {"info": 0, "warning": 1, "error": 1, "internal": 0}
        assert summary["has_errors"] is True
        assert summary["rules_evaluated"] == 38

    def test_resolved_fixes(self) -> None:
        kebab = Diagnostic(
            rule_id="route.kebab-case",
            severity=Severity.ERROR,
            location=SourceLocation("routes/web.php", 9),
            message="Route '/open_source' must use kebab-case segments",
            suggested_fix="/open-source",
            subject="/open_source",
        )
        slash = Diagnostic(
            rule_id="route.leading-slash",
            severity=Severity.WARNING,
            location=SourceLocation("routes/web.php", 9),
            message="Route '/open_source' must not start with '/' unless it is the root",
            suggested_fix="open_source",
            subject="/open_source",
        )
        data = json.loads(format_json(_result(slash, kebab, _NO_LINE)))
        assert data["fixes"] == [
            {
                "file_path": "routes/web.php",
                "line": 9,
                "subject": "/open_source",
                "rule_id": "route.kebab-case",
                "suggested_fix": "/open-source",
            }
        ]

    def test_empty(self) -> None:
        data = json.loads(format_json(_result()))
        assert data["fixes"] == []
        assert data["diagnostics"] == []
        assert data["summary"]["has_errors"] is False


class TestFormatPorcelain:
    def test_lines(self) -> None:
        output = format_porcelain(_result(_ERROR, _WARNING, _NO_LINE))
        assert output.splitlines() == [
            "error:method.resource-verb:app/Http/Controllers/ArticleController.php::store",
            "error:controller.singular-suffix:app/Http/Controllers/ArticlesController.php:7:"
            "ArticlesController",
            "warning:route.leading-slash:routes/web.php:3:/articles",
        ]

    def test_empty(self) -> None:
        assert format_porcelain(_result()) == ""
