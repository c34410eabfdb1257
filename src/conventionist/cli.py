"""Conventionist CLI entry point."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from conventionist import __version__
from conventionist.rules import Severity

# Exit codes
EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_CONFIG_ERROR = 2


@click.group()
@click.version_option(version=__version__, prog_name="conventionist")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """Conventionist - naming convention compliance engine."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@main.command("lint")
@click.argument(
    "facts",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Convention overlay (default: conventions.yml next to FACTS, if any).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["rich", "json", "porcelain"]),
    default="rich",
    show_default=True,
    help="Output format.",
)
@click.option("--jobs", "-j", default=1, type=click.IntRange(min=1), help="Worker threads.")
@click.option(
    "--fail-on-warn",
    is_flag=True,
    default=False,
    help="Exit with code 1 on warnings as well as errors.",
)
def lint_cmd(
    *,
    facts: Path,
    config_path: Path | None,
    output_format: str,
    jobs: int,
    fail_on_warn: bool,
) -> None:
    """Check FACTS (YAML or JSON) against the naming conventions.

    Exit code 0 = clean, 1 = errors found (or warnings with --fail-on-warn),
    2 = invalid configuration or facts file.
    """
    from conventionist.linter import (
        LintError,
        format_json,
        format_porcelain,
        format_rich,
        lint,
    )

    try:
        result = lint(facts, config_path=config_path, jobs=jobs)
    except LintError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    if output_format == "json":
        click.echo(format_json(result))
    elif output_format == "porcelain":
        output = format_porcelain(result)
        if output:
            click.echo(output)
    else:
        click.echo(format_rich(result))

    threshold = Severity.WARNING if fail_on_warn else Severity.ERROR
    if result.report.has_at_least(threshold):
        sys.exit(EXIT_VIOLATIONS)


@main.command("rules")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Convention overlay to apply before listing.",
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
def rules_cmd(*, config_path: Path | None, output_json: bool) -> None:
    """List the rule catalogue with kind, severity and enabled state."""
    from conventionist.config import ConfigError, load_config
    from conventionist.registry import RegistryError, build_registry

    try:
        config = load_config(config_path) if config_path is not None else None
        registry = build_registry(config)
    except (ConfigError, RegistryError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    rows = [
        {
            "id": rule.id,
            "kind": rule.applies_to.value,
            "severity": rule.severity.value,
            "enabled": registry.is_enabled(rule.id),
            "description": rule.description,
        }
        for rule in registry
    ]

    if output_json:
        click.echo(json.dumps(rows, ensure_ascii=False, indent=2))
        return

    from rich.console import Console
    from rich.table import Table

    table = Table(title=f"Conventionist rules ({registry.enabled_count()}/{len(registry)} enabled)")
    table.add_column("Rule", style="bold")
    table.add_column("Kind")
    table.add_column("Severity")
    table.add_column("Enabled")
    table.add_column("Description")
    for row in rows:
        enabled = "[green]yes[/green]" if row["enabled"] else "[dim]no[/dim]"
        table.add_row(
            str(row["id"]),
            str(row["kind"]),
            str(row["severity"]),
            enabled,
            str(row["description"]),
        )

    console = Console(width=160)
    console.print(table)
