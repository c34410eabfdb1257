"""Shared test fixtures for Conventionist."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from conventionist.registry import RuleRegistry, build_registry

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture()
def registry() -> RuleRegistry:
    """Frozen registry holding the full built-in catalogue."""
    return build_registry()


@pytest.fixture()
def tmp_project(tmp_path: Path) -> Path:
    """Create a project directory with a facts file that has no violations."""
    project = tmp_path / "proj"
    project.mkdir()
    (project / "facts.yml").write_text(
        "facts:\n"
        "  - kind: class\n"
        "    name: ArticleController\n"
        "    type: controller\n"
        "    file: app/Http/Controllers/ArticleController.php\n"
        "    line: 7\n"
        "  - kind: route\n"
        "    path: articles/{article}\n"
        "    verb: GET\n"
        "    name: articles.show\n"
        "    file: routes/web.php\n"
        "    line: 3\n"
        "  - kind: migration\n"
        "    name: 2017_01_01_000000_create_articles_table\n"
        "    file: database/migrations/2017_01_01_000000_create_articles_table.php\n"
    )
    return project
