"""Facts file loader.

Reads the structured facts a source front-end emitted (YAML or JSON) and
turns them into :mod:`conventionist.facts` objects.  A malformed entry is
reported as an ``internal`` diagnostic and skipped; it never stops the rest
of the file from loading.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import yaml

from conventionist.facts import InvalidFact, SourceLocation, fact_from_mapping
from conventionist.rules import INVALID_FACT_RULE_ID, Diagnostic, Severity

if TYPE_CHECKING:
    from pathlib import Path

    from conventionist.facts import Fact

logger = logging.getLogger(__name__)

_YAML_SUFFIXES: frozenset[str] = frozenset({".yml", ".yaml"})


class FactsFileError(ValueError):
    """Raised when a facts file cannot be read or has the wrong shape."""


@dataclass
class LoadedFacts:
    """Facts read from a file plus diagnostics for rejected entries."""

    facts: list[Fact] = field(default_factory=list)
    errors: list[Diagnostic] = field(default_factory=list)


def _safe_location(entry: object, source: str, index: int) -> SourceLocation:
    if isinstance(entry, dict):
        file_path = entry.get("file", entry.get("file_path"))
        line = entry.get("line")
        if isinstance(file_path, str) and file_path and (line is None or isinstance(line, int)):
            return SourceLocation(file_path=file_path, line=max(int(line or 0), 0))
    return SourceLocation(file_path=source, line=index + 1)


def load_entries(entries: list[Any], *, source: str = "<facts>") -> LoadedFacts:
    """Build facts from decoded *entries*, isolating invalid ones."""
    loaded = LoadedFacts()
    for index, entry in enumerate(entries):
        try:
            loaded.facts.append(fact_from_mapping(entry))
        except InvalidFact as exc:
            location = _safe_location(entry, source, index)
            logger.warning("Skipping invalid fact #%d in %s: %s", index, source, exc)
            loaded.errors.append(
                Diagnostic(
                    rule_id=INVALID_FACT_RULE_ID,
                    severity=Severity.INTERNAL,
                    location=location,
                    message=f"InvalidFact: {exc}",
                    subject=f"#{index}",
                )
            )
    return loaded


def _decode(facts_path: Path) -> object:
    text = facts_path.read_text(encoding="utf-8")
    if facts_path.suffix.lower() in _YAML_SUFFIXES:
        return yaml.safe_load(text)
    return json.loads(text)


def load_facts(facts_path: Path) -> LoadedFacts:
    """Load a facts file.

    The document is either a list of fact mappings or a mapping with a
    ``facts`` list.  ``.yml``/``.yaml`` files are parsed as YAML, anything
    else as JSON.

    Raises :class:`FactsFileError` when the file cannot be read or decoded,
    or the document has the wrong shape.
    """
    try:
        data = _decode(facts_path)
    except OSError as exc:
        msg = f"cannot read facts file {facts_path}: {exc}"
        raise FactsFileError(msg) from exc
    except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        msg = f"facts file {facts_path} is not valid YAML/JSON: {exc}"
        raise FactsFileError(msg) from exc

    if data is None:
        return LoadedFacts()
    if isinstance(data, dict):
        data = data.get("facts", [])
    if not isinstance(data, list):
        msg = f"facts file {facts_path}: expected a list of facts or a mapping with 'facts'"
        raise FactsFileError(msg)

    loaded = load_entries(data, source=str(facts_path))
    logger.debug(
        "Loaded %d facts from %s (%d rejected)", len(loaded.facts), facts_path, len(loaded.errors)
    )
    return loaded
