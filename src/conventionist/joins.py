"""Pre-aggregation pass: join related facts into composite facts.

Pivot-table and foreign-key checks need two facts at once.  Rather than let
those rules look things up in a shared index, this pass runs once all facts
of a project are available and emits self-contained composite facts.

A join that cannot produce a valid composite is reported as an ``internal``
diagnostic at the contributing fact's location; the other composites are
still built.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from conventionist.facts import (
    ColumnDecl,
    ForeignKeyFact,
    InvalidFact,
    MethodDecl,
    PivotTableFact,
    TableDecl,
)
from conventionist.naming import singular_identifier, to_pascal
from conventionist.rules import INVALID_FACT_RULE_ID, Diagnostic, Severity

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from conventionist.facts import Fact

logger = logging.getLogger(__name__)

_MANY_TO_MANY: frozenset[str] = frozenset({"belongsToMany", "morphToMany"})


def _model_for_table(table: str, table_models: dict[str, str]) -> str:
    """Model mapped to *table*, falling back to the singular StudlyCase name."""
    return table_models.get(table) or to_pascal(singular_identifier(table))


def _join_error(fact: Fact, exc: Exception) -> Diagnostic:
    logger.warning("Cannot join %s at %s: %s", fact.kind.value, fact.location, exc)
    return Diagnostic(
        rule_id=INVALID_FACT_RULE_ID,
        severity=Severity.INTERNAL,
        location=fact.location,
        message=f"InvalidFact: {exc}",
        subject=fact.subject,
    )


def pivot_facts(
    facts: Iterable[Fact], errors: list[Diagnostic] | None = None
) -> list[PivotTableFact]:
    """Pivot table composites from pivot ``TableDecl``s and many-to-many relations.

    A pair of models and a table name produce one composite no matter how
    many facts mention them; the earliest location among them is reported, so
    the result does not depend on input order.  Failed joins are appended to
    *errors* when given.
    """
    seen: dict[tuple[str, frozenset[str]], PivotTableFact] = {}
    for fact in facts:
        if isinstance(fact, TableDecl) and fact.pivot_models is not None:
            first, second = fact.pivot_models
            table = fact.name
        elif (
            isinstance(fact, MethodDecl)
            and fact.relation in _MANY_TO_MANY
            and fact.owner
            and fact.related_model
            and fact.pivot_table
        ):
            first, second = fact.owner, fact.related_model
            table = fact.pivot_table
        else:
            continue
        key = (table, frozenset({first, second}))
        current = seen.get(key)
        if current is not None and not fact.location < current.location:
            continue
        ordered = sorted((first, second))
        try:
            seen[key] = PivotTableFact(
                table=table,
                first_model=ordered[0],
                second_model=ordered[1],
                location=fact.location,
            )
        except InvalidFact as exc:
            if errors is not None:
                errors.append(_join_error(fact, exc))
    return list(seen.values())


def foreign_key_facts(
    facts: Sequence[Fact], errors: list[Diagnostic] | None = None
) -> list[ForeignKeyFact]:
    """Foreign key composites for every column that references another table."""
    table_models: dict[str, str] = {}
    for fact in facts:
        if isinstance(fact, TableDecl) and fact.model:
            known = table_models.get(fact.name)
            table_models[fact.name] = fact.model if known is None else min(known, fact.model)

    composites: list[ForeignKeyFact] = []
    for fact in facts:
        if not isinstance(fact, ColumnDecl) or not fact.references:
            continue
        try:
            composites.append(
                ForeignKeyFact(
                    table=fact.table,
                    column=fact.name,
                    referenced_model=_model_for_table(fact.references, table_models),
                    location=fact.location,
                )
            )
        except InvalidFact as exc:
            if errors is not None:
                errors.append(_join_error(fact, exc))
    return composites


def build_composites(
    facts: Sequence[Fact], errors: list[Diagnostic] | None = None
) -> list[Fact]:
    """Return the composite facts for a complete project fact set."""
    pivots = pivot_facts(facts, errors)
    foreign_keys = foreign_key_facts(facts, errors)
    logger.debug("Joined %d pivot and %d foreign key composites", len(pivots), len(foreign_keys))
    return [*pivots, *foreign_keys]
