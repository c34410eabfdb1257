"""Fact model: immutable, validated observations about a codebase's structure.

Facts are produced by an external front-end (or :mod:`conventionist.loader`)
and by the join pass in :mod:`conventionist.joins`.  Every fact carries a
:class:`SourceLocation` and a :class:`FactKind` tag that the rule registry
dispatches on.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Any

from conventionist.naming import CASING_STYLES, detect_casing

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CLASS_KINDS: frozenset[str] = frozenset(
    {
        "command",
        "contract",
        "controller",
        "enum",
        "model",
        "other",
        "request",
        "seeder",
        "test",
        "trait",
    }
)
HTTP_VERBS: frozenset[str] = frozenset(
    {"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "ANY"}
)
RELATION_TYPES: frozenset[str] = frozenset(
    {
        "belongsTo",
        "belongsToMany",
        "hasMany",
        "hasManyThrough",
        "hasOne",
        "hasOneThrough",
        "morphMany",
        "morphOne",
        "morphTo",
        "morphToMany",
    }
)

_ROUTE_PARAM_RE = re.compile(r"\{([^}?]+)\??\}")


class InvalidFact(ValueError):
    """Raised when a fact cannot be constructed from malformed input."""


class FactKind(enum.Enum):
    """Tag of a fact variant; rules are registered per kind."""

    CLASS = "class"
    METHOD = "method"
    ROUTE = "route"
    CONFIG = "config"
    MIGRATION = "migration"
    VIEW = "view"
    TABLE = "table"
    COLUMN = "column"
    COMMAND = "command"
    VALIDATION_RULE = "validation_rule"
    VARIABLE = "variable"
    PIVOT_TABLE = "pivot_table"
    FOREIGN_KEY = "foreign_key"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, order=True)
class SourceLocation:
    """Where a fact was observed."""

    file_path: str = ""
    line: int = 0

    def __post_init__(self) -> None:
        if self.line < 0:
            msg = f"line must be non-negative, got {self.line}"
            raise InvalidFact(msg)

    def __str__(self) -> str:
        if self.line:
            return f"{self.file_path}:{self.line}"
        return self.file_path


def _require_text(value: object, field_name: str, kind: FactKind) -> None:
    if not isinstance(value, str) or not value.strip():
        msg = f"{kind.value}: '{field_name}' must be a non-empty string"
        raise InvalidFact(msg)


def _optional_text(value: object, field_name: str, kind: FactKind) -> None:
    if value is not None:
        _require_text(value, field_name, kind)


def _require_choice(
    value: object, field_name: str, choices: frozenset[str], kind: FactKind
) -> None:
    if not isinstance(value, str) or value not in choices:
        msg = f"{kind.value}: invalid {field_name} {value!r}, must be one of {sorted(choices)}"
        raise InvalidFact(msg)


def _text_tuple(values: object, field_name: str, kind: FactKind) -> tuple[str, ...]:
    """Coerce a list-like of names to a tuple, rejecting scalars and mappings."""
    if not isinstance(values, (list, tuple, set, frozenset)):
        msg = f"{kind.value}: '{field_name}' must be a list, got {type(values).__name__}"
        raise InvalidFact(msg)
    for value in values:
        _require_text(value, field_name, kind)
    return tuple(values)


@dataclass(frozen=True)
class ClassDecl:
    """A class declaration.

    ``file_casing`` is the casing style of the declaring file's stem.  A raw
    stem (``ArticleController``) is accepted and normalized to its style.
    """

    name: str
    class_kind: str = "other"
    file_casing: str = "pascal"
    location: SourceLocation = field(default_factory=SourceLocation)

    kind = FactKind.CLASS

    def __post_init__(self) -> None:
        _require_text(self.name, "name", self.kind)
        _require_choice(self.class_kind, "class_kind", CLASS_KINDS, self.kind)
        _require_text(self.file_casing, "file_casing", self.kind)
        if self.file_casing not in CASING_STYLES:
            object.__setattr__(self, "file_casing", detect_casing(self.file_casing))

    @property
    def subject(self) -> str:
        return self.name


@dataclass(frozen=True)
class MethodDecl:
    """A method declared on a class.

    ``verb_set`` holds the HTTP verbs routed to the method (controllers only).
    ``relation`` is the relationship type for model relationship methods.
    """

    name: str
    owner_kind: str = "other"
    verb_set: frozenset[str] = frozenset()
    owner: str = ""
    relation: str | None = None
    related_model: str | None = None
    pivot_table: str | None = None
    location: SourceLocation = field(default_factory=SourceLocation)

    kind = FactKind.METHOD

    def __post_init__(self) -> None:
        _require_text(self.name, "name", self.kind)
        _require_choice(self.owner_kind, "owner_kind", CLASS_KINDS, self.kind)
        verbs = frozenset(v.upper() for v in _text_tuple(self.verb_set, "verb_set", self.kind))
        unknown = verbs - HTTP_VERBS
        if unknown:
            msg = f"method: unknown HTTP verbs {sorted(unknown)}"
            raise InvalidFact(msg)
        object.__setattr__(self, "verb_set", verbs)
        if self.relation is not None:
            _require_choice(self.relation, "relation", RELATION_TYPES, self.kind)
        if not isinstance(self.owner, str):
            msg = "method: 'owner' must be a string"
            raise InvalidFact(msg)
        _optional_text(self.related_model, "related_model", self.kind)
        _optional_text(self.pivot_table, "pivot_table", self.kind)

    @property
    def subject(self) -> str:
        return self.name


@dataclass(frozen=True)
class RouteDecl:
    """A route definition.  ``name`` is empty for unnamed routes."""

    path: str
    http_verb: str
    name: str = ""
    param_names: tuple[str, ...] | None = None
    location: SourceLocation = field(default_factory=SourceLocation)

    kind = FactKind.ROUTE

    def __post_init__(self) -> None:
        if not isinstance(self.path, str) or not self.path:
            msg = "route: 'path' must be a non-empty string"
            raise InvalidFact(msg)
        if not isinstance(self.http_verb, str) or not self.http_verb.strip():
            msg = f"route '{self.path}': 'http_verb' must not be empty"
            raise InvalidFact(msg)
        verb = self.http_verb.strip().upper()
        if verb not in HTTP_VERBS:
            msg = f"route '{self.path}': unknown http_verb '{self.http_verb}'"
            raise InvalidFact(msg)
        object.__setattr__(self, "http_verb", verb)
        if not isinstance(self.name, str):
            msg = f"route '{self.path}': 'name' must be a string"
            raise InvalidFact(msg)
        if self.param_names is None:
            object.__setattr__(self, "param_names", tuple(_ROUTE_PARAM_RE.findall(self.path)))
        else:
            params = _text_tuple(self.param_names, "param_names", self.kind)
            object.__setattr__(self, "param_names", params)

    @property
    def subject(self) -> str:
        return self.path

    @property
    def segments(self) -> tuple[str, ...]:
        return tuple(s for s in self.path.split("/") if s)


@dataclass(frozen=True)
class ConfigEntry:
    """A key inside a configuration file (``key`` may be dot-separated)."""

    file: str
    key: str
    location: SourceLocation = field(default_factory=SourceLocation)

    kind = FactKind.CONFIG

    def __post_init__(self) -> None:
        _require_text(self.file, "file", self.kind)
        _require_text(self.key, "key", self.kind)

    @property
    def subject(self) -> str:
        return self.key


@dataclass(frozen=True)
class MigrationFile:
    """A migration file name (without extension) and its expected timestamp."""

    name: str
    timestamp: str | None = None
    location: SourceLocation = field(default_factory=SourceLocation)

    kind = FactKind.MIGRATION

    def __post_init__(self) -> None:
        _require_text(self.name, "name", self.kind)
        # YAML reads an unquoted 2023_05_01_000000 as an integer.
        if self.timestamp is not None and not isinstance(self.timestamp, str):
            msg = f"migration '{self.name}': 'timestamp' must be a (quoted) string"
            raise InvalidFact(msg)
        if self.name.endswith(".php"):
            object.__setattr__(self, "name", self.name[: -len(".php")])

    @property
    def subject(self) -> str:
        return self.name


@dataclass(frozen=True)
class ViewFile:
    """A view template path, e.g. ``articles/showFiltered.blade.php``."""

    path: str
    location: SourceLocation = field(default_factory=SourceLocation)

    kind = FactKind.VIEW

    def __post_init__(self) -> None:
        _require_text(self.path, "path", self.kind)

    @property
    def subject(self) -> str:
        return self.path

    @property
    def stem(self) -> str:
        """File name without directories and template extensions."""
        base = self.path.replace("\\", "/").rsplit("/", 1)[-1]
        return base.split(".", 1)[0]


@dataclass(frozen=True)
class TableDecl:
    """A database table, optionally mapped to its model class.

    Pivot tables list the two models they join in ``pivot_models``.
    """

    name: str
    model: str | None = None
    pivot_models: tuple[str, ...] | None = None
    location: SourceLocation = field(default_factory=SourceLocation)

    kind = FactKind.TABLE

    def __post_init__(self) -> None:
        _require_text(self.name, "name", self.kind)
        _optional_text(self.model, "model", self.kind)
        if self.pivot_models is not None:
            models = _text_tuple(self.pivot_models, "pivot_models", self.kind)
            if len(models) != 2:
                msg = f"table '{self.name}': pivot_models must name exactly two models"
                raise InvalidFact(msg)
            object.__setattr__(self, "pivot_models", models)

    @property
    def subject(self) -> str:
        return self.name


@dataclass(frozen=True)
class ColumnDecl:
    """A table column.  ``references`` names the table a foreign key points to."""

    table: str
    name: str
    model: str | None = None
    references: str | None = None
    is_primary: bool = False
    location: SourceLocation = field(default_factory=SourceLocation)

    kind = FactKind.COLUMN

    def __post_init__(self) -> None:
        _require_text(self.table, "table", self.kind)
        _require_text(self.name, "name", self.kind)
        _optional_text(self.model, "model", self.kind)
        _optional_text(self.references, "references", self.kind)

    @property
    def subject(self) -> str:
        return self.name


@dataclass(frozen=True)
class CommandDecl:
    """A console command signature such as ``mail:send-digest``."""

    signature: str
    location: SourceLocation = field(default_factory=SourceLocation)

    kind = FactKind.COMMAND

    def __post_init__(self) -> None:
        _require_text(self.signature, "signature", self.kind)
        # Drop arguments/options: "mail:send {user} {--queue}" -> "mail:send"
        object.__setattr__(self, "signature", self.signature.split()[0])

    @property
    def subject(self) -> str:
        return self.signature


@dataclass(frozen=True)
class ValidationRuleDecl:
    name: str
    location: SourceLocation = field(default_factory=SourceLocation)

    kind = FactKind.VALIDATION_RULE

    def __post_init__(self) -> None:
        _require_text(self.name, "name", self.kind)

    @property
    def subject(self) -> str:
        return self.name


@dataclass(frozen=True)
class VariableDecl:
    name: str
    holds_collection: bool | None = None
    location: SourceLocation = field(default_factory=SourceLocation)

    kind = FactKind.VARIABLE

    def __post_init__(self) -> None:
        _require_text(self.name, "name", self.kind)
        if self.name.startswith("$"):
            object.__setattr__(self, "name", self.name[1:])
            _require_text(self.name, "name", self.kind)

    @property
    def subject(self) -> str:
        return self.name


# ---------------------------------------------------------------------------
# Composite facts (built by conventionist.joins only)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PivotTableFact:
    """Two models joined through a many-to-many pivot table."""

    table: str
    first_model: str
    second_model: str
    location: SourceLocation = field(default_factory=SourceLocation)

    kind = FactKind.PIVOT_TABLE

    def __post_init__(self) -> None:
        _require_text(self.table, "table", self.kind)
        _require_text(self.first_model, "first_model", self.kind)
        _require_text(self.second_model, "second_model", self.kind)

    @property
    def subject(self) -> str:
        return self.table


@dataclass(frozen=True)
class ForeignKeyFact:
    """A foreign key column together with the model it references."""

    table: str
    column: str
    referenced_model: str
    location: SourceLocation = field(default_factory=SourceLocation)

    kind = FactKind.FOREIGN_KEY

    def __post_init__(self) -> None:
        _require_text(self.table, "table", self.kind)
        _require_text(self.column, "column", self.kind)
        _require_text(self.referenced_model, "referenced_model", self.kind)

    @property
    def subject(self) -> str:
        return self.column


Fact = (
    ClassDecl
    | MethodDecl
    | RouteDecl
    | ConfigEntry
    | MigrationFile
    | ViewFile
    | TableDecl
    | ColumnDecl
    | CommandDecl
    | ValidationRuleDecl
    | VariableDecl
    | PivotTableFact
    | ForeignKeyFact
)

_FACT_TYPES: dict[str, type[Any]] = {
    FactKind.CLASS.value: ClassDecl,
    FactKind.METHOD.value: MethodDecl,
    FactKind.ROUTE.value: RouteDecl,
    FactKind.CONFIG.value: ConfigEntry,
    FactKind.MIGRATION.value: MigrationFile,
    FactKind.VIEW.value: ViewFile,
    FactKind.TABLE.value: TableDecl,
    FactKind.COLUMN.value: ColumnDecl,
    FactKind.COMMAND.value: CommandDecl,
    FactKind.VALIDATION_RULE.value: ValidationRuleDecl,
    FactKind.VARIABLE.value: VariableDecl,
}

# Mapping keys that are renamed on the way in.
_FIELD_ALIASES: dict[str, str] = {
    "type": "class_kind",
    "verbs": "verb_set",
    "verb": "http_verb",
    "method": "http_verb",
    "params": "param_names",
}


# ---------------------------------------------------------------------------
# Mapping loader
# ---------------------------------------------------------------------------


def location_from_mapping(data: dict[str, Any]) -> SourceLocation:
    file_path = data.get("file", data.get("file_path", ""))
    line_raw = data.get("line", 0)
    try:
        line = int(line_raw or 0)
    except (TypeError, ValueError) as exc:
        msg = f"invalid line number {line_raw!r}"
        raise InvalidFact(msg) from exc
    return SourceLocation(file_path=str(file_path or ""), line=line)


def fact_from_mapping(data: dict[str, Any]) -> Fact:
    """Build a fact from a plain mapping tagged with ``kind``.

    Composite kinds are rejected: they are produced by the join pass only.
    Raises :class:`InvalidFact` for unknown kinds, unknown or missing fields,
    and values the fact constructor refuses.
    """
    if not isinstance(data, dict):
        msg = f"fact must be a mapping, got {type(data).__name__}"
        raise InvalidFact(msg)

    kind = data.get("kind")
    if not isinstance(kind, str) or kind not in _FACT_TYPES:
        msg = f"unknown fact kind {kind!r}, must be one of {sorted(_FACT_TYPES)}"
        raise InvalidFact(msg)
    fact_type = _FACT_TYPES[kind]

    location = location_from_mapping(data)
    fields: dict[str, Any] = {}
    for key, value in data.items():
        if key in ("kind", "file", "file_path", "line"):
            continue
        name = _FIELD_ALIASES.get(key, key)
        if name not in fact_type.__dataclass_fields__ or name == "location":
            msg = f"{kind}: unexpected field '{key}'"
            raise InvalidFact(msg)
        fields[name] = value

    if "verb_set" in fields:
        verbs = fields["verb_set"]
        if isinstance(verbs, str):
            verbs = [verbs]
        fields["verb_set"] = frozenset(_text_tuple(verbs or [], "verb_set", fact_type.kind))
    for name in ("param_names", "pivot_models"):
        if fields.get(name) is not None:
            fields[name] = _text_tuple(fields[name], name, fact_type.kind)

    try:
        return fact_type(location=location, **fields)  # type: ignore[no-any-return]
    except TypeError as exc:
        msg = f"{kind}: {exc}"
        raise InvalidFact(msg) from exc
