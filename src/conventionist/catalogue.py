"""Built-in convention rules.

Each rule checks one convention against one fact kind.  Predicates return
True for compliant facts; message and fix builders are only called on
violations.  Rules for a narrower class kind (controllers, models, ...)
treat facts of other kinds as compliant.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import TYPE_CHECKING

from conventionist.facts import FactKind
from conventionist.naming import (
    is_camel_case,
    is_kebab_case,
    is_pascal_case,
    is_plural,
    is_singular,
    is_snake_case,
    last_word,
    plural_identifier,
    singular_identifier,
    to_camel,
    to_kebab,
    to_pascal,
    to_snake,
)
from conventionist.rules import Rule, Severity

if TYPE_CHECKING:
    from collections.abc import Callable

    from conventionist.facts import (
        ClassDecl,
        ColumnDecl,
        CommandDecl,
        ConfigEntry,
        ForeignKeyFact,
        MethodDecl,
        MigrationFile,
        PivotTableFact,
        RouteDecl,
        TableDecl,
        VariableDecl,
        ViewFile,
    )

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Resource controller actions and the HTTP verbs that may route to them.
RESOURCE_ACTIONS: dict[str, frozenset[str]] = {
    "index": frozenset({"GET", "HEAD"}),
    "create": frozenset({"GET", "HEAD"}),
    "store": frozenset({"POST"}),
    "show": frozenset({"GET", "HEAD"}),
    "edit": frozenset({"GET", "HEAD"}),
    "update": frozenset({"PUT", "PATCH"}),
    "destroy": frozenset({"DELETE"}),
}
SINGULAR_RELATIONS: frozenset[str] = frozenset(
    {"belongsTo", "hasOne", "hasOneThrough", "morphOne", "morphTo"}
)
PLURAL_RELATIONS: frozenset[str] = frozenset(
    {"belongsToMany", "hasMany", "hasManyThrough", "morphMany", "morphToMany"}
)
TEST_LIFECYCLE_METHODS: frozenset[str] = frozenset(
    {"setUp", "tearDown", "setUpBeforeClass", "tearDownAfterClass"}
)
_ADJECTIVE_ENDINGS: tuple[str, ...] = ("able", "ible")

_MIGRATION_RE = re.compile(r"^(\d{4})_(\d{2})_(\d{2})_(\d{6})_(.+)$")
_CREATE_TABLE_RE = re.compile(r"^create_(.+)_table$")


def _is_param(segment: str) -> bool:
    return segment.startswith("{") and segment.endswith("}")


# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------


def _class_pascal_case(fact: ClassDecl) -> bool:
    return is_pascal_case(fact.name)


def _class_file_casing(fact: ClassDecl) -> bool:
    return fact.file_casing == "pascal"


def _split_suffix(name: str, suffix: str) -> str:
    """Return *name* without *suffix* (unchanged when it lacks the suffix)."""
    if name.endswith(suffix):
        return name[: -len(suffix)]
    return name


def _suffixed_singular(
    class_kind: str, suffix: str
) -> tuple[Callable[[ClassDecl], bool], Callable[[ClassDecl], str | None]]:
    """Predicate and fix for "singular noun + suffix" class names."""

    def predicate(fact: ClassDecl) -> bool:
        if fact.class_kind != class_kind:
            return True
        base = _split_suffix(fact.name, suffix)
        if not fact.name.endswith(suffix) or not base:
            return False
        return is_singular(last_word(base))

    def fix(fact: ClassDecl) -> str | None:
        base = _split_suffix(fact.name, suffix)
        if not base:
            return None
        return singular_identifier(to_pascal(base)) + suffix

    return predicate, fix


_controller_predicate, _controller_fix = _suffixed_singular("controller", "Controller")
_request_predicate, _request_fix = _suffixed_singular("request", "Request")
_seeder_predicate, _seeder_fix = _suffixed_singular("seeder", "Seeder")


def _controller_message(fact: ClassDecl) -> str:
    expected = _controller_fix(fact)
    hint = f": expected '{expected}'" if expected else ""
    return (
        f"Controller '{fact.name}' must be named with a singular noun "
        f"followed by 'Controller'{hint}"
    )


def _plain_suffix(class_kind: str, suffix: str) -> Callable[[ClassDecl], bool]:
    def predicate(fact: ClassDecl) -> bool:
        if fact.class_kind != class_kind:
            return True
        return fact.name.endswith(suffix) and fact.name != suffix

    return predicate


def _singular_class(class_kind: str) -> Callable[[ClassDecl], bool]:
    def predicate(fact: ClassDecl) -> bool:
        if fact.class_kind != class_kind:
            return True
        return is_singular(last_word(fact.name))

    return predicate


def _adjective_or_suffix(class_kind: str, suffix: str) -> Callable[[ClassDecl], bool]:
    def predicate(fact: ClassDecl) -> bool:
        if fact.class_kind != class_kind:
            return True
        return fact.name.endswith(suffix) or fact.name.endswith(_ADJECTIVE_ENDINGS)

    return predicate


# ---------------------------------------------------------------------------
# Methods and relationships
# ---------------------------------------------------------------------------


def _method_camel_case(fact: MethodDecl) -> bool:
    # Magic methods (__construct, __invoke) are exempt.
    return fact.name.startswith("__") or is_camel_case(fact.name)


def _method_test_name(fact: MethodDecl) -> bool:
    if fact.owner_kind != "test":
        return True
    return fact.name in TEST_LIFECYCLE_METHODS or fact.name.startswith(("test", "_"))


def _method_test_fix(fact: MethodDecl) -> str:
    return "test" + to_pascal(fact.name)


def _resource_verb(fact: MethodDecl) -> bool:
    if fact.owner_kind != "controller" or not fact.verb_set:
        return True
    allowed = RESOURCE_ACTIONS.get(fact.name)
    if allowed is None:
        return True
    return fact.verb_set <= allowed


def _resource_verb_message(fact: MethodDecl) -> str:
    allowed = sorted(RESOURCE_ACTIONS[fact.name])
    return (
        f"Resource action '{fact.name}' must be routed with {' or '.join(allowed)}, "
        f"got {', '.join(sorted(fact.verb_set))}"
    )


def _relation_singular(fact: MethodDecl) -> bool:
    if fact.relation not in SINGULAR_RELATIONS:
        return True
    return is_singular(last_word(fact.name))


def _relation_plural(fact: MethodDecl) -> bool:
    if fact.relation not in PLURAL_RELATIONS:
        return True
    return is_plural(last_word(fact.name))


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


def _static_segment_ok(segment: str) -> bool:
    return all(is_kebab_case(part) for part in segment.split("."))


def _route_kebab_case(fact: RouteDecl) -> bool:
    return all(_is_param(s) or _static_segment_ok(s) for s in fact.segments)


def _route_kebab_fix(fact: RouteDecl) -> str:
    fixed = [
        s if _is_param(s) else ".".join(to_kebab(p) for p in s.split("."))
        for s in fact.segments
    ]
    prefix = "/" if fact.path.startswith("/") else ""
    return prefix + "/".join(fixed)


def _route_leading_slash(fact: RouteDecl) -> bool:
    return fact.path == "/" or not fact.path.startswith("/")


def _route_plural_resource(fact: RouteDecl) -> bool:
    segments = fact.segments
    for current, following in zip(segments, segments[1:]):
        if _is_param(current) or not _is_param(following):
            continue
        if not is_plural(last_word(current)):
            return False
    return True


def _route_plural_fix(fact: RouteDecl) -> str:
    segments = list(fact.segments)
    for idx in range(len(segments) - 1):
        if not _is_param(segments[idx]) and _is_param(segments[idx + 1]):
            segments[idx] = plural_identifier(segments[idx])
    prefix = "/" if fact.path.startswith("/") else ""
    return prefix + "/".join(segments)


def _route_name_camel_case(fact: RouteDecl) -> bool:
    if not fact.name:
        return True
    return all(is_camel_case(part) for part in fact.name.split("."))


def _route_name_fix(fact: RouteDecl) -> str:
    return ".".join(to_camel(part) for part in fact.name.split("."))


def _param_name(param: str) -> str:
    return param.rstrip("?")


def _route_param_camel_case(fact: RouteDecl) -> bool:
    return all(is_camel_case(_param_name(p)) for p in fact.param_names or ())


def _route_param_fix(fact: RouteDecl) -> str:
    path = fact.path
    for param in fact.param_names or ():
        name = _param_name(param)
        path = path.replace("{" + name, "{" + to_camel(name))
    return path


# ---------------------------------------------------------------------------
# Tables and columns
# ---------------------------------------------------------------------------


def _table_plural_snake_case(fact: TableDecl) -> bool:
    if fact.pivot_models is not None:
        return True
    return is_snake_case(fact.name) and is_plural(last_word(fact.name))


def _table_fix(fact: TableDecl) -> str:
    return plural_identifier(to_snake(fact.name))


def _column_model_prefix(fact: ColumnDecl) -> str:
    model = fact.model or singular_identifier(to_snake(fact.table))
    return to_snake(model) + "_"


def _column_no_model_prefix(fact: ColumnDecl) -> bool:
    if fact.references is not None:
        return True
    prefix = _column_model_prefix(fact)
    return not (fact.name.startswith(prefix) and len(fact.name) > len(prefix))


def _column_primary_key(fact: ColumnDecl) -> bool:
    return not fact.is_primary or fact.name == "id"


def _pivot_expected(fact: PivotTableFact) -> str:
    names = sorted(
        to_snake(singular_identifier(m)) for m in (fact.first_model, fact.second_model)
    )
    return "_".join(names)


def _foreign_key_expected(fact: ForeignKeyFact) -> str:
    return to_snake(singular_identifier(fact.referenced_model)) + "_id"


# ---------------------------------------------------------------------------
# Files, keys and identifiers
# ---------------------------------------------------------------------------


def _split_file(path: str, extension: str) -> tuple[str, str]:
    """Split *path* into (directory prefix, stem) dropping *extension*."""
    normalized = path.replace("\\", "/")
    directory, _, base = normalized.rpartition("/")
    if extension and base.endswith(extension):
        base = base[: -len(extension)]
    return (directory + "/" if directory else ""), base


def _config_file_kebab_case(fact: ConfigEntry) -> bool:
    _, stem = _split_file(fact.file, ".php")
    return is_kebab_case(stem)


def _config_file_fix(fact: ConfigEntry) -> str:
    directory, stem = _split_file(fact.file, ".php")
    extension = ".php" if fact.file.endswith(".php") else ""
    return f"{directory}{to_kebab(stem)}{extension}"


def _config_key_part_ok(part: str) -> bool:
    return part.isdigit() or is_snake_case(part)


def _config_key_snake_case(fact: ConfigEntry) -> bool:
    return all(_config_key_part_ok(part) for part in fact.key.split("."))


def _config_key_fix(fact: ConfigEntry) -> str:
    return ".".join(part if part.isdigit() else to_snake(part) for part in fact.key.split("."))


def _migration_parts(name: str) -> tuple[str | None, str]:
    """Return (timestamp prefix or None, descriptive suffix)."""
    match = _MIGRATION_RE.match(name)
    if match is None:
        return None, name
    year, month, day, clock, suffix = match.groups()
    return f"{year}_{month}_{day}_{clock}", suffix


def _valid_timestamp(timestamp: str) -> bool:
    try:
        datetime.strptime(timestamp, "%Y_%m_%d_%H%M%S")
    except ValueError:
        return False
    return True


def _migration_timestamp(fact: MigrationFile) -> bool:
    prefix, _ = _migration_parts(fact.name)
    if prefix is None or not _valid_timestamp(prefix):
        return False
    return fact.timestamp is None or fact.timestamp == prefix


def _migration_timestamp_fix(fact: MigrationFile) -> str | None:
    if fact.timestamp is None:
        return None
    _, suffix = _migration_parts(fact.name)
    return f"{fact.timestamp}_{to_snake(suffix)}"


def _migration_suffix_snake(fact: MigrationFile) -> bool:
    _, suffix = _migration_parts(fact.name)
    return is_snake_case(suffix)


def _migration_suffix_fix(fact: MigrationFile) -> str:
    prefix, suffix = _migration_parts(fact.name)
    return f"{prefix}_{to_snake(suffix)}" if prefix else to_snake(suffix)


def _migration_created_table(fact: MigrationFile) -> str | None:
    _, suffix = _migration_parts(fact.name)
    match = _CREATE_TABLE_RE.match(suffix)
    return match.group(1) if match else None


def _migration_create_table_plural(fact: MigrationFile) -> bool:
    table = _migration_created_table(fact)
    return table is None or is_plural(last_word(table))


def _migration_create_table_fix(fact: MigrationFile) -> str:
    table = _migration_created_table(fact) or ""
    return fact.name.replace(f"create_{table}_table", f"create_{plural_identifier(table)}_table")


def _view_camel_case(fact: ViewFile) -> bool:
    return is_camel_case(fact.stem)


def _view_fix(fact: ViewFile) -> str:
    directory, base = _split_file(fact.path, "")
    stem = fact.stem
    return directory + to_camel(stem) + base[len(stem) :]


def _command_kebab_case(fact: CommandDecl) -> bool:
    return all(is_kebab_case(part) for part in fact.signature.split(":"))


def _command_fix(fact: CommandDecl) -> str:
    return ":".join(to_kebab(part) for part in fact.signature.split(":"))


def _variable_collection_plural(fact: VariableDecl) -> bool:
    return fact.holds_collection is not True or is_plural(last_word(fact.name))


def _variable_object_singular(fact: VariableDecl) -> bool:
    return fact.holds_collection is not False or is_singular(last_word(fact.name))


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------

_E = Severity.ERROR
_W = Severity.WARNING
_I = Severity.INFO


BUILTIN_RULES: tuple[Rule, ...] = (
    # -- Classes --
    Rule(
        id="class.pascal-case",
        applies_to=FactKind.CLASS,
        severity=_E,
        description="Class names are PascalCase.",
        predicate=_class_pascal_case,
        message=lambda f: f"Class '{f.name}' must be PascalCase: expected '{to_pascal(f.name)}'",
        fix=lambda f: to_pascal(f.name),
    ),
    Rule(
        id="class.file-casing",
        applies_to=FactKind.CLASS,
        severity=_W,
        description="Files declaring a class are named after it in PascalCase.",
        predicate=_class_file_casing,
        message=lambda f: (
            f"File declaring '{f.name}' is {f.file_casing} case: "
            f"class files must be PascalCase ('{to_pascal(f.name)}')"
        ),
        fix=lambda f: to_pascal(f.name),
    ),
    Rule(
        id="controller.singular-suffix",
        applies_to=FactKind.CLASS,
        severity=_E,
        description="Controllers are a singular noun followed by 'Controller'.",
        predicate=_controller_predicate,
        message=_controller_message,
        fix=_controller_fix,
    ),
    Rule(
        id="model.singular",
        applies_to=FactKind.CLASS,
        severity=_E,
        description="Models are singular nouns.",
        predicate=_singular_class("model"),
        message=lambda f: (
            f"Model '{f.name}' must be singular: expected '{singular_identifier(f.name)}'"
        ),
        fix=lambda f: singular_identifier(f.name),
    ),
    Rule(
        id="enum.singular",
        applies_to=FactKind.CLASS,
        severity=_W,
        description="Enums are singular nouns.",
        predicate=_singular_class("enum"),
        message=lambda f: (
            f"Enum '{f.name}' must be singular: expected '{singular_identifier(f.name)}'"
        ),
        fix=lambda f: singular_identifier(f.name),
    ),
    Rule(
        id="request.suffix",
        applies_to=FactKind.CLASS,
        severity=_W,
        description="Form requests are a singular noun phrase followed by 'Request'.",
        predicate=_request_predicate,
        message=lambda f: (
            f"Form request '{f.name}' must be singular and end with 'Request'"
        ),
        fix=_request_fix,
    ),
    Rule(
        id="seeder.suffix",
        applies_to=FactKind.CLASS,
        severity=_W,
        description="Seeders are a singular noun followed by 'Seeder'.",
        predicate=_seeder_predicate,
        message=lambda f: f"Seeder '{f.name}' must be singular and end with 'Seeder'",
        fix=_seeder_fix,
    ),
    Rule(
        id="command-class.suffix",
        applies_to=FactKind.CLASS,
        severity=_I,
        description="Console command classes end with 'Command'.",
        predicate=_plain_suffix("command", "Command"),
        message=lambda f: f"Command class '{f.name}' should end with 'Command'",
        fix=lambda f: f.name + "Command",
    ),
    Rule(
        id="test-class.suffix",
        applies_to=FactKind.CLASS,
        severity=_W,
        description="Test classes end with 'Test'.",
        predicate=_plain_suffix("test", "Test"),
        message=lambda f: f"Test class '{f.name}' must end with 'Test'",
        fix=lambda f: f.name + "Test",
    ),
    Rule(
        id="contract.naming",
        applies_to=FactKind.CLASS,
        severity=_I,
        description="Contracts are adjectives or end with 'Interface'.",
        predicate=_adjective_or_suffix("contract", "Interface"),
        message=lambda f: (
            f"Contract '{f.name}' should be an adjective (e.g. 'Authenticatable') "
            f"or end with 'Interface'"
        ),
        fix=lambda f: f.name + "Interface",
    ),
    Rule(
        id="trait.naming",
        applies_to=FactKind.CLASS,
        severity=_I,
        description="Traits are adjectives or end with 'Trait'.",
        predicate=_adjective_or_suffix("trait", "Trait"),
        message=lambda f: (
            f"Trait '{f.name}' should be an adjective (e.g. 'Notifiable') or end with 'Trait'"
        ),
        fix=lambda f: f.name + "Trait",
    ),
    # -- Methods --
    Rule(
        id="method.camel-case",
        applies_to=FactKind.METHOD,
        severity=_E,
        description="Method names are camelCase.",
        predicate=_method_camel_case,
        message=lambda f: f"Method '{f.name}' must be camelCase: expected '{to_camel(f.name)}'",
        fix=lambda f: to_camel(f.name),
    ),
    Rule(
        id="method.test-name",
        applies_to=FactKind.METHOD,
        severity=_I,
        description="Test class methods start with 'test' unless they are lifecycle hooks.",
        predicate=_method_test_name,
        message=lambda f: (
            f"Test method '{f.name}' should start with 'test': "
            f"expected '{_method_test_fix(f)}'"
        ),
        fix=_method_test_fix,
    ),
    Rule(
        id="method.resource-verb",
        applies_to=FactKind.METHOD,
        severity=_E,
        description="Resource controller actions are routed with their canonical HTTP verbs.",
        predicate=_resource_verb,
        message=_resource_verb_message,
    ),
    Rule(
        id="relation.singular",
        applies_to=FactKind.METHOD,
        severity=_E,
        description="hasOne/belongsTo relationships are singular camelCase.",
        predicate=_relation_singular,
        message=lambda f: (
            f"{f.relation} relationship '{f.name}' must be singular: "
            f"expected '{to_camel(singular_identifier(f.name))}'"
        ),
        fix=lambda f: to_camel(singular_identifier(f.name)),
    ),
    Rule(
        id="relation.plural",
        applies_to=FactKind.METHOD,
        severity=_E,
        description="hasMany/belongsToMany relationships are plural camelCase.",
        predicate=_relation_plural,
        message=lambda f: (
            f"{f.relation} relationship '{f.name}' must be plural: "
            f"expected '{to_camel(plural_identifier(f.name))}'"
        ),
        fix=lambda f: to_camel(plural_identifier(f.name)),
    ),
    # -- Routes --
    Rule(
        id="route.kebab-case",
        applies_to=FactKind.ROUTE,
        severity=_E,
        description="Route URL segments are kebab-case, without underscores.",
        predicate=_route_kebab_case,
        message=lambda f: (
            f"Route '{f.path}' must use kebab-case segments without underscores: "
            f"expected '{_route_kebab_fix(f)}'"
        ),
        fix=_route_kebab_fix,
    ),
    Rule(
        id="route.leading-slash",
        applies_to=FactKind.ROUTE,
        severity=_W,
        description="Route paths carry no leading slash unless they are the root.",
        predicate=_route_leading_slash,
        message=lambda f: f"Route '{f.path}' must not start with '/' unless it is the root",
        fix=lambda f: f.path.lstrip("/"),
    ),
    Rule(
        id="route.plural-resource",
        applies_to=FactKind.ROUTE,
        severity=_W,
        description="A segment followed by a route parameter names a plural resource.",
        predicate=_route_plural_resource,
        message=lambda f: (
            f"Route '{f.path}' must name resources in the plural: "
            f"expected '{_route_plural_fix(f)}'"
        ),
        fix=_route_plural_fix,
    ),
    Rule(
        id="route.name-camel-case",
        applies_to=FactKind.ROUTE,
        severity=_E,
        description="Route names are camelCase, with dot-separated hierarchy.",
        predicate=_route_name_camel_case,
        message=lambda f: (
            f"Route name '{f.name}' must be camelCase with dot segments: "
            f"expected '{_route_name_fix(f)}'"
        ),
        fix=_route_name_fix,
    ),
    Rule(
        id="route.param-camel-case",
        applies_to=FactKind.ROUTE,
        severity=_W,
        description="Route parameters are camelCase.",
        predicate=_route_param_camel_case,
        message=lambda f: f"Route '{f.path}' must use camelCase parameter names",
        fix=_route_param_fix,
    ),
    # -- Database --
    Rule(
        id="table.plural-snake-case",
        applies_to=FactKind.TABLE,
        severity=_E,
        description="Table names are plural snake_case.",
        predicate=_table_plural_snake_case,
        message=lambda f: (
            f"Table '{f.name}' must be plural snake_case: expected '{_table_fix(f)}'"
        ),
        fix=_table_fix,
    ),
    Rule(
        id="column.snake-case",
        applies_to=FactKind.COLUMN,
        severity=_E,
        description="Column names are snake_case.",
        predicate=lambda f: is_snake_case(f.name),
        message=lambda f: (
            f"Column '{f.table}.{f.name}' must be snake_case: expected '{to_snake(f.name)}'"
        ),
        fix=lambda f: to_snake(f.name),
    ),
    Rule(
        id="column.no-model-prefix",
        applies_to=FactKind.COLUMN,
        severity=_W,
        description="Column names do not repeat the model name.",
        predicate=_column_no_model_prefix,
        message=lambda f: (
            f"Column '{f.table}.{f.name}' must not repeat the model name: "
            f"expected '{f.name[len(_column_model_prefix(f)):]}'"
        ),
        fix=lambda f: f.name[len(_column_model_prefix(f)) :],
    ),
    Rule(
        id="column.primary-key",
        applies_to=FactKind.COLUMN,
        severity=_E,
        description="Primary keys are named 'id'.",
        predicate=_column_primary_key,
        message=lambda f: f"Primary key '{f.table}.{f.name}' must be named 'id'",
        fix=lambda f: "id",
    ),
    Rule(
        id="pivot.alphabetical-singular",
        applies_to=FactKind.PIVOT_TABLE,
        severity=_E,
        description="Pivot tables join singular model names in alphabetical order.",
        predicate=lambda f: f.table == _pivot_expected(f),
        message=lambda f: (
            f"Pivot table '{f.table}' for {f.first_model} and {f.second_model} must be "
            f"singular model names in alphabetical order: expected '{_pivot_expected(f)}'"
        ),
        fix=_pivot_expected,
    ),
    Rule(
        id="foreign-key.name",
        applies_to=FactKind.FOREIGN_KEY,
        severity=_E,
        description="Foreign keys are the singular referenced model name followed by '_id'.",
        predicate=lambda f: f.column == _foreign_key_expected(f),
        message=lambda f: (
            f"Foreign key '{f.table}.{f.column}' referencing {f.referenced_model} must be "
            f"named '{_foreign_key_expected(f)}'"
        ),
        fix=_foreign_key_expected,
    ),
    # -- Configuration --
    Rule(
        id="config.file-kebab-case",
        applies_to=FactKind.CONFIG,
        severity=_W,
        description="Config file names are kebab-case.",
        predicate=_config_file_kebab_case,
        message=lambda f: (
            f"Config file '{f.file}' must be kebab-case: expected '{_config_file_fix(f)}'"
        ),
        fix=_config_file_fix,
    ),
    Rule(
        id="config.key-snake-case",
        applies_to=FactKind.CONFIG,
        severity=_E,
        description="Config keys are snake_case.",
        predicate=_config_key_snake_case,
        message=lambda f: (
            f"Config key '{f.key}' in '{f.file}' must be snake_case: "
            f"expected '{_config_key_fix(f)}'"
        ),
        fix=_config_key_fix,
    ),
    # -- Migrations --
    Rule(
        id="migration.timestamp-prefix",
        applies_to=FactKind.MIGRATION,
        severity=_E,
        description="Migration names start with a YYYY_MM_DD_HHMMSS timestamp.",
        predicate=_migration_timestamp,
        message=lambda f: (
            f"Migration '{f.name}' must start with a valid YYYY_MM_DD_HHMMSS timestamp"
            + (f" ('{f.timestamp}')" if f.timestamp else "")
        ),
        fix=_migration_timestamp_fix,
    ),
    Rule(
        id="migration.snake-case-suffix",
        applies_to=FactKind.MIGRATION,
        severity=_E,
        description="Migration descriptions are snake_case.",
        predicate=_migration_suffix_snake,
        message=lambda f: f"Migration '{f.name}' must have a snake_case description",
        fix=_migration_suffix_fix,
    ),
    Rule(
        id="migration.create-table-plural",
        applies_to=FactKind.MIGRATION,
        severity=_W,
        description="create_*_table migrations name a plural table.",
        predicate=_migration_create_table_plural,
        message=lambda f: (
            f"Migration '{f.name}' must create a plural table: "
            f"expected '{_migration_create_table_fix(f)}'"
        ),
        fix=_migration_create_table_fix,
    ),
    # -- Views, commands, validation, variables --
    Rule(
        id="view.camel-case",
        applies_to=FactKind.VIEW,
        severity=_W,
        description="View file names are camelCase.",
        predicate=_view_camel_case,
        message=lambda f: f"View '{f.path}' must be camelCase: expected '{_view_fix(f)}'",
        fix=_view_fix,
    ),
    Rule(
        id="command.kebab-case",
        applies_to=FactKind.COMMAND,
        severity=_E,
        description="Console command names are kebab-case.",
        predicate=_command_kebab_case,
        message=lambda f: (
            f"Command '{f.signature}' must be kebab-case: expected '{_command_fix(f)}'"
        ),
        fix=_command_fix,
    ),
    Rule(
        id="validation.snake-case",
        applies_to=FactKind.VALIDATION_RULE,
        severity=_E,
        description="Validation rule identifiers are snake_case.",
        predicate=lambda f: is_snake_case(f.name),
        message=lambda f: (
            f"Validation rule '{f.name}' must be snake_case: expected '{to_snake(f.name)}'"
        ),
        fix=lambda f: to_snake(f.name),
    ),
    Rule(
        id="variable.camel-case",
        applies_to=FactKind.VARIABLE,
        severity=_W,
        description="Variables are camelCase.",
        predicate=lambda f: is_camel_case(f.name),
        message=lambda f: f"Variable '{f.name}' must be camelCase: expected '{to_camel(f.name)}'",
        fix=lambda f: to_camel(f.name),
    ),
    Rule(
        id="variable.collection-plural",
        applies_to=FactKind.VARIABLE,
        severity=_I,
        description="Variables holding collections are plural.",
        predicate=_variable_collection_plural,
        message=lambda f: f"Collection variable '{f.name}' should be plural",
        fix=lambda f: plural_identifier(f.name),
    ),
    Rule(
        id="variable.object-singular",
        applies_to=FactKind.VARIABLE,
        severity=_I,
        description="Variables holding a single object are singular.",
        predicate=_variable_object_singular,
        message=lambda f: f"Object variable '{f.name}' should be singular",
        fix=lambda f: singular_identifier(f.name),
    ),
)


def builtin_rules() -> tuple[Rule, ...]:
    """Return the built-in catalogue in priority order."""
    return BUILTIN_RULES

