"""Tests for conventionist.catalogue: every built-in rule against good and bad facts."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from conventionist.catalogue import BUILTIN_RULES, builtin_rules
from conventionist.evaluator import evaluate, evaluate_fact
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
    SourceLocation,
    TableDecl,
    ValidationRuleDecl,
    VariableDecl,
    ViewFile,
)
from conventionist.rules import Severity

if TYPE_CHECKING:
    from collections.abc import Iterable

    from conventionist.facts import Fact
    from conventionist.registry import RuleRegistry
    from conventionist.rules import Diagnostic

_MIGRATION = "2023_05_01_000000_create_articles_table"

# (rule id, compliant fact, violating fact)
CASES: list[tuple[str, Fact, Fact]] = [
    (
        "class.pascal-case",
        ClassDecl("ArticleController", "controller"),
        ClassDecl("article_controller"),
    ),
    (
        "class.file-casing",
        ClassDecl("User", "model", file_casing="pascal"),
        ClassDecl("User", "model", file_casing="user"),
    ),
    (
        "controller.singular-suffix",
        ClassDecl("ArticleController", "controller"),
        ClassDecl("ArticlesController", "controller"),
    ),
    ("model.singular", ClassDecl("User", "model"), ClassDecl("Users", "model")),
    ("enum.singular", ClassDecl("UserType", "enum"), ClassDecl("UserTypes", "enum")),
    (
        "request.suffix",
        ClassDecl("UpdateUserRequest", "request"),
        ClassDecl("UpdateUsersRequest", "request"),
    ),
    ("seeder.suffix", ClassDecl("UserSeeder", "seeder"), ClassDecl("UsersSeeder", "seeder")),
    (
        "command-class.suffix",
        ClassDecl("SendDigestCommand", "command"),
        ClassDecl("SendDigest", "command"),
    ),
    ("test-class.suffix", ClassDecl("ArticleTest", "test"), ClassDecl("ArticleSpec", "test")),
    (
        "contract.naming",
        ClassDecl("AuthenticationInterface", "contract"),
        ClassDecl("Authentication", "contract"),
    ),
    ("trait.naming", ClassDecl("Notifiable", "trait"), ClassDecl("Notification", "trait")),
    ("method.camel-case", MethodDecl("getAll"), MethodDecl("get_all")),
    (
        "method.test-name",
        MethodDecl("testGuestCannotSeeArticle", "test"),
        MethodDecl("guestCannotSeeArticle", "test"),
    ),
    (
        "method.resource-verb",
        MethodDecl("store", "controller", verb_set=frozenset({"POST"})),
        MethodDecl("store", "controller", verb_set=frozenset({"GET"})),
    ),
    (
        "relation.singular",
        MethodDecl("articleComment", "model", relation="hasOne"),
        MethodDecl("articleComments", "model", relation="hasOne"),
    ),
    (
        "relation.plural",
        MethodDecl("articleComments", "model", relation="hasMany"),
        MethodDecl("articleComment", "model", relation="hasMany"),
    ),
    ("route.kebab-case", RouteDecl("open-source", "GET"), RouteDecl("open_source", "GET")),
    ("route.leading-slash", RouteDecl("articles", "GET"), RouteDecl("/articles", "GET")),
    (
        "route.plural-resource",
        RouteDecl("articles/{article}", "GET"),
        RouteDecl("article/{article}", "GET"),
    ),
    (
        "route.name-camel-case",
        RouteDecl("articles", "GET", name="users.showActive"),
        RouteDecl("articles", "GET", name="users.show_active"),
    ),
    (
        "route.param-camel-case",
        RouteDecl("articles/{articleId}", "GET"),
        RouteDecl("articles/{article_id}", "GET"),
    ),
    ("table.plural-snake-case", TableDecl("article_comments"), TableDecl("article_comment")),
    ("column.snake-case", ColumnDecl("articles", "meta_title"), ColumnDecl("articles", "MetaTitle")),
    (
        "column.no-model-prefix",
        ColumnDecl("articles", "meta_title"),
        ColumnDecl("articles", "article_meta_title"),
    ),
    (
        "column.primary-key",
        ColumnDecl("articles", "id", is_primary=True),
        ColumnDecl("articles", "article_id", is_primary=True),
    ),
    (
        "pivot.alphabetical-singular",
        PivotTableFact("article_user", "User", "Article"),
        PivotTableFact("users_articles", "User", "Article"),
    ),
    (
        "foreign-key.name",
        ForeignKeyFact("comments", "article_id", "Article"),
        ForeignKeyFact("comments", "articles_id", "Article"),
    ),
    (
        "config.file-kebab-case",
        ConfigEntry("config/app-settings.php", "timezone"),
        ConfigEntry("config/app_settings.php", "timezone"),
    ),
    (
        "config.key-snake-case",
        ConfigEntry("config/app.php", "articles_enabled"),
        ConfigEntry("config/app.php", "articlesEnabled"),
    ),
    ("migration.timestamp-prefix", MigrationFile(_MIGRATION), MigrationFile("create_articles_table")),
    (
        "migration.snake-case-suffix",
        MigrationFile(_MIGRATION),
        MigrationFile("2023_05_01_000000_CreateArticlesTable"),
    ),
    (
        "migration.create-table-plural",
        MigrationFile(_MIGRATION),
        MigrationFile("2023_05_01_000000_create_article_table"),
    ),
    (
        "view.camel-case",
        ViewFile("articles/showFiltered.blade.php"),
        ViewFile("articles/show-filtered.blade.php"),
    ),
    ("command.kebab-case", CommandDecl("mail:send-digest"), CommandDecl("mail:sendDigest")),
    (
        "validation.snake-case",
        ValidationRuleDecl("uppercase_only"),
        ValidationRuleDecl("uppercaseOnly"),
    ),
    ("variable.camel-case", VariableDecl("activeUsers"), VariableDecl("active_users")),
    (
        "variable.collection-plural",
        VariableDecl("activeUsers", holds_collection=True),
        VariableDecl("activeUser", holds_collection=True),
    ),
    (
        "variable.object-singular",
        VariableDecl("activeUser", holds_collection=False),
        VariableDecl("activeUsers", holds_collection=False),
    ),
]


def _ids(diagnostics: Iterable[Diagnostic]) -> list[str]:
    return [d.rule_id for d in diagnostics]


class TestCatalogueShape:
    def test_every_rule_has_a_case(self) -> None:
        assert {case[0] for case in CASES} == {rule.id for rule in BUILTIN_RULES}

    def test_rule_ids_unique(self) -> None:
        ids = [rule.id for rule in builtin_rules()]
        assert len(ids) == len(set(ids))

    def test_rules_have_descriptions(self) -> None:
        assert all(rule.description for rule in BUILTIN_RULES)


class TestRules:
    @pytest.mark.parametrize(
        ("rule_id", "compliant", "violating"), CASES, ids=[c[0] for c in CASES]
    )
    def test_compliant_fact_not_flagged(
        self, registry: RuleRegistry, rule_id: str, compliant: Fact, violating: Fact
    ) -> None:
        assert rule_id not in _ids(evaluate_fact(compliant, registry))

    @pytest.mark.parametrize(
        ("rule_id", "compliant", "violating"), CASES, ids=[c[0] for c in CASES]
    )
    def test_violating_fact_flagged_once(
        self, registry: RuleRegistry, rule_id: str, compliant: Fact, violating: Fact
    ) -> None:
        diagnostics = [d for d in evaluate_fact(violating, registry) if d.rule_id == rule_id]
        assert len(diagnostics) == 1
        assert diagnostics[0].severity == registry.get(rule_id).severity
        assert diagnostics[0].subject == violating.subject


class TestClassRules:
    def test_plural_controller(self, registry: RuleRegistry) -> None:
        fact = ClassDecl(
            "ArticlesController",
            "controller",
            location=SourceLocation("app/Http/Controllers/ArticlesController.php", 7),
        )
        diagnostics = evaluate_fact(fact, registry)
        assert _ids(diagnostics) == ["controller.singular-suffix"]
        diagnostic = diagnostics[0]
        assert diagnostic.severity is Severity.ERROR
        assert diagnostic.suggested_fix == "ArticleController"
        assert "expected 'ArticleController'" in diagnostic.message
        assert diagnostic.location.line == 7

    def test_controller_without_suffix(self, registry: RuleRegistry) -> None:
        diagnostics = evaluate_fact(ClassDecl("Article", "controller"), registry)
        assert _ids(diagnostics) == ["controller.singular-suffix"]
        assert diagnostics[0].suggested_fix == "ArticleController"

    def test_rules_ignore_other_class_kinds(self, registry: RuleRegistry) -> None:
        assert evaluate_fact(ClassDecl("Users", "other"), registry) == []

    def test_adjective_contract(self, registry: RuleRegistry) -> None:
        assert evaluate_fact(ClassDecl("Authenticatable", "contract"), registry) == []


class TestMethodRules:
    def test_magic_methods_exempt(self, registry: RuleRegistry) -> None:
        assert evaluate_fact(MethodDecl("__construct"), registry) == []

    def test_lifecycle_methods_exempt(self, registry: RuleRegistry) -> None:
        assert evaluate_fact(MethodDecl("setUp", "test"), registry) == []

    def test_resource_verb_has_no_fix(self, registry: RuleRegistry) -> None:
        fact = MethodDecl("destroy", "controller", verb_set=frozenset({"POST"}))
        diagnostics = evaluate_fact(fact, registry)
        assert _ids(diagnostics) == ["method.resource-verb"]
        assert diagnostics[0].suggested_fix is None
        assert "DELETE" in diagnostics[0].message

    def test_custom_action_unconstrained(self, registry: RuleRegistry) -> None:
        fact = MethodDecl("publish", "controller", verb_set=frozenset({"POST"}))
        assert evaluate_fact(fact, registry) == []

    def test_relation_fixes(self, registry: RuleRegistry) -> None:
        diagnostics = evaluate_fact(MethodDecl("comment", "model", relation="hasMany"), registry)
        assert [d.suggested_fix for d in diagnostics] == ["comments"]


class TestRouteRules:
    def test_open_source_route(self, registry: RuleRegistry) -> None:
        fact = RouteDecl("/open_source", "GET", name="open-source")
        by_rule = {d.rule_id: d for d in evaluate_fact(fact, registry)}
        path_rules = {rule_id for rule_id in by_rule if rule_id != "route.name-camel-case"}
        assert path_rules == {"route.kebab-case", "route.leading-slash"}
        assert by_rule["route.kebab-case"].suggested_fix == "/open-source"
        assert by_rule["route.leading-slash"].suggested_fix == "open_source"
        assert by_rule["route.name-camel-case"].suggested_fix == "openSource"

    def test_unnamed_open_source_route_has_two_violations(self, registry: RuleRegistry) -> None:
        diagnostics = evaluate_fact(RouteDecl("/open_source", "GET"), registry)
        assert sorted(_ids(diagnostics)) == ["route.kebab-case", "route.leading-slash"]

    def test_root_route_allowed(self, registry: RuleRegistry) -> None:
        assert evaluate_fact(RouteDecl("/", "GET"), registry) == []

    def test_unnamed_route(self, registry: RuleRegistry) -> None:
        assert evaluate_fact(RouteDecl("articles", "GET"), registry) == []

    def test_parameter_segments_ignored_for_kebab(self, registry: RuleRegistry) -> None:
        fact = RouteDecl("articles/{articleId}/comments", "GET")
        assert evaluate_fact(fact, registry) == []

    def test_plural_resource_fix(self, registry: RuleRegistry) -> None:
        diagnostics = evaluate_fact(RouteDecl("article/{article}", "GET"), registry)
        assert [d.suggested_fix for d in diagnostics] == ["articles/{article}"]

    def test_param_fix(self, registry: RuleRegistry) -> None:
        diagnostics = evaluate_fact(RouteDecl("articles/{article_id}", "GET"), registry)
        assert [d.suggested_fix for d in diagnostics] == ["articles/{articleId}"]


class TestDatabaseRules:
    def test_pivot_from_many_to_many_relation(self, registry: RuleRegistry) -> None:
        facts = [
            MethodDecl(
                "articles",
                "model",
                owner="User",
                relation="belongsToMany",
                related_model="Article",
                pivot_table="users_articles",
                location=SourceLocation("app/Models/User.php", 20),
            )
        ]
        report = evaluate(facts, registry)
        diagnostics = report.for_rule("pivot.alphabetical-singular")
        assert len(diagnostics) == 1
        assert diagnostics[0].suggested_fix == "article_user"
        assert diagnostics[0].location == SourceLocation("app/Models/User.php", 20)

    def test_pivot_table_skips_plural_check(self, registry: RuleRegistry) -> None:
        fact = TableDecl("article_user", pivot_models=("Article", "User"))
        assert evaluate_fact(fact, registry) == []

    def test_referencing_column_skips_prefix_check(self, registry: RuleRegistry) -> None:
        fact = ColumnDecl("articles", "article_id", references="articles")
        assert evaluate_fact(fact, registry) == []

    def test_model_prefix_uses_declared_model(self, registry: RuleRegistry) -> None:
        fact = ColumnDecl("blog_posts", "post_title", model="Post")
        diagnostics = evaluate_fact(fact, registry)
        assert _ids(diagnostics) == ["column.no-model-prefix"]
        assert diagnostics[0].suggested_fix == "title"

    def test_foreign_key_from_column(self, registry: RuleRegistry) -> None:
        facts = [
            TableDecl("articles", model="Article"),
            ColumnDecl("comments", "post_id", references="articles"),
        ]
        diagnostics = evaluate(facts, registry).for_rule("foreign-key.name")
        assert len(diagnostics) == 1
        assert diagnostics[0].suggested_fix == "article_id"

    def test_table_fix(self, registry: RuleRegistry) -> None:
        diagnostics = evaluate_fact(TableDecl("ArticleComment"), registry)
        assert [d.suggested_fix for d in diagnostics] == ["article_comments"]


class TestMigrationRules:
    def test_valid_migration(self, registry: RuleRegistry) -> None:
        fact = MigrationFile("2017_01_01_000000_create_articles_table")
        assert len(evaluate([fact], registry)) == 0

    @pytest.mark.parametrize(
        "prefix",
        ["2017_13_01_000000", "2023_02_31_000000", "2023_02_29_000000", "2017_01_01_246000"],
    )
    def test_impossible_date(self, registry: RuleRegistry, prefix: str) -> None:
        diagnostics = evaluate_fact(MigrationFile(f"{prefix}_create_articles_table"), registry)
        assert _ids(diagnostics) == ["migration.timestamp-prefix"]

    def test_leap_day_accepted(self, registry: RuleRegistry) -> None:
        fact = MigrationFile("2024_02_29_000000_create_articles_table")
        assert evaluate_fact(fact, registry) == []

    def test_timestamp_mismatch_fix(self, registry: RuleRegistry) -> None:
        fact = MigrationFile(
            "2017_01_01_000000_create_articles_table", timestamp="2018_02_03_040506"
        )
        diagnostics = evaluate_fact(fact, registry)
        assert _ids(diagnostics) == ["migration.timestamp-prefix"]
        assert diagnostics[0].suggested_fix == "2018_02_03_040506_create_articles_table"

    def test_matching_timestamp(self, registry: RuleRegistry) -> None:
        fact = MigrationFile(
            "2017_01_01_000000_create_articles_table", timestamp="2017_01_01_000000"
        )
        assert evaluate_fact(fact, registry) == []


class TestMiscRules:
    def test_config_dotted_key(self, registry: RuleRegistry) -> None:
        fact = ConfigEntry("config/mail.php", "mailers.smtp.port")
        assert evaluate_fact(fact, registry) == []

    def test_config_file_fix(self, registry: RuleRegistry) -> None:
        diagnostics = evaluate_fact(ConfigEntry("config/app_settings.php", "timezone"), registry)
        assert [d.suggested_fix for d in diagnostics] == ["config/app-settings.php"]

    def test_view_fix(self, registry: RuleRegistry) -> None:
        diagnostics = evaluate_fact(ViewFile("articles/show-filtered.blade.php"), registry)
        assert [d.suggested_fix for d in diagnostics] == ["articles/showFiltered.blade.php"]

    def test_command_fix(self, registry: RuleRegistry) -> None:
        diagnostics = evaluate_fact(CommandDecl("mail:sendDigest"), registry)
        assert [d.suggested_fix for d in diagnostics] == ["mail:send-digest"]

    def test_variable_without_collection_hint(self, registry: RuleRegistry) -> None:
        assert evaluate_fact(VariableDecl("users"), registry) == []
