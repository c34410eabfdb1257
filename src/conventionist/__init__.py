"""Conventionist - naming convention compliance engine."""

from conventionist.evaluator import EvaluationCancelled, evaluate, evaluate_fact
from conventionist.facts import (
    ClassDecl,
    ColumnDecl,
    CommandDecl,
    ConfigEntry,
    Fact,
    FactKind,
    ForeignKeyFact,
    InvalidFact,
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
from conventionist.registry import (
    DuplicateRuleId,
    RegistryError,
    RegistryFrozen,
    RuleRegistry,
    UnknownRule,
    build_registry,
)
from conventionist.report import Report
from conventionist.rules import Diagnostic, Rule, RuleEvaluationError, Severity

__version__ = "0.1.0"

__all__ = [
    "ClassDecl",
    "ColumnDecl",
    "CommandDecl",
    "ConfigEntry",
    "Diagnostic",
    "DuplicateRuleId",
    "EvaluationCancelled",
    "Fact",
    "FactKind",
    "ForeignKeyFact",
    "InvalidFact",
    "MethodDecl",
    "MigrationFile",
    "PivotTableFact",
    "RegistryError",
    "RegistryFrozen",
    "Report",
    "RouteDecl",
    "Rule",
    "RuleEvaluationError",
    "RuleRegistry",
    "Severity",
    "SourceLocation",
    "TableDecl",
    "UnknownRule",
    "ValidationRuleDecl",
    "VariableDecl",
    "ViewFile",
    "__version__",
    "build_registry",
    "evaluate",
    "evaluate_fact",
]
