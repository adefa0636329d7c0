"""Expression language: terms, operators, and lazily evaluated pipelines."""

from codebase_migrator.parser.expression import (
    EditExpression,
    Expression,
    RootExpression,
    TranslateExpression,
)
from codebase_migrator.parser.grammar import (
    parse_expression,
    parse_repository_expression,
    parse_term,
    tokenize,
)
from codebase_migrator.parser.types import Operation, Operator, Term

__all__ = [
    # types
    "Operation",
    "Operator",
    "Term",
    # expression
    "EditExpression",
    "Expression",
    "RootExpression",
    "TranslateExpression",
    # grammar
    "parse_expression",
    "parse_repository_expression",
    "parse_term",
    "tokenize",
]
