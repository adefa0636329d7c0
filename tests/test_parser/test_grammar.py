"""Tests for the expression grammar and parser."""

import pytest

from codebase_migrator.errors import InvalidExpressionSyntax
from codebase_migrator.parser.expression import (
    EditExpression,
    RootExpression,
    TranslateExpression,
)
from codebase_migrator.parser.grammar import (
    parse_expression,
    parse_repository_expression,
    parse_term,
    tokenize,
)
from codebase_migrator.parser.types import Operator, Term


class TestRoundTrip:
    """Printing a parsed expression reproduces the input."""

    @pytest.mark.parametrize(
        "text",
        [
            "internal",
            "internal(revision=45)",
            "foo>public",
            "foo>public|bar(option=x)",
            'internal(revision="3,4,5")',
            "a(k=v,k2=v2)|b>c|d(x=1)",
            "file(path=/tmp/some-dir/src,projectspace=internal)",
            'notice(text="Apache 2.0")',
            'x(msg="say \\"hi\\" \\\\o/")',
            'x(empty="")',
        ],
    )
    def test_print_round_trip(self, text):
        assert str(parse_expression(text)) == text

    @pytest.mark.parametrize(
        "text",
        ["foo > public", " foo", "foo ", "foo( a=1)", "foo(a =1)", "foo(a=1 )"],
    )
    def test_whitespace_between_tokens_rejected(self, text):
        with pytest.raises(InvalidExpressionSyntax, match="Unexpected whitespace"):
            parse_expression(text)

    def test_redundant_quotes_rejected(self):
        with pytest.raises(InvalidExpressionSyntax, match="Redundant quotes around 'x'"):
            parse_expression('foo(a="x")')

    def test_unknown_escape_rejected(self):
        with pytest.raises(InvalidExpressionSyntax, match="Invalid escape"):
            parse_expression('foo(a="x\\n y")')

    def test_whitespace_inside_quotes_kept(self):
        root, _ = tokenize('foo(a="x y")')
        assert root.options == {"a": "x y"}


class TestTokenize:
    """tokenize() splits into a root term and operations."""

    def test_root_and_operations(self):
        root, operations = tokenize("foo>public|bar(option=x)")
        assert root == Term(identifier="foo")
        assert [op.operator for op in operations] == [Operator.TRANSLATE, Operator.EDIT]
        assert operations[1].term == Term(identifier="bar", options={"option": "x"})

    def test_quoted_value_unescaped(self):
        root, _ = tokenize('x(msg="a \\"b\\" c")')
        assert root.options == {"msg": 'a "b" c'}

    def test_quoted_value_may_hold_operators(self):
        root, operations = tokenize('x(sep="|>")')
        assert root.options == {"sep": "|>"}
        assert operations == []


class TestParseExpression:
    """parse_expression() builds the right node chain."""

    def test_root_only(self):
        expr = parse_expression("internal(revision=45)")
        assert isinstance(expr, RootExpression)
        assert expr.repository_name == "internal"
        assert expr.option("revision") == "45"

    def test_chain_node_types(self):
        expr = parse_expression("foo>public|bar")
        assert isinstance(expr, EditExpression)
        assert isinstance(expr.parent, TranslateExpression)
        assert isinstance(expr.parent.parent, RootExpression)

    def test_parsed_equals_built(self):
        built = RootExpression(Term(identifier="foo")).translate_to(
            Term(identifier="public")
        ).edit(Term(identifier="bar"))
        assert parse_expression("foo>public|bar") == built


class TestSyntaxErrors:
    """Malformed input raises InvalidExpressionSyntax naming the problem."""

    def test_invalid_operator_named(self):
        with pytest.raises(InvalidExpressionSyntax, match=r"Invalid operator: \+"):
            parse_expression("foo+bar")

    def test_empty_expression(self):
        with pytest.raises(InvalidExpressionSyntax, match="Empty expression"):
            parse_expression("   ")

    def test_duplicate_option_key(self):
        with pytest.raises(InvalidExpressionSyntax, match="Duplicate option 'a'"):
            parse_expression("foo(a=1,a=2)")

    def test_unterminated_quote(self):
        with pytest.raises(InvalidExpressionSyntax, match="Unterminated quoted value"):
            parse_expression('foo(a="x')

    def test_missing_close_paren(self):
        with pytest.raises(InvalidExpressionSyntax, match=r"Expected '\)' but found end of input"):
            parse_expression("foo(a=1")

    def test_dangling_operator(self):
        with pytest.raises(InvalidExpressionSyntax, match="Expected identifier but found end of input"):
            parse_expression("foo>")

    def test_leading_operator(self):
        with pytest.raises(InvalidExpressionSyntax, match=r"Expected identifier but found '\|'"):
            parse_expression("|foo")

    def test_empty_option_list(self):
        with pytest.raises(InvalidExpressionSyntax, match="Expected option key"):
            parse_expression("foo()")

    def test_error_carries_position(self):
        with pytest.raises(InvalidExpressionSyntax) as exc_info:
            parse_expression("foo+bar")
        assert exc_info.value.context["position"] == 3


class TestParseTerm:
    """Single-term parsing helpers."""

    def test_parse_term(self):
        assert parse_term("internal(revision=45)") == Term(
            identifier="internal", options={"revision": "45"}
        )

    def test_parse_term_rejects_operations(self):
        with pytest.raises(InvalidExpressionSyntax, match="Expected a single term"):
            parse_term("internal>public")

    def test_parse_repository_expression(self):
        expr = parse_repository_expression("internal(revision=45)")
        assert isinstance(expr, RootExpression)
        assert str(expr) == "internal(revision=45)"
