"""Expression grammar: split an expression string into a root term and operations.

Grammar::

    expression := term operation*
    term       := identifier [ '(' kv-list ')' ]
    operation  := operator term
    operator   := '|' | '>'
    kv-list    := kv (',' kv)*
    kv         := key '=' value

Identifiers, keys and bare values are words (letters, digits and
``_ . - / : @ ~``). A value may also be a double-quoted string with
``\\"`` and ``\\\\`` escapes, which is how values holding commas, spaces
or operator characters are written.

Only canonical text is accepted: no whitespace outside quoted values and
no quotes around a value that is already a word. Every accepted string
therefore prints back unchanged. Parsing is pure: no I/O, no side effects.
"""

from __future__ import annotations

from pydantic import ValidationError

from codebase_migrator.errors import InvalidExpressionSyntax
from codebase_migrator.parser.expression import (
    EditExpression,
    Expression,
    RootExpression,
    TranslateExpression,
)
from codebase_migrator.parser.types import (
    OPERATOR_CHARS,
    WORD_PATTERN,
    Operation,
    Operator,
    Term,
)


class _Scanner:
    """Cursor over an expression string."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        if self.pos >= len(self.text):
            return ""
        char = self.text[self.pos]
        if char.isspace():
            raise self.fail("Unexpected whitespace")
        return char

    def fail(self, message: str) -> InvalidExpressionSyntax:
        return InvalidExpressionSyntax(
            f"{message} at position {self.pos} in {self.text!r}",
            context={"expression": self.text, "position": self.pos},
        )

    def expect(self, char: str) -> None:
        found = self.peek()
        if found != char:
            raise self.fail(
                f"Expected {char!r} but found {repr(found) if found else 'end of input'}"
            )
        self.pos += 1

    def word(self, what: str) -> str:
        match = WORD_PATTERN.match(self.text, self.pos)
        if match is None:
            found = self.peek()
            raise self.fail(
                f"Expected {what} but found {repr(found) if found else 'end of input'}"
            )
        self.pos = match.end()
        return match.group()

    def quoted(self) -> str:
        start = self.pos
        self.expect('"')
        chars: list[str] = []
        while self.pos < len(self.text):
            char = self.text[self.pos]
            self.pos += 1
            if char == "\\":
                if self.pos >= len(self.text) or self.text[self.pos] not in '"\\':
                    raise self.fail("Invalid escape in quoted value")
                chars.append(self.text[self.pos])
                self.pos += 1
            elif char == '"':
                value = "".join(chars)
                if WORD_PATTERN.fullmatch(value):
                    self.pos = start
                    raise self.fail(f"Redundant quotes around {value!r}")
                return value
            else:
                chars.append(char)
        raise self.fail("Unterminated quoted value")

    def value(self) -> str:
        return self.quoted() if self.peek() == '"' else self.word("option value")


# ---------------------------------------------------------------------------
# Term and operation parsing
# ---------------------------------------------------------------------------


def _parse_term(scanner: _Scanner) -> Term:
    identifier = scanner.word("identifier")
    options: dict[str, str] = {}

    if scanner.peek() == "(":
        scanner.expect("(")
        while True:
            key = scanner.word("option key")
            if key in options:
                raise scanner.fail(f"Duplicate option {key!r} in term {identifier!r}")
            scanner.expect("=")
            options[key] = scanner.value()
            if scanner.peek() == ",":
                scanner.expect(",")
                continue
            scanner.expect(")")
            break

    try:
        return Term(identifier=identifier, options=options)
    except ValidationError as e:
        raise scanner.fail(f"Invalid term {identifier!r}: {e.errors()[0]['msg']}") from e


def _parse_operator(scanner: _Scanner) -> Operator:
    char = scanner.peek()
    if char not in OPERATOR_CHARS:
        raise InvalidExpressionSyntax(
            f"Invalid operator: {char} at position {scanner.pos} in {scanner.text!r}",
            context={"expression": scanner.text, "position": scanner.pos, "char": char},
        )
    scanner.pos += 1
    return Operator.from_char(char)


def tokenize(text: str) -> tuple[Term, list[Operation]]:
    """Split an expression into its root term and the chain of operations after it.

    Raises:
        InvalidExpressionSyntax: naming the offending token and position.
    """
    scanner = _Scanner(text)
    if not text.strip():
        raise scanner.fail("Empty expression")

    root = _parse_term(scanner)
    operations: list[Operation] = []
    while not scanner.at_end():
        operator = _parse_operator(scanner)
        operations.append(Operation(operator=operator, term=_parse_term(scanner)))
    return root, operations


def parse_term(text: str) -> Term:
    """Parse a single term; anything after it is a syntax error."""
    root, operations = tokenize(text)
    if operations:
        raise InvalidExpressionSyntax(
            f"Expected a single term but found operation {operations[0]} in {text!r}",
            context={"expression": text},
        )
    return root


# ---------------------------------------------------------------------------
# Expression chains
# ---------------------------------------------------------------------------


def parse_expression(text: str) -> Expression:
    """Parse an expression string such as ``internal>public|renamer``.

    ``str(parse_expression(s)) == s`` for every ``s`` that parses.
    """
    root, operations = tokenize(text)
    expression: Expression = RootExpression(root)
    for operation in operations:
        if operation.operator is Operator.EDIT:
            expression = EditExpression(expression, operation)
        else:
            expression = TranslateExpression(expression, operation)
    return expression


def parse_repository_expression(text: str) -> RootExpression:
    """Parse a bare repository reference such as ``internal(revision=45)``."""
    return RootExpression(parse_term(text))
