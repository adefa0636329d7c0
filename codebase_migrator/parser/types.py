"""Parser value types: Term, Operator, and Operation.

A Term is a named reference plus ordered key-value options, printed as
``name(k=v,k2=v2)``. Operators connect terms into pipelines: ``|`` edits,
``>`` translates. Equality is structural over a canonical (order-free)
view of the options; printing keeps the caller's insertion order.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator

from codebase_migrator.errors import InvalidExpressionSyntax

# ---------------------------------------------------------------------------
# Lexical classes (shared with the grammar)
# ---------------------------------------------------------------------------

WORD_PATTERN = re.compile(r"[A-Za-z0-9_.\-/:@~]+")

OPERATOR_CHARS = frozenset("|>")


def _quote(value: str) -> str:
    """Print an option value, quoting it only when a bare word would not parse back."""
    if WORD_PATTERN.fullmatch(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class Operator(str, Enum):
    """Pipeline connectors between terms."""

    EDIT = "|"
    TRANSLATE = ">"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_char(cls, char: str) -> Operator:
        """Return the operator printed as ``char``.

        Raises:
            InvalidExpressionSyntax: if ``char`` is not an operator.
        """
        for op in cls:
            if op.value == char:
                return op
        raise InvalidExpressionSyntax(f"Invalid operator: {char}", context={"char": char})


class Term(BaseModel):
    """A named reference with options, e.g. ``internal(revision=45)``.

    ``options`` is a read-only mapping; use ``with_option`` to derive a new Term.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str
    options: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("identifier")
    @classmethod
    def identifier_is_word(cls, v: str) -> str:
        if not v:
            raise ValueError("identifier must not be empty")
        if not WORD_PATTERN.fullmatch(v):
            raise ValueError(f"identifier {v!r} contains reserved characters")
        return v

    @field_validator("options")
    @classmethod
    def option_keys_are_words(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        for key in v:
            if not WORD_PATTERN.fullmatch(key):
                raise ValueError(f"option key {key!r} is not a valid word")
        return MappingProxyType(dict(v))

    def with_option(self, key: str, value: str) -> Term:
        """Return a copy of this term with one option set."""
        return self.with_options({key: value})

    def with_options(self, options: Mapping[str, str]) -> Term:
        """Return a copy of this term with ``options`` merged over its own."""
        return Term(identifier=self.identifier, options={**self.options, **options})

    def __str__(self) -> str:
        if not self.options:
            return self.identifier
        rendered = ",".join(f"{k}={_quote(v)}" for k, v in self.options.items())
        return f"{self.identifier}({rendered})"

    def __hash__(self) -> int:
        return hash((self.identifier, frozenset(self.options.items())))


class Operation(BaseModel):
    """An operator applied to a term: ``>public`` or ``|renamer(file=x)``."""

    model_config = ConfigDict(frozen=True)

    operator: Operator
    term: Term

    def __str__(self) -> str:
        return f"{self.operator}{self.term}"

    def __hash__(self) -> int:
        return hash((self.operator, self.term))
