"""Expression AST: immutable chains that lazily materialize a Codebase.

An expression is a root repository reference followed by any number of
edit (``|``) and translate (``>``) steps. Each node resolves its parent
first and then applies its own step, so evaluation is top-down while
resolution runs bottom-up. Nodes are never mutated; helpers such as
``edit`` and ``translate_to`` return new chains.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from codebase_migrator.errors import CodebaseCreationError
from codebase_migrator.parser.types import Operation, Operator, Term
from codebase_migrator.translation.translators import TranslatorPath

if TYPE_CHECKING:
    from codebase_migrator.codebase.codebase import Codebase
    from codebase_migrator.project.context import ProjectContext

logger = logging.getLogger(__name__)


class Expression(ABC):
    """Base class for all expression nodes."""

    @abstractmethod
    def create_codebase(self, context: ProjectContext) -> Codebase:
        """Evaluate this expression against ``context``."""

    @abstractmethod
    def _key(self) -> tuple:
        """Structural identity used for equality and hashing."""

    def edit(self, term: Term) -> EditExpression:
        """Return this expression followed by ``|term``."""
        return EditExpression(self, Operation(operator=Operator.EDIT, term=term))

    def translate_to(self, term: Term) -> TranslateExpression:
        """Return this expression followed by ``>term``."""
        return TranslateExpression(self, Operation(operator=Operator.TRANSLATE, term=term))

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._key()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


class RootExpression(Expression):
    """A repository reference such as ``internal(revision=45)``.

    The identifier is resolved through the project context, which
    always knows the virtual ``file`` repository in addition to the
    declared ones.
    """

    def __init__(self, term: Term) -> None:
        self.term = term

    @property
    def repository_name(self) -> str:
        return self.term.identifier

    def option(self, key: str) -> str | None:
        return self.term.options.get(key)

    def with_option(self, key: str, value: str) -> RootExpression:
        return RootExpression(self.term.with_option(key, value))

    def with_options(self, options: dict[str, str]) -> RootExpression:
        return RootExpression(self.term.with_options(options))

    def create_codebase(self, context: ProjectContext) -> Codebase:
        repository = context.repository(self.term.identifier)
        logger.debug("Creating codebase from %s", self)
        return repository.codebase_creator.create(dict(self.term.options))

    def _key(self) -> tuple:
        return (self.term,)

    def __str__(self) -> str:
        return str(self.term)


class _StepExpression(Expression):
    """An operation applied on top of a parent expression."""

    operator: Operator

    def __init__(self, parent: Expression, operation: Operation) -> None:
        if operation.operator is not self.operator:
            raise ValueError(
                f"{type(self).__name__} requires operator {self.operator!s}, "
                f"got {operation.operator!s}"
            )
        self.parent = parent
        self.operation = operation

    @property
    def term(self) -> Term:
        return self.operation.term

    def _key(self) -> tuple:
        return (self.parent, self.operation)

    def __str__(self) -> str:
        return f"{self.parent}{self.operation}"


class EditExpression(_StepExpression):
    """Apply a named editor: ``parent|editor(opts)``."""

    operator = Operator.EDIT

    def create_codebase(self, context: ProjectContext) -> Codebase:
        source = self.parent.create_codebase(context)
        editor_name = self.term.identifier
        editor = context.editors().get(editor_name)
        if editor is None:
            raise CodebaseCreationError(
                f"no editor {editor_name}", context={"editor": editor_name}
            )
        logger.debug("Editing %s with %s", self.parent, editor_name)
        edited = editor.edit(source, context, dict(self.term.options))
        return edited.copy_with_expression(self)


class TranslateExpression(_StepExpression):
    """Translate into another project space: ``parent>space(opts)``."""

    operator = Operator.TRANSLATE

    def create_codebase(self, context: ProjectContext) -> Codebase:
        source = self.parent.create_codebase(context)
        from_space = source.project_space
        to_space = self.term.identifier
        translators = context.translators()
        translator = translators.get(
            TranslatorPath(from_project_space=from_space, to_project_space=to_space)
        )
        if translator is None:
            available = ", ".join(str(path) for path in translators)
            raise CodebaseCreationError(
                f'Could not find translator from project space "{from_space}" '
                f'to "{to_space}".\n'
                f"Translators only available for [{available}]",
                context={"from_project_space": from_space, "to_project_space": to_space},
            )
        logger.debug("Translating %s from %s to %s", self.parent, from_space, to_space)
        translated = translator.translate(source, context, dict(self.term.options))
        return translated.copy_with_project_space(to_space).copy_with_expression(self)
