"""Repository abstraction: revisions and the backend collaborator interfaces.

A RepositoryType bundles the three faces of one declared repository:
a RevisionHistory (read-only traversal), a CodebaseCreator
(materializes Codebases), and a WriterCreator (hands out Writers that
commit Codebases back). Backends implement these behind a
RepositoryFactory keyed by a type string.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from codebase_migrator.errors import CodebaseCreationError, ConfigurationError

if TYPE_CHECKING:
    from codebase_migrator.codebase.codebase import Codebase
    from codebase_migrator.parser.expression import RootExpression
    from codebase_migrator.project.config import RepositoryConfig
    from codebase_migrator.project.context import ProjectContext


# ---------------------------------------------------------------------------
# Revisions
# ---------------------------------------------------------------------------


class Revision(BaseModel):
    """A revision id within a named repository, printed as ``name{id}``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    rev_id: str = Field(alias="revId")
    repository_name: str = Field(alias="repositoryName")

    @classmethod
    def create(cls, rev_id: int | str, repository_name: str) -> Revision:
        return cls(rev_id=str(rev_id), repository_name=repository_name)

    def __str__(self) -> str:
        return f"{self.repository_name}{{{self.rev_id}}}"


class DraftRevision(BaseModel):
    """A change staged by a Writer but not yet submitted."""

    model_config = ConfigDict(frozen=True)

    location: str


# ---------------------------------------------------------------------------
# Collaborator interfaces
# ---------------------------------------------------------------------------


class RevisionHistory(ABC):
    """Read-only traversal over one repository's revisions."""

    @abstractmethod
    def find_highest_revision(self, rev_id: str | None) -> Revision:
        """Resolve ``rev_id`` (or the head, when None) to a Revision."""


class CodebaseCreator(ABC):
    """Materializes Codebases of one repository."""

    @abstractmethod
    def create(self, options: dict[str, str]) -> Codebase:
        """Create a Codebase from the options of a repository term."""


class Writer(ABC):
    """Writes Codebases into its own, unshared working copy."""

    @property
    @abstractmethod
    def root(self) -> Path:
        """Directory of this writer's working copy."""

    @abstractmethod
    def put_codebase(self, codebase: Codebase, description: str | None = None) -> DraftRevision:
        """Make the working copy match ``codebase`` and stage the change."""


class WriterCreator(ABC):
    """Creates Writers. Every call must return a writer over a fresh working copy."""

    @abstractmethod
    def create(self, options: dict[str, str]) -> Writer:
        """Create a Writer from the options of a repository term."""


class RepositoryType(BaseModel):
    """One fully wired repository definition."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    revision_history: RevisionHistory
    codebase_creator: CodebaseCreator
    writer_creator: WriterCreator


class RepositoryFactory(ABC):
    """Builds RepositoryTypes for one backend type (``"hg"``, ``"noop"``, ...)."""

    @property
    @abstractmethod
    def type(self) -> str:
        """Backend type string matched against ``RepositoryConfig.type``."""

    @abstractmethod
    def create(self, name: str, config: RepositoryConfig) -> RepositoryType:
        """Wire a repository named ``name`` from its configuration."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def check_option_keys(options: dict[str, str], allowed: Iterable[str], owner: str) -> None:
    """Raise CodebaseCreationError if ``options`` holds keys outside ``allowed``."""
    allowed_set = set(allowed)
    unexpected = sorted(set(options) - allowed_set)
    if unexpected:
        raise CodebaseCreationError(
            f"Options for {owner} contained unexpected keys {unexpected}; "
            f"allowed keys are {sorted(allowed_set)}",
            context={"owner": owner, "unexpected": unexpected},
        )


def revisions_from_repository_expression(
    expression: RootExpression, context: ProjectContext
) -> list[Revision]:
    """Resolve ``internal(revision="3,4,5")`` into one Revision per listed id."""
    repository = context.repository(expression.repository_name)
    revision_option = expression.option("revision")
    if not revision_option:
        raise ConfigurationError(
            "Repository expression must have a 'revision' option, "
            'e.g. internal(revision="3,4,5").',
            context={"expression": str(expression)},
        )
    history = repository.revision_history
    return [
        history.find_highest_revision(rev_id.strip())
        for rev_id in revision_option.split(",")
    ]
