"""The ``noop`` backend: a repository with no content and writers that commit nothing.

Useful for dry runs and for projects that only ever read from one side.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from codebase_migrator.codebase.codebase import Codebase
from codebase_migrator.codebase.filesystem import Filesystem, Lifetime
from codebase_migrator.parser.expression import RootExpression
from codebase_migrator.parser.types import Term
from codebase_migrator.repositories.types import (
    CodebaseCreator,
    DraftRevision,
    RepositoryFactory,
    RepositoryType,
    Revision,
    RevisionHistory,
    Writer,
    WriterCreator,
)

if TYPE_CHECKING:
    from codebase_migrator.project.config import RepositoryConfig

HEAD_REVISION = "1"


class NoopRevisionHistory(RevisionHistory):
    def __init__(self, repository_name: str) -> None:
        self._repository_name = repository_name

    def find_highest_revision(self, rev_id: str | None) -> Revision:
        return Revision.create(rev_id or HEAD_REVISION, self._repository_name)


class NoopCodebaseCreator(CodebaseCreator):
    """Creates empty Codebases in the repository's project space."""

    def __init__(self, name: str, project_space: str, filesystem: Filesystem) -> None:
        self._name = name
        self._project_space = project_space
        self._filesystem = filesystem

    def create(self, options: dict[str, str]) -> Codebase:
        path = self._filesystem.temporary_directory(
            f"noop_{self._name}_", Lifetime.CURRENT_TASK
        )
        expression = RootExpression(Term(identifier=self._name, options=options))
        return Codebase(path, self._project_space, expression)


class NoopWriter(Writer):
    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def put_codebase(self, codebase: Codebase, description: str | None = None) -> DraftRevision:
        return DraftRevision(location=str(self._root))


class NoopWriterCreator(WriterCreator):
    def __init__(self, name: str, filesystem: Filesystem) -> None:
        self._name = name
        self._filesystem = filesystem

    def create(self, options: dict[str, str]) -> Writer:
        return NoopWriter(
            self._filesystem.temporary_directory(
                f"noop_writer_{self._name}_", Lifetime.CURRENT_TASK
            )
        )


class NoopRepositoryFactory(RepositoryFactory):
    def __init__(self, filesystem: Filesystem) -> None:
        self._filesystem = filesystem

    @property
    def type(self) -> str:
        return "noop"

    def create(self, name: str, config: RepositoryConfig) -> RepositoryType:
        return RepositoryType(
            name=name,
            revision_history=NoopRevisionHistory(name),
            codebase_creator=NoopCodebaseCreator(name, config.project_space, self._filesystem),
            writer_creator=NoopWriterCreator(name, self._filesystem),
        )
