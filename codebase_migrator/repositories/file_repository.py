"""The virtual ``file`` repository: Codebases copied from a local path.

``file(path=/some/dir)`` copies ``path`` into a fresh task-scoped working
copy. The result is in project space ``public`` unless the term sets
``projectspace``. The name is reserved: it is always available and no
configured repository may use it.
"""

from __future__ import annotations

from pathlib import Path

from codebase_migrator.codebase.codebase import Codebase
from codebase_migrator.codebase.filesystem import Filesystem, Lifetime
from codebase_migrator.errors import CodebaseCreationError, ConfigurationError
from codebase_migrator.parser.expression import RootExpression
from codebase_migrator.parser.types import Term
from codebase_migrator.repositories.types import (
    CodebaseCreator,
    RepositoryType,
    Revision,
    RevisionHistory,
    Writer,
    WriterCreator,
    check_option_keys,
)

FILE_REPOSITORY_NAME = "file"

DEFAULT_PROJECT_SPACE = "public"


class FileCodebaseCreator(CodebaseCreator):
    """Copies a local file or directory into a new Codebase."""

    def __init__(self, filesystem: Filesystem) -> None:
        self._filesystem = filesystem

    def create(self, options: dict[str, str]) -> Codebase:
        check_option_keys(options, ("path", "projectspace"), FILE_REPOSITORY_NAME)
        source = options.get("path")
        if not source:
            raise CodebaseCreationError(
                "Please specify a path option, e.g. file(path=/path/to/codebase)"
            )
        source_path = Path(source)
        if not source_path.exists():
            raise CodebaseCreationError(
                f"File Codebase Creator: {source} does not exist",
                context={"path": source},
            )

        copy_location = self._filesystem.temporary_directory(
            "file_codebase_copy_", Lifetime.CURRENT_TASK
        )
        self._filesystem.copy_tree(source_path, copy_location)
        project_space = options.get("projectspace", DEFAULT_PROJECT_SPACE)
        expression = RootExpression(Term(identifier=FILE_REPOSITORY_NAME, options=options))
        return Codebase(copy_location, project_space, expression)


class _NoRevisionHistory(RevisionHistory):
    def find_highest_revision(self, rev_id: str | None) -> Revision:
        raise ConfigurationError(
            f"Repository '{FILE_REPOSITORY_NAME}' has no revision history"
        )


class _NoWriterCreator(WriterCreator):
    def create(self, options: dict[str, str]) -> Writer:
        raise ConfigurationError(
            f"Repository '{FILE_REPOSITORY_NAME}' cannot be written to"
        )


def file_repository(filesystem: Filesystem) -> RepositoryType:
    """The always-present ``file`` repository, bound to ``filesystem``."""
    return RepositoryType(
        name=FILE_REPOSITORY_NAME,
        revision_history=_NoRevisionHistory(),
        codebase_creator=FileCodebaseCreator(filesystem),
        writer_creator=_NoWriterCreator(),
    )
