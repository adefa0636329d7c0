"""Repository abstraction: revisions, backend interfaces, and the registry."""

from codebase_migrator.repositories.cloned import ClonedRepository, ClonedRepositoryFactory
from codebase_migrator.repositories.file_repository import (
    FILE_REPOSITORY_NAME,
    FileCodebaseCreator,
    file_repository,
)
from codebase_migrator.repositories.noop import NoopRepositoryFactory
from codebase_migrator.repositories.registry import Repositories, default_repositories
from codebase_migrator.repositories.types import (
    CodebaseCreator,
    DraftRevision,
    RepositoryFactory,
    RepositoryType,
    Revision,
    RevisionHistory,
    Writer,
    WriterCreator,
    check_option_keys,
    revisions_from_repository_expression,
)

__all__ = [
    # types
    "CodebaseCreator",
    "DraftRevision",
    "RepositoryFactory",
    "RepositoryType",
    "Revision",
    "RevisionHistory",
    "Writer",
    "WriterCreator",
    "check_option_keys",
    "revisions_from_repository_expression",
    # backends
    "ClonedRepository",
    "ClonedRepositoryFactory",
    "FILE_REPOSITORY_NAME",
    "FileCodebaseCreator",
    "NoopRepositoryFactory",
    "file_repository",
    # registry
    "Repositories",
    "default_repositories",
]
