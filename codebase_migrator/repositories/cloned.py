"""Clone-backed backends: how a VCS backend shares (and refuses to share) working copies.

RevisionHistory and CodebaseCreator only read from their clone, so every
repository definition gets one memoized, lazily cloned working copy that
lives for the whole run. Writers mutate their working tree, so each
WriterCreator call clones a fresh, task-scoped copy that nothing else
ever sees. Concrete backends supply the clone command and the three
collaborators; this module supplies the wiring.
"""

from __future__ import annotations

import functools
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from codebase_migrator.codebase.filesystem import Filesystem, Lifetime
from codebase_migrator.errors import ConfigurationError
from codebase_migrator.repositories.types import (
    CodebaseCreator,
    RepositoryFactory,
    RepositoryType,
    RevisionHistory,
    WriterCreator,
)

if TYPE_CHECKING:
    from codebase_migrator.project.config import RepositoryConfig

logger = logging.getLogger(__name__)

CloneSupplier = Callable[[], "ClonedRepository"]


class ClonedRepository(ABC):
    """A local working copy of one configured repository.

    A working copy is cloned at most once; a second
    ``clone_locally_at_head`` raises RuntimeError.
    """

    def __init__(self, name: str, config: RepositoryConfig, filesystem: Filesystem) -> None:
        self.name = name
        self.config = config
        self._filesystem = filesystem
        self._local_path: Path | None = None

    @property
    def backend_type(self) -> str:
        return self.config.type

    @property
    def local_path(self) -> Path:
        if self._local_path is None:
            raise RuntimeError(f"Repository {self.name} has not been cloned yet")
        return self._local_path

    @property
    def is_cloned(self) -> bool:
        return self._local_path is not None

    def clone_locally_at_head(self, lifetime: Lifetime) -> None:
        if self._local_path is not None:
            raise RuntimeError(
                f"Repository {self.name} is already cloned at {self._local_path}"
            )
        target = self._filesystem.temporary_directory(
            f"{self.backend_type}_clone_{self.name}_", lifetime
        )
        self._clone_into(target)
        self._local_path = target

    @abstractmethod
    def _clone_into(self, target: Path) -> None:
        """Populate ``target`` with a checkout of the configured branch head.

        Raises:
            CommandExecutionFailure: if the clone command exits non-zero.
        """


class ClonedRepositoryFactory(RepositoryFactory):
    """Base for backends that work from local clones.

    Subclasses build the clone and the three collaborators; ``create``
    hands read-only collaborators the shared supplier and the writer
    creator the fresh one.
    """

    def __init__(self, filesystem: Filesystem) -> None:
        self._filesystem = filesystem

    @abstractmethod
    def make_clone(self, name: str, config: RepositoryConfig) -> ClonedRepository:
        """Return an un-cloned working copy object."""

    @abstractmethod
    def make_revision_history(
        self, name: str, config: RepositoryConfig, shared: CloneSupplier
    ) -> RevisionHistory: ...

    @abstractmethod
    def make_codebase_creator(
        self,
        name: str,
        config: RepositoryConfig,
        shared: CloneSupplier,
        revision_history: RevisionHistory,
    ) -> CodebaseCreator: ...

    @abstractmethod
    def make_writer_creator(
        self,
        name: str,
        config: RepositoryConfig,
        fresh: CloneSupplier,
        revision_history: RevisionHistory,
    ) -> WriterCreator: ...

    def create(self, name: str, config: RepositoryConfig) -> RepositoryType:
        if not config.url:
            raise ConfigurationError(
                f'{self.type.capitalize()} repository config missing "url".',
                context={"repository": name},
            )

        def fresh() -> ClonedRepository:
            clone = self.make_clone(name, config)
            clone.clone_locally_at_head(Lifetime.CURRENT_TASK)
            logger.debug("Cloned fresh writer copy of %s at %s", name, clone.local_path)
            return clone

        @functools.cache
        def shared() -> ClonedRepository:
            clone = self.make_clone(name, config)
            clone.clone_locally_at_head(Lifetime.RUN)
            logger.info("Cloned read-only copy of %s at %s", name, clone.local_path)
            return clone

        revision_history = self.make_revision_history(name, config, shared)
        return RepositoryType(
            name=name,
            revision_history=revision_history,
            codebase_creator=self.make_codebase_creator(name, config, shared, revision_history),
            writer_creator=self.make_writer_creator(name, config, fresh, revision_history),
        )
