"""Repository registry: one aggregate factory over every backend type.

Built once per run from the available backend factories and passed
explicitly to whatever assembles the project context.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from codebase_migrator.codebase.filesystem import Filesystem
from codebase_migrator.errors import ConfigurationError
from codebase_migrator.repositories.file_repository import FILE_REPOSITORY_NAME
from codebase_migrator.repositories.noop import NoopRepositoryFactory
from codebase_migrator.repositories.types import RepositoryFactory, RepositoryType

if TYPE_CHECKING:
    from codebase_migrator.project.config import RepositoryConfig

logger = logging.getLogger(__name__)


class Repositories(RepositoryFactory):
    """Dispatches ``create`` to the factory registered for ``config.type``."""

    def __init__(self, factories: Iterable[RepositoryFactory]) -> None:
        self._factories: dict[str, RepositoryFactory] = {}
        for factory in factories:
            if factory.type in self._factories:
                raise ConfigurationError(
                    f'Repository type "{factory.type}" registered twice',
                    context={"type": factory.type},
                )
            self._factories[factory.type] = factory

    @property
    def type(self) -> str:
        return "aggregate"

    def types(self) -> list[str]:
        return sorted(self._factories)

    def create(self, name: str, config: RepositoryConfig) -> RepositoryType:
        """Create the repository ``name``.

        Raises:
            ConfigurationError: for the reserved name ``file`` or an
                unknown backend type.
        """
        if name == FILE_REPOSITORY_NAME:
            raise ConfigurationError(
                f'Invalid repository name (reserved keyword): "{name}"',
                context={"repository": name},
            )
        factory = self._factories.get(config.type)
        if factory is None:
            raise ConfigurationError(
                f'Invalid repository type: "{config.type}"',
                context={"repository": name, "type": config.type},
            )
        logger.info("Registering %s repository %s", config.type, name)
        return factory.create(name, config)


def default_repositories(
    filesystem: Filesystem, extra: Iterable[RepositoryFactory] = ()
) -> Repositories:
    """Registry holding the built-in ``noop`` backend plus any ``extra`` backends."""
    return Repositories([NoopRepositoryFactory(filesystem), *extra])
