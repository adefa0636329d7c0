"""Project context: the read-only view of repositories, editors and translators for one run.

Expressions are evaluated against a ProjectContext. It is assembled once
from a ProjectConfig and then only read.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType

from codebase_migrator.codebase.filesystem import Filesystem
from codebase_migrator.errors import ConfigurationError
from codebase_migrator.project.config import EditorConfig, ProjectConfig
from codebase_migrator.repositories.file_repository import (
    FILE_REPOSITORY_NAME,
    file_repository,
)
from codebase_migrator.repositories.registry import Repositories
from codebase_migrator.repositories.types import RepositoryType
from codebase_migrator.translation.editors import Editor
from codebase_migrator.translation.translators import (
    Translator,
    TranslatorPath,
    TranslatorStep,
)

logger = logging.getLogger(__name__)

EditorFactory = Callable[[str, EditorConfig], Editor]


class ProjectContext:
    """Repositories, editors and translators available during one run.

    ``repositories()`` holds the declared repositories only. The virtual
    ``file`` repository is always resolvable through ``repository()`` and
    cannot be shadowed by a declared one.
    """

    def __init__(
        self,
        repositories: Mapping[str, RepositoryType] | None = None,
        editors: Mapping[str, Editor] | None = None,
        translators: Mapping[TranslatorPath, Translator] | None = None,
        filesystem: Filesystem | None = None,
        config: ProjectConfig | None = None,
    ) -> None:
        declared = dict(repositories or {})
        if FILE_REPOSITORY_NAME in declared:
            raise ConfigurationError(
                f'Invalid repository name (reserved keyword): "{FILE_REPOSITORY_NAME}"'
            )
        self._filesystem = filesystem if filesystem is not None else Filesystem()
        self._builtin = {FILE_REPOSITORY_NAME: file_repository(self._filesystem)}
        self._repositories = MappingProxyType(declared)
        self._editors = MappingProxyType(dict(editors or {}))
        self._translators = MappingProxyType(dict(translators or {}))
        self._config = config

    @property
    def filesystem(self) -> Filesystem:
        return self._filesystem

    @property
    def config(self) -> ProjectConfig | None:
        return self._config

    def repositories(self) -> Mapping[str, RepositoryType]:
        return self._repositories

    def editors(self) -> Mapping[str, Editor]:
        return self._editors

    def translators(self) -> Mapping[TranslatorPath, Translator]:
        return self._translators

    def repository(self, name: str) -> RepositoryType:
        """Resolve a repository by name, built-ins first.

        Raises:
            ConfigurationError: listing the declared names if ``name`` is unknown.
        """
        if name in self._builtin:
            return self._builtin[name]
        if name not in self._repositories:
            found = ", ".join(sorted(self._repositories))
            raise ConfigurationError(
                f"No such repository '{name}' in the config. Found: [{found}]",
                context={"repository": name},
            )
        return self._repositories[name]


def _make_editor(
    name: str, config: EditorConfig, editor_factories: Mapping[str, EditorFactory]
) -> Editor:
    factory = editor_factories.get(config.type)
    if factory is None:
        raise ConfigurationError(
            f'Invalid editor type: "{config.type}"',
            context={"editor": name, "type": config.type},
        )
    return factory(name, config)


def build_project_context(
    config: ProjectConfig,
    registry: Repositories,
    editor_factories: Mapping[str, EditorFactory],
    filesystem: Filesystem | None = None,
) -> ProjectContext:
    """Wire every declared repository, editor and translator of ``config``.

    Args:
        config: Validated project configuration.
        registry: Aggregate repository factory for this run.
        editor_factories: Editor type → callable building an Editor from
                          its name and config.
        filesystem: Working-copy allocator shared by built-in repositories.
    """
    repositories = {
        name: registry.create(name, repository_config)
        for name, repository_config in config.repositories.items()
    }

    editors = {
        name: _make_editor(name, editor_config, editor_factories)
        for name, editor_config in config.editors.items()
    }

    translators: dict[TranslatorPath, Translator] = {}
    for translator_config in config.translators:
        path = TranslatorPath(
            from_project_space=translator_config.from_project_space,
            to_project_space=translator_config.to_project_space,
        )
        if path in translators:
            raise ConfigurationError(
                f"Translator {path} declared twice", context={"path": str(path)}
            )
        translators[path] = Translator(
            steps=[
                TranslatorStep(
                    name=step.name,
                    editor=_make_editor(step.name, step.editor, editor_factories),
                )
                for step in translator_config.steps
            ]
        )

    logger.info(
        "Built project context for %s: %d repositories, %d editors, %d translators",
        config.name,
        len(repositories),
        len(editors),
        len(translators),
    )
    return ProjectContext(
        repositories=repositories,
        editors=editors,
        translators=translators,
        filesystem=filesystem,
        config=config,
    )
