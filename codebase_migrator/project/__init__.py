"""Project configuration and the per-run project context."""

from codebase_migrator.project.config import (
    EditorConfig,
    MetadataScrubberConfig,
    MigrationConfig,
    ProjectConfig,
    RepositoryConfig,
    StepConfig,
    TranslatorConfig,
    load_project_config,
    parse_project_config,
)
from codebase_migrator.project.context import (
    EditorFactory,
    ProjectContext,
    build_project_context,
)

__all__ = [
    # config
    "EditorConfig",
    "MetadataScrubberConfig",
    "MigrationConfig",
    "ProjectConfig",
    "RepositoryConfig",
    "StepConfig",
    "TranslatorConfig",
    "load_project_config",
    "parse_project_config",
    # context
    "EditorFactory",
    "ProjectContext",
    "build_project_context",
]
