"""Project configuration: Pydantic v2 models loaded from YAML or JSON.

A project config declares repositories, editors, translators between
project spaces, and migrations. Models validate on construction; the
loaders turn any validation or parse failure into ConfigurationError so
no partially valid config is ever handed out.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from codebase_migrator.errors import ConfigurationError

# ---------------------------------------------------------------------------
# Repositories and editors
# ---------------------------------------------------------------------------


class RepositoryConfig(BaseModel):
    """One repository declaration. Backend-specific keys are kept as extras."""

    model_config = ConfigDict(extra="allow")

    type: str
    url: str | None = None
    project_space: str = "public"
    branch: str | None = None
    ignore_file_patterns: list[str] = Field(default_factory=list)

    @field_validator("type")
    @classmethod
    def type_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("repository type must not be empty")
        return v

    def option(self, key: str, default: Any = None) -> Any:
        """Backend-specific extra key, or ``default``."""
        return (self.model_extra or {}).get(key, default)


class EditorConfig(BaseModel):
    """One editor declaration; everything beyond ``type`` is editor-specific."""

    model_config = ConfigDict(extra="allow")

    type: str

    @field_validator("type")
    @classmethod
    def type_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("editor type must not be empty")
        return v

    def option(self, key: str, default: Any = None) -> Any:
        return (self.model_extra or {}).get(key, default)


# ---------------------------------------------------------------------------
# Translators
# ---------------------------------------------------------------------------


class StepConfig(BaseModel):
    """A named editor application within a translator."""

    model_config = ConfigDict()

    name: str
    editor: EditorConfig


class TranslatorConfig(BaseModel):
    """Ordered steps converting one project space into another."""

    model_config = ConfigDict()

    from_project_space: str
    to_project_space: str
    steps: list[StepConfig] = Field(default_factory=list)
    scrubber: dict[str, Any] | None = None

    @field_validator("from_project_space", "to_project_space")
    @classmethod
    def space_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("translator project spaces must not be empty")
        return v


# ---------------------------------------------------------------------------
# Migrations
# ---------------------------------------------------------------------------


class MetadataScrubberConfig(BaseModel):
    """How commit metadata is scrubbed when migrating. Consumed by scrubbers only."""

    model_config = ConfigDict(extra="allow")

    usernames_to_scrub: list[str] = Field(default_factory=list)
    scrub_confidential_words: bool = False
    scrub_authors: bool = False


class MigrationConfig(BaseModel):
    """A declared migration between two repositories."""

    model_config = ConfigDict(frozen=True)

    name: str
    separate_revisions: bool = False
    from_repository: str
    to_repository: str
    metadata_scrubber_config: MetadataScrubberConfig | None = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Missing name in migration")
        return v

    @field_validator("from_repository")
    @classmethod
    def from_repository_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Missing from_repository in migration")
        return v

    @field_validator("to_repository")
    @classmethod
    def to_repository_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Missing to_repository in migration")
        return v

    def copy_with_from_repository(self, alternate: str) -> MigrationConfig:
        """A copy of this migration reading from ``alternate`` instead."""
        return MigrationConfig.model_validate(
            {**self.model_dump(), "from_repository": alternate}
        )


# ---------------------------------------------------------------------------
# Project
# ---------------------------------------------------------------------------


class ProjectConfig(BaseModel):
    """A whole project: repositories, editors, translators, migrations."""

    model_config = ConfigDict()

    name: str
    repositories: dict[str, RepositoryConfig] = Field(default_factory=dict)
    editors: dict[str, EditorConfig] = Field(default_factory=dict)
    translators: list[TranslatorConfig] = Field(default_factory=list)
    migrations: list[MigrationConfig] = Field(default_factory=list)
    internal_repository: RepositoryConfig | None = None
    public_repository: RepositoryConfig | None = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Must specify a name")
        return v

    @model_validator(mode="after")
    def normalize_legacy_repositories(self) -> ProjectConfig:
        # Older configs name the two sides with dedicated keys.
        if self.internal_repository is not None:
            if "internal" in self.repositories:
                raise ValueError("Internal repository specified twice")
            self.repositories["internal"] = self.internal_repository
            self.internal_repository = None
        if self.public_repository is not None:
            if "public" in self.repositories:
                raise ValueError("Public repository specified twice")
            self.repositories["public"] = self.public_repository
            self.public_repository = None
        if not self.repositories:
            raise ValueError("Must specify repositories")
        return self

    def repository_config(self, repository_name: str) -> RepositoryConfig:
        """The declared repository ``repository_name``.

        Raises:
            ConfigurationError: if no such repository is declared.
        """
        if repository_name not in self.repositories:
            found = ", ".join(sorted(self.repositories))
            raise ConfigurationError(
                f"No such repository '{repository_name}' in the config. Found: [{found}]",
                context={"repository": repository_name},
            )
        return self.repositories[repository_name]

    def find_translator_from(
        self, from_repository: str, to_repository: str
    ) -> TranslatorConfig | None:
        """The translator between two repositories' project spaces, if one is declared."""
        from_space = self.repository_config(from_repository).project_space
        to_space = self.repository_config(to_repository).project_space
        for translator in self.translators:
            if (
                translator.from_project_space == from_space
                and translator.to_project_space == to_space
            ):
                return translator
        return None

    def find_migration(self, name: str) -> MigrationConfig | None:
        for migration in self.migrations:
            if migration.name == name:
                return migration
        return None


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def parse_project_config(text: str) -> ProjectConfig:
    """Parse YAML or JSON config text into a validated ProjectConfig.

    Raises:
        ConfigurationError: if the text does not parse or fails validation.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse project config: {e}") from e

    if not data or not isinstance(data, dict):
        raise ConfigurationError("Could not parse project config: expected a mapping")

    try:
        return ProjectConfig.model_validate(data)
    except ValidationError as e:
        messages = "; ".join(_format_error(err) for err in e.errors())
        raise ConfigurationError(f"Invalid project config: {messages}") from e


def load_project_config(path: Path) -> ProjectConfig:
    """Read and parse the project config at ``path``."""
    if not path.is_file():
        raise ConfigurationError(
            f"Project config {path} does not exist", context={"path": str(path)}
        )
    return parse_project_config(path.read_text(encoding="utf-8"))


def _format_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = str(error.get("msg", "")).removeprefix("Value error, ")
    return f"{location}: {message}" if location else message
