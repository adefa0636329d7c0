"""Translator graph: ordered editor pipelines keyed by (from, to) project space.

Lookups require an exact (from, to) match. No composition across
intermediate spaces is attempted during evaluation.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

from codebase_migrator.translation.editors import Editor

if TYPE_CHECKING:
    from codebase_migrator.codebase.codebase import Codebase
    from codebase_migrator.project.context import ProjectContext

logger = logging.getLogger(__name__)


class TranslatorPath(BaseModel):
    """Key into the translator graph, printed as ``from>to``."""

    model_config = ConfigDict(frozen=True)

    from_project_space: str
    to_project_space: str

    @field_validator("from_project_space", "to_project_space")
    @classmethod
    def space_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("project space must not be empty")
        return v

    def __str__(self) -> str:
        return f"{self.from_project_space}>{self.to_project_space}"


class TranslatorStep(BaseModel):
    """One named editor application inside a translator."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    editor: Editor


class Translator(BaseModel):
    """Strictly ordered pipeline of editor steps.

    Each step's output Codebase is the next step's input. A failing step
    aborts the translation and its own error propagates unchanged.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    steps: list[TranslatorStep] = Field(default_factory=list)

    def translate(
        self,
        codebase: Codebase,
        context: ProjectContext,
        options: dict[str, str],
    ) -> Codebase:
        current = codebase
        for step in self.steps:
            logger.debug("Translation step %s: %s", step.name, step.editor.description())
            current = step.editor.edit(current, context, options)
        return current


TranslatorGraph = Mapping[TranslatorPath, Translator]
