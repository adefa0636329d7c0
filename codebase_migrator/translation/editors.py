"""Editor interface: an opaque transformation from one Codebase to another."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from codebase_migrator.codebase.codebase import Codebase
    from codebase_migrator.project.context import ProjectContext


class Editor(ABC):
    """Takes in a Codebase and returns a new, edited Codebase.

    Editors must not modify their input's backing directory; they
    allocate a new working copy and return a Codebase pointing at it.
    """

    @abstractmethod
    def description(self) -> str:
        """Short human-readable summary of what this editor does."""

    @abstractmethod
    def edit(
        self,
        input: Codebase,
        context: ProjectContext,
        options: dict[str, str],
    ) -> Codebase:
        """Return an edited version of ``input``.

        Args:
            input: Codebase to edit.
            context: Project context of the current run.
            options: Options of the ``|editor(k=v)`` term that invoked this edit.
        """
