"""Codebase: a materialized file tree plus the project space and expression that made it."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from codebase_migrator.codebase.filesystem import list_relative_files
from codebase_migrator.errors import ProjectSpaceMismatch

if TYPE_CHECKING:
    from codebase_migrator.parser.expression import Expression


class Codebase:
    """A snapshot of a file tree at ``path``.

    One project often looks slightly different in different repositories;
    those dialects are project spaces, and a Codebase records which one it
    is in so it can be translated. The expression identifies how it was
    produced and doubles as its printed form.

    Equality and hashing use ``path`` only. Two Codebases at the same
    location compare equal even if their project space or expression
    differ, which lets tests substitute fakes keyed by location. Do not
    rely on it to compare content.
    """

    def __init__(self, path: Path, project_space: str, expression: Expression) -> None:
        self._path = Path(path)
        self._project_space = project_space
        self._expression = expression

    @property
    def path(self) -> Path:
        return self._path

    @property
    def project_space(self) -> str:
        return self._project_space

    @property
    def expression(self) -> Expression:
        return self._expression

    def relative_filenames(self) -> set[str]:
        """Paths of every file in this Codebase, relative to its root."""
        return list_relative_files(self._path)

    def file(self, relative_filename: str) -> Path:
        return self._path / relative_filename

    def check_project_space(self, project_space: str) -> None:
        """Raise ProjectSpaceMismatch unless this Codebase is in ``project_space``."""
        if self._project_space != project_space:
            raise ProjectSpaceMismatch(
                f'Expected project space "{project_space}", but Codebase "{self}" '
                f'is in project space "{self._project_space}"',
                context={"expected": project_space, "actual": self._project_space},
            )

    def copy_with_expression(self, expression: Expression) -> Codebase:
        """Same directory, new expression. The original is untouched."""
        return Codebase(self._path, self._project_space, expression)

    def copy_with_project_space(self, project_space: str) -> Codebase:
        """Same directory, new project space. The original is untouched."""
        return Codebase(self._path, project_space, self._expression)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Codebase) and self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __str__(self) -> str:
        return str(self._expression)

    def __repr__(self) -> str:
        return f"Codebase(path={str(self._path)!r}, project_space={self._project_space!r}, expression={str(self._expression)!r})"
