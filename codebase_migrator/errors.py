"""Error hierarchy shared by every codebase_migrator subpackage.

Every failure carries a human-readable message naming the repository,
editor, or translator path involved, plus an optional ``context`` dict
with the same facts in structured form.
"""

from __future__ import annotations

from typing import Any


class MigratorError(Exception):
    """Base exception for codebase_migrator."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class InvalidExpressionSyntax(MigratorError):
    """Raised when an expression string cannot be parsed."""


class ConfigurationError(MigratorError):
    """Raised when the project setup is broken.

    Unknown repository names, unknown backend types, reserved-name
    collisions, invalid project configuration and malformed ledger
    documents all land here.
    """


class CodebaseCreationError(MigratorError):
    """Raised when an expression cannot be evaluated into a Codebase."""


class ProjectSpaceMismatch(MigratorError):
    """Raised when a Codebase is not in the project space a consumer expects."""


class CommandExecutionFailure(MigratorError):
    """Raised by command-running collaborators when a command exits non-zero."""

    def __init__(
        self,
        command: str,
        args: list[str],
        returncode: int,
        stderr: str = "",
    ) -> None:
        message = f"Command {command} {' '.join(args)} failed with exit code {returncode}"
        if stderr:
            message += f": {stderr.strip()}"
        super().__init__(
            message,
            context={"command": command, "args": list(args), "returncode": returncode},
        )
        self.command = command
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr
