"""Codebases and the working copies that back them."""

from codebase_migrator.codebase.codebase import Codebase
from codebase_migrator.codebase.filesystem import Filesystem, Lifetime, list_relative_files

__all__ = [
    "Codebase",
    "Filesystem",
    "Lifetime",
    "list_relative_files",
]
