"""Working-copy allocation and lifetime-scoped cleanup.

Temporary directories are tagged with a Lifetime when allocated.
``clean_up(lifetime)`` releases every directory of that lifetime:
CURRENT_TASK at the end of a logical task, RUN when the process run
ends, and PERSISTENT never.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class Lifetime(str, Enum):
    """When a temporary directory becomes eligible for cleanup."""

    CURRENT_TASK = "current_task"
    RUN = "run"
    PERSISTENT = "persistent"


def list_relative_files(root: Path) -> set[str]:
    """Relative POSIX paths of every regular file under ``root``."""
    if not root.is_dir():
        return set()
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}


class Filesystem:
    """Allocates working copies and releases them at scope boundaries.

    Also usable as a context manager: leaving the block cleans up the
    CURRENT_TASK and RUN directories, leaving PERSISTENT ones in place.
    """

    def __init__(self, temp_root: Path | None = None) -> None:
        """Initialize the filesystem.

        Args:
            temp_root: Directory to allocate working copies under. If None,
                       the system temporary directory is used.
        """
        self._temp_root = temp_root
        self._allocated: dict[Lifetime, list[Path]] = {lt: [] for lt in Lifetime}

    def temporary_directory(
        self, prefix: str, lifetime: Lifetime = Lifetime.CURRENT_TASK
    ) -> Path:
        """Create a fresh, empty directory owned by ``lifetime``."""
        if self._temp_root is not None:
            self._temp_root.mkdir(parents=True, exist_ok=True)
        path = Path(tempfile.mkdtemp(prefix=prefix, dir=self._temp_root))
        self._allocated[lifetime].append(path)
        return path

    def allocated(self, lifetime: Lifetime) -> list[Path]:
        """Directories currently held by ``lifetime``."""
        return list(self._allocated[lifetime])

    def copy_tree(self, source: Path, destination: Path) -> None:
        """Copy a file or directory tree into ``destination``.

        A directory's contents land directly in ``destination``; a single
        file lands as ``destination/<name>``.
        """
        destination.mkdir(parents=True, exist_ok=True)
        if source.is_dir():
            shutil.copytree(source, destination, dirs_exist_ok=True)
        else:
            shutil.copy2(source, destination / source.name)

    def clean_up(self, lifetime: Lifetime) -> None:
        """Remove every directory allocated with ``lifetime`` (never PERSISTENT)."""
        if lifetime is Lifetime.PERSISTENT:
            return
        for path in self._allocated[lifetime]:
            logger.debug("Cleaning up %s (%s)", path, lifetime.value)
            shutil.rmtree(path, ignore_errors=True)
        self._allocated[lifetime] = []

    def end_task(self) -> None:
        self.clean_up(Lifetime.CURRENT_TASK)

    def __enter__(self) -> Filesystem:
        return self

    def __exit__(self, *exc_info) -> None:
        self.clean_up(Lifetime.CURRENT_TASK)
        self.clean_up(Lifetime.RUN)
