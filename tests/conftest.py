"""Shared fixtures for the codebase-migrator test suite."""

from pathlib import Path

import pytest

from codebase_migrator.codebase.filesystem import Filesystem
from codebase_migrator.repositories.types import Revision


# ── Path fixtures ────────────────────────────────────────────────────────────

@pytest.fixture
def repo_root() -> Path:
    """Root of the codebase-migrator repo."""
    return Path(__file__).resolve().parent.parent


@pytest.fixture
def package_root(repo_root: Path) -> Path:
    """Root of the codebase_migrator Python package."""
    return repo_root / "codebase_migrator"


# ── Working-copy fixtures ────────────────────────────────────────────────────

@pytest.fixture
def filesystem(tmp_path: Path) -> Filesystem:
    """Filesystem allocating working copies under a per-test directory."""
    return Filesystem(tmp_path / "work")


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """A small directory tree to use as codebase content."""
    root = tmp_path / "source"
    (root / "src").mkdir(parents=True)
    (root / "README").write_text("internal readme\n")
    (root / "src" / "main.py").write_text("print('hello')\n")
    return root


# ── Revision fixtures ────────────────────────────────────────────────────────

@pytest.fixture
def internal_rev() -> Revision:
    return Revision.create(1, "internal")


@pytest.fixture
def public_rev() -> Revision:
    return Revision.create(5, "public")
