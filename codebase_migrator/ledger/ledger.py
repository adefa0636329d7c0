"""Equivalence ledger: the persisted record of cross-repository correspondences.

The whole document is loaded into memory at the start of a run, mutated
only by appending, and written back in full on request. One writer at a
time is assumed; concurrent writers to the same location need outside
coordination.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from codebase_migrator.errors import ConfigurationError
from codebase_migrator.ledger.models import (
    LedgerStorage,
    RepositoryEquivalence,
    SubmittedMigration,
)
from codebase_migrator.repositories.types import Revision

logger = logging.getLogger(__name__)


class Ledger:
    """In-memory view of one ledger document."""

    def __init__(
        self,
        location: str,
        storage: LedgerStorage | None = None,
        writer: LedgerWriter | None = None,
    ) -> None:
        """Initialize the ledger.

        Args:
            location: Where this ledger came from; the default write target.
            storage: Existing entries. If None, the ledger starts empty.
            writer: Writer used by ``write()``. Defaults to a file writer.
        """
        self._location = location
        self._storage = storage if storage is not None else LedgerStorage()
        self._writer = writer if writer is not None else LedgerWriter()

    def location(self) -> str:
        return self._location

    @property
    def storage(self) -> LedgerStorage:
        return self._storage

    def equivalences(self) -> list[RepositoryEquivalence]:
        return list(self._storage.equivalences)

    def migrations(self) -> list[SubmittedMigration]:
        return list(self._storage.migrations)

    def note_equivalence(self, equivalence: RepositoryEquivalence) -> None:
        """Record an equivalence. Re-noting an existing one is a no-op."""
        if not self._storage.add_equivalence(equivalence):
            logger.debug("Equivalence %s already recorded", equivalence)

    def note_migration(self, migration: SubmittedMigration) -> bool:
        """Record a migration.

        Returns:
            True if it was newly added, False if it was already recorded.
        """
        added = self._storage.add_migration(migration)
        if not added:
            logger.debug("Migration %s already recorded", migration)
        return added

    def find_equivalences(self, revision: Revision, other_repository: str) -> set[Revision]:
        """Revisions in ``other_repository`` recorded as equivalent to ``revision``.

        Equivalences are unordered, so ``revision`` may sit on either side.
        """
        return {
            equivalence.other_revision(revision)
            for equivalence in self._storage.equivalences
            if equivalence.has_revision(revision)
            and equivalence.other_revision(revision).repository_name == other_repository
        }

    def find_migrations_from(self, revision: Revision) -> list[SubmittedMigration]:
        """Migrations whose source is ``revision``, in insertion order."""
        return [m for m in self._storage.migrations if m.from_revision == revision]

    def write(self) -> None:
        """Write this ledger back to ``location()``."""
        self._writer.write(self)

    def __repr__(self) -> str:
        return (
            f"Ledger(location={self._location!r}, "
            f"equivalences={len(self._storage.equivalences)}, "
            f"migrations={len(self._storage.migrations)})"
        )


class LedgerWriter:
    """Writes ledger documents to files, overwriting the whole document."""

    def write(self, ledger: Ledger) -> None:
        self.write_to_location(ledger.location(), ledger)

    def write_to_location(self, location: str | Path, ledger: Ledger) -> Path:
        """Write ``ledger`` to ``location``, replacing any previous document.

        The document is written to a sibling file first and moved into place,
        so an interrupted write leaves the previous document intact.
        """
        path = Path(location)
        path.parent.mkdir(parents=True, exist_ok=True)
        staging = path.with_name(path.name + ".tmp")
        try:
            staging.write_text(ledger.storage.to_json() + "\n", encoding="utf-8")
            staging.replace(path)
        except OSError:
            staging.unlink(missing_ok=True)
            raise
        logger.info(
            "Wrote ledger with %d equivalences and %d migrations to %s",
            len(ledger.storage.equivalences),
            len(ledger.storage.migrations),
            path,
        )
        return path


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def parse_json(text: str | bytes, location: str = "") -> Ledger:
    """Build a Ledger from a JSON document.

    Raises:
        ConfigurationError: if the document is not a valid ledger.
    """
    try:
        storage = LedgerStorage.model_validate_json(text)
    except (ValidationError, UnicodeDecodeError) as e:
        raise ConfigurationError(
            f"Could not parse ledger {location or '<string>'}: {e}",
            context={"location": location},
        ) from e
    return Ledger(location, storage)


def load_ledger(path: str | Path) -> Ledger:
    """Load the ledger at ``path``; a missing file yields an empty ledger there."""
    path = Path(path)
    if not path.exists():
        logger.info("No ledger at %s, starting empty", path)
        return Ledger(str(path))

    try:
        data = path.read_bytes()
    except OSError as e:
        raise ConfigurationError(
            f"Could not read ledger {path}: {e}", context={"location": str(path)}
        ) from e

    ledger = parse_json(data, str(path))
    logger.info(
        "Loaded ledger %s: %d equivalences, %d migrations",
        path,
        len(ledger.storage.equivalences),
        len(ledger.storage.migrations),
    )
    return ledger
