"""Ledger models: equivalences, submitted migrations, and their append-only storage.

Serialized field names (``rev1``/``rev2``, ``fromRevision``/``toRevision``,
``revId``/``repositoryName``) are the persisted document format and must
stay stable across versions.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from codebase_migrator.repositories.types import Revision


class RepositoryEquivalence(BaseModel):
    """Two revisions in two repositories holding the same logical content.

    The pair is unordered: ``(a, b)`` and ``(b, a)`` are the same equivalence.
    """

    model_config = ConfigDict(frozen=True)

    rev1: Revision
    rev2: Revision

    @model_validator(mode="after")
    def distinct_repositories(self) -> RepositoryEquivalence:
        if self.rev1.repository_name == self.rev2.repository_name:
            raise ValueError(
                "an equivalence must pair revisions from two different repositories, "
                f"got {self.rev1} and {self.rev2}"
            )
        return self

    @classmethod
    def of(cls, rev1: Revision, rev2: Revision) -> RepositoryEquivalence:
        return cls(rev1=rev1, rev2=rev2)

    def has_revision(self, revision: Revision) -> bool:
        return revision in (self.rev1, self.rev2)

    def other_revision(self, revision: Revision) -> Revision:
        """The side of this pair that is not ``revision``."""
        if revision == self.rev1:
            return self.rev2
        if revision == self.rev2:
            return self.rev1
        raise ValueError(f"{revision} is not part of equivalence {self}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RepositoryEquivalence):
            return NotImplemented
        return {self.rev1, self.rev2} == {other.rev1, other.rev2}

    def __hash__(self) -> int:
        return hash(frozenset((self.rev1, self.rev2)))

    def __str__(self) -> str:
        return f"{self.rev1} == {self.rev2}"


class SubmittedMigration(BaseModel):
    """A completed, directed migration from one revision to another.

    Not every migration yields an equivalence (edits may have been
    applied on the way), so migrations are recorded separately.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_revision: Revision = Field(alias="fromRevision")
    to_revision: Revision = Field(alias="toRevision")

    @classmethod
    def of(cls, from_revision: Revision, to_revision: Revision) -> SubmittedMigration:
        return cls(from_revision=from_revision, to_revision=to_revision)

    def __str__(self) -> str:
        return f"{self.from_revision} ==> {self.to_revision}"


class LedgerStorage(BaseModel):
    """Ordered, deduplicated lists of equivalences and migrations.

    Entries are only ever appended. Duplicates (by structural equality)
    are dropped on insertion and on load, keeping the first occurrence.
    """

    model_config = ConfigDict()

    equivalences: list[RepositoryEquivalence] = Field(default_factory=list)
    migrations: list[SubmittedMigration] = Field(default_factory=list)

    @model_validator(mode="after")
    def drop_duplicates(self) -> LedgerStorage:
        self.equivalences = list(dict.fromkeys(self.equivalences))
        self.migrations = list(dict.fromkeys(self.migrations))
        return self

    def add_equivalence(self, equivalence: RepositoryEquivalence) -> bool:
        """Append ``equivalence`` unless present. Returns True if it was added."""
        if equivalence in self.equivalences:
            return False
        self.equivalences.append(equivalence)
        return True

    def add_migration(self, migration: SubmittedMigration) -> bool:
        """Append ``migration`` unless present. Returns True if it was added."""
        if migration in self.migrations:
            return False
        self.migrations.append(migration)
        return True

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
