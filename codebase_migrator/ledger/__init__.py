"""Equivalence ledger: which revisions match across repositories, and what was migrated."""

from codebase_migrator.ledger.ledger import Ledger, LedgerWriter, load_ledger, parse_json
from codebase_migrator.ledger.models import (
    LedgerStorage,
    RepositoryEquivalence,
    SubmittedMigration,
)

__all__ = [
    "Ledger",
    "LedgerStorage",
    "LedgerWriter",
    "RepositoryEquivalence",
    "SubmittedMigration",
    "load_ledger",
    "parse_json",
]
