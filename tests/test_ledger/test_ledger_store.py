"""Tests for the equivalence ledger and its persistence."""

import json
from pathlib import Path

import pytest

from codebase_migrator.errors import ConfigurationError
from codebase_migrator.ledger.ledger import Ledger, LedgerWriter, load_ledger, parse_json
from codebase_migrator.ledger.models import RepositoryEquivalence, SubmittedMigration
from codebase_migrator.repositories.types import Revision


class _RecordingWriter(LedgerWriter):
    def __init__(self):
        self.written = []

    def write(self, ledger):
        self.written.append(ledger.location())


@pytest.fixture
def ledger(tmp_path):
    return Ledger(str(tmp_path / "ledger.json"))


class TestNoteEquivalence:
    """Equivalences are recorded once."""

    def test_idempotent(self, ledger, internal_rev, public_rev):
        equivalence = RepositoryEquivalence.of(internal_rev, public_rev)
        ledger.note_equivalence(equivalence)
        ledger.note_equivalence(equivalence)
        ledger.note_equivalence(RepositoryEquivalence.of(public_rev, internal_rev))
        assert ledger.equivalences() == [equivalence]

    def test_insertion_order_kept(self, ledger, internal_rev, public_rev):
        later = RepositoryEquivalence.of(Revision.create(2, "internal"), Revision.create(6, "public"))
        first = RepositoryEquivalence.of(internal_rev, public_rev)
        ledger.note_equivalence(later)
        ledger.note_equivalence(first)
        assert ledger.equivalences() == [later, first]


class TestFindEquivalences:
    """Lookups work from either side of a pair."""

    def test_symmetric(self, ledger, internal_rev, public_rev):
        ledger.note_equivalence(RepositoryEquivalence.of(internal_rev, public_rev))
        assert ledger.find_equivalences(internal_rev, "public") == {public_rev}
        assert ledger.find_equivalences(public_rev, "internal") == {internal_rev}

    def test_filters_by_repository(self, ledger, internal_rev, public_rev):
        mirror = Revision.create(9, "mirror")
        ledger.note_equivalence(RepositoryEquivalence.of(internal_rev, public_rev))
        ledger.note_equivalence(RepositoryEquivalence.of(internal_rev, mirror))
        assert ledger.find_equivalences(internal_rev, "mirror") == {mirror}

    def test_several_matches(self, ledger, internal_rev):
        ledger.note_equivalence(RepositoryEquivalence.of(internal_rev, Revision.create(5, "public")))
        ledger.note_equivalence(RepositoryEquivalence.of(internal_rev, Revision.create(6, "public")))
        assert ledger.find_equivalences(internal_rev, "public") == {
            Revision.create(5, "public"),
            Revision.create(6, "public"),
        }

    def test_no_match(self, ledger, internal_rev):
        assert ledger.find_equivalences(internal_rev, "public") == set()


class TestNoteMigration:
    """Migrations report whether they were new."""

    def test_new_then_duplicate(self, ledger, internal_rev, public_rev):
        migration = SubmittedMigration.of(internal_rev, public_rev)
        assert ledger.note_migration(migration) is True
        assert ledger.note_migration(migration) is False
        assert ledger.migrations() == [migration]

    def test_find_migrations_from(self, ledger, internal_rev, public_rev):
        migration = SubmittedMigration.of(internal_rev, public_rev)
        ledger.note_migration(migration)
        ledger.note_migration(SubmittedMigration.of(Revision.create(2, "internal"), public_rev))
        assert ledger.find_migrations_from(internal_rev) == [migration]


class TestPersistence:
    """Ledgers are written and loaded as whole JSON documents."""

    def test_write_then_load(self, ledger, internal_rev, public_rev):
        ledger.note_equivalence(RepositoryEquivalence.of(internal_rev, public_rev))
        ledger.note_migration(SubmittedMigration.of(internal_rev, public_rev))
        ledger.write()

        loaded = load_ledger(ledger.location())

        assert loaded.equivalences() == ledger.equivalences()
        assert loaded.migrations() == ledger.migrations()
        assert loaded.location() == ledger.location()

    def test_document_shape(self, ledger, internal_rev, public_rev):
        ledger.note_equivalence(RepositoryEquivalence.of(internal_rev, public_rev))
        ledger.write()

        document = json.loads(Path(ledger.location()).read_text(encoding="utf-8"))

        assert document == {
            "equivalences": [
                {
                    "rev1": {"revId": "1", "repositoryName": "internal"},
                    "rev2": {"revId": "5", "repositoryName": "public"},
                }
            ],
            "migrations": [],
        }

    def test_write_to_location_creates_parents(self, ledger, tmp_path):
        target = tmp_path / "nested" / "dir" / "copy.json"
        path = LedgerWriter().write_to_location(target, ledger)
        assert path == target
        assert json.loads(target.read_text()) == {"equivalences": [], "migrations": []}

    def test_rewrite_replaces_whole_document(self, ledger, internal_rev, public_rev):
        ledger.write()
        ledger.note_equivalence(RepositoryEquivalence.of(internal_rev, public_rev))
        ledger.write()

        assert len(load_ledger(ledger.location()).equivalences()) == 1
        assert not Path(ledger.location() + ".tmp").exists()

    def test_failed_write_keeps_previous_document(
        self, ledger, internal_rev, public_rev, monkeypatch
    ):
        ledger.write()
        previous = Path(ledger.location()).read_text(encoding="utf-8")
        ledger.note_equivalence(RepositoryEquivalence.of(internal_rev, public_rev))

        def fail_replace(self, target):
            raise OSError("disk full")

        monkeypatch.setattr(Path, "replace", fail_replace)
        with pytest.raises(OSError, match="disk full"):
            ledger.write()

        assert Path(ledger.location()).read_text(encoding="utf-8") == previous
        assert not Path(ledger.location() + ".tmp").exists()

    def test_write_uses_injected_writer(self, tmp_path):
        writer = _RecordingWriter()
        ledger = Ledger(str(tmp_path / "l.json"), writer=writer)
        ledger.write()
        assert writer.written == [str(tmp_path / "l.json")]
        assert not (tmp_path / "l.json").exists()

    def test_missing_file_loads_empty(self, tmp_path):
        ledger = load_ledger(tmp_path / "absent.json")
        assert ledger.equivalences() == []
        assert ledger.migrations() == []
        assert ledger.location() == str(tmp_path / "absent.json")

    def test_load_drops_duplicates(self, tmp_path):
        pair = {
            "rev1": {"revId": "1", "repositoryName": "internal"},
            "rev2": {"revId": "5", "repositoryName": "public"},
        }
        swapped = {"rev1": pair["rev2"], "rev2": pair["rev1"]}
        path = tmp_path / "dupes.json"
        path.write_text(json.dumps({"equivalences": [pair, swapped, pair], "migrations": []}))

        assert len(load_ledger(path).equivalences()) == 1

    def test_invalid_json(self):
        with pytest.raises(ConfigurationError, match="Could not parse ledger"):
            parse_json("{not json", "bad.json")

    def test_invalid_utf8_file(self, tmp_path):
        path = tmp_path / "binary.json"
        path.write_bytes(b"\xff\xfe{}")
        with pytest.raises(ConfigurationError, match="Could not parse ledger"):
            load_ledger(path)

    def test_unreadable_location(self, tmp_path):
        directory = tmp_path / "ledger.json"
        directory.mkdir()
        with pytest.raises(ConfigurationError, match="Could not read ledger"):
            load_ledger(directory)

    def test_invalid_document(self):
        with pytest.raises(ConfigurationError, match="Could not parse ledger <string>"):
            parse_json('{"equivalences": [{"rev1": {"revId": "1"}}]}')

    def test_parse_json_location(self):
        assert parse_json("{}", "here.json").location() == "here.json"
