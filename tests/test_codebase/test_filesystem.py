"""Tests for working-copy allocation and lifetime cleanup."""

from pathlib import Path

from codebase_migrator.codebase.filesystem import Filesystem, Lifetime, list_relative_files


class TestListRelativeFiles:
    """list_relative_files() walks a tree."""

    def test_lists_nested_files(self, source_tree):
        assert list_relative_files(source_tree) == {"README", "src/main.py"}

    def test_missing_directory_is_empty(self, tmp_path):
        assert list_relative_files(tmp_path / "nope") == set()


class TestTemporaryDirectory:
    """temporary_directory() allocates under the configured root."""

    def test_allocates_under_root_with_prefix(self, filesystem, tmp_path):
        path = filesystem.temporary_directory("file_codebase_copy_")
        assert path.is_dir()
        assert path.parent == tmp_path / "work"
        assert path.name.startswith("file_codebase_copy_")

    def test_each_call_is_fresh(self, filesystem):
        assert filesystem.temporary_directory("x_") != filesystem.temporary_directory("x_")

    def test_tracked_by_lifetime(self, filesystem):
        task = filesystem.temporary_directory("t_")
        run = filesystem.temporary_directory("r_", Lifetime.RUN)
        assert filesystem.allocated(Lifetime.CURRENT_TASK) == [task]
        assert filesystem.allocated(Lifetime.RUN) == [run]
        assert filesystem.allocated(Lifetime.PERSISTENT) == []


class TestCleanUp:
    """clean_up() only releases the requested lifetime."""

    def test_end_task_keeps_run_directories(self, filesystem):
        task = filesystem.temporary_directory("t_")
        run = filesystem.temporary_directory("r_", Lifetime.RUN)

        filesystem.end_task()

        assert not task.exists()
        assert run.exists()
        assert filesystem.allocated(Lifetime.CURRENT_TASK) == []

    def test_persistent_never_removed(self, filesystem):
        kept = filesystem.temporary_directory("p_", Lifetime.PERSISTENT)
        filesystem.clean_up(Lifetime.PERSISTENT)
        assert kept.exists()

    def test_context_manager_cleans_task_and_run(self, tmp_path):
        with Filesystem(tmp_path / "scoped") as fs:
            task = fs.temporary_directory("t_")
            run = fs.temporary_directory("r_", Lifetime.RUN)
            kept = fs.temporary_directory("p_", Lifetime.PERSISTENT)
        assert not task.exists()
        assert not run.exists()
        assert kept.exists()


class TestCopyTree:
    """copy_tree() copies directories by content and files by name."""

    def test_directory_contents(self, filesystem, source_tree):
        destination = filesystem.temporary_directory("copy_")
        filesystem.copy_tree(source_tree, destination)
        assert list_relative_files(destination) == {"README", "src/main.py"}

    def test_single_file(self, filesystem, source_tree):
        destination = filesystem.temporary_directory("copy_")
        filesystem.copy_tree(source_tree / "README", destination)
        assert list_relative_files(destination) == {"README"}

    def test_copy_is_independent(self, filesystem, source_tree):
        destination = filesystem.temporary_directory("copy_")
        filesystem.copy_tree(source_tree, destination)
        (destination / "README").write_text("changed\n")
        assert (source_tree / "README").read_text() == "internal readme\n"

    def test_creates_missing_destination(self, filesystem, source_tree, tmp_path):
        destination = tmp_path / "new" / "dest"
        filesystem.copy_tree(source_tree, destination)
        assert Path(destination, "src", "main.py").is_file()
