"""Tests for version_keeper.walker module."""

import os
from unittest.mock import patch

from version_keeper.models import EntryType
from version_keeper.walker import walk_folder


def _paths(entries):
    return {entry.relative_path for entry in entries}


class _BrokenStatEntry:
    """DirEntry stand-in whose metadata lookup fails."""

    def __init__(self, entry):
        self._entry = entry
        self.name = entry.name
        self.path = entry.path

    def is_dir(self, follow_symlinks=True):
        return self._entry.is_dir(follow_symlinks=follow_symlinks)

    def is_file(self, follow_symlinks=True):
        return self._entry.is_file(follow_symlinks=follow_symlinks)

    def stat(self, follow_symlinks=True):
        raise OSError("Simulated stat error")


class _FakeScandir:
    def __init__(self, entries):
        self._entries = entries

    def __enter__(self):
        return iter(self._entries)

    def __exit__(self, *exc):
        return False


class TestWalkFolder:
    """Tests for walk_folder function."""

    def test_walk_empty_folder(self, temp_dir):
        assert list(walk_folder(temp_dir)) == []

    def test_walk_nested_files(self, temp_dir):
        (temp_dir / "root.txt").write_text("root")
        (temp_dir / "sub1" / "sub2").mkdir(parents=True)
        (temp_dir / "sub1" / "file1.txt").write_text("sub1 file")
        (temp_dir / "sub1" / "sub2" / "deep.txt").write_text("deep file")

        entries = list(walk_folder(temp_dir))

        assert _paths(entries) == {"root.txt", "sub1/file1.txt", "sub1/sub2/deep.txt"}
        assert all(entry.entry_type is EntryType.FILE for entry in entries)

    def test_entry_metadata(self, temp_dir):
        file_path = temp_dir / "file.txt"
        file_path.write_text("content")
        os.utime(file_path, (1700000000, 1700000000))

        (entry,) = list(walk_folder(temp_dir))

        assert entry.name == "file.txt"
        assert entry.absolute_path == str(file_path)
        assert entry.size == len("content")
        assert entry.modified_at == 1700000000
        assert not entry.is_dir

    def test_skips_hidden_entries(self, temp_dir):
        (temp_dir / ".git").mkdir()
        (temp_dir / ".git" / "config").write_text("x")
        (temp_dir / ".hidden_file").write_text("x")
        (temp_dir / "visible.txt").write_text("x")

        assert _paths(walk_folder(temp_dir)) == {"visible.txt"}

    def test_includes_hidden_entries_when_asked(self, temp_dir):
        (temp_dir / ".hidden_file").write_text("x")

        assert _paths(walk_folder(temp_dir, skip_hidden=False)) == {".hidden_file"}

    def test_skips_versions_directory(self, temp_dir):
        (temp_dir / ".stversions").mkdir()
        (temp_dir / ".stversions" / "a~20231215-143022.txt").write_text("x")

        assert list(walk_folder(temp_dir, skip_hidden=False)) == []

    def test_excluded_names_apply_at_any_depth(self, temp_dir):
        (temp_dir / "sub" / "skipme").mkdir(parents=True)
        (temp_dir / "sub" / "skipme" / "file.txt").write_text("x")
        (temp_dir / "sub" / "keep.txt").write_text("x")

        entries = walk_folder(temp_dir, excluded_names=("skipme",))

        assert _paths(entries) == {"sub/keep.txt"}

    def test_hidden_rule_ignores_root_path(self, temp_dir):
        root = temp_dir / ".config" / "sync"
        root.mkdir(parents=True)
        (root / "file.txt").write_text("x")

        assert _paths(walk_folder(root)) == {"file.txt"}

    def test_include_dirs(self, temp_dir):
        (temp_dir / "sub").mkdir()
        (temp_dir / "sub" / "file.txt").write_text("x")

        entries = list(walk_folder(temp_dir, include_dirs=True))
        dirs = [entry for entry in entries if entry.is_dir]

        assert _paths(entries) == {"sub", "sub/file.txt"}
        assert len(dirs) == 1
        assert dirs[0].size == 0

    def test_symlinked_directory_not_followed(self, temp_dir):
        (temp_dir / "real").mkdir()
        (temp_dir / "real" / "file.txt").write_text("x")
        # A link back to the root would loop forever if followed
        os.symlink(temp_dir, temp_dir / "loop")

        assert _paths(walk_folder(temp_dir)) == {"real/file.txt"}

    def test_unreadable_subdirectory_skipped(self, temp_dir):
        (temp_dir / "bad").mkdir()
        (temp_dir / "bad" / "hidden_from_us.txt").write_text("x")
        (temp_dir / "good").mkdir()
        (temp_dir / "good" / "file.txt").write_text("x")

        real_scandir = os.scandir
        bad_dir = str(temp_dir / "bad")

        def fake_scandir(path):
            if os.fspath(path) == bad_dir:
                raise PermissionError("Permission denied")
            return real_scandir(path)

        with patch("version_keeper.walker.os.scandir", side_effect=fake_scandir):
            entries = list(walk_folder(temp_dir))

        assert _paths(entries) == {"good/file.txt"}

    def test_unreadable_root_yields_nothing(self, temp_dir):
        assert list(walk_folder(temp_dir / "missing")) == []

    def test_posix_relative_paths(self, temp_dir):
        (temp_dir / "level1" / "level2").mkdir(parents=True)
        (temp_dir / "level1" / "level2" / "deep.txt").write_text("deep")

        paths = _paths(walk_folder(temp_dir))

        assert "level1/level2/deep.txt" in paths
        assert "level1\\level2\\deep.txt" not in paths

    def test_metadata_failure_skips_entry(self, temp_dir):
        (temp_dir / "bad.txt").write_text("x")
        (temp_dir / "good.txt").write_text("x")

        real_scandir = os.scandir

        def fake_scandir(path):
            with real_scandir(path) as it:
                entries = [
                    _BrokenStatEntry(entry) if entry.name == "bad.txt" else entry
                    for entry in it
                ]
            return _FakeScandir(entries)

        with patch("version_keeper.walker.os.scandir", side_effect=fake_scandir):
            entries = list(walk_folder(temp_dir))

        assert _paths(entries) == {"good.txt"}
