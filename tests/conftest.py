"""Shared test fixtures."""

import os
import tempfile
from pathlib import Path

import pytest
from loguru import logger

from version_keeper.models import ConflictRecord

CONFLICT_NAME = "report.sync-conflict-20231201-120000-ABCDEFG.txt"
NESTED_CONFLICT_NAME = "draft.sync-conflict-20231202-080000-XYZ1234.md"


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop loguru sinks added by the code under test."""
    yield
    logger.remove()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def synced_folder(temp_dir):
    """Create a synced folder with conflicts, hidden entries and a versions tree."""
    folder = temp_dir / "Sync"
    folder.mkdir()

    (folder / "report.txt").write_text("original report")
    (folder / CONFLICT_NAME).write_text("conflicting report")

    (folder / "docs").mkdir()
    (folder / "docs" / "draft.md").write_text("draft")
    (folder / "docs" / NESTED_CONFLICT_NAME).write_text("draft")

    # Hidden directory content is never reported
    (folder / ".hidden").mkdir()
    (folder / ".hidden" / "secret.sync-conflict-20231203-090000-AAAAAAA.txt").write_text("x")

    versions = folder / ".stversions"
    versions.mkdir()
    (versions / "report~20231215-143022.txt").write_text("old report")
    (versions / "notes.sync-conflict-20231101-000000-BBBBBBB.txt").write_text("versioned conflict")
    (versions / "docs").mkdir()
    (versions / "docs" / "draft~20231110-101010.md").write_text("older draft")

    return folder


@pytest.fixture
def versions_dir(synced_folder):
    """The .stversions directory of the synced folder."""
    return synced_folder / ".stversions"


@pytest.fixture
def sample_conflict_record():
    """Create a sample ConflictRecord for testing."""
    return ConflictRecord(
        relative_path=f"docs/{NESTED_CONFLICT_NAME}",
        inferred_original_name="draft.md",
        size_bytes=5,
        modified_at=1700000000
    )


@pytest.fixture
def set_mtime():
    """Return a helper that sets access and modification time of a path."""
    def _set(path: Path, timestamp: float) -> None:
        os.utime(path, (timestamp, timestamp))
    return _set
