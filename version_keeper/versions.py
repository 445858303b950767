"""Browsing and restoring historical versions."""

import os
import shutil
import stat
from pathlib import Path
from typing import Optional

from loguru import logger

from .codec import decode_version
from .errors import AlreadyExists, NotFound, ProcessError
from .models import EntryType, VersionEntry
from .storage import versions_path


def _version_entry(entry: os.DirEntry) -> Optional[VersionEntry]:
    try:
        st = entry.stat(follow_symlinks=False)
    except OSError as e:
        logger.debug(f"Skipping {entry.path}: cannot read metadata ({e})")
        return None

    modified_at = int(st.st_mtime)
    if stat.S_ISDIR(st.st_mode):
        return VersionEntry(
            file_name=entry.name,
            original_name=entry.name,
            entry_type=EntryType.DIRECTORY,
            size_bytes=None,
            modified_at=modified_at,
            version_timestamp=None
        )

    original_name, version_timestamp = decode_version(entry.name)
    return VersionEntry(
        file_name=entry.name,
        original_name=original_name,
        entry_type=EntryType.FILE,
        size_bytes=st.st_size,
        modified_at=modified_at,
        version_timestamp=version_timestamp
    )


def _sort_key(entry: VersionEntry) -> tuple[int, int]:
    return (0 if entry.is_dir else 1, -(entry.modified_at or 0))


def list_versions(folder_path: Path, prefix: Optional[str] = None) -> list[VersionEntry]:
    """
    List the direct children of the versions directory (or a subfolder of it).

    Directories come first, then files; each group is ordered newest first.

    Args:
        folder_path: Root of the synced folder
        prefix: Optional subdirectory inside the versions directory

    Returns:
        Version entries (empty if the directory is missing or unreadable)
    """
    browse_path = versions_path(folder_path)
    if prefix:
        browse_path = browse_path / prefix

    if not browse_path.exists():
        return []

    try:
        with os.scandir(browse_path) as it:
            dir_entries = list(it)
    except OSError as e:
        logger.debug(f"Cannot list versions in {browse_path}: {e}")
        return []

    entries = []
    for dir_entry in dir_entries:
        version_entry = _version_entry(dir_entry)
        if version_entry is not None:
            entries.append(version_entry)

    entries.sort(key=_sort_key)
    return entries


def restore_version(
    folder_path: Path,
    version_path: str,
    original_name: str,
    overwrite: bool = False
) -> None:
    """
    Copy a historical version back into the live folder.

    The version file itself is left in place.

    Args:
        folder_path: Root of the synced folder
        version_path: Path of the version relative to the versions directory
        original_name: Destination path relative to the folder root
        overwrite: Replace the destination if it already exists

    Raises:
        NotFound: if the version does not exist
        AlreadyExists: if the destination exists and overwrite is False
        ProcessError: if the destination is a directory, or creating
            directories or copying fails
    """
    source = versions_path(folder_path) / version_path
    dest = Path(folder_path) / original_name

    if not source.exists():
        raise NotFound("Version file not found", context=version_path)

    if dest.is_dir():
        raise ProcessError(
            "Destination is a directory",
            context=original_name
        )

    if dest.exists() and not overwrite:
        raise AlreadyExists(
            "Destination file already exists",
            context=original_name,
            recovery_hint="Set overwrite=True to replace the existing file"
        )

    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ProcessError(f"Failed to create directories: {e}", context=str(dest.parent)) from e

    try:
        shutil.copy2(source, dest)
    except (OSError, shutil.Error) as e:
        raise ProcessError(f"Failed to restore file: {e}", context=version_path) from e

    logger.info(f"Restored {version_path} to {original_name}")
