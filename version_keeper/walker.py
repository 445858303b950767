"""Folder traversal with exclusion rules."""

import os
from pathlib import Path
from typing import Iterable, Iterator, Optional

from loguru import logger

from .codec import VERSIONS_DIR_NAME
from .models import EntryType, WalkEntry


def _is_excluded(name: str, skip_hidden: bool, excluded_names: frozenset) -> bool:
    if skip_hidden and name.startswith("."):
        return True
    return name in excluded_names


def _make_entry(entry: os.DirEntry, root: str, entry_type: EntryType) -> Optional[WalkEntry]:
    """Build a WalkEntry, or return None if metadata cannot be read."""
    try:
        stat = entry.stat()
    except OSError as e:
        logger.debug(f"Skipping {entry.path}: cannot read metadata ({e})")
        return None

    relative = Path(os.path.relpath(entry.path, root)).as_posix()
    return WalkEntry(
        relative_path=relative,
        absolute_path=entry.path,
        name=entry.name,
        entry_type=entry_type,
        size=stat.st_size if entry_type is EntryType.FILE else 0,
        modified_at=int(stat.st_mtime),
    )


def walk_folder(
    root: Path,
    skip_hidden: bool = True,
    excluded_names: Iterable[str] = (VERSIONS_DIR_NAME,),
    include_dirs: bool = False
) -> Iterator[WalkEntry]:
    """
    Depth-first walk of a folder tree.

    Exclusion rules apply to entry names only, never to the root path, so a
    root such as ``/home/u/.local/share/sync`` is still walked. Symlinked
    directories are not followed. Unreadable directories and entries whose
    metadata cannot be read are skipped.

    Args:
        root: Folder to walk
        skip_hidden: Skip entries whose name starts with a dot
        excluded_names: Directory or file names never visited
        include_dirs: Also yield directory entries (before their contents)

    Yields:
        WalkEntry for every visited file (and directory, if requested)
    """
    root_str = os.fspath(root)
    excluded = frozenset(excluded_names)
    stack = [root_str]

    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as e:
            logger.debug(f"Skipping unreadable directory {current}: {e}")
            continue

        subdirs = []
        for entry in entries:
            if _is_excluded(entry.name, skip_hidden, excluded):
                continue

            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file()
            except OSError as e:
                logger.debug(f"Skipping {entry.path}: {e}")
                continue

            if is_dir:
                subdirs.append(entry.path)
                if include_dirs:
                    walk_entry = _make_entry(entry, root_str, EntryType.DIRECTORY)
                    if walk_entry is not None:
                        yield walk_entry
            elif is_file:
                walk_entry = _make_entry(entry, root_str, EntryType.FILE)
                if walk_entry is not None:
                    yield walk_entry

        # Reversed so the first subdirectory listed is visited first
        stack.extend(reversed(subdirs))
