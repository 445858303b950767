"""Retention pruning of historical versions."""

import os
import shutil
import time
from pathlib import Path
from typing import Optional

from loguru import logger
from tqdm import tqdm

from .models import RetentionResult
from .storage import format_bytes, measure_tree, versions_path
from .walker import walk_folder

SECONDS_PER_DAY = 86400


def _empty_result() -> RetentionResult:
    return RetentionResult(files_deleted=0, bytes_freed=0, bytes_freed_formatted="0 B")


def cleanup_all(folder_path: Path) -> RetentionResult:
    """
    Delete the whole versions directory.

    Sizes are measured before deletion. A failed delete is reported in the
    result (success=False, counts zero) instead of being raised.
    """
    path = versions_path(folder_path)
    if not path.exists():
        return _empty_result()

    bytes_to_free, file_count = measure_tree(path)

    try:
        shutil.rmtree(path)
    except OSError as e:
        logger.warning(f"Failed to delete versions in {folder_path}: {e}")
        return RetentionResult(
            files_deleted=0,
            bytes_freed=0,
            bytes_freed_formatted="0 B",
            success=False,
            error=f"Failed to delete versions: {e}"
        )

    logger.info(f"Removed {file_count} versions ({format_bytes(bytes_to_free)}) from {folder_path}")
    return RetentionResult(
        files_deleted=file_count,
        bytes_freed=bytes_to_free,
        bytes_freed_formatted=format_bytes(bytes_to_free)
    )


def remove_empty_dirs(path: Path) -> None:
    """Remove empty directories bottom-up, including ``path`` itself if it ends up empty."""
    try:
        with os.scandir(path) as it:
            subdirs = [entry.path for entry in it if entry.is_dir(follow_symlinks=False)]
    except OSError:
        return

    for subdir in subdirs:
        remove_empty_dirs(subdir)

    try:
        os.rmdir(path)
    except OSError:
        # Still has content
        pass


def cleanup_older_than(
    folder_path: Path,
    age_days: int,
    show_progress: bool = False,
    now: Optional[float] = None
) -> RetentionResult:
    """
    Delete versions whose modification time is strictly older than a cutoff.

    Files that cannot be inspected or deleted are skipped and counted in
    ``skipped``. Directories emptied by the pass are removed afterwards.
    An interrupted pass keeps whatever it already deleted.

    Args:
        folder_path: Root of the synced folder
        age_days: Keep versions modified within this many days
        show_progress: Display a progress bar
        now: Reference time (defaults to the current time)

    Returns:
        RetentionResult with the files and bytes actually removed
    """
    path = versions_path(folder_path)
    if not path.exists():
        return _empty_result()

    if now is None:
        now = time.time()
    cutoff = now - age_days * SECONDS_PER_DAY

    candidates = [
        entry.absolute_path
        for entry in walk_folder(path, skip_hidden=False, excluded_names=())
    ]

    files_deleted = 0
    bytes_freed = 0
    skipped = 0
    with tqdm(candidates, desc="Pruning", unit="file", disable=not show_progress) as pbar:
        for file_path in pbar:
            try:
                st = os.stat(file_path)
            except OSError as e:
                logger.debug(f"Skipping {file_path}: {e}")
                continue
            if st.st_mtime >= cutoff:
                continue
            try:
                os.remove(file_path)
            except OSError as e:
                logger.debug(f"Could not delete {file_path}: {e}")
                skipped += 1
                continue
            files_deleted += 1
            bytes_freed += st.st_size

    remove_empty_dirs(path)

    logger.info(f"Pruned {files_deleted} versions older than {age_days} days from {folder_path}")
    return RetentionResult(
        files_deleted=files_deleted,
        bytes_freed=bytes_freed,
        bytes_freed_formatted=format_bytes(bytes_freed),
        skipped=skipped
    )
