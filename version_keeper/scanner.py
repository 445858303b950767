"""Conflict file discovery."""

import os
from pathlib import Path

import xxhash
from loguru import logger
from tqdm import tqdm

from .codec import VERSIONS_DIR_NAME, decode_conflict, is_conflict_name
from .models import ConflictRecord
from .walker import walk_folder


def compute_file_hash(file_path: Path, chunk_size: int = 65536) -> str:
    """Compute hash of a file using xxhash (fast hashing algorithm)."""
    hasher = xxhash.xxh64()
    with open(file_path, 'rb') as f:
        while chunk := f.read(chunk_size):
            hasher.update(chunk)
    return hasher.hexdigest()


def scan_conflicts(folder_path: Path) -> list[ConflictRecord]:
    """
    Find every conflict file under a synced folder.

    Hidden entries and the versions directory are not visited. Every call
    walks the filesystem again; nothing is cached.

    Args:
        folder_path: Root of the synced folder

    Returns:
        Conflict records in traversal order (empty if the folder is missing)
    """
    folder_path = Path(folder_path)
    if not folder_path.exists():
        logger.debug(f"Folder does not exist, no conflicts: {folder_path}")
        return []

    conflicts = []
    for entry in walk_folder(folder_path, excluded_names=(VERSIONS_DIR_NAME,)):
        if not is_conflict_name(entry.name):
            continue
        conflicts.append(ConflictRecord(
            relative_path=entry.relative_path,
            inferred_original_name=decode_conflict(entry.name),
            size_bytes=entry.size,
            modified_at=entry.modified_at
        ))

    logger.debug(f"Found {len(conflicts)} conflicts in {folder_path}")
    return conflicts


def conflict_matches_original(folder_path: Path, record: ConflictRecord) -> bool:
    """
    Check whether a conflict file has the same content as its original.

    Returns False if the original is missing or sizes differ. Read errors
    propagate as OSError.
    """
    folder_path = Path(folder_path)
    conflict = folder_path / record.relative_path
    original = folder_path / record.original_relative_path

    if not original.is_file():
        return False
    if os.path.getsize(original) != os.path.getsize(conflict):
        return False
    return compute_file_hash(original) == compute_file_hash(conflict)


def find_identical_conflicts(
    folder_path: Path,
    records: list[ConflictRecord],
    show_progress: bool = False,
    desc: str = "Comparing"
) -> list[ConflictRecord]:
    """
    Return the conflicts whose content equals their original file.

    Conflicts that cannot be read are left out.
    """
    identical = []
    with tqdm(records, desc=desc, unit="file", disable=not show_progress) as pbar:
        for record in pbar:
            try:
                matches = conflict_matches_original(folder_path, record)
            except OSError as e:
                logger.debug(f"Could not compare {record.relative_path}: {e}")
                continue
            if matches:
                identical.append(record)
    return identical

