"""Storage accounting for the versions directory."""

from pathlib import Path

from .codec import VERSIONS_DIR_NAME
from .models import StorageReport
from .walker import walk_folder

KB = 1024
MB = KB * 1024
GB = MB * 1024
TB = GB * 1024


def format_bytes(size: int) -> str:
    """Format a byte count in binary units with two decimals (bytes as integer)."""
    for unit, factor in (("TB", TB), ("GB", GB), ("MB", MB), ("KB", KB)):
        if size >= factor:
            return f"{size / factor:.2f} {unit}"
    return f"{size} B"


def versions_path(folder_path: Path) -> Path:
    """Location of the versions directory for a synced folder."""
    return Path(folder_path) / VERSIONS_DIR_NAME


def measure_tree(path: Path) -> tuple[int, int]:
    """
    Sum file sizes under a directory.

    Hidden entries are included. Directories are not counted.

    Returns:
        Tuple of (total bytes, file count)
    """
    total_bytes = 0
    file_count = 0
    if not Path(path).is_dir():
        return 0, 0
    for entry in walk_folder(path, skip_hidden=False, excluded_names=()):
        total_bytes += entry.size
        file_count += 1
    return total_bytes, file_count


def storage_report(folder_path: Path) -> StorageReport:
    """Report how much space historical versions use in a synced folder."""
    path = versions_path(folder_path)
    if not path.exists():
        return StorageReport(total_bytes=0, total_formatted="0 B", file_count=0, exists=False)

    total_bytes, file_count = measure_tree(path)
    return StorageReport(
        total_bytes=total_bytes,
        total_formatted=format_bytes(total_bytes),
        file_count=file_count,
        exists=True
    )
