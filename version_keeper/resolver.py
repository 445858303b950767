"""Conflict resolution: discard or promote a conflict copy."""

import os
import platform
import subprocess
from pathlib import Path

from loguru import logger

from .errors import ProcessError


def discard_conflict(folder_path: Path, conflict_relative_path: str) -> None:
    """
    Resolve a conflict by deleting the conflict copy.

    The original file is left untouched. Missing conflict files are a no-op.

    Raises:
        ProcessError: if the delete fails
    """
    conflict_path = Path(folder_path) / conflict_relative_path
    if not conflict_path.exists():
        logger.debug(f"Conflict already gone: {conflict_path}")
        return

    try:
        conflict_path.unlink()
    except OSError as e:
        raise ProcessError(
            f"Failed to delete conflict file: {e}",
            context=conflict_relative_path
        ) from e
    logger.info(f"Discarded conflict {conflict_relative_path}")


def promote_conflict(
    folder_path: Path,
    original_relative_path: str,
    conflict_relative_path: str
) -> None:
    """
    Resolve a conflict by replacing the original with the conflict copy.

    Runs in two steps: delete the original, then rename the conflict into
    its place. The steps are not atomic. If the rename fails the original
    is already gone and the conflict copy stays where it was.

    Raises:
        ProcessError: if either step fails
    """
    base_path = Path(folder_path)
    original_path = base_path / original_relative_path
    conflict_path = base_path / conflict_relative_path

    if original_path.exists():
        try:
            original_path.unlink()
        except OSError as e:
            raise ProcessError(
                f"Failed to delete original: {e}",
                context=original_relative_path
            ) from e

    if conflict_path.exists():
        try:
            os.rename(conflict_path, original_path)
        except OSError as e:
            raise ProcessError(
                f"Failed to rename conflict file: {e}",
                context=conflict_relative_path
            ) from e

    logger.info(f"Promoted {conflict_relative_path} to {original_relative_path}")


def open_in_file_manager(path: Path) -> None:
    """Open a folder using the system file manager."""
    system = platform.system()
    if system == "Windows":
        command = ["explorer", str(path)]
    elif system == "Darwin":  # macOS
        command = ["open", str(path)]
    else:  # Linux and others
        command = ["xdg-open", str(path)]

    try:
        subprocess.Popen(command)
    except OSError as e:
        raise ProcessError(f"Failed to open folder: {e}", context=str(path)) from e
