"""Command-line interface for version keeper."""

import argparse
import posixpath
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from .codec import decode_conflict
from .errors import VersionKeeperError
from .logging_setup import setup_logging
from .resolver import discard_conflict, open_in_file_manager, promote_conflict
from .retention import cleanup_all, cleanup_older_than
from .scanner import find_identical_conflicts, scan_conflicts
from .storage import format_bytes, storage_report
from .versions import list_versions, restore_version


def format_timestamp(timestamp: Optional[int]) -> str:
    """Format a Unix timestamp as a human-readable string."""
    if timestamp is None:
        return "unknown"
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Inspect and resolve sync conflicts and historical versions in a synced folder.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s conflicts ~/Sync --check-identical
  %(prog)s promote ~/Sync "notes.sync-conflict-20231201-120000-ABCDEFG.txt"
  %(prog)s versions ~/Sync docs
  %(prog)s restore ~/Sync "docs/report~20231215-143022.pdf" docs/report.pdf
  %(prog)s cleanup ~/Sync --older-than 30
        """
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging on stderr"
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs to this file"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    conflicts = subparsers.add_parser("conflicts", help="List conflict files")
    conflicts.add_argument("folder", type=Path, help="Synced folder root")
    conflicts.add_argument(
        "--check-identical",
        action="store_true",
        help="Hash each conflict and its original to flag identical copies"
    )

    discard = subparsers.add_parser("discard", help="Delete a conflict file, keep the original")
    discard.add_argument("folder", type=Path, help="Synced folder root")
    discard.add_argument("conflict", help="Conflict file path relative to the folder")
    discard.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    promote = subparsers.add_parser("promote", help="Replace the original with a conflict file")
    promote.add_argument("folder", type=Path, help="Synced folder root")
    promote.add_argument("conflict", help="Conflict file path relative to the folder")
    promote.add_argument(
        "--original",
        default=None,
        help="Original file path relative to the folder (default: inferred from the conflict name)"
    )
    promote.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    versions = subparsers.add_parser("versions", help="List historical versions")
    versions.add_argument("folder", type=Path, help="Synced folder root")
    versions.add_argument("prefix", nargs="?", default=None, help="Subdirectory inside .stversions")

    restore = subparsers.add_parser("restore", help="Copy a historical version back into the folder")
    restore.add_argument("folder", type=Path, help="Synced folder root")
    restore.add_argument("version", help="Version path relative to .stversions")
    restore.add_argument("original", help="Destination path relative to the folder")
    restore.add_argument("--overwrite", action="store_true", help="Replace an existing destination")

    storage = subparsers.add_parser("storage", help="Show space used by historical versions")
    storage.add_argument("folder", type=Path, help="Synced folder root")

    cleanup = subparsers.add_parser("cleanup", help="Delete historical versions")
    cleanup.add_argument("folder", type=Path, help="Synced folder root")
    cleanup.add_argument(
        "--older-than",
        type=int,
        default=None,
        metavar="DAYS",
        help="Only delete versions older than this many days (default: delete all)"
    )
    cleanup.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    open_folder = subparsers.add_parser("open", help="Open the folder in the file manager")
    open_folder.add_argument("folder", type=Path, help="Synced folder root")

    return parser.parse_args()


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments."""
    if not args.folder.exists():
        print(f"Error: Folder does not exist: {args.folder}")
        sys.exit(1)
    if not args.folder.is_dir():
        print(f"Error: Folder is not a directory: {args.folder}")
        sys.exit(1)
    if getattr(args, "older_than", None) is not None and args.older_than < 0:
        print("Error: --older-than must not be negative")
        sys.exit(1)


def confirm(prompt: str) -> bool:
    """Ask the user a yes/no question."""
    response = input(f"{prompt} (y/N): ").strip().lower()
    return response == 'y'


def run_conflicts(args: argparse.Namespace) -> None:
    records = scan_conflicts(args.folder)
    if not records:
        print("No conflicts found.")
        return

    identical = set()
    if args.check_identical:
        matches = find_identical_conflicts(args.folder, records, show_progress=True)
        identical = {record.relative_path for record in matches}

    print(f"\n--- Conflicts ({len(records)}) ---")
    for record in records:
        marker = "  [identical to original]" if record.relative_path in identical else ""
        print(f"  {record.relative_path}{marker}")
        print(f"    Original: {record.original_relative_path}")
        print(f"    Modified: {format_timestamp(record.modified_at)}")
        print(f"    Size: {format_bytes(record.size_bytes)}")


def run_discard(args: argparse.Namespace) -> None:
    if not args.yes and not confirm(f"Delete conflict file {args.conflict}?"):
        print("Aborted.")
        return
    discard_conflict(args.folder, args.conflict)
    print(f"Discarded: {args.conflict}")


def run_promote(args: argparse.Namespace) -> None:
    original = args.original
    if original is None:
        parent, name = posixpath.split(args.conflict)
        original = posixpath.join(parent, decode_conflict(name))

    if not args.yes and not confirm(f"Replace {original} with {args.conflict}?"):
        print("Aborted.")
        return
    promote_conflict(args.folder, original, args.conflict)
    print(f"Promoted: {args.conflict} -> {original}")


def run_versions(args: argparse.Namespace) -> None:
    entries = list_versions(args.folder, args.prefix)
    if not entries:
        print("No versions found.")
        return

    for entry in entries:
        if entry.is_dir:
            print(f"  {entry.file_name}/")
            continue
        stamp = entry.version_timestamp or "unversioned"
        print(f"  {entry.original_name}  [{stamp}]  {format_bytes(entry.size_bytes or 0)}")
        if entry.original_name != entry.file_name:
            print(f"    Stored as: {entry.file_name}")


def run_restore(args: argparse.Namespace) -> None:
    restore_version(args.folder, args.version, args.original, overwrite=args.overwrite)
    print(f"Restored: {args.version} -> {args.original}")


def run_storage(args: argparse.Namespace) -> None:
    report = storage_report(args.folder)
    if not report.exists:
        print("No versions directory.")
        return
    print(f"Versions: {report.file_count} files, {report.total_formatted}")


def run_cleanup(args: argparse.Namespace) -> None:
    if args.older_than is None:
        prompt = "Delete ALL historical versions?"
    else:
        prompt = f"Delete versions older than {args.older_than} days?"
    if not args.yes and not confirm(prompt):
        print("Aborted.")
        return

    if args.older_than is None:
        result = cleanup_all(args.folder)
    else:
        result = cleanup_older_than(args.folder, args.older_than, show_progress=True)

    if not result.success:
        print(f"Error: {result.error}")
        sys.exit(1)

    print(f"Deleted {result.files_deleted} files, freed {result.bytes_freed_formatted}")
    if result.skipped:
        print(f"  Warning: {result.skipped} files could not be deleted")


def run_open(args: argparse.Namespace) -> None:
    open_in_file_manager(args.folder)


COMMANDS = {
    "conflicts": run_conflicts,
    "discard": run_discard,
    "promote": run_promote,
    "versions": run_versions,
    "restore": run_restore,
    "storage": run_storage,
    "cleanup": run_cleanup,
    "open": run_open,
}


def main() -> None:
    """Main entry point."""
    args = parse_args()
    setup_logging(verbose=args.verbose, log_file=args.log_file)
    validate_args(args)

    try:
        COMMANDS[args.command](args)
    except VersionKeeperError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n\nInterrupted!")
        sys.exit(1)
