"""
Filename conventions used by the sync daemon.

Two encodings are understood:

- Conflict copies: ``<stem>.sync-conflict-<token><ext>``
- Historical versions: ``<stem>~YYYYMMDD-HHMMSS<ext>``

Decoding is total. Names that do not carry a marker, or whose marker is
malformed, decode to themselves.
"""

from typing import Optional

CONFLICT_MARKER = ".sync-conflict-"
VERSIONS_DIR_NAME = ".stversions"
VERSION_SEPARATOR = "~"

VERSION_STAMP_LENGTH = 15
VERSION_STAMP_DASH_INDEX = 8


def is_conflict_name(name: str) -> bool:
    """Check whether a filename carries the conflict marker."""
    return CONFLICT_MARKER in name


def decode_conflict(name: str) -> str:
    """
    Strip the conflict marker and token from a filename.

    The extension is everything from the last dot after the marker, so
    ``a.sync-conflict-X.tar.gz`` decodes to ``a.gz``.
    """
    pos = name.find(CONFLICT_MARKER)
    if pos == -1:
        return name

    before = name[:pos]
    after = name[pos:]
    ext_pos = after.rfind(".")
    # The marker itself starts with a dot, so only a later dot is an extension
    if ext_pos > 0:
        return before + after[ext_pos:]
    return before


def is_version_stamp(stamp: str) -> bool:
    """Check that a string has the ``YYYYMMDD-HHMMSS`` shape."""
    return (
        len(stamp) == VERSION_STAMP_LENGTH
        and stamp[VERSION_STAMP_DASH_INDEX] == "-"
    )


def format_version_stamp(stamp: str) -> str:
    """Render a validated ``YYYYMMDD-HHMMSS`` stamp as ``YYYY-MM-DD HH:MM:SS``."""
    return (
        f"{stamp[0:4]}-{stamp[4:6]}-{stamp[6:8]} "
        f"{stamp[9:11]}:{stamp[11:13]}:{stamp[13:15]}"
    )


def decode_version(name: str) -> tuple[str, Optional[str]]:
    """
    Split a versioned filename into its original name and timestamp.

    Returns:
        Tuple of (original name, formatted timestamp). The timestamp is None
        and the name is returned unchanged when no valid stamp is present.
    """
    tilde_pos = name.rfind(VERSION_SEPARATOR)
    if tilde_pos == -1:
        return name, None

    before_tilde = name[:tilde_pos]
    after_tilde = name[tilde_pos + 1:]

    dot_pos = after_tilde.find(".")
    if dot_pos == -1:
        version_part, extension = after_tilde, ""
    else:
        version_part, extension = after_tilde[:dot_pos], after_tilde[dot_pos:]

    if not is_version_stamp(version_part):
        return name, None

    return before_tilde + extension, format_version_stamp(version_part)
