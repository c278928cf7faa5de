"""Utility functions for pycync."""

import hashlib
from pathlib import Path, PurePosixPath

# =============================================================================
# Constants
# =============================================================================

# Worker threads used for per-file reads and per-object fetches
DEFAULT_MAX_WORKERS: int = 8

# Page size for bucket listings
DEFAULT_PAGE_SIZE: int = 1000

# Width used when shortening digests for display
DIGEST_DISPLAY_WIDTH: int = 12


# =============================================================================
# Digest utilities
# =============================================================================


def compute_digest(data: bytes) -> str:
    """Compute the content digest of a byte string.

    The digest is only used to compare a local and a remote copy for
    byte-for-byte equality.

    Args:
        data: Raw file contents

    Returns:
        MD5 digest as a 32 character lowercase hex string

    Examples:
        >>> compute_digest(b"")
        'd41d8cd98f00b204e9800998ecf8427e'
        >>> compute_digest(b"hello")
        '5d41402abc4b2a76b9719d911017c592'
    """
    return hashlib.md5(data, usedforsecurity=False).hexdigest()


def short_digest(digest: str, width: int = DIGEST_DISPLAY_WIDTH) -> str:
    """Shorten a digest for table display.

    Examples:
        >>> short_digest("5d41402abc4b2a76b9719d911017c592")
        '5d41402abc4b'
    """
    return digest[:width]


# =============================================================================
# Path utilities
# =============================================================================


def to_key(relative_path: Path) -> str:
    """Convert a relative filesystem path to a POSIX-style logical path.

    Args:
        relative_path: Path relative to the sync root

    Returns:
        Path using forward slashes on all platforms
    """
    return relative_path.as_posix()


def resolve_under(root: Path, key: str) -> Path:
    """Resolve a logical path under a local root directory.

    Args:
        root: Local sync root
        key: POSIX-style logical path

    Returns:
        Absolute path inside ``root``

    Raises:
        ValueError: If the key is absolute, escapes the root, or is not in
            canonical form (``a//b``, ``./a``)
    """
    posix = PurePosixPath(key)
    if posix.is_absolute() or ".." in posix.parts or not posix.parts:
        raise ValueError(f"Path escapes sync root: {key}")
    if "/".join(posix.parts) != key:
        raise ValueError(f"Path is not a canonical relative path: {key}")
    return root.joinpath(*posix.parts)


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"
