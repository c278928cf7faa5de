"""Data model for reconciling a local tree with a content store."""

from dataclasses import dataclass
from enum import Enum
from typing import Union

Digest = str
"""MD5 hex digest of a file's raw bytes (equality only)."""


@dataclass(frozen=True)
class FileSnapshot:
    """One side's reading of a file: its digest and contents."""

    digest: Digest
    """Digest of ``contents``"""

    contents: bytes
    """Raw file contents"""

    @property
    def size(self) -> int:
        """Size of the contents in bytes."""
        return len(self.contents)


@dataclass(frozen=True)
class RemoteOnly:
    """File exists in the content store but not locally."""

    digest: Digest
    contents: bytes

    @property
    def snapshot(self) -> FileSnapshot:
        return FileSnapshot(self.digest, self.contents)


@dataclass(frozen=True)
class LocalOnly:
    """File exists locally but not in the content store."""

    digest: Digest
    contents: bytes

    @property
    def snapshot(self) -> FileSnapshot:
        return FileSnapshot(self.digest, self.contents)


@dataclass(frozen=True)
class Present:
    """File exists on both sides.

    Both digests are carried so identity can be tested without touching
    the contents.
    """

    local_digest: Digest
    local_contents: bytes
    remote_digest: Digest
    remote_contents: bytes

    @property
    def is_identical(self) -> bool:
        """True if the local and remote copies have the same digest."""
        return self.local_digest == self.remote_digest

    @property
    def local(self) -> FileSnapshot:
        return FileSnapshot(self.local_digest, self.local_contents)

    @property
    def remote(self) -> FileSnapshot:
        return FileSnapshot(self.remote_digest, self.remote_contents)


FileState = Union[RemoteOnly, LocalOnly, Present]
"""Classification of a single logical path across both stores."""


class SyncAction(str, Enum):
    """User-directed actions that resolve a divergence."""

    PUSH = "push"
    """Write the local copy to the content store"""

    PULL = "pull"
    """Write the remote copy to the local filesystem"""


def describe_state(state: FileState) -> str:
    """Return a short human-readable label for a file state.

    Examples:
        >>> describe_state(LocalOnly("d1", b""))
        'local only'
    """
    if isinstance(state, LocalOnly):
        return "local only"
    if isinstance(state, RemoteOnly):
        return "remote only"
    if state.is_identical:
        return "identical"
    return "modified"
