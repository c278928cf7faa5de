"""Reconciliation of local and remote file enumerations.

The reconciler is a pure function of its two inputs. Collaborator errors
(unreadable files, failed fetches) never reach it: the scanner and the
remote fetcher raise instead of producing partial maps.
"""

from collections.abc import Mapping

from .models import FileSnapshot, FileState, LocalOnly, Present, RemoteOnly

Files = dict[str, FileState]
"""Unified map of logical path to state, ordered by path."""


def reconcile(
    local: Mapping[str, FileSnapshot],
    remote: Mapping[str, FileSnapshot],
) -> Files:
    """Merge local and remote enumerations into a unified classification.

    Every key of the union is visited exactly once. Digests and contents
    are attached verbatim from the source maps.

    Args:
        local: Mapping of logical path to local snapshot
        remote: Mapping of logical path to remote snapshot

    Returns:
        Dictionary of path to FileState, ordered lexicographically by path

    Examples:
        >>> files = reconcile({"a.txt": FileSnapshot("d1", b"a")}, {})
        >>> files["a.txt"]
        LocalOnly(digest='d1', contents=b'a')
    """
    files: Files = {}

    for path in sorted(set(local) | set(remote)):
        local_file = local.get(path)
        remote_file = remote.get(path)

        if local_file is None:
            files[path] = RemoteOnly(remote[path].digest, remote[path].contents)
        elif remote_file is None:
            files[path] = LocalOnly(local_file.digest, local_file.contents)
        else:
            files[path] = Present(
                local_digest=local_file.digest,
                local_contents=local_file.contents,
                remote_digest=remote_file.digest,
                remote_contents=remote_file.contents,
            )

    return files


def split_sides(
    files: Mapping[str, FileState],
) -> tuple[dict[str, FileSnapshot], dict[str, FileSnapshot]]:
    """Project a unified map back into its local and remote source maps.

    Used to merge a previous result with a fresh reading of one side
    without losing what is known about the other.

    Args:
        files: Unified map produced by :func:`reconcile`

    Returns:
        Tuple of (local, remote) snapshot maps
    """
    local: dict[str, FileSnapshot] = {}
    remote: dict[str, FileSnapshot] = {}

    for path, state in files.items():
        if isinstance(state, LocalOnly):
            local[path] = state.snapshot
        elif isinstance(state, RemoteOnly):
            remote[path] = state.snapshot
        else:
            local[path] = state.local
            remote[path] = state.remote

    return local, remote


def summarize(files: Mapping[str, FileState]) -> dict[str, int]:
    """Count files per category.

    Returns:
        Dictionary with ``local_only``, ``remote_only``, ``identical``
        and ``modified`` counts
    """
    stats = {"local_only": 0, "remote_only": 0, "identical": 0, "modified": 0}

    for state in files.values():
        if isinstance(state, LocalOnly):
            stats["local_only"] += 1
        elif isinstance(state, RemoteOnly):
            stats["remote_only"] += 1
        elif state.is_identical:
            stats["identical"] += 1
        else:
            stats["modified"] += 1

    return stats
