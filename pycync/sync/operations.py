"""Push and pull operations for a single selected path."""

import logging
from pathlib import Path

from ..exceptions import NothingToPull, NothingToPush, PullFailure, PushFailure
from ..utils import resolve_under
from .models import FileState, LocalOnly, Present, RemoteOnly
from .remote import ContentStore

logger = logging.getLogger(__name__)


class SyncActions:
    """Executes user-confirmed transfers between the two stores.

    Actions never touch the unified map. After a successful action the
    caller must rescan and reconcile before trusting it again.
    """

    def __init__(self, store: ContentStore, local_root: Path):
        """Initialize sync actions.

        Args:
            store: Content store to push to
            local_root: Local sync root to pull into
        """
        self.store = store
        self.local_root = local_root

    def push_to_remote(self, path: str, state: FileState) -> None:
        """Write the local copy of a file to the content store.

        On a file present on both sides, the local copy overwrites the
        remote one.

        Args:
            path: Logical path
            state: State of the file at selection time

        Raises:
            NothingToPush: If the file only exists remotely
            PushFailure: If the upload fails
        """
        if isinstance(state, RemoteOnly):
            raise NothingToPush(f"Nothing to push: {path} only exists remotely", path)

        contents = state.contents if isinstance(state, LocalOnly) else state.local_contents

        logger.debug("Pushing %s (%d bytes)", path, len(contents))
        try:
            self.store.put(path, contents)
        except PushFailure:
            raise
        except Exception as e:
            raise PushFailure(f"Failed to sync local with remote: {path}: {e}", path) from e

    def pull_from_remote(self, path: str, state: FileState) -> Path:
        """Write the remote copy of a file under the local root.

        Intermediate directories are created as needed. On a file present
        on both sides, the remote copy overwrites the local one.

        Args:
            path: Logical path
            state: State of the file at selection time

        Returns:
            Path the file was written to

        Raises:
            NothingToPull: If the file only exists locally
            PullFailure: If the path escapes the root or the write fails
        """
        if isinstance(state, LocalOnly):
            raise NothingToPull(f"Nothing to pull: {path} only exists locally", path)

        contents = (
            state.remote_contents if isinstance(state, Present) else state.contents
        )

        try:
            local_path = resolve_under(self.local_root, path)
        except ValueError as e:
            raise PullFailure(str(e), path) from e

        logger.debug("Pulling %s (%d bytes) to %s", path, len(contents), local_path)
        try:
            local_path.parent.mkdir(parents=True, exist_ok=True)
            local_path.write_bytes(contents)
        except OSError as e:
            raise PullFailure(f"Failed to sync remote with local: {path}: {e}", path) from e

        return local_path
