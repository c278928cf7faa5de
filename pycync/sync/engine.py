"""Controller that owns the unified file map and drives resolution."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from ..exceptions import InvalidAction, SyncActionError
from ..utils import DEFAULT_MAX_WORKERS
from .models import SyncAction
from .operations import SyncActions
from .reconciler import Files, reconcile
from .remote import ContentStore, fetch_remote
from .scanner import LocalTreeScanner
from .selection import Deciding, SelectionModel, available_actions

logger = logging.getLogger(__name__)


class SyncController:
    """Owns the unified map and the selection state.

    All mutation happens sequentially through this object. A refresh runs
    the local scan and the remote fetch in parallel, then swaps the new
    map in only once both have completed.

    Examples:
        >>> controller = SyncController(store, LocalTreeScanner(Path("~/.cync")))
        >>> controller.refresh()
        >>> controller.selection.select(0)
        >>> controller.resolve(SyncAction.PUSH)
    """

    def __init__(
        self,
        store: ContentStore,
        scanner: LocalTreeScanner,
        actions: Optional[SyncActions] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        """Initialize sync controller.

        Args:
            store: Content store collaborator
            scanner: Local tree scanner collaborator
            actions: Push/pull executor (defaults to one over the scanner root)
            max_workers: Number of threads used for per-object fetches
        """
        self.store = store
        self.scanner = scanner
        self.actions = actions or SyncActions(store, scanner.root)
        self.max_workers = max_workers
        self.selection = SelectionModel()
        self.errors: dict[str, str] = {}

    @property
    def local_root(self) -> Path:
        return self.scanner.root

    @property
    def files(self) -> Files:
        return dict(self.selection.files)

    def load(self) -> Files:
        """Scan both sides concurrently and reconcile the results.

        Nothing is published; see :meth:`refresh`.

        Raises:
            ScanFailure: If the local scan fails
            FetchFailure: If the remote listing or a fetch fails
        """
        start = time.time()
        with ThreadPoolExecutor(max_workers=2) as executor:
            local_future = executor.submit(self.scanner.walk)
            remote_future = executor.submit(
                fetch_remote, self.store, self.max_workers
            )
            local_files = local_future.result()
            remote_files = remote_future.result()

        files = reconcile(local_files, remote_files)
        logger.debug(
            "Reconciled %d local and %d remote file(s) into %d entries in %.2fs",
            len(local_files),
            len(remote_files),
            len(files),
            time.time() - start,
        )
        return files

    def refresh(self) -> Files:
        """Rebuild the unified map and publish it.

        On failure the previously published map stays in place and the
        error propagates.

        Returns:
            The newly published map
        """
        files = self.load()
        self.selection.replace_files(files)
        self.errors = {path: msg for path, msg in self.errors.items() if path in files}
        return files

    def resolve(self, action: SyncAction) -> bool:
        """Apply an action to the selected file.

        The action runs against the snapshot frozen at selection time. On
        success the map is refreshed; on a per-path failure the error is
        recorded against the path and the map is left as it was.

        Args:
            action: Push or pull

        Returns:
            True if the action succeeded, False if it failed for this path

        Raises:
            RuntimeError: If no file is selected
            InvalidAction: If the action is not offered for the selected file
            ScanFailure: If the refresh after a successful action fails
            FetchFailure: If the refresh after a successful action fails
        """
        mode = self.selection.mode
        if not isinstance(mode, Deciding):
            raise RuntimeError("No file selected")

        if action not in available_actions(mode.state):
            raise InvalidAction(
                f"Cannot {action.value} {mode.path}: action not available", mode.path
            )

        try:
            if action == SyncAction.PUSH:
                self.actions.push_to_remote(mode.path, mode.state)
            else:
                self.actions.pull_from_remote(mode.path, mode.state)
        except SyncActionError as e:
            logger.warning("%s of %s failed: %s", action.value, mode.path, e)
            self.errors[mode.path] = str(e)
            self.selection.cancel()
            return False

        logger.info("%s of %s succeeded", action.value.capitalize(), mode.path)
        self.errors.pop(mode.path, None)
        self.selection.cancel()
        self.refresh()
        return True
