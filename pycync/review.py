"""Interactive review loop: render the file table and dispatch key presses."""

import logging
from typing import Callable, Optional

import click
from rich.panel import Panel

from .exceptions import FetchFailure, ScanFailure
from .output import OutputFormatter, build_files_table
from .sync.engine import SyncController
from .sync.models import SyncAction
from .sync.selection import Deciding, Direction, Empty, Mode, available_actions

logger = logging.getLogger(__name__)

ENTER_KEYS = {"\r", "\n"}
NEXT_KEYS = {"j", "\x1b[B"}
PREV_KEYS = {"k", "\x1b[A"}


def footer_text(mode: Mode) -> str:
    """Return the key help shown under the table for a mode."""
    if isinstance(mode, Empty):
        return "No files found. Refresh: r, Quit: q"
    if not isinstance(mode, Deciding):
        return "Up/Down: j/k, Select: <Enter>, Refresh: r, Quit: q"

    actions = available_actions(mode.state)
    if actions == {SyncAction.PUSH, SyncAction.PULL}:
        return "Select an action: Push (t)o remote / Pull (f)rom remote, (q)uit to previous screen"
    if SyncAction.PUSH in actions:
        return "Select an action: Push (t)o remote, (q)uit to previous screen"
    if SyncAction.PULL in actions:
        return "Select an action: Pull (f)rom remote, (q)uit to previous screen"
    return "No actions available. Press (q) to return"


class ReviewSession:
    """Terminal front end over a SyncController.

    Only reads the controller's state and calls its mutators; all
    reconciliation logic lives in the controller.
    """

    def __init__(
        self,
        controller: SyncController,
        out: OutputFormatter,
        read_key: Callable[[], str] = click.getchar,
        clear_screen: bool = True,
    ):
        """Initialize review session.

        Args:
            controller: Controller owning the unified map
            out: Output formatter used for rendering
            read_key: Callable returning the next key press
            clear_screen: Whether to clear the terminal before each render
        """
        self.controller = controller
        self.out = out
        self.read_key = read_key
        self.clear_screen = clear_screen
        self.message: Optional[str] = None

    def render(self) -> None:
        """Draw the file table, the status message and the key help."""
        selection = self.controller.selection
        if self.clear_screen:
            self.out.console.clear()

        table = build_files_table(
            dict(selection.files),
            cursor=None if isinstance(selection.mode, Empty) else selection.cursor,
            errors=self.controller.errors,
            title=f"Cync: {self.controller.local_root}",
        )
        self.out.print(table)
        if self.message:
            self.out.print(Panel(self.message, style="red"))
        self.out.print(footer_text(selection.mode))

    def refresh(self) -> None:
        """Refresh the map, keeping the last good view on failure."""
        try:
            self.controller.refresh()
            self.message = None
        except (ScanFailure, FetchFailure) as e:
            logger.warning("Refresh failed: %s", e)
            self.message = f"Refresh failed: {e}"

    def resolve(self, action: SyncAction) -> None:
        try:
            if self.controller.resolve(action):
                self.message = None
        except (ScanFailure, FetchFailure) as e:
            logger.warning("Refresh after %s failed: %s", action.value, e)
            self.message = f"Refresh failed: {e}"

    def handle_key(self, key: str) -> bool:
        """Apply one key press.

        Args:
            key: Key as returned by ``read_key``

        Returns:
            False when the session should end, True otherwise
        """
        selection = self.controller.selection
        mode = selection.mode

        if isinstance(mode, Deciding):
            actions = available_actions(mode.state)
            if key == "q":
                selection.cancel()
            elif key == "t" and SyncAction.PUSH in actions:
                self.resolve(SyncAction.PUSH)
            elif key == "f" and SyncAction.PULL in actions:
                self.resolve(SyncAction.PULL)
            return True

        if key == "q":
            return False
        if key == "r":
            self.refresh()
        elif isinstance(mode, Empty):
            return True
        elif key in NEXT_KEYS:
            selection.move(Direction.NEXT)
        elif key in PREV_KEYS:
            selection.move(Direction.PREV)
        elif key in ENTER_KEYS:
            selection.select(selection.cursor)
        return True

    def run(self) -> None:
        """Run the render/read loop until the user quits."""
        while True:
            self.render()
            if not self.handle_key(self.read_key()):
                return
