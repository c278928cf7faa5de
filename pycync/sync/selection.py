"""Cursor, selection and mode state over the unified file map."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .models import FileState, LocalOnly, Present, RemoteOnly, SyncAction

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    """Cursor movement direction."""

    NEXT = "next"
    PREV = "prev"


@dataclass(frozen=True)
class Browsing:
    """No file selected; the user moves the cursor."""


@dataclass(frozen=True)
class Deciding:
    """A file is selected and awaits a push/pull decision.

    The state is a snapshot taken at selection time. It is not refreshed
    if the file changes before the decision is made.
    """

    index: int
    path: str
    state: FileState


@dataclass(frozen=True)
class Empty:
    """Neither side has any files."""


Mode = Union[Browsing, Deciding, Empty]


def available_actions(state: FileState) -> frozenset[SyncAction]:
    """Return the actions the user may take on a file.

    Identical files have nothing to resolve, so no action is offered.

    Examples:
        >>> sorted(available_actions(LocalOnly("d1", b"")))
        [<SyncAction.PUSH: 'push'>]
    """
    if isinstance(state, LocalOnly):
        return frozenset({SyncAction.PUSH})
    if isinstance(state, RemoteOnly):
        return frozenset({SyncAction.PULL})
    if isinstance(state, Present) and not state.is_identical:
        return frozenset({SyncAction.PUSH, SyncAction.PULL})
    return frozenset()


class SelectionModel:
    """Navigation and selection over an ordered map of file states.

    The model is owned by a single controller and mutated only from its
    event loop.
    """

    def __init__(self, files: Optional[Mapping[str, FileState]] = None):
        """Initialize selection model.

        Args:
            files: Unified map produced by the reconciler
        """
        self._files: dict[str, FileState] = dict(files or {})
        self._paths: list[str] = list(self._files)
        self.cursor = 0
        self.selected: Optional[str] = None
        self.mode: Mode = Browsing() if self._files else Empty()

    @property
    def files(self) -> Mapping[str, FileState]:
        """Read-only view of the current unified map."""
        return self._files

    @property
    def count(self) -> int:
        return len(self._paths)

    def current_entry(self) -> tuple[str, FileState]:
        """Return the (path, state) pair under the cursor.

        Raises:
            IndexError: If there are no files
        """
        if not self._paths:
            raise IndexError("No files to select")
        path = self._paths[self.cursor]
        return path, self._files[path]

    def move(self, direction: Direction) -> None:
        """Move the cursor, wrapping around at either end.

        Does nothing when there are no files.
        """
        if not self._paths:
            self.cursor = 0
            return

        step = 1 if direction == Direction.NEXT else -1
        self.cursor = (self.cursor + step) % self.count

    def select(self, index: int) -> Deciding:
        """Select the file at ``index`` and freeze its state for a decision.

        Args:
            index: Position in the ordered map

        Returns:
            The new Deciding mode

        Raises:
            IndexError: If index is out of range
            RuntimeError: If the model is not browsing
        """
        if not 0 <= index < self.count:
            raise IndexError(f"Selection index {index} out of range ({self.count})")
        if not isinstance(self.mode, Browsing):
            raise RuntimeError(f"Cannot select while in {type(self.mode).__name__}")

        path = self._paths[index]
        self.cursor = index
        self.selected = path
        self.mode = Deciding(index=index, path=path, state=self._files[path])
        logger.debug("Selected %s", path)
        return self.mode

    def cancel(self) -> None:
        """Leave Deciding without touching storage."""
        if isinstance(self.mode, Deciding):
            self.selected = None
            self.mode = Browsing()

    def replace_files(self, files: Mapping[str, FileState]) -> None:
        """Swap in a freshly reconciled map.

        The cursor is kept as a number and clamped to the new entry count.
        Any pending selection is dropped.
        """
        self._files = dict(files)
        self._paths = list(self._files)
        self.selected = None

        if self._paths:
            self.cursor = min(self.cursor, self.count - 1)
            self.mode = Browsing()
        else:
            self.cursor = 0
            self.mode = Empty()
