"""Reconciliation engine for pycync - classify, select and resolve files."""

from .engine import SyncController
from .models import (
    Digest,
    FileSnapshot,
    FileState,
    LocalOnly,
    Present,
    RemoteOnly,
    SyncAction,
    describe_state,
)
from .operations import SyncActions
from .reconciler import Files, reconcile, split_sides, summarize
from .remote import ContentStore, fetch_remote
from .scanner import LocalTreeScanner
from .selection import (
    Browsing,
    Deciding,
    Direction,
    Empty,
    Mode,
    SelectionModel,
    available_actions,
)

__all__ = [
    "SyncController",
    "SyncActions",
    "SyncAction",
    "Digest",
    "FileSnapshot",
    "FileState",
    "LocalOnly",
    "RemoteOnly",
    "Present",
    "describe_state",
    "Files",
    "reconcile",
    "split_sides",
    "summarize",
    "ContentStore",
    "fetch_remote",
    "LocalTreeScanner",
    "SelectionModel",
    "Mode",
    "Browsing",
    "Deciding",
    "Empty",
    "Direction",
    "available_actions",
]
