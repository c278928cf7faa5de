"""Exceptions raised by pycync."""

from typing import Optional


class CyncError(Exception):
    """Base exception for all pycync errors."""


class CyncConfigError(CyncError):
    """Configuration is missing or cannot be parsed."""


class SetupError(CyncError):
    """Creating the local directory or the remote bucket failed."""


class ScanFailure(CyncError):
    """Local enumeration or a local file read failed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class FetchFailure(CyncError):
    """Remote listing or an object fetch failed."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class ObjectNotFound(FetchFailure):
    """A listed key could not be found when fetched."""


class SyncActionError(CyncError):
    """A push or pull for a single path failed.

    Attributes:
        path: Logical path the action was performed on
    """

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class PushFailure(SyncActionError):
    """Writing local contents to the content store failed."""


class PullFailure(SyncActionError):
    """Writing remote contents to the local filesystem failed."""


class InvalidAction(SyncActionError):
    """The requested action does not apply to the file's state."""


class NothingToPush(InvalidAction):
    """Push requested for a file that only exists remotely."""


class NothingToPull(InvalidAction):
    """Pull requested for a file that only exists locally."""
