"""PyCync - reconcile a local folder with an S3 bucket, one file at a time."""

from .exceptions import (
    CyncConfigError,
    CyncError,
    FetchFailure,
    InvalidAction,
    NothingToPull,
    NothingToPush,
    ObjectNotFound,
    PullFailure,
    PushFailure,
    ScanFailure,
    SetupError,
    SyncActionError,
)
from .store import S3ContentStore
from .utils import compute_digest

__all__ = [
    "S3ContentStore",
    "CyncError",
    "CyncConfigError",
    "SetupError",
    "ScanFailure",
    "FetchFailure",
    "ObjectNotFound",
    "SyncActionError",
    "PushFailure",
    "PullFailure",
    "InvalidAction",
    "NothingToPush",
    "NothingToPull",
    "compute_digest",
]
