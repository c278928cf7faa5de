"""Remote enumeration: list every key in the content store and fetch it."""

import logging
import time
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

from ..utils import DEFAULT_MAX_WORKERS, compute_digest
from .models import FileSnapshot

logger = logging.getLogger(__name__)


class ContentStore(Protocol):
    """Operations the sync engine needs from an object store."""

    def list_keys(self) -> Iterator[str]: ...

    def get(self, path: str) -> bytes: ...

    def put(self, path: str, data: bytes) -> None: ...


def fetch_remote(
    store: ContentStore, max_workers: int = DEFAULT_MAX_WORKERS
) -> dict[str, FileSnapshot]:
    """Fetch every object in the content store.

    The listing is fully drained before any object is fetched, so the
    result only ever reflects a complete enumeration.

    Args:
        store: Content store to read from
        max_workers: Number of threads used for per-object fetches

    Returns:
        Dictionary mapping logical path to FileSnapshot

    Raises:
        FetchFailure: If listing fails or any listed object cannot be fetched
    """
    fetch_start = time.time()
    keys = list(store.list_keys())
    logger.debug("Listed %d remote object(s)", len(keys))

    def fetch_one(key: str) -> tuple[str, FileSnapshot]:
        contents = store.get(key)
        return key, FileSnapshot(compute_digest(contents), contents)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        remote = dict(executor.map(fetch_one, keys))

    logger.info(
        "Fetched %d object(s) from remote host in %.2fs",
        len(remote),
        time.time() - fetch_start,
    )
    return remote
