"""Shared fixtures for pycync tests."""

from collections.abc import Iterator
from pathlib import Path
from typing import Optional

import pytest

from pycync.exceptions import FetchFailure, ObjectNotFound, PushFailure
from pycync.sync import FileSnapshot, LocalTreeScanner, SyncController
from pycync.utils import compute_digest


class InMemoryStore:
    """Content store kept in a dictionary, with switchable failures."""

    def __init__(self, objects: Optional[dict[str, bytes]] = None):
        self.objects: dict[str, bytes] = dict(objects or {})
        self.fail_listing = False
        self.fail_put = False
        self.puts: list[tuple[str, bytes]] = []

    def list_keys(self) -> Iterator[str]:
        if self.fail_listing:
            raise FetchFailure("listing failed")
        yield from list(self.objects)

    def get(self, path: str) -> bytes:
        if path not in self.objects:
            raise ObjectNotFound(f"Object not found: {path}", path)
        return self.objects[path]

    def put(self, path: str, data: bytes) -> None:
        if self.fail_put:
            raise PushFailure(f"Failed to upload {path}", path)
        self.puts.append((path, data))
        self.objects[path] = data


def snapshot(data: bytes) -> FileSnapshot:
    """Build a snapshot with a real digest."""
    return FileSnapshot(compute_digest(data), data)


@pytest.fixture
def store():
    """Provide an empty in-memory content store."""
    return InMemoryStore()


@pytest.fixture
def local_root(tmp_path: Path) -> Path:
    """Provide an existing, empty local sync root."""
    root = tmp_path / "cync"
    root.mkdir()
    return root


@pytest.fixture
def controller(store, local_root):
    """Provide a controller over the in-memory store and a temp directory."""
    return SyncController(store, LocalTreeScanner(local_root), max_workers=2)
