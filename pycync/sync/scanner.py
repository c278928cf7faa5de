"""Local directory scanning for reconciliation."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from ..exceptions import ScanFailure
from ..utils import DEFAULT_MAX_WORKERS, compute_digest, to_key
from .models import FileSnapshot

logger = logging.getLogger(__name__)


class LocalTreeScanner:
    """Scans a local directory tree and reads every file in it.

    Relative paths are exposed POSIX-style regardless of platform so they
    can be compared directly with content store keys.

    Examples:
        >>> scanner = LocalTreeScanner(Path("/home/user/.cync"))
        >>> files = scanner.walk()
        >>> for path, snapshot in files.items():
        ...     print(path, snapshot.digest)
    """

    def __init__(
        self,
        root: Path,
        exclude_dot_files: bool = False,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        """Initialize local tree scanner.

        Args:
            root: Local sync root
            exclude_dot_files: Whether to skip files/folders starting with a dot
            max_workers: Number of threads used to read files
        """
        self.root = root
        self.exclude_dot_files = exclude_dot_files
        self.max_workers = max_workers

    def ensure_root(self) -> None:
        """Create the sync root if it does not exist.

        Raises:
            ScanFailure: If the root exists but is not a directory, or
                cannot be created
        """
        if self.root.is_dir():
            return
        if self.root.exists():
            raise ScanFailure(
                f"Local path is not a directory: {self.root}", str(self.root)
            )

        logger.info("Creating local directory %s", self.root)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ScanFailure(
                f"Failed to create local directory {self.root}: {e}", str(self.root)
            ) from e

    def should_ignore(self, path: Path) -> bool:
        """Check if a path should be skipped during the walk."""
        return self.exclude_dot_files and path.name.startswith(".")

    def list_files(self, directory: Path) -> list[Path]:
        """Recursively list the regular files below a directory.

        Args:
            directory: Directory to list

        Returns:
            List of absolute file paths

        Raises:
            ScanFailure: If a directory cannot be read
        """
        files: list[Path] = []

        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            raise ScanFailure(
                f"Could not read directory {directory}: {e}", str(directory)
            ) from e

        for item in entries:
            if self.should_ignore(item):
                continue
            if item.is_dir():
                files.extend(self.list_files(item))
            elif item.is_file():
                files.append(item)
            else:
                logger.debug("Skipping non-regular file: %s", item)

        return files

    def read_file(self, file_path: Path) -> tuple[str, FileSnapshot]:
        """Read a single file and compute its digest.

        Args:
            file_path: Absolute path to the file

        Returns:
            Tuple of (logical path, snapshot)

        Raises:
            ScanFailure: If the file cannot be read
        """
        key = to_key(file_path.relative_to(self.root))
        try:
            contents = file_path.read_bytes()
        except OSError as e:
            raise ScanFailure(f"Could not read file at path: {key}: {e}", key) from e
        return key, FileSnapshot(compute_digest(contents), contents)

    def walk(self) -> dict[str, FileSnapshot]:
        """Enumerate and read every file under the sync root.

        The root is created if it is missing, in which case the result is
        empty.

        Returns:
            Dictionary mapping logical path to FileSnapshot

        Raises:
            ScanFailure: If the root cannot be created, or any directory or
                file cannot be read
        """
        scan_start = time.time()
        self.ensure_root()

        paths = self.list_files(self.root)
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            results = dict(executor.map(self.read_file, paths))

        logger.debug(
            "Local scan took %.2fs for %d files", time.time() - scan_start, len(results)
        )
        return results
