"""Configuration management for pycync.

Settings are resolved from the environment first and fall back to a JSON
file in the user's config directory:

- ``LOCAL_DIRECTORY`` / ``REMOTE_DIRECTORY``: used when both are set
- ``~/.config/pycync/config.json``: written by ``pycync init``
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .exceptions import CyncConfigError

logger = logging.getLogger(__name__)

LOCAL_DIRECTORY_ENV = "LOCAL_DIRECTORY"
REMOTE_DIRECTORY_ENV = "REMOTE_DIRECTORY"
PREFIX_ENV = "CYNC_PREFIX"
CONFIG_DIR_ENV = "CYNC_CONFIG_DIR"

DEFAULT_LOCAL_DIRECTORY_NAME = ".cync"
DEFAULT_REMOTE_DIRECTORY = "cync"


@dataclass
class Settings:
    """Resolved sync settings."""

    local_directory: Path
    """Local sync root"""

    remote_directory: str
    """Bucket name in the content store"""

    prefix: str = ""
    """Optional key prefix inside the bucket"""


class Config:
    """Loads and saves pycync settings."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_dir: Directory holding config.json. Defaults to
                ``$CYNC_CONFIG_DIR`` or ~/.config/pycync/
        """
        if config_dir is None:
            env_dir = os.environ.get(CONFIG_DIR_ENV)
            config_dir = (
                Path(env_dir) if env_dir else Path.home() / ".config" / "pycync"
            )
        self.config_dir = config_dir

    def get_config_path(self) -> Path:
        """Return the path of the config file."""
        return self.config_dir / "config.json"

    def is_configured(self) -> bool:
        """Check whether settings are available from env or file."""
        if os.environ.get(LOCAL_DIRECTORY_ENV) and os.environ.get(
            REMOTE_DIRECTORY_ENV
        ):
            return True
        return self.get_config_path().exists()

    def load(self) -> Settings:
        """Resolve settings.

        Environment variables take precedence over the config file, but
        only when both are set.

        Returns:
            Resolved Settings

        Raises:
            CyncConfigError: If the config file is missing or corrupted
        """
        local = os.environ.get(LOCAL_DIRECTORY_ENV)
        remote = os.environ.get(REMOTE_DIRECTORY_ENV)
        if local and remote:
            logger.debug("Using settings from environment")
            return Settings(
                local_directory=Path(local).expanduser(),
                remote_directory=remote,
                prefix=os.environ.get(PREFIX_ENV, ""),
            )

        config_path = self.get_config_path()
        if not config_path.exists():
            raise CyncConfigError(
                f"Config file missing: {config_path}. Run 'pycync init' or set "
                f"{LOCAL_DIRECTORY_ENV} and {REMOTE_DIRECTORY_ENV}."
            )

        try:
            with open(config_path, encoding="utf-8") as f:
                data = json.load(f)
            return Settings(
                local_directory=Path(data["local_directory"]).expanduser(),
                remote_directory=data["remote_directory"],
                prefix=data.get("prefix", ""),
            )
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise CyncConfigError(f"Config file corrupted: {config_path}: {e}") from e

    def save(self, settings: Settings) -> Path:
        """Write settings to the config file.

        Returns:
            Path of the written file

        Raises:
            CyncConfigError: If the file cannot be written
        """
        config_path = self.get_config_path()
        data = {
            "local_directory": str(settings.local_directory),
            "remote_directory": settings.remote_directory,
            "prefix": settings.prefix,
        }

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise CyncConfigError(f"Failed to save config: {e}") from e

        logger.debug("Saved config to %s", config_path)
        return config_path


config = Config()
