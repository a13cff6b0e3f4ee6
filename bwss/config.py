"""Configuration loading for bwss sync directories."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .exceptions import BwssConfigError
from .sync.ignore import IGNORE_FILE_NAME, load_ignore_file
from .sync.scanner import CONFIG_FILE_NAME

logger = logging.getLogger(__name__)

# Folder used when no config file is present
DEFAULT_FOLDER_NAME = "bwss"

# Environment variable holding an unlocked bw session token
SESSION_ENV_VAR = "BW_SESSION"

# Environment variable overriding the bw executable
BINARY_ENV_VAR = "BWSS_BW_BINARY"

DEFAULT_BINARY = "bw"


def read_folder_name(root: Path) -> str:
    """Read the remote folder name for a sync directory.

    Args:
        root: Synced directory

    Returns:
        Folder name from the config file, or the default name

    Raises:
        BwssConfigError: If the config file exists but is empty
    """
    config_path = root / CONFIG_FILE_NAME
    if not config_path.exists():
        return DEFAULT_FOLDER_NAME

    folder_name = config_path.read_text(encoding="utf-8").strip()
    if not folder_name:
        raise BwssConfigError(
            f"{CONFIG_FILE_NAME} file is empty; its contents is used as the "
            "Bitwarden folder name"
        )
    return folder_name


def write_folder_name(root: Path, folder_name: str) -> Path:
    """Write the remote folder name to the config file.

    Args:
        root: Synced directory
        folder_name: Bitwarden folder name to use

    Returns:
        Path of the written config file
    """
    folder_name = folder_name.strip()
    if not folder_name:
        raise BwssConfigError("Folder name cannot be empty")
    config_path = root / CONFIG_FILE_NAME
    config_path.write_text(folder_name + "\n", encoding="utf-8")
    return config_path


@dataclass
class SyncConfig:
    """Settings for one sync directory."""

    root: Path
    """Synced directory"""

    folder_name: str = DEFAULT_FOLDER_NAME
    """Bitwarden folder used as the sync scope"""

    ignore_patterns: list[str] = field(default_factory=list)
    """Glob patterns excluded from the candidate set"""

    @classmethod
    def load(cls, root: Path) -> "SyncConfig":
        """Load configuration from a sync directory.

        Args:
            root: Synced directory

        Returns:
            SyncConfig instance

        Raises:
            BwssConfigError: If the directory is missing or the config is invalid
        """
        root = Path(root)
        if not root.exists():
            raise BwssConfigError(f"Path does not exist: {root}")
        if not root.is_dir():
            raise BwssConfigError(f"Path is not a directory: {root}")

        folder_name = read_folder_name(root)
        ignore_patterns = load_ignore_file(root / IGNORE_FILE_NAME)
        logger.debug(
            "Loaded config for %s: folder=%s, %d ignore pattern(s)",
            root,
            folder_name,
            len(ignore_patterns),
        )
        return cls(
            root=root,
            folder_name=folder_name,
            ignore_patterns=ignore_patterns,
        )
