"""Directory scanning utilities for sync operations."""

import logging
import os
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .ignore import IgnoreRules

logger = logging.getLogger(__name__)

# Holds the folder name; never synced
CONFIG_FILE_NAME = ".bwss"


class EntryKind(str, Enum):
    """What a name in the sync directory refers to."""

    MISSING = "missing"
    FILE = "file"
    OTHER = "other"
    """Directory, symlink, socket or anything else that is not a regular file"""


@dataclass
class LocalFile:
    """Represents a local file with metadata."""

    path: Path
    """Absolute path to the file"""

    name: str
    """File name, matched against remote item names"""

    size: int
    """File size in bytes"""

    mtime: float
    """Last modification time (Unix timestamp)"""

    @classmethod
    def from_path(cls, file_path: Path) -> "LocalFile":
        """Create LocalFile from a path.

        Args:
            file_path: Path to the file

        Returns:
            LocalFile instance
        """
        st = file_path.lstat()
        return cls(
            path=file_path,
            name=file_path.name,
            size=st.st_size,
            mtime=st.st_mtime,
        )


def is_plain_name(name: str) -> bool:
    """Return True if name refers to an entry directly inside a directory.

    Examples:
        >>> is_plain_name("id_rsa")
        True
        >>> is_plain_name("../id_rsa")
        False
    """
    if name in ("", ".", ".."):
        return False
    if os.sep in name or (os.altsep and os.altsep in name):
        return False
    return Path(name).name == name


def classify_entry(path: Path) -> EntryKind:
    """Classify a path without following symlinks.

    Args:
        path: Path to inspect

    Returns:
        EntryKind for the path
    """
    try:
        st = path.lstat()
    except (FileNotFoundError, NotADirectoryError):
        return EntryKind.MISSING
    if stat.S_ISREG(st.st_mode):
        return EntryKind.FILE
    return EntryKind.OTHER


class DirectoryScanner:
    """Builds the candidate set of a sync directory.

    Only direct entries are considered. Directories are not supported, and
    symlinks are skipped since they would not be symlinks once pulled on
    another client.

    Examples:
        >>> scanner = DirectoryScanner(ignore_patterns=["*.tmp"])
        >>> files = scanner.scan_local(Path("/home/user/secrets"))
    """

    def __init__(self, ignore_patterns: Optional[list[str]] = None):
        """Initialize directory scanner.

        Args:
            ignore_patterns: List of glob patterns to ignore (e.g., ["*.log"])
        """
        self.ignore_patterns = ignore_patterns or []
        self.rules = IgnoreRules(self.ignore_patterns)

    def should_ignore(self, name: str) -> bool:
        """Check if a name is excluded from syncing.

        Args:
            name: File name

        Returns:
            True if the name should be ignored
        """
        if name == CONFIG_FILE_NAME:
            return True
        return self.rules.is_ignored(name)

    def scan_local(self, directory: Path) -> list[LocalFile]:
        """Scan a directory for candidate files.

        Args:
            directory: Directory to scan

        Returns:
            List of LocalFile objects sorted by name
        """
        files: list[LocalFile] = []

        for item in directory.iterdir():
            if self.should_ignore(item.name):
                continue
            if classify_entry(item) != EntryKind.FILE:
                logger.debug("Skipping non-regular entry: %s", item.name)
                continue
            files.append(LocalFile.from_path(item))

        files.sort(key=lambda f: f.name)
        return files
