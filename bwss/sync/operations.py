"""Sync operations wrapper for local and remote mutations."""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..models import RemoteItem
from ..utils import MAX_NOTE_SIZE, compress, encode_payload
from .scanner import is_plain_name
from .store import RemoteItemStore

logger = logging.getLogger(__name__)

# Pulled files hold secrets, keep them private to the owner
PULLED_FILE_MODE = 0o600


class SyncOperations:
    """Unified operations on one sync directory and one remote folder."""

    def __init__(self, store: RemoteItemStore, root: Path, folder_id: str):
        """Initialize sync operations.

        Args:
            store: Remote item store
            root: Synced directory
            folder_id: Remote folder ID
        """
        self.store = store
        self.root = root
        self.folder_id = folder_id

    def local_path(self, name: str) -> Path:
        if not is_plain_name(name):
            raise ValueError(f"Not a plain file name: {name!r}")
        return self.root / name

    def read_local(self, name: str) -> bytes:
        return self.local_path(name).read_bytes()

    def write_local(
        self,
        name: str,
        data: bytes,
        modified: Optional[datetime] = None,
    ) -> Path:
        """Write pulled content to a local file.

        Args:
            name: File name
            data: File content
            modified: Remote modification time to stamp on the file

        Returns:
            Path of the written file
        """
        path = self.local_path(name)
        # Older clients left pulled files read-only; replace instead of rewriting
        if path.exists():
            path.unlink()
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, PULLED_FILE_MODE)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(path, PULLED_FILE_MODE)
        if modified is not None:
            set_mtime(path, modified)
        return path

    def delete_local(self, name: str) -> None:
        self.local_path(name).unlink()

    def _compress_local(self, name: str) -> bytes:
        blob = compress(self.read_local(name))
        encoded_size = len(encode_payload(blob))
        if encoded_size > MAX_NOTE_SIZE:
            logger.warning(
                "%s is %d characters once encoded, Bitwarden may reject notes "
                "longer than %d",
                name,
                encoded_size,
                MAX_NOTE_SIZE,
            )
        return blob

    def push(self, item: RemoteItem) -> None:
        """Replace the payload of an existing item with the local file."""
        self.store.edit_item(item, self._compress_local(item.name))

    def push_new(self, name: str) -> RemoteItem:
        """Create a new item in the folder from a local file."""
        return self.store.create_item(self.folder_id, name, self._compress_local(name))

    def delete_remote(self, item: RemoteItem) -> None:
        self.store.delete_item(item.id)


def set_mtime(path: Path, modified: datetime) -> None:
    """Set access and modification times, to whole-second precision.

    Args:
        path: File to touch
        modified: Timestamp to apply
    """
    timestamp = float(int(modified.timestamp()))
    os.utime(path, (timestamp, timestamp))
