"""Remote item store used by the sync engine."""

import logging
from typing import TYPE_CHECKING, Any, Optional, Protocol

from ..models import SECURE_NOTE_TYPE, RemoteItem
from ..utils import encode_payload

if TYPE_CHECKING:
    from ..api import BitwardenClient

logger = logging.getLogger(__name__)

# Days a deleted item stays recoverable in the Bitwarden trash
TRASH_RETENTION_DAYS = 30


class RemoteItemStore(Protocol):
    """Narrow contract between the sync engine and the vault."""

    def refresh(self) -> None:
        """Bring the local view of the store up to date."""
        ...

    def ensure_folder(self, name: str) -> str:
        """Return the ID of the named folder, creating it if absent."""
        ...

    def find_folder(self, name: str) -> Optional[str]:
        """Return the ID of the named folder, or None if absent."""
        ...

    def list_items(self, folder_id: str) -> list[RemoteItem]:
        """Return a snapshot of all items in a folder."""
        ...

    def create_item(self, folder_id: str, name: str, blob: bytes) -> RemoteItem:
        """Create an item holding a compressed payload."""
        ...

    def edit_item(self, item: RemoteItem, blob: bytes) -> None:
        """Replace the payload of an existing item."""
        ...

    def delete_item(self, item_id: str) -> None:
        """Soft-delete an item."""
        ...


def build_item_document(folder_id: str, name: str, blob: bytes) -> dict[str, Any]:
    """Build the document for a new secure note holding a file.

    Args:
        folder_id: Target folder ID
        name: Item name (the local file name)
        blob: Compressed file content

    Returns:
        Item document accepted by `bw create item`
    """
    return {
        "type": SECURE_NOTE_TYPE,
        "name": name,
        "notes": encode_payload(blob),
        "secureNote": {"type": 0},
        "folderId": folder_id,
    }


class BitwardenItemStore:
    """RemoteItemStore backed by the bw command-line client."""

    def __init__(self, client: "BitwardenClient"):
        """Initialize the store.

        Args:
            client: Bitwarden client bound to an unlocked session
        """
        self.client = client

    def refresh(self) -> None:
        """Pull the latest vault state before taking a snapshot."""
        self.client.sync()

    def find_folder(self, name: str) -> Optional[str]:
        for folder in self.client.list_folders():
            if folder.name == name:
                logger.debug("Found folder %s (%s)", name, folder.id)
                return folder.id
        return None

    def ensure_folder(self, name: str) -> str:
        folder_id = self.find_folder(name)
        if folder_id is not None:
            return folder_id

        folder = self.client.create_folder(name)
        logger.info("Created folder %s (%s)", name, folder.id)
        return folder.id

    def list_items(self, folder_id: str) -> list[RemoteItem]:
        return self.client.list_items(folder_id)

    def create_item(self, folder_id: str, name: str, blob: bytes) -> RemoteItem:
        return self.client.create_item(build_item_document(folder_id, name, blob))

    def edit_item(self, item: RemoteItem, blob: bytes) -> None:
        # Keep every other field of the record untouched
        document = {**item.raw, "notes": encode_payload(blob)}
        self.client.edit_item(item.id, document)

    def delete_item(self, item_id: str) -> None:
        self.client.delete_item(item_id)
