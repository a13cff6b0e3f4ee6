"""Typed views of the JSON records returned by bw."""

import binascii
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

import brotli

from .exceptions import BwssInvalidResponseError
from .utils import decode_payload, decompress, fingerprint, parse_iso_timestamp

# Bitwarden item type for secure notes
SECURE_NOTE_TYPE = 2


@dataclass
class Folder:
    """A vault folder."""

    id: str
    name: str

    @classmethod
    def from_api_response(cls, data: Any) -> "Folder":
        """Create a Folder from a bw JSON record."""
        if not isinstance(data, dict) or "name" not in data:
            raise BwssInvalidResponseError(f"Unexpected folder record: {data!r}")
        return cls(id=data.get("id") or "", name=data["name"])


@dataclass
class RemoteItem:
    """A vault item holding one tracked file."""

    id: str
    """Opaque item ID"""

    name: str
    """Item name, matched against local file names"""

    notes: str
    """Base64 of the compressed file content"""

    revision_date: Optional[str]
    """ISO timestamp assigned by the vault on every edit"""

    folder_id: Optional[str] = None
    """Folder the item belongs to"""

    raw: dict[str, Any] = field(default_factory=dict, repr=False)
    """Full record as returned by bw, preserved for edits"""

    _payload: Optional[bytes] = field(default=None, init=False, repr=False)

    @classmethod
    def from_api_response(cls, data: Any) -> "RemoteItem":
        """Create a RemoteItem from a bw JSON record.

        Args:
            data: One element of ``bw list items`` output

        Returns:
            RemoteItem instance

        Raises:
            BwssInvalidResponseError: If required fields are missing
        """
        if not isinstance(data, dict):
            raise BwssInvalidResponseError(f"Unexpected item record: {data!r}")
        missing = [key for key in ("id", "name") if key not in data]
        if missing:
            raise BwssInvalidResponseError(
                f"Item record is missing field(s): {', '.join(missing)}"
            )
        return cls(
            id=data["id"],
            name=data["name"],
            notes=data.get("notes") or "",
            revision_date=data.get("revisionDate"),
            folder_id=data.get("folderId"),
            raw=dict(data),
        )

    @property
    def payload(self) -> bytes:
        """Decompressed file content."""
        if self._payload is None:
            try:
                self._payload = decompress(decode_payload(self.notes))
            except (brotli.error, binascii.Error, ValueError) as e:
                raise BwssInvalidResponseError(
                    f"Notes of item {self.name!r} ({self.id}) are not a bwss payload"
                ) from e
        return self._payload

    @property
    def hash(self) -> str:
        """Fingerprint of the decompressed content."""
        return fingerprint(self.payload)

    @property
    def size(self) -> int:
        """Size of the decompressed content in bytes."""
        return len(self.payload)

    @property
    def modified(self) -> Optional[datetime]:
        """Last modification time as an aware datetime."""
        return parse_iso_timestamp(self.revision_date)
