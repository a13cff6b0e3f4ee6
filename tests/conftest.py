"""Shared fixtures for bwss tests."""

import tempfile
from pathlib import Path
from typing import Optional

import pytest

from bwss.models import RemoteItem
from bwss.sync.store import build_item_document
from bwss.utils import compress, decode_payload, decompress, encode_payload

DEFAULT_REVISION_DATE = "2024-01-02T03:04:05.678Z"


class FakeItemStore:
    """In-memory RemoteItemStore used instead of the bw binary."""

    def __init__(self, folders: Optional[dict[str, str]] = None):
        self.folders: dict[str, str] = dict(folders or {})
        self.records: dict[str, dict] = {}
        self.mutations: list[tuple[str, str]] = []
        self.refreshed = 0
        self._next_id = 1

    def _new_id(self, prefix: str) -> str:
        value = f"{prefix}-{self._next_id}"
        self._next_id += 1
        return value

    def add_item(
        self,
        folder_id: str,
        name: str,
        content: bytes,
        revision_date: str = DEFAULT_REVISION_DATE,
        **extra,
    ) -> dict:
        """Seed an item without recording a mutation."""
        record = build_item_document(folder_id, name, compress(content))
        record.update(extra)
        record["id"] = self._new_id("item")
        record["revisionDate"] = revision_date
        self.records[record["id"]] = record
        return record

    def payload(self, name: str) -> bytes:
        matches = [r for r in self.records.values() if r["name"] == name]
        assert len(matches) == 1, f"expected one item named {name}"
        return decompress(decode_payload(matches[0]["notes"]))

    def names(self) -> list[str]:
        return sorted(r["name"] for r in self.records.values())

    # RemoteItemStore protocol

    def refresh(self) -> None:
        self.refreshed += 1

    def find_folder(self, name: str) -> Optional[str]:
        return self.folders.get(name)

    def ensure_folder(self, name: str) -> str:
        if name not in self.folders:
            self.folders[name] = self._new_id("folder")
            self.mutations.append(("create_folder", name))
        return self.folders[name]

    def list_items(self, folder_id: str) -> list[RemoteItem]:
        return [
            RemoteItem.from_api_response(dict(record))
            for record in self.records.values()
            if record["folderId"] == folder_id
        ]

    def create_item(self, folder_id: str, name: str, blob: bytes) -> RemoteItem:
        record = build_item_document(folder_id, name, blob)
        record["id"] = self._new_id("item")
        record["revisionDate"] = "2024-06-01T00:00:00.000Z"
        self.records[record["id"]] = record
        self.mutations.append(("create", name))
        return RemoteItem.from_api_response(dict(record))

    def edit_item(self, item: RemoteItem, blob: bytes) -> None:
        record = {**item.raw, "notes": encode_payload(blob)}
        record["revisionDate"] = "2024-06-01T00:00:00.000Z"
        self.records[item.id] = record
        self.mutations.append(("edit", item.name))

    def delete_item(self, item_id: str) -> None:
        record = self.records.pop(item_id)
        self.mutations.append(("delete", record["name"]))


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def store():
    """Create an in-memory store with a 'bwss' folder."""
    return FakeItemStore(folders={"bwss": "folder-bwss"})
