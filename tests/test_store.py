"""Tests for the bw backed item store."""

from unittest.mock import Mock

import pytest

from bwss.api import BitwardenClient
from bwss.models import SECURE_NOTE_TYPE, Folder, RemoteItem
from bwss.sync.store import BitwardenItemStore, build_item_document
from bwss.utils import compress, decode_payload, decompress


@pytest.fixture
def client():
    return Mock(spec=BitwardenClient)


def _item(**overrides) -> RemoteItem:
    record = {
        "id": "item-1",
        "name": "id_rsa",
        "notes": "",
        "revisionDate": "2024-01-02T03:04:05.000Z",
        "folderId": "folder-1",
        "type": SECURE_NOTE_TYPE,
        "secureNote": {"type": 0},
        "favorite": True,
    }
    record.update(overrides)
    return RemoteItem.from_api_response(record)


class TestBuildItemDocument:
    def test_secure_note_document(self):
        document = build_item_document("folder-1", "id_rsa", compress(b"key"))

        assert document["type"] == SECURE_NOTE_TYPE
        assert document["name"] == "id_rsa"
        assert document["secureNote"] == {"type": 0}
        assert document["folderId"] == "folder-1"
        assert decompress(decode_payload(document["notes"])) == b"key"
        assert "id" not in document


class TestFolders:
    """Tests for folder lookup and creation."""

    def test_find_folder_exact_name(self, client):
        client.list_folders.return_value = [
            Folder(id="f1", name="bwss-old"),
            Folder(id="f2", name="bwss"),
        ]

        assert BitwardenItemStore(client).find_folder("bwss") == "f2"

    def test_find_folder_missing(self, client):
        client.list_folders.return_value = [Folder(id="f1", name="Bwss")]

        assert BitwardenItemStore(client).find_folder("bwss") is None

    def test_ensure_folder_reuses_existing(self, client):
        client.list_folders.return_value = [Folder(id="f1", name="bwss")]

        assert BitwardenItemStore(client).ensure_folder("bwss") == "f1"
        client.create_folder.assert_not_called()

    def test_ensure_folder_creates_missing(self, client):
        client.list_folders.return_value = []
        client.create_folder.return_value = Folder(id="f9", name="bwss")

        assert BitwardenItemStore(client).ensure_folder("bwss") == "f9"
        client.create_folder.assert_called_once_with("bwss")


class TestItems:
    """Tests for item mutations."""

    def test_refresh_syncs_vault(self, client):
        BitwardenItemStore(client).refresh()
        client.sync.assert_called_once_with()

    def test_list_items_delegates(self, client):
        client.list_items.return_value = [_item()]

        items = BitwardenItemStore(client).list_items("folder-1")

        assert [i.name for i in items] == ["id_rsa"]
        client.list_items.assert_called_once_with("folder-1")

    def test_create_item_sends_document(self, client):
        blob = compress(b"content")

        BitwardenItemStore(client).create_item("folder-1", "id_rsa", blob)

        client.create_item.assert_called_once_with(
            build_item_document("folder-1", "id_rsa", blob)
        )

    def test_edit_item_keeps_other_fields(self, client):
        item = _item()

        BitwardenItemStore(client).edit_item(item, compress(b"new"))

        item_id, document = client.edit_item.call_args[0]
        assert item_id == "item-1"
        assert document["favorite"] is True
        assert document["name"] == "id_rsa"
        assert document["folderId"] == "folder-1"
        assert decompress(decode_payload(document["notes"])) == b"new"

    def test_delete_item(self, client):
        BitwardenItemStore(client).delete_item("item-1")
        client.delete_item.assert_called_once_with("item-1")
