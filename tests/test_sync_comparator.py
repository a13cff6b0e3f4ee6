"""Tests for the FileComparator class."""

import pytest

from bwss.models import RemoteItem
from bwss.sync.comparator import FileComparator, SyncAction, SyncState
from bwss.sync.scanner import EntryKind
from bwss.sync.store import build_item_document
from bwss.utils import compress, fingerprint


def _create_remote_item(name: str = "test.txt", content: bytes = b"remote") -> RemoteItem:
    """Create a RemoteItem for testing."""
    record = build_item_document("folder-1", name, compress(content))
    record["id"] = "item-1"
    record["revisionDate"] = "2024-01-02T03:04:05.000Z"
    return RemoteItem.from_api_response(record)


class TestCompareRemote:
    """Tests for classifying remote items."""

    def test_missing_locally_on_new_client(self):
        """A new client pulls without asking."""
        comparator = FileComparator(local_empty=True)

        comparison = comparator.compare_remote(_create_remote_item(), EntryKind.MISSING)

        assert comparison.state == SyncState.NEW_CLIENT
        assert comparison.needs_prompt is False
        decision = comparator.automatic_decision(comparison)
        assert decision.action == SyncAction.PULL

    def test_missing_locally_needs_prompt(self):
        comparator = FileComparator(local_empty=False)

        comparison = comparator.compare_remote(_create_remote_item(), EntryKind.MISSING)

        assert comparison.state == SyncState.MISSING_LOCAL
        assert comparison.needs_prompt is True

    def test_identical_content(self):
        comparator = FileComparator(local_empty=False)

        comparison = comparator.compare_remote(
            _create_remote_item(content=b"same"), EntryKind.FILE, b"same"
        )

        assert comparison.state == SyncState.IDENTICAL
        assert comparison.local_hash == comparison.remote_hash == fingerprint(b"same")
        decision = comparator.automatic_decision(comparison)
        assert decision.action == SyncAction.SKIP
        assert decision.reason == "Files are identical"

    def test_diverged_content(self):
        comparator = FileComparator(local_empty=False)

        comparison = comparator.compare_remote(
            _create_remote_item(content=b"remote"), EntryKind.FILE, b"local"
        )

        assert comparison.state == SyncState.DIVERGED
        assert comparison.local_hash == fingerprint(b"local")
        assert comparison.remote_hash == fingerprint(b"remote")

    def test_not_a_file(self):
        comparator = FileComparator(local_empty=False)

        comparison = comparator.compare_remote(_create_remote_item(), EntryKind.OTHER)

        assert comparison.state == SyncState.NOT_A_FILE
        assert comparator.automatic_decision(comparison).action == SyncAction.SKIP

    def test_ignored_wins_over_everything(self):
        comparator = FileComparator(local_empty=True)

        comparison = comparator.compare_remote(
            _create_remote_item(), EntryKind.MISSING, ignored=True
        )

        assert comparison.state == SyncState.IGNORED
        assert comparator.automatic_decision(comparison).action == SyncAction.SKIP

    @pytest.mark.parametrize("name", ["../escaped", "a/b", ""])
    def test_invalid_name_is_skipped(self, name):
        comparator = FileComparator(local_empty=True)

        comparison = comparator.compare_remote(
            _create_remote_item(name), EntryKind.MISSING
        )

        assert comparison.state == SyncState.INVALID_NAME
        assert comparison.needs_prompt is False
        assert comparator.automatic_decision(comparison).action == SyncAction.SKIP

    def test_file_without_content_raises(self):
        comparator = FileComparator(local_empty=False)

        with pytest.raises(ValueError, match="required"):
            comparator.compare_remote(_create_remote_item(), EntryKind.FILE)


class TestAnswers:
    """Tests for mapping operator answers to decisions."""

    @pytest.mark.parametrize(
        "answer,expected",
        [("d", SyncAction.DELETE_REMOTE), ("p", SyncAction.PULL), ("u", None)],
    )
    def test_missing_local_choices(self, answer, expected):
        comparator = FileComparator(local_empty=False)
        comparison = comparator.compare_remote(_create_remote_item(), EntryKind.MISSING)

        decision = comparator.decision_from_answer(comparison, answer)

        if expected is None:
            assert decision is None
        else:
            assert decision.action == expected
            assert decision.remote_item is comparison.remote_item

    @pytest.mark.parametrize(
        "answer,expected",
        [("p", SyncAction.PULL), ("u", SyncAction.PUSH), ("d", None), ("", None)],
    )
    def test_diverged_choices(self, answer, expected):
        comparator = FileComparator(local_empty=False)
        comparison = comparator.compare_remote(
            _create_remote_item(), EntryKind.FILE, b"local"
        )

        decision = comparator.decision_from_answer(comparison, answer)

        assert (decision.action if decision else None) == expected

    @pytest.mark.parametrize(
        "answer,expected",
        [("d", SyncAction.DELETE_LOCAL), ("u", SyncAction.PUSH), ("p", None)],
    )
    def test_local_only_choices(self, answer, expected):
        comparator = FileComparator(local_empty=False)
        comparison = comparator.compare_local_only("new.txt")

        decision = comparator.decision_from_answer(comparison, answer)

        assert (decision.action if decision else None) == expected
        if decision:
            assert decision.remote_item is None

    def test_questions_name_the_file(self):
        comparator = FileComparator(local_empty=False)

        missing_remote = comparator.question(comparator.compare_local_only("a.txt"))
        missing_local = comparator.question(
            comparator.compare_remote(_create_remote_item("b.txt"), EntryKind.MISSING)
        )

        assert missing_remote == (
            "a.txt does not exist remotely, choose an action: [d]elete local/p[u]sh"
        )
        assert missing_local == (
            "b.txt does not exist locally, choose an action: [d]elete remote/[p]ull"
        )
