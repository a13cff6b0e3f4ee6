"""File comparison logic for sync operations."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..models import RemoteItem
from ..utils import fingerprint
from .scanner import EntryKind, is_plain_name


class SyncAction(str, Enum):
    """Actions that can be taken during sync."""

    PULL = "pull"
    """Write the remote content to the local file"""

    PUSH = "push"
    """Upload the local file to the vault"""

    DELETE_LOCAL = "delete_local"
    """Delete local file"""

    DELETE_REMOTE = "delete_remote"
    """Move the remote item to the trash"""

    SKIP = "skip"
    """Leave both sides as they are"""


class SyncState(str, Enum):
    """Relationship between a remote item and the local directory."""

    NEW_CLIENT = "new_client"
    """File missing locally and the local directory was empty"""

    MISSING_LOCAL = "missing_local"
    """File missing locally in a directory that has other files"""

    IDENTICAL = "identical"
    """Local and remote content are the same"""

    DIVERGED = "diverged"
    """Local and remote content differ"""

    NOT_A_FILE = "not_a_file"
    """Name exists locally but is not a regular file"""

    INVALID_NAME = "invalid_name"
    """Item name is not a plain file name (e.g. contains a path separator)"""

    IGNORED = "ignored"
    """Name matches an ignore pattern"""

    MISSING_REMOTE = "missing_remote"
    """Local file without a remote item"""


@dataclass
class SyncDecision:
    """Represents a decision about how to sync a file."""

    action: SyncAction
    """Action to take"""

    reason: str
    """Human-readable reason for this decision"""

    name: str
    """File name"""

    remote_item: Optional[RemoteItem] = None
    """Remote item (if exists)"""


@dataclass
class Comparison:
    """Outcome of comparing one name across both sides."""

    state: SyncState
    name: str
    remote_item: Optional[RemoteItem] = None
    local_hash: Optional[str] = None
    remote_hash: Optional[str] = None

    @property
    def needs_prompt(self) -> bool:
        return self.state in PROMPT_STATES


# Actions decided without asking the operator
AUTOMATIC_ACTIONS: dict[SyncState, tuple[SyncAction, str]] = {
    SyncState.NEW_CLIENT: (SyncAction.PULL, "New client, pulling everything"),
    SyncState.IDENTICAL: (SyncAction.SKIP, "Files are identical"),
    SyncState.NOT_A_FILE: (SyncAction.SKIP, "Local entry is not a regular file"),
    SyncState.INVALID_NAME: (SyncAction.SKIP, "Name is not a plain file name"),
    SyncState.IGNORED: (SyncAction.SKIP, "Matches an ignore pattern"),
}

PROMPT_STATES = frozenset(
    {SyncState.MISSING_LOCAL, SyncState.DIVERGED, SyncState.MISSING_REMOTE}
)

# Questions and the actions their answers map to
CHOICES: dict[SyncState, tuple[str, dict[str, SyncAction]]] = {
    SyncState.MISSING_LOCAL: (
        "{name} does not exist locally, choose an action: [d]elete remote/[p]ull",
        {"d": SyncAction.DELETE_REMOTE, "p": SyncAction.PULL},
    ),
    SyncState.DIVERGED: (
        "Choose an action: [p]ull/p[u]sh",
        {"p": SyncAction.PULL, "u": SyncAction.PUSH},
    ),
    SyncState.MISSING_REMOTE: (
        "{name} does not exist remotely, choose an action: [d]elete local/p[u]sh",
        {"d": SyncAction.DELETE_LOCAL, "u": SyncAction.PUSH},
    ),
}


class FileComparator:
    """Classifies names and turns answers into sync decisions."""

    def __init__(self, local_empty: bool):
        """Initialize file comparator.

        Args:
            local_empty: Whether the candidate set was empty before the run
        """
        self.local_empty = local_empty

    def compare_remote(
        self,
        item: RemoteItem,
        local_entry: EntryKind,
        local_data: Optional[bytes] = None,
        ignored: bool = False,
    ) -> Comparison:
        """Compare a remote item against the local entry of the same name.

        Args:
            item: Remote item
            local_entry: Kind of the local entry with the item's name
            local_data: Local file content, required for EntryKind.FILE
            ignored: Whether the name matches an ignore pattern

        Returns:
            Comparison for this name
        """
        name = item.name
        if not is_plain_name(name):
            return Comparison(SyncState.INVALID_NAME, name, item)
        if ignored:
            return Comparison(SyncState.IGNORED, name, item)
        if local_entry == EntryKind.OTHER:
            return Comparison(SyncState.NOT_A_FILE, name, item)

        remote_hash = item.hash
        if local_entry == EntryKind.MISSING:
            state = SyncState.NEW_CLIENT if self.local_empty else SyncState.MISSING_LOCAL
            return Comparison(state, name, item, remote_hash=remote_hash)

        if local_data is None:
            raise ValueError(f"Local content of {name} is required for comparison")
        local_hash = fingerprint(local_data)
        state = SyncState.IDENTICAL if local_hash == remote_hash else SyncState.DIVERGED
        return Comparison(
            state, name, item, local_hash=local_hash, remote_hash=remote_hash
        )

    def compare_local_only(self, name: str) -> Comparison:
        """Classify a local file that has no remote item."""
        return Comparison(SyncState.MISSING_REMOTE, name)

    def automatic_decision(self, comparison: Comparison) -> SyncDecision:
        """Return the decision for a state that needs no prompt."""
        action, reason = AUTOMATIC_ACTIONS[comparison.state]
        return SyncDecision(
            action=action,
            reason=reason,
            name=comparison.name,
            remote_item=comparison.remote_item,
        )

    @staticmethod
    def question(comparison: Comparison) -> str:
        """Return the question to ask for a state that needs a prompt."""
        template, _ = CHOICES[comparison.state]
        return template.format(name=comparison.name)

    def decision_from_answer(
        self, comparison: Comparison, answer: str
    ) -> Optional[SyncDecision]:
        """Map an operator answer to a decision.

        Args:
            comparison: Comparison the question was about
            answer: Normalized answer

        Returns:
            SyncDecision, or None if the answer is not one of the choices
        """
        _, choices = CHOICES[comparison.state]
        action = choices.get(answer)
        if action is None:
            return None
        return SyncDecision(
            action=action,
            reason=f"Chosen by operator ({answer})",
            name=comparison.name,
            remote_item=comparison.remote_item,
        )
