"""Core sync engine for reconciling a directory with a vault folder."""

import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..exceptions import BwssLocalError
from ..models import RemoteItem
from ..output import OutputFormatter
from ..utils import format_size, format_timestamp, short_hash
from .comparator import (
    Comparison,
    FileComparator,
    SyncAction,
    SyncDecision,
    SyncState,
)
from .operations import SyncOperations
from .prompt import DecisionProvider, InteractivePrompt
from .scanner import DirectoryScanner, EntryKind, classify_entry, is_plain_name
from .store import TRASH_RETENTION_DAYS, RemoteItemStore

logger = logging.getLogger(__name__)


class SyncEngine:
    """Core sync engine that reconciles one directory with one folder.

    Every name is fully resolved, decided and executed, before the next one
    is looked at. Remote items are processed first, then local files that
    no remote item claimed.
    """

    def __init__(
        self,
        store: RemoteItemStore,
        output: Optional[OutputFormatter] = None,
        prompt: Optional[DecisionProvider] = None,
    ):
        """Initialize sync engine.

        Args:
            store: Remote item store
            output: Output formatter for displaying progress/status
            prompt: Decision provider for ambiguous files
        """
        self.store = store
        self.output = output or OutputFormatter()
        self.prompt = prompt or InteractivePrompt()

    def sync(
        self,
        root: Path,
        folder_name: str,
        ignore_patterns: Optional[list[str]] = None,
    ) -> dict:
        """Run a full reconciliation pass.

        Args:
            root: Local directory to sync
            folder_name: Remote folder used as the sync scope
            ignore_patterns: Glob patterns excluded from syncing

        Returns:
            Dictionary with sync statistics

        Examples:
            >>> engine = SyncEngine(BitwardenItemStore(client))
            >>> stats = engine.sync(Path("."), "bwss")
            >>> print(f"Pulled {stats['pulls']} files")
        """
        if not root.exists():
            raise ValueError(f"Local directory does not exist: {root}")
        if not root.is_dir():
            raise ValueError(f"Local path is not a directory: {root}")

        start_time = time.time()
        self.output.info(f"Using folder name: {folder_name}")

        self.store.refresh()
        folder_id = self.store.ensure_folder(folder_name)

        scanner = DirectoryScanner(ignore_patterns=ignore_patterns)
        local_files = scanner.scan_local(root)
        local_remaining = {f.name for f in local_files}
        local_empty = not local_remaining
        if local_empty:
            self.output.info("It looks like this is a new client")

        items = self.store.list_items(folder_id)
        logger.debug(
            "Found %d local file(s) and %d remote item(s)",
            len(local_files),
            len(items),
        )

        comparator = FileComparator(local_empty=local_empty)
        operations = SyncOperations(self.store, root, folder_id)
        stats = self._create_empty_stats()

        for item in items:
            local_remaining.discard(item.name)
            decision = self._decide_remote(item, comparator, operations, scanner)
            self._execute_decision(decision, operations, stats)

        for name in sorted(local_remaining):
            comparison = comparator.compare_local_only(name)
            decision = self._ask(comparison, comparator)
            self._execute_decision(decision, operations, stats)

        logger.debug("Sync took %.2fs", time.time() - start_time)
        self._display_summary(stats)
        return stats

    def status(
        self,
        root: Path,
        folder_name: str,
        ignore_patterns: Optional[list[str]] = None,
    ) -> list[Comparison]:
        """Compare both sides without prompting or changing anything.

        Args:
            root: Local directory to compare
            folder_name: Remote folder used as the sync scope
            ignore_patterns: Glob patterns excluded from syncing

        Returns:
            One Comparison per remote item, then one per local-only file
        """
        self.store.refresh()
        folder_id = self.store.find_folder(folder_name)

        scanner = DirectoryScanner(ignore_patterns=ignore_patterns)
        local_remaining = {f.name for f in scanner.scan_local(root)}
        comparator = FileComparator(local_empty=not local_remaining)
        items = self.store.list_items(folder_id) if folder_id is not None else []

        comparisons = []
        for item in items:
            local_remaining.discard(item.name)
            comparison, _ = self._compare_remote(item, comparator, scanner, root)
            comparisons.append(comparison)
        comparisons.extend(
            comparator.compare_local_only(name) for name in sorted(local_remaining)
        )
        return comparisons

    def _create_empty_stats(self) -> dict:
        """Create an empty statistics dictionary.

        Returns:
            Dictionary with zero counts for all stat categories
        """
        return {
            "pulls": 0,
            "pushes": 0,
            "creates": 0,
            "deletes_local": 0,
            "deletes_remote": 0,
            "skips": 0,
        }

    def _compare_remote(
        self,
        item: RemoteItem,
        comparator: FileComparator,
        scanner: DirectoryScanner,
        root: Path,
    ) -> tuple[Comparison, Optional[bytes]]:
        """Compare one remote item with the local entry of the same name.

        Returns:
            Tuple of (comparison, local content if a regular file exists)
        """
        name = item.name
        ignored = scanner.should_ignore(name)
        entry = EntryKind.MISSING
        local_data = None
        if is_plain_name(name) and not ignored:
            path = root / name
            entry = classify_entry(path)
            if entry == EntryKind.FILE:
                try:
                    local_data = path.read_bytes()
                except OSError as e:
                    raise BwssLocalError(
                        f"Cannot read {name}: {e}", path=str(path)
                    ) from e

        comparison = comparator.compare_remote(item, entry, local_data, ignored)
        logger.debug("%s: %s", name, comparison.state.value)
        return comparison, local_data

    def _decide_remote(
        self,
        item: RemoteItem,
        comparator: FileComparator,
        operations: SyncOperations,
        scanner: DirectoryScanner,
    ) -> SyncDecision:
        """Decide what to do with one remote item."""
        comparison, local_data = self._compare_remote(
            item, comparator, scanner, operations.root
        )
        name = comparison.name

        if comparison.state == SyncState.NOT_A_FILE:
            self.output.error(f"{name} is not a file, will not process")
        if comparison.state == SyncState.INVALID_NAME:
            self.output.error(f"{name} is not a plain file name, will not process")
        if not comparison.needs_prompt:
            return comparator.automatic_decision(comparison)

        if comparison.state == SyncState.DIVERGED and local_data is not None:
            self._display_divergence(comparison, operations, len(local_data))
        return self._ask(comparison, comparator)

    def _ask(self, comparison: Comparison, comparator: FileComparator) -> SyncDecision:
        """Ask the decision provider and map the answer to a decision."""
        answer = self.prompt.ask(comparison.name, comparator.question(comparison))
        decision = comparator.decision_from_answer(comparison, answer)
        if decision is None:
            self.output.warning("Unknown choice, will skip", style="red")
            return SyncDecision(
                action=SyncAction.SKIP,
                reason=f"Unknown choice {answer!r}",
                name=comparison.name,
                remote_item=comparison.remote_item,
            )
        return decision

    def _display_divergence(
        self,
        comparison: Comparison,
        operations: SyncOperations,
        local_size: int,
    ) -> None:
        """Show local and remote side by side before asking pull/push."""
        item = comparison.remote_item
        if item is None:
            return
        local_mtime = operations.local_path(comparison.name).lstat().st_mtime
        remote_modified = item.modified
        self.output.print(f"{comparison.name} has changed:")
        self.output.print_table(
            ["", "hash", "size", "modified"],
            [
                [
                    "local",
                    short_hash(comparison.local_hash or ""),
                    format_size(local_size),
                    format_timestamp(datetime.fromtimestamp(local_mtime)),
                ],
                [
                    "remote",
                    short_hash(comparison.remote_hash or ""),
                    format_size(item.size),
                    format_timestamp(remote_modified) if remote_modified else "?",
                ],
            ],
        )

    def _execute_decision(
        self,
        decision: SyncDecision,
        operations: SyncOperations,
        stats: dict,
    ) -> None:
        """Execute a single sync decision.

        Args:
            decision: Sync decision to execute
            operations: Operations bound to the directory and folder
            stats: Statistics dictionary (modified in place)
        """
        name = decision.name
        action_start = time.time()

        try:
            self._apply_decision(decision, operations, stats)
        except OSError as e:
            raise BwssLocalError(
                f"Cannot {decision.action.value.replace('_', ' ')} {name}: {e}",
                path=str(operations.local_path(name)),
            ) from e

        logger.debug(
            "%s %s (%s) took %.2fs",
            decision.action.value,
            name,
            decision.reason,
            time.time() - action_start,
        )

    def _apply_decision(
        self,
        decision: SyncDecision,
        operations: SyncOperations,
        stats: dict,
    ) -> None:
        name = decision.name
        item = decision.remote_item

        if decision.action == SyncAction.PULL and item is not None:
            self.output.info(f"Pulling {name}...")
            modified = item.modified
            if modified is None:
                logger.warning(
                    "%s has an invalid revision date %r", name, item.revision_date
                )
                self.output.warning(
                    f"{name} has no valid revision date, "
                    "keeping the local modification time"
                )
            operations.write_local(name, item.payload, modified)
            stats["pulls"] += 1

        elif decision.action == SyncAction.PUSH:
            self.output.info(f"Pushing {name}...")
            if item is not None:
                operations.push(item)
                stats["pushes"] += 1
            else:
                operations.push_new(name)
                stats["creates"] += 1

        elif decision.action == SyncAction.DELETE_LOCAL:
            self.output.warning(f"Deleting local {name}...", style="red")
            operations.delete_local(name)
            stats["deletes_local"] += 1

        elif decision.action == SyncAction.DELETE_REMOTE and item is not None:
            self.output.warning(
                f"Deleting remote {name} "
                f"(it can be recovered within {TRASH_RETENTION_DAYS} days)..."
            )
            operations.delete_remote(item)
            stats["deletes_remote"] += 1

        else:
            self.output.info(f"Skipping {name}...")
            stats["skips"] += 1

    def _display_summary(self, stats: dict) -> None:
        """Display sync summary.

        Args:
            stats: Statistics dictionary
        """
        total_actions = (
            stats["pulls"]
            + stats["pushes"]
            + stats["creates"]
            + stats["deletes_local"]
            + stats["deletes_remote"]
        )

        if total_actions > 0:
            self.output.info(f"Total actions: {total_actions}")
            if stats["pulls"] > 0:
                self.output.info(f"  Pulled: {stats['pulls']}")
            if stats["pushes"] > 0:
                self.output.info(f"  Pushed: {stats['pushes']}")
            if stats["creates"] > 0:
                self.output.info(f"  Created remotely: {stats['creates']}")
            if stats["deletes_local"] > 0:
                self.output.info(f"  Deleted locally: {stats['deletes_local']}")
            if stats["deletes_remote"] > 0:
                self.output.info(f"  Deleted remotely: {stats['deletes_remote']}")
        else:
            self.output.info("No changes needed - everything is in sync!")
        self.output.success("All done!")
