"""Sync engine for bwss - reconcile a directory with a vault folder."""

from .comparator import (
    Comparison,
    FileComparator,
    SyncAction,
    SyncDecision,
    SyncState,
)
from .engine import SyncEngine
from .ignore import IGNORE_FILE_NAME, IgnoreRules, load_ignore_file
from .operations import SyncOperations
from .prompt import DecisionProvider, InteractivePrompt, ScriptedPrompt
from .scanner import DirectoryScanner, EntryKind, LocalFile
from .store import BitwardenItemStore, RemoteItemStore

__all__ = [
    "SyncEngine",
    "SyncOperations",
    "SyncAction",
    "SyncDecision",
    "SyncState",
    "Comparison",
    "FileComparator",
    "DirectoryScanner",
    "EntryKind",
    "LocalFile",
    "RemoteItemStore",
    "BitwardenItemStore",
    "DecisionProvider",
    "InteractivePrompt",
    "ScriptedPrompt",
    "IgnoreRules",
    "IGNORE_FILE_NAME",
    "load_ignore_file",
]
