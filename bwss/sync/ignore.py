"""Ignore pattern handling for .bwssignore files.

Patterns are glob-style and matched against plain file names, since only
the top level of a sync directory is ever scanned:

    *.log       # any name ending in .log
    secret?.txt # single character wildcard
    [ab]*       # character classes

Wildcards never match a leading dot unless the pattern itself starts with
one, so ``*`` does not ignore ``.env`` but ``.*`` does.
"""

import logging
from fnmatch import fnmatchcase
from pathlib import Path

logger = logging.getLogger(__name__)

IGNORE_FILE_NAME = ".bwssignore"


def parse_ignore_lines(text: str) -> list[str]:
    """Parse the contents of an ignore file into patterns.

    Args:
        text: Raw file contents

    Returns:
        Patterns in file order, without blank lines and comments
    """
    patterns = []
    for line in text.splitlines():
        pattern = line.rstrip()
        if not pattern or pattern.startswith("#"):
            continue
        patterns.append(pattern)
    return patterns


def load_ignore_file(path: Path) -> list[str]:
    """Load patterns from an ignore file.

    Args:
        path: Path to the ignore file

    Returns:
        List of patterns (empty if the file does not exist)
    """
    if not path.is_file():
        return []
    patterns = parse_ignore_lines(path.read_text(encoding="utf-8"))
    logger.debug("Loaded %d pattern(s) from %s", len(patterns), path)
    return patterns


def matches_pattern(name: str, pattern: str) -> bool:
    """Check a single file name against a single glob pattern."""
    if name.startswith(".") and not pattern.startswith("."):
        return False
    return fnmatchcase(name, pattern)


class IgnoreRules:
    """A set of ignore patterns applied to file names.

    Examples:
        >>> rules = IgnoreRules(["*.tmp", "notes-?.txt"])
        >>> rules.is_ignored("scratch.tmp")
        True
        >>> rules.is_ignored("notes-1.txt")
        True
        >>> rules.is_ignored("notes-10.txt")
        False
    """

    def __init__(self, patterns: list[str]):
        self.patterns = list(patterns)

    def is_ignored(self, name: str) -> bool:
        """Return True if any pattern matches the name."""
        for pattern in self.patterns:
            if matches_pattern(name, pattern):
                logger.debug("Ignoring %s (pattern %s)", name, pattern)
                return True
        return False

    def __bool__(self) -> bool:
        return bool(self.patterns)
