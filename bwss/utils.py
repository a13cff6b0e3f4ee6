"""Utility functions for bwss."""

import base64
import hashlib
import json
from datetime import datetime
from typing import Any, Optional

import brotli

# =============================================================================
# Constants
# =============================================================================

# Brotli quality used for payloads; notes are small, so ratio beats speed
BROTLI_QUALITY: int = 11

# Number of hex characters shown when displaying a fingerprint
HASH_PREFIX_LENGTH: int = 7

# Bitwarden caps a note at 10k encrypted characters
MAX_NOTE_SIZE: int = 10000


# =============================================================================
# Content codec
# =============================================================================


def compress(data: bytes) -> bytes:
    """Compress file content for storage in a note.

    Args:
        data: Raw file content

    Returns:
        Brotli-compressed bytes
    """
    return brotli.compress(data, mode=brotli.MODE_GENERIC, quality=BROTLI_QUALITY)


def decompress(blob: bytes) -> bytes:
    """Decompress a payload produced by :func:`compress`.

    Args:
        blob: Brotli-compressed bytes

    Returns:
        Original file content
    """
    return brotli.decompress(blob)


def fingerprint(data: bytes) -> str:
    """Compute the content fingerprint used to compare local and remote files.

    Args:
        data: Raw file content

    Returns:
        SHA-512 hex digest

    Examples:
        >>> fingerprint(b"")[:7]
        'cf83e13'
    """
    return hashlib.sha512(data).hexdigest()


def short_hash(digest: str) -> str:
    """Shorten a fingerprint for display."""
    return digest[:HASH_PREFIX_LENGTH]


def encode_json_b64(obj: Any) -> str:
    """Encode an object as base64 JSON, the input format of bw create/edit."""
    return base64.b64encode(json.dumps(obj).encode("utf-8")).decode("ascii")


def encode_payload(blob: bytes) -> str:
    """Encode a compressed payload for the notes field."""
    return base64.b64encode(blob).decode("ascii")


def decode_payload(notes: Optional[str]) -> bytes:
    """Decode the notes field of an item back to compressed bytes."""
    if not notes:
        return b""
    return base64.b64decode(notes)


# =============================================================================
# Timestamp utilities
# =============================================================================


def parse_iso_timestamp(timestamp_str: Optional[str]) -> Optional[datetime]:
    """Parse an ISO format timestamp from bw.

    Args:
        timestamp_str: ISO format timestamp string (e.g., "2025-01-15T10:30:00.000Z")

    Returns:
        Timezone-aware datetime or None if parsing fails
    """
    if not timestamp_str:
        return None

    try:
        # The 'Z' suffix indicates UTC time
        if timestamp_str.endswith("Z"):
            timestamp_str = timestamp_str[:-1] + "+00:00"

        try:
            dt = datetime.fromisoformat(timestamp_str)
        except ValueError:
            # Older interpreters reject fractional seconds that are not 3 or 6 digits
            if "." not in timestamp_str:
                raise
            head, _, tail = timestamp_str.partition(".")
            offset = ""
            for sep in ("+", "-"):
                if sep in tail:
                    offset = sep + tail.split(sep, 1)[1]
                    break
            dt = datetime.fromisoformat(head + offset)

        if dt.tzinfo is None:
            dt = dt.astimezone()
        return dt
    except (ValueError, AttributeError):
        return None


def format_timestamp(dt: datetime) -> str:
    """Format a timestamp in local time for display.

    Args:
        dt: Datetime to format (naive values are taken as local time)

    Returns:
        Formatted string (e.g., "Mon, Jan 2, 2023, 3:04 AM")
    """
    local = dt.astimezone()
    hour = local.hour % 12 or 12
    return (
        f"{local.strftime('%a, %b')} {local.day}, {local.year}, "
        f"{hour}:{local.minute:02d} {local.strftime('%p')}"
    )


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"
