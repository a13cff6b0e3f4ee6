"""bwss - Sync a directory of files with a Bitwarden folder."""

from .api import BitwardenClient
from .exceptions import (
    BwssBinaryNotFoundError,
    BwssCommandError,
    BwssConfigError,
    BwssError,
    BwssInvalidResponseError,
    BwssLocalError,
    BwssSessionError,
)
from .utils import compress, decompress, fingerprint

__all__ = [
    "BitwardenClient",
    "BwssError",
    "BwssBinaryNotFoundError",
    "BwssCommandError",
    "BwssConfigError",
    "BwssInvalidResponseError",
    "BwssLocalError",
    "BwssSessionError",
    "compress",
    "decompress",
    "fingerprint",
]
