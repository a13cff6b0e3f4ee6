"""Exceptions raised by bwss."""

from typing import Optional


class BwssError(Exception):
    """Base exception for all bwss errors."""

    pass


class BwssConfigError(BwssError):
    """Raised when the sync configuration is unusable."""

    pass


class BwssCommandError(BwssError):
    """Raised when the bw binary exits with a non-zero status."""

    def __init__(
        self,
        message: str,
        args: Optional[list[str]] = None,
        returncode: Optional[int] = None,
        output: str = "",
    ):
        super().__init__(message)
        self.command_args = args or []
        self.returncode = returncode
        self.output = output


class BwssBinaryNotFoundError(BwssCommandError):
    """Raised when the bw executable cannot be started."""

    pass


class BwssInvalidResponseError(BwssError):
    """Raised when bw output is not the expected JSON."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


class BwssSessionError(BwssError):
    """Raised when no session token can be obtained from bw unlock."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


class BwssLocalError(BwssError):
    """Raised when a file in the sync directory cannot be read or written."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
