"""Client for the Bitwarden command-line binary."""

import json
import logging
import os
import subprocess
from typing import Any, Optional

from .config import DEFAULT_BINARY, SESSION_ENV_VAR
from .exceptions import (
    BwssBinaryNotFoundError,
    BwssCommandError,
    BwssInvalidResponseError,
    BwssSessionError,
)
from .models import Folder, RemoteItem
from .utils import encode_json_b64

logger = logging.getLogger(__name__)

# Line printed by `bw unlock` that carries the session token
UNLOCK_SESSION_LINE_PREFIX = "$ export BW_SESSION="


def _shorten_arg(arg: str) -> str:
    """Shorten long arguments (IDs, encoded documents) for logging."""
    return arg[:7] + "..." if len(arg) > 10 else arg


def parse_session_token(output: str) -> str:
    """Extract the session token from `bw unlock` output.

    Args:
        output: Standard output of `bw unlock`

    Returns:
        Session token without surrounding quotes

    Raises:
        BwssSessionError: If no session line is present

    Examples:
        >>> parse_session_token('$ export BW_SESSION="abc123"')
        'abc123'
    """
    for line in output.splitlines():
        line = line.strip()
        if line.startswith(UNLOCK_SESSION_LINE_PREFIX):
            token = line[len(UNLOCK_SESSION_LINE_PREFIX) :].strip().strip("\"'")
            if token:
                return token
    raise BwssSessionError("Session not found in bw unlock output", output=output)


class BitwardenClient:
    """Runs bw commands bound to one session token."""

    def __init__(
        self,
        session: Optional[str] = None,
        binary: str = DEFAULT_BINARY,
    ):
        """Initialize the client.

        Args:
            session: Unlocked session token passed to every command
            binary: Name or path of the bw executable
        """
        self.session = session
        self.binary = binary

    def with_session(self, session: str) -> "BitwardenClient":
        """Return a client bound to another session token."""
        return BitwardenClient(session=session, binary=self.binary)

    def _build_env(self) -> dict[str, str]:
        env = dict(os.environ)
        if self.session:
            env[SESSION_ENV_VAR] = self.session
        else:
            env.pop(SESSION_ENV_VAR, None)
        return env

    def _run(self, *args: str) -> str:
        """Run a bw command and return its standard output.

        Standard input and standard error stay attached to the terminal so
        that interactive prompts from bw (master password) reach the operator.

        Args:
            *args: Arguments passed to bw

        Returns:
            Stripped standard output

        Raises:
            BwssCommandError: If bw exits with a non-zero status
            BwssBinaryNotFoundError: If the bw executable cannot be started
        """
        logger.debug("+ %s %s", self.binary, " ".join(_shorten_arg(a) for a in args))
        try:
            result = subprocess.run(
                [self.binary, *args],
                stdout=subprocess.PIPE,
                env=self._build_env(),
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise BwssBinaryNotFoundError(
                f"Bitwarden CLI not found: {self.binary}",
                args=list(args),
            ) from e

        output = (result.stdout or "").strip()
        if result.returncode != 0:
            raise BwssCommandError(
                f"Command failed: bw {args[0] if args else ''} "
                f"(exit status {result.returncode})",
                args=list(args),
                returncode=result.returncode,
                output=output,
            )
        return output

    def _run_json(self, *args: str) -> Any:
        """Run a bw command that prints JSON.

        Raises:
            BwssInvalidResponseError: If the output is not valid JSON
        """
        output = self._run(*args)
        try:
            return json.loads(output)
        except ValueError as e:
            raise BwssInvalidResponseError(
                f"Command did not output JSON: bw {args[0] if args else ''}",
                output=output,
            ) from e

    def _run_json_list(self, *args: str) -> list[Any]:
        data = self._run_json(*args)
        if not isinstance(data, list):
            raise BwssInvalidResponseError(
                f"Expected a JSON array from bw {' '.join(args[:2])}",
                output=json.dumps(data),
            )
        return data

    # =========================
    # Session
    # =========================

    def unlock(self) -> str:
        """Unlock the vault and return a new session token.

        Raises:
            BwssSessionError: If the output carries no session token
        """
        return parse_session_token(self._run("unlock"))

    def sync(self) -> None:
        """Pull the latest vault data from the server."""
        self._run("sync")

    # =========================
    # Folders
    # =========================

    def list_folders(self) -> list[Folder]:
        """List all folders in the vault."""
        return [
            Folder.from_api_response(record)
            for record in self._run_json_list("list", "folders")
        ]

    def create_folder(self, name: str) -> Folder:
        """Create a folder.

        Args:
            name: Folder name

        Returns:
            Created folder
        """
        data = self._run_json("create", "folder", encode_json_b64({"name": name}))
        return Folder.from_api_response(data)

    # =========================
    # Items
    # =========================

    def list_items(self, folder_id: str) -> list[RemoteItem]:
        """List all items in a folder.

        Args:
            folder_id: Folder ID

        Returns:
            Items in the folder
        """
        records = self._run_json_list("list", "items", "--folderid", folder_id)
        return [RemoteItem.from_api_response(record) for record in records]

    def create_item(self, document: dict[str, Any]) -> RemoteItem:
        """Create an item from a full item document."""
        data = self._run_json("create", "item", encode_json_b64(document))
        return RemoteItem.from_api_response(data)

    def edit_item(self, item_id: str, document: dict[str, Any]) -> None:
        """Replace an item with a full item document."""
        self._run("edit", "item", item_id, encode_json_b64(document))

    def delete_item(self, item_id: str) -> None:
        """Move an item to the trash."""
        self._run("delete", "item", item_id)
