"""CLI interface for bwss."""

import logging
from pathlib import Path
from typing import Any, Optional

import click

from .api import BitwardenClient
from .config import (
    BINARY_ENV_VAR,
    DEFAULT_BINARY,
    SESSION_ENV_VAR,
    SyncConfig,
    write_folder_name,
)
from .exceptions import BwssError
from .output import OutputFormatter
from .sync import BitwardenItemStore, InteractivePrompt, SyncEngine, SyncState
from .utils import format_size, format_timestamp, short_hash

logger = logging.getLogger(__name__)

STATE_LABELS = {
    SyncState.NEW_CLIENT: "remote only (would pull)",
    SyncState.MISSING_LOCAL: "remote only",
    SyncState.IDENTICAL: "in sync",
    SyncState.DIVERGED: "changed",
    SyncState.NOT_A_FILE: "not a file",
    SyncState.INVALID_NAME: "invalid name",
    SyncState.IGNORED: "ignored",
    SyncState.MISSING_REMOTE: "local only",
}


def report_error(out: OutputFormatter, error: BwssError) -> None:
    """Write an error and any output captured from bw to stderr."""
    out.error(str(error))
    output = getattr(error, "output", "")
    if output:
        out.error("Output from Bitwarden:")
        out.detail(output)


def get_client(ctx: Any) -> BitwardenClient:
    """Return a client bound to an unlocked session.

    Reuses the session given by --session or BW_SESSION, otherwise runs
    `bw unlock` so the operator can enter the master password.
    """
    session: Optional[str] = ctx.obj["session"]
    client = BitwardenClient(session=session, binary=ctx.obj["bw_binary"])
    if session:
        return client
    logger.debug("No session token given, unlocking the vault")
    return client.with_session(client.unlock())


@click.group()
@click.option(
    "--session",
    envvar=SESSION_ENV_VAR,
    help="Unlocked Bitwarden session token (runs `bw unlock` if omitted)",
)
@click.option(
    "--bw-binary",
    envvar=BINARY_ENV_VAR,
    default=DEFAULT_BINARY,
    show_default=True,
    help="Bitwarden CLI executable",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="bwss")
@click.pass_context
def main(
    ctx: Any,
    session: Optional[str],
    bw_binary: str,
    quiet: bool,
    verbose: bool,
) -> None:
    """bwss - Sync a directory of files with a Bitwarden folder."""
    ctx.ensure_object(dict)
    ctx.obj["session"] = session
    ctx.obj["bw_binary"] = bw_binary
    ctx.obj["out"] = OutputFormatter(quiet=quiet)

    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("bwss").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.argument("path", type=click.Path(path_type=Path), default=".")
@click.pass_context
def sync(ctx: Any, path: Path) -> None:
    """Sync PATH (default: current directory) with its Bitwarden folder.

    Every file in PATH is stored as one secure note. Files that only changed
    on one side, or changed on both, are resolved by asking you:

    \b
      [p]ull          write the remote version to disk
      p[u]sh          upload the local version
      [d]elete        delete the side that still has the file
      anything else   skip the file for this run

    The folder name is read from PATH/.bwss (default: bwss) and glob
    patterns in PATH/.bwssignore are never synced.
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        sync_config = SyncConfig.load(path)
        client = get_client(ctx)
        engine = SyncEngine(BitwardenItemStore(client), out, InteractivePrompt())
        engine.sync(
            sync_config.root,
            sync_config.folder_name,
            sync_config.ignore_patterns,
        )
    except KeyboardInterrupt:
        out.warning("\nSync cancelled by user")
        ctx.exit(130)  # Standard exit code for SIGINT
    except BwssError as e:
        report_error(out, e)
        ctx.exit(1)


@main.command()
@click.argument("path", type=click.Path(path_type=Path), default=".")
@click.pass_context
def ls(ctx: Any, path: Path) -> None:
    """List the Bitwarden folder of PATH and compare it with local files.

    Nothing is changed on either side.
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        sync_config = SyncConfig.load(path)
        client = get_client(ctx)
        engine = SyncEngine(BitwardenItemStore(client), out)
        comparisons = engine.status(
            sync_config.root,
            sync_config.folder_name,
            sync_config.ignore_patterns,
        )
    except KeyboardInterrupt:
        out.warning("\nListing cancelled by user")
        ctx.exit(130)
        return
    except BwssError as e:
        report_error(out, e)
        ctx.exit(1)
        return

    if not comparisons:
        out.info(f"Nothing to sync in folder {sync_config.folder_name}")
        return

    rows = []
    for comparison in comparisons:
        item = comparison.remote_item
        if item is not None and comparison.state != SyncState.IGNORED:
            modified = item.modified
            remote_cols = [
                short_hash(comparison.remote_hash or item.hash),
                format_size(item.size),
                format_timestamp(modified) if modified else "?",
            ]
        else:
            remote_cols = ["", "", ""]
        rows.append([comparison.name, *remote_cols, STATE_LABELS[comparison.state]])

    out.print_table(
        ["name", "hash", "size", "modified", "status"],
        rows,
        title=sync_config.folder_name,
    )


@main.command()
@click.argument("folder")
@click.argument("path", type=click.Path(path_type=Path), default=".")
@click.pass_context
def init(ctx: Any, folder: str, path: Path) -> None:
    """Use the Bitwarden folder FOLDER for PATH (default: current directory).

    Writes the folder name to PATH/.bwss. The folder is created on the
    first sync if it does not exist yet.
    """
    out: OutputFormatter = ctx.obj["out"]

    if not path.is_dir():
        out.error(f"Path is not a directory: {path}")
        ctx.exit(1)

    try:
        config_path = write_folder_name(path, folder)
    except BwssError as e:
        report_error(out, e)
        ctx.exit(1)
        return

    out.success(f"✓ Saved folder name to {config_path}")


if __name__ == "__main__":
    main()
