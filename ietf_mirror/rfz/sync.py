"""Mirror synchronisation through an external rsync process."""
from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from .errors import SyncError

logger = logging.getLogger(__name__)

RSYNC_OPTIONS = (
    "--archive",
    "--compress",
    "--include=*.html",
    "--exclude=**",
    "--prune-empty-dirs",
)


def build_sync_command(
    command: str, remote: str, target: Path, verbosity: int = 0
) -> list[str]:
    argv = [command]
    if verbosity > 0:
        argv.append("-" + "v" * verbosity)
    argv.extend(RSYNC_OPTIONS)
    argv.extend([remote, str(target)])
    return argv


def sync_mirror(
    target: Path,
    *,
    command: str,
    remote: str,
    verbosity: int = 0,
) -> None:
    """Pull ``*.html`` documents from ``remote`` into ``target``."""

    target.mkdir(parents=True, exist_ok=True)
    argv = build_sync_command(command, remote, target, verbosity)
    logger.info("Syncing %s from %s", target, remote)
    logger.debug("Running %s", " ".join(argv))
    try:
        completed = subprocess.run(argv, check=False)
    except OSError as exc:
        raise SyncError(f"Failed to run '{command}': {exc}") from exc
    if completed.returncode != 0:
        raise SyncError(f"'{command}' exited with status {completed.returncode}")
