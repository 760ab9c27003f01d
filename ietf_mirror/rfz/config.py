"""Resolution of command defaults from arguments, environment and platform."""
from __future__ import annotations

import logging
import os
from pathlib import Path

import platformdirs

logger = logging.getLogger(__name__)

APP_NAME = "rfz"

DEFAULT_REMOTE = "rsync.tools.ietf.org::tools.html"
DEFAULT_RSYNC_COMMAND = "rsync"

DIR_ENV = "RFZ_DIR"
JOBS_ENV = "RFZ_JOBS"
REMOTE_ENV = "RFZ_REMOTE"
RSYNC_ENV = "RFZ_RSYNC"

DOCUMENT_TYPES = ("draft", "rfc", "bcp", "std")


def default_data_dir() -> Path:
    return Path(platformdirs.user_data_dir(APP_NAME))


def resolve_data_dir(value: str | Path | None) -> Path:
    if value:
        return Path(value).expanduser()
    env_value = os.environ.get(DIR_ENV)
    if env_value:
        return Path(env_value).expanduser()
    return default_data_dir()


def resolve_jobs(value: int | None) -> int:
    if value is not None:
        return max(value, 1)
    env_value = os.environ.get(JOBS_ENV)
    if env_value:
        try:
            return max(int(env_value), 1)
        except ValueError:
            logger.debug("Invalid %s value: %s", JOBS_ENV, env_value)
    return os.cpu_count() or 1


def resolve_remote(value: str | None) -> str:
    return value or os.environ.get(REMOTE_ENV) or DEFAULT_REMOTE


def resolve_rsync_command(value: str | None) -> str:
    return value or os.environ.get(RSYNC_ENV) or DEFAULT_RSYNC_COMMAND
