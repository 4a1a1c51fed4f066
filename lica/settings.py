"""Environment loading and logging configuration."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path

from dotenv import load_dotenv

log = logging.getLogger(__name__)

LOG_LEVEL_VARIABLE = "LICA_LOG_LEVEL"
_INTEGER = re.compile(r"[+-]?\d+")


def load_env(path: str | os.PathLike[str] | None = None) -> bool:
    """Load variables from a .env file without overriding existing ones.

    Returns True when the file was read, False when it could not be.
    """
    log.info("Loading env variables")
    env_path = Path(path) if path is not None else Path(".env")
    if not env_path.is_file():
        log.error("Failed to load .env: %s does not exist", env_path)
        return False
    load_dotenv(env_path, override=False)
    return True


def slog_level_to_logging(level: int) -> int:
    """Convert a structured-log level (debug -4, info 0, warn 4, error 8) to a logging level."""
    return max(1, logging.INFO + (level * 5) // 2)


def configure_logging(environ: Mapping[str, str] | None = None) -> int | None:
    """Set the root log level from LICA_LOG_LEVEL; debug when it is absent.

    Returns the level that was set, or None when the variable could not be parsed.
    """
    env = os.environ if environ is None else environ
    raw = env.get(LOG_LEVEL_VARIABLE)
    if raw is None:
        level = logging.DEBUG
    else:
        if not _INTEGER.fullmatch(raw):
            log.error("Failed to parse log level: %r", raw)
            return None
        level = slog_level_to_logging(int(raw))

    logging.getLogger().setLevel(level)
    log.info("logger initialized")
    return level