"""Database connection settings and engine creation."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from urllib.parse import quote

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine


@dataclass(frozen=True)
class DbConfig:
    """Where and how to reach the PostgreSQL database."""

    addr: str
    database: str
    user: str
    password: str

    def dsn(self) -> str:
        """Connection URL for this configuration, with TLS disabled."""
        user = quote(self.user, safe="")
        secret = quote(self.password, safe="")
        return f"postgresql://{user}:{secret}@{self.addr}/{self.database}?sslmode=disable"


def config_from_env(environ: Mapping[str, str] | None = None) -> DbConfig:
    """Build a configuration from the DB_* environment variables."""
    env = os.environ if environ is None else environ
    return DbConfig(
        addr=f"{env.get('DB_HOST', '')}:{env.get('DB_PORT', '')}",
        database=env.get("DB_DATABASE", ""),
        user=env.get("DB_USER", ""),
        password=env.get("DB_PASSWORD", ""),
    )


def create_db_engine(config: DbConfig | str) -> Engine:
    """Create an engine from a configuration or a ready URL.

    Statements are echoed when debug logging is enabled.
    """
    url = config.dsn() if isinstance(config, DbConfig) else config
    echo = logging.getLogger().isEnabledFor(logging.DEBUG)
    return create_engine(url, echo=echo)