"""Versioned schema migrations and the migrator that applies and reverts them."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    delete,
    insert,
    inspect,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from lica.errors import LicaError

log = logging.getLogger(__name__)

MIGRATIONS_TABLE = "schema_migrations"
LOCKS_TABLE = "schema_migration_locks"

_SQL_FILE = re.compile(r"^(?P<name>[^_.]+)(?:_(?P<comment>[^.]*))?\.(?P<direction>up|down)\.sql$")


class MigrationError(LicaError):
    """A migration could not be applied, reverted or managed."""

    default_message = "migration error"


@dataclass(frozen=True)
class Migration:
    """One schema change: statements to apply it and statements to revert it."""

    name: str
    comment: str = ""
    up: tuple[str, ...] = ()
    down: tuple[str, ...] = ()

    def __str__(self) -> str:
        return f"{self.name}_{self.comment}" if self.comment else self.name


@dataclass
class MigrationGroup:
    """Migrations that were applied or reverted together."""

    id: int = 0
    migrations: list[Migration] = field(default_factory=list)

    def is_zero(self) -> bool:
        """True when the group holds nothing."""
        return self.id == 0 and not self.migrations

    def __str__(self) -> str:
        if self.is_zero():
            return "nil"
        names = ", ".join(str(migration) for migration in self.migrations)
        return f"group #{self.id} ({names})"


BUILTIN_MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        name="20240725113648",
        comment="initial_schema",
        up=(
            """
            CREATE TABLE users (
              id UUID PRIMARY KEY,
              email TEXT NOT NULL UNIQUE
            )
            """,
            """
            CREATE TABLE products (
              id UUID PRIMARY KEY,
              name TEXT NOT NULL,
              user_id UUID REFERENCES users(id),
              is_custom boolean NOT NULL DEFAULT false,
              UNIQUE(name, user_id)
            )
            """,
            """
            CREATE TABLE categories (
              id UUID PRIMARY KEY,
              name TEXT NOT NULL,
              user_id UUID REFERENCES users(id),
              UNIQUE(name, user_id)
            )
            """,
            """
            CREATE TABLE product_categories (
              product_id UUID REFERENCES products(id),
              user_id UUID REFERENCES users(id),
              category_id UUID REFERENCES categories(id),
              PRIMARY KEY (product_id, user_id, category_id)
            )
            """,
            """
            CREATE TABLE lists (
              id UUID PRIMARY KEY,
              name TEXT NOT NULL,
              user_id UUID NOT NULL REFERENCES users(id),
              UNIQUE(name, user_id)
            )
            """,
            """
            CREATE TABLE list_items (
              id UUID PRIMARY KEY,
              unit TEXT,
              amount DECIMAL NOT NULL DEFAULT 1.0,
              list_id UUID NOT NULL REFERENCES lists(id),
              product_id UUID NOT NULL REFERENCES products(id),
              category_id UUID NOT NULL REFERENCES categories(id),
              UNIQUE(list_id, product_id, category_id)
            )
            """,
        ),
        down=(
            "DROP TABLE list_items",
            "DROP TABLE lists",
            "DROP TABLE product_categories",
            "DROP TABLE categories",
            "DROP TABLE products",
            "DROP TABLE users",
        ),
    ),
    Migration(
        name="20240727192743",
        comment="remove_is_custom",
        up=("ALTER TABLE products DROP COLUMN is_custom",),
        down=(
            "ALTER TABLE products ADD COLUMN is_custom BOOLEAN DEFAULT FALSE",
            "UPDATE products SET is_custom = (user_id IS NULL)",
        ),
    ),
)


def _split_sql(text: str) -> tuple[str, ...]:
    """Split a SQL script into statements, dropping comment lines."""
    body = "\n".join(line for line in text.splitlines() if not line.strip().startswith("--"))
    return tuple(part.strip() for part in body.split(";") if part.strip())


def load_sql_migrations(directory: str | os.PathLike[str]) -> list[Migration]:
    """Read '<name>_<comment>.up.sql' and '.down.sql' files from a directory."""
    found: dict[str, dict[str, object]] = {}
    for path in sorted(Path(directory).iterdir()):
        match = _SQL_FILE.match(path.name)
        if match is None or not path.is_file():
            continue
        entry = found.setdefault(
            match["name"], {"comment": match["comment"] or "", "up": (), "down": ()}
        )
        entry[match["direction"]] = _split_sql(path.read_text(encoding="utf-8"))
    return [
        Migration(
            name=name,
            comment=str(entry["comment"]),
            up=tuple(entry["up"]),  # type: ignore[arg-type]
            down=tuple(entry["down"]),  # type: ignore[arg-type]
        )
        for name, entry in sorted(found.items())
    ]


class Migrator:
    """Applies migrations to a database and keeps track of what was applied."""

    def __init__(self, engine: Engine, migrations: Iterable[Migration] | None = None) -> None:
        self._engine = engine
        chosen = BUILTIN_MIGRATIONS if migrations is None else migrations
        ordered = sorted(chosen, key=lambda migration: migration.name)
        names = [migration.name for migration in ordered]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise MigrationError(f"duplicate migration names: {', '.join(duplicates)}")
        self.migrations: tuple[Migration, ...] = tuple(ordered)

        metadata = MetaData()
        self._applied = Table(
            MIGRATIONS_TABLE,
            metadata,
            Column("id", Integer, primary_key=True, autoincrement=True),
            Column("name", String(255), nullable=False),
            Column("group_id", Integer, nullable=False),
            Column("migrated_at", DateTime(timezone=True), nullable=False),
        )
        self._locks = Table(
            LOCKS_TABLE,
            metadata,
            Column("id", Integer, primary_key=True, autoincrement=True),
            Column("table_name", String(255), unique=True, nullable=False),
        )
        self._metadata = metadata

    def init(self) -> None:
        """Create the bookkeeping tables."""
        self._metadata.create_all(self._engine)

    def _require_tables(self) -> None:
        inspector = inspect(self._engine)
        if not (inspector.has_table(MIGRATIONS_TABLE) and inspector.has_table(LOCKS_TABLE)):
            raise MigrationError(f"{MIGRATIONS_TABLE} does not exist; did you run init?")

    def lock(self) -> None:
        """Take the migration lock; fails when someone else holds it."""
        self._require_tables()
        try:
            with self._engine.begin() as conn:
                conn.execute(insert(self._locks).values(table_name=MIGRATIONS_TABLE))
        except IntegrityError as exc:
            raise MigrationError(f"{MIGRATIONS_TABLE} is already locked") from exc

    def unlock(self) -> None:
        """Release the migration lock."""
        self._require_tables()
        with self._engine.begin() as conn:
            conn.execute(delete(self._locks).where(self._locks.c.table_name == MIGRATIONS_TABLE))

    def _applied_rows(self) -> list:
        with self._engine.connect() as conn:
            return list(conn.execute(select(self._applied.c.name, self._applied.c.group_id)))

    def migrate(self) -> MigrationGroup:
        """Apply every pending migration as one new group."""
        self._require_tables()
        rows = self._applied_rows()
        applied = {row.name for row in rows}
        pending = [m for m in self.migrations if m.name not in applied]
        if not pending:
            return MigrationGroup()

        group = MigrationGroup(id=max((row.group_id for row in rows), default=0) + 1)
        for migration in pending:
            log.debug("[up migration] %s", migration)
            with self._engine.begin() as conn:
                for statement in migration.up:
                    conn.exec_driver_sql(statement)
                conn.execute(
                    insert(self._applied).values(
                        name=migration.name,
                        group_id=group.id,
                        migrated_at=datetime.now(timezone.utc),
                    )
                )
            group.migrations.append(migration)
        return group

    def rollback(self) -> MigrationGroup:
        """Revert the most recently applied group."""
        self._require_tables()
        rows = self._applied_rows()
        if not rows:
            return MigrationGroup()

        last_group = max(row.group_id for row in rows)
        known = {migration.name: migration for migration in self.migrations}
        names = sorted((row.name for row in rows if row.group_id == last_group), reverse=True)
        missing = [name for name in names if name not in known]
        if missing:
            raise MigrationError(f"unknown applied migrations: {', '.join(missing)}")

        group = MigrationGroup(id=last_group)
        for name in names:
            migration = known[name]
            log.debug("[down migration] %s", migration)
            with self._engine.begin() as conn:
                for statement in migration.down:
                    conn.exec_driver_sql(statement)
                conn.execute(delete(self._applied).where(self._applied.c.name == name))
            group.migrations.append(migration)
        return group

    def create_migration(
        self, name: str, directory: str | os.PathLike[str] = "migrations"
    ) -> tuple[Path, Path]:
        """Write empty up and down SQL files for a new migration and return their paths."""
        folder = Path(directory)
        folder.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
        base = f"{stamp}_{name}" if name else stamp
        up_path = folder / f"{base}.up.sql"
        down_path = folder / f"{base}.down.sql"
        for path, direction in ((up_path, "up"), (down_path, "down")):
            with path.open("x", encoding="utf-8") as handle:
                handle.write(f"-- {direction} migration {base}\n")
        return up_path, down_path