"""Command line tool that manages the database schema."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from lica.database import config_from_env, create_db_engine
from lica.errors import LicaError
from lica.migrations import BUILTIN_MIGRATIONS, Migrator, load_sql_migrations
from lica.settings import configure_logging, load_env

log = logging.getLogger(__name__)

_FAILURES = (LicaError, SQLAlchemyError, OSError)


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the migration tool."""
    parser = argparse.ArgumentParser(prog="lica-migrate", description="LiCa migration tool")
    parser.add_argument(
        "--migrations-dir",
        default="migrations",
        help="directory holding SQL migration files (default: migrations)",
    )
    commands = parser.add_subparsers(dest="command", required=True)
    migrate = commands.add_parser("migrate", help="manage database migrations")
    actions = migrate.add_subparsers(dest="action", required=True)
    actions.add_parser("up", help="apply pending migrations")
    actions.add_parser("down", help="roll back the last migration group")
    actions.add_parser("init", help="create the migration tables")
    create = actions.add_parser("create", help="create a new migration")
    create.add_argument("name", nargs="*", help="words of the migration name")
    return parser


def _migrate_up(migrator: Migrator) -> None:
    group = migrator.migrate()
    if group.is_zero():
        log.info("no new migrations to run (database is up to date)")
    else:
        log.info("migrated to %s", group)


def _migrate_down(migrator: Migrator) -> None:
    group = migrator.rollback()
    if group.is_zero():
        log.info("there are no groups to roll back")
    else:
        log.info("rolled back %s", group)


def _locked(migrator: Migrator, step: Callable[[Migrator], None], failure: str) -> int:
    migrator.lock()
    try:
        try:
            step(migrator)
        except _FAILURES as exc:
            log.error("%s: %s", failure, exc)
            return 1
    finally:
        migrator.unlock()
    return 0


def run(args: argparse.Namespace, migrator: Migrator) -> int:
    """Carry out a parsed command; returns the exit status."""
    try:
        if args.action == "init":
            migrator.init()
            return 0
        if args.action == "create":
            directory = getattr(args, "migrations_dir", "migrations")
            for path in migrator.create_migration("_".join(args.name), directory):
                log.info("Migration file created: path=%s", path)
            return 0
        if args.action == "up":
            return _locked(migrator, _migrate_up, "failed to migrate")
        if args.action == "down":
            return _locked(migrator, _migrate_down, "failed to rollback")
    except _FAILURES as exc:
        log.error("%s failed: %s", args.action, exc)
        return 1
    log.error("unknown action: %s", args.action)
    return 2


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the migration tool."""
    args = build_parser().parse_args(argv)
    logging.basicConfig()
    load_env()
    configure_logging()

    engine = create_db_engine(config_from_env())
    try:
        migrations = list(BUILTIN_MIGRATIONS)
        directory = Path(args.migrations_dir)
        if directory.is_dir():
            migrations.extend(load_sql_migrations(directory))
        return run(args, Migrator(engine, migrations))
    finally:
        engine.dispose()