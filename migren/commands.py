"""The operations behind each command line command."""

from __future__ import annotations

import logging
from pathlib import Path

from migren.database import DatabaseMigrenData, connect
from migren.models import MigrationData, MigrationsData
from migren.storage import (
    MIGRATIONS_FILE_NAME,
    load_migrations_data,
    save_migrations_data,
)

logger = logging.getLogger(__name__)


def new(name: str) -> MigrationData:
    """Create a new migration in the current directory and record it."""
    path = Path(MIGRATIONS_FILE_NAME)
    data = load_migrations_data(path)

    logger.info("Creating new migration %s", name)
    migration = data.new_migration(name)

    save_migrations_data(path, data)
    logger.info("Saved migrations data to %s", path)
    return migration


def to(database_url: str, migration_id: int) -> None:
    """Move the database to the given migration."""
    with connect(database_url) as migrator:
        data = load_migrations_data(Path(MIGRATIONS_FILE_NAME))
        migrator.to(data, migration_id)


def top(database_url: str) -> int:
    """Move the database to the last added migration and return its id."""
    with connect(database_url) as migrator:
        data = load_migrations_data(Path(MIGRATIONS_FILE_NAME))
        target = data.migrations_counter
        migrator.to(data, target)
    return target


def status(database_url: str) -> tuple[MigrationsData, DatabaseMigrenData]:
    """Log and return the state of the migrations file and of the database."""
    with connect(database_url) as migrator:
        data = load_migrations_data(Path(MIGRATIONS_FILE_NAME))
        db_data = migrator.migren_data()

    logger.info("Migrations info:")
    logger.info("Migrations counter is: %s", data.migrations_counter)
    logger.info("Migren version: %s", data.migren_version)
    logger.info("Database info:")
    logger.info(
        "Database is at migration: %s - info about migration: %r",
        db_data.last_migration_applied,
        data.migration_by_id(db_data.last_migration_applied),
    )
    logger.info("Migren version: %s", db_data.migren_version)
    return data, db_data