"""Database access: the migren_data table and applying migration paths."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from migren.errors import MigrenError
from migren.models import MIGREN_VERSION, MigrationsData

logger = logging.getLogger(__name__)

TABLE_CREATE = """
CREATE TABLE IF NOT EXISTS migren_data (
    migren_version TEXT,
    last_migration_applied INTEGER
);
"""


@contextmanager
def _database_errors() -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise MigrenError(f"Database error: {exc}") from exc


@dataclass
class DatabaseMigrenData:
    """The migren state stored in the database."""

    migren_version: str = MIGREN_VERSION
    last_migration_applied: int = 0


class Migrator:
    """A database connection that knows how to move between migrations."""

    def __init__(self, connection: Connection, engine: Engine | None = None) -> None:
        self._conn = connection
        self._engine = engine

    def __enter__(self) -> Migrator:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def migren_data(self) -> DatabaseMigrenData:
        """Read the stored state, storing the default one if there is none."""
        with _database_errors():
            row = self._conn.execute(
                text(
                    "SELECT migren_version, last_migration_applied "
                    "FROM migren_data LIMIT 1"
                )
            ).first()
        if row is None:
            self.set_migren_data(DatabaseMigrenData())
            return DatabaseMigrenData()
        try:
            return DatabaseMigrenData(
                migren_version=str(row.migren_version),
                last_migration_applied=int(row.last_migration_applied),
            )
        except (TypeError, ValueError) as exc:
            raise MigrenError(f"Invalid row in migren_data: {exc}") from exc

    def set_migren_data(self, data: DatabaseMigrenData) -> None:
        """Replace the stored state with the given one."""
        with _database_errors():
            self._conn.execute(text("DELETE FROM migren_data"))
            logger.debug("Removed all rows from migren_data")
            self._conn.execute(
                text(
                    "INSERT INTO migren_data (migren_version, last_migration_applied) "
                    "VALUES (:version, :last)"
                ),
                {"version": data.migren_version, "last": data.last_migration_applied},
            )
            self._conn.commit()
        logger.debug("Saved new row into migren_data")

    def to(self, migrations_data: MigrationsData, migration_id: int) -> None:
        """Run the migrations that lead to migration_id in one transaction."""
        current = self.migren_data()
        if current.last_migration_applied == migration_id:
            logger.info("Database is already at migration %s", migration_id)
            return

        path = migrations_data.build_migration_path(
            current.last_migration_applied, migration_id
        )
        logger.debug("Migration path: %r", path)

        with _database_errors():
            if self._conn.in_transaction():
                self._conn.commit()
            with self._conn.begin():
                logger.debug("Begin transaction...")
                for step in path:
                    sql = Path(step.file).read_text(encoding="utf-8")
                    self._conn.exec_driver_sql(sql)
                    logger.info("Applied file %s", step.file)
                self._conn.execute(
                    text("UPDATE migren_data SET last_migration_applied = :last"),
                    {"last": migration_id},
                )
        logger.info("Transaction completed")

    def close(self) -> None:
        self._conn.close()
        if self._engine is not None:
            self._engine.dispose()


def connect(url: str) -> Migrator:
    """Connect to the database and make sure the migren_data table exists."""
    with _database_errors():
        engine = create_engine(url)
        try:
            connection = engine.connect()
        except SQLAlchemyError:
            engine.dispose()
            raise
        logger.info("Connected to DB")
        try:
            connection.execute(text(TABLE_CREATE))
            connection.commit()
        except SQLAlchemyError:
            connection.close()
            engine.dispose()
            raise
    logger.info("Creating migren_data table if does not exists yet...")
    return Migrator(connection, engine)