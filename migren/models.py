"""Migration records, the migrations file model and path building."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any

from migren.errors import MigrationFilesDoNotExist, MigrationPathInvalid

logger = logging.getLogger(__name__)

MIGREN_VERSION = "0.1.1"


@dataclass
class MigrationFiles:
    """Names of a migration's SQL files, relative to the migrations directory."""

    up_migration_file: str
    down_migration_file: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "up_migration_file": self.up_migration_file,
            "down_migration_file": self.down_migration_file,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MigrationFiles:
        try:
            return cls(
                up_migration_file=str(data["up_migration_file"]),
                down_migration_file=str(data["down_migration_file"]),
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"invalid migration files data: {exc!r}") from exc


@dataclass
class MigrationData:
    """A single migration and its links to its neighbours."""

    files: MigrationFiles
    name: str
    id: int
    prev_migration_id: int | None = None
    next_migration_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "files": self.files.to_dict(),
            "name": self.name,
            "id": self.id,
            "prev_migration_id": self.prev_migration_id,
            "next_migration_id": self.next_migration_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MigrationData:
        try:
            return cls(
                files=MigrationFiles.from_dict(data["files"]),
                name=str(data["name"]),
                id=int(data["id"]),
                prev_migration_id=data.get("prev_migration_id"),
                next_migration_id=data.get("next_migration_id"),
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"invalid migration data: {exc!r}") from exc


@dataclass
class MigrationToApply:
    """One step of a migration path: the migration id and the SQL file to run."""

    id: int
    file: str


@dataclass
class MigrationsData:
    """Every known migration; the root object of the migrations file."""

    migrations: list[MigrationData] = field(default_factory=list)
    migren_version: str = MIGREN_VERSION
    migrations_start_id: int | None = None
    migrations_counter: int = 0

    @classmethod
    def initial(cls) -> MigrationsData:
        """Data for a fresh project, holding only the empty migration 0."""
        return cls(
            migrations=[
                MigrationData(
                    files=MigrationFiles("", ""),
                    name="initial",
                    id=0,
                )
            ],
            migren_version=MIGREN_VERSION,
            migrations_start_id=None,
            migrations_counter=0,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "migrations": [migration.to_dict() for migration in self.migrations],
            "migren_version": self.migren_version,
            "migrations_start_id": self.migrations_start_id,
            "migrations_counter": self.migrations_counter,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MigrationsData:
        try:
            return cls(
                migrations=[MigrationData.from_dict(item) for item in data["migrations"]],
                migren_version=str(data["migren_version"]),
                migrations_start_id=data.get("migrations_start_id"),
                migrations_counter=int(data["migrations_counter"]),
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"invalid migrations data: {exc!r}") from exc

    def migration_by_id(self, migration_id: int) -> MigrationData | None:
        return next((m for m in self.migrations if m.id == migration_id), None)

    def new_migration(self, name: str) -> MigrationData:
        """Create the files of a new migration and link it after the last one."""
        migration_id = self.migrations_counter + 1
        last_migration = self.migration_by_id(self.migrations_counter)
        last_migration_id = last_migration.id if last_migration else None

        logger.info("New migration id is %s", migration_id)
        logger.info("Found last migration: %s", last_migration_id)
        files = create_migration_files(migration_id, name)

        migration = MigrationData(
            files=files,
            name=name,
            id=migration_id,
            prev_migration_id=last_migration_id,
            next_migration_id=None,
        )
        logger.info("New migration data: %r", migration)

        if last_migration is not None:
            last_migration.next_migration_id = migration_id
            logger.info("Changed last migration refs: %r", last_migration)
        else:
            self.migrations_start_id = migration_id

        self.migrations_counter = migration_id
        self.migrations.append(migration)
        return migration

    def _step(
        self, start: MigrationData, stop: MigrationData, current: MigrationData,
        next_id: int | None, seen: set[int],
    ) -> MigrationData:
        if current.id in seen:
            raise MigrationPathInvalid(
                start.id, stop.id, f"Circular migration found: {current!r}"
            )
        seen.add(current.id)
        following = self.migration_by_id(next_id) if next_id is not None else None
        if following is None:
            raise MigrationPathInvalid(
                start.id,
                stop.id,
                f"Next migration not found. Was on migration {current!r}",
            )
        return following

    def build_migration_path_down(
        self, start: MigrationData, stop: MigrationData
    ) -> list[MigrationToApply]:
        """Down files to run, newest first, to go from start back to stop."""
        seen: set[int] = set()
        path: list[MigrationToApply] = []
        current = start
        while current.id != stop.id:
            if current.id != 0:
                assert_migration_files_exist(current)
                path.append(
                    MigrationToApply(current.id, current.files.down_migration_file)
                )
            current = self._step(start, stop, current, current.prev_migration_id, seen)
        return path

    def build_migration_path_up(
        self, start: MigrationData, stop: MigrationData
    ) -> list[MigrationToApply]:
        """Up files to run, oldest first, to go from start forward to stop."""
        seen: set[int] = set()
        path: list[MigrationToApply] = []
        current = start
        while current.id != stop.id:
            current = self._step(start, stop, current, current.next_migration_id, seen)
            if current.id != 0:
                assert_migration_files_exist(current)
                path.append(
                    MigrationToApply(current.id, current.files.up_migration_file)
                )
        return path

    def build_migration_path(self, from_id: int, to_id: int) -> list[MigrationToApply]:
        start = self.migration_by_id(from_id)
        if start is None:
            raise MigrationPathInvalid(from_id, to_id, "from migration does not exists")
        stop = self.migration_by_id(to_id)
        if stop is None:
            raise MigrationPathInvalid(from_id, to_id, "to migration does not exists")
        if start.id < stop.id:
            return self.build_migration_path_up(start, stop)
        return self.build_migration_path_down(start, stop)


def create_migration_files(migration_id: int, name: str) -> MigrationFiles:
    """Write the up and down SQL files of a migration into the current directory."""
    logger.info("Creating migration files for %s.", name)
    up_file = f"{migration_id}_{name}_up.sql"
    down_file = f"{migration_id}_{name}_down.sql"

    with open(up_file, "w", encoding="utf-8") as handle:
        handle.write(f"-- {migration_id} - {name} up query")
    logger.info("Wrote %s", up_file)

    with open(down_file, "w", encoding="utf-8") as handle:
        handle.write(f"-- {migration_id} - {name} down query")
    logger.info("Wrote %s", down_file)

    return MigrationFiles(up_migration_file=up_file, down_migration_file=down_file)


def assert_migration_files_exist(migration: MigrationData) -> None:
    """Raise MigrationFilesDoNotExist unless both SQL files of the migration exist."""
    if not (
        os.path.exists(migration.files.up_migration_file)
        and os.path.exists(migration.files.down_migration_file)
    ):
        raise MigrationFilesDoNotExist(migration)