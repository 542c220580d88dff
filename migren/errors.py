"""Exceptions raised by migren."""

from __future__ import annotations

from typing import Any


class MigrenError(Exception):
    """Base class for every error migren reports."""


class MigrationPathInvalid(MigrenError):
    """No valid chain of migrations leads from one migration to another."""

    def __init__(self, from_id: int, to_id: int, comment: str) -> None:
        self.from_id = from_id
        self.to_id = to_id
        self.comment = comment
        super().__init__(
            f"Migration path from {from_id} to {to_id} is invalid. {comment}"
        )


class MigrationFilesDoNotExist(MigrenError):
    """The up or down SQL file of a migration is missing."""

    def __init__(self, migration: Any) -> None:
        self.migration = migration
        super().__init__(f"Migration files does not exists: {migration!r}")