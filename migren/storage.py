"""Reading and writing the migrations file and its directory."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from migren.models import MigrationsData

logger = logging.getLogger(__name__)

MIGRATIONS_FILE_NAME = ".migren.json"


def default_migrations_dir() -> Path:
    """The default migrations directory: the current working directory."""
    return Path.cwd()


def create_dir_if_not_exists(path: str | os.PathLike[str]) -> None:
    directory = Path(path)
    if not directory.exists():
        logger.info("Directory %s does not exists. Creating it", directory)
        directory.mkdir()


def save_migrations_data(path: str | os.PathLike[str], data: MigrationsData) -> None:
    text = json.dumps(data.to_dict(), separators=(",", ":"))
    Path(path).write_text(text, encoding="utf-8")


def load_migrations_data(path: str | os.PathLike[str]) -> MigrationsData:
    """Load the migrations file, creating it with initial data if it is missing."""
    file_path = Path(path)
    if not file_path.exists():
        logger.info("File %s does not exist. Creating one", file_path)
        save_migrations_data(file_path, MigrationsData.initial())
    return MigrationsData.from_dict(json.loads(file_path.read_text(encoding="utf-8")))