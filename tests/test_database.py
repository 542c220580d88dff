from pathlib import Path

import pytest
from sqlalchemy import create_engine, inspect, text

from migren.database import DatabaseMigrenData, connect
from migren.errors import MigrationFilesDoNotExist, MigrationPathInvalid, MigrenError
from migren.models import MIGREN_VERSION, MigrationsData


def _url(path: Path) -> str:
    return f"sqlite:///{path}"


def _has_table(url: str, name: str) -> bool:
    engine = create_engine(url)
    try:
        return inspect(engine).has_table(name)
    finally:
        engine.dispose()


def _rows(url: str, sql: str) -> list:
    engine = create_engine(url)
    try:
        with engine.connect() as conn:
            return list(conn.execute(text(sql)))
    finally:
        engine.dispose()


@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    data = MigrationsData.initial()
    first = data.new_migration("users")
    Path(first.files.up_migration_file).write_text(
        "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)", encoding="utf-8"
    )
    Path(first.files.down_migration_file).write_text(
        "DROP TABLE users", encoding="utf-8"
    )
    return data, _url(tmp_path / "db.sqlite")


def test_connect_creates_migren_data_table(tmp_path):
    url = _url(tmp_path / "db.sqlite")
    with connect(url) as migrator:
        data = migrator.migren_data()
    assert data.last_migration_applied == 0
    assert _has_table(url, "migren_data")


def test_fresh_database_gets_default_data(tmp_path):
    url = _url(tmp_path / "db.sqlite")
    with connect(url) as migrator:
        data = migrator.migren_data()
    assert data == DatabaseMigrenData()
    assert data.migren_version == MIGREN_VERSION
    assert data.last_migration_applied == 0
    assert len(_rows(url, "SELECT * FROM migren_data")) == 1


def test_set_migren_data_round_trip_keeps_one_row(tmp_path):
    url = _url(tmp_path / "db.sqlite")
    stored = DatabaseMigrenData(migren_version="9.9.9", last_migration_applied=4)
    with connect(url) as migrator:
        migrator.migren_data()
        migrator.set_migren_data(stored)
        assert migrator.migren_data() == stored
    assert len(_rows(url, "SELECT * FROM migren_data")) == 1


def test_to_applies_up_migration(project):
    data, url = project
    with connect(url) as migrator:
        migrator.to(data, 1)
        assert migrator.migren_data().last_migration_applied == 1
    assert _has_table(url, "users")


def test_to_rolls_back_with_down_migration(project):
    data, url = project
    with connect(url) as migrator:
        migrator.to(data, 1)
        migrator.to(data, 0)
        assert migrator.migren_data().last_migration_applied == 0
    assert not _has_table(url, "users")


def test_to_same_migration_runs_nothing(project):
    data, url = project
    with connect(url) as migrator:
        migrator.to(data, 1)
        Path(data.migration_by_id(1).files.up_migration_file).write_text(
            "THIS IS NOT SQL", encoding="utf-8"
        )
        migrator.to(data, 1)
        assert migrator.migren_data().last_migration_applied == 1


def test_to_unknown_migration_raises(project):
    data, url = project
    with connect(url) as migrator:
        with pytest.raises(MigrationPathInvalid) as info:
            migrator.to(data, 7)
        assert info.value.to_id == 7
        assert migrator.migren_data().last_migration_applied == 0


def test_failing_migration_rolls_back_transaction(project):
    data, url = project
    second = data.new_migration("fill")
    Path(second.files.up_migration_file).write_text(
        "INSERT INTO users (name) VALUES ('alice')", encoding="utf-8"
    )
    third = data.new_migration("broken")
    Path(third.files.up_migration_file).write_text(
        "INSERT INTO missing_table VALUES (1)", encoding="utf-8"
    )
    with connect(url) as migrator:
        migrator.to(data, 1)
        with pytest.raises(MigrenError):
            migrator.to(data, 3)
        assert migrator.migren_data().last_migration_applied == 1
    assert _rows(url, "SELECT * FROM users") == []


def test_missing_migration_file_raises(project):
    data, url = project
    Path(data.migration_by_id(1).files.down_migration_file).unlink()
    with connect(url) as migrator:
        with pytest.raises(MigrationFilesDoNotExist):
            migrator.to(data, 1)
        assert migrator.migren_data().last_migration_applied == 0


def test_connect_with_bad_url_raises():
    with pytest.raises(MigrenError):
        connect("not a database url")