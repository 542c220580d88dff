import pytest

from migren.errors import MigrationFilesDoNotExist, MigrationPathInvalid, MigrenError


def test_path_invalid_message_and_fields():
    err = MigrationPathInvalid(1, 2, "oops")
    assert str(err) == "Migration path from 1 to 2 is invalid. oops"
    assert (err.from_id, err.to_id, err.comment) == (1, 2, "oops")


def test_path_invalid_is_migren_error():
    err = MigrationPathInvalid(3, 0, "broken")
    assert isinstance(err, MigrenError)
    assert (err.from_id, err.to_id, err.comment) == (3, 0, "broken")
    assert str(err) == "Migration path from 3 to 0 is invalid. broken"


def test_files_missing_message_holds_migration():
    marker = ("some", "migration")
    err = MigrationFilesDoNotExist(marker)
    assert err.migration is marker
    assert str(err).startswith("Migration files does not exists: ")
    assert repr(marker) in str(err)


def test_files_missing_is_migren_error():
    marker = ("other", "migration")
    err = MigrationFilesDoNotExist(marker)
    assert isinstance(err, MigrenError)
    assert err.migration is marker
    assert str(err) == f"Migration files does not exists: {marker!r}"


@pytest.mark.parametrize(
    ("err", "expected"),
    [
        (MigrationPathInvalid(5, 1, "x"), "Migration path from 5 to 1 is invalid. x"),
        (
            MigrationFilesDoNotExist(("m",)),
            "Migration files does not exists: ('m',)",
        ),
    ],
)
def test_errors_can_be_raised_and_caught_as_migren_error(err, expected):
    with pytest.raises(MigrenError) as info:
        raise err
    assert info.value is err
    assert str(info.value) == expected