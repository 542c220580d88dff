# migren

A small migration tool for relational databases.

migren keeps your migrations as plain SQL files and records them in a
`.migren.json` file in the migrations directory. Every migration has an *up*
file and a *down* file. This lets you move the database to any migration,
forward or back.

## Installation

```
pip install migren
```

## Configuration

migren reads the database connection string from the `DATABASE_URL`
environment variable. Before it reads the variable, it looks for a `.env` file
in the current directory and its parent directories, and loads the first one
it finds:

```
DATABASE_URL=sqlite:///app.db
```

You can use any URL that SQLAlchemy understands, as long as the matching
driver is installed. `DATABASE_URL` must be set for every command, `new`
included.

## Usage

All commands work on a migrations directory. By default this is the current
working directory. Use `-d` / `--directory` to choose another one. migren
creates the directory if it does not exist yet, then changes into it. All file
names in `.migren.json` are relative to that directory.

Create a new migration:

```
migren new create_users
```

This writes `1_create_users_up.sql` and `1_create_users_down.sql` and records
the migration in `.migren.json`. The file is created on first use. Put your
SQL into both files.

Apply every migration up to the latest one:

```
migren top
```

Move to a specific migration:

```
migren to 0
```

Moving to a higher number runs the up files in order. Moving to a lower number
runs the down files, newest first. Migration `0` is the empty starting state.
A move fails if a migration in the path is missing either of its SQL files.

Show where the migrations file and the database stand:

```
migren status
```

This logs the migrations counter and the version in `.migren.json`. It also
logs the migration the database is at, with that migration's record.

The database keeps its position in a `migren_data` table, which migren
creates when it first connects. All files for one move run inside a single
transaction, together with the update of `migren_data`.

On success `migren` exits with status 0. On a migren error, a file error or
an invalid `.migren.json`, it logs `Program failed: ...` and exits with
status 1.

## Using it from Python

```python
from migren.commands import new, top, to, status

migration = new("create_users")   # returns the new MigrationData
target = top("sqlite:///app.db")  # returns the id moved to
to("sqlite:///app.db", 0)
files_data, db_data = status("sqlite:///app.db")
```

These functions work on the `.migren.json` file in the current working
directory. For lower-level work, see:

- `migren.database.connect(url)`: returns a `Migrator`, which you can use as
  a context manager. It has the methods `migren_data()`, `set_migren_data()`,
  `to()` and `close()`.
- `migren.storage.load_migrations_data(path)` and
  `migren.storage.save_migrations_data(path, data)`.
- `migren.models.MigrationsData`: its `build_migration_path(from_id, to_id)`
  method returns the list of `MigrationToApply` steps between two
  migrations.

Errors are raised as subclasses of `migren.errors.MigrenError`:
`MigrationPathInvalid` and `MigrationFilesDoNotExist`. Database errors are
wrapped in `MigrenError`.

## Limitations

- Each SQL file is passed to the database driver as one call. Some drivers,
  such as Python's `sqlite3`, accept only one statement per call. With those
  drivers, keep one statement per file.
- migren does not check whether migration files have been edited after they
  were applied.