"""Small migration tool for relational databases: SQL up/down files tracked in .migren.json."""

__version__ = "0.1.1"