"""Typed async database access for goodie.

SQL in, dataclasses out. Not an ORM.

Basic usage::

    from goodie.data import Database, crud

    db = Database("sqlite:///app.db")
    note = await crud.get(db, Note, 42)

PostgreSQL needs ``asyncpg``::

    pip install goodie[pg]
"""

from goodie.data import crud
from goodie.data.database import Database
from goodie.data.errors import (
    DataError,
    DriverNotInstalledError,
    QueryError,
    RecordNotFoundError,
    RowCountError,
)

__all__ = [
    "DataError",
    "Database",
    "DriverNotInstalledError",
    "QueryError",
    "RecordNotFoundError",
    "RowCountError",
    "crud",
]
