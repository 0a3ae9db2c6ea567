"""Record-level helpers over ``Database``.

Records are dataclasses with an integer ``id`` primary key. Every other
public field maps to a column of the same name. The table defaults to
the snake_case class name (``UserAccount`` -> ``user_account``).

Usage::

    @dataclass(slots=True)
    class Note:
        id: int = 0
        title: str = ""

    note = Note(title="hello")
    await crud.insert(db, note)          # note.id is now set
    note.title = "bye"
    await crud.update(db, note)
    notes = await crud.find_by_order(db, Note, "-id")
    await crud.delete(db, Note, note.id)
"""

import dataclasses
import re
from typing import Any

from goodie.binding import to_snake
from goodie.data.database import Database
from goodie.data.errors import DataError, RecordNotFoundError, RowCountError

ID_COLUMN = "id"

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def table_name(cls: type) -> str:
    return to_snake(cls.__name__)


def _table(cls: type, table: str | None) -> str:
    name = table or table_name(cls)
    if not _IDENTIFIER.fullmatch(name):
        msg = f"invalid table name {name!r}"
        raise DataError(msg)
    return name


def _columns(cls: type) -> list[str]:
    if not dataclasses.is_dataclass(cls):
        msg = f"{cls.__name__} is not a dataclass"
        raise TypeError(msg)
    names = [f.name for f in dataclasses.fields(cls) if not f.name.startswith("_")]
    if ID_COLUMN not in names:
        msg = f"{cls.__name__} has no {ID_COLUMN!r} field"
        raise TypeError(msg)
    return names


def _values(record: Any, columns: list[str]) -> list[Any]:
    return [getattr(record, name) for name in columns]


async def insert(db: Database, record: Any, table: str | None = None) -> int:
    """Insert every field except ``id`` and return the new id.

    Mutable records get their ``id`` set; frozen ones are left alone.
    """
    cls = type(record)
    columns = [c for c in _columns(cls) if c != ID_COLUMN]
    marks = ", ".join(db.placeholder(i) for i in range(1, len(columns) + 1))
    sql = f"INSERT INTO {_table(cls, table)} ({', '.join(columns)}) VALUES ({marks})"
    new_id = await db.execute_insert(sql, *_values(record, columns), id_column=ID_COLUMN)
    if not cls.__dataclass_params__.frozen:
        setattr(record, ID_COLUMN, new_id)
    return new_id


async def get[T](db: Database, cls: type[T], record_id: int, table: str | None = None) -> T:
    """Load the record with *record_id*; ``RecordNotFoundError`` if absent."""
    _columns(cls)
    sql = f"SELECT * FROM {_table(cls, table)} WHERE {ID_COLUMN} = {db.placeholder(1)}"
    record = await db.fetch_one(cls, sql, record_id)
    if record is None:
        raise RecordNotFoundError(record_id)
    return record


async def update(db: Database, record: Any, table: str | None = None) -> None:
    """Write every field of *record* back to the row with its ``id``."""
    cls = type(record)
    columns = [c for c in _columns(cls) if c != ID_COLUMN]
    assignments = ", ".join(
        f"{name} = {db.placeholder(i)}" for i, name in enumerate(columns, start=1)
    )
    where = f"{ID_COLUMN} = {db.placeholder(len(columns) + 1)}"
    sql = f"UPDATE {_table(cls, table)} SET {assignments} WHERE {where}"
    count = await db.execute(sql, *_values(record, columns), getattr(record, ID_COLUMN))
    if count != 1:
        raise RowCountError("updated", count)


async def delete(db: Database, cls: type, record_id: int, table: str | None = None) -> None:
    """Delete the row with *record_id*; exactly one row must go."""
    _columns(cls)
    sql = f"DELETE FROM {_table(cls, table)} WHERE {ID_COLUMN} = {db.placeholder(1)}"
    count = await db.execute(sql, record_id)
    if count != 1:
        raise RowCountError("deleted", count)


async def find_by_order[T](
    db: Database, cls: type[T], order_by: str, table: str | None = None
) -> list[T]:
    """All rows of *cls* ordered by the field *order_by*.

    A leading ``-`` sorts descending. Only field names are accepted so
    the column can be interpolated safely.
    """
    columns = _columns(cls)
    column, direction = (order_by[1:], "DESC") if order_by.startswith("-") else (order_by, "ASC")
    if column not in columns:
        msg = f"cannot order {cls.__name__} by {order_by!r}: not a field"
        raise DataError(msg)
    sql = f"SELECT * FROM {_table(cls, table)} ORDER BY {column} {direction}"
    return await db.fetch(cls, sql)
