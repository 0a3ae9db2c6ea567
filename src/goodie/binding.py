"""Bind query parameters onto dataclass records.

Populates the public fields of a mutable dataclass instance from a
string mapping (``QueryParams``, ``FormData`` or a plain dict)::

    @dataclass
    class Filter:
        name: str = ""
        user_id: int = 0
        parent_id: int | None = None

    f = bind_query(Filter(), request.query)   # ?name=Bob&user_id=7

Key matching: for each field the lower-cased name is tried first, then
the lower snake-case form (``UserId`` -> ``userid``, then ``user_id``).
The first non-empty value wins. Fields with no matching key keep their
current value.

Supported field types form a closed set: ``str``, ``int`` (base-10,
signed 64-bit) and ``int | None``. Any other public field type fails
the whole bind with ``UnsupportedFieldError`` before a single field is
written. Nested dataclasses and collections are never bound.
"""

import dataclasses
import re
import types
from collections.abc import Callable, Mapping
from functools import cache
from typing import Any, Union, get_args, get_origin, get_type_hints

from goodie.errors import FieldValueError, UnsupportedFieldError, UnsupportedShapeError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INTEGER = re.compile(r"[+-]?[0-9]+")


def to_snake(name: str) -> str:
    """Lower snake-case: ``MyField`` -> ``my_field``.

    An underscore goes before every uppercase letter except the first
    character, then everything is lower-cased.
    """
    out: list[str] = []
    for i, ch in enumerate(name):
        if i > 0 and ch.isupper():
            out.append("_")
        out.append(ch.lower())
    return "".join(out)


def candidate_keys(name: str) -> tuple[str, ...]:
    """Query keys tried for field *name*, in lookup order."""
    lower = name.lower()
    snake = to_snake(name)
    return (lower,) if snake == lower else (lower, snake)


# -- Field kinds --


def _convert_text(field: str, value: str) -> str:
    return value


def _convert_int(field: str, value: str) -> int:
    if not _INTEGER.fullmatch(value):
        raise FieldValueError(field, value)
    number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        raise FieldValueError(field, value)
    return number


def _convert_nullable_int(field: str, value: str) -> int | None:
    return _convert_int(field, value)


def _field_converter(annotation: Any) -> Callable[[str, str], Any] | None:
    """Return the converter for a supported annotation, else ``None``."""
    if annotation is str:
        return _convert_text
    if annotation is int:
        return _convert_int
    if get_origin(annotation) in (Union, types.UnionType):
        args = set(get_args(annotation))
        if args == {int, type(None)}:
            return _convert_nullable_int
    return None


@dataclasses.dataclass(frozen=True, slots=True)
class _FieldPlan:
    name: str
    keys: tuple[str, ...]
    convert: Callable[[str, str], Any]


@cache
def _plan(cls: type) -> tuple[_FieldPlan, ...]:
    hints = get_type_hints(cls)
    plan: list[_FieldPlan] = []
    for f in dataclasses.fields(cls):
        if f.name.startswith("_"):
            continue
        annotation = hints.get(f.name, f.type)
        convert = _field_converter(annotation)
        if convert is None:
            raise UnsupportedFieldError(f.name, annotation)
        plan.append(_FieldPlan(f.name, candidate_keys(f.name), convert))
    return tuple(plan)


def _lookup(data: Mapping[str, str], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return None


def bind_query[T](record: T, data: Mapping[str, str]) -> T:
    """Populate *record*'s public fields from *data* and return it.

    Raises:
        TypeError: *record* is a class, ``None`` or a frozen dataclass;
            it must be an instance that can be written in place.
        UnsupportedShapeError: *record* is not a dataclass instance.
        UnsupportedFieldError: a public field has an unsupported type.
        FieldValueError: an integer field received a non-integer value.
    """
    if record is None or isinstance(record, type):
        msg = f"bind_query() needs a dataclass instance, got {record!r}"
        raise TypeError(msg)
    if not dataclasses.is_dataclass(record):
        raise UnsupportedShapeError(record)
    cls = type(record)
    if cls.__dataclass_params__.frozen:  # type: ignore[attr-defined]
        msg = f"bind_query() cannot write to frozen dataclass {cls.__name__}"
        raise TypeError(msg)

    values: dict[str, Any] = {}
    for field in _plan(cls):
        raw = _lookup(data, field.keys)
        if raw is not None:
            values[field.name] = field.convert(field.name, raw)

    for name, value in values.items():
        setattr(record, name, value)
    return record
