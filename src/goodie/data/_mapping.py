"""Row-to-dataclass mapping.

Database drivers hand back loosely typed values (SQLite stores whatever
it is given). Fields annotated ``int``, ``str``, ``float`` or ``bool``,
optionally ``| None``, are coerced to the annotated type; anything else
is passed through unchanged.
"""

import dataclasses
import types
from functools import cache
from typing import Any, get_args, get_origin, get_type_hints

_COERCIBLE: dict[type, Any] = {
    int: lambda v: int(v) if v != "" else 0,
    float: lambda v: float(v) if v != "" else 0.0,
    bool: lambda v: bool(int(v)) if isinstance(v, str) else bool(v),
    str: str,
}


@cache
def _coercion_map(cls: type) -> dict[str, type | None]:
    """``{field_name: target_type}``; ``None`` means pass through."""
    hints = get_type_hints(cls)
    result: dict[str, type | None] = {}
    for f in dataclasses.fields(cls):
        annotation = hints.get(f.name, f.type)
        if get_origin(annotation) is types.UnionType:
            args = [a for a in get_args(annotation) if a is not type(None)]
            annotation = args[0] if len(args) == 1 else None
        result[f.name] = annotation if annotation in _COERCIBLE else None
    return result


def _coerce(value: Any, target: type | None) -> Any:
    if target is None or value is None or isinstance(value, target):
        return value
    return _COERCIBLE[target](value)


def _require_dataclass(cls: type) -> None:
    if not dataclasses.is_dataclass(cls):
        msg = f"{cls.__name__} is not a dataclass; goodie.data maps rows to dataclasses"
        raise TypeError(msg)


def map_row[T](cls: type[T], row: dict[str, Any]) -> T:
    """Build a *cls* instance from a dict-like row.

    Columns without a matching field are ignored, so ``SELECT *`` works
    against a narrower dataclass. Raises ``TypeError`` when a required
    field has no column.
    """
    _require_dataclass(cls)
    coercion = _coercion_map(cls)
    return cls(**{k: _coerce(v, coercion[k]) for k, v in row.items() if k in coercion})


def map_rows[T](cls: type[T], rows: list[dict[str, Any]]) -> list[T]:
    _require_dataclass(cls)
    coercion = _coercion_map(cls)
    return [
        cls(**{k: _coerce(v, coercion[k]) for k, v in row.items() if k in coercion})
        for row in rows
    ]
