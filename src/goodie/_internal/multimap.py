"""Read-only multi-value string mapping shared by the HTTP containers."""

from collections.abc import Iterable, Iterator, Mapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class MultiValueMapping(Protocol):
    """Headers, query strings and form bodies all allow repeated keys.

    Plain indexing picks the first value and ``get_list`` returns every
    value in the order received.
    """

    def __getitem__(self, key: str) -> str: ...
    def __contains__(self, key: object) -> bool: ...
    def __iter__(self) -> Iterator[str]: ...
    def __len__(self) -> int: ...
    def get(self, key: str, default: str | None = None) -> str | None: ...
    def get_list(self, key: str) -> list[str]: ...


class PairMap(Mapping[str, str]):
    """``MultiValueMapping`` over ``(key, value)`` pairs kept in arrival order."""

    __slots__ = ("_index", "_pairs")

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        self._pairs = tuple(pairs)
        self._index: dict[str, list[str]] = {}
        for key, value in self._pairs:
            self._index.setdefault(key, []).append(value)

    def __getitem__(self, key: str) -> str:
        return self._index[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._pairs)!r})"

    def get_list(self, key: str) -> list[str]:
        return list(self._index.get(key, ()))

    def items_list(self) -> list[tuple[str, str]]:
        """Every pair, repeated keys included, in arrival order."""
        return list(self._pairs)
