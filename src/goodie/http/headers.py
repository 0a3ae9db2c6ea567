"""Request headers from the ASGI scope.

Names are case-insensitive. Values are decoded as latin-1 once, when the
mapping is built, and kept in arrival order per name.
"""

from collections.abc import Iterable, Iterator, Mapping


def _group(raw: Iterable[tuple[bytes, bytes]]) -> dict[str, tuple[str, ...]]:
    grouped: dict[str, list[str]] = {}
    for name, value in raw:
        grouped.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))
    return {name: tuple(values) for name, values in grouped.items()}


class Headers(Mapping[str, str]):
    """Read-only, case-insensitive view of the request's header pairs.

    Indexing gives the first value sent under a name; ``get_list`` gives
    all of them. Iteration yields lower-cased names in arrival order.
    """

    __slots__ = ("_values",)

    def __init__(self, raw: Iterable[tuple[bytes, bytes]] = ()) -> None:
        self._values = _group(raw)

    def __getitem__(self, key: str) -> str:
        values = self._values.get(key.lower())
        if not values:
            raise KeyError(key)
        return values[0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        first = {name: values[0] for name, values in self._values.items()}
        return f"Headers({first!r})"

    def get_list(self, key: str) -> list[str]:
        return list(self._values.get(key.lower(), ()))
