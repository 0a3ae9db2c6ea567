"""Query string parameters.

Pair order is kept so a ``Location`` built from the request reproduces
the query exactly as the client sent it.
"""

from urllib.parse import parse_qsl

from goodie._internal.multimap import PairMap


class QueryParams(PairMap):
    """Decoded query string. Pairs with an empty key are dropped."""

    __slots__ = ("_raw",)

    def __init__(self, query_string: bytes = b"") -> None:
        pairs = parse_qsl(query_string.decode("latin-1"), keep_blank_values=True)
        super().__init__((key, value) for key, value in pairs if key)
        self._raw = query_string

    @property
    def raw(self) -> bytes:
        """The query string exactly as received."""
        return self._raw
