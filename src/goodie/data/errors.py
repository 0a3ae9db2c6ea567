"""Data layer error hierarchy."""

from goodie.errors import GoodieError


class DataError(GoodieError):
    """Base for all goodie.data errors."""


class DriverNotInstalledError(DataError):
    """Raised when the required database driver is not installed."""


class QueryError(DataError):
    """Raised when a SQL statement fails."""


class RecordNotFoundError(DataError):
    """Raised when a lookup by id matches no row."""

    def __init__(self, record_id: object) -> None:
        self.record_id = record_id
        super().__init__(f"no record found for id {record_id}")


class RowCountError(DataError):
    """Raised when a write by id does not touch exactly one row."""

    def __init__(self, verb: str, count: int) -> None:
        self.verb = verb
        self.count = count
        super().__init__(f"expected 1 row {verb}, got {count}")
