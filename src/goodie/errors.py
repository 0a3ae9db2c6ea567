"""Goodie exception hierarchy.

Shared across the dispatcher, render engine, binder and data layer so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class GoodieError(Exception):
    """Base for all goodie-specific errors."""


class ConfigurationError(GoodieError):
    """Raised when server or application configuration is invalid."""


@dataclass(frozen=True, slots=True)
class HTTPError(GoodieError):
    """An error that maps directly to a bare HTTP status code.

    Raised from a page lifecycle method, the render engine answers with
    the status and an empty body instead of rendering an error page.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: the page exists but has nothing to show for this request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class ServerError(HTTPError):  # noqa: N818
    """500: the page failed in a way the user should not see details of."""

    def __init__(self, detail: str = "Internal Server Error") -> None:
        super().__init__(status=500, detail=detail)


# -- Query binding --


class BindError(GoodieError):
    """Base for errors raised while binding query parameters to a record."""


class UnsupportedShapeError(BindError):
    """The bind target is not a dataclass instance."""

    def __init__(self, target: object) -> None:
        self.target = target
        super().__init__(f"cannot bind query to {type(target).__name__}: not a dataclass instance")


class UnsupportedFieldError(BindError):
    """A public field has a type outside the supported set."""

    def __init__(self, field: str, annotation: object) -> None:
        self.field = field
        self.annotation = annotation
        name = getattr(annotation, "__name__", None) or repr(annotation)
        super().__init__(f"field {field!r} has unsupported type {name}")


class FieldValueError(BindError):
    """A query value could not be converted to the field's type."""

    def __init__(self, field: str, value: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"field {field!r}: invalid integer value {value!r}")
