"""Page registry with exact-match lookup.

Registrations are added during setup and frozen when the server starts
serving. After freezing the table is only read, so concurrent requests
need no locking.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from goodie.app import App
    from goodie.page import Handler

logger = logging.getLogger("goodie.routing")

# Zero-argument callable returning a fresh handler per request
type HandlerFactory = Callable[[], Handler]


def page_path(app_name: str, page: str) -> str:
    """Normalize an application-scoped page into an absolute path.

    ``("users", "edit")`` -> ``/users/edit``; ``("users", "/edit")`` ->
    ``/users/edit``; ``("users", "")`` -> ``/users``.
    """
    if page and not page.startswith("/"):
        page = "/" + page
    return "/" + app_name + page


@dataclass(frozen=True, slots=True)
class Registration:
    """A registered page: where it lives and how to build its handler."""

    path: str
    factory: HandlerFactory
    app: App


class Registry:
    """Path -> Registration table.

    Usage::

        registry = Registry()
        registry.add(Registration("/users/edit", EditUser, app))
        registry.freeze()
        registry.lookup("/users/edit")
    """

    __slots__ = ("_entries", "_frozen")

    def __init__(self) -> None:
        self._entries: dict[str, Registration] = {}
        self._frozen = False

    def add(self, registration: Registration) -> None:
        """Add or replace the registration for ``registration.path``.

        The last registration for a path wins.
        """
        if self._frozen:
            msg = (
                "Cannot register pages after the server has started serving requests. "
                "Register every page before calling server.run()."
            )
            raise RuntimeError(msg)
        if registration.path in self._entries:
            logger.debug("Replacing registration for %s", registration.path)
        logger.info("Register: %s", registration.path)
        self._entries[registration.path] = registration

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, path: str) -> Registration | None:
        """Exact match on the request path; ``None`` on a miss."""
        return self._entries.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __iter__(self) -> Iterator[Registration]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
