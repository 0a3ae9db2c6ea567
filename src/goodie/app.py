"""The goodie server and its application namespaces.

``Server`` is mutable during setup (applications and page registration)
and frozen at runtime when ``server.run()`` or ``__call__()`` is first
invoked. Each ``App`` groups pages under a ``/<name>`` prefix and may
carry a database handle shared by its pages.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

from goodie._internal.asgi import Receive, Scope, Send
from goodie.config import ServerConfig
from goodie.routing.registry import HandlerFactory, Registration, Registry, page_path
from goodie.server.handler import handle_request

if TYPE_CHECKING:
    from goodie.data.database import Database

logger = logging.getLogger("goodie.server")


class App:
    """A named group of pages served under ``/<name>``.

    Created through ``Server.app()``; not meant to be built directly.

    Usage::

        users = server.app("users", db="sqlite:///users.db")

        @users.page("edit")
        class EditUser(Page):
            ...
    """

    __slots__ = ("_db", "name", "server")

    def __init__(self, server: Server, name: str, db: Database | None = None) -> None:
        self.server = server
        self.name = name
        self._db = db

    @property
    def base_path(self) -> str:
        return "/" + self.name

    @property
    def db(self) -> Database:
        """The database attached to this application.

        Raises ``RuntimeError`` if the application was created without one.
        """
        if self._db is None:
            msg = (
                f"App {self.name!r} has no database configured. "
                "Pass db='sqlite:///app.db' to server.app()."
            )
            raise RuntimeError(msg)
        return self._db

    @property
    def has_db(self) -> bool:
        return self._db is not None

    def register(self, page: str, factory: HandlerFactory) -> str:
        """Register *factory* for ``/<name>/<page>`` and return the path.

        *factory* is called once per request and must return a fresh
        handler each time; a handler class is the usual factory.
        """
        path = page_path(self.name, page)
        self.server.registry.add(Registration(path=path, factory=factory, app=self))
        return path

    def page[F: Callable[..., object]](self, page: str) -> Callable[[F], F]:
        """Decorator form of ``register``.

        Usage::

            @users.page("list")
            class ListUsers(Page):
                ...
        """

        def decorator(factory: F) -> F:
            self.register(page, factory)  # type: ignore[arg-type]
            return factory

        return decorator

    def __repr__(self) -> str:
        return f"App({self.name!r})"


class Server:
    """The goodie server: an ASGI application dispatching to registered pages.

    Thread safety:
        Setup (creating apps, registering pages) is single-threaded.
        The freeze transition uses a Lock + double-check so exactly one
        thread loads the favicon and freezes the registry, even when
        several workers take their first request at once.
    """

    __slots__ = (
        "_apps",
        "_favicon",
        "_freeze_lock",
        "_frozen",
        "config",
        "registry",
    )

    def __init__(self, config: ServerConfig | None = None) -> None:
        self.config: ServerConfig = config or ServerConfig()
        self.registry = Registry()
        self._apps: dict[str, App] = {}
        self._favicon: bytes | None = None
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Applications --

    def app(self, name: str, db: str | Database | None = None) -> App:
        """Create (or return) the application namespace *name*.

        *db* may be a ``Database`` or a connection URL. Relative
        ``sqlite:///`` paths are resolved against ``config.base_dir``.
        """
        self._check_not_frozen()
        if not name:
            msg = "App name must not be empty"
            raise ValueError(msg)
        if "/" in name:
            msg = f"App name must not contain '/': {name!r}"
            raise ValueError(msg)

        database = self._resolve_db(db)
        existing = self._apps.get(name)
        if existing is not None:
            if database is not None:
                existing._db = database
            return existing

        app = App(self, name, database)
        self._apps[name] = app
        return app

    @property
    def apps(self) -> tuple[App, ...]:
        return tuple(self._apps.values())

    def _resolve_db(self, db: str | Database | None) -> Database | None:
        if db is None:
            return None
        from goodie.data.database import Database

        if isinstance(db, Database):
            return db
        return Database(self._resolve_db_url(db), echo=self.config.debug)

    def _resolve_db_url(self, url: str) -> str:
        prefix = "sqlite:///"
        if not url.startswith(prefix):
            return url
        path = url[len(prefix) :]
        if not path or path == ":memory:":
            return url
        return prefix + str(self.config.resolve(path))

    # -- Running --

    def run(self, host: str | None = None, port: int | None = None, *, app_path: str | None = None) -> None:
        """Start the listener.

        Uses ``config.host`` and ``config.port`` unless overridden.
        """
        from goodie.server.dev import run_server

        self._ensure_frozen()
        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            app_path=app_path,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles the lifespan scope directly, then delegates HTTP scopes
        to the request pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()

        await handle_request(
            scope,
            receive,
            send,
            registry=self.registry,
            favicon=self._favicon,
            debug=self.config.debug,
        )

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the server at startup, then connects every attached
        database and signals completion back to the listener.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.connect_databases()
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send(
                        {
                            "type": "lifespan.startup.failed",
                            "message": str(exc),
                        }
                    )
                    return

            elif msg_type == "lifespan.shutdown":
                await self.disconnect_databases()
                await send({"type": "lifespan.shutdown.complete"})
                return

    def databases(self) -> list[Database]:
        """Distinct databases attached to the registered applications."""
        seen: dict[int, Database] = {}
        for app in self._apps.values():
            if app._db is not None:
                seen.setdefault(id(app._db), app._db)
        return list(seen.values())

    async def connect_databases(self) -> None:
        for db in self.databases():
            await db.connect()

    async def disconnect_databases(self) -> None:
        for db in self.databases():
            await db.disconnect()

    # -- Freeze --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the server into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        self._favicon = self.config.load_favicon()
        self.registry.freeze()
        self._frozen = True
        logger.info("Serving %d page(s) from %s", len(self.registry), self.config.base_dir)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the server after it has started serving requests. "
                "Create applications and register pages before calling server.run()."
            )
            raise RuntimeError(msg)
