"""Listener bootstrap.

Runs the goodie Server under pounce. Timeouts and connection limits
from ``ServerConfig`` are handed over unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from goodie.app import Server


def run_server(server: Server, host: str, port: int, *, app_path: str | None = None) -> None:
    """Start pounce with the live goodie Server.

    Args:
        server: The goodie ``Server`` (an ASGI callable).
        host: Bind host address.
        port: Bind port number.
        app_path: Optional ``"module:attribute"`` import string, used by
            pounce to reimport the server when reloading in debug mode.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server as PounceServer

    config = server.config
    pounce_config = ServerConfig(
        host=host,
        port=port,
        workers=1 if config.debug else config.workers,
        reload=config.debug,
        request_timeout=config.request_timeout,
        keep_alive_timeout=config.keep_alive_timeout,
        max_connections=config.max_connections,
        log_level=config.log_level,
    )
    PounceServer(pounce_config, server, app_path=app_path).run()
