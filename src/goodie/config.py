"""Server configuration.

ServerConfig is a frozen dataclass, immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from goodie.errors import ConfigurationError

# Environment variable naming the filesystem root for relative paths
ROOT_ENV = "GOODIE_ROOT"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Server configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ServerConfig(port=3000, favicon="static/favicon.ico")

    Timeouts and connection limits are handed to the listener unmodified.
    """

    # Listener
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    workers: int = 1
    request_timeout: float = 10.0
    keep_alive_timeout: float = 10.0
    max_connections: int = 1000

    # Filesystem root used to resolve relative database and asset paths
    base_dir: Path = field(default_factory=Path.cwd)

    # Served at /favicon.ico when set (resolved against base_dir)
    favicon: str | Path | None = None

    # Logging
    log_level: str = "info"

    def resolve(self, path: str | Path) -> Path:
        """Resolve *path* against ``base_dir`` unless it is already absolute."""
        p = Path(path)
        if p.is_absolute():
            return p
        return Path(self.base_dir) / p

    def load_favicon(self) -> bytes | None:
        """Read the configured favicon, or ``None`` when not configured.

        Raises ``ConfigurationError`` if the file cannot be read, so a bad
        path surfaces at startup rather than on the first request.
        """
        if self.favicon is None:
            return None
        path = self.resolve(self.favicon)
        try:
            return path.read_bytes()
        except OSError as exc:
            msg = f"Cannot read favicon {str(path)!r}: {exc}"
            raise ConfigurationError(msg) from exc

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: object) -> ServerConfig:
        """Build a config from ``GOODIE_*`` environment variables.

        ``GOODIE_ROOT`` sets ``base_dir``; ``GOODIE_HOST``, ``GOODIE_PORT``,
        ``GOODIE_DEBUG`` and ``GOODIE_FAVICON`` override the listener
        defaults. Keyword *overrides* win over the environment.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        if root := env.get(ROOT_ENV):
            values["base_dir"] = Path(root)
        if host := env.get("GOODIE_HOST"):
            values["host"] = host
        if port := env.get("GOODIE_PORT"):
            try:
                values["port"] = int(port)
            except ValueError as exc:
                msg = f"GOODIE_PORT must be an integer, got {port!r}"
                raise ConfigurationError(msg) from exc
        if debug := env.get("GOODIE_DEBUG"):
            values["debug"] = _env_bool(debug)
        if favicon := env.get("GOODIE_FAVICON"):
            values["favicon"] = favicon

        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]
