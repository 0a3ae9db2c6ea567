"""``goodie run``: resolve a Server and start the listener."""

import argparse
import sys

from goodie.cli._resolve import resolve_server


def run_server(args: argparse.Namespace) -> None:
    """Start the server named by ``args.server``.

    ``--host`` and ``--port`` override the server's config.
    """
    try:
        server = resolve_server(args.server)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    server.run(host=args.host, port=args.port, app_path=args.server)
