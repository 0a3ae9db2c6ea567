"""Goodie CLI: start a server from an import string.

Entry point registered as ``goodie`` in ``pyproject.toml``::

    [project.scripts]
    goodie = "goodie.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``goodie`` command."""
    parser = argparse.ArgumentParser(
        prog="goodie",
        description="Goodie: server-rendered pages with breadcrumbs and reload-safe actions.",
    )
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Start the server")
    run_parser.add_argument(
        "server",
        help="Import string (e.g. myapp:server)",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from goodie.cli._run import run_server

        run_server(args)
