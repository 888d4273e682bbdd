"""Termfolio CLI: run the site server.

Entry point registered as ``termfolio`` in ``pyproject.toml``::

    [project.scripts]
    termfolio = "termfolio.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``termfolio`` command."""
    parser = argparse.ArgumentParser(
        prog="termfolio",
        description="Termfolio: static files and a small JSON API for a portfolio site.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- termfolio serve --------------------------------------------------
    serve_parser = subparsers.add_parser("serve", help="Start the site server")
    serve_parser.add_argument(
        "--root",
        default=None,
        help="Deployment directory holding the site files and JSON state",
    )
    serve_parser.add_argument("--host", default=None, help="Bind host address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    serve_parser.add_argument(
        "--debug",
        action="store_true",
        help="Development mode with auto-reload",
    )
    serve_parser.add_argument(
        "--log-level",
        default="info",
        choices=("debug", "info", "warning", "error", "critical"),
        help="Logging verbosity (default: info)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from termfolio.cli._serve import serve

        serve(args)
