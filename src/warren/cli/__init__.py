"""Warren CLI — inspect and validate a routes directory.

Entry point registered as ``warren`` in ``pyproject.toml``::

    [project.scripts]
    warren = "warren.cli:main"
"""

import argparse
import logging
import sys


def _add_tree_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("routes_dir", help="Routes directory (e.g. src/app/routes)")
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Extra regex matched against relative paths to skip (repeatable)",
    )
    parser.add_argument(
        "--index",
        default="index",
        metavar="NAME",
        help="File stem that maps to its directory URL (default: index)",
    )
    parser.add_argument("--debug", action="store_true", help="Log each scanned file")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``warren`` command."""
    parser = argparse.ArgumentParser(
        prog="warren",
        description="Warren — file-derived routing for Python REST services.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- warren routes ----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List routes in dispatch order")
    _add_tree_arguments(routes_parser)

    # -- warren check -----------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Validate a routes directory")
    _add_tree_arguments(check_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "routes":
        from warren.cli._routes import run_routes

        run_routes(args)
    elif args.command == "check":
        from warren.cli._check import run_check

        run_check(args)
