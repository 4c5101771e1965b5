from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console

from repositorium.cli.commands import bundle_cmd, export_cmd, inspect_cmd, list_cmd, lookup_cmd, search_cmd
from repositorium.cli.context import CLIContext
from repositorium.core import rng
from repositorium.core.config import load_config
from repositorium.core.errors import RepositoriumError
from repositorium.core.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repositorium",
        description="Repositorium resource store CLI",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=Path.cwd(),
        help="Project root holding the resources folder (default: current working directory)",
    )
    parser.add_argument(
        "--bundle",
        type=Path,
        default=None,
        help="Open this bundle instead of the resources folder",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)

    subparsers = parser.add_subparsers(dest="command", required=True)
    list_cmd.register(subparsers)
    lookup_cmd.register(subparsers)
    search_cmd.register(subparsers)
    bundle_cmd.register(subparsers)
    inspect_cmd.register(subparsers)
    export_cmd.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()
    rng.seed()

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 2

    try:
        config = load_config(args.project_root)
        ctx = CLIContext(config=config, console=console, bundle=args.bundle)
        return handler(args, ctx)
    except RepositoriumError as exc:
        logger.error(str(exc))
        return 1
    except OSError as exc:
        logger.error("%s: %s", exc.filename or "I/O error", exc.strerror or exc)
        return 1
