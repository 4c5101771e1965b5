from __future__ import annotations

import argparse

from repositorium.application.services.lookup_service import LookupService
from repositorium.cli.commands.common import add_category_argument, resource_table
from repositorium.cli.context import CLIContext
from repositorium.domain.models.resource import SearchCategory


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("lookup", help="Find resources by full name")
    parser.add_argument("query", help="Name or sentence to look up")
    add_category_argument(parser)
    parser.add_argument("--partial", action="store_true", help="Fall back to prefix matches")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    service = LookupService(ctx.open_catalog())
    results = service.lookup(args.query, SearchCategory(args.category), allow_partial=args.partial)
    ctx.console.print(resource_table(f"Lookup '{args.query}'", results))
    return 0 if results else 1
