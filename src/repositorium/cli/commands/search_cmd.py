from __future__ import annotations

import argparse

from repositorium.application.services.lookup_service import LookupService
from repositorium.cli.commands.common import add_category_argument, resource_table
from repositorium.cli.context import CLIContext
from repositorium.domain.models.resource import SearchCategory


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("search", help="Find resources whose names contain a word")
    parser.add_argument("keywords", nargs="+", help="Words to search for")
    add_category_argument(parser)
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    service = LookupService(ctx.open_catalog())
    results = service.search(args.keywords, SearchCategory(args.category))
    ctx.console.print(resource_table("Search " + " ".join(args.keywords), results))
    return 0 if results else 1
