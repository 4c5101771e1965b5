from __future__ import annotations

import argparse

from repositorium.cli.commands.common import add_category_argument, resource_table
from repositorium.cli.context import CLIContext
from repositorium.domain.models.resource import SearchCategory


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("list", help="List catalogued resources")
    add_category_argument(parser)
    parser.add_argument("--limit", type=int, default=50)
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    catalog = ctx.open_catalog()
    category = SearchCategory(args.category)
    resources = [r for r in catalog if category.matches(r.kind)][: args.limit]
    ctx.console.print(resource_table("Resources", resources))
    return 0
