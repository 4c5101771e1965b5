from __future__ import annotations

import argparse
from pathlib import Path

from rich.table import Table

from repositorium.application.services.bundle_service import BundleService
from repositorium.application.services.lookup_service import LookupService
from repositorium.cli.commands.common import add_category_argument
from repositorium.cli.context import CLIContext
from repositorium.core.uid import encode_uid
from repositorium.domain.models.resource import SearchCategory


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("bundle", help="Write the resources named by each query into one bundle")
    parser.add_argument("output", type=Path, help="Bundle file to write")
    parser.add_argument("queries", nargs="+", help="Names of the resources to include")
    add_category_argument(parser)
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    catalog = ctx.open_catalog()
    catalog.track_usage()
    lookup = LookupService(catalog)
    bundles = BundleService(catalog)
    category = SearchCategory(args.category)

    exit_code = 0
    for query in args.queries:
        resource = lookup.lookup_one(query, category)
        if resource is None:
            ctx.console.print(f"[red]Not found[/red] {query}")
            exit_code = 1
            continue
        bundles.read_data(resource)

    report = bundles.save_bundle(args.output, list(catalog.used_resources or []))

    table = Table(title=f"Bundle {args.output}")
    table.add_column("UID")
    table.add_column("Type")
    table.add_column("Name", overflow="fold")
    table.add_column("Offset")
    table.add_column("Size")
    for entry in report.entries:
        table.add_row(encode_uid(entry.uid), str(entry.kind), entry.names[0], str(entry.offset), str(entry.size))
    ctx.console.print(table)
    if report.skipped:
        ctx.console.print(f"[yellow]Skipped {len(report.skipped)} resources without a source file or names[/yellow]")
    ctx.console.print(f"[green]Bundle written[/green] {args.output} ({report.total_size} bytes)")
    return exit_code
