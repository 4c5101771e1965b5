from __future__ import annotations

import argparse
from pathlib import Path

from rich.table import Table

from repositorium.application.services.bundle_service import BundleService
from repositorium.cli.context import CLIContext
from repositorium.core.uid import encode_uid
from repositorium.domain.models.resource import ResourceKind


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("inspect", help="Show the table of contents of a bundle")
    parser.add_argument("path", type=Path, help="Bundle file to read")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    entries = BundleService.inspect(args.path)

    table = Table(title=f"Bundle {args.path} ({len(entries)})")
    table.add_column("UID")
    table.add_column("Type")
    table.add_column("Names", overflow="fold")
    table.add_column("Offset")
    table.add_column("Size")
    for entry in entries:
        try:
            kind = ResourceKind(entry.kind).extension
        except ValueError:
            kind = f"?{entry.kind}"
        table.add_row(encode_uid(entry.uid), kind, " | ".join(entry.names), str(entry.offset), str(entry.size))

    ctx.console.print(table)
    return 0
