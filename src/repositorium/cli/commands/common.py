from __future__ import annotations

import argparse

from rich.table import Table

from repositorium.core.uid import encode_uid
from repositorium.domain.models.resource import Resource, SearchCategory


def add_category_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--category",
        choices=[category.value for category in SearchCategory],
        default=SearchCategory.ANY.value,
        help="Restrict matches to a resource category (default: any)",
    )


def resource_table(title: str, resources: list[Resource]) -> Table:
    table = Table(title=f"{title} ({len(resources)})")
    table.add_column("UID")
    table.add_column("Type")
    table.add_column("Names", overflow="fold")
    table.add_column("Location", overflow="fold")
    table.add_column("Size")

    for r in resources:
        if r.source_path is not None:
            location = str(r.source_path)
        elif r.bundle_offset is not None:
            location = f"bundle@{r.bundle_offset}"
        else:
            location = "-"
        table.add_row(encode_uid(r.id), r.kind.extension, " | ".join(r.names), location, str(r.size))
    return table
