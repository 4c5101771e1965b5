from __future__ import annotations

import argparse
from pathlib import Path

from repositorium.application.services.bundle_service import BundleService
from repositorium.application.services.export_service import ExportService
from repositorium.application.services.lookup_service import LookupService
from repositorium.cli.context import CLIContext
from repositorium.domain.models.resource import SearchCategory
from repositorium.infrastructure.media.image_export import ScaleMode, Size


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    image = subparsers.add_parser("export-image", help="Export an image resource resized to bounds")
    image.add_argument("query", help="Name of the image resource")
    image.add_argument("destination", type=Path, help="Output .jpg or .png file")
    image.add_argument("--width", type=float, default=1024)
    image.add_argument("--height", type=float, default=1024)
    image.add_argument(
        "--mode",
        choices=[mode.value for mode in ScaleMode],
        default=ScaleMode.KEEP_WITHIN_BOUNDS.value,
    )
    image.set_defaults(handler=run_image)

    audio = subparsers.add_parser("export-audio", help="Export an audio resource as Ogg Vorbis")
    audio.add_argument("query", help="Name of the audio resource")
    audio.add_argument("destination", type=Path, help="Output .ogg file")
    audio.set_defaults(handler=run_audio)


def _services(ctx: CLIContext) -> tuple[LookupService, ExportService]:
    catalog = ctx.open_catalog()
    return LookupService(catalog), ExportService(BundleService(catalog), ffmpeg_path=ctx.config.ffmpeg_path)


def run_image(args: argparse.Namespace, ctx: CLIContext) -> int:
    lookup, exporter = _services(ctx)
    resource = lookup.lookup_one(args.query, SearchCategory.ANY)
    if resource is None:
        ctx.console.print(f"[red]Not found[/red] {args.query}")
        return 1
    out = exporter.export_image(
        resource,
        args.destination,
        Size(width=args.width, height=args.height),
        ScaleMode(args.mode),
    )
    ctx.console.print(f"[green]Exported[/green] {out}")
    return 0


def run_audio(args: argparse.Namespace, ctx: CLIContext) -> int:
    lookup, exporter = _services(ctx)
    resource = lookup.lookup_one(args.query, SearchCategory.AUDIO)
    if resource is None:
        ctx.console.print(f"[red]Not found[/red] {args.query}")
        return 1
    out = exporter.export_audio(resource, args.destination)
    ctx.console.print(f"[green]Exported[/green] {out}")
    return 0
