from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from repositorium.core import rng
from repositorium.core.errors import (
    BundleWriteError,
    InvalidBundleFileError,
    ResourceHasNoLocationError,
    TruncatedBundleError,
)
from repositorium.core.files import ensure_directory, read_bytes, temp_path_for
from repositorium.core.uid import encode_uid
from repositorium.domain.models.catalog import Catalog
from repositorium.domain.models.resource import Resource, ResourceKind
from repositorium.infrastructure.bundle.codec import (
    MAX_NAMES,
    MAX_PAYLOAD_SIZE,
    TocEntry,
    assign_offsets,
    decode_toc,
    encode_toc,
)

logger = logging.getLogger(__name__)

_COPY_CHUNK_SIZE = 1024 * 1024


@dataclass(slots=True)
class BundleWriteReport:
    path: Path
    entries: list[TocEntry] = field(default_factory=list)
    skipped: list[Resource] = field(default_factory=list)
    total_size: int = 0


class BundleService:
    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog

    def save_bundle(self, path: Path, manifest: list[Resource]) -> BundleWriteReport:
        """Write every on-disk resource in ``manifest`` into one bundle file."""
        report = BundleWriteReport(path=path)
        included: list[tuple[Path, TocEntry]] = []
        seen: set[int] = set()

        for resource in manifest:
            if resource.source_path is None:
                logger.error(
                    "Resource %s has no source file; it probably lives in a bundle",
                    encode_uid(resource.id),
                )
                report.skipped.append(resource)
                continue
            if not resource.names:
                logger.error("Resource has no names: %s %s", resource.source_path, resource.kind.extension)
                report.skipped.append(resource)
                continue
            if resource.id in seen:
                logger.warning("Resource %s listed twice in manifest", encode_uid(resource.id))
                continue
            seen.add(resource.id)

            size = resource.source_path.stat().st_size
            if size > MAX_PAYLOAD_SIZE:
                logger.error("File too large to bundle: %s", resource.source_path)
            names = resource.names
            if len(names) > MAX_NAMES:
                logger.warning("Resource %s has %d names, keeping %d", resource.source_path, len(names), MAX_NAMES)
                names = names[:MAX_NAMES]
            entry = TocEntry(kind=int(resource.kind), uid=resource.id, size=size, names=list(names))
            included.append((resource.source_path, entry))

        entries = [entry for _, entry in included]
        report.total_size = assign_offsets(entries)
        header = encode_toc(entries, rng.random(230) + 10)

        ensure_directory(path.parent)
        temp_path = temp_path_for(path)
        try:
            with temp_path.open("wb") as out:
                out.write(header)
                for source_path, entry in included:
                    _copy_payload(source_path, entry, out)
            os.replace(temp_path, path)
        finally:
            if temp_path.exists():
                temp_path.unlink()

        report.entries = entries
        logger.info("Wrote %d resources to bundle %s (%d bytes)", len(entries), path, report.total_size)
        return report

    def load_bundle(self, path: Path) -> int:
        """Read a bundle's table of contents into the catalog. Payloads stay on disk."""
        with path.open("rb") as f:
            entries = decode_toc(f)

        loaded = 0
        for entry in entries:
            try:
                kind = ResourceKind(entry.kind)
            except ValueError as exc:
                raise InvalidBundleFileError(f"Bundle entry {entry.uid} has unknown kind {entry.kind}") from exc
            if kind is ResourceKind.UNKNOWN or entry.uid == 0:
                raise InvalidBundleFileError(f"Bundle entry {entry.uid} is not a valid resource")
            resource = Resource(id=entry.uid, kind=kind, bundle_offset=entry.offset, size=entry.size)
            for name in entry.names:
                resource.add_name(name)
            if self.catalog.index_resource(resource, origin=str(path)):
                loaded += 1

        self.catalog.bundle_path = path
        logger.info("Loaded %d resources from bundle %s", loaded, path)
        return loaded

    @staticmethod
    def inspect(path: Path) -> list[TocEntry]:
        with path.open("rb") as f:
            return decode_toc(f)

    def read_data(self, resource: Resource) -> bytes:
        """Return the payload bytes of ``resource`` from its file or its bundle."""
        self.catalog.record_use(resource)
        if resource.source_path is not None:
            data = read_bytes(resource.source_path)
            resource.size = len(data)
            return data
        if resource.bundle_offset is not None:
            if self.catalog.bundle_path is None:
                raise ResourceHasNoLocationError(
                    f"Resource {encode_uid(resource.id)} has a bundle offset but no bundle is open"
                )
            return read_slice(self.catalog.bundle_path, resource.bundle_offset, resource.size)
        raise ResourceHasNoLocationError(f"Resource {encode_uid(resource.id)} has no file or bundle location")


def read_slice(path: Path, offset: int, size: int) -> bytes:
    with path.open("rb") as f:
        available = os.fstat(f.fileno()).st_size
        if available < offset + size:
            raise TruncatedBundleError(
                f"Bundle {path} is too short to extract {size} bytes at offset {offset}"
            )
        f.seek(offset)
        data = f.read(size)
    if len(data) != size:
        raise TruncatedBundleError(f"Bundle {path} returned {len(data)} of {size} bytes at offset {offset}")
    return data


def _copy_payload(source_path: Path, entry: TocEntry, out: BinaryIO) -> None:
    written = 0
    with source_path.open("rb") as src:
        for chunk in iter(lambda: src.read(_COPY_CHUNK_SIZE), b""):
            written += len(chunk)
            out.write(chunk)
    if written != entry.size:
        raise BundleWriteError(f"{source_path} changed size while bundling ({entry.size} -> {written} bytes)")
