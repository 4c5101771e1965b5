from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from repositorium.application.services.resource_loader import ResourceLoader, split_filename
from repositorium.core import rng
from repositorium.core.config import AppConfig, DEFAULT_AUDIO_MARKERS, DEFAULT_METADATA_SUFFIX, DEFAULT_UID_PROBE_LIMIT
from repositorium.core.errors import QueryEncodingError, UidAllocationError
from repositorium.core.text import is_normalized, normalize
from repositorium.core.uid import derive_uid, encode_uid
from repositorium.domain.models.catalog import Catalog
from repositorium.domain.models.resource import Resource, ResourceKind

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LoadReport:
    loaded: int = 0
    skipped: int = 0
    hidden: int = 0
    duplicates: int = 0


class DirectoryLoader:
    def __init__(
        self,
        catalog: Catalog,
        *,
        metadata_suffix: str = DEFAULT_METADATA_SUFFIX,
        audio_markers: tuple[str, ...] = DEFAULT_AUDIO_MARKERS,
        stable_ids: bool = False,
        uid_probe_limit: int = DEFAULT_UID_PROBE_LIMIT,
    ) -> None:
        self.catalog = catalog
        self.metadata_suffix = metadata_suffix
        self.audio_markers = audio_markers
        self.stable_ids = stable_ids
        self.uid_probe_limit = uid_probe_limit
        self.resource_loader = ResourceLoader(metadata_suffix=metadata_suffix, audio_markers=audio_markers)
        self.last_report = LoadReport()

    @classmethod
    def from_config(cls, catalog: Catalog, config: AppConfig) -> DirectoryLoader:
        return cls(
            catalog,
            metadata_suffix=config.metadata_suffix,
            audio_markers=config.audio_markers,
            stable_ids=config.stable_ids,
            uid_probe_limit=config.uid_probe_limit,
        )

    def load_directory(self, folder: Path) -> bool:
        """Catalogue every usable file in ``folder``.

        Returns False when the folder cannot be listed at all, which is the
        normal state before any resources exist. Every other failure raises.
        """
        try:
            with os.scandir(folder) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as exc:
            logger.warning("Failed opening resource directory %s: %s", folder, exc)
            return False

        self.catalog.folder = folder
        report = LoadReport()
        self.last_report = report

        for entry in entries:
            if not entry.is_file():
                continue
            info = split_filename(entry.name, self.audio_markers)
            if info.kind is ResourceKind.UNKNOWN:
                report.skipped += 1
                continue

            try:
                entry.name.encode("utf-8")
            except UnicodeEncodeError as exc:
                raise QueryEncodingError(f"Resource filename is not valid UTF-8: {entry.name!r}") from exc
            if not is_normalized(entry.name):
                logger.warning(
                    "Resource file '%s' is not NFC. mv \"%s\" \"%s\"",
                    entry.name,
                    entry.name,
                    normalize(entry.name),
                )

            path = Path(folder) / entry.name
            resource = self.resource_loader.load(path, info.name, info.kind)
            if not resource.visible:
                logger.debug("Skipping hidden resource %s", path)
                report.hidden += 1
                continue
            if resource.id == 0:
                resource.id = self.allocate_uid(resource, Path(folder))

            if self.catalog.index_resource(resource, origin=str(path)):
                report.loaded += 1
            else:
                report.duplicates += 1

        logger.info(
            "Loaded %d resources from %s (%d skipped, %d hidden, %d duplicates)",
            report.loaded,
            folder,
            report.skipped,
            report.hidden,
            report.duplicates,
        )
        return True

    def allocate_uid(self, resource: Resource, folder: Path) -> int:
        """Pick an id that no metadata file in ``folder`` already claims."""
        candidate: int | None = None
        if self.stable_ids and resource.source_path is not None:
            try:
                size = resource.source_path.stat().st_size
            except OSError as exc:
                raise UidAllocationError(f"Failed reading size of {resource.source_path}: {exc}") from exc
            candidate = derive_uid(resource.label, size)

        for attempt in range(self.uid_probe_limit):
            uid = candidate if candidate is not None else rng.random_u64()
            candidate = None
            if uid == 0 or uid in self.catalog.by_id:
                logger.warning("uid generator produced an unusable uid, retry %d", attempt + 1)
                continue
            stub = folder / f"{encode_uid(uid)}{self.metadata_suffix}"
            try:
                stub.stat()
            except FileNotFoundError:
                return uid
            except OSError as exc:
                raise UidAllocationError(f"Failed probing {stub}: {exc}") from exc
            logger.warning("uid generator produced a uid already used in %s, retry %d", folder, attempt + 1)

        raise UidAllocationError(
            f"No unused uid found in {folder} after {self.uid_probe_limit} attempts"
        )
