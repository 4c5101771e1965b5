from __future__ import annotations

import logging
from pathlib import Path

from repositorium.application.services.bundle_service import BundleService
from repositorium.core.errors import ConversionError
from repositorium.core.files import write_bytes_atomic
from repositorium.core.uid import encode_uid
from repositorium.domain.models.resource import Resource, ResourceKind
from repositorium.infrastructure.media.audio_export import generate_ogg_audio
from repositorium.infrastructure.media.image_export import ScaleMode, Size, convert_image

logger = logging.getLogger(__name__)

IMAGE_KINDS = frozenset({ResourceKind.PNG, ResourceKind.JPG, ResourceKind.JPX})


class ExportService:
    def __init__(self, bundle_service: BundleService, ffmpeg_path: str = "ffmpeg") -> None:
        self.bundle_service = bundle_service
        self.ffmpeg_path = ffmpeg_path

    def export_image(
        self,
        resource: Resource,
        destination: Path,
        bounds: Size,
        mode: ScaleMode = ScaleMode.KEEP_WITHIN_BOUNDS,
    ) -> Path:
        if resource.kind not in IMAGE_KINDS:
            raise ConversionError(f"Resource {encode_uid(resource.id)} is not an image ({resource.kind.extension})")
        logger.info("Exporting image %s as %s", resource.label, destination)
        data = self.bundle_service.read_data(resource)
        write_bytes_atomic(destination, convert_image(data, destination.suffix, bounds, mode))
        return destination

    def export_audio(self, resource: Resource, destination: Path) -> Path:
        if resource.kind is not ResourceKind.WAV:
            raise ConversionError(f"Resource {encode_uid(resource.id)} is not audio ({resource.kind.extension})")
        logger.info("Exporting audio %s as %s", resource.label, destination)
        data = self.bundle_service.read_data(resource)
        write_bytes_atomic(destination, generate_ogg_audio(data, self.ffmpeg_path))
        return destination
