from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from repositorium.core.config import DEFAULT_AUDIO_MARKERS, DEFAULT_METADATA_SUFFIX
from repositorium.core.errors import InvalidUidError, MetadataMissingError, MetadataReadError
from repositorium.core.files import read_bytes, write_bytes_atomic
from repositorium.core.text import is_normalized, normalize
from repositorium.core.uid import MAX_UID_LENGTH, decode_uid
from repositorium.domain.models.resource import Resource, ResourceKind
from repositorium.infrastructure.metadata.settings import apply_metadata

logger = logging.getLogger(__name__)

MAX_EXTENSION_LENGTH = 6
AUDIO_MARKER_SEPARATOR = "~"

_TRAILING_DIGITS_RE = re.compile(r"\d+$")


@dataclass(frozen=True, slots=True)
class FileInfo:
    name: str
    kind: ResourceKind


def read_extension(filename: str) -> str:
    """Return the extension after the last dot, or "" when it is missing or too long."""
    dot = filename.rfind(".")
    if dot < 0:
        return ""
    ext = filename[dot + 1 :]
    if len(ext) > MAX_EXTENSION_LENGTH or "/" in ext or "\\" in ext:
        return ""
    return ext


def split_audio_name(stem: str, markers: tuple[str, ...] = DEFAULT_AUDIO_MARKERS) -> str | None:
    """Return the spoken name inside an audio stem, or None if its marker is not known.

    ``jay~ἄρτος2`` gives ``ἄρτος``; a bare ``ἄρτος`` is accepted as is.
    """
    parts = stem.split(AUDIO_MARKER_SEPARATOR)
    if len(parts) > 1 and parts[-2].lower() not in {m.lower() for m in markers}:
        return None
    return _TRAILING_DIGITS_RE.sub("", parts[-1])


def split_filename(filename: str, markers: tuple[str, ...] = DEFAULT_AUDIO_MARKERS) -> FileInfo:
    """Split ``/dir/jay~fish.wav`` into its name component and resource kind."""
    ext = read_extension(filename)
    if not ext:
        return FileInfo(name=filename, kind=ResourceKind.UNKNOWN)
    full_name = filename[: -len(ext) - 1]
    name = re.split(r"[/\\]", full_name)[-1]
    kind = ResourceKind.parse(ext)
    if kind is ResourceKind.WAV and split_audio_name(name, markers) is None:
        return FileInfo(name=name, kind=ResourceKind.UNKNOWN)
    return FileInfo(name=name, kind=kind)


def metadata_path_for(path: Path, suffix: str = DEFAULT_METADATA_SUFFIX) -> Path:
    return path.with_suffix(suffix)


class ResourceLoader:
    """Applies the per-kind loading rules for one file on disk."""

    def __init__(
        self,
        *,
        metadata_suffix: str = DEFAULT_METADATA_SUFFIX,
        audio_markers: tuple[str, ...] = DEFAULT_AUDIO_MARKERS,
    ) -> None:
        self.metadata_suffix = metadata_suffix
        self.audio_markers = audio_markers
        self._rules: dict[ResourceKind, Callable[[Resource, Path, str], None]] = {
            ResourceKind.WAV: self._load_audio,
            ResourceKind.TTF: self._load_font,
            ResourceKind.OTF: self._load_font,
            ResourceKind.PNG: self._load_described,
            ResourceKind.JPG: self._load_described,
            ResourceKind.JPX: self._load_described,
            ResourceKind.BIN: self._load_described,
            ResourceKind.SVG: self._load_named_by_uid,
            ResourceKind.CSV: self._load_named_by_uid,
            ResourceKind.XML: self._load_named_by_uid,
        }

    def load(self, path: Path, name: str, kind: ResourceKind) -> Resource:
        rule = self._rules.get(kind)
        if rule is None:
            raise MetadataMissingError(f"Unsupported resource type for {path}")
        resource = Resource(id=0, kind=kind, source_path=path)
        rule(resource, path, name)
        return resource

    def _load_audio(self, resource: Resource, path: Path, name: str) -> None:
        spoken = split_audio_name(name, self.audio_markers)
        if not spoken:
            raise MetadataMissingError(f"Audio file has no name: {path}")
        resource.add_name(spoken)

    def _load_font(self, resource: Resource, path: Path, name: str) -> None:
        if not name:
            raise MetadataMissingError(f"Font file has no name: {path}")
        resource.add_name(name)

    def _load_described(self, resource: Resource, path: Path, name: str) -> None:
        resource.add_name(name)
        self._load_metadata(resource, path)

    def _load_named_by_uid(self, resource: Resource, path: Path, name: str) -> None:
        resource.id = _uid_from_stem(name)
        resource.add_name(name)
        self._load_metadata(resource, path)

    def _load_metadata(self, resource: Resource, path: Path) -> None:
        metadata_path = metadata_path_for(path, self.metadata_suffix)
        try:
            raw = read_bytes(metadata_path)
        except FileNotFoundError:
            logger.debug("No metadata file for %s", path)
            return
        except OSError as exc:
            raise MetadataReadError(f"Failed reading metadata {metadata_path}: {exc}") from exc

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MetadataReadError(f"Metadata file {metadata_path} is not UTF-8: {exc}") from exc

        if not is_normalized(text):
            text = normalize(text)
            logger.warning("Metadata file %s is not NFC, rewriting it", metadata_path)
            try:
                write_bytes_atomic(metadata_path, text.encode("utf-8"))
            except OSError as exc:
                logger.warning("Rewriting metadata file %s as NFC failed: %s", metadata_path, exc)

        apply_metadata(resource, text, origin=str(metadata_path))


def _uid_from_stem(stem: str) -> int:
    if not stem or len(stem) > MAX_UID_LENGTH:
        return 0
    try:
        return decode_uid(stem)
    except InvalidUidError:
        return 0
