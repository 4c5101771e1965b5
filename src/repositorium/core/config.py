from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from repositorium.core.errors import ConfigurationError

DEFAULT_RESOURCES_DIRNAME = "resources"
DEFAULT_BUNDLE_FILENAME = "resources.bd"
DEFAULT_EXPORT_DIRNAME = "export"
DEFAULT_METADATA_SUFFIX = ".txt"
DEFAULT_AUDIO_MARKERS = ("jay",)
DEFAULT_UID_PROBE_LIMIT = 1000


@dataclass(frozen=True)
class AppConfig:
    project_root: Path
    resources_dir: Path
    bundle_path: Path
    export_dir: Path
    metadata_suffix: str = DEFAULT_METADATA_SUFFIX
    audio_markers: tuple[str, ...] = DEFAULT_AUDIO_MARKERS
    ffmpeg_path: str = "ffmpeg"
    stable_ids: bool = False
    uid_probe_limit: int = DEFAULT_UID_PROBE_LIMIT


def default_config(project_root: Path) -> AppConfig:
    root = project_root.expanduser().resolve()
    return AppConfig(
        project_root=root,
        resources_dir=root / DEFAULT_RESOURCES_DIRNAME,
        bundle_path=root / DEFAULT_BUNDLE_FILENAME,
        export_dir=root / DEFAULT_EXPORT_DIRNAME,
    )


def load_config(project_root: Path | None = None) -> AppConfig:
    root = (project_root or Path.cwd()).expanduser().resolve()
    base = default_config(root)

    resources_raw = os.getenv("REPOSITORIUM_RESOURCES")
    bundle_raw = os.getenv("REPOSITORIUM_BUNDLE")
    markers_raw = os.getenv("REPOSITORIUM_AUDIO_MARKERS")
    stable_raw = os.getenv("REPOSITORIUM_STABLE_IDS")
    limit_raw = os.getenv("REPOSITORIUM_UID_PROBE_LIMIT")

    markers = base.audio_markers
    if markers_raw is not None:
        markers = tuple(m.strip().lower() for m in markers_raw.split(",") if m.strip())
        if not markers:
            raise ConfigurationError("REPOSITORIUM_AUDIO_MARKERS must name at least one marker")

    limit = base.uid_probe_limit
    if limit_raw is not None:
        try:
            limit = int(limit_raw)
        except ValueError as exc:
            raise ConfigurationError(f"REPOSITORIUM_UID_PROBE_LIMIT is not an integer: {limit_raw!r}") from exc
        if limit < 1:
            raise ConfigurationError(f"REPOSITORIUM_UID_PROBE_LIMIT must be positive: {limit}")

    return AppConfig(
        project_root=root,
        resources_dir=_resolve(root, resources_raw) if resources_raw else base.resources_dir,
        bundle_path=_resolve(root, bundle_raw) if bundle_raw else base.bundle_path,
        export_dir=base.export_dir,
        audio_markers=markers,
        ffmpeg_path=os.getenv("REPOSITORIUM_FFMPEG") or base.ffmpeg_path,
        stable_ids=stable_raw.strip().lower() in ("true", "yes", "y", "1") if stable_raw else False,
        uid_probe_limit=limit,
    )


def _resolve(root: Path, raw: str) -> Path:
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = root / path
    return path.resolve()
