from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path

from repositorium.core.text import sentence_trim


class ResourceKind(IntEnum):
    """Supported resource file types. Values are the bundle wire byte."""

    UNKNOWN = 0
    WAV = 1
    PNG = 2
    JPG = 3
    SVG = 4
    TTF = 5
    OTF = 6
    CSV = 7
    JPX = 8
    XML = 9
    BIN = 11

    @property
    def extension(self) -> str:
        return self.name.lower()

    @property
    def dot_extension(self) -> str:
        return "." + self.extension

    @classmethod
    def parse(cls, text: str) -> ResourceKind:
        ext = text[1:] if text.startswith(".") else text
        if not ext:
            return cls.UNKNOWN
        try:
            kind = cls[ext.upper()]
        except KeyError:
            return cls.UNKNOWN
        return kind


class SearchCategory(str, Enum):
    """Filter lookups by resource type."""

    ANY = "any"
    AUDIO = "audio"
    IMAGE = "image"
    FONT = "font"
    WAV = "wav"
    PNG = "png"
    JPG = "jpg"
    SVG = "svg"
    TTF = "ttf"
    OTF = "otf"
    CSV = "csv"
    JPX = "jpx"
    XML = "xml"
    BIN = "bin"

    def matches(self, kind: ResourceKind) -> bool:
        if self is SearchCategory.ANY:
            return True
        return kind in _CATEGORY_KINDS[self]


_CATEGORY_KINDS: dict[SearchCategory, frozenset[ResourceKind]] = {
    SearchCategory.AUDIO: frozenset({ResourceKind.WAV}),
    SearchCategory.IMAGE: frozenset({ResourceKind.PNG, ResourceKind.JPG}),
    SearchCategory.FONT: frozenset({ResourceKind.TTF, ResourceKind.OTF}),
    **{
        category: frozenset({ResourceKind[category.name]})
        for category in SearchCategory
        if category.name in ResourceKind.__members__
    },
}


@dataclass(slots=True, eq=False)
class Resource:
    id: int
    kind: ResourceKind
    visible: bool = True
    date: str | None = None
    copyright: str | None = None
    link: str | None = None
    names: list[str] = field(default_factory=list)

    # A resource lives either on disk or inside a bundle, never both.
    source_path: Path | None = None
    bundle_offset: int | None = None
    size: int = 0

    def add_name(self, name: str) -> None:
        self._append_name(name)
        trimmed = sentence_trim(name)
        if trimmed:
            self._append_name(trimmed)

    def _append_name(self, name: str) -> None:
        if name and name not in self.names:
            self.names.append(name)

    @property
    def in_bundle(self) -> bool:
        return self.bundle_offset is not None

    @property
    def label(self) -> str:
        return self.names[0] if self.names else ""
