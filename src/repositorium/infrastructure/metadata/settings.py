"""Line oriented ``field:value`` metadata files.

Each line starts with a single field letter, Latin or Greek, followed by
``:`` or ``=`` and the value::

    i:GzeBWE
    δ:202309072345
    s:ὁ ἄρτος.
    v:true
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from repositorium.core.errors import InvalidMetadataError, InvalidResourceUIDError, InvalidUidError
from repositorium.core.uid import MAX_UID_LENGTH, decode_uid
from repositorium.domain.models.resource import Resource

_LINE_BREAKS = "\r\n"
_SEPARATORS = ":="
_INLINE_SPACE = " \t"
_TRUE_VALUES = frozenset({"true", "yes", "y", "1"})


class SettingKind(str, Enum):
    UNKNOWN = "unknown"
    UID = "uid"
    DATE = "date"
    COPYRIGHT = "copyright"
    VISIBLE = "visible"
    LINK = "link"
    SENTENCE = "sentence"


FIELD_ALIASES: dict[str, SettingKind] = {
    "i": SettingKind.UID,
    "ι": SettingKind.UID,
    "d": SettingKind.DATE,
    "δ": SettingKind.DATE,
    "c": SettingKind.COPYRIGHT,
    "s": SettingKind.SENTENCE,
    "σ": SettingKind.SENTENCE,
    "v": SettingKind.VISIBLE,
    "l": SettingKind.LINK,
    "λ": SettingKind.LINK,
}


@dataclass(frozen=True, slots=True)
class Setting:
    kind: SettingKind
    value: str


def parse_field(letter: str) -> SettingKind:
    return FIELD_ALIASES.get(letter.lower(), SettingKind.UNKNOWN)


def iter_settings(text: str) -> Iterator[Setting]:
    pos = 0
    end = len(text)
    while True:
        while pos < end and text[pos].isspace():
            pos += 1
        if pos >= end:
            return

        kind = parse_field(text[pos])
        pos += 1
        if kind is not SettingKind.UNKNOWN:
            while pos < end and (text[pos] in _INLINE_SPACE or text[pos] in _SEPARATORS):
                pos += 1

        eol = pos
        while eol < end and text[eol] not in _LINE_BREAKS:
            eol += 1
        value = text[pos:eol].rstrip()
        pos = eol
        yield Setting(kind=kind, value=value)


def is_true(text: str) -> bool:
    return text.strip().lower() in _TRUE_VALUES


def decode_metadata_uid(value: str) -> int:
    """Decode a metadata uid, cutting legacy values down to ten digits."""
    if len(value) > MAX_UID_LENGTH:
        value = value[:MAX_UID_LENGTH]
    try:
        uid = decode_uid(value)
    except InvalidUidError as exc:
        raise InvalidResourceUIDError(f"Invalid resource uid {value!r}: {exc}") from exc
    if uid == 0:
        raise InvalidResourceUIDError(f"Resource uid {value!r} decodes to zero")
    return uid


def apply_metadata(resource: Resource, text: str, origin: str = "") -> None:
    # A metadata file hides its resource unless it says otherwise.
    resource.visible = False
    for setting in iter_settings(text):
        if setting.kind is SettingKind.UID:
            resource.id = decode_metadata_uid(setting.value)
        elif setting.kind is SettingKind.DATE:
            resource.date = setting.value
        elif setting.kind is SettingKind.COPYRIGHT:
            resource.copyright = setting.value
        elif setting.kind is SettingKind.LINK:
            resource.link = setting.value
        elif setting.kind is SettingKind.VISIBLE:
            resource.visible = is_true(setting.value)
        elif setting.kind is SettingKind.SENTENCE:
            resource.add_name(setting.value)
        else:
            raise InvalidMetadataError(
                f"Unknown metadata field in {origin or 'metadata'}: {setting.value!r}"
            )
