"""Byte layout of a resource bundle.

All integers are little-endian::

    b1, b1+9, b1+1                      3 byte sentinel, b1 random per file
    count:u24
    count * (kind:u8, uid:u64, size:u32, name_count:u8,
             name_count * (len:u8, utf-8 bytes), offset:u64)
    payload bytes, concatenated in table order

``offset`` is the absolute position of an entry's payload in the file.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import BinaryIO

from repositorium.core.errors import BundleWriteError, InvalidBundleFileError

BUNDLE_VERSION = 1
SENTINEL_STEP = 9
HEADER_SIZE = 3 + 3
ENTRY_FIXED_SIZE = 1 + 8 + 4 + 1 + 8

MAX_ENTRIES = 2**24 - 1
MAX_NAMES = 254
MAX_NAME_BYTES = 255
MAX_PAYLOAD_SIZE = 2**32 - 1

_ENTRY_HEAD = struct.Struct("<BQIB")
_OFFSET = struct.Struct("<Q")


@dataclass(slots=True)
class TocEntry:
    kind: int
    uid: int
    size: int
    names: list[str] = field(default_factory=list)
    offset: int = 0

    def encoded_names(self) -> list[bytes]:
        return [truncate_name(name) for name in self.names[:MAX_NAMES]]

    def encoded_size(self) -> int:
        return ENTRY_FIXED_SIZE + sum(1 + len(raw) for raw in self.encoded_names())


def truncate_name(name: str) -> bytes:
    raw = name.encode("utf-8")
    if len(raw) <= MAX_NAME_BYTES:
        return raw
    return raw[:MAX_NAME_BYTES].decode("utf-8", errors="ignore").encode("utf-8")


def encode_sentinel(b1: int) -> bytes:
    if not 0 <= b1 <= 255 - SENTINEL_STEP:
        raise BundleWriteError(f"Bundle sentinel byte out of range: {b1}")
    return bytes((b1, b1 + SENTINEL_STEP, b1 + BUNDLE_VERSION))


def check_sentinel(header: bytes) -> None:
    if len(header) != 3:
        raise InvalidBundleFileError("Bundle is too short to hold a header")
    b1, b2, b3 = header
    if b1 + SENTINEL_STEP != b2 or b1 + BUNDLE_VERSION != b3:
        raise InvalidBundleFileError("Bundle header sentinel does not match")


def toc_size(entries: list[TocEntry]) -> int:
    return HEADER_SIZE + sum(entry.encoded_size() for entry in entries)


def assign_offsets(entries: list[TocEntry]) -> int:
    """Set each entry's absolute payload offset. Returns the total file size."""
    position = toc_size(entries)
    for entry in entries:
        entry.offset = position
        position += entry.size
    return position


def encode_toc(entries: list[TocEntry], b1: int) -> bytes:
    if len(entries) > MAX_ENTRIES:
        raise BundleWriteError(f"Too many bundle entries: {len(entries)}")
    out = bytearray(encode_sentinel(b1))
    out += len(entries).to_bytes(3, "little")
    for entry in entries:
        if entry.size > MAX_PAYLOAD_SIZE:
            raise BundleWriteError(f"Entry {entry.uid} is too large to bundle: {entry.size} bytes")
        names = entry.encoded_names()
        try:
            out += _ENTRY_HEAD.pack(entry.kind, entry.uid, entry.size, len(names))
        except struct.error as exc:
            raise BundleWriteError(f"Entry {entry.uid} cannot be encoded: {exc}") from exc
        for raw in names:
            out.append(len(raw))
            out += raw
        out += _OFFSET.pack(entry.offset)
    return bytes(out)


def decode_toc(stream: BinaryIO) -> list[TocEntry]:
    check_sentinel(stream.read(3))
    count = int.from_bytes(_read_exact(stream, 3), "little")
    entries: list[TocEntry] = []
    for _ in range(count):
        kind, uid, size, name_count = _ENTRY_HEAD.unpack(_read_exact(stream, _ENTRY_HEAD.size))
        names: list[str] = []
        for _ in range(name_count):
            length = _read_exact(stream, 1)[0]
            raw = _read_exact(stream, length)
            try:
                names.append(raw.decode("utf-8"))
            except UnicodeDecodeError as exc:
                raise InvalidBundleFileError(f"Bundle entry {uid} has a name that is not UTF-8") from exc
        (offset,) = _OFFSET.unpack(_read_exact(stream, _OFFSET.size))
        entries.append(TocEntry(kind=kind, uid=uid, size=size, names=names, offset=offset))
    return entries


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise InvalidBundleFileError("Bundle table of contents is truncated")
    return data
