"""Base-62 identifiers.

Identifiers are unsigned 64-bit integers rendered least significant digit
first, so ``62`` encodes as ``"AB"`` and ``0`` as ``"A"``.
"""

from __future__ import annotations

import string

from repositorium.core.errors import InvalidUidDigitError, UidOverflowError
from repositorium.core.hashing import compute_text_digest

BASE62_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
MAX_UID = 2**64 - 1

# Legacy identifiers longer than this do not fit in 64 bits and are cut down.
MAX_UID_LENGTH = 10

_DIGIT_VALUES = {ch: idx for idx, ch in enumerate(BASE62_ALPHABET)}


def encode_uid(value: int) -> str:
    if value < 0:
        raise ValueError(f"uid must be unsigned: {value}")
    if value == 0:
        return BASE62_ALPHABET[0]
    chars: list[str] = []
    base = len(BASE62_ALPHABET)
    while value > 0:
        value, idx = divmod(value, base)
        chars.append(BASE62_ALPHABET[idx])
    return "".join(chars)


def decode_uid(text: str) -> int:
    value = 0
    for ch in reversed(text):
        digit = _DIGIT_VALUES.get(ch)
        if digit is None:
            raise InvalidUidDigitError(f"Invalid base-62 digit {ch!r} in uid {text!r}")
        value = value * 62 + digit
        if value > MAX_UID:
            raise UidOverflowError(f"uid {text!r} does not fit in 64 bits")
    return value


def derive_uid(display_name: str, file_size: int) -> int:
    digest = compute_text_digest(f"{display_name}:{file_size}")
    value = int.from_bytes(digest[:8], "little")
    return value or 1
