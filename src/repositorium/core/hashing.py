from __future__ import annotations

import hashlib


def compute_bytes_digest(data: bytes, alg: str = "sha256") -> bytes:
    h = hashlib.new(alg)
    h.update(data)
    return h.digest()


def compute_text_digest(text: str, alg: str = "sha256") -> bytes:
    return compute_bytes_digest(text.encode("utf-8"), alg)
