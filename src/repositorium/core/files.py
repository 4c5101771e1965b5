from __future__ import annotations

import os
import time
from pathlib import Path


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_bytes(path: Path) -> bytes:
    with path.open("rb") as f:
        return f.read()


def temp_path_for(dst: Path) -> Path:
    return dst.parent / f".{dst.name}.{int(time.time() * 1000)}.tmp"


def write_bytes_atomic(dst: Path, data: bytes) -> None:
    ensure_directory(dst.parent)
    temp_path = temp_path_for(dst)
    try:
        with temp_path.open("wb") as f:
            f.write(data)
        os.replace(temp_path, dst)
    finally:
        if temp_path.exists():
            temp_path.unlink()
