"""Shared fixtures: a small resource folder laid out the way a real one is."""

from __future__ import annotations

import io
import math
import struct
import wave
from pathlib import Path

import pytest
from PIL import Image

from repositorium.core import rng


def png_bytes(width: int = 400, height: int = 200, color: str = "red") -> bytes:
    out = io.BytesIO()
    Image.new("RGB", (width, height), color).save(out, format="PNG")
    return out.getvalue()


def wav_bytes(frames: int = 2205, rate: int = 44100, channels: int = 1, amplitude: int = 8000) -> bytes:
    values = [
        int(amplitude * math.sin(2 * math.pi * 440 * i / rate))
        for i in range(frames)
        for _ in range(channels)
    ]
    out = io.BytesIO()
    with wave.open(out, "wb") as writer:
        writer.setnchannels(channels)
        writer.setsampwidth(2)
        writer.setframerate(rate)
        writer.writeframes(struct.pack(f"<{len(values)}h", *values))
    return out.getvalue()


@pytest.fixture(autouse=True)
def _deterministic_rng() -> None:
    rng.reset()


@pytest.fixture
def speech_wav() -> bytes:
    return wav_bytes()


@pytest.fixture
def sample_repo(tmp_path: Path) -> Path:
    repo = tmp_path / "resources"
    repo.mkdir()

    (repo / "GzeBWE.png").write_bytes(png_bytes())
    (repo / "GzeBWE.txt").write_text(
        "i:GzeBWE\nd:202309072345\nc:jay\ns:κρέα\ns:μάχαιρα.\nv:true\n\n",
        encoding="utf-8",
    )

    (repo / "fishy.jpg").write_bytes(b"\xff\xd8\xff\xe0 not really a jpeg")
    (repo / "fishy.txt").write_text(
        "ι: Bx\nσ: κρέα\nσ: ὁ δαυὶδ λέγει·\nλ: https://example.com/fishy\nv = y\n",
        encoding="utf-8",
    )

    (repo / "jay~ἄρτος.wav").write_bytes(wav_bytes())
    (repo / "bob~ἄρτος.wav").write_bytes(b"RIFF....WAVEfmt unknown speaker")
    (repo / "αρτος.ttf").write_bytes(b"\x00\x01\x00\x00 font bytes")

    (repo / "hidden.png").write_bytes(png_bytes(10, 10))
    (repo / "hidden.txt").write_text("i:Cx\ns:secret\n", encoding="utf-8")

    (repo / "1122.csv").write_text("a,b\n1,2\n", encoding="utf-8")
    (repo / "2233.csv").write_text("c,d\n3,4\n", encoding="utf-8")
    (repo / "2233.txt").write_text("s:abcd\nv:1\n", encoding="utf-8")

    (repo / "README").write_text("not a resource", encoding="utf-8")
    (repo / "notes.md").write_text("not a resource", encoding="utf-8")
    (repo / "subdir.png").mkdir()
    return repo
