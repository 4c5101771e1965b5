from __future__ import annotations

import logging
import subprocess

from repositorium.core.errors import ConversionError
from repositorium.infrastructure.media.wav import prepare_speech

logger = logging.getLogger(__name__)

MAX_AUDIO_FILE_SIZE = 1024 * 1024 * 5


def ffmpeg_ogg_command(ffmpeg_path: str = "ffmpeg") -> list[str]:
    return [
        ffmpeg_path,
        "-i",
        "pipe:0",
        "-filter:a",
        "speechnorm,loudnorm",
        "-c:a",
        "libvorbis",
        "-q:a",
        "7",
        "-f",
        "ogg",
        "-",
    ]


def _run(cmd: list[str], data: bytes) -> subprocess.CompletedProcess[bytes]:
    return subprocess.run(cmd, input=data, capture_output=True, check=False)


def generate_ogg_audio(data: bytes, ffmpeg_path: str = "ffmpeg") -> bytes:
    """Clean up a PCM wav recording and transcode it to Ogg Vorbis."""
    prepared = prepare_speech(data)
    cmd = ffmpeg_ogg_command(ffmpeg_path)
    try:
        proc = _run(cmd, prepared)
    except OSError as exc:
        raise ConversionError(f"Error spawning ffmpeg ({ffmpeg_path}): {exc}") from exc

    logger.debug("ffmpeg returned %s", proc.returncode)
    if proc.returncode != 0:
        stderr = proc.stderr.decode("utf-8", errors="replace").strip()
        raise ConversionError(f"ffmpeg failed with exit code {proc.returncode}: {stderr[-500:]}")
    if len(proc.stdout) > MAX_AUDIO_FILE_SIZE:
        raise ConversionError(f"ffmpeg output exceeds {MAX_AUDIO_FILE_SIZE} bytes")
    if not proc.stdout:
        raise ConversionError("ffmpeg produced no audio")
    return proc.stdout
