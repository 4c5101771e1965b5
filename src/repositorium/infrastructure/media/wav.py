"""PCM wav clean-up applied to speech before it is transcoded."""

from __future__ import annotations

import array
import io
import logging
import sys
import wave
from dataclasses import dataclass

from repositorium.core.errors import ConversionError

logger = logging.getLogger(__name__)

DEFAULT_PEAK = 0.95
FADE_SECONDS = 0.02
# Recordings quieter than this are left alone so background noise is not amplified.
SILENCE_THRESHOLD = 0.03

_SAMPLE_WIDTH = 2
_MAX_SAMPLE = 32767
_MIN_SAMPLE = -32768


@dataclass(slots=True)
class PcmAudio:
    """Interleaved 16 bit samples from a PCM wav file."""

    channels: int
    sample_rate: int
    samples: array.array

    @classmethod
    def from_wav(cls, data: bytes) -> PcmAudio:
        if data[:4] != b"RIFF" or data[8:12] != b"WAVE":
            raise ConversionError("Audio is not a wav file")
        try:
            with wave.open(io.BytesIO(data), "rb") as reader:
                channels = reader.getnchannels()
                sample_rate = reader.getframerate()
                width = reader.getsampwidth()
                expected = reader.getnframes() * channels * width
                frames = reader.readframes(reader.getnframes())
        except wave.Error as exc:
            raise ConversionError(f"Only PCM wav audio is supported: {exc}") from exc
        except EOFError as exc:
            raise ConversionError("Wav file is incomplete") from exc

        if width != _SAMPLE_WIDTH:
            raise ConversionError(f"Only 16 bit PCM wav audio is supported, not {width * 8} bit")
        if channels < 1:
            raise ConversionError("Wav file has no channels")
        if len(frames) < expected:
            raise ConversionError(f"Wav file is incomplete: {len(frames)} of {expected} audio bytes")

        samples = array.array("h")
        samples.frombytes(frames)
        if sys.byteorder == "big":
            samples.byteswap()
        return cls(channels=channels, sample_rate=sample_rate, samples=samples)

    @property
    def frame_count(self) -> int:
        return len(self.samples) // self.channels

    def peak(self) -> float:
        if not self.samples:
            return 0.0
        return max(abs(value) for value in self.samples) / _MAX_SAMPLE

    def normalise(self, peak: float = DEFAULT_PEAK) -> None:
        """Scale the audio so its loudest sample reaches ``peak``."""
        if not 0.0 <= peak <= 1.0:
            raise ValueError(f"peak must be between 0 and 1: {peak}")
        if not self.samples:
            logger.debug("Cannot normalise empty audio")
            return
        current = self.peak()
        if current < SILENCE_THRESHOLD:
            logger.info("Audio is effectively silent (peak %.1f%%), not normalising", current * 100)
            return
        scale = peak / current
        logger.debug("Normalising audio peak %.3f to %.3f (scale %.3f)", current, peak, scale)
        self.samples = array.array("h", (_clamp(value * scale) for value in self.samples))

    def fade(self, seconds: float = FADE_SECONDS) -> None:
        """Fade the first and last ``seconds`` of audio in and out."""
        length = int(self.sample_rate * seconds)
        if self.sample_rate == 0 or length == 0:
            logger.info("Sample rate %d is too low to fade", self.sample_rate)
            return
        frames = self.frame_count
        if frames < length * 2:
            logger.info("Audio is too short to fade (%d frames)", frames)
            return

        channels = self.channels
        for i in range(length):
            head = i / length
            tail = (length - i) / length
            end = frames - length + i
            for channel in range(channels):
                first = i * channels + channel
                last = end * channels + channel
                self.samples[first] = _clamp(self.samples[first] * head)
                self.samples[last] = _clamp(self.samples[last] * tail)

    def to_wav(self) -> bytes:
        samples = array.array("h", self.samples)
        if sys.byteorder == "big":
            samples.byteswap()
        out = io.BytesIO()
        with wave.open(out, "wb") as writer:
            writer.setnchannels(self.channels)
            writer.setsampwidth(_SAMPLE_WIDTH)
            writer.setframerate(self.sample_rate)
            writer.writeframes(samples.tobytes())
        return out.getvalue()


def prepare_speech(data: bytes, peak: float = DEFAULT_PEAK) -> bytes:
    """Validate a wav payload, normalise it and fade its edges."""
    audio = PcmAudio.from_wav(data)
    audio.normalise(peak)
    audio.fade()
    return audio.to_wav()


def _clamp(value: float) -> int:
    return max(_MIN_SAMPLE, min(_MAX_SAMPLE, round(value)))
