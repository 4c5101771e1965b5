import array
import io
import struct
import wave

import pytest

from repositorium.core.errors import ConversionError
from repositorium.infrastructure.media.wav import PcmAudio, prepare_speech


def _wav(values: list[int], rate: int = 1000, channels: int = 1, width: int = 2) -> bytes:
    out = io.BytesIO()
    with wave.open(out, "wb") as writer:
        writer.setnchannels(channels)
        writer.setsampwidth(width)
        writer.setframerate(rate)
        fmt = "<%dh" % len(values) if width == 2 else "<%dB" % len(values)
        writer.writeframes(struct.pack(fmt, *values))
    return out.getvalue()


def _float_wav() -> bytes:
    body = struct.pack("<HHIIHH", 3, 1, 44100, 44100 * 4, 4, 32)
    payload = struct.pack("<f", 0.5)
    chunks = b"fmt " + struct.pack("<I", len(body)) + body + b"data" + struct.pack("<I", len(payload)) + payload
    return b"RIFF" + struct.pack("<I", 4 + len(chunks)) + b"WAVE" + chunks


def _audio(values: list[int], rate: int = 1000, channels: int = 1) -> PcmAudio:
    return PcmAudio(channels=channels, sample_rate=rate, samples=array.array("h", values))


def test_from_wav_reads_pcm_samples() -> None:
    audio = PcmAudio.from_wav(_wav([1, -2, 3, -4], rate=8000, channels=2))
    assert audio.channels == 2
    assert audio.sample_rate == 8000
    assert audio.frame_count == 2
    assert list(audio.samples) == [1, -2, 3, -4]


def test_to_wav_reads_back() -> None:
    audio = _audio([5, -5, 32767, -32768], rate=22050)
    again = PcmAudio.from_wav(audio.to_wav())
    assert again.sample_rate == 22050
    assert list(again.samples) == [5, -5, 32767, -32768]


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"ID3 not a wav file at all",
        _float_wav(),
        _wav([128, 129, 130], width=1),
        _wav([100] * 50)[:-20],
    ],
)
def test_unusable_wav_data_is_rejected(data: bytes) -> None:
    with pytest.raises(ConversionError):
        PcmAudio.from_wav(data)


def test_normalise_scales_loudest_sample_to_peak() -> None:
    audio = _audio([1000, -2000, 1500])
    audio.normalise(0.95)
    assert abs(audio.samples[1] + 31129) <= 1
    assert abs(audio.samples[0] - 15564) <= 1


def test_normalise_leaves_near_silence_alone() -> None:
    audio = _audio([500, -300, 0])
    audio.normalise()
    assert list(audio.samples) == [500, -300, 0]


def test_normalise_rejects_invalid_peak() -> None:
    with pytest.raises(ValueError):
        _audio([1000]).normalise(1.5)


def test_fade_ramps_both_edges() -> None:
    audio = _audio([10000] * 100, rate=1000)
    audio.fade()

    assert audio.samples[0] == 0
    assert audio.samples[10] == 5000
    assert audio.samples[19] == 9500
    assert list(audio.samples[20:81]) == [10000] * 61
    assert audio.samples[99] == 500


def test_fade_covers_every_channel() -> None:
    audio = _audio([10000, -10000] * 100, rate=1000, channels=2)
    audio.fade()
    assert list(audio.samples[:2]) == [0, 0]
    assert list(audio.samples[-2:]) == [500, -500]


def test_fade_skips_short_audio() -> None:
    audio = _audio([10000] * 30, rate=1000)
    audio.fade()
    assert list(audio.samples) == [10000] * 30


def test_prepare_speech_returns_cleaned_wav() -> None:
    data = _wav([0, 4000, -8000, 4000] * 50, rate=1000)
    prepared = PcmAudio.from_wav(prepare_speech(data))
    assert prepared.frame_count == 200
    assert prepared.samples[0] == 0
    assert abs(max(abs(v) for v in prepared.samples) - 31129) <= 1
