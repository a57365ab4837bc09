from __future__ import annotations

import struct

from teluvision.contracts import WAV_MIME_TYPE, AudioArtifact

WAV_HEADER_SIZE = 44
PCM16_SAMPLE_WIDTH = 2

_MAX_UINT32 = 0xFFFFFFFF

# RIFF chunk, "fmt " subchunk (PCM, mono, 16-bit), "data" subchunk header.
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


class EncodeError(ValueError):
    pass


def wav_header(data_len: int, sample_rate: int) -> bytes:
    """Return the 44-byte canonical WAV header for mono PCM16 data of `data_len` bytes."""
    if data_len < 0:
        raise EncodeError("data length must be >= 0")
    if data_len % PCM16_SAMPLE_WIDTH:
        raise EncodeError(f"PCM16 data length must be even, got {data_len} bytes")
    if not 0 < int(sample_rate) <= _MAX_UINT32 // PCM16_SAMPLE_WIDTH:
        raise EncodeError(f"sample rate out of range: {sample_rate}")
    if 36 + data_len > _MAX_UINT32:
        raise EncodeError("PCM16 data too large for a RIFF container")

    sample_rate = int(sample_rate)
    return _HEADER.pack(
        b"RIFF",
        36 + data_len,
        b"WAVE",
        b"fmt ",
        16,  # Subchunk1Size
        1,  # AudioFormat: PCM
        1,  # NumChannels
        sample_rate,
        sample_rate * PCM16_SAMPLE_WIDTH,  # ByteRate
        PCM16_SAMPLE_WIDTH,  # BlockAlign
        16,  # BitsPerSample
        b"data",
        data_len,
    )


def pcm16_to_wav(pcm16: bytes, sample_rate: int) -> AudioArtifact:
    """
    Wrap little-endian signed 16-bit mono PCM in a minimal WAV container.
    Odd-length input is rejected rather than truncated.
    """
    payload = bytes(pcm16)
    header = wav_header(len(payload), sample_rate)
    return AudioArtifact(
        data=header + payload,
        sample_rate=int(sample_rate),
        channels=1,
        mime_type=WAV_MIME_TYPE,
    )
