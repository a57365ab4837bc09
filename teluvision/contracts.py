from __future__ import annotations
from dataclasses import dataclass

WAV_MIME_TYPE = "audio/wav"

@dataclass(frozen=True)
class ImagePayload:
    """
    Uploaded image ready for transport.
    data: the raw image bytes as read from disk / camera.
    """
    data: bytes
    mime_type: str

@dataclass(frozen=True)
class TranslationResult:
    source_text: str      # extracted English text
    translated_text: str  # conversational Telugu
    provider: str = ""

@dataclass(frozen=True)
class AudioArtifact:
    """
    Self-describing playable audio (full WAV file bytes, header included).
    """
    data: bytes
    sample_rate: int
    channels: int = 1
    mime_type: str = WAV_MIME_TYPE

    @property
    def duration_sec(self) -> float:
        # 44-byte canonical header, 16-bit samples
        frames = max(0, len(self.data) - 44) // (2 * self.channels)
        return frames / float(self.sample_rate)
