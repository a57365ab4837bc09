from __future__ import annotations
from teluvision.contracts import ImagePayload, TranslationResult
from teluvision.remote.base import EmptyTextError, SpeechClient, TranslationClient


class StubTranslationClient(TranslationClient):
    @property
    def name(self) -> str:
        return "stub"

    def translate(self, image: ImagePayload) -> TranslationResult:
        # Deterministic, test-friendly
        en = f"Sample text from a {image.mime_type} image ({len(image.data)} bytes)."
        te = f"【నమూనా అనువాదం】{en}"
        return TranslationResult(source_text=en, translated_text=te, provider=self.name)


class StubSpeechClient(SpeechClient):
    """Silent PCM16, 50 ms per character of input."""

    def __init__(self, sample_rate: int = 24000, ms_per_char: int = 50) -> None:
        self.sample_rate = int(sample_rate)
        self.ms_per_char = int(ms_per_char)

    @property
    def name(self) -> str:
        return "stub"

    def synthesize(self, text: str) -> bytes:
        text = (text or "").strip()
        if not text:
            raise EmptyTextError("nothing to synthesize")
        frames = self.sample_rate * self.ms_per_char * len(text) // 1000
        return b"\x00\x00" * frames
