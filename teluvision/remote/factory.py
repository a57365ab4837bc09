from __future__ import annotations
import os
from .base import SpeechClient, TranslationClient
from .gemini import GeminiSpeechClient, GeminiTranslationClient
from .stub import StubSpeechClient, StubTranslationClient


def _provider(provider: str | None) -> str:
    return (provider or os.getenv("TELUVISION_PROVIDER", "gemini")).lower().strip()


def get_translation_client(provider: str | None = None, **options) -> TranslationClient:
    provider = _provider(provider)

    if provider == "stub":
        return StubTranslationClient()
    if provider == "gemini":
        return GeminiTranslationClient(**options)

    raise ValueError(f"Unknown translation provider: {provider}")


def get_speech_client(provider: str | None = None, **options) -> SpeechClient:
    provider = _provider(provider)

    if provider == "stub":
        return StubSpeechClient(sample_rate=int(options.get("sample_rate", 24000)))
    if provider == "gemini":
        options.pop("sample_rate", None)
        return GeminiSpeechClient(**options)

    raise ValueError(f"Unknown speech provider: {provider}")
