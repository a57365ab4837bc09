from __future__ import annotations

import json
import os
from typing import Any, Optional

from teluvision.audio.codec import decode_base64
from teluvision.contracts import ImagePayload, TranslationResult
from teluvision.remote.base import (
    EmptyAudioError,
    EmptyTextError,
    PARSE_FAILED_MESSAGE,
    RemoteServiceError,
    ResponseParseError,
    SpeechClient,
    TranslationClient,
)

DEFAULT_TRANSLATE_MODEL = "gemini-3-flash-preview"
DEFAULT_TTS_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_VOICE = "Kore"

TRANSLATE_INSTRUCTION = """\
Perform the following tasks on the provided image:
1. Extract all readable English text. Ignore logos and watermarks.
2. Translate the English text into natural, fluent, conversational Telugu.
   If the text is already Telugu, keep it unchanged.
3. Keep the Telugu spoken and everyday rather than formal.

Return the result strictly as JSON.
"""

SPEECH_INSTRUCTION = "Say clearly in a natural, friendly Telugu accent: {text}"


def parse_translation_payload(text: Optional[str], provider: str = "gemini") -> TranslationResult:
    """Validate the structured JSON reply: an object with string `englishText` and `teluguText`."""
    if not text or not text.strip():
        raise ResponseParseError(PARSE_FAILED_MESSAGE)
    try:
        loaded = json.loads(text)
    except json.JSONDecodeError as e:
        raise ResponseParseError(PARSE_FAILED_MESSAGE) from e
    if not isinstance(loaded, dict):
        raise ResponseParseError(PARSE_FAILED_MESSAGE)

    english = loaded.get("englishText")
    telugu = loaded.get("teluguText")
    if not isinstance(english, str) or not isinstance(telugu, str):
        raise ResponseParseError(PARSE_FAILED_MESSAGE)
    return TranslationResult(source_text=english, translated_text=telugu, provider=provider)


def extract_audio_payload(response: Any) -> bytes:
    """
    Pull the inline audio out of candidates[0].content.parts[*].inline_data.data.
    Base64 text is decoded; raw bytes are returned as-is.
    """
    candidates = getattr(response, "candidates", None) or []
    content = getattr(candidates[0], "content", None) if candidates else None
    parts = getattr(content, "parts", None) or []
    for part in parts:
        inline = getattr(part, "inline_data", None)
        data = getattr(inline, "data", None)
        if not data:
            continue
        if isinstance(data, str):
            return decode_base64(data)
        return bytes(data)
    raise EmptyAudioError("No audio data received from Gemini TTS.")


class _GeminiClientMixin:
    api_key_env: str
    timeout_sec: float
    _client: Any

    def _get_client(self):
        if self._client is None:
            from google import genai
            from google.genai import types

            api_key = os.getenv(self.api_key_env) if self.api_key_env else None
            self._client = genai.Client(
                api_key=api_key or None,
                http_options=types.HttpOptions(timeout=int(self.timeout_sec * 1000)),
            )
        return self._client


class GeminiTranslationClient(_GeminiClientMixin, TranslationClient):
    def __init__(
        self,
        *,
        model: str = DEFAULT_TRANSLATE_MODEL,
        api_key_env: str = "GEMINI_API_KEY",
        timeout_sec: float = 60.0,
    ) -> None:
        self.model = model
        self.api_key_env = api_key_env
        self.timeout_sec = float(timeout_sec)
        self._client = None

    @property
    def name(self) -> str:
        return "gemini"

    def translate(self, image: ImagePayload) -> TranslationResult:
        from google.genai import types

        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "englishText": types.Schema(
                        type=types.Type.STRING,
                        description="The extracted English text",
                    ),
                    "teluguText": types.Schema(
                        type=types.Type.STRING,
                        description="The translated Telugu text",
                    ),
                },
                required=["englishText", "teluguText"],
            ),
        )
        try:
            response = self._get_client().models.generate_content(
                model=self.model,
                contents=[
                    types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
                    TRANSLATE_INSTRUCTION,
                ],
                config=config,
            )
        except Exception as e:
            raise RemoteServiceError(f"Translation request failed: {e}") from e

        return parse_translation_payload(getattr(response, "text", None), provider=self.name)


class GeminiSpeechClient(_GeminiClientMixin, SpeechClient):
    def __init__(
        self,
        *,
        model: str = DEFAULT_TTS_MODEL,
        voice_name: str = DEFAULT_VOICE,
        api_key_env: str = "GEMINI_API_KEY",
        timeout_sec: float = 60.0,
    ) -> None:
        self.model = model
        self.voice_name = voice_name
        self.api_key_env = api_key_env
        self.timeout_sec = float(timeout_sec)
        self._client = None

    @property
    def name(self) -> str:
        return "gemini"

    def synthesize(self, text: str) -> bytes:
        text = (text or "").strip()
        if not text:
            raise EmptyTextError("nothing to synthesize")

        from google.genai import types

        config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=self.voice_name),
                ),
            ),
        )
        try:
            response = self._get_client().models.generate_content(
                model=self.model,
                contents=SPEECH_INSTRUCTION.format(text=text),
                config=config,
            )
        except Exception as e:
            raise RemoteServiceError(f"Speech request failed: {e}") from e

        return extract_audio_payload(response)
