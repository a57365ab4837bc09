from __future__ import annotations

import base64
import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from teluvision.contracts import ImagePayload
from teluvision.remote.base import (
    EmptyAudioError,
    EmptyTextError,
    RemoteServiceError,
    ResponseParseError,
)
from teluvision.remote.gemini import (
    GeminiSpeechClient,
    GeminiTranslationClient,
    extract_audio_payload,
    parse_translation_payload,
)

IMAGE = ImagePayload(data=b"\xff\xd8\xff\xe0fake-jpeg", mime_type="image/jpeg")


def _audio_response(data) -> SimpleNamespace:
    part = SimpleNamespace(inline_data=SimpleNamespace(mime_type="audio/L16;rate=24000", data=data))
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


def test_parse_translation_payload_ok() -> None:
    res = parse_translation_payload(json.dumps({"englishText": "Hello", "teluguText": "హలో"}))
    assert res.source_text == "Hello"
    assert res.translated_text == "హలో"
    assert res.provider == "gemini"


def test_parse_translation_payload_allows_empty_strings() -> None:
    res = parse_translation_payload('{"englishText": "", "teluguText": ""}')
    assert res.source_text == ""
    assert res.translated_text == ""


@pytest.mark.parametrize(
    "text",
    [
        None,
        "",
        "Sorry, I cannot read that image.",
        "[1, 2]",
        '{"englishText": "Hello"}',
        '{"englishText": "Hello", "teluguText": null}',
        '{"englishText": 3, "teluguText": "మూడు"}',
    ],
)
def test_parse_translation_payload_rejects_malformed(text) -> None:
    with pytest.raises(ResponseParseError, match="clearer image"):
        parse_translation_payload(text)


def test_translation_client_sends_image_and_parses_reply(monkeypatch) -> None:
    fake = MagicMock()
    fake.models.generate_content.return_value = SimpleNamespace(
        text='{"englishText": "Exit", "teluguText": "బయటకు"}'
    )
    client = GeminiTranslationClient(model="test-model")
    monkeypatch.setattr(client, "_get_client", lambda: fake)

    res = client.translate(IMAGE)

    assert res.translated_text == "బయటకు"
    kwargs = fake.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["config"].response_mime_type == "application/json"
    image_part = kwargs["contents"][0]
    assert image_part.inline_data.data == IMAGE.data
    assert image_part.inline_data.mime_type == "image/jpeg"


def test_translation_client_wraps_transport_errors(monkeypatch) -> None:
    fake = MagicMock()
    fake.models.generate_content.side_effect = ConnectionError("connection reset")
    client = GeminiTranslationClient()
    monkeypatch.setattr(client, "_get_client", lambda: fake)

    with pytest.raises(RemoteServiceError, match="connection reset"):
        client.translate(IMAGE)


def test_extract_audio_payload_decodes_base64() -> None:
    pcm = b"\x01\x02" * 1000
    assert extract_audio_payload(_audio_response(base64.b64encode(pcm).decode("ascii"))) == pcm


def test_extract_audio_payload_accepts_raw_bytes() -> None:
    assert extract_audio_payload(_audio_response(b"\x00\x01")) == b"\x00\x01"


@pytest.mark.parametrize(
    "response",
    [
        SimpleNamespace(candidates=None),
        SimpleNamespace(candidates=[]),
        SimpleNamespace(candidates=[SimpleNamespace(content=None)]),
        SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[SimpleNamespace(inline_data=None)]))]),
        _audio_response(""),
    ],
)
def test_extract_audio_payload_missing_audio(response) -> None:
    with pytest.raises(EmptyAudioError):
        extract_audio_payload(response)


def test_speech_client_requests_voice(monkeypatch) -> None:
    fake = MagicMock()
    fake.models.generate_content.return_value = _audio_response(base64.b64encode(b"\x00\x00" * 4).decode())
    client = GeminiSpeechClient(voice_name="Puck")
    monkeypatch.setattr(client, "_get_client", lambda: fake)

    assert client.synthesize("హలో") == b"\x00\x00" * 4
    kwargs = fake.models.generate_content.call_args.kwargs
    assert "హలో" in kwargs["contents"]
    assert kwargs["config"].response_modalities == ["AUDIO"]
    voice = kwargs["config"].speech_config.voice_config.prebuilt_voice_config
    assert voice.voice_name == "Puck"


def test_speech_client_rejects_blank_text_without_calling_remote(monkeypatch) -> None:
    fake = MagicMock()
    client = GeminiSpeechClient()
    monkeypatch.setattr(client, "_get_client", lambda: fake)

    with pytest.raises(EmptyTextError):
        client.synthesize("   ")
    fake.models.generate_content.assert_not_called()


def test_speech_client_wraps_transport_errors(monkeypatch) -> None:
    fake = MagicMock()
    fake.models.generate_content.side_effect = TimeoutError("read timed out")
    client = GeminiSpeechClient()
    monkeypatch.setattr(client, "_get_client", lambda: fake)

    with pytest.raises(RemoteServiceError, match="timed out"):
        client.synthesize("హలో")
