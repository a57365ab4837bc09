from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from teluvision.audio.playback import SoundDevicePlayer
from teluvision.remote.base import SpeechClient, TranslationClient
from teluvision.remote.factory import get_speech_client, get_translation_client


@dataclass(frozen=True)
class PipelineServices:
    translator: TranslationClient
    speech: SpeechClient
    player: SoundDevicePlayer
    sample_rate: int


def build_pipeline_services(args: Any) -> PipelineServices:
    provider = str(args.provider)
    timeout_sec = max(1.0, float(args.timeout_sec))
    translator = get_translation_client(
        provider,
        model=str(args.translate_model),
        api_key_env=str(args.api_key_env),
        timeout_sec=timeout_sec,
    )
    speech = get_speech_client(
        provider,
        model=str(args.tts_model),
        voice_name=str(args.voice_name),
        api_key_env=str(args.api_key_env),
        timeout_sec=timeout_sec,
        sample_rate=int(args.sample_rate),
    )
    player = SoundDevicePlayer(device=args.device)
    return PipelineServices(
        translator=translator,
        speech=speech,
        player=player,
        sample_rate=int(args.sample_rate),
    )
