from __future__ import annotations

import argparse
import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from teluvision.remote.gemini import DEFAULT_TRANSLATE_MODEL, DEFAULT_TTS_MODEL, DEFAULT_VOICE

DEFAULTS: dict[str, Any] = {
    "provider": "gemini",
    "translate_model": DEFAULT_TRANSLATE_MODEL,
    "tts_model": DEFAULT_TTS_MODEL,
    "voice_name": DEFAULT_VOICE,
    "sample_rate": 24000,
    "timeout_sec": 60.0,
    "api_key_env": "GEMINI_API_KEY",
    "out": "telugu.wav",
    "play": False,
    "device": None,
    "show_en": True,
    "debug": False,
    "list_devices": False,
}
CONFIG_KEYS: tuple[str, ...] = tuple(DEFAULTS.keys())
PROVIDERS: tuple[str, ...] = ("gemini", "stub")


@dataclass(frozen=True)
class AppPaths:
    config_dir: Path
    config_path: Path


def app_paths() -> AppPaths:
    config_dir = Path(user_config_dir("TeluVision", "TeluVision"))
    return AppPaths(config_dir=config_dir, config_path=config_dir / "config.json")


def _load_json_dict(path: Path) -> dict[str, Any]:
    # Accept UTF-8 with or without BOM for Windows-edited config files.
    with path.open("r", encoding="utf-8-sig") as f:
        loaded = json.load(f)
    if not isinstance(loaded, dict):
        raise ValueError(f"config must be a JSON object: {path}")
    return loaded


def _write_json_dict(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
        f.write("\n")


def _known_only(payload: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key in CONFIG_KEYS:
        if key in payload:
            out[key] = payload[key]
    return out


def load_default_config() -> dict[str, Any]:
    return copy.deepcopy(DEFAULTS)


def load_user_config(config_path: str | None = None) -> tuple[dict[str, Any], Path]:
    defaults = load_default_config()
    if config_path:
        chosen = Path(config_path)
        if not chosen.exists():
            raise SystemExit(f"Config file not found: {chosen}")
    else:
        chosen = ensure_user_config_exists(defaults)

    merged = dict(defaults)
    merged.update(_known_only(_load_json_dict(chosen)))
    provider = str(merged.get("provider", "")).lower().strip()
    if provider not in PROVIDERS:
        raise SystemExit(
            f"Unknown provider {merged.get('provider')!r} in {chosen} "
            f"(use one of: {', '.join(PROVIDERS)})"
        )
    merged["provider"] = provider
    return merged, chosen


def save_user_config(values: dict[str, Any], config_path: str | None = None) -> Path:
    payload = _known_only(values)
    defaults = load_default_config()
    if config_path:
        path = Path(config_path)
        existing = _known_only(_load_json_dict(path)) if path.exists() else {}
    else:
        path = ensure_user_config_exists(defaults)
        existing = _known_only(_load_json_dict(path))

    merged = dict(defaults)
    merged.update(existing)
    merged.update(payload)
    _write_json_dict(path, _known_only(merged))
    return path


def ensure_user_config_exists(defaults: dict[str, Any] | None = None) -> Path:
    paths = app_paths()
    if paths.config_path.exists():
        return paths.config_path
    _write_json_dict(paths.config_path, defaults or load_default_config())
    return paths.config_path


def resolve_defaults(config_path: str | None = None) -> tuple[dict[str, Any], Path]:
    return load_user_config(config_path=config_path)


def parser_with_defaults(defaults: dict[str, Any]) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="teluvision",
        description="Read English text from an image, translate it to Telugu and speak it.",
    )
    p.add_argument("image", nargs="?", default=None, help="image file with English text (JPEG/PNG/WEBP/HEIC)")
    p.add_argument("--config", default=None, help="JSON config path (CLI flags override config)")
    p.add_argument(
        "--provider",
        default=defaults["provider"],
        choices=list(PROVIDERS),
        help="remote AI provider (stub = offline, deterministic)",
    )
    p.add_argument("--translate-model", default=defaults["translate_model"], help="OCR + translation model")
    p.add_argument("--tts-model", default=defaults["tts_model"], help="text-to-speech model")
    p.add_argument("--voice-name", default=defaults["voice_name"], help="prebuilt TTS voice")
    p.add_argument("--sample-rate", type=int, default=defaults["sample_rate"], help="TTS PCM sample rate (Hz)")
    p.add_argument("--timeout-sec", type=float, default=defaults["timeout_sec"], help="remote call timeout")
    p.add_argument(
        "--api-key-env",
        default=defaults["api_key_env"],
        help="environment variable holding the API key",
    )
    p.add_argument("--out", default=defaults["out"], help="output WAV path")
    p.add_argument(
        "--play",
        action=argparse.BooleanOptionalAction,
        default=defaults["play"],
        help="play the Telugu audio after synthesis",
    )
    p.add_argument("--device", type=int, default=defaults["device"], help="sounddevice output device id")
    p.add_argument("--list-devices", action="store_true", help="print audio devices and exit")
    p.add_argument("--debug", action="store_true", help="also echo log events to stderr")
    p.add_argument(
        "--save-config",
        action="store_true",
        help="persist these options to the config file before running",
    )
    p.add_argument(
        "--show-en",
        action=argparse.BooleanOptionalAction,
        default=defaults["show_en"],
        help="print the extracted English text too",
    )
    return p


def resolve_args(argv: list[str] | None = None) -> argparse.Namespace:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", default=None)
    pre_args, _ = pre.parse_known_args(argv)
    defaults, _ = resolve_defaults(config_path=pre_args.config)
    parser = parser_with_defaults(defaults)
    args = parser.parse_args(argv)
    if defaults.get("debug"):
        args.debug = True
    if defaults.get("list_devices"):
        args.list_devices = True
    if not args.list_devices and not args.image:
        parser.error("the following arguments are required: image")
    return args
