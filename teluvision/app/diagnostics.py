from __future__ import annotations

from teluvision.audio.codec import DecodeError
from teluvision.audio.wav import EncodeError
from teluvision.imaging import ImageError
from teluvision.remote.base import (
    EmptyAudioError,
    EmptyTextError,
    PARSE_FAILED_MESSAGE,
    ResponseParseError,
)


def summarize_exception(detail: str, *, max_len: int = 220) -> str:
    text = str(detail or "").strip()
    if not text:
        return "An unexpected error occurred."
    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
    if not lines:
        return "An unexpected error occurred."
    for ln in reversed(lines):
        if ln.startswith("File "):
            continue
        if ln.startswith("^"):
            continue
        if ln.startswith("Traceback "):
            continue
        out = ln
        break
    else:
        out = lines[-1]
    if len(out) > max_len:
        return out[: max_len - 3].rstrip() + "..."
    return out


def user_message(exc: BaseException) -> str:
    """Turn a pipeline failure into the one-line message shown to the user."""
    if isinstance(exc, ResponseParseError):
        return summarize_exception(str(exc)) if str(exc) else PARSE_FAILED_MESSAGE
    if isinstance(exc, EmptyTextError):
        return "No readable text was found in the image. Please try a clearer image."
    if isinstance(exc, EmptyAudioError):
        return "No audio data received from the speech service. Please try again."
    if isinstance(exc, (DecodeError, EncodeError)):
        return "The speech service returned malformed audio. Please try again."
    if isinstance(exc, ImageError):
        return f"Could not use this image: {exc}."
    # RemoteServiceError and anything unexpected: last meaningful line of the detail.
    return summarize_exception(str(exc))


def hint_for_exception(summary: str) -> str:
    s = str(summary or "").lower()
    if "api key" in s or "api_key" in s or "permission_denied" in s:
        return "Set GEMINI_API_KEY (or the variable named by api_key_env) and retry."
    if "clearer image" in s or "no readable text" in s:
        return "Retake the photo closer to the text, with even lighting."
    if "image is empty" in s:
        return "Take the photo again or pick a different image file."
    if "timed out" in s or "timeout" in s:
        return "The AI service is slow to respond. Increase --timeout-sec or retry later."
    if "config file not found" in s:
        return "Configured JSON file is missing. Update the config path or restore the file."
    if "sounddevice" in s or "audio output" in s:
        return "Audio output failed. Check --list-devices and select a device id with --device."
    return "Check logs for full traceback."
