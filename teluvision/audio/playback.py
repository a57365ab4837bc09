from __future__ import annotations

import io
import wave
from typing import Optional

import numpy as np

from teluvision.contracts import AudioArtifact


class PlaybackError(RuntimeError):
    pass


def wav_to_float32(artifact: AudioArtifact) -> tuple[np.ndarray, int]:
    """
    Decode a PCM16 WAV artifact into float32 frames in [-1.0, 1.0).
    Returns (frames, sample_rate); frames has shape (n_frames, channels).
    """
    try:
        with wave.open(io.BytesIO(artifact.data), "rb") as wf:
            if wf.getsampwidth() != 2:
                raise PlaybackError(f"unsupported sample width: {wf.getsampwidth()} bytes")
            channels = wf.getnchannels()
            sample_rate = wf.getframerate()
            raw = wf.readframes(wf.getnframes())
    except (wave.Error, EOFError) as e:
        raise PlaybackError(f"not a playable WAV artifact: {e}") from e

    samples = np.frombuffer(raw, dtype="<i2").astype(np.float32) / 32768.0
    return samples.reshape(-1, channels), sample_rate


class SoundDevicePlayer:
    """
    Plays WAV artifacts on an output device via the `sounddevice` package (PortAudio).
    """

    def __init__(self, *, device: Optional[int] = None) -> None:
        self.device = device

    @staticmethod
    def list_devices() -> str:
        try:
            import sounddevice as sd
        except ImportError as e:
            raise PlaybackError(
                "sounddevice is not installed. Install with: python -m pip install sounddevice"
            ) from e
        return str(sd.query_devices())

    def play(self, artifact: AudioArtifact, *, blocking: bool = True) -> float:
        """Play the artifact and return its duration in seconds."""
        frames, sample_rate = wav_to_float32(artifact)
        if frames.size == 0:
            return 0.0

        try:
            import sounddevice as sd
        except ImportError as e:
            raise PlaybackError(
                "sounddevice is not installed. Install with: python -m pip install sounddevice"
            ) from e

        try:
            sd.play(frames, samplerate=sample_rate, device=self.device)
            if blocking:
                sd.wait()
        except Exception as e:
            raise PlaybackError(
                "Failed to open audio output. Try --list-devices and select a device id with --device."
            ) from e
        return frames.shape[0] / float(sample_rate)
