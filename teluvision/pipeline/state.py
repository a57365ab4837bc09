from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from teluvision.contracts import AudioArtifact, TranslationResult


class Phase(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    TRANSLATING = "translating"
    SPEAKING = "speaking"
    COMPLETED = "completed"


PHASE_MESSAGES: dict[Phase, str] = {
    Phase.SCANNING: "Analyzing image and extracting text...",
    Phase.TRANSLATING: "Translating to natural Telugu...",
    Phase.SPEAKING: "Generating high-quality Telugu audio...",
}


class InvalidTransitionError(RuntimeError):
    pass


@dataclass(frozen=True)
class PipelineState:
    """
    Immutable snapshot of one pipeline run.
    Each transition returns a new snapshot; an error is only ever attached to IDLE.
    """
    phase: Phase = Phase.IDLE
    result: Optional[TranslationResult] = None
    audio: Optional[AudioArtifact] = None
    error: Optional[str] = None
    source_image: Optional[bytes] = None

    @property
    def is_processing(self) -> bool:
        return self.phase in (Phase.SCANNING, Phase.TRANSLATING, Phase.SPEAKING)

    def _require(self, *phases: Phase, event: str) -> None:
        if self.phase not in phases:
            raise InvalidTransitionError(f"cannot {event} from phase {self.phase.value}")

    def scanning(self, image: bytes) -> PipelineState:
        self._require(Phase.IDLE, Phase.COMPLETED, event="submit an image")
        return PipelineState(phase=Phase.SCANNING, source_image=bytes(image))

    def translating(self) -> PipelineState:
        self._require(Phase.SCANNING, event="start translating")
        return replace(self, phase=Phase.TRANSLATING)

    def speaking(self, result: TranslationResult) -> PipelineState:
        self._require(Phase.TRANSLATING, event="start speaking")
        return replace(self, phase=Phase.SPEAKING, result=result)

    def completed(self, audio: AudioArtifact) -> PipelineState:
        self._require(Phase.SPEAKING, event="complete")
        return replace(self, phase=Phase.COMPLETED, audio=audio)

    def failed(self, message: str) -> PipelineState:
        # Partial result/audio from the failed run never survive.
        return PipelineState(
            phase=Phase.IDLE,
            error=str(message or "An unexpected error occurred."),
            source_image=self.source_image,
        )

    @classmethod
    def fresh(cls) -> PipelineState:
        return cls()
