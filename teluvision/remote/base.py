from __future__ import annotations
from abc import ABC, abstractmethod
from teluvision.contracts import ImagePayload, TranslationResult

PARSE_FAILED_MESSAGE = "Failed to parse AI response. Please try again with a clearer image."


class RemoteServiceError(RuntimeError):
    """Transport or service-side failure of a remote model call."""


class ResponseParseError(RuntimeError):
    """Remote reply does not match the expected englishText/teluguText structure."""


class EmptyAudioError(RuntimeError):
    """Remote speech reply carried no audio payload."""


class EmptyTextError(ValueError):
    pass


class TranslationClient(ABC):
    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def translate(self, image: ImagePayload) -> TranslationResult: ...


class SpeechClient(ABC):
    # Raw PCM16 mono bytes returned by synthesize() are at this rate.
    sample_rate: int = 24000

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def synthesize(self, text: str) -> bytes: ...
