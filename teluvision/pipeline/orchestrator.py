from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Optional

from teluvision.app.diagnostics import user_message
from teluvision.audio.wav import pcm16_to_wav
from teluvision.imaging import prepare_image
from teluvision.pipeline.state import PipelineState
from teluvision.remote.base import SpeechClient, TranslationClient

DEFAULT_SAMPLE_RATE = 24000


class PipelineBusyError(RuntimeError):
    pass


def _log_event(logger: logging.Logger | None, level: int, event: str, **fields: Any) -> None:
    if logger is None:
        return
    logger.log(level, event, extra=fields)


class PipelineOrchestrator:
    """
    Runs image -> OCR+translation -> speech -> WAV for one image at a time.

    The presentation layer reads `state`, calls `submit_image` / `reset`,
    and may pass `on_state` to observe every snapshot while a run is in flight.
    """

    def __init__(
        self,
        *,
        translator: TranslationClient,
        speech: SpeechClient,
        sample_rate: Optional[int] = None,
        on_state: Optional[Callable[[PipelineState], None]] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.translator = translator
        self.speech = speech
        self.sample_rate = int(sample_rate or getattr(speech, "sample_rate", DEFAULT_SAMPLE_RATE))
        self.on_state = on_state
        self.logger = logger
        self._state = PipelineState.fresh()
        self._lock = threading.Lock()

    @property
    def state(self) -> PipelineState:
        return self._state

    def _publish(self, state: PipelineState) -> PipelineState:
        self._state = state
        _log_event(self.logger, logging.INFO, "pipeline_phase", phase=state.phase.value)
        if self.on_state is not None:
            self.on_state(state)
        return state

    def submit_image(self, image: bytes) -> PipelineState:
        if not self._lock.acquire(blocking=False):
            raise PipelineBusyError("A translation is already in progress.")
        try:
            return self._run(image)
        finally:
            self._lock.release()

    def reset(self) -> PipelineState:
        if not self._lock.acquire(blocking=False):
            raise PipelineBusyError("Cannot reset while a translation is in progress.")
        try:
            self._state = PipelineState.fresh()
            if self.on_state is not None:
                self.on_state(self._state)
            return self._state
        finally:
            self._lock.release()

    def _fail(self, exc: Exception, prior: PipelineState) -> PipelineState:
        # Stored before the observer runs so no failure can leave a processing phase behind.
        base = PipelineState.fresh() if self._state is prior else self._state
        self._state = base.failed(user_message(exc))
        _log_event(self.logger, logging.INFO, "pipeline_phase", phase=self._state.phase.value)
        if self.on_state is not None:
            try:
                self.on_state(self._state)
            except Exception:
                if self.logger is not None:
                    self.logger.exception("state_observer_failed", extra={"phase": self._state.phase.value})
        return self._state

    def _run(self, image: bytes) -> PipelineState:
        prior = self._state
        t_start = time.perf_counter()
        try:
            state = self._publish(self._state.scanning(image))
            payload = prepare_image(image)
            state = self._publish(state.translating())

            t0 = time.perf_counter()
            result = self.translator.translate(payload)
            _log_event(
                self.logger,
                logging.INFO,
                "translate_done",
                provider=self.translator.name,
                mime_type=payload.mime_type,
                image_bytes=len(payload.data),
                chars_en=len(result.source_text),
                chars_te=len(result.translated_text),
                ms=round((time.perf_counter() - t0) * 1000.0, 2),
            )
            state = self._publish(state.speaking(result))

            t0 = time.perf_counter()
            pcm16 = self.speech.synthesize(result.translated_text)
            audio = pcm16_to_wav(pcm16, self.sample_rate)
            _log_event(
                self.logger,
                logging.INFO,
                "speech_done",
                provider=self.speech.name,
                pcm_bytes=len(pcm16),
                duration_sec=round(audio.duration_sec, 3),
                ms=round((time.perf_counter() - t0) * 1000.0, 2),
            )
            state = self._publish(state.completed(audio))
        except Exception as e:
            if self.logger is not None:
                self.logger.exception(
                    "pipeline_failed",
                    extra={"phase": self._state.phase.value, "error_type": type(e).__name__},
                )
            return self._fail(e, prior)

        _log_event(
            self.logger,
            logging.INFO,
            "pipeline_completed",
            total_ms=round((time.perf_counter() - t_start) * 1000.0, 2),
        )
        return state
