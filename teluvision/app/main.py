from __future__ import annotations

import sys
from pathlib import Path

from teluvision.app.config import resolve_args, save_user_config
from teluvision.app.diagnostics import hint_for_exception
from teluvision.app.logging_setup import setup_app_logger
from teluvision.app.services import build_pipeline_services
from teluvision.audio.playback import PlaybackError, SoundDevicePlayer
from teluvision.pipeline.orchestrator import PipelineOrchestrator
from teluvision.pipeline.state import PHASE_MESSAGES, PipelineState


def _print_phase(state: PipelineState) -> None:
    message = PHASE_MESSAGES.get(state.phase)
    if message:
        print(message)


def main(argv: list[str] | None = None) -> int:
    args = resolve_args(argv)
    logger, _log_dir, log_path = setup_app_logger(debug=bool(args.debug))
    logger.info(
        "app_start",
        extra={"config_path": str(getattr(args, "config", "")), "provider": str(args.provider)},
    )

    if args.save_config:
        values = {k: v for k, v in vars(args).items() if k != "list_devices"}
        saved = save_user_config(values, config_path=args.config)
        logger.info("settings_saved", extra={"config_path": str(saved)})
        print(f"Saved settings: {saved}")

    if args.list_devices:
        print(SoundDevicePlayer.list_devices())
        return 0

    image_path = Path(args.image)
    try:
        image = image_path.read_bytes()
    except OSError as e:
        logger.error("image_read_failed", extra={"path": str(image_path), "detail": str(e)})
        print(f"Error: cannot read image {image_path}: {e.strerror or e}", file=sys.stderr)
        return 1

    services = build_pipeline_services(args)
    orchestrator = PipelineOrchestrator(
        translator=services.translator,
        speech=services.speech,
        sample_rate=services.sample_rate,
        on_state=_print_phase,
        logger=logger,
    )
    state = orchestrator.submit_image(image)

    if state.error:
        print(f"Error: {state.error}", file=sys.stderr)
        print(f"Hint: {hint_for_exception(state.error)}", file=sys.stderr)
        print(f"Logs: {log_path}", file=sys.stderr)
        return 1

    if args.show_en:
        print("---- EN ----")
        print(state.result.source_text)
    print("---- TE ----")
    print(state.result.translated_text)

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(state.audio.data)
    print(f"Saved WAV: {out_path} ({state.audio.duration_sec:.1f}s)")
    logger.info("audio_saved", extra={"path": str(out_path), "bytes": len(state.audio.data)})

    if args.play:
        try:
            services.player.play(state.audio)
        except PlaybackError as e:
            logger.exception("playback_failed")
            print(f"Playback failed: {e}", file=sys.stderr)
            print(f"Hint: {hint_for_exception(str(e))}", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
