from __future__ import annotations

import json
import struct
from pathlib import Path

from teluvision.app import config as app_config
from teluvision.app import main as app_main

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _config(tmp_path: Path, **values) -> Path:
    cfg_path = tmp_path / "app.json"
    cfg_path.write_text(json.dumps({"provider": "stub", **values}), encoding="utf-8")
    return cfg_path


def test_main_writes_wav_with_stub_provider(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(app_config, "user_config_dir", lambda appname, appauthor=None: str(tmp_path))
    image = tmp_path / "sign.png"
    image.write_bytes(PNG)
    out = tmp_path / "out" / "te.wav"

    code = app_main.main([str(image), "--config", str(_config(tmp_path)), "--out", str(out)])

    assert code == 0
    captured = capsys.readouterr().out
    assert "Analyzing image and extracting text..." in captured
    assert "Generating high-quality Telugu audio..." in captured
    assert "---- EN ----" in captured
    assert "---- TE ----" in captured
    data = out.read_bytes()
    assert data[:4] == b"RIFF"
    assert struct.unpack_from("<I", data, 24)[0] == 24000
    assert struct.unpack_from("<I", data, 40)[0] == len(data) - 44

    log_lines = (tmp_path / "logs" / "teluvision.log").read_text(encoding="utf-8").splitlines()
    events = [json.loads(ln)["message"] for ln in log_lines if ln.strip()]
    assert "app_start" in events
    assert "pipeline_completed" in events


def test_main_reports_pipeline_error(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(app_config, "user_config_dir", lambda appname, appauthor=None: str(tmp_path))
    image = tmp_path / "blank.png"
    image.write_bytes(b"")
    out = tmp_path / "te.wav"

    code = app_main.main([str(image), "--config", str(_config(tmp_path)), "--out", str(out)])

    assert code == 1
    err = capsys.readouterr().err
    assert "Error: Could not use this image" in err
    assert "Hint: Take the photo again" in err
    assert not out.exists()


def test_main_missing_image(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(app_config, "user_config_dir", lambda appname, appauthor=None: str(tmp_path))
    code = app_main.main([str(tmp_path / "nope.jpg"), "--config", str(_config(tmp_path))])
    assert code == 1
    assert "cannot read image" in capsys.readouterr().err


def test_main_plays_audio_when_requested(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(app_config, "user_config_dir", lambda appname, appauthor=None: str(tmp_path))
    played: list[int] = []
    monkeypatch.setattr(
        app_main.SoundDevicePlayer,
        "play",
        lambda self, artifact, blocking=True: played.append(len(artifact.data)) or 0.0,
    )
    image = tmp_path / "sign.png"
    image.write_bytes(PNG)

    code = app_main.main(
        [str(image), "--config", str(_config(tmp_path)), "--out", str(tmp_path / "te.wav"), "--play"]
    )

    assert code == 0
    assert played == [(tmp_path / "te.wav").stat().st_size]


def test_main_save_config_persists_cli_options(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(app_config, "user_config_dir", lambda appname, appauthor=None: str(tmp_path))
    cfg_path = _config(tmp_path)
    image = tmp_path / "sign.png"
    image.write_bytes(PNG)

    code = app_main.main(
        [
            str(image),
            "--config",
            str(cfg_path),
            "--out",
            str(tmp_path / "te.wav"),
            "--voice-name",
            "Puck",
            "--save-config",
        ]
    )

    assert code == 0
    saved = json.loads(cfg_path.read_text(encoding="utf-8"))
    assert saved["voice_name"] == "Puck"
    assert saved["provider"] == "stub"
    assert saved["list_devices"] is False
    assert "image" not in saved
