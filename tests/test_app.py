from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler

import app
import settings


def _config(monkeypatch, tmp_path, data: dict) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    monkeypatch.setenv(settings.CONFIG_PATH_ENV, str(path))
    return str(path)


def test_check_reports_blocked_urls(monkeypatch, tmp_path, capsys) -> None:
    _config(monkeypatch, tmp_path, {"patterns": ["https://x.com/a.gif"]})

    app.main(["check", "https://X.com/a.gif?utm_source=feed", "https://x.com/b.png"])

    out = capsys.readouterr().out
    assert "normalized: https://x.com/a.gif" in out
    assert out.count("blocked:    yes") == 1
    assert "gif-like:   no" in out


def test_add_merges_into_blocklist(monkeypatch, tmp_path, capsys) -> None:
    path = _config(monkeypatch, tmp_path, {"patterns": ["https://x.com/a.gif"], "replacement_mode": "hide"})

    app.main(["add", "https://x.com/a.gif/", "https://x.com/b.gif"])

    data = json.loads(open(path, encoding="utf-8").read())
    assert data["patterns"] == ["https://x.com/a.gif", "https://x.com/b.gif"]
    assert data["replacement_mode"] == "hide"
    assert "Added 1 pattern(s); 2 in blocklist." in capsys.readouterr().out


def test_no_command_prints_help(capsys) -> None:
    app.main([])
    assert "usage: gifblock" in capsys.readouterr().out


def test_log_handlers_follow_parsed_logging_config(tmp_path) -> None:
    log_path = tmp_path / "logs" / "gifblock.log"
    config = settings.LoggingConfig(
        enabled=True,
        console=False,
        file=settings.LogFileConfig(path=str(log_path), max_bytes=1024, backup_count=2),
    )

    handlers = app._log_handlers(config)
    try:
        assert len(handlers) == 1
        assert isinstance(handlers[0], RotatingFileHandler)
        assert handlers[0].maxBytes == 1024
        assert handlers[0].backupCount == 2
        assert log_path.parent.is_dir()
    finally:
        for handler in handlers:
            handler.close()


def test_console_only_logging_has_no_file_handler() -> None:
    handlers = app._log_handlers(settings.LoggingConfig(enabled=True))
    assert [type(handler) for handler in handlers] == [logging.StreamHandler]
