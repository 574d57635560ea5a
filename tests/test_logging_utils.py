import json

from delve.logging_utils import get_logger


def test_key_value_format(monkeypatch, capsys):
    monkeypatch.setenv("DELVE_LOG_LEVEL", "debug")
    monkeypatch.delenv("DELVE_LOG_JSON", raising=False)
    get_logger("dungeon.test").info(event="room split", count=3, skipped=None)
    out = capsys.readouterr().out.strip()
    assert out.startswith("level=info ts=")
    assert "event=room_split" in out
    assert "count=3" in out
    assert "logger=dungeon.test" in out
    assert "skipped" not in out


def test_json_mode(monkeypatch, capsys):
    monkeypatch.setenv("DELVE_LOG_LEVEL", "info")
    monkeypatch.setenv("DELVE_LOG_JSON", "1")
    get_logger("dungeon.test").warn(event="bridge_missing", unreached=2)
    rec = json.loads(capsys.readouterr().out.strip())
    assert rec["level"] == "warn"
    assert rec["event"] == "bridge_missing"
    assert rec["unreached"] == 2
    assert isinstance(rec["ts"], int)


def test_level_threshold(monkeypatch, capsys):
    monkeypatch.setenv("DELVE_LOG_LEVEL", "warn")
    log = get_logger("dungeon.test")
    log.debug(event="hidden")
    log.info(event="hidden")
    log.error(event="shown")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "event=shown" in captured.err


def test_loggers_are_cached():
    assert get_logger("a") is get_logger("a")
    assert get_logger("a") is not get_logger("b")
