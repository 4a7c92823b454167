import io
import logging
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from bigclock import cli, timecalc, ui
from bigclock.tracker import CommandError

TZ = ZoneInfo("Europe/Belgrade")
NOW = datetime(2024, 6, 1, 9, 30, 0, tzinfo=TZ)


@pytest.fixture
def runs(monkeypatch):
    calls = []
    monkeypatch.setattr(cli, "load_config", lambda: {})
    monkeypatch.setattr(cli, "run_mode", lambda mode, args, tz, config, display: calls.append((mode, args, tz)))
    return calls


def _mode(*argv):
    return cli.select_mode(cli.parse_args(list(argv)), TZ, NOW)


def test_default_mode_is_clock():
    assert _mode() == cli.ClockMode()


def test_mode_precedence():
    assert _mode("-D") == cli.DateMode()
    assert _mode("-D", "-d", "3h") == cli.DurationMode(10800)
    target = datetime(2024, 6, 1, 18, 0, 0, tzinfo=TZ)
    assert _mode("-D", "-d", "3h", "-T", "18:00:00") == cli.TargetTimeMode(target)


def test_duration_mode_parses_all_forms():
    assert _mode("--duration", "1m") == cli.DurationMode(60)
    assert _mode("--duration", "0:0:5") == cli.DurationMode(5)


def test_bad_duration_raises_format_error():
    with pytest.raises(timecalc.FormatError):
        _mode("--duration", "5x")


def test_main_runs_selected_mode_and_says_goodbye(runs, capsys):
    assert cli.main(["--duration", "3h", "--color", "4"]) == 0
    (mode, args, tz), = runs
    assert mode == cli.DurationMode(10800)
    assert args.color == 4
    assert tz == ZoneInfo("Europe/Belgrade")
    assert capsys.readouterr().out.strip() == cli.FAREWELL


def test_main_rejects_bad_duration_before_rendering(runs, capsys):
    assert cli.main(["--duration", "5x"]) == 1
    assert runs == []
    captured = capsys.readouterr()
    assert "Invalid duration format" in captured.err
    assert captured.out == ""


def test_main_rejects_bad_target_time(runs, capsys):
    assert cli.main(["--target-time", "25:00"]) == 1
    assert runs == []
    assert "Invalid target time format" in capsys.readouterr().err


def test_main_rejects_unknown_font(runs, capsys):
    assert cli.main(["--font", "no-such-figlet-font"]) == 1
    assert runs == []
    assert "unknown font" in capsys.readouterr().err


def test_unknown_timezone_falls_back(runs):
    assert cli.main(["--timezone", "Nowhere/Special"]) == 0
    (_, _, tz), = runs
    assert tz == ZoneInfo(timecalc.FALLBACK_TIMEZONE)


def test_config_supplies_defaults_and_flags_override(monkeypatch, runs):
    monkeypatch.setattr(cli, "load_config", lambda: {"color": 6, "timezone": "Asia/Tokyo", "command": "beep"})
    assert cli.main([]) == 0
    assert cli.main(["-c", "1", "-x", "say hi"]) == 0
    (_, first, first_tz), (_, second, _) = runs
    assert (first.color, first.command) == (6, "beep")
    assert first_tz == ZoneInfo("Asia/Tokyo")
    assert (second.color, second.command) == (1, "say hi")


def test_save_writes_defaults(monkeypatch, runs):
    saved = {}
    monkeypatch.setattr(cli, "save_config", saved.update)
    assert cli.main(["--save", "-c", "3", "-t", "Asia/Tokyo"]) == 0
    assert saved == {"color": 3, "timezone": "Asia/Tokyo", "font": "block"}


def test_keyboard_interrupt_exits_cleanly(monkeypatch, capsys):
    def interrupted(*args):
        raise KeyboardInterrupt

    monkeypatch.setattr(cli, "load_config", lambda: {})
    monkeypatch.setattr(cli, "run_mode", interrupted)
    assert cli.main([]) == 0
    assert capsys.readouterr().out == ""


def _bigclock_handlers():
    return [h for h in logging.getLogger("bigclock").handlers if h.get_name() == cli.LOG_HANDLER_NAME]


def test_failed_tracker_warning_reaches_stderr_without_debug(monkeypatch):
    monkeypatch.delenv("BIGCLOCK_DEBUG", raising=False)
    err = io.StringIO()
    cli.setup_logging(err)

    def missing():
        raise CommandError("timew not found")

    ui._call_hook(missing, "continue")
    assert "WARNING" in err.getvalue()
    assert "timew not found" in err.getvalue()


def test_debug_logging_goes_to_file(monkeypatch, tmp_path):
    monkeypatch.setenv("BIGCLOCK_DEBUG", "1")
    monkeypatch.setattr(cli, "get_log_path", lambda: tmp_path / "bigclock" / "bigclock.log")
    handler = cli.setup_logging()
    logging.getLogger("bigclock.ui").debug("tick")
    handler.flush()
    assert "tick" in (tmp_path / "bigclock" / "bigclock.log").read_text(encoding="utf-8")


def test_setup_logging_does_not_pile_up_handlers(monkeypatch):
    monkeypatch.delenv("BIGCLOCK_DEBUG", raising=False)
    cli.setup_logging(io.StringIO())
    cli.setup_logging(io.StringIO())
    cli.setup_logging(io.StringIO())
    assert len(_bigclock_handlers()) == 1
