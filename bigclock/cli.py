import argparse
import logging
import os
import signal
import sys
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Dict, Optional, TextIO, Union

from pyfiglet import FontNotFound

from . import __version__
from . import timecalc
from .config import (
    get_color,
    get_command,
    get_font,
    get_log_path,
    get_timezone,
    get_tracker,
    load_config,
    save_config,
)
from .display import Display

log = logging.getLogger(__name__)

FAREWELL = "Got it! Exiting..."
LOG_HANDLER_NAME = "bigclock"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class ClockMode:
    pass


@dataclass(frozen=True)
class DateMode:
    pass


@dataclass(frozen=True)
class DurationMode:
    seconds: int


@dataclass(frozen=True)
class TargetTimeMode:
    target: datetime


Mode = Union[ClockMode, DateMode, DurationMode, TargetTimeMode]


def parse_args(argv=None):
    epilog = "Controls (countdown): space pause/resume, q quit. q also leaves the clock and date views."
    parser = argparse.ArgumentParser(
        prog="bigclock",
        description="Full-screen terminal clock and countdown timer",
        epilog=epilog,
    )
    parser.add_argument("-c", "--color", type=int, help="color index 1-9 for the digits (default 2)")
    parser.add_argument("-t", "--timezone", help=f"timezone for the clock (default {timecalc.DEFAULT_TIMEZONE})")
    parser.add_argument("-d", "--duration", help="countdown duration, e.g. 3h, 125m or 3:12:15")
    parser.add_argument("-D", "--date", action="store_true", help="show the date and weekday instead of the time")
    parser.add_argument("-x", "--command", help="command to execute when the countdown completes")
    parser.add_argument("-T", "--target-time", help="count down to HH:MM:SS today in the chosen timezone")
    parser.add_argument("--font", help="figlet font for the readout")
    parser.add_argument("--no-tracker", action="store_true", help="do not call the time tracker on start/pause/stop")
    parser.add_argument("--save", action="store_true", help="store --color, --timezone and --font as defaults")
    parser.add_argument("--version", action="version", version=f"bigclock {__version__}")
    return parser.parse_args(argv)


def select_mode(args: argparse.Namespace, tz: tzinfo, now: Optional[datetime] = None) -> Mode:
    """Pick the run mode: target time, then duration, then date, then clock."""
    if args.target_time:
        return TargetTimeMode(timecalc.resolve_target_time(args.target_time, tz, now))
    if args.duration:
        return DurationMode(timecalc.parse_duration(args.duration))
    if args.date:
        return DateMode()
    return ClockMode()


def _merge_defaults(args: argparse.Namespace, config: Dict[str, Any]) -> None:
    if args.color is None:
        args.color = get_color(config)
    if args.timezone is None:
        args.timezone = get_timezone(config) or timecalc.DEFAULT_TIMEZONE
    if args.font is None:
        args.font = get_font(config)
    if args.command is None:
        args.command = get_command(config)


def _save_defaults(args: argparse.Namespace, config: Dict[str, Any]) -> None:
    config["color"] = args.color
    config["timezone"] = args.timezone
    config["font"] = args.font
    save_config(config)


def setup_logging(stream: Optional[TextIO] = None) -> logging.Handler:
    """Log warnings to stderr, or everything to a file with BIGCLOCK_DEBUG=1.

    Calling it again replaces the handler installed by the previous call.
    """
    logger = logging.getLogger("bigclock")
    for handler in list(logger.handlers):
        if handler.get_name() == LOG_HANDLER_NAME:
            logger.removeHandler(handler)
            handler.close()

    if os.environ.get("BIGCLOCK_DEBUG") == "1":
        path = get_log_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
        level = logging.DEBUG
    else:
        handler = logging.StreamHandler(stream)
        level = logging.WARNING
    handler.set_name(LOG_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


def _error(message: str) -> int:
    print(f"bigclock: error: {message}", file=sys.stderr)
    return 1


def run_mode(mode: Mode, args: argparse.Namespace, tz: tzinfo, config: Dict[str, Any], display: Display) -> None:
    from .controls import Controls, InputWatcher, raw_terminal
    from .display import get_color as palette_color
    from .tracker import Tracker
    from . import ui

    color = palette_color(args.color)
    controls = Controls()
    signal.signal(signal.SIGTERM, lambda *_: controls.quit())

    with raw_terminal() as is_tty:
        if is_tty:
            InputWatcher(controls).start()
        if isinstance(mode, TargetTimeMode):
            ui.run_countdown_to_time(mode.target, display, controls, color, args.command)
        elif isinstance(mode, DurationMode):
            tracker = Tracker(None if args.no_tracker else get_tracker(config))
            ui.run_timer(mode.seconds, display, controls, color, tracker, args.command)
        elif isinstance(mode, DateMode):
            ui.run_date(tz, display, controls, color)
        else:
            ui.run_clock(tz, display, controls, color)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging()
    config = load_config()
    _merge_defaults(args, config)
    tz = timecalc.resolve_timezone(args.timezone)

    try:
        mode = select_mode(args, tz)
    except timecalc.FormatError as exc:
        return _error(str(exc))
    log.info("starting %s in %s", mode, tz)

    try:
        display = Display(font=args.font)
    except FontNotFound:
        return _error(f"unknown font {args.font!r}")

    if args.save:
        _save_defaults(args, config)

    try:
        run_mode(mode, args, tz, config, display)
    except KeyboardInterrupt:
        return 0
    print(FAREWELL)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
