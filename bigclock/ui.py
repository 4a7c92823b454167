import logging
from datetime import datetime, tzinfo
from typing import Callable, Optional

from . import timecalc
from .controls import Controls
from .display import PAUSED_COLOR, Color, Display
from .tracker import CommandError, Tracker, launch

log = logging.getLogger(__name__)

TICK_SECONDS = 1.0
DATE_REFRESH_SECONDS = 60.0

Wait = Callable[[float], bool]
Now = Callable[[], datetime]


def _call_hook(hook: Callable[[], None], name: str) -> None:
    try:
        hook()
    except CommandError as exc:
        log.warning("tracker %s hook failed: %s", name, exc)


def _run_completion(display: Display, command: Optional[str]) -> None:
    if not command:
        return
    display.message(f"Executing command: {command}")
    try:
        launch(command)
    except CommandError as exc:
        log.warning("completion command failed: %s", exc)


def run_timer(
    seconds: int,
    display: Display,
    controls: Controls,
    color: Color,
    tracker: Tracker,
    command: Optional[str] = None,
    wait: Optional[Wait] = None,
) -> int:
    """Count ``seconds`` down once per tick until quit; returns what is left.

    The countdown keeps going below zero. ``command`` runs once, the first
    time the count reaches zero or less.
    """
    if wait is None:
        wait = controls.wait

    _call_hook(tracker.resume, "continue")
    seconds_left = seconds
    was_paused = False
    command_fired = False

    try:
        while controls.running:
            text = timecalc.format_countdown(seconds_left)

            if controls.paused:
                display.show(text, PAUSED_COLOR)
                if not was_paused:
                    _call_hook(tracker.stop, "stop")
                    was_paused = True
                wait(TICK_SECONDS)
                continue
            elif was_paused:
                _call_hook(tracker.resume, "continue")
                was_paused = False

            display.show(text, color)
            wait(TICK_SECONDS)
            if not controls.paused:
                seconds_left -= 1

            if seconds_left <= 0 and not command_fired:
                if controls.running:
                    _run_completion(display, command)
                command_fired = True
    finally:
        _call_hook(tracker.stop, "stop")
    return seconds_left


def run_clock(
    tz: tzinfo,
    display: Display,
    controls: Controls,
    color: Color,
    now: Optional[Now] = None,
    wait: Optional[Wait] = None,
) -> None:
    if now is None:
        now = lambda: datetime.now(tz)
    if wait is None:
        wait = controls.wait

    while controls.running:
        current = now()
        display.show(timecalc.format_clock(current), color)
        display.footer(timecalc.format_date(current))
        # align redraws with wall-clock minute boundaries
        wait(timecalc.seconds_until_next_minute(current))


def run_date(
    tz: tzinfo,
    display: Display,
    controls: Controls,
    color: Color,
    now: Optional[Now] = None,
    wait: Optional[Wait] = None,
) -> None:
    if now is None:
        now = lambda: datetime.now(tz)
    if wait is None:
        wait = controls.wait

    while controls.running:
        display.show(timecalc.format_date(now()), color)
        wait(DATE_REFRESH_SECONDS)


def run_countdown_to_time(
    target: datetime,
    display: Display,
    controls: Controls,
    color: Color,
    command: Optional[str] = None,
    now: Optional[Now] = None,
    wait: Optional[Wait] = None,
) -> bool:
    """Show the time left until ``target``; returns False if quit early."""
    if now is None:
        now = lambda: datetime.now(target.tzinfo)
    if wait is None:
        wait = controls.wait

    while controls.running:
        remaining = target - now()
        if int(remaining.total_seconds()) <= 0:
            break
        display.show(timecalc.format_remaining(remaining), color)
        wait(TICK_SECONDS)
    else:
        return False

    _run_completion(display, command)
    return True
