import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

log = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Europe/Belgrade"
FALLBACK_TIMEZONE = "Asia/Manila"


class FormatError(ValueError):
    """Raised for a malformed duration or target-time string."""


def _parse_int(text: str, field: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise FormatError(f"Invalid number for {field}: {text!r}") from None


def parse_duration(text: str) -> int:
    """Parse ``3h``, ``125m`` or ``3:12:15`` into a number of seconds.

    Fields of the colon form are not clamped, so ``0:90:0`` is 90 minutes.
    """
    if text.endswith("h"):
        return _parse_int(text[:-1], "hours") * 3600
    if text.endswith("m"):
        return _parse_int(text[:-1], "minutes") * 60
    parts = text.split(":")
    if len(parts) == 3:
        hours = _parse_int(parts[0], "hours")
        minutes = _parse_int(parts[1], "minutes")
        seconds = _parse_int(parts[2], "seconds")
        return hours * 3600 + minutes * 60 + seconds
    raise FormatError(f"Invalid duration format: {text!r}")


def _format_hms(total: int) -> str:
    hours = total // 3600
    minutes = (total % 3600) // 60
    seconds = total % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_countdown(seconds_left: int) -> str:
    if seconds_left < 0:
        return "-" + _format_hms(abs(seconds_left))
    return _format_hms(seconds_left)


def format_remaining(delta: timedelta) -> str:
    return _format_hms(max(0, int(delta.total_seconds())))


def format_clock(now: datetime) -> str:
    return now.strftime("%H:%M")


def format_date(now: datetime) -> str:
    return now.strftime("%m.%d %a")


def seconds_until_next_minute(now: datetime) -> int:
    return 60 - now.second


def resolve_timezone(name: Optional[str]) -> tzinfo:
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            log.debug("unknown timezone %r, using %s", name, FALLBACK_TIMEZONE)
    return ZoneInfo(FALLBACK_TIMEZONE)


def parse_time_of_day(text: str) -> time:
    try:
        return datetime.strptime(text, "%H:%M:%S").time()
    except ValueError:
        raise FormatError(f"Invalid target time format: {text!r}") from None


def _combine_local(day: date, clock: time, tz: tzinfo) -> datetime:
    candidate = datetime.combine(day, clock, tzinfo=tz)
    if candidate.utcoffset() != candidate.replace(fold=1).utcoffset():
        # Either a repeated wall time (DST end) or a skipped one (DST start).
        roundtrip = candidate.astimezone(timezone.utc).astimezone(tz)
        if roundtrip.replace(tzinfo=None) == candidate.replace(tzinfo=None):
            raise FormatError(f"Ambiguous local time {clock} on {day}")
        raise FormatError(f"Nonexistent local time {clock} on {day}")
    return candidate


def resolve_target_time(text: str, tz: tzinfo, now: Optional[datetime] = None) -> datetime:
    """Resolve ``HH:MM:SS`` against today's date in ``tz``.

    The result may already be in the past; the countdown then ends at once.
    """
    clock = parse_time_of_day(text)
    if now is None:
        now = datetime.now(tz)
    today = now.astimezone(tz).date()
    return _combine_local(today, clock, tz)
