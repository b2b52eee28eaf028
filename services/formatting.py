"""Normalizes sun times and day lengths coming back from the sunrise sunset api.

The api answers in two modes (formatted=1 human strings, formatted=0 machine
values) and we can't tell which one produced a value, so every formatter is an
ordered list of matchers tried until one of them recognises the shape.
"""
import re, math, datetime as dt
import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

log = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"  # sentinel shown for anything we have no value for
DEFAULT_TIMEZONE = "Local Time"

#"7:15:18 AM" -> groups "7:15" and " AM"
CLOCK_WITH_SECONDS_RE = re.compile(r"^(\d{1,2}:\d{2}):\d{2}(\s*[AP]M)$", re.I)
#"2024-06-01T07:15:00+00:00", "2024-06-01 07:15:00Z", ...
TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{1,2}:\d{2}")
#leading integer, the rest of the string is ignored ("13.9" -> 13)
LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        text = value.strip()
        return not text or text == NOT_AVAILABLE
    return False


def _leading_int(text: str) -> Optional[int]:
    m = LEADING_INT_RE.match(text)
    return int(m.group(1)) if m else None


def _strip_seconds(text: str) -> Optional[str]:
    m = CLOCK_WITH_SECONDS_RE.match(text)
    if not m:
        return None
    return m.group(1) + m.group(2)


def _utc_clock(text: str) -> Optional[str]:
    if not TIMESTAMP_RE.match(text):
        return None
    raw = text[:-1] + "+00:00" if text[-1] in "Zz" else text
    try:
        instant = dt.datetime.fromisoformat(raw)
    except ValueError:
        return None
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=dt.timezone.utc)  # api emits utc instants
    return instant.astimezone(dt.timezone.utc).strftime("%I:%M %p")


def _canonical_duration(text: str) -> Optional[str]:
    return text if "h" in text and "m" in text else None


def _clock_duration(text: str) -> Optional[str]:
    if ":" not in text:
        return None
    hours, minutes = text.split(":")[:2]
    h, m = _leading_int(hours), _leading_int(minutes)
    if h is None or m is None:
        log.debug("non numeric day length component in %r", text)
        return NOT_AVAILABLE
    return f"{h}h {m}m"


def _seconds_duration(text: str) -> Optional[str]:
    seconds = _leading_int(text)
    if seconds is None or seconds < 0:
        return None
    hours, rest = divmod(seconds, 3600)
    return f"{hours}h {rest // 60}m"


TIME_MATCHERS = (_strip_seconds, _utc_clock)
DURATION_MATCHERS = (_canonical_duration, _clock_duration, _seconds_duration)


def format_time(value: Any) -> str:
    """Time of day -> display string, "N/A" when missing, input unchanged when unknown."""
    if _is_missing(value):
        return NOT_AVAILABLE
    text = str(value).strip()
    for matcher in TIME_MATCHERS:
        out = matcher(text)
        if out is not None:
            return out
    return str(value)


def format_day_length(value: Any) -> str:
    """Day length ("13h 17m", "13:17" or seconds) -> "Xh Ym"."""
    if _is_missing(value):
        return NOT_AVAILABLE
    log.debug("day length raw: %r (%s)", value, type(value).__name__)

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        #numbers are always a seconds count
        if isinstance(value, float) and not math.isfinite(value):
            return str(value)
        return _seconds_duration(str(int(value))) or str(value)

    text = str(value).strip()
    for matcher in DURATION_MATCHERS:
        out = matcher(text)
        if out is not None:
            return out
    return str(value)


@dataclass(frozen=True)
class DisplaySunRecord:
    """One day of normalized sun data, ready for a template."""

    sunrise: str
    sunset: str
    dawn: str
    dusk: str
    solar_noon: str
    day_length: str
    timezone: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def to_display_record(raw: Optional[Dict[str, Any]]) -> DisplaySunRecord:
    #raw is the "results" object of the api response
    raw = raw or {}
    timezone = raw.get("timezone")
    return DisplaySunRecord(
        sunrise=format_time(raw.get("sunrise")),
        sunset=format_time(raw.get("sunset")),
        dawn=format_time(raw.get("dawn")),
        dusk=format_time(raw.get("dusk")),
        solar_noon=format_time(raw.get("solar_noon")),
        day_length=format_day_length(raw.get("day_length")),
        timezone=timezone if isinstance(timezone, str) and timezone.strip() else DEFAULT_TIMEZONE,
    )
