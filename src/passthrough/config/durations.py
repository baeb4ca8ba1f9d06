"""Humantime-style duration strings such as ``500ms`` or ``1m 30s``."""

import math
import re
from datetime import timedelta

# Unit name -> length in microseconds
UNITS: dict[str, float] = {
    "ns": 1e-3, "nsec": 1e-3, "nanos": 1e-3,
    "us": 1.0, "µs": 1.0, "usec": 1.0, "micros": 1.0,
    "ms": 1e3, "msec": 1e3, "millis": 1e3,
    "s": 1e6, "sec": 1e6, "secs": 1e6, "second": 1e6, "seconds": 1e6,
    "m": 60e6, "min": 60e6, "mins": 60e6, "minute": 60e6, "minutes": 60e6,
    "h": 3600e6, "hr": 3600e6, "hrs": 3600e6, "hour": 3600e6, "hours": 3600e6,
    "d": 86400e6, "day": 86400e6, "days": 86400e6,
}

_PART = re.compile(r"(\d+(?:\.\d+)?)\s*([a-zµ]+)")


def parse_duration(text: str) -> timedelta:
    """Parse a duration string into a timedelta.

    Args:
        text: One or more ``<number><unit>`` groups, optionally separated by
            whitespace. A bare number is read as seconds.

    Returns:
        The summed duration

    Raises:
        ValueError: If the string is empty, contains an unknown unit, or is
            too large for a timedelta
    """
    text = text.strip()
    if not text:
        raise ValueError("empty duration")

    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        if seconds < 0:
            raise ValueError(f"negative duration: {text!r}")
        return _to_timedelta(seconds * 1e6, text)

    micros = 0.0
    pos = 0
    for match in _PART.finditer(text):
        if text[pos:match.start()].strip():
            raise ValueError(f"invalid duration: {text!r}")
        number, unit = match.groups()
        if unit not in UNITS:
            raise ValueError(f"unknown time unit {unit!r} in {text!r}")
        micros += float(number) * UNITS[unit]
        pos = match.end()

    if pos == 0 or text[pos:].strip():
        raise ValueError(f"invalid duration: {text!r}")
    return _to_timedelta(micros, text)


def _to_timedelta(micros: float, text: str) -> timedelta:
    if not math.isfinite(micros):
        raise ValueError(f"duration out of range: {text!r}")
    try:
        return timedelta(microseconds=micros)
    except OverflowError:
        raise ValueError(f"duration out of range: {text!r}") from None


def format_duration(value: timedelta) -> str:
    """Format a timedelta the way parse_duration reads it back."""
    micros = (value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds
    if micros == 0:
        return "0s"

    parts = []
    for unit, size in (("d", 86400_000_000), ("h", 3600_000_000), ("m", 60_000_000),
                       ("s", 1_000_000), ("ms", 1_000), ("us", 1)):
        count, micros = divmod(micros, size)
        if count:
            parts.append(f"{count}{unit}")
    return " ".join(parts)
