"""Parsers for the two date-string grammars tick accepts.

``-d`` takes a free-form date which is tried against a few explicit
layouts and then handed to ``dateutil.parser``. ``-t`` takes the strict
POSIX ``[[CC]YY]MMDDhhmm[.ss]`` layout and nothing else.
"""

from datetime import datetime
import re
from typing import Callable, Optional
from dateutil import parser as dparser

EXPLICIT_FORMATS = [
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y:%m:%d %H:%M:%S",
    "%Y:%m:%d %H:%M:%S%z",
]

COMPACT_PATTERN = re.compile(r"([0-9]{8}|[0-9]{10}|[0-9]{12})(?:\.([0-9]{2}))?")
EPOCH_PATTERN = re.compile(r"@(-?[0-9]+(?:\.[0-9]+)?)")

# YY values at or above the pivot belong to the 1900s
CENTURY_PIVOT = 69


def parse_date(s: str) -> Optional[datetime]:
    """Parse a free-form ``-d`` date string.

    ``@<seconds>`` is read as a Unix timestamp. Otherwise explicit
    strptime layouts are tried first for speed/accuracy, then
    dateutil.parser.parse which handles month names, weekday names and
    timezone offsets. Returns a timezone-aware datetime when an offset is
    present, a naive local datetime otherwise, and ``None`` when the
    string can't be understood.
    """
    if not s or not isinstance(s, str):
        return None
    s = s.strip()
    # bare short numbers are ambiguous, dateutil would read them as a day
    if re.fullmatch(r"[0-9]{1,6}", s):
        return None

    m = EPOCH_PATTERN.fullmatch(s)
    if m:
        try:
            return datetime.fromtimestamp(float(m.group(1)))
        except (OverflowError, OSError, ValueError):
            return None

    for fmt in EXPLICIT_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            pass

    try:
        return dparser.parse(s)
    except (OverflowError, ValueError):
        return None


def parse_compact_time(
        s: str,
        now: Callable[[], datetime] = datetime.now
) -> datetime:
    """Parse the ``-t`` layout ``[[CC]YY]MMDDhhmm[.ss]``.

    Args:
        s: The stamp, e.g. ``"202401011200"`` or ``"01011200.30"``.
        now: Clock used for the year when only ``MMDDhhmm`` is given.

    Returns:
        A naive datetime in local time.

    Raises:
        ValueError: when the layout or any field is invalid.
    """
    m = COMPACT_PATTERN.fullmatch(s or "")
    if not m:
        raise ValueError(f"invalid compact time {s!r}")
    digits = m.group(1)
    seconds = int(m.group(2) or 0)

    if len(digits) == 12:
        year = int(digits[:4])
        digits = digits[4:]
    elif len(digits) == 10:
        yy = int(digits[:2])
        year = 1900 + yy if yy >= CENTURY_PIVOT else 2000 + yy
        digits = digits[2:]
    else:
        year = now().year

    month, day, hour, minute = (int(digits[i:i + 2]) for i in range(0, 8, 2))
    # leap second
    if seconds == 60:
        seconds = 59
    return datetime(year, month, day, hour, minute, seconds)
