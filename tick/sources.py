"""Resolve the point in time that tick writes to its targets.

Exactly one of a free-form date (``-d``), a compact stamp (``-t``) or a
reference file (``-r``) may pick the time; with none of them the current
time is used. A reference file is the only source that can carry two
different instants, one for access and one for modification.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Type, Union
from . import utils
from .errors import (
    ConflictingTimeSource,
    InvalidDateString,
    InvalidTimeString,
    ReferenceUnreadable,
    ResolveError,
)


@dataclass(frozen=True)
class Single:
    """One instant used for both access and modification time."""
    instant: datetime


@dataclass(frozen=True)
class Pair:
    """Independent access and modification instants copied from a file.

    ``access_ns`` and ``modify_ns`` hold the exact nanosecond values read
    from the file; the datetimes only go down to microseconds.
    """
    access: datetime
    modify: datetime
    access_ns: Optional[int] = field(default=None, compare=False)
    modify_ns: Optional[int] = field(default=None, compare=False)


TimeSource = Union[Single, Pair]


def ensure_single_source(
        date: Optional[str] = None,
        compact_time: Optional[str] = None,
        reference: Optional[Path] = None,
) -> None:
    """Raise :class:`ConflictingTimeSource` when more than one source is set."""
    given = [v for v in (date, compact_time, reference) if v is not None]
    if len(given) > 1:
        raise ConflictingTimeSource()


def read_reference_times(path: Path) -> Pair:
    """Return the access and modification times of ``path`` as a :class:`Pair`.

    Nothing is modified.

    Raises:
        ReferenceUnreadable: when the file is missing or can't be stat'ed.
    """
    try:
        st = Path(path).stat()
    except OSError as e:
        raise ReferenceUnreadable(path, e.strerror or str(e)) from e
    return Pair(
        datetime.fromtimestamp(st.st_atime),  # File Accessed
        datetime.fromtimestamp(st.st_mtime),  # File Modified
        access_ns=st.st_atime_ns,
        modify_ns=st.st_mtime_ns,
    )


def _convertible(dt: datetime, error: Type[ResolveError], value: str) -> datetime:
    # parsers accept instants that have no epoch representation
    try:
        dt.timestamp()
    except (OverflowError, OSError, ValueError) as e:
        raise error(value) from e
    return dt


def resolve(
        date: Optional[str] = None,
        compact_time: Optional[str] = None,
        reference: Optional[Path] = None,
        now: Callable[[], datetime] = datetime.now,
) -> TimeSource:
    """Turn the time-source options into a :data:`TimeSource`.

    Args:
        date: Free-form date string given with ``-d``.
        compact_time: ``[[CC]YY]MMDDhhmm[.ss]`` stamp given with ``-t``.
        reference: File whose times are copied, given with ``-r``.
        now: Clock read once when no source is given (and for the year
            of a short ``-t`` stamp). Inject a fixed callable in tests.

    Raises:
        ConflictingTimeSource: more than one source was given.
        InvalidDateString: ``date`` could not be parsed or converted to
            epoch seconds.
        InvalidTimeString: ``compact_time`` does not match the layout or
            can't be converted to epoch seconds.
        ReferenceUnreadable: ``reference`` could not be stat'ed.
    """
    ensure_single_source(date, compact_time, reference)

    if date is not None:
        dt = utils.parse_date(date)
        if dt is None:
            raise InvalidDateString(date)
        return Single(_convertible(dt, InvalidDateString, date))

    if compact_time is not None:
        try:
            dt = utils.parse_compact_time(compact_time, now=now)
        except ValueError as e:
            raise InvalidTimeString(compact_time) from e
        return Single(_convertible(dt, InvalidTimeString, compact_time))

    if reference is not None:
        return read_reference_times(reference)

    return Single(now())
