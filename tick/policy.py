"""Decide which timestamps of a target are overwritten.

The decision combines ``-a``, ``-m`` and ``--time WORD`` into an ordered
list of :class:`SetTime` actions. The rows of :func:`decide` are checked
in order and the first match wins:

1. ``-a`` and ``-m``: access, then modify.
2. ``-a`` without ``--time``: access only.
3. ``--time`` without ``-m``: whatever the word selects.
4. ``-m`` without ``--time``: modify only.
5. ``-m`` with ``--time``: modify, then whatever the word selects. The
   second action can repeat the first; both are kept. In strict mode the
   combination is refused instead.
6. nothing: modify, then access.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple
from .errors import SelectionConflict
from .sources import Pair, Single, TimeSource

ACCESS = "access"
MODIFY = "modify"


class Category(Enum):
    ACCESS = "access"
    MODIFY = "modify"


CATEGORY_WORDS = {
    "access": Category.ACCESS,
    "atime": Category.ACCESS,
    "use": Category.ACCESS,
    "modify": Category.MODIFY,
    "mtime": Category.MODIFY,
}


def normalize_category(word: str) -> Category:
    """Map a ``--time`` word to its category, case-insensitively.

    Unknown words fall back to :attr:`Category.ACCESS`, the same as
    ``use``.
    """
    return CATEGORY_WORDS.get(word.lower(), Category.ACCESS)


@dataclass(frozen=True)
class SelectionFlags:
    access_only: bool = False
    modify_only: bool = False
    category: Optional[str] = None
    strict: bool = False


@dataclass(frozen=True)
class SetTime:
    """Set one attribute (``"access"`` or ``"modify"``) to ``when``.

    ``exact_ns`` overrides ``when`` at nanosecond precision when the
    instant was read from a file.
    """
    attribute: str
    when: datetime
    exact_ns: Optional[int] = field(default=None, compare=False)

    @property
    def ns(self) -> int:
        if self.exact_ns is not None:
            return self.exact_ns
        # naive datetimes are local time
        return round(self.when.timestamp() * 1_000_000) * 1000


@dataclass(frozen=True)
class TimestampInstruction:
    """Ordered, non-empty actions to apply to a single target."""
    actions: Tuple[SetTime, ...]

    def last(self, attribute: str) -> Optional[SetTime]:
        """Return the action that finally sets ``attribute``, if any."""
        found = None
        for action in self.actions:
            if action.attribute == attribute:
                found = action
        return found

    @property
    def access(self) -> Optional[datetime]:
        """Final access time, or ``None`` when access time is left alone."""
        action = self.last(ACCESS)
        return action.when if action else None

    @property
    def modify(self) -> Optional[datetime]:
        """Final modification time, or ``None`` when it is left alone."""
        action = self.last(MODIFY)
        return action.when if action else None


def pick(source: TimeSource, which: str) -> datetime:
    """Return the instant of ``source`` to use for ``which`` attribute."""
    if isinstance(source, Single):
        return source.instant
    if isinstance(source, Pair):
        return source.access if which == ACCESS else source.modify
    raise TypeError(f"not a time source: {source!r}")


def _set(source: TimeSource, which: str) -> SetTime:
    exact_ns = None
    if isinstance(source, Pair):
        exact_ns = source.access_ns if which == ACCESS else source.modify_ns
    return SetTime(which, pick(source, which), exact_ns)


def _by_category(source: TimeSource, word: str) -> SetTime:
    match normalize_category(word):
        case Category.ACCESS:
            return _set(source, ACCESS)
        case Category.MODIFY:
            return _set(source, MODIFY)


def decide(source: TimeSource, flags: SelectionFlags) -> TimestampInstruction:
    """Build the :class:`TimestampInstruction` for ``source`` and ``flags``.

    Raises:
        SelectionConflict: ``flags.strict`` is set and both ``-m`` and
            ``--time`` were given.
    """
    a, m, word = flags.access_only, flags.modify_only, flags.category

    if a and m:
        actions = (_set(source, ACCESS), _set(source, MODIFY))
    elif a and word is None:
        actions = (_set(source, ACCESS),)
    elif not m and word is not None:
        actions = (_by_category(source, word),)
    elif m and word is None:
        actions = (_set(source, MODIFY),)
    elif m:
        if flags.strict:
            raise SelectionConflict(word)
        actions = (_set(source, MODIFY), _by_category(source, word))
    else:
        actions = (_set(source, MODIFY), _set(source, ACCESS))
    return TimestampInstruction(actions)
