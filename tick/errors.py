"""
Exceptions raised by tick.
"""

from pathlib import Path


class TickError(Exception):
    """Base exception for every error tick reports to the user."""
    pass


class ResolveError(TickError):
    """The time source could not be resolved."""
    pass


class ConflictingTimeSource(ResolveError):
    """More than one of -d, -t and -r was given."""

    def __init__(self, message: str = "cannot use -d, -t or -r at the same time"):
        super().__init__(message)


class InvalidDateString(ResolveError):
    """The -d value could not be parsed."""

    def __init__(self, value: str):
        super().__init__(f"invalid date format {value!r}")
        self.value = value


class InvalidTimeString(ResolveError):
    """The -t value does not follow [[CC]YY]MMDDhhmm[.ss]."""

    def __init__(self, value: str):
        super().__init__(f"invalid date format {value!r}")
        self.value = value


class ReferenceUnreadable(ResolveError):
    """The -r file's times could not be read."""

    def __init__(self, path: Path, reason: str = ""):
        message = f"failed to get attributes of {str(path)!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class SelectionConflict(TickError):
    """-m and --time were combined while running in strict mode."""

    def __init__(self, word: str):
        super().__init__(f"-m cannot be combined with --time={word} in strict mode")
        self.word = word


class TargetUnopenable(TickError):
    def __init__(self, path: Path, reason: str = ""):
        message = f"cannot open {str(path)!r} for touching"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class CreationFailed(TickError):
    def __init__(self, path: Path, reason: str = ""):
        message = f"cannot touch {str(path)!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class CommitFailed(TickError):
    def __init__(self, path: Path, reason: str = ""):
        message = f"setting times of {str(path)!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path
