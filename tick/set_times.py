"""Helpers that write access and modification times to the filesystem.

This module is the only place tick changes files. Functions accept
``dry_run`` so the CLI and tests can show what would happen without
touching anything.
"""

import os
from contextlib import contextmanager
from pathlib import Path
from datetime import datetime
from typing import Iterator, Optional, Tuple
from .errors import CommitFailed, CreationFailed, TargetUnopenable
from .policy import ACCESS, MODIFY, TimestampInstruction


@contextmanager
def opened(path: Path, no_dereference: bool = False) -> Iterator[Optional[int]]:
    """Open ``path`` read-only for a timestamp update.

    Yields the file descriptor, which is closed on exit, also when the
    body raises. With ``no_dereference`` a symbolic link can't be opened
    itself, so the link is only checked with ``lstat`` and ``None`` is
    yielded.

    Raises:
        TargetUnopenable: the target can't be opened.
    """
    if no_dereference:
        try:
            os.lstat(path)
        except OSError as e:
            raise TargetUnopenable(path, e.strerror or str(e)) from e
        yield None
        return

    try:
        fd = os.open(path, os.O_RDONLY)
    except OSError as e:
        raise TargetUnopenable(path, e.strerror or str(e)) from e
    try:
        yield fd
    finally:
        os.close(fd)


def _new_times(st: os.stat_result, instruction: TimestampInstruction) -> Tuple[int, int]:
    access = instruction.last(ACCESS)
    modify = instruction.last(MODIFY)
    return (
        access.ns if access else st.st_atime_ns,
        modify.ns if modify else st.st_mtime_ns,
    )


def apply_instruction(
        path: Path,
        instruction: TimestampInstruction,
        no_dereference: bool = False,
        dry_run: bool = False,
        fd: Optional[int] = None,
):
    """Write the times chosen by ``instruction`` to ``path``.

    Args:
        path: Existing target.
        instruction: Result of :func:`tick.policy.decide`. Attributes it
            doesn't mention keep their current value.
        no_dereference: Update a symbolic link itself instead of the file
            it points to.
        dry_run: When True, print the change instead of performing it.
        fd: Descriptor from :func:`opened`. When omitted the target is
            opened here for the duration of the update.

    Returns:
        The ``(atime, mtime)`` pair in nanoseconds that was (or would be)
        written.

    Raises:
        TargetUnopenable: the target can't be opened or stat'ed.
        CommitFailed: the operating system rejected the new times.
    """
    if fd is None and not no_dereference:
        with opened(path) as fd:
            return apply_instruction(path, instruction, dry_run=dry_run, fd=fd)

    if no_dereference:
        try:
            st = os.lstat(path)
        except OSError as e:
            raise TargetUnopenable(path, e.strerror or str(e)) from e
    else:
        st = os.fstat(fd)
    times = _new_times(st, instruction)

    if dry_run:
        kind = "link " if no_dereference else ""
        print(f"DRY RUN: would set atime, mtime for {kind}{path} to {_describe(times)}")
        return times

    try:
        if no_dereference:
            os.utime(path, ns=times, follow_symlinks=False)
        else:
            os.utime(fd if os.utime in os.supports_fd else path, ns=times)
    except (NotImplementedError, OSError) as e:
        raise CommitFailed(path, getattr(e, "strerror", None) or str(e)) from e
    return times


def create_empty(path: Path, dry_run: bool = False):
    """Create ``path`` as an empty file.

    Raises:
        CreationFailed: the file could not be created.
    """
    if dry_run:
        print(f"DRY RUN: would create {path}")
        return
    try:
        with open(path, "ab"):
            pass
    except OSError as e:
        raise CreationFailed(path, e.strerror or str(e)) from e


def describe_ns(ns: int) -> str:
    """Format a nanosecond timestamp as a local ISO datetime."""
    return datetime.fromtimestamp(ns / 1e9).isoformat()


def _describe(times: Tuple[int, int]) -> str:
    return f"{describe_ns(times[0])}, {describe_ns(times[1])}"
