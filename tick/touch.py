"""Per-file driver that ties resolution, policy and the filesystem together.

For every path, an existing target gets its time source resolved, the
policy decided and the result written. A missing target is created empty
unless ``no_create`` is set; a freshly created file is not touched again.
The first error aborts the remaining paths.
"""

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional
from . import policy, set_times, sources


@dataclass(frozen=True)
class TouchOptions:
    """Every command-line option that influences a single target."""
    no_create: bool = False
    access_only: bool = False
    modify_only: bool = False
    date: Optional[str] = None
    compact_time: Optional[str] = None
    reference: Optional[Path] = None
    category: Optional[str] = None
    no_dereference: bool = False
    strict: bool = False
    dry_run: bool = False
    verbose: bool = False

    @property
    def flags(self) -> policy.SelectionFlags:
        return policy.SelectionFlags(
            access_only=self.access_only,
            modify_only=self.modify_only,
            category=self.category,
            strict=self.strict,
        )


def _exists(path: Path, no_dereference: bool) -> bool:
    # a dangling symlink is still a target with -n
    if no_dereference:
        return os.path.lexists(path)
    return os.path.exists(path)


def touch_file(
        path: Path,
        options: TouchOptions,
        now: Callable[[], datetime] = datetime.now,
) -> str:
    """Touch or create a single ``path``.

    Returns:
        ``"touched"``, ``"created"`` or ``"skipped"``.
    """
    path = Path(path)
    if not _exists(path, options.no_dereference):
        if options.no_create:
            if options.verbose:
                print(f"SKIPPED {path} (no-create)")
            return "skipped"
        set_times.create_empty(path, dry_run=options.dry_run)
        if options.verbose:
            print(f"CREATED {path}")
        return "created"

    # the target is opened before any time option is evaluated
    with set_times.opened(path, options.no_dereference) as fd:
        source = sources.resolve(
            date=options.date,
            compact_time=options.compact_time,
            reference=options.reference,
            now=now,
        )
        instruction = policy.decide(source, options.flags)
        atime, mtime = set_times.apply_instruction(
            path,
            instruction,
            no_dereference=options.no_dereference,
            dry_run=options.dry_run,
            fd=fd,
        )
    if options.verbose:
        print(
            f"TOUCHED {path} "
            f"atime={set_times.describe_ns(atime)} "
            f"mtime={set_times.describe_ns(mtime)}"
        )
    return "touched"


def touch_paths(
        paths: Iterable[Path],
        options: TouchOptions,
        now: Callable[[], datetime] = datetime.now,
) -> List[str]:
    """Run :func:`touch_file` over ``paths`` in order.

    Any :class:`tick.errors.TickError` propagates immediately and the
    remaining paths are left alone.
    """
    return [touch_file(p, options, now=now) for p in paths]
