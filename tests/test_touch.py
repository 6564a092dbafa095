"""Tests for `tick.touch`.

The driver is exercised against real files in ``tmp_path`` with a fixed
clock injected, so the expected timestamps are deterministic.
"""
import os
from datetime import datetime

import pytest

from tick import set_times, touch
from tick.errors import (
    ConflictingTimeSource,
    InvalidDateString,
    ReferenceUnreadable,
    TargetUnopenable,
)
from tick.touch import TouchOptions

NOW = datetime(2030, 5, 6, 7, 8, 9)
OLD = (1_000_000_000, 1_100_000_000)


def fixed_now():
    return NOW


def _file(tmp_path, name="a.txt"):
    p = tmp_path / name
    p.write_text("x")
    os.utime(p, OLD)
    return p


def test_default_touch_uses_now(tmp_path):
    p = _file(tmp_path)
    assert touch.touch_file(p, TouchOptions(), now=fixed_now) == "touched"
    st = p.stat()
    assert st.st_atime == NOW.timestamp()
    assert st.st_mtime == NOW.timestamp()


def test_compact_time_with_access_only(tmp_path):
    p = _file(tmp_path)
    touch.touch_file(p, TouchOptions(compact_time="202401011200", access_only=True))
    st = p.stat()
    assert st.st_atime == datetime(2024, 1, 1, 12).timestamp()
    assert st.st_mtime == OLD[1]


def test_reference_copies_both_times(tmp_path):
    ref = tmp_path / "ref"
    ref.write_text("r")
    os.utime(ref, (1_200_000_000, 1_300_000_000))
    p = _file(tmp_path)
    touch.touch_file(p, TouchOptions(reference=ref))
    st = p.stat()
    assert st.st_atime == 1_200_000_000
    assert st.st_mtime == 1_300_000_000


def test_time_word_modify(tmp_path):
    p = _file(tmp_path)
    touch.touch_file(p, TouchOptions(date="2024-06-01 00:00:00", category="MTIME"))
    st = p.stat()
    assert st.st_atime == OLD[0]
    assert st.st_mtime == datetime(2024, 6, 1).timestamp()


def test_missing_file_is_created_empty_and_not_retouched(tmp_path):
    """A created file keeps its creation times even when -d is given."""
    p = tmp_path / "new.txt"
    result = touch.touch_file(p, TouchOptions(date="2001-01-01"), now=fixed_now)
    assert result == "created"
    assert p.exists()
    assert p.stat().st_size == 0
    assert p.stat().st_mtime != datetime(2001, 1, 1).timestamp()


def test_missing_file_with_no_create(tmp_path, capsys):
    p = tmp_path / "new.txt"
    result = touch.touch_file(p, TouchOptions(no_create=True, verbose=True))
    assert result == "skipped"
    assert not p.exists()
    assert "SKIPPED" in capsys.readouterr().out


def test_missing_file_does_not_resolve_source(tmp_path, monkeypatch):
    """Time options are only evaluated for files that already exist."""
    def boom(**kwargs):
        raise AssertionError("resolve should not be called")

    monkeypatch.setattr(touch.sources, "resolve", boom)
    touch.touch_file(tmp_path / "new.txt", TouchOptions(date="notadate"))


def test_dangling_symlink_is_a_target_with_no_dereference(tmp_path, monkeypatch):
    link = tmp_path / "link"
    link.symlink_to(tmp_path / "missing")

    called = {}

    def fake_apply(path, instruction, no_dereference=False, dry_run=False, fd=None):
        called['path'] = path
        called['no_deref'] = no_dereference
        return (0, 0)

    monkeypatch.setattr(set_times, "apply_instruction", fake_apply)
    result = touch.touch_file(link, TouchOptions(no_dereference=True), now=fixed_now)
    assert result == "touched"
    assert called['no_deref'] is True
    assert not (tmp_path / "missing").exists()


def test_error_aborts_remaining_paths(tmp_path):
    first = tmp_path / "first.txt"
    existing = _file(tmp_path, "existing.txt")
    last = tmp_path / "last.txt"
    with pytest.raises(InvalidDateString):
        touch.touch_paths([first, existing, last], TouchOptions(date="notadate"))
    assert first.exists()
    assert not last.exists()
    assert existing.stat().st_mtime == OLD[1]


def test_missing_reference_is_an_error(tmp_path):
    p = _file(tmp_path)
    with pytest.raises(ReferenceUnreadable):
        touch.touch_file(p, TouchOptions(reference=tmp_path / "nope"))


def test_conflicting_sources(tmp_path):
    p = _file(tmp_path)
    with pytest.raises(ConflictingTimeSource):
        touch.touch_file(p, TouchOptions(date="2024-01-01", compact_time="202401011200"))
    assert p.stat().st_mtime == OLD[1]


def test_touch_paths_in_order(tmp_path, capsys):
    a = _file(tmp_path, "a.txt")
    b = tmp_path / "b.txt"
    results = touch.touch_paths([a, b], TouchOptions(verbose=True), now=fixed_now)
    assert results == ["touched", "created"]
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith(f"TOUCHED {a}")
    assert out[1] == f"CREATED {b}"


def test_dry_run_changes_nothing(tmp_path):
    a = _file(tmp_path, "a.txt")
    b = tmp_path / "b.txt"
    touch.touch_paths([a, b], TouchOptions(dry_run=True), now=fixed_now)
    assert a.stat().st_mtime == OLD[1]
    assert not b.exists()


def test_flags_from_options():
    opts = TouchOptions(access_only=True, category="use", strict=True)
    flags = opts.flags
    assert flags.access_only is True
    assert flags.modify_only is False
    assert flags.category == "use"
    assert flags.strict is True


def test_reference_times_are_copied_exactly(tmp_path):
    ref = tmp_path / "ref"
    ref.write_text("r")
    os.utime(ref, ns=(1_200_000_000_123_456_789, 1_300_000_000_987_654_321))
    p = _file(tmp_path)
    touch.touch_file(p, TouchOptions(reference=ref))
    assert p.stat().st_atime_ns == ref.stat().st_atime_ns
    assert p.stat().st_mtime_ns == ref.stat().st_mtime_ns


def test_target_is_opened_before_time_is_resolved(tmp_path, monkeypatch):
    """An unopenable target is reported even when -d is also invalid."""
    p = _file(tmp_path)

    def refuse(path, flags, *args, **kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(set_times.os, "open", refuse)
    with pytest.raises(TargetUnopenable):
        touch.touch_file(p, TouchOptions(date="notadate"))
