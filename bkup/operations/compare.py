"""
Tree comparison (source tree vs destination tree -> Delta)
"""
from typing import Optional

from ..core.delta import Delta, DirDelta, FileCmp, FileDelta, NotFound
from ..core.entries import DirEntry, Entry, FileEntry
from ..errors import MismatchedEntryTypes
from ..utils.file_utils import mtime_ns
from ..utils.logging import vlog, warn


def tolerance_to_ns(tolerance: float) -> int:
    """Seconds -> integer nanoseconds. Negative tolerances are rejected."""
    if tolerance < 0:
        raise ValueError(f"tolerance must not be negative, got {tolerance!r}")
    return round(tolerance * 1_000_000_000)


def compare_mtime(source_ns: int, dest_ns: int, tolerance_ns: int) -> FileCmp:
    """
    Classify two modification times. A difference of at most
    ``tolerance_ns`` in either direction counts as the same.
    """
    if source_ns > dest_ns:
        if source_ns - tolerance_ns > dest_ns:
            return FileCmp.NEWER
    elif dest_ns > source_ns:
        if dest_ns - tolerance_ns > source_ns:
            return FileCmp.OLDER
    return FileCmp.SAME


def diff_files(source: FileEntry, dest: FileEntry, tolerance: float) -> Optional[FileDelta]:
    """FileDelta when the mtimes differ beyond tolerance, None otherwise."""
    return _diff_files(source, dest, tolerance_to_ns(tolerance))


def diff_dirs(source: DirEntry, dest: DirEntry, tolerance: float) -> DirDelta:
    """
    Compare every child of ``source`` against ``dest``. The returned
    DirDelta only keeps differing children; ``is_none()`` means same.
    Children present only in ``dest`` are never looked at.
    """
    return _diff_dirs(source, dest, tolerance_to_ns(tolerance))


def diff(source: Entry, dest: Entry, tolerance: float) -> Optional[Delta]:
    """
    Compare two entries of the same kind. Returns None for two files within
    tolerance; two directories always give a (possibly empty) DirDelta.
    """
    vlog(f"[diff] Comparing {source} to {dest} ({tolerance:g}s accuracy)")
    return _diff(source, dest, tolerance_to_ns(tolerance))


def _diff(source: Entry, dest: Entry, tol_ns: int) -> Optional[Delta]:
    if isinstance(source, DirEntry) and isinstance(dest, DirEntry):
        return _diff_dirs(source, dest, tol_ns)
    if isinstance(source, FileEntry) and isinstance(dest, FileEntry):
        return _diff_files(source, dest, tol_ns)
    warn(f"[diff] {source} and {dest} are not the same kind of entry")
    raise MismatchedEntryTypes(source.path, dest.path)


def _diff_files(source: FileEntry, dest: FileEntry, tol_ns: int) -> Optional[FileDelta]:
    if source.name != dest.name:
        warn(f"Comparing files with different names: {source} vs {dest}")
    cmp = compare_mtime(mtime_ns(source.path), mtime_ns(dest.path), tol_ns)
    if cmp is FileCmp.SAME:
        return None
    vlog(f"  [{cmp.name}] {source}")
    return FileDelta(source, dest, cmp)


def _diff_dirs(source: DirEntry, dest: DirEntry, tol_ns: int) -> DirDelta:
    entries = {}
    for name in sorted(source.entries):
        child = source.entries[name]
        other = dest.get(name)
        if other is None:
            vlog(f"  [MISSING] {child}")
            result = NotFound(child, dest.path / child.name)
        else:
            result = _diff(child, other, tol_ns)
        if result is None:
            continue
        if isinstance(result, DirDelta) and result.is_none():
            continue
        entries[name] = result
    return DirDelta(source, dest, entries)
