"""
Shared helpers for building throw-away directory trees in tests.
"""
import os
from pathlib import Path

# An arbitrary fixed instant, in nanoseconds since the epoch
T0 = 1_600_000_000 * 1_000_000_000
MS = 1_000_000


def write_file(path: Path, content: str = "", mtime_ns=None) -> Path:
    """Create ``path`` (and its parents) and optionally pin its mtime."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    if mtime_ns is not None:
        set_mtime(path, mtime_ns)
    return path


def set_mtime(path: Path, mtime_ns: int):
    os.utime(path, ns=(mtime_ns, mtime_ns))


def get_mtime(path: Path) -> int:
    return path.stat().st_mtime_ns
