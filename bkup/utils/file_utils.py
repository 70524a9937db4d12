"""
File utilities (metadata, copy)
"""
import os
import shutil
from pathlib import Path

from ..errors import CopyError, NotAFile, ReadError


def mtime_ns(path: Path) -> int:
    """Modification time of ``path`` in integer nanoseconds."""
    try:
        return os.stat(path, follow_symlinks=False).st_mtime_ns
    except OSError as exc:
        raise ReadError(f"cannot read metadata of {path}: {exc}", path) from exc


def copy_file(src: Path, dest: Path) -> int:
    """
    Copy bytes, modification time and permission bits of ``src`` to ``dest``.
    Returns the number of bytes copied.
    """
    if not src.is_file() or src.is_symlink():
        raise NotAFile(src)
    try:
        shutil.copy2(src, dest, follow_symlinks=False)
        return dest.stat().st_size
    except OSError as exc:
        raise CopyError(f"cannot copy {src} to {dest}: {exc}", src) from exc


def make_dir(path: Path) -> bool:
    """Create ``path``; an existing directory is fine. Returns True if created."""
    if path.is_dir():
        return False
    try:
        path.mkdir()
    except FileExistsError as exc:
        if path.is_dir():
            return False
        raise CopyError(f"cannot create directory {path}: {exc}", path) from exc
    except OSError as exc:
        raise CopyError(f"cannot create directory {path}: {exc}", path) from exc
    return True
