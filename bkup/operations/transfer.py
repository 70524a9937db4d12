"""
Reconciliation (apply a Delta by copying source content onto the destination)
"""
from dataclasses import dataclass
from pathlib import Path

from ..core.delta import Delta, DirDelta, FileDelta, NotFound
from ..core.entries import DirEntry, Entry, FileEntry
from ..errors import CopyError
from ..utils.file_utils import copy_file, make_dir
from ..utils.logging import log, vlog


@dataclass
class TransferStats:
    files_copied: int = 0
    dirs_created: int = 0
    bytes_copied: int = 0
    skipped_older: int = 0


def apply(delta: Delta, dest_root: Path, dry_run: bool = False) -> TransferStats:
    """
    Walk ``delta`` and copy every missing entry and every file whose source
    is newer. Older destination files are left alone. Nothing outside
    ``dest_root`` is ever written. The first failure aborts; copies already
    made are kept.
    """
    stats = TransferStats()
    _apply(delta, Path(dest_root).resolve(), dry_run, stats)
    return stats


def _apply(delta: Delta, dest_root: Path, dry_run: bool, stats: TransferStats):
    if isinstance(delta, DirDelta):
        if delta.is_none():
            return
        for name in sorted(delta.entries):
            _apply(delta.entries[name], dest_root, dry_run, stats)
    elif isinstance(delta, FileDelta):
        if delta.is_newer():
            _copy_entry(delta.source, delta.dest.path, dest_root, dry_run, stats)
        else:
            vlog(f"  [KEEP-NEWER-DEST] {delta.dest}")
            stats.skipped_older += 1
    elif isinstance(delta, NotFound):
        _copy_entry(delta.entry, delta.path, dest_root, dry_run, stats)
    else:
        raise TypeError(f"not a delta: {delta!r}")


def _check_inside(path: Path, dest_root: Path):
    # a link at the target would be written through, wherever it points
    if path.is_symlink():
        raise CopyError(f"refusing to write through symlink {path}", path)
    resolved = path.parent.resolve() / path.name
    if resolved != dest_root and dest_root not in resolved.parents:
        raise CopyError(f"refusing to write {path} outside of {dest_root}", path)


def _copy_entry(entry: Entry, dest: Path, dest_root: Path, dry_run: bool,
                stats: TransferStats):
    _check_inside(dest, dest_root)
    if isinstance(entry, DirEntry):
        _copy_dir(entry, dest, dest_root, dry_run, stats)
    elif isinstance(entry, FileEntry):
        if dry_run:
            log(f"  [COPY-DRY] {entry.path} → {dest}")
        else:
            stats.bytes_copied += copy_file(entry.path, dest)
            log(f"  [COPY ✓] {entry.path} → {dest}")
        stats.files_copied += 1
    else:
        raise TypeError(f"not an entry: {entry!r}")


def _copy_dir(entry: DirEntry, dest: Path, dest_root: Path, dry_run: bool,
              stats: TransferStats):
    """Create ``dest`` and copy every scanned child of ``entry`` into it."""
    if dry_run:
        if not dest.is_dir():
            log(f"  [MKDIR-DRY] {dest}")
            stats.dirs_created += 1
    elif make_dir(dest):
        log(f"  [MKDIR ✓] {dest}")
        stats.dirs_created += 1
    for name in sorted(entry.entries):
        _copy_entry(entry.entries[name], dest / name, dest_root, dry_run, stats)
