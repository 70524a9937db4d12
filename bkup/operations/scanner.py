"""
Tree scanning (build an Entry tree from a directory)
"""
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from ..core.entries import DirEntry, FileEntry
from ..errors import NotADirectory, ReadError
from ..utils.ignore_patterns import IgnoreFilter, is_ignored
from ..utils.logging import log, vlog


def build_tree(root: Path, ignore: Optional[IgnoreFilter] = None) -> DirEntry:
    """
    Visit ``root`` depth first and return its DirEntry.
    Ignored paths, symlinks and special files are left out of the tree.
    """
    if not root.is_dir():
        raise NotADirectory(root)
    if ignore is not None:
        ignore = ignore.rebase(root)
    return _visit_dir(root, ignore)


def _visit_dir(path: Path, ignore: Optional[IgnoreFilter]) -> DirEntry:
    entries = {}
    try:
        with os.scandir(path) as it:
            children = list(it)
    except OSError as exc:
        raise ReadError(f"cannot list directory {path}: {exc}", path) from exc

    for child in children:
        child_path = path / child.name
        try:
            # symlinks (to files or dirs) and special files are excluded
            if child.is_symlink():
                vlog(f"  [SKIP-LINK] {child_path}")
                continue
            is_dir = child.is_dir(follow_symlinks=False)
            is_file = not is_dir and child.is_file(follow_symlinks=False)
        except OSError as exc:
            raise ReadError(f"cannot read metadata of {child_path}: {exc}", child_path) from exc

        if not is_dir and not is_file:
            vlog(f"  [SKIP-SPECIAL] {child_path}")
            continue
        if is_ignored(child_path, is_dir, ignore):
            vlog(f"  [IGNORE] {child_path}")
            continue

        if is_dir:
            vlog(f"  [DIR] {child_path}")
            entries[child.name] = _visit_dir(child_path, ignore)
        else:
            entries[child.name] = FileEntry(child_path)

    return DirEntry(path, entries)


def build_trees(source: Path, dest: Path,
                ignore: Optional[IgnoreFilter] = None,
                parallel: bool = True) -> tuple[DirEntry, DirEntry]:
    """
    Build the source and destination trees, on two threads when ``parallel``.
    The trees share nothing until both are complete.
    """
    if not parallel:
        log(f"[scan] Exploring {source} …")
        src_tree = build_tree(source, ignore)
        log(f"[scan] Exploring {dest} …")
        return src_tree, build_tree(dest, ignore)

    log(f"[scan] Exploring {source} and {dest} …")
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="bkup-scan") as executor:
        src_future = executor.submit(build_tree, source, ignore)
        dst_future = executor.submit(build_tree, dest, ignore)
        return src_future.result(), dst_future.result()
