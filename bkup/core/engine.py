"""
Update engine - scan, compare and reconcile orchestration
"""
from pathlib import Path
from typing import Optional

from ..errors import BkupError
from ..operations.compare import diff_dirs
from ..operations.scanner import build_trees
from ..operations.transfer import TransferStats, apply
from ..utils.ignore_patterns import IgnoreFilter, load_ignore_filter
from ..utils.logging import error, log, set_verbose
from .delta import DirDelta, summarize
from .entries import count_entries


def plan_update(source: Path, dest: Path, accuracy: float = 2.0,
                ignore: bool = False, parallel: bool = True) -> DirDelta:
    """
    Scan both roots and return the delta of ``source`` against ``dest``.
    ``accuracy`` is the mtime tolerance in seconds.
    """
    ignore_filter: Optional[IgnoreFilter] = None
    if ignore:
        ignore_filter = load_ignore_filter(source)
        log(f"[ignore] {len(ignore_filter)} pattern(s) loaded from {ignore_filter.source or source}")

    src_tree, dst_tree = build_trees(source, dest, ignore_filter, parallel)
    n_files, n_dirs = count_entries(src_tree)
    log(f"[scan] source: {n_files} file(s), {n_dirs - 1} dir(s)")
    n_files, n_dirs = count_entries(dst_tree)
    log(f"[scan] destination: {n_files} file(s), {n_dirs - 1} dir(s)")

    log("[diff] Computing difference …")
    return diff_dirs(src_tree, dst_tree, accuracy)


def run_update(source: Path, dest: Path, accuracy: float = 2.0,
               ignore: bool = False, dry_run: bool = False,
               verbose: bool = False, parallel: bool = True) -> TransferStats:
    """
    Bring ``dest`` up to date with ``source``: copy whatever is missing from
    ``dest`` or strictly newer in ``source``. Never deletes anything.
    Raises BkupError on the first failure.
    """
    set_verbose(verbose)

    print(f"\n{'=' * 64}")
    print(f"  Update  {dest}")
    print(f"   from   {source}")
    print(f"{'=' * 64}")
    if dry_run:
        print("  *** DRY-RUN — no files will be changed ***")
    print()

    try:
        delta = plan_update(source, dest, accuracy, ignore, parallel)
        counts = summarize(delta)
        log(f"[plan] newer={counts['newer']}  missing_files={counts['missing_files']}  "
            f"missing_dirs={counts['missing_dirs']}  dest_newer={counts['older']}")

        if delta.is_none():
            log("[update] Nothing to do — already up to date ✓")
            return TransferStats()

        log("[update] Updating destination …")
        stats = apply(delta, dest, dry_run)
    except BkupError as exc:
        error(f"Update failed: {exc}")
        raise

    print()
    print(f"{'─' * 64}")
    print(" SUMMARY")
    print(f"  Files copied  : {stats.files_copied}")
    print(f"  Dirs created  : {stats.dirs_created}")
    print(f"  Bytes copied  : {stats.bytes_copied}")
    print(f"  Dest newer    : {stats.skipped_older}")
    print(f"{'─' * 64}")
    return stats
