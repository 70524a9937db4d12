"""Operations (scan, compare, transfer)"""
from .scanner import build_tree, build_trees
from .compare import compare_mtime, diff, diff_dirs, diff_files, tolerance_to_ns
from .transfer import TransferStats, apply

__all__ = [
    "build_tree", "build_trees",
    "compare_mtime", "diff", "diff_dirs", "diff_files", "tolerance_to_ns",
    "TransferStats", "apply",
]
