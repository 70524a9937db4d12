"""Core functionality (tree model, delta model). The engine lives in core.engine."""
from .entries import Entry, FileEntry, DirEntry, walk, count_entries
from .delta import Delta, DirDelta, FileCmp, FileDelta, NotFound, iter_deltas, summarize

__all__ = [
    "Entry", "FileEntry", "DirEntry", "walk", "count_entries",
    "Delta", "DirDelta", "FileCmp", "FileDelta", "NotFound", "iter_deltas", "summarize",
]
