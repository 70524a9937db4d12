"""
Result of comparing a source tree against a destination tree.

A Delta mirrors the Entry shape but only keeps what differs:
  NotFound   source entry (file or whole subtree) missing from destination
  FileDelta  both files exist, mtimes differ beyond tolerance
  DirDelta   child name -> Delta, restricted to differing children
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, Mapping, Union

from .entries import DirEntry, Entry, FileEntry


class FileCmp(Enum):
    SAME = "same"
    OLDER = "older"
    NEWER = "newer"


@dataclass(frozen=True)
class NotFound:
    """``entry`` has no counterpart in the destination; it belongs at ``path``."""
    entry: Entry
    path: Path


@dataclass(frozen=True)
class FileDelta:
    source: FileEntry
    dest: FileEntry
    cmp: FileCmp

    def is_newer(self) -> bool:
        """True only if the source is newer than the destination."""
        return self.cmp is FileCmp.NEWER


@dataclass(frozen=True)
class DirDelta:
    source: DirEntry
    dest: DirEntry
    entries: Mapping[str, "Delta"] = field(default_factory=dict)

    def is_none(self) -> bool:
        """True when no child differs, i.e. both directories are the same."""
        return not self.entries


Delta = Union[NotFound, FileDelta, DirDelta]


def iter_deltas(delta: Delta) -> Iterator[Delta]:
    """Yield every node of ``delta``, depth first, children in name order."""
    yield delta
    if isinstance(delta, DirDelta):
        for name in sorted(delta.entries):
            yield from iter_deltas(delta.entries[name])


def summarize(delta: Delta) -> dict[str, int]:
    """Count the actionable nodes of a delta tree."""
    counts = dict(newer=0, older=0, missing_files=0, missing_dirs=0)
    for d in iter_deltas(delta):
        if isinstance(d, FileDelta):
            counts["newer" if d.is_newer() else "older"] += 1
        elif isinstance(d, NotFound):
            if isinstance(d.entry, DirEntry):
                counts["missing_dirs"] += 1
            else:
                counts["missing_files"] += 1
    return counts
