"""
In-memory snapshot of a directory tree.

An Entry is either a FileEntry (leaf) or a DirEntry (named children).
Trees are built once by the scanner and never mutated afterwards; a rescan
produces a new tree.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Mapping, Union

from ..errors import FilenameError


def _name_of(path: Path) -> str:
    name = path.name
    if not name:
        raise FilenameError(path)
    return name


@dataclass(frozen=True)
class FileEntry:
    """A regular file. No content or metadata is cached."""
    path: Path

    @property
    def name(self) -> str:
        return _name_of(self.path)

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class DirEntry:
    """A directory and its scanned children, keyed by file name."""
    path: Path
    entries: Mapping[str, "Entry"] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return _name_of(self.path)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: str) -> bool:
        return name in self.entries

    def get(self, name: str):
        return self.entries.get(name)

    def __str__(self) -> str:
        return str(self.path)


Entry = Union[FileEntry, DirEntry]


def walk(entry: Entry) -> Iterator[Entry]:
    """Yield ``entry`` and all its descendants, depth first."""
    yield entry
    if isinstance(entry, DirEntry):
        for name in sorted(entry.entries):
            yield from walk(entry.entries[name])


def count_entries(entry: Entry) -> tuple[int, int]:
    """Return (files, directories) below and including ``entry``."""
    files = dirs = 0
    for e in walk(entry):
        if isinstance(e, DirEntry):
            dirs += 1
        else:
            files += 1
    return files, dirs
