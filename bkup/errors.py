"""
Error kinds raised by the tree builder, differencer and reconciler.

Every error is fatal: the run aborts on the first one, because a silently
incomplete backup is worse than a loud failure.
"""
from pathlib import Path
from typing import Optional


class BkupError(Exception):
    """Base class for every error raised by bkup."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class NotADirectory(BkupError):
    """A root path is missing or is not a directory."""

    def __init__(self, path: Path):
        super().__init__(f"not a directory: {path}", path)


class NotAFile(BkupError):
    """An expected file entry is not a regular file."""

    def __init__(self, path: Path):
        super().__init__(f"not a regular file: {path}", path)


class ReadError(BkupError):
    """Directory listing or metadata access failed."""


class FilenameError(BkupError):
    """A path has no final component to use as an entry name."""

    def __init__(self, path: Path):
        super().__init__(f"cannot get the file name of {path}", path)


class CopyError(BkupError):
    """A file or directory copy failed."""


class MismatchedEntryTypes(BkupError):
    """A file in one tree has the same name as a directory in the other."""

    def __init__(self, path: Path, other: Path):
        super().__init__(
            f"cannot compare different types of entries: {path} vs {other}", path
        )
        self.other = other
