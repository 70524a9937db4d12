"""
Ignore patterns handling (.bkignore file parsing)

The file uses gitignore syntax: later patterns override earlier ones,
a trailing "/" restricts a pattern to directories and "!" re-includes.
"""
from pathlib import Path, PurePath
from typing import Iterable, Optional

import pathspec

from ..config import IGNORE_FILE
from .logging import vlog, warn


class IgnoreFilter:
    """Compiled ignore patterns bound to the root they are relative to."""

    def __init__(self, root: Path, spec: Optional[pathspec.PathSpec] = None,
                 source: Optional[Path] = None):
        self.root = root
        self.spec = spec
        self.source = source

    @classmethod
    def from_lines(cls, root: Path, lines: Iterable[str]) -> "IgnoreFilter":
        return cls(root, pathspec.GitIgnoreSpec.from_lines(lines))

    def __bool__(self) -> bool:
        return self.spec is not None and len(self.spec) > 0

    def __len__(self) -> int:
        return len(self.spec) if self.spec is not None else 0

    def rebase(self, root: Path) -> "IgnoreFilter":
        """Same patterns, evaluated relative to another root."""
        return IgnoreFilter(root, self.spec, self.source)

    def _relative(self, path: PurePath) -> Optional[str]:
        try:
            path = path.relative_to(self.root)
        except ValueError:
            if path.is_absolute():
                return None
        rel = path.as_posix()
        if rel in ("", "."):
            return None
        return rel

    def matches(self, path: PurePath, is_dir: bool) -> bool:
        """True if ``path`` (absolute, or relative to the root) is ignored."""
        if not self:
            return False
        rel = self._relative(path)
        if rel is None:
            return False
        if is_dir:
            rel += "/"
        return self.spec.match_file(rel)


def load_ignore_filter(root: Path) -> IgnoreFilter:
    """
    Load the ignore file located directly inside ``root``.
    A missing file gives a filter that matches nothing; an unreadable or
    invalid file is reported and also gives a filter that matches nothing.
    """
    f = root / IGNORE_FILE
    if not f.is_file():
        vlog(f"[ignore] no {IGNORE_FILE} in {root}")
        return IgnoreFilter(root)
    try:
        lines = f.read_text(encoding="utf-8", errors="replace").splitlines()
        spec = pathspec.GitIgnoreSpec.from_lines(lines)
    except (OSError, ValueError) as exc:
        warn(f"[ignore] cannot load {f}, ignoring nothing: {exc}")
        return IgnoreFilter(root)
    return IgnoreFilter(root, spec, f)


def is_ignored(path: PurePath, is_dir: bool, ignore: Optional[IgnoreFilter]) -> bool:
    """Check a path against an optional filter"""
    return ignore is not None and ignore.matches(path, is_dir)
