"""Utilities (logging, ignore patterns, file utilities)"""
from .logging import log, vlog, warn, error, set_verbose
from .ignore_patterns import IgnoreFilter, load_ignore_filter, is_ignored
from .file_utils import mtime_ns, copy_file, make_dir

__all__ = [
    "log", "vlog", "warn", "error", "set_verbose",
    "IgnoreFilter", "load_ignore_filter", "is_ignored",
    "mtime_ns", "copy_file", "make_dir",
]
