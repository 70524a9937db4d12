"""
Configuration constants for bkup
"""
import os
from pathlib import Path
from typing import Optional

# ══════════════════════════════════════════════════════════════════════════════
#  DEFAULTS  ── overridden by YAML config, environment, then CLI flags
# ══════════════════════════════════════════════════════════════════════════════

# mtime tolerance (milliseconds) — 2 s covers FAT timestamp granularity
ACCURACY_MS = 2000

# Honour the source's ignore file
USE_IGNORE = False

# Build the source and destination trees on two threads
PARALLEL_SCAN = True

VERBOSE = False

# Reserved name of the gitignore-style pattern file inside a root
IGNORE_FILE = ".bkignore"

ENV_CONFIG = "BKUP_CONFIG"
ENV_ACCURACY = "BKUP_ACCURACY"
ENV_VERBOSE = "BKUP_VERBOSE"

_TRUTHY = {"1", "true", "yes", "on"}


# ══════════════════════════════════════════════════════════════════════════════
#  GLOBAL CONFIG FILE  ── $XDG_CONFIG_HOME/bkup/config.yaml
# ══════════════════════════════════════════════════════════════════════════════

def get_global_config_dir() -> Path:
    """Return the global config directory for bkup."""
    xdg = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg:
        return Path(xdg) / "bkup"
    if os.name == "nt":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "bkup"
    return Path.home() / ".config" / "bkup"


def get_config_file() -> Path:
    """$BKUP_CONFIG if set, otherwise config.yaml in the global config dir."""
    override = os.environ.get(ENV_CONFIG, "")
    if override:
        return Path(override).expanduser()
    return get_global_config_dir() / "config.yaml"


def load_config_file(path: Optional[Path] = None) -> dict:
    """
    Load a YAML config file and return it as a dict.
    A missing, unreadable or malformed file yields {}.
    """
    import yaml

    cfg_path = path or get_config_file()
    if not cfg_path.is_file():
        return {}
    try:
        with cfg_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def get_defaults(data: dict) -> dict:
    """Extract the ``defaults`` mapping from loaded config data."""
    defaults = data.get("defaults", {})
    return dict(defaults) if isinstance(defaults, dict) else {}


def env_overrides(environ=None) -> dict:
    """Translate BKUP_* environment variables into config keys."""
    environ = os.environ if environ is None else environ
    result = {}
    if environ.get(ENV_ACCURACY, "").strip():
        result["accuracy"] = environ[ENV_ACCURACY].strip()
    if environ.get(ENV_VERBOSE, "").strip():
        result["verbose"] = environ[ENV_VERBOSE].strip().lower() in _TRUTHY
    return result


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


# ══════════════════════════════════════════════════════════════════════════════
#  APPLY CONFIG  ── mutates module-level variables
# ══════════════════════════════════════════════════════════════════════════════

def apply_config(values: dict):
    """
    Apply a config dict to the module-level defaults.
    Supports keys: accuracy (ms), ignore, parallel, verbose.
    Raises ValueError for a negative or non-integer accuracy.
    """
    global ACCURACY_MS, USE_IGNORE, PARALLEL_SCAN, VERBOSE

    if "accuracy" in values:
        ACCURACY_MS = parse_accuracy(values["accuracy"])
    if "ignore" in values:
        USE_IGNORE = _as_bool(values["ignore"])
    if "parallel" in values:
        PARALLEL_SCAN = _as_bool(values["parallel"])
    if "verbose" in values:
        VERBOSE = _as_bool(values["verbose"])


def load_and_apply(path: Optional[Path] = None, environ=None):
    """Layer global config then environment onto the module defaults."""
    apply_config(get_defaults(load_config_file(path)))
    apply_config(env_overrides(environ))


def parse_accuracy(value) -> int:
    """Parse a tolerance in milliseconds; must be a non-negative integer."""
    try:
        ms = int(str(value).strip())
    except ValueError:
        raise ValueError(f"accuracy must be a non-negative integer (ms), got {value!r}") from None
    if ms < 0:
        raise ValueError(f"accuracy must be a non-negative integer (ms), got {value!r}")
    return ms
