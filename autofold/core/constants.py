"""Core constants and paths for autofold.

Single source of truth for global paths. Modules import from here instead of
hardcoding `Path.home() / ".autofold"`.
"""

from pathlib import Path

AUTOFOLD_DIR_NAME = ".autofold"

# Files shorter than this are never folded.
DEFAULT_MIN_LINES = 40

# Visible line budget the planner aims for.
DEFAULT_TARGET_LINES = 40

# Delays (seconds) between symbol fetch retries.
DEFAULT_RETRY_DELAYS = (0.1, 0.2, 0.5)


def get_autofold_dir() -> Path:
    """Get ~/.autofold (global config directory)."""
    return Path.home() / AUTOFOLD_DIR_NAME


def get_default_config_path() -> Path:
    """Get default config file path."""
    return get_autofold_dir() / "config.json"


def get_lock_dir() -> Path:
    """Get the directory IDE extensions write their lock files to."""
    return get_autofold_dir() / "ide"


def get_log_dir() -> Path:
    """Get default log directory."""
    return get_autofold_dir() / "logs"
