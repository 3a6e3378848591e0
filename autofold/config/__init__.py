"""Configuration loading and validation."""

from autofold.config.loader import load_config
from autofold.config.schema import (
    Config,
    FoldingConfig,
    IDEConfig,
    LoggingConfig,
    SkipConfig,
    UncommittedChangesConfig,
)

__all__ = [
    "Config",
    "FoldingConfig",
    "IDEConfig",
    "LoggingConfig",
    "SkipConfig",
    "UncommittedChangesConfig",
    "load_config",
]
