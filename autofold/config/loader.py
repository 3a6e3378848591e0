"""Configuration loading with layered merging.

Layers (later wins, deep-merged, lists replaced):
1. Global user config (~/.autofold/config.json)
2. Project local config (<cwd>/.autofold/config.json)

With no config files at all, pydantic defaults apply.
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from autofold.config.load_utils import load_json_file, load_json_file_optional
from autofold.config.schema import Config
from autofold.core.constants import AUTOFOLD_DIR_NAME, get_default_config_path
from autofold.core.errors import ConfigError, LoadError
from autofold.core.utils import deep_merge

logger = logging.getLogger(__name__)


def load_config(path: Path | None = None, cwd: Path | None = None) -> Config:
    """Load configuration from file(s).

    Args:
        path: Explicit config file path. If provided, skips layered loading.
        cwd: Working directory for the project-local layer. Defaults to Path.cwd().

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If a config file contains invalid JSON or the merged
            config fails validation.
    """
    if path is not None:
        return _load_from_path(path)

    effective_cwd = cwd or Path.cwd()
    layers = [
        get_default_config_path(),
        effective_cwd / AUTOFOLD_DIR_NAME / "config.json",
    ]

    merged: dict[str, Any] = {}
    loaded_from: list[Path] = []
    for layer in layers:
        if layer in loaded_from:
            # cwd is the home directory
            continue
        try:
            data = load_json_file_optional(layer, error_context="config")
        except LoadError as e:
            raise ConfigError(e.message) from e
        if data:
            merged = deep_merge(merged, data)
            loaded_from.append(layer)

    if not loaded_from:
        logger.debug("No config files found, using defaults")
        return Config()

    logger.info("Config loaded from: %s", [str(p) for p in loaded_from])
    try:
        return Config.model_validate(merged)
    except ValidationError as e:
        sources = ", ".join(str(p) for p in loaded_from)
        raise ConfigError(f"Config validation failed (merged from {sources}): {e}") from e


def _load_from_path(path: Path) -> Config:
    try:
        data = load_json_file(path, error_context="config")
    except LoadError as e:
        raise ConfigError(e.message) from e

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Config validation failed for {path}: {e}") from e
