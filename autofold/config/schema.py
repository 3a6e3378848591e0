"""Pydantic models for autofold configuration validation."""

import os
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from autofold.core.constants import (
    DEFAULT_MIN_LINES,
    DEFAULT_RETRY_DELAYS,
    DEFAULT_TARGET_LINES,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class FoldingConfig(BaseModel):
    """Planner budget and orchestration timing."""

    model_config = ConfigDict(extra="forbid")

    target_lines: int = Field(default=DEFAULT_TARGET_LINES, ge=1)
    """Visible lines the planner aims for."""

    min_lines: int = Field(default=DEFAULT_MIN_LINES, ge=0)
    """Files with fewer lines are left alone."""

    retry_delays: list[float] = list(DEFAULT_RETRY_DELAYS)
    """Seconds to wait before each of the three symbol fetch retries."""

    settle_delay: float = Field(default=0.3, ge=0)
    """Pause before planning so the editor finishes restoring its view."""

    debounce: float = Field(default=0.1, ge=0)
    """Window in which editor-change notifications are coalesced."""

    snap_to_provider: bool = True
    """Align planned fold starts with the host's own folding ranges."""

    @field_validator("retry_delays")
    @classmethod
    def validate_retry_delays(cls, v: list[float]) -> list[float]:
        if len(v) != 3:
            raise ValueError(f"retry_delays must have exactly 3 entries, got {len(v)}")
        if any(d < 0 for d in v):
            raise ValueError("retry_delays must be non-negative")
        return v


class UncommittedChangesConfig(BaseModel):
    """Keep lines with uncommitted git changes expanded."""

    model_config = ConfigDict(extra="forbid")

    enable: bool = True
    context_lines: int = Field(default=3, ge=0)
    """Extra lines around each change that also stay expanded."""


class SkipConfig(BaseModel):
    """Sources of line ranges that must never be folded, besides selections."""

    model_config = ConfigDict(extra="forbid")

    uncommitted_changes: UncommittedChangesConfig = UncommittedChangesConfig()
    diagnostics: bool = False
    """Keep lines with errors/warnings expanded."""


class IDEConfig(BaseModel):
    """IDE connection settings."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    auto_connect: bool = True
    connect_timeout: float = Field(default=10.0, gt=0)


class LoggingConfig(BaseModel):
    """Log file and console verbosity."""

    model_config = ConfigDict(extra="forbid")

    level: LogLevel = "INFO"
    console_level: LogLevel = "WARNING"
    log_dir: str | None = None
    """Directory for autofold.log; defaults to ~/.autofold/logs."""

    @field_validator("log_dir")
    @classmethod
    def expand_log_dir(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return os.path.abspath(os.path.expanduser(v))


class Config(BaseModel):
    """Root configuration model.

    Example config.json:
        {
            "folding": {"target_lines": 50, "retry_delays": [0.1, 0.3, 1.0]},
            "skip": {"uncommitted_changes": {"context_lines": 5}, "diagnostics": true},
            "logging": {"level": "DEBUG"}
        }
    """

    model_config = ConfigDict(extra="forbid")

    folding: FoldingConfig = FoldingConfig()
    skip: SkipConfig = SkipConfig()
    ide: IDEConfig = IDEConfig()
    logging: LoggingConfig = LoggingConfig()
