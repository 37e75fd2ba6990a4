"""
Configuration models for ipc_metrics.

This module defines all configuration data models with validation and defaults.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class MetricBackend(str, Enum):
    """Metric backend types."""

    MEMORY = "memory"
    PROMETHEUS = "prometheus"
    CONSOLE = "console"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Default logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    file_path: Optional[Path] = Field(default=None, description="Log file path")
    max_file_size: int = Field(
        default=10 * 1024 * 1024, ge=1, description="Max log file size in bytes"
    )
    backup_count: int = Field(default=5, ge=0, description="Number of backup log files")
    enable_console: bool = Field(default=True, description="Enable console logging")
    enable_file: bool = Field(default=False, description="Enable file logging")
    enable_structured: bool = Field(
        default=False, description="Enable structured JSON logging"
    )

    # Component-specific log levels
    component_levels: Dict[str, LogLevel] = Field(
        default_factory=dict, description="Per-component log levels"
    )


class MetricsConfig(BaseModel):
    """Metrics registry configuration."""

    enabled: bool = Field(default=True, description="Enable metrics recording")
    backends: List[MetricBackend] = Field(
        default_factory=lambda: [MetricBackend.MEMORY],
        description="Backends that receive recorded timings",
    )
    max_points: int = Field(
        default=10000, ge=1, description="Points kept per series by the memory backend"
    )
    common_tags: Dict[str, str] = Field(
        default_factory=dict, description="Tags added to every recorded measurement"
    )

    @field_validator("common_tags", mode="before")
    @classmethod
    def stringify_tags(cls, v: object) -> object:
        """Tag values are always strings."""
        if isinstance(v, dict):
            return {str(key): str(value) for key, value in v.items()}
        return v


class GlobalConfig(BaseModel):
    """Global configuration container."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
    )
