"""Pydantic models for configuration validation"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from logsink.core.constants import (
    DEFAULT_APP_NAME,
    DEFAULT_FILE_NAME,
    DEFAULT_FLUSH_INTERVAL_MS,
    DEFAULT_MAX_BYTES,
    Severity,
)

_VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "FATAL", "CRITICAL"]


def _validate_level(v: str) -> str:
    if v.upper() not in _VALID_LEVELS:
        raise ValueError(f"level must be one of {_VALID_LEVELS}")
    return Severity.from_name(v).value


class SinkConfig(BaseModel):
    """File sink configuration"""
    directory: str = ""  # empty = per-user app-data directory
    file_name: str = DEFAULT_FILE_NAME
    app_name: str = DEFAULT_APP_NAME
    max_bytes: int = Field(default=DEFAULT_MAX_BYTES, gt=0)
    min_level: str = "INFO"
    flush_interval_ms: int = Field(default=DEFAULT_FLUSH_INTERVAL_MS, ge=10, le=3_600_000)
    truncate_on_open: bool = False  # debug deployments only

    @field_validator("min_level")
    @classmethod
    def validate_min_level(cls, v: str) -> str:
        return _validate_level(v)

    @field_validator("file_name")
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("file_name must not be empty")
        return v

    @property
    def min_severity(self) -> Severity:
        return Severity(self.min_level)


class ConsoleConfig(BaseModel):
    """Optional console mirror of the log stream"""
    enabled: bool = False
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        return _validate_level(v)


class DashboardConfig(BaseModel):
    """Status dashboard configuration"""
    enabled: bool = False
    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=1, le=65535)


class LogSinkConfig(BaseModel):
    """Root configuration model"""
    sink: SinkConfig = Field(default_factory=SinkConfig)
    console: ConsoleConfig = Field(default_factory=ConsoleConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
    logger_name: Optional[str] = None  # None = root logger

    @model_validator(mode="after")
    def validate_config(self):
        """Cross-field validation"""
        if self.logger_name is not None and not self.logger_name.strip():
            raise ValueError("logger_name must be null or a non-empty logger name")
        return self
