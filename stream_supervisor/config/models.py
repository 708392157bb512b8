"""
Configuration models using Pydantic.

This module defines the configuration structure for the stream supervisor.
"""

from pydantic import BaseModel, Field, field_validator, model_validator


class SupervisorConfig(BaseModel):
    """Process supervisor configuration."""

    executable: str = Field(default="ffmpeg", description="Transcoder executable path")
    kill_timeout: float = Field(
        default=2.0, gt=0, description="Seconds between a stop request and a forced kill"
    )
    startup_warning_seconds: float = Field(
        default=5.0, gt=0, description="First-frame latency logged as a warning"
    )
    startup_error_seconds: float = Field(
        default=22.0, gt=0, description="First-frame latency logged as an error"
    )
    debug: bool = Field(default=False, description="Relay transcoder stderr to the log")
    log_level: str = Field(default="INFO", description="Log level for console output")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @model_validator(mode="after")
    def validate_thresholds(self) -> "SupervisorConfig":
        """Ensure the error threshold lies above the warning threshold."""
        if self.startup_error_seconds <= self.startup_warning_seconds:
            raise ValueError("startup_error_seconds must be greater than startup_warning_seconds")
        return self
