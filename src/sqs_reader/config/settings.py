"""
Module: settings.py
Description: Reader configuration using pydantic-settings.

Configures all reader settings from environment variables with
validation and defaults. Supports .env files for local development.
"""

import re
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Reader settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="SQS Reader", description="Application name")
    app_version: str = Field(default="0.3.0", description="Application version")
    log_level: str = Field(default="INFO", description="Logging level")

    # AWS settings
    aws_region: str = Field(default="us-east-1", description="AWS region")
    aws_endpoint_url: Optional[str] = Field(
        default=None,
        description="Override SQS/CloudWatch endpoint (e.g. LocalStack)"
    )

    # Declared queues
    input_queue_name: str = Field(
        default="sqs-reader-input",
        description="Name of the declared input queue"
    )
    output_queue_name: str = Field(
        default="sqs-reader-output",
        description="Name of the declared output queue"
    )

    # Reader settings
    peek_visibility_timeout: int = Field(
        default=0,
        ge=0,
        le=43200,
        description="Visibility timeout in seconds when reading without draining"
    )
    drain_visibility_timeout: int = Field(
        default=60,
        ge=0,
        le=43200,
        description="Visibility timeout in seconds when draining"
    )
    receive_wait_time_seconds: Optional[int] = Field(
        default=None,
        ge=0,
        le=20,
        description="Long polling wait time per receive; unset uses the queue's own setting"
    )
    max_stale_receives: int = Field(
        default=10,
        ge=1,
        description="Consecutive receives without a new message before giving up"
    )

    # Retry settings
    max_retry_attempts: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Attempts per AWS call on throttling or transient errors"
    )
    retry_backoff_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Exponential backoff multiplier between attempts"
    )

    # Metrics settings
    metrics_enabled: bool = Field(default=False, description="Publish CloudWatch metrics")
    metrics_namespace: str = Field(default="SQSReader", description="CloudWatch namespace")

    @field_validator('input_queue_name', 'output_queue_name')
    @classmethod
    def validate_queue_names(cls, v: str) -> str:
        """Validate SQS queue names."""
        if not v or not isinstance(v, str):
            raise ValueError("Queue name must be a non-empty string")

        if not re.match(r'^[A-Za-z0-9_-]{1,80}(\.fifo)?$', v):
            raise ValueError(
                "Queue name must contain only letters, numbers, hyphens, and underscores"
            )

        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
