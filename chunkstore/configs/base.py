"""
Base configuration settings.

Shared .env handling plus the application-wide fields every settings class
inherits: the deployment environment reported by /health, FastAPI debug
mode and the root log level.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Base configuration class with application-wide settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Deployment name reported by GET /health",
    )
    debug: bool = Field(
        default=False,
        description="Run FastAPI in debug mode (tracebacks on unhandled errors)",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level passed to configure_logging",
    )
