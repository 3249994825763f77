"""
Configuration management for the IntelliHint backend.

Centralizes all configuration using Pydantic settings with environment variable support.
"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=5000,
        description="API server port"
    )
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # Generative model configuration
    gemini_api_key: str = Field(
        default="",
        description="Google Gemini API key (required at request time)"
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash-preview-05-20",
        description="Gemini model used for problem analysis"
    )
    gemini_api_base: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the Gemini REST API"
    )
    gateway_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Maximum attempts per analysis request"
    )
    gateway_backoff_base: float = Field(
        default=2.0,
        description="Backoff before retry k is base**k seconds"
    )
    gateway_timeout: float = Field(
        default=60.0,
        description="Per-attempt request timeout in seconds"
    )

    # Auth Configuration
    jwt_secret: str = Field(
        default="",
        description="Secret used to sign and verify bearer tokens"
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )
    jwt_expire_days: int = Field(
        default=30,
        description="Lifetime of issued tokens in days"
    )

    # Application Settings
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or create the global settings instance.

    Returns:
        Settings: Application settings
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings():
    """Reset the global settings instance (useful for testing)."""
    global _settings
    _settings = None


def validate_required_settings():
    """
    Validate that settings needed to serve any request are present.

    The Gemini key is checked per request instead, so a missing key surfaces
    as a 500 on the analysis endpoints rather than a failed boot.
    Raises ValueError if required settings are missing.
    """
    settings = get_settings()

    if not settings.jwt_secret:
        raise ValueError(
            "JWT_SECRET environment variable is required but not set. "
            "Bearer tokens cannot be verified without it."
        )

    return True
