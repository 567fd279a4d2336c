"""
Application configuration settings.
Manages all environment variables and constants.
"""

import os
from typing import Optional

from aurora_qa.exceptions import ConfigurationError


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings configuration."""

    # Application metadata
    APP_NAME: str = "Aurora Member QA"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = "Rule-based question answering over member messages"

    # Server configuration
    SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
    SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8000"))
    WORKERS: int = int(os.getenv("WORKERS", "1"))

    # External API configuration
    EXTERNAL_API_BASE_URL: Optional[str] = os.getenv("EXTERNAL_API_BASE_URL")
    EXTERNAL_API_ENDPOINT: str = "/messages/"
    EXTERNAL_API_TIMEOUT: float = float(os.getenv("EXTERNAL_API_TIMEOUT", "5"))

    # Pagination / retry
    FETCH_BATCH_SIZE: int = int(os.getenv("FETCH_BATCH_SIZE", "100"))
    FETCH_MAX_RETRIES: int = int(os.getenv("FETCH_MAX_RETRIES", "3"))
    FETCH_RETRY_DELAY: float = float(os.getenv("FETCH_RETRY_DELAY", "1.0"))

    # Cache
    PREFETCH_ON_STARTUP: bool = _as_bool(os.getenv("PREFETCH_ON_STARTUP", "false"))

    # Logging configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("LOG_FILE", "")

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = ENVIRONMENT == "development"

    @property
    def is_configured(self) -> bool:
        return bool(self.EXTERNAL_API_BASE_URL and self.EXTERNAL_API_BASE_URL.strip())

    @property
    def messages_url(self) -> str:
        """Get full upstream messages URL, failing fast when no base URL is set."""
        if not self.is_configured:
            raise ConfigurationError(
                "EXTERNAL_API_BASE_URL is not defined in environment variables"
            )
        return f"{self.EXTERNAL_API_BASE_URL.strip().rstrip('/')}{self.EXTERNAL_API_ENDPOINT}"


# Create settings instance
settings = Settings()
