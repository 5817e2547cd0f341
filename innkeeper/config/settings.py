"""
Environment configuration for the innkeeper booking backend.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

import logging
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)

_FULL_REFUND_STATUSES = {"pending", "refunded"}


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # Application configuration
    APP_NAME: str = Field(default="Innkeeper Booking API", alias="PROJECT_NAME")
    API_VERSION: str = Field(default="v1", alias="PROJECT_VERSION")
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    TIMEZONE: str = "UTC"

    # Database configuration
    DATABASE_URL: str = "sqlite:///./innkeeper.db"
    DB_POOL_SIZE: int = 20
    DB_POOL_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 10
    DB_STATEMENT_TIMEOUT_MS: int = 5000
    DB_ECHO: bool = False

    # Security collaborator (tokens are issued elsewhere, only verified here)
    JWT_SECRET_KEY: str = "CHANGE_ME_IN_PRODUCTION_min32chars"
    JWT_ALGORITHM: str = "HS256"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"
    LOG_FILE: Optional[str] = None
    LOG_SQL_QUERIES: bool = False

    # Business rules
    CONFIRMATION_CODE_PREFIX: str = "MH"
    TRANSACTION_CODE_PREFIX: str = "PAY"
    CODE_GENERATION_MAX_ATTEMPTS: int = 10
    VIP_STAY_THRESHOLD: int = 10
    VIP_SPEND_THRESHOLD: Decimal = Decimal("10000")
    FULL_REFUND_PAYMENT_STATUS: str = "pending"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in {"text", "json"}:
            raise ValueError("LOG_FORMAT must be 'text' or 'json'")
        return v

    @field_validator("FULL_REFUND_PAYMENT_STATUS")
    @classmethod
    def validate_full_refund_status(cls, v: str) -> str:
        """A fully refunded payment either reverts to pending or becomes refunded."""
        v = v.lower()
        if v not in _FULL_REFUND_STATUSES:
            raise ValueError(
                f"FULL_REFUND_PAYMENT_STATUS must be one of {sorted(_FULL_REFUND_STATUSES)}"
            )
        return v

    @field_validator("CODE_GENERATION_MAX_ATTEMPTS")
    @classmethod
    def validate_max_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("CODE_GENERATION_MAX_ATTEMPTS must be at least 1")
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
