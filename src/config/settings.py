"""Inequality engine settings loaded from environment variables."""

from enum import StrEnum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    """Deployment environment."""

    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"


class LogLevel(StrEnum):
    """Supported log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Application-wide settings loaded from environment variables / .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Solver numerics ---
    FEASIBILITY_TOLERANCE: float = Field(
        default=1e-9,
        gt=0.0,
        description="Absolute tolerance for boundary and phase-1 comparisons.",
    )
    STRICT_MARGIN: float = Field(
        default=1e-6,
        gt=0.0,
        description="Margin applied on the open side of strict inequalities, in row-normalized units.",
    )
    PIVOT_CAP_FACTOR: int = Field(
        default=4,
        ge=1,
        description="Pivot cap multiplier: cap = factor * (rows + columns).",
    )

    # --- HTTP surface ---
    MAX_CONSTRAINTS_PER_REQUEST: int = Field(
        default=50,
        ge=1,
        description="Largest constraint system accepted in one request.",
    )

    # --- Logging ---
    LOG_LEVEL: LogLevel = Field(
        default=LogLevel.INFO,
        description="Application log level.",
    )

    # --- Environment ---
    ENVIRONMENT: Environment = Field(
        default=Environment.DEV,
        description="Deployment environment (dev/staging/prod).",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.ENVIRONMENT == Environment.PROD


def get_settings() -> Settings:
    """Factory function for dependency injection via FastAPI Depends."""
    return Settings()
