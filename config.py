"""
Configuration settings for the kidlearn adaptive engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Remote Recommendation Service (client side)
    # ========================================
    recommendation_endpoint: str = Field(
        default="http://localhost:8100/api/adaptive/recommendations",
        description="URL the provider posts adaptive contexts to",
    )
    recommendation_api_key: str | None = Field(
        default=None,
        description="Bearer token sent to the recommendation endpoint",
    )
    recommendation_timeout_ms: int = Field(
        default=5000,
        ge=1,
        description="Timeout for one remote recommendation call",
    )
    recommendation_cache_size: int = Field(
        default=128,
        ge=0,
        description="Maximum cached remote recommendations (0 disables the cache)",
    )

    # ========================================
    # ML Connector (server side)
    # ========================================
    adaptive_ml_enabled: bool = Field(
        default=False,
        description="Call the external ML scoring endpoint before the heuristic",
    )
    adaptive_ml_endpoint: str | None = Field(
        default=None,
        description="External ML scoring endpoint",
    )
    adaptive_ml_api_key: str | None = Field(
        default=None,
        description="Bearer token for the ML scoring endpoint",
    )
    adaptive_ml_timeout_ms: int = Field(
        default=3000,
        ge=1,
        description="Timeout for one ML connector call",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # API Server
    # ========================================
    api_host: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    api_port: int = Field(
        default=8100,
        description="API server port",
    )

    def has_ml_configured(self) -> bool:
        """Check if the ML connector is enabled and has an endpoint."""
        return self.adaptive_ml_enabled and bool(self.adaptive_ml_endpoint)

    def get_adaptive_config(self) -> dict[str, Any]:
        """Get adaptive engine configuration as a dictionary (secrets masked)."""
        return {
            "recommendation": {
                "endpoint": self.recommendation_endpoint,
                "api_key": "***" if self.recommendation_api_key else None,
                "timeout_ms": self.recommendation_timeout_ms,
                "cache_size": self.recommendation_cache_size,
            },
            "ml": {
                "enabled": self.adaptive_ml_enabled,
                "configured": self.has_ml_configured(),
                "endpoint": self.adaptive_ml_endpoint,
                "api_key": "***" if self.adaptive_ml_api_key else None,
                "timeout_ms": self.adaptive_ml_timeout_ms,
            },
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
