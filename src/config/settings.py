"""
Application settings and configuration management.

Uses pydantic-settings for environment variable loading.
"""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "InterviewPilot"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Gemini provider
    gemini_api_key: str = ""
    gemini_model: str = "models/gemini-2.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Request resilience
    ai_max_retries: int = Field(default=3, ge=1)
    ai_retry_delay_seconds: float = Field(default=1.0, ge=0)
    ai_request_timeout_seconds: float = Field(default=30.0, gt=0)
    ai_requests_per_minute: int = Field(default=60, ge=1)
    ai_rate_window_seconds: float = Field(default=60.0, gt=0)

    # Skip the provider entirely and serve deterministic fallbacks
    offline_mode: bool = False

    # Langfuse tracing (optional)
    langfuse_enabled: bool = False
    langfuse_secret_key: str = ""
    langfuse_public_key: str = ""
    langfuse_base_url: str = "https://cloud.langfuse.com"

    # Interview flow
    question_advance_delay_seconds: float = Field(default=2.0, ge=0)

    # Persisted snapshots (interview + candidates namespaces)
    state_dir: str = ".interview_state"

    # CORS - stored as comma-separated string in env
    cors_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        validation_alias="cors_origins"
    )

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
