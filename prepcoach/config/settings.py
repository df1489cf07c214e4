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
    app_name: str = "PrepCoach"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Generative model gateway (questions, scoring, recommendations)
    llm_base_url: str = ""
    llm_api_key: str = ""
    llm_endpoint: str = "/v1/chat/completions"
    llm_model: str = "gemini-1.5-flash"
    llm_temperature: float = 0.4
    llm_timeout_seconds: float = 30.0

    # Whisper configuration (for STT)
    whisper_model: str = "whisper-base"
    whisper_api_url: str = ""
    use_local_whisper: bool = False
    transcription_language: str = "en"
    media_download_timeout_seconds: float = 60.0

    # Media analysis service; empty means synthesised signals
    media_analysis_url: str = ""
    media_analysis_api_key: str = ""
    media_random_seed: int | None = None

    # Question generation
    question_random_seed: int | None = None
    previous_sessions_window: int = 5

    # Session defaults
    default_question_count: int = Field(default=10, ge=5, le=50)
    default_duration_minutes: int = Field(default=30, ge=15, le=120)

    # Rate limiting (per owner and action)
    rate_limit_max_attempts: int = 10
    rate_limit_window_seconds: int = 900

    # Langfuse tracing
    langfuse_enabled: bool = False
    langfuse_public_key: str = ""
    langfuse_secret_key: str = ""
    langfuse_host: str = "https://cloud.langfuse.com"

    # CORS - stored as comma-separated string in env
    cors_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        validation_alias="cors_origins"
    )

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @property
    def llm_configured(self) -> bool:
        """Whether a generative model gateway is configured."""
        return bool(self.llm_base_url)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
