"""Application settings using Pydantic BaseSettings."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Taskboard settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase Configuration
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    tasks_table: str = "tasks"

    # Remote calls are bounded so a hung request still falls back
    remote_timeout_seconds: float = 10.0

    # Mock backend: 1.0 reproduces demo latencies, 0 disables them
    mock_latency_scale: float = 1.0

    # Server configuration
    server_name: str = "taskboard"
    log_level: str = "INFO"


# Global settings instance
settings = Settings()
