"""Application settings via environment variables."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings via environment variables.

    Built once at startup and handed to the relay; nothing in the core
    reads the environment directly. Instances are immutable.
    """

    # Completion backend (OpenAI-compatible, e.g. llama-server)
    llama_base_url: str = "http://127.0.0.1:8080"
    llama_model: str = "local-model"
    llama_api_key: str = "no-key"  # llama-server ignores it, but wants the header

    # Search aggregator (SearxNG JSON API)
    searxng_base_url: str = "http://127.0.0.1:8888"

    # Timeouts (seconds)
    backend_connect_timeout_seconds: float = 10.0
    backend_read_timeout_seconds: float = 120.0
    search_timeout_seconds: float = 10.0
    excerpt_timeout_seconds: float = 8.0
    relay_timeout_seconds: float = 300.0

    # Relay loop
    max_tool_rounds: int = Field(5, ge=1)

    # SSE
    sse_keepalive_seconds: float = 15.0

    # Static frontend bundle (served with SPA fallback when present)
    static_dir: str = "dist"

    # Logging
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
