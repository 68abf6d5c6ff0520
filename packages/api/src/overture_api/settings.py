"""Application settings using pydantic-settings."""

from functools import cache
from pathlib import Path
from typing import Annotated, Literal

from overture import (
    DEFAULT_MIN_CONFIDENCE,
    MatchConfig,
    OllamaConfig,
    SpotifyConfig,
    WorkerConfig,
    parse_min_confidence,
)
from pydantic import BeforeValidator, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from overture_api.db.engine import DEFAULT_DB_PATH

LogLevel = Annotated[
    Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    BeforeValidator(lambda v: v.upper() if isinstance(v, str) else v),
]

MinConfidence = Annotated[float, BeforeValidator(parse_min_confidence)]


def _blank_to_none(v: object) -> object:
    """Treat an empty or whitespace-only string as "not set"."""
    if isinstance(v, str) and not v.strip():
        return None
    return v


OptionalHost = Annotated[str | None, BeforeValidator(_blank_to_none)]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="OVERTURE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    reload: bool = Field(default=False, description="Enable auto-reload")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: LogLevel = Field(default="INFO", description="Log level")

    # Storage
    db_path: Path = Field(default=DEFAULT_DB_PATH, description="SQLite database file")

    # CORS settings
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")

    # Spotify settings
    spotify_client_id: str = Field(min_length=1, description="Spotify client id")
    spotify_client_secret: str = Field(
        min_length=1, description="Spotify client secret"
    )
    spotify_market: str = Field(default="US", description="Catalog market")
    spotify_max_retries: int = Field(
        default=3, ge=1, description="Attempts per Spotify request"
    )
    spotify_retry_backoff: float = Field(
        default=0.5, ge=0, description="Base retry backoff in seconds"
    )
    spotify_timeout: float = Field(
        default=10.0, gt=0, description="Spotify request timeout in seconds"
    )

    # Matching settings
    min_confidence: MinConfidence = Field(
        default=DEFAULT_MIN_CONFIDENCE,
        description="Minimum score for a catalog candidate to be accepted",
    )
    search_limit: int = Field(
        default=5, ge=1, le=50, description="Candidates requested per search"
    )

    # Ollama settings (no host disables the intent pipeline)
    ollama_host: OptionalHost = Field(default=None, description="Ollama base URL")
    ollama_model: str = Field(default="deepseek-r1:8b", description="Ollama model")
    ollama_timeout: float = Field(
        default=30.0, gt=0, description="Ollama request timeout in seconds"
    )

    # Intent streaming
    heartbeat_interval: float = Field(
        default=10.0, gt=0, description="Seconds between SSE heartbeats"
    )

    # Feature worker pool
    feature_workers: int = Field(default=2, ge=1, description="Feature workers")
    feature_queue_size: int = Field(
        default=100, ge=1, description="Pending feature job capacity"
    )
    preview_timeout: float = Field(
        default=15.0, gt=0, description="Preview download timeout in seconds"
    )

    @property
    def spotify(self) -> SpotifyConfig:
        return SpotifyConfig(
            client_id=self.spotify_client_id,
            client_secret=self.spotify_client_secret,
            market=self.spotify_market,
            max_retries=self.spotify_max_retries,
            retry_backoff=self.spotify_retry_backoff,
            timeout=self.spotify_timeout,
        )

    @property
    def match(self) -> MatchConfig:
        return MatchConfig(
            min_confidence=self.min_confidence, search_limit=self.search_limit
        )

    @property
    def ollama(self) -> OllamaConfig | None:
        """Ollama configuration, or None when no host is set."""
        if self.ollama_host is None:
            return None
        return OllamaConfig(
            base_url=self.ollama_host,
            model=self.ollama_model,
            timeout=self.ollama_timeout,
        )

    @property
    def worker(self) -> WorkerConfig:
        return WorkerConfig(
            workers=self.feature_workers,
            queue_size=self.feature_queue_size,
            preview_timeout=self.preview_timeout,
        )


@cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]
