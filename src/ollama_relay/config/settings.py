"""Settings and configuration management."""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434/api"
DEFAULT_OLLAMA_MODEL = "gemma3:4b"

_LOG_FORMATS = ("text", "json")


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Telegram
    telegram_bot_token: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("telegram_bot_token", "telegram_token"),
        description="Telegram bot token (TELEGRAM_BOT_TOKEN or TELEGRAM_TOKEN)",
    )

    # Ollama
    ollama_base_url: str = Field(
        DEFAULT_OLLAMA_BASE_URL, description="Base URL of the Ollama HTTP API"
    )
    ollama_default_model: str = Field(
        DEFAULT_OLLAMA_MODEL, description="Model selected for new chat sessions"
    )
    ollama_timeout: float = Field(
        120.0, gt=0, description="Per-request timeout for Ollama calls in seconds"
    )

    # Sessions
    max_history_turns: int = Field(
        0,
        ge=0,
        description="Maximum turns kept per chat, oldest evicted first (0 = unbounded)",
    )

    # Application Settings
    app_name: str = Field("Ollama Relay", description="Application name")
    log_level: str = Field("INFO", description="Logging level")
    log_format: str = Field("text", description="Log format: 'text' or 'json'")
    sanitize_logs: bool = Field(True, description="Sanitize sensitive data from logs")

    @field_validator("ollama_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in _LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(_LOG_FORMATS)}")
        return value

    @property
    def has_telegram_token(self) -> bool:
        """Check if a non-blank Telegram token is configured."""
        return bool(self.telegram_bot_token and self.telegram_bot_token.strip())


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
