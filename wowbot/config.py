"""Discord bot configuration."""
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BotSettings(BaseSettings):
    """Bot configuration with environment variable support."""

    DISCORD_TOKEN: str
    BOT_NAME: str = "WoWBot"

    # OpenAI Assistants
    OPENAI_API_KEY: str
    ASSISTANT_ID: str
    OPENAI_TIMEOUT_SECONDS: float = 60.0

    # DynamoDB session store
    AWS_REGION: str = "us-east-1"
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    DYNAMODB_ENDPOINT: Optional[str] = None  # e.g. http://dynamodb-local:8000
    DYNAMODB_TABLE: str = "DiscordOpenAIThreads"

    # Run polling (first poll is immediate, then interval grows by the factor)
    POLL_INTERVAL_SECONDS: float = 1.0
    POLL_BACKOFF_FACTOR: float = 1.5
    POLL_MAX_INTERVAL_SECONDS: float = 10.0
    POLL_TIMEOUT_SECONDS: float = 300.0

    # Message handling
    MAX_REPLY_LENGTH: int = 2000  # Discord limit
    BACKLOG_FETCH_LIMIT: int = 50
    REPLAY_BACKLOG_ONCE: bool = False
    NOTIFY_ON_ERROR: bool = True

    HEALTH_PORT: int = 9998

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator(
        "POLL_INTERVAL_SECONDS",
        "POLL_MAX_INTERVAL_SECONDS",
        "POLL_TIMEOUT_SECONDS",
        "OPENAI_TIMEOUT_SECONDS",
    )
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @field_validator("POLL_BACKOFF_FACTOR")
    @classmethod
    def _not_shrinking(cls, value: float) -> float:
        if value < 1:
            raise ValueError("must be at least 1.0")
        return value

    @field_validator("MAX_REPLY_LENGTH", "BACKLOG_FETCH_LIMIT")
    @classmethod
    def _positive_int(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value
