"""
Configuration management using environment variables.
Handles all bot settings with proper validation and defaults.
"""

from datetime import time
from pathlib import Path
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


PASTEBIN_RAW_URL = "https://pastebin.com/raw/{code}"


class BotConfig(BaseSettings):
    """
    Configuration class for the question of the day bot.
    Every field is read from a ``QOTD_``-prefixed environment variable.
    """

    model_config = SettingsConfigDict(
        env_prefix="QOTD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields from .env
    )

    # Question source
    pastebin: Optional[str] = Field(default=None, description="Pastebin paste code")
    source_url: Optional[str] = Field(default=None, description="Full source URL, overrides the paste code")
    request_timeout: int = Field(default=30)
    retry_attempts: int = Field(default=3)
    retry_delay: float = Field(default=1.0)

    # Discord webhook
    webhook_id: Optional[int] = Field(default=None)
    webhook_token: Optional[str] = Field(default=None)
    discord_api_base: str = Field(default="https://discord.com/api")
    bot_name: str = Field(default="the question bot")

    # Scheduling
    post_at: time = Field(default=time(12, 0, 0), description="Daily delivery time (seconds ignored)")
    timezone: str = Field(default="UTC")
    tick_interval_seconds: int = Field(default=60)
    continue_on_error: bool = Field(default=False)

    # Persistence
    store_backend: str = Field(default="json")
    state_file: str = Field(default="questions.json")
    mongodb_url: str = Field(default="mongodb://localhost:27017")
    mongodb_database: str = Field(default="qotd")
    mongodb_collection: str = Field(default="questions")

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")
    log_file: Optional[str] = Field(default=None)

    # Development/Testing
    debug: bool = Field(default=False)

    @field_validator('tick_interval_seconds')
    @classmethod
    def validate_tick_interval(cls, v):
        """A tick longer than a minute could skip the delivery window."""
        if v < 1 or v > 60:
            raise ValueError('tick_interval_seconds must be between 1 and 60')
        return v

    @field_validator('request_timeout')
    @classmethod
    def validate_timeout(cls, v):
        """Ensure timeout is reasonable."""
        if v < 1 or v > 300:
            raise ValueError('request_timeout must be between 1 and 300 seconds')
        return v

    @field_validator('retry_attempts')
    @classmethod
    def validate_retry_attempts(cls, v):
        """Ensure retry attempts is reasonable."""
        if v < 0 or v > 10:
            raise ValueError('retry_attempts must be between 0 and 10')
        return v

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v):
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f'unknown timezone: {v}')
        return v

    @field_validator('store_backend')
    @classmethod
    def validate_store_backend(cls, v):
        valid_backends = ['json', 'mongodb']
        if v.lower() not in valid_backends:
            raise ValueError(f'store_backend must be one of: {valid_backends}')
        return v.lower()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    def get_source_url(self) -> Optional[str]:
        """Resolve the question source, preferring an explicit URL."""
        if self.source_url:
            return self.source_url
        if self.pastebin:
            return PASTEBIN_RAW_URL.format(code=self.pastebin)
        return None

    def get_webhook_url(self) -> str:
        """Discord execute-webhook endpoint for the configured hook."""
        return f"{self.discord_api_base.rstrip('/')}/webhooks/{self.webhook_id}/{self.webhook_token}"

    def get_state_file_path(self) -> Path:
        """Get state file path as Path object."""
        return Path(self.state_file)

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None

    def get_user_agent(self) -> str:
        return "QotdBot/1.0 (+https://discord.com)"

    def missing_settings(self) -> List[str]:
        """
        List required settings that are not configured.

        Returns:
            Environment variable names that must be set before starting.
        """
        missing = []
        if not self.get_source_url():
            missing.append("QOTD_PASTEBIN")
        if self.webhook_id is None:
            missing.append("QOTD_WEBHOOK_ID")
        if not self.webhook_token:
            missing.append("QOTD_WEBHOOK_TOKEN")
        return missing
