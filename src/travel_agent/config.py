"""Configuration loader with YAML parsing, env-var interpolation, and Pydantic validation."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

_ENV_VAR_PATTERN = re.compile(r"\$\{(\w+)\}")


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    """Treat empty strings and unresolved ${VAR} placeholders as unset."""
    if value is None:
        return None
    value = value.strip()
    if not value or _ENV_VAR_PATTERN.fullmatch(value):
        return None
    return value


class AnthropicConfig(BaseModel):
    api_key: str
    base_url: Optional[str] = None
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 1000
    temperature: float = 0.7
    max_retries: int = 2
    timeout: int = 60


class WebConfig(BaseModel):
    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 3000
    # Applies to every /api route
    rate_limit_window_seconds: float = 900.0
    rate_limit_max_requests: int = 100
    # Stricter budget for /api/chat
    chat_rate_limit_window_seconds: float = 300.0
    chat_rate_limit_max_requests: int = 20


class TelegramConfig(BaseModel):
    token: Optional[str] = None
    max_tokens: int = 500

    @field_validator("token")
    @classmethod
    def normalize_token(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class ToolsConfig(BaseModel):
    serpapi_key: Optional[str] = None
    serpapi_url: str = "https://serpapi.com/search"
    weather_api_key: Optional[str] = None
    weather_url: str = "https://api.openweathermap.org/data/2.5"
    currency_url: str = "https://api.exchangerate-api.com/v4/latest"
    timezone_url: str = "https://worldtimeapi.org/api"
    weather_timeout: float = 8.0
    http_timeout: float = 10.0
    currency_cache_seconds: int = 3600

    @field_validator("serpapi_key", "weather_api_key")
    @classmethod
    def normalize_keys(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class ResilienceConfig(BaseModel):
    max_attempts: int = 3
    failure_threshold: int = 5
    cooldown_seconds: float = 300.0
    backoff_base: float = 2.0
    max_backoff: float = 30.0
    jitter: float = 0.0  # fraction of the computed delay, 0 disables jitter


class ConversationConfig(BaseModel):
    max_history: int = 20
    max_idle_hours: float = 24.0
    cleanup_interval_minutes: int = 60
    web_history: int = 8
    telegram_history: int = 4
    max_message_length: int = 4000


class AppConfig(BaseModel):
    environment: Literal["development", "production", "test"] = "development"
    log_level: str = "INFO"
    anthropic: AnthropicConfig
    web: WebConfig = Field(default_factory=WebConfig)
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    resilience: ResilienceConfig = Field(default_factory=ResilienceConfig)
    conversation: ConversationConfig = Field(default_factory=ConversationConfig)

    @property
    def is_test(self) -> bool:
        return self.environment == "test"


def _interpolate_env_vars(text: str) -> str:
    """Replace ${VAR_NAME} patterns with environment variable values."""

    def _replace(match: re.Match) -> str:
        value = os.environ.get(match.group(1))
        if value is None:
            return match.group(0)
        return value

    return _ENV_VAR_PATTERN.sub(_replace, text)


def load_config(config_path: str | Path = "config.yaml", env_path: str | Path = ".env") -> AppConfig:
    """Load and validate configuration from YAML file with env-var interpolation."""
    env_file = Path(env_path)
    if env_file.exists():
        load_dotenv(env_file)

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    raw_text = config_file.read_text(encoding="utf-8")
    data = yaml.safe_load(_interpolate_env_vars(raw_text)) or {}

    return AppConfig(**data)
