"""Configuration management for textophile."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .types import InputMode

DEFAULT_TIMEOUT_SECONDS = 30.0


class Settings(BaseSettings):
    """Process-wide defaults, read from ``TEXTOPHILE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TEXTOPHILE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Session defaults
    default_timeout_seconds: float | None = Field(
        default=DEFAULT_TIMEOUT_SECONDS, description="Seconds to wait for a line before timing out"
    )
    default_input_mode: InputMode = Field(default=InputMode.VISIBLE, description="visible or hidden")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_profile: Literal["default", "cli"] = Field(default="default", description="Log output profile")


class PromptOptions(BaseModel):
    """Resolved options for one command.

    ``timeout`` is in seconds; ``None`` waits for input forever.
    """

    timeout: float | None = DEFAULT_TIMEOUT_SECONDS
    input_mode: InputMode = InputMode.VISIBLE
    prompt: str = ""
    completions: tuple[str, ...] = ()

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("timeout must be positive or None")
        return value


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


def resolve_options(overrides: dict[str, Any], settings: Settings | None = None) -> PromptOptions:
    """Merge per-command overrides on top of the process defaults.

    Args:
        overrides: Options declared by the command; keys absent here fall back to settings.
        settings: Optional settings instance, loaded from the environment when omitted.

    Returns:
        Validated options
    """
    settings = settings or get_settings()
    values: dict[str, Any] = {
        "timeout": settings.default_timeout_seconds,
        "input_mode": settings.default_input_mode,
    }
    values.update(overrides)
    return PromptOptions.model_validate(values)
