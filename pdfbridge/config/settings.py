"""
Application settings loaded from environment / .env.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BROWSER_PATHS = [
    "/usr/bin/google-chrome",
    "/usr/bin/google-chrome-stable",
    "/usr/bin/chromium",
    "/usr/bin/chromium-browser",
]


class Settings(BaseSettings):
    """pdfbridge configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, description="Listen port")
    log_level: str = Field(default="INFO", description="Root log level")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Browser discovery
    browser_executable: Path | None = Field(
        default=None,
        description="Explicit Chrome/Chromium binary; checked before the common paths",
    )
    browser_paths: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BROWSER_PATHS),
        description="Common installation paths checked in order",
    )

    # Rendering
    headless: bool = True
    fallback_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Upper bound on the headless CLI print before it is killed",
    )

    @field_validator("browser_executable", mode="before")
    @classmethod
    def _blank_executable_is_unset(cls, value):
        # BROWSER_EXECUTABLE= in .env or compose files means "not configured"
        if isinstance(value, str) and not value.strip():
            return None
        return value


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def init_settings(settings: Settings) -> Settings:
    """Install an explicit settings object (startup, tests)."""
    global _settings
    _settings = settings
    return settings


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() reloads."""
    global _settings
    _settings = None
