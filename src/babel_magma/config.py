"""Configuration management for babel-magma."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REMOTE_ENDPOINT = "http://magma.maths.usyd.edu.au/xml/calculator.xml"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="BABEL_MAGMA_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Session Configuration
    magma_command: str = Field(default="magma", description="Executable started for interactive sessions")
    magma_args: list[str] = Field(default_factory=list, description="Extra command line arguments for Magma")
    default_session: str = Field(default="magma", description="Session used when a block names none")
    startup_prompt: str = Field(default="> ", description="Prompt Magma shows before the session is configured")
    prompt: str = Field(default="> ", description="Prompt installed in every session")
    sentinel: str = Field(default="org-babel-magma-eoe", description="End-of-output marker line")

    # Timeouts (None blocks until output arrives)
    session_timeout: float | None = Field(default=None, description="Seconds to wait for the end-of-output marker")
    startup_timeout: float | None = Field(default=30.0, description="Seconds to wait for the first prompt")
    poll_interval: float = Field(default=0.5, gt=0, description="Read slice used to check for cancellation")

    # Remote Configuration
    remote_endpoint: str = Field(default=DEFAULT_REMOTE_ENDPOINT, description="Online calculator endpoint")
    remote_timeout: float | None = Field(default=None, description="HTTP timeout in seconds")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")


def get_settings(**overrides: object) -> Settings:
    """Get application settings.

    Args:
        overrides: Explicit field values taking precedence over the environment

    Returns:
        Settings instance
    """
    return Settings(**overrides)
