"""Configuration management for modelgraph using pydantic-settings.

Settings are read from environment variables with the ``MODELGRAPH_``
prefix and from an optional ``.env`` file.
"""

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ModelGraphSettings(BaseSettings):
    """Main configuration settings for modelgraph.

    Examples:
        MODELGRAPH_DEBUG_MODE=true
        MODELGRAPH_LOG_LEVEL=DEBUG
        MODELGRAPH_STRICT_TYPE_REGISTRY=true
    """

    model_config = SettingsConfigDict(
        env_prefix="MODELGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    debug_mode: bool = Field(False, description="Enable debug logging")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Log level used when debug mode is off"
    )
    structured_logging: bool = Field(
        True, description="Render logs as JSON instead of console output"
    )
    log_path: Path | None = Field(None, description="Directory for log files, if any")

    # Type registry
    strict_type_registry: bool = Field(
        False,
        description="Reject a second type registered under an existing name "
        "instead of replacing it",
    )

    @property
    def effective_log_level(self) -> str:
        """Log level after applying debug mode."""
        return "DEBUG" if self.debug_mode else self.log_level


class TestSettings(ModelGraphSettings):
    """Test-specific settings."""

    __test__ = False

    structured_logging: bool = False
    strict_type_registry: bool = True


# Singleton instance
_settings: ModelGraphSettings | None = None


def get_settings(env: str | None = None) -> ModelGraphSettings:
    """Get the singleton settings instance.

    Args:
        env: Environment name ('test' selects test defaults). Falls back to
            the ``MODELGRAPH_ENV`` environment variable.

    Returns:
        ModelGraphSettings instance
    """
    global _settings

    if _settings is None:
        env_name = env or os.getenv("MODELGRAPH_ENV", "")
        if env_name == "test":
            _settings = TestSettings()
        else:
            _settings = ModelGraphSettings()

    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (mainly for testing)."""
    global _settings
    _settings = None
