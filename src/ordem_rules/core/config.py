"""Configuration management for the Ordem Paranormal rules engine.

This module provides centralized configuration using pydantic-settings,
supporting environment variables and .env files. Only operational concerns
are configurable (logging, dice limits, RNG seeding); the rule tables
themselves are static and live in ``ordem_rules.core.constants``.

Example:
    >>> from ordem_rules.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.dice.max_dice_count
    100

Environment Variables:
    ORDEM_RULES_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    ORDEM_RULES_JSON_LOGS: Emit JSON log lines instead of console output
    ORDEM_RULES_DICE_SEED: Seed for the default random source
    ORDEM_RULES_DICE_MAX_DICE_COUNT: Maximum dice in a free-form formula
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ordem_rules.core.exceptions import ConfigurationError


class DiceSettings(BaseSettings):
    """Configuration for dice rolling.

    Attributes:
        seed: Seed for the default random source (None uses OS entropy).
        max_dice_count: Maximum number of dice in a free-form formula.
        min_die_sides: Smallest die allowed in a free-form formula.
        max_die_sides: Largest die allowed in a free-form formula.
    """

    model_config = SettingsConfigDict(
        env_prefix="ORDEM_RULES_DICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    seed: int | None = Field(
        default=None,
        description="Seed for the default random source",
    )
    max_dice_count: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum dice per free-form formula",
    )
    min_die_sides: int = Field(
        default=2,
        ge=2,
        description="Smallest die allowed in a free-form formula",
    )
    max_die_sides: int = Field(
        default=1000,
        ge=2,
        le=10000,
        description="Largest die allowed in a free-form formula",
    )

    @model_validator(mode="after")
    def validate_die_sides(self) -> "DiceSettings":
        """Ensure the die size range is not empty.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If min_die_sides >= max_die_sides.
        """
        if self.min_die_sides >= self.max_die_sides:
            raise ConfigurationError(
                f"min_die_sides ({self.min_die_sides}) must be less than "
                f"max_die_sides ({self.max_die_sides})",
                config_key="min_die_sides",
            )
        return self


class Settings(BaseSettings):
    """Main engine settings.

    Attributes:
        app_name: Engine name reported in log context.
        app_version: Engine version string.
        debug: Enable debug mode.
        log_level: Engine logging level.
        json_logs: Render logs as JSON lines.
        log_file: Optional file that also receives log output.
        dice: Dice rolling settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="ORDEM_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Ordem Paranormal Rules Engine",
        description="Engine name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Engine version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional log file path",
    )

    dice: DiceSettings = Field(default_factory=DiceSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode.

        Returns:
            True if not in debug mode.
        """
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the engine settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load engine settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Useful in tests or when environment variables change at runtime.
    """
    get_settings.cache_clear()


__all__ = [
    "DiceSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
