"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        OrdemRulesError: Base exception for all engine errors.
        ConfigurationError: Configuration-related errors.
        RulesEngineError and its subclasses: rule resolution errors.

    Configuration:
        Settings: Main engine settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up engine logging.
        get_logger: Get a configured logger instance.
"""

from __future__ import annotations

from ordem_rules.core.config import (
    DiceSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from ordem_rules.core.exceptions import (
    AffinityMismatchError,
    CastModeUnavailableError,
    CircleLockedError,
    ConfigurationError,
    FormatError,
    InsufficientEffortError,
    NotFoundError,
    OrdemRulesError,
    RangeError,
    RulesEngineError,
    RuleViolation,
    TurnLimitExceededError,
)
from ordem_rules.core.logging import (
    character_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "OrdemRulesError",
    # Configuration exceptions
    "ConfigurationError",
    # Rules engine exceptions
    "RulesEngineError",
    "FormatError",
    "RangeError",
    "RuleViolation",
    "CircleLockedError",
    "AffinityMismatchError",
    "CastModeUnavailableError",
    "InsufficientEffortError",
    "TurnLimitExceededError",
    "NotFoundError",
    # Configuration
    "Settings",
    "DiceSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "character_context",
]
