"""Custom exception hierarchy for the Ordem Paranormal rules engine.

Every error raised by the engine inherits from OrdemRulesError so that the
calling service layer can catch a single type at its boundary and turn it
into a user-facing message. Each exception carries a ``details`` dictionary
identifying the violated rule and the offending values.

Example:
    >>> from ordem_rules.core.exceptions import FormatError
    >>> raise FormatError("Invalid dice formula", expression="2x6")
"""

from __future__ import annotations

from typing import Any


class OrdemRulesError(Exception):
    """Base exception for all rules engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(OrdemRulesError):
    """Raised when engine configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


# =============================================================================
# Rules Engine Exceptions
# =============================================================================


class RulesEngineError(OrdemRulesError):
    """Base exception for errors raised while resolving game rules."""


class FormatError(RulesEngineError):
    """Raised when a dice formula string cannot be parsed."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize format error with the offending expression.

        Args:
            message: Human-readable error description.
            expression: The dice formula that failed to parse.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression is not None:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class RangeError(RulesEngineError):
    """Raised when a numeric input falls outside the range a rule allows.

    This covers NEX outside 0-99, character creation attribute rules and
    negative spend amounts.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize range error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the value that is out of range.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


class RuleViolation(RulesEngineError):
    """Raised when an action is blocked by a game rule.

    Attributes:
        rule: Short identifier of the rule that blocked the action.
    """

    rule: str = "rule_violation"

    def __init__(
        self,
        message: str,
        *,
        rule: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize rule violation with the blocking rule.

        Args:
            message: Human-readable error description.
            rule: Identifier of the violated rule; defaults to the class rule.
            details: Optional dictionary containing additional error context.
        """
        if rule:
            self.rule = rule
        combined_details = {"rule": self.rule, **(details or {})}
        super().__init__(message, details=combined_details)


class CircleLockedError(RuleViolation):
    """Raised when the caster's NEX is too low for a ritual circle."""

    rule = "circle_nex_requirement"


class AffinityMismatchError(RuleViolation):
    """Raised when true casting is attempted without the required affinity."""

    rule = "true_casting_affinity"


class CastModeUnavailableError(RuleViolation):
    """Raised when a ritual does not offer the requested casting mode."""

    rule = "cast_mode_unavailable"


class InsufficientEffortError(RuleViolation):
    """Raised when the character does not have enough PE for an action."""

    rule = "insufficient_pe"


class TurnLimitExceededError(RuleViolation):
    """Raised when an action would exceed the per-turn PE spend limit."""

    rule = "pe_turn_limit"


class NotFoundError(RulesEngineError):
    """Raised when a referenced class, skill or condition is unknown."""

    def __init__(
        self,
        message: str,
        *,
        kind: str | None = None,
        key: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize not-found error with lookup context.

        Args:
            message: Human-readable error description.
            kind: Kind of entity that was looked up (e.g. 'condition').
            key: The key that was not found.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if kind:
            combined_details["kind"] = kind
        if key is not None:
            combined_details["key"] = key
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "OrdemRulesError",
    # Configuration
    "ConfigurationError",
    # Rules engine
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
]
