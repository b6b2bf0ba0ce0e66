"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

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


class TestOrdemRulesError:
    """Tests for the base OrdemRulesError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = OrdemRulesError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = OrdemRulesError("Test error", details={"key": "value", "count": 42})
        assert exc.details == {"key": "value", "count": 42}
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        repr_str = repr(OrdemRulesError("Test", details={"x": 1}))
        assert "OrdemRulesError" in repr_str
        assert "x" in repr_str


class TestRulesEngineExceptions:
    """Tests for rule resolution exceptions."""

    def test_format_error_with_expression(self) -> None:
        """Test FormatError records the bad formula."""
        exc = FormatError("Bad formula", expression="2x6")
        assert exc.details["expression"] == "2x6"
        assert isinstance(exc, RulesEngineError)

    def test_range_error_with_field(self) -> None:
        """Test RangeError records field and value."""
        exc = RangeError("NEX out of range", field_name="nex", invalid_value=120)
        assert exc.details["field_name"] == "nex"
        assert exc.details["invalid_value"] == 120

    def test_range_error_keeps_zero_value(self) -> None:
        """Test that a falsy invalid value is still recorded."""
        exc = RangeError("Bad", field_name="amount", invalid_value=0)
        assert exc.details["invalid_value"] == 0

    def test_not_found_error(self) -> None:
        """Test NotFoundError records kind and key."""
        exc = NotFoundError("Unknown condition", kind="condition", key="hungry")
        assert exc.details == {"kind": "condition", "key": "hungry"}

    def test_rule_violation_custom_rule(self) -> None:
        """Test RuleViolation with an explicit rule."""
        exc = RuleViolation("Cannot act", rule="cannot_act")
        assert exc.rule == "cannot_act"
        assert exc.details["rule"] == "cannot_act"

    @pytest.mark.parametrize(
        ("exc_class", "rule"),
        [
            (CircleLockedError, "circle_nex_requirement"),
            (AffinityMismatchError, "true_casting_affinity"),
            (CastModeUnavailableError, "cast_mode_unavailable"),
            (InsufficientEffortError, "insufficient_pe"),
            (TurnLimitExceededError, "pe_turn_limit"),
        ],
    )
    def test_rule_violation_subclasses(self, exc_class: type[RuleViolation], rule: str) -> None:
        """Test each rule violation carries its rule identifier."""
        exc = exc_class("Blocked", details={"nex": 5})
        assert isinstance(exc, RuleViolation)
        assert exc.rule == rule
        assert exc.details == {"rule": rule, "nex": 5}


class TestExceptionHierarchy:
    """Tests for exception inheritance."""

    def test_all_inherit_from_base(self) -> None:
        """Test that all exceptions inherit from OrdemRulesError."""
        exceptions = [
            ConfigurationError("test"),
            FormatError("test"),
            RangeError("test"),
            RuleViolation("test"),
            NotFoundError("test"),
            TurnLimitExceededError("test"),
        ]
        for exc in exceptions:
            assert isinstance(exc, OrdemRulesError)

    def test_can_catch_engine_errors_together(self) -> None:
        """Test catching rule errors at a single boundary."""
        with pytest.raises(RulesEngineError):
            raise CircleLockedError("Too low")
