"""Dice resolution for Ordem Paranormal.

Tests in Ordem Paranormal roll a pool of d20s sized by an attribute and
keep one die (the "golden rule"):

* attribute > 0: roll ``attribute`` dice, keep the highest;
* attribute == 0: roll 2 dice, keep the lowest;
* attribute < 0: roll ``abs(attribute)`` dice, keep the lowest.

A dice adjustment from conditions is added to the pool before the zero
case is checked. Skill bonuses are added to the kept die, never to the
pool.

Every rolling function takes an optional ``rng`` implementing
``DieSource``; ``random.Random`` qualifies. When omitted, a module-level
generator seeded from ``Settings.dice.seed`` is used.

Example:
    >>> import random
    >>> result = roll_attribute_test(2, skill_bonus=5, rng=random.Random(7))
    >>> result.advantage
    True
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from typing import Any, Protocol

import d20

from ordem_rules.core.config import get_settings
from ordem_rules.core.constants import (
    DEFAULT_CRITICAL_MULTIPLIER,
    DEFAULT_THREAT_RANGE,
    TEST_DIE_SIDES,
    ZERO_POOL_DICE,
)
from ordem_rules.core.exceptions import FormatError, RangeError
from ordem_rules.core.logging import get_logger


logger = get_logger(__name__)

_DAMAGE_FORMULA = re.compile(r"^(\d+)d(\d+)$")
_FREE_FORMULA = re.compile(r"^(\d+)d(\d+)([+-]\d+)?$")


# =============================================================================
# Random Source
# =============================================================================


class DieSource(Protocol):
    """Anything that can draw a uniform integer in [a, b]."""

    def randint(self, a: int, b: int) -> int: ...


_default_rng: random.Random | None = None


def get_default_rng() -> random.Random:
    """Get the module-level random source, creating it on first use.

    Returns:
        A ``random.Random`` seeded from ``Settings.dice.seed``.
    """
    global _default_rng
    if _default_rng is None:
        seed = get_settings().dice.seed
        _default_rng = random.Random(seed)
        logger.debug("Default RNG created", seed=seed)
    return _default_rng


def reset_default_rng() -> None:
    """Discard the module-level random source so it is re-seeded on next use."""
    global _default_rng
    _default_rng = None


def _source(rng: DieSource | None) -> DieSource:
    return rng if rng is not None else get_default_rng()


# =============================================================================
# Result Types
# =============================================================================


@dataclass(frozen=True)
class RollResult:
    """Outcome of a d20 pool test.

    Attributes:
        dice: Every die rolled, in roll order.
        selected_die: The kept die (highest or lowest).
        bonus: Flat bonus added to the kept die.
        total: selected_die + bonus.
        advantage: True when the highest die was kept.
        disadvantage: True when the lowest die was kept.
        dice_adjustment: Pool adjustment that was applied.
    """

    dice: tuple[int, ...]
    selected_die: int
    bonus: int
    total: int
    advantage: bool
    disadvantage: bool
    dice_adjustment: int = 0

    @property
    def is_natural_one(self) -> bool:
        """Whether the kept die is a natural 1."""
        return self.selected_die == 1


@dataclass(frozen=True)
class AttackResult:
    """Outcome of an attack test.

    Attributes:
        roll: The underlying pool test.
        target_defense: Defense the total was compared to.
        threat_range: Minimum natural die that counts as a critical.
        is_critical: Whether the kept die reached the threat range.
        hit: Whether the attack hits (total >= defense or critical).
    """

    roll: RollResult
    target_defense: int
    threat_range: int
    is_critical: bool
    hit: bool

    @property
    def total(self) -> int:
        return self.roll.total


@dataclass(frozen=True)
class DamageResult:
    """Outcome of a damage roll.

    Attributes:
        formula: The weapon formula that was rolled (before the critical).
        dice: Every damage die rolled.
        attribute_bonus: Attribute added to melee damage (0 at range).
        skill_bonus: Flat bonus added to the total.
        total: sum(dice) + attribute_bonus + skill_bonus.
        is_critical: Whether the die count was multiplied.
        multiplier: Critical multiplier that was requested.
    """

    formula: str
    dice: tuple[int, ...]
    attribute_bonus: int
    skill_bonus: int
    total: int
    is_critical: bool
    multiplier: int


@dataclass(frozen=True)
class ResistanceResult:
    """Outcome of a resistance test against a difficulty."""

    roll: RollResult
    difficulty: int
    success: bool


@dataclass(frozen=True)
class FormulaRoll:
    """Outcome of a free-form ``XdY[+-Z]`` roll.

    Attributes:
        expression: The formula as given.
        total: Sum of kept dice plus modifier.
        dice: Individual die results.
        modifier: Flat modifier parsed from the formula.
        detail: d20's rendered breakdown (e.g. '2d6 (3, 5) + 1 = `9`').
    """

    expression: str
    total: int
    dice: tuple[int, ...]
    modifier: int
    detail: str


# =============================================================================
# Basic Rolls
# =============================================================================


def roll_die(sides: int, *, rng: DieSource | None = None) -> int:
    """Roll one die.

    Args:
        sides: Number of faces (>= 1).
        rng: Random source; defaults to the module generator.

    Returns:
        A value in [1, sides].
    """
    return _source(rng).randint(1, sides)


def roll_dice(count: int, sides: int, *, rng: DieSource | None = None) -> tuple[int, ...]:
    """Roll several identical dice.

    Args:
        count: Number of dice.
        sides: Faces per die.
        rng: Random source; defaults to the module generator.

    Returns:
        Individual results in roll order.
    """
    source = _source(rng)
    return tuple(source.randint(1, sides) for _ in range(count))


def dice_pool(attribute_value: int, dice_adjustment: int = 0) -> tuple[int, bool]:
    """Size a d20 pool with the golden rule.

    Args:
        attribute_value: The attribute being tested.
        dice_adjustment: Extra (or fewer) dice from conditions or effects.

    Returns:
        Tuple of (number of dice, keep highest).

    Example:
        >>> dice_pool(3)
        (3, True)
        >>> dice_pool(0)
        (2, False)
        >>> dice_pool(-2)
        (2, False)
        >>> dice_pool(1, -1)
        (2, False)
        >>> dice_pool(-2, 3)
        (1, True)
    """
    effective = attribute_value + dice_adjustment
    if effective > 0:
        return effective, True
    if attribute_value < 0 and effective < 0:
        return abs(effective), False
    return ZERO_POOL_DICE, False


# =============================================================================
# Tests
# =============================================================================


def roll_attribute_test(
    attribute_value: int,
    skill_bonus: int = 0,
    dice_adjustment: int = 0,
    *,
    rng: DieSource | None = None,
) -> RollResult:
    """Roll an attribute (or skill) test.

    Args:
        attribute_value: Attribute sizing the pool.
        skill_bonus: Flat bonus added to the kept die.
        dice_adjustment: Pool adjustment applied before the zero rule.
        rng: Random source; defaults to the module generator.

    Returns:
        RollResult with every die, the kept die and the total.
    """
    count, keep_highest = dice_pool(attribute_value, dice_adjustment)
    dice = roll_dice(count, TEST_DIE_SIDES, rng=rng)
    selected = max(dice) if keep_highest else min(dice)

    result = RollResult(
        dice=dice,
        selected_die=selected,
        bonus=skill_bonus,
        total=selected + skill_bonus,
        advantage=keep_highest,
        disadvantage=not keep_highest,
        dice_adjustment=dice_adjustment,
    )
    logger.debug(
        "Attribute test rolled",
        attribute_value=attribute_value,
        dice=list(dice),
        selected=selected,
        total=result.total,
    )
    return result


def roll_attack(
    attribute_value: int,
    skill_bonus: int,
    target_defense: int,
    threat_range: int = DEFAULT_THREAT_RANGE,
    dice_adjustment: int = 0,
    *,
    rng: DieSource | None = None,
) -> AttackResult:
    """Roll an attack against a defense value.

    The critical check looks at the kept die only, so a critical always
    hits even when the total is below the defense.

    Args:
        attribute_value: Attribute sizing the pool (STR for Fighting, AGI for Aim).
        skill_bonus: Attack skill bonus.
        target_defense: Defense to meet or beat.
        threat_range: Minimum natural die that is a critical.
        dice_adjustment: Pool adjustment from conditions.
        rng: Random source; defaults to the module generator.

    Returns:
        AttackResult with hit and critical flags.
    """
    test = roll_attribute_test(attribute_value, skill_bonus, dice_adjustment, rng=rng)
    is_critical = test.selected_die >= threat_range
    hit = test.total >= target_defense or is_critical

    logger.debug(
        "Attack rolled",
        total=test.total,
        target_defense=target_defense,
        hit=hit,
        is_critical=is_critical,
    )
    return AttackResult(
        roll=test,
        target_defense=target_defense,
        threat_range=threat_range,
        is_critical=is_critical,
        hit=hit,
    )


def roll_resistance(
    attribute_value: int,
    difficulty: int,
    dice_adjustment: int = 0,
    *,
    rng: DieSource | None = None,
) -> ResistanceResult:
    """Roll a resistance test (no skill bonus) against a difficulty."""
    test = roll_attribute_test(attribute_value, 0, dice_adjustment, rng=rng)
    return ResistanceResult(roll=test, difficulty=difficulty, success=test.total >= difficulty)


# =============================================================================
# Damage
# =============================================================================


def parse_damage_formula(formula: str) -> tuple[int, int]:
    """Parse a weapon damage formula of the form ``NdM``.

    Args:
        formula: Formula such as '1d8' or '2d6'.

    Returns:
        Tuple of (die count, die sides).

    Raises:
        FormatError: If the formula is not exactly ``NdM`` with N >= 1 and M >= 2.
    """
    match = _DAMAGE_FORMULA.match(formula.strip()) if formula else None
    if not match:
        raise FormatError(
            "Invalid damage formula, expected NdM (e.g. 1d8)",
            expression=formula,
        )

    count, sides = int(match.group(1)), int(match.group(2))
    if count < 1 or sides < 2:
        raise FormatError(
            "Damage formula needs at least one die of two or more sides",
            expression=formula,
            details={"count": count, "sides": sides},
        )
    return count, sides


def calculate_damage(
    dice_formula: str,
    attribute_value: int,
    is_melee: bool,
    is_critical: bool,
    multiplier: int = DEFAULT_CRITICAL_MULTIPLIER,
    skill_bonus: int = 0,
    *,
    rng: DieSource | None = None,
) -> DamageResult:
    """Roll weapon damage.

    A critical multiplies the number of dice, never the flat bonuses. The
    attribute is added only to melee damage.

    Args:
        dice_formula: Weapon formula (``NdM``).
        attribute_value: Attribute added to melee damage.
        is_melee: Whether the attack was melee.
        is_critical: Whether the attack was a critical.
        multiplier: Die count multiplier on a critical.
        skill_bonus: Flat damage bonus.
        rng: Random source; defaults to the module generator.

    Returns:
        DamageResult with every die rolled and the total.

    Raises:
        FormatError: If the formula is malformed.
    """
    count, sides = parse_damage_formula(dice_formula)
    final_count = count * multiplier if is_critical else count

    dice = roll_dice(final_count, sides, rng=rng)
    attribute_bonus = attribute_value if is_melee else 0
    total = sum(dice) + attribute_bonus + skill_bonus

    logger.debug(
        "Damage rolled",
        formula=dice_formula,
        dice=list(dice),
        is_critical=is_critical,
        total=total,
    )
    return DamageResult(
        formula=dice_formula,
        dice=dice,
        attribute_bonus=attribute_bonus,
        skill_bonus=skill_bonus,
        total=total,
        is_critical=is_critical,
        multiplier=multiplier,
    )


# =============================================================================
# Free-form Rolls
# =============================================================================


def roll_formula(expression: str) -> FormulaRoll:
    """Roll a free-form ``XdY``, ``XdY+Z`` or ``XdY-Z`` formula.

    Used for GM rolls outside the test rules. Limits come from
    ``Settings.dice``. The roll is performed by the d20 library, which
    draws from the global ``random`` module rather than an injected source.

    Args:
        expression: The formula to roll.

    Returns:
        FormulaRoll with the total, individual dice and modifier.

    Raises:
        FormatError: If the formula is not ``XdY[+-Z]``.
        RangeError: If the die count or size is outside the configured limits.
    """
    cleaned = expression.replace(" ", "") if expression else ""
    match = _FREE_FORMULA.match(cleaned)
    if not match:
        raise FormatError(
            "Invalid formula, use XdY, XdY+Z or XdY-Z",
            expression=expression,
        )

    count = int(match.group(1))
    sides = int(match.group(2))
    modifier = int(match.group(3)) if match.group(3) else 0

    limits = get_settings().dice
    if not 1 <= count <= limits.max_dice_count:
        raise RangeError(
            f"Dice count must be between 1 and {limits.max_dice_count}",
            field_name="count",
            invalid_value=count,
        )
    if not limits.min_die_sides <= sides <= limits.max_die_sides:
        raise RangeError(
            f"Die sides must be between {limits.min_die_sides} and {limits.max_die_sides}",
            field_name="sides",
            invalid_value=sides,
        )

    try:
        result = d20.roll(cleaned)
    except d20.RollError as exc:
        raise FormatError(f"Invalid formula: {exc}", expression=expression) from exc

    dice = tuple(_extract_dice_values(result.expr))
    logger.info("Formula rolled", expression=cleaned, total=result.total, dice=list(dice))
    return FormulaRoll(
        expression=expression,
        total=result.total,
        dice=dice,
        modifier=modifier,
        detail=result.result,
    )


def _extract_dice_values(expr: Any) -> list[int]:
    """Collect the kept die values from a d20 expression tree."""
    values: list[int] = []

    def traverse(node: Any) -> None:
        if isinstance(node, d20.Dice):
            values.extend(die.number for die in node.values if die.kept)
        elif hasattr(node, "children"):
            for child in node.children:
                traverse(child)

    traverse(expr)
    return values


__all__ = [
    "DieSource",
    "get_default_rng",
    "reset_default_rng",
    "RollResult",
    "AttackResult",
    "DamageResult",
    "ResistanceResult",
    "FormulaRoll",
    "roll_die",
    "roll_dice",
    "dice_pool",
    "roll_attribute_test",
    "roll_attack",
    "roll_resistance",
    "parse_damage_formula",
    "calculate_damage",
    "roll_formula",
]
