"""Rule constants for the Ordem Paranormal rules engine.

Static numbers from the rule set. Tables keyed by enums live next to their
enums in ``ordem_rules.models``; everything here is a plain scalar or a
small mapping keyed by plain ints.
"""

from __future__ import annotations

from types import MappingProxyType

# =============================================================================
# Exposure (NEX)
# =============================================================================

MIN_NEX = 0
"""Lowest exposure percentage."""

MAX_NEX = 99
"""Highest exposure percentage."""

NEX_PER_LEVEL = 5
"""Every 5% of NEX counts as one level for resource formulas."""

# =============================================================================
# Dice
# =============================================================================

TEST_DIE_SIDES = 20
"""Tests, attacks and resistances roll d20 pools."""

ZERO_POOL_DICE = 2
"""Dice rolled (keep lowest) when the attribute pool is zero or less."""

DEFAULT_THREAT_RANGE = 20
"""Minimum natural die that counts as a critical by default."""

DEFAULT_CRITICAL_MULTIPLIER = 2
"""Default multiplier applied to the damage die count on a critical."""

DEFAULT_SKILL_DIFFICULTY = 15
"""DT used for skill tests when the caller does not provide one."""

BLEEDING_DAMAGE_DIE = 6
"""Bleeding deals 1d6 true damage each turn."""

# =============================================================================
# Resources
# =============================================================================

BASE_DEFENSE = 10
"""Defense before agility and equipment bonuses."""

INJURED_RATIO = 0.5
"""A character at or below half PV is injured."""

LOW_SANITY_RATIO = 0.25
"""A character at or below a quarter of max SAN is at low sanity."""

MIN_CARRY_CAPACITY = 2
"""Carry capacity floor, even with zero or negative strength."""

CARRY_CAPACITY_PER_STRENGTH = 5
"""Load units granted per point of strength."""

# =============================================================================
# Character Creation
# =============================================================================

CREATION_ATTRIBUTE_TOTAL = 9
"""Sum of the five attributes at character creation."""

CREATION_ATTRIBUTE_MAX = 3
"""Highest value a single attribute may have at creation."""

CREATION_MAX_ZERO_ATTRIBUTES = 1
"""At most one attribute may be reduced to zero at creation."""

# =============================================================================
# PE Turn Limit
# =============================================================================

PE_TURN_LIMIT_BANDS: tuple[tuple[int, int], ...] = (
    (0, 1),
    (10, 2),
    (20, 3),
    (30, 4),
    (40, 5),
    (50, 6),
    (60, 7),
    (70, 8),
    (80, 9),
    (90, 10),
)
"""(minimum NEX, PE limit) rows up to NEX 94, highest row first wins."""

PE_TURN_LIMIT_GROWTH_START = 95
"""NEX where the linear tail of the turn limit starts."""

PE_TURN_LIMIT_CAP = 20
"""Maximum PE spend per turn."""

PE_TURN_LIMIT_CAPSTONE_NEX = 99
"""NEX 99 grants the full turn limit cap."""

# =============================================================================
# Conditions
# =============================================================================

DYING_ROUNDS_TO_DEATH = 3
"""Rounds a character can stay DYING before dying."""

INSANITY_REPORT_THRESHOLDS = frozenset({1, 5, 10})
"""Insanity timer values that are reported to the caller."""

MISSING_KIT_PENALTY = -5
"""Skill bonus penalty when a kit-dependent skill is used without its kit."""

# =============================================================================
# Rituals
# =============================================================================

CIRCLE_MIN_NEX = MappingProxyType({1: 0, 2: 25, 3: 55, 4: 85})
"""Minimum NEX required to cast a ritual of each circle."""

RITUAL_BASE_DT = 20
"""Ritual cost tests use DT = 20 + PE cost."""

CRITICAL_FAILURE_MAX_SAN_LOSS = 1
"""Permanent max SAN loss on a critical ritual failure."""


__all__ = [
    "MIN_NEX",
    "MAX_NEX",
    "NEX_PER_LEVEL",
    "TEST_DIE_SIDES",
    "ZERO_POOL_DICE",
    "DEFAULT_THREAT_RANGE",
    "DEFAULT_CRITICAL_MULTIPLIER",
    "DEFAULT_SKILL_DIFFICULTY",
    "BLEEDING_DAMAGE_DIE",
    "BASE_DEFENSE",
    "INJURED_RATIO",
    "LOW_SANITY_RATIO",
    "MIN_CARRY_CAPACITY",
    "CARRY_CAPACITY_PER_STRENGTH",
    "CREATION_ATTRIBUTE_TOTAL",
    "CREATION_ATTRIBUTE_MAX",
    "CREATION_MAX_ZERO_ATTRIBUTES",
    "PE_TURN_LIMIT_BANDS",
    "PE_TURN_LIMIT_GROWTH_START",
    "PE_TURN_LIMIT_CAP",
    "PE_TURN_LIMIT_CAPSTONE_NEX",
    "DYING_ROUNDS_TO_DEATH",
    "INSANITY_REPORT_THRESHOLDS",
    "MISSING_KIT_PENALTY",
    "CIRCLE_MIN_NEX",
    "RITUAL_BASE_DT",
    "CRITICAL_FAILURE_MAX_SAN_LOSS",
]
