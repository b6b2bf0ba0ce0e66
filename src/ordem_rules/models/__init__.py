"""Pydantic V2 data models for the Ordem Paranormal rules engine.

Submodules:
    enums: Closed vocabularies (Attribute, Skill, Condition, Element, ...).
    character: Attributes, resource pools, timers and CharacterSnapshot.
    ritual: Ritual definitions and their PE costs.

Example:
    >>> from ordem_rules.models import (
    ...     Attributes, CharacterClass, CharacterSnapshot, CharacterStats, ResourcePool
    ... )
    >>> snapshot = CharacterSnapshot(
    ...     character_class=CharacterClass.OCULTISTA,
    ...     stats=CharacterStats(
    ...         pv=ResourcePool(current=12, maximum=12),
    ...         san=ResourcePool(current=20, maximum=20),
    ...         pe=ResourcePool(current=4, maximum=4),
    ...     ),
    ... )
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from ordem_rules.models.enums import (
    Attribute,
    CastMode,
    CharacterClass,
    Condition,
    DamageType,
    Element,
    Skill,
    SkillTraining,
    TimedEffect,
)

# =============================================================================
# Character
# =============================================================================
from ordem_rules.models.character import (
    CLASS_CONFIGS,
    Attributes,
    CharacterSnapshot,
    CharacterStats,
    ClassConfig,
    ConditionTimer,
    ResourcePool,
)

# =============================================================================
# Rituals
# =============================================================================
from ordem_rules.models.ritual import Ritual, RitualCost


__all__ = [
    # Enums
    "Attribute",
    "CastMode",
    "CharacterClass",
    "Condition",
    "DamageType",
    "Element",
    "Skill",
    "SkillTraining",
    "TimedEffect",
    # Character
    "CLASS_CONFIGS",
    "Attributes",
    "CharacterSnapshot",
    "CharacterStats",
    "ClassConfig",
    "ConditionTimer",
    "ResourcePool",
    # Rituals
    "Ritual",
    "RitualCost",
]
