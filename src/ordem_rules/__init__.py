"""ordem-rules - Rules engine for the Ordem Paranormal tabletop RPG.

A stateless, synchronous library that turns a character snapshot and a
requested action into dice outcomes, derived resources and a new
snapshot. Persistence, transport and UI belong to the caller.

Example:
    >>> import random
    >>> from ordem_rules import conjure_ritual, process_turn
    >>> report = process_turn(snapshot, rng=random.Random(1))
    >>> report.changes
    ('No changes',)

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 snapshots, rituals and enums.
    engine: Dice, resources, conditions, turns, rituals, vitals, checks.
"""

from __future__ import annotations

# Core
from ordem_rules.core.config import Settings, get_settings
from ordem_rules.core.exceptions import OrdemRulesError
from ordem_rules.core.logging import configure_logging, get_logger

# Models
from ordem_rules.models import (
    Attributes,
    CastMode,
    CharacterClass,
    CharacterSnapshot,
    CharacterStats,
    Condition,
    Element,
    ResourcePool,
    Ritual,
    RitualCost,
    Skill,
    SkillTraining,
)

# Engine
from ordem_rules.engine import (
    apply_condition,
    calculate_condition_penalties,
    conjure_ritual,
    process_turn,
    remove_condition,
    roll_attack,
    roll_attribute_test,
)


__version__ = "0.1.0"
__all__ = [
    "__version__",
    # Core
    "OrdemRulesError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Attributes",
    "CastMode",
    "CharacterClass",
    "CharacterSnapshot",
    "CharacterStats",
    "Condition",
    "Element",
    "ResourcePool",
    "Ritual",
    "RitualCost",
    "Skill",
    "SkillTraining",
    # Engine
    "apply_condition",
    "remove_condition",
    "calculate_condition_penalties",
    "roll_attribute_test",
    "roll_attack",
    "process_turn",
    "conjure_ritual",
]
