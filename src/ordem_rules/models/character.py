"""Character models for the Ordem Paranormal rules engine.

These are the plain-data records the engine consumes and returns. A
calling service loads a ``CharacterSnapshot`` from its own storage, hands
it to an engine operation and persists whatever snapshot comes back; the
engine itself never writes anywhere.

Models:
    Attributes: The five signed attribute values.
    ClassConfig: Per-class resource growth (static table ``CLASS_CONFIGS``).
    ResourcePool: A current/maximum pair (PV, SAN or PE).
    CharacterStats: The three resource pools plus NEX.
    ConditionTimer: Round counter for a timed effect.
    CharacterSnapshot: Everything the engine needs about one character.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ordem_rules.core.constants import MAX_NEX, MIN_NEX, NEX_PER_LEVEL
from ordem_rules.models.enums import (
    Attribute,
    CharacterClass,
    Condition,
    Element,
    Skill,
    SkillTraining,
    TimedEffect,
)


NexValue = Annotated[int, Field(ge=MIN_NEX, le=MAX_NEX, description="Exposure percentage (0-99)")]


# =============================================================================
# Attributes
# =============================================================================


class Attributes(BaseModel):
    """The five character attributes.

    Values are signed and unconstrained here; creation-time limits are
    checked by ``engine.resources.validate_creation_attributes``.

    Example:
        >>> attrs = Attributes(agility=2, strength=1, intellect=3, presence=2, vigor=1)
        >>> attrs.get(Attribute.INT)
        3
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    agility: int = Field(default=1, description="Agilidade (AGI)")
    strength: int = Field(default=1, description="Força (FOR)")
    intellect: int = Field(default=1, description="Intelecto (INT)")
    presence: int = Field(default=1, description="Presença (PRE)")
    vigor: int = Field(default=1, description="Vigor (VIG)")

    def get(self, attribute: Attribute) -> int:
        """Get the value of one attribute.

        Args:
            attribute: The attribute to read.

        Returns:
            The attribute value.
        """
        return getattr(self, attribute.field_name)

    @property
    def total(self) -> int:
        """Sum of all five attributes."""
        return self.agility + self.strength + self.intellect + self.presence + self.vigor

    def as_dict(self) -> dict[Attribute, int]:
        """Map every Attribute member to its value."""
        return {attribute: self.get(attribute) for attribute in Attribute}


# =============================================================================
# Class Configuration
# =============================================================================


class ClassConfig(BaseModel):
    """Initial resources and per-level growth for a character class."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    pv_initial: int = Field(ge=0)
    pv_per_level: int = Field(ge=0)
    san_initial: int = Field(ge=0)
    san_per_level: int = Field(ge=0)
    pe_initial: int = Field(ge=0)
    pe_per_level: int = Field(ge=0)


CLASS_CONFIGS = MappingProxyType(
    {
        CharacterClass.COMBATENTE: ClassConfig(
            pv_initial=20, pv_per_level=4, san_initial=12, san_per_level=3, pe_initial=2, pe_per_level=2
        ),
        CharacterClass.ESPECIALISTA: ClassConfig(
            pv_initial=16, pv_per_level=3, san_initial=16, san_per_level=4, pe_initial=3, pe_per_level=3
        ),
        CharacterClass.OCULTISTA: ClassConfig(
            pv_initial=12, pv_per_level=2, san_initial=20, san_per_level=5, pe_initial=4, pe_per_level=4
        ),
    }
)
"""Read-only class table keyed by CharacterClass."""


# =============================================================================
# Resources
# =============================================================================


class ResourcePool(BaseModel):
    """A resource with a current and a maximum value.

    ``current`` is not clamped on construction: damage can be recorded as
    is and callers decide when to clamp.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    current: int = Field(description="Current value")
    maximum: int = Field(ge=0, description="Maximum value")

    def with_current(self, current: int) -> ResourcePool:
        """Return a copy with a new current value clamped to [0, maximum]."""
        return self.model_copy(update={"current": max(0, min(current, self.maximum))})

    def with_maximum(self, maximum: int) -> ResourcePool:
        """Return a copy with a new maximum, clamping current to it."""
        maximum = max(0, maximum)
        return ResourcePool(current=max(0, min(self.current, maximum)), maximum=maximum)


class CharacterStats(BaseModel):
    """Resource pools and exposure level of a character."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    pv: ResourcePool
    san: ResourcePool
    pe: ResourcePool
    nex: NexValue = 0

    @property
    def level(self) -> int:
        """Exposure level: one level per 5% of NEX."""
        return self.nex // NEX_PER_LEVEL


class ConditionTimer(BaseModel):
    """Rounds elapsed for a timed effect owned by the per-turn processor."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    effect: TimedEffect
    rounds_elapsed: int = Field(default=0, ge=0)


# =============================================================================
# Character Snapshot
# =============================================================================


class CharacterSnapshot(BaseModel):
    """Immutable view of a character for one engine call.

    Attributes:
        name: Optional display name, used only in log context.
        character_class: The character's class.
        attributes: The five attribute values.
        stats: PV, SAN and PE pools plus NEX.
        conditions: Active conditions, de-duplicated and in order applied.
        timers: Round counters, at most one per timed effect.
        skills: Training rank per skill; missing skills are UNTRAINED.
        affinity: Element the character is bound to, if any.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str | None = None
    character_class: CharacterClass
    attributes: Attributes = Field(default_factory=Attributes)
    stats: CharacterStats
    conditions: tuple[Condition, ...] = ()
    timers: tuple[ConditionTimer, ...] = ()
    skills: dict[Skill, SkillTraining] = Field(default_factory=dict)
    affinity: Element | None = None

    @field_validator("conditions")
    @classmethod
    def dedupe_conditions(cls, value: tuple[Condition, ...]) -> tuple[Condition, ...]:
        """Drop repeated conditions, keeping the first occurrence."""
        return tuple(dict.fromkeys(value))

    @field_validator("timers")
    @classmethod
    def validate_unique_timers(cls, value: tuple[ConditionTimer, ...]) -> tuple[ConditionTimer, ...]:
        """Ensure there is at most one timer per effect.

        Raises:
            ValueError: If two timers share an effect.
        """
        effects = [timer.effect for timer in value]
        if len(effects) != len(set(effects)):
            msg = f"Duplicate condition timers: {effects}"
            raise ValueError(msg)
        return value

    def has_condition(self, condition: Condition) -> bool:
        """Check whether a condition is active."""
        return condition in self.conditions

    def timer_for(self, effect: TimedEffect) -> ConditionTimer | None:
        """Get the timer for an effect, or None when it is not running."""
        for timer in self.timers:
            if timer.effect == effect:
                return timer
        return None

    def skill_training(self, skill: Skill) -> SkillTraining:
        """Get the training rank for a skill (UNTRAINED when unlisted)."""
        return self.skills.get(skill, SkillTraining.UNTRAINED)


__all__ = [
    "NexValue",
    "Attributes",
    "ClassConfig",
    "CLASS_CONFIGS",
    "ResourcePool",
    "CharacterStats",
    "ConditionTimer",
    "CharacterSnapshot",
]
