"""Enumeration types for the Ordem Paranormal rules engine.

This module defines the closed vocabularies the engine works with:
attributes, classes, skills and their training ranks, conditions, ritual
elements and casting modes. Static per-member rule data (a skill's base
attribute, a training rank's bonus) is exposed as properties backed by
read-only tables.
"""

from __future__ import annotations

from enum import StrEnum
from types import MappingProxyType


class Attribute(StrEnum):
    """The five character attributes.

    Attribute values size the d20 pool of every test.
    """

    AGI = "agi"
    STR = "str"
    INT = "int"
    PRE = "pre"
    VIG = "vig"

    @property
    def field_name(self) -> str:
        """Get the matching field name on ``Attributes``.

        Returns:
            Field name (e.g., 'agility' for AGI).
        """
        return _ATTRIBUTE_FIELDS[self]


_ATTRIBUTE_FIELDS = MappingProxyType(
    {
        Attribute.AGI: "agility",
        Attribute.STR: "strength",
        Attribute.INT: "intellect",
        Attribute.PRE: "presence",
        Attribute.VIG: "vigor",
    }
)


class CharacterClass(StrEnum):
    """Character classes; each one has its own resource growth."""

    COMBATENTE = "combatente"
    ESPECIALISTA = "especialista"
    OCULTISTA = "ocultista"


class SkillTraining(StrEnum):
    """Skill training ranks, from untrained to expert.

    Ranks are ordered; ``rank`` gives the position for comparisons.
    """

    UNTRAINED = "untrained"
    TRAINED = "trained"
    COMPETENT = "competent"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        """Get the ordinal position of the training rank.

        Returns:
            0 for UNTRAINED up to 3 for EXPERT.
        """
        return _TRAINING_ORDER.index(self)

    @property
    def bonus(self) -> int:
        """Get the flat skill bonus granted by this rank.

        Returns:
            Bonus added to test totals.
        """
        return _TRAINING_BONUS[self]

    @property
    def min_nex(self) -> int:
        """Get the minimum NEX needed to hold this rank.

        Returns:
            Minimum NEX percentage.
        """
        return _TRAINING_MIN_NEX[self]


_TRAINING_ORDER = (
    SkillTraining.UNTRAINED,
    SkillTraining.TRAINED,
    SkillTraining.COMPETENT,
    SkillTraining.EXPERT,
)

_TRAINING_BONUS = MappingProxyType(
    {
        SkillTraining.UNTRAINED: 0,
        SkillTraining.TRAINED: 5,
        SkillTraining.COMPETENT: 10,
        SkillTraining.EXPERT: 15,
    }
)

_TRAINING_MIN_NEX = MappingProxyType(
    {
        SkillTraining.UNTRAINED: 0,
        SkillTraining.TRAINED: 0,
        SkillTraining.COMPETENT: 35,
        SkillTraining.EXPERT: 70,
    }
)


class Skill(StrEnum):
    """Skills and their rule metadata.

    Each skill is tested with a base attribute. Some skills can only be
    used when trained, some suffer armor/overload penalties and some need
    a kit to be used without penalty.
    """

    ACROBATICS = "acrobatics"
    ANIMAL_HANDLING = "animal_handling"
    ARTS = "arts"
    ATHLETICS = "athletics"
    CURRENT_AFFAIRS = "current_affairs"
    SCIENCES = "sciences"
    CRIME = "crime"
    DIPLOMACY = "diplomacy"
    DECEPTION = "deception"
    FORTITUDE = "fortitude"
    STEALTH = "stealth"
    INITIATIVE = "initiative"
    INTIMIDATION = "intimidation"
    INTUITION = "intuition"
    INVESTIGATION = "investigation"
    FIGHTING = "fighting"
    MEDICINE = "medicine"
    OCCULTISM = "occultism"
    PERCEPTION = "perception"
    PILOTING = "piloting"
    AIM = "aim"
    PROFESSION = "profession"
    REFLEXES = "reflexes"
    RELIGION = "religion"
    SURVIVAL = "survival"
    TACTICS = "tactics"
    TECHNOLOGY = "technology"
    WILL = "will"

    @property
    def attribute(self) -> Attribute:
        """Get the base attribute used to test this skill.

        Returns:
            The Attribute whose value sizes the dice pool.
        """
        return _SKILL_ATTRIBUTES[self]

    @property
    def trained_only(self) -> bool:
        """Whether the skill requires at least TRAINED to be used."""
        return self in _TRAINED_ONLY_SKILLS

    @property
    def load_penalty(self) -> bool:
        """Whether armor and overload penalties apply to this skill."""
        return self in _LOAD_PENALTY_SKILLS

    @property
    def requires_kit(self) -> bool:
        """Whether the skill is penalized when used without its kit."""
        return self in _KIT_SKILLS


_SKILL_ATTRIBUTES = MappingProxyType(
    {
        Skill.ACROBATICS: Attribute.AGI,
        Skill.ANIMAL_HANDLING: Attribute.PRE,
        Skill.ARTS: Attribute.PRE,
        Skill.ATHLETICS: Attribute.STR,
        Skill.CURRENT_AFFAIRS: Attribute.INT,
        Skill.SCIENCES: Attribute.INT,
        Skill.CRIME: Attribute.AGI,
        Skill.DIPLOMACY: Attribute.PRE,
        Skill.DECEPTION: Attribute.PRE,
        Skill.FORTITUDE: Attribute.VIG,
        Skill.STEALTH: Attribute.AGI,
        Skill.INITIATIVE: Attribute.AGI,
        Skill.INTIMIDATION: Attribute.PRE,
        Skill.INTUITION: Attribute.INT,
        Skill.INVESTIGATION: Attribute.INT,
        Skill.FIGHTING: Attribute.STR,
        Skill.MEDICINE: Attribute.INT,
        Skill.OCCULTISM: Attribute.INT,
        Skill.PERCEPTION: Attribute.PRE,
        Skill.PILOTING: Attribute.AGI,
        Skill.AIM: Attribute.AGI,
        Skill.PROFESSION: Attribute.INT,
        Skill.REFLEXES: Attribute.AGI,
        Skill.RELIGION: Attribute.PRE,
        Skill.SURVIVAL: Attribute.INT,
        Skill.TACTICS: Attribute.INT,
        Skill.TECHNOLOGY: Attribute.INT,
        Skill.WILL: Attribute.PRE,
    }
)

_TRAINED_ONLY_SKILLS = frozenset(
    {
        Skill.ANIMAL_HANDLING,
        Skill.ARTS,
        Skill.SCIENCES,
        Skill.CRIME,
        Skill.MEDICINE,
        Skill.OCCULTISM,
        Skill.PILOTING,
        Skill.PROFESSION,
        Skill.RELIGION,
        Skill.TACTICS,
        Skill.TECHNOLOGY,
    }
)

_LOAD_PENALTY_SKILLS = frozenset({Skill.ACROBATICS, Skill.CRIME, Skill.STEALTH})

_KIT_SKILLS = frozenset({Skill.CRIME, Skill.DECEPTION, Skill.MEDICINE, Skill.TECHNOLOGY})


class Condition(StrEnum):
    """Status conditions a character can carry.

    The set is closed; the engine's effect and transition tables are keyed
    by these members.
    """

    FALLEN = "fallen"
    UNPREPARED = "unprepared"
    STUNNED = "stunned"
    UNCONSCIOUS = "unconscious"
    DYING = "dying"
    SHAKEN = "shaken"
    AFRAID = "afraid"
    DISTURBED = "disturbed"
    GOING_MAD = "going_mad"
    SLOWED = "slowed"
    IMMOBILE = "immobile"
    PARALYZED = "paralyzed"
    GRAPPLED = "grappled"
    ENTANGLED = "entangled"
    BLIND = "blind"
    DEAF = "deaf"
    SICKENED = "sickened"
    NAUSEOUS = "nauseous"
    DISEASED = "diseased"
    POISONED = "poisoned"
    FRAIL = "frail"
    WEAKENED = "weakened"
    DISHEARTENED = "disheartened"
    FRUSTRATED = "frustrated"
    EXHAUSTED = "exhausted"
    FATIGUED = "fatigued"
    BLEEDING = "bleeding"
    ON_FIRE = "on_fire"
    FASCINATED = "fascinated"
    DEFENSELESS = "defenseless"
    OVERLOADED = "overloaded"
    DEAD = "dead"

    @property
    def display_name(self) -> str:
        """Get human-readable condition name.

        Returns:
            Formatted name (e.g., 'Going Mad').
        """
        return self.value.replace("_", " ").title()


class Element(StrEnum):
    """Paranormal elements rituals and affinities belong to."""

    BLOOD = "blood"
    DEATH = "death"
    ENERGY = "energy"
    KNOWLEDGE = "knowledge"
    FEAR = "fear"
    VARIABLE = "variable"


class CastMode(StrEnum):
    """Ritual casting modes.

    DISCIPLE and TRUE are enhanced versions that cost extra PE; TRUE also
    requires a matching affinity.
    """

    NORMAL = "normal"
    DISCIPLE = "disciple"
    TRUE = "true"


class TimedEffect(StrEnum):
    """Effects the per-turn processor keeps a round counter for."""

    DYING = "dying"
    INSANITY = "insanity"


class DamageType(StrEnum):
    """Which pool a hit subtracts from: PV for physical, SAN for mental."""

    PHYSICAL = "physical"
    MENTAL = "mental"


__all__ = [
    "Attribute",
    "CharacterClass",
    "SkillTraining",
    "Skill",
    "Condition",
    "Element",
    "CastMode",
    "TimedEffect",
    "DamageType",
]
