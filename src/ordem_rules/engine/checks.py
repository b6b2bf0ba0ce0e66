"""Skill tests and attacks for a character snapshot.

Wraps the raw dice tests with everything a character brings: the skill's
base attribute, its training bonus and the penalties of the active
conditions. Attribute and global dice penalties change the pool size;
skill, kit, load and ranged penalties change the flat bonus.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from ordem_rules.core.constants import (
    DEFAULT_SKILL_DIFFICULTY,
    DEFAULT_THREAT_RANGE,
    MISSING_KIT_PENALTY,
)
from ordem_rules.core.exceptions import NotFoundError, RuleViolation
from ordem_rules.core.logging import get_logger
from ordem_rules.engine.conditions import PenaltyBundle, calculate_condition_penalties
from ordem_rules.engine.dice import (
    AttackResult,
    DieSource,
    RollResult,
    roll_attack,
    roll_attribute_test,
)
from ordem_rules.models.character import CharacterSnapshot
from ordem_rules.models.enums import Skill, SkillTraining


logger = get_logger(__name__)

ATTACK_SKILLS = frozenset({Skill.FIGHTING, Skill.AIM})
"""Skills that can be used for attack rolls."""


@dataclass(frozen=True)
class SkillModifiers:
    """Everything that feeds a skill roll besides the dice.

    Attributes:
        skill: The skill being rolled.
        attribute_value: Base attribute value (before penalties).
        training_bonus: Bonus from the training rank.
        dice_adjustment: Pool change from conditions.
        bonus_adjustment: Flat change from conditions, kit and load.
        penalties: The folded condition penalties.
    """

    skill: Skill
    attribute_value: int
    training_bonus: int
    dice_adjustment: int
    bonus_adjustment: int
    penalties: PenaltyBundle

    @property
    def total_bonus(self) -> int:
        return self.training_bonus + self.bonus_adjustment


@dataclass(frozen=True)
class SkillTestResult:
    """Outcome of a skill test against a difficulty."""

    modifiers: SkillModifiers
    roll: RollResult
    difficulty: int
    success: bool


@dataclass(frozen=True)
class SkillAttackResult:
    """Outcome of an attack made with a skill."""

    modifiers: SkillModifiers
    attack: AttackResult


def skill_modifiers(
    snapshot: CharacterSnapshot,
    skill: Skill | str,
    *,
    has_kit: bool = True,
) -> SkillModifiers:
    """Work out the pool and bonus adjustments for a skill roll.

    Args:
        snapshot: The character rolling.
        skill: The skill used.
        has_kit: Whether the character carries the skill's kit.

    Returns:
        SkillModifiers for the roll.

    Raises:
        NotFoundError: If the skill is unknown.
        RuleViolation: If the character cannot act, or the skill is
            trained-only and the character is untrained.
    """
    try:
        skill = Skill(skill)
    except ValueError as exc:
        raise NotFoundError(f"Unknown skill: {skill}", kind="skill", key=skill) from exc

    penalties = calculate_condition_penalties(snapshot.conditions)
    if penalties.cannot_act:
        raise RuleViolation(
            "Character cannot act",
            rule="cannot_act",
            details={"conditions": [c.value for c in snapshot.conditions]},
        )

    training = snapshot.skill_training(skill)
    if skill.trained_only and training == SkillTraining.UNTRAINED:
        raise RuleViolation(
            f"{skill} can only be used when trained",
            rule="trained_only_skill",
            details={"skill": skill.value},
        )

    bonus_adjustment = penalties.skill_penalty(skill)
    if skill.requires_kit and not has_kit:
        bonus_adjustment += MISSING_KIT_PENALTY
    if skill.load_penalty:
        bonus_adjustment += penalties.load_penalty

    return SkillModifiers(
        skill=skill,
        attribute_value=snapshot.attributes.get(skill.attribute),
        training_bonus=training.bonus,
        dice_adjustment=penalties.dice_penalty + penalties.attribute_penalty(skill.attribute),
        bonus_adjustment=bonus_adjustment,
        penalties=penalties,
    )


def roll_skill_test(
    snapshot: CharacterSnapshot,
    skill: Skill | str,
    difficulty: int = DEFAULT_SKILL_DIFFICULTY,
    *,
    has_kit: bool = True,
    rng: DieSource | None = None,
) -> SkillTestResult:
    """Roll a skill test for a character against a difficulty (default DT 15)."""
    modifiers = skill_modifiers(snapshot, skill, has_kit=has_kit)
    roll = roll_attribute_test(
        modifiers.attribute_value,
        modifiers.total_bonus,
        modifiers.dice_adjustment,
        rng=rng,
    )
    success = roll.total >= difficulty
    logger.debug(
        "Skill test rolled",
        character=snapshot.name,
        skill=modifiers.skill,
        total=roll.total,
        difficulty=difficulty,
        success=success,
    )
    return SkillTestResult(modifiers=modifiers, roll=roll, difficulty=difficulty, success=success)


def roll_skill_attack(
    snapshot: CharacterSnapshot,
    skill: Skill | str,
    target_defense: int,
    *,
    threat_range: int = DEFAULT_THREAT_RANGE,
    rng: DieSource | None = None,
) -> SkillAttackResult:
    """Roll an attack with Fighting (melee) or Aim (ranged).

    Aim also takes the ranged attack penalty (e.g. from being FALLEN).

    Raises:
        RuleViolation: If the skill is not an attack skill, or the
            character cannot act.
    """
    modifiers = skill_modifiers(snapshot, skill)
    if modifiers.skill not in ATTACK_SKILLS:
        raise RuleViolation(
            f"{modifiers.skill} cannot be used to attack",
            rule="attack_skill",
            details={"skill": modifiers.skill.value},
        )
    if modifiers.skill == Skill.AIM:
        modifiers = replace(
            modifiers,
            bonus_adjustment=modifiers.bonus_adjustment + modifiers.penalties.ranged_attack_penalty,
        )

    attack = roll_attack(
        modifiers.attribute_value,
        modifiers.total_bonus,
        target_defense,
        threat_range,
        modifiers.dice_adjustment,
        rng=rng,
    )
    return SkillAttackResult(modifiers=modifiers, attack=attack)


__all__ = [
    "ATTACK_SKILLS",
    "SkillModifiers",
    "SkillTestResult",
    "SkillAttackResult",
    "skill_modifiers",
    "roll_skill_test",
    "roll_skill_attack",
]
