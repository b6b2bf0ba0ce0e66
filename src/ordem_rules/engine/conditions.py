"""Condition state machine for Ordem Paranormal.

The rules live in three read-only tables:

* ``CONDITION_EFFECTS``: the penalty record each condition contributes.
* ``ESCALATIONS``: conditions that turn into a worse one when re-applied.
* ``DERIVED_CONDITIONS``: conditions that bring others along when applied.

``apply_condition`` and ``remove_condition`` compute new condition tuples;
``calculate_condition_penalties`` folds a condition set into a single
``PenaltyBundle``. Removal does not cascade and escalation is one-way:
removing STUNNED leaves the UNPREPARED it brought, and AFRAID never steps
back down to SHAKEN.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ordem_rules.core.exceptions import NotFoundError
from ordem_rules.core.logging import get_logger
from ordem_rules.engine.resources import is_dying, is_insane, is_low_sanity
from ordem_rules.models.enums import Attribute, Condition, Skill


logger = get_logger(__name__)


# =============================================================================
# Effect Records
# =============================================================================


@dataclass(frozen=True)
class ConditionEffect:
    """What a single condition contributes to a character's penalties.

    Attributes:
        defense: Defense delta.
        defense_base_only: Defense ignores agility and equipment.
        dice: Pool delta for every test.
        ranged_attack: Bonus delta for ranged attacks.
        load: Bonus delta for load-affected skills.
        attributes: Pool delta for tests of specific attributes.
        skills: Bonus delta for specific skills.
        speed_multiplier: Movement multiplier.
        cannot_act / cannot_react / cannot_move / one_action_per_turn /
        cannot_approach / must_flee: Restriction flags.
    """

    defense: int = 0
    defense_base_only: bool = False
    dice: int = 0
    ranged_attack: int = 0
    load: int = 0
    attributes: Mapping[Attribute, int] = field(default_factory=lambda: MappingProxyType({}))
    skills: Mapping[Skill, int] = field(default_factory=lambda: MappingProxyType({}))
    speed_multiplier: float = 1.0
    cannot_act: bool = False
    cannot_react: bool = False
    cannot_move: bool = False
    one_action_per_turn: bool = False
    cannot_approach: bool = False
    must_flee: bool = False


_PHYSICAL_ATTRIBUTES = (Attribute.AGI, Attribute.STR, Attribute.VIG)
_MENTAL_ATTRIBUTES = (Attribute.INT, Attribute.PRE)


def _attribute_penalty(attributes: Iterable[Attribute], amount: int) -> Mapping[Attribute, int]:
    return MappingProxyType({attribute: amount for attribute in attributes})


_NO_EFFECT = ConditionEffect()

CONDITION_EFFECTS: Mapping[Condition, ConditionEffect] = MappingProxyType(
    {
        Condition.FALLEN: ConditionEffect(defense=-5, ranged_attack=-5),
        Condition.UNPREPARED: ConditionEffect(
            defense=-5, defense_base_only=True, dice=-2, cannot_react=True
        ),
        Condition.STUNNED: ConditionEffect(
            defense=-5, defense_base_only=True, cannot_act=True, cannot_react=True
        ),
        Condition.UNCONSCIOUS: ConditionEffect(
            defense_base_only=True, cannot_act=True, cannot_react=True
        ),
        Condition.DYING: ConditionEffect(
            defense_base_only=True, cannot_act=True, cannot_react=True
        ),
        Condition.SHAKEN: ConditionEffect(dice=-1),
        Condition.AFRAID: ConditionEffect(dice=-2, cannot_approach=True, must_flee=True),
        Condition.DISTURBED: ConditionEffect(attributes=_attribute_penalty(_MENTAL_ATTRIBUTES, -2)),
        Condition.GOING_MAD: ConditionEffect(attributes=_attribute_penalty(_MENTAL_ATTRIBUTES, -2)),
        Condition.SLOWED: ConditionEffect(speed_multiplier=0.5),
        Condition.IMMOBILE: ConditionEffect(cannot_move=True),
        Condition.PARALYZED: ConditionEffect(defense_base_only=True, cannot_move=True),
        Condition.GRAPPLED: ConditionEffect(dice=-1, cannot_move=True),
        Condition.ENTANGLED: ConditionEffect(dice=-1, cannot_move=True),
        Condition.BLIND: ConditionEffect(
            attributes=_attribute_penalty((Attribute.AGI, Attribute.STR), -2),
            skills=MappingProxyType({Skill.PERCEPTION: -2}),
        ),
        Condition.DEAF: ConditionEffect(
            skills=MappingProxyType({Skill.PERCEPTION: -2, Skill.INITIATIVE: -2}),
        ),
        Condition.SICKENED: ConditionEffect(dice=-1, one_action_per_turn=True),
        Condition.NAUSEOUS: ConditionEffect(dice=-1, one_action_per_turn=True),
        Condition.DISEASED: _NO_EFFECT,
        Condition.POISONED: _NO_EFFECT,
        Condition.FRAIL: ConditionEffect(attributes=_attribute_penalty(_PHYSICAL_ATTRIBUTES, -1)),
        Condition.WEAKENED: ConditionEffect(attributes=_attribute_penalty(_PHYSICAL_ATTRIBUTES, -2)),
        Condition.FRUSTRATED: ConditionEffect(attributes=_attribute_penalty(_MENTAL_ATTRIBUTES, -1)),
        Condition.DISHEARTENED: ConditionEffect(
            attributes=_attribute_penalty(_MENTAL_ATTRIBUTES, -2)
        ),
        Condition.EXHAUSTED: ConditionEffect(
            attributes=_attribute_penalty(_PHYSICAL_ATTRIBUTES, -2), speed_multiplier=0.5
        ),
        Condition.FATIGUED: ConditionEffect(
            attributes=_attribute_penalty(_PHYSICAL_ATTRIBUTES, -1), speed_multiplier=0.5
        ),
        Condition.BLEEDING: _NO_EFFECT,
        Condition.ON_FIRE: _NO_EFFECT,
        Condition.FASCINATED: ConditionEffect(skills=MappingProxyType({Skill.PERCEPTION: -2})),
        Condition.DEFENSELESS: ConditionEffect(defense_base_only=True, cannot_react=True),
        Condition.OVERLOADED: ConditionEffect(defense=-5, load=-5),
        Condition.DEAD: ConditionEffect(cannot_act=True, cannot_react=True, cannot_move=True),
    }
)
"""Penalty record per condition."""

ESCALATIONS: Mapping[Condition, Condition] = MappingProxyType(
    {
        Condition.SHAKEN: Condition.AFRAID,
        Condition.WEAKENED: Condition.UNCONSCIOUS,
    }
)
"""Condition re-applied -> condition it becomes."""

DERIVED_CONDITIONS: Mapping[Condition, tuple[Condition, ...]] = MappingProxyType(
    {
        Condition.DYING: (Condition.UNCONSCIOUS, Condition.BLEEDING),
        Condition.STUNNED: (Condition.UNPREPARED,),
        Condition.PARALYZED: (Condition.IMMOBILE, Condition.DEFENSELESS),
        Condition.EXHAUSTED: (Condition.WEAKENED, Condition.SLOWED),
    }
)
"""Condition applied -> conditions added alongside it."""


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class ConditionChange:
    """Result of applying a condition.

    Attributes:
        conditions: The new condition set, in application order.
        message: Human-readable summary of what happened.
        auto_added: Conditions added by escalation or derivation.
        auto_removed: Conditions removed by escalation.
    """

    conditions: tuple[Condition, ...]
    message: str
    auto_added: tuple[Condition, ...] = ()
    auto_removed: tuple[Condition, ...] = ()


@dataclass(frozen=True)
class PenaltyBundle:
    """All penalties from a condition set, folded together.

    Numeric deltas are summed across conditions, flags are OR-ed and the
    speed multiplier keeps the most restrictive value.
    """

    defense: int = 0
    defense_base_only: bool = False
    dice_penalty: int = 0
    ranged_attack_penalty: int = 0
    load_penalty: int = 0
    cannot_act: bool = False
    cannot_react: bool = False
    cannot_move: bool = False
    one_action_per_turn: bool = False
    cannot_approach: bool = False
    must_flee: bool = False
    speed_multiplier: float = 1.0
    attribute_penalties: Mapping[Attribute, int] = field(
        default_factory=lambda: {attribute: 0 for attribute in Attribute}
    )
    skill_penalties: Mapping[Skill, int] = field(default_factory=dict)

    def attribute_penalty(self, attribute: Attribute) -> int:
        return self.attribute_penalties.get(attribute, 0)

    def skill_penalty(self, skill: Skill) -> int:
        return self.skill_penalties.get(skill, 0)


# =============================================================================
# Operations
# =============================================================================


def _coerce(condition: Condition | str) -> Condition:
    try:
        return Condition(condition)
    except ValueError as exc:
        raise NotFoundError(
            f"Unknown condition: {condition}",
            kind="condition",
            key=condition,
        ) from exc


def apply_condition(
    condition: Condition | str,
    current: Iterable[Condition | str],
) -> ConditionChange:
    """Apply a condition to a condition set.

    Rules in priority order:

    1. Re-applying an escalating condition replaces it with its escalated
       form (SHAKEN -> AFRAID, WEAKENED -> UNCONSCIOUS).
    2. Re-applying any other active condition is a no-op.
    3. Otherwise the condition is added together with any derived
       conditions not already present.

    Args:
        condition: The condition to apply.
        current: The active conditions.

    Returns:
        ConditionChange with the new set and what was added or removed.

    Raises:
        NotFoundError: If ``condition`` is not a known condition.
    """
    condition = _coerce(condition)
    conditions = list(dict.fromkeys(_coerce(c) for c in current))

    if condition in conditions and condition in ESCALATIONS:
        escalated = ESCALATIONS[condition]
        conditions.remove(condition)
        added: tuple[Condition, ...] = ()
        if escalated not in conditions:
            conditions.append(escalated)
            added = (escalated,)
        logger.info("Condition escalated", condition=condition, escalated=escalated)
        return ConditionChange(
            conditions=tuple(conditions),
            message=f"{condition.display_name} escalated to {escalated.display_name}",
            auto_added=added,
            auto_removed=(condition,),
        )

    if condition in conditions:
        return ConditionChange(
            conditions=tuple(conditions),
            message=f"{condition.display_name} already active",
        )

    conditions.append(condition)
    derived = tuple(c for c in DERIVED_CONDITIONS.get(condition, ()) if c not in conditions)
    conditions.extend(derived)

    message = f"{condition.display_name} applied"
    if derived:
        message += " (also: " + ", ".join(c.display_name for c in derived) + ")"
    logger.info("Condition applied", condition=condition, derived=list(derived))
    return ConditionChange(conditions=tuple(conditions), message=message, auto_added=derived)


def remove_condition(
    condition: Condition | str,
    current: Iterable[Condition | str],
) -> tuple[Condition, ...]:
    """Remove one condition; conditions it brought along stay.

    Raises:
        NotFoundError: If ``condition`` is not a known condition.
    """
    condition = _coerce(condition)
    return tuple(c for c in dict.fromkeys(_coerce(c) for c in current) if c != condition)


def calculate_condition_penalties(conditions: Iterable[Condition | str]) -> PenaltyBundle:
    """Fold a condition set into a PenaltyBundle.

    Unknown tags are ignored and duplicates count once. The result is
    computed from scratch on every call.

    Example:
        >>> calculate_condition_penalties([Condition.SHAKEN]).dice_penalty
        -1
    """
    known: list[Condition] = []
    for tag in conditions:
        try:
            known.append(Condition(tag))
        except ValueError:
            continue

    defense = dice = ranged = load = 0
    speed = 1.0
    flags = dict.fromkeys(
        (
            "defense_base_only",
            "cannot_act",
            "cannot_react",
            "cannot_move",
            "one_action_per_turn",
            "cannot_approach",
            "must_flee",
        ),
        False,
    )
    attribute_penalties = {attribute: 0 for attribute in Attribute}
    skill_penalties: dict[Skill, int] = {}

    for condition in dict.fromkeys(known):
        effect = CONDITION_EFFECTS[condition]
        defense += effect.defense
        dice += effect.dice
        ranged += effect.ranged_attack
        load += effect.load
        speed = min(speed, effect.speed_multiplier)
        for flag in flags:
            flags[flag] = flags[flag] or getattr(effect, flag)
        for attribute, delta in effect.attributes.items():
            attribute_penalties[attribute] += delta
        for skill, delta in effect.skills.items():
            skill_penalties[skill] = skill_penalties.get(skill, 0) + delta

    return PenaltyBundle(
        defense=defense,
        dice_penalty=dice,
        ranged_attack_penalty=ranged,
        load_penalty=load,
        speed_multiplier=speed,
        attribute_penalties=attribute_penalties,
        skill_penalties=skill_penalties,
        **flags,
    )


# =============================================================================
# Resource-driven Conditions
# =============================================================================


def sync_health_conditions(pv: int, conditions: Iterable[Condition]) -> ConditionChange:
    """Align conditions with the current PV.

    PV at or below 0 applies DYING (with its derived conditions); PV above
    0 ends DYING together with the UNCONSCIOUS it brought.

    DEAD is terminal: a dead character keeps its conditions.
    """
    current = tuple(dict.fromkeys(conditions))
    if Condition.DEAD in current:
        return ConditionChange(conditions=current, message="Dead: no health conditions changed")
    if is_dying(pv):
        if Condition.DYING in current:
            return ConditionChange(conditions=current, message="Dying already active")
        change = apply_condition(Condition.DYING, current)
        return ConditionChange(
            conditions=change.conditions,
            message=change.message,
            auto_added=(Condition.DYING, *change.auto_added),
        )

    if Condition.DYING not in current:
        return ConditionChange(conditions=current, message="No health conditions changed")
    cleared = tuple(c for c in (Condition.DYING, Condition.UNCONSCIOUS) if c in current)
    remaining = tuple(c for c in current if c not in cleared)
    logger.info("Health conditions cleared", cleared=list(cleared))
    return ConditionChange(
        conditions=remaining,
        message="Recovered: " + ", ".join(c.display_name for c in cleared),
        auto_removed=cleared,
    )


def sync_sanity_conditions(san: int, max_san: int, conditions: Iterable[Condition]) -> ConditionChange:
    """Add sanity conditions for the current SAN.

    SAN 0 adds GOING_MAD; otherwise SAN at or below 25% of max adds
    DISTURBED. Recovering sanity does not remove them.
    """
    current = list(dict.fromkeys(conditions))
    added: list[Condition] = []
    if is_insane(san):
        if Condition.GOING_MAD not in current:
            added.append(Condition.GOING_MAD)
    elif is_low_sanity(san, max_san) and Condition.DISTURBED not in current:
        added.append(Condition.DISTURBED)

    if not added:
        return ConditionChange(conditions=tuple(current), message="No sanity conditions changed")
    logger.info("Sanity conditions applied", added=added, san=san, max_san=max_san)
    return ConditionChange(
        conditions=(*current, *added),
        message="Applied: " + ", ".join(c.display_name for c in added),
        auto_added=tuple(added),
    )


__all__ = [
    "ConditionEffect",
    "CONDITION_EFFECTS",
    "ESCALATIONS",
    "DERIVED_CONDITIONS",
    "ConditionChange",
    "PenaltyBundle",
    "apply_condition",
    "remove_condition",
    "calculate_condition_penalties",
    "sync_health_conditions",
    "sync_sanity_conditions",
]
