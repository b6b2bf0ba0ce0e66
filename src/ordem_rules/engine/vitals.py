"""Vital resource updates for a character snapshot.

Damage, healing, effort spending and recovery, plus recomputing maxima
when NEX or attributes change. Every operation returns a new snapshot
with currents clamped to [0, max] and the health and sanity conditions
brought in line with the new values. Leaving DYING also drops its
countdown timer. DEAD is terminal: damage still lowers the pools but
conditions stay as they are, and healing is refused.
"""

from __future__ import annotations

from dataclasses import dataclass

from ordem_rules.core.exceptions import (
    InsufficientEffortError,
    RangeError,
    RuleViolation,
    TurnLimitExceededError,
)
from ordem_rules.core.logging import get_logger
from ordem_rules.engine.conditions import sync_health_conditions, sync_sanity_conditions
from ordem_rules.engine.resources import (
    calculate_pe_recovery,
    calculate_pe_turn_limit,
    calculate_resource_maxima,
    exposure_level,
    is_dying,
    is_injured,
    is_insane,
    is_low_sanity,
)
from ordem_rules.models.character import Attributes, CharacterSnapshot, CharacterStats
from ordem_rules.models.enums import Condition, DamageType, TimedEffect


logger = get_logger(__name__)


@dataclass(frozen=True)
class VitalsUpdate:
    """A snapshot after a resource change, with its vital-state flags."""

    character: CharacterSnapshot
    is_dying: bool
    is_injured: bool
    is_insane: bool
    is_low_sanity: bool


def _require_non_negative(amount: int, field_name: str) -> None:
    if amount < 0:
        raise RangeError(
            f"{field_name} cannot be negative",
            field_name=field_name,
            invalid_value=amount,
        )


def _finish(snapshot: CharacterSnapshot, stats: CharacterStats) -> VitalsUpdate:
    conditions = snapshot.conditions
    if Condition.DEAD not in conditions:
        health = sync_health_conditions(stats.pv.current, conditions)
        sanity = sync_sanity_conditions(stats.san.current, stats.san.maximum, health.conditions)
        conditions = sanity.conditions
    timers = snapshot.timers
    if Condition.DYING not in conditions:
        timers = tuple(timer for timer in timers if timer.effect != TimedEffect.DYING)
    character = snapshot.model_copy(update={"stats": stats, "conditions": conditions, "timers": timers})
    return VitalsUpdate(
        character=character,
        is_dying=is_dying(stats.pv.current),
        is_injured=is_injured(stats.pv.current, stats.pv.maximum),
        is_insane=is_insane(stats.san.current),
        is_low_sanity=is_low_sanity(stats.san.current, stats.san.maximum),
    )


def apply_damage(
    snapshot: CharacterSnapshot,
    amount: int,
    damage_type: DamageType = DamageType.PHYSICAL,
) -> VitalsUpdate:
    """Subtract damage from PV (physical) or SAN (mental).

    Args:
        snapshot: The character taking damage.
        amount: Damage taken (>= 0).
        damage_type: Which pool to subtract from.

    Returns:
        VitalsUpdate with the clamped pool and synced conditions.

    Raises:
        RangeError: If ``amount`` is negative.
    """
    _require_non_negative(amount, "damage")
    stats = snapshot.stats
    if damage_type == DamageType.MENTAL:
        stats = stats.model_copy(update={"san": stats.san.with_current(stats.san.current - amount)})
    else:
        stats = stats.model_copy(update={"pv": stats.pv.with_current(stats.pv.current - amount)})

    logger.debug("Damage applied", character=snapshot.name, amount=amount, damage_type=damage_type)
    return _finish(snapshot, stats)


def heal(
    snapshot: CharacterSnapshot,
    amount: int,
    damage_type: DamageType = DamageType.PHYSICAL,
) -> VitalsUpdate:
    """Restore PV (physical) or SAN (mental), capped at the maximum.

    A dead character cannot be healed.

    Raises:
        RangeError: If ``amount`` is negative.
        RuleViolation: If the character is DEAD.
    """
    _require_non_negative(amount, "healing")
    if snapshot.has_condition(Condition.DEAD):
        raise RuleViolation(
            f"{snapshot.name} is dead and cannot be healed",
            rule="dead",
            details={"character": snapshot.name},
        )
    stats = snapshot.stats
    if damage_type == DamageType.MENTAL:
        stats = stats.model_copy(update={"san": stats.san.with_current(stats.san.current + amount)})
    else:
        stats = stats.model_copy(update={"pv": stats.pv.with_current(stats.pv.current + amount)})
    return _finish(snapshot, stats)


def spend_effort(snapshot: CharacterSnapshot, amount: int, pe_spent_this_turn: int = 0) -> VitalsUpdate:
    """Spend PE on an action, honoring the per-turn limit.

    Args:
        snapshot: The character spending.
        amount: PE to spend (>= 0).
        pe_spent_this_turn: PE already spent this turn.

    Raises:
        RangeError: If either amount is negative.
        InsufficientEffortError: If the character lacks the PE.
        TurnLimitExceededError: If the spend overflows the turn limit.
    """
    _require_non_negative(amount, "pe_cost")
    _require_non_negative(pe_spent_this_turn, "pe_spent_this_turn")

    pe = snapshot.stats.pe
    if pe.current < amount:
        raise InsufficientEffortError(
            f"Not enough PE: have {pe.current}, need {amount}",
            details={"available": pe.current, "cost": amount},
        )
    limit = calculate_pe_turn_limit(snapshot.stats.nex)
    if amount + pe_spent_this_turn > limit:
        raise TurnLimitExceededError(
            f"Spending {amount} PE would exceed the turn limit of {limit} (NEX {snapshot.stats.nex}%)",
            details={"cost": amount, "pe_spent_this_turn": pe_spent_this_turn, "limit": limit},
        )

    stats = snapshot.stats.model_copy(update={"pe": pe.with_current(pe.current - amount)})
    return _finish(snapshot, stats)


def recover_effort(snapshot: CharacterSnapshot) -> VitalsUpdate:
    """Recover PE after a rest: level + 1, capped at the maximum."""
    pe = snapshot.stats.pe
    recovered = calculate_pe_recovery(snapshot.stats.nex)
    stats = snapshot.stats.model_copy(update={"pe": pe.with_current(pe.current + recovered)})
    logger.debug("Effort recovered", character=snapshot.name, recovered=recovered)
    return _finish(snapshot, stats)


def _with_maxima(snapshot: CharacterSnapshot, attributes: Attributes, nex: int) -> CharacterStats:
    maxima = calculate_resource_maxima(snapshot.character_class, attributes, nex)
    stats = snapshot.stats
    return stats.model_copy(
        update={
            "pv": stats.pv.with_maximum(maxima.pv),
            "san": stats.san.with_maximum(maxima.san),
            "pe": stats.pe.with_maximum(maxima.pe),
            "nex": nex,
        }
    )


def update_exposure(snapshot: CharacterSnapshot, nex: int) -> VitalsUpdate:
    """Change NEX, recompute maxima and clamp current values.

    Raises:
        RangeError: If NEX is outside [0, 99].
    """
    exposure_level(nex)
    stats = _with_maxima(snapshot, snapshot.attributes, nex)
    logger.info("Exposure updated", character=snapshot.name, old_nex=snapshot.stats.nex, nex=nex)
    return _finish(snapshot, stats)


def update_attributes(snapshot: CharacterSnapshot, attributes: Attributes) -> VitalsUpdate:
    """Replace attributes and recompute maxima from them."""
    stats = _with_maxima(snapshot, attributes, snapshot.stats.nex)
    return _finish(snapshot.model_copy(update={"attributes": attributes}), stats)


__all__ = [
    "VitalsUpdate",
    "apply_damage",
    "heal",
    "spend_effort",
    "recover_effort",
    "update_exposure",
    "update_attributes",
]
