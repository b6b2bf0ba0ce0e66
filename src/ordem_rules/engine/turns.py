"""Per-turn condition processing.

Runs the automatic effects of the conditions a character starts its turn
with: bleeding damage, the dying countdown and the insanity timer. Timers
are explicit ``ConditionTimer`` entries on the snapshot, one per
``TimedEffect``.
"""

from __future__ import annotations

from dataclasses import dataclass

from ordem_rules.core.constants import (
    BLEEDING_DAMAGE_DIE,
    DYING_ROUNDS_TO_DEATH,
    INSANITY_REPORT_THRESHOLDS,
)
from ordem_rules.core.logging import character_context, get_logger
from ordem_rules.engine.conditions import apply_condition
from ordem_rules.engine.dice import DieSource, roll_die
from ordem_rules.engine.resources import is_insane, is_low_sanity
from ordem_rules.models.character import CharacterSnapshot, ConditionTimer
from ordem_rules.models.enums import Condition, TimedEffect


logger = get_logger(__name__)

NO_CHANGES = "No changes"

_REPLACED_ON_DEATH = frozenset({Condition.DYING, Condition.UNCONSCIOUS, Condition.BLEEDING})


@dataclass(frozen=True)
class TurnReport:
    """Outcome of processing one turn.

    Attributes:
        character: The snapshot after the turn's automatic effects.
        changes: Human-readable notes, or a single "No changes" note.
        is_dead: Whether the character ends the turn DEAD.
    """

    character: CharacterSnapshot
    changes: tuple[str, ...]
    is_dead: bool


def process_turn(snapshot: CharacterSnapshot, *, rng: DieSource | None = None) -> TurnReport:
    """Apply the automatic per-turn effects of a character's conditions.

    Only conditions active at the start of the turn act. A DYING condition
    gained from bleeding this turn starts its countdown at 0 and first
    ticks next turn.

    Args:
        snapshot: The character at the start of its turn.
        rng: Random source for bleeding damage.

    Returns:
        TurnReport with the updated snapshot and the list of changes.
    """
    with character_context(snapshot.name):
        return _resolve_turn(snapshot, rng)


def _resolve_turn(snapshot: CharacterSnapshot, rng: DieSource | None) -> TurnReport:
    start = frozenset(snapshot.conditions)
    if Condition.DEAD in start:
        return TurnReport(character=snapshot, changes=(NO_CHANGES,), is_dead=True)

    conditions = list(snapshot.conditions)
    timers = {timer.effect: timer.rounds_elapsed for timer in snapshot.timers}
    pv = snapshot.stats.pv.current
    changes: list[str] = []

    if Condition.BLEEDING in start:
        damage = roll_die(BLEEDING_DAMAGE_DIE, rng=rng)
        new_pv = max(0, pv - damage)
        changes.append(f"Bleeding: {damage} damage (PV {pv} -> {new_pv})")
        pv = new_pv

        if pv <= 0 and Condition.DYING not in conditions:
            change = apply_condition(Condition.DYING, conditions)
            conditions = list(change.conditions)
            timers[TimedEffect.DYING] = 0
            changes.append(f"PV reached 0: {change.message}")
            logger.info("Character started dying", character=snapshot.name)

    if Condition.DYING in start:
        rounds = timers.get(TimedEffect.DYING, 0) + 1
        if rounds >= DYING_ROUNDS_TO_DEATH:
            conditions = [c for c in conditions if c not in _REPLACED_ON_DEATH]
            if Condition.DEAD not in conditions:
                conditions.append(Condition.DEAD)
            timers.pop(TimedEffect.DYING, None)
            changes.append(f"Dying: round {rounds}/{DYING_ROUNDS_TO_DEATH}, character died")
            logger.info("Character died", character=snapshot.name, rounds=rounds)
        else:
            timers[TimedEffect.DYING] = rounds
            changes.append(f"Dying: round {rounds}/{DYING_ROUNDS_TO_DEATH}")

    san = snapshot.stats.san
    losing_sanity = (
        is_insane(san.current)
        or is_low_sanity(san.current, san.maximum)
        or Condition.DISTURBED in start
        or Condition.GOING_MAD in start
    )
    if losing_sanity:
        rounds = timers.get(TimedEffect.INSANITY, 0) + 1
        timers[TimedEffect.INSANITY] = rounds
        changes.append(f"Insanity: round {rounds} at low sanity")
        if rounds in INSANITY_REPORT_THRESHOLDS:
            changes.append(f"Insanity threshold reached: {rounds} rounds")
            logger.info("Insanity threshold reached", character=snapshot.name, rounds=rounds)
    elif TimedEffect.INSANITY in timers:
        timers.pop(TimedEffect.INSANITY)
        changes.append("Sanity recovered: insanity timer cleared")

    if not changes:
        return TurnReport(character=snapshot, changes=(NO_CHANGES,), is_dead=False)

    stats = snapshot.stats.model_copy(update={"pv": snapshot.stats.pv.model_copy(update={"current": pv})})
    character = snapshot.model_copy(
        update={
            "stats": stats,
            "conditions": tuple(conditions),
            "timers": tuple(
                ConditionTimer(effect=effect, rounds_elapsed=rounds) for effect, rounds in timers.items()
            ),
        }
    )
    is_dead = Condition.DEAD in conditions
    logger.debug("Turn processed", character=snapshot.name, changes=changes, is_dead=is_dead)
    return TurnReport(character=character, changes=tuple(changes), is_dead=is_dead)


__all__ = [
    "NO_CHANGES",
    "TurnReport",
    "process_turn",
]
