"""Ritual casting resolution.

``conjure_ritual`` validates a cast, charges its PE and rolls the secret
cost test, returning the outcome together with the caster's new snapshot.
Every rule check happens before any resource is touched, so a raised
error always means nothing was spent.

Sequence:
    1. Circle and affinity gates for the requested mode.
    2. Cost = base PE + the mode's extra PE.
    3. Enough PE available.
    4. Cost fits in what remains of the per-turn PE limit.
    5. PE is deducted.
    6. Cost test: INT pool + Occultism bonus against DT 20 + cost. A
       failure costs SAN equal to the cost; a failure on a natural 1 also
       lowers max SAN by 1 for good.
"""

from __future__ import annotations

from dataclasses import dataclass

from ordem_rules.core.constants import (
    CIRCLE_MIN_NEX,
    CRITICAL_FAILURE_MAX_SAN_LOSS,
    RITUAL_BASE_DT,
)
from ordem_rules.core.exceptions import (
    AffinityMismatchError,
    CastModeUnavailableError,
    CircleLockedError,
    InsufficientEffortError,
    RangeError,
    TurnLimitExceededError,
)
from ordem_rules.core.logging import character_context, get_logger
from ordem_rules.engine.conditions import sync_sanity_conditions
from ordem_rules.engine.dice import DieSource, RollResult, roll_attribute_test
from ordem_rules.engine.resources import calculate_pe_turn_limit
from ordem_rules.models.character import CharacterSnapshot
from ordem_rules.models.enums import CastMode, Skill
from ordem_rules.models.ritual import Ritual


logger = get_logger(__name__)


@dataclass(frozen=True)
class CostTest:
    """The secret cost test rolled for a ritual.

    Attributes:
        roll: The INT pool roll including the Occultism bonus.
        dt: Difficulty (20 + cost).
        attribute_value: Intellect used to size the pool.
        skill_bonus: Occultism training bonus.
    """

    roll: RollResult
    dt: int
    attribute_value: int
    skill_bonus: int

    @property
    def success(self) -> bool:
        return self.roll.total >= self.dt


@dataclass(frozen=True)
class CastResult:
    """Outcome of a ritual cast.

    Attributes:
        success: Whether the cost test passed and the ritual takes effect.
        critical_failure: Failed with a natural 1 on the kept die.
        cost: PE cost of the cast.
        test: The cost test.
        pe_spent: PE deducted from the caster.
        san_loss: SAN lost from a failed test.
        san_max_loss: Permanent max SAN lost from a critical failure.
        message: Human-readable summary.
        character: Caster snapshot after the cast, for the caller to persist.
    """

    success: bool
    critical_failure: bool
    cost: int
    test: CostTest
    pe_spent: int
    san_loss: int
    san_max_loss: int
    message: str
    character: CharacterSnapshot


def min_nex_for_circle(circle: int) -> int:
    """Minimum NEX to cast rituals of a circle (1: 0, 2: 25, 3: 55, 4: 85)."""
    return CIRCLE_MIN_NEX[circle]


def ritual_cost(ritual: Ritual, mode: CastMode = CastMode.NORMAL) -> int:
    """PE cost of casting a ritual in a mode.

    Raises:
        CastModeUnavailableError: If the ritual does not offer the mode.
    """
    extra = ritual.cost.extra_for(mode)
    if extra is None:
        raise CastModeUnavailableError(
            f"{ritual.name} cannot be cast in {mode} mode",
            details={"ritual": ritual.name, "mode": mode.value},
        )
    return ritual.cost.base_pe + extra


def check_cast_requirements(caster: CharacterSnapshot, ritual: Ritual, mode: CastMode) -> None:
    """Check the circle and affinity gates for a cast.

    Args:
        caster: The character casting.
        ritual: The ritual being cast.
        mode: The casting mode.

    Raises:
        CastModeUnavailableError: If the ritual does not offer the mode.
        CircleLockedError: If the caster's NEX is too low for the circle.
        AffinityMismatchError: If TRUE casting without a matching affinity.
    """
    if not ritual.offers(mode):
        raise CastModeUnavailableError(
            f"{ritual.name} cannot be cast in {mode} mode",
            details={"ritual": ritual.name, "mode": mode.value},
        )

    nex = caster.stats.nex
    for circle in dict.fromkeys((ritual.circle, ritual.required_circle(mode))):
        required_nex = min_nex_for_circle(circle)
        if nex < required_nex:
            raise CircleLockedError(
                f"Circle {circle} requires NEX {required_nex}%, caster has {nex}%",
                details={"ritual": ritual.name, "circle": circle, "required_nex": required_nex, "nex": nex},
            )

    if mode == CastMode.TRUE:
        allowed = {ritual.element, *ritual.true_affinities}
        if caster.affinity is None or caster.affinity not in allowed:
            raise AffinityMismatchError(
                f"True casting of {ritual.name} requires affinity with {ritual.element}",
                details={
                    "ritual": ritual.name,
                    "affinity": caster.affinity.value if caster.affinity else None,
                    "allowed": sorted(element.value for element in allowed),
                },
            )


def conjure_ritual(
    caster: CharacterSnapshot,
    ritual: Ritual,
    mode: CastMode = CastMode.NORMAL,
    pe_spent_this_turn: int = 0,
    *,
    rng: DieSource | None = None,
) -> CastResult:
    """Cast a ritual.

    Args:
        caster: The character casting.
        ritual: The ritual being cast.
        mode: The casting mode.
        pe_spent_this_turn: PE the caster already spent this turn.
        rng: Random source for the cost test.

    Returns:
        CastResult with the test outcome and the caster's new snapshot.

    Raises:
        RangeError: If ``pe_spent_this_turn`` is negative.
        CastModeUnavailableError: If the ritual does not offer the mode.
        CircleLockedError: If the caster's NEX is too low.
        AffinityMismatchError: If TRUE casting without a matching affinity.
        InsufficientEffortError: If the caster has less PE than the cost.
        TurnLimitExceededError: If the cost overflows the per-turn PE limit.
    """
    with character_context(caster.name):
        return _resolve_cast(caster, ritual, mode, pe_spent_this_turn, rng)


def _resolve_cast(
    caster: CharacterSnapshot,
    ritual: Ritual,
    mode: CastMode,
    pe_spent_this_turn: int,
    rng: DieSource | None,
) -> CastResult:
    if pe_spent_this_turn < 0:
        raise RangeError(
            "PE spent this turn cannot be negative",
            field_name="pe_spent_this_turn",
            invalid_value=pe_spent_this_turn,
        )

    check_cast_requirements(caster, ritual, mode)
    cost = ritual_cost(ritual, mode)

    pe = caster.stats.pe
    if pe.current < cost:
        raise InsufficientEffortError(
            f"Not enough PE: have {pe.current}, {ritual.name} costs {cost}",
            details={"available": pe.current, "cost": cost},
        )

    limit = calculate_pe_turn_limit(caster.stats.nex)
    if cost + pe_spent_this_turn > limit:
        raise TurnLimitExceededError(
            f"Casting {ritual.name} would spend {cost + pe_spent_this_turn} PE this turn, limit is {limit}",
            details={"cost": cost, "pe_spent_this_turn": pe_spent_this_turn, "limit": limit},
        )

    intellect = caster.attributes.intellect
    occultism_bonus = caster.skill_training(Skill.OCCULTISM).bonus
    dt = RITUAL_BASE_DT + cost
    test = CostTest(
        roll=roll_attribute_test(intellect, occultism_bonus, rng=rng),
        dt=dt,
        attribute_value=intellect,
        skill_bonus=occultism_bonus,
    )

    san = caster.stats.san
    san_loss = 0
    san_max_loss = 0
    critical_failure = False
    if test.success:
        message = f"{ritual.name} cast successfully (cost test {test.roll.total} >= {dt})"
    else:
        san_loss = cost
        critical_failure = test.roll.is_natural_one
        if critical_failure:
            san_max_loss = CRITICAL_FAILURE_MAX_SAN_LOSS
            message = (
                f"Critical failure on the cost test: lost {san_loss} SAN and "
                f"{san_max_loss} max SAN permanently"
            )
        else:
            message = f"Cost test failed ({test.roll.total} < {dt}): lost {san_loss} SAN"

    new_san_max = max(0, san.maximum - san_max_loss)
    new_san = max(0, min(san.current - san_loss, new_san_max))
    stats = caster.stats.model_copy(
        update={
            "pe": pe.model_copy(update={"current": pe.current - cost}),
            "san": san.model_copy(update={"current": new_san, "maximum": new_san_max}),
        }
    )
    conditions = caster.conditions
    if san_loss:
        conditions = sync_sanity_conditions(new_san, new_san_max, conditions).conditions
    character = caster.model_copy(update={"stats": stats, "conditions": conditions})

    logger.info(
        "Ritual cast",
        character=caster.name,
        ritual=ritual.name,
        mode=mode,
        cost=cost,
        success=test.success,
        critical_failure=critical_failure,
        san_loss=san_loss,
    )
    return CastResult(
        success=test.success,
        critical_failure=critical_failure,
        cost=cost,
        test=test,
        pe_spent=cost,
        san_loss=san_loss,
        san_max_loss=san_max_loss,
        message=message,
        character=character,
    )


__all__ = [
    "CostTest",
    "CastResult",
    "min_nex_for_circle",
    "ritual_cost",
    "check_cast_requirements",
    "conjure_ritual",
]
