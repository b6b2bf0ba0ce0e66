"""Resource formulas for Ordem Paranormal.

Pure calculations for PV, SAN, PE, defense, skill bonuses, the PE turn
limit and the vital-state predicates. Nothing here rolls dice or touches
a character snapshot; higher-level modules compose these.
"""

from __future__ import annotations

from dataclasses import dataclass

from ordem_rules.core.constants import (
    BASE_DEFENSE,
    CARRY_CAPACITY_PER_STRENGTH,
    CREATION_ATTRIBUTE_MAX,
    CREATION_ATTRIBUTE_TOTAL,
    CREATION_MAX_ZERO_ATTRIBUTES,
    INJURED_RATIO,
    LOW_SANITY_RATIO,
    MAX_NEX,
    MIN_CARRY_CAPACITY,
    MIN_NEX,
    NEX_PER_LEVEL,
    PE_TURN_LIMIT_BANDS,
    PE_TURN_LIMIT_CAP,
    PE_TURN_LIMIT_CAPSTONE_NEX,
    PE_TURN_LIMIT_GROWTH_START,
)
from ordem_rules.core.exceptions import NotFoundError, RangeError
from ordem_rules.models.character import CLASS_CONFIGS, Attributes, ClassConfig
from ordem_rules.models.enums import CharacterClass, SkillTraining


@dataclass(frozen=True)
class ResourceMaxima:
    """Maximum PV, SAN and PE for a class, attribute set and NEX."""

    pv: int
    san: int
    pe: int


# =============================================================================
# Exposure and Class
# =============================================================================


def exposure_level(nex: int) -> int:
    """Convert NEX into the level used by resource formulas.

    Args:
        nex: Exposure percentage (0-99).

    Returns:
        floor(nex / 5).

    Raises:
        RangeError: If NEX is outside [0, 99].

    Example:
        >>> exposure_level(99)
        19
    """
    if not MIN_NEX <= nex <= MAX_NEX:
        raise RangeError(
            f"NEX must be between {MIN_NEX} and {MAX_NEX}",
            field_name="nex",
            invalid_value=nex,
        )
    return nex // NEX_PER_LEVEL


def get_class_config(character_class: CharacterClass | str) -> ClassConfig:
    """Look up a class's resource table.

    Args:
        character_class: Class member or its string value.

    Returns:
        The ClassConfig for that class.

    Raises:
        NotFoundError: If the class is unknown.
    """
    try:
        return CLASS_CONFIGS[CharacterClass(character_class)]
    except ValueError as exc:
        raise NotFoundError(
            f"Unknown character class: {character_class}",
            kind="character_class",
            key=character_class,
        ) from exc


# =============================================================================
# Maximum Resources
# =============================================================================


def calculate_max_pv(character_class: CharacterClass | str, vig: int, nex: int) -> int:
    """Maximum PV: pv_initial + vig + (pv_per_level + vig) * level.

    Example:
        >>> calculate_max_pv(CharacterClass.COMBATENTE, 2, 5)
        28
    """
    config = get_class_config(character_class)
    level = exposure_level(nex)
    return config.pv_initial + vig + (config.pv_per_level + vig) * level


def calculate_max_san(character_class: CharacterClass | str, nex: int) -> int:
    """Maximum SAN: san_initial + san_per_level * level."""
    config = get_class_config(character_class)
    return config.san_initial + config.san_per_level * exposure_level(nex)


def calculate_max_pe(character_class: CharacterClass | str, pre: int, nex: int) -> int:
    """Maximum PE: pe_initial + pre + (pe_per_level + pre) * level."""
    config = get_class_config(character_class)
    level = exposure_level(nex)
    return config.pe_initial + pre + (config.pe_per_level + pre) * level


def calculate_defense(agi: int, equipment_bonus: int = 0) -> int:
    """Defense: 10 + agility + equipment bonus."""
    return BASE_DEFENSE + agi + equipment_bonus


def calculate_resource_maxima(
    character_class: CharacterClass | str,
    attributes: Attributes,
    nex: int,
) -> ResourceMaxima:
    """Compute all three maxima at once.

    Args:
        character_class: The character's class.
        attributes: Current attributes (VIG and PRE are used).
        nex: Exposure percentage.

    Returns:
        ResourceMaxima for PV, SAN and PE.
    """
    return ResourceMaxima(
        pv=calculate_max_pv(character_class, attributes.vigor, nex),
        san=calculate_max_san(character_class, nex),
        pe=calculate_max_pe(character_class, attributes.presence, nex),
    )


def clamp_resource(current: int, maximum: int) -> int:
    """Clamp a current resource value to [0, maximum]."""
    return max(0, min(current, max(0, maximum)))


# =============================================================================
# Skills
# =============================================================================


def calculate_skill_bonus(training: SkillTraining | str) -> int:
    """Flat bonus for a training rank: 0, 5, 10 or 15.

    Raises:
        NotFoundError: If the training rank is unknown.
    """
    try:
        return SkillTraining(training).bonus
    except ValueError as exc:
        raise NotFoundError(
            f"Unknown skill training: {training}",
            kind="skill_training",
            key=training,
        ) from exc


def can_use_skill_training(training: SkillTraining | str, nex: int) -> bool:
    """Check whether a training rank is allowed at a NEX.

    COMPETENT needs NEX 35 and EXPERT needs NEX 70; unknown ranks are
    never allowed.
    """
    try:
        rank = SkillTraining(training)
    except ValueError:
        return False
    return nex >= rank.min_nex


# =============================================================================
# Effort (PE)
# =============================================================================


def calculate_pe_recovery(nex: int) -> int:
    """PE recovered per rest: level + 1."""
    return exposure_level(nex) + 1


def calculate_pe_turn_limit(nex: int) -> int:
    """Maximum PE a character may spend in one turn.

    Steps of one per 10% of NEX up to 10 at NEX 90-94, then
    ``10 + 2 * floor((nex - 95) / 5)`` for NEX 95-98 and the cap of 20 at
    NEX 99.

    Raises:
        RangeError: If NEX is outside [0, 99].

    Example:
        >>> [calculate_pe_turn_limit(n) for n in (5, 10, 20, 95, 99)]
        [1, 2, 3, 10, 20]
    """
    exposure_level(nex)
    if nex >= PE_TURN_LIMIT_CAPSTONE_NEX:
        return PE_TURN_LIMIT_CAP
    if nex >= PE_TURN_LIMIT_GROWTH_START:
        steps = (nex - PE_TURN_LIMIT_GROWTH_START) // NEX_PER_LEVEL
        return min(PE_TURN_LIMIT_CAP, 10 + 2 * steps)

    limit = PE_TURN_LIMIT_BANDS[0][1]
    for min_nex, band_limit in PE_TURN_LIMIT_BANDS:
        if nex >= min_nex:
            limit = band_limit
    return limit


def validate_turn_spend(nex: int, cost: int) -> bool:
    """Check whether spending ``cost`` PE fits in one turn."""
    return cost <= calculate_pe_turn_limit(nex)


# =============================================================================
# Vital State
# =============================================================================


def is_injured(pv: int, max_pv: int) -> bool:
    """Injured at or below half of max PV."""
    return pv <= max_pv * INJURED_RATIO


def is_dying(pv: int) -> bool:
    return pv <= 0


def is_insane(san: int) -> bool:
    return san <= 0


def is_low_sanity(san: int, max_san: int) -> bool:
    """Low sanity at or below a quarter of max SAN."""
    return san <= max_san * LOW_SANITY_RATIO


# =============================================================================
# Carrying
# =============================================================================


def calculate_max_carry_capacity(strength: int) -> int:
    """Load units a character can carry: 5 per STR, never below 2."""
    return max(MIN_CARRY_CAPACITY, CARRY_CAPACITY_PER_STRENGTH * strength)


def is_overloaded(current_weight: int, capacity: int) -> bool:
    return current_weight > capacity


# =============================================================================
# Character Creation
# =============================================================================


def validate_creation_attributes(attributes: Attributes) -> None:
    """Validate a starting attribute spread.

    The five attributes must sum to 9, none may exceed 3 and at most one
    may be 0.

    Args:
        attributes: The proposed attributes.

    Raises:
        RangeError: Naming the violated rule and the offending values.
    """
    values = {attribute.value: value for attribute, value in attributes.as_dict().items()}

    if attributes.total != CREATION_ATTRIBUTE_TOTAL:
        raise RangeError(
            f"Attributes must sum to {CREATION_ATTRIBUTE_TOTAL}, got {attributes.total}",
            field_name="attributes_total",
            invalid_value=attributes.total,
            details={"attributes": values},
        )

    too_high = {name: value for name, value in values.items() if value > CREATION_ATTRIBUTE_MAX}
    if too_high:
        raise RangeError(
            f"No attribute may exceed {CREATION_ATTRIBUTE_MAX} at creation",
            field_name="attribute_max",
            invalid_value=too_high,
        )

    zeros = [name for name, value in values.items() if value == 0]
    if len(zeros) > CREATION_MAX_ZERO_ATTRIBUTES:
        raise RangeError(
            f"At most {CREATION_MAX_ZERO_ATTRIBUTES} attribute may be 0 at creation",
            field_name="zero_attributes",
            invalid_value=zeros,
        )


__all__ = [
    "ResourceMaxima",
    "exposure_level",
    "get_class_config",
    "calculate_max_pv",
    "calculate_max_san",
    "calculate_max_pe",
    "calculate_defense",
    "calculate_resource_maxima",
    "clamp_resource",
    "calculate_skill_bonus",
    "can_use_skill_training",
    "calculate_pe_recovery",
    "calculate_pe_turn_limit",
    "validate_turn_spend",
    "is_injured",
    "is_dying",
    "is_insane",
    "is_low_sanity",
    "calculate_max_carry_capacity",
    "is_overloaded",
    "validate_creation_attributes",
]
