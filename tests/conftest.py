"""Pytest configuration and shared fixtures.

This module provides common fixtures for the rules engine test suite:
settings/RNG resets, a scripted die source that forces die faces, and
sample character snapshots and rituals.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import pytest

from ordem_rules.models import (
    Attributes,
    CharacterClass,
    CharacterSnapshot,
    CharacterStats,
    Element,
    ResourcePool,
    Ritual,
    RitualCost,
    Skill,
    SkillTraining,
)


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache and default RNG before and after each test."""
    from ordem_rules.core.config import clear_settings_cache
    from ordem_rules.engine.dice import reset_default_rng

    clear_settings_cache()
    reset_default_rng()
    yield
    clear_settings_cache()
    reset_default_rng()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "ORDEM_RULES_DEBUG": "true",
        "ORDEM_RULES_LOG_LEVEL": "DEBUG",
        "ORDEM_RULES_DICE_SEED": "1234",
        "ORDEM_RULES_DICE_MAX_DICE_COUNT": "50",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Dice Fixtures
# =============================================================================


class ScriptedDice:
    """Die source that returns pre-set faces in order.

    Each value must fit the requested range; running out of values fails
    the test instead of silently rolling.
    """

    def __init__(self, *values: int) -> None:
        self._values = list(values)
        self.requests: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.requests.append((a, b))
        if not self._values:
            msg = f"Scripted dice exhausted (requested d{b})"
            raise AssertionError(msg)
        value = self._values.pop(0)
        if not a <= value <= b:
            msg = f"Scripted value {value} outside [{a}, {b}]"
            raise AssertionError(msg)
        return value

    @property
    def remaining(self) -> int:
        return len(self._values)


@pytest.fixture
def scripted_dice() -> Callable[..., ScriptedDice]:
    """Provide a factory for scripted die sources.

    Returns:
        Callable taking the die faces to return, in order.

    Example:
        >>> rng = scripted_dice(20, 3)
    """
    return ScriptedDice


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def make_snapshot() -> Callable[..., CharacterSnapshot]:
    """Provide a factory for character snapshots.

    The default is a NEX 5 Combatente with full resources. Keyword
    arguments override snapshot fields; ``pv``, ``san``, ``pe`` and
    ``nex`` override the stats.

    Returns:
        Callable building a CharacterSnapshot.
    """

    def _make(
        *,
        pv: tuple[int, int] = (28, 28),
        san: tuple[int, int] = (15, 15),
        pe: tuple[int, int] = (6, 6),
        nex: int = 5,
        **overrides: Any,
    ) -> CharacterSnapshot:
        data: dict[str, Any] = {
            "name": "Arthur Cervero",
            "character_class": CharacterClass.COMBATENTE,
            "attributes": Attributes(agility=2, strength=3, intellect=1, presence=1, vigor=2),
            "stats": CharacterStats(
                pv=ResourcePool(current=pv[0], maximum=pv[1]),
                san=ResourcePool(current=san[0], maximum=san[1]),
                pe=ResourcePool(current=pe[0], maximum=pe[1]),
                nex=nex,
            ),
            "skills": {Skill.FIGHTING: SkillTraining.TRAINED, Skill.AIM: SkillTraining.TRAINED},
        }
        data.update(overrides)
        return CharacterSnapshot(**data)

    return _make


@pytest.fixture
def combatant(make_snapshot: Callable[..., CharacterSnapshot]) -> CharacterSnapshot:
    """Provide a NEX 5 Combatente.

    Returns:
        CharacterSnapshot with 28 PV, 15 SAN and 6 PE.
    """
    return make_snapshot()


@pytest.fixture
def occultist(make_snapshot: Callable[..., CharacterSnapshot]) -> CharacterSnapshot:
    """Provide a NEX 25 Ocultista bound to Knowledge.

    Returns:
        CharacterSnapshot with INT 3, trained Occultism and 42 PE.
    """
    return make_snapshot(
        name="Liz Webber",
        character_class=CharacterClass.OCULTISTA,
        attributes=Attributes(agility=1, strength=0, intellect=3, presence=3, vigor=2),
        pv=(34, 34),
        san=(45, 45),
        pe=(42, 42),
        nex=25,
        skills={Skill.OCCULTISM: SkillTraining.TRAINED, Skill.WILL: SkillTraining.TRAINED},
        affinity=Element.KNOWLEDGE,
    )


@pytest.fixture
def first_circle_ritual() -> Ritual:
    """Provide a first-circle Knowledge ritual with all three modes.

    Returns:
        Ritual costing 1 PE (+2 disciple, +4 true at circle 2).
    """
    return Ritual(
        name="Compreensão Paranormal",
        circle=1,
        element=Element.KNOWLEDGE,
        cost=RitualCost(base_pe=1, disciple_extra_pe=2, true_extra_pe=4),
        true_required_circle=2,
    )

