"""Integration tests for combat flow.

Tests complete combat scenarios from the attack roll to death or rescue.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from ordem_rules.core.exceptions import RuleViolation
from ordem_rules.engine.checks import roll_skill_attack, roll_skill_test
from ordem_rules.engine.conditions import apply_condition
from ordem_rules.engine.dice import calculate_damage
from ordem_rules.engine.resources import calculate_defense
from ordem_rules.engine.turns import process_turn
from ordem_rules.engine.vitals import apply_damage, heal
from ordem_rules.models import (
    Attributes,
    CharacterClass,
    CharacterSnapshot,
    Condition,
    DamageType,
    Skill,
    TimedEffect,
)


@pytest.fixture
def cultist(make_snapshot: Callable[..., CharacterSnapshot]) -> CharacterSnapshot:
    """Provide a fragile cultist with 8 PV."""
    return make_snapshot(
        name="Cultista",
        character_class=CharacterClass.ESPECIALISTA,
        attributes=Attributes(agility=2, strength=1, intellect=1, presence=2, vigor=1),
        pv=(8, 20),
        san=(16, 16),
        pe=(5, 5),
        skills={},
    )


class TestCombatFlow:
    """Test complete combat scenarios."""

    def test_critical_hit_to_death(
        self, combatant: CharacterSnapshot, cultist: CharacterSnapshot, scripted_dice
    ) -> None:
        """Crit a cultist down, then let it bleed out over three turns."""
        # Attack, damage, then one bleeding die per turn
        rng = scripted_dice(15, 3, 20, 5, 7, 2, 2, 2)
        defense = calculate_defense(cultist.attributes.agility)

        attack = roll_skill_attack(combatant, Skill.FIGHTING, defense, rng=rng)
        assert attack.attack.is_critical is True
        assert attack.attack.hit is True

        damage = calculate_damage(
            "1d8",
            combatant.attributes.strength,
            is_melee=True,
            is_critical=attack.attack.is_critical,
            rng=rng,
        )
        assert damage.dice == (5, 7)
        assert damage.total == 15

        update = apply_damage(cultist, damage.total)
        assert update.is_dying is True
        target = update.character
        assert target.has_condition(Condition.DYING)
        assert target.has_condition(Condition.BLEEDING)

        # Dying characters cannot act
        with pytest.raises(RuleViolation):
            roll_skill_test(target, Skill.ATHLETICS, rng=rng)

        reports = []
        for _ in range(3):
            report = process_turn(target, rng=rng)
            reports.append(report)
            target = report.character

        assert [report.is_dead for report in reports] == [False, False, True]
        assert target.conditions == (Condition.DEAD,)
        assert rng.remaining == 0

        # The dead stay dead
        assert process_turn(target).changes == ("No changes",)
        assert apply_damage(target, 5).character.conditions == (Condition.DEAD,)

    def test_rescue_before_death(self, cultist: CharacterSnapshot, scripted_dice) -> None:
        """Heal a dying character after two rounds and restart the count."""
        rng = scripted_dice(1, 1, 6)
        target = apply_damage(cultist, 8).character

        for _ in range(2):
            target = process_turn(target, rng=rng).character
        assert target.timer_for(TimedEffect.DYING).rounds_elapsed == 2

        target = heal(target, 3).character
        assert target.conditions == (Condition.BLEEDING,)
        assert target.timer_for(TimedEffect.DYING) is None

        # Still bleeding: the next turn drops it back to 0 with a fresh count
        report = process_turn(target, rng=rng)
        assert report.character.has_condition(Condition.DYING)
        assert report.character.timer_for(TimedEffect.DYING).rounds_elapsed == 0
        assert report.is_dead is False


class TestFearFlow:
    """Test fear and sanity loss during an encounter."""

    def test_fear_escalates_and_weakens_tests(
        self, combatant: CharacterSnapshot, scripted_dice
    ) -> None:
        """A creature's presence shakes, then terrifies, a character."""
        shaken = apply_condition(Condition.SHAKEN, combatant.conditions)
        afraid = apply_condition(Condition.SHAKEN, shaken.conditions)
        assert afraid.conditions == (Condition.AFRAID,)

        character = combatant.model_copy(update={"conditions": afraid.conditions})
        rng = scripted_dice(18)

        # STR 3 minus two dice from AFRAID leaves a single die
        result = roll_skill_test(character, Skill.ATHLETICS, rng=rng)
        assert len(result.roll.dice) == 1
        assert result.success is True

    def test_mental_damage_to_madness(self, combatant: CharacterSnapshot) -> None:
        """Repeated mental damage disturbs and then breaks a character."""
        first = apply_damage(combatant, 12, DamageType.MENTAL)
        assert first.character.conditions == (Condition.DISTURBED,)

        second = apply_damage(first.character, 10, DamageType.MENTAL)
        assert second.is_insane is True
        assert second.character.conditions == (Condition.DISTURBED, Condition.GOING_MAD)

        report = process_turn(second.character)
        assert "Insanity threshold reached: 1 rounds" in report.changes
