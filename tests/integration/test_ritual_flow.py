"""Integration tests for ritual casting across turns."""

from __future__ import annotations

import pytest

from ordem_rules.core.exceptions import CircleLockedError, TurnLimitExceededError
from ordem_rules.engine.rituals import conjure_ritual
from ordem_rules.engine.vitals import recover_effort, spend_effort, update_exposure
from ordem_rules.models import (
    Attributes,
    CastMode,
    CharacterClass,
    CharacterSnapshot,
    Element,
    Ritual,
    RitualCost,
)


@pytest.fixture
def second_circle_ritual() -> Ritual:
    """Provide a second-circle Knowledge ritual."""
    return Ritual(
        name="Aprimorar Mente",
        circle=2,
        element=Element.KNOWLEDGE,
        cost=RitualCost(base_pe=3),
    )


class TestRitualFlow:
    """Test casting sequences within and across turns."""

    def test_turn_limit_across_casts(
        self, occultist: CharacterSnapshot, first_circle_ritual: Ritual, scripted_dice
    ) -> None:
        """Spend a turn's PE on two casts, then hit the limit."""
        rng = scripted_dice(*[20] * 9)
        spent = 0

        first = conjure_ritual(occultist, first_circle_ritual, rng=rng)
        spent += first.pe_spent

        second = conjure_ritual(first.character, first_circle_ritual, pe_spent_this_turn=spent, rng=rng)
        spent += second.pe_spent
        assert spent == 2

        # A disciple cast (3 PE) no longer fits in the NEX 25 limit of 3
        with pytest.raises(TurnLimitExceededError):
            conjure_ritual(
                second.character, first_circle_ritual, CastMode.DISCIPLE, pe_spent_this_turn=spent, rng=rng
            )

        # Next turn the limit starts over
        third = conjure_ritual(second.character, first_circle_ritual, CastMode.DISCIPLE, rng=rng)
        assert third.success is True
        assert third.character.stats.pe.current == 42 - 1 - 1 - 3

    def test_ritual_and_other_effort_share_the_limit(
        self, occultist: CharacterSnapshot, first_circle_ritual: Ritual, scripted_dice
    ) -> None:
        """PE spent on abilities counts toward the same turn limit."""
        after_ability = spend_effort(occultist, 2).character

        with pytest.raises(TurnLimitExceededError):
            conjure_ritual(after_ability, first_circle_ritual, CastMode.DISCIPLE, pe_spent_this_turn=2)

        result = conjure_ritual(after_ability, first_circle_ritual, pe_spent_this_turn=2, rng=scripted_dice(20, 1, 1))
        assert result.character.stats.pe.current == 39

    def test_exposure_unlocks_circle(
        self, make_snapshot, second_circle_ritual: Ritual, scripted_dice
    ) -> None:
        """Raising NEX opens the second circle and raises the PE turn limit."""
        novice = make_snapshot(
            name="Kaiser",
            character_class=CharacterClass.OCULTISTA,
            attributes=Attributes(agility=1, strength=1, intellect=3, presence=2, vigor=2),
            pv=(20, 20),
            san=(40, 40),
            pe=(18, 18),
            nex=20,
        )
        with pytest.raises(CircleLockedError):
            conjure_ritual(novice, second_circle_ritual)

        promoted = update_exposure(novice, 25).character
        result = conjure_ritual(promoted, second_circle_ritual, rng=scripted_dice(4, 5, 6))

        assert result.success is False
        assert result.san_loss == 3
        assert result.character.stats.pe.current == 15

    def test_rest_recovers_effort(self, make_snapshot, first_circle_ritual: Ritual, scripted_dice) -> None:
        """Casting drains PE that a rest gives back."""
        caster = make_snapshot(pe=(1, 6))

        drained = conjure_ritual(caster, first_circle_ritual, rng=scripted_dice(20)).character
        assert drained.stats.pe.current == 0

        rested = recover_effort(drained).character
        assert rested.stats.pe.current == 2
