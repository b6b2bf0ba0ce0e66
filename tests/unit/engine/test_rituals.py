"""Tests for ritual casting."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from ordem_rules.core.exceptions import (
    AffinityMismatchError,
    CastModeUnavailableError,
    CircleLockedError,
    InsufficientEffortError,
    RangeError,
    TurnLimitExceededError,
)
from ordem_rules.engine.rituals import conjure_ritual, min_nex_for_circle, ritual_cost
from ordem_rules.models import (
    CastMode,
    CharacterSnapshot,
    Condition,
    Element,
    Ritual,
    RitualCost,
)


@pytest.fixture
def basic_ritual() -> Ritual:
    """Provide a ritual with no enhanced modes."""
    return Ritual(name="Amaldiçoar Arma", circle=1, element=Element.BLOOD, cost=RitualCost(base_pe=1))


class TestRitualCost:
    """Tests for cost and circle lookups."""

    @pytest.mark.parametrize(("circle", "nex"), [(1, 0), (2, 25), (3, 55), (4, 85)])
    def test_min_nex_for_circle(self, circle: int, nex: int) -> None:
        """Test the NEX required per circle."""
        assert min_nex_for_circle(circle) == nex

    @pytest.mark.parametrize(
        ("mode", "cost"),
        [(CastMode.NORMAL, 1), (CastMode.DISCIPLE, 3), (CastMode.TRUE, 5)],
    )
    def test_cost_per_mode(self, first_circle_ritual: Ritual, mode: CastMode, cost: int) -> None:
        """Test base cost plus the mode's extra."""
        assert ritual_cost(first_circle_ritual, mode) == cost

    def test_mode_not_offered(self, basic_ritual: Ritual) -> None:
        """Test asking for a cost the ritual does not have."""
        with pytest.raises(CastModeUnavailableError):
            ritual_cost(basic_ritual, CastMode.TRUE)


class TestCastOutcomes:
    """Tests for the cost test outcome."""

    def test_success(self, occultist: CharacterSnapshot, first_circle_ritual: Ritual, scripted_dice) -> None:
        """Test a passed cost test only spends PE."""
        result = conjure_ritual(occultist, first_circle_ritual, rng=scripted_dice(10, 20, 5))

        assert result.success is True
        assert result.critical_failure is False
        assert result.cost == 1
        assert result.test.dt == 21
        assert result.test.roll.total == 25
        assert result.san_loss == 0
        assert result.character.stats.pe.current == 41
        assert result.character.stats.san.current == 45
        assert result.message == "Compreensão Paranormal cast successfully (cost test 25 >= 21)"

    def test_cost_test_uses_intellect_and_occultism(
        self, occultist: CharacterSnapshot, first_circle_ritual: Ritual, scripted_dice
    ) -> None:
        """Test the pool is INT dice and the bonus is Occultism training."""
        rng = scripted_dice(2, 3, 4)

        result = conjure_ritual(occultist, first_circle_ritual, rng=rng)

        assert rng.requests == [(1, 20)] * 3
        assert result.test.attribute_value == 3
        assert result.test.skill_bonus == 5

    def test_failure_costs_san(self, occultist: CharacterSnapshot, first_circle_ritual: Ritual, scripted_dice) -> None:
        """Test a failed test loses SAN equal to the cost."""
        result = conjure_ritual(occultist, first_circle_ritual, rng=scripted_dice(3, 4, 5))

        assert result.success is False
        assert result.critical_failure is False
        assert result.san_loss == 1
        assert result.character.stats.san.current == 44
        assert result.character.stats.san.maximum == 45
        assert result.character.stats.pe.current == 41
        assert result.message == "Cost test failed (10 < 21): lost 1 SAN"

    def test_critical_failure_lowers_max_san(
        self, occultist: CharacterSnapshot, first_circle_ritual: Ritual, scripted_dice
    ) -> None:
        """Test a natural 1 on the kept die also costs 1 max SAN."""
        result = conjure_ritual(
            occultist, first_circle_ritual, CastMode.DISCIPLE, rng=scripted_dice(1, 1, 1)
        )

        assert result.critical_failure is True
        assert result.san_loss == 3
        assert result.san_max_loss == 1
        assert result.character.stats.san.maximum == 44
        assert result.character.stats.san.current == 42
        assert result.character.stats.pe.current == 39
        assert result.message == "Critical failure on the cost test: lost 3 SAN and 1 max SAN permanently"

    def test_failure_at_low_sanity_disturbs(
        self, occultist: CharacterSnapshot, first_circle_ritual: Ritual, scripted_dice
    ) -> None:
        """Test losing SAN into the low band adds DISTURBED."""
        caster = occultist.model_copy(
            update={"stats": occultist.stats.model_copy(update={"san": occultist.stats.san.with_current(12)})}
        )

        result = conjure_ritual(caster, first_circle_ritual, rng=scripted_dice(2, 2, 2))

        assert result.character.stats.san.current == 11
        assert Condition.DISTURBED in result.character.conditions

    def test_caster_is_not_mutated(
        self, occultist: CharacterSnapshot, first_circle_ritual: Ritual, scripted_dice
    ) -> None:
        """Test the input snapshot keeps its values."""
        conjure_ritual(occultist, first_circle_ritual, rng=scripted_dice(1, 1, 1))

        assert occultist.stats.pe.current == 42
        assert occultist.stats.san.current == 45


class TestCastRequirements:
    """Tests for the rule checks that run before anything is spent."""

    def test_circle_locked(self, make_snapshot: Callable[..., CharacterSnapshot], scripted_dice) -> None:
        """Test a second-circle ritual needs NEX 25."""
        ritual = Ritual(name="Descarnar", circle=2, element=Element.BLOOD, cost=RitualCost(base_pe=3))
        caster = make_snapshot(nex=20, pe=(20, 20))
        rng = scripted_dice()

        with pytest.raises(CircleLockedError) as exc_info:
            conjure_ritual(caster, ritual, rng=rng)

        assert exc_info.value.details["required_nex"] == 25
        assert rng.requests == []

    def test_true_mode_circle_locked(
        self, make_snapshot: Callable[..., CharacterSnapshot], first_circle_ritual: Ritual
    ) -> None:
        """Test the mode's required circle is gated too."""
        caster = make_snapshot(nex=20, pe=(20, 20), affinity=Element.KNOWLEDGE)

        with pytest.raises(CircleLockedError) as exc_info:
            conjure_ritual(caster, first_circle_ritual, CastMode.TRUE)

        assert exc_info.value.details["circle"] == 2

    def test_mode_unavailable(self, occultist: CharacterSnapshot, basic_ritual: Ritual) -> None:
        """Test casting in a mode the ritual lacks."""
        with pytest.raises(CastModeUnavailableError):
            conjure_ritual(occultist, basic_ritual, CastMode.DISCIPLE)

    @pytest.mark.parametrize("affinity", [None, Element.BLOOD])
    def test_true_mode_needs_affinity(
        self,
        make_snapshot: Callable[..., CharacterSnapshot],
        first_circle_ritual: Ritual,
        affinity: Element | None,
    ) -> None:
        """Test TRUE casting requires a matching affinity."""
        caster = make_snapshot(nex=45, pe=(30, 30), affinity=affinity)

        with pytest.raises(AffinityMismatchError):
            conjure_ritual(caster, first_circle_ritual, CastMode.TRUE)

    def test_true_mode_extra_affinity(self, make_snapshot: Callable[..., CharacterSnapshot], scripted_dice) -> None:
        """Test a ritual can accept other elements for TRUE casting."""
        ritual = Ritual(
            name="Eletrocussão",
            circle=1,
            element=Element.ENERGY,
            cost=RitualCost(base_pe=1, true_extra_pe=3),
            true_affinities=(Element.BLOOD,),
        )
        caster = make_snapshot(nex=45, pe=(30, 30), affinity=Element.BLOOD)

        result = conjure_ritual(caster, ritual, CastMode.TRUE, rng=scripted_dice(20))

        assert result.cost == 4
        assert result.character.stats.pe.current == 26

    def test_insufficient_pe(
        self, make_snapshot: Callable[..., CharacterSnapshot], first_circle_ritual: Ritual, scripted_dice
    ) -> None:
        """Test casting without enough PE."""
        caster = make_snapshot(pe=(0, 6))
        rng = scripted_dice()

        with pytest.raises(InsufficientEffortError) as exc_info:
            conjure_ritual(caster, first_circle_ritual, rng=rng)

        assert exc_info.value.details == {"rule": "insufficient_pe", "available": 0, "cost": 1}
        assert rng.requests == []

    def test_turn_limit_counts_prior_spending(
        self, occultist: CharacterSnapshot, first_circle_ritual: Ritual
    ) -> None:
        """Test PE already spent this turn counts toward the limit."""
        with pytest.raises(TurnLimitExceededError) as exc_info:
            conjure_ritual(occultist, first_circle_ritual, CastMode.DISCIPLE, pe_spent_this_turn=1)

        assert exc_info.value.details["limit"] == 3

    def test_cost_alone_over_limit(self, occultist: CharacterSnapshot, first_circle_ritual: Ritual) -> None:
        """Test a TRUE cast costing 5 at NEX 25 exceeds the limit of 3."""
        with pytest.raises(TurnLimitExceededError):
            conjure_ritual(occultist, first_circle_ritual, CastMode.TRUE)

    def test_negative_prior_spending(self, occultist: CharacterSnapshot, first_circle_ritual: Ritual) -> None:
        """Test negative PE spent this turn is rejected."""
        with pytest.raises(RangeError):
            conjure_ritual(occultist, first_circle_ritual, pe_spent_this_turn=-1)
