"""Rules engine: pure functions over character snapshots.

Submodules:
    dice: d20 pools, attacks, damage and free-form formulas.
    resources: PV/SAN/PE/defense formulas and the PE turn limit.
    conditions: Condition table, transitions and penalty folding.
    turns: Per-turn automatic condition effects.
    rituals: Ritual casting and the cost test.
    vitals: Damage, healing and resource recomputation.
    checks: Condition-aware skill tests and attacks.
"""

from __future__ import annotations

from ordem_rules.engine.checks import roll_skill_attack, roll_skill_test
from ordem_rules.engine.conditions import (
    PenaltyBundle,
    apply_condition,
    calculate_condition_penalties,
    remove_condition,
)
from ordem_rules.engine.dice import (
    DieSource,
    RollResult,
    calculate_damage,
    roll_attack,
    roll_attribute_test,
    roll_formula,
    roll_resistance,
)
from ordem_rules.engine.rituals import CastResult, conjure_ritual
from ordem_rules.engine.turns import TurnReport, process_turn
from ordem_rules.engine.vitals import VitalsUpdate, apply_damage, heal


__all__ = [
    # Dice
    "DieSource",
    "RollResult",
    "roll_attribute_test",
    "roll_attack",
    "roll_resistance",
    "calculate_damage",
    "roll_formula",
    # Conditions
    "PenaltyBundle",
    "apply_condition",
    "remove_condition",
    "calculate_condition_penalties",
    # Turns
    "TurnReport",
    "process_turn",
    # Rituals
    "CastResult",
    "conjure_ritual",
    # Vitals
    "VitalsUpdate",
    "apply_damage",
    "heal",
    # Checks
    "roll_skill_test",
    "roll_skill_attack",
]
