"""
test_civilization.py — event application, turn processing and end conditions.
"""

import math

import pytest

from civsim.engine.civilization import Civilization
from civsim.models import EventType, GameEvent, GameResult, ResourceType, TechBranch


def make_event(**effects) -> GameEvent:
    return GameEvent(
        name="Test", description="", event_type=EventType.NATURAL_DISASTER, **effects
    )


class TestInitialState:
    def test_new_game_values(self, civ):
        assert civ.name == "Humanity"
        assert civ.population == 1000
        assert civ.happiness == 70.0
        assert civ.ecology == 90.0
        assert civ.military == 10.0
        assert civ.turn == 0
        assert civ.stable_economy_turns == 0
        assert civ.resources.get_resource(ResourceType.MONEY) == 200.0
        assert civ.tech.get_overall_tech_level() == 0

    def test_new_game_in_progress(self, civ):
        assert civ.check_game_result() == GameResult.IN_PROGRESS
        assert civ.is_alive()


class TestApplyEvent:
    def test_population_multiplier_then_additive(self, civ):
        civ.apply_event(make_event(population_multiplier=0.5, population_effect=5))
        assert civ.population == 505

    def test_population_truncates(self, civ):
        civ.apply_event(make_event(population_multiplier=0.9995))
        assert civ.population == 999

    def test_population_never_negative(self, civ):
        civ.apply_event(make_event(population_effect=-5000))
        assert civ.population == 0

    def test_vitals_are_clamped(self, civ):
        civ.apply_event(
            make_event(
                happiness_effect=50.0, ecology_effect=-200.0, military_effect=-50.0
            )
        )
        assert civ.happiness == 100.0
        assert civ.ecology == 0.0
        assert civ.military == 0.0

    def test_resources_are_routed(self, civ):
        civ.apply_event(
            make_event(
                economy_effect=-50.0,
                food_effect=20.0,
                energy_effect=5.0,
                materials_effect=-150.0,
            )
        )
        assert civ.resources.get_resource(ResourceType.MONEY) == 150.0
        assert civ.resources.get_resource(ResourceType.FOOD) == 520.0
        assert civ.resources.get_resource(ResourceType.ENERGY) == 105.0
        assert civ.resources.get_resource(ResourceType.MATERIALS) == 0.0

    def test_tech_boost_reaches_every_branch(self, civ):
        civ.apply_event(make_event(tech_boost=2))
        for branch in TechBranch:
            assert civ.tech.get_branch_progress(branch) == pytest.approx(8.0)
            assert civ.tech.get_branch_level(branch) == 0

    def test_large_tech_boost_levels_branches(self, civ):
        civ.apply_event(make_event(tech_boost=10))
        # 40 per branch: below the first threshold of 50
        assert civ.tech.get_overall_tech_level() == 0
        civ.apply_event(make_event(tech_boost=10))
        assert civ.tech.get_overall_tech_level() == 5

    def test_logs_event(self, civ, caplog):
        with caplog.at_level("INFO", logger="civsim"):
            civ.apply_event(make_event())
        assert "Event applied: Test" in caplog.text


class TestProcessTurn:
    def test_first_turn_from_new_game(self, civ):
        civ.process_turn()

        assert civ.turn == 1
        assert civ.resources.get_resource(ResourceType.FOOD) == pytest.approx(503.0)
        # rate = 0.02 * 2 (food ratio capped) * 0.7 * 1.0 * 0.9
        assert civ.population == 1025
        expected_ecology = 90.0 + 0.5 - math.log10(1025) * 0.3
        assert civ.ecology == pytest.approx(expected_ecology)
        expected_happiness = (
            70.0 - 0.4 + 3.0 * 0.05 + 3.0 * 0.03 + (expected_ecology - 50.0) * 0.02
        )
        assert civ.happiness == pytest.approx(expected_happiness)
        assert civ.stable_economy_turns == 1

    def test_turn_resets_multipliers(self, civ):
        civ.resources.apply_production_multiplier(ResourceType.FOOD, 0.0)
        civ.process_turn()
        assert civ.resources.get_production(ResourceType.FOOD) == pytest.approx(
            civ.resources.get_base_production(ResourceType.FOOD)
        )

    def test_industry_damages_ecology(self):
        green, industrial = Civilization(), Civilization()
        industrial.tech.set_branch_state(TechBranch.INDUSTRY, 10, 0.0)
        green.tech.set_branch_state(TechBranch.SCIENCE, 10, 0.0)

        green.process_turn()
        industrial.process_turn()

        assert green.ecology > industrial.ecology

    def test_stable_economy_counts_up_and_down(self, civ):
        civ.process_turn()
        civ.process_turn()
        assert civ.stable_economy_turns == 2

        civ.resources.remove_resource(ResourceType.MONEY, 5000.0)
        civ.process_turn()
        assert civ.stable_economy_turns == 1
        civ.process_turn()
        civ.process_turn()
        assert civ.stable_economy_turns == 0

    def test_vitals_stay_in_range_over_many_turns(self, civ):
        for _ in range(200):
            civ.process_turn()
            assert 0.0 <= civ.happiness <= 100.0
            assert 0.0 <= civ.ecology <= 100.0
            assert civ.population >= 0
            assert civ.military >= 0.0


class TestGrowthRate:
    def test_famine_forces_decline(self, civ):
        civ.resources.remove_resource(ResourceType.FOOD, 500.0)
        assert civ.get_growth_rate() == pytest.approx(-0.01)

    def test_misery_forces_decline(self, civ):
        civ.happiness = 10.0
        assert civ.get_growth_rate() <= -0.01

    def test_rate_capped_at_five_percent(self, civ):
        civ.happiness = 100.0
        civ.ecology = 100.0
        civ.tech.set_branch_state(TechBranch.MEDICINE, 20, 0.0)
        assert civ.get_growth_rate() == pytest.approx(0.05)

    def test_rate_floored_at_minus_five_percent(self, civ):
        civ.resources.add_resource(ResourceType.FOOD, -10_000.0)
        civ.happiness = 0.0
        assert civ.get_growth_rate() >= -0.05

    def test_medicine_speeds_growth(self):
        base, healed = Civilization(), Civilization()
        base.happiness = healed.happiness = 30.0
        healed.tech.set_branch_state(TechBranch.MEDICINE, 10, 0.0)
        assert healed.get_growth_rate() > base.get_growth_rate()

    def test_decline_rounds_down(self, civ):
        civ.population = 999
        civ.resources.remove_resource(ResourceType.FOOD, 500.0)
        civ.grow_population()
        # floor(999 * -0.01) == -10
        assert civ.population == 989


class TestModifiers:
    def test_clamped_modifiers(self, civ):
        civ.modify_population(-2000)
        civ.modify_happiness(500.0)
        civ.modify_ecology(-500.0)
        civ.modify_military(-500.0)
        assert civ.population == 0
        assert civ.happiness == 100.0
        assert civ.ecology == 0.0
        assert civ.military == 0.0


class TestGameResult:
    def test_ecology_collapse_is_inclusive(self, civ):
        for _ in range(5):
            civ.apply_event(make_event(ecology_effect=-17.0))
        assert civ.ecology == 5.0
        assert civ.check_game_result() == GameResult.DEFEAT_ECOLOGY

    def test_ecology_just_above_threshold(self, civ):
        civ.ecology = 5.01
        assert civ.check_game_result() == GameResult.IN_PROGRESS

    def test_population_loss_wins_over_everything(self, civ):
        civ.modify_population(-civ.population)
        civ.ecology = 0.0
        civ.resources.add_resource(ResourceType.MONEY, -10_000.0)
        assert civ.check_game_result() == GameResult.DEFEAT_POPULATION
        assert not civ.is_alive()

    def test_economic_collapse_needs_debt_and_no_food(self, civ):
        civ.resources.add_resource(ResourceType.MONEY, -700.0)
        assert civ.check_game_result() == GameResult.IN_PROGRESS

        civ.resources.remove_resource(ResourceType.FOOD, 500.0)
        assert civ.check_game_result() == GameResult.DEFEAT_ECONOMY

    def test_debt_just_short_of_collapse(self, civ):
        civ.resources.add_resource(ResourceType.MONEY, -699.0)
        civ.resources.remove_resource(ResourceType.FOOD, 600.0)
        assert civ.check_game_result() == GameResult.IN_PROGRESS

    def test_space_era_is_victory(self, civ):
        for branch in TechBranch:
            civ.tech.set_branch_state(branch, 18, 0.0)
        assert civ.check_game_result() == GameResult.VICTORY_SPACE

    def test_defeat_checked_before_victory(self, civ):
        for branch in TechBranch:
            civ.tech.set_branch_state(branch, 20, 0.0)
        civ.ecology = 2.0
        assert civ.check_game_result() == GameResult.DEFEAT_ECOLOGY

    def test_economy_and_tech_victories_are_unreachable(self, civ):
        # A long stable economy and a maxed tree still only yield a space victory
        civ.stable_economy_turns = 500
        for branch in TechBranch:
            civ.tech.set_branch_state(branch, 20, 0.0)
        result = civ.check_game_result()
        assert result not in (GameResult.VICTORY_ECONOMY, GameResult.VICTORY_TECH)
        assert result == GameResult.VICTORY_SPACE
