import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from recipe import (
    DEFAULT_RECIPE,
    INGREDIENTS,
    Ingredient,
    PreFermentType,
    apply_timing_preset,
    coerce_number,
    round_half_up,
    recipe_summary,
    reset_formula,
    with_ingredient,
    with_pre_ferment,
    with_timing,
    with_yield,
)


def test_default_recipe_is_classic_neapolitan():
    r = DEFAULT_RECIPE
    assert r.ingredients.as_dict() == {
        Ingredient.FLOUR: 100, Ingredient.WATER: 60, Ingredient.SALT: 2.5,
        Ingredient.YEAST: 0.3, Ingredient.OIL: 0, Ingredient.SUGAR: 0,
    }
    assert not r.pre_ferment.enabled
    assert r.total_dough_weight == 1000
    assert r.id is None and r.name is None
    assert INGREDIENTS[0] is Ingredient.FLOUR


@pytest.mark.parametrize("raw, expected", [
    ("7.5", 7.5), (7, 7.0), ("abc", 3.0), (None, 3.0), (float("nan"), 3.0), (True, 3.0), (-2, 0.0), (500, 100.0),
])
def test_coerce_number(raw, expected):
    assert coerce_number(raw, 3.0, 0.0, 100.0) == expected


def test_coerce_integer():
    assert coerce_number("4.7", 2, 1, integer=True) == 4
    assert coerce_number(0, 2, 1, integer=True) == 1


def test_flour_is_immutable():
    assert with_ingredient(DEFAULT_RECIPE, Ingredient.FLOUR, 80) is DEFAULT_RECIPE
    assert with_ingredient(DEFAULT_RECIPE, Ingredient.WATER, 70).ingredients.flour == 100


def test_mutation_returns_new_value():
    r = with_ingredient(DEFAULT_RECIPE, Ingredient.WATER, 70)
    assert r.ingredients.water == 70
    assert DEFAULT_RECIPE.ingredients.water == 60


def test_invalid_ingredient_keeps_previous_value():
    assert with_ingredient(DEFAULT_RECIPE, Ingredient.SALT, "lots").ingredients.salt == 2.5
    assert with_ingredient(DEFAULT_RECIPE, Ingredient.SALT, -1).ingredients.salt == 0


def test_yield_clamped_to_minimums():
    r = with_yield(DEFAULT_RECIPE, dough_balls=0, ball_weight=10)
    assert r.dough_balls == 1
    assert r.ball_weight == 50
    r = with_yield(DEFAULT_RECIPE, dough_balls="x")
    assert r.dough_balls == 4


def test_pre_ferment_ranges():
    r = with_pre_ferment(DEFAULT_RECIPE, enabled=True, type="biga", percentage=80, hydration=10)
    assert r.pre_ferment.enabled
    assert r.pre_ferment.type is PreFermentType.BIGA
    assert r.pre_ferment.percentage == 50
    assert r.pre_ferment.hydration == 30


def test_unknown_pre_ferment_type_is_ignored():
    r = with_pre_ferment(DEFAULT_RECIPE, type="sourdough")
    assert r.pre_ferment.type is PreFermentType.POOLISH


def test_timing_ranges():
    r = with_timing(DEFAULT_RECIPE, autolyse_minutes=-5, bulk_ferment_hours=100, final_proof_hours="?")
    assert r.timing.autolyse_minutes == 0
    assert r.timing.bulk_ferment_hours == 72
    assert r.timing.final_proof_hours == 2


def test_unknown_timing_field():
    with pytest.raises(TypeError):
        with_timing(DEFAULT_RECIPE, rise_minutes=10)


def test_timing_preset_keeps_room_temp():
    r = with_timing(DEFAULT_RECIPE, room_temp_celsius=26)
    r = apply_timing_preset(r, "Long Cold (48hrs)")
    assert r.timing.bulk_ferment_hours == 48
    assert r.timing.autolyse_minutes == 60
    assert r.timing.room_temp_celsius == 26


def test_reset_formula_keeps_yield_and_timing():
    r = with_pre_ferment(with_ingredient(DEFAULT_RECIPE, Ingredient.WATER, 75), enabled=True)
    r = with_timing(with_yield(r, dough_balls=8), bulk_ferment_hours=6)
    reset = reset_formula(r)
    assert reset.ingredients == DEFAULT_RECIPE.ingredients
    assert reset.pre_ferment == DEFAULT_RECIPE.pre_ferment
    assert reset.dough_balls == 8
    assert reset.timing.bulk_ferment_hours == 6


def test_recipe_summary():
    assert recipe_summary(DEFAULT_RECIPE) == "60% water, 2.5% salt, 0.3% yeast"
    r = with_pre_ferment(DEFAULT_RECIPE, enabled=True, type="biga")
    assert recipe_summary(r) == "60% water, 2.5% salt, 0.3% yeast • biga"


@pytest.mark.parametrize("value, expected", [(0.5, 1), (2.5, 3), (4.5, 5), (0.49, 0), (-0.5, -1), (-1.2, -1)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected
