"""Dough recipe model, default recipe and input-boundary clamping."""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Tuple


class Ingredient(str, Enum):
    FLOUR = "flour"
    WATER = "water"
    SALT = "salt"
    YEAST = "yeast"
    OIL = "oil"
    SUGAR = "sugar"

    @property
    def label(self) -> str:
        return self.value.capitalize()


INGREDIENTS: Tuple[Ingredient, ...] = tuple(Ingredient)


class PreFermentType(str, Enum):
    BIGA = "biga"
    POOLISH = "poolish"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class Percentages:
    """Baker's percentages; flour is the basis and always 100."""

    water: float = 60.0
    salt: float = 2.5
    yeast: float = 0.3
    oil: float = 0.0
    sugar: float = 0.0
    flour: float = field(default=100.0, init=False)

    def as_dict(self) -> Dict[Ingredient, float]:
        return {
            Ingredient.FLOUR: self.flour,
            Ingredient.WATER: self.water,
            Ingredient.SALT: self.salt,
            Ingredient.YEAST: self.yeast,
            Ingredient.OIL: self.oil,
            Ingredient.SUGAR: self.sugar,
        }

    def get(self, ingredient: Ingredient) -> float:
        return self.as_dict()[ingredient]

    def total(self) -> float:
        return sum(self.as_dict().values())


@dataclass(frozen=True)
class PreFerment:
    enabled: bool = False
    type: PreFermentType = PreFermentType.POOLISH
    percentage: float = 20.0  # share of total flour
    hydration: float = 100.0


@dataclass(frozen=True)
class Timing:
    autolyse_minutes: float = 30.0
    bulk_ferment_hours: float = 24.0
    ball_and_rest_minutes: float = 30.0
    final_proof_hours: float = 2.0
    room_temp_celsius: float = 20.0


@dataclass(frozen=True)
class Recipe:
    """
    Complete dough formula. Instances are never mutated; the helpers below
    return a new Recipe for every accepted edit.
    id and name are only set on snapshots kept in a RecipeStore.
    """

    ingredients: Percentages = field(default_factory=Percentages)
    pre_ferment: PreFerment = field(default_factory=PreFerment)
    dough_balls: int = 4
    ball_weight: float = 250.0
    timing: Timing = field(default_factory=Timing)
    id: str | None = None
    name: str | None = None

    @property
    def total_dough_weight(self) -> float:
        return self.dough_balls * self.ball_weight


DEFAULT_NAME = "Classic Neapolitan"
DEFAULT_RECIPE = Recipe()

# (minimum, maximum) per editable field; None means unbounded
FIELD_LIMITS: Dict[str, Tuple[float, float | None]] = {
    "water": (0.0, None),
    "salt": (0.0, None),
    "yeast": (0.0, None),
    "oil": (0.0, None),
    "sugar": (0.0, None),
    "dough_balls": (1, None),
    "ball_weight": (50.0, None),
    "percentage": (5.0, 50.0),
    "hydration": (30.0, 150.0),
    "autolyse_minutes": (0.0, 120.0),
    "bulk_ferment_hours": (1.0, 72.0),
    "ball_and_rest_minutes": (15.0, 180.0),
    "final_proof_hours": (0.5, 8.0),
    "room_temp_celsius": (15.0, 30.0),
}

TIMING_PRESETS: Dict[str, Dict[str, float]] = {
    "Same Day (6hrs)": {
        "autolyse_minutes": 30, "bulk_ferment_hours": 2,
        "ball_and_rest_minutes": 30, "final_proof_hours": 2,
    },
    "Cold Ferment (24hrs)": {
        "autolyse_minutes": 30, "bulk_ferment_hours": 24,
        "ball_and_rest_minutes": 30, "final_proof_hours": 2,
    },
    "Long Cold (48hrs)": {
        "autolyse_minutes": 60, "bulk_ferment_hours": 48,
        "ball_and_rest_minutes": 60, "final_proof_hours": 3,
    },
}


def coerce_number(raw: Any, previous: float, minimum: float,
                  maximum: float | None = None, integer: bool = False) -> float:
    """Parse a raw field value, falling back to previous and clamping into range."""
    if isinstance(raw, bool):
        return previous
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return previous
    if math.isnan(value) or math.isinf(value):
        return previous
    if integer:
        value = int(value)
    value = max(value, minimum)
    if maximum is not None:
        value = min(value, maximum)
    return int(value) if integer else float(value)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _clamp_field(name: str, raw: Any, previous: float) -> float:
    lo, hi = FIELD_LIMITS[name]
    return coerce_number(raw, previous, lo, hi, integer=(name == "dough_balls"))


def with_ingredient(recipe: Recipe, ingredient: Ingredient, value: Any) -> Recipe:
    if ingredient is Ingredient.FLOUR:
        return recipe
    key = ingredient.value
    current = recipe.ingredients.get(ingredient)
    pct = replace(recipe.ingredients, **{key: _clamp_field(key, value, current)})
    return replace(recipe, ingredients=pct)


def with_pre_ferment(recipe: Recipe, **changes: Any) -> Recipe:
    pf = recipe.pre_ferment
    updates: Dict[str, Any] = {}
    for key, value in changes.items():
        if key == "enabled":
            updates[key] = bool(value)
        elif key == "type":
            try:
                updates[key] = PreFermentType(value)
            except ValueError:
                continue
        elif key in ("percentage", "hydration"):
            updates[key] = _clamp_field(key, value, getattr(pf, key))
        else:
            raise TypeError(f"unknown pre-ferment field: {key}")
    return replace(recipe, pre_ferment=replace(pf, **updates))


def with_timing(recipe: Recipe, **changes: Any) -> Recipe:
    t = recipe.timing
    updates = {}
    for key, value in changes.items():
        if key not in FIELD_LIMITS or not hasattr(t, key):
            raise TypeError(f"unknown timing field: {key}")
        updates[key] = _clamp_field(key, value, getattr(t, key))
    return replace(recipe, timing=replace(t, **updates))


def with_yield(recipe: Recipe, dough_balls: Any = None, ball_weight: Any = None) -> Recipe:
    balls = recipe.dough_balls
    weight = recipe.ball_weight
    if dough_balls is not None:
        balls = _clamp_field("dough_balls", dough_balls, balls)
    if ball_weight is not None:
        weight = _clamp_field("ball_weight", ball_weight, weight)
    return replace(recipe, dough_balls=balls, ball_weight=weight)


def apply_timing_preset(recipe: Recipe, preset: str) -> Recipe:
    """Apply one of TIMING_PRESETS; room temperature is left untouched."""
    return with_timing(recipe, **TIMING_PRESETS[preset])


def reset_formula(recipe: Recipe) -> Recipe:
    return replace(recipe, ingredients=DEFAULT_RECIPE.ingredients,
                   pre_ferment=DEFAULT_RECIPE.pre_ferment)


def _pct(value: float) -> str:
    return f"{value:g}%"


def recipe_summary(recipe: Recipe) -> str:
    pct = recipe.ingredients
    text = f"{_pct(pct.water)} water, {_pct(pct.salt)} salt, {_pct(pct.yeast)} yeast"
    if recipe.pre_ferment.enabled:
        text += f" • {recipe.pre_ferment.type.value}"
    return text
