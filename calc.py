"""Pure calculation utilities for dough formulation."""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from recipe import INGREDIENTS, Ingredient, Recipe, round_half_up


@dataclass(frozen=True)
class PreFermentWeights:
    flour: float = 0.0
    water: float = 0.0
    yeast: float = 0.0

    @property
    def total(self) -> float:
        return self.flour + self.water + self.yeast


@dataclass(frozen=True)
class WeightResult:
    total_dough: float
    total_flour: float
    totals: Dict[Ingredient, float]
    pre_ferment: PreFermentWeights
    final_dough: Dict[Ingredient, float]
    total_hydration: float

    @property
    def final_dough_total(self) -> float:
        return sum(self.final_dough.values())


def compute_weights(recipe: Recipe) -> WeightResult:
    """Convert baker's percentages and yield into gram weights."""
    pct = recipe.ingredients
    total_dough = recipe.dough_balls * recipe.ball_weight
    # normalise over every percentage so the masses add up to total_dough
    total_flour = total_dough * pct.flour / pct.total()
    totals = {ing: total_flour * pct.get(ing) / 100.0 for ing in INGREDIENTS}

    final = dict(totals)
    pf = PreFermentWeights()
    if recipe.pre_ferment.enabled:
        pf_flour = total_flour * recipe.pre_ferment.percentage / 100.0
        pf_water = pf_flour * recipe.pre_ferment.hydration / 100.0
        pf = PreFermentWeights(flour=pf_flour, water=pf_water, yeast=totals[Ingredient.YEAST])
        final[Ingredient.FLOUR] = total_flour - pf_flour
        final[Ingredient.WATER] = totals[Ingredient.WATER] - pf_water
        final[Ingredient.YEAST] = 0.0

    return WeightResult(
        total_dough=total_dough,
        total_flour=total_flour,
        totals=totals,
        pre_ferment=pf,
        final_dough=final,
        total_hydration=totals[Ingredient.WATER] / total_flour * 100.0,
    )


def final_dough_breakdown(result: WeightResult) -> List[Tuple[Ingredient, float]]:
    """Final-dough weights worth listing; anything rounding to 0 g is left out."""
    return [(ing, g) for ing, g in result.final_dough.items() if round_half_up(g) != 0]


def pre_ferment_share(result: WeightResult) -> Tuple[float, float]:
    """Return pre-ferment flour and water as percentages of total flour."""
    if result.total_flour <= 0:
        return 0.0, 0.0
    pf = result.pre_ferment
    return pf.flour / result.total_flour * 100.0, pf.water / result.total_flour * 100.0


def water_shortfall(result: WeightResult) -> float:
    """Grams of water the pre-ferment takes beyond the formula's total water."""
    return max(-result.final_dough[Ingredient.WATER], 0.0)


def composition(result: WeightResult, pre_ferment_label: str = "Pre-ferment") -> Tuple[List[str], List[float]]:
    """Labels and weights for the dough composition chart."""
    labels, weights = [], []
    for ing, g in result.final_dough.items():
        if g > 0:
            labels.append(ing.label)
            weights.append(g)
    if result.pre_ferment.total > 0:
        labels.append(pre_ferment_label)
        weights.append(result.pre_ferment.total)
    return labels, weights
