"""Saved-recipe storage: JSON file on disk or an in-memory dict."""

import json
import logging
import os
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Protocol

from recipe import (
    DEFAULT_RECIPE,
    INGREDIENTS,
    Ingredient,
    Recipe,
    with_ingredient,
    with_pre_ferment,
    with_timing,
    with_yield,
)

logger = logging.getLogger(__name__)

COLLECTION_KEY = "pizza-dough-recipes"

# record key -> Timing attribute
_TIMING_KEYS = {
    "autolyse": "autolyse_minutes",
    "bulkFerment": "bulk_ferment_hours",
    "ballAndRest": "ball_and_rest_minutes",
    "finalProof": "final_proof_hours",
    "roomTemp": "room_temp_celsius",
}


def default_data_dir() -> Path:
    return Path(os.environ.get("DOUGH_DATA_DIR") or Path(__file__).parent / "data")


def recipe_to_record(recipe: Recipe) -> Dict[str, Any]:
    pf = recipe.pre_ferment
    return {
        "id": recipe.id,
        "name": recipe.name,
        "doughBalls": recipe.dough_balls,
        "ballWeight": recipe.ball_weight,
        "ingredients": {ing.value: v for ing, v in recipe.ingredients.as_dict().items()},
        "preFerment": {
            "enabled": pf.enabled,
            "type": pf.type.value,
            "percentage": pf.percentage,
            "hydration": pf.hydration,
        },
        "timing": {key: getattr(recipe.timing, attr) for key, attr in _TIMING_KEYS.items()},
    }


def _section(record: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = record.get(key)
    return value if isinstance(value, dict) else {}


def recipe_from_record(record: Dict[str, Any]) -> Recipe:
    """Rebuild a Recipe; absent or invalid fields take the default recipe's values."""
    r = with_yield(DEFAULT_RECIPE, record.get("doughBalls"), record.get("ballWeight"))

    ingredients = _section(record, "ingredients")
    for ing in INGREDIENTS:
        if ing is not Ingredient.FLOUR and ing.value in ingredients:
            r = with_ingredient(r, ing, ingredients[ing.value])

    pf = _section(record, "preFerment")
    pf_changes = {k: pf[k] for k in ("type", "percentage", "hydration") if k in pf}
    if isinstance(pf.get("enabled"), bool):
        pf_changes["enabled"] = pf["enabled"]
    r = with_pre_ferment(r, **pf_changes)

    timing = _section(record, "timing")
    r = with_timing(r, **{attr: timing[key] for key, attr in _TIMING_KEYS.items() if key in timing})

    rid = record.get("id")
    name = record.get("name")
    return replace(r, id=str(rid) if rid is not None else None,
                   name=name if isinstance(name, str) else None)


class RecipeStoreError(Exception):
    """Raised when snapshots cannot be written to the backing storage."""


class RecipeStore(Protocol):
    def list(self) -> List[Recipe]: ...

    def save(self, recipe: Recipe) -> Recipe | None: ...

    def delete(self, recipe_id: str) -> None: ...

    def load(self, recipe_id: str) -> Recipe | None: ...


def _snapshot(recipe: Recipe) -> Recipe | None:
    name = (recipe.name or "").strip()
    if not name:
        return None
    return replace(recipe, id=uuid.uuid4().hex, name=name)


class InMemoryRecipeStore:
    """Keeps snapshots in a dict; nothing survives the process."""

    def __init__(self) -> None:
        self._recipes: Dict[str, Recipe] = {}

    def list(self) -> List[Recipe]:
        return list(self._recipes.values())

    def save(self, recipe: Recipe) -> Recipe | None:
        snap = _snapshot(recipe)
        if snap is not None:
            self._recipes[snap.id] = snap
        return snap

    def delete(self, recipe_id: str) -> None:
        self._recipes.pop(recipe_id, None)

    def load(self, recipe_id: str) -> Recipe | None:
        return self._recipes.get(recipe_id)


class JsonRecipeStore:
    """
    All snapshots live in a single JSON array at <data_dir>/pizza-dough-recipes.json.
    A missing, unreadable or malformed file reads as an empty collection.
    """

    def __init__(self, data_dir: Path | str | None = None) -> None:
        self.data_dir = Path(data_dir) if data_dir is not None else default_data_dir()
        self.path = self.data_dir / f"{COLLECTION_KEY}.json"

    def _read(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s, treating as empty: %s", self.path, e)
            return []
        if not isinstance(data, list):
            logger.warning("Unexpected content in %s, treating as empty", self.path)
            return []
        return [rec for rec in data if isinstance(rec, dict) and rec.get("id") is not None]

    def _write(self, records: List[Dict[str, Any]]) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(records, f, ensure_ascii=False, indent=2)
        except OSError as e:
            logger.error("Could not write %s: %s", self.path, e)
            raise RecipeStoreError(f"Could not write {self.path}: {e}") from e

    def list(self) -> List[Recipe]:
        return [recipe_from_record(rec) for rec in self._read()]

    def save(self, recipe: Recipe) -> Recipe | None:
        snap = _snapshot(recipe)
        if snap is None:
            return None
        records = self._read()
        records.append(recipe_to_record(snap))
        self._write(records)
        logger.info("Saved recipe %r as %s", snap.name, snap.id)
        return snap

    def delete(self, recipe_id: str) -> None:
        records = self._read()
        kept = [rec for rec in records if str(rec.get("id")) != recipe_id]
        if len(kept) != len(records):
            self._write(kept)
            logger.info("Deleted recipe %s", recipe_id)

    def load(self, recipe_id: str) -> Recipe | None:
        for rec in self._read():
            if str(rec.get("id")) == recipe_id:
                return recipe_from_record(rec)
        return None
