import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from recipe import DEFAULT_RECIPE, Ingredient, PreFermentType, with_ingredient, with_pre_ferment
from store import (
    COLLECTION_KEY,
    InMemoryRecipeStore,
    JsonRecipeStore,
    RecipeStoreError,
    default_data_dir,
    recipe_from_record,
    recipe_to_record,
)


@pytest.fixture(params=["json", "memory"])
def store(request, tmp_path):
    if request.param == "json":
        return JsonRecipeStore(tmp_path)
    return InMemoryRecipeStore()


def _named(name, recipe=DEFAULT_RECIPE):
    return replace(recipe, name=name)


def test_save_assigns_id_and_lists(store):
    saved = store.save(_named("  Friday pizza "))
    assert saved.id
    assert saved.name == "Friday pizza"
    assert [r.id for r in store.list()] == [saved.id]


def test_save_with_empty_name_is_declined(store):
    assert store.save(_named("   ")) is None
    assert store.save(DEFAULT_RECIPE) is None
    assert store.list() == []


def test_load_returns_saved_recipe(store):
    r = with_pre_ferment(with_ingredient(DEFAULT_RECIPE, Ingredient.OIL, 3), enabled=True, type="biga")
    saved = store.save(_named("Biga", r))
    loaded = store.load(saved.id)
    assert loaded == saved
    assert loaded.pre_ferment.type is PreFermentType.BIGA
    assert store.load("missing") is None


def test_delete(store):
    a = store.save(_named("A"))
    b = store.save(_named("B"))
    store.delete(a.id)
    store.delete("missing")
    assert [r.id for r in store.list()] == [b.id]


def test_json_file_location(tmp_path):
    store = JsonRecipeStore(tmp_path / "nested")
    store.save(_named("A"))
    path = tmp_path / "nested" / f"{COLLECTION_KEY}.json"
    records = json.loads(path.read_text(encoding="utf-8"))
    assert records[0]["name"] == "A"
    assert records[0]["ingredients"]["flour"] == 100
    assert records[0]["timing"]["bulkFerment"] == 24


def test_corrupt_file_reads_as_empty(tmp_path, caplog):
    (tmp_path / f"{COLLECTION_KEY}.json").write_text("{not json", encoding="utf-8")
    store = JsonRecipeStore(tmp_path)
    with caplog.at_level(logging.WARNING):
        assert store.list() == []
    assert "treating as empty" in caplog.text
    assert store.save(_named("fresh")) is not None
    assert len(store.list()) == 1


def test_non_list_file_reads_as_empty(tmp_path):
    (tmp_path / f"{COLLECTION_KEY}.json").write_text('{"a": 1}', encoding="utf-8")
    assert JsonRecipeStore(tmp_path).list() == []


def test_record_with_missing_fields_uses_defaults():
    r = recipe_from_record({"id": 17, "name": "old", "ingredients": {"water": 68}, "timing": {"bulkFerment": 6}})
    assert r.id == "17"
    assert r.ingredients.water == 68
    assert r.ingredients.salt == DEFAULT_RECIPE.ingredients.salt
    assert r.timing.bulk_ferment_hours == 6
    assert r.timing.final_proof_hours == DEFAULT_RECIPE.timing.final_proof_hours
    assert r.pre_ferment == DEFAULT_RECIPE.pre_ferment
    assert r.dough_balls == 4


def test_record_with_invalid_values_is_clamped():
    r = recipe_from_record({
        "id": "x", "name": 5, "doughBalls": 0, "ballWeight": "heavy",
        "ingredients": {"flour": 50, "salt": -3},
        "preFerment": {"enabled": "yes", "type": "levain", "percentage": 90},
        "timing": "soon",
    })
    assert r.name is None
    assert r.dough_balls == 1
    assert r.ball_weight == 250
    assert r.ingredients.flour == 100
    assert r.ingredients.salt == 0
    assert not r.pre_ferment.enabled
    assert r.pre_ferment.type is PreFermentType.POOLISH
    assert r.pre_ferment.percentage == 50
    assert r.timing == DEFAULT_RECIPE.timing


def test_record_round_trip():
    r = replace(with_pre_ferment(DEFAULT_RECIPE, enabled=True, hydration=80), id="abc", name="Mine")
    assert recipe_from_record(recipe_to_record(r)) == r


def test_default_data_dir_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DOUGH_DATA_DIR", str(tmp_path))
    assert default_data_dir() == tmp_path
    assert JsonRecipeStore().path.parent == tmp_path


def test_unwritable_data_dir_raises_store_error(tmp_path, caplog):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    store = JsonRecipeStore(blocker)
    with caplog.at_level(logging.ERROR):
        with pytest.raises(RecipeStoreError):
            store.save(_named("A"))
    assert "Could not write" in caplog.text
    assert store.list() == []
