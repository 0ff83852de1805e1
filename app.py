# app.py
# =============================================================================
# Pizza Dough Calculator: baker's percentages, pre-ferment split, schedule
# =============================================================================

import logging
import os
from dataclasses import replace

import streamlit as st
import matplotlib.pyplot as plt  # dough composition pie chart
from babel.numbers import format_decimal

from calc import composition, compute_weights, final_dough_breakdown, pre_ferment_share, water_shortfall
from recipe import (
    DEFAULT_NAME,
    DEFAULT_RECIPE,
    FIELD_LIMITS,
    INGREDIENTS,
    TIMING_PRESETS,
    Ingredient,
    PreFermentType,
    apply_timing_preset,
    recipe_summary,
    reset_formula,
    with_ingredient,
    with_pre_ferment,
    with_timing,
    with_yield,
)
from schedule import derive_schedule, timing_summary, total_time_label
from store import JsonRecipeStore, RecipeStoreError

# -----------------------------------------------------------------------------
# CONFIG
# -----------------------------------------------------------------------------
st.set_page_config(page_title="Pizza Dough Calculator", layout="wide")

logging.basicConfig(
    level=os.environ.get("DOUGH_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("dough_app")

# -----------------------------------------------------------------------------
# SESSION STATE
# -----------------------------------------------------------------------------
if "recipe" not in st.session_state:
    st.session_state.recipe = DEFAULT_RECIPE
if "recipe_name" not in st.session_state:
    st.session_state.recipe_name = DEFAULT_NAME
# bumped whenever the recipe is replaced wholesale so every widget re-reads its value
if "rev" not in st.session_state:
    st.session_state.rev = 0
if "locale" not in st.session_state:
    st.session_state["locale"] = "en_US"

store = JsonRecipeStore()

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------
def format_number(x, decimals: int = 0) -> str:
    """Format a number following the current locale."""
    locale = st.session_state.get("locale", "en_US")
    pattern = f"#,##0.{ '0'*decimals }" if decimals > 0 else "#,##0"
    return format_decimal(x, format=pattern, locale=locale)


def format_grams(x) -> str:
    return f"{format_number(x)} g"


def format_percent(x: float, decimals: int = 1) -> str:
    return f"{format_number(x, decimals)}%"


def wkey(name: str) -> str:
    return f"{name}_{st.session_state.rev}"


def replace_recipe(new_recipe, name: str | None = None):
    st.session_state.recipe = new_recipe
    if name is not None:
        st.session_state.recipe_name = name
    st.session_state.rev += 1


def limits(name: str):
    lo, hi = FIELD_LIMITS[name]
    return float(lo), (float(hi) if hi is not None else None)


# -----------------------------------------------------------------------------
# UI: sidebar navigation
# -----------------------------------------------------------------------------
sections = ["Calculator", "Schedule", "Recipes", "Settings"]
page = st.sidebar.selectbox("Navigate", sections, key="nav")
st.sidebar.caption(f"Working recipe: {st.session_state.recipe_name}")

r = st.session_state.recipe

# -----------------------------------------------------------------------------
# CALCULATOR
# -----------------------------------------------------------------------------
if page == "Calculator":
    st.header(f"Dough Calculator — {st.session_state.recipe_name}")
    col_in, col_out = st.columns([1, 1])

    with col_in:
        st.subheader("Dough Settings ⚖️")
        balls = st.number_input("Dough balls", min_value=1, value=int(r.dough_balls), step=1,
                                key=wkey("balls"))
        weight = st.number_input("Weight per ball (g)", min_value=50.0, value=float(r.ball_weight),
                                 step=10.0, key=wkey("ball_weight"))
        r = with_yield(r, dough_balls=balls, ball_weight=weight)

        st.subheader("Ingredients (baker's %) 🧾")
        st.number_input("Flour %", value=100.0, disabled=True, key=wkey("pct_flour"))
        for ing in INGREDIENTS:
            if ing is Ingredient.FLOUR:
                continue
            val = st.number_input(f"{ing.label} %", min_value=0.0, value=float(r.ingredients.get(ing)),
                                  step=0.1, key=wkey(f"pct_{ing.value}"))
            r = with_ingredient(r, ing, val)

        st.subheader("Pre-ferment 🫙")
        enabled = st.toggle("Use a pre-ferment", value=r.pre_ferment.enabled, key=wkey("pf_on"))
        r = with_pre_ferment(r, enabled=enabled)
        if enabled:
            types = list(PreFermentType)
            pf_type = st.radio("Type", types, index=types.index(r.pre_ferment.type),
                               format_func=lambda t: t.label, horizontal=True, key=wkey("pf_type"))
            lo, hi = limits("percentage")
            pf_pct = st.slider("Pre-ferment share of total flour (%)", lo, hi,
                               float(r.pre_ferment.percentage), 1.0, key=wkey("pf_pct"))
            lo, hi = limits("hydration")
            pf_hyd = st.slider("Pre-ferment hydration (%)", lo, hi,
                               float(r.pre_ferment.hydration), 5.0, key=wkey("pf_hyd"))
            r = with_pre_ferment(r, type=pf_type, percentage=pf_pct, hydration=pf_hyd)

    st.session_state.recipe = r
    w = compute_weights(r)

    with col_out:
        st.subheader("Recipe Results 📊")
        m1, m2, m3 = st.columns(3)
        m1.metric("Total dough", format_grams(w.total_dough))
        m2.metric("Total flour", format_grams(w.total_flour))
        m3.metric("Hydration", format_percent(w.total_hydration))

        if r.pre_ferment.enabled and w.pre_ferment.total > 0:
            pf_label = r.pre_ferment.type.label
            flour_share, water_share = pre_ferment_share(w)
            st.markdown(f"#### {pf_label} ({format_number(r.pre_ferment.hydration)}% hydration)")
            st.write(f"- Flour: {format_grams(w.pre_ferment.flour)} ({format_percent(flour_share, 0)})")
            st.write(f"- Water: {format_grams(w.pre_ferment.water)} ({format_percent(water_share)})")
            st.write(f"- Yeast: {format_number(w.pre_ferment.yeast, 1)} g")
            st.write(f"**Total: {format_grams(w.pre_ferment.total)}**")

        st.markdown("#### Final Dough Mix")
        for ing, grams in final_dough_breakdown(w):
            st.write(f"- {ing.label}: {format_grams(grams)}")
        if r.pre_ferment.enabled:
            st.write(f"- {r.pre_ferment.type.label}: {format_grams(w.pre_ferment.total)}")
        st.caption(f"For {r.dough_balls} dough balls at {format_number(r.ball_weight)}g each")

        short = water_shortfall(w)
        if short > 0:
            st.warning(f"The pre-ferment needs {format_grams(short)} more water than the whole "
                       "formula holds. Lower the pre-ferment hydration or share.")

        labels, weights = composition(w, r.pre_ferment.type.label)
        if sum(weights) > 0:
            fig, ax = plt.subplots()
            ax.pie(weights, labels=labels, autopct='%1.1f%%', startangle=90)
            ax.axis('equal')
            st.pyplot(fig)
            plt.close(fig)
            st.caption("Pie chart of dough composition by weight")

# -----------------------------------------------------------------------------
# SCHEDULE
# -----------------------------------------------------------------------------
if page == "Schedule":
    st.header("Timing & Process")
    st.caption(timing_summary(r.timing))

    t = r.timing
    c1, c2 = st.columns(2)
    lo, hi = limits("autolyse_minutes")
    autolyse = c1.number_input("Autolyse (min)", lo, hi, float(t.autolyse_minutes), 5.0, key=wkey("t_aut"))
    lo, hi = limits("bulk_ferment_hours")
    bulk = c1.number_input("Bulk ferment (hrs)", lo, hi, float(t.bulk_ferment_hours), 0.5, key=wkey("t_bulk"))
    lo, hi = limits("ball_and_rest_minutes")
    rest = c1.number_input("Ball & rest (min)", lo, hi, float(t.ball_and_rest_minutes), 15.0, key=wkey("t_rest"))
    lo, hi = limits("final_proof_hours")
    proof = c2.number_input("Final proof (hrs)", lo, hi, float(t.final_proof_hours), 0.5, key=wkey("t_proof"))
    lo, hi = limits("room_temp_celsius")
    temp = c2.number_input("Room temperature (°C)", lo, hi, float(t.room_temp_celsius), 1.0, key=wkey("t_temp"))
    r = with_timing(r, autolyse_minutes=autolyse, bulk_ferment_hours=bulk,
                    ball_and_rest_minutes=rest, final_proof_hours=proof, room_temp_celsius=temp)
    st.session_state.recipe = r

    st.markdown("##### Quick presets ⏱️")
    cols = st.columns(len(TIMING_PRESETS))
    for col, preset in zip(cols, TIMING_PRESETS):
        if col.button(preset, key=f"preset_{preset}"):
            replace_recipe(apply_timing_preset(r, preset))
            st.rerun()

    st.divider()
    st.subheader("Process Timeline 🍕")
    for step in derive_schedule(r.timing, r.pre_ferment.enabled, r.pre_ferment.type, r.dough_balls):
        title = step.title
        if step.duration_label is not None:
            title += f" ({step.duration_label})"
        prefix = f"{step.number}. " if step.number is not None else ""
        st.markdown(f"**{prefix}{title}**  \n{step.guidance}")
    st.info(f"Total time: {total_time_label(r.timing)} at {format_number(r.timing.room_temp_celsius)}°C")

# -----------------------------------------------------------------------------
# RECIPES
# -----------------------------------------------------------------------------
if page == "Recipes":
    st.header("Recipe Management")
    tab_save, tab_saved = st.tabs(["Save current", "Saved recipes"])

    with tab_save:
        with st.form("save_recipe_form"):
            new_name = st.text_input("Recipe name", key="recipes_new_name")
            submitted = st.form_submit_button("💾 Save recipe")
            if submitted:
                try:
                    saved = store.save(replace(r, name=new_name))
                except RecipeStoreError as e:
                    st.error(f"Recipe not saved: {e}")
                else:
                    if saved is None:
                        st.error("Please enter a recipe name")
                    else:
                        st.success(f"Saved '{saved.name}'")
        if st.button("🔄 Reset to default", key="recipes_reset"):
            replace_recipe(reset_formula(r), DEFAULT_NAME)
            logger.info("Formula reset to default")
            st.rerun()

    with tab_saved:
        saved_recipes = store.list()
        if not saved_recipes:
            st.info("No saved recipes yet. Save one in the 'Save current' tab.")
        for sr in saved_recipes:
            with st.expander(sr.name or sr.id, expanded=False):
                st.write(f"{sr.dough_balls} balls × {format_number(sr.ball_weight)}g")
                st.caption(recipe_summary(sr))
                c1, c2 = st.columns(2)
                if c1.button("📥 Load", key=f"load_{sr.id}"):
                    loaded = store.load(sr.id)
                    if loaded is not None:
                        replace_recipe(replace(loaded, id=None, name=None), loaded.name)
                        logger.info("Loaded recipe %s", sr.id)
                        st.rerun()
                if c2.button("🗑️ Delete", key=f"del_{sr.id}"):
                    try:
                        store.delete(sr.id)
                    except RecipeStoreError as e:
                        st.error(f"Recipe not deleted: {e}")
                    else:
                        st.rerun()

# -----------------------------------------------------------------------------
# SETTINGS
# -----------------------------------------------------------------------------
if page == "Settings":
    st.header("Settings")
    st.subheader("Locale")
    locales = ["en_US", "it_IT"]
    loc = st.selectbox("Interface locale", locales, index=locales.index(st.session_state["locale"]),
                       key="settings_locale")
    st.session_state["locale"] = loc
    st.caption(f"Recipes are stored in {store.path}")
