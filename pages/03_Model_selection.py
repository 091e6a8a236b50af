# pages/03_Model_selection.py
# ───────────────────────────────────────────────────────────────────────────
"""Stage 3 – pick one of the suggested models."""

from __future__ import annotations

# ── std-lib ────────────────────────────────────────────────────────────────
from typing import List

# ── 3rd-party ──────────────────────────────────────────────────────────────
import streamlit as st

# ── app modules ────────────────────────────────────────────────────────────
from info import STAGE_INFO
from utils import add_green_button_css, get_workflow, go_to_stage, show_last_error
from workflow import WorkflowStage

# ═══════════════════════════  Helper functions  ═══════════════════════════
def choose(model: str) -> None:
    get_workflow().select_model(model)


def model_grid(models: List[str], recommended: str, key: str, per_row: int = 3) -> None:
    """Render one button per model; the recommended one is starred and green."""
    for start in range(0, len(models), per_row):
        cols = st.columns(per_row)
        for col, model in zip(cols, models[start:start + per_row]):
            is_rec = model == recommended
            col.button(
                f"⭐ {model} · Recommended" if is_rec else model,
                key=f"{key}_{start}_{model}",
                type="primary" if is_rec else "secondary",
                on_click=choose,
                args=(model,),
                use_container_width=True,
            )


# ═══════════════════════════  Main page  ══════════════════════════════════
add_green_button_css()
workflow = get_workflow()

if workflow.stage == WorkflowStage.SHOWING_RESULTS:
    go_to_stage()

if workflow.stage != WorkflowStage.SELECTING_MODEL:
    st.warning("Describe your goal first to get model suggestions.")
    st.stop()

info = STAGE_INFO["model_selection"]
st.subheader(info["title"])
st.write(info["description"])
with st.expander("How it works"):
    st.write(info["how_it_works"])

show_last_error()

suggestions = workflow.state.model_suggestions
st.markdown(f"**Goal:** {workflow.state.goal_text}")

model_grid(suggestions.options, suggestions.recommended, key="option")

if suggestions.more_models:
    with st.expander("Explore Other Well-Known Models"):
        model_grid(suggestions.more_models, recommended="", key="more", per_row=4)
