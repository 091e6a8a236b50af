# pages/02_Goal.py
# ───────────────────────────────────────────────────────────────────────────
"""Stage 2 – describe the goal; the assistant then processes it."""

from __future__ import annotations

# ── 3rd-party ─────────────────────────────────────────────────────────────
import streamlit as st

# ── app modules ───────────────────────────────────────────────────────────
from info import EXAMPLE_GOALS, STAGE_INFO
from utils import (
    add_green_button_css,
    get_workflow,
    go_to_stage,
    run,
    show_last_error,
)
from workflow import WorkflowStage

# ───────────────────────────── init & CSS ────────────────────────────────
add_green_button_css()
workflow = get_workflow()
st.session_state.setdefault("goal_input", "")

# ── upfront guard ─────────────────────────────────────────────────────────
if workflow.stage == WorkflowStage.UPLOADING_FILE:
    st.warning("Upload a file first to describe your goal.")
    st.stop()


# ─────────────────────────── helpers ─────────────────────────────────────
def use_example(example: str) -> None:
    st.session_state.goal_input = example


def process_goal() -> None:
    """Run the processing stage; lands on model selection or back here."""
    with st.spinner("Analyzing your goal and finding suitable models …"):
        run(workflow.process_goal())
    if workflow.stage == WorkflowStage.SELECTING_MODEL:
        go_to_stage()
    st.rerun()


# A run interrupted mid-request leaves the stage at PROCESSING_GOAL; resume it.
if workflow.stage == WorkflowStage.PROCESSING_GOAL:
    process_goal()

dataset = workflow.state.dataset

if workflow.stage != WorkflowStage.COLLECTING_GOAL:
    st.markdown(f"**Goal:** {workflow.state.goal_text}")
    st.caption(f"Task type: {workflow.state.task_category.value.title()}")
    if workflow.state.target_column:
        st.caption(f"Target column: `{workflow.state.target_column}`")
    if st.button("Continue ➡️", type="primary"):
        go_to_stage()
    st.stop()

# ───────────────────── main instructions ─────────────────────────────────
st.markdown(STAGE_INFO["goal"])
icon = "📄" if dataset.is_tabular else "🖼️"
st.markdown(f"{icon} **{dataset.name}**")
if dataset.is_tabular:
    st.caption("Columns: " + ", ".join(dataset.column_names))

show_last_error()

if workflow.state.goal_text and not st.session_state.goal_input:
    st.session_state.goal_input = workflow.state.goal_text

goal = st.text_area(
    "What would you like to achieve?",
    key="goal_input",
    placeholder="e.g., Predict customer churn based on usage data",
    height=120,
)

st.caption("Or try an example:")
cols = st.columns(len(EXAMPLE_GOALS[dataset.kind.value]))
for col, example in zip(cols, EXAMPLE_GOALS[dataset.kind.value]):
    col.button(example, on_click=use_example, args=(example,), use_container_width=True)

if st.button("✨ Generate Workflow", type="primary", disabled=not goal.strip()):
    workflow.submit_goal(goal)
    if workflow.stage == WorkflowStage.PROCESSING_GOAL:
        process_goal()
    st.rerun()
