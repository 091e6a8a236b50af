# pages/04_Results.py
# ───────────────────────────────────────────────────────────────────────────
"""Stage 4 – metrics, workflow explanation and test bench."""

from __future__ import annotations

# ── 3rd-party ──────────────────────────────────────────────────────────────
import streamlit as st

# ── app modules ────────────────────────────────────────────────────────────
from info import STAGE_INFO
from utils import (
    add_green_button_css,
    confusion_frame,
    extract_code,
    get_workflow,
    metrics_frame,
    run,
    show_last_error,
)
from workflow import Outcome, WorkflowStage

# ──────────────────────────  Renderers  ──────────────────────────
def render_metrics(outcome: Outcome) -> None:
    if not outcome.ok:
        st.error(outcome.error)
        return
    metrics = outcome.value
    st.dataframe(metrics_frame(metrics.metrics), use_container_width=True, hide_index=True)
    if metrics.confusion_matrix:
        st.markdown("##### Confusion Matrix")
        st.table(confusion_frame(metrics.confusion_matrix))


def render_explanation(outcome: Outcome) -> None:
    if not outcome.ok:
        st.error(outcome.error)
        return
    st.markdown(outcome.value)
    code = extract_code(outcome.value)
    if code:
        st.download_button(
            "⬇️ Download code", code, file_name="workflow.py", mime="text/x-python"
        )


def render_test_bench() -> None:
    state = workflow.state
    if not state.dataset.is_tabular:
        st.info("The test bench is available for CSV datasets only.")
        return

    st.markdown(f"Predicting **{state.target_column or 'the target'}** with **{state.selected_model}**.")
    if st.button("🎲 Generate Sample", key="generate_sample"):
        with st.spinner("Generating …"):
            run(workflow.generate_sample())
        st.session_state.bench_version += 1  # fresh widgets pick up the sample values
        st.rerun()

    with st.form("test_bench"):
        cols = st.columns(2)
        for idx, (column, value) in enumerate(state.test_bench_inputs.items()):
            cols[idx % 2].text_input(
                column,
                value=value,
                key=f"input_{st.session_state.bench_version}_{column}",
                placeholder=f"Enter value for {column}...",
            )
        submitted = st.form_submit_button("🧪 Test Model", type="primary")

    if submitted:
        for column in state.test_bench_inputs:
            workflow.update_test_input(
                column, st.session_state[f"input_{st.session_state.bench_version}_{column}"]
            )
        with st.spinner("Predicting …"):
            run(workflow.test_model())
        st.rerun()

    if workflow.state.prediction:
        st.success(f"**Prediction:** {workflow.state.prediction}")


# ─────────────────────────  Main page  ─────────────────────────
add_green_button_css()
workflow = get_workflow()

if workflow.stage != WorkflowStage.SHOWING_RESULTS:
    st.warning("Select a model first to see the results.")
    st.stop()

if workflow.state.explanation is None or workflow.state.metrics is None:
    with st.spinner(f"Generating results for {workflow.state.selected_model} …"):
        run(workflow.load_results())

info = STAGE_INFO["results"]
st.subheader(f"{info['title']} · {workflow.state.selected_model}")
st.write(info["description"])
with st.expander("How it works"):
    st.write(info["how_it_works"])
st.markdown(f"**Goal:** {workflow.state.goal_text}")

show_last_error()

metrics_tab, explanation_tab, test_tab = st.tabs(
    ["📊 Performance Metrics", "📝 Workflow Explanation", "🧪 Test Bench"]
)
with metrics_tab:
    render_metrics(workflow.state.metrics)
with explanation_tab:
    render_explanation(workflow.state.explanation)
with test_tab:
    render_test_bench()
