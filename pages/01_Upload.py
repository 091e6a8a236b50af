# pages/01_Upload.py
# ───────────────────────────────────────────────────────────────────────────
"""Stage 1 – upload a CSV dataset or an image."""

from __future__ import annotations

# ── 3rd-party ─────────────────────────────────────────────────────────────
import streamlit as st

# ── app modules ───────────────────────────────────────────────────────────
from info import STAGE_INFO
from utils import (
    add_green_button_css,
    get_workflow,
    go_to_stage,
    image_bytes,
    preview_csv,
    show_last_error,
)
from workflow import WorkflowStage

IMAGE_TYPES = ["jpeg", "jpg", "png", "gif", "webp"]

# ───────────────────────────── init & CSS ────────────────────────────────
add_green_button_css()
workflow = get_workflow()

# ───────────────────── dataset already accepted ──────────────────────────
if workflow.stage != WorkflowStage.UPLOADING_FILE:
    dataset = workflow.state.dataset
    st.success(f"**{dataset.name}** is loaded for this workflow.")
    if dataset.is_tabular:
        preview_csv(dataset.raw_content)
    else:
        st.image(image_bytes(dataset.raw_content), width=320)
    st.info("Use **Start over** in the sidebar to upload a different file.")
    if st.button("Continue ➡️", type="primary"):
        go_to_stage()
    st.stop()

# ───────────────────── main instructions ─────────────────────────────────
st.markdown(STAGE_INFO["upload"])
show_last_error()

# ───────────────────────── upload controls ───────────────────────────────
uploaded = st.file_uploader(
    "Drag 'n' drop a file here, or click to select one",
    type=["csv", *IMAGE_TYPES],
    accept_multiple_files=False,
    key=f"uploader_{st.session_state.uploader_key}",
)

if uploaded is not None:
    st.caption(f"{uploaded.name}  ({uploaded.size/1024:.2f} KB)")
    if st.button("UPLOAD", type="primary"):
        workflow.accept_file(uploaded.name, uploaded.type or "", uploaded.getvalue())
        if workflow.stage == WorkflowStage.COLLECTING_GOAL:
            st.session_state.uploader_key += 1
            go_to_stage()
        st.rerun()
else:
    st.info("Supported: CSV, and images (JPG, PNG, GIF, WEBP).")
