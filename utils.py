"""
utils.py  ·  Shared Streamlit helpers
=====================================

Pages import session bootstrap, CSS and renderers from here.  The workflow
itself lives in `workflow.py` and never touches Streamlit.
"""
from __future__ import annotations

import asyncio
import base64
import copy
import io
import logging
import re
from typing import Any, Awaitable, Dict, List, Optional

import pandas as pd
import streamlit as st

from assistants import create as get_assistant
from config import CONFIG
from workflow import Workflow, WorkflowStage

logger = logging.getLogger(__name__)

CODE_BLOCK_RE = re.compile(r"```(?:python|py)?[ \t]*\n([\s\S]*?)```")

STAGE_PAGES = {
    WorkflowStage.UPLOADING_FILE: "pages/01_Upload.py",
    WorkflowStage.COLLECTING_GOAL: "pages/02_Goal.py",
    WorkflowStage.PROCESSING_GOAL: "pages/02_Goal.py",
    WorkflowStage.SELECTING_MODEL: "pages/03_Model_selection.py",
    WorkflowStage.SHOWING_RESULTS: "pages/04_Results.py",
}


# ────────────────────────────────────────────────────────────────────────────
# SESSION-STATE MANAGEMENT
# ────────────────────────────────────────────────────────────────────────────
DEFAULT_STATE: Dict[str, Any] = dict(
    uploader_key=0,         # bumped to clear the file uploader widget
    bench_version=0,        # bumped to rebuild the test-bench inputs
)


def configure_logging() -> None:
    logging.basicConfig(
        level=str(CONFIG["log_level"]).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def init_state() -> None:
    """Ensure every expected key exists in `st.session_state`."""
    for k, v in DEFAULT_STATE.items():
        st.session_state.setdefault(k, copy.deepcopy(v))
    if "workflow" not in st.session_state:
        st.session_state.workflow = Workflow(get_assistant())


def get_workflow() -> Workflow:
    init_state()
    return st.session_state.workflow


def reset_workflow() -> None:
    get_workflow().reset()
    st.session_state.uploader_key += 1
    st.session_state.bench_version += 1
    st.session_state.pop("goal_input", None)
    st.switch_page(STAGE_PAGES[WorkflowStage.UPLOADING_FILE])


def go_to_stage() -> None:
    """Switch to the page that renders the current workflow stage."""
    st.switch_page(STAGE_PAGES[get_workflow().stage])


def run(coro: Awaitable[Any]) -> Any:
    """Run a workflow request from synchronous page code."""
    return asyncio.run(coro)


def show_last_error() -> None:
    error = get_workflow().state.last_error
    if error:
        st.error(error, icon="⚠️")


# ────────────────────────────────────────────────────────────────────────────
# UI UTILITIES
# ────────────────────────────────────────────────────────────────────────────
def add_green_button_css() -> None:
    """Global CSS so *enabled* primary buttons are green; disabled are grey."""
    st.markdown(
        """
        <style>
        div.stButton > button[kind="primary"]:enabled {
            background-color:#28a745 !important; color:white !important;
            border: none !important;
        }
        div.stButton > button:disabled {
            background-color:#d0d0d0 !important; color:#808080 !important;
            cursor:not-allowed !important;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def preview_csv(content: str, rows: int = 5) -> None:
    try:
        df = pd.read_csv(io.StringIO(content))
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        st.info(f"🛈 No preview available: {exc}")
        return
    st.dataframe(df.head(rows), use_container_width=True, hide_index=True)
    st.caption(f"{len(df):,} rows × {len(df.columns)} columns")


def metrics_frame(metrics: Dict[str, Any]) -> pd.DataFrame:
    """Metric name / value table; numbers shown with four decimals."""
    return pd.DataFrame(
        [
            {
                "Metric": name,
                "Value": f"{value:.4f}" if isinstance(value, (int, float)) else str(value),
            }
            for name, value in metrics.items()
        ]
    )


def confusion_frame(matrix: List[List[int]]) -> pd.DataFrame:
    labels = ["Pos", "Neg"]
    return pd.DataFrame(
        matrix,
        index=[f"Actual {l}" for l in labels[: len(matrix)]],
        columns=[f"Predicted {l}" for l in labels[: len(matrix[0]) if matrix else 0]],
    )


def image_bytes(data_url: str) -> bytes:
    """Raw bytes of a ``data:<mime>;base64,...`` URL."""
    return base64.b64decode(data_url.split(",", 1)[-1])


def extract_code(markdown: str) -> Optional[str]:
    """First python (or bare) code block of the explanation, for the download button."""
    m = CODE_BLOCK_RE.search(markdown)
    return m.group(1).rstrip("\n") if m else None
