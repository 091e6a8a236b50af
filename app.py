import streamlit as st

# 👇 MUST be the first Streamlit statement
st.set_page_config(
    page_title="AI Data Scientist Assistant",
    page_icon="🧪",
    layout="wide",
)

from utils import configure_logging, init_state, add_green_button_css, get_workflow, reset_workflow
from workflow import WorkflowStage

configure_logging()
init_state(); add_green_button_css()

ORDER = [
    WorkflowStage.UPLOADING_FILE,
    WorkflowStage.COLLECTING_GOAL,
    WorkflowStage.SELECTING_MODEL,
    WorkflowStage.SHOWING_RESULTS,
]

workflow = get_workflow()
# PROCESSING_GOAL is rendered by the goal page
current = ORDER.index(WorkflowStage.COLLECTING_GOAL if workflow.stage == WorkflowStage.PROCESSING_GOAL else workflow.stage)


def _page(path: str, title: str, step: int) -> st.Page:
    return st.Page(path, title=title, icon="✔️") if step < current else st.Page(path, title=title)


upload = _page("pages/01_Upload.py", "Upload", 0)
goal = _page("pages/02_Goal.py", "Goal", 1)
model_selection = _page("pages/03_Model_selection.py", "Model selection", 2)
results = _page("pages/04_Results.py", "Results", 3)

selected_page = st.navigation({"Workflow": [upload, goal, model_selection, results]}, position="sidebar")

with st.sidebar:
    st.header(":gear: Actions")
    if workflow.stage != WorkflowStage.UPLOADING_FILE:
        if st.button("🔄 Start over", key="start_over"):
            reset_workflow()

st.title("🧪 AI Data Scientist Assistant")
selected_page.run()

st.caption("Powered by OpenAI. For educational and demonstration purposes only.")
