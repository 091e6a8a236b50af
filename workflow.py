"""
workflow.py  ·  Session data model and the five-stage workflow
=============================================================

UPLOADING_FILE → COLLECTING_GOAL → PROCESSING_GOAL → SELECTING_MODEL → SHOWING_RESULTS

`SessionState` is immutable.  Every event has a pure transition function
``(state, ...) -> state``; `Workflow` is the single mutator of one session and
drives the asynchronous requests, applying their results through the same
transition functions.

A reset bumps `Workflow.generation`.  Requests remember the generation they
were issued under and their results are dropped if it has moved on.
"""
from __future__ import annotations

import asyncio
import base64
import json
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Awaitable, Dict, List, Optional, Tuple, Union

from errors import GenerationError, IncompleteInput, InvalidFileType
from generation import (
    Generator,
    explain_workflow,
    generate_metrics,
    generate_prediction,
    generate_sample_row,
    identify_target_column,
    suggest_models,
)
from schemas import DatasetKind, ModelSuggestions
from tasks import TaskCategory, classify_task

logger = logging.getLogger(__name__)

GOAL_FAILED = "Failed to get model suggestions. Please try again."
EMPTY_GOAL = "Please describe what you want to achieve with your data."
EXPLANATION_FAILED = "Failed to generate workflow explanation."
METRICS_FAILED = "Failed to generate model metrics."
SAMPLE_FAILED = "Failed to generate sample input."
PREDICTION_FAILED = "Failed to generate prediction."


class WorkflowStage(str, Enum):
    UPLOADING_FILE = "UPLOADING_FILE"
    COLLECTING_GOAL = "COLLECTING_GOAL"
    PROCESSING_GOAL = "PROCESSING_GOAL"
    SELECTING_MODEL = "SELECTING_MODEL"
    SHOWING_RESULTS = "SHOWING_RESULTS"


# ────────────────────────────────────────────────────────────────────────────
# DATA MODEL
# ────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class DatasetDescriptor:
    name: str
    kind: DatasetKind
    raw_content: str                       # CSV text, or a data: URL for images
    column_names: Tuple[str, ...] = ()     # tabular only
    mime_type: str = ""

    @property
    def is_tabular(self) -> bool:
        return self.kind == DatasetKind.TABULAR

    def feature_names(self, target_column: str) -> List[str]:
        return [c for c in self.column_names if c != target_column]


@dataclass(frozen=True)
class Outcome:
    """Result slot of one request that may fail on its own."""
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SessionState:
    workflow_stage: WorkflowStage = WorkflowStage.UPLOADING_FILE
    dataset: Optional[DatasetDescriptor] = None
    goal_text: str = ""
    task_category: TaskCategory = TaskCategory.OTHER
    target_column: str = ""
    model_suggestions: Optional[ModelSuggestions] = None
    selected_model: str = ""
    explanation: Optional[Outcome] = None
    metrics: Optional[Outcome] = None
    test_bench_inputs: Dict[str, str] = field(default_factory=dict)
    prediction: str = ""
    last_error: Optional[str] = None


# ────────────────────────────────────────────────────────────────────────────
# UPLOAD HELPERS
# ────────────────────────────────────────────────────────────────────────────
def derive_column_names(content: str) -> Tuple[str, ...]:
    """Header fields of the first line; no quoted-comma handling."""
    if not content:
        return ()
    first_line = content.split("\n")[0]
    return tuple(h.strip().replace('"', "") for h in first_line.split(","))


def is_csv(name: str, mime_hint: str) -> bool:
    return mime_hint == "text/csv" or name.lower().endswith(".csv")


def is_image(mime_hint: str) -> bool:
    return mime_hint.startswith("image/")


def describe_upload(name: str, mime_hint: str, raw_bytes: bytes) -> DatasetDescriptor:
    mime_hint = mime_hint or ""
    if is_csv(name, mime_hint):
        content = raw_bytes.decode("utf-8-sig", errors="replace")
        return DatasetDescriptor(
            name=name,
            kind=DatasetKind.TABULAR,
            raw_content=content,
            column_names=derive_column_names(content),
            mime_type=mime_hint or "text/csv",
        )
    if is_image(mime_hint):
        b64 = base64.b64encode(raw_bytes).decode("utf-8")
        return DatasetDescriptor(
            name=name,
            kind=DatasetKind.IMAGE,
            raw_content=f"data:{mime_hint};base64,{b64}",
            mime_type=mime_hint,
        )
    raise InvalidFileType()


def format_field_value(value: Union[int, float, str]) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def check_test_inputs(inputs: Dict[str, str]) -> None:
    if any(v.strip() == "" for v in inputs.values()):
        raise IncompleteInput()


# ────────────────────────────────────────────────────────────────────────────
# TRANSITIONS
# ────────────────────────────────────────────────────────────────────────────
def _expect(state: SessionState, stage: WorkflowStage, event: str) -> bool:
    if state.workflow_stage != stage:
        logger.warning("Ignoring %s while in %s", event, state.workflow_stage.value)
        return False
    return True


def accept_file(state: SessionState, name: str, mime_hint: str, raw_bytes: bytes) -> SessionState:
    if not _expect(state, WorkflowStage.UPLOADING_FILE, "file upload"):
        return state
    try:
        dataset = describe_upload(name, mime_hint, raw_bytes)
    except InvalidFileType as exc:
        logger.info("Rejected upload %s (%s)", name, mime_hint)
        return replace(state, last_error=exc.message)

    logger.info("Accepted %s as %s with %d columns", name, dataset.kind.name, len(dataset.column_names))
    return replace(
        state,
        dataset=dataset,
        workflow_stage=WorkflowStage.COLLECTING_GOAL,
        last_error=None,
    )


def submit_goal(state: SessionState, goal: str) -> SessionState:
    if not _expect(state, WorkflowStage.COLLECTING_GOAL, "goal submission"):
        return state
    goal = goal.strip()
    if not goal:
        return replace(state, last_error=EMPTY_GOAL)
    return replace(
        state,
        goal_text=goal,
        workflow_stage=WorkflowStage.PROCESSING_GOAL,
        last_error=None,
    )


def goal_classified(state: SessionState, category: TaskCategory) -> SessionState:
    return replace(state, task_category=category)


def target_identified(state: SessionState, target_column: str) -> SessionState:
    return replace(state, target_column=target_column)


def suggestions_received(state: SessionState, suggestions: ModelSuggestions) -> SessionState:
    return replace(
        state,
        model_suggestions=suggestions,
        workflow_stage=WorkflowStage.SELECTING_MODEL,
        last_error=None,
    )


def goal_failed(state: SessionState, message: str = GOAL_FAILED) -> SessionState:
    """Back to goal entry; the goal text and any identified target column stay."""
    return replace(
        state,
        workflow_stage=WorkflowStage.COLLECTING_GOAL,
        task_category=TaskCategory.OTHER,
        model_suggestions=None,
        last_error=message,
    )


def select_model(state: SessionState, model: str) -> SessionState:
    if not _expect(state, WorkflowStage.SELECTING_MODEL, "model selection"):
        return state
    inputs: Dict[str, str] = {}
    if state.dataset is not None and state.dataset.is_tabular:
        inputs = {name: "" for name in state.dataset.feature_names(state.target_column)}
    return replace(
        state,
        selected_model=model,
        test_bench_inputs=inputs,
        explanation=None,
        metrics=None,
        prediction="",
        workflow_stage=WorkflowStage.SHOWING_RESULTS,
        last_error=None,
    )


def results_loaded(state: SessionState, explanation: Outcome, metrics: Outcome) -> SessionState:
    # when both fail the metrics message is the one shown
    return replace(
        state,
        explanation=explanation,
        metrics=metrics,
        last_error=metrics.error or explanation.error,
    )


def update_test_input(state: SessionState, column: str, value: str) -> SessionState:
    if not _expect(state, WorkflowStage.SHOWING_RESULTS, "test bench edit"):
        return state
    return replace(state, test_bench_inputs={**state.test_bench_inputs, column: value})


def sample_received(state: SessionState, sample: Dict[str, Union[int, float, str]]) -> SessionState:
    inputs = {
        name: format_field_value(sample[name]) if name in sample else current
        for name, current in state.test_bench_inputs.items()
    }
    return replace(state, test_bench_inputs=inputs, last_error=None)


def prediction_received(state: SessionState, prediction: str) -> SessionState:
    return replace(state, prediction=prediction, last_error=None)


def request_failed(state: SessionState, message: str) -> SessionState:
    return replace(state, last_error=message)


def reset(state: SessionState) -> SessionState:
    return SessionState()


# ────────────────────────────────────────────────────────────────────────────
# ORCHESTRATION
# ────────────────────────────────────────────────────────────────────────────
async def _settle(request: Awaitable[Any], message: str) -> Outcome:
    try:
        return Outcome(value=await request)
    except GenerationError as exc:
        logger.error("%s %s", message, exc.message)
        return Outcome(error=message)


class Workflow:
    """Owns one session: the current state, the assistant and the pass counter."""

    def __init__(self, assistant: Generator, state: Optional[SessionState] = None):
        self.assistant = assistant
        self.state = state if state is not None else SessionState()
        self.generation = 0

    @property
    def stage(self) -> WorkflowStage:
        return self.state.workflow_stage

    def _is_current(self, generation: int, what: str) -> bool:
        if generation != self.generation:
            logger.info("Discarding stale %s (pass %d, now %d)", what, generation, self.generation)
            return False
        return True

    # ---- synchronous events -----------------------------------------------
    def accept_file(self, name: str, mime_hint: str, raw_bytes: bytes) -> None:
        self.state = accept_file(self.state, name, mime_hint, raw_bytes)

    def submit_goal(self, goal: str) -> None:
        self.state = submit_goal(self.state, goal)

    def select_model(self, model: str) -> None:
        self.state = select_model(self.state, model)

    def update_test_input(self, column: str, value: str) -> None:
        self.state = update_test_input(self.state, column, value)

    def reset(self) -> None:
        self.generation += 1
        self.state = reset(self.state)

    # ---- requests ---------------------------------------------------------
    async def process_goal(self) -> None:
        """Classify the goal, find the target column, then fetch model suggestions."""
        state = self.state
        if not _expect(state, WorkflowStage.PROCESSING_GOAL, "goal processing"):
            return
        generation = self.generation
        dataset = state.dataset
        goal = state.goal_text

        self.state = goal_classified(state, classify_task(goal))
        try:
            if dataset.is_tabular and dataset.column_names:
                target = await identify_target_column(self.assistant, goal, list(dataset.column_names))
                if not self._is_current(generation, "target column"):
                    return
                self.state = target_identified(self.state, target)

            suggestions = await suggest_models(self.assistant, goal, dataset.kind)
        except GenerationError as exc:
            if not self._is_current(generation, "goal processing failure"):
                return
            logger.error("Goal processing failed: %s", exc.message)
            self.state = goal_failed(self.state)
            return

        if not self._is_current(generation, "model suggestions"):
            return
        self.state = suggestions_received(self.state, suggestions)

    async def load_results(self) -> None:
        """Fetch the explanation and the metrics side by side."""
        state = self.state
        if not _expect(state, WorkflowStage.SHOWING_RESULTS, "results loading"):
            return
        generation = self.generation
        dataset = state.dataset
        columns = list(dataset.column_names) if dataset.is_tabular else None

        explanation, metrics = await asyncio.gather(
            _settle(
                explain_workflow(
                    self.assistant,
                    state.goal_text,
                    state.selected_model,
                    dataset.kind,
                    columns,
                    dataset.raw_content,
                ),
                EXPLANATION_FAILED,
            ),
            _settle(
                generate_metrics(
                    self.assistant, state.selected_model, state.goal_text, state.task_category
                ),
                METRICS_FAILED,
            ),
        )
        if not self._is_current(generation, "results"):
            return
        self.state = results_loaded(self.state, explanation, metrics)

    async def generate_sample(self) -> None:
        state = self.state
        if not _expect(state, WorkflowStage.SHOWING_RESULTS, "sample generation"):
            return
        dataset = state.dataset
        if not (dataset.is_tabular and dataset.column_names):
            return
        generation = self.generation
        self.state = replace(state, prediction="")

        try:
            sample = await generate_sample_row(
                self.assistant, list(dataset.column_names), dataset.raw_content, state.target_column
            )
        except GenerationError as exc:
            if self._is_current(generation, "sample failure"):
                logger.error("Sample generation failed: %s", exc.message)
                self.state = request_failed(self.state, SAMPLE_FAILED)
            return

        if self._is_current(generation, "sample row"):
            self.state = sample_received(self.state, sample)

    async def test_model(self) -> None:
        """Ask for a fabricated prediction for the current test-bench values."""
        state = self.state
        if not _expect(state, WorkflowStage.SHOWING_RESULTS, "model test"):
            return
        try:
            check_test_inputs(state.test_bench_inputs)
        except IncompleteInput as exc:
            self.state = request_failed(state, exc.message)
            return

        generation = self.generation
        self.state = replace(state, prediction="", last_error=None)
        columns = list(state.dataset.column_names) or None

        try:
            prediction = await generate_prediction(
                self.assistant,
                state.goal_text,
                state.selected_model,
                json.dumps(state.test_bench_inputs),
                columns,
            )
        except GenerationError as exc:
            if self._is_current(generation, "prediction failure"):
                logger.error("Prediction failed: %s", exc.message)
                self.state = request_failed(self.state, PREDICTION_FAILED)
            return

        if self._is_current(generation, "prediction"):
            self.state = prediction_received(self.state, prediction)
