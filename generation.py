"""
generation.py  ·  The logical requests made to the generative service
=====================================================================

Each function builds its prompt, optionally declares a strict output schema,
awaits the assistant and validates what comes back.  Schema-constrained
requests raise `MalformedResponse` when the text does not parse; the caller
decides whether that reverts the workflow or is only reported.

`assistant` is anything exposing ``async generate(prompt, schema=None) -> str``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Union

from pydantic import ValidationError

from errors import MalformedResponse
from instructions import (
    metrics_prompt,
    model_suggestions_prompt,
    prediction_prompt,
    sample_row_prompt,
    target_column_prompt,
    workflow_prompt,
)
from schemas import (
    DatasetKind,
    Metrics,
    ModelSuggestions,
    SampleRow,
    feature_field_types,
    metrics_schema,
    model_suggestions_schema,
    sample_row_schema,
)
from tasks import TaskCategory

logger = logging.getLogger(__name__)

QUOTE_CHARS = "\"'`“”‘’"


class Generator(Protocol):
    async def generate(self, prompt: str, schema: Optional[Dict[str, Any]] = None) -> str: ...


def strip_fences(text: str) -> str:
    """Drop a surrounding ```json fence if the model added one anyway."""
    txt = text.strip()
    if txt.startswith("```"):
        txt = txt.lstrip("`\n jsonJSON").rstrip("`").strip()
    return txt


def _parse(text: str, what: str, parse):
    try:
        return parse(strip_fences(text))
    except ValidationError as exc:
        logger.error("Failed to parse %s JSON: %s (%s)", what, text, exc.errors()[:3])
        raise MalformedResponse(f"Received invalid format for {what}.", raw_text=text) from exc


# ──────────────────────────── requests ────────────────────────────────────
async def suggest_models(assistant: Generator, goal: str, kind: DatasetKind) -> ModelSuggestions:
    text = await assistant.generate(
        model_suggestions_prompt(goal, kind.value), model_suggestions_schema
    )
    return _parse(text, "model suggestions", ModelSuggestions.model_validate_json)


def clean_column_name(raw: str) -> str:
    return raw.strip().strip(QUOTE_CHARS).strip()


async def identify_target_column(assistant: Generator, goal: str, column_names: List[str]) -> str:
    """Ask which column is the target; never returns a name outside *column_names*."""
    if not column_names:
        return ""

    text = await assistant.generate(target_column_prompt(goal, column_names))
    candidate = clean_column_name(text)
    if candidate in column_names:
        return candidate

    logger.warning(
        "Model suggested a target column %r not in headers. Falling back to the last column.",
        candidate,
    )
    return column_names[-1]


async def explain_workflow(
    assistant: Generator,
    goal: str,
    model: str,
    kind: DatasetKind,
    column_names: Optional[List[str]] = None,
    raw_content: Optional[str] = None,
) -> str:
    prompt = workflow_prompt(goal, model, kind.value, column_names, raw_content)
    return await assistant.generate(prompt)


async def generate_metrics(
    assistant: Generator, model: str, goal: str, category: TaskCategory
) -> Metrics:
    classification = category == TaskCategory.CLASSIFICATION
    text = await assistant.generate(
        metrics_prompt(model, goal, classification), metrics_schema(category)
    )
    return _parse(text, "metrics", Metrics.model_validate_json)


async def generate_sample_row(
    assistant: Generator, column_names: List[str], raw_content: str, target_column: str
) -> Dict[str, Union[int, float, str]]:
    field_types = feature_field_types(column_names, target_column)
    text = await assistant.generate(
        sample_row_prompt(list(field_types), raw_content, target_column),
        sample_row_schema(field_types),
    )
    return _parse(text, "sample input", SampleRow.validate_json)


async def generate_prediction(
    assistant: Generator,
    goal: str,
    model: str,
    sample_input: str,
    column_names: Optional[List[str]] = None,
) -> str:
    text = await assistant.generate(prediction_prompt(goal, model, sample_input, column_names))
    return text.strip()
