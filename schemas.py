from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, TypeAdapter, conlist

from tasks import TaskCategory


class DatasetKind(str, Enum):
    TABULAR = "csv"
    IMAGE = "image"


class ModelSuggestions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    recommended: str
    options: List[str]
    more_models: List[str]


MatrixRow = conlist(int, min_length=2, max_length=2)


class Metrics(BaseModel):
    metrics: Dict[str, Union[float, str]]
    confusion_matrix: Optional[conlist(MatrixRow, min_length=2, max_length=2)] = None


SampleRow = TypeAdapter(Dict[str, Union[int, float, str]])


def json_schema_format(name: str, schema: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap a JSON schema in the Responses API `text` parameter shape."""
    return {
        "format": {
            "type": "json_schema",
            "name": name,
            "schema": schema,
            "strict": True,
        }
    }


# ---- Model suggestions -----------------------------------------------------
model_suggestions_schema = json_schema_format(
    "model_suggestions", ModelSuggestions.model_json_schema()
)


# ---- Synthetic metrics -----------------------------------------------------
CLASSIFICATION_METRICS = ("Accuracy", "Precision", "Recall", "F1-Score")
REGRESSION_METRICS = ("R-squared", "Mean Squared Error", "Mean Absolute Error")


def _number_object(names: tuple[str, ...]) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {n: {"type": "number"} for n in names},
        "required": list(names),
        "additionalProperties": False,
    }


def metrics_schema(category: TaskCategory) -> Dict[str, Any]:
    """Classification gets a 2x2 confusion matrix, everything else does not."""
    if category == TaskCategory.CLASSIFICATION:
        properties = {
            "metrics": _number_object(CLASSIFICATION_METRICS),
            "confusion_matrix": {
                "type": "array",
                "items": {
                    "type": "array",
                    "items": {"type": "integer"},
                    "minItems": 2,
                    "maxItems": 2,
                },
                "minItems": 2,
                "maxItems": 2,
            },
        }
    else:
        properties = {"metrics": _number_object(REGRESSION_METRICS)}

    return json_schema_format(
        "metrics",
        {
            "type": "object",
            "properties": properties,
            "required": list(properties),
            "additionalProperties": False,
        },
    )


# ---- Synthetic sample row --------------------------------------------------
NUMERIC_HINT_RE = re.compile(
    r"(id|year|age|count|quantity|number|price|value|score|rate|amount)", re.IGNORECASE
)


class FieldType(str, Enum):
    STRING = "string"
    NUMBER = "number"


def is_numeric_hint(column: str) -> bool:
    return NUMERIC_HINT_RE.search(column) is not None


def feature_field_types(column_names: List[str], target_column: str) -> Dict[str, FieldType]:
    """Map every input feature (all columns except the target) to its schema type."""
    return {
        name: FieldType.NUMBER if is_numeric_hint(name) else FieldType.STRING
        for name in column_names
        if name != target_column
    }


def sample_row_schema(field_types: Dict[str, FieldType]) -> Dict[str, Any]:
    return json_schema_format(
        "sample_row",
        {
            "type": "object",
            "properties": {name: {"type": ft.value} for name, ft in field_types.items()},
            "required": list(field_types),
            "additionalProperties": False,
        },
    )
