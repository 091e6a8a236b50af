import asyncio
import json

import pytest

from errors import MalformedResponse
from generation import (
    explain_workflow,
    generate_metrics,
    generate_prediction,
    generate_sample_row,
    identify_target_column,
    strip_fences,
    suggest_models,
)
from schemas import DatasetKind
from tasks import TaskCategory

COLUMNS = ["date", "region", "amount"]


def test_suggest_models_parses_schema_response(fake_assistant, suggestions_json):
    assistant = fake_assistant(suggestions_json)
    result = asyncio.run(suggest_models(assistant, "Forecast monthly sales", DatasetKind.TABULAR))

    assert result.recommended == "XGBoost"
    assert result.more_models == ["Lasso", "K-Nearest Neighbors"]
    prompt, schema = assistant.calls[0]
    assert "'Forecast monthly sales' using csv data" in prompt
    assert schema["format"]["name"] == "model_suggestions"


def test_suggest_models_accepts_fenced_json(fake_assistant, suggestions_json):
    assistant = fake_assistant(f"```json\n{suggestions_json}\n```")
    result = asyncio.run(suggest_models(assistant, "Classify cats", DatasetKind.IMAGE))
    assert result.options[0] == "XGBoost"


@pytest.mark.parametrize("reply", ["not json at all", '{"recommended": "X"}', ""])
def test_suggest_models_malformed(fake_assistant, reply):
    with pytest.raises(MalformedResponse) as exc_info:
        asyncio.run(suggest_models(fake_assistant(reply), "goal", DatasetKind.TABULAR))
    assert exc_info.value.raw_text == reply


@pytest.mark.parametrize(
    "reply,expected",
    [
        ("amount", "amount"),
        ('"amount"', "amount"),
        ("  'region'\n", "region"),
        ("`date`", "date"),
        ("revenue", "amount"),
        ("The target is amount", "amount"),
        ("", "amount"),
    ],
)
def test_identify_target_column_always_returns_a_column(fake_assistant, reply, expected):
    result = asyncio.run(identify_target_column(fake_assistant(reply), "Forecast sales", COLUMNS))
    assert result == expected
    assert result in COLUMNS


def test_identify_target_column_without_columns_skips_request(fake_assistant):
    assistant = fake_assistant()
    assert asyncio.run(identify_target_column(assistant, "goal", [])) == ""
    assert assistant.calls == []


def test_identify_target_column_is_free_text(fake_assistant):
    assistant = fake_assistant("amount")
    asyncio.run(identify_target_column(assistant, "Forecast sales", COLUMNS))
    prompt, schema = assistant.calls[0]
    assert schema is None
    assert "[date, region, amount]" in prompt


def test_explain_workflow_tabular_prompt_embeds_sample(fake_assistant, sales_csv):
    content = sales_csv.decode() + "2024-05-01,North,1300\n"
    assistant = fake_assistant("## Steps")
    text = asyncio.run(
        explain_workflow(assistant, "Forecast sales", "XGBoost", DatasetKind.TABULAR, COLUMNS, content)
    )
    assert text == "## Steps"
    prompt, schema = assistant.calls[0]
    assert schema is None
    assert "**Columns:** date, region, amount" in prompt
    assert "2024-04-01,West,870" in prompt
    assert "2024-05-01" not in prompt  # header + four rows only
    assert "```python" in prompt


def test_explain_workflow_image_prompt(fake_assistant):
    assistant = fake_assistant("## Steps")
    asyncio.run(
        explain_workflow(assistant, "Classify cats", "ResNet", DatasetKind.IMAGE, None, "data:image/png;base64,AA==")
    )
    prompt, _ = assistant.calls[0]
    assert "an image file" in prompt
    assert "Model Implementation" in prompt


def test_explain_workflow_csv_without_content_uses_generic_prompt(fake_assistant):
    assistant = fake_assistant("## Steps")
    asyncio.run(explain_workflow(assistant, "g", "m", DatasetKind.TABULAR, COLUMNS, ""))
    prompt, _ = assistant.calls[0]
    assert "a CSV file with headers: date, region, amount" in prompt


def test_generate_metrics_classification(fake_assistant):
    reply = json.dumps(
        {
            "metrics": {"Accuracy": 0.93, "Precision": 0.91, "Recall": 0.9, "F1-Score": 0.905},
            "confusion_matrix": [[50, 4], [5, 41]],
        }
    )
    assistant = fake_assistant(reply)
    metrics = asyncio.run(generate_metrics(assistant, "XGBoost", "Classify churn", TaskCategory.CLASSIFICATION))

    assert metrics.metrics["Accuracy"] == pytest.approx(0.93)
    assert metrics.confusion_matrix == [[50, 4], [5, 41]]
    prompt, schema = assistant.calls[0]
    assert "confusion matrix" in prompt
    assert "confusion_matrix" in schema["format"]["schema"]["properties"]


def test_generate_metrics_regression_has_no_matrix(fake_assistant):
    reply = json.dumps({"metrics": {"R-squared": 0.88, "Mean Squared Error": 10.5, "Mean Absolute Error": 2.1}})
    metrics = asyncio.run(generate_metrics(fake_assistant(reply), "Ridge", "Forecast", TaskCategory.REGRESSION))
    assert metrics.confusion_matrix is None
    assert metrics.metrics["R-squared"] == pytest.approx(0.88)


def test_generate_metrics_malformed(fake_assistant):
    with pytest.raises(MalformedResponse):
        asyncio.run(generate_metrics(fake_assistant("{metrics:"), "m", "g", TaskCategory.OTHER))


def test_generate_sample_row_schema_and_prompt(fake_assistant, sales_csv):
    assistant = fake_assistant('{"date": "2024-06-01", "region": "North"}')
    row = asyncio.run(generate_sample_row(assistant, COLUMNS, sales_csv.decode(), "amount"))

    assert row == {"date": "2024-06-01", "region": "North"}
    prompt, schema = assistant.calls[0]
    body = schema["format"]["schema"]
    assert body["required"] == ["date", "region"]
    assert "amount" not in body["properties"]
    assert "Target Column (DO NOT GENERATE): amount" in prompt
    assert "2024-01-01,North,1200" in prompt
    assert "2024-04-01" not in prompt  # rows 2-4 of the content only


def test_generate_sample_row_numeric_values(fake_assistant):
    row = asyncio.run(
        generate_sample_row(fake_assistant('{"Price": 250000, "Category": "A"}'), ["Price", "Category", "y"], "Price,Category,y\n", "y")
    )
    assert row["Price"] == 250000
    assert row["Category"] == "A"


def test_generate_sample_row_malformed(fake_assistant):
    with pytest.raises(MalformedResponse):
        asyncio.run(generate_sample_row(fake_assistant("[1, 2]"), COLUMNS, "", "amount"))


def test_generate_prediction_trims(fake_assistant):
    assistant = fake_assistant("  Predicted Amount: $1,150 \n")
    result = asyncio.run(
        generate_prediction(assistant, "Forecast sales", "XGBoost", '{"date": "2024-06-01"}', COLUMNS)
    )
    assert result == "Predicted Amount: $1,150"
    prompt, schema = assistant.calls[0]
    assert schema is None
    assert "The data has these columns: date, region, amount." in prompt


def test_strip_fences():
    assert strip_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_fences('  {"a": 1}  ') == '{"a": 1}'


@pytest.mark.parametrize(
    "matrix",
    [
        [[1, 2, 3], [4, 5, 6], [7, 8, 9]],
        [[1], [2, 3]],
        [[1, 2]],
    ],
)
def test_generate_metrics_rejects_non_2x2_matrix(fake_assistant, matrix):
    reply = json.dumps(
        {
            "metrics": {"Accuracy": 0.9, "Precision": 0.9, "Recall": 0.9, "F1-Score": 0.9},
            "confusion_matrix": matrix,
        }
    )
    with pytest.raises(MalformedResponse):
        asyncio.run(generate_metrics(fake_assistant(reply), "m", "Classify churn", TaskCategory.CLASSIFICATION))
