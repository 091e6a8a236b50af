"""
Test configuration and fixtures.
"""
import asyncio
import json

import pytest

from errors import MalformedResponse
from workflow import SessionState, Workflow, WorkflowStage


SALES_CSV = b"date,region,amount\n2024-01-01,North,1200\n2024-02-01,South,950\n2024-03-01,East,1010\n2024-04-01,West,870\n"

SUGGESTIONS = json.dumps(
    {
        "recommended": "XGBoost",
        "options": ["XGBoost", "Random Forest", "Linear Regression"],
        "more_models": ["Lasso", "K-Nearest Neighbors"],
    }
)

REGRESSION_METRICS = json.dumps(
    {"metrics": {"R-squared": 0.91, "Mean Squared Error": 1234.5, "Mean Absolute Error": 21.3}}
)


class FakeAssistant:
    """Scripted stand-in for the generative service.

    Replies are consumed in call order; an exception instance is raised
    instead of returned.
    """

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    async def generate(self, prompt, schema=None):
        self.calls.append((prompt, schema))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class GatedAssistant(FakeAssistant):
    """Holds every reply until `release` is set."""

    def __init__(self, *replies):
        super().__init__(*replies)
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.waiting = 0

    async def generate(self, prompt, schema=None):
        self.started.set()
        self.waiting += 1
        await self.release.wait()
        return await super().generate(prompt, schema)


@pytest.fixture
def fake_assistant():
    """Factory: fake_assistant(reply, ...) -> FakeAssistant."""
    return FakeAssistant


@pytest.fixture
def gated_assistant():
    return GatedAssistant


@pytest.fixture
def sales_csv():
    return SALES_CSV


@pytest.fixture
def suggestions_json():
    return SUGGESTIONS


@pytest.fixture
def malformed():
    return MalformedResponse("Received invalid format for model suggestions.")


@pytest.fixture
def sales_workflow(fake_assistant, sales_csv):
    """Factory for a workflow that already holds sales.csv and waits for a goal."""

    def _make(*replies):
        workflow = Workflow(fake_assistant(*replies))
        workflow.accept_file("sales.csv", "text/csv", sales_csv)
        assert workflow.stage == WorkflowStage.COLLECTING_GOAL
        return workflow

    return _make


@pytest.fixture
def results_workflow(sales_workflow):
    """Factory for a sales.csv workflow sitting in SHOWING_RESULTS with results loaded.

    Extra replies are queued after explanation and metrics.
    """

    def _make(*replies):
        workflow = sales_workflow(
            "amount", SUGGESTIONS, "## Workflow\n```python\nprint(1)\n```", REGRESSION_METRICS, *replies
        )
        workflow.submit_goal("Forecast monthly sales")
        asyncio.run(workflow.process_goal())
        workflow.select_model("XGBoost")
        asyncio.run(workflow.load_results())
        assert workflow.state.last_error is None
        return workflow

    return _make


@pytest.fixture
def fresh_state():
    return SessionState()
