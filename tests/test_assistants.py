import asyncio
from types import SimpleNamespace

import openai
import pytest

from assistants import Assistant
from errors import ServiceError
from schemas import model_suggestions_schema


class FakeResponses:
    def __init__(self, output_text=None, error=None):
        self.output_text = output_text
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return SimpleNamespace(output_text=self.output_text)


class FakeClient:
    def __init__(self, responses):
        self.responses = responses
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        self.closed = True


def test_generate_passes_schema_as_text_format():
    responses = FakeResponses(output_text='{"ok": true}')
    client = FakeClient(responses)
    assistant = Assistant(lambda: client, model="gpt-4o-mini", temperature=0.3)

    text = asyncio.run(assistant.generate("suggest", model_suggestions_schema))

    assert text == '{"ok": true}'
    assert responses.kwargs["model"] == "gpt-4o-mini"
    assert responses.kwargs["temperature"] == 0.3
    assert responses.kwargs["text"] is model_suggestions_schema
    assert responses.kwargs["input"] == [{"role": "user", "content": "suggest"}]
    assert client.closed


def test_generate_without_schema_sends_no_format():
    responses = FakeResponses(output_text="amount")
    assistant = Assistant(lambda: FakeClient(responses))
    assert asyncio.run(assistant.generate("target?")) == "amount"
    assert "text" not in responses.kwargs


def test_generate_wraps_openai_errors():
    responses = FakeResponses(error=openai.OpenAIError("no api key"))
    assistant = Assistant(lambda: FakeClient(responses))
    with pytest.raises(ServiceError):
        asyncio.run(assistant.generate("hello"))
