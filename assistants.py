from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

import openai
import streamlit as st
from openai import AsyncOpenAI

from config import CONFIG
from errors import ServiceError
from instructions import assistant_instructions

logger = logging.getLogger(__name__)


class Assistant:
    """The one call this app makes to the model: prompt (+ schema) in, text out.

    Streamlit runs every interaction in a fresh event loop, so an HTTP client
    is opened per request instead of being kept on the instance.
    """

    def __init__(
        self,
        client_factory: Callable[[], AsyncOpenAI],
        model: str = "gpt-4o",
        temperature: float = 0,
        instructions: str = assistant_instructions,
    ):
        self.client_factory = client_factory
        self.model = model
        self.temperature = temperature
        self.instructions = instructions

    async def generate(self, prompt: str, schema: Optional[Dict[str, Any]] = None) -> str:
        kwargs: Dict[str, Any] = {}
        if schema is not None:
            kwargs["text"] = schema
        logger.debug("Request to %s: %s", self.model, prompt[:200])

        try:
            async with self.client_factory() as client:
                rsp = await client.responses.create(
                    model=self.model,
                    instructions=self.instructions,
                    input=[{"role": "user", "content": prompt}],
                    temperature=self.temperature,
                    store=False,
                    **kwargs,
                )
        except openai.OpenAIError as exc:
            logger.error("Request to %s failed: %s", self.model, exc)
            raise ServiceError(f"The generative service request failed: {exc}") from exc

        content = rsp.output_text or ""
        logger.debug("Response from %s: %s", self.model, content[:300])
        return content


def _client() -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key=CONFIG["openai_api_key"] or None,  # None lets the SDK read $OPENAI_API_KEY
        max_retries=CONFIG["llm_max_retries"],
        timeout=CONFIG["llm_timeout"],
    )


def create() -> Assistant:
    """One assistant per browser session, built from CONFIG."""
    if "assistant" not in st.session_state:
        st.session_state.assistant = Assistant(
            _client,
            model=CONFIG["llm_model"],
            temperature=CONFIG["llm_temperature"],
        )
    return st.session_state.assistant
