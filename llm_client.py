"""OpenAI chat-completions provider for record discovery."""

from __future__ import annotations

import logging
import os
from typing import Any

from openai import OpenAI

from errors import ModelUnavailableError

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_OPENAI_TEMPERATURE = "0.1"

LOGGER = logging.getLogger(__name__)


def openai_generate(prompt: str, timeout: float | None = None) -> str:
    """Send one user prompt to OpenAI and return the reply text."""
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise ModelUnavailableError("OPENAI_API_KEY environment variable is not set")

    client_kwargs: dict[str, Any] = {"api_key": api_key}
    if timeout is not None:
        client_kwargs["timeout"] = timeout
    model = os.getenv("OPENAI_MODEL", DEFAULT_OPENAI_MODEL)
    temperature = float(os.getenv("OPENAI_TEMPERATURE", DEFAULT_OPENAI_TEMPERATURE))
    client = OpenAI(**client_kwargs)
    LOGGER.debug("Calling OpenAI model=%s", model)
    response = client.chat.completions.create(
        model=model,
        temperature=temperature,
        messages=[{"role": "user", "content": prompt}],
    )

    content = response.choices[0].message.content
    if not content:
        raise ModelUnavailableError("OpenAI returned an empty response")
    return content
