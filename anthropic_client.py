"""Thin wrapper around the Anthropic Messages API."""

from __future__ import annotations

import logging
import os
from typing import Any

import anthropic

from errors import ModelUnavailableError

LOGGER = logging.getLogger(__name__)


def claude_generate(prompt: str, max_tokens: int = 4096, timeout: float | None = None) -> str:
    """Call the Claude API with a single user prompt and return the reply text."""
    api_key = os.getenv("ANTHROPIC_API_KEY")
    if not api_key:
        raise ModelUnavailableError("ANTHROPIC_API_KEY environment variable is not set")

    claude_model = os.getenv("CLAUDE_MODEL", "claude-sonnet-4-5")
    client_kwargs: dict[str, Any] = {"api_key": api_key}
    if timeout is not None:
        client_kwargs["timeout"] = timeout
    client = anthropic.Anthropic(**client_kwargs)

    LOGGER.debug("Calling Claude model=%s max_tokens=%s", claude_model, max_tokens)
    response = client.messages.create(
        model=claude_model,
        max_tokens=max_tokens,
        messages=[{"role": "user", "content": prompt}],
    )
    if not response.content:
        raise ModelUnavailableError("Claude returned an empty response")
    return response.content[0].text
