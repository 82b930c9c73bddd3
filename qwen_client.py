"""Client for the native Qwen (DashScope) text-generation endpoint."""

from __future__ import annotations

import logging
import os
from typing import Any

import requests

from errors import ModelUnavailableError

DEFAULT_QWEN_API_URL = "https://dashscope.aliyuncs.com/api/v1/services/aigc/text-generation/generation"
DEFAULT_QWEN_MODEL = "qwen-turbo"

LOGGER = logging.getLogger(__name__)


def qwen_generate(prompt: str, timeout: float | None = None) -> str:
    """Send one user prompt to Qwen and return the reply text.

    Raises ModelUnavailableError when QWEN_API_KEY is unset (no request is made)
    and lets requests errors propagate so the caller can fall back.
    """
    api_key = os.getenv("QWEN_API_KEY")
    if not api_key:
        raise ModelUnavailableError("QWEN_API_KEY environment variable is not set")
    api_url = os.getenv("QWEN_API_URL", DEFAULT_QWEN_API_URL)
    model = os.getenv("QWEN_MODEL", DEFAULT_QWEN_MODEL)

    payload = {
        "model": model,
        "input": {"messages": [{"role": "user", "content": prompt}]},
        "parameters": {"result_format": "message"},
    }
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    LOGGER.debug("Calling Qwen model=%s", model)
    response = requests.post(api_url, headers=headers, json=payload, timeout=timeout)
    response.raise_for_status()
    return _extract_content(response.json())


def _extract_content(body: Any) -> str:
    try:
        content = body["output"]["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ModelUnavailableError(f"Unexpected Qwen response shape: {body}") from exc

    if not isinstance(content, str):
        raise ModelUnavailableError("Qwen returned a non-text message content")
    return content
