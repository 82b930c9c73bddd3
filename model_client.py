"""Provider-agnostic generation client with a synthetic fallback."""

from __future__ import annotations

import logging
import os
import random
from collections.abc import Callable

from errors import ModelUnavailableError
from qwen_client import qwen_generate
from synthetic import synthesize

LOGGER = logging.getLogger(__name__)

SUPPORTED_PROVIDERS: frozenset[str] = frozenset({"qwen", "openai", "anthropic"})


def fetch_or_synthetic(
    prompt: str,
    fetch: Callable[[str], str],
    synthesize_fn: Callable[[str], str],
) -> str:
    """Return ``fetch(prompt)``, or the synthetic response if fetching fails for any reason."""
    try:
        return fetch(prompt)
    except ModelUnavailableError as exc:
        LOGGER.warning("Model unavailable, using synthetic data: %s", exc)
    except Exception as exc:  # broad so transport/SDK errors never reach the pipeline
        LOGGER.error("Model call failed, using synthetic data: %s", exc)
    return synthesize_fn(prompt)


class ModelClient:
    """Sends prompts to the configured provider; never raises to its caller."""

    def __init__(
        self,
        provider: str | None = None,
        rng: random.Random | None = None,
        timeout: float | None = None,
    ) -> None:
        provider = (provider or os.getenv("MODEL_PROVIDER", "qwen")).strip().lower()
        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(
                f"Unsupported MODEL_PROVIDER={provider!r}; expected one of {sorted(SUPPORTED_PROVIDERS)}"
            )
        self.provider = provider
        self.rng = rng
        if timeout is None and os.getenv("MODEL_TIMEOUT_SECONDS"):
            timeout = float(os.environ["MODEL_TIMEOUT_SECONDS"])
        self.timeout = timeout

    def generate(self, prompt: str) -> str:
        """Return raw model text, expected to hold a JSON array."""
        return fetch_or_synthetic(prompt, self._fetch, self._synthesize)

    def _synthesize(self, prompt: str) -> str:
        return synthesize(prompt, rng=self.rng)

    def _fetch(self, prompt: str) -> str:
        if self.provider == "openai":
            from llm_client import openai_generate  # noqa: PLC0415

            return openai_generate(prompt, timeout=self.timeout)
        if self.provider == "anthropic":
            from anthropic_client import claude_generate  # noqa: PLC0415

            return claude_generate(prompt, timeout=self.timeout)
        return qwen_generate(prompt, timeout=self.timeout)
