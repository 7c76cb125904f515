"""Abstract base class for LLM providers and shared response parsing."""

import json
import re
from abc import ABC, abstractmethod
from typing import Any

SYSTEM_PROMPT = (
    "You are an expert interview coach and data analyst. Analyze preparation "
    "factors and predict interview success probability with specific, "
    "actionable recommendations. Always return valid JSON."
)

_FENCE_START = re.compile(r"^```(?:json)?\s*\n?")
_FENCE_END = re.compile(r"\n?```\s*$")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def parse_json_object(raw_text: str) -> dict[str, Any]:
    """Parse an LLM response text into a JSON object.

    Handles markdown-wrapped JSON (```json ... ```), plain JSON, and a single
    object surrounded by prose.

    Raises:
        ValueError: If no JSON object can be decoded.
    """
    cleaned = _FENCE_START.sub("", raw_text.strip())
    cleaned = _FENCE_END.sub("", cleaned)

    match = _JSON_OBJECT.search(cleaned)
    candidate = match.group(0) if match else cleaned

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        msg = f"Failed to parse LLM response as JSON: {e}"
        raise ValueError(msg) from e

    if not isinstance(data, dict):
        msg = f"Expected a JSON object from LLM, got {type(data).__name__}"
        raise ValueError(msg)
    return data


class LLMProvider(ABC):
    """Base class that every LLM provider must implement."""

    def __init__(self, timeout: float | None = None, max_tokens: int = 2048) -> None:
        self.timeout = timeout
        self.max_tokens = max_tokens

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique identifier for this provider (e.g. 'gemini')."""

    @abstractmethod
    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
    ) -> str:
        """Send a prompt to the LLM and return raw response text.

        Args:
            prompt: User prompt text.
            model: Override the provider's default model. None uses default.
            system: Override the system prompt. None falls back to SYSTEM_PROMPT.

        Returns:
            Raw text response from the LLM (expected to be JSON).
        """

    @property
    @abstractmethod
    def default_model(self) -> str:
        """The default model ID used when no override is specified."""

    @property
    @abstractmethod
    def env_var(self) -> str | None:
        """Environment variable name for the API key, or None if not needed."""
