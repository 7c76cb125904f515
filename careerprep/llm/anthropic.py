"""Anthropic Claude LLM provider."""

import logging
import os
from typing import Any

from careerprep.llm.base import SYSTEM_PROMPT, LLMProvider

logger = logging.getLogger(__name__)


class AnthropicProvider(LLMProvider):
    """LLM provider using the Anthropic Claude API."""

    @property
    def provider_id(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return "claude-sonnet-4-20250514"

    @property
    def env_var(self) -> str:
        return "ANTHROPIC_API_KEY"

    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
    ) -> str:
        api_key = os.environ.get("ANTHROPIC_API_KEY")
        if not api_key:
            msg = "ANTHROPIC_API_KEY environment variable is required"
            raise ValueError(msg)

        try:
            import anthropic
        except ImportError:
            msg = (
                "anthropic is required for this provider. "
                "Install with: pip install 'careerprep[anthropic]'"
            )
            raise ImportError(msg) from None

        client_kwargs: dict[str, Any] = {"api_key": api_key}
        if self.timeout is not None:
            client_kwargs["timeout"] = self.timeout
        client = anthropic.Anthropic(**client_kwargs)
        use_model = model or self.default_model
        use_system = system if system is not None else SYSTEM_PROMPT

        logger.info("Sending prompt to Anthropic API (%s)...", use_model)
        message = client.messages.create(
            model=use_model,
            max_tokens=self.max_tokens,
            system=use_system,
            messages=[{"role": "user", "content": prompt}],
        )

        return message.content[0].text  # type: ignore[union-attr]
