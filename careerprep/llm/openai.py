"""OpenAI LLM provider."""

import logging
import os
from typing import Any

from careerprep.llm.base import SYSTEM_PROMPT, LLMProvider

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """LLM provider using the OpenAI API."""

    @property
    def provider_id(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return "gpt-4o-mini"

    @property
    def env_var(self) -> str:
        return "OPENAI_API_KEY"

    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
    ) -> str:
        api_key = os.environ.get("OPENAI_API_KEY")
        if not api_key:
            msg = "OPENAI_API_KEY environment variable is required"
            raise ValueError(msg)

        try:
            import openai
        except ImportError:
            msg = (
                "openai is required for this provider. "
                "Install with: pip install 'careerprep[openai]'"
            )
            raise ImportError(msg) from None

        client_kwargs: dict[str, Any] = {"api_key": api_key}
        if self.timeout is not None:
            client_kwargs["timeout"] = self.timeout
        client = openai.OpenAI(**client_kwargs)
        use_model = model or self.default_model
        use_system = system if system is not None else SYSTEM_PROMPT

        logger.info("Sending prompt to OpenAI API (%s)...", use_model)
        response = client.chat.completions.create(
            model=use_model,
            max_tokens=self.max_tokens,
            messages=[
                {"role": "system", "content": use_system},
                {"role": "user", "content": prompt},
            ],
        )

        return response.choices[0].message.content  # type: ignore[no-any-return]
