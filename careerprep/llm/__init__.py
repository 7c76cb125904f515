"""LLM provider registry with lazy loading.

Usage:
    from careerprep.llm import get_provider, parse_json_object

    provider = get_provider("gemini", timeout=30)
    raw = provider.complete(prompt)
    data = parse_json_object(raw)
"""

from __future__ import annotations

import importlib

from careerprep.llm.base import LLMProvider, parse_json_object

__all__ = ["LLMProvider", "available_providers", "get_provider", "parse_json_object"]

# Lazy registry: maps provider name → (module_path, class_name)
_REGISTRY: dict[str, tuple[str, str]] = {
    "anthropic": ("careerprep.llm.anthropic", "AnthropicProvider"),
    "openai": ("careerprep.llm.openai", "OpenAIProvider"),
    "gemini": ("careerprep.llm.gemini", "GeminiProvider"),
    "ollama": ("careerprep.llm.ollama", "OllamaProvider"),
}


def get_provider(name: str, **options: object) -> LLMProvider:
    """Instantiate and return an LLM provider by name.

    Args:
        name: Provider identifier (anthropic, openai, gemini, ollama).
        **options: Passed to the provider constructor (timeout, max_tokens).

    Returns:
        An LLMProvider instance.

    Raises:
        ValueError: If the provider name is unknown.
    """
    if name not in _REGISTRY:
        valid = ", ".join(sorted(_REGISTRY))
        msg = f"Unknown LLM provider '{name}'. Available: {valid}"
        raise ValueError(msg)

    module_path, class_name = _REGISTRY[name]
    module = importlib.import_module(module_path)
    cls = getattr(module, class_name)
    return cls(**options)  # type: ignore[no-any-return]


def available_providers() -> list[str]:
    """Return sorted list of registered provider names."""
    return sorted(_REGISTRY)
