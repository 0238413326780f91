"""
LLM client configuration using DSPy.

Supports local Ollama (primary), OpenAI, and Gemini.
"""

from __future__ import annotations

from functools import lru_cache

import dspy

from farmmind.config import get_settings


@lru_cache
def get_lm(provider: str | None = None, model: str | None = None) -> dspy.LM:
    """
    Get configured language model.

    Args:
        provider: 'ollama', 'openai', or 'gemini'. Defaults to settings.llm_provider.
        model: Model name. Defaults to the provider-specific setting.

    Returns:
        Configured DSPy LM instance.
    """
    settings = get_settings()
    provider = provider or settings.llm_provider

    if provider == "ollama":
        model = model or settings.ollama_text_model
        # Chat endpoint via litellm's ollama_chat/ prefix
        return dspy.LM(
            model=f"ollama_chat/{model}",
            api_base=settings.ollama_api_base,
            api_key="",
        )

    elif provider == "openai":
        model = model or settings.openai_model
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY not set")

        kwargs = {"api_key": settings.openai_api_key}
        if settings.openai_api_base:
            kwargs["api_base"] = settings.openai_api_base
        return dspy.LM(model=f"openai/{model}", **kwargs)

    elif provider == "gemini":
        model = model or settings.gemini_model
        if not settings.google_api_key:
            raise ValueError("GOOGLE_API_KEY not set")

        return dspy.LM(
            model=f"gemini/{model}",
            api_key=settings.google_api_key,
        )

    else:
        raise ValueError(f"Unknown provider: {provider}")


def configure_lm(provider: str | None = None, model: str | None = None) -> None:
    """Configure DSPy with the specified LM as default."""
    lm = get_lm(provider, model)
    dspy.configure(lm=lm)
