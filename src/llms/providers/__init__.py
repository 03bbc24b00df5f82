from __future__ import annotations

"""
Providers (OpenAI / Cerebras)
"""

from src.app.errors import ConfigError
from src.app.settings import Settings
from src.llms.providers import cerebras_client, openai_client


def build_llm(settings: Settings):
    """Instantiate the chat client selected by LLM_PROVIDER."""
    api_key = settings.provider_api_key()
    if settings.llm_provider == "openai":
        return openai_client.OpenAILLM(api_key=api_key, timeout_s=settings.llm_timeout_s)
    if settings.llm_provider == "cerebras":
        return cerebras_client.CerebrasLLM(api_key=api_key, timeout_s=settings.llm_timeout_s)
    raise ConfigError(f"Unknown LLM provider: {settings.llm_provider}")


__all__ = [
    "build_llm",
    "cerebras_client",
    "openai_client",
]
