from __future__ import annotations

from llm.providers.base import LLMProvider
from llm.providers.gemini_provider import GeminiProvider
from llm.providers.mock_provider import MockProvider
from llm.providers.ollama_provider import OllamaProvider
from llm.providers.openai_provider import OpenAIProvider
from task_planner.config import LLMConfig


def build_provider(config: LLMConfig) -> LLMProvider:
    """Instantiate the provider named by ``config``.

    Raises RuntimeError when a keyed provider has no API key and ValueError
    for unknown provider names.
    """
    if config.provider == "gemini":
        return GeminiProvider(
            api_key=config.api_key,
            model=config.model or "gemini-1.5-flash-latest",
            base_url=config.base_url or "https://generativelanguage.googleapis.com/v1beta",
            timeout_s=config.timeout_s,
        )
    if config.provider == "openai":
        return OpenAIProvider(
            api_key=config.api_key,
            model=config.model or "gpt-4o-mini",
            base_url=config.base_url or "https://api.openai.com/v1",
            timeout_s=config.timeout_s,
        )
    if config.provider == "ollama":
        return OllamaProvider(
            model=config.model or "llama3.1",
            base_url=config.base_url or "http://localhost:11434",
            timeout_s=config.timeout_s,
        )
    if config.provider == "mock":
        return MockProvider()
    raise ValueError(f"Unknown LLM provider: {config.provider!r}")
