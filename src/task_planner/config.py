from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30.0

# Providers that cannot be used without an API key.
KEYED_PROVIDERS = {"gemini", "openai"}
KNOWN_PROVIDERS = KEYED_PROVIDERS | {"ollama", "mock", "none"}


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


def _env_timeout(name: str = "PLANNER_LLM_TIMEOUT_S") -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return DEFAULT_TIMEOUT_S
    try:
        value = float(raw)
    except ValueError:
        value = 0.0
    if not math.isfinite(value) or value <= 0:
        logger.warning(f"Ignoring invalid {name}={raw!r}; using {DEFAULT_TIMEOUT_S}s")
        return DEFAULT_TIMEOUT_S
    return value


@dataclass(frozen=True)
class LLMConfig:
    """Settings for the external text-understanding service.

    Read once (usually via ``from_env``) and handed to the parser factory, so
    no module keeps the credential in a global slot.
    """

    provider: str = "gemini"
    api_key: str = field(default="", repr=False)
    model: str = ""
    base_url: str = ""
    timeout_s: float = DEFAULT_TIMEOUT_S

    @property
    def enabled(self) -> bool:
        if self.provider not in KNOWN_PROVIDERS or self.provider == "none":
            return False
        if self.provider in KEYED_PROVIDERS:
            return bool(self.api_key)
        return True

    @classmethod
    def from_env(cls) -> "LLMConfig":
        provider = os.getenv("PLANNER_LLM_PROVIDER", "gemini").strip().lower()
        timeout_s = _env_timeout()

        if provider == "gemini":
            return cls(
                provider=provider,
                api_key=os.getenv("GEMINI_API_KEY", "").strip(),
                model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash-latest").strip(),
                base_url=os.getenv(
                    "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
                ).strip(),
                timeout_s=timeout_s,
            )
        if provider == "openai":
            return cls(
                provider=provider,
                api_key=os.getenv("OPENAI_API_KEY", "").strip(),
                model=os.getenv("OPENAI_MODEL", "gpt-4o-mini").strip(),
                base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").strip(),
                timeout_s=timeout_s,
            )
        if provider == "ollama":
            return cls(
                provider=provider,
                model=os.getenv("OLLAMA_MODEL", "llama3.1").strip(),
                base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434").strip(),
                timeout_s=timeout_s,
            )
        return cls(provider=provider, timeout_s=timeout_s)


@dataclass(frozen=True)
class PlannerConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    classify_categories: bool = False

    @classmethod
    def from_env(cls) -> "PlannerConfig":
        return cls(
            llm=LLMConfig.from_env(),
            classify_categories=_env_flag("PLANNER_CLASSIFY_CATEGORIES"),
        )
