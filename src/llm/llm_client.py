from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from llm.providers.base import LLMProvider
from llm.providers.factory import build_provider
from task_planner.config import LLMConfig

logger = logging.getLogger(__name__)

_FENCED_JSON_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)


class LLMError(RuntimeError):
    """Base error for anything that goes wrong talking to the language model."""


class LLMResponseError(LLMError):
    """The model answered, but not with a usable JSON object."""


def extract_json_object(text: str) -> dict[str, Any]:
    """Pull the first JSON object out of a model answer.

    Models like to wrap JSON in markdown fences or chatty prose, so try the
    fenced block first, then the outermost ``{...}`` span.
    """
    if not text or not text.strip():
        raise LLMResponseError("empty response from language model")

    fenced = _FENCED_JSON_RE.search(text)
    if fenced:
        candidate = fenced.group(1)
    else:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise LLMResponseError("no JSON object found in response")
        candidate = text[start : end + 1]

    try:
        data = json.loads(candidate.strip())
    except json.JSONDecodeError as e:
        raise LLMResponseError(f"invalid JSON in response: {e.msg}") from e

    if not isinstance(data, dict):
        raise LLMResponseError("expected a JSON object at the top level")
    return data


class LLMClient:
    """Thin wrapper turning a provider's raw text into validated-JSON dicts."""

    def __init__(self, provider: Optional[LLMProvider] = None, config: Optional[LLMConfig] = None):
        if provider is None:
            provider = build_provider(config or LLMConfig.from_env())
        self.provider = provider

    def complete(self, prompt: str, system: str = "You are a helpful assistant. Reply with JSON only.") -> str:
        return self.provider.generate(system=system, user=prompt)

    def complete_json(self, prompt: str, system: str = "You are a helpful assistant. Reply with JSON only.") -> dict[str, Any]:
        raw = self.complete(prompt, system=system)
        logger.debug(f"{self.provider.name} returned {len(raw)} characters")
        return extract_json_object(raw)
