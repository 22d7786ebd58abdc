from __future__ import annotations
from typing import Optional

from .base import HTTPProvider


class OpenAIProvider(HTTPProvider):
    """OpenAI-compatible ``/chat/completions`` endpoint in JSON mode."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        timeout_s: float = 30.0,
    ):
        super().__init__(base_url, timeout_s)
        self.api_key = api_key.strip()
        self.model = model

        if not self.api_key:
            raise RuntimeError("OPENAI_API_KEY is missing")

    def generate(self, *, system: str, user: str, model: Optional[str] = None) -> str:
        data = self.post_json(
            "/chat/completions",
            {
                "model": model or self.model,
                "messages": [
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                "temperature": 0.2,
                "response_format": {"type": "json_object"},
            },
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        return data["choices"][0]["message"]["content"]
