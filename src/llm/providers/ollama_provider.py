from __future__ import annotations
from typing import Optional

from .base import HTTPProvider


class OllamaProvider(HTTPProvider):
    """Local Ollama server; needs no credential."""

    name = "ollama"

    def __init__(
        self,
        model: str = "llama3.1",
        base_url: str = "http://localhost:11434",
        timeout_s: float = 60.0,
    ):
        super().__init__(base_url, timeout_s)
        self.model = model

    def generate(self, *, system: str, user: str, model: Optional[str] = None) -> str:
        data = self.post_json(
            "/api/chat",
            {
                "model": model or self.model,
                "stream": False,
                "format": "json",
                "messages": [
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                "options": {"temperature": 0.2},
            },
        )
        return data["message"]["content"]
