from __future__ import annotations
from typing import Optional

from .base import HTTPProvider


class GeminiProvider(HTTPProvider):
    """Google Gemini ``generateContent`` endpoint (single request, no streaming)."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash-latest",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout_s: float = 30.0,
    ):
        super().__init__(base_url, timeout_s)
        self.api_key = api_key.strip()
        self.model = model

        if not self.api_key:
            raise RuntimeError("GEMINI_API_KEY is missing")

    def generate(self, *, system: str, user: str, model: Optional[str] = None) -> str:
        data = self.post_json(
            f"/models/{model or self.model}:generateContent",
            {
                "systemInstruction": {"parts": [{"text": system}]},
                "contents": [{"role": "user", "parts": [{"text": user}]}],
                "generationConfig": {
                    "temperature": 0.2,
                    "responseMimeType": "application/json",
                },
            },
            headers={"x-goog-api-key": self.api_key},
        )

        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(p.get("text", "") for p in parts if isinstance(p, dict))
