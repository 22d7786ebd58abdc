from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    name: str = "base"

    @abstractmethod
    def generate(self, *, system: str, user: str, model: Optional[str] = None) -> str:
        """
        Must return the model output as TEXT (JSON is extracted and validated by the caller).
        Transport failures surface as httpx.HTTPError.
        """
        raise NotImplementedError


class HTTPProvider(LLMProvider):
    """Provider reached with one blocking JSON POST per call; no retries."""

    def __init__(self, base_url: str, timeout_s: float):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s

    def post_json(
        self, path: str, payload: Dict[str, Any], headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.debug(f"{self.name}: POST {url} (timeout {self.timeout_s}s)")
        with httpx.Client(timeout=self.timeout_s) as client:
            r = client.post(url, headers=headers, json=payload)
            r.raise_for_status()
            return r.json()
