from __future__ import annotations
import json
from typing import Optional

from llm.providers.base import LLMProvider

class MockProvider(LLMProvider):
    name = "mock"

    def generate(self, *, system: str, user: str, model: Optional[str] = None) -> str:
        """
        Returns a canned parse result shaped like the real service's answer.
        """
        if "Extract tasks" not in user:
            return "{}"

        return json.dumps({
            "extractedTasks": [
                {
                    "id": "mock-1",
                    "title": "Finish the quarterly report",
                    "duration": 90,
                    "priority": 4,
                    "deadline": None,
                    "category": "work",
                    "notes": "Complete the financial section for Sarah",
                    "inferences": {
                        "priority": {"value": 4, "confidence": "medium", "rationale": "Report is due soon"},
                        "duration": {"value": 90, "confidence": "low", "rationale": "Typical report section"},
                    },
                },
                {
                    "id": "mock-2",
                    "title": "Call mom",
                    "duration": 15,
                    "priority": 3,
                    "deadline": None,
                    "category": "personal",
                    "notes": "Ask about Sunday dinner",
                    "inferences": {
                        "priority": {"value": 3, "confidence": "low", "rationale": "No urgency mentioned"},
                        "duration": {"value": 15, "confidence": "medium", "rationale": "Short phone call"},
                    },
                },
            ],
            "ambiguousLines": [],
            "parsingErrors": [],
            "confidence": "medium",
        })
