from __future__ import annotations

import re
from typing import Dict, Optional, Tuple

from task_planner.models import Inference

DEFAULT_CATEGORY = "work"

# Checked in order; the first category with a matching keyword wins.
CATEGORY_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "health": ("run", "gym", "workout", "doctor", "dentist", "yoga", "walk"),
    "personal": ("mom", "dad", "family", "dinner", "birthday", "friend", "home"),
    "learning": ("read", "study", "course", "learn", "lecture", "practice"),
    "errands": ("buy", "groceries", "pick up", "pay", "bank", "post office"),
}


def _keyword_pattern(keywords: Tuple[str, ...]) -> re.Pattern:
    return re.compile(r"\b(" + "|".join(re.escape(k) for k in keywords) + r")\b", re.IGNORECASE)


class TaskClassifier:
    """Keyword classifier that guesses a category label for a task title."""

    def __init__(self, keywords: Optional[Dict[str, Tuple[str, ...]]] = None):
        self._patterns = {
            category: _keyword_pattern(words)
            for category, words in (keywords or CATEGORY_KEYWORDS).items()
        }

    def classify(self, text: str) -> Inference:
        for category, pattern in self._patterns.items():
            match = pattern.search(text)
            if match:
                return Inference(
                    value=category,
                    confidence="medium",
                    rationale=f"mentions '{match.group(1).lower()}'",
                )
        return Inference(
            value=DEFAULT_CATEGORY,
            confidence="low",
            rationale="no category keywords found, assumed work",
        )
