"""Infer the fields a caller left out of a structured task.

Every inferred value is paired with a confidence label and a rationale, and
recorded under ``InferredTask.inferences``. Explicitly supplied fields are
never touched and never receive an inference entry.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Dict, List, Optional

from classification.task_classifier import TaskClassifier
from task_planner.clock import Clock, hours_until, system_clock
from task_planner.models import Inference, InferredTask, StructuredTask

logger = logging.getLogger(__name__)

COMPLEX_WORK_RE = re.compile(r"research|analy[sz]e|develop|design|create|build", re.IGNORECASE)
QUICK_ACTION_RE = re.compile(r"check|review|send|call|email", re.IGNORECASE)

LONG_TITLE_CHARS = 50
SHORT_TITLE_CHARS = 20

LOW_PRIORITY_HINT = (
    "If this task is actually low priority, it will be scheduled after other "
    "medium priority tasks."
)
DURATION_HINT = (
    "Duration estimate can be adjusted; shorter tasks will be scheduled in available gaps."
)


def infer_priority(deadline: Optional[datetime], now: datetime) -> Inference:
    if deadline is not None:
        hours_left = hours_until(deadline, now)
        if hours_left < 24:
            return Inference(
                value=5,
                confidence="high",
                rationale="high priority due to deadline within 24 hours",
            )
        if hours_left < 72:
            return Inference(
                value=4,
                confidence="medium",
                rationale="medium-high priority due to deadline within 3 days",
            )
    return Inference(value=3, confidence="medium", rationale="default medium priority")


def infer_duration(title: str) -> Inference:
    if len(title) > LONG_TITLE_CHARS or COMPLEX_WORK_RE.search(title):
        return Inference(
            value=120,
            confidence="medium",
            rationale="estimated 2 hours based on task complexity",
        )
    if len(title) < SHORT_TITLE_CHARS and QUICK_ACTION_RE.search(title):
        return Inference(
            value=30,
            confidence="medium",
            rationale="estimated 30 minutes for a quick task",
        )
    return Inference(value=60, confidence="low", rationale="default 1-hour estimate")


class FieldInferenceEngine:
    def __init__(self, clock: Clock = system_clock, classifier: Optional[TaskClassifier] = None):
        self.clock = clock
        self.classifier = classifier

    def infer_fields(self, task: StructuredTask, context: Optional[str] = None) -> InferredTask:
        """Return a new InferredTask with inferences for every missing field.

        ``context`` is free text about the task (e.g. the note it came from);
        it only feeds the optional category classifier.
        """
        inferences: Dict[str, Inference] = {}
        hints: List[str] = []

        if task.priority is None:
            inferences["priority"] = infer_priority(task.deadline, self.clock())
            hints.append(LOW_PRIORITY_HINT)

        if task.duration is None:
            inferences["duration"] = infer_duration(task.title)
            hints.append(DURATION_HINT)

        if self.classifier is not None and not task.category:
            text = task.title if not context else f"{task.title} {context}"
            inferences["category"] = self.classifier.classify(text)

        logger.debug(f"Inferred {sorted(inferences)} for task {task.id}")
        return InferredTask.from_structured(task, inferences=inferences, conditional_hints=hints)
