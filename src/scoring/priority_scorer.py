"""Composite priority score for a single task.

total = 0.30*urgency + 0.25*importance + 0.15*effort_fit
        + 0.15*dependency_ready + 0.15*slack_risk - uncertainty_penalty

clamped to [0, 1]. Each factor lives in its own function so a real
implementation can replace a placeholder without touching ``PriorityScorer``.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict

from task_planner.clock import Clock, hours_until, system_clock
from task_planner.models import InferredTask, PlanningSettings, PriorityScore

WEIGHTS: Dict[str, float] = {
    "urgency": 0.30,
    "importance": 0.25,
    "effort_fit": 0.15,
    "dependency_ready": 0.15,
    "slack_risk": 0.15,
}

CONFIDENCE_PENALTY: Dict[str, float] = {
    "low": 0.10,
    "medium": 0.05,
    "high": 0.0,
}

NO_DEADLINE_URGENCY = 0.5
DEFAULT_IMPORTANCE = 0.6


def urgency_factor(task: InferredTask, now: datetime) -> float:
    if task.deadline is None:
        return NO_DEADLINE_URGENCY

    hours_left = hours_until(task.deadline, now)
    if hours_left < 4:
        return 1.0
    if hours_left < 24:
        return 0.9
    if hours_left < 72:
        return 0.7
    return 0.3


def importance_factor(task: InferredTask) -> float:
    if task.priority is None:
        return DEFAULT_IMPORTANCE
    return task.priority / 5


def effort_fit_factor(task: InferredTask, settings: PlanningSettings) -> float:
    # placeholder: duration vs. focus block length is not weighed yet
    return 1.0


def dependency_ready_factor(task: InferredTask) -> float:
    # placeholder: dependency graph state is not tracked yet
    return 1.0


def slack_risk_factor(task: InferredTask, settings: PlanningSettings, plan_date: date) -> float:
    # placeholder: hard commitments are not checked for conflicts yet
    return 1.0


def uncertainty_penalty(task: InferredTask) -> float:
    return sum(CONFIDENCE_PENALTY[inference.confidence] for inference in task.inferences.values())


class PriorityScorer:
    def __init__(self, clock: Clock = system_clock):
        self.clock = clock

    def score(self, task: InferredTask, settings: PlanningSettings, plan_date: date) -> PriorityScore:
        factors = {
            "urgency": urgency_factor(task, self.clock()),
            "importance": importance_factor(task),
            "effort_fit": effort_fit_factor(task, settings),
            "dependency_ready": dependency_ready_factor(task),
            "slack_risk": slack_risk_factor(task, settings, plan_date),
        }
        penalty = uncertainty_penalty(task)

        weighted = sum(WEIGHTS[name] * value for name, value in factors.items())
        total = min(1.0, max(0.0, weighted - penalty))

        return PriorityScore(**factors, uncertainty_penalty=penalty, total=total)
