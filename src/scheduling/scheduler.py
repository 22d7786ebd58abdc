from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence

from scheduling.plan_assembler import DailyPlanAssembler
from scoring.priority_scorer import PriorityScorer
from task_planner.clock import Clock, is_past, system_clock
from task_planner.models import (
    DailyPlan,
    Explainability,
    InferredTask,
    PlannedTask,
    PlanningSettings,
    PlanSections,
    PriorityScore,
    Section,
)

logger = logging.getLogger(__name__)

NOW_URGENCY = 0.8
NOW_TOTAL = 0.8
NEXT_TOTAL = 0.5


def categorize(score: PriorityScore) -> Section:
    if score.urgency > NOW_URGENCY or score.total > NOW_TOTAL:
        return "now"
    if score.total > NEXT_TOTAL:
        return "next"
    return "later"


def scheduling_reason(score: PriorityScore) -> str:
    reasons: List[str] = []

    if score.urgency > 0.8:
        reasons.append("urgent deadline")
    elif score.urgency > 0.6:
        reasons.append("approaching deadline")

    if score.importance > 0.8:
        reasons.append("high priority")
    elif score.importance < 0.4:
        reasons.append("lower priority")

    if score.uncertainty_penalty > 0.1:
        reasons.append("adjusted for inference uncertainty")

    if not reasons:
        return "Scheduled based on availability."
    return f"Scheduled due to {', '.join(reasons)}."


def assumptions(task: InferredTask) -> List[str]:
    return [
        f"{field}: {inference.rationale}"
        for field, inference in task.inferences.items()
        if inference.confidence in ("low", "medium")
    ]


class Scheduler:
    """Scores tasks and sorts them into now / next / later."""

    def __init__(
        self,
        scorer: Optional[PriorityScorer] = None,
        assembler: Optional[DailyPlanAssembler] = None,
        clock: Clock = system_clock,
    ):
        self.clock = clock
        self.scorer = scorer or PriorityScorer(clock=clock)
        self.assembler = assembler or DailyPlanAssembler(clock=clock)

    def plan_task(self, task: InferredTask, score: PriorityScore) -> PlannedTask:
        return PlannedTask(
            task=task,
            priority_score=score,
            time_window=None,
            scheduling_reason=scheduling_reason(score),
            explainability=Explainability(
                factors=score.factors(),
                assumptions=assumptions(task),
                conditional_guidance=list(task.conditional_hints),
            ),
        )

    def build_plan(
        self,
        tasks: Sequence[InferredTask],
        settings: Optional[PlanningSettings] = None,
        plan_date: Optional[date] = None,
    ) -> DailyPlan:
        settings = settings or PlanningSettings()
        now = self.clock()
        plan_date = plan_date or now.date()

        scored = [(task, self.scorer.score(task, settings, plan_date)) for task in tasks]
        # sorted() is stable, so equal scores keep their input order
        scored = sorted(scored, key=lambda item: item[1].total, reverse=True)

        planned = [self.plan_task(task, score) for task, score in scored]

        buckets: Dict[str, List[PlannedTask]] = {"now": [], "next": [], "later": []}
        for p in planned:
            buckets[categorize(p.priority_score)].append(p)

        overdue = [
            p for p in planned if p.task.deadline is not None and is_past(p.task.deadline, now)
        ]

        return self.assembler.assemble(planned, PlanSections(**buckets), overdue, plan_date)

    # alias matching the inbound interface name
    generate_daily_plan = build_plan

    @staticmethod
    def describe_placement(planned: PlannedTask, section: Section) -> str:
        """Section-specific narrative for why a task sits where it does."""
        factors = planned.explainability.factors
        reasons: List[str] = []

        if section == "now":
            if factors.get("urgency", 0) > 0.8:
                reasons.append("urgent deadline")
            if factors.get("importance", 0) > 0.8:
                reasons.append("high priority")
            if factors.get("dependency_ready", 0) > 0.7:
                reasons.append("dependencies ready")
        elif section == "next":
            reasons.append("scheduled after current priority tasks")
            if factors.get("effort_fit", 0) > 0.6:
                reasons.append("good fit for available time blocks")
        else:
            reasons.append("lower priority")
            if factors.get("uncertainty_penalty", 0) > 0.3:
                reasons.append("high uncertainty in requirements")

        base = f'Placed in "{section}" section'
        return f"{base} due to {', '.join(reasons)}." if reasons else f"{base}."
