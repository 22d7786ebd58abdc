from __future__ import annotations

import logging
from datetime import date
from typing import List, Sequence

from task_planner.clock import Clock, system_clock
from task_planner.models import DailyPlan, PlanMetadata, PlannedTask, PlanSections, new_plan_id

logger = logging.getLogger(__name__)


class DailyPlanAssembler:
    """Freezes categorized tasks and their totals into a DailyPlan."""

    def __init__(self, clock: Clock = system_clock):
        self.clock = clock

    def assemble(
        self,
        planned: Sequence[PlannedTask],
        sections: PlanSections,
        overdue: List[PlannedTask],
        plan_date: date,
    ) -> DailyPlan:
        metadata = PlanMetadata(
            total_tasks=len(planned),
            total_duration=sum(p.task.duration or 0 for p in planned),
            planning_date=self.clock(),
        )
        plan = DailyPlan(
            id=new_plan_id(plan_date),
            date=plan_date,
            sections=sections,
            ambiguous_tasks=[],
            overdue_tasks=overdue,
            metadata=metadata,
        )
        logger.info(
            f"Assembled plan {plan.id}: now={len(sections.now)} next={len(sections.next)} "
            f"later={len(sections.later)} overdue={len(overdue)}"
        )
        return plan
