import logging
from typing import List, Optional

from extraction.task_extractor import FreeformParser
from inference.field_inference import FieldInferenceEngine
from scheduling.scheduler import Scheduler
from task_planner.models import (
    FreeformParseResult,
    InferredTask,
    PlanningRequest,
    PlanningResponse,
)

logger = logging.getLogger(__name__)


class PlanningBackend:
    """Central orchestration: raw input -> inferred tasks -> daily plan."""

    def __init__(
        self,
        parser: Optional[FreeformParser] = None,
        inference: Optional[FieldInferenceEngine] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        self.parser = parser or FreeformParser()
        self.inference = inference or FieldInferenceEngine()
        self.scheduler = scheduler or Scheduler()

    def run(self, request: PlanningRequest) -> PlanningResponse:
        warnings: List[str] = []
        parse_result: Optional[FreeformParseResult] = None

        # 1. Turn the input into inferred tasks
        if request.input_method == "freeform":
            parse_result = self.parser.parse(request.tasks)
            tasks: List[InferredTask] = list(parse_result.extracted_tasks)
            warnings.extend(self._parse_warnings(parse_result))
        else:
            tasks = [self.inference.infer_fields(t) for t in request.tasks]

        # 2. Score and categorize
        plan = self.scheduler.build_plan(tasks, request.settings, request.plan_date)

        if plan.overdue_tasks:
            warnings.append(f"{len(plan.overdue_tasks)} task(s) are past their deadline.")

        logger.info(
            f"Planned {plan.metadata.total_tasks} task(s) from {request.input_method} input "
            f"with {len(warnings)} warning(s)"
        )
        return PlanningResponse(plan=plan, parse_result=parse_result, errors=[], warnings=warnings)

    @staticmethod
    def _parse_warnings(result: FreeformParseResult) -> List[str]:
        warnings = [f"Could not interpret line: {line}" for line in result.ambiguous_lines]
        warnings.extend(result.parsing_errors)
        if result.confidence == "low":
            warnings.append("Low parsing confidence; review the extracted tasks.")
        return warnings
