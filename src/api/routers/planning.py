import asyncio
import logging
import time
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from api.backend import PlanningBackend
from api.dependencies import get_backend, get_inference_engine, get_parser, get_scheduler
from api.metrics import (
    AMBIGUOUS_LINES_TOTAL,
    REQUESTS_TOTAL,
    REQUEST_LATENCY_SECONDS,
    TASKS_EXTRACTED_TOTAL,
    TASKS_PLANNED_TOTAL,
)
from extraction.task_extractor import FreeformParser
from inference.field_inference import FieldInferenceEngine
from scheduling.scheduler import Scheduler
from task_planner.models import (
    DailyPlan,
    FreeformParseResult,
    InferredTask,
    PlanningRequest,
    PlanningResponse,
    PlanningSettings,
    StructuredTask,
)

router = APIRouter()
logger = logging.getLogger(__name__)


class ParseIn(BaseModel):
    text: str


class InferIn(BaseModel):
    task: StructuredTask
    context: Optional[str] = None


class PlanIn(BaseModel):
    tasks: List[InferredTask] = Field(default_factory=list)
    settings: PlanningSettings = Field(default_factory=PlanningSettings)
    plan_date: Optional[date] = None


def _observe(endpoint: str, start: float, status: str = "ok") -> None:
    REQUESTS_TOTAL.labels(endpoint=endpoint, status=status).inc()
    REQUEST_LATENCY_SECONDS.labels(endpoint=endpoint).observe(time.time() - start)


def _count_extracted(result: FreeformParseResult, strategy: str) -> None:
    TASKS_EXTRACTED_TOTAL.labels(strategy=strategy).inc(len(result.extracted_tasks))
    AMBIGUOUS_LINES_TOTAL.inc(len(result.ambiguous_lines))


def _count_sections(plan: DailyPlan) -> None:
    for section in ("now", "next", "later"):
        count = len(getattr(plan.sections, section))
        if count:
            TASKS_PLANNED_TOTAL.labels(section=section).inc(count)


@router.post("/parse", response_model=FreeformParseResult)
async def parse_freeform(
    payload: ParseIn,
    parser: FreeformParser = Depends(get_parser),
) -> FreeformParseResult:
    start = time.time()
    logger.info(f"Received freeform text: {payload.text[:50]}...")

    # the external parser blocks on network I/O
    result = await asyncio.to_thread(parser.parse, payload.text)

    _count_extracted(result, parser.strategy.name)
    _observe("/parse", start)
    return result


@router.post("/infer", response_model=InferredTask)
async def infer_fields(
    payload: InferIn,
    engine: FieldInferenceEngine = Depends(get_inference_engine),
) -> InferredTask:
    start = time.time()
    result = engine.infer_fields(payload.task, payload.context)
    _observe("/infer", start)
    return result


@router.post("/plan", response_model=DailyPlan)
async def generate_daily_plan(
    payload: PlanIn,
    scheduler: Scheduler = Depends(get_scheduler),
) -> DailyPlan:
    start = time.time()
    plan = scheduler.build_plan(payload.tasks, payload.settings, payload.plan_date)
    _count_sections(plan)
    _observe("/plan", start)
    return plan


@router.post("/plan/explain")
async def explain_plan(payload: DailyPlan) -> Dict[str, str]:
    """Section-specific placement narrative per task id."""
    explanations: Dict[str, str] = {}
    for section in ("now", "next", "later"):
        for planned in getattr(payload.sections, section):
            explanations[planned.task.id] = Scheduler.describe_placement(planned, section)
    return explanations


@router.post("/plan/request", response_model=PlanningResponse)
async def run_planning_request(
    payload: PlanningRequest,
    backend: PlanningBackend = Depends(get_backend),
) -> PlanningResponse:
    start = time.time()
    try:
        response = await asyncio.to_thread(backend.run, payload)
    except Exception as e:
        logger.error(f"Error running planning request: {e}")
        _observe("/plan/request", start, status="error")
        raise

    if response.parse_result is not None:
        _count_extracted(response.parse_result, backend.parser.strategy.name)
    _count_sections(response.plan)
    _observe("/plan/request", start)
    return response
