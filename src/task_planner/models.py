from __future__ import annotations

import uuid
from datetime import date, datetime, time
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Confidence = Literal["low", "medium", "high"]
CONFIDENCE_LEVELS = ("low", "medium", "high")

InputMethod = Literal["structured", "freeform"]
Section = Literal["now", "next", "later"]

INFERABLE_FIELDS = ("priority", "duration", "deadline", "category")


def new_task_id() -> str:
    return f"task-{uuid.uuid4().hex[:12]}"


def new_plan_id(plan_date: date) -> str:
    return f"plan-{plan_date:%Y%m%d}-{uuid.uuid4().hex[:8]}"


def _str_to_time(s: str) -> time:
    h, m = map(int, s.split(":"))
    return time(h, m)


class StructuredTask(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_task_id, min_length=1)
    title: str = Field(..., min_length=1)
    deadline: Optional[datetime] = None
    priority: Optional[int] = Field(None, ge=1, le=5)
    duration: Optional[int] = Field(None, gt=0)  # minutes
    dependencies: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    category: Optional[str] = None
    splittable: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("title must not be blank")
        return v2

    @field_validator("dependencies")
    @classmethod
    def unique_dependencies(cls, v: List[str]) -> List[str]:
        # ordered set: keep the first occurrence of each id
        return list(dict.fromkeys(v))


class Inference(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: Any
    confidence: Confidence
    rationale: str


class InferredTask(StructuredTask):
    inferences: Dict[str, Inference] = Field(default_factory=dict)
    conditional_hints: List[str] = Field(default_factory=list)

    @field_validator("inferences")
    @classmethod
    def known_fields_only(cls, v: Dict[str, Inference]) -> Dict[str, Inference]:
        unknown = set(v) - set(INFERABLE_FIELDS)
        if unknown:
            raise ValueError(f"cannot infer unknown fields: {sorted(unknown)}")
        return v

    @classmethod
    def from_structured(
        cls,
        task: StructuredTask,
        inferences: Optional[Dict[str, Inference]] = None,
        conditional_hints: Optional[List[str]] = None,
    ) -> "InferredTask":
        return cls(
            **task.model_dump(exclude={"inferences", "conditional_hints"}),
            inferences=inferences or {},
            conditional_hints=conditional_hints or [],
        )


class PriorityScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    urgency: float = Field(..., ge=0, le=1)
    importance: float = Field(..., ge=0, le=1)
    effort_fit: float = Field(..., ge=0, le=1)
    dependency_ready: float = Field(..., ge=0, le=1)
    slack_risk: float = Field(..., ge=0, le=1)
    uncertainty_penalty: float = Field(..., ge=0)
    total: float = Field(..., ge=0, le=1)

    def factors(self) -> Dict[str, float]:
        return self.model_dump(exclude={"total"})


class TimeWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime


class Explainability(BaseModel):
    model_config = ConfigDict(frozen=True)

    factors: Dict[str, float] = Field(default_factory=dict)
    assumptions: List[str] = Field(default_factory=list)
    conditional_guidance: List[str] = Field(default_factory=list)


class PlannedTask(BaseModel):
    model_config = ConfigDict(frozen=True)

    task: InferredTask
    priority_score: PriorityScore
    # Reserved for slot assignment; the categorizer never fills it.
    time_window: Optional[TimeWindow] = None
    scheduling_reason: str
    explainability: Explainability


class PlanSections(BaseModel):
    model_config = ConfigDict(frozen=True)

    now: List[PlannedTask] = Field(default_factory=list)
    next: List[PlannedTask] = Field(default_factory=list)
    later: List[PlannedTask] = Field(default_factory=list)

    def all(self) -> List[PlannedTask]:
        return [*self.now, *self.next, *self.later]


class PlanMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_tasks: int = Field(..., ge=0)
    total_duration: int = Field(..., ge=0)
    planning_date: datetime


class DailyPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    date: date
    sections: PlanSections
    ambiguous_tasks: List[str] = Field(default_factory=list)
    overdue_tasks: List[PlannedTask] = Field(default_factory=list)
    metadata: PlanMetadata


class HardCommitment(BaseModel):
    id: str = Field(default_factory=new_task_id)
    title: str = Field(..., min_length=1)
    start_time: datetime
    end_time: datetime
    description: Optional[str] = None

    @model_validator(mode="after")
    def ends_after_start(self) -> "HardCommitment":
        if self.end_time <= self.start_time:
            raise ValueError("hard commitment must end after it starts")
        return self


class WorkingHours(BaseModel):
    start: str = "09:00"  # HH:MM
    end: str = "17:00"

    @field_validator("start", "end")
    @classmethod
    def hhmm(cls, v: str) -> str:
        try:
            _str_to_time(v)
        except ValueError:
            raise ValueError(f"expected HH:MM, got {v!r}")
        return v

    @model_validator(mode="after")
    def ends_after_start(self) -> "WorkingHours":
        if self.end_time <= self.start_time:
            raise ValueError("working hours must end after they start")
        return self

    @property
    def start_time(self) -> time:
        return _str_to_time(self.start)

    @property
    def end_time(self) -> time:
        return _str_to_time(self.end)


class PlanningSettings(BaseModel):
    working_hours: WorkingHours = Field(default_factory=WorkingHours)
    weekends_enabled: bool = False
    focus_block_length: int = Field(120, gt=0)  # minutes
    break_buffer: int = Field(15, ge=0)  # minutes
    hard_commitments: List[HardCommitment] = Field(default_factory=list)


class FreeformParseResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    extracted_tasks: List[InferredTask] = Field(default_factory=list)
    ambiguous_lines: List[str] = Field(default_factory=list)
    parsing_errors: List[str] = Field(default_factory=list)
    confidence: Confidence = "low"


class PlanningRequest(BaseModel):
    tasks: Union[List[StructuredTask], str]
    input_method: InputMethod
    settings: PlanningSettings = Field(default_factory=PlanningSettings)
    plan_date: Optional[date] = None

    @model_validator(mode="after")
    def tasks_match_input_method(self) -> "PlanningRequest":
        if self.input_method == "freeform" and not isinstance(self.tasks, str):
            raise ValueError("freeform requests carry the raw text in 'tasks'")
        if self.input_method == "structured" and isinstance(self.tasks, str):
            raise ValueError("structured requests carry a list of tasks in 'tasks'")
        return self


class PlanningResponse(BaseModel):
    plan: DailyPlan
    parse_result: Optional[FreeformParseResult] = None
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
