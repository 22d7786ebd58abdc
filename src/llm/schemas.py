"""Lenient schemas for the external parser's JSON answer.

The payload comes from a language model, so nothing is trusted verbatim:
numbers are clamped into range, unknown confidence labels are dropped (the
caller picks the default), and malformed optional values become ``None``.
Only a missing ``extractedTasks`` key or a non-object payload fails
validation outright.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from task_planner.models import CONFIDENCE_LEVELS, Confidence

MIN_PRIORITY, MAX_PRIORITY, DEFAULT_PRIORITY = 1, 5, 3
MIN_DURATION, MAX_DURATION, DEFAULT_DURATION = 15, 240, 60


def clamp_int(value: Any, low: int, high: int, default: Optional[int]) -> Optional[int]:
    if isinstance(value, bool):
        return default
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if not isinstance(value, (int, float)) or math.isnan(value) or math.isinf(value):
        return default
    if not value:
        # 0 is what a model emits for "unknown"
        return default
    return max(low, min(high, int(round(value))))


def parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def _clean_text(value: Any) -> Optional[str]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return None
    return value.strip() or None


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [s for s in (_clean_text(v) for v in value) if s]


class RawInference(BaseModel):
    model_config = ConfigDict(extra="ignore")

    value: Any = None
    confidence: Optional[Confidence] = None
    rationale: Optional[str] = None

    @field_validator("confidence", mode="before")
    @classmethod
    def known_label(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and v.strip().lower() in CONFIDENCE_LEVELS:
            return v.strip().lower()
        return None

    @field_validator("rationale", mode="before")
    @classmethod
    def text(cls, v: Any) -> Optional[str]:
        return _clean_text(v)


class RawTask(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    title: Optional[str] = None
    # None when missing or unusable; the strategy infers it and records why
    duration: Optional[int] = None
    priority: Optional[int] = None
    deadline: Optional[datetime] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    dependencies: List[str] = Field(default_factory=list)
    splittable: bool = False
    inferences: Dict[str, RawInference] = Field(default_factory=dict)

    @field_validator("id", "title", "category", "notes", mode="before")
    @classmethod
    def text(cls, v: Any) -> Optional[str]:
        return _clean_text(v)

    @field_validator("duration", mode="before")
    @classmethod
    def clamp_duration(cls, v: Any) -> Optional[int]:
        return clamp_int(v, MIN_DURATION, MAX_DURATION, None)

    @field_validator("priority", mode="before")
    @classmethod
    def clamp_priority(cls, v: Any) -> Optional[int]:
        return clamp_int(v, MIN_PRIORITY, MAX_PRIORITY, None)

    @field_validator("deadline", mode="before")
    @classmethod
    def iso_deadline(cls, v: Any) -> Optional[datetime]:
        return parse_datetime(v)

    @field_validator("dependencies", mode="before")
    @classmethod
    def string_ids(cls, v: Any) -> List[str]:
        return _string_list(v)

    @field_validator("splittable", mode="before")
    @classmethod
    def strict_bool(cls, v: Any) -> bool:
        return v if isinstance(v, bool) else False

    @field_validator("inferences", mode="before")
    @classmethod
    def object_entries(cls, v: Any) -> Dict[str, Any]:
        if not isinstance(v, dict):
            return {}
        return {k: e for k, e in v.items() if isinstance(e, dict)}


class RawParseResult(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    extracted_tasks: List[RawTask] = Field(..., alias="extractedTasks")
    ambiguous_lines: List[str] = Field(default_factory=list, alias="ambiguousLines")
    parsing_errors: List[str] = Field(default_factory=list, alias="parsingErrors")
    confidence: Confidence = "medium"

    @field_validator("extracted_tasks", mode="before")
    @classmethod
    def task_objects(cls, v: Any) -> Any:
        # Let a non-list fail validation; silently skip non-object entries.
        if isinstance(v, list):
            return [t for t in v if isinstance(t, dict)]
        return v

    @field_validator("ambiguous_lines", "parsing_errors", mode="before")
    @classmethod
    def strings(cls, v: Any) -> List[str]:
        return _string_list(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def known_label(cls, v: Any) -> str:
        if isinstance(v, str) and v.strip().lower() in CONFIDENCE_LEVELS:
            return v.strip().lower()
        return "medium"
