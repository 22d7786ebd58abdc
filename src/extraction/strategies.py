from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from extraction.heuristics import conditional_hints, extract_line, has_content, split_lines
from inference.field_inference import infer_duration, infer_priority
from llm.llm_client import LLMClient
from llm.schemas import (
    DEFAULT_DURATION,
    DEFAULT_PRIORITY,
    MAX_DURATION,
    MAX_PRIORITY,
    MIN_DURATION,
    MIN_PRIORITY,
    RawParseResult,
    RawTask,
    clamp_int,
    parse_datetime,
)
from task_planner.clock import Clock, system_clock
from task_planner.models import FreeformParseResult, Inference, InferredTask, new_task_id

logger = logging.getLogger(__name__)

EXTRACTION_SYSTEM_PROMPT = (
    "You are an expert task planning assistant. You read free-form notes and "
    "reply with a single JSON object, no prose."
)

EXTRACTION_PROMPT = '''Extract tasks from the following text and analyse each one.

Text to parse:
"""{text}"""

Current date and time: {now}

Respond with a JSON object in this exact format:
{{
  "extractedTasks": [
    {{
      "id": "distinct-id-per-task",
      "title": "Task title",
      "duration": number_in_minutes,
      "priority": number_1_to_5,
      "deadline": "ISO_date_string_or_null",
      "category": "inferred_category",
      "notes": "any_additional_context",
      "inferences": {{
        "priority": {{"value": number_1_to_5, "confidence": "low|medium|high", "rationale": "why_this_priority"}},
        "duration": {{"value": number_in_minutes, "confidence": "low|medium|high", "rationale": "why_this_duration"}},
        "deadline": {{"value": "ISO_date_string_or_null", "confidence": "low|medium|high", "rationale": "why_this_deadline"}}
      }}
    }}
  ],
  "ambiguousLines": ["lines_that_were_unclear"],
  "parsingErrors": ["any_errors_encountered"],
  "confidence": "low|medium|high"
}}

Rules:
- Extract distinct tasks, avoid duplicates
- Infer reasonable durations ({min_duration}-{max_duration} minutes)
- Assign priorities based on urgency/importance
- Parse deadlines from context (today, tomorrow, specific dates)
- Flag ambiguous or unclear text
- Be conservative with confidence levels
'''


class ParsingStrategy(ABC):
    name: str = "base"

    @abstractmethod
    def parse(self, text: str) -> FreeformParseResult:
        raise NotImplementedError


class LocalHeuristicStrategy(ParsingStrategy):
    """Line-by-line keyword parsing; needs no network and never fails."""

    name = "local"

    def __init__(self, clock: Clock = system_clock):
        self.clock = clock

    def parse(self, text: str) -> FreeformParseResult:
        now = self.clock()
        tasks: List[InferredTask] = []
        ambiguous: List[str] = []

        for _, line in split_lines(text):
            if not has_content(line):
                ambiguous.append(line)
                continue

            extraction = extract_line(line, now)
            if extraction is None:
                # nothing left after stripping keywords
                continue

            inferences: Dict[str, Inference] = {
                "priority": extraction.priority,
                "duration": extraction.duration,
            }
            if extraction.deadline is not None:
                inferences["deadline"] = extraction.deadline

            tasks.append(
                InferredTask(
                    id=new_task_id(),
                    title=extraction.title,
                    priority=extraction.priority.value,
                    duration=extraction.duration.value,
                    deadline=extraction.deadline.value if extraction.deadline else None,
                    inferences=inferences,
                    conditional_hints=conditional_hints(
                        extraction.priority.value, extraction.duration.value
                    ),
                )
            )

        logger.info(f"Local parser extracted {len(tasks)} task(s), {len(ambiguous)} ambiguous line(s)")
        return FreeformParseResult(
            extracted_tasks=tasks,
            ambiguous_lines=ambiguous,
            parsing_errors=[],
            confidence="medium" if tasks else "low",
        )


def _inference(raw_task: RawTask, field: str) -> Optional[Inference]:
    raw = raw_task.inferences.get(field)
    if raw is None:
        return None

    if field == "priority":
        value = clamp_int(raw.value, MIN_PRIORITY, MAX_PRIORITY, DEFAULT_PRIORITY)
        confidence = raw.confidence or "medium"
        rationale = raw.rationale or "Inferred from context"
    elif field == "duration":
        value = clamp_int(raw.value, MIN_DURATION, MAX_DURATION, DEFAULT_DURATION)
        confidence = raw.confidence or "medium"
        rationale = raw.rationale or "Estimated based on task complexity"
    else:
        value = parse_datetime(raw.value)
        if value is None:
            return None
        confidence = raw.confidence or "low"
        rationale = raw.rationale or "Inferred from context clues"

    return Inference(value=value, confidence=confidence, rationale=rationale)


def to_inferred_task(raw_task: RawTask, now: datetime, task_id: Optional[str] = None) -> InferredTask:
    """Build an InferredTask from one validated payload entry.

    A priority or duration the payload left out is taken from the model's own
    inference when it gave one, else estimated locally; either way it is
    recorded under ``inferences`` so the scorer penalises the guess.
    """
    inferences: Dict[str, Inference] = {}
    for field in ("priority", "duration", "deadline"):
        inference = _inference(raw_task, field)
        if inference is not None:
            inferences[field] = inference

    title = raw_task.title or "Untitled Task"

    deadline = raw_task.deadline
    if deadline is None and "deadline" in inferences:
        deadline = inferences["deadline"].value

    priority = raw_task.priority
    if priority is None:
        inferences.setdefault("priority", infer_priority(deadline, now))
        priority = inferences["priority"].value

    duration = raw_task.duration
    if duration is None:
        inferences.setdefault("duration", infer_duration(title))
        duration = inferences["duration"].value

    return InferredTask(
        id=task_id or raw_task.id or new_task_id(),
        title=title,
        duration=duration,
        priority=priority,
        deadline=deadline,
        category=raw_task.category,
        notes=raw_task.notes,
        dependencies=raw_task.dependencies,
        splittable=raw_task.splittable,
        inferences=inferences,
        conditional_hints=conditional_hints(priority, duration),
    )


def assign_ids(raw_tasks: List[RawTask]) -> List[str]:
    """One id per task: the model's id when present and unused, else a fresh one."""
    ids: List[str] = []
    seen = set()
    for raw_task in raw_tasks:
        task_id = raw_task.id
        if not task_id or task_id in seen:
            task_id = new_task_id()
        seen.add(task_id)
        ids.append(task_id)
    return ids


class ExternalParsingStrategy(ParsingStrategy):
    """Delegates parsing to a language model and validates what comes back.

    Errors (transport, malformed JSON, wrong payload shape) propagate; wrap
    this strategy in ``FallbackParsingStrategy`` to recover from them.
    """

    name = "external"

    def __init__(self, llm_client: LLMClient, clock: Clock = system_clock):
        self.llm_client = llm_client
        self.clock = clock

    def build_prompt(self, text: str) -> str:
        return EXTRACTION_PROMPT.format(
            text=text,
            now=self.clock().isoformat(timespec="minutes"),
            min_duration=MIN_DURATION,
            max_duration=MAX_DURATION,
        )

    def parse(self, text: str) -> FreeformParseResult:
        payload = self.llm_client.complete_json(self.build_prompt(text), system=EXTRACTION_SYSTEM_PROMPT)
        raw = RawParseResult.model_validate(payload)

        now = self.clock()
        tasks = [
            to_inferred_task(t, now, task_id=task_id)
            for t, task_id in zip(raw.extracted_tasks, assign_ids(raw.extracted_tasks))
        ]
        logger.info(f"External parser extracted {len(tasks)} task(s)")
        return FreeformParseResult(
            extracted_tasks=tasks,
            ambiguous_lines=raw.ambiguous_lines,
            parsing_errors=raw.parsing_errors,
            confidence=raw.confidence,
        )


class FallbackParsingStrategy(ParsingStrategy):
    """Runs ``primary``; on any failure logs it and answers with ``fallback``."""

    def __init__(self, primary: ParsingStrategy, fallback: ParsingStrategy):
        self.primary = primary
        self.fallback = fallback
        self.name = f"{primary.name}+{fallback.name}"

    def parse(self, text: str) -> FreeformParseResult:
        try:
            return self.primary.parse(text)
        except Exception as e:
            logger.warning(
                f"{self.primary.name} parsing failed ({type(e).__name__}: {e}); "
                f"falling back to {self.fallback.name}"
            )
            result = self.fallback.parse(text)
            note = f"{self.primary.name} parser unavailable ({type(e).__name__}); used {self.fallback.name} heuristics"
            return result.model_copy(update={"parsing_errors": [*result.parsing_errors, note]})
