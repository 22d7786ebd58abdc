"""Keyword heuristics that pull task attributes out of a single line of text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from inference.field_inference import infer_duration
from task_planner.clock import end_of_workday
from task_planner.models import Inference

URGENT_RE = re.compile(r"\b(?:urgent|asap|critical)\b|!!!", re.IGNORECASE)
IMPORTANT_RE = re.compile(r"\b(?:important|high)\b|!!", re.IGNORECASE)
LOW_RE = re.compile(r"\b(?:low|minor)\b|\bwhen time\b", re.IGNORECASE)

PRIORITY_TOKEN_RE = re.compile(
    r"\b(?:urgent|asap|critical|important|high|low|minor)\b(?:\s+priority\b)?"
    r"|\bwhen time(?:\s+permits)?\b"
    r"|!{2,}",
    re.IGNORECASE,
)
DURATION_RE = re.compile(
    r"\b(\d+(?:\.\d+)?)\s*(hour|hr|minute|min)s?\b",
    re.IGNORECASE,
)
DEADLINE_RE = re.compile(
    r"\b(?:(?:by|due)\s+)?(today|tomorrow)\b",
    re.IGNORECASE,
)

_EDGE_PUNCT_RE = re.compile(r"^[\s:;,.!\-]+|[\s:;,.!\-]+$")
_SPACES_RE = re.compile(r"\s+")
_ALNUM_RE = re.compile(r"[^\W_]")

HIGH_PRIORITY_HINT = (
    "If priority drops to medium, this task will be rescheduled after other "
    "high-priority items."
)
SPLIT_HINT = "This task may be split into smaller blocks if the schedule is tight."
LOW_PRIORITY_HINT = (
    "This task will be scheduled in available time slots after higher priority work."
)


@dataclass(frozen=True)
class LineExtraction:
    title: str
    priority: Inference
    duration: Inference
    deadline: Optional[Inference] = None


def has_content(line: str) -> bool:
    """True if the line carries any letters or digits at all."""
    return bool(_ALNUM_RE.search(line))


def detect_priority(line: str) -> Inference:
    if URGENT_RE.search(line):
        return Inference(value=5, confidence="high", rationale="detected urgency keywords")
    if IMPORTANT_RE.search(line):
        return Inference(value=4, confidence="medium", rationale="detected importance keywords")
    if LOW_RE.search(line):
        return Inference(value=2, confidence="medium", rationale="detected low priority indicators")
    return Inference(value=3, confidence="low", rationale="assumed, no indicators found")


def detect_duration(line: str) -> Optional[Inference]:
    for match in DURATION_RE.finditer(line):
        amount = float(match.group(1))
        unit = match.group(2).lower()
        minutes = int(round(amount * 60)) if unit.startswith("h") else int(round(amount))
        if minutes > 0:
            return Inference(value=minutes, confidence="high", rationale="extracted from text")
    return None


def detect_deadline(line: str, now: datetime) -> Optional[Inference]:
    match = DEADLINE_RE.search(line)
    if not match:
        return None
    if match.group(1).lower() == "today":
        return Inference(
            value=end_of_workday(now),
            confidence="high",
            rationale="due today by end of work day",
        )
    return Inference(
        value=end_of_workday(now, days_ahead=1),
        confidence="high",
        rationale="due tomorrow by end of work day",
    )


def clean_title(line: str) -> str:
    """Strip priority, duration and deadline tokens, leaving the task's name."""
    title = PRIORITY_TOKEN_RE.sub(" ", line)
    title = DURATION_RE.sub(" ", title)
    title = DEADLINE_RE.sub(" ", title)
    title = _SPACES_RE.sub(" ", title)
    return _EDGE_PUNCT_RE.sub("", title).strip()


def conditional_hints(priority: int, duration: int) -> List[str]:
    hints: List[str] = []
    if priority >= 4:
        hints.append(HIGH_PRIORITY_HINT)
    if duration > 90:
        hints.append(SPLIT_HINT)
    if priority <= 2:
        hints.append(LOW_PRIORITY_HINT)
    return hints


def extract_line(line: str, now: datetime) -> Optional[LineExtraction]:
    """Extract one task from ``line``; None when nothing but keywords remain."""
    title = clean_title(line)
    if not title:
        return None

    duration = detect_duration(line) or infer_duration(title)
    return LineExtraction(
        title=title,
        priority=detect_priority(line),
        duration=duration,
        deadline=detect_deadline(line, now),
    )


def split_lines(text: str) -> List[Tuple[int, str]]:
    """Non-empty stripped lines with their 1-based line numbers."""
    return [(n, line.strip()) for n, line in enumerate(text.splitlines(), start=1) if line.strip()]
