import json
from datetime import datetime

import httpx
import pytest

from extraction.strategies import (
    ExternalParsingStrategy,
    FallbackParsingStrategy,
    LocalHeuristicStrategy,
)
from extraction.task_extractor import FreeformParser
from llm.llm_client import LLMClient
from scheduling.scheduler import Scheduler
from scoring.priority_scorer import PriorityScorer
from task_planner.config import LLMConfig
from task_planner.models import PlanningSettings


NOTES = """URGENT: finish report by today

  call dentist 15 min tomorrow
???
ASAP
"""

LLM_PAYLOAD = {
    "extractedTasks": [
        {
            "id": "t-1",
            "title": "Prepare board deck",
            "duration": 999,
            "priority": 9,
            "deadline": "2026-03-03T12:00:00",
            "category": "work",
            "inferences": {
                "priority": {"value": 9, "confidence": "very high", "rationale": "CEO asked"},
                "duration": {"value": 5, "confidence": "low"},
                "deadline": {"value": "2026-03-03T12:00:00"},
            },
        },
        {"title": "Water plants", "duration": 5, "priority": 0},
        "not a task",
    ],
    "ambiguousLines": ["something vague", 42, None],
    "parsingErrors": [],
    "confidence": "high",
}


def _fallback_parser(provider, clock):
    external = ExternalParsingStrategy(LLMClient(provider=provider), clock=clock)
    return FreeformParser(strategy=FallbackParsingStrategy(external, LocalHeuristicStrategy(clock=clock)))


def test_local_parse_multiple_lines(clock):
    result = FreeformParser(clock=clock).parse(NOTES)

    assert [t.title for t in result.extracted_tasks] == ["finish report", "call dentist"]
    assert result.ambiguous_lines == ["???"]
    assert result.parsing_errors == []
    assert result.confidence == "medium"

    report, dentist = result.extracted_tasks
    assert report.priority == 5
    assert report.deadline == datetime(2026, 3, 2, 17, 0)
    assert set(report.inferences) == {"priority", "duration", "deadline"}
    assert dentist.duration == 15
    assert dentist.inferences["priority"].confidence == "low"
    assert report.id != dentist.id


def test_local_parse_hints_follow_final_values(clock):
    result = FreeformParser(clock=clock).parse("research pricing models asap")
    task = result.extracted_tasks[0]
    assert task.priority == 5
    assert task.duration == 120
    assert len(task.conditional_hints) == 2


def test_nothing_extracted_is_low_confidence(clock):
    result = FreeformParser(clock=clock).parse("???\nASAP")
    assert result.extracted_tasks == []
    assert result.ambiguous_lines == ["???"]
    assert result.confidence == "low"


def test_empty_text(clock):
    result = FreeformParser(clock=clock).parse("   \n  ")
    assert result.extracted_tasks == []
    assert result.confidence == "low"


def test_external_parse_validates_payload(fake_provider_factory, clock):
    provider = fake_provider_factory("Here you go:\n```json\n" + json.dumps(LLM_PAYLOAD) + "\n```")
    result = _fallback_parser(provider, clock).parse("prepare board deck, water plants")

    assert len(provider.calls) == 1
    assert "prepare board deck, water plants" in provider.calls[0]["user"]
    assert result.confidence == "high"
    assert result.ambiguous_lines == ["something vague", "42"]
    assert result.parsing_errors == []

    deck, plants = result.extracted_tasks
    assert deck.id == "t-1"
    assert deck.priority == 5
    assert deck.duration == 240
    assert deck.deadline == datetime(2026, 3, 3, 12, 0)
    assert deck.inferences["priority"].value == 5
    assert deck.inferences["priority"].confidence == "medium"
    assert deck.inferences["duration"].value == 15
    assert deck.inferences["duration"].rationale == "Estimated based on task complexity"
    assert deck.inferences["deadline"].confidence == "low"

    assert plants.id.startswith("task-")
    assert plants.priority == 3
    assert plants.duration == 15
    # priority 0 means "unknown", so it is estimated and recorded
    assert set(plants.inferences) == {"priority"}
    assert plants.inferences["priority"].rationale == "default medium priority"


def test_invalid_json_falls_back_to_local(fake_provider_factory, clock):
    provider = fake_provider_factory("THIS IS NOT JSON AT ALL")
    result = _fallback_parser(provider, clock).parse("URGENT: finish report by today")

    assert [t.title for t in result.extracted_tasks] == ["finish report"]
    assert len(result.parsing_errors) == 1
    assert "LLMResponseError" in result.parsing_errors[0]


def test_missing_required_key_falls_back(fake_provider_factory, clock):
    provider = fake_provider_factory('{"tasks": [{"title": "Send invoice"}]}')
    result = _fallback_parser(provider, clock).parse("send invoice")

    assert [t.title for t in result.extracted_tasks] == ["send invoice"]
    assert "ValidationError" in result.parsing_errors[0]


def test_service_unavailable_falls_back(raising_provider_factory, clock):
    provider = raising_provider_factory(httpx.ConnectTimeout("timed out"))
    result = _fallback_parser(provider, clock).parse("call mom")

    assert [t.title for t in result.extracted_tasks] == ["call mom"]
    assert "ConnectTimeout" in result.parsing_errors[0]


def test_prompt_mentions_duration_bounds(clock):
    strategy = ExternalParsingStrategy(LLMClient(provider=object()), clock=clock)
    prompt = strategy.build_prompt("buy milk")
    assert "Extract tasks" in prompt
    assert "15-240 minutes" in prompt
    assert '"""buy milk"""' in prompt
    assert "2026-03-02T09:00" in prompt


def test_from_config_without_credential_is_local(clock):
    parser = FreeformParser.from_config(LLMConfig(provider="gemini", api_key=""), clock=clock)
    assert isinstance(parser.strategy, LocalHeuristicStrategy)


def test_from_config_with_credential_wraps_fallback(clock):
    parser = FreeformParser.from_config(LLMConfig(provider="gemini", api_key="secret"), clock=clock)
    assert isinstance(parser.strategy, FallbackParsingStrategy)
    assert parser.strategy.name == "external+local"


def test_from_config_mock_provider(clock):
    parser = FreeformParser.from_config(LLMConfig(provider="mock"), clock=clock)
    result = parser.parse("anything at all")
    assert [t.title for t in result.extracted_tasks] == ["Finish the quarterly report", "Call mom"]
    assert result.parsing_errors == []


def test_external_parse_replaces_repeated_and_missing_ids(fake_provider_factory, clock):
    payload = {
        "extractedTasks": [
            {"id": "distinct-id-per-task", "title": "Draft agenda", "priority": 4, "duration": 30},
            {"id": "distinct-id-per-task", "title": "Book room", "priority": 2, "duration": 15},
            {"title": "Email attendees", "priority": 3, "duration": 15},
        ],
        "confidence": "medium",
    }
    provider = fake_provider_factory(json.dumps(payload))
    result = _fallback_parser(provider, clock).parse("agenda, room, attendees")

    ids = [t.id for t in result.extracted_tasks]
    assert ids[0] == "distinct-id-per-task"
    assert len(set(ids)) == 3
    assert all(i.startswith("task-") for i in ids[1:])

    plan = Scheduler(clock=clock).build_plan(result.extracted_tasks, PlanningSettings())
    assert sorted(p.task.id for p in plan.sections.all()) == sorted(ids)


def test_external_parse_records_missing_priority_and_duration(fake_provider_factory, clock):
    payload = {
        "extractedTasks": [
            {"title": "Something vague"},
            {
                "title": "Quarterly review",
                "inferences": {"priority": {"value": 4, "confidence": "high", "rationale": "boss asked"}},
            },
        ],
    }
    provider = fake_provider_factory(json.dumps(payload))
    vague, review = _fallback_parser(provider, clock).parse("something vague").extracted_tasks

    assert vague.priority == 3
    assert vague.duration == 60
    assert vague.inferences["priority"].confidence == "medium"
    assert vague.inferences["duration"].confidence == "low"
    assert vague.inferences["duration"].rationale == "default 1-hour estimate"

    # the model's own inference wins over the local estimate
    assert review.priority == 4
    assert review.inferences["priority"].rationale == "boss asked"
    assert review.inferences["duration"].value == 30

    score = PriorityScorer(clock=clock).score(vague, PlanningSettings(), clock().date())
    assert score.uncertainty_penalty == pytest.approx(0.15)
