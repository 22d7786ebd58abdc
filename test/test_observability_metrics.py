import importlib

from fastapi.testclient import TestClient


def _client() -> TestClient:
    # conftest pins PLANNER_LLM_PROVIDER before the app module is first imported
    return TestClient(importlib.import_module("api.main").app)


def _sample(body: str, prefix: str) -> float:
    for line in body.splitlines():
        if line.startswith(prefix):
            return float(line.rsplit(" ", 1)[1])
    return 0.0


def test_metrics_endpoint_exposes_planner_series() -> None:
    client = _client()

    r = client.get("/metrics")
    assert r.status_code == 200
    assert "text/plain" in r.headers.get("content-type", "")
    for name in (
        "planner_requests_total",
        "planner_request_latency_seconds",
        "planner_tasks_extracted_total",
        "planner_ambiguous_lines_total",
        "planner_tasks_planned_total",
    ):
        assert name in r.text


def test_parse_counts_requests_tasks_and_ambiguous_lines() -> None:
    client = _client()
    before = client.get("/metrics").text

    r = client.post("/parse", json={"text": "Buy milk\nwater plants 10 min\n---"})
    assert r.status_code == 200

    after = client.get("/metrics").text
    request_line = 'planner_requests_total{endpoint="/parse",status="ok"}'
    tasks_line = 'planner_tasks_extracted_total{strategy="local"}'
    assert _sample(after, request_line) == _sample(before, request_line) + 1
    assert _sample(after, tasks_line) == _sample(before, tasks_line) + 2
    assert _sample(after, "planner_ambiguous_lines_total ") == (
        _sample(before, "planner_ambiguous_lines_total ") + 1
    )


def test_plan_counts_tasks_per_section() -> None:
    client = _client()
    line = 'planner_tasks_planned_total{section="later"}'
    before = _sample(client.get("/metrics").text, line)

    # 0.15 + 0.05 + 0.45 - 2 * 0.10 = 0.45
    r = client.post(
        "/plan",
        json={
            "tasks": [
                {
                    "title": "Sort photos",
                    "priority": 1,
                    "duration": 30,
                    "inferences": {
                        "deadline": {"value": None, "confidence": "low", "rationale": "guess"},
                        "category": {"value": "personal", "confidence": "low", "rationale": "guess"},
                    },
                }
            ]
        },
    )
    assert r.status_code == 200
    assert len(r.json()["sections"]["later"]) == 1

    assert _sample(client.get("/metrics").text, line) == before + 1


def test_health_reports_local_parsing() -> None:
    r = _client().get("/health")
    assert r.status_code == 200
    assert r.json() == {
        "status": "healthy",
        "llm_provider": "none",
        "parsing_strategy": "local",
        "category_inference": False,
    }
