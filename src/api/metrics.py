from prometheus_client import Counter, Histogram, REGISTRY

LATENCY_BUCKETS = (0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)


def get_or_create_metric(name, documentation, metric_type, **kwargs):
    # the test client and uvicorn --reload import this module more than once
    existing = REGISTRY._names_to_collectors.get(name)
    if existing is not None:
        return existing
    return metric_type(name, documentation, **kwargs)


REQUESTS_TOTAL = get_or_create_metric(
    "planner_requests_total",
    "Planning API requests by endpoint and outcome",
    Counter,
    labelnames=["endpoint", "status"],
)

REQUEST_LATENCY_SECONDS = get_or_create_metric(
    "planner_request_latency_seconds",
    "Planning API request latency",
    Histogram,
    labelnames=["endpoint"],
    buckets=LATENCY_BUCKETS,
)

TASKS_EXTRACTED_TOTAL = get_or_create_metric(
    "planner_tasks_extracted_total",
    "Tasks extracted from freeform text, by parsing strategy",
    Counter,
    labelnames=["strategy"],
)

AMBIGUOUS_LINES_TOTAL = get_or_create_metric(
    "planner_ambiguous_lines_total",
    "Freeform lines that could not be interpreted as a task",
    Counter,
)

TASKS_PLANNED_TOTAL = get_or_create_metric(
    "planner_tasks_planned_total",
    "Tasks placed into a plan section",
    Counter,
    labelnames=["section"],
)
