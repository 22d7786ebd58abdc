import os
from datetime import datetime

import pytest

from task_planner.clock import fixed_clock

# Keep the API layer on local parsing regardless of the developer's environment.
os.environ["PLANNER_LLM_PROVIDER"] = "none"

NOW = datetime(2026, 3, 2, 9, 0)


class FakeProvider:
    name = "fake"

    def __init__(self, response_text: str):
        self._response_text = response_text
        self.calls = []

    def generate(self, *, system: str, user: str) -> str:
        self.calls.append({"system": system, "user": user})
        return self._response_text


class RaisingProvider:
    name = "raising"

    def __init__(self, error: Exception):
        self._error = error

    def generate(self, *, system: str, user: str) -> str:
        raise self._error


@pytest.fixture
def fake_provider_factory():
    def _make(response_text: str):
        return FakeProvider(response_text)
    return _make


@pytest.fixture
def raising_provider_factory():
    def _make(error: Exception):
        return RaisingProvider(error)
    return _make


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return fixed_clock(NOW)
