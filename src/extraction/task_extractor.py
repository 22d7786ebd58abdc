from __future__ import annotations

import logging
from typing import Optional

from extraction.strategies import (
    ExternalParsingStrategy,
    FallbackParsingStrategy,
    LocalHeuristicStrategy,
    ParsingStrategy,
)
from llm.llm_client import LLMClient
from llm.providers.factory import build_provider
from task_planner.clock import Clock, system_clock
from task_planner.config import LLMConfig
from task_planner.models import FreeformParseResult

logger = logging.getLogger(__name__)


class FreeformParser:
    """Turns free-form notes into InferredTasks using a parsing strategy."""

    def __init__(self, strategy: Optional[ParsingStrategy] = None, clock: Clock = system_clock):
        self.strategy = strategy or LocalHeuristicStrategy(clock=clock)

    @classmethod
    def from_config(cls, config: LLMConfig, clock: Clock = system_clock) -> "FreeformParser":
        """Use the language model when a credential is configured, local heuristics otherwise."""
        local = LocalHeuristicStrategy(clock=clock)
        if not config.enabled:
            logger.info(f"No usable '{config.provider}' credential configured; using local parsing only")
            return cls(strategy=local)

        client = LLMClient(provider=build_provider(config))
        external = ExternalParsingStrategy(client, clock=clock)
        return cls(strategy=FallbackParsingStrategy(external, local))

    def parse(self, text: str) -> FreeformParseResult:
        if not text or not text.strip():
            return FreeformParseResult(confidence="low")
        return self.strategy.parse(text)

    # alias matching the inbound interface name
    parse_freeform = parse
