"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from prompt_tune.clients.llm_client import LLMClient, LLMResponse
from prompt_tune.models.result import OptimizationResult
from prompt_tune.pipeline.optimizer import PromptOptimizer
from prompt_tune.pipeline.stage_sequencer import StageSequencer


@pytest.fixture
def sample_result_json() -> dict:
    return {
        "originalAnalysis": {
            "grammarIssues": ["'abot' should be 'about'"],
            "clarityScore": 42,
            "intentDetected": "Write a blog post about coffee",
        },
        "variants": [
            {
                "title": "Improved",
                "content": "Write a blog post about coffee.",
                "reasoning": "Fixes spelling and ends the sentence cleanly.",
                "tags": ["clean", "short"],
            },
            {
                "title": "Expanded",
                "content": "You are a food writer. Write an 800-word blog post about specialty coffee for beginners.",
                "reasoning": "Adds a persona, audience and length constraint.",
                "tags": ["persona", "constraints"],
            },
            {
                "title": "Structured",
                "content": "Context: ...\nObjective: ...\nStyle: ...\nTone: ...\nAudience: ...\nResponse: ...",
                "reasoning": "Uses the CO-STAR framework.",
                "tags": ["CO-STAR"],
            },
        ],
    }


@pytest.fixture
def sample_result(sample_result_json) -> OptimizationResult:
    return OptimizationResult.model_validate(sample_result_json)


@pytest.fixture
def mock_llm_client(sample_result_json) -> LLMClient:
    """Create a mock LLM client answering with a forced tool call."""
    client = AsyncMock(spec=LLMClient)
    client.generate_structured = AsyncMock(
        return_value=LLMResponse(
            text="", input_tokens=100, output_tokens=50, data=sample_result_json,
        )
    )
    client.get_token_summary = lambda: {
        "input": 100,
        "output": 50,
        "calls": [("claude-haiku-4-5-20251001", 100, 50)],
    }
    return client


@pytest.fixture
def mock_optimizer(sample_result) -> PromptOptimizer:
    optimizer = AsyncMock(spec=PromptOptimizer)
    optimizer.optimize = AsyncMock(return_value=sample_result)
    optimizer.last_usage = None
    return optimizer


@pytest.fixture
def recorded_sleeps() -> list[float]:
    return []


@pytest.fixture
def instant_sequencer(recorded_sleeps) -> StageSequencer:
    """Sequencer whose delays are recorded instead of slept."""

    async def _sleep(delay: float) -> None:
        recorded_sleeps.append(delay)

    return StageSequencer(sleep=_sleep)
