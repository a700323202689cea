"""Tests for the remote call adapter."""

from unittest.mock import AsyncMock, patch

import anthropic
import httpx
import pytest

from prompt_tune.clients.llm_client import LLMResponse
from prompt_tune.config import AppConfig, LLMConfig, PipelineConfig
from prompt_tune.errors import ConfigurationError, MalformedResponseError, RemoteError
from prompt_tune.models.request import ComplexityLevel, OptimizationRequest, PromptStyle
from prompt_tune.pipeline.optimizer import PromptOptimizer
from prompt_tune.pipeline.request_builder import RESPONSE_SCHEMA


@pytest.fixture
def request_():
    return OptimizationRequest(
        input_prompt="write abot coffee",
        style=PromptStyle.CREATIVE,
        complexity=ComplexityLevel.SIMPLE,
    )


def _respond(mock_llm_client, *, data=None, text=""):
    mock_llm_client.generate_structured.return_value = LLMResponse(
        text=text, input_tokens=10, output_tokens=5, data=data,
    )


class TestOptimize:
    async def test_returns_parsed_result(self, mock_llm_client, request_):
        optimizer = PromptOptimizer(mock_llm_client, output_language="English")
        result = await optimizer.optimize(request_)

        assert len(result.variants) == 3
        assert result.original_analysis.clarity_score == 42
        mock_llm_client.generate_structured.assert_awaited_once()
        kwargs = mock_llm_client.generate_structured.call_args.kwargs
        assert kwargs["schema"] is RESPONSE_SCHEMA
        assert "Creative" in kwargs["system"]
        assert "ENGLISH" in kwargs["system"]
        assert "write abot coffee" in kwargs["prompt"]
        assert "Simple" in kwargs["prompt"]

    async def test_records_usage(self, mock_llm_client, request_):
        optimizer = PromptOptimizer(mock_llm_client)
        await optimizer.optimize(request_)
        assert optimizer.last_usage["input"] == 100
        assert optimizer.last_usage["output"] == 50
        assert optimizer.last_usage["cost_usd"] > 0

    async def test_text_reply_falls_back_to_json_extraction(
        self, mock_llm_client, request_, sample_result_json,
    ):
        import json

        _respond(mock_llm_client, text=f"```json\n{json.dumps(sample_result_json)}\n```")
        result = await PromptOptimizer(mock_llm_client).optimize(request_)
        assert result.variants[0].title == "Improved"


class TestCredentials:
    async def test_missing_key_raises_configuration_error(self, monkeypatch, request_):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        optimizer = PromptOptimizer()
        with pytest.raises(ConfigurationError, match="ANTHROPIC_API_KEY"):
            await optimizer.optimize(request_)

    async def test_custom_env_name(self, monkeypatch, request_):
        monkeypatch.delenv("MY_KEY", raising=False)
        optimizer = PromptOptimizer(api_key_env="MY_KEY")
        with pytest.raises(ConfigurationError, match="MY_KEY"):
            await optimizer.optimize(request_)

    def test_client_built_from_environment(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")
        with patch("prompt_tune.pipeline.optimizer.LLMClient") as mock_cls:
            optimizer = PromptOptimizer(timeout=30)
            optimizer._client()
            optimizer._client()
        mock_cls.assert_called_once_with(api_key="env-key", timeout=30)

    def test_explicit_key_wins(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with patch("prompt_tune.pipeline.optimizer.LLMClient") as mock_cls:
            PromptOptimizer(api_key="explicit")._client()
        mock_cls.assert_called_once_with(api_key="explicit", timeout=None)

    def test_from_config(self):
        config = AppConfig(
            llm=LLMConfig(model="m", timeout=5, api_key_env="K"),
            pipeline=PipelineConfig(output_language="German"),
        )
        optimizer = PromptOptimizer.from_config(config)
        assert optimizer.model == "m"
        assert optimizer.timeout == 5
        assert optimizer.api_key_env == "K"
        assert optimizer.output_language == "German"


class TestFailures:
    async def test_remote_exception_becomes_remote_error(self, mock_llm_client, request_):
        mock_llm_client.generate_structured = AsyncMock(side_effect=ConnectionError("down"))
        with pytest.raises(RemoteError) as exc_info:
            await PromptOptimizer(mock_llm_client).optimize(request_)
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        mock_llm_client.generate_structured.assert_awaited_once()

    async def test_rejected_key_is_configuration_error(self, mock_llm_client, request_):
        response = httpx.Response(
            401, request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"),
        )
        mock_llm_client.generate_structured = AsyncMock(
            side_effect=anthropic.AuthenticationError(
                "invalid x-api-key", response=response, body=None,
            )
        )
        optimizer = PromptOptimizer(mock_llm_client, api_key_env="MY_KEY")

        with pytest.raises(ConfigurationError, match="MY_KEY") as exc_info:
            await optimizer.optimize(request_)
        assert isinstance(exc_info.value.__cause__, anthropic.AuthenticationError)

    async def test_empty_reply_is_remote_error(self, mock_llm_client, request_):
        _respond(mock_llm_client, text="   ")
        with pytest.raises(RemoteError):
            await PromptOptimizer(mock_llm_client).optimize(request_)

    async def test_unparseable_text_is_malformed(self, mock_llm_client, request_):
        _respond(mock_llm_client, text="Sorry, I cannot help with that.")
        with pytest.raises(MalformedResponseError):
            await PromptOptimizer(mock_llm_client).optimize(request_)

    async def test_schema_mismatch_is_malformed(self, mock_llm_client, request_, sample_result_json):
        del sample_result_json["originalAnalysis"]
        _respond(mock_llm_client, data=sample_result_json)
        with pytest.raises(MalformedResponseError):
            await PromptOptimizer(mock_llm_client).optimize(request_)

    async def test_zero_variants_is_malformed(self, mock_llm_client, request_, sample_result_json):
        sample_result_json["variants"] = []
        _respond(mock_llm_client, data=sample_result_json)
        with pytest.raises(MalformedResponseError):
            await PromptOptimizer(mock_llm_client).optimize(request_)


class TestVariantCount:
    async def test_extra_variants_truncated(self, mock_llm_client, request_, sample_result_json):
        extra = dict(sample_result_json["variants"][0], title="Fourth")
        sample_result_json["variants"].append(extra)
        _respond(mock_llm_client, data=sample_result_json)

        result = await PromptOptimizer(mock_llm_client).optimize(request_)

        assert [v.title for v in result.variants] == ["Improved", "Expanded", "Structured"]

    async def test_fewer_variants_accepted(self, mock_llm_client, request_, sample_result_json):
        sample_result_json["variants"] = sample_result_json["variants"][:1]
        _respond(mock_llm_client, data=sample_result_json)

        result = await PromptOptimizer(mock_llm_client).optimize(request_)

        assert len(result.variants) == 1
