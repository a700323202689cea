"""Remote Call Adapter - one schema-constrained call to the remote model."""

from __future__ import annotations

import logging
import os

import anthropic
from pydantic import ValidationError

from prompt_tune.clients.llm_client import DEFAULT_MODEL, LLMClient
from prompt_tune.config import AppConfig
from prompt_tune.errors import (
    GENERIC_ERROR_MESSAGE,
    ConfigurationError,
    MalformedResponseError,
    RemoteError,
)
from prompt_tune.models.request import OptimizationRequest
from prompt_tune.models.result import OptimizationResult
from prompt_tune.pipeline.request_builder import build_request
from prompt_tune.utils.cost_calculator import calculate_cost
from prompt_tune.utils.json_parser import extract_json

logger = logging.getLogger(__name__)

EXPECTED_VARIANTS = 3


class PromptOptimizer:
    """Turns an OptimizationRequest into an OptimizationResult.

    The LLM client is built lazily on the first call so that a missing
    credential fails that call with ConfigurationError rather than at import.
    """

    def __init__(
        self,
        llm: LLMClient | None = None,
        *,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        timeout: float | None = None,
        output_language: str = "Uzbek",
        api_key: str | None = None,
        api_key_env: str = "ANTHROPIC_API_KEY",
    ):
        self.llm = llm
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.output_language = output_language
        self.api_key = api_key
        self.api_key_env = api_key_env
        self.last_usage: dict | None = None

    @classmethod
    def from_config(cls, config: AppConfig, api_key: str | None = None) -> PromptOptimizer:
        return cls(
            model=config.llm.model,
            temperature=config.llm.temperature,
            max_tokens=config.llm.max_tokens,
            timeout=config.llm.timeout,
            output_language=config.pipeline.output_language,
            api_key=api_key,
            api_key_env=config.llm.api_key_env,
        )

    def _client(self) -> LLMClient:
        if self.llm is None:
            api_key = self.api_key or os.environ.get(self.api_key_env, "").strip()
            if not api_key:
                raise ConfigurationError(
                    f"API key is not available. Please check the {self.api_key_env} environment variable."
                )
            self.llm = LLMClient(api_key=api_key, timeout=self.timeout)
        return self.llm

    async def optimize(self, request: OptimizationRequest) -> OptimizationResult:
        """Run one remote optimization call.

        Raises:
            ConfigurationError: no usable credential.
            RemoteError: the call raised or returned no content.
            MalformedResponseError: the content does not fit the schema.
        """
        llm = self._client()
        prepared = build_request(request, self.output_language)
        logger.info(
            "Optimizing prompt (%d chars, style=%s, complexity=%s)",
            len(request.input_prompt), request.style.value, request.complexity.value,
        )

        try:
            response = await llm.generate_structured(
                prompt=prepared.prompt,
                schema=prepared.schema,
                system=prepared.system,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except anthropic.AuthenticationError as e:
            raise ConfigurationError(
                f"API key was rejected. Please check the {self.api_key_env} environment variable."
            ) from e
        except Exception as e:
            raise RemoteError(GENERIC_ERROR_MESSAGE) from e

        self._record_usage(llm)

        data = response.data
        if data is None:
            if not response.text.strip():
                raise RemoteError("No response received from the model.")
            try:
                data = extract_json(response.text)
            except ValueError as e:
                raise MalformedResponseError("Model reply is not valid JSON.") from e

        return self._parse(data)

    def _record_usage(self, llm: LLMClient) -> None:
        summary = llm.get_token_summary()
        self.last_usage = {
            "input": summary["input"],
            "output": summary["output"],
            "cost_usd": calculate_cost(summary["calls"]),
        }

    @staticmethod
    def _parse(data: dict) -> OptimizationResult:
        try:
            result = OptimizationResult.model_validate(data)
        except ValidationError as e:
            raise MalformedResponseError(f"Model reply does not match the response schema: {e}") from e

        count = len(result.variants)
        if count == 0:
            raise MalformedResponseError("Model reply contains no variants.")
        if count > EXPECTED_VARIANTS:
            logger.warning(
                "LLM returned %d variants, expected %d; keeping the first %d",
                count, EXPECTED_VARIANTS, EXPECTED_VARIANTS,
            )
            result = result.model_copy(update={"variants": result.variants[:EXPECTED_VARIANTS]})
        elif count < EXPECTED_VARIANTS:
            logger.warning("LLM returned %d variants, expected %d", count, EXPECTED_VARIANTS)
        return result
