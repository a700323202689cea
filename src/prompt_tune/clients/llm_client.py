"""Claude API wrapper with async support and tool-forced structured output."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import anthropic

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata.

    ``data`` holds the tool input when the reply was a forced tool call,
    ``text`` any plain text blocks the model produced instead.
    """

    text: str
    input_tokens: int
    output_tokens: int
    data: dict | None = None


class LLMClient:
    """Async Claude API client.

    Retries are off by default: a failed call surfaces to the caller at once.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        max_retries: int = 0,
    ):
        kwargs: dict = {"max_retries": max_retries}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    async def generate(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        """Send a prompt to Claude and return the text response with usage."""
        return await self._create(
            prompt=prompt,
            system=system,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    async def generate_structured(
        self,
        prompt: str,
        schema: dict,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 4096,
        tool_name: str = "submit_result",
    ) -> LLMResponse:
        """Send a prompt and force the reply through a single tool call.

        The tool's ``input_schema`` is ``schema``, so ``response.data`` is the
        schema-shaped object when the model complied.
        """
        tool = {
            "name": tool_name,
            "description": "Return the complete structured result.",
            "input_schema": schema,
        }
        return await self._create(
            prompt=prompt,
            system=system,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            tools=[tool],
            tool_choice={"type": "tool", "name": tool_name},
        )

    async def _create(
        self,
        prompt: str,
        system: str,
        model: str,
        temperature: float,
        max_tokens: int,
        **extra,
    ) -> LLMResponse:
        logger.debug("LLM call: model=%s", model)
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
            **extra,
        }
        if system:
            kwargs["system"] = system
        try:
            message = await self.client.messages.create(**kwargs)
        except Exception:
            logger.error("LLM call failed", exc_info=True)
            raise

        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        self._token_log.append((model, input_tokens, output_tokens))

        texts: list[str] = []
        data: dict | None = None
        for block in message.content or []:
            if block.type == "tool_use" and data is None:
                data = dict(block.input)
            elif block.type == "text":
                texts.append(block.text)

        return LLMResponse(
            text="".join(texts),
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            data=data,
        )

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
