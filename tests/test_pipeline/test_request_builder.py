"""Tests for the request builder."""

from prompt_tune.models.request import ComplexityLevel, OptimizationRequest, PromptStyle
from prompt_tune.pipeline.request_builder import (
    RESPONSE_SCHEMA,
    build_request,
    build_system_instruction,
    build_user_prompt,
)


class TestRequestBuilder:
    def test_system_instruction_names_style_and_language(self):
        system = build_system_instruction(PromptStyle.ACADEMIC, "Uzbek")
        assert '"Academic"' in system
        assert "UZBEK" in system
        assert "exactly 3" in system

    def test_user_prompt_embeds_input_and_choices(self):
        request = OptimizationRequest(
            input_prompt="write about coffee",
            style=PromptStyle.TECHNICAL,
            complexity=ComplexityLevel.COMPLEX,
        )
        prompt = build_user_prompt(request)
        assert '"write about coffee"' in prompt
        assert "Complex (Chain-of-Thought)" in prompt
        assert "Technical (Code)" in prompt

    def test_schema_requires_every_field(self):
        assert RESPONSE_SCHEMA["required"] == ["originalAnalysis", "variants"]
        analysis = RESPONSE_SCHEMA["properties"]["originalAnalysis"]
        assert set(analysis["required"]) == {"grammarIssues", "clarityScore", "intentDetected"}
        variant = RESPONSE_SCHEMA["properties"]["variants"]["items"]
        assert set(variant["required"]) == {"title", "content", "reasoning", "tags"}

    def test_build_request_bundles_parts(self):
        request = OptimizationRequest(input_prompt="hello", style=PromptStyle.DIRECT)
        prepared = build_request(request, "English")
        assert prepared.schema is RESPONSE_SCHEMA
        assert "Direct & Concise" in prepared.system
        assert "ENGLISH" in prepared.system
        assert '"hello"' in prepared.prompt
