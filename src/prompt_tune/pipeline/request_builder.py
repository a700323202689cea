"""Request Builder - instruction template and response schema for the remote model."""

from __future__ import annotations

from dataclasses import dataclass

from prompt_tune.models.request import OptimizationRequest, PromptStyle

SYSTEM_TEMPLATE = """\
You are an expert in prompt engineering and in optimization pipelines for large language models.
Your goal is to take the user's raw input and turn it into a high-quality, effective prompt for an LLM.

Internally, work through the following steps:
1. **Input preprocessing**: analyze the input for grammar, ambiguity and spelling mistakes.
2. **Core optimization**: rewrite the prompt applying best practices (persona adoption, explicit constraints, output formatting) in this style: "{style}".
3. **Version generation**: produce exactly 3 distinct variants of the optimized prompt.
    - Variant 1: "Improved" (clean, corrected, slightly better than the original).
    - Variant 2: "Expanded" (detailed, adds context and constraints).
    - Variant 3: "Structured" (uses a specific framework such as CO-STAR or Chain-of-Thought).

Return the result strictly as a structured JSON object. All generated text (analysis, prompt variants, reasoning) must be written in {language}."""

RESPONSE_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "originalAnalysis": {
            "type": "object",
            "properties": {
                "grammarIssues": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Grammar or spelling issues found. If there are none, return ['None'].",
                },
                "clarityScore": {
                    "type": "number",
                    "description": "Score from 0 to 100, where 100 is perfect clarity.",
                },
                "intentDetected": {
                    "type": "string",
                    "description": "Short summary of the user's detected intent.",
                },
            },
            "required": ["grammarIssues", "clarityScore", "intentDetected"],
        },
        "variants": {
            "type": "array",
            "description": "Exactly 3 optimized prompt variants.",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "content": {"type": "string"},
                    "reasoning": {
                        "type": "string",
                        "description": "Brief explanation of why this optimization is effective.",
                    },
                    "tags": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["title", "content", "reasoning", "tags"],
            },
        },
    },
    "required": ["originalAnalysis", "variants"],
}


@dataclass(frozen=True)
class PreparedRequest:
    """Everything the remote call needs, built once per submission."""

    system: str
    prompt: str
    schema: dict


def build_system_instruction(style: PromptStyle, output_language: str) -> str:
    return SYSTEM_TEMPLATE.format(style=style.label, language=output_language.upper())


def build_user_prompt(request: OptimizationRequest) -> str:
    return f"""Analyze and optimize the following user prompt:
"{request.input_prompt}"

Complexity level: {request.complexity.label}
Target style: {request.style.label}"""


def build_request(request: OptimizationRequest, output_language: str) -> PreparedRequest:
    """Assemble instruction, prompt and schema for one optimization call."""
    return PreparedRequest(
        system=build_system_instruction(request.style, output_language),
        prompt=build_user_prompt(request),
        schema=RESPONSE_SCHEMA,
    )
