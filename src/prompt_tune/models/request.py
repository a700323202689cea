"""Pydantic models for an optimization request."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, field_validator


class PromptStyle(str, Enum):
    PROFESSIONAL = "professional"
    CREATIVE = "creative"
    ACADEMIC = "academic"
    TECHNICAL = "technical"
    DIRECT = "direct"

    @property
    def label(self) -> str:
        return _STYLE_LABELS[self]


class ComplexityLevel(str, Enum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"

    @property
    def label(self) -> str:
        return _COMPLEXITY_LABELS[self]


_STYLE_LABELS: dict[PromptStyle, str] = {
    PromptStyle.PROFESSIONAL: "Professional",
    PromptStyle.CREATIVE: "Creative",
    PromptStyle.ACADEMIC: "Academic",
    PromptStyle.TECHNICAL: "Technical (Code)",
    PromptStyle.DIRECT: "Direct & Concise",
}

_COMPLEXITY_LABELS: dict[ComplexityLevel, str] = {
    ComplexityLevel.SIMPLE: "Simple",
    ComplexityLevel.MODERATE: "Moderate",
    ComplexityLevel.COMPLEX: "Complex (Chain-of-Thought)",
}


class OptimizationRequest(BaseModel):
    input_prompt: str
    style: PromptStyle = PromptStyle.PROFESSIONAL
    complexity: ComplexityLevel = ComplexityLevel.MODERATE

    model_config = {"frozen": True}

    @field_validator("input_prompt")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("input_prompt must not be blank")
        return value
