"""Data models for the prompt optimization client."""

from prompt_tune.models.request import ComplexityLevel, OptimizationRequest, PromptStyle
from prompt_tune.models.result import OptimizationResult, OptimizedVariant, OriginalAnalysis
from prompt_tune.models.stage import SEQUENCE, PipelineStage, StepStatus, step_status

__all__ = [
    "ComplexityLevel",
    "OptimizationRequest",
    "OptimizationResult",
    "OptimizedVariant",
    "OriginalAnalysis",
    "PipelineStage",
    "PromptStyle",
    "SEQUENCE",
    "StepStatus",
    "step_status",
]
