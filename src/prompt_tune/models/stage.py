"""Displayed pipeline stages and per-step status derivation."""

from __future__ import annotations

from enum import Enum


class PipelineStage(str, Enum):
    IDLE = "IDLE"
    PREPROCESSING = "PREPROCESSING"
    OPTIMIZING = "OPTIMIZING"
    GENERATING = "GENERATING"
    FORMATTING = "FORMATTING"
    COMPLETE = "COMPLETE"
    ERROR = "ERROR"

    @property
    def is_settled(self) -> bool:
        """True when no submission is in flight."""
        return self in (PipelineStage.IDLE, PipelineStage.COMPLETE, PipelineStage.ERROR)


# Scripted order walked by the stage sequencer
SEQUENCE: tuple[PipelineStage, ...] = (
    PipelineStage.PREPROCESSING,
    PipelineStage.OPTIMIZING,
    PipelineStage.GENERATING,
    PipelineStage.FORMATTING,
)

STEP_LABELS: dict[PipelineStage, tuple[str, str]] = {
    PipelineStage.PREPROCESSING: ("Preprocessing", "Spell check and normalization"),
    PipelineStage.OPTIMIZING: ("Core Optimizer", "Refinement and style"),
    PipelineStage.GENERATING: ("Version Builder", "Variant generation"),
    PipelineStage.FORMATTING: ("Formatter", "Structured output"),
}


class StepStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    ERROR = "error"


def step_status(current: PipelineStage, step: PipelineStage) -> StepStatus:
    """Status of one scripted step given the current displayed stage."""
    if current is PipelineStage.IDLE:
        return StepStatus.PENDING
    if current is PipelineStage.COMPLETE:
        return StepStatus.COMPLETED
    if current is PipelineStage.ERROR:
        return StepStatus.ERROR

    current_index = SEQUENCE.index(current)
    step_index = SEQUENCE.index(step)
    if step_index < current_index:
        return StepStatus.COMPLETED
    if step_index == current_index:
        return StepStatus.ACTIVE
    return StepStatus.PENDING
