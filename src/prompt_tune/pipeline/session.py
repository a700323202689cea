"""Optimization session - view state plus the submit / replace / append actions."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from prompt_tune.errors import (
    GENERIC_ERROR_MESSAGE,
    INTERRUPTED_MESSAGE,
    ConfigurationError,
    PromptTuneError,
)
from prompt_tune.models.request import ComplexityLevel, OptimizationRequest, PromptStyle
from prompt_tune.models.result import OptimizationResult
from prompt_tune.models.stage import PipelineStage
from prompt_tune.pipeline.optimizer import PromptOptimizer
from prompt_tune.pipeline.stage_sequencer import StageSequencer

logger = logging.getLogger(__name__)


class OptimizationSession:
    """Observable state container for one view.

    Every transition replaces state wholesale and then calls each subscribed
    listener with the session, so a view can re-render from scratch.
    """

    def __init__(
        self,
        optimizer: PromptOptimizer,
        sequencer: StageSequencer | None = None,
        *,
        input_text: str = "",
        style: PromptStyle = PromptStyle.PROFESSIONAL,
        complexity: ComplexityLevel = ComplexityLevel.MODERATE,
    ):
        self.optimizer = optimizer
        self.sequencer = sequencer or StageSequencer()
        self.input_text = input_text
        self.style = style
        self.complexity = complexity
        self.stage = PipelineStage.IDLE
        self.result: OptimizationResult | None = None
        self.error: str | None = None
        self.elapsed_seconds = 0.0
        self._listeners: list[Callable[[OptimizationSession], None]] = []

    def subscribe(self, listener: Callable[[OptimizationSession], None]) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _set_stage(self, stage: PipelineStage) -> None:
        self.stage = stage
        self._notify()

    @property
    def is_busy(self) -> bool:
        return not self.stage.is_settled

    @property
    def can_submit(self) -> bool:
        return not self.is_busy and bool(self.input_text.strip())

    @property
    def visible_result(self) -> OptimizationResult | None:
        """The result, but only while the stage is COMPLETE."""
        if self.stage is PipelineStage.COMPLETE:
            return self.result
        return None

    async def submit(self) -> OptimizationResult | None:
        """Run one optimization: remote call and stage animation, joined.

        Blank input or a submission already in flight makes this a no-op.
        Failures never propagate; they set ``error`` and the ERROR stage.
        """
        if not self.input_text.strip():
            return None
        if self.is_busy:
            logger.warning("Submission ignored: another one is in flight (stage=%s)", self.stage.value)
            return None

        request = OptimizationRequest(
            input_prompt=self.input_text,
            style=self.style,
            complexity=self.complexity,
        )
        self.result = None
        self.error = None
        start = time.monotonic()

        # Both run at once; the result surfaces only after the animation ends
        api_task = asyncio.ensure_future(self.optimizer.optimize(request))
        try:
            await self.sequencer.run(self._set_stage)
            result = await api_task
        except ConfigurationError as e:
            self._fail(str(e), start)
            return None
        except PromptTuneError as e:
            logger.warning("Optimization failed: %s", e)
            self._fail(GENERIC_ERROR_MESSAGE, start)
            return None
        except Exception:
            logger.exception("Unexpected error during optimization")
            self._fail(GENERIC_ERROR_MESSAGE, start)
            return None
        except BaseException:
            if self.is_busy:
                self._abandon(api_task, start)
            raise

        self.result = result
        self.elapsed_seconds = time.monotonic() - start
        self._set_stage(PipelineStage.COMPLETE)
        return result

    def _fail(self, message: str, start: float) -> None:
        self.result = None
        self.error = message
        self.elapsed_seconds = time.monotonic() - start
        self._set_stage(PipelineStage.ERROR)

    def _abandon(self, api_task: asyncio.Future, start: float) -> None:
        """Settle a run torn down mid-flight (e.g. a listener raised BaseException).

        Listeners are not notified: the exception unwinding through here may
        have come from one of them.
        """
        logger.warning("Submission interrupted at stage %s", self.stage.value)
        if api_task.done():
            if not api_task.cancelled():
                api_task.exception()
        else:
            api_task.cancel()
        self.result = None
        self.error = INTERRUPTED_MESSAGE
        self.elapsed_seconds = time.monotonic() - start
        self.stage = PipelineStage.ERROR

    def replace_input(self, text: str) -> None:
        self.input_text = text
        self._notify()

    def append_input(self, text: str) -> None:
        self.input_text = append_text(self.input_text, text)
        self._notify()


def append_text(original: str, addition: str) -> str:
    """Join ``addition`` after ``original`` with a blank line."""
    previous = original.strip()
    if not previous:
        return addition
    return f"{previous}\n\n{addition}"
