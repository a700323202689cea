"""Stage Sequencer - scripted walk through the displayed pipeline stages."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from prompt_tune.models.stage import SEQUENCE, PipelineStage

DEFAULT_DELAYS: tuple[float, ...] = (0.8, 1.0, 0.8, 0.6)


class StageSequencer:
    """Advances the visible stage on fixed timers.

    Purely cosmetic: it carries no data, does not observe the remote call and
    cannot fail.
    """

    def __init__(
        self,
        delays: tuple[float, ...] = DEFAULT_DELAYS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if len(delays) != len(SEQUENCE):
            raise ValueError(f"Expected {len(SEQUENCE)} delays, got {len(delays)}")
        self.delays = tuple(delays)
        self._sleep = sleep

    @property
    def total_delay(self) -> float:
        return sum(self.delays)

    async def run(self, on_stage: Callable[[PipelineStage], None]) -> None:
        for stage, delay in zip(SEQUENCE, self.delays):
            on_stage(stage)
            await self._sleep(delay)
