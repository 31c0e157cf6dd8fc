"""TelemetryLoop — drives samples through the engine and into the store.

One loop per engine.  The loop is the store's single writer; it evaluates
each sample synchronously, records the pair, and logs gate transitions.

No decisions are made here.  The engine decides, the store remembers.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator

from phase_readiness.core.readiness_engine import ReadinessEngine
from phase_readiness.domain.gate import Gate
from phase_readiness.domain.readiness import ReadinessOutput
from phase_readiness.domain.signal import SignalSnapshot
from phase_readiness.store.readiness_store import ReadinessStore

logger = logging.getLogger(__name__)


class TelemetryLoop:
    """Feeds a telemetry stream through a ReadinessEngine into a ReadinessStore.

    Args:
        engine: The engine that evaluates each sample.
        store: Where each signal/output pair is recorded.
        log_every: Emit a summary line every N samples (0 disables it).
    """

    def __init__(
        self,
        engine: ReadinessEngine,
        store: ReadinessStore,
        log_every: int = 10,
    ) -> None:
        self._engine = engine
        self._store = store
        self._log_every = log_every
        self._samples = 0
        self._last_gate: Gate | None = None

    @property
    def samples(self) -> int:
        return self._samples

    async def step(self, signal: SignalSnapshot) -> ReadinessOutput:
        """Evaluate one sample and record it."""
        output = self._engine.evaluate(signal)
        await self._store.update(signal, output)

        if output.gate != self._last_gate:
            logger.info(
                "Gate %s -> %s at t=%.3f (readiness=%.3f, reasons=%s)",
                self._last_gate.value if self._last_gate else "-",
                output.gate.value,
                signal.t,
                output.readiness,
                ",".join(output.reasons) or "none",
            )
            self._last_gate = output.gate

        if self._log_every and self._samples % self._log_every == 0:
            logger.debug(
                "t=%.1fs T=%.2f R=%.3f gate=%s flags=%d",
                signal.t,
                signal.temperature,
                output.readiness,
                output.gate.value,
                output.flags,
            )
        self._samples += 1
        return output

    async def run(self, source: AsyncIterator[SignalSnapshot]) -> int:
        """Consume *source* until it is exhausted or the task is cancelled.

        Returns the number of samples processed by this call.
        """
        start = self._samples
        try:
            async for signal in source:
                await self.step(signal)
        except asyncio.CancelledError:
            logger.info("Telemetry loop cancelled after %d sample(s)", self._samples - start)
            raise
        logger.info("Telemetry source exhausted after %d sample(s)", self._samples - start)
        return self._samples - start
