"""ReadinessRecord — a signal/output pair merged for the history store.

This is a pure observability structure.  It is created once per update
and never mutated, so a reader can never see half of one sample and half
of another.
"""

from __future__ import annotations

import math
from datetime import datetime

from pydantic import BaseModel, Field

from phase_readiness.domain.gate import Gate
from phase_readiness.domain.readiness import ReadinessOutput
from phase_readiness.domain.signal import SignalSnapshot
from phase_readiness.foundation.clock import utc_now


class ReadinessRecord(BaseModel):
    """Immutable merged snapshot of one evaluated sample."""

    recorded_at: datetime = Field(..., description="UTC wall time at which the store accepted the sample")
    t: float = Field(..., description="Monotonic sample timestamp in seconds")
    readiness: float
    gate: Gate
    flags: int = 0
    temperature: float = math.nan
    ambient_temperature: float = math.nan
    derivative: float = 0.0
    trend: float = 0.0
    stability_score: float = 0.0
    hysteresis_index: float = math.nan
    coherence_index: float = math.nan

    model_config = {"frozen": True}

    @classmethod
    def initial(cls) -> "ReadinessRecord":
        """The record reported before any sample has been evaluated."""
        return cls(recorded_at=utc_now(), t=0.0, readiness=0.0, gate=Gate.BLOCK)

    @classmethod
    def merge(cls, signal: SignalSnapshot, output: ReadinessOutput) -> "ReadinessRecord":
        return cls(
            recorded_at=utc_now(),
            t=signal.t,
            readiness=output.readiness,
            gate=output.gate,
            flags=output.flags,
            temperature=signal.temperature,
            ambient_temperature=signal.ambient_temperature,
            derivative=output.derivative,
            trend=output.trend,
            stability_score=output.stability_score,
            hysteresis_index=signal.hysteresis_index,
            coherence_index=signal.coherence_index,
        )
