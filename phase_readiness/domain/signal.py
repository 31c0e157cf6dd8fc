"""SignalSnapshot — one telemetry sample handed to the readiness engine.

The physics/biology layer upstream provides these values.  This model does
not validate, interpret, or modify the physical model behind them: non-finite
floats are accepted at the boundary and mean "unavailable".  The engine
decides what to do with them.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field

_NAN = math.nan


class SignalSnapshot(BaseModel):
    """Immutable telemetry snapshot for a single evaluation call."""

    t: float = Field(..., description="Monotonic timestamp in seconds")
    temperature: float = Field(
        default=_NAN,
        description="Absolute temperature or thermal proxy (non-finite = unavailable)",
    )
    ambient_temperature: float = Field(
        default=_NAN,
        description="Optional ambient reference, carried through for observability only",
    )
    hysteresis_index: float = Field(
        default=_NAN,
        description="Optional 0..1 indicator, higher = more hysteresis (non-finite = not supplied)",
    )
    coherence_index: float = Field(
        default=_NAN,
        description="Optional 0..1 indicator, higher = more coherent (non-finite = not supplied)",
    )
    valid: bool = Field(default=False, description="Upstream data-quality flag")

    model_config = {"frozen": True}
