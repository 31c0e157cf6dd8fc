"""Simulated telemetry for demos and local runs.

Produces a slow sinusoidal temperature around a base value, a fixed ambient
reference, and optional indicators that are supplied on seven of every ten
cycles and left unset (NaN) otherwise.  Deterministic for a given set of
arguments.
"""

from __future__ import annotations

import asyncio
import math
from typing import AsyncIterator

from phase_readiness.domain.signal import SignalSnapshot


def simulated_signal(
    cycle: int,
    step_s: float = 0.1,
    base_temperature: float = 25.0,
    amplitude: float = 2.0,
    ambient_temperature: float = 22.0,
) -> SignalSnapshot:
    t = cycle * step_s
    hysteresis = math.nan
    coherence = math.nan
    if cycle % 10 < 7:
        coherence = 0.5 + 0.3 * math.sin(t * 0.3)
        hysteresis = 0.3 + 0.2 * math.sin(t * 0.2)
    return SignalSnapshot(
        t=t,
        temperature=base_temperature + amplitude * math.sin(t * 0.5),
        ambient_temperature=ambient_temperature,
        hysteresis_index=hysteresis,
        coherence_index=coherence,
        valid=True,
    )


async def simulated_telemetry(
    step_s: float = 0.1,
    base_temperature: float = 25.0,
    amplitude: float = 2.0,
    realtime: bool = True,
    limit: int | None = None,
) -> AsyncIterator[SignalSnapshot]:
    """Yield simulated samples, sleeping *step_s* between them if *realtime*."""
    cycle = 0
    while limit is None or cycle < limit:
        yield simulated_signal(cycle, step_s, base_temperature, amplitude)
        cycle += 1
        if realtime:
            await asyncio.sleep(step_s)
