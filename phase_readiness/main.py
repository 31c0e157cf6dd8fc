"""phase-readiness — deterministic readiness gating with read-only observability.

This is the application entry point.  It wires the ReadinessEngine,
ReadinessStore, TelemetryLoop and read-only endpoints together.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import AsyncIterator

from fastapi import FastAPI

from phase_readiness.api.readiness import create_readiness_router
from phase_readiness.config import settings
from phase_readiness.core.readiness_engine import ReadinessConfig, ReadinessEngine
from phase_readiness.services.simulation import simulated_telemetry
from phase_readiness.services.telemetry_loop import TelemetryLoop
from phase_readiness.store.readiness_store import ReadinessStore

__version__ = "1.0.0"

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

# ── Readiness Engine ─────────────────────────────────────────────────────────

readiness_config = ReadinessConfig(
    temp_min=settings.temp_min,
    temp_max=settings.temp_max,
    max_abs_derivative=settings.max_abs_derivative,
    max_temp_jump=settings.max_temp_jump,
    ewma_alpha=settings.ewma_alpha,
    persistence_s=settings.persistence_s,
    hysteresis_block_threshold=settings.hysteresis_block_threshold,
    coherence_allow_threshold=settings.coherence_allow_threshold,
    max_sample_gap_s=settings.max_sample_gap_s,
)
engine = ReadinessEngine(readiness_config)

# ── State ────────────────────────────────────────────────────────────────────

store = ReadinessStore(max_history=settings.history_size)
loop = TelemetryLoop(engine, store, log_every=settings.loop_log_every)

# ── Lifespan ─────────────────────────────────────────────────────────────────


@contextlib.asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    logger.info("Readiness policy: %s", readiness_config.as_dict())
    task: asyncio.Task | None = None
    if settings.simulate:
        logger.info("Starting simulated telemetry (step=%.3fs)", settings.simulation_step_s)
        task = asyncio.create_task(loop.run(simulated_telemetry(
            step_s=settings.simulation_step_s,
            base_temperature=settings.simulation_base_temperature,
            amplitude=settings.simulation_amplitude,
        )))
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


# ── App ──────────────────────────────────────────────────────────────────────

app = FastAPI(
    title=settings.app_name,
    description="Deterministic phase-readiness gating (read-only observability API)",
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)

# ── Routes ───────────────────────────────────────────────────────────────────

app.include_router(create_readiness_router(store))


# ── Health ───────────────────────────────────────────────────────────────────

@app.get("/health")
async def health() -> dict:
    return {
        "status": "ok",
        "service": settings.app_name,
        "version": __version__,
        "history_size": await store.size(),
        "max_history": store.max_history,
        "total_updates": store.total_updates,
        "samples_processed": loop.samples,
    }
