"""Read-only REST endpoints over the readiness store.

Paths (GET only):
    /api/readiness      current readiness, gate, flags
    /api/thermal        temperature, ambient, gradient, trend
    /api/history        recent samples, oldest first
    /api/phase_context  optional indicators and trend
    /api/diagnostics    per-reason flag breakdown

Observability only: nothing here can change engine state.  Non-finite
numbers are reported as JSON null.
"""

from __future__ import annotations

import math
from typing import Any

from fastapi import APIRouter, Query

from phase_readiness.domain.flags import describe_flags, flag_names
from phase_readiness.store.readiness_store import ReadinessStore


def _finite_or_none(x: float) -> float | None:
    return x if math.isfinite(x) else None


def create_readiness_router(store: ReadinessStore) -> APIRouter:
    """Factory that wires the read-only endpoints to a concrete store."""

    router = APIRouter(prefix="/api", tags=["readiness"])

    @router.get("/readiness")
    async def readiness() -> dict[str, Any]:
        rec = await store.current()
        return {
            "readiness": rec.readiness,
            "gate": rec.gate.value,
            "timestamp_s": _finite_or_none(rec.t),
            "flags": rec.flags,
            "stability_score": rec.stability_score,
        }

    @router.get("/thermal")
    async def thermal() -> dict[str, Any]:
        rec = await store.current()
        return {
            "temperature": _finite_or_none(rec.temperature),
            "ambient": _finite_or_none(rec.ambient_temperature),
            "gradient_per_s": rec.derivative,
            "trend": rec.trend,
            "timestamp_s": _finite_or_none(rec.t),
        }

    @router.get("/history")
    async def history(
        limit: int | None = Query(default=None, ge=0, description="Maximum samples (default: store capacity)"),
    ) -> dict[str, Any]:
        records = await store.history(store.max_history if limit is None else limit)
        return {
            "count": len(records),
            "samples": [
                {
                    "timestamp_s": _finite_or_none(r.t),
                    "recorded_at": r.recorded_at.isoformat(),
                    "readiness": r.readiness,
                    "gate": r.gate.value,
                    "flags": r.flags,
                    "temperature": _finite_or_none(r.temperature),
                    "gradient_per_s": r.derivative,
                }
                for r in records
            ],
        }

    @router.get("/phase_context")
    async def phase_context() -> dict[str, Any]:
        rec = await store.current()
        return {
            "hysteresis_index": _finite_or_none(rec.hysteresis_index),
            "coherence_index": _finite_or_none(rec.coherence_index),
            "gradient_persistence": rec.trend,
            "gate": rec.gate.value,
            "timestamp_s": _finite_or_none(rec.t),
        }

    @router.get("/diagnostics")
    async def diagnostics() -> dict[str, Any]:
        rec = await store.current()
        return {
            "flags": rec.flags,
            "flag_meanings": describe_flags(rec.flags),
            "reasons": flag_names(rec.flags),
            "readiness": rec.readiness,
            "gate": rec.gate.value,
            "stability_score": rec.stability_score,
            "timestamp_s": _finite_or_none(rec.t),
        }

    return router
