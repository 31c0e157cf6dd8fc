"""Scoring and gate-mapping policy.

Two independent pure functions:

    score_readiness(flags)      ->  readiness in [0, 1]
    gate_from_readiness(score)  ->  Gate

Scoring starts at 1.0 and subtracts a fixed penalty per active reason:

    readiness = clamp(1.0 - sum(penalty[f] for f in active flags), 0.0, 1.0)

Gate mapping is a threshold ladder:

    readiness >= allow    ->  ALLOW
    readiness >= caution  ->  CAUTION
    otherwise             ->  BLOCK

Penalties and thresholds are policy constants, never learned.  They may be
tuned per deployment without changing the engine's contract.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from phase_readiness.domain.flags import ReasonFlag
from phase_readiness.domain.gate import Gate


@dataclass(frozen=True)
class PenaltyWeights:
    """Readiness penalty subtracted for each active reason."""

    temp_out_of_range: float = 0.60
    gradient_too_high: float = 0.60
    hysteresis_high: float = 0.70
    coherence_low: float = 0.30
    persistent_heating: float = 0.20
    persistent_cooling: float = 0.10

    def __post_init__(self) -> None:
        for name, value in self.by_flag().items():
            if not math.isfinite(value) or value < 0.0:
                raise ValueError(f"penalty for {name.name} must be a finite, non-negative number")

    def by_flag(self) -> dict[ReasonFlag, float]:
        return {
            ReasonFlag.TEMP_OUT_OF_RANGE: self.temp_out_of_range,
            ReasonFlag.GRADIENT_TOO_HIGH: self.gradient_too_high,
            ReasonFlag.HYSTERESIS_HIGH: self.hysteresis_high,
            ReasonFlag.COHERENCE_LOW: self.coherence_low,
            ReasonFlag.PERSISTENT_HEATING: self.persistent_heating,
            ReasonFlag.PERSISTENT_COOLING: self.persistent_cooling,
        }


@dataclass(frozen=True)
class GateThresholds:
    """Lower readiness bounds for the ALLOW and CAUTION gates."""

    allow: float = 0.80
    caution: float = 0.40

    def __post_init__(self) -> None:
        if not (0.0 <= self.caution <= self.allow <= 1.0):
            raise ValueError("gate thresholds must satisfy 0 <= caution <= allow <= 1")


def clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)


def score_readiness(flags: int, weights: PenaltyWeights | None = None) -> float:
    """Deterministic readiness score for a set of active reasons."""
    w = weights or PenaltyWeights()
    readiness = 1.0
    for flag, penalty in w.by_flag().items():
        if flags & flag:
            readiness -= penalty
    return clamp01(readiness)


def gate_from_readiness(readiness: float, thresholds: GateThresholds | None = None) -> Gate:
    """Map a readiness score onto the three-state gate."""
    th = thresholds or GateThresholds()
    if readiness >= th.allow:
        return Gate.ALLOW
    if readiness >= th.caution:
        return Gate.CAUTION
    # NaN falls through every comparison and lands here
    return Gate.BLOCK
