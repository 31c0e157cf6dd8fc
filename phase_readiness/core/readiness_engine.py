"""ReadinessEngine — deterministic phase-readiness evaluation.

Design principles:
    1. Determinism: identical (memory, signal) pairs yield identical outputs.
    2. Inspectability: every decision is explained by reason flags.
    3. Fail-safe: undefined or untrusted input always yields BLOCK.
    4. Non-interference: the engine emits readiness, never actuates.

Evaluation pipeline (the first fail-safe return is final):

    1. input validation     valid flag, finite t / temperature
    2. bootstrap            first sample has no derivative context
    3. temporal validation  dt <= 0 rejected, dt > max gap is stale
    4. glitch guard         implausible single-step jump
    5. derivative           (temp - prev_temp) / dt
    6. smoothing            EWMA trend + persistence age
    7. commit memory
    8. constraints          range, gradient, persistence, indicators
    9. scoring              penalties -> readiness
   10. gate mapping         readiness -> BLOCK / CAUTION / ALLOW
   11. safety override      critical reasons force BLOCK, readiness 0

Memory is short and explicit: previous sample, smoothed trend, and how long
the trend's sign has persisted.  Nothing is learned.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass

from phase_readiness.core.scoring import (
    GateThresholds,
    PenaltyWeights,
    clamp01,
    gate_from_readiness,
    score_readiness,
)
from phase_readiness.domain.flags import CRITICAL_FLAGS, ReasonFlag
from phase_readiness.domain.gate import Gate
from phase_readiness.domain.readiness import ReadinessOutput
from phase_readiness.domain.signal import SignalSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadinessConfig:
    """Auditable policy parameters, set per deployment.

    All values are policy decisions, not learned behaviour.
    """

    # Valid operating temperature band
    temp_min: float = -20.0
    temp_max: float = 60.0

    # |dT/dt| limit, per second
    max_abs_derivative: float = 0.25

    # Largest plausible temperature change between two samples
    max_temp_jump: float = 5.0

    # Trend smoothing and how long a trend must persist to matter
    ewma_alpha: float = 0.2
    persistence_s: float = 3.0

    # Optional indicators
    hysteresis_block_threshold: float = 0.85
    coherence_allow_threshold: float = 0.35

    # Sample gap beyond which data is stale
    max_sample_gap_s: float = 1.0

    def __post_init__(self) -> None:
        for name, value in asdict(self).items():
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite")
        if self.temp_min > self.temp_max:
            raise ValueError("temp_min must not exceed temp_max")
        if self.max_sample_gap_s <= 0.0:
            raise ValueError("max_sample_gap_s must be positive")
        if self.max_abs_derivative <= 0.0:
            raise ValueError("max_abs_derivative must be positive")
        if self.max_temp_jump <= 0.0:
            raise ValueError("max_temp_jump must be positive")
        if self.persistence_s < 0.0:
            raise ValueError("persistence_s must not be negative")

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class EngineMemory:
    """Read-only view of the engine's cross-call state."""

    has_previous: bool = False
    previous_t: float = 0.0
    previous_temperature: float = math.nan
    trend: float = 0.0
    persistence_age: float = 0.0


class ReadinessEngine:
    """Safety-critical, deterministic eligibility gate.

    Stateful only for short-term history.  Not safe for concurrent use:
    ``evaluate`` and ``reset`` must be called from one thread of control.
    """

    def __init__(
        self,
        config: ReadinessConfig | None = None,
        penalties: PenaltyWeights | None = None,
        thresholds: GateThresholds | None = None,
    ) -> None:
        self._config = config or ReadinessConfig()
        self._penalties = penalties or PenaltyWeights()
        self._thresholds = thresholds or GateThresholds()
        self._memory = EngineMemory()

    @property
    def config(self) -> ReadinessConfig:
        return self._config

    @property
    def memory(self) -> EngineMemory:
        return self._memory

    # ── Public API ───────────────────────────────────────────────────────

    def reset(self) -> None:
        """Return to the initial fail-safe state (startup, sensor recovery)."""
        self._memory = EngineMemory()

    def evaluate(self, signal: SignalSnapshot) -> ReadinessOutput:
        """Evaluate readiness for a single telemetry snapshot.

        Never raises: untrusted input is answered with a fail-safe output.
        """
        cfg = self._config
        mem = self._memory

        # Step 1: required inputs
        if not signal.valid or not _finite(signal.t) or not _finite(signal.temperature):
            return self._fail_safe(ReasonFlag.INPUT_INVALID)

        # Step 2: bootstrap
        if not mem.has_previous:
            self._memory = EngineMemory(
                has_previous=True,
                previous_t=signal.t,
                previous_temperature=signal.temperature,
            )
            return self._fail_safe(ReasonFlag.STALE_OR_NONMONOTONIC)

        # Step 3: temporal validation
        dt = signal.t - mem.previous_t
        if dt <= 0.0:
            return self._fail_safe(ReasonFlag.STALE_OR_NONMONOTONIC)
        if dt > cfg.max_sample_gap_s:
            # reference sample advances; trend and age are kept
            self._memory = EngineMemory(
                has_previous=True,
                previous_t=signal.t,
                previous_temperature=signal.temperature,
                trend=mem.trend,
                persistence_age=mem.persistence_age,
            )
            return self._fail_safe(ReasonFlag.STALE_OR_NONMONOTONIC)

        out_of_range = signal.temperature < cfg.temp_min or signal.temperature > cfg.temp_max
        range_flag = ReasonFlag.TEMP_OUT_OF_RANGE if out_of_range else ReasonFlag.NONE

        # Step 4: glitch guard (only for the larger sample intervals)
        delta = signal.temperature - mem.previous_temperature
        if dt >= cfg.max_sample_gap_s * 0.5 and abs(delta) > cfg.max_temp_jump:
            return self._fail_safe(ReasonFlag.INPUT_INVALID | range_flag)

        # Step 5: instantaneous derivative
        derivative = delta / dt

        # Step 6: bounded EWMA trend and persistence age
        alpha = clamp01(cfg.ewma_alpha)
        trend = alpha * derivative + (1.0 - alpha) * mem.trend
        if not (_finite(derivative) and _finite(trend)):
            # overflow: rejected like a glitch, memory keeps the last good sample
            return self._fail_safe(ReasonFlag.INPUT_INVALID | range_flag)
        same_sign = (trend >= 0.0) == (derivative >= 0.0)
        # a trend sign flip discards age carried over from the old direction
        flipped = mem.persistence_age > 0.0 and (
            (trend > 0.0 > mem.trend) or (trend < 0.0 < mem.trend)
        )
        persistence_age = mem.persistence_age + dt if same_sign and not flipped else 0.0

        # Step 7: commit memory
        self._memory = EngineMemory(
            has_previous=True,
            previous_t=signal.t,
            previous_temperature=signal.temperature,
            trend=trend,
            persistence_age=persistence_age,
        )

        # Step 8: eligibility constraints
        flags = range_flag
        if abs(derivative) > cfg.max_abs_derivative:
            flags |= ReasonFlag.GRADIENT_TOO_HIGH
        if persistence_age >= cfg.persistence_s:
            if trend > 0.0:
                flags |= ReasonFlag.PERSISTENT_HEATING
            elif trend < 0.0:
                flags |= ReasonFlag.PERSISTENT_COOLING
        if _finite(signal.hysteresis_index) and signal.hysteresis_index >= cfg.hysteresis_block_threshold:
            flags |= ReasonFlag.HYSTERESIS_HIGH
        if _finite(signal.coherence_index) and signal.coherence_index < cfg.coherence_allow_threshold:
            flags |= ReasonFlag.COHERENCE_LOW

        # Steps 9–10: score, then map
        readiness = score_readiness(flags, self._penalties)
        gate = gate_from_readiness(readiness, self._thresholds)

        # Step 11: safety override
        if flags & CRITICAL_FLAGS:
            readiness = 0.0
            gate = Gate.BLOCK

        return ReadinessOutput(
            readiness=readiness,
            gate=gate,
            flags=int(flags),
            derivative=derivative,
            trend=trend,
            stability_score=readiness,
        )

    # ── Helpers ──────────────────────────────────────────────────────────

    @staticmethod
    def _fail_safe(reason: ReasonFlag) -> ReadinessOutput:
        flags = reason | ReasonFlag.FAILSAFE_DEFAULT
        logger.debug("Fail-safe output: %s", flags)
        return ReadinessOutput(
            readiness=0.0,
            gate=Gate.BLOCK,
            flags=int(flags),
            derivative=0.0,
            trend=0.0,
            stability_score=0.0,
        )


def _finite(x: float) -> bool:
    return math.isfinite(x)
